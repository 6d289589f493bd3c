"""
DOCX Processor Module.

Reads the text of Word judgments (python-docx): body paragraphs first,
then table cells row by row.

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Union
from zipfile import BadZipFile

import docx
from docx.opc.exceptions import PackageNotFoundError

from src.utils.logger import get_logger
from src.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class DocxProcessor:
    """Text extraction for .docx files."""

    def extract_text(self, filepath: Union[str, Path]) -> str:
        """
        Extract the text of a Word document.

        Raises:
            CorruptedFileError: If the file is not a readable .docx package.
        """
        filepath = Path(filepath)
        logger.info(f"Reading DOCX text: {filepath.name}")

        try:
            document = docx.Document(str(filepath))
        except (PackageNotFoundError, BadZipFile, KeyError) as e:
            raise CorruptedFileError(str(filepath), str(e))

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(' | '.join(cells))

        return '\n'.join(lines)
