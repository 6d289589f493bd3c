"""
PDF Processor Module.

This module handles PDF judgment files:
    - Digital PDF text extraction (pdfplumber)
    - Scanned PDF detection
    - Page rendering to images for OCR (pdf2image, Poppler-based)

Author: ML Engineering Team
"""

from pathlib import Path
from typing import List, Tuple, Union

import pdfplumber
from pdf2image import convert_from_path
from PIL import Image

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    Processor for PDF files.

    Reads embedded text page by page. A PDF whose embedded text is
    shorter than min_text_length is treated as scanned, and its pages
    can be rendered to images for OCR.

    Attributes:
        dpi: Resolution for PDF to image conversion
        max_pages: Maximum number of pages to process
        min_text_length: Embedded-text length below which a PDF is scanned

    Example:
        >>> processor = PDFProcessor()
        >>> text, page_count = processor.extract_text("judgment.pdf")
    """

    def __init__(self) -> None:
        """Initialize the PDF processor with configuration."""
        self.dpi = get_config("input.pdf.dpi", 300)
        self.max_pages = get_config("input.pdf.max_pages", 50)
        self.min_text_length = get_config("input.pdf.min_text_length", 20)

        logger.debug(f"PDFProcessor initialized (DPI={self.dpi}, max_pages={self.max_pages})")

    def extract_text(self, filepath: Union[str, Path]) -> Tuple[str, int]:
        """
        Extract embedded text from a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            Tuple of (text with pages separated by blank lines, page count).

        Raises:
            CorruptedFileError: If the PDF cannot be read.
        """
        filepath = Path(filepath)
        logger.info(f"Reading PDF text: {filepath.name}")

        try:
            with pdfplumber.open(filepath) as pdf:
                page_count = len(pdf.pages)
                if page_count > self.max_pages:
                    logger.warning(
                        f"PDF has {page_count} pages, limiting to {self.max_pages}"
                    )
                pages = [
                    page.extract_text() or ''
                    for page in pdf.pages[:self.max_pages]
                ]
        except Exception as e:
            logger.error(f"pdfplumber could not read {filepath.name}: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        text = '\n\n'.join(p.strip() for p in pages if p.strip())
        logger.debug(f"Extracted {len(text)} characters from {page_count} page(s)")
        return text, page_count

    def is_scanned(self, text: str) -> bool:
        """Whether extracted embedded text is too short to be a digital PDF."""
        return len(text.strip()) < self.min_text_length

    def to_images(self, filepath: Union[str, Path]) -> List[Image.Image]:
        """
        Render PDF pages to RGB images.

        Args:
            filepath: Path to PDF file.

        Returns:
            List of PIL Image objects.

        Raises:
            CorruptedFileError: If Poppler cannot render the PDF.
        """
        filepath = Path(filepath)
        logger.debug(f"Rendering {filepath.name} at {self.dpi} DPI")

        try:
            images = convert_from_path(
                filepath,
                dpi=self.dpi,
                first_page=1,
                last_page=self.max_pages,
                fmt='png'
            )
        except Exception as e:
            logger.error(f"pdf2image conversion failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        return [
            img.convert('RGB') if img.mode != 'RGB' else img
            for img in images
        ]
