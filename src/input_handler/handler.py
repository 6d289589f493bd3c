"""
Main Input Handler Module.

This module provides the InputHandler class, the default text
acquisition adapter of the judgment pipeline. It detects the file type
and delegates to the matching processor, falling back to OCR for
scanned PDFs and images.

Usage:
    from src.input_handler import InputHandler

    handler = InputHandler()
    acquired = handler.acquire("judgment.pdf", enable_ocr=True)
    print(acquired.text)

Classes:
    AcquiredText: Text obtained from one document
    InputHandler: File-type detection and text acquisition
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from config import get_config
from src.ocr_engine import OCREngine
from src.utils.helpers import get_file_extension
from src.utils.logger import get_logger
from src.utils.exceptions import (
    AcquisitionError,
    CorruptedFileError,
    DocumentNotFoundError,
    EmptyDocumentError,
    UnsupportedFileTypeError,
)

from .docx_processor import DocxProcessor
from .image_processor import ImageProcessor
from .pdf_processor import PDFProcessor


# Initialize module logger
logger = get_logger(__name__)


@dataclass
class AcquiredText:
    """
    Text acquired from one document.

    Attributes:
        text: Document text
        page_count: Number of pages (1 for single-page formats)
        file_type: 'pdf', 'docx', 'txt' or 'image'
        ocr_used: Whether the text came from OCR
        ocr_confidence: Mean OCR word confidence (0-1) when OCR was used
    """
    text: str
    page_count: int = 1
    file_type: str = 'txt'
    ocr_used: bool = False
    ocr_confidence: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"AcquiredText(type='{self.file_type}', "
            f"pages={self.page_count}, "
            f"chars={len(self.text)}, "
            f"ocr={self.ocr_used})"
        )


class InputHandler:
    """
    Default text acquisition adapter.

    Any object with a compatible ``acquire(path, enable_ocr)`` method can
    stand in for this class in the pipeline.

    Attributes:
        supported_extensions: Set of supported file extensions
        pdf_processor: PDFProcessor instance
        image_processor: ImageProcessor instance
        docx_processor: DocxProcessor instance
        ocr_engine: OCREngine, created on first OCR use

    Example:
        >>> handler = InputHandler()
        >>> acquired = handler.acquire("judgment.docx")
        >>> acquired.file_type
        'docx'
    """

    PDF_EXTENSIONS = {'.pdf'}
    DOCX_EXTENSIONS = {'.docx'}
    TEXT_EXTENSIONS = {'.txt'}
    IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.tif', '.bmp'}

    def __init__(self, ocr_engine: Optional[OCREngine] = None) -> None:
        """
        Initialize the InputHandler.

        Args:
            ocr_engine: OCR engine to use. If None, one is created when
                        OCR is first needed.
        """
        default_extensions = (
            self.PDF_EXTENSIONS | self.DOCX_EXTENSIONS
            | self.TEXT_EXTENSIONS | self.IMAGE_EXTENSIONS
        )
        self.supported_extensions = {
            ext.lower()
            for ext in get_config("input.supported_extensions", sorted(default_extensions))
        }

        self.pdf_processor = PDFProcessor()
        self.image_processor = ImageProcessor()
        self.docx_processor = DocxProcessor()
        self._ocr_engine = ocr_engine

        logger.info(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")

    @property
    def ocr_engine(self) -> OCREngine:
        if self._ocr_engine is None:
            self._ocr_engine = OCREngine()
        return self._ocr_engine

    def detect_file_type(self, filepath: Union[str, Path]) -> str:
        """
        Detect the type of input file.

        Returns:
            'pdf', 'docx', 'txt' or 'image'.

        Raises:
            UnsupportedFileTypeError: If file type is not supported.
        """
        extension = get_file_extension(filepath)

        if extension in self.supported_extensions:
            if extension in self.PDF_EXTENSIONS:
                return 'pdf'
            if extension in self.DOCX_EXTENSIONS:
                return 'docx'
            if extension in self.TEXT_EXTENSIONS:
                return 'txt'
            if extension in self.IMAGE_EXTENSIONS:
                return 'image'

        raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is supported and is not empty.

        Raises:
            DocumentNotFoundError: If the file doesn't exist.
            UnsupportedFileTypeError: If the file type is not supported.
            CorruptedFileError: If the file has no content.
        """
        path = Path(filepath)

        if not path.is_file():
            raise DocumentNotFoundError(str(filepath))

        self.detect_file_type(path)

        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        logger.debug(f"File validated: {filepath}")
        return path

    def acquire(self, filepath: Union[str, Path], enable_ocr: bool = True) -> AcquiredText:
        """
        Acquire the text of a judgment document.

        PDFs are read for embedded text first; a PDF with too little
        embedded text is rendered and OCR'd when OCR is enabled. Images
        always need OCR.

        Args:
            filepath: Path to the document.
            enable_ocr: Allow OCR for scanned PDFs and images.

        Returns:
            AcquiredText with the document text.

        Raises:
            AcquisitionError: If no text could be obtained.
        """
        path = self.validate_file(filepath)
        file_type = self.detect_file_type(path)
        logger.info(f"Acquiring text from {path.name} ({file_type})")

        if file_type == 'pdf':
            acquired = self._acquire_pdf(path, enable_ocr)
        elif file_type == 'docx':
            acquired = AcquiredText(self.docx_processor.extract_text(path), file_type='docx')
        elif file_type == 'txt':
            acquired = AcquiredText(self._read_text(path), file_type='txt')
        else:
            acquired = self._acquire_image(path, enable_ocr)

        if not acquired.text.strip():
            raise EmptyDocumentError(str(path), "No text could be extracted")

        logger.info(f"Acquired {len(acquired.text)} characters: {acquired!r}")
        return acquired

    def _acquire_pdf(self, path: Path, enable_ocr: bool) -> AcquiredText:
        text, page_count = self.pdf_processor.extract_text(path)
        if not self.pdf_processor.is_scanned(text):
            return AcquiredText(text, page_count=page_count, file_type='pdf')

        if not enable_ocr:
            logger.warning(f"{path.name} appears to be scanned and OCR is disabled")
            return AcquiredText(text, page_count=page_count, file_type='pdf')

        logger.info(f"{path.name} appears to be scanned, running OCR")
        result = self.ocr_engine.extract_pages(self.pdf_processor.to_images(path))
        return AcquiredText(
            result.text,
            page_count=page_count,
            file_type='pdf',
            ocr_used=True,
            ocr_confidence=result.average_confidence
        )

    def _acquire_image(self, path: Path, enable_ocr: bool) -> AcquiredText:
        if not enable_ocr:
            raise AcquisitionError(
                "Image documents need OCR, which is disabled",
                {'filepath': str(path)}
            )
        pages = self.image_processor.load(path)
        result = self.ocr_engine.extract_pages(pages)
        return AcquiredText(
            result.text,
            page_count=len(pages),
            file_type='image',
            ocr_used=True,
            ocr_confidence=result.average_confidence
        )

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise CorruptedFileError(str(path), f"Not UTF-8 text: {e}")
