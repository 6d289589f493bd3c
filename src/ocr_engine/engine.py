"""
OCR Engine Module.

Tesseract OCR for scanned judgments (pytesseract). Recognizes the text
of one or more page images and keeps the per-word confidences so the
pipeline can report an OCR confidence signal.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: ML Engineering Team
"""

import time
from typing import Any, Dict, List, Optional, Sequence

import pytesseract
from PIL import Image

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .ocr_result import OCRResult, OCRWord

# Initialize module logger
logger = get_logger(__name__)


class OCREngine:
    """
    Tesseract-backed OCR engine.

    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract configuration

    Example:
        >>> engine = OCREngine()
        >>> result = engine.extract_pages([page_image])
        >>> print(result.text)
    """

    def __init__(self, language: Optional[str] = None) -> None:
        """
        Initialize the OCR engine.

        Args:
            language: Tesseract language code. If None, uses config.
        """
        self.language = language or get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 3)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")
        self._version: Optional[str] = None

        logger.debug(
            f"OCREngine initialized (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem})"
        )

    def check_available(self) -> str:
        """
        Check that the Tesseract binary can be run.

        Returns:
            Tesseract version string.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        if self._version is None:
            try:
                self._version = str(pytesseract.get_tesseract_version())
            except pytesseract.TesseractNotFoundError as e:
                raise OCREngineNotAvailableError(
                    f"Tesseract OCR (not installed or not in PATH): {e}"
                )
            logger.info(f"Tesseract version: {self._version}")
        return self._version

    def _build_config(self) -> str:
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]
        if self.extra_config:
            config_parts.append(self.extra_config)
        return ' '.join(config_parts)

    def extract(self, image: Image.Image, page: int = 1) -> OCRResult:
        """
        Recognize one page image.

        Args:
            image: PIL Image to process.
            page: 1-based page number recorded on the words.

        Returns:
            OCRResult for the page.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
            OCRProcessingError: If Tesseract fails on the image.
        """
        self.check_available()
        start_time = time.time()

        if image.mode != 'RGB':
            image = image.convert('RGB')

        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=self._build_config(),
                output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, RuntimeError) as e:
            logger.error(f"OCR processing failed on page {page}: {e}")
            raise OCRProcessingError(f"page {page}", str(e))

        words = self._parse_tesseract_output(data, page)
        return OCRResult(
            text=self._words_to_text(data),
            words=words,
            page_count=1,
            processing_time=time.time() - start_time
        )

    def extract_pages(self, images: Sequence[Image.Image]) -> OCRResult:
        """
        Recognize several page images and join them into one result.

        Args:
            images: Page images in order.

        Returns:
            Combined OCRResult.
        """
        start_time = time.time()
        texts: List[str] = []
        words: List[OCRWord] = []

        for page, image in enumerate(images, 1):
            page_result = self.extract(image, page=page)
            texts.append(page_result.text)
            words.extend(page_result.words)

        result = OCRResult(
            text='\n\n'.join(t for t in texts if t),
            words=words,
            page_count=len(images),
            processing_time=time.time() - start_time
        )
        logger.info(
            f"OCR completed: {result.word_count} words on {result.page_count} page(s), "
            f"avg confidence: {result.average_confidence:.2f} "
            f"({result.processing_time:.2f}s)"
        )
        return result

    @staticmethod
    def _parse_tesseract_output(data: Dict[str, List[Any]], page: int) -> List[OCRWord]:
        """Keep recognized words; Tesseract reports -1 for non-word boxes."""
        words = []
        for i, text in enumerate(data.get('text', [])):
            text = (text or '').strip()
            confidence = float(data['conf'][i])
            if not text or confidence < 0:
                continue
            words.append(OCRWord(
                text=text,
                confidence=confidence,
                page=page,
                line_num=int(data['line_num'][i]) if 'line_num' in data else 0
            ))
        return words

    @staticmethod
    def _words_to_text(data: Dict[str, List[Any]]) -> str:
        """Rebuild line-broken text from image_to_data output."""
        lines: Dict[tuple, List[str]] = {}
        for i, text in enumerate(data.get('text', [])):
            text = (text or '').strip()
            if not text:
                continue
            key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
            lines.setdefault(key, []).append(text)
        return '\n'.join(' '.join(parts) for parts in lines.values())
