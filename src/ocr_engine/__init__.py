"""
OCR Engine Module.

Tesseract OCR for scanned judgment pages.
"""

from .engine import OCREngine
from .ocr_result import OCRResult, OCRWord

__all__ = [
    'OCREngine',
    'OCRResult',
    'OCRWord'
]
