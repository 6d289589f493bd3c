"""
Input Handler Module for the Judgment Extraction System.

This module provides the default text acquisition adapter:
    - Detecting file types
    - Reading embedded PDF and DOCX text
    - Rendering scanned PDFs and loading images for OCR

Supported formats:
    - PDF (digital and scanned)
    - DOCX, TXT
    - Images: JPG, JPEG, PNG, TIFF, BMP

Author: ML Engineering Team
"""

from .handler import AcquiredText, InputHandler
from .pdf_processor import PDFProcessor
from .image_processor import ImageProcessor
from .docx_processor import DocxProcessor

__all__ = ['AcquiredText', 'InputHandler', 'PDFProcessor', 'ImageProcessor', 'DocxProcessor']
