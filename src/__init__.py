"""
Syariah Court Judgment Extraction System - Source Package.

This package contains all core modules for extracting financial facts
from Syariah Court judgments and checking them against the statutory
nafkah iddah and mutaah formulas.

Modules:
    - input_handler: PDF, DOCX, text and image text acquisition
    - ocr_engine: Tesseract OCR for scanned pages
    - extraction: Pattern rules, templates and entity recognition
    - formula: Statutory award formulas
    - postprocessor: Normalization, validation and confidence scoring
    - pipeline: Per-document orchestration

Architecture:
    Input -> (Templates | Patterns | Entities) -> Validation -> Confidence
                                                      ^
                                                  Formula
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'ocr_engine',
    'extraction',
    'formula',
    'postprocessor',
    'pipeline',
    'utils'
]
