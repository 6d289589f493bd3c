"""
OCR Result Data Classes.

This module defines the data structures for OCR output:
    - OCRWord: a recognized word with its Tesseract confidence
    - OCRResult: the words of one or more pages plus the plain text

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class OCRWord:
    """
    A single word recognized by OCR.

    Attributes:
        text: Recognized text
        confidence: Tesseract confidence (0-100)
        page: 1-based page number
        line_num: Line number within its block
    """
    text: str
    confidence: float
    page: int = 1
    line_num: int = 0


@dataclass
class OCRResult:
    """
    Complete OCR output for a document.

    Attributes:
        text: Recognized text, pages separated by blank lines
        words: Words with confidences
        page_count: Number of pages recognized
        engine: OCR engine name
        processing_time: Seconds spent in OCR

    Example:
        >>> result = engine.extract_pages(images)
        >>> result.average_confidence
        0.91
    """
    text: str
    words: List[OCRWord] = field(default_factory=list)
    page_count: int = 1
    engine: str = "tesseract"
    processing_time: float = 0.0

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def average_confidence(self) -> float:
        """Mean word confidence scaled to 0-1, or 0.0 with no words."""
        if not self.words:
            return 0.0
        mean = sum(w.confidence for w in self.words) / len(self.words)
        return round(mean / 100.0, 4)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text': self.text,
            'word_count': self.word_count,
            'page_count': self.page_count,
            'average_confidence': self.average_confidence,
            'engine': self.engine,
            'processing_time': self.processing_time,
        }
