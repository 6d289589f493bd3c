"""
Extraction Module.

This module turns judgment text into structured facts:
    - Ordered pattern rules per field (PatternLibrary)
    - Rule-based field extraction (PatternExtractor)
    - Template matching (TemplateMatcher)
    - Entity recognition (EntityRecognizer)
"""

from .extracted_record import DocumentType, ExtractedRecord
from .patterns import MutaahReading, PatternLibrary, PatternRule, first_match
from .extractor import PatternExtractor
from .templates import DocumentTemplate, TemplateMatcher
from .entities import EntityRecognizer

__all__ = [
    'DocumentType',
    'ExtractedRecord',
    'MutaahReading',
    'PatternLibrary',
    'PatternRule',
    'first_match',
    'PatternExtractor',
    'DocumentTemplate',
    'TemplateMatcher',
    'EntityRecognizer',
]
