"""
Post-Processing Module for the Judgment Extraction System.

This module provides functionality for:
    - Amount and date normalization
    - Field shape and business-rule validation
    - Confidence aggregation

Author: ML Engineering Team
"""

from .normalizers import DateNormalizer, AmountNormalizer
from .validators import FieldValidator, ValidationFlag, ValidationResult, Validator
from .confidence import ConfidenceAggregator, ConfidenceMetrics

__all__ = [
    'DateNormalizer',
    'AmountNormalizer',
    'FieldValidator',
    'ValidationFlag',
    'ValidationResult',
    'Validator',
    'ConfidenceAggregator',
    'ConfidenceMetrics'
]
