"""
Pattern Extractor Module.

This module provides the PatternExtractor class that turns raw judgment
text into an ExtractedRecord using the ordered rules of the
PatternLibrary, and scores how much it found.

Approach:
    The text is whitespace-normalised once, then every field's rules are
    run in FIELD_ORDER. Fields extracted earlier are passed to later
    handlers as read-only context (the mutaah lump-sum divisor may
    depend on the marriage duration).

Confidence:
    min(cap, base + per_field x n - penalties), where n counts the core
    fields (income, nafkah iddah, mutaah, case number, duration) that were
    found. A value read from a claim sentence costs the claim penalty and
    a negated award the negation penalty, each at most once.

Author: ML Engineering Team
"""

import time
from typing import Any, Dict, Optional, Tuple

from config import get_config
from src.utils.logger import get_logger
from .extracted_record import CORE_FIELDS, ExtractedRecord
from .patterns import SOURCE_CLAIM, SOURCE_NEGATED, MutaahReading, PatternLibrary

# Initialize module logger
logger = get_logger(__name__)


class PatternExtractor:
    """
    Rule-based field extractor for judgment text.

    Stateless between calls: identical text always yields an identical
    record and confidence.

    Attributes:
        library: Ordered rule tables
        base_confidence: Confidence with no fields found
        per_field_confidence: Increment per core field found
        confidence_cap: Upper bound of the stage confidence

    Example:
        >>> extractor = PatternExtractor()
        >>> record, confidence = extractor.extract(
        ...     "The Syariah Court orders nafkah iddah of $500 per month."
        ... )
        >>> record.nafkah_iddah_amount, confidence
        (500.0, 0.68)
    """

    def __init__(
        self,
        library: Optional[PatternLibrary] = None,
        base_confidence: Optional[float] = None,
        per_field_confidence: Optional[float] = None,
        confidence_cap: Optional[float] = None
    ) -> None:
        """
        Initialize the pattern extractor.

        Args:
            library: Rule tables. If None, built from config.
            base_confidence: If None, uses config (0.6).
            per_field_confidence: If None, uses config (0.08).
            confidence_cap: If None, uses config (0.95).
        """
        self.library = library or PatternLibrary()
        self.base_confidence = self._pick(base_confidence, "extraction.confidence.base", 0.6)
        self.per_field_confidence = self._pick(
            per_field_confidence, "extraction.confidence.per_field", 0.08
        )
        self.confidence_cap = self._pick(confidence_cap, "extraction.confidence.cap", 0.95)
        self.claim_penalty = get_config("extraction.confidence.claim_penalty", 0.12)
        self.negated_penalty = get_config("extraction.confidence.negated_penalty", 0.05)

        logger.debug("PatternExtractor initialized")

    @staticmethod
    def _pick(value: Optional[float], key: str, default: float) -> float:
        return value if value is not None else get_config(key, default)

    def extract(self, text: str) -> Tuple[ExtractedRecord, float]:
        """
        Extract all pattern-based fields from text.

        Args:
            text: Raw document text.

        Returns:
            Tuple of (ExtractedRecord, extraction confidence).
        """
        start_time = time.time()
        normalised = self.normalise(text)

        values: Dict[str, Any] = {}
        sources: Dict[str, str] = {}
        for field_name in self.library.FIELD_ORDER:
            rule_name, value = self.library.match(field_name, normalised, dict(values))
            if value is None:
                continue

            if isinstance(value, MutaahReading):
                values['mutaah_amount'] = value.daily
                if value.lump_sum is not None:
                    values['mutaah_lump_sum'] = value.lump_sum
            else:
                values[field_name] = value
            source = self.library.source_for(field_name, rule_name)
            if source is not None:
                sources[field_name] = source
            logger.debug(f"{field_name}: rule '{rule_name}' -> {value!r}")

        record = ExtractedRecord(
            document_type=self.library.classify_document(normalised),
            is_consent_order=self.library.is_consent_order(normalised),
            field_sources=sources,
            **values
        )
        confidence = self.confidence_for(record)

        logger.info(
            f"Pattern extraction found {record.core_field_count()}/{len(CORE_FIELDS)} "
            f"core fields in {time.time() - start_time:.3f}s (confidence: {confidence:.2f})"
        )
        return record, confidence

    def confidence_for(self, record: ExtractedRecord) -> float:
        """Stage confidence from a record's core field count and field sources."""
        score = self.base_confidence + self.per_field_confidence * record.core_field_count()
        sources = set(record.field_sources.values())
        if SOURCE_CLAIM in sources:
            score -= self.claim_penalty
        if SOURCE_NEGATED in sources:
            score -= self.negated_penalty
        return round(max(0.0, min(self.confidence_cap, score)), 4)

    @staticmethod
    def normalise(text: str) -> str:
        """Collapse all whitespace runs to single spaces."""
        return ' '.join((text or '').split())
