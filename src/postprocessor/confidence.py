"""
Confidence Aggregation Module.

Combines the per-stage confidence signals of a processing run into one
overall score. Each signal has a weight; the overall score is the
weighted mean of the signals that are present, renormalised to their
weights. Absent signals count in neither the numerator nor the
denominator.

Author: ML Engineering Team
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from config import get_config
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


DEFAULT_WEIGHTS = {
    'extraction': 0.30,
    'ocr': 0.20,
    'entity_recognition': 0.20,
    'template_matching': 0.15,
    'data_validation': 0.15,
}


@dataclass
class ConfidenceMetrics:
    """
    Per-stage confidence signals, each in [0, 1] or None when absent.

    A signal of 0.0 is present; only None is absent.
    """
    extraction: Optional[float] = None
    ocr: Optional[float] = None
    entity_recognition: Optional[float] = None
    template_matching: Optional[float] = None
    data_validation: Optional[float] = None
    overall: float = 0.0

    def signals(self) -> Dict[str, float]:
        """Present signals by name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != 'overall' and getattr(self, f.name) is not None
        }

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfidenceAggregator:
    """
    Weighted mean over present confidence signals.

    Example:
        >>> aggregator = ConfidenceAggregator()
        >>> aggregator.aggregate(ConfidenceMetrics(extraction=0.8)).overall
        0.8
        >>> aggregator.aggregate(ConfidenceMetrics()).overall
        0.0
    """

    def __init__(self, weights: Optional[Dict[str, float]] = None) -> None:
        self.weights = dict(DEFAULT_WEIGHTS)
        self.weights.update(weights or get_config("confidence.weights", {}) or {})
        logger.debug(f"ConfidenceAggregator initialized with weights {self.weights}")

    def overall(self, metrics: ConfidenceMetrics) -> float:
        """
        Compute the overall score of a set of signals.

        Returns:
            The lone signal unchanged when only one is present, otherwise
            the weighted mean. 0.0 with no signals.
        """
        signals = metrics.signals()
        if len(signals) == 1:
            return next(iter(signals.values()))

        weighted_sum = 0.0
        total_weight = 0.0
        for name, value in signals.items():
            weight = self.weights.get(name, 0.0)
            weighted_sum += weight * value
            total_weight += weight

        if total_weight <= 0:
            return 0.0
        return weighted_sum / total_weight

    def aggregate(self, metrics: ConfidenceMetrics) -> ConfidenceMetrics:
        """Set and return metrics with the overall score filled in."""
        metrics.overall = self.overall(metrics)
        return metrics
