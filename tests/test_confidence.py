"""Tests for confidence aggregation."""

import pytest

from src.postprocessor import ConfidenceAggregator, ConfidenceMetrics


@pytest.fixture
def aggregator() -> ConfidenceAggregator:
    return ConfidenceAggregator()


def test_single_signal_is_the_overall_score(aggregator) -> None:
    assert aggregator.overall(ConfidenceMetrics(extraction=0.8)) == 0.8
    assert aggregator.overall(ConfidenceMetrics(template_matching=0.25)) == 0.25


def test_single_signal_is_not_rounded(aggregator) -> None:
    assert aggregator.overall(ConfidenceMetrics(extraction=0.123456)) == 0.123456
    assert aggregator.overall(ConfidenceMetrics(data_validation=0.33333333)) == 0.33333333


def test_no_signals_gives_zero(aggregator) -> None:
    assert aggregator.aggregate(ConfidenceMetrics()).overall == 0.0


def test_zero_signal_counts_as_present(aggregator) -> None:
    metrics = ConfidenceMetrics(extraction=0.9, template_matching=0.0)

    # (0.30 x 0.9) / (0.30 + 0.15)
    assert aggregator.overall(metrics) == pytest.approx(0.6)
    assert 'template_matching' in metrics.signals()


def test_all_signals_weighted(aggregator) -> None:
    metrics = ConfidenceMetrics(
        extraction=0.95,
        ocr=0.8,
        entity_recognition=0.7,
        template_matching=1.0,
        data_validation=0.9,
    )

    assert aggregator.overall(metrics) == pytest.approx(0.87)


def test_missing_signals_renormalise(aggregator) -> None:
    metrics = ConfidenceMetrics(extraction=0.95, data_validation=0.9)
    assert aggregator.overall(metrics) == pytest.approx(0.9333, abs=1e-4)


def test_custom_weights() -> None:
    aggregator = ConfidenceAggregator({'extraction': 1.0, 'data_validation': 3.0})
    metrics = ConfidenceMetrics(extraction=0.4, data_validation=0.8)

    assert aggregator.overall(metrics) == pytest.approx(0.7)


def test_overall_excluded_from_signals() -> None:
    metrics = ConfidenceMetrics(extraction=0.5, overall=0.9)
    assert metrics.signals() == {'extraction': 0.5}
