"""Tests for amount and date normalization."""

import pytest

from src.postprocessor.normalizers import AmountNormalizer, DateNormalizer


@pytest.fixture
def amounts() -> AmountNormalizer:
    return AmountNormalizer()


@pytest.mark.parametrize("raw, expected", [
    ("$36,000", 36000.0),
    ("S$ 3,183.33", 3183.33),
    ("SGD 1,200", 1200.0),
    ("RM500", 500.0),
    ("  750.50  ", 750.5),
    ("$0", 0.0),
    ("1,234,567.89", 1234567.89),
    ("$400.", 400.0),
])
def test_to_float_parses_currency_fragments(amounts, raw, expected) -> None:
    assert amounts.to_float(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "nil", "$", "12,34", "1.2.3", "abc123", "inf", "nan"])
def test_to_float_returns_none_for_unparseable_input(amounts, raw) -> None:
    assert amounts.to_float(raw) is None


def test_normalize_formats_two_decimals(amounts) -> None:
    assert amounts.normalize("$36,000") == "36000.00"
    assert amounts.normalize("nothing") is None


def test_to_int_rejects_fractional_counts(amounts) -> None:
    assert amounts.to_int("1,095") == 1095
    assert amounts.to_int("180") == 180
    assert amounts.to_int("2.5") is None


def test_is_valid_amount(amounts) -> None:
    assert amounts.is_valid_amount("$1,000")
    assert not amounts.is_valid_amount("one thousand")


@pytest.mark.parametrize("raw, expected", [
    ("12 March 2024", "2024-03-12"),
    ("1st January 2020", "2020-01-01"),
    ("03/04/2021", "2021-04-03"),
    ("2022-11-30", "2022-11-30"),
])
def test_date_normalizer_is_day_first(raw, expected) -> None:
    assert DateNormalizer().normalize(raw) == expected


def test_date_normalizer_rejects_garbage() -> None:
    normalizer = DateNormalizer()
    assert normalizer.normalize("not a date at all") is None
    assert normalizer.normalize(None) is None
    assert not normalizer.is_valid_date("31 February 2023")
