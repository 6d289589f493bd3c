"""
Data Normalizers Module.

This module provides normalization functions for:
    - Currency/amount values found in judgment text
    - Date strings

Author: ML Engineering Team
"""

import math
import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from config import get_config
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class AmountNormalizer:
    """
    Parses free-form monetary and numeric substrings into canonical values.

    Tolerates a leading currency symbol or code, comma-grouped thousands,
    optional cents and surrounding whitespace. Unparseable input yields
    None rather than an exception, and NaN/Infinity are never returned.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_float("S$ 3,183.33")
        3183.33
        >>> normalizer.normalize("$36,000")
        "36000.00"
        >>> normalizer.to_float("nil") is None
        True
    """

    # Longest first so "S$" is removed before "$"
    CURRENCY_SYMBOLS = ['S$', 'RM', '$', '€', '£']
    CURRENCY_CODES = ['SGD', 'MYR', 'USD']

    _NUMBER = re.compile(r'^\d+(?:\.\d+)?$')
    _GROUPED_NUMBER = re.compile(r'^\d{1,3}(?:,\d{3})+(?:\.\d+)?$')

    def __init__(self) -> None:
        self.currencies = get_config(
            "postprocessing.amount.currencies",
            self.CURRENCY_SYMBOLS + self.CURRENCY_CODES
        )
        logger.debug("AmountNormalizer initialized")

    def normalize(self, amount_str: str) -> Optional[str]:
        """
        Normalize an amount string to a two-decimal canonical string.

        Args:
            amount_str: Input amount string (e.g., "$1,234.56").

        Returns:
            Normalized amount string (e.g., "1234.56") or None.
        """
        value = self.to_float(amount_str)
        if value is None:
            return None
        return f"{value:.2f}"

    def to_float(self, amount_str: Optional[str]) -> Optional[float]:
        """
        Convert an amount string to float.

        Args:
            amount_str: Amount string to convert.

        Returns:
            Float value, or None when no parseable number is present.
        """
        if not amount_str:
            return None

        cleaned = self._clean_amount_string(amount_str)
        if not cleaned:
            return None

        if not (self._NUMBER.match(cleaned) or self._GROUPED_NUMBER.match(cleaned)):
            logger.debug(f"Could not parse amount: {amount_str!r}")
            return None

        value = float(cleaned.replace(',', ''))
        if not math.isfinite(value):
            return None
        return value

    def to_int(self, number_str: Optional[str]) -> Optional[int]:
        """
        Convert a count such as "180" or "1,095" to int.

        Returns:
            Integer value, or None for non-integral or unparseable input.
        """
        value = self.to_float(number_str)
        if value is None or not value.is_integer():
            return None
        return int(value)

    def _clean_amount_string(self, amount_str: str) -> str:
        """
        Strip currency markers, whitespace and sentence punctuation.

        Args:
            amount_str: Raw amount string.

        Returns:
            Cleaned amount string.
        """
        amount_str = ''.join(amount_str.split())

        for symbol in self.currencies:
            if symbol.isalpha():
                amount_str = re.sub(rf'(?i){symbol}', '', amount_str)
            else:
                amount_str = amount_str.replace(symbol, '')

        # A trailing full stop or comma belongs to the sentence, not the number
        return amount_str.rstrip('.,')

    def is_valid_amount(self, amount_str: str) -> bool:
        """Check if a string represents a valid non-negative amount."""
        return self.to_float(amount_str) is not None


class DateNormalizer:
    """
    Normalizes date strings to ISO format (YYYY-MM-DD).

    Judgments are dated day-first ("12 March 2024"), so day-first parsing
    is the default.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize("12 March 2024")
        "2024-03-12"
    """

    def __init__(self) -> None:
        self.output_format = get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )
        self.input_formats = get_config(
            "postprocessing.date.input_formats",
            ["%d %B %Y", "%d %b %Y", "%d/%m/%Y", "%Y-%m-%d"]
        )
        logger.debug(f"DateNormalizer initialized (output: {self.output_format})")

    def normalize(self, date_str: Optional[str]) -> Optional[str]:
        """
        Normalize a date string to the configured output format.

        Returns:
            Normalized date string, or None if parsing fails.
        """
        if not date_str:
            return None

        date_str = ' '.join(date_str.split())
        date_str = re.sub(r'(\d+)(st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)

        parsed = self._try_explicit_formats(date_str)
        if parsed is None:
            parsed = self._try_dateutil_parser(date_str)

        if parsed is None:
            logger.debug(f"Could not parse date: {date_str}")
            return None
        return parsed.strftime(self.output_format)

    def _try_explicit_formats(self, date_str: str) -> Optional[datetime]:
        for fmt in self.input_formats:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue
        return None

    def _try_dateutil_parser(self, date_str: str) -> Optional[datetime]:
        try:
            return date_parser.parse(date_str, dayfirst=True)
        except (ValueError, OverflowError):
            return None

    def is_valid_date(self, date_str: str) -> bool:
        """Check if a string represents a valid date."""
        return self.normalize(date_str) is not None
