"""
Helper Utilities Module.

This module provides common utility functions used throughout the
judgment extraction system. Functions here should be generic and
reusable across different modules.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_document_id: Build a unique id for a processing run
    - round_half_up: Decimal rounding with half-up ties
"""

import uuid
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Example:
        >>> get_file_extension("judgment.PDF")
        ".pdf"
    """
    return Path(filepath).suffix.lower()


def generate_document_id() -> str:
    """
    Generate an identifier for one document-processing run.

    Example:
        >>> generate_document_id()
        "doc_20260121_143022_1f9c2a7b"
    """
    return f"doc_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def round_half_up(value: Union[int, float, Decimal], places: int = 0) -> Decimal:
    """
    Round a number to a fixed number of decimal places, ties away from zero.

    Floats are converted through their shortest repr so that 2.675 rounds
    to 2.68 rather than to the binary neighbour's 2.67.

    Args:
        value: Number to round.
        places: Decimal places to keep (negative rounds to tens, hundreds...).

    Returns:
        Rounded Decimal.

    Example:
        >>> round_half_up(2.675, 2)
        Decimal('2.68')
        >>> round_half_up(187, -2)
        Decimal('2E+2')
    """
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    if places >= 0:
        return decimal_value.quantize(quantum, rounding=ROUND_HALF_UP)
    return (decimal_value / quantum).quantize(Decimal(1), rounding=ROUND_HALF_UP) * quantum
