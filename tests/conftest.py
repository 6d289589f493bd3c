"""Shared test fixtures for judgment extraction tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.pipeline import DocumentProcessor  # noqa: E402
from src.utils.exceptions import DocumentNotFoundError  # noqa: E402


SAMPLE_JUDGMENT = """\
SYARIAH COURT OF SINGAPORE
[2023] SGSYC 12
Case No: SYC1234/2023

Between Ahmad bin Ismail (S1234567A) and Siti bte Hassan (S7654321B)

JUDGMENT
Date: 12 March 2024

1. The duration of the marriage was 5 years and 6 months.
2. The Husband earns $2,500 per month as a technician.
3. The Court orders the Husband to pay nafkah iddah of $400 per month.
4. The Court further orders mutaah of $3 per day.

It is hereby ordered accordingly. Given under my hand.
"""

LUMP_SUM_JUDGMENT = """\
In the Syariah Court.
The Court orders nafkah iddah of $0.
The Court also orders mutaah of $36,000.
"""


class FakeAcquired:
    """Minimal stand-in for AcquiredText."""

    def __init__(self, text, page_count=1, file_type='pdf', ocr_used=False, ocr_confidence=None):
        self.text = text
        self.page_count = page_count
        self.file_type = file_type
        self.ocr_used = ocr_used
        self.ocr_confidence = ocr_confidence


class FakeAcquirer:
    """Records acquire() calls and returns a fixed result."""

    def __init__(self, acquired=None, error=None):
        self.acquired = acquired
        self.error = error
        self.calls = []

    def acquire(self, filepath, enable_ocr=True):
        self.calls.append((str(filepath), enable_ocr))
        if self.error is not None:
            raise self.error
        return self.acquired


@pytest.fixture
def sample_judgment() -> str:
    return SAMPLE_JUDGMENT


@pytest.fixture
def lump_sum_judgment() -> str:
    return LUMP_SUM_JUDGMENT


@pytest.fixture
def processor() -> DocumentProcessor:
    return DocumentProcessor(parallel=False)


@pytest.fixture
def ocr_acquirer() -> FakeAcquirer:
    return FakeAcquirer(FakeAcquired(
        SAMPLE_JUDGMENT, page_count=3, file_type='pdf', ocr_used=True, ocr_confidence=0.8
    ))


@pytest.fixture
def failing_acquirer() -> FakeAcquirer:
    return FakeAcquirer(error=DocumentNotFoundError("missing.pdf"))
