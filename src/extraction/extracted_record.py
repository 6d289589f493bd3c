"""
Extracted Record Data Class.

This module defines the canonical output of judgment extraction: the
case identifiers, parties, financial facts and classification found in
one document.

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class DocumentType(str, Enum):
    """Kinds of court document the classifier recognises."""

    JUDGMENT = "judgment"
    CONSENT_ORDER = "consent_order"
    APPLICATION = "application"
    AFFIDAVIT = "affidavit"
    UNKNOWN = "unknown"


# Fields counted towards the pattern-extraction confidence
CORE_FIELDS = (
    'husband_income',
    'nafkah_iddah_amount',
    'mutaah_amount',
    'case_number',
    'marriage_duration',
)

FINANCIAL_FIELDS = (
    'husband_income',
    'nafkah_iddah_amount',
    'mutaah_amount',
    'mutaah_lump_sum',
    'marriage_duration',
)

NUMERIC_FIELDS = FINANCIAL_FIELDS

TEXT_FIELDS = (
    'case_number',
    'court_type',
    'husband_name',
    'wife_name',
    'husband_ic',
    'wife_ic',
    'date_of_order',
)


@dataclass
class ExtractedRecord:
    """
    Structured facts extracted from one judgment document.

    A record is populated once per processing run: first by the pattern
    extractor, then by the entity recognizer. A field that already holds
    a value is never overwritten (see merge()). After validation begins
    the record is only read.

    Attributes:
        case_number: Case number or neutral citation
        court_type: Court that issued the document
        document_type: Classified document kind
        husband_name: Male party ("... bin ...")
        wife_name: Female party ("... bte ...")
        husband_ic: First identity number found
        wife_ic: Second identity number found
        date_of_order: First "D Month YYYY" date in the text
        husband_income: Husband's monthly income
        nafkah_iddah_amount: Monthly nafkah iddah award
        mutaah_amount: Daily mutaah rate
        mutaah_lump_sum: Mutaah as stated when awarded as a lump sum
        marriage_duration: Duration of marriage in months
        is_consent_order: Whether consent-order language was found
        field_sources: Source tag of each award and income field

    Example:
        >>> record = ExtractedRecord(husband_income=2500.0)
        >>> record.contains_financial_data
        True
    """
    # Identifiers
    case_number: Optional[str] = None
    court_type: Optional[str] = None
    document_type: DocumentType = DocumentType.UNKNOWN

    # Parties
    husband_name: Optional[str] = None
    wife_name: Optional[str] = None
    husband_ic: Optional[str] = None
    wife_ic: Optional[str] = None
    date_of_order: Optional[str] = None

    # Financial facts
    husband_income: Optional[float] = None
    nafkah_iddah_amount: Optional[float] = None
    mutaah_amount: Optional[float] = None
    mutaah_lump_sum: Optional[float] = None
    marriage_duration: Optional[int] = None

    # Classification
    is_consent_order: bool = False

    # Where each award and income value came from: order, claim or negated
    field_sources: Dict[str, str] = field(default_factory=dict)

    @property
    def contains_financial_data(self) -> bool:
        """True iff any financial fact is present."""
        return any(getattr(self, name) is not None for name in FINANCIAL_FIELDS)

    @property
    def document_type_value(self) -> Any:
        """Document type as a plain string (raw value if not a DocumentType)."""
        if isinstance(self.document_type, DocumentType):
            return self.document_type.value
        return self.document_type

    @property
    def extracted_fields(self) -> Dict[str, Any]:
        """Get only the optional fields that have values."""
        return {
            name: getattr(self, name)
            for name in TEXT_FIELDS + NUMERIC_FIELDS
            if getattr(self, name) is not None
        }

    @property
    def missing_fields(self) -> List[str]:
        """Get the optional fields that were not extracted."""
        return [
            name for name in TEXT_FIELDS + NUMERIC_FIELDS
            if getattr(self, name) is None
        ]

    def core_field_count(self) -> int:
        """Number of core fields that hold a value."""
        return sum(1 for name in CORE_FIELDS if getattr(self, name) is not None)

    def merge(self, values: Dict[str, Any]) -> List[str]:
        """
        Fill empty fields from another extractor's output.

        Fields that already hold a value keep it; the first writer wins.

        Args:
            values: Field name to value mapping.

        Returns:
            Names of the fields that were filled.
        """
        filled = []
        for name, value in values.items():
            if value is None or not hasattr(self, name):
                continue
            if getattr(self, name) is None:
                setattr(self, name, value)
                filled.append(name)
        return filled

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation, including derived flags.
        """
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['document_type'] = self.document_type_value
        data['contains_financial_data'] = self.contains_financial_data
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExtractedRecord':
        """
        Create an ExtractedRecord from a dictionary.

        Unknown keys and the derived contains_financial_data flag are
        ignored; values are taken as given so that shape problems surface
        in validation rather than here.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        document_type = kwargs.get('document_type')
        if isinstance(document_type, str):
            try:
                kwargs['document_type'] = DocumentType(document_type)
            except ValueError:
                pass
        return cls(**kwargs)

    def __repr__(self) -> str:
        return (
            f"ExtractedRecord("
            f"case={self.case_number}, "
            f"income={self.husband_income}, "
            f"nafkah={self.nafkah_iddah_amount}, "
            f"mutaah={self.mutaah_amount}, "
            f"type={self.document_type_value})"
        )
