"""
Data Validators Module.

This module provides validation of merged extraction records:
    - Field shape (schema) checks
    - Business rules: high income, formula deviation, consent orders,
      statutory-formula scope
    - Required fields (strict mode)

Validation never changes the record. It produces ValidationFlags and a
validation confidence that starts at a base value and is only lowered.

Author: ML Engineering Team
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from src.extraction.extracted_record import (
    DocumentType,
    ExtractedRecord,
    NUMERIC_FIELDS,
    TEXT_FIELDS,
)
from src.formula.engine import FormulaEngine
from src.postprocessor.normalizers import DateNormalizer
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


FLAG_TYPES = ('error', 'warning', 'info')
SEVERITIES = ('low', 'medium', 'high')


@dataclass(frozen=True)
class ValidationFlag:
    """
    One actionable review note about a record.

    Attributes:
        type: "error", "warning" or "info"
        field: Field the flag concerns ("processing" for run failures)
        severity: "low", "medium" or "high"
        message: Human-readable explanation
        auto_fixable: Whether a correct value can be proposed
    """
    type: str
    field: str
    severity: str
    message: str
    auto_fixable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'field': self.field,
            'severity': self.severity,
            'message': self.message,
            'auto_fixable': self.auto_fixable,
        }


class FieldValidator:
    """
    Shape validation for record fields.

    Numeric facts must be finite, non-negative numbers (booleans are not
    numbers here); marriage duration must be a whole number of months;
    text fields must be non-empty strings; the order date must be a real
    calendar date.

    Example:
        >>> validator = FieldValidator()
        >>> validator.validate_field('husband_income', -5.0)
        (False, 'husband_income must not be negative')
    """

    INTEGER_FIELDS = ('marriage_duration',)
    DATE_FIELDS = ('date_of_order',)

    def __init__(self, date_normalizer: Optional[DateNormalizer] = None) -> None:
        self.date_normalizer = date_normalizer or DateNormalizer()

    def validate_number(self, field_name: str, value: Any) -> Tuple[bool, str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False, f"{field_name} must be a number, got {type(value).__name__}"
        if isinstance(value, float) and not math.isfinite(value):
            return False, f"{field_name} must be finite"
        if value < 0:
            return False, f"{field_name} must not be negative"
        if field_name in self.INTEGER_FIELDS and not isinstance(value, int):
            return False, f"{field_name} must be a whole number of months"
        return True, "Valid number"

    def validate_text(self, field_name: str, value: Any) -> Tuple[bool, str]:
        if not isinstance(value, str):
            return False, f"{field_name} must be text, got {type(value).__name__}"
        if not value.strip():
            return False, f"{field_name} is empty"
        if field_name in self.DATE_FIELDS and not self.date_normalizer.is_valid_date(value):
            return False, f"{field_name} is not a valid date: '{value}'"
        return True, "Valid text"

    def validate_field(self, field_name: str, value: Any) -> Tuple[bool, str]:
        """
        Validate one field value.

        Absent (None) optional fields are always valid.

        Args:
            field_name: Name of the record field.
            value: Field value.

        Returns:
            Tuple of (is_valid, message).
        """
        if field_name == 'document_type':
            if isinstance(value, DocumentType):
                return True, "Valid document type"
            return False, f"document_type must be one of {[t.value for t in DocumentType]}"

        if field_name == 'is_consent_order':
            if isinstance(value, bool):
                return True, "Valid flag"
            return False, "is_consent_order must be true or false"

        if value is None:
            return True, "Field absent"
        if field_name in NUMERIC_FIELDS:
            return self.validate_number(field_name, value)
        if field_name in TEXT_FIELDS:
            return self.validate_text(field_name, value)
        return True, "Field has value"

    def schema_errors(self, record: ExtractedRecord) -> List[Tuple[str, str]]:
        """Return (field, message) for every field with the wrong shape."""
        errors = []
        for field_name in ('document_type', 'is_consent_order') + TEXT_FIELDS + NUMERIC_FIELDS:
            valid, message = self.validate_field(field_name, getattr(record, field_name))
            if not valid:
                errors.append((field_name, message))
        return errors


@dataclass
class ValidationResult:
    """
    Flags and confidence from one validation pass.

    Attributes:
        flags: Flags in rule order
        confidence: Validation confidence in [floor, base]
    """
    flags: List[ValidationFlag]
    confidence: float

    @property
    def is_valid(self) -> bool:
        return not any(flag.type == 'error' for flag in self.flags)

    @property
    def errors(self) -> List[ValidationFlag]:
        return [flag for flag in self.flags if flag.type == 'error']

    @property
    def warnings(self) -> List[ValidationFlag]:
        return [flag for flag in self.flags if flag.type == 'warning']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'confidence': self.confidence,
            'flags': [flag.to_dict() for flag in self.flags],
        }


class Validator:
    """
    Applies business rules to a merged record.

    All rules run on every pass; none short-circuits another.

    Rules:
        - Schema violation: error flag per field, one confidence
          penalty per pass
        - Income above the high-income threshold: medium warning
        - Income above the statutory formula threshold: info flag for
          manual legal review
        - Nafkah iddah deviating from the formula expectation by more
          than the tolerance: high, auto-fixable warning, penalty
        - Consent order: low info flag
        - Strict mode: medium warning per missing required field

    Example:
        >>> validator = Validator()
        >>> result = validator.validate(
        ...     ExtractedRecord(husband_income=5000.0, nafkah_iddah_amount=2000.0)
        ... )
        >>> [f.severity for f in result.flags if f.field == 'nafkah_iddah_amount']
        ['high']
    """

    def __init__(
        self,
        formula_engine: Optional[FormulaEngine] = None,
        field_validator: Optional[FieldValidator] = None
    ) -> None:
        """
        Initialize the validator.

        Args:
            formula_engine: Engine used for the expected nafkah iddah.
            field_validator: Shape checker.
        """
        self.formula_engine = formula_engine or FormulaEngine()
        self.field_validator = field_validator or FieldValidator()

        self.base_confidence = get_config("validation.base_confidence", 0.9)
        self.confidence_floor = get_config("validation.confidence_floor", 0.0)
        self.schema_penalty = get_config("validation.schema_penalty", 0.2)
        self.deviation_penalty = get_config("validation.deviation_penalty", 0.1)
        self.deviation_tolerance = get_config("validation.deviation_tolerance", 50)
        self.high_income_threshold = get_config("validation.high_income_threshold", 10000)
        self.required_fields = get_config(
            "validation.required_fields",
            ["case_number", "husband_income", "nafkah_iddah_amount"]
        )

        logger.debug(f"Validator initialized (required: {self.required_fields})")

    def validate(self, record: ExtractedRecord, strict: bool = False) -> ValidationResult:
        """
        Validate a record.

        Args:
            record: Merged extraction record (not modified).
            strict: Also flag missing required fields.

        Returns:
            ValidationResult with flags and validation confidence.
        """
        flags: List[ValidationFlag] = []
        confidence = self.base_confidence

        schema_errors = self.field_validator.schema_errors(record)
        for field_name, message in schema_errors:
            flags.append(ValidationFlag('error', field_name, 'medium', message))
        if schema_errors:
            confidence -= self.schema_penalty

        invalid = {field_name for field_name, _ in schema_errors}
        income = None if 'husband_income' in invalid else record.husband_income
        nafkah = None if 'nafkah_iddah_amount' in invalid else record.nafkah_iddah_amount

        if income is not None and income > self.high_income_threshold:
            flags.append(ValidationFlag(
                'warning', 'husband_income', 'medium',
                f"Husband income ${income:,.2f} is unusually high, verify"
            ))

        if income is not None and income > self.formula_engine.SALARY_THRESHOLD:
            flags.append(ValidationFlag(
                'info', 'husband_income', 'medium',
                f"Income above ${self.formula_engine.SALARY_THRESHOLD:,} is out of scope "
                f"for the statutory formula, route to manual legal review"
            ))

        if income is not None and nafkah is not None:
            expected = self.formula_engine.expected_nafkah_iddah(income)
            if abs(nafkah - expected) > self.deviation_tolerance:
                flags.append(ValidationFlag(
                    'warning', 'nafkah_iddah_amount', 'high',
                    f"Nafkah iddah ${nafkah:,.2f} deviates from formula "
                    f"expectation ${expected:,.2f}",
                    auto_fixable=True
                ))
                confidence -= self.deviation_penalty

        if record.is_consent_order is True:
            flags.append(ValidationFlag(
                'info', 'is_consent_order', 'low',
                "Consent order detected, exclude from formula calibration datasets"
            ))

        if strict:
            for field_name in self.required_fields:
                if getattr(record, field_name, None) is None:
                    flags.append(ValidationFlag(
                        'warning', field_name, 'medium',
                        f"Required field {field_name} was not extracted"
                    ))

        confidence = round(max(self.confidence_floor, confidence), 4)
        logger.info(f"Validation produced {len(flags)} flag(s), confidence {confidence:.2f}")
        return ValidationResult(flags=flags, confidence=confidence)
