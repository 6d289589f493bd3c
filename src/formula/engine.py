"""
Statutory Formula Engine.

This module implements the two statutory award formulas used to compute
expected nafkah iddah and mutaah amounts from the husband's monthly
salary, and to check extracted awards for deviation.

Formulas:
    Nafkah Iddah (per month):
        amount = 0.14 x salary + 47      (rounded to nearest 100)
        lower  = 0.14 x salary - 3       (rounded to nearest 100, min 0)
        upper  = 0.14 x salary + 197     (rounded to nearest 100)

    Mutaah (per day):
        amount = 0.00096 x salary + 0.85 (rounded to nearest integer)
        lower  = 0.00096 x salary - 0.15 (rounded to nearest integer, min 0)
        upper  = 0.00096 x salary + 1.85 (rounded to nearest integer)

Business Rules (applied in order):
    1. salary = 0: all amounts and ranges are 0
    2. salary > 4,000: not computed, out of scope, manual legal review
    3. negative primary amount: clamped to 0
    4. negative lower range: clamped to 0 (upper range is never clamped)

All arithmetic is done in Decimal with half-up rounding, so the same
salary always yields the same result whichever caller asks.

Author: ML Engineering Team
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple, Union

from src.utils.exceptions import FormulaInputError
from src.utils.helpers import round_half_up
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class AwardType(str, Enum):
    """Which award(s) a standalone calculation should produce."""

    NAFKAH_IDDAH = "nafkah_iddah"
    MUTAAH = "mutaah"
    BOTH = "both"


@dataclass(frozen=True)
class StatutoryFormula:
    """Coefficients and rounding rule of one linear award formula."""

    name: str
    unit: str
    multiplier: Decimal
    constant: Decimal
    lower_offset: Decimal
    upper_offset: Decimal
    rounding_places: int

    @property
    def rounding_label(self) -> str:
        if self.rounding_places == 0:
            return "nearest integer"
        return f"nearest {10 ** -self.rounding_places}"

    def linear(self, salary: Decimal, offset: Decimal) -> Decimal:
        return self.multiplier * salary + offset

    def round(self, value: Decimal) -> int:
        return int(round_half_up(value, self.rounding_places))


@dataclass(frozen=True)
class FormulaResult:
    """
    Outcome of one award formula for one salary.

    Attributes:
        award: Award type ("nafkah_iddah" or "mutaah")
        amount: Rounded, clamped primary amount
        lower_range: Rounded lower bound (never negative)
        upper_range: Rounded upper bound
        out_of_scope: Salary above the statutory threshold
        reasoning: Ordered arithmetic steps for reviewers
    """
    award: str
    amount: int
    lower_range: int
    upper_range: int
    out_of_scope: bool = False
    reasoning: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'award': self.award,
            'amount': self.amount,
            'lower_range': self.lower_range,
            'upper_range': self.upper_range,
            'out_of_scope': self.out_of_scope,
            'reasoning': list(self.reasoning),
        }


@dataclass(frozen=True)
class FormulaCalculation:
    """
    Result of a standalone formula call.

    Attributes:
        salary: Monthly salary the formulas were applied to
        nafkah_iddah: Nafkah iddah result, if requested
        mutaah: Mutaah result, if requested
        reasoning: Overall reasoning trail (rule decisions, then each
                   requested award's arithmetic steps)
    """
    salary: float
    nafkah_iddah: Optional[FormulaResult] = None
    mutaah: Optional[FormulaResult] = None
    reasoning: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def out_of_scope(self) -> bool:
        return any(r.out_of_scope for r in (self.nafkah_iddah, self.mutaah) if r)

    @property
    def requires_legal_review(self) -> bool:
        """Out-of-scope cases go to manual legal review."""
        return self.out_of_scope

    def to_dict(self) -> Dict[str, Any]:
        return {
            'salary': self.salary,
            'nafkah_iddah': self.nafkah_iddah.to_dict() if self.nafkah_iddah else None,
            'mutaah': self.mutaah.to_dict() if self.mutaah else None,
            'out_of_scope': self.out_of_scope,
            'requires_legal_review': self.requires_legal_review,
            'reasoning': list(self.reasoning),
        }


def _money(value: Decimal, places: int = 2) -> str:
    return f"${value:,.{places}f}"


class FormulaEngine:
    """
    Stateless calculator for the statutory nafkah iddah and mutaah formulas.

    The same instance serves both the standalone reviewer-facing call
    (calculate) and the validator's deviation check (expected_nafkah_iddah);
    both go through the same coefficient and clamping code.

    Example:
        >>> engine = FormulaEngine()
        >>> result = engine.calculate(1000, "nafkah_iddah")
        >>> result.nafkah_iddah.amount, result.nafkah_iddah.lower_range
        (200, 100)
    """

    SALARY_THRESHOLD = Decimal("4000")

    NAFKAH_IDDAH = StatutoryFormula(
        name="Nafkah Iddah",
        unit="per month",
        multiplier=Decimal("0.14"),
        constant=Decimal("47"),
        lower_offset=Decimal("-3"),
        upper_offset=Decimal("197"),
        rounding_places=-2,
    )

    MUTAAH = StatutoryFormula(
        name="Mutaah",
        unit="per day",
        multiplier=Decimal("0.00096"),
        constant=Decimal("0.85"),
        lower_offset=Decimal("-0.15"),
        upper_offset=Decimal("1.85"),
        rounding_places=0,
    )

    def calculate(
        self,
        salary: Union[int, float, Decimal],
        award: Union[str, AwardType] = AwardType.BOTH
    ) -> FormulaCalculation:
        """
        Compute the requested award(s) for a monthly salary.

        Args:
            salary: Husband's monthly salary.
            award: "nafkah_iddah", "mutaah" or "both".

        Returns:
            FormulaCalculation with per-award results and reasoning trail.

        Raises:
            FormulaInputError: If salary is negative, not finite or not a
                               number, or award is not recognised.
        """
        award_type = self._parse_award(award)
        salary_value = self.validate_salary(salary)
        reasoning: List[str] = []

        if salary_value == 0:
            reasoning.append("Zero salary: all amounts and ranges are $0")
        elif salary_value > self.SALARY_THRESHOLD:
            reasoning.append(
                f"Salary {_money(salary_value)} exceeds the "
                f"{_money(self.SALARY_THRESHOLD, 0)} threshold: out of scope, "
                f"refer to manual legal review"
            )
        else:
            reasoning.append(
                f"Salary {_money(salary_value)} is within the "
                f"{_money(self.SALARY_THRESHOLD, 0)} threshold: applying statutory formulas"
            )

        nafkah = None
        mutaah = None
        if award_type in (AwardType.NAFKAH_IDDAH, AwardType.BOTH):
            nafkah = self._apply(self.NAFKAH_IDDAH, AwardType.NAFKAH_IDDAH, salary_value)
            reasoning.extend(nafkah.reasoning)
        if award_type in (AwardType.MUTAAH, AwardType.BOTH):
            mutaah = self._apply(self.MUTAAH, AwardType.MUTAAH, salary_value)
            reasoning.extend(mutaah.reasoning)

        logger.debug(
            f"Formula calculation for salary {salary_value}: "
            f"nafkah={nafkah.amount if nafkah else None}, "
            f"mutaah={mutaah.amount if mutaah else None}"
        )

        return FormulaCalculation(
            salary=float(salary_value),
            nafkah_iddah=nafkah,
            mutaah=mutaah,
            reasoning=tuple(reasoning),
        )

    def calculate_nafkah_iddah(self, salary: Union[int, float, Decimal]) -> FormulaResult:
        """Compute the nafkah iddah result alone."""
        return self._apply(self.NAFKAH_IDDAH, AwardType.NAFKAH_IDDAH, self.validate_salary(salary))

    def calculate_mutaah(self, salary: Union[int, float, Decimal]) -> FormulaResult:
        """Compute the mutaah result alone."""
        return self._apply(self.MUTAAH, AwardType.MUTAAH, self.validate_salary(salary))

    def expected_nafkah_iddah(self, salary: Union[int, float, Decimal]) -> float:
        """
        Unrounded nafkah iddah primary amount used for deviation checks.

        This is the primary formula with the negative-output clamp and
        without the rounding to hundreds, e.g. 5000 -> 747.0.
        """
        salary_value = self.validate_salary(salary)
        return float(self._clamp(self.NAFKAH_IDDAH.linear(salary_value, self.NAFKAH_IDDAH.constant)))

    def _apply(self, formula: StatutoryFormula, award: AwardType, salary: Decimal) -> FormulaResult:
        """Apply the business rules and one formula to a validated salary."""
        if salary == 0:
            return FormulaResult(
                award=award.value,
                amount=0,
                lower_range=0,
                upper_range=0,
                reasoning=(f"Zero salary: {formula.name} amount = $0",),
            )

        if salary > self.SALARY_THRESHOLD:
            return FormulaResult(
                award=award.value,
                amount=0,
                lower_range=0,
                upper_range=0,
                out_of_scope=True,
                reasoning=(
                    f"Salary {_money(salary)} > {_money(self.SALARY_THRESHOLD, 0)}: "
                    f"{formula.name} not calculated, refer to manual legal review",
                ),
            )

        reasoning = []
        raw_amount = formula.linear(salary, formula.constant)
        amount = formula.round(raw_amount)
        reasoning.append(
            f"{formula.name} {formula.unit}: ({formula.multiplier} x {_money(salary)}) "
            f"+ {formula.constant} = {_money(raw_amount, 3)}, rounded to "
            f"{formula.rounding_label} = ${amount}"
        )
        if amount < 0:
            amount = 0
            reasoning.append(f"{formula.name}: negative amount set to $0")

        raw_lower = formula.linear(salary, formula.lower_offset)
        lower = formula.round(raw_lower)
        reasoning.append(
            f"{formula.name} lower range: ({formula.multiplier} x {_money(salary)}) "
            f"{self._signed(formula.lower_offset)} = {_money(raw_lower, 3)}, rounded to "
            f"{formula.rounding_label} = ${lower}"
        )
        if lower < 0:
            lower = 0
            reasoning.append(f"{formula.name} lower range: negative bound set to $0")

        raw_upper = formula.linear(salary, formula.upper_offset)
        upper = formula.round(raw_upper)
        reasoning.append(
            f"{formula.name} upper range: ({formula.multiplier} x {_money(salary)}) "
            f"{self._signed(formula.upper_offset)} = {_money(raw_upper, 3)}, rounded to "
            f"{formula.rounding_label} = ${upper}"
        )

        return FormulaResult(
            award=award.value,
            amount=amount,
            lower_range=lower,
            upper_range=upper,
            reasoning=tuple(reasoning),
        )

    @staticmethod
    def _clamp(value: Decimal) -> Decimal:
        return value if value > 0 else Decimal(0)

    @staticmethod
    def _signed(offset: Decimal) -> str:
        return f"- {-offset}" if offset < 0 else f"+ {offset}"

    @staticmethod
    def _parse_award(award: Union[str, AwardType]) -> AwardType:
        try:
            return AwardType(award)
        except ValueError:
            raise FormulaInputError(
                "award must be nafkah_iddah, mutaah or both",
                award=award
            )

    @staticmethod
    def validate_salary(salary: Any) -> Decimal:
        """
        Check a salary and convert it to Decimal.

        Raises:
            FormulaInputError: For booleans, non-numbers, NaN, infinities
                               and negative values.
        """
        if isinstance(salary, bool) or not isinstance(salary, (Real, Decimal)):
            raise FormulaInputError("salary must be a number", salary=salary)
        if isinstance(salary, float) and not math.isfinite(salary):
            raise FormulaInputError("salary must be finite", salary=salary)

        value = salary if isinstance(salary, Decimal) else Decimal(str(salary))
        if not value.is_finite():
            raise FormulaInputError("salary must be finite", salary=str(salary))
        if value < 0:
            raise FormulaInputError("Salary cannot be negative", salary=salary)
        return value

    def formula_specs(self) -> Dict[str, Any]:
        """
        Describe both formulas and the business rules for reviewers.

        Returns:
            Dictionary with formula strings, rounding rules and threshold.
        """
        specs: Dict[str, Any] = {}
        for key, formula in (('nafkah_iddah', self.NAFKAH_IDDAH), ('mutaah', self.MUTAAH)):
            specs[key] = {
                'primary_formula': f"{formula.multiplier} x salary + {formula.constant}",
                'lower_range_formula': f"{formula.multiplier} x salary {self._signed(formula.lower_offset)}",
                'upper_range_formula': f"{formula.multiplier} x salary {self._signed(formula.upper_offset)}",
                'rounding': f"Rounded to {formula.rounding_label}",
                'unit': formula.unit,
            }
        specs['business_rules'] = [
            'If salary = 0, amounts and ranges = 0',
            f'If salary > ${self.SALARY_THRESHOLD}, do not calculate; refer to manual legal review',
            'If formula output < 0, amount = 0',
            'If lower range < 0, set it to 0',
        ]
        specs['salary_threshold'] = float(self.SALARY_THRESHOLD)
        return specs
