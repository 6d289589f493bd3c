"""Tests for the statutory formula engine."""

from decimal import Decimal

import pytest

from src.formula import AwardType, FormulaEngine
from src.utils.exceptions import FormulaInputError
from src.utils.helpers import round_half_up


@pytest.fixture
def engine() -> FormulaEngine:
    return FormulaEngine()


def test_nafkah_iddah_for_salary_1000(engine) -> None:
    result = engine.calculate(1000, "nafkah_iddah")

    assert result.mutaah is None
    assert (result.nafkah_iddah.amount,
            result.nafkah_iddah.lower_range,
            result.nafkah_iddah.upper_range) == (200, 100, 300)


def test_mutaah_for_salary_2000(engine) -> None:
    result = engine.calculate(2000, AwardType.MUTAAH)

    assert result.nafkah_iddah is None
    # 2.77 -> 3, 1.77 -> 2, 3.77 -> 4
    assert (result.mutaah.amount,
            result.mutaah.lower_range,
            result.mutaah.upper_range) == (3, 2, 4)


def test_both_awards_at_threshold(engine) -> None:
    result = engine.calculate(4000)

    assert not result.out_of_scope
    assert (result.nafkah_iddah.amount, result.nafkah_iddah.lower_range,
            result.nafkah_iddah.upper_range) == (600, 600, 800)
    assert (result.mutaah.amount, result.mutaah.lower_range,
            result.mutaah.upper_range) == (5, 4, 6)


def test_zero_salary_gives_zeros(engine) -> None:
    result = engine.calculate(0)

    for award in (result.nafkah_iddah, result.mutaah):
        assert (award.amount, award.lower_range, award.upper_range) == (0, 0, 0)
        assert not award.out_of_scope


def test_salary_above_threshold_is_out_of_scope(engine) -> None:
    result = engine.calculate(4000.01)

    assert result.out_of_scope
    assert result.requires_legal_review
    for award in (result.nafkah_iddah, result.mutaah):
        assert award.out_of_scope
        assert (award.amount, award.lower_range, award.upper_range) == (0, 0, 0)
    assert any("manual legal review" in step for step in result.reasoning)


def test_amounts_and_lower_ranges_never_negative(engine) -> None:
    for salary in range(0, 4001, 25):
        result = engine.calculate(salary)
        for award in (result.nafkah_iddah, result.mutaah):
            assert award.amount >= 0
            assert award.lower_range >= 0
            assert award.upper_range >= award.lower_range


def test_small_salary_lower_range_clamped(engine) -> None:
    result = engine.calculate_nafkah_iddah(10)

    assert result.amount == 0
    assert result.lower_range == 0
    assert result.upper_range == 200


def test_rounding_is_half_up(engine) -> None:
    # 0.14 x 1450 + 47 = 250 exactly
    assert engine.calculate_nafkah_iddah(1450).amount == 300
    # 0.00096 x 1718.75 + 0.85 = 2.5 exactly
    assert engine.calculate_mutaah(1718.75).amount == 3


def test_rounding_idempotence(engine) -> None:
    amount = engine.calculate_nafkah_iddah(2750).amount
    assert int(round_half_up(amount, -2)) == amount


def test_reasoning_trail_lists_each_step(engine) -> None:
    result = engine.calculate(1000, "nafkah_iddah")
    trail = result.reasoning

    assert trail[0].startswith("Salary $1,000.00 is within")
    assert "rounded to nearest 100 = $200" in trail[1]
    assert "lower range" in trail[2]
    assert "upper range" in trail[3]
    assert list(trail[1:]) == list(result.nafkah_iddah.reasoning)


def test_expected_nafkah_is_unrounded(engine) -> None:
    assert engine.expected_nafkah_iddah(5000) == 747.0
    assert engine.expected_nafkah_iddah(1000) == 187.0


def test_results_are_repeatable(engine) -> None:
    assert engine.calculate(3183.33).to_dict() == engine.calculate(3183.33).to_dict()


def test_decimal_salary_is_accepted(engine) -> None:
    assert engine.calculate_nafkah_iddah(Decimal("1000")).amount == 200


@pytest.mark.parametrize("salary", [-1, float('nan'), float('inf'), True, "1000", None, Decimal("NaN")])
def test_invalid_salary_raises(engine, salary) -> None:
    with pytest.raises(FormulaInputError):
        engine.calculate(salary)


def test_unknown_award_raises(engine) -> None:
    with pytest.raises(FormulaInputError) as exc:
        engine.calculate(1000, "alimony")

    assert exc.value.details == {'award': 'alimony'}


def test_formula_specs_describe_both_formulas(engine) -> None:
    specs = engine.formula_specs()

    assert specs['nafkah_iddah']['primary_formula'] == "0.14 x salary + 47"
    assert specs['mutaah']['lower_range_formula'] == "0.00096 x salary - 0.15"
    assert specs['salary_threshold'] == 4000.0
    assert len(specs['business_rules']) == 4
