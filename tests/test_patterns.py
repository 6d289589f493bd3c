"""Tests for the pattern extraction library and the pattern extractor."""

import re

import pytest

from src.extraction import DocumentType, PatternExtractor, PatternLibrary, PatternRule, first_match
from src.extraction.patterns import sentence_at, sentence_stance


@pytest.fixture
def library() -> PatternLibrary:
    return PatternLibrary()


@pytest.fixture
def extractor(library) -> PatternExtractor:
    return PatternExtractor(library=library)


# ----------------------------------------------------------------------
# Rule ordering
# ----------------------------------------------------------------------

def test_first_successful_rule_wins_and_failed_handlers_fall_through() -> None:
    rules = [
        PatternRule('late', re.compile(r'(\d+)'), lambda m, c: int(m.group(1)), 20),
        PatternRule('never_parses', re.compile(r'value (\w+)'), lambda m, c: None, 5),
        PatternRule('early', re.compile(r'value (\w+)'), lambda m, c: m.group(1).upper(), 10),
    ]

    assert first_match(rules, "value abc 42") == ('early', 'ABC')


def test_no_rule_matching_returns_none_pair() -> None:
    rules = [PatternRule('digits', re.compile(r'\d+'), lambda m, c: m.group(0), 1)]

    assert first_match(rules, "no numbers here") == (None, None)


# ----------------------------------------------------------------------
# Case number and court
# ----------------------------------------------------------------------

def test_case_number_prefers_explicit_case_no(library) -> None:
    text = "[2023] SGSYC 12 Case No: SYC1234/2023"
    assert library.match('case_number', text) == ('case_no', 'SYC1234/2023')


def test_case_number_from_originating_summons(library) -> None:
    text = "Originating Summons No 45/2022 was filed by the wife"
    assert library.match('case_number', text)[1] == '45/2022'


def test_case_number_falls_back_to_citation(library) -> None:
    text = "Reported as [2021] SGSYC 7 on appeal"
    assert library.match('case_number', text) == ('citation', '[2021] SGSYC 7')


def test_case_number_prose_is_not_an_identifier(library) -> None:
    text = "The case number of this matter was not recorded"
    assert library.match('case_number', text) == (None, None)


def test_court_type_prefers_appeal_board(library) -> None:
    text = "Appeal from the Syariah Court to the Syariah Appeal Board"
    assert library.match('court_type', text)[1] == 'Syariah Appeal Board'


# ----------------------------------------------------------------------
# Financial fields
# ----------------------------------------------------------------------

def test_nafkah_iddah_within_window(library) -> None:
    text = "The Court orders that nafkah iddah be paid by the Husband at $450 per month"
    assert library.match('nafkah_iddah_amount', text)[1] == 450.0


def test_nafkah_iddah_outside_window_is_absent(library) -> None:
    text = "nafkah iddah " + "x" * 130 + " $450"
    assert library.match('nafkah_iddah_amount', text) == (None, None)


def test_nafkah_negation_yields_zero(library) -> None:
    text = "There shall be no order for nafkah iddah. The mutaah is $5,000."
    assert library.match('nafkah_iddah_amount', text) == ('nafkah_negated', 0.0)


def test_mutaah_per_day_qualifier(library) -> None:
    value = library.match('mutaah_amount', "mutaah of $3 per day")[1]
    assert value.daily == 3.0
    assert value.lump_sum is None


def test_mutaah_per_month_is_converted_to_daily(library) -> None:
    value = library.match('mutaah_amount', "mutaah of $90 per month")[1]
    assert value.daily == 3.0


def test_mutaah_lump_sum_uses_fixed_period(library) -> None:
    value = library.match('mutaah_amount', "The Court orders mutaah of $5,000.")[1]
    assert value.daily == 27.78
    assert value.lump_sum == 5000.0


def test_mutaah_lump_sum_by_marriage_duration() -> None:
    library = PatternLibrary(lump_sum_divisor_mode='marriage_duration')

    with_duration = library.match('mutaah_amount', "mutaah of $36,000", {'marriage_duration': 240})[1]
    without_duration = library.match('mutaah_amount', "mutaah of $36,000", {})[1]

    assert with_duration.daily == 5.0
    assert without_duration.daily == 200.0


def test_unknown_lump_sum_mode_falls_back_to_fixed() -> None:
    library = PatternLibrary(lump_sum_divisor_mode='weekly')
    assert library.lump_sum_divisor_mode == 'fixed'
    assert library.lump_sum_divisor(120) == 180


def test_mutaah_negation_yields_zero(library) -> None:
    value = library.match('mutaah_amount', "There is no order as to mutaah.")[1]
    assert value.daily == 0.0


@pytest.mark.parametrize("text, rule, expected", [
    ("The Husband earns $2,500 per month.", 'monthly_statement', 2500.0),
    ("The Husband's monthly income is S$3,183.33.", 'monthly_income_label', 3183.33),
    ("The Husband's annual income is $60,000 per annum.", 'annual_statement', 5000.0),
    ("He earns about $1,800 per month.", 'about_per_month', 1800.0),
    ("Income: $3,200", 'income_label', 3200.0),
])
def test_income_fallback_order(library, text, rule, expected) -> None:
    assert library.match('husband_income', text) == (rule, expected)


def test_annual_income_rounds_to_cents(library) -> None:
    text = "The Plaintiff's salary was $50,000 a year"
    assert library.match('husband_income', text)[1] == 4166.67


def test_income_window_skips_award_amounts(library) -> None:
    text = "The Husband shall pay nafkah iddah of $500 per month"
    assert library.match('husband_income', text) == (None, None)


@pytest.mark.parametrize("field_name, text", [
    ('mutaah_amount', "The Wife also asked for mutaah. The Husband earns $2,500 per month."),
    ('nafkah_iddah_amount',
     "The Wife also asked for nafkah iddah. The Husband earns $2,500 per month."),
    ('nafkah_iddah_amount', "The Wife seeks nafkah iddah as the Husband earns $2,500 per month"),
    ('mutaah_amount', "She asked for mutaah because his salary is $2,500"),
])
def test_award_window_does_not_reach_income(library, field_name, text) -> None:
    assert library.match(field_name, text) == (None, None)


def test_award_window_crosses_decimal_point(library) -> None:
    text = "The Court orders nafkah iddah at 1.5 times the usual sum, namely $250 per month."
    assert library.match('nafkah_iddah_amount', text)[1] == 250.0


# ----------------------------------------------------------------------
# Claims and orders
# ----------------------------------------------------------------------

@pytest.mark.parametrize("sentence, expected", [
    ("The Court orders the Husband to pay nafkah iddah of $400 per month.", 'order'),
    ("I have awarded mutaah of $3 per day.", 'order'),
    ("The Wife has claimed nafkah iddah of $3,000 per month.", 'claim'),
    ("Counsel invites the court to order mutaah of $10 per day.", 'claim'),
    ("The Husband earns $2,500 per month.", None),
])
def test_sentence_stance(sentence, expected) -> None:
    assert sentence_stance(sentence) == expected


def test_sentence_at_ignores_decimal_points() -> None:
    text = "First point. Mutaah of $1.50 per day is fair. Last point."
    assert sentence_at(text, text.index("Mutaah")) == "Mutaah of $1.50 per day is fair."


def test_order_preferred_over_earlier_claim(library) -> None:
    text = (
        "The Wife has claimed nafkah iddah of $3,000 per month. "
        "Having considered the Husband's means, I order nafkah iddah of $500 per month."
    )
    rule_name, value = library.match('nafkah_iddah_amount', text)

    assert value == 500.0
    assert library.source_for('nafkah_iddah_amount', rule_name) == 'order'


def test_mutaah_order_preferred_over_earlier_claim(library) -> None:
    text = "The Wife seeks mutaah of $10 per day. I award mutaah of $4 per day."
    rule_name, value = library.match('mutaah_amount', text)

    assert value.daily == 4.0
    assert library.source_for('mutaah_amount', rule_name) == 'order'


def test_claim_used_when_nothing_was_ordered(library) -> None:
    text = "The Wife has claimed nafkah iddah of $3,000 per month."
    rule_name, value = library.match('nafkah_iddah_amount', text)

    assert (rule_name, value) == ('nafkah_iddah_amount_claimed', 3000.0)
    assert library.source_for('nafkah_iddah_amount', rule_name) == 'claim'


def test_source_of_untagged_rule_is_none(library) -> None:
    assert library.source_for('case_number', 'case_no') is None
    assert library.source_for('nafkah_iddah_amount', None) is None


@pytest.mark.parametrize("text, expected", [
    ("The duration of the marriage was 5 years.", 60),
    ("Duration of marriage: 12 years and 6 months.", 150),
    ("The duration of the marriage was about 2.5 years", 30),
])
def test_marriage_duration_in_months(library, text, expected) -> None:
    assert library.match('marriage_duration', text)[1] == expected


def test_marriage_duration_not_inferred_from_dates(library) -> None:
    text = "The parties married on 1 January 2010 and divorced on 1 January 2020."
    assert library.match('marriage_duration', text) == (None, None)


# ----------------------------------------------------------------------
# Classification
# ----------------------------------------------------------------------

@pytest.mark.parametrize("text", [
    "This CONSENT ORDER is recorded",
    "The parties agree to the terms",
    "Made by consent of both parties",
])
def test_consent_keywords(library, text) -> None:
    assert library.is_consent_order(text)


def test_no_consent_keywords(library) -> None:
    assert not library.is_consent_order("The wife consented to nothing here")


@pytest.mark.parametrize("text, expected", [
    ("GROUNDS OF DECISION. A consent order was later entered.", DocumentType.JUDGMENT),
    ("This consent order is recorded.", DocumentType.CONSENT_ORDER),
    ("Originating summons filed by the wife.", DocumentType.APPLICATION),
    ("Affidavit of the Plaintiff.", DocumentType.AFFIDAVIT),
    ("A letter.", DocumentType.UNKNOWN),
])
def test_document_type_priority(library, text, expected) -> None:
    assert library.classify_document(text) == expected


# ----------------------------------------------------------------------
# Extractor
# ----------------------------------------------------------------------

def test_extracts_full_judgment(extractor, sample_judgment) -> None:
    record, confidence = extractor.extract(sample_judgment)

    assert record.case_number == 'SYC1234/2023'
    assert record.court_type == 'Syariah Court'
    assert record.document_type == DocumentType.JUDGMENT
    assert record.marriage_duration == 66
    assert record.husband_income == 2500.0
    assert record.nafkah_iddah_amount == 400.0
    assert record.mutaah_amount == 3.0
    assert record.mutaah_lump_sum is None
    assert record.is_consent_order is False
    assert record.contains_financial_data
    assert confidence == 0.95


def test_lump_sum_scenario(extractor, lump_sum_judgment) -> None:
    record, _ = extractor.extract(lump_sum_judgment)

    assert record.nafkah_iddah_amount == 0.0
    assert record.mutaah_lump_sum == 36000.0
    assert record.mutaah_amount == 200.0


def test_confidence_counts_core_fields(extractor) -> None:
    _, none_found = extractor.extract("Nothing of interest in this letter.")
    _, two_found = extractor.extract("Case No: SYC1/2020. nafkah iddah of $300.")

    assert none_found == 0.6
    assert two_found == 0.76


def test_sources_recorded_for_sample(extractor, sample_judgment) -> None:
    record, _ = extractor.extract(sample_judgment)

    assert record.field_sources == {
        'husband_income': 'order',
        'nafkah_iddah_amount': 'order',
        'mutaah_amount': 'order',
    }


def test_claimed_amount_lowers_confidence(extractor) -> None:
    record, confidence = extractor.extract("The Wife has claimed nafkah iddah of $3,000 per month.")

    assert record.nafkah_iddah_amount == 3000.0
    assert record.field_sources == {'nafkah_iddah_amount': 'claim'}
    # 0.6 + 0.08 - 0.12
    assert confidence == 0.56


def test_ordered_amount_after_claim_keeps_full_confidence(extractor) -> None:
    record, confidence = extractor.extract(
        "The Wife has claimed nafkah iddah of $3,000 per month. "
        "I order nafkah iddah of $500 per month."
    )

    assert record.nafkah_iddah_amount == 500.0
    assert record.field_sources == {'nafkah_iddah_amount': 'order'}
    assert confidence == 0.68


def test_negated_award_lowers_confidence(extractor) -> None:
    record, confidence = extractor.extract("There is no order as to mutaah.")

    assert record.mutaah_amount == 0.0
    assert record.field_sources == {'mutaah_amount': 'negated'}
    # 0.6 + 0.08 - 0.05
    assert confidence == 0.63


def test_mention_without_amount_leaves_field_absent(extractor) -> None:
    record, _ = extractor.extract("The wife claimed nafkah iddah and mutaah from the Husband.")
    assert record.nafkah_iddah_amount is None
    assert not record.contains_financial_data


def test_extraction_is_deterministic(extractor, sample_judgment) -> None:
    first_record, first_confidence = extractor.extract(sample_judgment)
    second_record, second_confidence = extractor.extract(sample_judgment)

    assert first_record.to_json() == second_record.to_json()
    assert first_confidence == second_confidence
