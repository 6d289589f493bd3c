"""
Pattern Extraction Library.

This module holds the ordered text-pattern rules used to pull each
semantic field out of judgment text. Every field has a list of
PatternRule objects sorted by priority; the first rule whose pattern
matches and whose handler returns a value wins, and later rules for
that field are skipped.

Fields covered:
    - case_number
    - court_type
    - marriage_duration (months)
    - husband_income (monthly)
    - nafkah_iddah_amount (monthly)
    - mutaah_amount (daily) with mutaah_lump_sum
    - is_consent_order, document_type (keyword families)

A handler that cannot turn its match into a value returns None. That
counts as "no match" for the rule; nothing is raised.

Award and income amounts are only read from the sentence that names
them. Judgments usually recite a party's claim before the court's
order, so award rules run in tiers: matches in decision sentences
("I order", "the court orders") first, then neutral sentences, then
claim sentences ("has claimed", "seeks"). Each such rule carries a
source tag ('order', 'claim' or 'negated').

Author: ML Engineering Team
"""

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from config import get_config
from src.extraction.extracted_record import DocumentType
from src.postprocessor.normalizers import AmountNormalizer
from src.utils.helpers import round_half_up
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


# A handler receives the regex match and the fields extracted so far
Handler = Callable[[Match, Dict[str, Any]], Any]

# Number with optional comma-grouped thousands and optional decimals
NUMBER = r'(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)'
CURRENCY = r'(?:S\$|SGD|RM|\$)'
CURRENCY_AMOUNT = CURRENCY + r'\s?' + NUMBER
OPTIONAL_CURRENCY_AMOUNT = CURRENCY + r'?\s?' + NUMBER

PER_DAY = r'\s*(?:per|a)\s+day\b'
PER_MONTH = r'\s*(?:(?:per|a)\s+month\b|monthly\b)'
PER_YEAR = r'\s*(?:per\s+annum\b|(?:per|a)\s+year\b|annually\b)'

CONSENT_KEYWORDS = ('consent order', 'parties agree', 'by consent')

# Phrases marking a sentence as the court's decision
DECISION_PHRASES = (
    'i order', 'i have ordered', 'i award', 'i have awarded', 'i have accepted',
    'i allow', 'i have allowed', 'the court orders', 'the court hereby orders',
    'the court has ordered', 'the court further orders', 'the wife is entitled',
    'the husband is to pay', 'it is ordered', 'there is no order', 'no order is made',
)

# Phrases marking a sentence as a party's claim or proposal
CLAIM_PHRASES = (
    'has claimed', 'is claiming', 'takes the position', 'proposed', 'seeks',
    'asks for', 'asked for', 'invites the court',
)

# Where a field value came from
SOURCE_ORDER = 'order'
SOURCE_CLAIM = 'claim'
SOURCE_NEGATED = 'negated'

SENTENCE_END = re.compile(r'[.!?](?=\s|$)')

FLAGS = re.IGNORECASE | re.DOTALL


class MutaahReading(NamedTuple):
    """Daily mutaah rate plus the lump sum it was derived from, if any."""

    daily: float
    lump_sum: Optional[float] = None


@dataclass(frozen=True)
class PatternRule:
    """
    One (pattern, handler) pair for a field.

    Attributes:
        name: Short rule name used in debug logs
        pattern: Compiled regular expression
        handler: Converts a match into a field value or None
        priority: Lower runs first
        source: 'order', 'claim' or 'negated' for award and income rules
    """
    name: str
    pattern: Pattern
    handler: Handler
    priority: int
    source: Optional[str] = None

    def apply(self, text: str, context: Dict[str, Any]) -> Optional[Any]:
        """Return the first value a match of this rule parses to."""
        for match in self.pattern.finditer(text):
            value = self.handler(match, context)
            if value is not None:
                return value
        return None


def first_match(
    rules: List[PatternRule],
    text: str,
    context: Optional[Dict[str, Any]] = None
) -> Tuple[Optional[str], Optional[Any]]:
    """
    Run rules in priority order and stop at the first successful one.

    Args:
        rules: Rules for one field.
        text: Whitespace-normalised document text.
        context: Fields already extracted (read only).

    Returns:
        Tuple of (rule name, value), or (None, None) when nothing matched.
    """
    context = context or {}
    for rule in sorted(rules, key=lambda r: r.priority):
        value = rule.apply(text, context)
        if value is not None:
            return rule.name, value
    return None, None


def sentence_at(text: str, position: int) -> str:
    """Return the sentence of text that contains position."""
    start = 0
    for end in SENTENCE_END.finditer(text):
        if end.start() >= position:
            return text[start:end.end()].strip()
        start = end.end()
    return text[start:].strip()


def sentence_stance(sentence: str) -> Optional[str]:
    """
    Classify a sentence as a claim, a decision or neither.

    Claim language wins over decision language in the same sentence.

    Returns:
        SOURCE_CLAIM, SOURCE_ORDER or None.
    """
    lowered = sentence.lower()
    if any(phrase in lowered for phrase in CLAIM_PHRASES):
        return SOURCE_CLAIM
    if any(phrase in lowered for phrase in DECISION_PHRASES):
        return SOURCE_ORDER
    return None


def _window(size: int, exclude: str = '') -> str:
    """Up to `size` characters, not crossing a sentence or the excluded words."""
    # A full stop followed by a digit is a decimal point, not a sentence end
    char = r'(?:[^.]|\.(?=\d))'
    if exclude:
        return rf'(?:(?!{exclude}){char}){{0,{size}}}?'
    return rf'{char}{{0,{size}}}?'


class PatternLibrary:
    """
    Builds and holds the ordered rules for every extracted field.

    Windows, divisors and the lump-sum convention are read from the
    ``extraction`` section of the configuration unless given explicitly.

    Example:
        >>> library = PatternLibrary()
        >>> library.match('case_number', "Case No: SYC1234/2023")
        ('case_no', 'SYC1234/2023')
    """

    FIELD_ORDER = (
        'case_number',
        'court_type',
        'marriage_duration',
        'husband_income',
        'nafkah_iddah_amount',
        'mutaah_amount',
    )

    LUMP_SUM_MODES = ('fixed', 'marriage_duration')

    def __init__(
        self,
        nafkah_window: Optional[int] = None,
        income_window: Optional[int] = None,
        mutaah_window: Optional[int] = None,
        lump_sum_divisor_mode: Optional[str] = None,
        lump_sum_period_days: Optional[int] = None,
        days_per_month: Optional[int] = None
    ) -> None:
        self.nafkah_window = nafkah_window or get_config("extraction.nafkah.window", 120)
        self.income_window = income_window or get_config("extraction.income.window", 120)
        self.mutaah_window = mutaah_window or get_config("extraction.mutaah.window", 120)
        self.lump_sum_divisor_mode = lump_sum_divisor_mode or get_config(
            "extraction.mutaah.lump_sum_divisor_mode", "fixed"
        )
        self.lump_sum_period_days = lump_sum_period_days or get_config(
            "extraction.mutaah.lump_sum_period_days", 180
        )
        self.days_per_month = days_per_month or get_config(
            "extraction.mutaah.days_per_month", 30
        )

        if self.lump_sum_divisor_mode not in self.LUMP_SUM_MODES:
            logger.warning(
                f"Unknown lump sum divisor mode '{self.lump_sum_divisor_mode}', using 'fixed'"
            )
            self.lump_sum_divisor_mode = 'fixed'

        self.amounts = AmountNormalizer()
        self.rules: Dict[str, List[PatternRule]] = {
            'case_number': self._case_number_rules(),
            'court_type': self._court_type_rules(),
            'marriage_duration': self._duration_rules(),
            'husband_income': self._income_rules(),
            'nafkah_iddah_amount': self._nafkah_rules(),
            'mutaah_amount': self._mutaah_rules(),
        }
        self.document_type_rules: List[Tuple[DocumentType, Pattern]] = [
            (DocumentType.JUDGMENT, re.compile(
                r'\bjudgment\b|grounds\s+of\s+decision|ex\s+tempore', FLAGS)),
            (DocumentType.CONSENT_ORDER, re.compile(r'consent\s+order', FLAGS)),
            (DocumentType.APPLICATION, re.compile(r'\bapplication\b|\bsummons\b', FLAGS)),
            (DocumentType.AFFIDAVIT, re.compile(r'\baffidavit\b', FLAGS)),
        ]

        logger.debug(
            f"PatternLibrary initialized (lump sum mode: {self.lump_sum_divisor_mode}, "
            f"period: {self.lump_sum_period_days} days)"
        )

    def match(
        self,
        field_name: str,
        text: str,
        context: Optional[Dict[str, Any]] = None
    ) -> Tuple[Optional[str], Optional[Any]]:
        """Run the rules of one field. See first_match()."""
        return first_match(self.rules[field_name], text, context)

    def source_for(self, field_name: str, rule_name: Optional[str]) -> Optional[str]:
        """Source tag ('order', 'claim', 'negated') of a field's rule, if it has one."""
        for rule in self.rules.get(field_name, ()):
            if rule.name == rule_name:
                return rule.source
        return None

    def is_consent_order(self, text: str) -> bool:
        lowered = text.lower()
        return any(keyword in lowered for keyword in CONSENT_KEYWORDS)

    def classify_document(self, text: str) -> DocumentType:
        """Return the first document-type family found, in priority order."""
        for document_type, pattern in self.document_type_rules:
            if pattern.search(text):
                return document_type
        return DocumentType.UNKNOWN

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _amount(self, match: Match, context: Dict[str, Any]) -> Optional[float]:
        return self.amounts.to_float(match.group(1))

    def _monthly_from_annual(self, match: Match, context: Dict[str, Any]) -> Optional[float]:
        annual = self.amounts.to_float(match.group(1))
        if annual is None:
            return None
        return float(round_half_up(annual / 12, 2))

    def _zero(self, match: Match, context: Dict[str, Any]) -> float:
        return 0.0

    def _identifier(self, match: Match, context: Dict[str, Any]) -> Optional[str]:
        value = match.group(1).strip('/-')
        # "case number of the parties" is prose, not an identifier
        if not any(ch.isdigit() for ch in value):
            return None
        return value

    def _citation(self, match: Match, context: Dict[str, Any]) -> str:
        return ' '.join(match.group(0).split())

    def _duration_months(self, match: Match, context: Dict[str, Any]) -> Optional[int]:
        years = self.amounts.to_float(match.group(1))
        if years is None:
            return None
        months = self.amounts.to_float(match.group(2)) if match.group(2) else 0.0
        if months is None:
            return None
        return int(round_half_up(years * 12 + months))

    def _mutaah_per_day(self, match: Match, context: Dict[str, Any]) -> Optional[MutaahReading]:
        daily = self.amounts.to_float(match.group(1))
        return MutaahReading(daily) if daily is not None else None

    def _mutaah_per_month(self, match: Match, context: Dict[str, Any]) -> Optional[MutaahReading]:
        monthly = self.amounts.to_float(match.group(1))
        if monthly is None:
            return None
        return MutaahReading(float(round_half_up(monthly / self.days_per_month, 2)))

    def _mutaah_lump_sum(self, match: Match, context: Dict[str, Any]) -> Optional[MutaahReading]:
        lump_sum = self.amounts.to_float(match.group(1))
        if lump_sum is None:
            return None
        divisor = self.lump_sum_divisor(context.get('marriage_duration'))
        return MutaahReading(float(round_half_up(lump_sum / divisor, 2)), lump_sum)

    def _mutaah_negated(self, match: Match, context: Dict[str, Any]) -> MutaahReading:
        return MutaahReading(0.0)

    def _court_type(self, name: str) -> Handler:
        return lambda match, context: name

    @staticmethod
    def _in_sentences(handler: Handler, stances: Tuple[Optional[str], ...]) -> Handler:
        """Wrap handler so it only accepts matches in sentences of the given stances."""
        def staged(match: Match, context: Dict[str, Any]) -> Any:
            if sentence_stance(sentence_at(match.string, match.start())) not in stances:
                return None
            return handler(match, context)
        return staged

    def _staged(
        self,
        name: str,
        pattern: Pattern,
        handler: Handler,
        priority: int,
        prefer_orders: bool = True
    ) -> List[PatternRule]:
        """
        Split one rule into tiers by sentence stance.

        Decision sentences are tried first (when prefer_orders), then
        neutral sentences, and claim sentences last. A value taken from a
        neutral sentence counts as ordered.
        """
        rules = []
        if prefer_orders:
            rules.append(PatternRule(
                f'{name}_ordered', pattern,
                self._in_sentences(handler, (SOURCE_ORDER,)), priority, SOURCE_ORDER
            ))
        rules.append(PatternRule(
            name, pattern,
            self._in_sentences(handler, (SOURCE_ORDER, None)), priority + 100, SOURCE_ORDER
        ))
        rules.append(PatternRule(
            f'{name}_claimed', pattern, handler, priority + 200, SOURCE_CLAIM
        ))
        return rules

    def lump_sum_divisor(self, marriage_duration: Optional[int] = None) -> int:
        """
        Number of days a mutaah lump sum is spread over.

        In 'marriage_duration' mode the duration in months times the
        days-per-month is used; without a positive duration the fixed
        period applies.
        """
        if self.lump_sum_divisor_mode == 'marriage_duration' and (marriage_duration or 0) > 0:
            return marriage_duration * self.days_per_month
        return self.lump_sum_period_days

    # ------------------------------------------------------------------
    # Rule tables
    # ------------------------------------------------------------------

    def _case_number_rules(self) -> List[PatternRule]:
        identifier = r'\s*[:#]?\s*([A-Za-z0-9][A-Za-z0-9/\-]*)'
        return [
            PatternRule(
                'case_no',
                re.compile(r'\bcase\s+(?:no\.?|number)' + identifier, FLAGS),
                self._identifier, 10
            ),
            PatternRule(
                'originating_summons_no',
                re.compile(r'\boriginating\s+summons\s+(?:no\.?|number)' + identifier, FLAGS),
                self._identifier, 20
            ),
            PatternRule(
                'citation',
                re.compile(r'\[\d{4}\]\s+SGSYC\s+\d+', FLAGS),
                self._citation, 30
            ),
        ]

    def _court_type_rules(self) -> List[PatternRule]:
        return [
            PatternRule(
                'appeal_board',
                re.compile(r'\bsyariah\s+appeal\s+board\b', FLAGS),
                self._court_type('Syariah Appeal Board'), 10
            ),
            PatternRule(
                'syariah_court',
                re.compile(r'\bsyariah\s+court\b', FLAGS),
                self._court_type('Syariah Court'), 20
            ),
        ]

    def _duration_rules(self) -> List[PatternRule]:
        return [
            PatternRule(
                'duration_of_marriage',
                re.compile(
                    r'duration\s+of\s+(?:the\s+)?marriage' + _window(120)
                    + r'(\d+(?:\.\d+)?)\s*years?\b'
                    + r'(?:\s*(?:,|and)?\s*(\d+)\s*months?\b)?',
                    FLAGS
                ),
                self._duration_months, 10
            ),
        ]

    def _income_rules(self) -> List[PatternRule]:
        window = _window(self.income_window, exclude=r'nafkah|mutaah|iddah')
        subject = r'(?:husband|plaintiff|income|salary)'
        rules = [
            ('monthly_statement',
             subject + window + OPTIONAL_CURRENCY_AMOUNT + PER_MONTH,
             self._amount, 10),
            ('monthly_income_label',
             r'monthly\s+(?:income|salary|earnings)' + _window(40) + CURRENCY_AMOUNT,
             self._amount, 15),
            ('annual_statement',
             subject + window + OPTIONAL_CURRENCY_AMOUNT + PER_YEAR,
             self._monthly_from_annual, 20),
            ('annual_income_label',
             r'annual\s+(?:income|salary|earnings)' + _window(40) + CURRENCY_AMOUNT,
             self._monthly_from_annual, 25),
            ('about_per_month',
             r'\babout\s+' + OPTIONAL_CURRENCY_AMOUNT + PER_MONTH,
             self._amount, 30),
            ('income_label',
             r'\bincome\s*:\s*' + OPTIONAL_CURRENCY_AMOUNT,
             self._amount, 40),
        ]
        staged = []
        for name, pattern, handler, priority in rules:
            staged.extend(self._staged(
                name, re.compile(pattern, FLAGS), handler, priority, prefer_orders=False
            ))
        return staged

    def _nafkah_rules(self) -> List[PatternRule]:
        near = r'nafkah\s+iddah' + _window(
            self.nafkah_window, exclude=r'mutaah|income|salary|earn'
        )
        return [
            PatternRule(
                'nafkah_negated',
                re.compile(
                    r'\bno\s+(?:order\s+(?:for|of|as\s+to)\s+)?nafkah\b'
                    r'|\bnafkah(?:\s+iddah)?[^.]{0,60}?'
                    r'(?:not\s+payable|not\s+awarded|is\s+nil\b)',
                    FLAGS
                ),
                self._zero, 5, SOURCE_NEGATED
            ),
        ] + self._staged(
            'nafkah_iddah_amount',
            re.compile(near + CURRENCY_AMOUNT, FLAGS),
            self._amount, 10
        )

    def _mutaah_rules(self) -> List[PatternRule]:
        near = r'mutaah' + _window(
            self.mutaah_window, exclude=r'nafkah|iddah|income|salary|earn'
        )
        return [
            PatternRule(
                'mutaah_negated',
                re.compile(
                    r'\bno\s+(?:order\s+(?:for|of|as\s+to)\s+)?mutaah\b'
                    r'|\bmutaah[^.]{0,60}?(?:not\s+payable|not\s+awarded|is\s+nil\b)',
                    FLAGS
                ),
                self._mutaah_negated, 5, SOURCE_NEGATED
            ),
        ] + self._staged(
            'mutaah_per_day',
            re.compile(near + OPTIONAL_CURRENCY_AMOUNT + PER_DAY, FLAGS),
            self._mutaah_per_day, 10
        ) + self._staged(
            'mutaah_per_month',
            re.compile(near + OPTIONAL_CURRENCY_AMOUNT + PER_MONTH, FLAGS),
            self._mutaah_per_month, 20
        ) + self._staged(
            'mutaah_lump_sum',
            re.compile(near + CURRENCY_AMOUNT, FLAGS),
            self._mutaah_lump_sum, 30
        )
