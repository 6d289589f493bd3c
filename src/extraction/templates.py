"""
Template Matcher Module.

Scores judgment text against a catalogue of named document templates.
Each template is a list of keyword phrases; its score is the fraction of
phrases present in the text (case-insensitive).

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import get_config
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentTemplate:
    """A named list of keyword phrases."""

    name: str
    keywords: Tuple[str, ...]

    def match_ratio(self, lowered_text: str) -> float:
        if not self.keywords:
            return 0.0
        found = sum(1 for keyword in self.keywords if keyword.lower() in lowered_text)
        return found / len(self.keywords)


DEFAULT_TEMPLATES = (
    DocumentTemplate('syariah_court_order', ('syariah court', 'order', 'nafkah', 'mutaah')),
    DocumentTemplate('consent_order', ('consent', 'agreed', 'parties agree')),
    DocumentTemplate('judgment', ('judgment', 'it is hereby ordered', 'given under my hand')),
    DocumentTemplate('application', ('application', 'applicant', 'respondent', 'prayers')),
)


class TemplateMatcher:
    """
    Picks the best-matching template for a document.

    The highest ratio wins; ties go to the template declared first.
    When no keyword of any template is found the result is
    ("unknown", 0.0).

    Example:
        >>> matcher = TemplateMatcher()
        >>> matcher.match("The parties agree to this consent order")
        ('consent_order', 0.6667)
    """

    UNKNOWN = "unknown"

    def __init__(self, templates: Optional[Sequence[Any]] = None) -> None:
        """
        Initialize the template matcher.

        Args:
            templates: DocumentTemplate objects or {name, keywords} dicts.
                       If None, loads the ``templates`` config list.
        """
        if templates is None:
            templates = get_config("templates", None) or DEFAULT_TEMPLATES
        self.templates: List[DocumentTemplate] = [self._coerce(t) for t in templates]
        logger.debug(f"TemplateMatcher initialized with {len(self.templates)} templates")

    @staticmethod
    def _coerce(template: Any) -> DocumentTemplate:
        if isinstance(template, DocumentTemplate):
            return template
        return DocumentTemplate(
            name=template['name'],
            keywords=tuple(template.get('keywords', ())),
        )

    def scores(self, text: str) -> Dict[str, float]:
        """Match ratio of every template, in catalogue order."""
        lowered = (text or '').lower()
        return {t.name: t.match_ratio(lowered) for t in self.templates}

    def match(self, text: str) -> Tuple[str, float]:
        """
        Find the best template for text.

        Args:
            text: Document text.

        Returns:
            Tuple of (template name, ratio rounded to 4 places).
        """
        best_name, best_ratio = self.UNKNOWN, 0.0
        for name, ratio in self.scores(text).items():
            # Strict comparison keeps the first-declared template on ties
            if ratio > best_ratio:
                best_name, best_ratio = name, ratio

        logger.debug(f"Template match: {best_name} ({best_ratio:.2f})")
        return best_name, round(best_ratio, 4)
