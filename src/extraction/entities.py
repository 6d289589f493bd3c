"""
Entity Recognizer Module.

Extracts party names, identity numbers and the order date from judgment
text, independently of the field extractor.

Author: ML Engineering Team
"""

import re
from typing import Any, Dict, Optional, Tuple

from config import get_config
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


MONTHS = (
    'January', 'February', 'March', 'April', 'May', 'June', 'July',
    'August', 'September', 'October', 'November', 'December'
)


class EntityRecognizer:
    """
    Pattern-based recognizer for parties, identity numbers and dates.

    The first identity number found is assigned to the husband and the
    second to the wife. Confidence is a fixed value however many
    entities are found.

    Example:
        >>> recognizer = EntityRecognizer()
        >>> entities, confidence = recognizer.recognize(
        ...     "Ahmad bin Ismail (S1234567A) v Siti bte Hassan (S7654321B)"
        ... )
        >>> entities['husband_name'], entities['wife_ic']
        ('Ahmad bin Ismail', 'S7654321B')
    """

    MALE_NAME = re.compile(r'[A-Z][a-z]+(?:\s+bin\s+[A-Z][a-z]+)+')
    FEMALE_NAME = re.compile(r'[A-Z][a-z]+(?:\s+bte\s+[A-Z][a-z]+)+')
    IDENTITY_NUMBER = re.compile(r'\b[ST]\d{7}[A-Z]\b')
    DATE = re.compile(r'\b(\d{1,2})\s+(' + '|'.join(MONTHS) + r')\s+(\d{4})\b')

    def __init__(self, confidence: Optional[float] = None) -> None:
        self.confidence = confidence if confidence is not None else get_config(
            "entities.confidence", 0.7
        )
        logger.debug("EntityRecognizer initialized")

    def recognize(self, text: str) -> Tuple[Dict[str, Any], float]:
        """
        Recognize entities in text.

        Args:
            text: Document text.

        Returns:
            Tuple of (field name -> value for entities found, confidence).
        """
        text = text or ''
        entities: Dict[str, Any] = {}

        male = self.MALE_NAME.search(text)
        if male:
            entities['husband_name'] = ' '.join(male.group(0).split())

        female = self.FEMALE_NAME.search(text)
        if female:
            entities['wife_name'] = ' '.join(female.group(0).split())

        identity_numbers = self.IDENTITY_NUMBER.findall(text)
        if identity_numbers:
            entities['husband_ic'] = identity_numbers[0]
        if len(identity_numbers) > 1:
            entities['wife_ic'] = identity_numbers[1]

        date = self.DATE.search(text)
        if date:
            entities['date_of_order'] = ' '.join(date.groups())

        logger.debug(f"Recognized entities: {sorted(entities)}")
        return entities, self.confidence
