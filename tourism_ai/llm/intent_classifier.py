# llm/intent_classifier.py
"""
Intent Classifier for the chat engine
Decides whether a message asks for a multi-day travel plan or for a simple
list of recommendations.

Rules, first match wins:
1. Explicit day count ("3 días", "2 days")            -> travel_plan
2. Planning keyword ("itinerario", "recorrido", ...)  -> travel_plan
3. " y " plus an activity verb ("comer y visitar")    -> travel_plan
4. Anything else                                      -> simple
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from loguru import logger

from ..schemas.ai_schemas import Intent


DAY_COUNT_PATTERN: Pattern = re.compile(r"(\d+)\s*(d[ií]as?|days?)\b", re.IGNORECASE)

PLANNING_KEYWORDS: Tuple[str, ...] = (
    "plan", "planear", "itinerario", "ruta", "recorrido", "trip", "viaje",
    "conocer", "recorrer", "turistear", "explorar", "visitar encarnación",
)

ACTIVITY_VERBS: Tuple[str, ...] = ("comer", "ir", "visitar", "hacer")

COMPOUND_CONJUNCTION = " y "


@dataclass(frozen=True)
class ClassifierKeywords:
    """Keyword sets used by the rule chain"""
    planning_keywords: Tuple[str, ...] = PLANNING_KEYWORDS
    activity_verbs: Tuple[str, ...] = ACTIVITY_VERBS
    conjunction: str = COMPOUND_CONJUNCTION
    day_count_pattern: Pattern = DAY_COUNT_PATTERN


@dataclass(frozen=True)
class Classification:
    """Classifier output with the rule that fired"""
    intent: Intent
    rule: str
    day_count: Optional[int] = None


def extract_day_count(message: str, pattern: Pattern = DAY_COUNT_PATTERN) -> Optional[int]:
    """
    Extract an explicit day count ("3 días" -> 3)

    Returns:
        The number, or None when the message has no day count
    """
    match = pattern.search(message or "")
    if not match:
        return None
    return int(match.group(1))


class IntentClassifier:
    """
    Rule-based intent classification, first matching rule wins.
    """

    def __init__(self, keywords: ClassifierKeywords = ClassifierKeywords()):
        self.keywords = keywords

    def classify_with_reason(self, message: str) -> Classification:
        """
        Classify a message and report which rule decided

        Args:
            message: User's natural language message

        Returns:
            Classification(intent, rule, day_count)
        """
        message_lower = (message or "").lower()

        day_count = extract_day_count(message_lower, self.keywords.day_count_pattern)
        if day_count is not None:
            return Classification(Intent.TRAVEL_PLAN, "day_count", day_count)

        if any(keyword in message_lower for keyword in self.keywords.planning_keywords):
            return Classification(Intent.TRAVEL_PLAN, "planning_keyword")

        if self.keywords.conjunction in message_lower and any(
            verb in message_lower for verb in self.keywords.activity_verbs
        ):
            return Classification(Intent.TRAVEL_PLAN, "compound_activities")

        return Classification(Intent.SIMPLE, "default")

    def classify(self, message: str) -> Intent:
        """Classify a message as travel_plan or simple"""
        result = self.classify_with_reason(message)
        logger.info(f"Classified intent: {result.intent.value} (rule={result.rule}, days={result.day_count})")
        return result.intent


# ============================================
# Global Instance
# ============================================

intent_classifier = IntentClassifier()


# ============================================
# Convenience Function
# ============================================

def classify_intent(message: str) -> str:
    """Classify a message and return the intent value"""
    return intent_classifier.classify(message).value
