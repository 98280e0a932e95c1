# llm/language_detector.py
"""
Language Detector for chat messages
Scores a message against Spanish, Portuguese and English keyword sets and
picks the best match. Used to phrase responses, never to route them.

Ties resolve Spanish > Portuguese > English.
No keyword at all -> English.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from loguru import logger

from ..schemas.ai_schemas import Language


SPANISH_KEYWORDS: Tuple[str, ...] = (
    "donde", "dónde", "que", "qué", "como", "cómo", "cuando", "cuándo", "quiero", "busco",
    "necesito", "puedo", "restaurante", "hotel", "lugar", "comida", "comer", "visitar", "hacer",
    "ir", "ver", "conocer", "recomendar", "recomendación", "plan", "viaje", "turismo",
    "actividad", "lugares",
)

PORTUGUESE_KEYWORDS: Tuple[str, ...] = (
    "onde", "que", "como", "quando", "quero", "procuro", "preciso", "posso", "restaurante",
    "hotel", "lugar", "comida", "comer", "visitar", "fazer", "ir", "ver", "conhecer",
    "recomendar", "recomendação", "plano", "viagem", "turismo", "atividade", "lugares",
    "gostaria", "gosto",
)

ENGLISH_KEYWORDS: Tuple[str, ...] = (
    "where", "what", "how", "when", "want", "looking", "need", "can", "restaurant", "hotel",
    "place", "food", "eat", "visit", "do", "go", "see", "know", "recommend", "recommendation",
    "plan", "trip", "travel", "tourism", "activity", "places", "would", "like",
)


@dataclass(frozen=True)
class LanguageKeywords:
    """Keyword sets per language, in tie-break priority order"""
    sets: Tuple[Tuple[Language, Tuple[str, ...]], ...] = (
        (Language.SPANISH, SPANISH_KEYWORDS),
        (Language.PORTUGUESE, PORTUGUESE_KEYWORDS),
        (Language.ENGLISH, ENGLISH_KEYWORDS),
    )
    default: Language = Language.ENGLISH


@dataclass(frozen=True)
class LanguageConfig:
    """Phrasing used when answering in a language"""
    language_instruction: str
    recommendation_message: str
    plan_message_singular: str
    plan_message_plural: str
    apology: str


LANGUAGE_CONFIGS: Dict[Language, LanguageConfig] = {
    Language.SPANISH: LanguageConfig(
        language_instruction="Responde en español natural y amigable",
        recommendation_message="Aquí tienes algunas recomendaciones para tu visita a {city}.",
        plan_message_singular=(
            "He preparado un plan de 1 día para tu visita a {city}. Los lugares son "
            "recomendaciones generales que puedes ajustar según tus preferencias."
        ),
        plan_message_plural=(
            "He preparado un plan de {days} días para tu visita a {city}. Los lugares son "
            "recomendaciones generales que puedes ajustar según tus preferencias."
        ),
        apology="Lo siento, no pude procesar tu mensaje en este momento. Por favor, intenta de nuevo.",
    ),
    Language.ENGLISH: LanguageConfig(
        language_instruction="Always respond in natural and friendly English",
        recommendation_message="Here are some recommendations for your visit to {city}.",
        plan_message_singular=(
            "I've put together a 1-day plan for your visit to {city}. These are general "
            "suggestions you can adjust to your preferences."
        ),
        plan_message_plural=(
            "I've put together a {days}-day plan for your visit to {city}. These are general "
            "suggestions you can adjust to your preferences."
        ),
        apology="Sorry, I couldn't process your message right now. Please try again.",
    ),
    Language.PORTUGUESE: LanguageConfig(
        language_instruction="Sempre responda em português natural e amigável",
        recommendation_message="Aqui estão algumas recomendações para sua visita a {city}.",
        plan_message_singular=(
            "Preparei um plano de 1 dia para sua visita a {city}. Os lugares são "
            "recomendações gerais que você pode ajustar conforme suas preferências."
        ),
        plan_message_plural=(
            "Preparei um plano de {days} dias para sua visita a {city}. Os lugares são "
            "recomendações gerais que você pode ajustar conforme suas preferências."
        ),
        apology="Desculpe, não consegui processar sua mensagem agora. Por favor, tente novamente.",
    ),
}


def language_config(language) -> LanguageConfig:
    """Phrasing for a language code; unknown codes get English"""
    try:
        return LANGUAGE_CONFIGS[Language(language)]
    except ValueError:
        return LANGUAGE_CONFIGS[Language.ENGLISH]


class LanguageDetector:
    """
    Keyword-count language detection (substring matches on the lowercased message).
    """

    def __init__(self, keywords: LanguageKeywords = LanguageKeywords()):
        self.keywords = keywords

    def scores(self, message: str) -> Dict[Language, int]:
        """Number of matching keywords per language"""
        message_lower = (message or "").lower()
        return {
            language: sum(1 for keyword in words if keyword in message_lower)
            for language, words in self.keywords.sets
        }

    def detect(self, message: str) -> Language:
        """
        Detect the language of a message

        Args:
            message: Raw user message

        Returns:
            Language with the highest score; ties go to the earlier language
            in priority order; English when nothing matches
        """
        scores = self.scores(message)
        best_language, best_score = self.keywords.default, 0
        for language, _ in self.keywords.sets:
            if scores[language] > best_score:
                best_language, best_score = language, scores[language]

        logger.debug(f"Language scores: {scores} -> {best_language.value}")
        return best_language


# ============================================
# Global Instance
# ============================================

language_detector = LanguageDetector()


def detect_language(message: str) -> str:
    """Detect a message's language and return its code"""
    return language_detector.detect(message).value
