# agents/chat_engine.py
"""
Chat Engine (chat-facing)
Turns one user message into a normalized ChatResponse:

1. validate the message
2. load candidate places from the inventory
3. detect language, classify intent
4. synthesize (generative backend or fallback)
5. normalize, resolving place references
6. record history when the caller is identified

Uses:
- LanguageDetector / IntentClassifier for routing
- ResponseSynthesizer for the raw answer
- ResponseNormalizer for the canonical shape
- PlaceLookup for candidates and references
- ConversationHistory for per-session history
"""

import uuid
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from ..config import settings
from ..schemas.ai_schemas import ChatMessage, ChatResponse, Intent
from ..algorithms.response_normalizer import ResponseNormalizer
from ..interfaces.place_store import PlaceLookup
from ..interfaces.conversation_store import ConversationHistory
from ..llm.generative_backend import GenerativeBackend
from ..llm.intent_classifier import IntentClassifier, intent_classifier
from ..llm.language_detector import LanguageDetector, language_detector
from .response_synthesizer import ResponseSynthesizer


class InvalidMessageError(ValueError):
    """Message is missing or blank"""


class ChatProcessingError(RuntimeError):
    """Unexpected failure while synthesizing or normalizing an answer"""

    def __init__(self, message: str, language: str = "en"):
        super().__init__(message)
        self.language = language


def new_session_id() -> str:
    return f"session-{uuid.uuid4().hex[:12]}"


def fill_identity(place: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of an inventory place with name and key both set when either is known"""
    filled = dict(place)
    if not filled.get("name") and filled.get("key"):
        filled["name"] = filled["key"]
    elif filled.get("name") and not filled.get("key"):
        filled["key"] = filled["name"]
    elif not filled.get("name") and not filled.get("key") and filled.get("title"):
        filled["name"] = filled["key"] = filled["title"]
    return filled


class ChatEngine:
    """
    Orchestrates a chat turn. Stateless apart from its collaborators.
    """

    def __init__(
        self,
        place_lookup: Optional[PlaceLookup] = None,
        backend: Optional[GenerativeBackend] = None,
        history: Optional[ConversationHistory] = None,
        detector: LanguageDetector = language_detector,
        classifier: IntentClassifier = intent_classifier,
        synthesizer: Optional[ResponseSynthesizer] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        config=settings
    ):
        self.place_lookup = place_lookup
        self.history = history
        self.detector = detector
        self.classifier = classifier
        self.synthesizer = synthesizer or ResponseSynthesizer(
            backend=backend,
            city=config.DEFAULT_CITY,
            max_fallback_places=config.MAX_FALLBACK_PLACES,
            max_plan_days=config.MAX_PLAN_DAYS
        )
        self.normalizer = normalizer or ResponseNormalizer(place_lookup, config.city_center)

    async def load_candidates(self) -> List[Dict[str, Any]]:
        """Active inventory places, empty when the inventory cannot be read"""
        if self.place_lookup is None:
            return []
        try:
            places = await self.place_lookup.find_all()
        except Exception as e:
            logger.error(f"Could not load candidate places, continuing without them: {e}")
            return []
        return [fill_identity(place) for place in places if isinstance(place, Mapping)]

    async def process_message(
        self,
        message: str,
        context: Optional[str] = None,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> ChatResponse:
        """
        Process a chat message

        Args:
            message: User's message
            context: Optional free-text context
            session_id: Session to continue (only used for identified callers)
            user_id: Caller identity; history is recorded only when present

        Returns:
            Normalized ChatResponse

        Raises:
            InvalidMessageError: blank message
            ChatProcessingError: unexpected synthesis/normalization failure
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidMessageError("El mensaje es requerido")

        language = self.detector.detect(message).value
        classification = self.classifier.classify_with_reason(message)
        logger.info(
            f"Processing message: intent={classification.intent.value} "
            f"rule={classification.rule} language={language}"
        )

        candidates = await self.load_candidates()

        try:
            if classification.intent == Intent.TRAVEL_PLAN:
                raw = await self.synthesizer.generate_travel_plan(message, context, candidates, language)
            else:
                raw = await self.synthesizer.generate_simple_recommendation(message, context, candidates, language)

            raw = {**raw, "language": language, "intent": classification.intent.value, "sessionId": None}
            response = await self.normalizer.normalize(raw, resolve_references=True)
        except Exception as e:
            logger.exception(f"Error processing chat message: {e}")
            raise ChatProcessingError(str(e), language=language) from e

        if user_id and self.history is not None:
            session_id = session_id or new_session_id()
            response = response.model_copy(update={"session_id": session_id})
            await self._record(session_id, user_id, message, context, response)

        return response

    async def _record(
        self,
        session_id: str,
        user_id: str,
        message: str,
        context: Optional[str],
        response: ChatResponse
    ):
        """Append the user message and the answer; failures never reach the caller"""
        try:
            await self.history.append_message(session_id, ChatMessage(
                session_id=session_id, user_id=user_id, sender="user", text=message, context=context
            ))
            await self.history.append_message(session_id, ChatMessage(
                session_id=session_id, user_id=user_id, sender="bot", text=response.message,
                response=response.model_dump(mode="json", by_alias=True, exclude_none=True)
            ))
        except Exception as e:
            logger.error(f"Error saving chat history for session {session_id}: {e}")


def build_chat_engine(place_lookup=None, backend=None, history=None, config=settings) -> ChatEngine:
    """Chat engine wired with the default detector and classifier"""
    return ChatEngine(
        place_lookup=place_lookup,
        backend=backend,
        history=history,
        config=config
    )
