# llm/__init__.py
"""
LLM Components Package

Contains the message understanding and generation components:
- language_detector: Spanish / Portuguese / English detection
- intent_classifier: Simple recommendation vs travel plan
- prompts: Prompt templates for the generative backends
- generative_backend: OpenAI and Ollama backends
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .language_detector import language_detector, LanguageDetector, detect_language
    from .intent_classifier import intent_classifier, IntentClassifier, classify_intent, extract_day_count
    from .generative_backend import GenerativeBackend, BackendUnavailableError, build_backend

__all__ = [
    "language_detector",
    "LanguageDetector",
    "detect_language",
    "intent_classifier",
    "IntentClassifier",
    "classify_intent",
    "extract_day_count",
    "GenerativeBackend",
    "BackendUnavailableError",
    "build_backend"
]
