# agents/__init__.py
"""
AI Agents Package

Contains the chat-facing components:
- ChatEngine: Orchestrates one chat turn
- ResponseSynthesizer: Generative answers with deterministic fallbacks
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .chat_engine import ChatEngine, build_chat_engine, InvalidMessageError, ChatProcessingError
    from .response_synthesizer import ResponseSynthesizer
    from .fallback_templates import FallbackSeeds, DEFAULT_FALLBACK_SEEDS

__all__ = [
    "ChatEngine",
    "build_chat_engine",
    "InvalidMessageError",
    "ChatProcessingError",
    "ResponseSynthesizer",
    "FallbackSeeds",
    "DEFAULT_FALLBACK_SEEDS"
]
