# interfaces/__init__.py
"""
Interfaces Package

Contains the stores the chat engine talks to:
- place_store: Place lookup (MongoDB or in-memory)
- conversation_store: Per-session chat history (Redis or in-memory)
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .place_store import PlaceLookup, InMemoryPlaceStore, MongoPlaceStore, build_place_store
    from .conversation_store import ConversationHistory, ConversationStore, build_conversation_store

__all__ = [
    "PlaceLookup",
    "InMemoryPlaceStore",
    "MongoPlaceStore",
    "build_place_store",
    "ConversationHistory",
    "ConversationStore",
    "build_conversation_store"
]
