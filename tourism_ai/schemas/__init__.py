# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Places and travel plans
- Chat requests/responses and history
- API payloads
"""

from .ai_schemas import (
    # Enums
    PlaceType, Intent, Language,
    # Places
    Location, Place,
    # Travel plan
    Activity, Day, TravelPlan,
    # Chat
    ChatRequest, ChatResponse, ChatMessage, ChatSession,
    # API
    EnsurePlaceRequest, HealthResponse,
    utc_timestamp
)

__all__ = [
    # Enums
    "PlaceType", "Intent", "Language",
    # Places
    "Location", "Place",
    # Travel plan
    "Activity", "Day", "TravelPlan",
    # Chat
    "ChatRequest", "ChatResponse", "ChatMessage", "ChatSession",
    # API
    "EnsurePlaceRequest", "HealthResponse",
    "utc_timestamp"
]
