# api/__init__.py
"""
API Endpoints Package

Contains all FastAPI routers for the tourism AI service:
- chat: Chat processing and session history
- places: Place inventory lookup and find-or-create
"""

from typing import TYPE_CHECKING

# Lazy imports to avoid circular dependencies
if TYPE_CHECKING:
    from .chat import router as chat_router
    from .places import router as places_router

__all__ = [
    "chat_router",
    "places_router"
]
