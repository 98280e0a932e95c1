"""
Shared fakes and fixtures for the tourism AI test suite.
No network, database or LLM access: every collaborator is in memory.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional

import pytest

from tourism_ai.interfaces.conversation_store import ConversationHistory, ConversationStore
from tourism_ai.interfaces.place_store import PlaceLookup
from tourism_ai.llm.generative_backend import GenerativeBackend
from tourism_ai.schemas.ai_schemas import ChatMessage


CITY_CENTER = (-27.3309, -55.8663)

MUSEUM = {
    "_id": "p1",
    "name": "Museo de la Ciudad",
    "description": "Historia local",
    "address": "Calle 1",
    "type": "museo",
    "location": {"lat": -27.33, "lng": -55.86},
}


# ============================================
# Fakes
# ============================================

class FakePlaceLookup(PlaceLookup):
    """
    find_by_id: "p1" -> museum, "missing" -> None, "broken" -> raises
    """

    def __init__(self, places: Optional[List[Dict[str, Any]]] = None, fail_find_all: bool = False):
        self.places = places if places is not None else [MUSEUM]
        self.fail_find_all = fail_find_all
        self.requested_ids: List[str] = []

    async def find_by_id(self, place_id: str) -> Optional[Dict[str, Any]]:
        self.requested_ids.append(place_id)
        if place_id == "broken":
            raise RuntimeError("connection reset")
        for place in self.places:
            if str(place.get("_id", place.get("id"))) == place_id:
                return copy.deepcopy(place)
        return None

    async def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        if self.fail_find_all:
            raise RuntimeError("inventory down")
        return copy.deepcopy(self.places)

    async def search(self, query: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(p) for p in self.places if query.lower() in p.get("name", "").lower()]

    async def ensure_place(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class FakeBackend(GenerativeBackend):
    """Returns a canned answer or raises a canned error; records every call"""

    name = "fake"

    def __init__(self, answer: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.answer = answer or {"message": "ok", "places": []}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"message": message, "context": context})
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.answer)


class RecordingHistory(ConversationHistory):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[ChatMessage] = []

    async def append_message(self, session_id: str, message: ChatMessage) -> ChatMessage:
        if self.fail:
            raise RuntimeError("history unavailable")
        self.messages.append(message)
        return message

    async def get_history(self, session_id: str, limit: int = 50) -> List[ChatMessage]:
        return [m for m in self.messages if m.session_id == session_id][-limit:]


def make_places(count: int, place_type: str = "Gastronomía") -> List[Dict[str, Any]]:
    return [
        {
            "id": f"c{i}",
            "name": f"Lugar {i}",
            "description": f"Descripción {i}",
            "address": f"Calle {i}",
            "type": place_type,
            "location": {"lat": -27.33, "lng": -55.86},
        }
        for i in range(count)
    ]


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def lookup() -> FakePlaceLookup:
    return FakePlaceLookup()


@pytest.fixture
def history() -> RecordingHistory:
    return RecordingHistory()


@pytest.fixture
def memory_store() -> ConversationStore:
    return ConversationStore(use_redis=False)
