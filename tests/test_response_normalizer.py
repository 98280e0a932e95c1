"""
Tests for ResponseNormalizer: reference resolution, renumbering, idempotence
"""

import asyncio
import copy
from typing import Any, Dict, Optional

import pytest

from tourism_ai.algorithms.response_normalizer import (
    ResponseNormalizer,
    PlaceReference,
    InlinePlace,
    to_place_source,
    NOT_FOUND_NAME,
    NOT_FOUND_DESCRIPTION,
    UNAVAILABLE_NAME,
    UNAVAILABLE_DESCRIPTION,
    PLACEHOLDER_ADDRESS,
)
from tourism_ai.schemas.ai_schemas import ChatResponse, Place, PlaceType

from .conftest import CITY_CENTER, FakePlaceLookup


def plan_response(*places, total_days=None) -> Dict[str, Any]:
    return {
        "message": "plan",
        "travelPlan": {
            "totalDays": total_days if total_days is not None else 1,
            "days": [
                {
                    "dayNumber": 7,
                    "title": "Día",
                    "activities": [
                        {"time": f"{9 + i}:00", "category": "Turismo", "place": place}
                        for i, place in enumerate(places)
                    ],
                }
            ],
        },
    }


@pytest.fixture
def normalizer(lookup) -> ResponseNormalizer:
    return ResponseNormalizer(lookup, CITY_CENTER)


# ============================================
# Place sources
# ============================================

def test_to_place_source_variants():
    assert to_place_source("p1") == PlaceReference("p1")
    assert to_place_source(5) == PlaceReference("5")
    assert to_place_source({"name": "A"}) == InlinePlace({"name": "A"})
    assert to_place_source(None) == InlinePlace({})
    assert to_place_source("  ") == InlinePlace({})
    with pytest.raises(TypeError):
        to_place_source(3.5)


# ============================================
# Reference resolution
# ============================================

async def test_resolves_known_missing_and_broken_references(normalizer):
    response = await normalizer.normalize(plan_response("p1", "missing", "broken"))
    found, missing, broken = [a.place for a in response.travel_plan.days[0].activities]

    assert found.name == "Museo de la Ciudad"
    assert found.id == "p1"
    assert found.type == PlaceType.TOURISM

    assert missing.id == "missing"
    assert missing.name == NOT_FOUND_NAME
    assert missing.description == NOT_FOUND_DESCRIPTION
    assert missing.address == PLACEHOLDER_ADDRESS

    assert broken.id == "broken"
    assert broken.name == UNAVAILABLE_NAME
    assert broken.description == UNAVAILABLE_DESCRIPTION
    assert (broken.location.lat, broken.location.lng) == CITY_CENTER


async def test_resolution_is_deterministic(normalizer):
    first = await normalizer.normalize(plan_response("p1", "missing", "broken"))
    second = await normalizer.normalize(plan_response("p1", "missing", "broken"))
    assert first.travel_plan == second.travel_plan


async def test_without_resolution_ids_stay_strings(lookup):
    normalizer = ResponseNormalizer(lookup, CITY_CENTER)
    response = await normalizer.normalize(plan_response("p1", {"name": "Inline"}), resolve_references=False)
    activities = response.travel_plan.days[0].activities
    assert activities[0].place == "p1"
    assert isinstance(activities[1].place, Place)
    assert lookup.requested_ids == []


async def test_no_lookup_gives_unavailable_placeholder():
    response = await ResponseNormalizer(None, CITY_CENTER).normalize(plan_response("p1"))
    assert response.travel_plan.days[0].activities[0].place.name == UNAVAILABLE_NAME


async def test_concurrent_resolution_preserves_order():
    class SlowLookup(FakePlaceLookup):
        async def find_by_id(self, place_id: str) -> Optional[Dict[str, Any]]:
            # later ids finish first
            await asyncio.sleep(0.01 * (5 - int(place_id)))
            return {"id": place_id, "name": f"Lugar {place_id}"}

    normalizer = ResponseNormalizer(SlowLookup(), CITY_CENTER)
    response = await normalizer.normalize(plan_response("1", "2", "3", "4"))
    assert [a.place.name for a in response.travel_plan.days[0].activities] == [
        "Lugar 1", "Lugar 2", "Lugar 3", "Lugar 4"
    ]


# ============================================
# Plan shape
# ============================================

async def test_days_renumbered_and_total_days_matches(normalizer):
    raw = plan_response({"name": "A"}, total_days=5)
    raw["travelPlan"]["days"].append({"dayNumber": 1, "title": "Otro", "activities": []})
    raw["travelPlan"]["days"].append("not a day")

    plan = (await normalizer.normalize(raw)).travel_plan
    assert [d.day_number for d in plan.days] == [1, 2]
    assert plan.total_days == len(plan.days) == 2


async def test_malformed_activities_are_skipped(normalizer):
    raw = plan_response({"name": "A"})
    raw["travelPlan"]["days"][0]["activities"].append(None)
    raw["travelPlan"]["days"][0]["activities"].append({"time": 930, "place": {"name": "B"}})

    activities = (await normalizer.normalize(raw)).travel_plan.days[0].activities
    assert [a.place.name for a in activities] == ["A", "B"]
    assert activities[1].time == "930"


async def test_places_are_normalized_and_unresolved_ids_dropped(lookup):
    normalizer = ResponseNormalizer(lookup, CITY_CENTER)
    raw = {"message": "hola", "places": [{"key": "Plaza"}, "p1", None]}

    resolved = await normalizer.normalize(raw)
    assert [p.name for p in resolved.places] == ["Plaza", "Museo de la Ciudad"]

    unresolved = await normalizer.normalize(raw, resolve_references=False)
    assert [p.name for p in unresolved.places] == ["Plaza"]


# ============================================
# Purity
# ============================================

async def test_input_not_mutated(normalizer):
    raw = plan_response("p1", {"name": "A", "type": "hotel"})
    snapshot = copy.deepcopy(raw)
    await normalizer.normalize(raw)
    assert raw == snapshot


async def test_idempotent(normalizer):
    once = await normalizer.normalize(plan_response("p1", "missing", {"title": "Mirador"}))
    twice = await normalizer.normalize(once)
    assert twice == once


async def test_preserves_message_metadata(normalizer):
    raw = {"message": "hola", "language": "es", "intent": "simple", "timestamp": "2024-01-01T00:00:00+00:00"}
    response = await normalizer.normalize(raw)
    assert isinstance(response, ChatResponse)
    assert response.timestamp == "2024-01-01T00:00:00+00:00"
    assert response.places is None and response.travel_plan is None


async def test_rejects_non_mapping_response(normalizer):
    with pytest.raises(TypeError):
        await normalizer.normalize(["not", "a", "response"])
