"""
Tests for ResponseSynthesizer: backend delegation and deterministic fallbacks
"""

import copy

import pytest

from tourism_ai.agents.fallback_templates import DEFAULT_FALLBACK_SEEDS, FallbackSeeds
from tourism_ai.agents.response_synthesizer import ResponseSynthesizer
from tourism_ai.llm.generative_backend import BackendUnavailableError

from .conftest import FakeBackend, make_places


SEED_NAMES = ["Costanera de Encarnación", "Paseo Gastronómico", "Shopping Costanera"]


def synthesizer(backend=None, **kwargs) -> ResponseSynthesizer:
    kwargs.setdefault("city", "Encarnación")
    kwargs.setdefault("max_fallback_places", 4)
    kwargs.setdefault("max_plan_days", 14)
    return ResponseSynthesizer(backend=backend, **kwargs)


# ============================================
# Simple recommendations
# ============================================

async def test_no_candidates_returns_seed_places():
    answer = await synthesizer().generate_simple_recommendation("pizza", None, [], "es")
    assert [p["name"] for p in answer["places"]] == SEED_NAMES
    assert answer["message"] == "Aquí tienes algunas recomendaciones para tu visita a Encarnación."


async def test_fallback_caps_candidates_and_leaves_them_untouched():
    candidates = make_places(6)
    snapshot = copy.deepcopy(candidates)

    answer = await synthesizer().generate_simple_recommendation("pizza", None, candidates, "en")

    assert [p["id"] for p in answer["places"]] == ["c0", "c1", "c2", "c3"]
    assert candidates == snapshot
    answer["places"][0]["name"] = "changed"
    assert candidates[0]["name"] == "Lugar 0"


async def test_backend_answer_is_returned_with_prompt_context():
    backend = FakeBackend({"message": "¡Prueba la pizza!", "places": [{"name": "Pizzería"}]})
    answer = await synthesizer(backend).generate_simple_recommendation("pizza", "mapa", make_places(2), "es")

    assert answer["message"] == "¡Prueba la pizza!"
    context = backend.calls[0]["context"]
    assert context["intent"] == "simple"
    assert context["language"] == "es"
    assert context["user_context"] == "mapa"
    assert len(context["places"]) == 2


async def test_unavailable_backend_falls_back():
    backend = FakeBackend(error=BackendUnavailableError("timeout"))
    answer = await synthesizer(backend).generate_simple_recommendation("pizza", None, [], "pt")
    assert [p["name"] for p in answer["places"]] == SEED_NAMES
    assert answer["message"].startswith("Aqui estão")


async def test_unexpected_backend_errors_propagate():
    backend = FakeBackend(error=RuntimeError("bug"))
    with pytest.raises(RuntimeError):
        await synthesizer(backend).generate_simple_recommendation("pizza", None, [], "es")


# ============================================
# Travel plans
# ============================================

async def test_fallback_plan_for_three_days():
    answer = await synthesizer().generate_travel_plan("3 días en la ciudad", None, [], "es")
    plan = answer["travelPlan"]

    assert plan["totalDays"] == len(plan["days"]) == 3
    assert [d["dayNumber"] for d in plan["days"]] == [1, 2, 3]
    assert len({d["title"] for d in plan["days"]}) == 3
    for day in plan["days"]:
        assert [a["time"] for a in day["activities"]] == ["09:00", "11:00", "13:00", "15:30", "19:00"]
    assert plan["days"][0]["activities"][0]["place"]["name"] == "Café Central Encarnación"
    assert "3 días" in answer["message"]


async def test_single_day_plan_wording():
    answer = await synthesizer().generate_travel_plan("plan para hoy", None, [], "en")
    assert answer["travelPlan"]["totalDays"] == 1
    assert answer["travelPlan"]["days"][0]["title"] == DEFAULT_FALLBACK_SEEDS.single_day_title
    assert "1-day" in answer["message"]


async def test_plan_days_are_capped():
    answer = await synthesizer(max_plan_days=5).generate_travel_plan("30 días", None, [], "es")
    assert answer["travelPlan"]["totalDays"] == 5


async def test_candidates_fill_matching_slots_only():
    candidates = [
        {"id": "h", "name": "Hotel X", "type": "Alojamiento"},
        {"id": "c", "name": "Café Y", "type": "Desayunos y meriendas"},
    ]
    answer = await synthesizer().generate_travel_plan("1 día", None, candidates, "es")
    places = [a["place"]["name"] for a in answer["travelPlan"]["days"][0]["activities"]]

    assert places[0] == "Café Y"
    assert places[2] == "Restaurante La Costanera"
    assert "Hotel X" not in places


async def test_candidates_rotate_across_days():
    candidates = make_places(2, place_type="Desayunos y meriendas")
    answer = await synthesizer().generate_travel_plan("2 días", None, candidates, "es")
    breakfasts = [d["activities"][0]["place"]["id"] for d in answer["travelPlan"]["days"]]
    assert breakfasts == ["c0", "c1"]


async def test_backend_receives_requested_days():
    plan = {"totalDays": 2, "days": [{"dayNumber": 1, "activities": []}]}
    backend = FakeBackend({"message": "ok", "travelPlan": plan})
    answer = await synthesizer(backend).generate_travel_plan("2 days in town", None, [], "en")

    assert backend.calls[0]["context"]["days"] == 2
    assert backend.calls[0]["context"]["intent"] == "travel_plan"
    assert answer["travelPlan"] == plan


async def test_backend_answer_without_plan_falls_back():
    backend = FakeBackend({"message": "no plan here"})
    answer = await synthesizer(backend).generate_travel_plan("2 días", None, [], "es")
    assert answer["travelPlan"]["totalDays"] == 2


async def test_injected_seeds_are_used():
    seeds = FallbackSeeds(recommendation_places=DEFAULT_FALLBACK_SEEDS.recommendation_places[:1])
    answer = await synthesizer(seeds=seeds).generate_simple_recommendation("x", None, [], "es")
    assert [p["name"] for p in answer["places"]] == SEED_NAMES[:1]


async def test_lunch_and_dinner_share_one_rotation():
    answer = await synthesizer().generate_travel_plan("1 día", None, make_places(3), "es")
    activities = answer["travelPlan"]["days"][0]["activities"]
    assert activities[2]["place"]["id"] == "c0"
    assert activities[4]["place"]["id"] == "c1"


# ============================================
# Relevance
# ============================================

async def test_fallback_recommendation_prefers_relevant_places():
    candidates = make_places(4) + [{"id": "h", "name": "Hotel Sur", "type": "Alojamiento"}]
    answer = await synthesizer().generate_simple_recommendation("Busco un hotel", None, candidates, "es")
    assert [p["id"] for p in answer["places"]] == ["h", "c0", "c1", "c2"]


async def test_prompt_places_are_ranked_by_relevance():
    candidates = make_places(2) + [{"id": "m", "name": "Museo", "type": "Turístico"}]
    backend = FakeBackend()
    await synthesizer(backend).generate_simple_recommendation("¿Qué puedo visitar?", None, candidates, "es")
    assert [p["id"] for p in backend.calls[0]["context"]["places"]] == ["m", "c0", "c1"]
