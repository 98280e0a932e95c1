"""
Tests for normalize_place
"""

import copy
import math

import pytest

from tourism_ai.algorithms.place_normalizer import (
    normalize_place,
    UNNAMED_PLACE,
    DEFAULT_DESCRIPTION,
    DEFAULT_ADDRESS,
)
from tourism_ai.schemas.ai_schemas import Place, PlaceType

from .conftest import CITY_CENTER, MUSEUM


def test_fills_every_default():
    place = normalize_place({}, CITY_CENTER)
    assert place.name == place.key == UNNAMED_PLACE
    assert place.description == DEFAULT_DESCRIPTION
    assert place.address == DEFAULT_ADDRESS
    assert (place.location.lat, place.location.lng) == CITY_CENTER
    assert place.type == PlaceType.GASTRONOMY


def test_cross_fills_name_and_key():
    assert normalize_place({"key": "Plaza"}, CITY_CENTER).name == "Plaza"
    assert normalize_place({"name": "Plaza"}, CITY_CENTER).key == "Plaza"
    titled = normalize_place({"title": "Mirador"}, CITY_CENTER)
    assert titled.name == titled.key == "Mirador"


def test_folds_mongo_id():
    place = normalize_place(MUSEUM, CITY_CENTER)
    assert place.id == "p1"
    assert "_id" not in place.model_dump()


@pytest.mark.parametrize("location", [
    None,
    {"lat": "x", "lng": -55.8},
    {"lat": True, "lng": False},
    {"lat": math.nan, "lng": -55.8},
    {"lat": -27.3},
    "somewhere",
])
def test_unusable_coordinates_use_city_center(location):
    place = normalize_place({"name": "A", "location": location}, CITY_CENTER)
    assert (place.location.lat, place.location.lng) == CITY_CENTER


def test_keeps_valid_coordinates_and_extras():
    place = normalize_place({
        "name": "A",
        "location": {"lat": -27.1, "lng": -55.2},
        "rating": {"average": 4.5},
    }, CITY_CENTER)
    assert (place.location.lat, place.location.lng) == (-27.1, -55.2)
    assert place.model_dump()["rating"] == {"average": 4.5}


def test_type_canonicalized_and_raw_kept_as_category():
    place = normalize_place({"name": "A", "type": "museo"}, CITY_CENTER)
    assert place.type == PlaceType.TOURISM
    assert place.category == "museo"


def test_idempotent():
    once = normalize_place(MUSEUM, CITY_CENTER)
    twice = normalize_place(once.model_dump(), CITY_CENTER)
    assert twice == once
    assert normalize_place(once, CITY_CENTER) == once


def test_input_not_mutated():
    raw = copy.deepcopy(MUSEUM)
    normalize_place(raw, CITY_CENTER)
    assert raw == MUSEUM


def test_rejects_non_mappings():
    with pytest.raises(TypeError):
        normalize_place("p1", CITY_CENTER)


def test_returns_place_model():
    assert isinstance(normalize_place({"name": "A"}, CITY_CENTER), Place)
