"""
Place Normalizer
Repairs a place-like mapping into the canonical Place shape.

Pure function: never performs lookups. Bare id strings must be resolved by
the caller (see response_normalizer) before they get here.

Repairs, in order:
1. name/key cross-fill ("Lugar por definir" when both are missing)
2. default description
3. default address
4. coordinates (city centre when missing or non-numeric)
5. type canonicalization
"""

import math
from typing import Any, Mapping, Optional, Tuple, Union

from ..config import settings
from ..schemas.ai_schemas import Location, Place, PlaceType
from .place_types import canonicalize_place_type


UNNAMED_PLACE = "Lugar por definir"
DEFAULT_DESCRIPTION = "Descripción no disponible"
DEFAULT_ADDRESS = "Dirección por confirmar"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


def is_coordinate(value: Any) -> bool:
    # bool is an int subclass; True/False are not coordinates
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_location(raw: Any, fallback: Tuple[float, float]) -> Location:
    if isinstance(raw, Location):
        return raw
    if isinstance(raw, Mapping):
        lat, lng = raw.get("lat"), raw.get("lng")
        if is_coordinate(lat) and is_coordinate(lng):
            return Location(lat=float(lat), lng=float(lng))
    return Location(lat=fallback[0], lng=fallback[1])


def normalize_place(
    raw: Union[Place, Mapping[str, Any]],
    city_center: Optional[Tuple[float, float]] = None
) -> Place:
    """
    Normalize a raw place into the canonical Place shape

    Args:
        raw: Place model or place-like mapping (possibly partial)
        city_center: (lat, lng) used when coordinates are unusable

    Returns:
        Place with key, name, description, address, location and type set.
        Extra attributes (rating, tags, ...) are carried through.

    Raises:
        TypeError: if raw is neither a mapping nor a Place
    """
    if isinstance(raw, Place):
        data = raw.model_dump()
    elif isinstance(raw, Mapping):
        data = dict(raw)
    else:
        raise TypeError(f"Cannot normalize place of type {type(raw).__name__}")

    # Mongo documents carry _id
    raw_id = data.pop("_id", None)
    if data.get("id") is None and raw_id is not None:
        data["id"] = str(raw_id)
    elif data.get("id") is not None:
        data["id"] = str(data["id"])

    name = _text(data.get("name"))
    key = _text(data.get("key"))
    if not name and not key:
        # Generative backends sometimes answer with "title"
        name = key = _text(data.get("title")) or UNNAMED_PLACE
    elif not name:
        name = key
    elif not key:
        key = name
    data["name"] = name
    data["key"] = key

    data["description"] = _text(data.get("description")) or DEFAULT_DESCRIPTION
    data["address"] = _text(data.get("address")) or DEFAULT_ADDRESS

    data["location"] = _coerce_location(data.get("location"), city_center or settings.city_center)

    raw_type = data.get("type")
    category = _text(data.get("category"))
    if not category and raw_type:
        category = raw_type.value if isinstance(raw_type, PlaceType) else _text(raw_type)
    data["category"] = category or None
    data["type"] = canonicalize_place_type(raw_type)

    return Place.model_validate(data)
