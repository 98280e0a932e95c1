"""
Place Type Canonicalizer
Maps free-text place types ("pizzería", "Hostel", "museo") to the closed
PlaceType set stored in the places collection.

Resolution order:
1. Exact match against a canonical label (accents and case ignored)
2. Keyword containment, checked category by category:
   lodging -> breakfast -> tourism -> shopping -> entertainment -> food
3. Default: Gastronomía
"""

import unicodedata
from typing import Any, Dict, Tuple

from ..schemas.ai_schemas import PlaceType


DEFAULT_PLACE_TYPE = PlaceType.GASTRONOMY

# Order matters: "cafe bar" is breakfast, "bar de sushi" is entertainment
TYPE_KEYWORDS: Tuple[Tuple[PlaceType, Tuple[str, ...]], ...] = (
    (PlaceType.LODGING, ("hotel", "aloj", "hostel", "posada", "lodging")),
    (PlaceType.BREAKFAST, ("desayuno", "merienda", "cafe", "breakfast", "bakery", "panaderia")),
    (PlaceType.TOURISM, ("tur", "museo", "museum", "plaza", "playa", "beach", "ruina", "mirador",
                         "parque", "park", "sightseeing", "costanera")),
    (PlaceType.SHOPPING, ("shopping", "compras", "tienda", "mall", "store")),
    (PlaceType.ENTERTAINMENT, ("entreten", "pub", "discot", "bar", "rooftop", "casino", "nightlife")),
    (PlaceType.FOOD, ("rest", "gastr", "comida", "pizza", "sushi", "churras", "parrilla", "almuerzo",
                      "cena", "food", "lunch", "dinner")),
)


def strip_accents(text: str) -> str:
    """Lowercase and drop combining marks ("Turístico" -> "turistico")"""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_DIRECT_MATCHES: Dict[str, PlaceType] = {strip_accents(t.value): t for t in PlaceType}


def canonicalize_place_type(raw_type: Any) -> PlaceType:
    """
    Map an arbitrary place-type value to the canonical enumeration

    Args:
        raw_type: Free-text type (may be None, empty or not a string)

    Returns:
        PlaceType member; Gastronomía when nothing matches

    Example:
        >>> canonicalize_place_type("Hostel del Sur")
        <PlaceType.LODGING: 'Alojamiento'>
        >>> canonicalize_place_type("turistico")
        <PlaceType.TOURISM: 'Turístico'>
    """
    if isinstance(raw_type, PlaceType):
        return raw_type
    if not raw_type or not isinstance(raw_type, str):
        return DEFAULT_PLACE_TYPE

    normalized = strip_accents(raw_type).strip()

    direct = _DIRECT_MATCHES.get(normalized)
    if direct is not None:
        return direct

    for place_type, keywords in TYPE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return place_type

    return DEFAULT_PLACE_TYPE
