"""
Place Relevance Ranker
Orders candidate places by how well they fit a chat message.

A place ranks higher when:
1. a message word (3+ letters) appears in its key, name, description, type or address
2. its canonical type is hinted by the message ("hotel" -> Alojamiento, "comer" -> Gastronomía)

Ranking is stable: places that tie keep their inventory order.
"""

import re
from typing import Any, Dict, FrozenSet, List, Mapping, Sequence, Tuple

from ..schemas.ai_schemas import PlaceType
from .place_types import canonicalize_place_type, strip_accents


MIN_WORD_LENGTH = 3

TEXT_FIELDS = ("key", "name", "description", "type", "address")

MEAL_HINTS = frozenset({PlaceType.GASTRONOMY, PlaceType.FOOD})

# Keywords are accent-stripped; first matching row wins
TYPE_HINTS: Tuple[Tuple[FrozenSet[PlaceType], Tuple[str, ...]], ...] = (
    (frozenset({PlaceType.LODGING}), ("hotel", "alojamiento", "hostel", "hospedaje", "hospedagem", "dormir")),
    (MEAL_HINTS, ("comida", "restaurante", "restaurant", "comer", "cenar", "almorzar", "eat", "food")),
    (frozenset({PlaceType.BREAKFAST}), ("cafe", "desayuno", "merienda", "breakfast", "coffee")),
    (frozenset({PlaceType.TOURISM}), ("turismo", "visitar", "turistico", "visit", "sightseeing", "conhecer")),
)

_WORD_RE = re.compile(r"\w+")


def message_words(message: str) -> List[str]:
    """Accent-stripped words long enough to be meaningful"""
    return [w for w in _WORD_RE.findall(strip_accents(message)) if len(w) >= MIN_WORD_LENGTH and not w.isdigit()]


def hinted_types(message: str) -> FrozenSet[PlaceType]:
    """Place types the message asks for, empty when it names none"""
    normalized = strip_accents(message)
    for place_types, keywords in TYPE_HINTS:
        if any(keyword in normalized for keyword in keywords):
            return place_types
    return frozenset()


def _searchable_text(place: Mapping[str, Any]) -> str:
    return strip_accents(" ".join(str(place.get(f)) for f in TEXT_FIELDS if place.get(f)))


def rank_places(message: str, places: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """
    Reorder places, most relevant to the message first

    Args:
        message: User's chat message
        places: Candidate places (not modified)

    Returns:
        New list holding the same place objects

    Example:
        >>> [p["name"] for p in rank_places("Busco un hotel", [{"name": "Pizzería"}, {"name": "Hotel Sur"}])]
        ['Hotel Sur', 'Pizzería']
    """
    words = message_words(message)
    hints = hinted_types(message)
    if not words and not hints:
        return list(places)

    def score(place: Mapping[str, Any]) -> Tuple[int, int]:
        text = _searchable_text(place)
        word_hits = sum(1 for word in words if word in text)
        type_hit = 1 if canonicalize_place_type(place.get("type")) in hints else 0
        return (int(word_hits > 0), type_hit)

    scored: Dict[int, Tuple[int, int]] = {i: score(p) for i, p in enumerate(places)}
    order = sorted(range(len(places)), key=lambda i: scored[i], reverse=True)
    return [places[i] for i in order]
