"""
AI Algorithms Module
Core algorithms for place canonicalization, relevance ranking and response normalization
"""

from .place_types import canonicalize_place_type, strip_accents, DEFAULT_PLACE_TYPE
from .place_normalizer import normalize_place
from .place_relevance import rank_places, hinted_types
from .response_normalizer import ResponseNormalizer, to_place_source, PlaceReference, InlinePlace

__all__ = [
    "canonicalize_place_type",
    "strip_accents",
    "DEFAULT_PLACE_TYPE",
    "normalize_place",
    "rank_places",
    "hinted_types",
    "ResponseNormalizer",
    "to_place_source",
    "PlaceReference",
    "InlinePlace"
]
