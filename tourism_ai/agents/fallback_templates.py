# agents/fallback_templates.py
"""
Deterministic answer material for when no generative backend is usable.

Everything here is immutable: seed places are frozen records and every
consumer gets a fresh dict from to_dict().
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..schemas.ai_schemas import PlaceType


@dataclass(frozen=True)
class SeedPlace:
    """A well-known place of the default city"""
    key: str
    type: PlaceType
    description: str
    address: str
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.key,
            "type": self.type.value,
            "description": self.description,
            "address": self.address,
            "location": {"lat": self.lat, "lng": self.lng},
        }


@dataclass(frozen=True)
class SlotTemplate:
    """One time slot of a fallback day"""
    time: str
    category: str
    preferred_types: Tuple[PlaceType, ...]
    seed: SeedPlace


# ============================================
# Seed Places
# ============================================

COSTANERA = SeedPlace(
    key="Costanera de Encarnación",
    type=PlaceType.TOURISM,
    description="Hermosa costanera con vista al río Paraná, ideal para pasear y disfrutar",
    address="Avda. Costanera",
    lat=-27.3340, lng=-55.8737,
)

PASEO_GASTRONOMICO = SeedPlace(
    key="Paseo Gastronómico",
    type=PlaceType.GASTRONOMY,
    description="Zona gastronómica con variedad de restaurantes y ambiente nocturno",
    address="Avda. Francia",
    lat=-27.3353, lng=-55.8716,
)

SHOPPING_COSTANERA = SeedPlace(
    key="Shopping Costanera",
    type=PlaceType.SHOPPING,
    description="Centro comercial moderno con tiendas, restaurantes y entretenimiento",
    address="Avda. Costanera",
    lat=-27.3253, lng=-55.8754,
)

CAFE_CENTRAL = SeedPlace(
    key="Café Central Encarnación",
    type=PlaceType.BREAKFAST,
    description="Café céntrico perfecto para comenzar el día con un buen desayuno paraguayo",
    address="Avda. Dr. Francia c/ 14 de Mayo",
    lat=-27.3309, lng=-55.8663,
)

PLAZA_DE_ARMAS = SeedPlace(
    key="Plaza de Armas",
    type=PlaceType.TOURISM,
    description="Plaza central histórica con monumentos y ambiente tradicional",
    address="14 de Mayo c/ Mcal. Estigarribia",
    lat=-27.3323, lng=-55.8656,
)

RESTAURANTE_COSTANERA = SeedPlace(
    key="Restaurante La Costanera",
    type=PlaceType.GASTRONOMY,
    description="Restaurante con vista al río y especialidades locales",
    address="Avda. Costanera",
    lat=-27.3340, lng=-55.8737,
)

COSTANERA_PASEO = SeedPlace(
    key="Costanera de Encarnación",
    type=PlaceType.TOURISM,
    description="Hermoso paseo junto al río Paraná con vistas panorámicas",
    address="Avda. Costanera",
    lat=-27.3350, lng=-55.8740,
)

MEAL_TYPES = (PlaceType.GASTRONOMY, PlaceType.FOOD)
SIGHTSEEING_TYPES = (PlaceType.TOURISM, PlaceType.SHOPPING)


@dataclass(frozen=True)
class FallbackSeeds:
    """Seeds, slot templates and day titles used by the fallback answers"""
    recommendation_places: Tuple[SeedPlace, ...] = (
        COSTANERA, PASEO_GASTRONOMICO, SHOPPING_COSTANERA,
    )
    day_slots: Tuple[SlotTemplate, ...] = (
        SlotTemplate("09:00", "Desayuno", (PlaceType.BREAKFAST,), CAFE_CENTRAL),
        SlotTemplate("11:00", "Turismo", SIGHTSEEING_TYPES, PLAZA_DE_ARMAS),
        SlotTemplate("13:00", "Almuerzo", MEAL_TYPES, RESTAURANTE_COSTANERA),
        SlotTemplate("15:30", "Turismo", SIGHTSEEING_TYPES, COSTANERA_PASEO),
        SlotTemplate("19:00", "Cena", MEAL_TYPES + (PlaceType.ENTERTAINMENT,), PASEO_GASTRONOMICO),
    )
    single_day_title: str = "Día Completo en Encarnación"
    day_titles: Tuple[str, ...] = (
        "Llegada y Centro Histórico",
        "Costanera y Sabores Locales",
        "Cultura, Compras y Paseos",
        "Rincones de la Ciudad",
    )

    def day_title(self, index: int, total_days: int) -> str:
        """Title for day `index` (0-based), rotating through day_titles"""
        if total_days == 1:
            return self.single_day_title
        title = self.day_titles[index % len(self.day_titles)]
        if index >= len(self.day_titles):
            title = f"{title} ({index // len(self.day_titles) + 1})"
        return title


DEFAULT_FALLBACK_SEEDS = FallbackSeeds()
