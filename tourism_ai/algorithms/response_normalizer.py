"""
Response Normalizer
Walks a synthesized chat response and returns it in canonical form.

- places: every entry goes through normalize_place
- travelPlan: every activity place is either an inline object or a bare id.
  Ids are resolved through the place lookup; all resolutions of a plan are
  scheduled at once and joined (asyncio.gather keeps input order).
  Unknown ids and failed lookups become placeholder places with different
  sentinel texts so callers can tell them apart.
- days are renumbered 1..n and totalDays is set to the real day count

The input response is never mutated; a new ChatResponse is returned.
"""

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from loguru import logger

from ..schemas.ai_schemas import ChatResponse, Day, Place, TravelPlan, utc_timestamp
from .place_normalizer import normalize_place

if TYPE_CHECKING:
    from ..interfaces.place_store import PlaceLookup


NOT_FOUND_NAME = "Lugar no encontrado"
NOT_FOUND_DESCRIPTION = "Este lugar ya no está disponible en nuestra base de datos"
UNAVAILABLE_NAME = "Lugar no disponible"
UNAVAILABLE_DESCRIPTION = "Error al cargar la información del lugar"
PLACEHOLDER_ADDRESS = "Dirección no disponible"


# ============================================
# Place source variants
# ============================================

@dataclass(frozen=True)
class PlaceReference:
    """Activity place given as a bare id"""
    id: str


@dataclass(frozen=True)
class InlinePlace:
    """Activity place given as an embedded object"""
    data: Mapping[str, Any]


PlaceSource = Union[PlaceReference, InlinePlace]


def to_place_source(raw: Any) -> PlaceSource:
    """Classify the wire value of Activity.place"""
    if isinstance(raw, str):
        if raw.strip():
            return PlaceReference(raw.strip())
        return InlinePlace({})
    if isinstance(raw, Place):
        return InlinePlace(raw.model_dump())
    if isinstance(raw, Mapping):
        return InlinePlace(raw)
    if raw is None:
        return InlinePlace({})
    if isinstance(raw, int) and not isinstance(raw, bool):
        return PlaceReference(str(raw))
    raise TypeError(f"Unsupported place value: {type(raw).__name__}")


def placeholder_place(place_id: str, name: str, description: str) -> Dict[str, Any]:
    """Stand-in for a reference that could not be resolved"""
    return {
        "id": place_id,
        "key": name,
        "name": name,
        "description": description,
        "address": PLACEHOLDER_ADDRESS,
        "type": None,
    }


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, Mapping):
        return dict(value)
    return None


class ResponseNormalizer:
    """
    Normalizes chat responses, resolving place references on demand.
    """

    def __init__(
        self,
        place_lookup: Optional["PlaceLookup"] = None,
        city_center: Optional[Tuple[float, float]] = None
    ):
        self.place_lookup = place_lookup
        self.city_center = city_center

    async def normalize(
        self,
        response: Union[ChatResponse, Mapping[str, Any]],
        resolve_references: bool = True
    ) -> ChatResponse:
        """
        Normalize a chat response

        Args:
            response: ChatResponse or raw response dict (camelCase or snake_case keys)
            resolve_references: Look up bare place ids; when False they stay as strings

        Returns:
            New ChatResponse; the input is left untouched
        """
        if isinstance(response, ChatResponse):
            data = response.model_dump(by_alias=True)
        elif isinstance(response, Mapping):
            data = dict(response)
        else:
            raise TypeError(f"Cannot normalize response of type {type(response).__name__}")

        normalized: Dict[str, Any] = {
            "message": data.get("message") or "",
            "sessionId": data.get("sessionId", data.get("session_id")),
            "language": data.get("language"),
            "intent": data.get("intent"),
            "timestamp": data.get("timestamp") or utc_timestamp(),
        }

        raw_places = data.get("places")
        if isinstance(raw_places, list):
            normalized["places"] = await self._normalize_places(raw_places, resolve_references)

        raw_plan = data.get("travelPlan", data.get("travel_plan"))
        if isinstance(raw_plan, Mapping):
            normalized["travelPlan"] = await self._normalize_travel_plan(raw_plan, resolve_references)

        return ChatResponse.model_validate(normalized)

    async def _normalize_places(self, raw_places: List[Any], resolve_references: bool) -> List[Place]:
        sources = [to_place_source(raw) for raw in raw_places if raw is not None]
        resolved = await asyncio.gather(*(self._resolve(source, resolve_references) for source in sources))
        places = [p for p in resolved if isinstance(p, Place)]
        if len(places) != len(resolved):
            logger.debug(f"Dropped {len(resolved) - len(places)} unresolved place ids from places list")
        return places

    async def _normalize_travel_plan(self, raw_plan: Mapping[str, Any], resolve_references: bool) -> TravelPlan:
        plan = dict(raw_plan)
        original_total = plan.pop("totalDays", plan.pop("total_days", None))
        raw_days = plan.pop("days", None)
        if not isinstance(raw_days, list):
            raw_days = []

        days: List[Dict[str, Any]] = []
        for index, raw_day in enumerate(raw_days):
            day = _as_dict(raw_day)
            if day is None:
                logger.warning(f"Skipping malformed day at position {index}: {raw_day!r}")
                continue
            days.append(day)

        # Scatter: one pending resolution per activity, across all days
        sources: List[PlaceSource] = []
        layout: List[List[Dict[str, Any]]] = []
        for day in days:
            activities = []
            raw_activities = day.get("activities")
            for raw_activity in raw_activities if isinstance(raw_activities, list) else []:
                activity = _as_dict(raw_activity)
                if activity is None:
                    logger.warning(f"Skipping malformed activity: {raw_activity!r}")
                    continue
                sources.append(to_place_source(activity.get("place")))
                activities.append(activity)
            layout.append(activities)

        # Gather: results come back in scheduling order
        resolved = iter(await asyncio.gather(*(self._resolve(source, resolve_references) for source in sources)))

        normalized_days = []
        for position, (day, activities) in enumerate(zip(days, layout), start=1):
            day.pop("day_number", None)
            day.pop("dayNumber", None)
            day["dayNumber"] = position
            day["title"] = str(day.get("title") or "")
            day["activities"] = [
                {
                    **activity,
                    "time": str(activity.get("time") or ""),
                    "category": str(activity.get("category") or ""),
                    "place": next(resolved),
                }
                for activity in activities
            ]
            normalized_days.append(Day.model_validate(day))

        total_days = len(normalized_days)
        if isinstance(original_total, int) and original_total > 0 and original_total != total_days:
            logger.warning(f"travelPlan.totalDays={original_total} but plan has {total_days} days; using {total_days}")

        plan["totalDays"] = total_days
        plan["days"] = normalized_days
        return TravelPlan.model_validate(plan)

    async def _resolve(self, source: PlaceSource, resolve_references: bool) -> Union[Place, str]:
        if isinstance(source, InlinePlace):
            return normalize_place(source.data, self.city_center)

        if isinstance(source, PlaceReference):
            if not resolve_references:
                return source.id
            if self.place_lookup is None:
                logger.warning(f"No place lookup configured, cannot resolve {source.id}")
                return normalize_place(
                    placeholder_place(source.id, UNAVAILABLE_NAME, UNAVAILABLE_DESCRIPTION),
                    self.city_center
                )

            try:
                found = await self.place_lookup.find_by_id(source.id)
            except Exception as e:
                logger.error(f"Error resolving place reference {source.id}: {e}")
                return normalize_place(
                    placeholder_place(source.id, UNAVAILABLE_NAME, UNAVAILABLE_DESCRIPTION),
                    self.city_center
                )

            if found is None:
                logger.warning(f"Place reference {source.id} not found")
                return normalize_place(
                    placeholder_place(source.id, NOT_FOUND_NAME, NOT_FOUND_DESCRIPTION),
                    self.city_center
                )

            place = normalize_place(found, self.city_center)
            if place.id is None:
                place = place.model_copy(update={"id": source.id})
            return place

        raise TypeError(f"Unhandled place source: {source!r}")
