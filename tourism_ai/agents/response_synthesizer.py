# agents/response_synthesizer.py
"""
Response Synthesizer
Produces the raw (not yet normalized) answer for a classified message.

Both generators try the generative backend first. A missing backend or a
BackendUnavailableError switches to deterministic answers built from the
candidate places and the injected FallbackSeeds. Any other exception
propagates to the caller.

Raw answer shapes:
    simple:      {"message": str, "places": [place dict, ...]}
    travel plan: {"message": str, "travelPlan": {"totalDays": n, "days": [...]}}
"""

import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from ..config import settings
from ..schemas.ai_schemas import Intent, PlaceType
from ..algorithms.place_types import canonicalize_place_type
from ..algorithms.place_relevance import rank_places
from ..llm.generative_backend import GenerativeBackend, BackendUnavailableError
from ..llm.intent_classifier import extract_day_count
from ..llm.language_detector import language_config
from .fallback_templates import FallbackSeeds, DEFAULT_FALLBACK_SEEDS


class ResponseSynthesizer:
    """
    Turns (message, context, candidate places, language) into a raw answer
    """

    def __init__(
        self,
        backend: Optional[GenerativeBackend] = None,
        seeds: FallbackSeeds = DEFAULT_FALLBACK_SEEDS,
        city: Optional[str] = None,
        max_fallback_places: Optional[int] = None,
        max_plan_days: Optional[int] = None
    ):
        self.backend = backend
        self.seeds = seeds
        self.city = city or settings.DEFAULT_CITY
        self.max_fallback_places = max_fallback_places or settings.MAX_FALLBACK_PLACES
        self.max_plan_days = max_plan_days or settings.MAX_PLAN_DAYS

    # ============================================
    # Entry points
    # ============================================

    async def generate_simple_recommendation(
        self,
        message: str,
        context: Optional[str],
        candidate_places: Sequence[Mapping[str, Any]],
        language: str
    ) -> Dict[str, Any]:
        """
        Recommend a handful of places for a one-off question

        Returns:
            Raw answer with "message" and "places"
        """
        candidate_places = rank_places(message, candidate_places)
        if self.backend is None:
            logger.warning("No generative backend configured, using fallback recommendation")
            return self.fallback_recommendation(candidate_places, language)

        prompt_context = self._prompt_context(Intent.SIMPLE, context, candidate_places, language)
        try:
            answer = await self.backend.generate(message, prompt_context)
        except BackendUnavailableError as e:
            logger.warning(f"Backend {self.backend.name} unavailable, using fallback recommendation: {e}")
            return self.fallback_recommendation(candidate_places, language)

        logger.info(f"Recommendation generated by {self.backend.name}")
        return answer

    async def generate_travel_plan(
        self,
        message: str,
        context: Optional[str],
        candidate_places: Sequence[Mapping[str, Any]],
        language: str
    ) -> Dict[str, Any]:
        """
        Build a day-by-day itinerary

        Returns:
            Raw answer with "message" and "travelPlan"
        """
        candidate_places = rank_places(message, candidate_places)
        if self.backend is None:
            logger.warning("No generative backend configured, using fallback travel plan")
            return self.fallback_travel_plan(message, candidate_places, language)

        prompt_context = self._prompt_context(Intent.TRAVEL_PLAN, context, candidate_places, language)
        prompt_context["days"] = self.requested_days(message)
        try:
            answer = await self.backend.generate(message, prompt_context)
        except BackendUnavailableError as e:
            logger.warning(f"Backend {self.backend.name} unavailable, using fallback travel plan: {e}")
            return self.fallback_travel_plan(message, candidate_places, language)

        plan = answer.get("travelPlan", answer.get("travel_plan"))
        if not isinstance(plan, Mapping) or not isinstance(plan.get("days"), list):
            logger.warning(f"Backend {self.backend.name} answered without a travel plan, using fallback travel plan")
            return self.fallback_travel_plan(message, candidate_places, language)

        logger.info(f"Travel plan generated by {self.backend.name}")
        return answer

    # ============================================
    # Fallbacks
    # ============================================

    def requested_days(self, message: str) -> int:
        """Day count asked for in the message, 1 when absent, capped by max_plan_days"""
        days = extract_day_count(message) or 1
        if days > self.max_plan_days:
            logger.info(f"Requested {days} days, capping plan at {self.max_plan_days}")
            days = self.max_plan_days
        return days

    def fallback_recommendation(
        self,
        candidate_places: Sequence[Mapping[str, Any]],
        language: str
    ) -> Dict[str, Any]:
        """First few candidates (expected most relevant first), or the seed places when there are none"""
        if candidate_places:
            places = [copy.deepcopy(dict(p)) for p in candidate_places[:self.max_fallback_places]]
        else:
            places = [seed.to_dict() for seed in self.seeds.recommendation_places]

        return {
            "message": language_config(language).recommendation_message.format(city=self.city),
            "places": places,
        }

    def fallback_travel_plan(
        self,
        message: str,
        candidate_places: Sequence[Mapping[str, Any]],
        language: str
    ) -> Dict[str, Any]:
        """
        Template itinerary: one day per requested day, fixed time slots.
        Candidates fill the slots whose preferred types they match, rotating
        through the matches so consecutive days differ. Slots sharing a primary
        type (lunch and dinner) share one rotation. Unmatched slots keep their
        seed place.
        """
        total_days = self.requested_days(message)
        typed: List[Tuple[PlaceType, Mapping[str, Any]]] = [
            (canonicalize_place_type(place.get("type")), place) for place in candidate_places
        ]
        cursors: Dict[PlaceType, int] = {}

        days = []
        for index in range(total_days):
            activities = []
            for slot in self.seeds.day_slots:
                matches = [place for place_type, place in typed if place_type in slot.preferred_types]
                if matches:
                    group = slot.preferred_types[0]
                    cursor = cursors.get(group, 0)
                    place = copy.deepcopy(dict(matches[cursor % len(matches)]))
                    cursors[group] = cursor + 1
                else:
                    place = slot.seed.to_dict()
                activities.append({"time": slot.time, "category": slot.category, "place": place})

            days.append({
                "dayNumber": index + 1,
                "title": self.seeds.day_title(index, total_days),
                "activities": activities,
            })

        config = language_config(language)
        template = config.plan_message_singular if total_days == 1 else config.plan_message_plural
        return {
            "message": template.format(days=total_days, city=self.city),
            "travelPlan": {"totalDays": total_days, "days": days},
        }

    # ============================================
    # Helpers
    # ============================================

    def _prompt_context(
        self,
        intent: Intent,
        context: Optional[str],
        candidate_places: Sequence[Mapping[str, Any]],
        language: str
    ) -> Dict[str, Any]:
        return {
            "intent": intent.value,
            "language": language,
            "city": self.city,
            "user_context": context,
            "places": [dict(p) for p in candidate_places],
        }
