"""
Langchain Prompt Templates
Defines prompts for simple recommendations and travel plans
"""

from langchain_core.prompts import PromptTemplate

# ============================================
# System Prompt
# ============================================

SYSTEM_PROMPT = PromptTemplate(
    input_variables=["city", "language_instruction"],
    template="""You are a friendly local tourism guide for {city}.
{language_instruction}.
Only recommend places in or near {city}. Prefer places from the provided inventory and
reference them by their "id". Never invent ids. Answer with a single JSON object and
nothing else: no markdown fences, no commentary."""
)

# ============================================
# Simple Recommendation Prompt
# ============================================

RECOMMENDATION_PROMPT = PromptTemplate(
    input_variables=["message", "context", "places"],
    template="""User message: {message}
Additional context: {context}

Known places (JSON, one per line):
{places}

Recommend 3 or 4 specific places that answer the message.

Return JSON with exactly these keys:
{{"message": "<short friendly answer>",
  "places": [{{"id": "<inventory id or null>", "name": "...", "description": "...",
              "address": "...", "type": "...", "location": {{"lat": 0.0, "lng": 0.0}}}}]}}

JSON Response:"""
)

# ============================================
# Travel Plan Prompt
# ============================================

TRAVEL_PLAN_PROMPT = PromptTemplate(
    input_variables=["message", "context", "places", "days"],
    template="""User message: {message}
Additional context: {context}

Known places (JSON, one per line):
{places}

Build a {days}-day itinerary. Each day has about 5 activities in time order
(breakfast, morning visit, lunch, afternoon visit, dinner).
For an activity's "place" use the inventory id as a plain string when the place is
in the inventory, otherwise a full place object.

Return JSON with exactly these keys:
{{"message": "<short friendly summary>",
  "travelPlan": {{"totalDays": {days},
                  "days": [{{"dayNumber": 1, "title": "...",
                             "activities": [{{"time": "09:00", "category": "...",
                                              "place": "<id>" }}]}}]}}}}

JSON Response:"""
)
