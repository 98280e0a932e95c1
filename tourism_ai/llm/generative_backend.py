# llm/generative_backend.py
"""
Generative backends for the chat engine
Turn a user message plus prompt context into a raw response dict:
    {"message": str, "places"?: [...], "travelPlan"?: {...}}

LLM Provider:
- OPENAI_API_KEY set (or LLM_PROVIDER=openai): OpenAI chat completions, JSON mode
- LLM_PROVIDER=ollama: local Ollama /api/generate
- otherwise: no backend, the engine answers from its fallback templates

Every expected failure (timeout, HTTP error, unparseable output) surfaces as
BackendUnavailableError so callers can fall back.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import httpx
import openai
from openai import OpenAI
from loguru import logger

from ..schemas.ai_schemas import Intent
from .language_detector import language_config
from .prompts import SYSTEM_PROMPT, RECOMMENDATION_PROMPT, TRAVEL_PLAN_PROMPT


PROMPT_PLACE_FIELDS = ("id", "name", "type", "address", "description")


class BackendUnavailableError(RuntimeError):
    """The generative backend could not produce a usable answer"""


class GenerativeBackend(ABC):
    """Contract for text generation used by the response synthesizer"""

    name: str = "backend"

    @abstractmethod
    async def generate(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Generate a structured answer

        Args:
            message: User message
            context: Prompt variables: intent, language, city, user_context,
                     places (inventory dicts), days (travel plans only)

        Returns:
            Raw response dict with at least "message"

        Raises:
            BackendUnavailableError: on any expected backend failure
        """
        pass


# ============================================
# Prompt building / output parsing
# ============================================

def _compact_place(place: Dict[str, Any]) -> Dict[str, Any]:
    compact = {k: place.get(k) for k in PROMPT_PLACE_FIELDS if place.get(k) is not None}
    description = compact.get("description")
    if isinstance(description, str) and len(description) > 160:
        compact["description"] = description[:157] + "..."
    return compact


def render_prompts(message: str, context: Dict[str, Any], max_places: int = 40) -> Tuple[str, str]:
    """
    Render (system prompt, user prompt) for a request

    Returns:
        Tuple of prompt strings
    """
    config = language_config(context.get("language", "en"))
    system = SYSTEM_PROMPT.format(
        city=context.get("city", ""),
        language_instruction=config.language_instruction
    )

    places: List[Dict[str, Any]] = context.get("places") or []
    places_block = "\n".join(
        json.dumps(_compact_place(p), ensure_ascii=False) for p in places[:max_places]
    ) or "(none)"
    variables = {
        "message": message,
        "context": context.get("user_context") or "(none)",
        "places": places_block,
    }

    if context.get("intent") == Intent.TRAVEL_PLAN.value:
        prompt = TRAVEL_PLAN_PROMPT.format(days=context.get("days") or 1, **variables)
    else:
        prompt = RECOMMENDATION_PROMPT.format(**variables)
    return system, prompt


def parse_generation(text: str) -> Dict[str, Any]:
    """
    Parse model output into a response dict.
    Tolerates markdown fences and chatter around the JSON object.

    Raises:
        BackendUnavailableError: when no JSON object with a message can be found
    """
    cleaned = text.strip() if isinstance(text, str) else ""
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]

    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        raise BackendUnavailableError("Backend answer contains no JSON object")

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise BackendUnavailableError(f"Backend answer is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("message"), str):
        raise BackendUnavailableError("Backend answer has no message")
    return data


# ============================================
# OpenAI
# ============================================

class OpenAIBackend(GenerativeBackend):
    """OpenAI chat completions in JSON mode"""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        temperature: float = 0.7,
        max_tokens: int = 1500,
        max_prompt_places: int = 40
    ):
        # Retries belong to the caller, not to this client
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_prompt_places = max_prompt_places
        logger.info(f"OpenAIBackend initialized ({model})")

    async def generate(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        system, prompt = render_prompts(message, context, self.max_prompt_places)
        try:
            completion = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt}
                ],
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )
        except openai.OpenAIError as e:
            raise BackendUnavailableError(f"OpenAI request failed: {e}") from e

        if not completion.choices:
            raise BackendUnavailableError("OpenAI returned no choices")
        return parse_generation(completion.choices[0].message.content or "")


# ============================================
# Ollama
# ============================================

class OllamaBackend(GenerativeBackend):
    """Local Ollama model through its HTTP API"""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.2",
        timeout: float = 20.0,
        temperature: float = 0.7,
        max_tokens: int = 1500,
        max_prompt_places: int = 40,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_prompt_places = max_prompt_places
        self.transport = transport
        logger.info(f"OllamaBackend initialized ({model} at {self.base_url})")

    async def generate(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        system, prompt = render_prompts(message, context, self.max_prompt_places)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/api/generate",
                    json={
                        "model": self.model,
                        "system": system,
                        "prompt": prompt,
                        "stream": False,
                        "format": "json",
                        "options": {
                            "temperature": self.temperature,
                            "num_predict": self.max_tokens
                        }
                    }
                )
        except httpx.HTTPError as e:
            raise BackendUnavailableError(f"Ollama request failed: {e!r}") from e

        if response.status_code != 200:
            raise BackendUnavailableError(f"Ollama error: {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise BackendUnavailableError(f"Ollama returned a non-JSON body: {e}") from e
        if not isinstance(body, dict):
            raise BackendUnavailableError("Ollama returned an unexpected body")
        return parse_generation(body.get("response", ""))


def build_backend(config) -> Optional[GenerativeBackend]:
    """
    Create the backend selected by the settings

    Returns:
        GenerativeBackend, or None when generation is disabled or has no credential
    """
    provider = config.llm_provider
    if provider == "openai":
        if not config.openai_key:
            logger.warning("LLM provider is openai but OPENAI_API_KEY is not configured")
            return None
        return OpenAIBackend(
            api_key=config.openai_key,
            model=config.OPENAI_MODEL,
            timeout=config.LLM_TIMEOUT_SECONDS,
            temperature=config.LLM_TEMPERATURE,
            max_tokens=config.LLM_MAX_TOKENS,
            max_prompt_places=config.MAX_PROMPT_PLACES
        )
    if provider == "ollama":
        return OllamaBackend(
            base_url=config.OLLAMA_BASE_URL,
            model=config.OLLAMA_MODEL,
            timeout=config.LLM_TIMEOUT_SECONDS,
            temperature=config.LLM_TEMPERATURE,
            max_tokens=config.LLM_MAX_TOKENS,
            max_prompt_places=config.MAX_PROMPT_PLACES
        )
    logger.info("No generative backend configured, using fallback responses")
    return None
