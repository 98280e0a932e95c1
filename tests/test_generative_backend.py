"""
Tests for prompt rendering, output parsing and the HTTP backends
"""

import json
from types import SimpleNamespace

import httpx
import pytest

from tourism_ai.agents.response_synthesizer import ResponseSynthesizer
from tourism_ai.llm.generative_backend import (
    BackendUnavailableError,
    OllamaBackend,
    OpenAIBackend,
    build_backend,
    parse_generation,
    render_prompts,
)


PLAN_CONTEXT = {
    "intent": "travel_plan",
    "language": "pt",
    "city": "Encarnación",
    "user_context": None,
    "places": [{"id": "p1", "name": "Museo", "type": "Turístico", "rating": 5}],
    "days": 3,
}


# ============================================
# Prompts / parsing
# ============================================

def test_render_travel_plan_prompts():
    system, prompt = render_prompts("3 dias", PLAN_CONTEXT)
    assert "Encarnación" in system
    assert "português" in system
    assert "3-day itinerary" in prompt
    assert '"id": "p1"' in prompt
    assert "rating" not in prompt


def test_render_recommendation_prompts_caps_places():
    context = dict(PLAN_CONTEXT, intent="simple", places=[{"id": f"x{i}"} for i in range(10)])
    _, prompt = render_prompts("pizza", context, max_places=2)
    assert '"x1"' in prompt and '"x2"' not in prompt
    assert "travelPlan" not in prompt


@pytest.mark.parametrize("text", [
    '{"message": "hola", "places": []}',
    '```json\n{"message": "hola", "places": []}\n```',
    'Sure! {"message": "hola", "places": []} Enjoy.',
])
def test_parse_generation_tolerates_wrapping(text):
    assert parse_generation(text) == {"message": "hola", "places": []}


@pytest.mark.parametrize("text", ["", "no json", "{not json}", '{"places": []}', "[1, 2]"])
def test_parse_generation_rejects_unusable_output(text):
    with pytest.raises(BackendUnavailableError):
        parse_generation(text)


# ============================================
# Ollama
# ============================================

def ollama(handler) -> OllamaBackend:
    return OllamaBackend(base_url="http://ollama:11434/", transport=httpx.MockTransport(handler))


async def test_ollama_generates():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": '{"message": "olá"}'})

    answer = await ollama(handler).generate("oi", PLAN_CONTEXT)
    assert answer == {"message": "olá"}
    assert seen["url"] == "http://ollama:11434/api/generate"
    assert seen["body"]["format"] == "json"
    assert seen["body"]["stream"] is False


async def test_ollama_http_error_is_unavailable():
    backend = ollama(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(BackendUnavailableError):
        await backend.generate("oi", PLAN_CONTEXT)


async def test_ollama_connection_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUnavailableError):
        await ollama(handler).generate("oi", PLAN_CONTEXT)


@pytest.mark.parametrize("body", [
    {"text": "<html>proxy</html>"},
    {"json": ["not", "an", "object"]},
    {"json": {"response": 42}},
])
async def test_ollama_unusable_body_is_unavailable(body):
    with pytest.raises(BackendUnavailableError):
        await ollama(lambda request: httpx.Response(200, **body)).generate("oi", PLAN_CONTEXT)


async def test_ollama_html_body_falls_back_to_template_plan():
    backend = ollama(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    answer = await ResponseSynthesizer(backend=backend).generate_travel_plan("2 días", None, [], "es")
    assert answer["travelPlan"]["totalDays"] == len(answer["travelPlan"]["days"]) == 2


# ============================================
# Backend selection
# ============================================

def config(**overrides) -> SimpleNamespace:
    values = dict(
        llm_provider="none",
        openai_key=None,
        OPENAI_MODEL="gpt-4o-mini",
        OLLAMA_BASE_URL="http://localhost:11434",
        OLLAMA_MODEL="llama3.2",
        LLM_TIMEOUT_SECONDS=5.0,
        LLM_TEMPERATURE=0.7,
        LLM_MAX_TOKENS=500,
        MAX_PROMPT_PLACES=40,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_build_backend_none():
    assert build_backend(config()) is None


def test_build_backend_openai_without_key():
    assert build_backend(config(llm_provider="openai")) is None


def test_build_backend_openai():
    backend = build_backend(config(llm_provider="openai", openai_key="sk-test"))
    assert isinstance(backend, OpenAIBackend)
    assert backend.model == "gpt-4o-mini"


def test_build_backend_ollama():
    backend = build_backend(config(llm_provider="ollama"))
    assert isinstance(backend, OllamaBackend)
    assert backend.max_tokens == 500
