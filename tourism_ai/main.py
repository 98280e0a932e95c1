"""
Tourism AI Service - FastAPI Application
LLM Provider:
- If OPENAI_API_KEY is set (or LLM_PROVIDER=openai): use OpenAI
- If LLM_PROVIDER=ollama: use Ollama (llama3.2)
- Otherwise: deterministic fallback answers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .agents.chat_engine import build_chat_engine
from .api.chat import router as chat_router
from .api.places import router as places_router
from .interfaces.conversation_store import build_conversation_store
from .interfaces.place_store import InMemoryPlaceStore, build_place_store
from .llm.generative_backend import build_backend
from .schemas.ai_schemas import HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================
# Application Lifespan
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Components already placed on app.state (e.g. by tests) are kept.
    """
    logger.info("=" * 50)
    logger.info("Starting Tourism AI Service")
    logger.info("=" * 50)
    logger.info(f"Environment: {settings.API_ENV}")
    logger.info(f"City: {settings.DEFAULT_CITY}")

    state = app.state
    if getattr(state, "settings", None) is None:
        state.settings = settings
    if getattr(state, "place_store", None) is None:
        state.place_store = build_place_store(state.settings)
    if not hasattr(state, "backend"):
        state.backend = build_backend(state.settings)
    if getattr(state, "conversation_store", None) is None:
        state.conversation_store = build_conversation_store(state.settings)
    if getattr(state, "chat_engine", None) is None:
        state.chat_engine = build_chat_engine(
            place_lookup=state.place_store,
            backend=state.backend,
            history=state.conversation_store,
            config=state.settings
        )

    logger.info(f"LLM Provider: {state.backend.name if state.backend else 'fallback'}")
    logger.info(f"Place store: {type(state.place_store).__name__}")

    yield

    await state.conversation_store.close()
    logger.info("Tourism AI Service shutdown complete")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Tourism AI Service",
    description="Chat recommendation engine for city tourism: place recommendations and travel plans. Supports OpenAI and Ollama.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)
app.include_router(places_router)


# ============================================
# REST Endpoints
# ============================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Tourism AI Service",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": [
            "/api/health",
            "/api/chat/process",
            "/api/chat/session/{session_id}",
            "/api/chat/history",
            "/api/places",
            "/api/places/search",
            "/api/places/ensure"
        ]
    }


@app.get("/api/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Detailed health check"""
    state = request.app.state
    backend = getattr(state, "backend", None)
    place_store = getattr(state, "place_store", None)
    conversation_store = getattr(state, "conversation_store", None)

    if conversation_store is None:
        history_status = "unavailable"
    elif conversation_store.redis_client is not None:
        history_status = "redis"
    else:
        history_status = "memory"

    return HealthResponse(
        version=__version__,
        llm_provider=backend.name if backend else "fallback",
        components={
            "places": (
                "unavailable" if place_store is None
                else "memory" if isinstance(place_store, InMemoryPlaceStore) else "mongodb"
            ),
            "history": history_status,
            "llm": "ready" if backend else "fallback"
        }
    )


# ============================================
# Main
# ============================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tourism_ai.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )
