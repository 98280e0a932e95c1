# tourism_ai/__init__.py
"""
Tourism AI Service Package

A chat recommendation engine for a city tourism platform:
- Language detection (es / pt / en)
- Intent classification (simple recommendation vs travel plan)
- Generative answers with deterministic fallbacks
- Place normalization and reference resolution
- Per-session conversation history
"""

__version__ = "1.0.0"

# Package structure:
# tourism_ai/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# │
# ├── agents/               <- Chat orchestration
# │   ├── chat_engine.py    <- One chat turn, end to end
# │   ├── response_synthesizer.py <- Backend answer or fallback
# │   └── fallback_templates.py   <- Seed places and day slots
# │
# ├── api/                  <- FastAPI Routers
# │   ├── chat.py           <- /api/chat
# │   └── places.py         <- /api/places
# │
# ├── interfaces/           <- Data Stores
# │   ├── place_store.py    <- Places (MongoDB / memory)
# │   └── conversation_store.py <- Chat history (Redis / memory)
# │
# ├── llm/                  <- Message understanding and generation
# │   ├── language_detector.py
# │   ├── intent_classifier.py
# │   ├── prompts.py
# │   └── generative_backend.py
# │
# ├── schemas/              <- Pydantic Models
# │   └── ai_schemas.py
# │
# └── algorithms/           <- Place canonicalization
#     ├── place_types.py
#     ├── place_normalizer.py
#     └── response_normalizer.py
