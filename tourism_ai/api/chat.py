# api/chat.py
"""
Chat API Endpoint
Conversational interface of the tourism assistant.

Example messages:
- "¿Dónde puedo comer buena pizza?"         -> places
- "Quiero un plan de 3 días en Encarnación"  -> travelPlan
- "Where can I stay near the beach?"         -> places

Anonymous callers get answers without history; sending X-User-Id turns on
per-session history and the response carries a sessionId.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ..agents.chat_engine import ChatEngine, ChatProcessingError, InvalidMessageError
from ..interfaces.conversation_store import ConversationStore
from ..llm.language_detector import language_config
from ..schemas.ai_schemas import ChatRequest, ChatResponse, ChatSession, utc_timestamp


router = APIRouter(prefix="/api/chat", tags=["chat"])


# ============================================
# Dependencies
# ============================================

def get_chat_engine(request: Request) -> ChatEngine:
    return request.app.state.chat_engine


def get_conversation_store(request: Request) -> ConversationStore:
    return request.app.state.conversation_store


# ============================================
# API Endpoints
# ============================================

@router.post("/process", response_model=ChatResponse, response_model_exclude_none=True)
async def process_chat(
    body: ChatRequest,
    x_user_id: Optional[str] = Header(None, description="Authenticated user id"),
    engine: ChatEngine = Depends(get_chat_engine)
):
    """
    Process a chat message.

    Returns either a list of recommended places or a day-by-day travel
    plan, phrased in the language of the message.
    """
    logger.info(f"Chat request: user={x_user_id or 'anonymous'}, message={body.message[:50]}...")

    try:
        return await engine.process_message(
            body.message,
            context=body.context,
            session_id=body.session_id,
            user_id=x_user_id
        )
    except InvalidMessageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ChatProcessingError as e:
        logger.error(f"Chat error: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "message": language_config(e.language).apology,
                "language": e.language,
                "timestamp": utc_timestamp()
            }
        )


@router.get("/session/{session_id}", response_model=ChatSession)
async def get_session(
    session_id: str,
    store: ConversationStore = Depends(get_conversation_store)
):
    """
    Get conversation history for a session.
    """
    messages = await store.get_history(session_id)
    if not messages:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")

    return ChatSession(
        session_id=session_id,
        user_id=messages[0].user_id,
        messages=messages,
        started_at=messages[0].timestamp,
        last_activity=messages[-1].timestamp
    )


@router.get("/history")
async def list_user_sessions(
    user_id: str = Query(..., min_length=1, description="User ID"),
    store: ConversationStore = Depends(get_conversation_store)
):
    """
    List the session ids a user has talked in.
    """
    sessions = await store.get_user_sessions(user_id)
    return {"userId": user_id, "sessions": sessions, "count": len(sessions)}


@router.delete("/session/{session_id}")
async def clear_session(
    session_id: str,
    store: ConversationStore = Depends(get_conversation_store)
):
    """
    Clear a chat session.
    """
    removed = await store.clear_session(session_id)
    return {
        "status": "cleared",
        "sessionId": session_id,
        "removed": removed
    }
