# schemas/ai_schemas.py
"""
Pydantic v2 schemas for the Tourism AI chat service
Wire format uses camelCase (dayNumber, travelPlan, sessionId); Python code
uses snake_case attributes. Models accept both on input.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any, Union, Literal
from datetime import datetime, timezone
from enum import Enum


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================
# Enums
# ============================================

class PlaceType(str, Enum):
    """Closed set of place categories stored in the places collection"""
    LODGING = "Alojamiento"
    GASTRONOMY = "Gastronomía"   # general food bucket, the default
    TOURISM = "Turístico"
    SHOPPING = "Compras"
    ENTERTAINMENT = "Entretenimiento"
    BREAKFAST = "Desayunos y meriendas"
    FOOD = "Comida"


class Intent(str, Enum):
    SIMPLE = "simple"
    TRAVEL_PLAN = "travel_plan"


class Language(str, Enum):
    SPANISH = "es"
    ENGLISH = "en"
    PORTUGUESE = "pt"


# ============================================
# Places
# ============================================

class Location(BaseModel):
    """Plain lat/lng pair (the UI map consumes this shape)"""
    lat: float
    lng: float


class Place(BaseModel):
    """Canonical place shape returned to the client"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    key: str
    name: str
    description: str
    address: str
    type: PlaceType
    location: Location
    category: Optional[str] = None


# ============================================
# Travel Plan
# ============================================

class Activity(BaseModel):
    """One time slot of a day; place may still be a bare id before resolution"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    time: str = ""
    category: str = ""
    place: Union[Place, str]


class Day(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    day_number: int = Field(..., alias="dayNumber", ge=1)
    title: str = ""
    activities: List[Activity] = Field(default_factory=list)


class TravelPlan(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_days: int = Field(..., alias="totalDays", ge=0)
    days: List[Day] = Field(default_factory=list)


# ============================================
# Chat
# ============================================

class ChatRequest(BaseModel):
    """Inbound chat message"""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., max_length=2000, description="User's message")
    context: Optional[str] = Field(None, max_length=2000, description="Free-text context (e.g. current map view)")
    session_id: Optional[str] = Field(None, alias="sessionId", description="Session ID for history continuity")


class ChatResponse(BaseModel):
    """Normalized engine response"""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    places: Optional[List[Place]] = None
    travel_plan: Optional[TravelPlan] = Field(None, alias="travelPlan")
    session_id: Optional[str] = Field(None, alias="sessionId")
    language: Optional[Language] = None
    intent: Optional[Intent] = None
    timestamp: str = Field(default_factory=utc_timestamp)


class ChatMessage(BaseModel):
    """Single entry of a session's conversation history"""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    user_id: str = Field(..., alias="userId")
    sender: Literal["user", "bot"]
    text: str
    context: Optional[str] = None
    response: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=utc_timestamp)


class ChatSession(BaseModel):
    """Conversation history of a session"""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    user_id: Optional[str] = Field(None, alias="userId")
    messages: List[ChatMessage] = Field(default_factory=list)
    started_at: Optional[str] = Field(None, alias="startedAt")
    last_activity: Optional[str] = Field(None, alias="lastActivity")


# ============================================
# Places API
# ============================================

class EnsurePlaceRequest(BaseModel):
    """Find-or-create payload; any field may be missing or free-text"""
    key: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "tourism-ai"
    version: str
    llm_provider: str
    components: Dict[str, str] = Field(default_factory=dict)
    timestamp: str = Field(default_factory=utc_timestamp)
