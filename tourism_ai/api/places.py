# api/places.py
"""
Places API Endpoint
Read access to the place inventory plus find-or-create for places that
arrive from the chat (e.g. a recommended place the user saves).

All places are returned in canonical form (normalize_place).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from loguru import logger

from ..algorithms.place_normalizer import normalize_place
from ..interfaces.place_store import PlaceLookup
from ..schemas.ai_schemas import EnsurePlaceRequest, Place


router = APIRouter(prefix="/api/places", tags=["places"])


def get_place_store(request: Request) -> PlaceLookup:
    return request.app.state.place_store


def get_city_center(request: Request):
    return request.app.state.settings.city_center


# ============================================
# API Endpoints
# ============================================

@router.get("", response_model=List[Place])
async def list_places(
    type: Optional[str] = Query(None, description="Filter by place type, e.g. Gastronomía"),
    store: PlaceLookup = Depends(get_place_store),
    city_center=Depends(get_city_center)
):
    """
    List active places, optionally filtered by type.
    """
    places = await store.find_all({"type": type} if type else None)
    return [normalize_place(place, city_center) for place in places]


@router.get("/search", response_model=List[Place])
async def search_places(
    q: str = Query("", description="Text matched against name, description, type, address and tags"),
    store: PlaceLookup = Depends(get_place_store),
    city_center=Depends(get_city_center)
):
    """
    Search active places by free text.
    """
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter q is required")

    places = await store.search(q)
    logger.info(f"Place search '{q}': {len(places)} results")
    return [normalize_place(place, city_center) for place in places]


@router.get("/{place_id}", response_model=Place)
async def get_place(
    place_id: str,
    store: PlaceLookup = Depends(get_place_store),
    city_center=Depends(get_city_center)
):
    """
    Get a place by id (or key).
    """
    place = await store.find_by_id(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Place {place_id} not found")
    return normalize_place(place, city_center)


@router.post("/ensure", response_model=Place)
async def ensure_place(
    body: EnsurePlaceRequest,
    store: PlaceLookup = Depends(get_place_store),
    city_center=Depends(get_city_center)
):
    """
    Return the matching place (same key, or same name and address),
    creating it when it does not exist yet.
    """
    try:
        place = await store.ensure_place(body.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return normalize_place(place, city_center)
