# interfaces/place_store.py
"""
Place Store - lookup capability consumed by the chat engine.
Reads from MongoDB when configured, otherwise keeps places in memory.

Places are returned as plain dicts with "id" (never "_id") and a
{"lat", "lng"} location, ready for normalize_place.
"""

import asyncio
import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from loguru import logger
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from ..config import settings
from ..algorithms.place_normalizer import is_coordinate
from ..algorithms.place_types import canonicalize_place_type


SEARCH_FIELDS = ("name", "description", "type", "address", "tags")


class PlaceLookup(ABC):
    """
    Contract for place access used by the engine.
    find_by_id may raise on transport failures; callers decide what to do.
    """

    @abstractmethod
    async def find_by_id(self, place_id: str) -> Optional[Dict[str, Any]]:
        """Return the place with this id (or key), None when unknown"""
        pass

    @abstractmethod
    async def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Return active places

        Args:
            filters: Optional {"type": "<case-insensitive fragment>"}
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive search over name, description, type, address and tags"""
        pass

    @abstractmethod
    async def ensure_place(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Find a place by key (or name + address), creating it when missing"""
        pass


def prepare_place_document(data: Mapping[str, Any], city_center=None) -> Dict[str, Any]:
    """
    Build a storable place from loosely-typed input.
    Missing or non-finite coordinates are replaced by the city center.

    Raises:
        ValueError: when neither key nor name is given
    """
    key = (data.get("key") or data.get("name") or "").strip()
    name = (data.get("name") or data.get("key") or "").strip()
    if not key or not name:
        raise ValueError("key or name required")

    location = data.get("location") or {}
    lat, lng = location.get("lat"), location.get("lng")
    if not is_coordinate(lat) or not is_coordinate(lng):
        lat, lng = city_center or settings.city_center

    return {
        "key": key,
        "name": name,
        "description": (data.get("description") or "").strip() or "Descripción no disponible",
        "type": canonicalize_place_type(data.get("type")).value,
        "address": (data.get("address") or "").strip() or "Dirección por confirmar",
        "location": {"lat": float(lat), "lng": float(lng)},
        "status": "active",
    }


def _matches(place: Mapping[str, Any], pattern: "re.Pattern") -> bool:
    for field_name in SEARCH_FIELDS:
        value = place.get(field_name)
        values = value if isinstance(value, list) else [value]
        if any(isinstance(v, str) and pattern.search(v) for v in values):
            return True
    return False


# ============================================
# In-memory store
# ============================================

class InMemoryPlaceStore(PlaceLookup):
    """
    Dict-backed store used in development and tests.
    """

    def __init__(self, places: Optional[Iterable[Mapping[str, Any]]] = None, city_center=None):
        self.city_center = city_center or settings.city_center
        self._places: Dict[str, Dict[str, Any]] = {}
        for place in places or []:
            self.add_place(place)

    def add_place(self, place: Mapping[str, Any]) -> Dict[str, Any]:
        """Store a place as-is, assigning an id when it has none"""
        stored = dict(place)
        place_id = str(stored.pop("_id", None) or stored.get("id") or uuid.uuid4().hex)
        stored["id"] = place_id
        self._places[place_id] = stored
        return dict(stored)

    def _active(self) -> List[Dict[str, Any]]:
        return [p for p in self._places.values() if p.get("status", "active") == "active"]

    async def find_by_id(self, place_id: str) -> Optional[Dict[str, Any]]:
        place = self._places.get(place_id)
        if place is None:
            place = next((p for p in self._places.values() if p.get("key") == place_id), None)
        return dict(place) if place is not None else None

    async def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        places = self._active()
        type_filter = (filters or {}).get("type")
        if type_filter:
            pattern = re.compile(re.escape(type_filter), re.IGNORECASE)
            places = [p for p in places if isinstance(p.get("type"), str) and pattern.search(p["type"])]
        return [dict(p) for p in places]

    async def search(self, query: str) -> List[Dict[str, Any]]:
        pattern = re.compile(re.escape(query.strip()), re.IGNORECASE)
        return [dict(p) for p in self._active() if _matches(p, pattern)]

    async def ensure_place(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        document = prepare_place_document(data, self.city_center)
        for place in self._places.values():
            if place.get("key") == document["key"] or (
                place.get("name") == document["name"] and place.get("address") == document["address"]
            ):
                return dict(place)
        document["created_at"] = datetime.now(timezone.utc).isoformat()
        created = self.add_place(document)
        logger.info(f"Created place {created['id']} ({created['key']})")
        return created


# ============================================
# MongoDB store
# ============================================

class MongoPlaceStore(PlaceLookup):
    """
    Places collection in MongoDB (GeoJSON locations, soft-deleted via status).
    pymongo is synchronous; calls run in a worker thread.
    """

    def __init__(self, mongo_uri: str, mongo_db: str, collection: str = "places", city_center=None):
        self.city_center = city_center or settings.city_center
        self.mongo_client = MongoClient(mongo_uri, serverSelectionTimeoutMS=3000)
        self.collection = self.mongo_client[mongo_db][collection]
        logger.info(f"MongoPlaceStore using {mongo_db}.{collection}")

    def ping(self) -> bool:
        """Check MongoDB is reachable"""
        try:
            self.mongo_client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    @staticmethod
    def _document_to_place(document: Mapping[str, Any]) -> Dict[str, Any]:
        """Convert a MongoDB document to the engine's place dict"""
        place = {k: v for k, v in document.items() if k not in ("_id", "__v")}
        place["id"] = str(document.get("_id"))

        location = document.get("location")
        if isinstance(location, Mapping) and isinstance(location.get("coordinates"), list):
            coordinates = location["coordinates"]
            if len(coordinates) == 2:
                # GeoJSON stores [lng, lat]
                place["location"] = {"lat": coordinates[1], "lng": coordinates[0]}
        return place

    @staticmethod
    def _id_query(place_id: str) -> Dict[str, Any]:
        try:
            return {"$or": [{"_id": ObjectId(place_id)}, {"key": place_id}]}
        except (InvalidId, TypeError):
            return {"$or": [{"_id": place_id}, {"key": place_id}]}

    async def find_by_id(self, place_id: str) -> Optional[Dict[str, Any]]:
        document = await asyncio.to_thread(self.collection.find_one, self._id_query(place_id))
        return self._document_to_place(document) if document else None

    async def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"status": "active"}
        type_filter = (filters or {}).get("type")
        if type_filter:
            query["type"] = {"$regex": re.escape(type_filter), "$options": "i"}

        def _find():
            cursor = self.collection.find(query).sort([("rating.average", DESCENDING), ("metadata.views", DESCENDING)])
            return [self._document_to_place(doc) for doc in cursor]

        return await asyncio.to_thread(_find)

    async def search(self, query: str) -> List[Dict[str, Any]]:
        regex = {"$regex": re.escape(query.strip()), "$options": "i"}
        mongo_query = {
            "$and": [
                {"status": "active"},
                {"$or": [{field_name: regex} for field_name in SEARCH_FIELDS]},
            ]
        }

        def _find():
            return [self._document_to_place(doc) for doc in self.collection.find(mongo_query)]

        return await asyncio.to_thread(_find)

    async def ensure_place(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        document = prepare_place_document(data, self.city_center)
        existing = await asyncio.to_thread(self.collection.find_one, {
            "$or": [
                {"key": document["key"]},
                {"$and": [{"name": document["name"]}, {"address": document["address"]}]},
            ]
        })
        if existing:
            return self._document_to_place(existing)

        lat, lng = document["location"]["lat"], document["location"]["lng"]
        document["location"] = {"type": "Point", "coordinates": [lng, lat]}
        document["createdAt"] = datetime.now(timezone.utc)
        result = await asyncio.to_thread(self.collection.insert_one, document)
        document["_id"] = result.inserted_id
        logger.info(f"Created place {result.inserted_id} ({document['key']})")
        return self._document_to_place(document)


def build_place_store(config) -> PlaceLookup:
    """
    Pick the place store for the given settings.
    Falls back to an empty in-memory store when MongoDB is not configured or unreachable.
    """
    if config.MONGO_URI:
        try:
            store = MongoPlaceStore(
                config.MONGO_URI,
                config.MONGO_DB,
                config.MONGO_PLACES_COLLECTION,
                city_center=config.city_center
            )
            if store.ping():
                return store
        except PyMongoError as e:
            logger.warning(f"MongoPlaceStore init failed: {e}")
        logger.warning("MongoDB not available, using in-memory place store")
    return InMemoryPlaceStore(city_center=config.city_center)
