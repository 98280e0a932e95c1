"""
Data Import Script for the Tourism AI Service
Imports places from a JSON or CSV file into MongoDB

Expected columns / keys: key, name, description, type, address and either
a location object ({"lat", "lng"}) or lat / lng columns. Types are
canonicalized and locations stored as GeoJSON points; places that already
exist (same key, or same name and address) are left untouched.

Usage:
    python data/import_places.py places.csv
    MONGO_URI=mongodb://localhost:27017 python data/import_places.py places.json
"""

import asyncio
import os
import sys
from typing import Any, Dict, List

import pandas as pd

from tourism_ai.config import settings
from tourism_ai.interfaces.place_store import MongoPlaceStore

# MongoDB connection
MONGO_URI = settings.MONGO_URI or "mongodb://localhost:27017"


def load_rows(filepath: str) -> List[Dict[str, Any]]:
    """Read a JSON or CSV file into a list of place dicts"""
    if filepath.lower().endswith(".json"):
        df = pd.read_json(filepath)
    else:
        df = pd.read_csv(filepath)
    print(f"Loaded {len(df)} rows from {filepath}")

    rows = []
    for _, row in df.iterrows():
        place = {k: v for k, v in row.items() if not isinstance(v, (dict, list)) and pd.notna(v)}
        if isinstance(row.get("location"), dict):
            place["location"] = row["location"]
        elif pd.notna(row.get("lat")) and pd.notna(row.get("lng")):
            place["location"] = {"lat": float(row["lat"]), "lng": float(row["lng"])}
        place.pop("lat", None)
        place.pop("lng", None)
        if isinstance(row.get("tags"), list):
            place["tags"] = row["tags"]
        rows.append(place)
    return rows


async def import_places(store: MongoPlaceStore, rows: List[Dict[str, Any]]) -> int:
    """Ensure every row; returns the number of rows processed"""
    count = 0
    for row in rows:
        try:
            await store.ensure_place(row)
            count += 1
        except ValueError as e:
            print(f"Skipping row {row!r}: {e}")
    return count


def main():
    """Main import function"""
    print("=" * 60)
    print("Tourism Places Import Script")
    print("=" * 60)

    if len(sys.argv) < 2:
        print("Usage: python data/import_places.py <places.json|places.csv>")
        sys.exit(1)

    filepath = sys.argv[1]
    if not os.path.exists(filepath):
        print(f"Error: {filepath} not found")
        sys.exit(1)

    store = MongoPlaceStore(
        MONGO_URI,
        settings.MONGO_DB,
        settings.MONGO_PLACES_COLLECTION,
        city_center=settings.city_center
    )
    if not store.ping():
        print(f"Error: cannot reach MongoDB at {MONGO_URI}")
        sys.exit(1)
    print(f"Connected to MongoDB: {MONGO_URI}/{settings.MONGO_DB}")

    total = asyncio.run(import_places(store, load_rows(filepath)))

    print("\n" + "=" * 60)
    print(f"Import Complete! Total places processed: {total}")
    print("=" * 60)

    print("\nPlaces (first 5):")
    for doc in store.collection.find({"status": "active"}).limit(5):
        print(f"  {doc.get('key')}: {doc.get('type')} | {doc.get('address')}")


if __name__ == "__main__":
    main()
