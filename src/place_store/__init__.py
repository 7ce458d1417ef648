"""Persistent stores for cached predictions and place details."""

from place_store.base import PlaceRecord, PlaceStore, utc_timestamp
from place_store.lancedb_store import LanceDBPlaceStore
from place_store.memory import InMemoryPlaceStore

__all__ = [
    "PlaceRecord",
    "PlaceStore",
    "utc_timestamp",
    "InMemoryPlaceStore",
    "LanceDBPlaceStore",
]
