"""In-process PlaceStore, used for tests and as a session-scoped store."""

import copy
from typing import Any

from common.logging_config import get_logger
from place_store.base import PlaceRecord

logger = get_logger("place_store")


class InMemoryPlaceStore:
    """Dict-backed store. Records are deep-copied in and out."""

    def __init__(self):
        self._namespaces: dict[str, dict[str, PlaceRecord]] = {}

    async def query_by_field(self, namespace: str, field: str, value: Any) -> list[PlaceRecord]:
        records = self._namespaces.get(namespace, {})
        return [copy.deepcopy(r) for r in records.values() if r.get(field) == value]

    async def get(self, namespace: str, key: str) -> PlaceRecord | None:
        record = self._namespaces.get(namespace, {}).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def merge_upsert(self, namespace: str, key: str, record: PlaceRecord) -> None:
        records = self._namespaces.setdefault(namespace, {})
        merged = {**records.get(key, {}), **copy.deepcopy(record)}
        records[key] = merged
        logger.debug(f"Upserted {namespace}/{key}")

    def count(self, namespace: str) -> int:
        """Number of records in a namespace."""
        return len(self._namespaces.get(namespace, {}))
