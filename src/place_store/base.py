"""
Persistent store contract.

A namespaced key-value/query store. Records are plain dicts keyed by a
string id within a namespace. Writes use merge semantics: fields present in
the new record overwrite, fields absent from it are kept.
"""

from datetime import datetime, timezone
from typing import Any, Protocol

PlaceRecord = dict[str, Any]


class PlaceStore(Protocol):
    """Operations the cache layer and detail resolver need from a store."""

    async def query_by_field(self, namespace: str, field: str, value: Any) -> list[PlaceRecord]:
        """Return every record in `namespace` whose `field` equals `value`."""
        ...

    async def get(self, namespace: str, key: str) -> PlaceRecord | None:
        """Return the record stored under `key`, or None."""
        ...

    async def merge_upsert(self, namespace: str, key: str, record: PlaceRecord) -> None:
        """Insert `record` under `key`, merging into any existing record."""
        ...


def utc_timestamp() -> str:
    """ISO-8601 timestamp used for `updated_at` fields."""
    return datetime.now(timezone.utc).isoformat()
