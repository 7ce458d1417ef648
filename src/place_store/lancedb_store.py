"""
LanceDB-backed PlaceStore.

Each namespace is a LanceDB table with one row per record id. Nested
payloads (prediction, raw_place, location) are stored as JSON strings;
fields outside the table schema are folded into a JSON `extra` column so
the store stays schema-agnostic from the caller's point of view.

LanceDB's Python API is blocking, so every operation runs in a worker
thread and read-merge-write sequences are serialized with a lock.
"""

import asyncio
import json
import os
import threading
from typing import Any, Optional

import lancedb
import pyarrow as pa
from lancedb.pydantic import LanceModel

from common.config import DB_PATH
from common.logging_config import get_logger
from place_store.base import PlaceRecord

logger = get_logger("place_store")


class PlaceRow(LanceModel):
    """Table schema for a stored place record."""

    id: str
    normalized_input: Optional[str] = None
    prediction: Optional[str] = None
    raw_place: Optional[str] = None
    formatted_address: Optional[str] = None
    location: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Optional[str] = None


# Columns whose values are JSON-encoded
JSON_COLUMNS = {"prediction", "raw_place", "location", "extra"}
COLUMNS = list(PlaceRow.model_fields.keys())


def _quote(value: str) -> str:
    """Escape a string literal for a LanceDB filter expression."""
    return "'" + value.replace("'", "''") + "'"


def _encode(key: str, record: PlaceRecord) -> dict[str, Any]:
    """Map a record dict to a table row."""
    row: dict[str, Any] = {column: None for column in COLUMNS}
    extra = {}

    for field, value in record.items():
        if field == "id":
            continue
        if field in COLUMNS and field != "extra":
            row[field] = json.dumps(value) if field in JSON_COLUMNS and value is not None else value
        else:
            extra[field] = value

    row["id"] = key
    row["extra"] = json.dumps(extra) if extra else None
    return row


def _decode(row: dict[str, Any]) -> PlaceRecord:
    """Map a table row back to a record dict, dropping unset columns."""
    record: PlaceRecord = {}
    for column in COLUMNS:
        value = row.get(column)
        if value is None or column == "extra":
            continue
        record[column] = json.loads(value) if column in JSON_COLUMNS else value

    if row.get("extra"):
        record.update(json.loads(row["extra"]))
    return record


class LanceDBPlaceStore:
    """PlaceStore persisting records in a local LanceDB database."""

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self._db = None
        self._tables: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _table(self, namespace: str):
        """Open (or create) the table backing a namespace."""
        if namespace in self._tables:
            return self._tables[namespace]

        if self._db is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            self._db = lancedb.connect(self.db_path)
            logger.info(f"Connected to LanceDB at {self.db_path}")

        table = self._db.create_table(namespace, schema=PlaceRow, exist_ok=True)
        self._tables[namespace] = table
        return table

    def _select(self, namespace: str, where: str) -> list[dict[str, Any]]:
        table = self._table(namespace)
        count = table.count_rows(where)
        if count == 0:
            return []
        return table.search().where(where).limit(count).to_list()

    def _query_by_field_sync(self, namespace: str, field: str, value: Any) -> list[PlaceRecord]:
        if field not in COLUMNS or field in JSON_COLUMNS:
            raise ValueError(f"Field '{field}' is not queryable")
        where = f"{field} = {_quote(str(value))}"
        with self._lock:
            rows = self._select(namespace, where)
        return [_decode(row) for row in rows]

    def _get_sync(self, namespace: str, key: str) -> PlaceRecord | None:
        with self._lock:
            rows = self._select(namespace, f"id = {_quote(key)}")
        return _decode(rows[0]) if rows else None

    def _merge_upsert_sync(self, namespace: str, key: str, record: PlaceRecord) -> None:
        with self._lock:
            rows = self._select(namespace, f"id = {_quote(key)}")
            merged = {**_decode(rows[0]), **record} if rows else dict(record)

            data = pa.Table.from_pylist([_encode(key, merged)], schema=PlaceRow.to_arrow_schema())
            table = self._table(namespace)
            (
                table.merge_insert("id")
                .when_matched_update_all()
                .when_not_matched_insert_all()
                .execute(data)
            )
        logger.debug(f"Upserted {namespace}/{key}")

    async def query_by_field(self, namespace: str, field: str, value: Any) -> list[PlaceRecord]:
        return await asyncio.to_thread(self._query_by_field_sync, namespace, field, value)

    async def get(self, namespace: str, key: str) -> PlaceRecord | None:
        return await asyncio.to_thread(self._get_sync, namespace, key)

    async def merge_upsert(self, namespace: str, key: str, record: PlaceRecord) -> None:
        await asyncio.to_thread(self._merge_upsert_sync, namespace, key, record)
