"""Shared pytest fixtures and fakes for all tests."""

import asyncio

import pytest

from place_store.memory import InMemoryPlaceStore
from prediction_cache.types import CacheLayer, Prediction


def make_prediction(place_id: str | None, description: str, **extra) -> Prediction:
    """Build a Prediction the way the Places API would return it."""
    return Prediction(place_id=place_id, description=description, extra=extra)


MAIN_ST_PREDICTIONS = [
    make_prediction("place-main-1", "123 Main St, Springfield, IL, USA", types=["street_address"]),
    make_prediction("place-main-2", "123 Main St, Shelbyville, IL, USA", types=["street_address"]),
]

PARIS_PREDICTIONS = [
    make_prediction("place-paris", "Paris, France", types=["locality"]),
]

MAIN_ST_DETAIL = {
    "place_id": "place-main-1",
    "formatted_address": "123 Main St, Springfield, IL 62701, USA",
    "geometry": {"location": {"lat": 39.7990, "lng": -89.6440}},
    "name": "123 Main St",
}


class FakePredictionService:
    """
    In-memory PredictionService.

    Responses are keyed by raw input. A response may be an exception, which
    is raised. Inputs listed in `gates` wait for their asyncio.Event first.
    """

    def __init__(self, responses: dict | None = None, gates: dict | None = None):
        self.responses = responses or {}
        self.gates = gates or {}
        self.calls: list[tuple[str, dict]] = []

    async def get_predictions(self, raw_input: str, **options):
        self.calls.append((raw_input, options))
        if raw_input in self.gates:
            await self.gates[raw_input].wait()
        if not raw_input.strip():
            return []

        response = self.responses.get(raw_input, [])
        if isinstance(response, Exception):
            raise response
        return list(response)

    @property
    def lookups(self) -> list[str]:
        """Non-reset inputs the service was asked for."""
        return [raw for raw, _ in self.calls if raw.strip()]


class FakeDetailService:
    """In-memory DetailService keyed by place_id."""

    def __init__(self, details: dict | None = None, status: str = "OK", error: Exception | None = None):
        self.details = details or {}
        self.status = status
        self.error = error
        self.calls: list[str] = []

    async def get_details(self, place_id: str):
        self.calls.append(place_id)
        if self.error is not None:
            raise self.error
        if self.status != "OK":
            return self.status, None
        detail = self.details.get(place_id)
        return ("OK", detail) if detail else ("NOT_FOUND", None)


class RecordingLayer:
    """A cache layer that records reads and writes, with optional failures."""

    def __init__(
        self,
        name: str,
        data: dict | None = None,
        fail_read: bool = False,
        fail_write: bool = False,
        sync: bool = False,
    ):
        self.name = name
        self.data = data or {}
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.sync = sync
        self.reads: list[str] = []
        self.writes: list[tuple[str, list]] = []

    def _read(self, key):
        self.reads.append(key)
        if self.fail_read:
            raise RuntimeError(f"{self.name} read unavailable")
        return self.data.get(key)

    def _write(self, key, predictions):
        self.writes.append((key, predictions))
        if self.fail_write:
            raise RuntimeError(f"{self.name} write unavailable")
        self.data[key] = predictions

    async def _read_async(self, key):
        return self._read(key)

    async def _write_async(self, key, predictions):
        self._write(key, predictions)

    def as_layer(self, read: bool = True, write: bool = True) -> CacheLayer:
        return CacheLayer(
            name=self.name,
            read=(self._read if self.sync else self._read_async) if read else None,
            write=(self._write if self.sync else self._write_async) if write else None,
        )


class FailingStore(InMemoryPlaceStore):
    """Store whose operations raise on demand."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def query_by_field(self, namespace, field, value):
        if self.fail_reads:
            raise ConnectionError("store offline")
        return await super().query_by_field(namespace, field, value)

    async def get(self, namespace, key):
        if self.fail_reads:
            raise ConnectionError("store offline")
        return await super().get(namespace, key)

    async def merge_upsert(self, namespace, key, record):
        if self.fail_writes:
            raise ConnectionError("store offline")
        await super().merge_upsert(namespace, key, record)


def run(coro):
    """Drive a coroutine to completion in a fresh event loop."""
    return asyncio.run(coro)


@pytest.fixture
def store() -> InMemoryPlaceStore:
    return InMemoryPlaceStore()


@pytest.fixture
def prediction_service() -> FakePredictionService:
    return FakePredictionService(
        {
            "123 Main": MAIN_ST_PREDICTIONS,
            "Paris": PARIS_PREDICTIONS,
        }
    )


@pytest.fixture
def detail_service() -> FakeDetailService:
    return FakeDetailService({"place-main-1": MAIN_ST_DETAIL})
