"""
Address Lookup Orchestrator

UI-facing facade for one lookup session:
1. submit_query(): suppress short input, then run the prediction pipeline
2. select_prediction(): resolve the chosen prediction into a place record

All observable results live on a shared SessionState. No cache, store or
service failure is ever raised to the caller.
"""

import asyncio
from typing import Any, TypedDict

from common.config import DEFAULT_NAMESPACE, MIN_QUERY_LENGTH
from common.logging_config import get_logger
from common.normalization import normalize
from place_details.core import ABSENT, DetailResolver
from place_store.base import PlaceStore
from places_client.base import DetailService, PredictionService
from prediction_cache.core import PredictionPipeline, build_pipeline_layers
from prediction_cache.state import SessionState
from prediction_cache.store_layer import create_store_layer
from prediction_cache.types import (
    CacheHitObserver,
    CacheLayer,
    ExternalResultObserver,
    Prediction,
    PredictionSet,
    ResolutionOutcome,
)

logger = get_logger("orchestrator")


class StoreConfig(TypedDict, total=False):
    """Built-in store configuration."""

    store: PlaceStore
    namespace: str


class LookupOptions(TypedDict, total=False):
    """Options recognized by create_address_lookup. Anything else is passed to the service."""

    cache_layers: list[CacheLayer]
    store: StoreConfig
    on_cache_hit: CacheHitObserver
    on_external_result: ExternalResultObserver
    min_query_length: int


RECOGNIZED_OPTIONS = frozenset(LookupOptions.__annotations__)


def split_options(options: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split options into (recognized, pass-through to the prediction service)."""
    recognized = {k: v for k, v in options.items() if k in RECOGNIZED_OPTIONS}
    passthrough = {k: v for k, v in options.items() if k not in RECOGNIZED_OPTIONS}
    return recognized, passthrough


class AddressLookup:
    """
    One lookup session: the prediction pipeline plus detail resolution.

    Selection is guarded by a single in-flight flag. A selection made while
    another one is still resolving returns an absent outcome.
    """

    def __init__(
        self,
        pipeline: PredictionPipeline,
        resolver: DetailResolver,
        min_query_length: int = MIN_QUERY_LENGTH,
    ):
        self.pipeline = pipeline
        self.resolver = resolver
        self.min_query_length = min_query_length
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self.pipeline.state

    async def query(self, text: str | None) -> ResolutionOutcome[PredictionSet]:
        """Run a query to completion. Short input is submitted as a reset."""
        value = text or ""
        self.state.input_value = value

        if len(normalize(value)) < self.min_query_length:
            return await self.pipeline.get_predictions("")
        return await self.pipeline.get_predictions(value)

    def submit_query(self, text: str | None) -> asyncio.Task:
        """
        Fire-and-forget form of query() for UI event handlers.

        Must be called from a running event loop. Effects are observed on
        `state`; the returned task may be awaited but never needs to be.
        """
        task = asyncio.get_running_loop().create_task(self.query(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def select_prediction(
        self, prediction: Prediction | dict | None
    ) -> ResolutionOutcome[dict | None]:
        """
        Resolve a selected prediction into its full place record.

        Args:
            prediction: Prediction (or raw provider dict) chosen by the user

        Returns:
            ResolutionOutcome with the place record, or an absent outcome
        """
        if isinstance(prediction, dict):
            place_id = prediction.get("place_id")
        else:
            place_id = getattr(prediction, "place_id", None)

        if not place_id:
            return ABSENT

        if self.state.selecting:
            logger.warning(f"Selection of '{place_id}' ignored, another selection is in flight")
            return ABSENT

        self.state.selecting = True
        try:
            outcome = await self.resolver.resolve(place_id, self.state.provenance)
        except Exception as e:
            logger.error(f"Detail resolution failed for '{place_id}': {e}")
            outcome = ABSENT
        finally:
            self.state.selecting = False

        if outcome.data is not None:
            self.state.selected_place = outcome.data
        return outcome


def create_address_lookup(
    prediction_service: PredictionService,
    detail_service: DetailService | None = None,
    **options: Any,
) -> AddressLookup:
    """
    Build an AddressLookup from configuration.

    Args:
        prediction_service: External prediction service
        detail_service: External detail service (optional)
        **options: LookupOptions; unrecognized keys are forwarded untouched
            to prediction_service.get_predictions()

    Returns:
        Configured AddressLookup

    Raises:
        ValueError: If layer names collide or the store config has no store
    """
    recognized, passthrough = split_options(options)

    store_config = recognized.get("store")
    store = None
    namespace = DEFAULT_NAMESPACE
    if store_config is not None:
        store = store_config.get("store")
        if store is None:
            raise ValueError("Store configuration requires a 'store' client")
        namespace = store_config.get("namespace") or DEFAULT_NAMESPACE

    store_layer = create_store_layer(store, namespace) if store is not None else None
    layers = build_pipeline_layers(recognized.get("cache_layers"), store_layer)

    pipeline = PredictionPipeline(
        prediction_service,
        layers=layers,
        state=SessionState(),
        on_cache_hit=recognized.get("on_cache_hit"),
        on_external_result=recognized.get("on_external_result"),
        service_options=passthrough,
    )
    resolver = DetailResolver(store=store, detail_service=detail_service, namespace=namespace)

    logger.info(
        f"Address lookup configured: layers={[layer.name for layer in layers]}, namespace={namespace}"
    )
    return AddressLookup(
        pipeline,
        resolver,
        min_query_length=recognized.get("min_query_length", MIN_QUERY_LENGTH),
    )
