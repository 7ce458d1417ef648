"""
Prediction Pipeline

Resolves a query into predictions, cache first:
1. Normalize the query into a cache key
2. Probe each cache layer in configured order; the first non-empty hit wins
3. On a miss, ask the external prediction service
4. Write non-empty external results back to every layer exposing write()

Every query takes a generation number. Results belonging to a superseded
generation are never committed to the session state, so a slow response
for an old keystroke cannot overwrite a newer one.
"""

import asyncio
import inspect
from typing import Any

from common.logging_config import get_logger
from common.metrics import (
    cache_hits,
    cache_misses,
    cache_read_failures,
    cache_write_failures,
    places_external_calls,
    places_stale_responses,
)
from common.normalization import normalize
from places_client.base import PredictionService
from prediction_cache.state import SessionState
from prediction_cache.types import (
    CacheHitObserver,
    CacheLayer,
    ExternalResultObserver,
    PredictionSet,
    ResolutionOutcome,
)

logger = get_logger("prediction_cache")


async def maybe_await(value: Any) -> Any:
    """Await `value` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


def build_pipeline_layers(
    custom_layers: list[CacheLayer] | None, store_layer: CacheLayer | None
) -> list[CacheLayer]:
    """Order layers: user-supplied first, built-in store layer last."""
    layers = list(custom_layers or [])
    if store_layer is not None:
        layers.append(store_layer)

    names = [layer.name for layer in layers]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Cache layer names must be unique, duplicated: {', '.join(duplicates)}")
    return layers


class PredictionPipeline:
    """
    Cache-first prediction resolution for one lookup session.

    Layers are fixed at construction. The pipeline writes its results into
    a SessionState and also returns them to the caller.
    """

    def __init__(
        self,
        prediction_service: PredictionService,
        layers: list[CacheLayer] | None = None,
        state: SessionState | None = None,
        on_cache_hit: CacheHitObserver | None = None,
        on_external_result: ExternalResultObserver | None = None,
        service_options: dict[str, Any] | None = None,
    ):
        self.layers: tuple[CacheLayer, ...] = tuple(build_pipeline_layers(layers, None))
        self.state = state if state is not None else SessionState()
        self._service = prediction_service
        self._on_cache_hit = on_cache_hit
        self._on_external_result = on_external_result
        self._service_options = dict(service_options or {})
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of queries issued so far."""
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def get_predictions(self, text: str | None) -> ResolutionOutcome[PredictionSet]:
        """
        Resolve a query into predictions.

        Args:
            text: Raw query as typed by the user

        Returns:
            ResolutionOutcome with the predictions and which layer answered.
            Never raises for cache or service failures.
        """
        self._generation += 1
        generation = self._generation

        value = text or ""
        key = normalize(value)
        self.state.last_query = value

        if not key:
            self.state.reset_predictions()
            await self._forward_reset(value)
            return ResolutionOutcome(data=[])

        self.state.predictions_loading = True

        hit = await self._probe_layers(key)
        if hit is not None:
            layer_name, predictions = hit
            cache_hits.add(1, attributes={"layer": layer_name})

            if not self._is_current(generation):
                logger.debug(f"Dropping cache hit for superseded query '{value}'")
                return ResolutionOutcome(data=predictions, from_cache=True, layer_name=layer_name)

            self.state.predictions = predictions
            self.state.predictions_loading = False
            self.state.set_provenance(True, layer_name)
            logger.info(f"Cache hit for '{key}' from layer '{layer_name}' ({len(predictions)} predictions)")

            await self._notify(self._on_cache_hit, layer_name, value, predictions)
            return ResolutionOutcome(data=predictions, from_cache=True, layer_name=layer_name)

        cache_misses.add(1)
        logger.info(f"Cache miss for '{key}', querying external service")
        if self._is_current(generation):
            self.state.set_provenance(False, None)
            self.state.pending_external_query = value

        predictions = await self._fetch_external(value)

        if self._is_current(generation):
            self.state.predictions = predictions
            self.state.predictions_loading = False
            self.state.pending_external_query = None
        else:
            places_stale_responses.add(1)
            logger.info(f"Discarding stale external response for '{value}'")

        if predictions:
            await self._write_back(key, predictions)
            await self._notify(self._on_external_result, value, predictions)

        return ResolutionOutcome(data=predictions, from_cache=False, layer_name=None)

    async def _probe_layers(self, key: str) -> tuple[str, PredictionSet] | None:
        """Return (layer name, predictions) for the first layer with a non-empty hit."""
        for layer in self.layers:
            if layer.read is None:
                continue

            try:
                result = await maybe_await(layer.read(key))
            except Exception as e:
                cache_read_failures.add(1, attributes={"layer": layer.name})
                logger.warning(f"Cache layer '{layer.name}' read failed: {e}")
                continue

            if result:
                return layer.name, list(result)

        return None

    async def _fetch_external(self, value: str) -> PredictionSet:
        places_external_calls.add(1, attributes={"endpoint": "autocomplete"})
        try:
            result = await self._service.get_predictions(value, **self._service_options)
        except Exception as e:
            logger.error(f"External prediction service failed for '{value}': {e}")
            return []
        return list(result or [])

    async def _forward_reset(self, value: str) -> None:
        """Let the external service reset its own state on empty input."""
        try:
            await self._service.get_predictions(value, **self._service_options)
        except Exception as e:
            logger.warning(f"External prediction service reset failed: {e}")

    async def _write_layer(self, layer: CacheLayer, key: str, predictions: PredictionSet) -> None:
        try:
            await maybe_await(layer.write(key, predictions))
        except Exception as e:
            cache_write_failures.add(1, attributes={"layer": layer.name})
            logger.warning(f"Cache layer '{layer.name}' write failed: {e}")

    async def _write_back(self, key: str, predictions: PredictionSet) -> None:
        """Write external predictions to every layer exposing write(), concurrently."""
        writers = [layer for layer in self.layers if layer.write is not None]
        if not writers:
            return

        await asyncio.gather(*(self._write_layer(layer, key, list(predictions)) for layer in writers))
        logger.debug(f"Wrote {len(predictions)} predictions for '{key}' to {len(writers)} layers")

    async def _notify(self, callback, *args) -> None:
        if callback is None:
            return
        try:
            await maybe_await(callback(*args))
        except Exception as e:
            logger.warning(f"Observer callback failed: {e}")
