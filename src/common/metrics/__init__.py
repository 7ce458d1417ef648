"""OpenTelemetry metrics for cache observability."""

from common.metrics.instruments import (
    cache_hits,
    cache_misses,
    cache_read_failures,
    cache_write_failures,
    places_external_calls,
    places_stale_responses,
)

__all__ = [
    "cache_hits",
    "cache_misses",
    "cache_read_failures",
    "cache_write_failures",
    "places_external_calls",
    "places_stale_responses",
]
