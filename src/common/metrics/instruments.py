"""
OpenTelemetry metrics for cache observability.

Counts cache hits per layer, misses, per-layer read/write failures and calls
made to the external Places service. Exported via OTLP to an OpenTelemetry
Collector when OTEL_EXPORTER_OTLP_ENDPOINT is set; otherwise the instruments
record into the API's no-op provider.

Metrics are fire-and-forget: if the collector is down, the app continues normally.
"""

import os

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from common.logging_config import get_logger

logger = get_logger("common_metrics")

OTEL_ENDPOINT = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")

_resource = Resource.create({"service.name": "address-lookup"})
_provider = None

if OTEL_ENDPOINT:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

        _exporter = OTLPMetricExporter(endpoint=OTEL_ENDPOINT, insecure=True)
        _reader = PeriodicExportingMetricReader(_exporter, export_interval_millis=5000)
        _provider = MeterProvider(resource=_resource, metric_readers=[_reader])
        metrics.set_meter_provider(_provider)
        logger.info(f"OpenTelemetry metrics enabled, exporting to {OTEL_ENDPOINT}")
    except Exception as e:
        logger.warning(f"OpenTelemetry setup failed (metrics disabled): {e}")
        _provider = None

_meter = metrics.get_meter("address_lookup", version="1.0.0")

cache_hits = _meter.create_counter(
    name="cache.hits",
    description="Queries answered by a cache layer",
    unit="queries",
)

cache_misses = _meter.create_counter(
    name="cache.misses",
    description="Queries no cache layer could answer",
    unit="queries",
)

cache_read_failures = _meter.create_counter(
    name="cache.read_failures",
    description="Cache layer reads that raised",
    unit="errors",
)

cache_write_failures = _meter.create_counter(
    name="cache.write_failures",
    description="Cache layer writes that raised",
    unit="errors",
)

places_external_calls = _meter.create_counter(
    name="places.external_calls",
    description="Requests sent to the external Places service",
    unit="requests",
)

places_stale_responses = _meter.create_counter(
    name="places.stale_responses",
    description="External responses discarded because a newer query was issued",
    unit="responses",
)
