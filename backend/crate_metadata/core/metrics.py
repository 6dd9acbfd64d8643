"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_COUNT = Counter(
    "crateq_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "method", "status"),
    registry=REGISTRY,
)

REQUEST_LATENCY = Histogram(
    "crateq_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("endpoint", "method"),
    registry=REGISTRY,
)

LOOKUP_FAILURES = Counter(
    "crateq_lookup_failures_total",
    "Queries the snapshot store could not execute",
    labelnames=("endpoint",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "LOOKUP_FAILURES",
    "metrics_response",
]
