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

RUN_COUNT = Counter(
    "pgi_runs_total",
    "Ingest runs by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

RUN_DURATION = Histogram(
    "pgi_run_duration_seconds",
    "Wall time of a complete ingest run",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "RUN_COUNT",
    "RUN_DURATION",
    "metrics_response",
]
