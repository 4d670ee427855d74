"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

DOCUMENTS_PROCESSED = Counter(
    "chkw_documents_processed_total",
    "Documents chunked, by selected strategy",
    labelnames=("strategy",),
    registry=REGISTRY,
)

CHUNKS_PRODUCED = Counter(
    "chkw_chunks_produced_total",
    "Chunks produced by the chunker",
    registry=REGISTRY,
)

PROCESSING_DURATION = Histogram(
    "chkw_processing_duration_seconds",
    "Document extraction and chunking duration",
    registry=REGISTRY,
)

QUERY_LATENCY = Histogram(
    "chkw_query_latency_seconds",
    "Latency of retrieval queries",
    registry=REGISTRY,
)

QUERY_CONFIDENCE = Histogram(
    "chkw_query_confidence",
    "Confidence assigned by the source diversity analyzer",
    buckets=(0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.85),
    registry=REGISTRY,
)

INDEX_SIZE = Gauge(
    "chkw_index_chunks",
    "Number of chunk vectors held in the index",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "DOCUMENTS_PROCESSED",
    "CHUNKS_PRODUCED",
    "PROCESSING_DURATION",
    "QUERY_LATENCY",
    "QUERY_CONFIDENCE",
    "INDEX_SIZE",
    "metrics_response",
]
