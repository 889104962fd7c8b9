"""Observability module for structured logging, Prometheus metrics, and tracing."""

from content_search.observability.context import get_trace_context
from content_search.observability.logging import JsonFormatter, configure_logging
from content_search.observability.metrics import (
    BUILD_WARNING_COUNT,
    INDEX_ITEM_COUNT,
    QUERY_COUNT,
    QUERY_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
    track_query,
)
from content_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "BUILD_WARNING_COUNT",
    "INDEX_ITEM_COUNT",
    "QUERY_COUNT",
    "QUERY_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "track_latency",
    "track_query",
]
