"""Prometheus metrics for query and index-build observability."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


QUERY_LATENCY = Histogram(
    "content_search_query_latency_seconds",
    "Query latency in seconds",
    ["operation"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

QUERY_COUNT = Counter(
    "content_search_queries_total",
    "Total queries served",
    ["operation", "status"],
)

INDEX_ITEM_COUNT = Gauge(
    "content_search_index_items",
    "Items in the most recently built index",
)

INDEX_BUILD_LATENCY = Histogram(
    "content_search_index_build_seconds",
    "Index build duration in seconds",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

BUILD_WARNING_COUNT = Counter(
    "content_search_build_warnings_total",
    "Corpus records skipped during index builds",
    ["kind"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        target = histogram.labels(**labels) if labels else histogram
        target.observe(time.perf_counter() - start)


@contextmanager
def track_query(operation: str) -> Generator[None, None, None]:
    """Record latency plus an ok/error outcome for one query call."""
    status = "error"
    try:
        with track_latency(QUERY_LATENCY, operation=operation):
            yield
        status = "ok"
    finally:
        QUERY_COUNT.labels(operation=operation, status=status).inc()


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST
