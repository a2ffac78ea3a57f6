"""Prometheus metrics for search latency, outcomes and index state."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


if TYPE_CHECKING:
    from collections.abc import Generator


SEARCH_LATENCY = Histogram(
    "content_search_latency_seconds",
    "Search query latency",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.2, 0.5, 1.0),
)

SEARCH_COUNT = Counter(
    "content_search_queries_total",
    "Search queries by outcome",
    ["outcome"],
)

INDEX_DOC_COUNT = Gauge(
    "content_search_index_documents",
    "Documents in the active corpus generation",
)

INDEX_BUILDS = Counter(
    "content_search_index_builds_total",
    "Corpus generations published",
)

HISTORY_FAILURES = Counter(
    "content_search_history_failures_total",
    "Search history persistence failures",
    ["operation"],
)


@contextmanager
def track_latency(histogram: Histogram = SEARCH_LATENCY) -> Generator[None, None, None]:
    """Observe the wall time of the block, including blocks that raise."""
    started = time.perf_counter()
    try:
        yield
    finally:
        histogram.observe(time.perf_counter() - started)


def get_metrics(registry: CollectorRegistry = REGISTRY) -> bytes:
    """Render the text exposition of every collector in ``registry``."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    """Content type to serve alongside ``get_metrics()``."""
    return CONTENT_TYPE_LATEST
