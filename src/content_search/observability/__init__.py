"""Observability module for structured logging and Prometheus metrics."""

from content_search.observability.context import bind_search_context, get_search_context, search_context
from content_search.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from content_search.observability.metrics import (
    HISTORY_FAILURES,
    INDEX_BUILDS,
    INDEX_DOC_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)


__all__ = [
    "HISTORY_FAILURES",
    "INDEX_BUILDS",
    "INDEX_DOC_COUNT",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "bind_search_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_metrics",
    "get_metrics_content_type",
    "get_search_context",
    "search_context",
    "track_latency",
]
