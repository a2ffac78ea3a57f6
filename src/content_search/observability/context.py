"""Context propagation for correlating log lines of one search."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


# Thread-safe context for log correlation
search_context: ContextVar[dict | None] = ContextVar("search_context", default=None)


def generate_query_id() -> str:
    """Generate a 16-char hex query ID."""
    return uuid4().hex[:16]


def get_search_context() -> dict:
    """Get the current search context (empty outside a search)."""
    return dict(search_context.get() or {})


@contextmanager
def bind_search_context(**values: object) -> Generator[dict, None, None]:
    """Bind values for the duration of a block, restoring the previous context after."""
    merged = {**(search_context.get() or {}), **values}
    token = search_context.set(merged)
    try:
        yield merged
    finally:
        search_context.reset(token)
