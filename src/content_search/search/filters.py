"""Structured result filters (category, tags, publication window)."""

from __future__ import annotations

from content_search.domain.search import Document, SearchFilters


def passes(document: Document, filters: SearchFilters | None) -> bool:
    """Return True when the document satisfies every predicate that is set.

    An empty tag list is treated as "no tag constraint".
    """

    if filters is None:
        return True

    if filters.category and document.category != filters.category:
        return False

    if filters.tags and not set(filters.tags).intersection(document.tags):
        return False

    if filters.date_range is not None and not filters.date_range.contains(document.published_at):
        return False

    return True
