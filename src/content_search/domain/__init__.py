"""Domain layer - value objects shared by the search components."""

from content_search.domain.search import (
    ALL_FIELDS,
    DateRange,
    Document,
    HistoryEntry,
    RelevanceFactors,
    SearchField,
    SearchFilters,
    SearchHighlight,
    SearchQuery,
    SearchResult,
    ensure_utc,
)


__all__ = [
    "ALL_FIELDS",
    "DateRange",
    "Document",
    "HistoryEntry",
    "RelevanceFactors",
    "SearchField",
    "SearchFilters",
    "SearchHighlight",
    "SearchQuery",
    "SearchResult",
    "ensure_utc",
]
