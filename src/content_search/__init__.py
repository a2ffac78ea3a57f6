"""In-memory full-text search for article corpora.

Weighted TF-IDF ranking over title, content and tags, structured filters,
highlighted snippets, and query history with autocomplete.
"""

from content_search.config import Settings, load_settings
from content_search.domain.search import (
    DateRange,
    Document,
    HistoryEntry,
    RelevanceFactors,
    SearchField,
    SearchFilters,
    SearchHighlight,
    SearchQuery,
    SearchResult,
)
from content_search.engine import CorpusGeneration, SearchEngine, create_search_engine
from content_search.exceptions import ConfigurationError, ContentSearchError, PersistenceError
from content_search.history import HistoryStore
from content_search.storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore


__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ContentSearchError",
    "CorpusGeneration",
    "DateRange",
    "Document",
    "HistoryEntry",
    "HistoryStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PersistenceError",
    "RelevanceFactors",
    "SearchEngine",
    "SearchField",
    "SearchFilters",
    "SearchHighlight",
    "SearchQuery",
    "SearchResult",
    "Settings",
    "create_search_engine",
    "load_settings",
]
