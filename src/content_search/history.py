"""Search history with frequency-ranked autocomplete.

The history lives in memory and is written through to an injected
key/value store as one JSON array of ``{text, timestamp, frequency}``.
Storage problems never reach the caller: they are logged as warnings and
the in-memory view keeps serving.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import Executor, ThreadPoolExecutor
import logging
import threading
import time
from typing import Any

import orjson
from pydantic import ValidationError

from content_search.config import Settings
from content_search.domain.search import HistoryEntry
from content_search.observability.metrics import HISTORY_FAILURES
from content_search.storage import InMemoryKeyValueStore, KeyValueStore


logger = logging.getLogger(__name__)


def normalize_query(text: object) -> str:
    """Trim and case-fold query text; non-strings normalize to ''."""
    if not isinstance(text, str):
        return ""
    return text.strip().lower()


class HistoryStore:
    """Remember past queries and rank them for suggestions.

    Entries are kept most-recently-used first; the oldest entries beyond
    ``history_max_entries`` are evicted on every write.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        settings: Settings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._store = store if store is not None else InMemoryKeyValueStore()
        self._clock = clock or time.time
        self._key = self.settings.history_storage_key
        self._lock = threading.RLock()
        self._entries: list[HistoryEntry] = []
        self._loaded = False
        self._writer: Executor | None = None
        if self.settings.history_background_writes:
            self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="content-history")

    def record(self, text: str) -> HistoryEntry | None:
        """Remember a query; repeats bump frequency and timestamp.

        Returns the stored entry, or None when the text is blank.
        """

        normalized = normalize_query(text)
        if not normalized:
            return None

        with self._lock:
            self._ensure_loaded()
            now_ms = self._now_ms()
            existing = next((entry for entry in self._entries if entry.text == normalized), None)
            if existing is not None:
                self._entries.remove(existing)
                entry = existing.model_copy(update={"timestamp": now_ms, "frequency": existing.frequency + 1})
            else:
                entry = HistoryEntry(text=normalized, timestamp=now_ms, frequency=1)

            self._entries.insert(0, entry)
            evicted = self._entries[self.settings.history_max_entries :]
            del self._entries[self.settings.history_max_entries :]
            if evicted:
                logger.debug("Evicted %d history entries", len(evicted))

            # Dispatch under the lock so stored snapshots land in history order
            self._dispatch(self._write, self._serialize(self._entries))
        return entry

    def entries(self) -> list[HistoryEntry]:
        """Return the history, most recent first."""

        with self._lock:
            self._ensure_loaded()
            return sorted(self._entries, key=lambda entry: entry.timestamp, reverse=True)

    def suggest(self, prefix: str, vocabulary: Iterable[str] = ()) -> list[str]:
        """Merge frequent matching queries with indexed terms.

        History entries containing the prefix come first (most frequent
        first), then vocabulary terms starting with it; duplicates are
        dropped and the total is capped. A blank prefix matches everything,
        so an empty box still gets the most frequent queries.
        """

        if not isinstance(prefix, str):
            return []
        needle = normalize_query(prefix)

        history = [entry for entry in self.entries() if needle in entry.text]
        history.sort(key=lambda entry: entry.frequency, reverse=True)

        suggestions: dict[str, None] = {}
        for entry in history[: self.settings.history_suggestion_limit]:
            suggestions.setdefault(entry.text)

        added = 0
        for term in vocabulary:
            if added >= self.settings.vocabulary_suggestion_limit:
                break
            if term.startswith(needle) and term not in suggestions:
                suggestions.setdefault(term)
                added += 1

        return list(suggestions)[: self.settings.suggestion_limit]

    def clear(self) -> None:
        """Forget every entry and remove the persisted blob."""

        with self._lock:
            self._entries.clear()
            self._loaded = True
            # Queued behind pending writes so a stale snapshot cannot resurrect the blob
            self._dispatch(self._remove)

    def close(self) -> None:
        """Flush pending background writes."""

        if self._writer is not None:
            self._writer.shutdown(wait=True)
            self._writer = None

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        self._entries = self._load()

    def _load(self) -> list[HistoryEntry]:
        try:
            raw = self._store.get(self._key)
        except Exception as exc:
            HISTORY_FAILURES.labels(operation="load").inc()
            logger.warning("Failed to load search history: %s", exc)
            return []
        if not raw:
            return []

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            HISTORY_FAILURES.labels(operation="load").inc()
            logger.warning("Discarding unreadable search history: %s", exc)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding search history with unexpected shape: %s", type(data).__name__)
            return []

        entries: list[HistoryEntry] = []
        seen: set[str] = set()
        for item in sorted(_valid_items(data), key=lambda entry: entry.timestamp, reverse=True):
            if item.text in seen:
                continue
            seen.add(item.text)
            entries.append(item)
        return entries[: self.settings.history_max_entries]

    def _dispatch(self, operation: Callable[..., None], *args: object) -> None:
        if self._writer is not None:
            self._writer.submit(operation, *args)
        else:
            operation(*args)

    def _write(self, payload: str) -> None:
        try:
            self._store.set(self._key, payload)
        except Exception as exc:
            HISTORY_FAILURES.labels(operation="save").inc()
            logger.warning("Failed to save search history: %s", exc)

    def _remove(self) -> None:
        try:
            self._store.remove(self._key)
        except Exception as exc:
            HISTORY_FAILURES.labels(operation="remove").inc()
            logger.warning("Failed to remove search history: %s", exc)
            return
        logger.info("Search history cleared")

    def _now_ms(self) -> int:
        now_ms = int(self._clock() * 1000)
        if self._entries:
            # Keep timestamps non-decreasing so recency order survives a reload.
            now_ms = max(now_ms, self._entries[0].timestamp)
        return now_ms

    @staticmethod
    def _serialize(entries: list[HistoryEntry]) -> str:
        return orjson.dumps([entry.model_dump() for entry in entries]).decode("utf-8")


def _valid_items(data: list[Any]) -> Iterable[HistoryEntry]:
    for item in data:
        if not isinstance(item, dict):
            continue
        text = normalize_query(item.get("text"))
        try:
            yield HistoryEntry.model_validate({**item, "text": text, "frequency": item.get("frequency") or 1})
        except ValidationError:
            logger.debug("Skipping malformed history entry: %r", item)
