"""Search engine facade.

Hides indexing, statistics, scoring, filtering, highlighting and history
behind the handful of calls the content layer needs.

Readers and the writer never share mutable state: ``index_documents`` builds
a complete ``CorpusGeneration`` off to the side and publishes it with one
reference assignment. Every read captures the current generation once and
works only against it, so a concurrent re-index can never tear a search.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import threading
import time
from types import MappingProxyType

from content_search.config import Settings, load_settings
from content_search.domain.search import Document, HistoryEntry, SearchQuery, SearchResult
from content_search.history import HistoryStore
from content_search.observability.context import bind_search_context, generate_query_id
from content_search.observability.metrics import INDEX_BUILDS, INDEX_DOC_COUNT, SEARCH_COUNT, track_latency
from content_search.search.analyzers import tokenize
from content_search.search.filters import passes
from content_search.search.indexer import CorpusIndex, DocumentIndexer
from content_search.search.scorer import TfIdfScorer
from content_search.search.snippet import Highlighter
from content_search.search.stats import DocumentFrequencyTable, compute_document_frequencies
from content_search.storage import KeyValueStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorpusGeneration:
    """One immutable snapshot of the indexed corpus and its statistics."""

    number: int = 0
    documents: Mapping[str, Document] = field(default_factory=lambda: MappingProxyType({}))
    index: CorpusIndex = field(default_factory=lambda: MappingProxyType({}))
    doc_freq: DocumentFrequencyTable = field(default_factory=DocumentFrequencyTable)
    total_documents: int = 0
    vocabulary: tuple[str, ...] = ()


def build_vocabulary(doc_freq: DocumentFrequencyTable) -> tuple[str, ...]:
    """Order indexed terms for autocomplete: most widespread first, then alphabetical."""
    return tuple(sorted(doc_freq, key=lambda term: (-doc_freq[term], term)))


class SearchEngine:
    """In-memory full-text search over a corpus of articles."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: KeyValueStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._indexer = DocumentIndexer(
            max_workers=self.settings.index_workers,
            parallel_threshold=self.settings.parallel_threshold,
        )
        self._scorer = TfIdfScorer(self.settings)
        self._highlighter = Highlighter(self.settings)
        self._history = HistoryStore(
            store,
            settings=self.settings,
            clock=lambda: self._clock().timestamp(),
        )
        self._generation = CorpusGeneration()
        self._write_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        if self.settings.search_workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.settings.search_workers,
                thread_name_prefix="content-search",
            )

    def __enter__(self) -> SearchEngine:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def generation(self) -> CorpusGeneration:
        """The currently published corpus generation."""
        return self._generation

    def index_documents(self, corpus: Iterable[Document]) -> None:
        """Replace the active generation with one built from ``corpus``."""

        with self._write_lock:
            start = time.perf_counter()
            build = self._indexer.index_documents(corpus)
            doc_freq = compute_document_frequencies(build.index, build.total_documents)
            generation = CorpusGeneration(
                number=self._generation.number + 1,
                documents=build.documents,
                index=build.index,
                doc_freq=doc_freq,
                total_documents=build.total_documents,
                vocabulary=build_vocabulary(doc_freq),
            )
            self._generation = generation

        INDEX_BUILDS.inc()
        INDEX_DOC_COUNT.set(generation.total_documents)
        logger.info(
            "Published corpus generation %d: %d documents, %d terms in %.1fms",
            generation.number,
            generation.total_documents,
            len(doc_freq),
            (time.perf_counter() - start) * 1000,
        )

    def get_index_size(self) -> int:
        return self._generation.total_documents

    def search(self, query: SearchQuery) -> list[SearchResult]:
        """Return up to ``query.limit`` results ordered by descending score.

        Invalid or empty queries and an empty corpus yield ``[]``; this
        method does not raise.
        """

        generation = self._generation
        with (
            bind_search_context(query_id=generate_query_id(), generation=generation.number),
            track_latency(),
        ):
            start = time.perf_counter()
            try:
                results = self._search(query, generation)
            except Exception:
                SEARCH_COUNT.labels(outcome="error").inc()
                logger.exception("Search failed")
                return []

            if results is None:
                SEARCH_COUNT.labels(outcome="invalid").inc()
                return []

            self._history.record(query.text)
            SEARCH_COUNT.labels(outcome="ok" if results else "empty").inc()
            logger.debug(
                "Search completed in %.2fms with %d results",
                (time.perf_counter() - start) * 1000,
                len(results),
            )
            return results

    def get_suggestions(self, partial_query: str) -> list[str]:
        """Autocomplete candidates from history and the indexed vocabulary."""

        try:
            return self._history.suggest(partial_query, self._generation.vocabulary)
        except Exception:
            logger.exception("Suggestion lookup failed")
            return []

    def get_search_history(self) -> list[HistoryEntry]:
        return self._history.entries()

    def clear_search_history(self) -> None:
        self._history.clear()

    def close(self) -> None:
        """Release worker threads and flush pending history writes."""

        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._history.close()

    def _search(self, query: SearchQuery, generation: CorpusGeneration) -> list[SearchResult] | None:
        """Run a query against one generation; None marks an invalid query."""

        if not isinstance(query, SearchQuery):
            return None
        if not query.text or not query.text.strip() or not query.fields or query.limit <= 0:
            return None

        query_tokens = tokenize(query.text)
        if not query_tokens or generation.total_documents == 0:
            return []

        now = self._clock()
        document_ids = list(generation.index)

        def score_batch(batch: list[str]) -> list[SearchResult]:
            scored: list[SearchResult] = []
            for document_id in batch:
                document = generation.documents.get(document_id)
                if document is None:
                    logger.debug("Skipping index entry without document: %s", document_id)
                    continue
                if not passes(document, query.filters):
                    continue
                result = self._scorer.score(
                    document,
                    generation.index[document_id],
                    query,
                    query_tokens,
                    generation.doc_freq,
                    generation.total_documents,
                    now,
                )
                if result is not None:
                    scored.append(result)
            return scored

        if self._executor is not None and len(document_ids) >= self.settings.parallel_threshold:
            results: list[SearchResult] = []
            for scored in self._executor.map(score_batch, _batches(document_ids, self.settings.search_workers)):
                results.extend(scored)
        else:
            results = score_batch(document_ids)

        results.sort(key=lambda result: (-result.score, result.document.id))
        results = results[: query.limit]

        if query.highlight:
            results = [
                result.model_copy(
                    update={
                        "highlights": tuple(
                            self._highlighter.highlight(result.document, query_tokens, query.fields)
                        )
                    }
                )
                for result in results
            ]
        return results


def _batches(items: list[str], parts: int) -> list[list[str]]:
    size = max(1, -(-len(items) // parts))
    return [items[i : i + size] for i in range(0, len(items), size)]


def create_search_engine(
    initial_documents: Iterable[Document] | None = None,
    *,
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> SearchEngine:
    """Create an engine, indexing ``initial_documents`` when any are given."""

    engine = SearchEngine(settings, store=store, clock=clock)
    documents = list(initial_documents or [])
    if documents:
        engine.index_documents(documents)
    return engine
