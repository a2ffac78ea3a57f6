"""Per-document, per-field term frequency indexing.

Every call builds a brand-new index from the full corpus; nothing is mutated
after construction, so a finished build can be shared freely between
threads.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from types import MappingProxyType

from content_search.domain.search import ALL_FIELDS, Document, SearchField
from content_search.search.analyzers import Analyzer, ArticleAnalyzer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TermFrequencyEntry:
    """Tokens and term counts of one field of one document."""

    document_id: str
    field: SearchField
    tokens: tuple[str, ...]
    term_frequencies: Mapping[str, int]

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def frequency(self, token: str) -> int:
        return self.term_frequencies.get(token, 0)


CorpusIndex = Mapping[str, tuple[TermFrequencyEntry, ...]]


@dataclass(frozen=True)
class IndexBuild:
    """Output of one full indexing pass."""

    documents: Mapping[str, Document]
    index: CorpusIndex
    total_documents: int


class DocumentIndexer:
    """Tokenize documents field by field into term frequency entries."""

    def __init__(
        self,
        analyzer: Analyzer | None = None,
        *,
        max_workers: int = 1,
        parallel_threshold: int = 256,
    ) -> None:
        self._analyzer = analyzer or ArticleAnalyzer()
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold

    def index_document(self, document: Document) -> tuple[TermFrequencyEntry, ...]:
        """Return one entry per field that produced at least one token."""

        entries: list[TermFrequencyEntry] = []
        for field in ALL_FIELDS:
            text = document.field_text(field)
            if not text:
                continue
            tokens = tuple(self._analyzer(text))
            if not tokens:
                continue
            entries.append(
                TermFrequencyEntry(
                    document_id=document.id,
                    field=field,
                    tokens=tokens,
                    term_frequencies=MappingProxyType(dict(Counter(tokens))),
                )
            )
        return tuple(entries)

    def index_documents(self, corpus: Iterable[Document]) -> IndexBuild:
        """Index the whole corpus.

        Documents sharing an id collapse to the last one supplied, so the
        recorded total always equals the number of documents held.
        """

        documents: dict[str, Document] = {}
        for document in corpus:
            documents[document.id] = document

        ordered = list(documents.values())
        if self.max_workers > 1 and len(ordered) >= self.parallel_threshold:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="content-index") as executor:
                per_document = list(executor.map(self.index_document, ordered))
        else:
            per_document = [self.index_document(document) for document in ordered]

        index = {document.id: entries for document, entries in zip(ordered, per_document) if entries}
        logger.debug("Indexed %d documents (%d with searchable text)", len(ordered), len(index))

        return IndexBuild(
            documents=MappingProxyType(documents),
            index=MappingProxyType(index),
            total_documents=len(documents),
        )
