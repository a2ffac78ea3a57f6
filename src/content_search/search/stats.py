"""Statistical helpers for TF-IDF scoring.

The functions here work on the immutable structures produced by the
indexer and never look at documents directly, so they can be unit tested
on hand-built indexes.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
import math
from types import MappingProxyType

from content_search.search.indexer import CorpusIndex


# Document frequency assumed for tokens the corpus has never seen. Using 1
# keeps the IDF finite and maximal instead of dividing by zero.
UNSEEN_DOCUMENT_FREQUENCY = 1


@dataclass(frozen=True)
class DocumentFrequencyTable(Mapping[str, int]):
    """Read-only token -> number of documents containing it."""

    counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    total_documents: int = 0

    def __getitem__(self, token: str) -> int:
        return self.counts[token]

    def __iter__(self) -> Iterator[str]:
        return iter(self.counts)

    def __len__(self) -> int:
        return len(self.counts)

    def frequency(self, token: str) -> int:
        """Return the document frequency, defaulting unseen tokens to 1."""
        count = self.counts.get(token, 0)
        return count if count > 0 else UNSEEN_DOCUMENT_FREQUENCY


def compute_document_frequencies(index: CorpusIndex, total_documents: int) -> DocumentFrequencyTable:
    """Count, per token, how many documents contain it in any field.

    A token is counted once per document no matter how many fields or
    occurrences carry it.
    """

    counts: Counter[str] = Counter()
    for entries in index.values():
        unique_terms: set[str] = set()
        for entry in entries:
            unique_terms.update(entry.term_frequencies)
        counts.update(unique_terms)
    return DocumentFrequencyTable(counts=MappingProxyType(dict(counts)), total_documents=total_documents)


def calculate_idf(doc_freq: int, total_docs: int) -> float:
    """Return ``ln(total_docs / doc_freq)``.

    ``doc_freq`` values below one are treated as unseen tokens. An empty
    corpus has no informative terms and yields 0.
    """

    if total_docs <= 0:
        return 0.0
    df = doc_freq if doc_freq > 0 else UNSEEN_DOCUMENT_FREQUENCY
    return math.log(total_docs / df)
