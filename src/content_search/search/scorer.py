"""Weighted TF-IDF scoring of one document against one query.

Score assembly, in order:

1. per requested field: sum of ``tf * idf`` over query tokens present in it
2. each field sum multiplied by its static weight, then summed
3. documents whose weighted field sum is not positive are rejected here,
   before any boost, so the recency tie-breaker can never create a match
4. exact phrase multiplier when the literal query text occurs in a field
5. recency tie-breaker: ``max(0, 1 - age_days / window) * recency_weight``
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from content_search.config import Settings
from content_search.domain.search import Document, RelevanceFactors, SearchField, SearchQuery, SearchResult
from content_search.search.indexer import TermFrequencyEntry
from content_search.search.stats import DocumentFrequencyTable, calculate_idf


_SECONDS_PER_DAY = 86400.0


class TfIdfScorer:
    """Compute relevance scores and their breakdown."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def score(
        self,
        document: Document,
        entries: Sequence[TermFrequencyEntry],
        query: SearchQuery,
        query_tokens: Sequence[str],
        doc_freq: DocumentFrequencyTable,
        total_documents: int,
        now: datetime,
    ) -> SearchResult | None:
        """Score ``document``; return None when no requested field matched."""

        if not query_tokens:
            return None

        requested = set(query.fields)
        token_share = 1.0 / len(query_tokens)
        field_scores: dict[SearchField, float] = {}
        uniqueness = 0.0

        for entry in entries:
            if entry.field not in requested or entry.token_count == 0:
                continue

            raw_score = 0.0
            for token in query_tokens:
                occurrences = entry.frequency(token)
                if occurrences <= 0:
                    continue
                tf = occurrences / entry.token_count
                idf = calculate_idf(doc_freq.frequency(token), total_documents)
                raw_score += tf * idf
                uniqueness += idf * token_share

            weighted = raw_score * self.settings.field_weight(entry.field)
            if weighted > 0:
                field_scores[entry.field] = field_scores.get(entry.field, 0.0) + weighted

        field_total = sum(field_scores.values())
        if field_total <= 0:
            return None

        total_score = field_total
        if query.exact_match and self.has_exact_match(document, query.text, query.fields):
            total_score *= self.settings.exact_match_multiplier

        recency = self.recency_boost(document, now)
        total_score += recency * self.settings.recency_weight

        if total_score <= 0:
            return None

        return SearchResult(
            document=document,
            score=total_score,
            relevance_factors=_build_factors(field_scores, uniqueness, recency),
        )

    def recency_boost(self, document: Document, now: datetime) -> float:
        """Linear decay from 1 (published now) to 0 (one window old or more).

        Future publication dates are clamped to 1.
        """

        age_days = (now - document.published_at).total_seconds() / _SECONDS_PER_DAY
        boost = 1.0 - age_days / self.settings.recency_window_days
        return min(1.0, max(0.0, boost))

    @staticmethod
    def has_exact_match(document: Document, text: str, fields: Sequence[SearchField]) -> bool:
        """Case-insensitive substring test of the trimmed query text."""

        needle = text.strip().lower()
        if not needle:
            return False
        return any(needle in document.field_text(field).lower() for field in fields)


def _build_factors(field_scores: dict[SearchField, float], uniqueness: float, recency: float) -> RelevanceFactors:
    title_match = content_match = tag_match = 0.0
    for field, value in field_scores.items():
        match field:
            case SearchField.TITLE:
                title_match = value
            case SearchField.CONTENT:
                content_match = value
            case SearchField.TAGS:
                tag_match = value
    return RelevanceFactors(
        title_match=title_match,
        content_match=content_match,
        tag_match=tag_match,
        uniqueness=uniqueness,
        recency=recency,
    )
