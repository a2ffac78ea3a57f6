"""Domain models for content search.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- Domain logic lives in domain layer
- No infrastructure dependencies

Documents are supplied by the content layer; queries, results and history
entries are what the engine hands back to it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC so comparisons never mix kinds."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SearchField(str, Enum):
    """Closed set of independently weighted document fields."""

    TITLE = "title"
    CONTENT = "content"
    TAGS = "tags"


ALL_FIELDS: tuple[SearchField, ...] = (SearchField.TITLE, SearchField.CONTENT, SearchField.TAGS)


class Document(BaseModel):
    """Value object for one article in the corpus snapshot.

    The engine only reads documents; ``slug`` and ``excerpt`` are carried
    through to results for the presentation layer and never indexed.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    content: str = ""
    tags: tuple[str, ...] = ()
    category: str = ""
    published_at: datetime
    slug: str | None = None
    excerpt: str | None = None

    @field_validator("published_at")
    @classmethod
    def _normalize_published_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def field_text(self, field: SearchField) -> str:
        """Return the raw, untokenized text of a field."""
        match field:
            case SearchField.TITLE:
                return self.title
            case SearchField.CONTENT:
                return self.content
            case SearchField.TAGS:
                return " ".join(self.tags)
        return ""


class DateRange(BaseModel):
    """Inclusive publication window."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize_bounds(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_utc(moment) <= self.end


class SearchFilters(BaseModel):
    """Structured predicates ANDed together; unset predicates pass everything."""

    model_config = ConfigDict(frozen=True)

    category: str | None = None
    tags: tuple[str, ...] = ()
    date_range: DateRange | None = None


class SearchQuery(BaseModel):
    """Value object describing one search request.

    Construction accepts empty text, an empty field set and a non-positive
    limit; the engine answers such queries with an empty result list.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    fields: tuple[SearchField, ...] = ALL_FIELDS
    limit: int = 10
    highlight: bool = False
    exact_match: bool = False
    filters: SearchFilters | None = None


class RelevanceFactors(BaseModel):
    """Explains how a score was assembled.

    Field entries hold the weighted TF-IDF contribution of that field; they
    stay at zero for fields that were not requested or did not match.
    """

    model_config = ConfigDict(frozen=True)

    title_match: float = 0.0
    content_match: float = 0.0
    tag_match: float = 0.0
    uniqueness: float = 0.0
    recency: float = 0.0


class SearchHighlight(BaseModel):
    """Marked-up excerpt of one field."""

    model_config = ConfigDict(frozen=True)

    field: SearchField
    snippet: str
    match_count: int = Field(ge=1)


class SearchResult(BaseModel):
    """Value object for a single ranked search result."""

    model_config = ConfigDict(frozen=True)

    document: Document
    score: float = Field(ge=0.0)
    relevance_factors: RelevanceFactors = Field(default_factory=RelevanceFactors)
    highlights: tuple[SearchHighlight, ...] | None = None


class HistoryEntry(BaseModel):
    """A remembered query.

    ``text`` is already normalized (trimmed, lower-cased); ``timestamp`` is
    epoch milliseconds of the last use.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    timestamp: int
    frequency: int = Field(default=1, ge=1)
