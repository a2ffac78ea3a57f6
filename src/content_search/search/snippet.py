"""Snippet extraction with highlighted query terms.

Smart Defaults (configurable through settings):
- Whole-word, case-insensitive matching of query tokens
- Matches wrapped in ``<mark>``/``</mark>``
- Window of 100 characters before the first match to 300 after it
- ``...`` where the window cuts the field text
"""

from __future__ import annotations

from collections.abc import Sequence
import re

from content_search.config import Settings
from content_search.domain.search import Document, SearchField, SearchHighlight


def compile_terms_pattern(terms: Sequence[str]) -> re.Pattern[str] | None:
    """Build one whole-word alternation for all distinct terms.

    Longer terms are tried first so a term never shadows a longer one that
    shares its prefix.
    """

    unique = sorted({term for term in terms if term}, key=lambda term: (-len(term), term))
    if not unique:
        return None
    alternation = "|".join(re.escape(term) for term in unique)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def highlight_terms(
    text: str,
    terms: Sequence[str],
    open_tag: str = "<mark>",
    close_tag: str = "</mark>",
) -> tuple[str, int]:
    """Wrap every whole-word occurrence of ``terms`` in markers.

    Matching runs once over the original text, so markers inserted for one
    term are never matched by another.

    Returns:
        Tuple of (marked_text, match_count).
    """

    pattern = compile_terms_pattern(terms)
    if pattern is None or not text:
        return text, 0
    return pattern.subn(lambda match: f"{open_tag}{match.group(0)}{close_tag}", text)


def extract_window(
    marked_text: str,
    anchor: str,
    *,
    before: int = 100,
    after: int = 300,
    ellipsis: str = "...",
) -> str:
    """Cut a window around the first ``anchor`` occurrence.

    Offsets are measured in the marked-up text. An ellipsis is added on each
    side where the window does not reach the end of the text.
    """

    first = marked_text.find(anchor)
    if first == -1:
        first = 0
    start = max(0, first - before)
    end = min(len(marked_text), first + after)

    snippet = marked_text[start:end]
    if start > 0:
        snippet = ellipsis + snippet
    if end < len(marked_text):
        snippet = snippet + ellipsis
    return snippet


class Highlighter:
    """Produce per-field highlighted snippets for a search result."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def highlight(
        self,
        document: Document,
        query_tokens: Sequence[str],
        fields: Sequence[SearchField],
    ) -> list[SearchHighlight]:
        highlights: list[SearchHighlight] = []
        if not query_tokens:
            return highlights

        for field in dict.fromkeys(fields):
            text = document.field_text(field)
            if not text:
                continue

            marked, match_count = highlight_terms(
                text,
                query_tokens,
                self.settings.highlight_open_tag,
                self.settings.highlight_close_tag,
            )
            if match_count == 0:
                continue

            snippet = extract_window(
                marked,
                self.settings.highlight_open_tag,
                before=self.settings.snippet_context_before,
                after=self.settings.snippet_context_after,
                ellipsis=self.settings.snippet_ellipsis,
            )
            highlights.append(SearchHighlight(field=field, snippet=snippet, match_count=match_count))

        return highlights
