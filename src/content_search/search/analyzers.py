"""Text analysis for indexing and querying.

A regex tokenizer emits word tokens; a fixed chain of filters lowercases
them, drops one-character tokens and stop words, and caps the stream
length. Index and query text go through the same chain so both sides agree
on what a term is.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from itertools import islice
import re
from typing import Protocol


# Runs of word characters; punctuation, symbols and whitespace separate tokens.
WORD_PATTERN = re.compile(r"\w+")

MAX_TOKENS_PER_FIELD = 500
MIN_TOKEN_LENGTH = 2

STOPWORDS: frozenset[str] = frozenset(
    """
    the a an and or but in on at to for of with by
    this that these those i you he she it we they
    am is are was were be been being have has had
    do does did will would could should may might must
    """.split()
)


TokenFilter = Callable[[Iterable[str]], Iterator[str]]


class Analyzer(Protocol):
    def __call__(self, text: str) -> list[str]:  # pragma: no cover - interface definition
        ...


def regex_tokens(text: str, pattern: re.Pattern[str] = WORD_PATTERN) -> Iterator[str]:
    """Yield every pattern match in source order."""
    return (match.group(0) for match in pattern.finditer(text))


def lowercase(tokens: Iterable[str]) -> Iterator[str]:
    return (token.lower() for token in tokens)


def min_length(limit: int = MIN_TOKEN_LENGTH) -> TokenFilter:
    def _filter(tokens: Iterable[str]) -> Iterator[str]:
        return (token for token in tokens if len(token) >= limit)

    return _filter


def drop_stopwords(stopwords: Iterable[str] = STOPWORDS) -> TokenFilter:
    words = frozenset(word.lower() for word in stopwords)

    def _filter(tokens: Iterable[str]) -> Iterator[str]:
        return (token for token in tokens if token not in words)

    return _filter


def truncate(limit: int = MAX_TOKENS_PER_FIELD) -> TokenFilter:
    def _filter(tokens: Iterable[str]) -> Iterator[str]:
        return islice(tokens, limit)

    return _filter


class AnalyzerPipeline:
    """Tokenizer followed by filters applied in order."""

    def __init__(
        self,
        tokenizer: Callable[[str], Iterable[str]] = regex_tokens,
        filters: Sequence[TokenFilter] = (),
    ) -> None:
        self.tokenizer = tokenizer
        self.filters = tuple(filters)

    def __call__(self, text: str) -> list[str]:
        stream: Iterable[str] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class ArticleAnalyzer(AnalyzerPipeline):
    """Analyzer used for every indexed field and for query text."""

    def __init__(self) -> None:
        super().__init__(regex_tokens, (lowercase, min_length(), drop_stopwords(), truncate()))

    def __call__(self, text: str) -> list[str]:
        if not isinstance(text, str) or not text:
            return []
        return super().__call__(text)


_DEFAULT_ANALYZER = ArticleAnalyzer()


def tokenize(text: object) -> list[str]:
    """Normalize raw text into the filtered token sequence.

    Returns an empty list for ``None``, empty strings and non-string input.

    >>> tokenize("The Liquid-Glass effect, explained!")
    ['liquid', 'glass', 'effect', 'explained']
    """
    if not isinstance(text, str):
        return []
    return _DEFAULT_ANALYZER(text)
