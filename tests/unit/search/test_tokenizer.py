"""Unit tests for the article analyzer pipeline."""

import pytest

from content_search.search.analyzers import (
    MAX_TOKENS_PER_FIELD,
    STOPWORDS,
    AnalyzerPipeline,
    ArticleAnalyzer,
    drop_stopwords,
    lowercase,
    min_length,
    regex_tokens,
    tokenize,
    truncate,
)


class TestTokenize:
    """Normalization rules shared by indexing and queries."""

    def test_lowercases_and_splits_on_punctuation(self):
        """Punctuation and whitespace separate tokens."""
        assert tokenize("Hello, World!") == ["hello", "world"]

    def test_hyphenated_words_split(self):
        """Hyphens are not word characters."""
        assert tokenize("backdrop-filter") == ["backdrop", "filter"]

    def test_underscore_is_a_word_character(self):
        assert tokenize("snake_case naming") == ["snake_case", "naming"]

    def test_stopwords_removed(self):
        """Stop words vanish regardless of case."""
        assert tokenize("The cat IS on the mat") == ["cat", "mat"]

    def test_single_characters_removed(self):
        assert tokenize("a b c dd 7 42") == ["dd", "42"]

    def test_preserves_duplicates_and_order(self):
        assert tokenize("react hooks react") == ["react", "hooks", "react"]

    def test_caps_token_count(self):
        """Only the first MAX_TOKENS_PER_FIELD tokens survive."""
        text = " ".join(f"w{i}" for i in range(MAX_TOKENS_PER_FIELD + 100))

        tokens = tokenize(text)

        assert len(tokens) == MAX_TOKENS_PER_FIELD
        assert tokens[-1] == f"w{MAX_TOKENS_PER_FIELD - 1}"

    def test_cap_applies_after_filtering(self):
        """Dropped stop words do not count against the cap."""
        text = "the " * 600 + " ".join(f"w{i}" for i in range(10))

        assert tokenize(text) == [f"w{i}" for i in range(10)]

    @pytest.mark.parametrize("value", [None, "", 42, ["list"], b"bytes"])
    def test_non_text_input_yields_nothing(self, value):
        assert tokenize(value) == []

    def test_only_stopwords_yields_nothing(self):
        assert tokenize("the and of") == []

    def test_unicode_letters_are_word_characters(self):
        assert tokenize("Café Über") == ["café", "über"]

    def test_stopword_list_contents(self):
        """Core English stop words are present."""
        assert {"the", "and", "is", "must", "might"} <= STOPWORDS
        assert "react" not in STOPWORDS


class TestPipelineComponents:
    """Individual tokenizer and filters."""

    def test_regex_tokens_in_source_order(self):
        assert list(regex_tokens("Hi there, Hi")) == ["Hi", "there", "Hi"]

    def test_lowercase(self):
        assert list(lowercase(["HELLO", "World"])) == ["hello", "world"]

    def test_min_length(self):
        assert list(min_length(3)(regex_tokens("x yy zzz"))) == ["zzz"]

    def test_custom_stopwords(self):
        assert list(drop_stopwords({"Drop"})(["keep", "drop", "keep"])) == ["keep", "keep"]

    def test_truncate(self):
        assert list(truncate(2)(regex_tokens("one two three"))) == ["one", "two"]

    def test_pipeline_applies_filters_in_order(self):
        """Stop words are matched after lowercasing."""
        pipeline = AnalyzerPipeline(filters=[lowercase, drop_stopwords()])

        assert pipeline("The Quick brown") == ["quick", "brown"]

    def test_pipeline_without_filters(self):
        assert AnalyzerPipeline()("a b") == ["a", "b"]

    def test_article_analyzer_rejects_non_strings(self):
        analyzer = ArticleAnalyzer()

        assert analyzer("") == []
        assert analyzer(None) == []  # type: ignore[arg-type]

    def test_stopword_count(self):
        assert len(STOPWORDS) == 46
