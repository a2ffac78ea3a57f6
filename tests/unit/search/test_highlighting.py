"""Unit tests for term highlighting and snippet windows."""

from content_search.config import Settings
from content_search.domain.search import SearchField
from content_search.search.snippet import Highlighter, compile_terms_pattern, extract_window, highlight_terms


class TestHighlightTerms:
    """Marker insertion."""

    def test_every_occurrence_marked(self):
        marked, count = highlight_terms("React is great, React is fast", ["react"])

        assert count == 2
        assert marked == "<mark>React</mark> is great, <mark>React</mark> is fast"

    def test_whole_words_only(self):
        marked, count = highlight_terms("reactive react reactor", ["react"])

        assert count == 1
        assert marked == "reactive <mark>react</mark> reactor"

    def test_original_case_preserved(self):
        marked, _ = highlight_terms("GLASS glass Glass", ["glass"])

        assert marked == "<mark>GLASS</mark> <mark>glass</mark> <mark>Glass</mark>"

    def test_term_named_like_marker_does_not_corrupt(self):
        """Inserted markers are never rescanned by later terms."""
        marked, count = highlight_terms("mark my words", ["words", "mark"])

        assert count == 2
        assert marked == "<mark>mark</mark> my <mark>words</mark>"

    def test_duplicate_terms_do_not_double_mark(self):
        marked, count = highlight_terms("glass", ["glass", "glass"])

        assert (marked, count) == ("<mark>glass</mark>", 1)

    def test_custom_tags(self):
        marked, _ = highlight_terms("find me", ["find"], "[", "]")

        assert marked == "[find] me"

    def test_no_terms(self):
        assert highlight_terms("text", []) == ("text", 0)

    def test_regex_characters_are_escaped(self):
        assert compile_terms_pattern(["c++"]).pattern == r"\b(?:c\+\+)\b"

    def test_empty_terms_yield_no_pattern(self):
        assert compile_terms_pattern(["", ""]) is None


class TestExtractWindow:
    """Window cutting around the first marker."""

    def test_short_text_untouched(self):
        assert extract_window("<mark>a</mark> b", "<mark>") == "<mark>a</mark> b"

    def test_long_text_gets_ellipses(self):
        marked, _ = highlight_terms("word " * 100 + "target" + " filler" * 100, ["target"])

        snippet = extract_window(marked, "<mark>")

        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert len(snippet) == 3 + 400 + 3
        assert snippet[3 + 100 :].startswith("<mark>target</mark>")

    def test_match_near_start_has_no_leading_ellipsis(self):
        marked, _ = highlight_terms("target" + " filler" * 100, ["target"])

        snippet = extract_window(marked, "<mark>")

        assert snippet.startswith("<mark>target</mark>")
        assert snippet.endswith("...")
        assert len(snippet) == 300 + 3

    def test_missing_anchor_starts_at_beginning(self):
        assert extract_window("abcdef", "<mark>", before=1, after=3) == "abc..."


class TestHighlighter:
    """Per-field highlights for a document."""

    def test_fields_without_matches_are_omitted(self, make_document):
        doc = make_document("d", title="Liquid Glass", content="Nothing relevant", tags=("glass",))

        highlights = Highlighter(Settings()).highlight(doc, ["glass"], [SearchField.TITLE, SearchField.CONTENT])

        assert [(h.field, h.snippet, h.match_count) for h in highlights] == [
            (SearchField.TITLE, "Liquid <mark>Glass</mark>", 1)
        ]

    def test_tags_highlighted_as_joined_text(self, make_document):
        doc = make_document("d", title="x", tags=("web-dev", "glass"))

        (highlight,) = Highlighter(Settings()).highlight(doc, ["glass", "web"], [SearchField.TAGS])

        assert highlight.snippet == "<mark>web</mark>-dev <mark>glass</mark>"
        assert highlight.match_count == 2

    def test_repeated_fields_highlighted_once(self, make_document):
        doc = make_document("d", title="Glass")

        highlights = Highlighter(Settings()).highlight(doc, ["glass"], [SearchField.TITLE, SearchField.TITLE])

        assert len(highlights) == 1

    def test_no_tokens_no_highlights(self, make_document):
        doc = make_document("d", title="Glass")

        assert Highlighter(Settings()).highlight(doc, [], [SearchField.TITLE]) == []

    def test_settings_control_markers_and_window(self, make_document):
        settings = Settings(
            highlight_open_tag="<em>",
            highlight_close_tag="</em>",
            snippet_context_before=5,
            snippet_context_after=20,
        )
        doc = make_document("d", content="lots of words before the glass and plenty after it too")

        (highlight,) = Highlighter(settings).highlight(doc, ["glass"], [SearchField.CONTENT])

        assert highlight.snippet == "... the <em>glass</em> and p..."
