"""Unit tests for structured result filters."""

from datetime import datetime, timezone

from content_search.domain.search import DateRange, SearchFilters
from content_search.search.filters import passes


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestPasses:
    """Category, tag and date predicates."""

    def test_no_filters_pass_everything(self, sample_posts):
        assert all(passes(doc, None) for doc in sample_posts)
        assert all(passes(doc, SearchFilters()) for doc in sample_posts)

    def test_category_must_match_exactly(self, sample_posts):
        filters = SearchFilters(category="tutorial")

        assert [doc.id for doc in sample_posts if passes(doc, filters)] == ["post-1", "post-3"]

    def test_empty_category_is_no_constraint(self, sample_posts):
        assert all(passes(doc, SearchFilters(category="")) for doc in sample_posts)

    def test_any_tag_matches(self, sample_posts):
        filters = SearchFilters(tags=["gpu", "themes"])

        assert [doc.id for doc in sample_posts if passes(doc, filters)] == ["post-2", "post-3"]

    def test_empty_tags_is_no_constraint(self, sample_posts):
        assert all(passes(doc, SearchFilters(tags=[])) for doc in sample_posts)

    def test_date_range_is_inclusive(self, sample_posts):
        filters = SearchFilters(date_range=DateRange(start=_utc(2024, 2, 20), end=_utc(2024, 3, 10)))

        assert [doc.id for doc in sample_posts if passes(doc, filters)] == ["post-2", "post-3"]

    def test_naive_bounds_are_treated_as_utc(self, sample_posts):
        filters = SearchFilters(date_range=DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 31)))

        assert [doc.id for doc in sample_posts if passes(doc, filters)] == ["post-1"]

    def test_predicates_are_combined(self, sample_posts):
        filters = SearchFilters(
            category="tutorial",
            tags=["javascript"],
            date_range=DateRange(start=_utc(2024, 3, 1), end=_utc(2024, 12, 31)),
        )

        assert [doc.id for doc in sample_posts if passes(doc, filters)] == ["post-3"]
