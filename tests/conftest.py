"""Shared test fixtures and configuration."""

from datetime import datetime, timedelta, timezone
import os

import pytest

from content_search import Document, InMemoryKeyValueStore, SearchEngine, Settings


# Fixed "now" so recency boosts and history timestamps are deterministic
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop CONTENT_SEARCH_* variables so every test starts from the defaults."""
    for key in list(os.environ):
        if key.upper().startswith("CONTENT_SEARCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    """Clock callable pinned to NOW."""
    return lambda: NOW


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def sample_posts() -> list[Document]:
    """Three blog posts covering titles, tags, categories and dates."""
    return [
        Document(
            id="post-1",
            title="Introduction to Liquid Glass Effects",
            content=(
                "Learn how to create stunning liquid glass effects with CSS and JavaScript. "
                "This tutorial covers backdrop-filter, blur effects, and modern web design techniques."
            ),
            tags=("css", "javascript", "web-design", "glass-effect"),
            category="tutorial",
            published_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
            slug="introduction-to-liquid-glass-effects",
        ),
        Document(
            id="post-2",
            title="Advanced Performance Optimization",
            content=(
                "Explore advanced GPU acceleration methods for smooth rendering. "
                "Topics include composite layers, hardware acceleration, and performance optimization strategies."
            ),
            tags=("performance", "optimization", "gpu"),
            category="advanced",
            published_at=datetime(2024, 2, 20, tzinfo=timezone.utc),
        ),
        Document(
            id="post-3",
            title="Seasonal Theme System Implementation",
            content=(
                "Build dynamic seasonal themes that change based on weather and time. "
                "Integration with weather APIs and smooth theme transitions."
            ),
            tags=("themes", "seasonal", "javascript"),
            category="tutorial",
            published_at=datetime(2024, 3, 10, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def make_document():
    """Factory for documents with sensible defaults."""

    def _make(doc_id: str, *, age_days: float = 30, **fields) -> Document:
        fields.setdefault("published_at", NOW - timedelta(days=age_days))
        return Document(id=doc_id, **fields)

    return _make


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def engine(sample_posts, store, clock):
    """Engine indexed with the sample posts."""
    search_engine = SearchEngine(Settings(), store=store, clock=clock)
    search_engine.index_documents(sample_posts)
    yield search_engine
    search_engine.close()


def pytest_collection_modifyitems(config, items):
    """Mark tests by the directory they live in (tests/unit, tests/integration)."""
    for item in items:
        parts = item.path.parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in parts:
            item.add_marker(pytest.mark.integration)
