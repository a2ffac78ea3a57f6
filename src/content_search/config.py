"""Centralized configuration for content-search using Pydantic Settings."""

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_search.domain.search import SearchField
from content_search.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every value has a default that reproduces the engine's reference
    behavior, so ``Settings()`` is always usable without an environment.
    Variables use the ``CONTENT_SEARCH_`` prefix (``CONTENT_SEARCH_TITLE_WEIGHT=4``).
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Scoring weights
    title_weight: float = Field(default=3.0, ge=0.0, description="Weight applied to title field scores")
    content_weight: float = Field(default=1.0, ge=0.0, description="Weight applied to body content scores")
    tags_weight: float = Field(default=2.0, ge=0.0, description="Weight applied to tag field scores")
    exact_match_multiplier: float = Field(
        default=2.0, ge=1.0, description="Multiplier when the literal query text appears in a requested field"
    )
    recency_weight: float = Field(default=0.1, ge=0.0, description="Scale of the recency tie-breaker")
    recency_window_days: int = Field(default=365, ge=1, description="Days over which the recency boost decays")

    # Highlighting
    snippet_context_before: int = Field(default=100, ge=0, description="Characters kept before the first match")
    snippet_context_after: int = Field(default=300, ge=0, description="Characters kept after the first match")
    highlight_open_tag: str = Field(default="<mark>", min_length=1, description="Marker inserted before a match")
    highlight_close_tag: str = Field(default="</mark>", min_length=1, description="Marker inserted after a match")
    snippet_ellipsis: str = Field(default="...", description="Marker added where a snippet is truncated")

    # History and suggestions
    history_max_entries: int = Field(default=50, ge=1, description="Maximum number of remembered queries")
    history_suggestion_limit: int = Field(default=5, ge=0, description="Suggestions taken from history")
    vocabulary_suggestion_limit: int = Field(default=5, ge=0, description="Suggestions taken from the index")
    suggestion_limit: int = Field(default=10, ge=1, description="Total suggestions returned")
    history_storage_key: str = Field(default="search_history", min_length=1, description="Persistence key")
    history_background_writes: bool = Field(
        default=False, description="Persist history on a background worker instead of inline"
    )

    # Parallelism
    index_workers: int = Field(default=1, ge=1, description="Threads used to tokenize documents while indexing")
    search_workers: int = Field(default=1, ge=1, description="Threads used to score documents during search")
    parallel_threshold: int = Field(
        default=256, ge=1, description="Minimum corpus size before work is fanned out to worker threads"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    @model_validator(mode="after")
    def _check_consistency(self) -> "Settings":
        if self.suggestion_limit < self.history_suggestion_limit:
            raise ValueError(
                "CONTENT_SEARCH_SUGGESTION_LIMIT must be at least CONTENT_SEARCH_HISTORY_SUGGESTION_LIMIT "
                f"(got {self.suggestion_limit} < {self.history_suggestion_limit})"
            )
        if self.highlight_open_tag == self.highlight_close_tag:
            raise ValueError("Highlight open and close tags must differ so snippets stay parseable")
        return self

    def field_weight(self, field: SearchField) -> float:
        """Return the static weight applied to a field's raw TF-IDF score."""
        match field:
            case SearchField.TITLE:
                return self.title_weight
            case SearchField.CONTENT:
                return self.content_weight
            case SearchField.TAGS:
                return self.tags_weight
        return 1.0


def load_settings(**overrides: object) -> Settings:
    """Build settings from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If the resulting configuration does not validate.
    """
    try:
        return Settings(**overrides)
    except ValidationError as err:
        raise ConfigurationError(
            "Invalid content search settings",
            {"errors": [error["msg"] for error in err.errors()]},
        ) from err
