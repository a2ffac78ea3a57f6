"""Exception hierarchy for the content search package.

The search path itself never raises for bad input; these types are used at
the seams where collaborators plug in (settings, persistence backends).
"""

from __future__ import annotations

from typing import Any


class ContentSearchError(Exception):
    """Base exception for all content search errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ContentSearchError):
    """Raised when settings are inconsistent."""


class PersistenceError(ContentSearchError):
    """Raised by key/value stores when a read, write or delete fails."""

    def __init__(self, message: str, key: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.key = key
