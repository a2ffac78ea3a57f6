"""Structured JSON logging for search events.

Each line is one JSON object that carries the active search context
(``query_id``, ``generation``), so every line emitted while serving one
search can be grouped after the fact.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
import logging
import sys
from typing import IO, TYPE_CHECKING, Any

import orjson

from content_search.observability.context import get_search_context


if TYPE_CHECKING:
    from content_search.config import Settings


# Attributes every LogRecord has; anything else was passed through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _fallback(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return list(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON with search correlation."""

    MAX_MESSAGE_LEN = 2000
    MAX_VALUE_LEN = 500
    MAX_ITEMS = 50

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.rpartition(".")[2],
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
        }
        payload.update(get_search_context())
        payload.update(self._extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=_fallback).decode("utf-8")

    def _extras(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: self._shorten(value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }

    def _shorten(self, value: Any) -> Any:
        if isinstance(value, str):
            return _clip(value, self.MAX_VALUE_LEN)
        # Token lists and id lists can be corpus-sized
        if isinstance(value, (list, tuple)) and len(value) > self.MAX_ITEMS:
            return [*value[: self.MAX_ITEMS], f"... {len(value) - self.MAX_ITEMS} more"]
        return value


def _resolve_level(name: str, default: int) -> int:
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install a single stream handler on the root logger.

    Args:
        level: Root log level name; unknown names fall back to INFO
        json_output: Emit JSON lines instead of the plain text format
        logger_levels: Per-logger level overrides (logger name -> level name)
        stream: Destination stream, stdout by default

    Returns:
        The installed handler.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level, logging.INFO))
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(_resolve_level(logger_level, logging.INFO))
    return handler


def configure_logging_from_settings(settings: Settings) -> logging.Handler:
    """Apply ``log_level`` and ``log_json`` from the settings."""
    return configure_logging(settings.log_level, settings.log_json)
