"""Key/value persistence backends used by the search history.

The history only needs three operations on a single serialized blob, so the
protocol is deliberately tiny. Backends raise ``PersistenceError``; callers
decide whether a failure is fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path
import re
import shutil
import threading
from typing import Protocol, runtime_checkable

from content_search.exceptions import PersistenceError


logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol implemented by history persistence backends."""

    def get(self, key: str) -> str | None:  # pragma: no cover - interface definition
        ...

    def set(self, key: str, value: str) -> None:  # pragma: no cover - interface definition
        ...

    def remove(self, key: str) -> None:  # pragma: no cover - interface definition
        ...


class InMemoryKeyValueStore:
    """Process-local store; the default when no backend is injected."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Store each key as ``<root>/<key>.json``.

    Writes go to a temporary file that is then moved over the target, so a
    reader never sees a half-written blob.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def get(self, key: str) -> str | None:
        path = self._key_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as err:
            raise PersistenceError(f"Failed to read {path}: {err}", key=key) from err

    def set(self, key: str, value: str) -> None:
        path = self._key_path(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            shutil.move(str(tmp_path), str(path))
        except OSError as err:
            raise PersistenceError(f"Failed to write {path}: {err}", key=key) from err

    def remove(self, key: str) -> None:
        path = self._key_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as err:
            raise PersistenceError(f"Failed to remove {path}: {err}", key=key) from err
        logger.debug("Removed persisted key %s", key)

    def _key_path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise PersistenceError(f"Unsupported storage key: {key!r}", key=key)
        return self.root / f"{key}.json"
