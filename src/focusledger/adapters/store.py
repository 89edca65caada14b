"""Durable key-value storage for the ledger, the session snapshot and settings.

The store is deliberately dumb: named JSON values, last write wins. Failures
to read fall back to the caller's default and failures to write are logged and
swallowed, so the in-memory state of the running process stays authoritative.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENTRIES_KEY = "entries"
SNAPSHOT_KEY = "session_snapshot"
SETTINGS_KEY = "settings"


class KeyValueStore(ABC):
    """Abstract base class for named JSON-serializable values."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default* if absent or unreadable."""
        raise NotImplementedError("KeyValueStore.get must be implemented")

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """Store *value* under *key*. Returns False if the write failed."""
        raise NotImplementedError("KeyValueStore.set must be implemented")

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*; no-op if absent."""
        raise NotImplementedError("KeyValueStore.delete must be implemented")


class MemoryStore(KeyValueStore):
    """In-process store. Values are kept JSON-encoded so they behave like the file store."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Error reading store key %r: %s", key, e)
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("Error writing store key %r: %s", key, e)
            return False
        return True

    def set_raw(self, key: str, raw: str) -> None:
        """Store an undecoded string as-is (lets tests plant corrupt data)."""
        self._data[key] = raw

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Error reading store key %r: %s", key, e)
            return default

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            payload = json.dumps(value, indent=2)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            tmp_path.chmod(0o600)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error writing store key %r: %s", key, e)
            return False
        return True

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Error deleting store key %r: %s", key, e)
