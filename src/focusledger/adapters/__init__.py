"""Storage adapters for focusledger."""

from .store import (
    ENTRIES_KEY,
    SETTINGS_KEY,
    SNAPSHOT_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
)

__all__ = [
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    "ENTRIES_KEY",
    "SNAPSHOT_KEY",
    "SETTINGS_KEY",
]
