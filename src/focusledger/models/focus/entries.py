"""Time-entry ledger with minimum-duration filtering and two-day retention."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from focusledger.adapters.store import ENTRIES_KEY, KeyValueStore
from focusledger.models.config_models import Scope
from focusledger.utils.dates import (
    MS_IN_MINUTE,
    Clock,
    cleanup_cutoff,
    is_same_local_day,
    now_ms,
    to_datetime,
    to_ms,
)

logger = logging.getLogger(__name__)

MIN_TRACKED_DURATION_MS = MS_IN_MINUTE


class Entry(BaseModel):
    """A recorded work span. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    scope_id: int
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return to_datetime(v)

    @property
    def duration_ms(self) -> int:
        return to_ms(self.end) - to_ms(self.start)

    def to_record(self) -> dict:
        """Serialize for the store (ISO-8601 timestamps)."""
        return self.model_dump(mode="json")


@dataclass(frozen=True)
class EnrichedEntry:
    """An entry joined with its scope, as shown in today's views."""

    entry: Entry
    scope: Scope | None
    duration_ms: int

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def scope_id(self) -> int:
        return self.entry.scope_id

    @property
    def start(self) -> datetime:
        return self.entry.start

    @property
    def end(self) -> datetime:
        return self.entry.end


class EntryLedger:
    """Owns the list of recorded work spans and keeps it persisted."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = now_ms,
        min_tracked_ms: int = MIN_TRACKED_DURATION_MS,
        retention_days: int = 2,
    ):
        self.store = store
        self.clock = clock
        self.min_tracked_ms = min_tracked_ms
        self.retention_days = retention_days
        self._entries: list[Entry] = self._load()

    def _load(self) -> list[Entry]:
        raw = self.store.get(ENTRIES_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Stored entries are not a list, starting with an empty ledger")
            return []

        entries = []
        for item in raw:
            try:
                entries.append(Entry.model_validate(item))
            except ValidationError as e:
                logger.warning("Dropping malformed entry %r: %s", item, e)
        return entries

    def _save(self) -> None:
        self.store.set(ENTRIES_KEY, [entry.to_record() for entry in self._entries])

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(
        self, scope_id: int, start: int | datetime, end: int | datetime
    ) -> Entry | None:
        """
        Record a work span.

        Spans shorter than the minimum tracked duration are discarded and
        ``None`` is returned; that is expected for rapid interval switching.

        Args:
            scope_id: Scope the work is attributed to
            start: Segment start (epoch ms or datetime)
            end: Segment end (epoch ms or datetime)

        Returns:
            The stored Entry, or None if the span was too short
        """
        duration = to_ms(end) - to_ms(start)
        if duration < self.min_tracked_ms:
            logger.debug("Entry too short (%dms), not recording", duration)
            return None

        entry = Entry(
            id=str(uuid.uuid4()),
            scope_id=scope_id,
            start=to_datetime(start),
            end=to_datetime(end),
        )
        self._entries.append(entry)
        self._save()
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete an entry by id. Returns whether anything was removed."""
        remaining = [entry for entry in self._entries if entry.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._save()
        return True

    def cleanup_old_entries(self) -> int:
        """Remove entries that ended before local midnight two days ago.

        Returns:
            Number of entries removed
        """
        cutoff = cleanup_cutoff(self.clock(), self.retention_days)
        kept = [entry for entry in self._entries if entry.end >= cutoff]
        removed = len(self._entries) - len(kept)
        if removed:
            self._entries = kept
            self._save()
            logger.info("Cleaned up %d old entries", removed)
        return removed

    def todays_entries(self, scopes: Iterable[Scope]) -> list[EnrichedEntry]:
        """Entries that start or end on the current local day, joined with their scope."""
        now = self.clock()
        scopes_by_id = {scope.id: scope for scope in scopes}
        return [
            EnrichedEntry(
                entry=entry,
                scope=scopes_by_id.get(entry.scope_id),
                duration_ms=entry.duration_ms,
            )
            for entry in self._entries
            if is_same_local_day(entry.start, now) or is_same_local_day(entry.end, now)
        ]

    def time_spent_by_scope(self, scopes: Iterable[Scope]) -> dict[int, int]:
        """Milliseconds worked today per scope id; every known scope starts at 0."""
        scopes = list(scopes)
        totals = {scope.id: 0 for scope in scopes}
        for enriched in self.todays_entries(scopes):
            if enriched.scope_id in totals:
                totals[enriched.scope_id] += enriched.duration_ms
        return totals
