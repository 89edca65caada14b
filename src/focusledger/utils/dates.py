"""Time helpers shared by the ledger, the engine and the CLI.

All engine arithmetic uses integer epoch milliseconds; these helpers convert
between that representation and timezone-aware datetimes, and answer the
local calendar-day questions the ledger needs.
"""

from __future__ import annotations

import time as _time
from collections.abc import Callable
from datetime import UTC, datetime, time, timedelta

MS_IN_SECOND = 1000
SECS_IN_MINUTE = 60
MINS_IN_HOUR = 60
MS_IN_MINUTE = SECS_IN_MINUTE * MS_IN_SECOND

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(_time.time() * MS_IN_SECOND)


def to_datetime(value: int | datetime) -> datetime:
    """Normalize epoch ms or a datetime to an aware UTC datetime.

    Naive datetimes are taken to be local time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.astimezone()
        return value.astimezone(UTC)
    return datetime.fromtimestamp(value / MS_IN_SECOND, tz=UTC)


def to_ms(value: int | datetime) -> int:
    """Normalize a datetime (or epoch ms) to epoch milliseconds."""
    if isinstance(value, datetime):
        return int(round(to_datetime(value).timestamp() * MS_IN_SECOND))
    return int(value)


def local_date(value: int | datetime):
    """Local calendar date of an instant."""
    return to_datetime(value).astimezone().date()


def start_of_day(value: int | datetime, days_ago: int = 0) -> datetime:
    """Local midnight of the day containing *value*, shifted back *days_ago* days."""
    day = local_date(value) - timedelta(days=days_ago)
    return datetime.combine(day, time.min).astimezone()


def cleanup_cutoff(now: int, retention_days: int = 2) -> datetime:
    """Start of the oldest local day that is still kept (midnight, two days ago)."""
    return start_of_day(now, days_ago=retention_days)


def is_same_local_day(value: int | datetime, now: int) -> bool:
    """Check whether *value* falls on the same local calendar day as *now*."""
    return local_date(value) == local_date(now)


class DayRolloverWatcher:
    """Detects local calendar-day changes between periodic checks."""

    def __init__(self, clock: Clock = now_ms):
        self._clock = clock
        self._day = local_date(clock())

    @property
    def current_day(self):
        return self._day

    def check(self) -> bool:
        """Return True once for each change of local date since the last check."""
        today = local_date(self._clock())
        if today != self._day:
            self._day = today
            return True
        return False
