"""Focus mode - Pomodoro engine, entry ledger and session recovery."""

from .engine import SessionEngine, should_fire
from .entries import EnrichedEntry, Entry, EntryLedger
from .recovery import recover_session
from .state import FocusSettings, SessionSnapshot, SessionState

__all__ = [
    "SessionEngine",
    "should_fire",
    "Entry",
    "EnrichedEntry",
    "EntryLedger",
    "recover_session",
    "SessionState",
    "SessionSnapshot",
    "FocusSettings",
]
