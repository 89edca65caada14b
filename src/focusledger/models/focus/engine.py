"""Pomodoro session engine.

The engine owns a single :class:`SessionState` and exposes the timer
transitions. Whenever a work segment ends (pause, interval change, finish) the
segment is appended to the ledger first, and only then is the recovery
snapshot rewritten or erased, so a crash in between can at worst resurrect a
session but never lose a finished segment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from focusledger.adapters.store import SNAPSHOT_KEY, KeyValueStore
from focusledger.models.config_models import Scope, TimerConfig
from focusledger.utils.dates import MS_IN_MINUTE, Clock, now_ms

from .entries import EntryLedger
from .state import SessionState

logger = logging.getLogger(__name__)

DING_MIN_GAP_MS = 5_000


def should_fire(last_fired_ms: int | None, now: int, min_gap_ms: int = DING_MIN_GAP_MS) -> bool:
    """Decide whether a debounced alert may fire at *now*."""
    if last_fired_ms is None:
        return True
    return now - last_fired_ms >= min_gap_ms


class SessionEngine:
    """Timer state machine: Idle -> Running <-> Paused, Overdue derived, finish -> Idle."""

    def __init__(
        self,
        ledger: EntryLedger,
        store: KeyValueStore,
        timer_config: TimerConfig | None = None,
        initial_state: SessionState | None = None,
        clock: Clock = now_ms,
        play_audio_cue: Callable[[], None] | None = None,
        save_last_goal: Callable[[str], None] | None = None,
    ):
        self.ledger = ledger
        self.store = store
        self.config = timer_config or TimerConfig()
        self.clock = clock
        self._play_audio_cue = play_audio_cue
        self._save_last_goal = save_last_goal
        self._last_ding_at: int | None = None
        self._state = (
            initial_state.copy()
            if initial_state is not None
            else SessionState.idle(self.config.default_interval_index)
        )

    # -- read-only views -------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state.copy()

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def scope(self) -> Scope | None:
        return self._state.scope

    @property
    def goal(self) -> str:
        return self._state.goal

    @property
    def interval_index(self) -> int:
        return self._state.interval_index

    @property
    def ms_remaining(self) -> int:
        return self._state.ms_remaining

    @property
    def total_work_ms(self) -> int:
        return self._state.total_work_ms

    @property
    def intervals_ms(self) -> list[int]:
        return self.config.interval_durations_ms

    # -- computed ---------------------------------------------------------

    def _ms_passed_at(self, now: int) -> int:
        if self._state.segment_started_at is None:
            return 0
        return now - self._state.segment_started_at

    def _ms_left_at(self, now: int) -> int:
        if not self._state.is_playing:
            return self._state.ms_remaining
        return self._state.ms_remaining - self._ms_passed_at(now)

    def get_ms_passed(self) -> int:
        """Milliseconds since the current segment started."""
        return self._ms_passed_at(self.clock())

    def get_ms_left(self) -> int:
        """Milliseconds left on the countdown. Negative once overdue."""
        return self._ms_left_at(self.clock())

    def is_overdue(self) -> bool:
        return self.get_ms_left() <= 0

    def get_session_time(self) -> int:
        """Milliseconds since the session was launched (0 when idle)."""
        if self._state.launched_at is None:
            return 0
        return self.clock() - self._state.launched_at

    def is_long_session(self) -> bool:
        """Advisory only: the session has run past the long-session threshold."""
        threshold = self.config.long_session_warning_minutes * MS_IN_MINUTE
        return self.get_session_time() >= threshold

    # -- transitions ------------------------------------------------------

    def _close_segment(self, now: int) -> int:
        """Append the open segment to the ledger and return its length."""
        elapsed = self._ms_passed_at(now)
        if self._state.scope is not None and self._state.segment_started_at is not None:
            self.ledger.append(self._state.scope.id, self._state.segment_started_at, now)
        return elapsed

    def start(self, scope: Scope, goal: str) -> None:
        """Start a new session on *scope* with the default interval preset."""
        now = self.clock()
        index = self.config.default_interval_index
        self._state = SessionState(
            is_active=True,
            is_playing=True,
            scope=scope,
            goal=goal,
            interval_index=index,
            ms_remaining=self.intervals_ms[index],
            launched_at=now,
            total_work_ms=0,
            segment_started_at=now,
        )
        logger.info("Session started on scope %s (%s)", scope.id, scope.name)

        if goal and self._save_last_goal is not None:
            try:
                self._save_last_goal(goal)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Could not save last goal: %s", e)

        self.save_snapshot()

    def toggle_play_pause(self) -> bool:
        """Pause a running timer or resume a paused one.

        Returns:
            False if nothing changed (idle or overdue)
        """
        now = self.clock()
        if not self._state.is_active or self._ms_left_at(now) <= 0:
            return False

        if self._state.is_playing:
            elapsed = self._close_segment(now)
            self._state.total_work_ms += elapsed
            self._state.ms_remaining -= elapsed

        self._state.is_playing = not self._state.is_playing
        self._state.segment_started_at = now
        self.save_snapshot()
        return True

    def add_time(self, delta_ms: int) -> bool:
        """Extend the countdown. An overdue deficit is cleared before *delta_ms* is added."""
        if not self._state.is_active:
            return False

        ms_left = self._ms_left_at(self.clock())
        if ms_left < 0:
            self._state.ms_remaining = self._state.ms_remaining - ms_left + delta_ms
        else:
            self._state.ms_remaining += delta_ms
        self.save_snapshot()
        return True

    def change_interval(self, index: int) -> bool:
        """Switch to another preset, restarting the countdown at its full length."""
        if not self._state.is_active:
            return False

        now = self.clock()
        if self._state.is_playing:
            self._state.total_work_ms += self._close_segment(now)

        self._state.interval_index = index
        self._state.segment_started_at = now
        self._state.ms_remaining = self.intervals_ms[index]
        self.save_snapshot()
        return True

    def finish(self) -> int:
        """End the session and return the total milliseconds worked in it."""
        if not self._state.is_active:
            return 0

        now = self.clock()
        total = self._state.total_work_ms
        if self._state.is_playing:
            total += self._close_segment(now)

        scope = self._state.scope
        self._state = SessionState.idle(self.config.default_interval_index)
        self.store.delete(SNAPSHOT_KEY)
        logger.info(
            "Session finished on scope %s after %dms of work",
            scope.id if scope else None,
            total,
        )
        return total

    def play_ding(self) -> bool:
        """Signal the audio cue unless one was signalled within the minimum gap."""
        now = self.clock()
        if not should_fire(self._last_ding_at, now, self.config.ding_min_gap_ms):
            return False

        self._last_ding_at = now
        if self._play_audio_cue is not None:
            try:
                self._play_audio_cue()
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Audio cue failed: %s", e)
        return True

    # -- persistence -------------------------------------------------------

    def replace_state(self, state: SessionState | None) -> None:
        """Adopt state persisted by another process; None means it went idle.

        Nothing is written: the store already holds this state.
        """
        if state is None:
            self._state = SessionState.idle(self.config.default_interval_index)
        else:
            self._state = state.copy()

    def save_snapshot(self) -> bool:
        """Persist the recovery snapshot. No-op while idle."""
        snapshot = self._state.to_snapshot()
        if snapshot is None:
            return False
        return self.store.set(SNAPSHOT_KEY, snapshot.to_record())
