"""Focus service: boots the ledger and engine and drives the periodic ticks.

Boot order matters. The ledger is loaded and cleaned first, then the
recovery snapshot is read and handed to the engine constructor, so an
interrupted process resumes the same session on its next start.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from focusledger.adapters.store import SETTINGS_KEY, JsonFileStore, KeyValueStore
from focusledger.models.config_models import AppConfig, Scope
from focusledger.models.focus.engine import SessionEngine
from focusledger.models.focus.entries import EnrichedEntry, EntryLedger
from focusledger.models.focus.recovery import recover_session
from focusledger.models.focus.state import FocusSettings
from focusledger.utils.dates import Clock, DayRolloverWatcher, now_ms

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What happened during one tick of the watch loop."""

    dinged: bool = False
    synced: bool = False
    day_rolled_over: bool = False


class FocusService:
    """Owns one store, one ledger and one engine for the running process."""

    def __init__(
        self,
        config: AppConfig,
        store: KeyValueStore,
        clock: Clock = now_ms,
        play_audio_cue: Callable[[], None] | None = None,
    ):
        self.config = config
        self.store = store
        self.clock = clock

        self.ledger = EntryLedger(
            store,
            clock=clock,
            min_tracked_ms=config.timer.min_tracked_ms,
            retention_days=config.storage.retention_days,
        )
        self.cleaned_up = self.ledger.cleanup_old_entries()

        initial_state = recover_session(store, config.scopes, clock, config.timer)
        self.recovered = initial_state is not None
        if initial_state is not None:
            logger.info(
                "Recovered %s session on scope %s",
                "running" if initial_state.is_playing else "paused",
                initial_state.scope.id,
            )
        self.engine = SessionEngine(
            self.ledger,
            store,
            timer_config=config.timer,
            initial_state=initial_state,
            clock=clock,
            play_audio_cue=play_audio_cue,
            save_last_goal=self.save_last_goal,
        )

        self.day_watcher = DayRolloverWatcher(clock)
        self._was_overdue = False
        self._next_sync_at = clock()
        self._next_day_check_at = clock()

    @property
    def scopes(self) -> list[Scope]:
        return self.config.scopes

    # Settings -------------------------------------------------------------

    def load_settings(self) -> FocusSettings:
        return FocusSettings.parse(self.store.get(SETTINGS_KEY))

    def save_last_goal(self, goal: str) -> None:
        settings = self.load_settings()
        settings.last_goal = goal
        self.store.set(SETTINGS_KEY, settings.model_dump())

    @property
    def last_goal(self) -> str:
        return self.load_settings().last_goal

    # Ledger views ---------------------------------------------------------

    def todays_entries(self) -> list[EnrichedEntry]:
        return self.ledger.todays_entries(self.scopes)

    def time_spent_by_scope(self) -> dict[int, int]:
        return self.ledger.time_spent_by_scope(self.scopes)

    # Ticks ----------------------------------------------------------------

    def sync_from_store(self) -> bool:
        """Adopt the session as other commands last persisted it.

        Returns:
            Whether a session is still active
        """
        state = recover_session(self.store, self.scopes, self.clock, self.config.timer)
        if state is None and self.engine.is_active:
            logger.info("Session ended by another command")
        self.engine.replace_state(state)
        return self.engine.is_active

    def tick(self) -> TickResult:
        """Run one redraw-cadence step: re-read the snapshot, alert on overdue, watch the date.

        A tick never writes the snapshot; pause, finish and the other
        transitions are persisted by the commands that make them.
        """
        result = TickResult()
        now = self.clock()
        timer = self.config.timer

        if now >= self._next_sync_at:
            self._next_sync_at = now + timer.snapshot_interval_ms
            self.sync_from_store()
            result.synced = True

        overdue = self.engine.is_active and self.engine.is_overdue()
        if overdue and not self._was_overdue:
            result.dinged = self.engine.play_ding()
        self._was_overdue = overdue

        if now >= self._next_day_check_at:
            self._next_day_check_at = now + timer.day_check_interval_ms
            result.day_rolled_over = self.day_watcher.check()
            if result.day_rolled_over:
                logger.info("Local day rolled over to %s", self.day_watcher.current_day)

        return result

    def run_ticks(
        self,
        on_tick: Callable[[TickResult], None] | None = None,
        should_stop: Callable[[], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Tick until the session goes idle or *should_stop* returns True."""
        interval_s = self.config.timer.redraw_interval_ms / 1000
        while self.engine.is_active:
            if should_stop is not None and should_stop():
                break
            result = self.tick()
            if on_tick is not None:
                on_tick(result)
            sleep(interval_s)


def create_focus_service(
    config: AppConfig,
    store_dir,
    play_audio_cue: Callable[[], None] | None = None,
) -> FocusService:
    """Build a FocusService backed by a JSON file store in *store_dir*."""
    return FocusService(config, JsonFileStore(store_dir), play_audio_cue=play_audio_cue)
