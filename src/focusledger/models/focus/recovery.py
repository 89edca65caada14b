"""Boot-time recovery of an in-flight session from its persisted snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from focusledger.adapters.store import SNAPSHOT_KEY, KeyValueStore
from focusledger.models.config_models import Scope, TimerConfig
from focusledger.utils.dates import Clock, now_ms

from .state import SessionSnapshot, SessionState

logger = logging.getLogger(__name__)


def recover_session(
    store: KeyValueStore,
    scopes: Iterable[Scope],
    clock: Clock = now_ms,
    timer_config: TimerConfig | None = None,
) -> SessionState | None:
    """
    Rebuild the session that was running when the process last stopped.

    A playing session keeps its original segment start so the countdown
    continues as if uninterrupted; a paused one restarts its segment clock
    now, so no time accrues across the restart.

    Args:
        store: Store holding the snapshot
        scopes: Currently known scopes
        clock: Epoch-ms clock
        timer_config: Preset list used to validate the interval index

    Returns:
        The recovered active state, or None to boot idle. Unusable
        snapshots are erased.
    """
    raw = store.get(SNAPSHOT_KEY)
    if raw is None:
        return None

    timer_config = timer_config or TimerConfig()
    snapshot = SessionSnapshot.parse(raw)
    if snapshot is None:
        logger.warning("Discarding malformed session snapshot")
        store.delete(SNAPSHOT_KEY)
        return None

    scope = next((s for s in scopes if s.id == snapshot.scope_id), None)
    if scope is None:
        logger.warning("Discarding session snapshot for unknown scope %s", snapshot.scope_id)
        store.delete(SNAPSHOT_KEY)
        return None

    interval_index = snapshot.interval_index
    if interval_index is None or not timer_config.is_valid_index(interval_index):
        interval_index = timer_config.default_interval_index

    state = SessionState(
        is_active=True,
        is_playing=snapshot.is_playing,
        scope=scope,
        goal=snapshot.goal,
        interval_index=interval_index,
        ms_remaining=snapshot.ms_remaining,
        launched_at=snapshot.launched_time,
        total_work_ms=snapshot.total_work_ms,
        segment_started_at=snapshot.start_time if snapshot.is_playing else clock(),
    )
    return state
