"""Tests for boot-time session recovery."""

from __future__ import annotations

import logging

import pytest

from focusledger.adapters.store import SNAPSHOT_KEY, MemoryStore
from focusledger.models.config_models import TimerConfig
from focusledger.models.focus.engine import SessionEngine
from focusledger.models.focus.entries import EntryLedger
from focusledger.models.focus.recovery import recover_session
from focusledger.utils.dates import MS_IN_MINUTE

MIN = MS_IN_MINUTE


def _reboot(store, scopes, clock) -> SessionEngine:
    """Simulate a process restart: fresh ledger and engine over the same store."""
    ledger = EntryLedger(store, clock=clock)
    initial = recover_session(store, scopes, clock)
    return SessionEngine(ledger, store, initial_state=initial, clock=clock)


def _snapshot(**overrides) -> dict:
    data = {
        "scope_id": 1,
        "goal": "Write",
        "start_time": 1_000_000,
        "ms_remaining": 20 * MIN,
        "launched_time": 900_000,
        "total_work_ms": 5 * MIN,
        "is_playing": True,
        "interval_index": 2,
    }
    data.update(overrides)
    return data


class TestRecoverSession:
    def test_no_snapshot(self, store, scopes, clock):
        assert recover_session(store, scopes, clock) is None

    def test_playing_snapshot_keeps_segment_start(self, scopes, clock):
        store = MemoryStore({SNAPSHOT_KEY: _snapshot()})

        state = recover_session(store, scopes, clock)

        assert state.is_active is True
        assert state.is_playing is True
        assert state.scope == scopes[0]
        assert state.goal == "Write"
        assert state.segment_started_at == 1_000_000
        assert state.ms_remaining == 20 * MIN
        assert state.launched_at == 900_000
        assert state.total_work_ms == 5 * MIN
        assert state.interval_index == 2

    def test_paused_snapshot_restarts_segment_now(self, scopes, clock):
        store = MemoryStore({SNAPSHOT_KEY: _snapshot(is_playing=False)})

        state = recover_session(store, scopes, clock)

        assert state.is_playing is False
        assert state.segment_started_at == clock()

    @pytest.mark.parametrize("index", [None, -1, 5, 99])
    def test_invalid_interval_index_falls_back_to_default(self, scopes, clock, index):
        store = MemoryStore({SNAPSHOT_KEY: _snapshot(interval_index=index)})

        state = recover_session(store, scopes, clock, TimerConfig())

        assert state.interval_index == 4

    def test_missing_goal_defaults_to_empty(self, scopes, clock):
        data = _snapshot()
        del data["goal"]
        store = MemoryStore({SNAPSHOT_KEY: data})

        assert recover_session(store, scopes, clock).goal == ""

    @pytest.mark.parametrize("missing", ["scope_id", "start_time"])
    def test_missing_required_field_discards(self, scopes, clock, missing, caplog):
        caplog.set_level(logging.WARNING, logger="focusledger")
        data = _snapshot()
        del data[missing]
        store = MemoryStore({SNAPSHOT_KEY: data})

        assert recover_session(store, scopes, clock) is None
        assert SNAPSHOT_KEY not in store
        assert "Discarding malformed session snapshot" in caplog.text

    @pytest.mark.parametrize("value", [[1, 2], "snapshot", 42])
    def test_non_dict_discards(self, scopes, clock, value):
        store = MemoryStore({SNAPSHOT_KEY: value})

        assert recover_session(store, scopes, clock) is None
        assert SNAPSHOT_KEY not in store

    def test_bad_field_type_discards(self, scopes, clock):
        store = MemoryStore({SNAPSHOT_KEY: _snapshot(start_time="yesterday")})

        assert recover_session(store, scopes, clock) is None
        assert SNAPSHOT_KEY not in store

    def test_corrupt_json_discards(self, scopes, clock):
        store = MemoryStore()
        store.set_raw(SNAPSHOT_KEY, "{\"scope_id\": 1,")

        assert recover_session(store, scopes, clock) is None

    def test_unknown_scope_discards(self, scopes, clock):
        store = MemoryStore({SNAPSHOT_KEY: _snapshot(scope_id=99)})

        assert recover_session(store, scopes, clock) is None
        assert SNAPSHOT_KEY not in store


class TestRoundTrip:
    def test_paused_session_ms_left_unchanged(self, store, scopes, clock, work):
        engine = _reboot(store, scopes, clock)
        engine.start(work, "goal")
        clock.advance_minutes(12)
        engine.toggle_play_pause()
        before = engine.get_ms_left()

        clock.advance_minutes(90)
        recovered = _reboot(store, scopes, clock)

        assert recovered.is_active is True
        assert recovered.is_playing is False
        assert recovered.get_ms_left() == before

    def test_playing_session_continues_counting(self, store, scopes, clock, work):
        engine = _reboot(store, scopes, clock)
        engine.start(work, "goal")
        clock.advance_minutes(3)
        engine.save_snapshot()
        before = engine.get_ms_left()

        clock.advance_minutes(2)
        recovered = _reboot(store, scopes, clock)

        assert recovered.is_playing is True
        assert recovered.get_ms_left() == before - 2 * MIN

    def test_recovered_session_finishes_into_ledger(self, store, scopes, clock, work):
        engine = _reboot(store, scopes, clock)
        engine.start(work, "goal")
        clock.advance_minutes(7)

        recovered = _reboot(store, scopes, clock)
        recovered.finish()

        after = _reboot(store, scopes, clock)
        assert after.is_active is False
        assert [entry.duration_ms for entry in after.ledger.entries] == [7 * MIN]

    def test_finished_session_is_not_resurrected(self, store, scopes, clock, work):
        engine = _reboot(store, scopes, clock)
        engine.start(work, "goal")
        clock.advance_minutes(5)
        engine.finish()

        assert _reboot(store, scopes, clock).is_active is False
