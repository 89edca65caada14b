"""Shared test fixtures and configuration.

Provides a controllable clock, an in-memory store, and isolation of the
platformdirs locations so no test touches the real config, data or log dirs.
"""

from __future__ import annotations

import logging
from datetime import datetime
from unittest.mock import patch

import pytest

from focusledger.adapters.store import MemoryStore
from focusledger.models.config_models import AppConfig, OutputConfig, Scope, TimerConfig
from focusledger.models.focus.engine import SessionEngine
from focusledger.models.focus.entries import EntryLedger
from focusledger.utils.dates import MS_IN_MINUTE, to_ms
from focusledger.utils.ui.console import apply_output_config


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, start: int):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now

    def advance_minutes(self, minutes: float) -> int:
        return self.advance(int(minutes * MS_IN_MINUTE))


# Local noon keeps a comfortable distance from both day boundaries
LOCAL_NOON = to_ms(datetime(2024, 6, 12, 12, 0, 0))


def _close_handlers() -> None:
    app_logger = logging.getLogger("focusledger")
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolate_platform_dirs(tmp_path):
    """Redirect log, config and data dirs into tmp_path."""
    import focusledger.utils.logger as logger_mod
    from focusledger.services.config_service import get_config_service

    logger_mod._logger = None
    _close_handlers()
    get_config_service.cache_clear()
    with (
        patch("focusledger.utils.logger.user_log_dir", return_value=str(tmp_path / "log")),
        patch(
            "focusledger.services.config_service.user_config_dir",
            return_value=str(tmp_path / "config"),
        ),
        patch(
            "focusledger.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ),
    ):
        yield
    get_config_service.cache_clear()
    _close_handlers()
    logger_mod._logger = None
    apply_output_config(OutputConfig())


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(LOCAL_NOON)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def scopes() -> list[Scope]:
    return [
        Scope(id=1, name="Work", color="4a90d9"),
        Scope(id=2, name="PMD", color="7cb342"),
    ]


@pytest.fixture()
def work(scopes) -> Scope:
    return scopes[0]


@pytest.fixture()
def timer_config() -> TimerConfig:
    return TimerConfig()


@pytest.fixture()
def app_config(scopes) -> AppConfig:
    return AppConfig(scopes=scopes)


@pytest.fixture()
def ledger(store, clock) -> EntryLedger:
    return EntryLedger(store, clock=clock)


@pytest.fixture()
def engine(ledger, store, clock, timer_config) -> SessionEngine:
    return SessionEngine(ledger, store, timer_config=timer_config, clock=clock)
