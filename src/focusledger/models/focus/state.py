"""Session state and its persisted snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from focusledger.models.config_models import Scope

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Live state of the Pomodoro engine. All times are epoch milliseconds."""

    is_active: bool = False
    is_playing: bool = False
    scope: Scope | None = None
    goal: str = ""
    interval_index: int = 0
    ms_remaining: int = 0
    launched_at: int | None = None
    total_work_ms: int = 0
    segment_started_at: int | None = None

    @classmethod
    def idle(cls, default_interval_index: int = 0) -> "SessionState":
        return cls(interval_index=default_interval_index)

    def copy(self) -> "SessionState":
        return replace(self)

    def to_snapshot(self) -> "SessionSnapshot | None":
        """Build the persisted form; None when there is nothing to persist."""
        if not self.is_active or self.scope is None or self.segment_started_at is None:
            return None
        return SessionSnapshot(
            scope_id=self.scope.id,
            goal=self.goal,
            start_time=self.segment_started_at,
            ms_remaining=self.ms_remaining,
            launched_time=self.launched_at,
            total_work_ms=self.total_work_ms,
            is_playing=self.is_playing,
            interval_index=self.interval_index,
        )


class SessionSnapshot(BaseModel):
    """Validated store record of an in-flight session."""

    scope_id: int
    start_time: int  # segment start, epoch ms
    goal: str = ""
    ms_remaining: int = 0
    launched_time: int | None = None
    total_work_ms: int = 0
    is_playing: bool = False
    interval_index: int | None = None

    def to_record(self) -> dict:
        return self.model_dump()

    @classmethod
    def parse(cls, data: Any) -> "SessionSnapshot | None":
        """Validate a raw stored value. Returns None instead of raising."""
        if not isinstance(data, dict):
            return None
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning("Invalid session snapshot: %s", e)
            return None


class FocusSettings(BaseModel):
    """User settings persisted next to the ledger."""

    last_goal: str = Field(default="")

    @classmethod
    def parse(cls, data: Any) -> "FocusSettings":
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning("Invalid settings, using defaults: %s", e)
            return cls()
