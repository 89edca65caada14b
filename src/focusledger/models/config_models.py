"""Configuration models for focusledger.

Everything the timer treats as tunable lives here: the interval presets, the
minimum span worth recording, the alert debounce gap, the scopes entries are
attributed to, and where the ledger is stored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


class Scope(BaseModel):
    """A label that sessions and entries are attributed to."""

    id: int = Field(..., description="Stable scope identifier")
    name: str = Field(..., description="Display name")
    color: str = Field(default="666666", description="Hex colour without '#'")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


def default_scopes() -> list[Scope]:
    return [
        Scope(id=1, name="Work", color="4a90d9"),
        Scope(id=2, name="PMD", color="7cb342"),
    ]


class TimerConfig(BaseModel):
    """Pomodoro timer configuration."""

    intervals_minutes: list[int] = Field(default_factory=lambda: [5, 15, 30, 35, 45])
    default_interval_index: int = Field(default=4)
    min_tracked_ms: int = Field(default=60_000)
    ding_min_gap_ms: int = Field(default=5_000)
    long_session_warning_minutes: int = Field(default=55)
    redraw_interval_ms: int = Field(default=100)
    snapshot_interval_ms: int = Field(default=1_000)
    day_check_interval_ms: int = Field(default=10_000)

    @field_validator("intervals_minutes")
    @classmethod
    def validate_intervals(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("at least one interval preset is required")
        if any(minutes <= 0 for minutes in v):
            raise ValueError("interval presets must be positive")
        return v

    @model_validator(mode="after")
    def validate_default_index(self) -> "TimerConfig":
        if not 0 <= self.default_interval_index < len(self.intervals_minutes):
            raise ValueError(
                f"default_interval_index {self.default_interval_index} is out of range"
                f" for {len(self.intervals_minutes)} presets"
            )
        return self

    @property
    def interval_durations_ms(self) -> list[int]:
        return [minutes * 60_000 for minutes in self.intervals_minutes]

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.intervals_minutes)


class StorageConfig(BaseModel):
    """Ledger storage configuration."""

    path: str | None = Field(
        default=None, description="Store directory; defaults to the user data dir"
    )
    retention_days: int = Field(default=2, ge=0)


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)


class LogConfig(BaseModel):
    """Log file configuration."""

    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    directory: str | None = Field(
        default=None, description="Log directory; defaults to the user log dir"
    )
    max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    backup_count: int = Field(default=3, ge=0)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"unknown log level '{v}'")
        return level


class AppConfig(BaseModel):
    """Main focusledger configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    scopes: list[Scope] = Field(default_factory=default_scopes)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    @field_validator("scopes")
    @classmethod
    def validate_unique_ids(cls, v: list[Scope]) -> list[Scope]:
        ids = [scope.id for scope in v]
        if len(ids) != len(set(ids)):
            raise ValueError("scope ids must be unique")
        return v

    def find_scope(self, ref: str | int) -> Scope:
        """Find a scope by id or case-insensitive name.

        Raises:
            ValueError: If no scope matches
        """
        ref_str = str(ref).strip()
        for scope in self.scopes:
            if ref_str.isdigit() and scope.id == int(ref_str):
                return scope
        for scope in self.scopes:
            if scope.name.lower() == ref_str.lower():
                return scope
        raise ValueError(f"Scope '{ref}' not found")
