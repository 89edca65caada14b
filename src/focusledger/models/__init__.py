"""Data models for focusledger."""

from .config_models import (
    AppConfig,
    LogConfig,
    OutputConfig,
    Scope,
    StorageConfig,
    TimerConfig,
)

__all__ = [
    "AppConfig",
    "LogConfig",
    "OutputConfig",
    "Scope",
    "StorageConfig",
    "TimerConfig",
]
