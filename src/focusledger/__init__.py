"""focusledger - a Pomodoro focus timer with a daily time-entry ledger."""

__version__ = "0.1.0"
