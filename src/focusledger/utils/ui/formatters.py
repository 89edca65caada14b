"""Output formatters for the focusledger CLI."""

import json
import math
from typing import Any

from rich.table import Table

from focusledger.utils.dates import MINS_IN_HOUR, MS_IN_SECOND, SECS_IN_MINUTE
from focusledger.utils.ui.console import get_console

console = get_console()


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        format_dict_table(data)
    else:
        console.print(data)


def format_dict_table(data: dict, prefix: str = "") -> None:
    """Render a (possibly nested) dict as a two-column key/value table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in _flatten(data, prefix):
        table.add_row(key, str(value))

    console.print(table)


def _flatten(data: dict, prefix: str = ""):
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _flatten(value, f"{full_key}.")
        else:
            yield full_key, value


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_clock(total_seconds: float, show_hours: bool = False) -> str:
    """Format seconds as ``M:SS`` or ``H:MM:SS``.

    Seconds are floored, so a countdown that is overdue by any fraction of a
    second already reads ``-0:01``.
    """
    is_negative = total_seconds < 0
    total = abs(math.floor(total_seconds))

    hours = total // 3600
    minutes = (total % 3600) // 60
    seconds = total % 60

    if hours > 0 or show_hours:
        result = f"{hours}:{minutes:02d}:{seconds:02d}"
    else:
        result = f"{minutes}:{seconds:02d}"

    return f"-{result}" if is_negative else result


def format_duration(ms: int) -> str:
    """Format milliseconds as ``2h 15m`` or ``15m``."""
    total_minutes = ms // MS_IN_SECOND // SECS_IN_MINUTE
    hours = total_minutes // MINS_IN_HOUR
    minutes = total_minutes % MINS_IN_HOUR

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
