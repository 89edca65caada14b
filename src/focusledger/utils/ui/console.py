"""The shared Rich console every command and formatter prints through."""

from functools import lru_cache

from rich.console import Console

from focusledger.models.config_models import OutputConfig


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Get the process-wide Rich Console."""
    return Console()


def apply_output_config(output: OutputConfig) -> Console:
    """Switch colour on or off for the shared console.

    Modules grab the console at import time, before the config is loaded,
    so the setting is applied to the existing instance.
    """
    console = get_console()
    console.no_color = not output.color
    return console
