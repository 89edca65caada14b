"""Configuration management commands."""

import typer

from focusledger.commands.decorators import AppError, command_wrapper
from focusledger.services.config_service import get_config_service
from focusledger.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from focusledger.utils.ui.console import get_console
from focusledger.utils.ui.formatters import format_output, format_success

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _parse_value(value: str):
    """Coerce a CLI string into bool, int, a list of ints or leave it as str."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.lower() in ("none", "null"):
        return None
    if value.lstrip("-").isdigit():
        return int(value)
    if "," in value and all(part.strip().isdigit() for part in value.split(",")):
        return [int(part) for part in value.split(",")]
    return value


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format (pretty, json)"),
) -> None:
    """Show the current configuration."""
    config_service = get_config_service()
    format_output(config_service.config.model_dump(mode="json"), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.default_interval_index)"),
) -> None:
    """Get a configuration value."""
    missing = object()
    value = get_config_service().get(key, missing)
    if value is missing:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND)
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.ding_min_gap_ms)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = _parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND) from e
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset all configuration to defaults?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
