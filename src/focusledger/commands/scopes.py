"""Scope commands."""

import typer
from rich.table import Table

from focusledger.commands.decorators import command_wrapper
from focusledger.commands.focus import get_focus_service
from focusledger.utils.ui.console import get_console
from focusledger.utils.ui.formatters import format_duration

console = get_console()
app = typer.Typer(help="Scopes that focus time is attributed to")


@app.command("list")
@command_wrapper
def list_scopes():
    """List scopes with the time spent on each today."""
    service = get_focus_service()
    totals = service.time_spent_by_scope()

    table = Table(title="Scopes", show_header=True)
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Today", justify="right")

    for scope in service.scopes:
        name = f"[#{scope.color}]■[/#{scope.color}] {scope.name}"
        table.add_row(str(scope.id), name, format_duration(totals.get(scope.id, 0)))

    console.print(table)
