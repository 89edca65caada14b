"""Time-entry commands: today's ledger, deletion and retention cleanup."""

import typer
from rich.table import Table

from focusledger.commands.decorators import AppError, command_wrapper
from focusledger.commands.focus import get_focus_service
from focusledger.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from focusledger.utils.ui.console import get_console
from focusledger.utils.ui.formatters import format_duration, format_success

console = get_console()
app = typer.Typer(help="Time entries recorded by focus sessions")


@app.command("today")
@command_wrapper
def todays_entries():
    """List today's entries and the time spent per scope."""
    service = get_focus_service()
    entries = service.todays_entries()

    if not entries:
        console.print("[yellow]No entries recorded today[/yellow]")
        return

    table = Table(title=f"Today's entries ({len(entries)})", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Scope", style="cyan")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Duration", justify="right")

    for item in sorted(entries, key=lambda e: e.start):
        table.add_row(
            item.id[:8],
            item.scope.name if item.scope else f"#{item.scope_id}",
            item.start.astimezone().strftime("%H:%M"),
            item.end.astimezone().strftime("%H:%M"),
            format_duration(item.duration_ms),
        )
    console.print(table)

    console.print()
    totals = service.time_spent_by_scope()
    for scope in service.scopes:
        spent = totals.get(scope.id, 0)
        console.print(f"[bold]{scope.name}[/bold]: {format_duration(spent)}")


@app.command("delete")
@command_wrapper
def delete_entry(
    entry_id: str = typer.Argument(..., help="Entry id (or a unique prefix of it)"),
):
    """Delete an entry."""
    service = get_focus_service()
    matches = [entry for entry in service.ledger.entries if entry.id.startswith(entry_id)]

    if not matches:
        raise AppError(f"Entry '{entry_id}' not found", ERROR_NOT_FOUND)
    if len(matches) > 1:
        raise AppError(
            f"Entry id '{entry_id}' is ambiguous ({len(matches)} matches)", ERROR_INVALID_ARGS
        )

    service.ledger.delete(matches[0].id)
    format_success(f"Deleted entry {matches[0].id[:8]}")


@app.command("cleanup")
@command_wrapper
def cleanup_entries():
    """Remove entries older than the retention window."""
    service = get_focus_service()
    removed = service.cleaned_up + service.ledger.cleanup_old_entries()
    format_success(f"Removed {removed} old entries")
