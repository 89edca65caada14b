"""Main entry point for the focusledger CLI."""

import typer

from focusledger import __version__
from focusledger.commands import config, entries, focus, scopes
from focusledger.utils.ui.console import get_console

app = typer.Typer(
    name="focusledger",
    help="A Pomodoro focus timer with a daily time-entry ledger",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(focus.app, name="focus", help="Focus session commands")
app.add_typer(entries.app, name="entries", help="Time entry commands")
app.add_typer(scopes.app, name="scopes", help="Scope commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]focusledger[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
