"""Focus session commands: start, pause/resume, adjust, finish, watch."""

import typer
from rich.live import Live
from rich.table import Table

from focusledger.commands.decorators import AppError, command_wrapper
from focusledger.models.focus.ui import TimerDisplay
from focusledger.services.config_service import get_config_service
from focusledger.services.focus_service import FocusService, create_focus_service
from focusledger.utils.dates import MS_IN_MINUTE, MS_IN_SECOND
from focusledger.utils.exit_codes import (
    ERROR_INVALID_ARGS,
    ERROR_INVALID_STATE,
    ERROR_NOT_FOUND,
)
from focusledger.utils.ui.console import get_console
from focusledger.utils.ui.formatters import format_clock, format_duration, format_success

console = get_console()
app = typer.Typer(help="Focus mode with Pomodoro timer")


def _ring_bell() -> None:
    console.bell()


def get_focus_service() -> FocusService:
    """Boot the focus service for the configured store, recovering any session."""
    config_service = get_config_service()
    return create_focus_service(
        config_service.config, config_service.store_dir, play_audio_cue=_ring_bell
    )


def _require_active(service: FocusService) -> None:
    if not service.engine.is_active:
        raise AppError(
            "No active focus session. Start one with 'focusledger focus start SCOPE'.",
            ERROR_INVALID_STATE,
        )


@app.command("start")
@command_wrapper
def start_focus(
    scope: str = typer.Argument(..., help="Scope id or name"),
    goal: str = typer.Argument(None, help="Goal for this session (defaults to the last one)"),
):
    """Start a focus session on a scope."""
    service = get_focus_service()
    engine = service.engine

    if engine.is_active:
        current = engine.scope.name if engine.scope else "?"
        raise AppError(
            f"A focus session on '{current}' is already active."
            " Use 'focusledger focus finish' first.",
            ERROR_INVALID_STATE,
        )

    try:
        selected = service.config.find_scope(scope)
    except ValueError as e:
        raise AppError(str(e), ERROR_NOT_FOUND) from e

    if goal is None:
        goal = service.last_goal

    engine.start(selected, goal)
    minutes = service.config.timer.intervals_minutes[engine.interval_index]
    format_success(f"Focus started on [cyan]{selected.name}[/cyan] for {minutes} minutes")
    if goal:
        console.print(f"Goal: {goal}")


@app.command("toggle")
@command_wrapper
def toggle_focus():
    """Pause a running timer or resume a paused one."""
    service = get_focus_service()
    _require_active(service)
    engine = service.engine

    if not engine.toggle_play_pause():
        raise AppError(
            "Time is up; the timer cannot be paused. Add time or finish the session.",
            ERROR_INVALID_STATE,
        )

    if engine.is_playing:
        console.print("[cyan]Resumed[/cyan]")
    else:
        console.print(
            f"[yellow]Paused[/yellow] with {format_clock(engine.get_ms_left() / MS_IN_SECOND)} left"
        )


@app.command("add")
@command_wrapper
def add_time(
    minutes: int = typer.Argument(..., help="Minutes to add to the countdown"),
):
    """Add time to the countdown, clearing any overdue deficit first."""
    if minutes <= 0:
        raise AppError("Minutes must be positive", ERROR_INVALID_ARGS)

    service = get_focus_service()
    _require_active(service)
    service.engine.add_time(minutes * MS_IN_MINUTE)
    left = format_clock(service.engine.get_ms_left() / MS_IN_SECOND)
    format_success(f"Added {minutes}m, {left} left")


@app.command("interval")
@command_wrapper
def change_interval(
    index: int = typer.Argument(..., help="Index of the interval preset"),
):
    """Switch to another interval preset and restart the countdown."""
    service = get_focus_service()
    timer = service.config.timer
    if not timer.is_valid_index(index):
        presets = ", ".join(f"{i}={m}m" for i, m in enumerate(timer.intervals_minutes))
        raise AppError(f"Invalid interval index {index}. Presets: {presets}", ERROR_INVALID_ARGS)

    _require_active(service)
    service.engine.change_interval(index)
    format_success(f"Interval set to {timer.intervals_minutes[index]} minutes")


@app.command("finish")
@command_wrapper
def finish_focus():
    """Finish the session and record the final segment."""
    service = get_focus_service()
    _require_active(service)
    scope = service.engine.scope
    total_ms = service.engine.finish()

    format_success(f"Session on [cyan]{scope.name}[/cyan] finished")
    console.print(f"Worked: {format_duration(total_ms)}")
    today = service.time_spent_by_scope().get(scope.id, 0)
    console.print(f"Today on {scope.name}: {format_duration(today)}")


@app.command("status")
@command_wrapper
def focus_status():
    """Show the current session."""
    service = get_focus_service()
    engine = service.engine

    if not engine.is_active:
        console.print("[dim]No active focus session[/dim]")
        if service.last_goal:
            console.print(f"[dim]Last goal: {service.last_goal}[/dim]")
        return

    if engine.is_overdue():
        state = "[bold red]overdue[/bold red]"
    elif engine.is_playing:
        state = "[cyan]running[/cyan]"
    else:
        state = "[yellow]paused[/yellow]"

    session_time = format_clock(engine.get_session_time() / MS_IN_SECOND, show_hours=True)
    if engine.is_long_session():
        session_time = f"[bold yellow]{session_time}[/bold yellow]"

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Scope", engine.scope.name)
    table.add_row("Goal", engine.goal or "-")
    table.add_row("State", state)
    table.add_row("Time left", format_clock(engine.get_ms_left() / MS_IN_SECOND))
    table.add_row("Interval", f"{service.config.timer.intervals_minutes[engine.interval_index]}m")
    table.add_row("Session", session_time)
    table.add_row("Worked", format_duration(engine.total_work_ms))
    console.print(table)


@app.command("watch")
@command_wrapper
def watch_focus():
    """Show a live countdown and ring the bell when time is up."""
    service = get_focus_service()
    _require_active(service)
    display = TimerDisplay(console)

    # Watch only observes; toggle, add, interval and finish run as separate commands
    try:
        with Live(
            display.create_layout(service.engine),
            console=console,
            screen=True,
            refresh_per_second=10,
        ) as live:
            service.run_ticks(
                on_tick=lambda _result: live.update(display.create_layout(service.engine))
            )
    except KeyboardInterrupt:
        console.print("[dim]Left watch mode; the session is still running.[/dim]")
        return

    console.print("[dim]The session was finished.[/dim]")
