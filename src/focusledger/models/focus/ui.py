"""Live countdown rendering for ``focusledger focus watch``."""

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from focusledger.utils.dates import MS_IN_SECOND
from focusledger.utils.ui.console import get_console
from focusledger.utils.ui.formatters import format_clock

from .engine import SessionEngine


class TimerDisplay:
    """Builds the watch-mode layout from the engine's current state."""

    def __init__(self, console: Console | None = None):
        self.console = console or get_console()

    def create_layout(self, engine: SessionEngine) -> Layout:
        """Create the timer layout with header, countdown and footer."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        overdue = engine.is_overdue()
        if overdue:
            title, color = "TIME IS UP", "bold red"
        elif not engine.is_playing:
            title, color = "PAUSED", "yellow"
        else:
            title, color = "FOCUS", "cyan"

        scope_name = engine.scope.name if engine.scope else ""
        header = Text(f"{title}  ·  {scope_name}", style=color, justify="center")
        layout["header"].update(Align.center(header, vertical="middle"))
        layout["body"].update(Align.center(self._create_body(engine, overdue), vertical="middle"))
        layout["footer"].update(
            Align.center(self._create_footer(engine, overdue), vertical="middle")
        )
        return layout

    def _create_body(self, engine: SessionEngine, overdue: bool) -> Panel:
        components = []
        if engine.goal:
            components.append(Text(engine.goal[:60], style="bold white", justify="center"))
            components.append(Text(""))

        if overdue:
            components.append(
                Text("time is up - run 'focusledger focus finish'", style="bold red", justify="center")
            )
        else:
            clock_text = format_clock(engine.get_ms_left() / MS_IN_SECOND)
            if not engine.is_playing:
                clock_text += "  ▮▮"
            components.append(Text(clock_text, style="bold cyan", justify="center"))

        presets = Text(justify="center")
        for idx, minutes in enumerate(engine.config.intervals_minutes):
            style = "reverse" if idx == engine.interval_index else "dim"
            presets.append(f" {minutes} ", style=style)
            presets.append(" ")
        components.append(Text(""))
        components.append(presets)

        return Panel(Group(*components), border_style="red" if overdue else "cyan")

    def _create_footer(self, engine: SessionEngine, overdue: bool) -> Text:
        session_seconds = engine.get_session_time() / MS_IN_SECOND
        style = "bold yellow" if engine.is_long_session() else "dim"
        if overdue:
            style = "bold red"
        footer = Text(justify="center")
        footer.append(f"session {format_clock(session_seconds, show_hours=True)}", style=style)
        footer.append("  ·  Ctrl+C to leave (the session keeps running)", style="dim")
        return footer
