"""Status bar component showing the clock, relay health and keyboard hints."""

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from ..models.weather import UnitSystem


class StatusBar(Horizontal):
    """Bottom status bar with time, relay status and keyboard hints."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
        width: 100%;
    }

    StatusBar #status-time {
        width: auto;
    }

    StatusBar #status-relay {
        width: auto;
        padding-left: 2;
    }

    StatusBar #status-units {
        width: auto;
        padding-left: 2;
    }

    StatusBar #status-spacer {
        width: 1fr;
    }

    StatusBar #status-hints {
        width: auto;
        text-align: right;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("", id="status-time")
        yield Static("", id="status-relay")
        yield Static("", id="status-units")
        yield Static("", id="status-spacer")
        yield Static(
            "[dim]l[/dim] Locate  [dim]u[/dim] Units  [dim]q[/dim] Quit",
            id="status-hints",
        )

    def on_mount(self) -> None:
        """Start clock update timer."""
        self.set_interval(1, self._update_time)
        self._update_time()

    def _update_time(self) -> None:
        now = datetime.now()
        self.query_one("#status-time", Static).update(f"[bold]{now.strftime('%H:%M:%S')}[/bold]")

    def set_relay_status(self, ok: bool | None) -> None:
        """Show whether the last heartbeat reached the relay."""
        if ok is None:
            text = "[dim]Relay: checking...[/dim]"
        elif ok:
            text = "[green]Relay online[/green]"
        else:
            text = "[red]Relay offline[/red]"
        self.query_one("#status-relay", Static).update(text)

    def set_units(self, unit_system: UnitSystem) -> None:
        self.query_one("#status-units", Static).update(f"[dim]{unit_system.display_name}[/dim]")
