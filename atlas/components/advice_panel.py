"""Advice panel component for outfit suggestions."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.widgets import Label, Static

from ..models.advice import AdviceItem
from ..models.pipeline import ADVICE_STATUS_LABELS, FlowState, Status

LOADING_HELP = "Looking at the forecast to build an outfit."
IDLE_HELP = "Run a weather check to get clothing suggestions."


def render_items(items: list[AdviceItem]) -> str:
    """One row per item; labeled rows show the label in bold."""
    rows = []
    for item in items:
        if item.label:
            rows.append(f"• [bold]{escape(item.label)}[/bold]  {escape(item.text)}")
        else:
            rows.append(f"• {escape(item.text)}")
    return "\n".join(rows)


class AdvicePanel(Static):
    """Panel showing the parsed outfit suggestion."""

    DEFAULT_CSS = """
    AdvicePanel {
        height: auto;
        border: solid $secondary;
        padding: 0 1;
    }

    AdvicePanel #advice-error {
        color: $error;
        display: none;
    }

    AdvicePanel #advice-error.visible {
        display: block;
    }

    AdvicePanel #advice-body {
        padding-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(ADVICE_STATUS_LABELS[Status.IDLE], id="advice-status")
        yield Label("", id="advice-error")
        yield Static(f"[dim]{IDLE_HELP}[/dim]", id="advice-body")

    def update_advice(self, flow: FlowState, items: list[AdviceItem]) -> None:
        """Render status, error banner and items (or the helper text)."""
        marker = "[yellow]●[/yellow]" if flow.is_busy else "●"
        self.query_one("#advice-status", Static).update(
            f"{marker} {ADVICE_STATUS_LABELS[flow.status]}"
        )

        error_label = self.query_one("#advice-error", Label)
        if flow.error:
            error_label.update(f"[red]{escape(flow.error)}[/red]")
            error_label.add_class("visible")
        else:
            error_label.update("")
            error_label.remove_class("visible")

        body = self.query_one("#advice-body", Static)
        if items:
            body.update(render_items(items))
        elif flow.status == Status.LOADING:
            body.update(f"[dim]{LOADING_HELP}[/dim]")
        else:
            body.update(f"[dim]{IDLE_HELP}[/dim]")
