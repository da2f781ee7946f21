"""Weather panel component for displaying current conditions."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.widgets import Label, Static

from ..models.pipeline import WEATHER_STATUS_LABELS, FlowState, Status
from ..models.weather import Coordinates, WeatherSnapshot
from ..units import format_number


class WeatherPanel(Static):
    """Panel displaying the latest weather snapshot."""

    DEFAULT_CSS = """
    WeatherPanel {
        height: auto;
        border: solid $primary;
        padding: 0 1;
    }

    WeatherPanel #weather-error {
        color: $error;
        display: none;
    }

    WeatherPanel #weather-error.visible {
        display: block;
    }

    WeatherPanel #weather-temp {
        text-style: bold;
        padding-top: 1;
    }

    WeatherPanel #weather-meta {
        color: $text-muted;
        padding-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(WEATHER_STATUS_LABELS[Status.IDLE], id="weather-status")
        yield Label("", id="weather-error")
        yield Static("--", id="weather-temp")
        yield Static("--", id="weather-summary")
        yield Static("", id="weather-details")
        yield Static("Awaiting location data.", id="weather-meta")

    def set_status(self, flow: FlowState) -> None:
        """Show the weather flow status and its error, if any."""
        label = WEATHER_STATUS_LABELS[flow.status]
        marker = "[yellow]●[/yellow]" if flow.is_busy else "●"
        self.query_one("#weather-status", Static).update(f"{marker} {label}")

        error_label = self.query_one("#weather-error", Label)
        if flow.error:
            error_label.update(f"[red]{escape(flow.error)}[/red]")
            error_label.add_class("visible")
        else:
            error_label.update("")
            error_label.remove_class("visible")

    def update_weather(
        self,
        snapshot: WeatherSnapshot | None,
        coordinates: Coordinates | None,
        location: str,
    ) -> None:
        """Render the snapshot, or placeholders before the first fetch."""
        temp = self.query_one("#weather-temp", Static)
        summary = self.query_one("#weather-summary", Static)
        details = self.query_one("#weather-details", Static)
        meta = self.query_one("#weather-meta", Static)

        if snapshot is None:
            temp.update("--")
            summary.update("--")
            details.update("")
            meta.update("Awaiting location data.")
            return

        units = snapshot.units
        temp.update(f"{format_number(snapshot.temperature, 1)} {units.temperature_unit}")
        summary.update(snapshot.summary)
        details.update(
            "\n".join(
                [
                    f"[dim]Feels like[/dim]   {format_number(snapshot.feels_like, 1)} "
                    f"{units.temperature_unit}",
                    f"[dim]Humidity[/dim]     {format_number(snapshot.humidity, 0)} "
                    f"{units.humidity_unit}",
                    f"[dim]Wind[/dim]         {format_number(snapshot.wind_speed, 1)} "
                    f"{units.wind_unit} {snapshot.wind_direction}",
                    f"[dim]Coordinates[/dim]  {coordinates.label if coordinates else '--'}",
                ]
            )
        )
        meta.update(
            f"Updated: {escape(snapshot.observed_at)} ({escape(snapshot.timezone)})"
            f" · Location: {escape(location)}"
        )
