"""Location controls: device location, unit toggle, city and coordinate forms."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Label, Static

from ..models.pipeline import CITY_STATUS_LABELS, FlowState, Status
from ..models.weather import UnitSystem


class LocationPanel(Static):
    """Forms and buttons that start a weather check."""

    DEFAULT_CSS = """
    LocationPanel {
        height: auto;
        border: solid $primary;
        padding: 0 1;
    }

    LocationPanel Horizontal {
        height: auto;
    }

    LocationPanel Input {
        width: 1fr;
    }

    LocationPanel Button {
        margin-right: 1;
    }

    LocationPanel .helper {
        color: $text-muted;
        padding-top: 1;
    }

    LocationPanel #city-error {
        color: $error;
    }
    """

    class LocateRequested(Message):
        """Message sent when the user asks for device location."""

    class UnitToggleRequested(Message):
        """Message sent when the user switches unit systems."""

    class CitySearchRequested(Message):
        """Message sent when a city search is submitted."""

        def __init__(self, query: str) -> None:
            super().__init__()
            self.query = query

    class CityQueryEdited(Message):
        """Message sent when the city search text changes."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class CoordinatesSubmitted(Message):
        """Message sent when manual coordinates are submitted."""

        def __init__(self, latitude: str, longitude: str) -> None:
            super().__init__()
            self.latitude = latitude
            self.longitude = longitude

    def __init__(self) -> None:
        super().__init__()
        self._query_revision = 0

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Button("Use my location", id="btn-locate", variant="primary")
            yield Button("Toggle to Celsius", id="btn-units")
        yield Static("Search by city name.", classes="helper")
        with Horizontal():
            yield Input(placeholder="San Francisco", id="city-input")
            yield Button("Search city", id="btn-city")
        yield Label("", id="city-error")
        yield Static(
            "Manual fallback if location is blocked. Latitude -90 to 90, longitude -180 to 180.",
            classes="helper",
        )
        with Horizontal():
            yield Input(placeholder="37.7749", id="lat-input")
            yield Input(placeholder="-122.4194", id="lon-input")
            yield Button("Check coordinates", id="btn-coords")

    def _submit_coordinates(self) -> None:
        self.post_message(
            self.CoordinatesSubmitted(
                self.query_one("#lat-input", Input).value,
                self.query_one("#lon-input", Input).value,
            )
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "btn-locate":
            self.post_message(self.LocateRequested())
        elif event.button.id == "btn-units":
            self.post_message(self.UnitToggleRequested())
        elif event.button.id == "btn-city":
            self.post_message(self.CitySearchRequested(self.query_one("#city-input", Input).value))
        elif event.button.id == "btn-coords":
            self._submit_coordinates()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in a field submits its form."""
        if event.input.id == "city-input":
            self.post_message(self.CitySearchRequested(event.value))
        elif event.input.id in ("lat-input", "lon-input"):
            self._submit_coordinates()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "city-input":
            self.post_message(self.CityQueryEdited(event.value))

    def update_controls(
        self,
        weather: FlowState,
        city: FlowState,
        city_query: str,
        city_query_revision: int,
        unit_system: UnitSystem,
    ) -> None:
        """Sync buttons, the search box and the city error banner."""
        self.query_one("#btn-locate", Button).disabled = weather.status == Status.LOCATING
        self.query_one("#btn-units", Button).label = f"Toggle to {unit_system.toggled().display_name}"

        city_button = self.query_one("#btn-city", Button)
        city_button.label = CITY_STATUS_LABELS[city.status]
        city_button.disabled = city.status == Status.LOADING

        # Only push text the controller wrote, never echo pending keystrokes
        if city_query_revision != self._query_revision:
            self._query_revision = city_query_revision
            city_input = self.query_one("#city-input", Input)
            if city_input.value != city_query:
                city_input.value = city_query

        error = city.error if city.status == Status.ERROR else ""
        self.query_one("#city-error", Label).update(f"[red]{escape(error)}[/red]" if error else "")
