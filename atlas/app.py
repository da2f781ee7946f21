"""Terminal application wiring the pipeline controller to its panels."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Header

from .components import AdvicePanel, LocationPanel, StatusBar, WeatherPanel
from .models.config import ClientConfig
from .services import (
    AdviceClient,
    DeviceLocator,
    HeartbeatService,
    PipelineController,
    WeatherService,
)

logger = logging.getLogger(__name__)


def build_controller(config: ClientConfig) -> PipelineController:
    """Create a controller with real network services."""
    return PipelineController(
        weather_service=WeatherService(timeout=config.timeout),
        advice_client=AdviceClient(config.relay_url, timeout=config.timeout),
        locator=DeviceLocator(enabled=config.geolocation_enabled),
        unit_system=config.units,
    )


class AtlasApp(App):
    """Local weather with outfit suggestions."""

    TITLE = "Local Weather Atlas"

    CSS = """
    #columns {
        height: 1fr;
    }

    #advice-column {
        width: 2fr;
    }

    #weather-column {
        width: 3fr;
    }
    """

    BINDINGS = [
        Binding("l", "locate", "Locate"),
        Binding("u", "toggle_units", "Units"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: ClientConfig | None = None,
        controller: PipelineController | None = None,
        heartbeat: HeartbeatService | None = None,
    ) -> None:
        super().__init__()
        self.config = config or ClientConfig()
        self.controller = controller or build_controller(self.config)
        self.heartbeat = heartbeat or HeartbeatService(self.config.relay_url)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="columns"):
            with VerticalScroll(id="advice-column"):
                yield AdvicePanel()
            with VerticalScroll(id="weather-column"):
                yield WeatherPanel()
                yield LocationPanel()
        yield StatusBar()

    def on_mount(self) -> None:
        self.controller.on_change = self.render_state
        self.render_state()
        self.query_one(StatusBar).set_relay_status(None)
        self._send_heartbeat()
        self.set_interval(self.config.heartbeat_interval_seconds, self._send_heartbeat)

    def render_state(self) -> None:
        """Redraw every panel from the controller state."""
        controller = self.controller
        weather_panel = self.query_one(WeatherPanel)
        weather_panel.set_status(controller.weather)
        weather_panel.update_weather(
            controller.snapshot, controller.coordinates, controller.display_location
        )
        self.query_one(AdvicePanel).update_advice(controller.advice, controller.advice_items)
        self.query_one(LocationPanel).update_controls(
            controller.weather,
            controller.city,
            controller.city_query,
            controller.city_query_revision,
            controller.unit_system,
        )
        self.query_one(StatusBar).set_units(controller.unit_system)

    def _send_heartbeat(self) -> None:
        self.run_worker(self._heartbeat(), group="heartbeat", exclusive=False)

    async def _heartbeat(self) -> None:
        ok = await self.heartbeat.ping()
        self.query_one(StatusBar).set_relay_status(ok)

    def action_locate(self) -> None:
        self.run_worker(self.controller.locate(), group="weather", exclusive=False)

    def action_toggle_units(self) -> None:
        self.run_worker(self.controller.toggle_units(), group="weather", exclusive=False)

    def on_location_panel_locate_requested(self, message: LocationPanel.LocateRequested) -> None:
        self.action_locate()

    def on_location_panel_unit_toggle_requested(
        self, message: LocationPanel.UnitToggleRequested
    ) -> None:
        self.action_toggle_units()

    def on_location_panel_city_search_requested(
        self, message: LocationPanel.CitySearchRequested
    ) -> None:
        self.run_worker(self.controller.search_city(message.query), group="city", exclusive=False)

    def on_location_panel_city_query_edited(self, message: LocationPanel.CityQueryEdited) -> None:
        self.controller.edit_city_query(message.text)

    def on_location_panel_coordinates_submitted(
        self, message: LocationPanel.CoordinatesSubmitted
    ) -> None:
        self.run_worker(
            self.controller.submit_coordinates(message.latitude, message.longitude),
            group="weather",
            exclusive=False,
        )
