"""Location -> weather -> advice pipeline.

Three sibling flows (weather, advice, city search) each keep their own
status and error text. A new weather dispatch always resets the advice flow
before the forecast call starts, and any completion that belongs to a
superseded dispatch is dropped.
"""

import logging
from collections.abc import Callable

from pydantic import ValidationError

from ..models.advice import AdviceItem
from ..models.pipeline import Status, advice_flow, city_flow, weather_flow
from ..models.weather import CityResult, Coordinates, UnitSystem, WeatherSnapshot
from ..units import parse_coordinate
from .advice_client import AdviceClient
from .advice_parser import parse_advice
from .errors import AtlasError
from .locator import DeviceLocator
from .weather_service import WeatherService

logger = logging.getLogger(__name__)

CURRENT_LOCATION_LABEL = "Current location"

INVALID_COORDINATES = "Enter a valid latitude and longitude."
EMPTY_CITY_QUERY = "Enter a city name."
GEOLOCATION_UNSUPPORTED = "Geolocation is not supported on this device."
WEATHER_FALLBACK_ERROR = "Unable to load weather."
ADVICE_FALLBACK_ERROR = "Unable to generate suggestions."
CITY_FALLBACK_ERROR = "Unable to find that city."


class PipelineController:
    """Owns the UI state and sequences geocoding, forecast and advice calls."""

    def __init__(
        self,
        weather_service: WeatherService,
        advice_client: AdviceClient,
        locator: DeviceLocator | None = None,
        unit_system: UnitSystem = UnitSystem.FAHRENHEIT,
        on_change: Callable[[], None] | None = None,
    ):
        self.weather_service = weather_service
        self.advice_client = advice_client
        self.locator = locator
        self.on_change = on_change

        self.weather = weather_flow()
        self.advice = advice_flow()
        self.city = city_flow()

        self.unit_system = unit_system
        self.coordinates: Coordinates | None = None
        self.location_label = ""
        self.snapshot: WeatherSnapshot | None = None
        self.advice_text = ""
        self.advice_items: list[AdviceItem] = []
        self.city_query = ""
        # Bumped only when the controller rewrites the query itself
        self.city_query_revision = 0
        self.city_result: CityResult | None = None

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    @property
    def can_geolocate(self) -> bool:
        return self.locator is not None

    @property
    def display_location(self) -> str:
        if self.location_label:
            return self.location_label
        if self.coordinates is not None:
            return self.coordinates.label
        return "--"

    async def locate(self) -> None:
        """Resolve the device position, then fetch its weather."""
        if self.locator is None:
            self.weather.reject(GEOLOCATION_UNSUPPORTED)
            self._notify()
            return

        ticket = self.weather.begin(Status.LOCATING)
        self._notify()
        try:
            coordinates = await self.locator.locate()
        except AtlasError as e:
            if self.weather.fail(ticket, e.message):
                self._notify()
            return

        if not self.weather.is_current(ticket):
            logger.debug("Discarding superseded location fix")
            return
        await self.fetch_weather(coordinates, CURRENT_LOCATION_LABEL)

    async def submit_coordinates(self, latitude: str, longitude: str, label: str = "") -> None:
        """Validate manually entered coordinates and fetch their weather."""
        lat = parse_coordinate(latitude)
        lon = parse_coordinate(longitude)
        if lat is None or lon is None:
            self.weather.reject(INVALID_COORDINATES)
            self._notify()
            return
        try:
            coordinates = Coordinates(latitude=lat, longitude=lon)
        except ValidationError:
            self.weather.reject(INVALID_COORDINATES)
            self._notify()
            return
        await self.fetch_weather(coordinates, label)

    async def search_city(self, query: str) -> None:
        """Geocode a city name and fetch weather for the top hit."""
        query = (query or "").strip()
        if not query:
            self.city.reject(EMPTY_CITY_QUERY)
            self._notify()
            return

        self.city_query = query
        ticket = self.city.begin()
        self._notify()
        try:
            result = await self.weather_service.geocode_city(query)
            coordinates = result.coordinates
        except AtlasError as e:
            if self.city.fail(ticket, e.message or CITY_FALLBACK_ERROR):
                self._notify()
            return
        except ValidationError as e:
            logger.warning(f"Discarding unusable city result for {query!r}: {e}")
            if self.city.fail(ticket, CITY_FALLBACK_ERROR):
                self._notify()
            return
        except Exception:
            logger.exception("Unexpected error during city search")
            if self.city.fail(ticket, CITY_FALLBACK_ERROR):
                self._notify()
            return

        if not self.city.succeed(ticket):
            logger.debug(f"Discarding superseded city result for {query!r}")
            return
        self.city_result = result
        self.city_query = result.label
        self.city_query_revision += 1
        self._notify()
        await self.fetch_weather(coordinates, result.label)

    def edit_city_query(self, text: str) -> None:
        """Typing in the search box clears a finished search's status."""
        if text == self.city_query:
            return
        self.city_query = text
        if self.city.status in (Status.READY, Status.ERROR):
            self.city.reset()
            self._notify()

    async def toggle_units(self) -> None:
        """Switch unit systems and re-fetch the resolved location."""
        self.unit_system = self.unit_system.toggled()
        self._notify()
        if self.coordinates is not None:
            await self.fetch_weather(self.coordinates, self.location_label)

    async def fetch_weather(self, coordinates: Coordinates, label: str = "") -> None:
        """Fetch a fresh snapshot, then request advice for it."""
        ticket = self.weather.begin()
        self.advice.reset()
        self.advice_text = ""
        self.advice_items = []
        self._notify()

        try:
            snapshot = await self.weather_service.fetch_forecast(
                coordinates, self.unit_system, label
            )
        except AtlasError as e:
            if self.weather.fail(ticket, e.message or WEATHER_FALLBACK_ERROR):
                self._notify()
            return
        except Exception:
            logger.exception("Unexpected error while fetching weather")
            if self.weather.fail(ticket, WEATHER_FALLBACK_ERROR):
                self._notify()
            return

        if not self.weather.succeed(ticket):
            logger.debug(f"Discarding superseded forecast for {coordinates.label}")
            return
        self.coordinates = coordinates
        self.location_label = snapshot.location
        self.snapshot = snapshot
        self._notify()
        await self.fetch_advice(snapshot)

    async def fetch_advice(self, snapshot: WeatherSnapshot) -> None:
        """Request and parse outfit advice for a snapshot."""
        ticket = self.advice.begin()
        self._notify()

        try:
            text = await self.advice_client.request_suggestion(snapshot)
        except AtlasError as e:
            if self.advice.fail(ticket, e.message or ADVICE_FALLBACK_ERROR):
                self._notify()
            return
        except Exception:
            logger.exception("Unexpected error while requesting advice")
            if self.advice.fail(ticket, ADVICE_FALLBACK_ERROR):
                self._notify()
            return

        if not self.advice.succeed(ticket):
            logger.debug("Discarding superseded advice response")
            return
        self.advice_text = text
        self.advice_items = parse_advice(text)
        self._notify()
