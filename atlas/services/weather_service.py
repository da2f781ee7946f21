"""Weather service using Open-Meteo API."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..models.weather import CityResult, Coordinates, UnitSystem, WeatherSnapshot, WeatherUnits
from .errors import DataUnavailableError, NotFoundError, ServiceUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

# Open-Meteo API base URL (free, no API key required)
API_BASE_URL = "https://api.open-meteo.com/v1/forecast"
GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

CURRENT_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
)


class WeatherService:
    """Service to fetch current conditions and geocode cities.

    Stateless: every call builds a fresh snapshot and nothing is retained
    between calls. Each user action gets exactly one attempt.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def forecast_params(coordinates: Coordinates, unit_system: UnitSystem) -> dict[str, Any]:
        """Query parameters for a current-conditions request."""
        return {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "current": ",".join(CURRENT_FIELDS),
            "timezone": "auto",
            "temperature_unit": unit_system.temperature_token,
            "wind_speed_unit": unit_system.wind_speed_token,
        }

    async def fetch_forecast(
        self,
        coordinates: Coordinates,
        unit_system: UnitSystem = UnitSystem.FAHRENHEIT,
        location: str = "",
    ) -> WeatherSnapshot:
        """Fetch current conditions for a coordinate pair."""
        params = self.forecast_params(coordinates, unit_system)
        logger.debug(f"Fetching forecast for {coordinates.label} ({unit_system.value})")

        try:
            async with self._client() as client:
                response = await client.get(API_BASE_URL, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Connection error fetching weather: {e}")
            raise ServiceUnavailableError(f"Weather service unreachable: {e}") from e

        if not response.is_success:
            logger.error(f"HTTP error fetching weather: {response.status_code}")
            raise UpstreamError(
                f"Weather service error ({response.status_code})",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DataUnavailableError() from e

        return self._parse_response(data, coordinates, unit_system, location)

    def _parse_response(
        self,
        data: Any,
        coordinates: Coordinates,
        unit_system: UnitSystem,
        location: str,
    ) -> WeatherSnapshot:
        """Parse the Open-Meteo API response."""
        current = data.get("current") if isinstance(data, dict) else None
        if not current or not isinstance(current, dict):
            raise DataUnavailableError()

        current_units = data.get("current_units")
        if not isinstance(current_units, dict):
            current_units = {}
        default_units = WeatherUnits(
            temperature_unit="°F" if unit_system is UnitSystem.FAHRENHEIT else "°C",
            wind_unit="mph" if unit_system is UnitSystem.FAHRENHEIT else "km/h",
        )
        units = WeatherUnits(
            temperature_unit=current_units.get("temperature_2m", default_units.temperature_unit),
            wind_unit=current_units.get("wind_speed_10m", default_units.wind_unit),
            humidity_unit=current_units.get("relative_humidity_2m", default_units.humidity_unit),
        )

        try:
            return WeatherSnapshot(
                summary_code=current.get("weather_code"),
                temperature=current.get("temperature_2m"),
                feels_like=current.get("apparent_temperature"),
                humidity=current.get("relative_humidity_2m"),
                wind_speed=current.get("wind_speed_10m"),
                wind_direction_degrees=current.get("wind_direction_10m"),
                units=units,
                observed_at=str(current.get("time") or ""),
                timezone=str(data.get("timezone") or ""),
                location=location or coordinates.label,
                coordinates=coordinates,
                unit_system=unit_system,
            )
        except ValidationError as e:
            logger.error(f"Error parsing weather response: {e}")
            raise DataUnavailableError() from e

    async def geocode_city(self, name: str) -> CityResult:
        """Look up the single best match for a city name."""
        params = {
            "name": name,
            "count": 1,
            "language": "en",
            "format": "json",
        }

        try:
            async with self._client() as client:
                response = await client.get(GEOCODING_URL, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Geocoding connection error: {e}")
            raise ServiceUnavailableError(f"City lookup unreachable: {e}") from e

        if not response.is_success:
            logger.error(f"Geocoding HTTP error: {response.status_code}")
            raise UpstreamError(
                f"City lookup error ({response.status_code})",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("City lookup returned an unreadable response.") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            logger.info(f"No geocoding results for {name!r}")
            raise NotFoundError("No matching city found.")

        result = results[0]
        try:
            coordinates = Coordinates(
                latitude=result.get("latitude"), longitude=result.get("longitude")
            )
            city = CityResult(
                name=result.get("name") or name,
                admin_region=result.get("admin1") or "",
                country=result.get("country") or "",
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
            )
        except (AttributeError, ValidationError) as e:
            logger.error(f"Error parsing geocoding response: {e}")
            raise UpstreamError("City lookup returned an unreadable response.") from e
        return city
