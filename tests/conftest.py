"""Pytest configuration and fixtures."""

import json
import tempfile
from pathlib import Path

import httpx
import pytest

from atlas.models.weather import Coordinates, UnitSystem, WeatherSnapshot, WeatherUnits


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def forecast_payload():
    """Open-Meteo current-conditions response in imperial units."""
    return {
        "latitude": 37.77,
        "longitude": -122.42,
        "timezone": "America/Los_Angeles",
        "current_units": {
            "time": "iso8601",
            "temperature_2m": "°F",
            "apparent_temperature": "°F",
            "relative_humidity_2m": "%",
            "weather_code": "wmo code",
            "wind_speed_10m": "mph",
            "wind_direction_10m": "°",
        },
        "current": {
            "time": "2024-05-01T09:00",
            "temperature_2m": 58.3,
            "apparent_temperature": 55.94,
            "relative_humidity_2m": 82,
            "weather_code": 3,
            "wind_speed_10m": 11.2,
            "wind_direction_10m": 270,
        },
    }


@pytest.fixture
def geocode_payload():
    """Open-Meteo geocoding response with a single hit."""
    return {
        "results": [
            {
                "name": "Portland",
                "admin1": "Oregon",
                "country": "United States",
                "latitude": 45.52345,
                "longitude": -122.67621,
            }
        ]
    }


@pytest.fixture
def coordinates():
    return Coordinates(latitude=37.7749, longitude=-122.4194)


@pytest.fixture
def snapshot(coordinates):
    """A resolved snapshot for San Francisco."""
    return WeatherSnapshot(
        summary_code=61,
        temperature=12.04,
        feels_like=10.5,
        humidity=87,
        wind_speed=19.3,
        wind_direction_degrees=225,
        units=WeatherUnits(temperature_unit="°C", wind_unit="km/h"),
        observed_at="2024-05-01T09:00",
        timezone="America/Los_Angeles",
        location="San Francisco, California, United States",
        coordinates=coordinates,
        unit_system=UnitSystem.CELSIUS,
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def _json_response(status_code: int, payload) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"content-type": "application/json; charset=utf-8"},
    )


@pytest.fixture
def json_response():
    """Build an httpx JSON response."""
    return _json_response


@pytest.fixture
def transport():
    """Factory for a request-recording mock transport around a handler."""
    return RecordingTransport
