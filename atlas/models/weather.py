"""Weather data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..units import format_coordinates, format_number, summary_for, to_cardinal


class UnitSystem(str, Enum):
    """Unit system requested from the forecast provider."""

    FAHRENHEIT = "fahrenheit"
    CELSIUS = "celsius"

    @property
    def temperature_token(self) -> str:
        """Provider token for temperature_unit."""
        return self.value

    @property
    def wind_speed_token(self) -> str:
        """Provider token for wind_speed_unit."""
        return "mph" if self is UnitSystem.FAHRENHEIT else "kmh"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def toggled(self) -> "UnitSystem":
        """Return the other unit system."""
        if self is UnitSystem.FAHRENHEIT:
            return UnitSystem.CELSIUS
        return UnitSystem.FAHRENHEIT


class Coordinates(BaseModel):
    """A resolved latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Validate latitude is in valid range."""
        if not -90 <= v <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {v}")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Validate longitude is in valid range."""
        if not -180 <= v <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {v}")
        return v

    @property
    def label(self) -> str:
        """Default display label, e.g. '37.7749, -122.4194'."""
        return format_coordinates(self.latitude, self.longitude)


class WeatherUnits(BaseModel):
    """Unit labels reported by the provider for the current conditions."""

    temperature_unit: str = "°F"
    wind_unit: str = "mph"
    humidity_unit: str = "%"


class WeatherSnapshot(BaseModel):
    """One fully resolved observation for a place, time and unit system."""

    model_config = ConfigDict(frozen=True)

    summary_code: int | None = None
    temperature: float | None = None
    feels_like: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    wind_direction_degrees: float | None = None
    units: WeatherUnits = Field(default_factory=WeatherUnits)
    observed_at: str = ""
    timezone: str = ""
    location: str = ""
    coordinates: Coordinates
    unit_system: UnitSystem = UnitSystem.FAHRENHEIT
    fetched_at: datetime = Field(default_factory=datetime.now)

    @property
    def summary(self) -> str:
        return summary_for(self.summary_code)

    @property
    def wind_direction(self) -> str:
        """Compass label for the wind direction."""
        return to_cardinal(self.wind_direction_degrees)

    def to_relay_payload(self) -> dict[str, str]:
        """Formatted fields sent to the suggestion relay."""
        return {
            "summary": self.summary,
            "temperature": format_number(self.temperature, 1),
            "feelsLike": format_number(self.feels_like, 1),
            "humidity": format_number(self.humidity, 0),
            "windSpeed": format_number(self.wind_speed, 1),
            "windDirection": self.wind_direction,
            "temperatureUnit": self.units.temperature_unit,
            "windUnit": self.units.wind_unit,
            "time": self.observed_at,
            "timezone": self.timezone,
            "location": self.location,
        }


class CityResult(BaseModel):
    """Top geocoding hit for a city search."""

    name: str
    admin_region: str = ""
    country: str = ""
    latitude: float
    longitude: float

    @property
    def label(self) -> str:
        """Join name, region and country, skipping empty parts."""
        parts = [self.name, self.admin_region, self.country]
        return ", ".join(part for part in parts if part)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)
