"""Prompt construction for outfit suggestions."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..units import PLACEHOLDER

SYSTEM_INSTRUCTIONS = (
    "You are a concise stylist. Suggest what to wear given the weather. "
    "Return exactly 4 bullet lines in this format: "
    "**Base Layer**: ... **Mid Layer**: ... **Outer Layer**: ... **Accessories**: ... "
    "Keep each line short. Avoid medical advice."
)


class RelayWeather(BaseModel):
    """Formatted weather fields sent by the client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    summary: str = PLACEHOLDER
    temperature: str = PLACEHOLDER
    feels_like: str = PLACEHOLDER
    humidity: str = PLACEHOLDER
    wind_speed: str = PLACEHOLDER
    wind_direction: str = PLACEHOLDER
    temperature_unit: str = ""
    wind_unit: str = ""
    time: str = PLACEHOLDER
    timezone: str = PLACEHOLDER
    location: str = PLACEHOLDER

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        """Accept numbers and other scalars as their text form."""
        if v is None:
            return PLACEHOLDER
        return str(v)


def build_prompt(weather: RelayWeather) -> str:
    """Render the fixed multi-line weather description."""
    temp_line = f"{weather.temperature} {weather.temperature_unit}".rstrip()
    feels_line = f"{weather.feels_like} {weather.temperature_unit}".rstrip()
    wind_line = " ".join(
        part for part in (weather.wind_speed, weather.wind_unit, weather.wind_direction) if part
    )

    return "\n".join(
        [
            "Weather details:",
            f"Summary: {weather.summary}",
            f"Temperature: {temp_line}",
            f"Feels like: {feels_line}",
            f"Humidity: {weather.humidity}%",
            f"Wind: {wind_line}",
            f"Location: {weather.location}",
            f"Local time: {weather.time} ({weather.timezone})",
        ]
    )
