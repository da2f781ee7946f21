"""Data models for the weather atlas."""

from .advice import AdviceItem
from .config import ClientConfig, RelayConfig
from .pipeline import FlowState, Status
from .weather import CityResult, Coordinates, UnitSystem, WeatherSnapshot, WeatherUnits

__all__ = [
    "AdviceItem",
    "CityResult",
    "ClientConfig",
    "Coordinates",
    "FlowState",
    "RelayConfig",
    "Status",
    "UnitSystem",
    "WeatherSnapshot",
    "WeatherUnits",
]
