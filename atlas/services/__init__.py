"""Services for fetching weather, locating the device and requesting advice."""

from .advice_client import AdviceClient
from .advice_parser import parse_advice
from .heartbeat import HeartbeatService
from .locator import DeviceLocator
from .pipeline import PipelineController
from .weather_service import WeatherService

__all__ = [
    "AdviceClient",
    "DeviceLocator",
    "HeartbeatService",
    "PipelineController",
    "WeatherService",
    "parse_advice",
]
