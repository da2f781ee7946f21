"""UI components for the weather atlas."""

from .advice_panel import AdvicePanel
from .location_panel import LocationPanel
from .status_bar import StatusBar
from .weather_panel import WeatherPanel

__all__ = ["AdvicePanel", "LocationPanel", "StatusBar", "WeatherPanel"]
