"""Display formatting for raw weather values."""

import math

# Open-Meteo WMO weather interpretation codes
WEATHER_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with light hail",
    99: "Thunderstorm with heavy hail",
}

FALLBACK_SUMMARY = "Variable conditions"
PLACEHOLDER = "--"

CARDINALS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def _as_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def summary_for(code: object) -> str:
    """Map a weather code to its summary, falling back for unknown codes."""
    if isinstance(code, bool):
        return FALLBACK_SUMMARY
    if isinstance(code, float) and code.is_integer():
        code = int(code)
    if not isinstance(code, int):
        return FALLBACK_SUMMARY
    return WEATHER_CODES.get(code, FALLBACK_SUMMARY)


def to_cardinal(degrees: object) -> str:
    """Convert a wind direction in degrees to an 8-point compass label."""
    value = _as_float(degrees)
    if value is None or math.isinf(value):
        return PLACEHOLDER
    # Half-way values round up
    index = math.floor(value / 45 + 0.5) % 8
    return CARDINALS[index]


def format_number(value: object, digits: int = 1) -> str:
    """Format a number with a fixed number of decimals, or a placeholder."""
    number = _as_float(value)
    if number is None:
        return PLACEHOLDER
    return f"{number:.{digits}f}"


def format_coordinates(latitude: float, longitude: float) -> str:
    """Default display label for a coordinate pair."""
    return f"{format_number(latitude, 4)}, {format_number(longitude, 4)}"


def parse_coordinate(text: object) -> float | None:
    """Parse user-entered coordinate text, returning None when unusable."""
    if text is None:
        return None
    if isinstance(text, str):
        text = text.strip()
        if not text:
            return None
    number = _as_float(text)
    if number is None or math.isinf(number):
        return None
    return number
