"""Device location lookup via IP geolocation."""

import logging
import time
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from ..models.weather import Coordinates
from .errors import LocationDeniedError, LocationUnavailableError

logger = logging.getLogger(__name__)

GEOLOCATION_URL = "https://ipinfo.io/json"

# Bounded wait for a fix, and how long a previous fix stays usable
LOCATE_TIMEOUT_SECONDS = 12.0
MAXIMUM_AGE_SECONDS = 60.0


class DeviceLocator:
    """Resolve the device's approximate position."""

    def __init__(
        self,
        enabled: bool = True,
        timeout: float = LOCATE_TIMEOUT_SECONDS,
        maximum_age: float = MAXIMUM_AGE_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.enabled = enabled
        self.timeout = timeout
        self.maximum_age = maximum_age
        self._transport = transport
        self._clock = clock
        self._last_fix: Coordinates | None = None
        self._last_fix_at: float | None = None

    def _cached_fix(self) -> Coordinates | None:
        if self._last_fix is None or self._last_fix_at is None:
            return None
        if self._clock() - self._last_fix_at > self.maximum_age:
            return None
        return self._last_fix

    async def locate(self) -> Coordinates:
        """Return the current position, reusing a recent fix."""
        if not self.enabled:
            raise LocationDeniedError()

        cached = self._cached_fix()
        if cached is not None:
            logger.debug("Reusing recent location fix")
            return cached

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(GEOLOCATION_URL)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Location lookup HTTP {e.response.status_code}")
            raise LocationUnavailableError() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Location lookup failed: {e}")
            raise LocationUnavailableError() from e

        coordinates = self._parse_fix(data)
        self._last_fix = coordinates
        self._last_fix_at = self._clock()
        return coordinates

    @staticmethod
    def _parse_fix(data: object) -> Coordinates:
        """Parse the ``loc`` field ("lat,lon") of an ipinfo response."""
        loc = data.get("loc") if isinstance(data, dict) else None
        if not isinstance(loc, str) or "," not in loc:
            raise LocationUnavailableError()
        latitude, _, longitude = loc.partition(",")
        try:
            return Coordinates(latitude=float(latitude), longitude=float(longitude))
        except (ValueError, ValidationError) as e:
            raise LocationUnavailableError() from e
