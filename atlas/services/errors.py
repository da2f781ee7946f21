"""Error taxonomy shared by the client services and the relay."""


class AtlasError(Exception):
    """Base error. ``status_code`` is the HTTP status the relay reports."""

    status_code = 500
    default_message = "Server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UpstreamError(AtlasError):
    """A provider answered with a non-2xx status."""

    def __init__(self, message: str | None = None, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class DataUnavailableError(AtlasError):
    """A provider answered 2xx but without the expected payload."""

    default_message = "Weather data unavailable."


class NotFoundError(AtlasError):
    """A valid response with zero results."""

    status_code = 404
    default_message = "No matching city found."


class ServiceUnavailableError(AtlasError):
    """The provider could not be reached at all."""

    status_code = 502


class SuggestionError(AtlasError):
    """The suggestion relay call failed."""

    default_message = "Unable to generate suggestions."


class ConfigurationError(AtlasError):
    """A required local setting is missing."""


class EmptyResultError(AtlasError):
    """The upstream call succeeded but produced nothing usable."""

    default_message = "No suggestion returned."


class BadRequestError(AtlasError):
    """The caller sent malformed input."""

    status_code = 400
    default_message = "Bad request."


class LocationError(AtlasError):
    """The device position could not be determined."""

    default_message = "Unable to retrieve your location. Try again or enter coordinates."


class LocationDeniedError(LocationError):
    """Location access is turned off."""

    default_message = "Location access was blocked. Try the manual coordinates below."


class LocationUnavailableError(LocationError):
    """The position lookup failed or timed out."""
