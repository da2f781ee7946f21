"""Status models for the weather, advice and city-search flows."""

from enum import Enum


class Status(str, Enum):
    """Lifecycle status shared by every flow."""

    IDLE = "idle"
    LOCATING = "locating"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


WEATHER_STATUS_LABELS = {
    Status.IDLE: "Waiting for location",
    Status.LOCATING: "Locating your device",
    Status.LOADING: "Fetching weather",
    Status.READY: "Live conditions",
    Status.ERROR: "Needs attention",
}

ADVICE_STATUS_LABELS = {
    Status.IDLE: "Waiting for weather",
    Status.LOADING: "Styling your outfit",
    Status.READY: "Outfit suggestions",
    Status.ERROR: "Suggestions paused",
}

CITY_STATUS_LABELS = {
    Status.IDLE: "Search city",
    Status.LOADING: "Searching...",
    Status.READY: "Search city",
    Status.ERROR: "Search city",
}


class FlowState:
    """Status, error text and dispatch ticket for one request flow.

    Every dispatch takes a new ticket. Completions carrying an older ticket
    are rejected, so only the most recently dispatched request can move the
    flow to ready or error.
    """

    def __init__(self, name: str, statuses: frozenset[Status] | None = None) -> None:
        self.name = name
        self.statuses = statuses or frozenset(
            {Status.IDLE, Status.LOADING, Status.READY, Status.ERROR}
        )
        self.status = Status.IDLE
        self.error = ""
        self._ticket = 0

    def __repr__(self) -> str:
        return f"FlowState({self.name!r}, status={self.status.value!r}, ticket={self._ticket})"

    @property
    def ticket(self) -> int:
        """Ticket of the latest dispatched request."""
        return self._ticket

    @property
    def is_busy(self) -> bool:
        return self.status in (Status.LOADING, Status.LOCATING)

    def _set(self, status: Status, error: str = "") -> None:
        if status not in self.statuses:
            raise ValueError(f"{self.name} flow does not support status {status.value!r}")
        self.status = status
        self.error = error

    def begin(self, status: Status = Status.LOADING) -> int:
        """Dispatch a new request, superseding any in flight."""
        self._set(status)
        self._ticket += 1
        return self._ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._ticket

    def succeed(self, ticket: int) -> bool:
        """Mark the flow ready if the ticket is still current."""
        if not self.is_current(ticket):
            return False
        self._set(Status.READY)
        return True

    def fail(self, ticket: int, message: str) -> bool:
        """Mark the flow failed if the ticket is still current."""
        if not self.is_current(ticket):
            return False
        self._set(Status.ERROR, message)
        return True

    def reject(self, message: str) -> None:
        """Fail immediately without a request, superseding any in flight."""
        self._ticket += 1
        self._set(Status.ERROR, message)

    def reset(self) -> None:
        """Return to idle and invalidate any in-flight request."""
        self._ticket += 1
        self._set(Status.IDLE)


def weather_flow() -> FlowState:
    return FlowState("weather", frozenset(Status))


def advice_flow() -> FlowState:
    return FlowState("advice")


def city_flow() -> FlowState:
    return FlowState("city")
