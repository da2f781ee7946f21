"""Tests for the location -> weather -> advice pipeline controller."""

import asyncio

import pytest

from atlas.models.pipeline import Status
from atlas.models.weather import CityResult, Coordinates, UnitSystem, WeatherSnapshot
from atlas.services.errors import (
    LocationDeniedError,
    NotFoundError,
    SuggestionError,
    UpstreamError,
)
from atlas.services.pipeline import CURRENT_LOCATION_LABEL, PipelineController

PORTLAND = CityResult(
    name="Portland", admin_region="Oregon", country="United States",
    latitude=45.52, longitude=-122.68,
)


async def settle() -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(10):
        await asyncio.sleep(0)


class FakeWeatherService:
    """Stand-in for WeatherService with per-call gates and failures."""

    def __init__(self) -> None:
        self.forecast_calls: list[tuple[Coordinates, UnitSystem, str]] = []
        self.forecast_errors: dict[int, Exception] = {}
        self.forecast_gates: dict[int, asyncio.Event] = {}
        self.geocode_calls: list[str] = []
        self.geocode_results: dict[str, CityResult | Exception] = {"Portland": PORTLAND}
        self.geocode_gates: dict[str, asyncio.Event] = {}

    async def fetch_forecast(self, coordinates, unit_system=UnitSystem.FAHRENHEIT, location=""):
        index = len(self.forecast_calls)
        self.forecast_calls.append((coordinates, unit_system, location))
        if index in self.forecast_gates:
            await self.forecast_gates[index].wait()
        if index in self.forecast_errors:
            raise self.forecast_errors[index]
        return WeatherSnapshot(
            summary_code=0,
            temperature=60.0 if unit_system is UnitSystem.FAHRENHEIT else 15.5,
            location=location or coordinates.label,
            coordinates=coordinates,
            unit_system=unit_system,
        )

    async def geocode_city(self, name):
        self.geocode_calls.append(name)
        if name in self.geocode_gates:
            await self.geocode_gates[name].wait()
        result = self.geocode_results.get(name, NotFoundError("No matching city found."))
        if isinstance(result, Exception):
            raise result
        return result


class FakeAdviceClient:
    """Stand-in for AdviceClient answering per call."""

    def __init__(self) -> None:
        self.calls: list[WeatherSnapshot] = []
        self.responses: dict[int, str | Exception] = {}
        self.gates: dict[int, asyncio.Event] = {}

    async def request_suggestion(self, snapshot):
        index = len(self.calls)
        self.calls.append(snapshot)
        if index in self.gates:
            await self.gates[index].wait()
        response = self.responses.get(index, f"**Base Layer**: tee for {snapshot.location}")
        if isinstance(response, Exception):
            raise response
        return response


class FakeLocator:
    def __init__(self, result: Coordinates | Exception) -> None:
        self.result = result

    async def locate(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def weather_service():
    return FakeWeatherService()


@pytest.fixture
def advice_client():
    return FakeAdviceClient()


@pytest.fixture
def history():
    return []


@pytest.fixture
def controller(weather_service, advice_client, history):
    controller = PipelineController(weather_service, advice_client)
    controller.on_change = lambda: history.append(
        (controller.weather.status, controller.advice.status, controller.city.status)
    )
    return controller


def weather_statuses(history):
    """Weather statuses seen, with consecutive repeats collapsed."""
    seen = []
    for weather, _, _ in history:
        if not seen or seen[-1] != weather:
            seen.append(weather)
    return seen


class TestManualCoordinates:
    """Tests for manual coordinate submission."""

    async def test_submit_runs_full_pipeline(self, controller, weather_service, advice_client, history):
        await controller.submit_coordinates("37.7749", "-122.4194")

        assert weather_statuses(history) == [Status.LOADING, Status.READY]
        assert controller.weather.status == Status.READY
        assert controller.location_label == "37.7749, -122.4194"
        assert controller.coordinates == Coordinates(latitude=37.7749, longitude=-122.4194)
        assert len(weather_service.forecast_calls) == 1
        assert advice_client.calls == [controller.snapshot]
        assert controller.advice.status == Status.READY
        assert controller.advice_items[0].label == "Base Layer"

    async def test_custom_label(self, controller):
        await controller.submit_coordinates("51.5", "-0.12", label="London")
        assert controller.location_label == "London"
        assert controller.snapshot.location == "London"

    @pytest.mark.parametrize("lat,lon", [("abc", "1"), ("1", "abc"), ("", ""), ("91", "0"), ("0", "181")])
    async def test_invalid_input_rejected_without_network(self, controller, weather_service, lat, lon):
        await controller.submit_coordinates(lat, lon)

        assert controller.weather.status == Status.ERROR
        assert controller.weather.error == "Enter a valid latitude and longitude."
        assert weather_service.forecast_calls == []


class TestWeatherFlow:
    """Tests for weather fetch transitions."""

    async def test_forecast_failure_leaves_advice_idle(self, controller, weather_service, advice_client):
        await controller.submit_coordinates("10", "10")
        assert controller.advice_items

        weather_service.forecast_errors[1] = UpstreamError("Weather service error (500)")
        await controller.submit_coordinates("20", "20")

        assert controller.weather.status == Status.ERROR
        assert controller.weather.error == "Weather service error (500)"
        assert controller.advice.status == Status.IDLE
        assert controller.advice_items == []
        assert controller.advice_text == ""
        assert len(advice_client.calls) == 1

    async def test_new_fetch_resets_advice_before_forecast(
        self, controller, weather_service, advice_client
    ):
        advice_client.responses[0] = SuggestionError("Relay down")
        await controller.submit_coordinates("10", "10")
        assert controller.advice.status == Status.ERROR

        gate = weather_service.forecast_gates[1] = asyncio.Event()
        task = asyncio.create_task(controller.submit_coordinates("20", "20"))
        await settle()

        assert controller.weather.status == Status.LOADING
        assert controller.weather.error == ""
        assert controller.advice.status == Status.IDLE
        assert controller.advice.error == ""

        gate.set()
        await task
        assert controller.advice.status == Status.READY

    async def test_stale_forecast_discarded(self, controller, weather_service, advice_client):
        gate = weather_service.forecast_gates[0] = asyncio.Event()
        first = asyncio.create_task(controller.submit_coordinates("10", "10"))
        await settle()

        await controller.submit_coordinates("20", "20")
        gate.set()
        await first

        assert controller.coordinates == Coordinates(latitude=20, longitude=20)
        assert controller.snapshot.coordinates == Coordinates(latitude=20, longitude=20)
        assert controller.weather.status == Status.READY
        assert len(advice_client.calls) == 1

    async def test_stale_forecast_failure_discarded(self, controller, weather_service):
        gate = weather_service.forecast_gates[0] = asyncio.Event()
        weather_service.forecast_errors[0] = UpstreamError("Weather service error (502)")
        first = asyncio.create_task(controller.submit_coordinates("10", "10"))
        await settle()

        await controller.submit_coordinates("20", "20")
        gate.set()
        await first

        assert controller.weather.status == Status.READY
        assert controller.weather.error == ""


class TestAdviceFlow:
    """Tests for advice transitions."""

    async def test_advice_failure(self, controller, advice_client):
        advice_client.responses[0] = SuggestionError("OPEN_AI_KEY is missing in .env")

        await controller.submit_coordinates("10", "10")

        assert controller.weather.status == Status.READY
        assert controller.advice.status == Status.ERROR
        assert controller.advice.error == "OPEN_AI_KEY is missing in .env"

    async def test_empty_advice_is_ready(self, controller, advice_client):
        advice_client.responses[0] = ""

        await controller.submit_coordinates("10", "10")

        assert controller.advice.status == Status.READY
        assert controller.advice_items == []

    async def test_stale_advice_discarded(self, controller, advice_client):
        gate = advice_client.gates[0] = asyncio.Event()
        advice_client.responses[0] = "**Base Layer**: old place"
        advice_client.responses[1] = "**Base Layer**: new place"
        first = asyncio.create_task(controller.submit_coordinates("10", "10"))
        await settle()
        assert controller.advice.status == Status.LOADING

        await controller.submit_coordinates("20", "20")
        gate.set()
        await first

        assert controller.advice.status == Status.READY
        assert controller.advice_items[0].text == "new place"

    async def test_stale_advice_during_new_forecast(self, controller, weather_service, advice_client):
        """Advice for an old place arriving mid-forecast does not show up."""
        advice_gate = advice_client.gates[0] = asyncio.Event()
        forecast_gate = weather_service.forecast_gates[1] = asyncio.Event()
        first = asyncio.create_task(controller.submit_coordinates("10", "10"))
        await settle()
        second = asyncio.create_task(controller.submit_coordinates("20", "20"))
        await settle()

        advice_gate.set()
        await first
        assert controller.advice.status == Status.IDLE
        assert controller.advice_items == []

        forecast_gate.set()
        await second
        assert controller.advice.status == Status.READY
        assert controller.advice_items[0].text.endswith("20.0000, 20.0000")


class TestCitySearch:
    """Tests for the city search flow."""

    async def test_success_feeds_weather(self, controller, weather_service):
        await controller.search_city("  Portland ")

        assert weather_service.geocode_calls == ["Portland"]
        assert controller.city.status == Status.READY
        assert controller.city_query == "Portland, Oregon, United States"
        coords, _, label = weather_service.forecast_calls[0]
        assert coords == Coordinates(latitude=45.52, longitude=-122.68)
        assert label == "Portland, Oregon, United States"
        assert controller.weather.status == Status.READY

    async def test_not_found(self, controller, weather_service):
        await controller.search_city("Atlantis")

        assert controller.city.status == Status.ERROR
        assert controller.city.error == "No matching city found."
        assert controller.weather.status == Status.IDLE
        assert weather_service.forecast_calls == []

    async def test_error_keeps_existing_weather(self, controller):
        await controller.submit_coordinates("10", "10")
        snapshot = controller.snapshot

        await controller.search_city("Atlantis")

        assert controller.weather.status == Status.READY
        assert controller.snapshot is snapshot
        assert controller.advice.status == Status.READY

    async def test_empty_query(self, controller, weather_service):
        await controller.search_city("   ")

        assert controller.city.status == Status.ERROR
        assert controller.city.error == "Enter a city name."
        assert weather_service.geocode_calls == []

    async def test_upstream_error_message(self, controller, weather_service):
        weather_service.geocode_results["Paris"] = UpstreamError("City lookup error (503)")
        await controller.search_city("Paris")
        assert controller.city.error == "City lookup error (503)"

    async def test_stale_search_discarded(self, controller, weather_service):
        weather_service.geocode_results["Salem"] = CityResult(
            name="Salem", admin_region="Oregon", country="United States",
            latitude=44.94, longitude=-123.04,
        )
        gate = weather_service.geocode_gates["Salem"] = asyncio.Event()
        first = asyncio.create_task(controller.search_city("Salem"))
        await settle()

        await controller.search_city("Portland")
        gate.set()
        await first

        assert controller.city_query == "Portland, Oregon, United States"
        assert len(weather_service.forecast_calls) == 1

    async def test_editing_clears_finished_status(self, controller):
        await controller.search_city("Atlantis")
        controller.edit_city_query("Atlantis")
        assert controller.city.status == Status.ERROR

        controller.edit_city_query("Atlanta")
        assert controller.city.status == Status.IDLE
        assert controller.city.error == ""

    async def test_out_of_range_hit_fails_city_flow(self, controller, weather_service):
        weather_service.geocode_results["Nowhere"] = CityResult(
            name="Nowhere", latitude=123.0, longitude=0.0
        )

        await controller.search_city("Nowhere")

        assert controller.city.status == Status.ERROR
        assert controller.city.error == "Unable to find that city."
        assert controller.city_result is None
        assert controller.weather.status == Status.IDLE
        assert weather_service.forecast_calls == []

    async def test_query_revision_tracks_controller_rewrites(self, controller):
        controller.edit_city_query("Port")
        assert controller.city_query_revision == 0

        await controller.search_city("Atlantis")
        assert controller.city_query_revision == 0

        await controller.search_city("Portland")
        assert controller.city_query == "Portland, Oregon, United States"
        assert controller.city_query_revision == 1

        controller.edit_city_query("Portland, Or")
        assert controller.city_query_revision == 1


class TestUnitToggle:
    """Tests for switching unit systems."""

    async def test_refetches_same_location(self, controller, weather_service):
        await controller.submit_coordinates("37.7749", "-122.4194")
        assert controller.snapshot.temperature == 60.0

        await controller.toggle_units()

        assert controller.unit_system is UnitSystem.CELSIUS
        first_coords, first_units, _ = weather_service.forecast_calls[0]
        second_coords, second_units, second_label = weather_service.forecast_calls[1]
        assert first_units is UnitSystem.FAHRENHEIT
        assert second_units is UnitSystem.CELSIUS
        assert second_coords == first_coords
        assert second_label == "37.7749, -122.4194"
        assert controller.snapshot.temperature == 15.5

    async def test_without_location_only_switches(self, controller, weather_service):
        await controller.toggle_units()

        assert controller.unit_system is UnitSystem.CELSIUS
        assert weather_service.forecast_calls == []
        assert controller.weather.status == Status.IDLE


class TestLocate:
    """Tests for device location."""

    async def test_no_locator(self, controller, weather_service):
        await controller.locate()

        assert controller.weather.status == Status.ERROR
        assert "not supported" in controller.weather.error
        assert weather_service.forecast_calls == []

    async def test_locating_then_loading(self, weather_service, advice_client, history):
        controller = PipelineController(
            weather_service,
            advice_client,
            locator=FakeLocator(Coordinates(latitude=40.0, longitude=-74.0)),
        )
        controller.on_change = lambda: history.append(
            (controller.weather.status, controller.advice.status, controller.city.status)
        )

        await controller.locate()

        assert weather_statuses(history) == [Status.LOCATING, Status.LOADING, Status.READY]
        assert controller.location_label == CURRENT_LOCATION_LABEL

    async def test_denied(self, weather_service, advice_client):
        controller = PipelineController(
            weather_service, advice_client, locator=FakeLocator(LocationDeniedError())
        )

        await controller.locate()

        assert controller.weather.status == Status.ERROR
        assert controller.weather.error == (
            "Location access was blocked. Try the manual coordinates below."
        )
        assert weather_service.forecast_calls == []
