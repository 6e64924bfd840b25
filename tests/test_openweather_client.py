import httpx
import pytest
from factories import FakeOpenWeather, make_current

from citycast.cities.models import Coordinates
from citycast.cities.registry import DEFAULT_CITIES
from citycast.integrations.common.exceptions import (
    ConfigurationError,
    MalformedResponse,
    TransportError,
)
from citycast.integrations.openweather.client import OpenWeatherClient

pytestmark = pytest.mark.asyncio

LONDON = DEFAULT_CITIES[1]


async def test_fetch(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    current, samples = await weather_client.fetch(LONDON)

    assert current.temperature == 21
    assert current.feels_like == 21
    assert current.condition == "Clouds"
    assert current.icon == "03d"
    assert current.humidity == 55
    assert current.wind_speed == 36
    assert current.sunrise < current.sunset
    assert len(samples) == 40

    assert sorted(openweather.paths()) == ["/data/2.5/forecast", "/data/2.5/weather"]
    for request in openweather.requests:
        assert request.url.params["units"] == "metric"
        assert request.url.params["appid"] == "test-key"
        assert float(request.url.params["lat"]) == 51.5074
        assert float(request.url.params["lon"]) == -0.1278


@pytest.mark.parametrize(
    ("speed", "expected"), [(10, 36), (0, 0), (1.25, 5), (2.5, 9), (3.75, 14)]
)
async def test_wind_speed_in_kmh(
    weather_client: OpenWeatherClient,
    openweather: FakeOpenWeather,
    speed: float,
    expected: int,
) -> None:
    openweather.current = make_current(wind_speed=speed)

    current, _ = await weather_client.fetch(LONDON)

    assert current.wind_speed == expected


async def test_temperatures_rounded_half_up(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    openweather.current = make_current(temp=-2.5, feels_like=2.5)

    current, _ = await weather_client.fetch(LONDON)

    assert current.temperature == -2
    assert current.feels_like == 3


async def test_missing_api_key(
    openweather: FakeOpenWeather, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    async with OpenWeatherClient(transport=httpx.MockTransport(openweather)) as client:
        with pytest.raises(ConfigurationError):
            await client.fetch(LONDON)

        # Checked on every call, not only when the client is created
        monkeypatch.setenv("OPENWEATHER_API_KEY", "late-key")
        await client.fetch(LONDON)

    assert len(openweather.requests) == 2
    assert openweather.requests[0].url.params["appid"] == "late-key"


async def test_error_status(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    openweather.failing.add(LONDON.coordinates.lat)

    with pytest.raises(TransportError):
        await weather_client.fetch(LONDON)


async def test_error_status_on_forecast_only(openweather: FakeOpenWeather) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/data/2.5/forecast":
            return httpx.Response(401, json={"cod": 401, "message": "Invalid key"})
        return openweather(request)

    async with OpenWeatherClient(
        api_key="test-key", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(TransportError, match="401"):
            await client.fetch(LONDON)


async def test_unparsable_body() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    async with OpenWeatherClient(api_key="test-key", transport=transport) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.get_current_weather(LONDON.coordinates)

    assert not isinstance(exc_info.value, MalformedResponse)


async def test_missing_field(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    del openweather.current["wind"]

    with pytest.raises(MalformedResponse):
        await weather_client.fetch(LONDON)


async def test_empty_condition_list(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    openweather.current["weather"] = []

    with pytest.raises(MalformedResponse):
        await weather_client.fetch(LONDON)


async def test_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    async with OpenWeatherClient(
        api_key="test-key", transport=httpx.MockTransport(handler)
    ) as client:
        with pytest.raises(TransportError, match="Connection refused"):
            await client.get_forecast(LONDON.coordinates)


async def test_null_forecast_list(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    openweather.forecast = None

    _, samples = await weather_client.fetch(LONDON)

    assert samples is None


async def test_search_by_name(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    candidates = await weather_client.search_locations(" Oslo ")

    assert [candidate.display_name for candidate in candidates] == [
        "Oslo, NO",
        "Oslo, Minnesota US",
    ]
    assert candidates[0].coordinates == Coordinates(lat=59.9133, lon=10.7389)

    request = openweather.requests[0]
    assert request.url.path == "/geo/1.0/direct"
    assert request.url.params["q"] == "Oslo"
    assert request.url.params["limit"] == "5"


async def test_search_by_postal_code(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    candidates = await weather_client.search_locations("90210")

    assert len(candidates) == 1
    assert candidates[0].name == "Beverly Hills"
    assert candidates[0].country == "US"
    assert openweather.requests[0].url.path == "/geo/1.0/zip"
    assert openweather.requests[0].url.params["zip"] == "90210"


async def test_search_blank_query(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    assert await weather_client.search_locations("   ") == []
    assert openweather.requests == []


async def test_search_unexpected_shape(
    weather_client: OpenWeatherClient, openweather: FakeOpenWeather
) -> None:
    openweather.geocoding = {"cod": "400", "message": "Nothing to geocode"}

    with pytest.raises(MalformedResponse):
        await weather_client.search_locations("Oslo")
