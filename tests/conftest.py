import os
from collections.abc import AsyncIterator
from datetime import UTC

import httpx
import pytest
from factories import FakeOpenWeather

from citycast.cities.registry import CityRegistry
from citycast.integrations.openweather.client import OpenWeatherClient
from citycast.server import app
from citycast.weather.tasks import WeatherRefresher


def pytest_configure(config: pytest.Config) -> None:
    os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")


###################
# Provider client #
###################


@pytest.fixture
def openweather() -> FakeOpenWeather:
    return FakeOpenWeather()


@pytest.fixture
async def weather_client(
    openweather: FakeOpenWeather,
) -> AsyncIterator[OpenWeatherClient]:
    async with OpenWeatherClient(
        api_key="test-key", transport=httpx.MockTransport(openweather)
    ) as client:
        yield client


##############
# Registries #
##############


@pytest.fixture
def registry() -> CityRegistry:
    return CityRegistry()


@pytest.fixture
def refresher(
    registry: CityRegistry, weather_client: OpenWeatherClient
) -> WeatherRefresher:
    return WeatherRefresher(
        registry=registry, client=weather_client, interval=3600, tz=UTC
    )


########
# APIs #
########


@pytest.fixture
async def client(
    registry: CityRegistry, refresher: WeatherRefresher
) -> AsyncIterator[httpx.AsyncClient]:
    app.state.registry = registry
    app.state.refresher = refresher

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
