from typing import Annotated

from fastapi import Depends, Request

from .cities.registry import CityRegistry
from .integrations.openweather.client import OpenWeatherClient
from .weather.tasks import WeatherRefresher


def get_registry(request: Request) -> CityRegistry:
    return request.app.state.registry


def get_refresher(request: Request) -> WeatherRefresher:
    return request.app.state.refresher


def get_client(request: Request) -> OpenWeatherClient:
    return request.app.state.refresher.client


Registry = Annotated[CityRegistry, Depends(get_registry)]
Refresher = Annotated[WeatherRefresher, Depends(get_refresher)]
Client = Annotated[OpenWeatherClient, Depends(get_client)]
