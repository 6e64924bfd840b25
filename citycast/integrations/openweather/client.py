import asyncio
import os
from typing import Any

import httpx
import pydantic
import structlog

from ...cities.models import Coordinates, Location, LocationCandidate
from ..common.client import DEFAULT_TIMEOUT, BaseAPIClient
from ..common.exceptions import MalformedResponse
from ..common.utils import getenv
from .types import (
    CurrentConditions,
    CurrentWeatherResponse,
    ForecastResponse,
    GeocodingResult,
)

logger = structlog.get_logger()

API_KEY_VARIABLE = "OPENWEATHER_API_KEY"
DEFAULT_BASE_URL = "https://api.openweathermap.org"

# Maximum number of matches returned by a name search
SEARCH_LIMIT = 5

GEOCODING_RESULTS = pydantic.TypeAdapter(list[GeocodingResult])


class OpenWeatherClient(BaseAPIClient):
    """
    A client for communicating with the OpenWeatherMap API.

    The API key is looked up on every request, so a key added to the
    environment after the client was created is picked up.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url or os.getenv("OPENWEATHER_BASE_URL", DEFAULT_BASE_URL),
            timeout=timeout,
            transport=transport,
        )
        self._api_key = api_key

    @property
    def api_key(self) -> str:
        if self._api_key:
            return self._api_key
        return getenv(API_KEY_VARIABLE)

    ###########
    # Weather #
    ###########

    async def fetch(self, location: Location) -> tuple[CurrentConditions, Any]:
        """
        Fetch current conditions and the raw forecast samples for a location.
        Both requests are sent concurrently.
        """
        params = self._weather_params(location.coordinates)
        current, forecast = await asyncio.gather(
            self._get("/data/2.5/weather", params=params),
            self._get("/data/2.5/forecast", params=params),
        )
        return (
            CurrentConditions.from_response(
                self._decode_json(current, CurrentWeatherResponse)
            ),
            self._decode_json(forecast, ForecastResponse).samples,
        )

    async def get_current_weather(
        self, coordinates: Coordinates
    ) -> CurrentWeatherResponse:
        response = await self._get(
            "/data/2.5/weather", params=self._weather_params(coordinates)
        )
        return self._decode_json(response, CurrentWeatherResponse)

    async def get_forecast(self, coordinates: Coordinates) -> ForecastResponse:
        """
        Get the 5 day forecast, in 3 hour steps.
        """
        response = await self._get(
            "/data/2.5/forecast", params=self._weather_params(coordinates)
        )
        return self._decode_json(response, ForecastResponse)

    #############
    # Geocoding #
    #############

    async def search_locations(self, query: str) -> list[LocationCandidate]:
        """
        Search for locations by name, or by postal code if the query is all
        digits.
        """
        query = query.strip()
        if not query:
            return []

        if query.isdigit():
            response = await self._get(
                "/geo/1.0/zip", params={"zip": query, "appid": self.api_key}
            )
            results = [self._decode_json(response, GeocodingResult)]
        else:
            response = await self._get(
                "/geo/1.0/direct",
                params={"q": query, "limit": SEARCH_LIMIT, "appid": self.api_key},
            )
            try:
                results = GEOCODING_RESULTS.validate_json(response.text)
            except pydantic.ValidationError as exc:
                raise MalformedResponse(
                    f"Unexpected geocoding response for {query!r}"
                ) from exc

        logger.debug("Searched locations", query=query, results=len(results))
        return [result.to_candidate() for result in results]

    ####################
    # Internal helpers #
    ####################

    def _weather_params(
        self, coordinates: Coordinates
    ) -> dict[str, str | int | float]:
        return {
            "lat": coordinates.lat,
            "lon": coordinates.lon,
            "appid": self.api_key,
            "units": "metric",
        }
