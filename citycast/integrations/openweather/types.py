from typing import Any

from pydantic import BaseModel, Field

from ...cities.models import Coordinates, LocationCandidate
from ..common.utils import round_half_up

# OpenWeatherMap reports wind speed in m/s when metric units are requested
MS_TO_KMH = 3.6


class WeatherCondition(BaseModel):
    main: str
    icon: str


class CurrentMain(BaseModel):
    temp: float
    feels_like: float
    humidity: int


class CurrentWind(BaseModel):
    speed: float


class CurrentSys(BaseModel):
    sunrise: int
    sunset: int


class CurrentWeatherResponse(BaseModel):
    """Response from /data/2.5/weather, limited to the fields we use."""

    main: CurrentMain
    weather: list[WeatherCondition] = Field(min_length=1)
    wind: CurrentWind
    sys: CurrentSys


class ForecastResponse(BaseModel):
    """
    Response from /data/2.5/forecast.

    The samples are kept as raw JSON, they are validated one by one when
    normalized so that a single broken sample doesn't reject the response.
    """

    samples: Any = Field(alias="list")


class GeocodingResult(BaseModel):
    """A single match from /geo/1.0/direct or /geo/1.0/zip."""

    name: str
    country: str
    state: str | None = None
    lat: float
    lon: float

    def to_candidate(self) -> LocationCandidate:
        return LocationCandidate(
            name=self.name,
            country=self.country,
            state=self.state,
            coordinates=Coordinates(lat=self.lat, lon=self.lon),
        )


class CurrentConditions(BaseModel):
    """Current conditions, rounded for display."""

    temperature: int
    feels_like: int
    condition: str
    icon: str
    humidity: int
    wind_speed: int  # km/h
    sunrise: int
    sunset: int

    @classmethod
    def from_response(cls, response: CurrentWeatherResponse) -> "CurrentConditions":
        return cls(
            temperature=round_half_up(response.main.temp),
            feels_like=round_half_up(response.main.feels_like),
            condition=response.weather[0].main,
            icon=response.weather[0].icon,
            humidity=response.main.humidity,
            wind_speed=round_half_up(response.wind.speed * MS_TO_KMH),
            sunrise=response.sys.sunrise,
            sunset=response.sys.sunset,
        )
