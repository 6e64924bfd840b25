import enum
from datetime import datetime
from typing import TypeAlias

from pydantic import BaseModel

from ..forecasts.types import DailySummary, TemperatureRange
from ..integrations.openweather.types import CurrentConditions
from .units import TemperatureUnit, celsius_to_fahrenheit


class CycleState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    MERGING = "merging"
    SETTLED = "settled"


class WeatherSnapshot(BaseModel):
    """Current conditions and daily forecast for a single location."""

    temperature: int
    feels_like: int
    condition: str
    icon: str
    humidity: int
    wind_speed: int  # km/h
    sunrise: int
    sunset: int
    daily: list[DailySummary]

    @classmethod
    def build(
        cls, current: CurrentConditions, daily: list[DailySummary]
    ) -> "WeatherSnapshot":
        return cls(**current.model_dump(), daily=daily)

    def in_unit(self, unit: TemperatureUnit) -> "WeatherSnapshot":
        """
        A copy of the snapshot with temperatures in the given unit.
        """
        if unit is TemperatureUnit.CELSIUS:
            return self

        return self.model_copy(
            update={
                "temperature": celsius_to_fahrenheit(self.temperature),
                "feels_like": celsius_to_fahrenheit(self.feels_like),
                "daily": [
                    day.model_copy(
                        update={
                            "temperature": TemperatureRange(
                                min=celsius_to_fahrenheit(day.temperature.min),
                                max=celsius_to_fahrenheit(day.temperature.max),
                            )
                        }
                    )
                    for day in self.daily
                ],
            }
        )


SnapshotMap: TypeAlias = dict[int, WeatherSnapshot]


class WeatherReport(BaseModel):
    """The latest refresh cycle, as served to clients."""

    state: CycleState
    last_refreshed: datetime | None
    error: str | None
    unit: TemperatureUnit
    snapshots: dict[int, WeatherSnapshot]
