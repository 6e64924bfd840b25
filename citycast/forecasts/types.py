"""
Types for forecast samples and the daily summaries built from them.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SampleTemperatures(BaseModel):
    temp_min: float
    temp_max: float


class SampleCondition(BaseModel):
    main: str = Field(min_length=1)
    icon: str = Field(min_length=1)


class ForecastSample(BaseModel):
    """A single 3 hour step from the forecast endpoint."""

    dt: int
    main: SampleTemperatures
    weather: list[SampleCondition] = Field(min_length=1)

    @field_validator("dt")
    @classmethod
    def non_zero_timestamp(cls, v: int) -> int:
        if not v:
            raise ValueError("timestamp must be non-zero")
        return v

    @field_validator("weather", mode="before")
    @classmethod
    def primary_condition_only(cls, v: Any) -> Any:
        # Only the first condition is used, so don't reject a sample because
        # of the secondary ones
        if isinstance(v, list):
            return v[:1]
        return v

    @property
    def condition(self) -> SampleCondition:
        return self.weather[0]


class TemperatureRange(BaseModel):
    min: int
    max: int


class DailySummary(BaseModel):
    day: date
    timestamp: int  # dt of the first sample of the day
    temperature: TemperatureRange
    condition: str
    icon: str
