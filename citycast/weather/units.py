"""
Unit conversion and formatting for displaying weather data.

All weather data is kept in Celsius, conversion to Fahrenheit only happens
when data is presented.
"""

import enum
from datetime import datetime, tzinfo

from ..integrations.common.utils import round_half_up


class TemperatureUnit(str, enum.Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "°F" if self is TemperatureUnit.FAHRENHEIT else "°C"


def celsius_to_fahrenheit(celsius: float) -> int:
    return round_half_up(celsius * 9 / 5 + 32)


def fahrenheit_to_celsius(fahrenheit: float) -> int:
    return round_half_up((fahrenheit - 32) * 5 / 9)


def format_time(timestamp: int, tz: tzinfo | None = None) -> str:
    """
    Format a timestamp as a 12 hour clock time, e.g. "6:05 AM".
    """
    dt = datetime.fromtimestamp(timestamp, tz=tz)
    return f"{dt.hour % 12 or 12}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"


def format_date(timestamp: int, tz: tzinfo | None = None) -> str:
    """
    Format a timestamp as a short date, e.g. "Mon, Jan 5".
    """
    dt = datetime.fromtimestamp(timestamp, tz=tz)
    return f"{dt:%a}, {dt:%b} {dt.day}"
