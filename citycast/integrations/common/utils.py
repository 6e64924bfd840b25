"""Common utility functions for integrations."""

import math
import os

from .exceptions import ConfigurationError


def getenv(key: str) -> str:
    """
    Get a required environment variable.

    Raises ConfigurationError if the variable is not set or empty.
    """
    if value := os.getenv(key):
        return value

    raise ConfigurationError(f"Environment variable {key} not set")


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded towards positive
    infinity, unlike round() which rounds halves to even.
    """
    return int(math.floor(value + 0.5))
