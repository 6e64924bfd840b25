"""Common utilities for integrations."""

from .client import BaseAPIClient
from .exceptions import (
    ConfigurationError,
    IntegrationAPIError,
    MalformedResponse,
    TransportError,
)
from .utils import getenv, round_half_up

__all__ = [
    "BaseAPIClient",
    "ConfigurationError",
    "IntegrationAPIError",
    "MalformedResponse",
    "TransportError",
    "getenv",
    "round_half_up",
]
