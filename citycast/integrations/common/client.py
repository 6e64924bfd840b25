"""
Base API client.

Provides shared functionality for API clients:
- httpx.AsyncClient lifecycle management
- Async context manager support
- Status checking that maps failures to TransportError
- Pydantic response decoding helpers
"""

from typing import Any, Self, TypeVar

import httpx
import pydantic
import structlog
from pydantic import BaseModel

from .exceptions import MalformedResponse, TransportError

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

DEFAULT_TIMEOUT = 10.0


class BaseAPIClient:
    """
    Base class for API clients using httpx.

    Subclasses issue requests through `_get`, which raises TransportError for
    network failures and non-2xx responses, and decode bodies with
    `_decode_json`.

        async with MyClient() as client:
            data = await client.get_data()
    """

    client: httpx.AsyncClient

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        await self.client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    ####################
    # Internal helpers #
    ####################

    async def _get(
        self, path: str, *, params: dict[str, str | int | float]
    ) -> httpx.Response:
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Provider request failed",
                path=path,
                status_code=response.status_code,
                body=response.text[:300],
            )
            raise TransportError(
                f"Got unexpected status code {response.status_code} from {path}"
            )

        return response

    #####################
    # Response decoding #
    #####################

    def _decode_json(
        self, response: httpx.Response, response_type: type[T]
    ) -> T:
        """
        Decode a JSON response into a Pydantic model.

        Uses model_validate_json for efficiency (single parse). A body that is
        not JSON is a TransportError, valid JSON of the wrong shape is a
        MalformedResponse.
        """
        try:
            return response_type.model_validate_json(response.text)
        except pydantic.ValidationError as exc:
            if any(error["type"] == "json_invalid" for error in exc.errors()):
                raise TransportError(
                    f"Unparsable response body from {response.request.url.path}"
                ) from exc
            raise MalformedResponse(
                f"Unexpected response shape from {response.request.url.path}: "
                f"{exc.error_count()} errors"
            ) from exc
