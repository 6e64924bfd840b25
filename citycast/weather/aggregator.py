import asyncio
from collections.abc import Callable
from datetime import tzinfo

import structlog

from ..cities.models import Location
from ..cities.registry import CityRegistry
from ..forecasts.normalize import normalize_forecast
from ..integrations.common.exceptions import IntegrationAPIError
from ..integrations.openweather.client import OpenWeatherClient
from ..utils import timed
from .types import SnapshotMap, WeatherSnapshot

logger = structlog.get_logger()


async def fetch_snapshot(
    client: OpenWeatherClient, location: Location, *, tz: tzinfo | None = None
) -> WeatherSnapshot:
    """
    Fetch and normalize the weather for a single location.
    """
    current, samples = await client.fetch(location)
    return WeatherSnapshot.build(current, normalize_forecast(samples, tz=tz))


async def _fetch_or_none(
    client: OpenWeatherClient, location: Location, *, tz: tzinfo | None
) -> tuple[Location, WeatherSnapshot | None]:
    try:
        return location, await fetch_snapshot(client, location, tz=tz)
    except IntegrationAPIError as e:
        logger.error(
            "Failed to fetch weather",
            location_id=location.id,
            city=location.name,
            error_type=type(e).__name__,
            error=str(e),
        )
        return location, None
    except Exception:
        logger.exception(
            "Failed to fetch weather", location_id=location.id, city=location.name
        )
        return location, None


async def refresh(
    registry: CityRegistry,
    client: OpenWeatherClient,
    *,
    tz: tzinfo | None = None,
    on_result: Callable[[Location, WeatherSnapshot | None], None] | None = None,
) -> SnapshotMap:
    """
    Fetch the weather for every city in the registry concurrently.

    A city that fails is left out of the result instead of failing the
    others. The result is a new map ordered like the registry. `on_result` is
    called as each city completes, with None for cities that failed.
    """

    # Take a copy so that edits made while we're fetching apply to the next
    # cycle, not this one
    locations = registry.locations
    if not locations:
        return {}

    snapshots: SnapshotMap = {}

    with timed("Refresh weather", cities=len(locations)):
        pending = [
            _fetch_or_none(client, location, tz=tz) for location in locations
        ]
        for next_result in asyncio.as_completed(pending):
            location, snapshot = await next_result
            if snapshot is not None:
                snapshots[location.id] = snapshot
            if on_result:
                on_result(location, snapshot)

    logger.info(
        "Refreshed weather",
        cities=len(locations),
        succeeded=len(snapshots),
        failed=len(locations) - len(snapshots),
    )

    return {
        location.id: snapshots[location.id]
        for location in locations
        if location.id in snapshots
    }
