import asyncio
import os
from datetime import UTC, datetime, tzinfo

import structlog

from ..cities.models import Location
from ..cities.registry import CityRegistry
from ..integrations.openweather.client import OpenWeatherClient
from .aggregator import refresh
from .types import CycleState, SnapshotMap, WeatherSnapshot

logger = structlog.get_logger()

DEFAULT_REFRESH_INTERVAL = 300
FAILED_REFRESH_MESSAGE = "Failed to fetch weather data. Please try again later."


def get_refresh_interval() -> int:
    """
    The number of seconds between refresh cycles.
    """
    return int(os.getenv("CITYCAST_REFRESH_INTERVAL", DEFAULT_REFRESH_INTERVAL))


class WeatherRefresher:
    """
    Runs refresh cycles and keeps the result of the latest one.

    At most one cycle is in flight at a time. Triggering a refresh while a
    cycle is running waits for that cycle instead of starting another.
    """

    def __init__(
        self,
        *,
        registry: CityRegistry,
        client: OpenWeatherClient,
        interval: int | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.registry = registry
        self.client = client
        self.interval = interval if interval is not None else get_refresh_interval()
        self.tz = tz

        self.state = CycleState.IDLE
        self.snapshots: SnapshotMap = {}
        self.last_refreshed: datetime | None = None
        self.error: str | None = None

        self._cycle: asyncio.Task[SnapshotMap] | None = None

    @property
    def in_flight(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    async def refresh(self) -> SnapshotMap:
        """
        Run a refresh cycle, or join the one that is already running.
        """
        if self._cycle is None or self._cycle.done():
            self._cycle = asyncio.create_task(self._run_cycle())
        else:
            logger.info("Refresh already in progress, joining it")

        # Shield the cycle so that a cancelled caller doesn't cancel it for
        # everyone else waiting on it
        return await asyncio.shield(self._cycle)

    async def run(self) -> None:
        """
        Refresh immediately, and then every interval. Runs until cancelled.
        """
        logger.info("Starting weather refresh loop", interval=self.interval)
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("Weather refresh failed")
            await asyncio.sleep(self.interval)

    async def _run_cycle(self) -> SnapshotMap:
        self.state = CycleState.FETCHING
        cities = len(self.registry)
        try:
            snapshots = await refresh(
                self.registry, self.client, tz=self.tz, on_result=self._on_result
            )
        except BaseException:
            self.state = CycleState.IDLE
            raise

        # Replace, never merge: cities that failed this cycle are left out
        self.snapshots = snapshots
        self.last_refreshed = datetime.now(UTC)
        if cities and not snapshots:
            self.error = FAILED_REFRESH_MESSAGE
        else:
            self.error = None
        self.state = CycleState.SETTLED

        return snapshots

    def _on_result(
        self, location: Location, snapshot: WeatherSnapshot | None
    ) -> None:
        self.state = CycleState.MERGING
