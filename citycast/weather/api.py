from fastapi import APIRouter

from ..dependencies import Refresher
from .tasks import WeatherRefresher
from .types import WeatherReport
from .units import TemperatureUnit

router = APIRouter(prefix="/api")


def _report(refresher: WeatherRefresher, unit: TemperatureUnit) -> WeatherReport:
    return WeatherReport(
        state=refresher.state,
        last_refreshed=refresher.last_refreshed,
        error=refresher.error,
        unit=unit,
        snapshots={
            location_id: snapshot.in_unit(unit)
            for location_id, snapshot in refresher.snapshots.items()
        },
    )


@router.get("/weather", response_model=WeatherReport)
async def get_weather(
    refresher: Refresher, unit: TemperatureUnit = TemperatureUnit.CELSIUS
) -> WeatherReport:
    """
    The weather from the latest refresh cycle, keyed by city id. Cities that
    failed to refresh are missing.
    """
    return _report(refresher, unit)


@router.post("/weather/refresh", response_model=WeatherReport)
async def refresh_weather(
    refresher: Refresher, unit: TemperatureUnit = TemperatureUnit.CELSIUS
) -> WeatherReport:
    """
    Refresh the weather now. If a refresh is already running this waits for
    it instead of starting another one.
    """
    await refresher.refresh()
    return _report(refresher, unit)
