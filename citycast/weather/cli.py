import asyncio

import click

from ..cities.models import Location
from ..cities.registry import CityRegistry
from ..integrations.common.exceptions import IntegrationAPIError
from ..integrations.openweather.client import OpenWeatherClient
from .tasks import WeatherRefresher
from .types import SnapshotMap
from .units import TemperatureUnit, format_date, format_time


def render_table(
    locations: tuple[Location, ...], snapshots: SnapshotMap, unit: TemperatureUnit
) -> list[str]:
    """
    Render one line per city, followed by the daily forecast. Cities without
    a snapshot are shown as unavailable.
    """
    lines = [
        f"{'City':<24}  {'Temp':>6}  {'Feels':>6}  {'Condition':<12}  "
        f"{'Humidity':>8}  {'Wind':>8}  Sunrise/Sunset"
    ]
    for location in locations:
        name = f"{location.name}, {location.country}"
        if (snapshot := snapshots.get(location.id)) is None:
            lines.append(f"{name:<24}  (unavailable)")
            continue

        snapshot = snapshot.in_unit(unit)
        lines.append(
            f"{name:<24}  {snapshot.temperature:>4}{unit.symbol}  "
            f"{snapshot.feels_like:>4}{unit.symbol}  {snapshot.condition:<12}  "
            f"{snapshot.humidity:>7}%  {snapshot.wind_speed:>3} km/h  "
            f"{format_time(snapshot.sunrise)} / {format_time(snapshot.sunset)}"
        )
        for day in snapshot.daily:
            lines.append(
                f"{'':<4}{format_date(day.timestamp):<14}  "
                f"{day.temperature.min:>4}{unit.symbol} .. "
                f"{day.temperature.max:>4}{unit.symbol}  {day.condition}"
            )
    return lines


async def _resolve_cities(
    client: OpenWeatherClient, queries: tuple[str, ...]
) -> CityRegistry:
    registry = CityRegistry()
    if not queries:
        return registry

    locations: list[Location] = []
    for index, query in enumerate(queries, start=1):
        candidates = await client.search_locations(query)
        if not candidates:
            raise click.ClickException(f"No city found for {query!r}")
        candidate = candidates[0]
        locations.append(
            Location(
                id=index,
                name=candidate.name,
                country=candidate.country,
                coordinates=candidate.coordinates,
            )
        )

    registry.set_all(locations)
    return registry


def _echo_report(refresher: WeatherRefresher, unit: TemperatureUnit) -> None:
    if refresher.error:
        click.secho(refresher.error, fg="red", err=True)
    lines = render_table(refresher.registry.locations, refresher.snapshots, unit)
    for line in lines:
        click.echo(line)


@click.group(name="weather", help="Show the weather for the monitored cities")
def cli() -> None:
    pass


@cli.command(name="show")
@click.option("--fahrenheit", "-f", is_flag=True, help="Show temperatures in °F")
@click.option(
    "--city",
    "-c",
    "cities",
    multiple=True,
    help="City to show instead of the defaults, can be repeated",
)
async def show(*, fahrenheit: bool, cities: tuple[str, ...]) -> None:
    """Refresh the weather once and print it."""
    unit = TemperatureUnit.FAHRENHEIT if fahrenheit else TemperatureUnit.CELSIUS

    async with OpenWeatherClient() as client:
        try:
            registry = await _resolve_cities(client, cities)
        except IntegrationAPIError as e:
            raise click.ClickException(str(e))

        refresher = WeatherRefresher(registry=registry, client=client)
        await refresher.refresh()

    _echo_report(refresher, unit)


@cli.command(name="watch")
@click.option("--fahrenheit", "-f", is_flag=True, help="Show temperatures in °F")
@click.option(
    "--interval",
    "-i",
    type=int,
    default=None,
    help="Seconds between refreshes [default: 300]",
)
async def watch(*, fahrenheit: bool, interval: int | None) -> None:
    """Refresh the weather for the default cities on an interval."""
    unit = TemperatureUnit.FAHRENHEIT if fahrenheit else TemperatureUnit.CELSIUS

    async with OpenWeatherClient() as client:
        refresher = WeatherRefresher(
            registry=CityRegistry(),
            client=client,
            interval=interval,
        )
        while True:
            await refresher.refresh()
            _echo_report(refresher, unit)
            click.echo("")
            await asyncio.sleep(refresher.interval)
