import click

from ..integrations.common.exceptions import IntegrationAPIError
from ..integrations.openweather.client import OpenWeatherClient
from .registry import DEFAULT_CITIES


@click.group(name="cities", help="Find and list cities")
def cli() -> None:
    pass


@cli.command(name="defaults")
def list_defaults() -> None:
    """List the built-in default cities."""
    click.echo(f"{'ID':>4}  {'Name':<20}  {'Country':<7}  {'Lat':>9}  {'Lon':>9}")
    click.echo(f"{'--':>4}  {'----':<20}  {'-------':<7}  {'---':>9}  {'---':>9}")
    for city in DEFAULT_CITIES:
        click.echo(
            f"{city.id:>4}  {city.name:<20}  {city.country:<7}  "
            f"{city.coordinates.lat:>9.4f}  {city.coordinates.lon:>9.4f}"
        )


@cli.command(name="search")
@click.argument("query")
async def search(*, query: str) -> None:
    """Search for cities by name or postal code."""
    async with OpenWeatherClient() as client:
        try:
            candidates = await client.search_locations(query)
        except IntegrationAPIError as e:
            raise click.ClickException(str(e))

    if not candidates:
        click.echo("No cities found.")
        return

    for candidate in candidates:
        click.echo(
            f"{candidate.display_name:<40}  "
            f"{candidate.coordinates.lat:>9.4f}  {candidate.coordinates.lon:>9.4f}"
        )
