"""
The set of cities we monitor.

The registry is owned by whoever creates it (the server on startup, or a CLI
command) and handed to the refresher and the management endpoints. It is not
safe to mutate from multiple threads; all access happens on the event loop and
no mutation awaits anything.
"""

from collections.abc import Iterable

import structlog

from .exceptions import DuplicateLocationError, EmptyCityListError
from .models import Coordinates, Location, LocationCandidate

logger = structlog.get_logger()

DEFAULT_CITIES: tuple[Location, ...] = (
    Location(
        id=1,
        name="Algiers",
        country="DZ",
        coordinates=Coordinates(lat=36.7538, lon=3.0588),
    ),
    Location(
        id=2,
        name="London",
        country="GB",
        coordinates=Coordinates(lat=51.5074, lon=-0.1278),
    ),
    Location(
        id=3,
        name="Tokyo",
        country="JP",
        coordinates=Coordinates(lat=35.6762, lon=139.6503),
    ),
    Location(
        id=4,
        name="Sydney",
        country="AU",
        coordinates=Coordinates(lat=-33.8688, lon=151.2093),
    ),
    Location(
        id=5,
        name="Dubai",
        country="AE",
        coordinates=Coordinates(lat=25.2048, lon=55.2708),
    ),
    Location(
        id=6,
        name="Paris",
        country="FR",
        coordinates=Coordinates(lat=48.8566, lon=2.3522),
    ),
)


class CityRegistry:
    """
    An ordered collection of locations, unique by id.
    """

    def __init__(self, locations: Iterable[Location] | None = None) -> None:
        self._locations: list[Location] = []
        if locations is None:
            self.reset()
        else:
            self.set_all(list(locations))

    def __len__(self) -> int:
        return len(self._locations)

    @property
    def locations(self) -> tuple[Location, ...]:
        """
        A copy of the current locations, in order.
        """
        return tuple(self._locations)

    def get(self, location_id: int) -> Location | None:
        for location in self._locations:
            if location.id == location_id:
                return location
        return None

    def replace(
        self, target_id: int, new_location: Location | LocationCandidate
    ) -> Location | None:
        """
        Substitute the location with the given id. The replacement keeps the
        id and position of the old entry, but takes the name, country and
        coordinates of the new location.

        Returns the new location, or None without changing anything if no
        location has that id.
        """
        for index, location in enumerate(self._locations):
            if location.id == target_id:
                replacement = Location(
                    id=target_id,
                    name=new_location.name,
                    country=new_location.country,
                    coordinates=new_location.coordinates,
                )
                self._locations[index] = replacement
                logger.info(
                    "Replaced city",
                    location_id=target_id,
                    old_name=location.name,
                    new_name=new_location.name,
                )
                return replacement

        logger.info("No city to replace", location_id=target_id)
        return None

    def add(self, candidate: LocationCandidate) -> Location:
        """
        Append a new location with the next free id.
        """
        next_id = max((location.id for location in self._locations), default=0) + 1
        location = Location(
            id=next_id,
            name=candidate.name,
            country=candidate.country,
            coordinates=candidate.coordinates,
        )
        self._locations.append(location)
        logger.info("Added city", location_id=next_id, name=location.name)
        return location

    def remove(self, location_id: int) -> bool:
        """
        Remove the location with the given id. Returns False if there is no
        such location. The last location can not be removed.
        """
        remaining = [
            location for location in self._locations if location.id != location_id
        ]
        if len(remaining) == len(self._locations):
            return False
        if not remaining:
            raise EmptyCityListError("At least one city is required")

        self._locations = remaining
        logger.info("Removed city", location_id=location_id)
        return True

    def set_all(self, locations: list[Location]) -> None:
        """
        Replace the entire set of locations. The list must not be empty and
        ids must be unique, otherwise nothing is changed.
        """
        if not locations:
            raise EmptyCityListError("At least one city is required")

        seen: set[int] = set()
        for location in locations:
            if location.id in seen:
                raise DuplicateLocationError(
                    f"Duplicate city id {location.id} ({location.name})"
                )
            seen.add(location.id)

        self._locations = list(locations)

    def reset(self) -> None:
        """
        Restore the built-in default cities.
        """
        self._locations = list(DEFAULT_CITIES)
