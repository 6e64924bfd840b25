from fastapi import APIRouter, HTTPException, Query, Response, status

from ..dependencies import Client, Registry
from ..integrations.common.exceptions import ConfigurationError, TransportError
from .exceptions import RegistryError
from .models import Location, LocationCandidate

router = APIRouter(prefix="/api")


@router.get("/cities", response_model=list[Location])
async def get_cities(registry: Registry) -> list[Location]:
    return list(registry.locations)


@router.put("/cities", response_model=list[Location])
async def set_cities(
    registry: Registry, locations: list[Location]
) -> list[Location]:
    """
    Replace all cities. The list must not be empty and ids must be unique.
    """
    try:
        registry.set_all(locations)
    except RegistryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return list(registry.locations)


@router.post(
    "/cities", response_model=Location, status_code=status.HTTP_201_CREATED
)
async def add_city(registry: Registry, candidate: LocationCandidate) -> Location:
    return registry.add(candidate)


@router.post("/cities/reset", response_model=list[Location])
async def reset_cities(registry: Registry) -> list[Location]:
    registry.reset()
    return list(registry.locations)


@router.get("/cities/search", response_model=list[LocationCandidate])
async def search_cities(
    client: Client, q: str = Query(min_length=1)
) -> list[LocationCandidate]:
    """
    Search for cities by name, or by postal code if the query is all digits.
    """
    try:
        return await client.search_locations(q)
    except ConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )
    except TransportError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.put("/cities/{location_id}", response_model=Location)
async def replace_city(
    registry: Registry, location_id: int, candidate: LocationCandidate
) -> Location:
    """
    Replace a city with a new one, keeping the id of the replaced city.
    """
    if (location := registry.replace(location_id, candidate)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="City not found"
        )

    return location


@router.delete("/cities/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_city(registry: Registry, location_id: int) -> Response:
    try:
        removed = registry.remove(location_id)
    except RegistryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="City not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
