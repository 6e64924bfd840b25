from pydantic import BaseModel, ConfigDict, Field, computed_field


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


class LocationCandidate(BaseModel):
    """A location returned by a search, not yet part of the registry."""

    name: str
    country: str
    state: str | None = None
    coordinates: Coordinates

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        if self.state:
            return f"{self.name}, {self.state} {self.country}"
        return f"{self.name}, {self.country}"


class Location(BaseModel):
    id: int
    name: str
    country: str
    coordinates: Coordinates

    model_config = ConfigDict(frozen=True)
