class RegistryError(ValueError):
    """Base exception for rejected registry mutations."""

    pass


class EmptyCityListError(RegistryError):
    """The mutation would leave the registry without any cities."""

    pass


class DuplicateLocationError(RegistryError):
    """Two locations share the same identifier."""

    pass
