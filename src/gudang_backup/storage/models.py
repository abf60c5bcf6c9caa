"""Storage result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class StorageLocation(str, Enum):
    """Where a persisted file ended up."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    UNKNOWN = "unknown"


class StoredFile(BaseModel):
    """Reference to a persisted file, handed over to the caller.

    ``location == UNKNOWN`` means no durable placement was possible and
    ``uri`` still points at the transient source; callers must present
    that as a failure.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    uri: str
    location: StorageLocation
    notice: str | None = None
    display_path: str | None = None

    @property
    def is_durable(self) -> bool:
        return self.location is not StorageLocation.UNKNOWN

    def with_notice(self, notice: str | None) -> "StoredFile":
        """Copy with ``notice`` attached (existing notice kept if ``notice`` is None)."""
        if notice is None:
            return self
        return self.model_copy(update={"notice": notice})


class DirectoryGrant(BaseModel):
    """Outcome of a directory permission prompt."""

    granted: bool
    directory_uri: str | None = None
