"""Result models for export, restore, and offline validation."""

from pydantic import BaseModel, Field

from gudang_backup.storage.models import StoredFile


class CleanupResult(BaseModel):
    """Outcome of a best-effort cleanup; observed, never raised."""

    path: str
    removed: bool
    error: str | None = None


class BackupResult(StoredFile):
    """Where the snapshot went, plus what was written."""

    file_name: str
    row_counts: dict[str, int] = Field(default_factory=dict)
    cleanup: CleanupResult | None = None


class RestoreSummary(BaseModel):
    """What a committed restore wrote. Every registered table was cleared."""

    version: int | None = None          # None: the snapshot did not say
    cleared_tables: list[str] = Field(default_factory=list)
    inserted: dict[str, int] = Field(default_factory=dict)

    @property
    def total_rows(self) -> int:
        return sum(self.inserted.values())


class ValidationReport(BaseModel):
    """Offline check of a snapshot document."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    version: int | None = None
    row_counts: dict[str, int] = Field(default_factory=dict)
