"""Pydantic models for application configuration (``gudang.toml``)."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from gudang_backup.backup.naming import BACKUP_BASE_NAME


def _default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "gudang"


def _default_cache_dir() -> Path:
    return Path.home() / ".cache" / "gudang"


class DatabaseSettings(BaseModel):
    """Store connection from ``[database]``."""

    url: str = "sqlite:///gudang.db"


class StorageSettings(BaseModel):
    """File placement from ``[storage]``."""

    documents_dir: Path | None = Field(default_factory=lambda: _default_data_dir() / "documents")
    cache_dir: Path | None = Field(default_factory=_default_cache_dir)
    strategy: Literal["scoped", "plain"] = "scoped"
    export_dir: Path | None = None          # plain strategy only
    preference_file: Path | None = None     # default: <documents_dir>/download_dir.json

    @field_validator("documents_dir", "cache_dir", "export_dir", "preference_file", mode="before")
    @classmethod
    def _expand(cls, value: object) -> object:
        # Empty string in TOML means "not set"
        if value == "":
            return None
        if isinstance(value, (str, Path)):
            return Path(value).expanduser()
        return value

    def resolved_preference_file(self) -> Path | None:
        if self.preference_file is not None:
            return self.preference_file
        if self.documents_dir is not None:
            return self.documents_dir / "download_dir.json"
        return None


class BackupSettings(BaseModel):
    """Snapshot naming from ``[backup]``."""

    base_name: str = BACKUP_BASE_NAME


class AppConfig(BaseModel):
    """Complete configuration from ``gudang.toml``."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)
