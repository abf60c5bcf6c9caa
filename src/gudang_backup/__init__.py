"""gudang-backup: full-snapshot backup/restore for the Gudang inventory store.

Exports every table to a versioned JSON snapshot, restores it in one
all-or-nothing transaction, and places generated files durably through a
permission-aware storage fallback chain.

Usage:
    from gudang_backup import AsyncSqlAdapter, BackupExporter, BackupImporter
    from gudang_backup import StorageResolver, PlainFilesystemStrategy
    from gudang_backup import DEFAULT_REGISTRY, load_config, build_app
"""

__version__ = "0.1.0"

# Adapters
from gudang_backup.adapters.base import DatabaseClient
from gudang_backup.adapters.sql import AsyncSqlAdapter

# Schema
from gudang_backup.schema.registry import CURRENT_VERSION, DEFAULT_REGISTRY, SchemaRegistry

# Backup
from gudang_backup.backup.exporter import BackupExporter
from gudang_backup.backup.importer import BackupImporter
from gudang_backup.backup.validation import validate_snapshot

# Storage
from gudang_backup.storage.models import StorageLocation, StoredFile
from gudang_backup.storage.resolver import StorageResolver
from gudang_backup.storage.share import ShareableUriResolver
from gudang_backup.storage.strategies import PlainFilesystemStrategy, ScopedDirectoryStrategy

# Config / wiring
from gudang_backup.config.loader import load_config
from gudang_backup.factory import build_app
from gudang_backup.service import BackupService

# Errors
from gudang_backup.errors import (
    BackupError,
    InvalidFormat,
    TransactionFailure,
    UnsupportedVersion,
)

__all__ = [
    # Adapters
    "DatabaseClient",
    "AsyncSqlAdapter",
    # Schema
    "CURRENT_VERSION",
    "DEFAULT_REGISTRY",
    "SchemaRegistry",
    # Backup
    "BackupExporter",
    "BackupImporter",
    "validate_snapshot",
    # Storage
    "StorageLocation",
    "StoredFile",
    "StorageResolver",
    "ShareableUriResolver",
    "PlainFilesystemStrategy",
    "ScopedDirectoryStrategy",
    # Config / wiring
    "load_config",
    "build_app",
    "BackupService",
    # Errors
    "BackupError",
    "InvalidFormat",
    "TransactionFailure",
    "UnsupportedVersion",
]
