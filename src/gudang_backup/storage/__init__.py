"""Durable file placement and sharing.

Usage:
    from gudang_backup.storage import StorageResolver, ScopedDirectoryStrategy
    from gudang_backup.storage import DirectoryPreference, ShareableUriResolver
"""

from gudang_backup.storage.console import ConsoleDirectoryStorage
from gudang_backup.storage.models import DirectoryGrant, StorageLocation, StoredFile
from gudang_backup.storage.preference import DirectoryPreference
from gudang_backup.storage.resolver import StorageResolver
from gudang_backup.storage.share import ShareableUriResolver
from gudang_backup.storage.strategies import (
    DirectoryStrategy,
    PlainFilesystemStrategy,
    ScopedDirectoryStrategy,
    ScopedStorage,
)

__all__ = [
    "ConsoleDirectoryStorage",
    "DirectoryGrant",
    "DirectoryPreference",
    "DirectoryStrategy",
    "PlainFilesystemStrategy",
    "ScopedDirectoryStrategy",
    "ScopedStorage",
    "ShareableUriResolver",
    "StorageLocation",
    "StorageResolver",
    "StoredFile",
]
