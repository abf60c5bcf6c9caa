"""Directory strategies: how a generated file reaches an external location.

A strategy is selected once at startup:

- ``ScopedDirectoryStrategy`` for platforms with a permission-scoped
  directory API (the user grants access to one folder, writes go through
  that API).  The grant is cached in a ``DirectoryPreference``.
- ``PlainFilesystemStrategy`` for platforms without one; it either copies
  into a configured export directory or defers to internal storage.

``place()`` returns a ``StoredFile`` on success, ``None`` when the
strategy has no external location to offer, and raises
``PermissionDenied`` / ``StorageWriteFailure`` when the resolver should
fall back to internal storage with a notice.
"""

import logging
import shutil
from pathlib import Path
from typing import Protocol

from gudang_backup.errors import PermissionDenied, StorageWriteFailure
from gudang_backup.storage.models import DirectoryGrant, StorageLocation, StoredFile
from gudang_backup.storage.paths import external_display_path
from gudang_backup.storage.preference import DirectoryPreference

logger = logging.getLogger(__name__)

PICKER_FAILED_NOTICE = (
    "Could not open the folder picker. The file was saved in the app folder."
)
UNSUPPORTED_NOTICE = (
    "This device does not support choosing an external folder. "
    "The file was saved in the app folder."
)


class ScopedStorage(Protocol):
    """Permission-scoped directory API (document-tree style)."""

    async def request_directory_permission(self) -> DirectoryGrant:
        """Ask the user to pick and grant a directory; may suspend on the UI."""
        ...

    async def create_file(self, directory_uri: str, file_name: str, mime_type: str) -> str:
        """Create an empty file in the granted directory and return its URI."""
        ...

    async def write_bytes(self, uri: str, data: bytes) -> None:
        ...

    async def read_bytes(self, uri: str) -> bytes:
        ...

    async def delete(self, uri: str) -> None:
        """Remove a file created by ``create_file``."""
        ...


class DirectoryStrategy(Protocol):
    """External placement policy used by ``StorageResolver``."""

    unavailable_notice: str | None

    async def place(self, source: Path, file_name: str, mime_type: str) -> StoredFile | None:
        ...


class ScopedDirectoryStrategy:
    """Writes through a ``ScopedStorage`` into a user-granted directory.

    Prompts only when no directory is cached.  A failed write invalidates
    the cached directory so the next call prompts again.  A file created
    before the failure is deleted again. An unreadable source is raised as
    is and leaves the cached directory alone.
    """

    unavailable_notice: str | None = None

    def __init__(self, storage: ScopedStorage, preference: DirectoryPreference) -> None:
        self._storage = storage
        self._preference = preference

    async def place(self, source: Path, file_name: str, mime_type: str) -> StoredFile:
        data = source.read_bytes()
        directory_uri = self._preference.load()
        if directory_uri is None:
            directory_uri = await self._request_grant()

        dest_uri: str | None = None
        try:
            dest_uri = await self._storage.create_file(directory_uri, file_name, mime_type)
            await self._storage.write_bytes(dest_uri, data)
        except Exception as e:
            if dest_uri is not None:
                await self._discard(dest_uri)
            logger.warning("Write to %s failed, forgetting directory: %s", directory_uri, e)
            self._preference.clear()
            raise StorageWriteFailure(f"Write to {directory_uri} failed: {e}") from e

        logger.info("Saved %s to granted directory %s", file_name, directory_uri)
        return StoredFile(
            uri=dest_uri,
            location=StorageLocation.EXTERNAL,
            display_path=external_display_path(directory_uri, file_name),
        )

    async def _discard(self, uri: str) -> None:
        try:
            await self._storage.delete(uri)
        except Exception as e:
            logger.warning("Could not remove partial file %s: %s", uri, e)

    async def _request_grant(self) -> str:
        try:
            grant = await self._storage.request_directory_permission()
        except Exception as e:
            raise PermissionDenied(
                f"Directory picker failed: {e}", notice=PICKER_FAILED_NOTICE
            ) from e
        if not grant.granted or not grant.directory_uri:
            raise PermissionDenied("Directory grant declined")
        self._preference.save(grant.directory_uri)
        return grant.directory_uri


class PlainFilesystemStrategy:
    """Copies into ``export_dir`` when configured, else defers to internal storage."""

    def __init__(
        self,
        export_dir: Path | None = None,
        unavailable_notice: str | None = UNSUPPORTED_NOTICE,
    ) -> None:
        self.export_dir = Path(export_dir) if export_dir is not None else None
        self.unavailable_notice = unavailable_notice

    async def place(self, source: Path, file_name: str, mime_type: str) -> StoredFile | None:
        if self.export_dir is None:
            return None
        dest = self.export_dir / file_name
        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, dest)
        except OSError as e:
            raise StorageWriteFailure(f"Copy to {self.export_dir} failed: {e}") from e
        return StoredFile(
            uri=dest.resolve().as_uri(),
            location=StorageLocation.EXTERNAL,
            display_path=external_display_path(self.export_dir.resolve().as_uri(), file_name),
        )
