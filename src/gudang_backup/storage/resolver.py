"""Storage resolver: decides where a generated file permanently lives.

Decision procedure:

1. Ask the configured ``DirectoryStrategy`` for an external placement.
2. If it declines (no external location, permission denied, write failed),
   copy into the app's private documents directory and attach a notice.
3. If even that fails, return an ``unknown``-location reference pointing at
   the transient source.  This is the only non-durable result and callers
   must present it as a failure.

Usage:
    resolver = StorageResolver(strategy, documents_dir=Path("~/.gudang").expanduser())
    stored = await resolver.persist(tmp_path, "gudang-backup_20260101-120000.json",
                                    "application/json")
"""

import logging
import shutil
from pathlib import Path

from gudang_backup.errors import PermissionDenied, StorageWriteFailure, TotalStorageFailure
from gudang_backup.storage.models import StorageLocation, StoredFile
from gudang_backup.storage.paths import internal_display_path, temporary_display_path
from gudang_backup.storage.strategies import DirectoryStrategy

logger = logging.getLogger(__name__)


class StorageResolver:
    """Places files durably, falling back to internal storage when needed.

    Args:
        strategy: External placement policy, selected once at startup.
        documents_dir: The app's private directory; ``None`` when the host
            has none (every persist then ends in ``unknown``).
    """

    def __init__(self, strategy: DirectoryStrategy, documents_dir: Path | None) -> None:
        self.strategy = strategy
        self.documents_dir = Path(documents_dir) if documents_dir is not None else None

    async def persist(self, source_path: str | Path, file_name: str, mime_type: str) -> StoredFile:
        """Persist ``source_path`` under ``file_name``.

        Never raises for placement problems; see the module docstring for
        the fallback chain.
        """
        source = Path(source_path)
        notice: str | None

        try:
            placed = await self.strategy.place(source, file_name, mime_type)
        except (PermissionDenied, StorageWriteFailure) as e:
            logger.warning("External placement unavailable (%s), using app folder", e)
            notice = e.notice
        else:
            if placed is not None:
                return placed
            notice = self.strategy.unavailable_notice

        try:
            return self.copy_to_internal(source, file_name).with_notice(notice)
        except TotalStorageFailure as e:
            logger.error("Could not place %s anywhere durable: %s", file_name, e)
            uri = str(source)
            return StoredFile(
                uri=uri,
                location=StorageLocation.UNKNOWN,
                notice=e.notice,
                display_path=temporary_display_path(uri),
            )

    def copy_to_internal(self, source: Path, file_name: str) -> StoredFile:
        """Copy ``source`` into the private documents directory.

        Raises:
            TotalStorageFailure: If there is no writable private directory.
        """
        if self.documents_dir is None:
            raise TotalStorageFailure("Documents directory unavailable")

        dest = self.documents_dir / file_name
        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TotalStorageFailure(f"Cannot create {self.documents_dir}: {e}") from e

        try:
            dest.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove existing %s: %s", dest, e)

        try:
            shutil.copyfile(source, dest)
        except OSError as e:
            raise TotalStorageFailure(f"Copy to {dest} failed: {e}") from e

        logger.info("Saved %s to app folder", file_name)
        return StoredFile(
            uri=dest.resolve().as_uri(),
            location=StorageLocation.INTERNAL,
            display_path=internal_display_path(self.documents_dir, file_name),
        )
