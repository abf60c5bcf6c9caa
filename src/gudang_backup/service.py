"""Backup service facade used by the screen layer and the CLI.

Export and restore may suspend on I/O or on the directory prompt; a second
export/restore while one is outstanding is refused with
``OperationInProgress`` rather than queued behind it.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from gudang_backup.backup.exporter import BackupExporter
from gudang_backup.backup.importer import BackupImporter
from gudang_backup.backup.models import BackupResult, RestoreSummary, ValidationReport
from gudang_backup.backup.validation import validate_snapshot
from gudang_backup.errors import OperationInProgress


class BackupService:
    """One-at-a-time access to export and restore."""

    def __init__(self, exporter: BackupExporter, importer: BackupImporter) -> None:
        self.exporter = exporter
        self.importer = importer
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def _exclusive(self, operation: str) -> AsyncIterator[None]:
        if self._lock.locked():
            raise OperationInProgress(f"{operation} requested while another operation is running")
        async with self._lock:
            yield

    async def export(self) -> BackupResult:
        async with self._exclusive("export"):
            return await self.exporter.export()

    async def restore(self, document_path: str | Path) -> RestoreSummary:
        async with self._exclusive("restore"):
            return await self.importer.import_file(document_path)

    def validate(self, document_path: str | Path) -> ValidationReport:
        """Offline check; never touches the store, so it is not serialised."""
        return validate_snapshot(document_path, self.importer.registry)
