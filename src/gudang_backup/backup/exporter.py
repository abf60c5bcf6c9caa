"""Full-database snapshot export.

Walks the schema registry in insert order, reads every row of every table
(``ORDER BY id ASC``), sanitises each row to the table's declared columns,
writes the versioned snapshot to a transient file, and hands that file to
the storage resolver for durable placement.

Usage:
    exporter = BackupExporter(adapter, resolver, temp_dir=Path("/tmp/gudang"))
    result = await exporter.export()
    if not result.is_durable:
        show_error(result.notice)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from gudang_backup.adapters.base import DatabaseClient
from gudang_backup.backup.models import BackupResult, CleanupResult
from gudang_backup.backup.naming import BACKUP_BASE_NAME, build_timestamped_file_base
from gudang_backup.errors import StorageUnavailable
from gudang_backup.schema.models import SnapshotDocument
from gudang_backup.schema.registry import DEFAULT_REGISTRY, SchemaRegistry
from gudang_backup.storage.resolver import StorageResolver

logger = logging.getLogger(__name__)

BACKUP_MIME_TYPE = "application/json"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _iso_utc(when: datetime) -> str:
    return when.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def remove_transient(path: Path) -> CleanupResult:
    """Delete a transient file, reporting (not raising) any failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove transient file %s: %s", path, e)
        return CleanupResult(path=str(path), removed=False, error=str(e))
    return CleanupResult(path=str(path), removed=True)


class BackupExporter:
    """Produces snapshot documents and persists them.

    Args:
        adapter: Store to read from.
        resolver: Durable placement for the finished file.
        registry: Tables, columns and order to export.
        temp_dir: Transient staging directory; export fails with
            ``StorageUnavailable`` when ``None``.
        base_name: File name prefix.
        clock: Returns the current local time (tests pin it).
    """

    def __init__(
        self,
        adapter: DatabaseClient,
        resolver: StorageResolver,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
        temp_dir: Path | None = None,
        base_name: str = BACKUP_BASE_NAME,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.adapter = adapter
        self.resolver = resolver
        self.registry = registry
        self.temp_dir = Path(temp_dir) if temp_dir is not None else None
        self.base_name = base_name
        self._clock = clock or _local_now

    async def build_document(self, now: datetime | None = None) -> SnapshotDocument:
        """Read every registered table into a snapshot document."""
        now = now or self._clock()
        tables: dict[str, list[dict]] = {}
        for name in self.registry.insert_order():
            spec = self.registry.table(name)
            columns = ", ".join(f'"{c}"' for c in spec.columns)
            rows = await self.adapter.select(name, columns, order_by=f'"{spec.pk}" ASC')
            tables[name] = [spec.sanitize(row) for row in rows]
            logger.debug("Read %d rows from %s", len(rows), name)

        return SnapshotDocument(
            version=self.registry.version,
            exported_at=_iso_utc(now),
            tables=tables,
        )

    async def render(self) -> tuple[str, str]:
        """Return ``(file_name, json_text)`` without touching disk."""
        now = self._clock()
        document = await self.build_document(now)
        return self._file_name(now), document.to_json()

    async def export(self) -> BackupResult:
        """Snapshot the store and place the file durably.

        Read and serialisation errors propagate; the transient file is only
        handed to the resolver after it was written completely.  When the
        resolver could not place the file anywhere durable the transient
        copy is kept, since the returned ``uri`` points at it.

        Raises:
            StorageUnavailable: If no transient directory is configured.
        """
        if self.temp_dir is None:
            raise StorageUnavailable("No transient directory configured")

        now = self._clock()
        document = await self.build_document(now)
        text = document.to_json()
        file_name = self._file_name(now)

        self.temp_dir.mkdir(parents=True, exist_ok=True)
        temp_path = self.temp_dir / file_name
        try:
            temp_path.write_text(text, encoding="utf-8")
            stored = await self.resolver.persist(temp_path, file_name, BACKUP_MIME_TYPE)
        except BaseException:
            remove_transient(temp_path)
            raise

        cleanup = remove_transient(temp_path) if stored.is_durable else None

        row_counts = {name: len(rows) for name, rows in document.tables.items()}
        logger.info(
            "Exported %d rows to %s (%s)",
            sum(row_counts.values()),
            file_name,
            stored.location.value,
        )
        return BackupResult(
            **stored.model_dump(),
            file_name=file_name,
            row_counts=row_counts,
            cleanup=cleanup,
        )

    def _file_name(self, now: datetime) -> str:
        return f"{build_timestamped_file_base(self.base_name, now)}.json"
