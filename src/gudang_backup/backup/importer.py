"""Full-database restore from a snapshot document.

Restore is all-or-nothing: the document is parsed and checked before the
store is touched, then one transaction clears every registered table
(children first) and repopulates it (parents first).  Any failure inside
the transaction rolls it back, so the tables are either fully replaced or
exactly as they were.

Restore is not a merge: rows absent from the snapshot are removed.

Usage:
    importer = BackupImporter(adapter)
    try:
        summary = await importer.import_file("gudang-backup_20260101-120000.json")
    except TransactionFailure:
        show("Restore failed. Your data was not changed.")
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gudang_backup.adapters.base import DatabaseClient
from gudang_backup.backup.models import RestoreSummary
from gudang_backup.errors import InvalidFormat, TransactionFailure, UnsupportedVersion
from gudang_backup.schema.models import SnapshotDocument, TableSpec
from gudang_backup.schema.registry import DEFAULT_REGISTRY, SchemaRegistry

logger = logging.getLogger(__name__)

STRUCTURE_MESSAGE = "The backup file structure is not recognised."


def read_snapshot_text(document_path: str | Path) -> str:
    """Read a snapshot file as UTF-8 text.

    Raises:
        InvalidFormat: If the file is missing or not UTF-8 text.
    """
    path = Path(document_path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InvalidFormat(f"Backup file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise InvalidFormat(f"Backup file is not UTF-8 text: {e}") from e


def parse_snapshot(text: str, registry: SchemaRegistry = DEFAULT_REGISTRY) -> SnapshotDocument:
    """Parse and gate a snapshot document without touching the store.

    Raises:
        InvalidFormat: Unparseable JSON or no ``tables`` object.
        UnsupportedVersion: ``version`` is newer than ``registry.version``.
            A missing or non-numeric ``version`` is accepted.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidFormat(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("tables"), dict):
        raise InvalidFormat("Missing 'tables' object", user_message=STRUCTURE_MESSAGE)

    try:
        document = SnapshotDocument.model_validate(payload)
    except ValidationError as e:
        raise InvalidFormat(f"Invalid snapshot header: {e}", user_message=STRUCTURE_MESSAGE) from e

    if document.version is not None and document.version > registry.version:
        raise UnsupportedVersion(document.version, registry.version)
    return document


def table_rows(document: SnapshotDocument, name: str) -> list[Any]:
    """Rows stored for ``name``; an absent or non-list entry counts as empty."""
    entry = document.tables.get(name)
    if entry is None:
        return []
    if not isinstance(entry, list):
        logger.warning("Snapshot entry for %s is not a list; restoring it empty", name)
        return []
    return entry


def upsert_statement(spec: TableSpec) -> str:
    """``INSERT ... ON CONFLICT (pk) DO UPDATE`` over every declared column."""
    columns = ", ".join(f'"{c}"' for c in spec.columns)
    placeholders = ", ".join(f":{c}" for c in spec.columns)
    updates = ", ".join(
        f'"{c}" = excluded."{c}"' for c in spec.columns if c != spec.pk
    )
    return (
        f'INSERT INTO "{spec.name}" ({columns}) VALUES ({placeholders}) '
        f'ON CONFLICT ("{spec.pk}") DO UPDATE SET {updates}'
    )


class BackupImporter:
    """Replaces the contents of every registered table from a snapshot."""

    def __init__(
        self,
        adapter: DatabaseClient,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self.adapter = adapter
        self.registry = registry

    async def import_file(self, document_path: str | Path) -> RestoreSummary:
        """Restore from a snapshot file.  See ``import_text``."""
        return await self.import_text(read_snapshot_text(document_path))

    async def import_text(self, text: str) -> RestoreSummary:
        """Restore from snapshot text.

        Raises:
            InvalidFormat: Document rejected before any store access.
            UnsupportedVersion: Document rejected before any store access.
            TransactionFailure: A delete or insert failed; the transaction
                was rolled back and the cause is chained.
        """
        document = parse_snapshot(text, self.registry)
        pending = {name: table_rows(document, name) for name in self.registry.insert_order()}

        try:
            async with self.adapter.transaction() as tx:
                for name in self.registry.delete_order():
                    await tx.execute(f'DELETE FROM "{name}"')

                for name in self.registry.insert_order():
                    spec = self.registry.table(name)
                    sql = upsert_statement(spec)
                    for row in pending[name]:
                        await tx.execute(sql, spec.sanitize(row))
                    logger.debug("Restored %d rows into %s", len(pending[name]), name)
        except Exception as e:
            logger.error("Restore rolled back: %s", e)
            raise TransactionFailure(f"Restore failed and was rolled back: {e}") from e

        summary = RestoreSummary(
            version=document.version,
            cleared_tables=self.registry.delete_order(),
            inserted={name: len(rows) for name, rows in pending.items()},
        )
        logger.info("Restore committed: %d rows from version %s", summary.total_rows, summary.version)
        return summary
