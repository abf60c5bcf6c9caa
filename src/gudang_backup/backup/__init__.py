"""Snapshot export, transactional restore, and offline validation.

Usage:
    from gudang_backup.backup import BackupExporter, BackupImporter
    from gudang_backup.backup import validate_snapshot
"""

from gudang_backup.backup.exporter import BackupExporter
from gudang_backup.backup.importer import BackupImporter, parse_snapshot
from gudang_backup.backup.models import (
    BackupResult,
    CleanupResult,
    RestoreSummary,
    ValidationReport,
)
from gudang_backup.backup.naming import build_timestamped_file_base
from gudang_backup.backup.validation import validate_snapshot, validate_snapshot_text

__all__ = [
    "BackupExporter",
    "BackupImporter",
    "BackupResult",
    "CleanupResult",
    "RestoreSummary",
    "ValidationReport",
    "build_timestamped_file_base",
    "parse_snapshot",
    "validate_snapshot",
    "validate_snapshot_text",
]
