"""Offline snapshot validation.

Checks a snapshot file against the registry without any store access and
reports what a restore would do with it.  Parse, structure, and version
problems are errors (the restore would be refused); orphaned child rows are
errors too, because the FK constraints will reject them and roll the
restore back.  Everything the importer tolerates is a warning.

Usage:
    report = validate_snapshot("backups/gudang-backup_20260101-120000.json")
    if not report.valid:
        for error in report.errors:
            print(error)
"""

from pathlib import Path
from typing import Any

from gudang_backup.backup.importer import parse_snapshot, read_snapshot_text, table_rows
from gudang_backup.backup.models import ValidationReport
from gudang_backup.errors import InvalidFormat, UnsupportedVersion
from gudang_backup.schema.registry import DEFAULT_REGISTRY, SchemaRegistry

_KEY_TYPES = (int, str, float)


def _key(value: Any) -> Any:
    return value if isinstance(value, _KEY_TYPES) and not isinstance(value, bool) else None


def validate_snapshot(
    document_path: str | Path,
    registry: SchemaRegistry = DEFAULT_REGISTRY,
) -> ValidationReport:
    """Validate a snapshot file.  See ``validate_snapshot_text``."""
    try:
        text = read_snapshot_text(document_path)
    except InvalidFormat as e:
        return ValidationReport(valid=False, errors=[str(e)])
    return validate_snapshot_text(text, registry)


def validate_snapshot_text(
    text: str,
    registry: SchemaRegistry = DEFAULT_REGISTRY,
) -> ValidationReport:
    """Validate snapshot text against ``registry``."""
    try:
        document = parse_snapshot(text, registry)
    except (InvalidFormat, UnsupportedVersion) as e:
        return ValidationReport(valid=False, errors=[str(e)])

    errors: list[str] = []
    warnings: list[str] = []
    row_counts: dict[str, int] = {}
    known_keys: dict[str, set] = {}

    for key in document.tables:
        if key not in registry.table_names():
            warnings.append(f"Unknown table '{key}' will be ignored")

    for spec in registry.tables:
        entry = document.tables.get(spec.name)
        if entry is None:
            warnings.append(f"Table '{spec.name}' is absent and will be restored empty")
        elif not isinstance(entry, list):
            warnings.append(f"Table '{spec.name}' is not a list and will be restored empty")
        rows = table_rows(document, spec.name)

        keys: set = set()
        extra_columns: set[str] = set()
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                warnings.append(f"{spec.name} row {index} is not an object; all columns will be null")
                continue
            extra_columns.update(k for k in row if k not in spec.columns)

            pk_value = _key(row.get(spec.pk))
            if pk_value is None:
                warnings.append(f"{spec.name} row {index} has no usable '{spec.pk}'")
            else:
                keys.add(pk_value)

            for fk in spec.parents:
                ref = row.get(fk.field)
                if ref is None:
                    continue
                if _key(ref) not in known_keys.get(fk.table, set()):
                    errors.append(
                        f"Orphaned {spec.name} row {row.get(spec.pk)!r}: "
                        f"{fk.field}={ref!r} not in {fk.table}"
                    )

        if extra_columns:
            warnings.append(
                f"{spec.name}: unknown columns {sorted(extra_columns)} will be dropped"
            )
        known_keys[spec.name] = keys
        row_counts[spec.name] = len(rows)

    return ValidationReport(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        version=document.version,
        row_counts=row_counts,
    )
