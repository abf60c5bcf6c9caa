"""Schema and snapshot models.

``TableSpec`` declares one backed-up table: its exhaustive, ordered column
list and the foreign keys that tie it to parent tables.  ``SnapshotDocument``
is the versioned JSON artifact written by the exporter and read back by the
importer.

Usage:
    from gudang_backup.schema.models import ForeignKey, TableSpec

    spec = TableSpec(
        name="stock_history",
        columns=("id", "item_id", "type", "qty"),
        parents=(ForeignKey(table="items", field="item_id"),),
    )
"""

import json
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ForeignKey(BaseModel):
    """Foreign key reference to a parent table."""

    model_config = ConfigDict(frozen=True)

    table: str          # parent table name
    field: str          # FK column in this table


class TableSpec(BaseModel):
    """Definition of a table for backup/restore operations."""

    model_config = ConfigDict(frozen=True)

    name: str                                   # table name
    columns: tuple[str, ...]                    # exhaustive, ordered; pk first
    pk: str = "id"                              # primary key column (upsert conflict target)
    parents: tuple[ForeignKey, ...] = ()        # FKs that must resolve on insert

    def sanitize(self, row: Any) -> dict[str, Any]:
        """Reduce/pad ``row`` to exactly this table's columns, in order.

        Missing columns become ``None``; unknown keys are dropped.  A
        non-mapping row is treated as an empty row.
        """
        source = row if isinstance(row, dict) else {}
        return {column: source.get(column) for column in self.columns}


class SnapshotDocument(BaseModel):
    """The exported snapshot: ``{version, exportedAt, tables}``.

    ``tables`` values are kept loose on read; the importer sanitises each
    known table's entry against the registry and ignores the rest.  A
    missing or non-numeric ``version`` is ``None`` and counts as not newer
    than the current schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: int | None = None
    exported_at: Any = Field(default=None, alias="exportedAt")  # informational only
    tables: dict[str, Any]

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> int | None:
        """Numeric versions round up; anything else is treated as unknown."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                return None
        if isinstance(value, float):
            return math.ceil(value) if math.isfinite(value) else None
        if isinstance(value, int):
            return value
        return None

    def to_json(self) -> str:
        """Serialise as pretty-printed JSON text (non-ASCII kept as-is)."""
        return json.dumps(
            self.model_dump(by_alias=True),
            indent=2,
            ensure_ascii=False,
            default=str,
        )
