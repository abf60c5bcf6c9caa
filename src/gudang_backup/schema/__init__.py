"""Schema registry and snapshot models.

Usage:
    from gudang_backup.schema import DEFAULT_REGISTRY, SchemaRegistry, TableSpec
"""

from gudang_backup.schema.models import ForeignKey, SnapshotDocument, TableSpec
from gudang_backup.schema.registry import CURRENT_VERSION, DEFAULT_REGISTRY, SchemaRegistry

__all__ = [
    "CURRENT_VERSION",
    "DEFAULT_REGISTRY",
    "ForeignKey",
    "SchemaRegistry",
    "SnapshotDocument",
    "TableSpec",
]
