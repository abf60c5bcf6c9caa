"""Schema registry: the single source of truth for backed-up tables.

Both the exporter and the importer are constructed with a
``SchemaRegistry``, so they can never disagree on table shape or order.
The tuple order of ``tables`` *is* the insert order (parents first);
construction rejects any ordering in which a child precedes its parent.

Any schema change (new table, new column) must be made here together with
a bump of ``version``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from gudang_backup.schema.models import ForeignKey, TableSpec

CURRENT_VERSION = 1


class SchemaRegistry(BaseModel):
    """Immutable declaration of every backed-up table, in dependency order."""

    model_config = ConfigDict(frozen=True)

    version: int
    tables: tuple[TableSpec, ...]

    @model_validator(mode="after")
    def _check_dependency_order(self) -> "SchemaRegistry":
        seen: set[str] = set()
        for spec in self.tables:
            if spec.name in seen:
                raise ValueError(f"Duplicate table in registry: {spec.name}")
            if not spec.columns or spec.columns[0] != spec.pk:
                raise ValueError(
                    f"{spec.name}: primary key '{spec.pk}' must be the first column"
                )
            for fk in spec.parents:
                if fk.field not in spec.columns:
                    raise ValueError(
                        f"{spec.name}: FK column '{fk.field}' is not a declared column"
                    )
                if fk.table not in seen:
                    raise ValueError(
                        f"{spec.name} references '{fk.table}', which must be declared first"
                    )
            seen.add(spec.name)
        return self

    def table(self, name: str) -> TableSpec:
        """Return the ``TableSpec`` for ``name``.

        Raises:
            KeyError: If ``name`` is not a registered table.
        """
        for spec in self.tables:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def columns_of(self, name: str) -> tuple[str, ...]:
        """Ordered column names of ``name``."""
        return self.table(name).columns

    def sanitize_row(self, name: str, row: Any) -> dict[str, Any]:
        """``row`` reduced/padded to the declared columns of ``name``."""
        return self.table(name).sanitize(row)

    def insert_order(self) -> list[str]:
        """Table names, parents before children."""
        return [spec.name for spec in self.tables]

    def delete_order(self) -> list[str]:
        """Table names, children before parents."""
        return list(reversed(self.insert_order()))

    def table_names(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.tables)


DEFAULT_REGISTRY = SchemaRegistry(
    version=CURRENT_VERSION,
    tables=(
        TableSpec(
            name="items",
            columns=("id", "name", "category", "price", "cost_price", "stock"),
        ),
        TableSpec(
            name="purchase_orders",
            columns=(
                "id",
                "supplier_name",
                "item_name",
                "quantity",
                "price",
                "order_date",
                "status",
                "note",
                "created_at",
                "orderer_name",
                "completed_at",
            ),
        ),
        TableSpec(
            name="purchase_order_items",
            columns=("id", "order_id", "name", "quantity", "price", "cost_price"),
            parents=(ForeignKey(table="purchase_orders", field="order_id"),),
        ),
        TableSpec(
            name="bookkeeping_entries",
            columns=("id", "name", "amount", "entry_date", "note", "created_at"),
        ),
        TableSpec(
            name="bookkeeping_entry_history",
            columns=(
                "id",
                "entry_id",
                "change_amount",
                "type",
                "note",
                "previous_amount",
                "new_amount",
                "created_at",
            ),
            parents=(ForeignKey(table="bookkeeping_entries", field="entry_id"),),
        ),
        TableSpec(
            name="stock_history",
            columns=(
                "id",
                "item_id",
                "type",
                "qty",
                "note",
                "created_at",
                "unit_price",
                "unit_cost",
                "profit_amount",
            ),
            parents=(ForeignKey(table="items", field="item_id"),),
        ),
    ),
)
