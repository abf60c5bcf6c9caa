"""Tests for the schema registry: column sets, dependency order, sanitisation."""

import pytest
from pydantic import ValidationError

from gudang_backup.schema.models import ForeignKey, TableSpec
from gudang_backup.schema.registry import CURRENT_VERSION, DEFAULT_REGISTRY, SchemaRegistry


class TestDefaultRegistry:
    """The shipped registry covers the six backed-up tables."""

    def test_version(self):
        assert DEFAULT_REGISTRY.version == CURRENT_VERSION == 1

    def test_insert_order(self):
        assert DEFAULT_REGISTRY.insert_order() == [
            "items",
            "purchase_orders",
            "purchase_order_items",
            "bookkeeping_entries",
            "bookkeeping_entry_history",
            "stock_history",
        ]

    def test_delete_order_is_reverse(self):
        assert DEFAULT_REGISTRY.delete_order() == list(reversed(DEFAULT_REGISTRY.insert_order()))

    def test_parents_precede_children(self):
        order = DEFAULT_REGISTRY.insert_order()
        for spec in DEFAULT_REGISTRY.tables:
            for fk in spec.parents:
                assert order.index(fk.table) < order.index(spec.name)

    def test_items_columns(self):
        assert DEFAULT_REGISTRY.columns_of("items") == (
            "id", "name", "category", "price", "cost_price", "stock",
        )

    def test_stock_history_columns(self):
        assert DEFAULT_REGISTRY.columns_of("stock_history") == (
            "id", "item_id", "type", "qty", "note", "created_at",
            "unit_price", "unit_cost", "profit_amount",
        )

    def test_unknown_table_raises(self):
        with pytest.raises(KeyError):
            DEFAULT_REGISTRY.columns_of("suppliers")

    def test_registry_is_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_REGISTRY.version = 2


class TestSanitize:
    """Rows are reduced/padded to exactly the declared columns."""

    def test_missing_columns_become_none(self):
        row = DEFAULT_REGISTRY.table("items").sanitize({"id": 1, "name": "Box"})
        assert row == {
            "id": 1, "name": "Box", "category": None,
            "price": None, "cost_price": None, "stock": None,
        }

    def test_extra_keys_dropped(self):
        row = DEFAULT_REGISTRY.table("items").sanitize(
            {"id": 1, "name": "Box", "colour": "brown", "stock": 2}
        )
        assert "colour" not in row
        assert list(row) == list(DEFAULT_REGISTRY.columns_of("items"))

    def test_non_mapping_is_empty_row(self):
        row = DEFAULT_REGISTRY.table("items").sanitize(["not", "a", "row"])
        assert set(row.values()) == {None}

    def test_sanitize_row_by_name(self):
        row = DEFAULT_REGISTRY.sanitize_row("stock_history", {"id": 5, "item_id": 1, "type": "IN", "qty": 3})
        assert list(row) == list(DEFAULT_REGISTRY.columns_of("stock_history"))
        assert row["profit_amount"] is None

    def test_sanitize_row_unknown_table(self):
        with pytest.raises(KeyError):
            DEFAULT_REGISTRY.sanitize_row("settings", {})


class TestRegistryValidation:
    """Construction rejects registries that would break FK ordering."""

    def test_child_before_parent_rejected(self):
        with pytest.raises(ValidationError, match="must be declared first"):
            SchemaRegistry(
                version=1,
                tables=(
                    TableSpec(
                        name="books",
                        columns=("id", "author_id"),
                        parents=(ForeignKey(table="authors", field="author_id"),),
                    ),
                    TableSpec(name="authors", columns=("id", "name")),
                ),
            )

    def test_duplicate_table_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            SchemaRegistry(
                version=1,
                tables=(
                    TableSpec(name="authors", columns=("id",)),
                    TableSpec(name="authors", columns=("id",)),
                ),
            )

    def test_fk_column_must_be_declared(self):
        with pytest.raises(ValidationError, match="not a declared column"):
            SchemaRegistry(
                version=1,
                tables=(
                    TableSpec(name="authors", columns=("id",)),
                    TableSpec(
                        name="books",
                        columns=("id", "title"),
                        parents=(ForeignKey(table="authors", field="author_id"),),
                    ),
                ),
            )

    def test_pk_must_be_first_column(self):
        with pytest.raises(ValidationError, match="first column"):
            SchemaRegistry(
                version=1,
                tables=(TableSpec(name="authors", columns=("name", "id")),),
            )
