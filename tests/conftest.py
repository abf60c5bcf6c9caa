"""Shared fixtures: a real SQLite store with the Gudang schema and FK constraints."""

import pytest

from gudang_backup.adapters.sql import AsyncSqlAdapter
from gudang_backup.schema.registry import DEFAULT_REGISTRY

SCHEMA_DDL = [
    """
    CREATE TABLE items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        category TEXT,
        price INTEGER NOT NULL DEFAULT 0,
        cost_price INTEGER,
        stock INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE purchase_orders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        supplier_name TEXT,
        item_name TEXT,
        quantity INTEGER,
        price INTEGER,
        order_date TEXT,
        status TEXT,
        note TEXT,
        created_at TEXT,
        orderer_name TEXT,
        completed_at TEXT
    )
    """,
    """
    CREATE TABLE purchase_order_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id INTEGER NOT NULL REFERENCES purchase_orders(id),
        name TEXT,
        quantity INTEGER,
        price INTEGER,
        cost_price INTEGER
    )
    """,
    """
    CREATE TABLE bookkeeping_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        amount INTEGER,
        entry_date TEXT,
        note TEXT,
        created_at TEXT
    )
    """,
    """
    CREATE TABLE bookkeeping_entry_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        entry_id INTEGER NOT NULL REFERENCES bookkeeping_entries(id),
        change_amount INTEGER,
        type TEXT,
        note TEXT,
        previous_amount INTEGER,
        new_amount INTEGER,
        created_at TEXT
    )
    """,
    """
    CREATE TABLE stock_history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        item_id INTEGER NOT NULL REFERENCES items(id),
        type TEXT NOT NULL,
        qty INTEGER NOT NULL,
        note TEXT,
        created_at TEXT,
        unit_price INTEGER,
        unit_cost INTEGER,
        profit_amount INTEGER
    )
    """,
]

SEED_ROWS = {
    "items": [
        {"id": 1, "name": "Box", "category": "Packaging", "price": 1000, "cost_price": 700, "stock": 5},
        {"id": 2, "name": "Tape", "category": "Packaging", "price": 500, "cost_price": None, "stock": 12},
    ],
    "purchase_orders": [
        {
            "id": 10, "supplier_name": "CV Maju", "item_name": "Box", "quantity": 3,
            "price": 900, "order_date": "2026-01-05", "status": "PROGRESS", "note": None,
            "created_at": "2026-01-05 09:00:00", "orderer_name": "Sari", "completed_at": None,
        },
    ],
    "purchase_order_items": [
        {"id": 100, "order_id": 10, "name": "Box", "quantity": 3, "price": 900, "cost_price": 700},
    ],
    "bookkeeping_entries": [
        {"id": 20, "name": "Cash", "amount": 50000, "entry_date": "2026-01-01", "note": "opening", "created_at": "2026-01-01 08:00:00"},
    ],
    "bookkeeping_entry_history": [
        {
            "id": 200, "entry_id": 20, "change_amount": 50000, "type": "IN", "note": None,
            "previous_amount": 0, "new_amount": 50000, "created_at": "2026-01-01 08:00:00",
        },
    ],
    "stock_history": [
        {
            "id": 300, "item_id": 1, "type": "OUT", "qty": 2, "note": "sold",
            "created_at": "2026-01-06 10:00:00", "unit_price": 1000, "unit_cost": 700, "profit_amount": 600,
        },
    ],
}


async def _insert_rows(adapter: AsyncSqlAdapter, table: str, rows: list[dict]) -> None:
    for row in rows:
        columns = ", ".join(f'"{c}"' for c in row)
        placeholders = ", ".join(f":{c}" for c in row)
        await adapter.execute(f'INSERT INTO "{table}" ({columns}) VALUES ({placeholders})', row)


@pytest.fixture
async def adapter(tmp_path):
    """Empty Gudang database on disk, FK enforcement on."""
    client = AsyncSqlAdapter(f"sqlite:///{tmp_path / 'gudang.db'}")
    for statement in SCHEMA_DDL:
        await client.execute(statement)
    yield client
    await client.close()


@pytest.fixture
async def seeded_adapter(adapter):
    """Database holding ``SEED_ROWS``."""
    for table in DEFAULT_REGISTRY.insert_order():
        await _insert_rows(adapter, table, SEED_ROWS[table])
    return adapter


@pytest.fixture
def insert_rows():
    """``await insert_rows(adapter, table, rows)`` helper."""
    return _insert_rows


@pytest.fixture
def dump_tables():
    """``await dump_tables(adapter)`` -> ``{table: [row, ...]}`` ordered by id."""

    async def _dump(client: AsyncSqlAdapter) -> dict[str, list[dict]]:
        result = {}
        for spec in DEFAULT_REGISTRY.tables:
            columns = ", ".join(f'"{c}"' for c in spec.columns)
            result[spec.name] = await client.select(spec.name, columns, order_by='"id" ASC')
        return result

    return _dump
