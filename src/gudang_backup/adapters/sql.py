"""Async SQL database adapter.

Provides ``AsyncSqlAdapter``, an implementation of the ``DatabaseClient``
protocol using SQLAlchemy's async engine.  The local store is SQLite via
the ``aiosqlite`` driver; PostgreSQL via ``asyncpg`` is available with the
``postgres`` extra.

Usage:
    from gudang_backup.adapters.sql import AsyncSqlAdapter

    adapter = AsyncSqlAdapter("sqlite:///gudang.db")
    rows = await adapter.select("items", "id, name", order_by="id ASC")
    await adapter.close()
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)


def normalize_url(database_url: str) -> str:
    """Map plain URL schemes onto their async driver variants.

    1. ``sqlite://`` -> ``sqlite+aiosqlite://``
    2. ``postgres://`` -> ``postgresql://`` (Heroku/Railway alias)
    3. ``postgresql://`` -> ``postgresql+asyncpg://``
    """
    url = database_url
    if url.startswith("sqlite://"):
        url = "sqlite+aiosqlite://" + url[len("sqlite://"):]
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ships with FK enforcement off; restore ordering depends on it.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class _ConnectionTransaction:
    """``TransactionClient`` over an ``AsyncConnection`` with an open transaction."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        await self._conn.execute(text(sql), params or {})


class AsyncSqlAdapter:
    """Async implementation of the ``DatabaseClient`` protocol.

    Args:
        database_url: Connection URL.  ``sqlite://``, ``postgres://`` and
            ``postgresql://`` schemes are normalised to their async drivers.
        **engine_kwargs: Additional keyword arguments forwarded to
            ``create_async_engine``.

    Example:
        adapter = AsyncSqlAdapter("sqlite:////data/gudang.db")
        async with adapter.transaction() as tx:
            await tx.execute("DELETE FROM items")
        await adapter.close()
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        url = normalize_url(database_url)
        self._engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select every row of ``table`` using raw SQL."""
        order_clause = f" ORDER BY {order_by}" if order_by else ""
        query = text(f'SELECT {columns} FROM "{table}"{order_clause}')

        async with self._engine.connect() as conn:
            result = await conn.execute(query)
            col_names = list(result.keys())
            rows = result.fetchall()
            return [self._serialize_row(dict(zip(col_names, row))) for row in rows]

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Execute a statement with automatic commit on success, rollback on error."""
        async with self._engine.begin() as conn:
            await conn.execute(text(sql), params or {})

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_ConnectionTransaction]:
        """Run a block of statements on one connection as one transaction."""
        async with self._engine.connect() as conn:
            trans = await conn.begin()
            try:
                yield _ConnectionTransaction(conn)
            except BaseException:
                try:
                    await trans.rollback()
                except Exception:
                    logger.exception("Rollback failed")
                raise
            await trans.commit()

    async def close(self) -> None:
        """Close the async engine and dispose of the connection pool."""
        await self._engine.dispose()

    # ------------------------------------------------------------------
    # Serialization Helpers
    # ------------------------------------------------------------------

    def _serialize_value(self, value: Any) -> Any:
        """Convert driver values to JSON-compatible types."""
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Decimal):
            return int(value) if value == value.to_integral_value() else float(value)
        return value

    def _serialize_row(self, row: dict) -> dict:
        """Serialize all values in a row dict."""
        return {k: self._serialize_value(v) for k, v in row.items()}
