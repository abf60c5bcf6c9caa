"""Database client protocol definition.

Defines the narrow store interface the backup engine consumes.  All
methods are ``async def``; multi-statement atomic work goes through
``transaction()``.

Usage:
    from gudang_backup.adapters.base import DatabaseClient

    async def do_work(client: DatabaseClient) -> None:
        rows = await client.select("items", "id, name", order_by="id ASC")
        async with client.transaction() as tx:
            await tx.execute("DELETE FROM stock_history")
            await tx.execute(
                "INSERT INTO items (id, name) VALUES (:id, :name)",
                {"id": 1, "name": "Box"},
            )
        await client.close()
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol


class TransactionClient(Protocol):
    """Statement executor bound to one open transaction."""

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Execute a parameterized statement inside the transaction.

        Args:
            sql: Statement text using ``:name`` placeholders.
            params: Values for the placeholders.
        """
        ...


class DatabaseClient(Protocol):
    """Database client interface that all adapters must implement.

    Statements are issued sequentially on the adapter; callers must not run
    two backup operations against the same client concurrently.
    """

    async def select(
        self,
        table: str,
        columns: str,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select every row of a table.

        Args:
            table: Table name.
            columns: Comma-separated column names (e.g., ``"id, name"``).
            order_by: Optional ORDER BY expression (e.g., ``"id ASC"``).

        Returns:
            List of dicts, one per row.  Empty list if no matches.
        """
        ...

    async def execute(self, sql: str, params: dict[str, Any] | None = None) -> None:
        """Execute a single statement in its own transaction."""
        ...

    def transaction(self) -> AbstractAsyncContextManager[TransactionClient]:
        """Open a transaction.

        Commits when the block exits cleanly; rolls back when it raises and
        re-raises the original error.  A failing rollback is logged and
        does not replace the original error.
        """
        ...

    async def close(self) -> None:
        """Close database connection and clean up resources."""
        ...
