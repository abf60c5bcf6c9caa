"""Database adapters package.

Provides the ``DatabaseClient`` Protocol and the SQLAlchemy-backed
``AsyncSqlAdapter``.

Usage:
    from gudang_backup.adapters import DatabaseClient, AsyncSqlAdapter
"""

from gudang_backup.adapters.base import DatabaseClient, TransactionClient
from gudang_backup.adapters.sql import AsyncSqlAdapter

__all__ = [
    "DatabaseClient",
    "TransactionClient",
    "AsyncSqlAdapter",
]
