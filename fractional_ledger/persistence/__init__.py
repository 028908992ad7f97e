"""
Entity store module.

Ordered key-value collections for owners, locations, transactions and
holdings, with in-memory and SQLite backends.
"""

from .base import Collection, LedgerStore
from .memory_store import InMemoryCollection, InMemoryLedgerStore
from .sqlite_store import SqliteCollection, SqliteLedgerStore

__all__ = [
    "Collection",
    "LedgerStore",
    "InMemoryCollection",
    "InMemoryLedgerStore",
    "SqliteCollection",
    "SqliteLedgerStore",
]
