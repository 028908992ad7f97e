"""SQLite entity store for durable ledger state."""

import json
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TypeVar, Union

from ..errors import PersistenceError
from ..logging.config import get_logger
from ..models import Location, Owner, OwnerLocation, Transaction
from ..models.records import LedgerRecord
from .base import Collection, LedgerStore

R = TypeVar("R", bound=LedgerRecord)

TABLES = {
    "owners": Owner,
    "locations": Location,
    "transactions": Transaction,
    "owner_locations": OwnerLocation,
}


class SqliteCollection(Collection[R]):
    """
    One table per collection.

    The AUTOINCREMENT `seq` column fixes scan order at first insertion;
    upserts only rewrite the payload, so a record keeps its position.
    """

    def __init__(self, store: "SqliteLedgerStore", name: str, record_type: type[R]):
        if name not in TABLES:
            raise ValueError(f"Unknown collection: {name}")
        super().__init__(name)
        self._store = store
        self._record_type = record_type

    def insert(self, key: str, record: R) -> None:
        with self._store._get_connection("insert", self.name) as conn:
            conn.execute(f"""
                INSERT INTO {self.name} (id, data) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET data = excluded.data
            """, (key, json.dumps(record.to_dict())))

    def get(self, key: str) -> Optional[R]:
        with self._store._get_connection("get", self.name) as conn:
            row = conn.execute(
                f"SELECT data FROM {self.name} WHERE id = ?", (key,)
            ).fetchone()

        if row is None:
            return None
        return self._row_to_record(row)

    def delete(self, key: str) -> bool:
        with self._store._get_connection("delete", self.name) as conn:
            cursor = conn.execute(f"DELETE FROM {self.name} WHERE id = ?", (key,))
            return cursor.rowcount > 0

    def items(self) -> list[tuple[str, R]]:
        with self._store._get_connection("scan", self.name) as conn:
            rows = conn.execute(
                f"SELECT id, data FROM {self.name} ORDER BY seq"
            ).fetchall()

        return [(row["id"], self._row_to_record(row)) for row in rows]

    def __len__(self) -> int:
        with self._store._get_connection("count", self.name) as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {self.name}").fetchone()[0]

    def _row_to_record(self, row: sqlite3.Row) -> R:
        """Convert database row to a ledger record."""
        return self._record_type.from_dict(json.loads(row["data"]))


class SqliteLedgerStore(LedgerStore):
    """SQLite-based ledger persistence layer."""

    def __init__(self, db_path: Union[str, Path] = "ledger.db", timeout_seconds: float = 30.0):
        self.db_path = Path(db_path)
        self.logger = get_logger(__name__)
        self._lock = threading.RLock()
        self._depth = 0

        try:
            # Transactions are managed explicitly in atomic()
            self._conn = sqlite3.connect(
                self.db_path,
                timeout=timeout_seconds,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            self.logger.error("Failed to open database", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Cannot open ledger database: {e}", operation="connect", target=str(self.db_path)
            ) from e
        self._conn.row_factory = sqlite3.Row

        self.owners = SqliteCollection(self, "owners", Owner)
        self.locations = SqliteCollection(self, "locations", Location)
        self.transactions = SqliteCollection(self, "transactions", Transaction)
        self.owner_locations = SqliteCollection(self, "owner_locations", OwnerLocation)

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init", "schema") as conn:
            for table in TABLES:
                conn.execute(f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        data TEXT NOT NULL
                    )
                """)

    @contextmanager
    def _get_connection(self, operation: str, target: str) -> Iterator[sqlite3.Connection]:
        """Get the shared connection, translating database errors."""
        with self._lock:
            try:
                yield self._conn
            except sqlite3.Error as e:
                self.logger.error(
                    "Database error",
                    operation=operation,
                    target=target,
                    error=str(e)
                )
                raise PersistenceError(
                    f"Database error during {operation} on {target}: {e}",
                    operation=operation,
                    target=target
                ) from e

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the block inside one SQLite transaction."""
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            with self._get_connection("begin", "transaction") as conn:
                conn.execute("BEGIN IMMEDIATE")
            self._depth = 1
            try:
                yield
                with self._get_connection("commit", "transaction") as conn:
                    conn.execute("COMMIT")
            except BaseException:
                self._rollback()
                raise
            finally:
                self._depth = 0

    def _rollback(self) -> None:
        """Roll back the open transaction, if the connection still has one."""
        try:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            self.logger.warning("Unit of work rolled back", backend="sqlite")
        except sqlite3.Error as e:
            self.logger.error("Rollback failed", error=str(e))

    def get_stats(self) -> dict[str, int]:
        """Record counts per collection."""
        return {name: len(collection) for name, collection in self.collections().items()}

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
