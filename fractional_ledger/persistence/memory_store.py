"""In-process entity store backed by insertion-ordered dicts."""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional, TypeVar

from ..logging.config import get_logger
from .base import Collection, LedgerStore

R = TypeVar("R")


class InMemoryCollection(Collection[R]):
    """Dict-backed collection; dicts keep insertion order on replacement."""

    def __init__(self, name: str):
        super().__init__(name)
        self._records: dict[str, R] = {}

    def insert(self, key: str, record: R) -> None:
        self._records[key] = record

    def get(self, key: str) -> Optional[R]:
        return self._records.get(key)

    def delete(self, key: str) -> bool:
        return self._records.pop(key, None) is not None

    def items(self) -> list[tuple[str, R]]:
        return list(self._records.items())

    def snapshot(self) -> dict[str, R]:
        """Shallow copy of the current contents."""
        return dict(self._records)

    def restore(self, records: dict[str, R]) -> None:
        """Replace the contents with a previous snapshot."""
        self._records = dict(records)


class InMemoryLedgerStore(LedgerStore):
    """Non-durable store for tests and embedded use."""

    def __init__(self):
        self.logger = get_logger(__name__)
        self._lock = threading.RLock()
        self._depth = 0

        self.owners = InMemoryCollection("owners")
        self.locations = InMemoryCollection("locations")
        self.transactions = InMemoryCollection("transactions")
        self.owner_locations = InMemoryCollection("owner_locations")

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Snapshot every collection and restore them if the block raises."""
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            # Records are immutable, so shallow copies are full snapshots
            snapshots = {
                name: collection.snapshot()
                for name, collection in self.collections().items()
            }
            self._depth = 1
            try:
                yield
            except BaseException:
                for name, collection in self.collections().items():
                    collection.restore(snapshots[name])
                self.logger.warning("Unit of work rolled back", backend="memory")
                raise
            finally:
                self._depth = 0
