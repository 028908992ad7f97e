"""Base interfaces for the ledger entity store."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Callable, Generic, Iterator, Optional, TypeVar

from ..models import Location, Owner, OwnerLocation, Transaction

R = TypeVar("R")


class Collection(ABC, Generic[R]):
    """Ordered mapping of identifier to record, scanned in insertion order."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def insert(self, key: str, record: R) -> None:
        """
        Insert or replace the record stored under key.

        Replacing an existing key keeps its original scan position.
        """

    @abstractmethod
    def get(self, key: str) -> Optional[R]:
        """Get a record by identifier."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a record; returns False if the key was absent."""

    @abstractmethod
    def items(self) -> list[tuple[str, R]]:
        """All (key, record) pairs in insertion order."""

    def values(self) -> list[R]:
        """All records in insertion order."""
        return [record for _, record in self.items()]

    def find_first(self, predicate: Callable[[R], bool]) -> Optional[R]:
        """First record in insertion order matching predicate."""
        for record in self.values():
            if predicate(record):
                return record
        return None

    def filter(self, predicate: Callable[[R], bool]) -> list[R]:
        """All records matching predicate, in insertion order."""
        return [record for record in self.values() if predicate(record)]

    def delete_where(self, predicate: Callable[[R], bool]) -> int:
        """Delete every record matching predicate; returns the count removed."""
        keys = [key for key, record in self.items() if predicate(record)]
        for key in keys:
            self.delete(key)
        return len(keys)

    def __len__(self) -> int:
        return len(self.items())

    def __iter__(self) -> Iterator[R]:
        return iter(self.values())


class LedgerStore(ABC):
    """The four entity collections plus a unit-of-work boundary."""

    owners: Collection[Owner]
    locations: Collection[Location]
    transactions: Collection[Transaction]
    owner_locations: Collection[OwnerLocation]

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """
        Context manager grouping writes into one all-or-nothing unit.

        Nested blocks join the outermost one.
        """

    def collections(self) -> dict[str, Collection]:
        """Collections keyed by their name."""
        return {
            collection.name: collection
            for collection in (self.owners, self.locations,
                               self.transactions, self.owner_locations)
        }

    def close(self) -> None:
        """Release backend resources."""
