"""
Ledger record models for owners, locations, transactions and holdings.

This module defines immutable data structures for the four persisted
collections. A state change never mutates a record in place: the `with_*`
helpers return a new version which the accounting core writes back under
the same identifier.
"""

from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime
from typing import Any, TypeVar

from ..utils.time import format_timestamp, parse_timestamp

R = TypeVar("R", bound="LedgerRecord")

_TIMESTAMP_FIELDS = ("created_at", "updated_at")


@dataclass(frozen=True)
class LedgerRecord:
    """Common persistence behaviour for ledger records."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data = asdict(self)
        for name in _TIMESTAMP_FIELDS:
            data[name] = format_timestamp(data[name])
        return data

    @classmethod
    def from_dict(cls: type[R], data: dict[str, Any]) -> R:
        """Rebuild a record from its serialized dictionary."""
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known}
        for name in _TIMESTAMP_FIELDS:
            kwargs[name] = parse_timestamp(kwargs[name])
        return cls(**kwargs)


@dataclass(frozen=True)
class Owner(LedgerRecord):
    """Cash-holding participant who buys and sells location stakes."""
    id: str
    name: str
    cash: float
    created_at: datetime
    updated_at: datetime

    def with_cash(self, cash: float, timestamp: datetime) -> "Owner":
        """New version with an updated cash balance."""
        return replace(self, cash=cash, updated_at=timestamp)


@dataclass(frozen=True)
class Location(LedgerRecord):
    """Listed property whose value can be owned fractionally."""
    id: str
    name: str
    price: float
    available_fraction: float     # Share of the price not owned by any holding
    created_at: datetime
    updated_at: datetime

    @property
    def available_value(self) -> float:
        """Unowned portion of the location expressed in cash."""
        return self.available_fraction * self.price

    def with_available_fraction(self, fraction: float, timestamp: datetime) -> "Location":
        """New version with an updated available fraction."""
        return replace(self, available_fraction=fraction, updated_at=timestamp)


@dataclass(frozen=True)
class Transaction(LedgerRecord):
    """Append-only record of one buy or sell; direction is not recorded."""
    id: str
    location_ref: str
    owner_ref: str
    own_percentage: float
    capital_amount: float
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class OwnerLocation(LedgerRecord):
    """Cumulative stake of one owner in one location."""
    id: str
    location_ref: str
    owner_ref: str
    own_percentage: float
    capital_amount: float
    created_at: datetime
    updated_at: datetime

    def with_delta(self, percentage_delta: float, capital_delta: float,
                   timestamp: datetime) -> "OwnerLocation":
        """New version with both cumulative totals shifted by the given deltas."""
        return replace(
            self,
            own_percentage=self.own_percentage + percentage_delta,
            capital_amount=self.capital_amount + capital_delta,
            updated_at=timestamp,
        )

    def with_percentage(self, percentage: float, timestamp: datetime) -> "OwnerLocation":
        """New version with the ownership percentage overwritten."""
        return replace(self, own_percentage=percentage, updated_at=timestamp)
