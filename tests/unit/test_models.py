"""Tests for ledger record models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from fractional_ledger.models import Location, Owner, OwnerLocation, Transaction

TS = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
LATER = TS + timedelta(minutes=5)


@pytest.fixture
def holding() -> OwnerLocation:
    return OwnerLocation(id="h1", location_ref="l1", owner_ref="o1",
                         own_percentage=0.25, capital_amount=250.0,
                         created_at=TS, updated_at=TS)


class TestRecords:
    """Test immutable record behaviour."""

    def test_records_are_frozen(self):
        owner = Owner(id="o1", name="Alice", cash=0.0, created_at=TS, updated_at=TS)

        with pytest.raises(FrozenInstanceError):
            owner.cash = 100.0

    def test_owner_with_cash(self):
        owner = Owner(id="o1", name="Alice", cash=10.0, created_at=TS, updated_at=TS)

        updated = owner.with_cash(25.0, LATER)

        assert updated.cash == 25.0
        assert updated.updated_at == LATER
        assert updated.created_at == TS
        assert owner.cash == 10.0

    def test_location_available_value(self):
        location = Location(id="l1", name="L1", price=2000.0, available_fraction=0.25,
                            created_at=TS, updated_at=TS)

        assert location.available_value == 500.0
        assert location.with_available_fraction(0.5, LATER).available_value == 1000.0

    def test_holding_with_delta(self, holding):
        updated = holding.with_delta(0.125, 125.0, LATER)

        assert updated.own_percentage == 0.375
        assert updated.capital_amount == 375.0
        assert updated.id == holding.id
        assert updated.updated_at == LATER

    def test_holding_negative_delta_has_no_floor(self, holding):
        updated = holding.with_delta(-0.5, -500.0, LATER)

        assert updated.own_percentage == -0.25
        assert updated.capital_amount == -250.0

    def test_holding_with_percentage(self, holding):
        updated = holding.with_percentage(0.9, LATER)

        assert updated.own_percentage == 0.9
        assert updated.capital_amount == 250.0


class TestSerialization:
    """Test dictionary round trips used by the SQLite store."""

    def test_to_dict_formats_timestamps(self):
        transaction = Transaction(id="t1", location_ref="l1", owner_ref="o1",
                                  own_percentage=0.4, capital_amount=400.0,
                                  created_at=TS, updated_at=LATER)

        data = transaction.to_dict()

        assert data == {
            "id": "t1",
            "location_ref": "l1",
            "owner_ref": "o1",
            "own_percentage": 0.4,
            "capital_amount": 400.0,
            "created_at": "2024-01-01T12:00:00+00:00",
            "updated_at": "2024-01-01T12:05:00+00:00",
        }

    def test_from_dict_restores_record(self, holding):
        assert OwnerLocation.from_dict(holding.to_dict()) == holding

    def test_from_dict_ignores_unknown_fields(self):
        data = Owner(id="o1", name="Alice", cash=1.0, created_at=TS, updated_at=TS).to_dict()
        data["legacy_field"] = "ignored"

        owner = Owner.from_dict(data)

        assert owner.name == "Alice"
        assert owner.created_at.tzinfo is not None
