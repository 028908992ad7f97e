"""
Error handling tests for the ledger.

Tests cover the error classification hierarchy and the guarantee that a
rejected or failed operation leaves every collection untouched.
"""

from unittest.mock import patch

import pytest

from fractional_ledger.accounting import AccountingCore
from fractional_ledger.errors import (
    ConfigurationError,
    DuplicateNameError,
    ExceedsAvailableError,
    InsufficientFundsError,
    InsufficientOwnershipError,
    InvalidAmountError,
    InvalidRangeError,
    LedgerError,
    NoSuchHoldingError,
    NotFoundError,
    PersistenceError,
    SystemFailureError,
    TransactionNotFoundError,
)


class TestErrorClassification:
    """Test error classification system."""

    @pytest.mark.parametrize("error_type", [
        NotFoundError,
        DuplicateNameError,
        InvalidAmountError,
        InvalidRangeError,
        InsufficientFundsError,
        ExceedsAvailableError,
        InsufficientOwnershipError,
        NoSuchHoldingError,
        TransactionNotFoundError,
    ])
    def test_ledger_error_hierarchy(self, error_type):
        """Every rejection is a recoverable LedgerError."""
        error = error_type("rejected")

        assert isinstance(error, LedgerError)
        assert error.recoverable is True
        assert error.context == {}
        assert str(error) == "rejected"

    def test_ledger_error_attributes(self):
        not_found = NotFoundError("missing", entity="owner", name="Alice")
        assert not_found.entity == "owner"
        assert not_found.name == "Alice"

        funds = InsufficientFundsError("short", available=10.0, requested=20.0,
                                       context={"owner": "Alice"})
        assert funds.available == 10.0
        assert funds.requested == 20.0
        assert funds.context == {"owner": "Alice"}

        ownership = InsufficientOwnershipError("short", held=0.1, requested=0.2)
        assert ownership.held == 0.1
        assert ownership.requested == 0.2

    def test_system_failure_error_hierarchy(self):
        persistence_error = PersistenceError("write failed", operation="insert", target="owners")
        assert isinstance(persistence_error, SystemFailureError)
        assert persistence_error.recoverable is False
        assert persistence_error.operation == "insert"
        assert persistence_error.target == "owners"

        config_error = ConfigurationError("bad config", errors=["storage.backend"])
        assert isinstance(config_error, SystemFailureError)
        assert config_error.errors == ["storage.backend"]

    def test_rejections_are_not_system_failures(self):
        assert not issubclass(LedgerError, SystemFailureError)
        assert not issubclass(SystemFailureError, LedgerError)


class TestStateUntouchedOnFailure:
    """Rejected and failed calls must not partially apply."""

    def _snapshot(self, core):
        return (core.list_owners(), core.list_locations(),
                core.list_transactions(), core.list_holdings())

    @pytest.mark.parametrize("call", [
        lambda c: c.buy_location("Alice", "L1", 2000),
        lambda c: c.sell_location("Alice", "L1", 900),
        lambda c: c.withdraw_cash("Alice", 10_000),
        lambda c: c.delete_transaction("Alice", "L1", 1),
        lambda c: c.set_ownership_percentage("Alice", "L1", 7),
        lambda c: c.create_owner("Alice"),
        lambda c: c.create_location("L1", 10),
    ])
    def test_rejection_leaves_state(self, funded_core, call):
        core = funded_core
        core.buy_location("Alice", "L1", 400)
        before = self._snapshot(core)

        with pytest.raises(LedgerError):
            call(core)

        assert self._snapshot(core) == before

    def test_storage_failure_mid_buy_rolls_back(self, funded_core):
        """A failing fourth write undoes the first three."""
        core = funded_core
        before = self._snapshot(core)

        with patch.object(core.store.locations, "insert",
                          side_effect=PersistenceError("disk full", operation="insert")):
            with pytest.raises(PersistenceError):
                core.buy_location("Alice", "L1", 400)

        assert self._snapshot(core) == before

    def test_storage_failure_mid_cascade_rolls_back(self, funded_core):
        core = funded_core
        core.buy_location("Alice", "L1", 400)
        before = self._snapshot(core)

        with patch.object(core.store.owner_locations, "delete_where",
                          side_effect=PersistenceError("disk full", operation="delete")):
            with pytest.raises(PersistenceError):
                core.delete_owner("Alice")

        assert self._snapshot(core) == before

    def test_rejection_is_logged(self, memory_store):
        core = AccountingCore(memory_store)

        with patch("fractional_ledger.accounting.core.log_rejection") as mock_log:
            with pytest.raises(NotFoundError) as exc_info:
                core.topup_cash("Nobody", 10)

        mock_log.assert_called_once_with(core.logger, "topup_cash", exc_info.value)
