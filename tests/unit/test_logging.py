"""Tests for the accounting audit-trail logging helpers."""

from unittest.mock import Mock

import pytest
import structlog
from structlog.testing import capture_logs

from fractional_ledger.accounting import AccountingCore
from fractional_ledger.errors import InsufficientFundsError, NotFoundError
from fractional_ledger.logging.config import (
    configure_logging,
    get_accounting_logger,
    log_ledger_mutation,
    log_rejection,
)
from fractional_ledger.persistence import InMemoryLedgerStore


class TestLoggingHelpers:
    """Test the shape of committed and rejected log events."""

    def setup_method(self):
        """Mock logger whose bind() chain can be inspected."""
        self.mock_logger = Mock()

    def test_log_ledger_mutation(self):
        log_ledger_mutation(self.mock_logger, "topup_cash", {"owner": "Alice", "cash": 25.0})

        self.mock_logger.bind.assert_called_once_with(
            operation="topup_cash",
            outcome="COMMITTED",
            audit_event="ledger_mutation"
        )
        bound = self.mock_logger.bind.return_value
        bound.bind.assert_called_once_with(owner="Alice", cash=25.0)
        bound.bind.return_value.info.assert_called_once_with("Ledger mutation committed")

    def test_log_ledger_mutation_without_context(self):
        log_ledger_mutation(self.mock_logger, "create_owner")

        bound = self.mock_logger.bind.return_value
        bound.bind.assert_not_called()
        bound.info.assert_called_once_with("Ledger mutation committed")

    def test_log_rejection_includes_error_context(self):
        error = InsufficientFundsError(
            "Owner's cash is not sufficient...", available=10.0, requested=50.0,
            context={"owner": "Alice"}
        )

        log_rejection(self.mock_logger, "withdraw_cash", error)

        self.mock_logger.bind.assert_called_once_with(
            operation="withdraw_cash",
            outcome="REJECTED",
            error_kind="InsufficientFundsError",
            reason="Owner's cash is not sufficient...",
            audit_event="ledger_rejection"
        )
        bound = self.mock_logger.bind.return_value
        bound.bind.assert_called_once_with(context=error.context)
        bound.bind.return_value.warning.assert_called_once_with("Ledger operation rejected")

    def test_log_rejection_plain_exception(self):
        log_rejection(self.mock_logger, "buy_location", ValueError("boom"))

        bound = self.mock_logger.bind.return_value
        bound.bind.assert_not_called()
        bound.warning.assert_called_once_with("Ledger operation rejected")


class TestConfigureLogging:
    """Test structlog configuration."""

    def teardown_method(self):
        structlog.reset_defaults()

    @pytest.mark.parametrize("format_json", [True, False])
    def test_configure_logging_renderer(self, format_json):
        configure_logging(level="DEBUG", format_json=format_json, include_caller=True)

        processors = structlog.get_config()["processors"]
        renderer = processors[-1]
        if format_json:
            assert isinstance(renderer, structlog.processors.JSONRenderer)
        else:
            assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_timestamp_processor_optional(self):
        configure_logging(include_timestamp=False)

        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_accounting_logger_usable(self):
        configure_logging(level="INFO", format_json=True)

        logger = get_accounting_logger("tests.accounting")

        logger.info("smoke")


class TestAccountingAuditTrail:
    """Test events emitted by the accounting core."""

    def test_committed_and_rejected_events(self):
        with capture_logs() as events:
            core = AccountingCore(InMemoryLedgerStore())
            core.create_owner("Alice")
            core.topup_cash("Alice", 100)
            with pytest.raises(NotFoundError):
                core.topup_cash("Bob", 5)

        committed = [e for e in events if e.get("audit_event") == "ledger_mutation"]
        rejected = [e for e in events if e.get("audit_event") == "ledger_rejection"]

        assert [e["operation"] for e in committed] == ["create_owner", "topup_cash"]
        assert all(e["subsystem"] == "accounting" for e in committed)
        assert len(rejected) == 1
        assert rejected[0]["operation"] == "topup_cash"
        assert rejected[0]["error_kind"] == "NotFoundError"
        assert rejected[0]["log_level"] == "warning"
