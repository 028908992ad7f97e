"""Pytest configuration and shared fixtures."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from fractional_ledger.accounting import AccountingCore, LedgerGateway
from fractional_ledger.persistence import InMemoryLedgerStore, SqliteLedgerStore


class StepClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime):
        self.current = start
        self.readings = 0

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        self.readings += 1
        return self.current


@pytest.fixture
def clock() -> StepClock:
    return StepClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteLedgerStore(tmp_path / "ledger.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each backend in turn."""
    if request.param == "memory":
        yield InMemoryLedgerStore()
    else:
        backend = SqliteLedgerStore(tmp_path / "ledger.db")
        yield backend
        backend.close()


@pytest.fixture
def core(store, clock, id_factory) -> AccountingCore:
    return AccountingCore(store, clock=clock, id_factory=id_factory)


@pytest.fixture
def gateway(core) -> LedgerGateway:
    return LedgerGateway(core)


@pytest.fixture
def funded_core(core) -> AccountingCore:
    """Alice with $1000 cash and location L1 priced at $1000."""
    core.create_owner("Alice")
    core.topup_cash("Alice", 1000)
    core.create_location("L1", 1000)
    return core
