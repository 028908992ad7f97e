"""
Ownership-accounting core.

Every mutation runs as one `store.atomic()` unit of work: resolve names to
records by scanning the store, run the full ordered validation, compute the
new record versions, then write them all. Reads and writes share the unit of
work, so concurrent calls on one store are serialized. A rejected call raises
a LedgerError before anything is written.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ..config.defaults import AccountingParams
from ..errors import (
    DuplicateNameError,
    ExceedsAvailableError,
    InsufficientFundsError,
    InsufficientOwnershipError,
    InvalidAmountError,
    InvalidRangeError,
    LedgerError,
    NoSuchHoldingError,
    NotFoundError,
    TransactionNotFoundError,
)
from ..logging.config import get_accounting_logger, log_ledger_mutation, log_rejection
from ..models import Location, Owner, OwnerLocation, Transaction
from ..persistence.base import LedgerStore
from ..utils.ids import new_identifier
from ..utils.time import utc_now
from .validators import as_amount, is_non_negative_amount, is_positive_amount, is_unit_fraction


@dataclass(frozen=True)
class DeletionSummary:
    """Outcome of a cascading owner or location deletion."""
    entity: str
    record_id: str
    name: str
    transactions_removed: int
    holdings_removed: int


@dataclass(frozen=True)
class ConservationReport:
    """Supply check for one location: available + held should equal 1."""
    location_id: str
    available_fraction: float
    held_fraction: float
    drift: float
    tolerance: float

    @property
    def balanced(self) -> bool:
        return abs(self.drift) <= self.tolerance


class AccountingCore:
    """
    Applies buy, sell, cash and correction operations to the ledger store.

    The store, clock and identifier factory are injected so the core can run
    against any backend and be driven deterministically in tests.
    """

    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_identifier,
        params: Optional[AccountingParams] = None
    ) -> None:
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.params = params or AccountingParams()
        self.logger = get_accounting_logger(__name__)

    # ------------------------------------------------------------------
    # Owner lifecycle
    # ------------------------------------------------------------------

    def create_owner(self, name: str) -> Owner:
        """Register a new owner with zero cash."""
        operation = "create_owner"

        with self.store.atomic():
            if self._find_owner(name) is not None:
                raise self._reject(operation, DuplicateNameError(
                    "Owner already exists...", entity="owner", name=name
                ))

            now = self.clock()
            owner = Owner(id=self.id_factory(), name=name, cash=0.0,
                          created_at=now, updated_at=now)
            self.store.owners.insert(owner.id, owner)

        self._committed(operation, owner_id=owner.id, owner=name)
        return owner

    def topup_cash(self, name: str, amount: Any) -> Owner:
        """Add cash to an owner's balance. Zero is accepted."""
        operation = "topup_cash"
        amount = as_amount(amount)

        with self.store.atomic():
            owner = self._require_owner(operation, name)
            if not is_non_negative_amount(amount):
                raise self._reject(operation, InvalidAmountError(
                    "Cash is NaN or below 0...", amount=amount
                ))

            updated = owner.with_cash(owner.cash + amount, self.clock())
            self.store.owners.insert(updated.id, updated)

        self._committed(operation, owner=name, amount=amount, cash=updated.cash)
        return updated

    def withdraw_cash(self, name: str, amount: Any) -> Owner:
        """Take cash out of an owner's balance."""
        operation = "withdraw_cash"
        amount = as_amount(amount)

        with self.store.atomic():
            owner = self._require_owner(operation, name)
            if not is_positive_amount(amount):
                raise self._reject(operation, InvalidAmountError(
                    "Amount is NaN or not above 0...", amount=amount
                ))
            if amount > owner.cash:
                raise self._reject(operation, InsufficientFundsError(
                    "Owner's cash is not sufficient...",
                    available=owner.cash, requested=amount
                ))

            updated = owner.with_cash(owner.cash - amount, self.clock())
            self.store.owners.insert(updated.id, updated)

        self._committed(operation, owner=name, amount=amount, cash=updated.cash)
        return updated

    def delete_owner(self, name: str) -> DeletionSummary:
        """
        Remove an owner with all of their transactions and holdings.

        Location availability is not restored for the removed holdings.
        """
        operation = "delete_owner"

        with self.store.atomic():
            owner = self._require_owner(operation, name)
            self.store.owners.delete(owner.id)
            transactions_removed = self.store.transactions.delete_where(
                lambda t: t.owner_ref == owner.id
            )
            holdings_removed = self.store.owner_locations.delete_where(
                lambda h: h.owner_ref == owner.id
            )

        summary = DeletionSummary(
            entity="owner",
            record_id=owner.id,
            name=owner.name,
            transactions_removed=transactions_removed,
            holdings_removed=holdings_removed,
        )
        self._committed(operation, owner=name,
                        transactions_removed=transactions_removed,
                        holdings_removed=holdings_removed)
        return summary

    # ------------------------------------------------------------------
    # Location lifecycle
    # ------------------------------------------------------------------

    def create_location(self, name: str, price: Any) -> Location:
        """List a new location, fully available."""
        operation = "create_location"
        price = as_amount(price)

        with self.store.atomic():
            if self._find_location(name) is not None:
                raise self._reject(operation, DuplicateNameError(
                    "Location is already listed...", entity="location", name=name
                ))
            if not is_positive_amount(price):
                raise self._reject(operation, InvalidAmountError(
                    "Price is NaN or not above 0...", amount=price
                ))

            now = self.clock()
            location = Location(id=self.id_factory(), name=name, price=price,
                                available_fraction=1.0, created_at=now, updated_at=now)
            self.store.locations.insert(location.id, location)

        self._committed(operation, location_id=location.id, location=name, price=price)
        return location

    def set_location_availability(self, name: str, fraction: Any) -> Location:
        """
        Overwrite a location's available fraction.

        No consistency check against existing holdings is made.
        """
        operation = "set_location_availability"
        fraction = as_amount(fraction)

        with self.store.atomic():
            location = self._require_location(operation, name)
            if not is_unit_fraction(fraction):
                raise self._reject(operation, InvalidRangeError(
                    "Fraction is NaN or outside [0, 1]...", value=fraction
                ))

            updated = location.with_available_fraction(fraction, self.clock())
            self.store.locations.insert(updated.id, updated)

        self._committed(operation, location=name,
                        previous_fraction=location.available_fraction,
                        available_fraction=fraction)
        return updated

    def delete_location(self, name: str) -> DeletionSummary:
        """
        Remove a location with all transactions and holdings on it.

        Owner cash is not refunded.
        """
        operation = "delete_location"

        with self.store.atomic():
            location = self._require_location(operation, name)
            self.store.locations.delete(location.id)
            transactions_removed = self.store.transactions.delete_where(
                lambda t: t.location_ref == location.id
            )
            holdings_removed = self.store.owner_locations.delete_where(
                lambda h: h.location_ref == location.id
            )

        summary = DeletionSummary(
            entity="location",
            record_id=location.id,
            name=location.name,
            transactions_removed=transactions_removed,
            holdings_removed=holdings_removed,
        )
        self._committed(operation, location=name,
                        transactions_removed=transactions_removed,
                        holdings_removed=holdings_removed)
        return summary

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def buy_location(self, buyer_name: str, location_name: str, amount: Any) -> Transaction:
        """
        Buy a stake worth `amount` in a location.

        Checks run in a fixed order: buyer, location, cash, availability and
        finally the amount itself. NaN fails both comparisons before it, so a
        NaN amount is reported as an invalid amount.
        """
        operation = "buy_location"
        amount = as_amount(amount)

        with self.store.atomic():
            buyer = self._require_owner(operation, buyer_name, role="Buyer")
            location = self._require_location(operation, location_name)

            if buyer.cash < amount:
                raise self._reject(operation, InsufficientFundsError(
                    "Buyer's cash is not sufficient...",
                    available=buyer.cash, requested=amount
                ))
            if location.available_value < amount:
                raise self._reject(operation, ExceedsAvailableError(
                    "The amount desired to be purchased exceeds what is available...",
                    available_value=location.available_value, requested=amount
                ))
            if not is_positive_amount(amount):
                raise self._reject(operation, InvalidAmountError(
                    "Amount is NaN or not above 0...", amount=amount
                ))

            fraction = amount / location.price
            now = self.clock()

            transaction = self._new_transaction(buyer, location, fraction, amount, now)
            holding = self._find_holding(buyer.id, location.id)
            if holding is None:
                holding = OwnerLocation(
                    id=self.id_factory(),
                    location_ref=location.id,
                    owner_ref=buyer.id,
                    own_percentage=fraction,
                    capital_amount=amount,
                    created_at=now,
                    updated_at=now,
                )
            else:
                holding = holding.with_delta(fraction, amount, now)
            updated_buyer = buyer.with_cash(buyer.cash - amount, now)
            updated_location = location.with_available_fraction(
                location.available_fraction - fraction, now
            )

            self.store.transactions.insert(transaction.id, transaction)
            self.store.owner_locations.insert(holding.id, holding)
            self.store.owners.insert(updated_buyer.id, updated_buyer)
            self.store.locations.insert(updated_location.id, updated_location)

        self._committed(operation, transaction_id=transaction.id,
                        owner=buyer_name, location=location_name,
                        amount=amount, fraction=fraction,
                        cash=updated_buyer.cash,
                        available_fraction=updated_location.available_fraction)
        return transaction

    def sell_location(self, seller_name: str, location_name: str, amount: Any) -> Transaction:
        """
        Sell a stake worth `amount` back to the location.

        The holding check is an exact float comparison, so rounding drift in
        `own_percentage` can refuse the last of several equal pieces. The
        holding is kept even when its balance reaches zero.
        """
        operation = "sell_location"
        amount = as_amount(amount)

        with self.store.atomic():
            seller = self._require_owner(operation, seller_name, role="Seller")
            location = self._require_location(operation, location_name)
            if not is_positive_amount(amount):
                raise self._reject(operation, InvalidAmountError(
                    "Amount is NaN or not above 0...", amount=amount
                ))

            fraction = amount / location.price
            holding = self._find_holding(seller.id, location.id)
            if holding is None or holding.own_percentage < fraction:
                raise self._reject(operation, InsufficientOwnershipError(
                    "Seller's ownership is not sufficient...",
                    held=holding.own_percentage if holding else 0.0,
                    requested=fraction
                ))

            now = self.clock()
            transaction = self._new_transaction(seller, location, fraction, amount, now)
            updated_holding = holding.with_delta(-fraction, -amount, now)
            updated_seller = seller.with_cash(seller.cash + amount, now)
            updated_location = location.with_available_fraction(
                location.available_fraction + fraction, now
            )

            self.store.transactions.insert(transaction.id, transaction)
            self.store.owner_locations.insert(updated_holding.id, updated_holding)
            self.store.owners.insert(updated_seller.id, updated_seller)
            self.store.locations.insert(updated_location.id, updated_location)

        self._committed(operation, transaction_id=transaction.id,
                        owner=seller_name, location=location_name,
                        amount=amount, fraction=fraction,
                        cash=updated_seller.cash,
                        available_fraction=updated_location.available_fraction)
        return transaction

    # ------------------------------------------------------------------
    # Administrative corrections
    # ------------------------------------------------------------------

    def set_ownership_percentage(self, owner_name: str, location_name: str,
                                 percentage: Any) -> OwnerLocation:
        """
        Overwrite a holding's ownership percentage.

        Capital and location availability are left as they are.
        """
        operation = "set_ownership_percentage"
        percentage = as_amount(percentage)

        with self.store.atomic():
            owner = self._require_owner(operation, owner_name)
            location = self._require_location(operation, location_name)
            if not is_unit_fraction(percentage):
                raise self._reject(operation, InvalidRangeError(
                    "Percentage is NaN or outside [0, 1]...", value=percentage
                ))

            holding = self._find_holding(owner.id, location.id)
            if holding is None:
                raise self._reject(operation, NoSuchHoldingError(
                    "Owner holds no stake in this location...",
                    context={"owner": owner_name, "location": location_name}
                ))

            updated = holding.with_percentage(percentage, self.clock())
            self.store.owner_locations.insert(updated.id, updated)

        self._committed(operation, owner=owner_name, location=location_name,
                        previous_percentage=holding.own_percentage,
                        own_percentage=percentage)
        return updated

    def delete_transaction(self, owner_name: str, location_name: str,
                           capital_amount: Any) -> Transaction:
        """
        Delete the first transaction matching owner, location and amount.

        The deletion is always reversed as a purchase: the holding shrinks,
        cash is refunded and the fraction returns to the location, whether
        the transaction came from a buy or a sell.
        """
        operation = "delete_transaction"
        capital_amount = as_amount(capital_amount)

        with self.store.atomic():
            owner = self._require_owner(operation, owner_name)
            location = self._require_location(operation, location_name)
            if not is_positive_amount(capital_amount):
                raise self._reject(operation, InvalidAmountError(
                    "Amount is NaN or not above 0...", amount=capital_amount
                ))

            transaction = self.store.transactions.find_first(
                lambda t: (t.owner_ref == owner.id
                           and t.location_ref == location.id
                           and t.capital_amount == capital_amount)
            )
            if transaction is None:
                raise self._reject(operation, TransactionNotFoundError(
                    "Transaction not found...", capital_amount=capital_amount
                ))

            fraction = transaction.own_percentage
            now = self.clock()
            holding = self._find_holding(owner.id, location.id)
            updated_owner = owner.with_cash(owner.cash + capital_amount, now)
            updated_location = location.with_available_fraction(
                location.available_fraction + fraction, now
            )

            self.store.transactions.delete(transaction.id)
            if holding is not None:
                updated_holding = holding.with_delta(-fraction, -capital_amount, now)
                self.store.owner_locations.insert(updated_holding.id, updated_holding)
            self.store.owners.insert(updated_owner.id, updated_owner)
            self.store.locations.insert(updated_location.id, updated_location)

        self._committed(operation, transaction_id=transaction.id,
                        owner=owner_name, location=location_name,
                        amount=capital_amount, fraction=fraction,
                        cash=updated_owner.cash,
                        available_fraction=updated_location.available_fraction)
        return transaction

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_owners(self) -> list[Owner]:
        return self.store.owners.values()

    def list_locations(self) -> list[Location]:
        return self.store.locations.values()

    def list_transactions(self) -> list[Transaction]:
        return self.store.transactions.values()

    def list_holdings(self) -> list[OwnerLocation]:
        return self.store.owner_locations.values()

    def get_owner(self, name: str) -> Owner:
        return self._require_owner("get_owner", name)

    def get_location(self, name: str) -> Location:
        return self._require_location("get_location", name)

    def transactions_by_owner(self, owner_name: str) -> list[Transaction]:
        owner = self._require_owner("transactions_by_owner", owner_name)
        return self.store.transactions.filter(lambda t: t.owner_ref == owner.id)

    def transactions_by_location(self, location_name: str) -> list[Transaction]:
        location = self._require_location("transactions_by_location", location_name)
        return self.store.transactions.filter(lambda t: t.location_ref == location.id)

    def transactions_by_owner_and_location(self, owner_name: str,
                                           location_name: str) -> list[Transaction]:
        operation = "transactions_by_owner_and_location"
        owner = self._require_owner(operation, owner_name)
        location = self._require_location(operation, location_name)
        return self.store.transactions.filter(
            lambda t: t.owner_ref == owner.id and t.location_ref == location.id
        )

    def holdings_by_owner(self, owner_name: str) -> list[OwnerLocation]:
        owner = self._require_owner("holdings_by_owner", owner_name)
        return self.store.owner_locations.filter(lambda h: h.owner_ref == owner.id)

    def holdings_by_location(self, location_name: str) -> list[OwnerLocation]:
        location = self._require_location("holdings_by_location", location_name)
        return self.store.owner_locations.filter(lambda h: h.location_ref == location.id)

    def holdings_by_owner_and_location(self, owner_name: str,
                                       location_name: str) -> list[OwnerLocation]:
        operation = "holdings_by_owner_and_location"
        owner = self._require_owner(operation, owner_name)
        location = self._require_location(operation, location_name)
        return self.store.owner_locations.filter(
            lambda h: h.owner_ref == owner.id and h.location_ref == location.id
        )

    def check_conservation(self, location_name: str) -> ConservationReport:
        """
        Compare a location's available fraction plus all held fractions to 1.

        Only meaningful while no owner deletion, availability override or
        ownership override has touched the location.
        """
        location = self._require_location("check_conservation", location_name)
        held = sum(
            h.own_percentage
            for h in self.store.owner_locations.filter(lambda h: h.location_ref == location.id)
        )
        drift = location.available_fraction + held - 1.0

        report = ConservationReport(
            location_id=location.id,
            available_fraction=location.available_fraction,
            held_fraction=held,
            drift=drift,
            tolerance=self.params.conservation_tolerance,
        )
        if not report.balanced:
            self.logger.warning("Conservation drift exceeds tolerance",
                                location=location_name, drift=drift,
                                tolerance=report.tolerance)
        return report

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _find_owner(self, name: str) -> Optional[Owner]:
        return self.store.owners.find_first(lambda o: o.name == name)

    def _find_location(self, name: str) -> Optional[Location]:
        return self.store.locations.find_first(lambda loc: loc.name == name)

    def _find_holding(self, owner_id: str, location_id: str) -> Optional[OwnerLocation]:
        return self.store.owner_locations.find_first(
            lambda h: h.owner_ref == owner_id and h.location_ref == location_id
        )

    def _require_owner(self, operation: str, name: str, role: str = "Owner") -> Owner:
        owner = self._find_owner(name)
        if owner is None:
            raise self._reject(operation, NotFoundError(
                f"{role} does not exist...", entity="owner", name=name
            ))
        return owner

    def _require_location(self, operation: str, name: str) -> Location:
        location = self._find_location(name)
        if location is None:
            raise self._reject(operation, NotFoundError(
                "Location isn't listed...", entity="location", name=name
            ))
        return location

    def _new_transaction(self, owner: Owner, location: Location, fraction: float,
                         amount: float, timestamp: datetime) -> Transaction:
        return Transaction(
            id=self.id_factory(),
            location_ref=location.id,
            owner_ref=owner.id,
            own_percentage=fraction,
            capital_amount=amount,
            created_at=timestamp,
            updated_at=timestamp,
        )

    def _reject(self, operation: str, error: LedgerError) -> LedgerError:
        log_rejection(self.logger, operation, error)
        return error

    def _committed(self, operation: str, **context: Any) -> None:
        log_ledger_mutation(self.logger, operation, context)
