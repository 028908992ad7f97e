"""
Text-result adapter over the accounting core.

Each method returns either a human-readable success message or a string
starting with "Error. " carrying the rejection message. Storage and other
system failures are not rejections and propagate to the caller.
"""

from typing import Any, Callable

from ..errors import LedgerError
from .core import AccountingCore

ERROR_PREFIX = "Error. "


def _percent(fraction: float) -> float:
    return fraction * 100


class LedgerGateway:
    """Exposes every ledger mutation with the text-result contract."""

    def __init__(self, core: AccountingCore):
        self.core = core

    def create_owner(self, name: str) -> str:
        return self._call(
            lambda: self.core.create_owner(name),
            lambda owner: f"Owner has been created. Hello {owner.name}"
        )

    def create_location(self, name: str, price: Any) -> str:
        return self._call(
            lambda: self.core.create_location(name, price),
            lambda location: (
                f"Location named {location.name} with price = {location.price} has been created."
            )
        )

    def topup_cash(self, name: str, amount: Any) -> str:
        return self._call(
            lambda: self.core.topup_cash(name, amount),
            lambda owner: f"Topup successful, your cash is ${owner.cash}."
        )

    def withdraw_cash(self, name: str, amount: Any) -> str:
        return self._call(
            lambda: self.core.withdraw_cash(name, amount),
            lambda owner: f"Withdraw successful, your cash is ${owner.cash}."
        )

    def buy_location(self, buyer_name: str, location_name: str, amount: Any) -> str:
        return self._call(
            lambda: self.core.buy_location(buyer_name, location_name, amount),
            lambda tx: (
                f"Buy location successful. {buyer_name} buy {location_name} as much as "
                f"{_percent(tx.own_percentage)}% or ${tx.capital_amount}"
            )
        )

    def sell_location(self, seller_name: str, location_name: str, amount: Any) -> str:
        return self._call(
            lambda: self.core.sell_location(seller_name, location_name, amount),
            lambda tx: (
                f"Sell location successful. {seller_name} sell {location_name} as much as "
                f"{_percent(tx.own_percentage)}% or ${tx.capital_amount}"
            )
        )

    def set_location_availability(self, name: str, fraction: Any) -> str:
        return self._call(
            lambda: self.core.set_location_availability(name, fraction),
            lambda location: (
                f"Availability of {location.name} set to {_percent(location.available_fraction)}%."
            )
        )

    def set_ownership_percentage(self, owner_name: str, location_name: str,
                                 percentage: Any) -> str:
        return self._call(
            lambda: self.core.set_ownership_percentage(owner_name, location_name, percentage),
            lambda holding: (
                f"Ownership of {owner_name} in {location_name} set to "
                f"{_percent(holding.own_percentage)}%."
            )
        )

    def delete_owner(self, name: str) -> str:
        return self._call(
            lambda: self.core.delete_owner(name),
            lambda summary: (
                f"Owner {summary.name} has been deleted along with "
                f"{summary.transactions_removed} transaction(s) and "
                f"{summary.holdings_removed} owner location(s)."
            )
        )

    def delete_location(self, name: str) -> str:
        return self._call(
            lambda: self.core.delete_location(name),
            lambda summary: (
                f"Location {summary.name} has been deleted along with "
                f"{summary.transactions_removed} transaction(s) and "
                f"{summary.holdings_removed} owner location(s)."
            )
        )

    def delete_transaction(self, owner_name: str, location_name: str,
                           capital_amount: Any) -> str:
        return self._call(
            lambda: self.core.delete_transaction(owner_name, location_name, capital_amount),
            lambda tx: (
                f"Transaction {tx.id} has been deleted. ${tx.capital_amount} refunded to "
                f"{owner_name} and {_percent(tx.own_percentage)}% of {location_name} "
                f"made available."
            )
        )

    @staticmethod
    def _call(action: Callable[[], Any], describe: Callable[[Any], str]) -> str:
        try:
            result = action()
        except LedgerError as e:
            return f"{ERROR_PREFIX}{e}"
        return describe(result)
