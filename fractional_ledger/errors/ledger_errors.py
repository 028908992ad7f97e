"""
Ledger rejection classifications for accounting operations.

Every exception here is raised before any write happens, so a rejected
call always leaves the ledger untouched and the caller may simply retry
with corrected arguments.
"""

from typing import Optional, Dict, Any


class LedgerError(Exception):
    """Base class for rejected ledger operations."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class NotFoundError(LedgerError):
    """Named owner or location does not exist."""

    def __init__(self, message: str, entity: Optional[str] = None,
                 name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.entity = entity
        self.name = name


class DuplicateNameError(LedgerError):
    """An owner or location with the same name already exists."""

    def __init__(self, message: str, entity: Optional[str] = None,
                 name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.entity = entity
        self.name = name


class InvalidAmountError(LedgerError):
    """Quantity is NaN, non-numeric or outside its allowed range."""

    def __init__(self, message: str, amount: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.amount = amount


class InvalidRangeError(LedgerError):
    """Fraction is NaN or outside [0, 1]."""

    def __init__(self, message: str, value: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.value = value


class InsufficientFundsError(LedgerError):
    """Owner cash does not cover the requested amount."""

    def __init__(self, message: str, available: Optional[float] = None,
                 requested: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.available = available
        self.requested = requested


class ExceedsAvailableError(LedgerError):
    """Purchase is larger than the unowned value of the location."""

    def __init__(self, message: str, available_value: Optional[float] = None,
                 requested: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.available_value = available_value
        self.requested = requested


class InsufficientOwnershipError(LedgerError):
    """Seller holds less of the location than they try to sell."""

    def __init__(self, message: str, held: Optional[float] = None,
                 requested: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.held = held
        self.requested = requested


class NoSuchHoldingError(LedgerError):
    """Owner has no holding in the location."""


class TransactionNotFoundError(LedgerError):
    """No transaction matches the owner, location and capital amount."""

    def __init__(self, message: str, capital_amount: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.capital_amount = capital_amount
