"""
Error classification system for the ledger.

Rejections (LedgerError and subclasses) describe calls refused during
validation; system failures describe storage or configuration problems.
"""

from .ledger_errors import (
    LedgerError,
    NotFoundError,
    DuplicateNameError,
    InvalidAmountError,
    InvalidRangeError,
    InsufficientFundsError,
    ExceedsAvailableError,
    InsufficientOwnershipError,
    NoSuchHoldingError,
    TransactionNotFoundError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Ledger Rejections
    "LedgerError",
    "NotFoundError",
    "DuplicateNameError",
    "InvalidAmountError",
    "InvalidRangeError",
    "InsufficientFundsError",
    "ExceedsAvailableError",
    "InsufficientOwnershipError",
    "NoSuchHoldingError",
    "TransactionNotFoundError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
]
