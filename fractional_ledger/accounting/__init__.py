"""
Ownership-accounting module.

The accounting core validates and applies every ledger mutation; the
gateway exposes the same operations with a text-result contract.
"""

from .core import AccountingCore, ConservationReport, DeletionSummary
from .gateway import ERROR_PREFIX, LedgerGateway

__all__ = [
    "AccountingCore",
    "ConservationReport",
    "DeletionSummary",
    "ERROR_PREFIX",
    "LedgerGateway",
]
