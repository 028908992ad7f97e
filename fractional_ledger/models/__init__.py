"""
Ledger record models.

Immutable records persisted in the four entity collections.
"""

from .records import Location, Owner, OwnerLocation, Transaction

__all__ = ["Location", "Owner", "OwnerLocation", "Transaction"]
