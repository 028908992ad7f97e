"""
Fractional Ledger - Fractional Location Ownership Ledger

Tracks owner cash balances, fractional stakes purchased in listed locations,
per-owner-per-location holdings and the full transaction history, keeping
cash, ownership percentages and available supply consistent across every
purchase, sale, deletion and correction.
"""

__version__ = "0.1.0"
__author__ = "Fractional Ledger Team"
