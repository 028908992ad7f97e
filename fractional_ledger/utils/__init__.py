"""
Utility functions module.

Clock and identifier helpers shared across the ledger.

Time Semantics:
- Every timestamp is timezone-aware UTC
- One operation reads the clock once; all records it writes share that instant
- Timestamps are persisted as ISO8601 strings
"""
