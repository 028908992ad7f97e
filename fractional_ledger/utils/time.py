"""
Time utilities for ledger timestamps.

All ledger records carry UTC creation and update timestamps. This module
centralizes reading the wall clock and converting timestamps to and from
their persisted string form.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get the current wall-clock time.

    Returns:
        Current time as a timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp for persistence and logging.

    Args:
        ts: Timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return ts.isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse a persisted ISO8601 timestamp.

    Naive values are assumed to be UTC.

    Args:
        value: ISO8601 string produced by format_timestamp

    Returns:
        Timezone-aware datetime
    """
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
