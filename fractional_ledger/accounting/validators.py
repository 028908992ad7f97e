"""
Amount and fraction checks for accounting operations.

Arguments arrive as primitives from an outer surface. They are coerced to
float once; anything that cannot be coerced becomes NaN so it travels the
same ordered validation path as a NaN input. The range checks below reject
NaN and both infinities.
"""

import math
from typing import Any


def as_amount(value: Any) -> float:
    """Coerce a caller-supplied quantity to float, NaN if not numeric."""
    if isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def is_positive_amount(value: float) -> bool:
    """True for a finite number strictly above zero."""
    return math.isfinite(value) and value > 0


def is_non_negative_amount(value: float) -> bool:
    """True for a finite number at or above zero."""
    return math.isfinite(value) and value >= 0


def is_unit_fraction(value: float) -> bool:
    """True for a number within [0, 1]; NaN is rejected."""
    return math.isfinite(value) and 0 <= value <= 1
