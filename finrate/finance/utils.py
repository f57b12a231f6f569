"""Small numeric helpers shared by the solvers and the report layer."""
from __future__ import annotations

import math
from typing import Any, Iterable, Optional


def as_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    """Convert value to float, returning `default` for None or junk."""
    if v is None:
        return default
    try:
        return float(v)
    except (ValueError, TypeError):
        return default


def round_half_up(x: float, digits: int = 2) -> float:
    """
    Round halves toward +inf, e.g. 0.125 -> 0.13 and -0.125 -> -0.12.

    Python's round() is banker's rounding; rates are reported with the
    floor(x * 10**d + 0.5) rule instead so x.xx5 always goes up.
    """
    scale = 10.0 ** digits
    return math.floor(x * scale + 0.5) / scale


def has_sign_change(values: Iterable[float]) -> bool:
    """True when the series holds at least one positive and one negative value."""
    positive = negative = False
    for v in values:
        if v > 0:
            positive = True
        elif v < 0:
            negative = True
        if positive and negative:
            return True
    return False
