from __future__ import annotations
from typing import List, Optional, Sequence
from math import nan, inf, isfinite


def pct_change(cur: float, prev: float) -> float:
    """Percent change from prev to cur. prev == 0 gives +/-inf or nan, never raises."""
    try:
        return (float(cur) - float(prev)) / float(prev) * 100.0
    except ZeroDivisionError:
        diff = float(cur) - float(prev)
        if diff == 0:
            return nan
        return inf if diff > 0 else -inf


def growth_rates(values: Sequence[float]) -> List[float]:
    """
    Growth of each value vs the one before it *in the sequence*.
    First element is 0. Missing calendar years are not filled in.
    """
    out: List[float] = []
    for i, v in enumerate(values):
        out.append(0.0 if i == 0 else pct_change(v, values[i - 1]))
    return out


def safe_ratio(num: Optional[float], den: Optional[float]) -> float:
    # absent operands or zero denominator -> non-finite, not an exception
    if num is None or den is None:
        return nan
    try:
        return float(num) / float(den)
    except ZeroDivisionError:
        if num == 0:
            return nan
        return inf if num > 0 else -inf


def mean(values: Sequence[float]) -> float:
    if not values:
        return nan
    return sum(values) / len(values)


def finite_or_none(v: Optional[float]) -> Optional[float]:
    if v is None:
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if isfinite(f) else None
