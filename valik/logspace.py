"""Arithmetic on probabilities kept in natural-log space."""

from __future__ import annotations

import math

LN_2 = 0.693147180559945309417232121458176568
NEGATIVE_INF = -math.inf

__all__ = ["LN_2", "NEGATIVE_INF", "add", "subtract", "pascal_row"]


def _log(value: float) -> float:
    """Natural log that maps zero to -inf and negatives to nan."""
    if value == 0:
        return NEGATIVE_INF
    if value < 0 or math.isnan(value):
        return math.nan
    return math.log(value)


def _log1p(value: float) -> float:
    """log(1 + value) that maps -1 to -inf and smaller values to nan."""
    if value == -1:
        return NEGATIVE_INF
    if value < -1 or math.isnan(value):
        return math.nan
    return math.log1p(value)


def _add_two(log_x: float, log_y: float) -> float:
    largest = max(log_x, log_y)
    if largest == NEGATIVE_INF:
        return NEGATIVE_INF
    return largest + math.log1p(math.exp(-abs(log_x - log_y)))


def add(log_x: float, log_y: float, *args: float) -> float:
    """Return the log of the sum of terms given as logs.

    Any term may be -inf; if all of them are, the result is -inf.
    """
    result = _add_two(log_y, log_x)
    for log_value in args:
        result = _add_two(result, log_value)
    return result


def subtract(log_x: float, log_y: float) -> float:
    """Return the log of ``exp(log_x) - exp(log_y)``."""
    difference = log_y - log_x
    if log_x + difference > -LN_2:
        return _log(-math.expm1(difference))
    return _log1p(-math.exp(difference))


def pascal_row(n: int) -> list[float]:
    """Return log binomial coefficients for row ``n``.

    Each step multiplies by the integer ratio ``(n + 1 - i) // i``; a ratio
    of zero yields -inf for that and every later entry.
    """
    if n < 0:
        raise ValueError("row index must not be negative")
    result = [0.0]
    for i in range(1, n + 1):
        result.append(result[-1] + _log((n + 1 - i) // i))
    return result