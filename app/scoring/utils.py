"""
Decimal Utilities
app/scoring/utils.py

Precision-safe rounding for percentages and averages. Python's round() is
banker's rounding; the engine rounds half away from zero.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean_percent(fractions: Iterable[Decimal]) -> int:
    """
    Mean of fractions in [0, 1] as an integer percentage.

    Returns 0 for an empty input.
    """
    values = list(fractions)
    if not values:
        return 0
    mean = sum(values, Decimal("0")) / Decimal(len(values))
    return round_half_up(clamp(mean * Decimal("100")))


def average(total: int, count: int, places: int = 2) -> float:
    """total / count rounded to ``places`` decimals; 0.0 when count is 0."""
    if count <= 0:
        return 0.0
    quotient = Decimal(total) / Decimal(count)
    return float(quotient.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP))
