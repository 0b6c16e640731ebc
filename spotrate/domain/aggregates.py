from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable


def round_half_away_from_zero(value: float | Decimal, places: int) -> float:
    """Round like a person would: 4.25 -> 4.3, -4.25 -> -4.3.

    ``round()`` uses banker's rounding and works on the binary float, so it is
    not used for stored aggregates.
    """

    if places < 0:
        raise ValueError("places must be >= 0")
    exact = value if isinstance(value, Decimal) else Decimal(str(value))
    return float(exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def mean(total: int, count: int, precision: int | None) -> float:
    if count <= 0:
        return 0.0
    if precision is None:
        return total / count
    return round_half_away_from_zero(Decimal(total) / Decimal(count), precision)


def compute_aggregate(values: Iterable[int], precision: int | None) -> tuple[float, int]:
    """Fold rating values to ``(average, count)``.

    An empty set yields ``(0.0, 0)``. The mean uses the exact count as the
    denominator and is rounded to ``precision`` decimals unless it is None.
    """

    total = 0
    count = 0
    for value in values:
        total += value
        count += 1
    return mean(total, count, precision), count
