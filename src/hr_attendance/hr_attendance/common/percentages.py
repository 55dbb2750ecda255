from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def percentage(numerator: int, denominator: int) -> int:
    """Integer percentage, half-up rounded and clamped to [0, 100].

    A zero (or negative) denominator yields 0.
    """

    if denominator <= 0 or numerator <= 0:
        return 0
    value = int((Decimal(numerator) * 100 / Decimal(denominator)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, value))
