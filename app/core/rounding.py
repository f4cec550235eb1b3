"""
Half-up rounding helpers.

Python's round() uses banker's rounding; report numbers are rounded half away
from zero so that 2.5 becomes 3 and 21.5 becomes 22.
"""
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round value to ndigits decimals, halves rounded up."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """Round value to the nearest integer, halves rounded up."""
    return int(round_half_up(value, 0))
