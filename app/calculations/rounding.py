"""
Rounding helpers shared by every calculation stage.
"""

import math

BPS_DENOMINATOR = 10_000


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves going toward positive infinity.

    2.5 -> 3, -2.5 -> -2. Every stage of the engine rounds its own output
    with this rule, so totals depend on it.
    """
    return math.floor(value + 0.5)


def bps_to_decimal(bps: int) -> float:
    """Convert basis points to a decimal rate (400 -> 0.04)."""
    return bps / BPS_DENOMINATOR
