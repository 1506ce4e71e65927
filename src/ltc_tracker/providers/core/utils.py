"""Shared utilities for upstream providers."""

DECIMALS = 2
LITOSHI_PER_LTC = 100_000_000


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


def litoshi_to_ltc(value: int | float) -> float:
    return value / LITOSHI_PER_LTC
