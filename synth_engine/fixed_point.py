"""Fixed-point helpers — every value inside the engine is an 18-decimal int."""
from __future__ import annotations

PRECISION_DECIMALS = 18
PRECISION = 10**PRECISION_DECIMALS


def _factor(decimals: int) -> int:
    if decimals < 0 or decimals > PRECISION_DECIMALS:
        raise ValueError(
            f"decimals must be between 0 and {PRECISION_DECIMALS}, got {decimals}"
        )
    return 10 ** (PRECISION_DECIMALS - decimals)


def scale_up(amount: int, decimals: int) -> int:
    """Rescale a native-precision amount to 18 decimals.

    Examples:
        scale_up(400000000000, 8) → 4000 * 10**18
        scale_up(10**18, 18) → 10**18
    """
    return amount * _factor(decimals)


def scale_down(amount: int, decimals: int) -> int:
    """Rescale an 18-decimal amount to native precision (floor)."""
    return amount // _factor(decimals)


def to_display(amount: int | float) -> str:
    """Render an 18-decimal value for logs and CLI output."""
    if amount == float("inf"):
        return "∞"
    return f"{amount / PRECISION:,.6f}"
