"""Precondition helpers called explicitly at each operation's entry."""
from __future__ import annotations

from .errors import ZeroAmount


def require_positive(amount: int, operation: str) -> None:
    """Reject zero amounts (and negative ones, which amounts never are)."""
    if amount <= 0:
        raise ZeroAmount(operation)
