"""Collateral ledger — per-user collateral and debt bookkeeping, no I/O."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import BurnExceedsDebt, InsufficientCollateral

if TYPE_CHECKING:
    from .oracles.gateway import PriceOracleGateway


class CollateralLedger:
    """Owns every CollateralPosition and DebtPosition.

    Collateral amounts are in each asset's native precision; debt is in the
    synthetic asset's 18-decimal precision. Zero balances are removed.
    """

    def __init__(self) -> None:
        self._collateral: dict[tuple[str, str], int] = {}
        self._debt: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Collateral
    # ------------------------------------------------------------------

    def balance(self, user: str, asset: str) -> int:
        return self._collateral.get((user, asset), 0)

    def credit(self, user: str, asset: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("credit amount cannot be negative")
        self._collateral[(user, asset)] = self.balance(user, asset) + amount

    def debit(self, user: str, asset: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("debit amount cannot be negative")
        available = self.balance(user, asset)
        if amount > available:
            raise InsufficientCollateral(user, asset, amount, available)
        remaining = available - amount
        if remaining:
            self._collateral[(user, asset)] = remaining
        else:
            self._collateral.pop((user, asset), None)

    def assets_of(self, user: str) -> dict[str, int]:
        """Every asset the user holds, with its balance."""
        return {
            asset: amount
            for (owner, asset), amount in self._collateral.items()
            if owner == user
        }

    def total_collateral(self, asset: str) -> int:
        return sum(
            amount for (_, held), amount in self._collateral.items() if held == asset
        )

    def total_value_usd(self, user: str, gateway: PriceOracleGateway) -> int:
        """Sum of the user's collateral valued at current prices (18 decimals)."""
        return sum(
            gateway.usd_value(asset, amount)
            for asset, amount in sorted(self.assets_of(user).items())
        )

    # ------------------------------------------------------------------
    # Debt
    # ------------------------------------------------------------------

    def debt(self, user: str) -> int:
        return self._debt.get(user, 0)

    def add_debt(self, user: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("debt increase cannot be negative")
        self._debt[user] = self.debt(user) + amount

    def reduce_debt(self, user: str, amount: int) -> None:
        current = self.debt(user)
        if amount > current:
            raise BurnExceedsDebt(user, amount, current)
        remaining = current - amount
        if remaining:
            self._debt[user] = remaining
        else:
            self._debt.pop(user, None)

    def total_debt(self) -> int:
        return sum(self._debt.values())

    def users(self) -> set[str]:
        return {owner for owner, _ in self._collateral} | set(self._debt)

    # ------------------------------------------------------------------
    # Revertible
    # ------------------------------------------------------------------

    def snapshot(self) -> Any:
        return dict(self._collateral), dict(self._debt)

    def restore(self, state: Any) -> None:
        collateral, debt = state
        self._collateral = dict(collateral)
        self._debt = dict(debt)
