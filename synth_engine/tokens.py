"""In-memory token collaborators for simulations and tests."""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryCollateralToken:
    """Balance book for one collateral asset; ``custody`` is the engine's account."""

    def __init__(self, symbol: str, custody: str) -> None:
        self.symbol = symbol
        self.custody = custody
        self._balances: dict[str, int] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def faucet(self, account: str, amount: int) -> None:
        """Credit ``account`` out of thin air."""
        self._balances[account] = self.balance_of(account) + amount

    def _move(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            logger.debug(
                "%s transfer of %d from %s refused (balance %d)",
                self.symbol,
                amount,
                sender,
                self.balance_of(sender),
            )
            return False
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        return True

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        return self._move(sender, recipient, amount)

    def transfer(self, recipient: str, amount: int) -> bool:
        return self._move(self.custody, recipient, amount)

    def snapshot(self) -> Any:
        return dict(self._balances)

    def restore(self, state: Any) -> None:
        self._balances = dict(state)


class InMemorySyntheticToken:
    """Supply accounting for the pegged synthetic asset."""

    def __init__(self, symbol: str = "SYNTH") -> None:
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self.total_supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, user: str, amount: int) -> bool:
        if amount <= 0:
            return False
        self._balances[user] = self.balance_of(user) + amount
        self.total_supply += amount
        return True

    def burn(self, user: str, amount: int) -> bool:
        if amount <= 0 or self.balance_of(user) < amount:
            return False
        self._balances[user] = self.balance_of(user) - amount
        self.total_supply -= amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Plain holder-to-holder transfer, e.g. to fund a liquidator."""
        if amount < 0 or self.balance_of(sender) < amount:
            return False
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        return True

    def snapshot(self) -> Any:
        return dict(self._balances), self.total_supply

    def restore(self, state: Any) -> None:
        balances, self.total_supply = state
        self._balances = dict(balances)
