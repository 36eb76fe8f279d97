"""Token protocols — collateral custody transfers and synthetic supply."""
from typing import Protocol


class CollateralToken(Protocol):
    """Moves a collateral asset into and out of engine custody.

    Both calls report failure by returning ``False``; the engine treats that
    exactly like a raised exception.
    """

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer(self, recipient: str, amount: int) -> bool: ...


class SyntheticToken(Protocol):
    """Supply accounting of the pegged synthetic asset."""

    def mint(self, user: str, amount: int) -> bool: ...

    def burn(self, user: str, amount: int) -> bool: ...
