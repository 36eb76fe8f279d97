"""Engine error taxonomy — every failure carries its structured context."""
from __future__ import annotations


class EngineError(Exception):
    """Base class for all engine failures."""


class ZeroAmount(EngineError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: amount must be greater than zero")


class UnknownAsset(EngineError):
    def __init__(self, asset: str) -> None:
        self.asset = asset
        super().__init__(f"Asset '{asset}' has no registered price source")


class StalePrice(EngineError):
    def __init__(
        self, asset: str, observed_at: float, now: float, max_staleness: int
    ) -> None:
        self.asset = asset
        self.observed_at = observed_at
        self.now = now
        self.max_staleness = max_staleness
        super().__init__(
            f"Price for '{asset}' is stale: observed at {observed_at}, "
            f"now {now}, max staleness {max_staleness}s"
        )


class InvalidPrice(EngineError):
    def __init__(self, asset: str, price: int) -> None:
        self.asset = asset
        self.price = price
        super().__init__(f"Price source for '{asset}' reported non-positive price {price}")


class InsufficientCollateral(EngineError):
    def __init__(self, user: str, asset: str, requested: int, available: int) -> None:
        self.user = user
        self.asset = asset
        self.requested = requested
        self.available = available
        super().__init__(
            f"User '{user}' has {available} {asset}, cannot debit {requested}"
        )


class TransferFailed(EngineError):
    def __init__(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        self.asset = asset
        self.sender = sender
        self.recipient = recipient
        self.amount = amount
        super().__init__(
            f"Transfer of {amount} {asset} from '{sender}' to '{recipient}' failed"
        )


class MintFailed(EngineError):
    def __init__(self, user: str, amount: int) -> None:
        self.user = user
        self.amount = amount
        super().__init__(f"Synthetic mint of {amount} to '{user}' failed")


class BurnFailed(TransferFailed):
    """A synthetic burn was refused; the payer is both sender and recipient."""

    def __init__(self, user: str, amount: int, asset: str = "SYNTH") -> None:
        self.asset = asset
        self.sender = user
        self.recipient = user
        self.amount = amount
        self.user = user
        EngineError.__init__(self, f"Synthetic burn of {amount} from '{user}' failed")


class BurnExceedsDebt(EngineError):
    def __init__(self, user: str, amount: int, debt: int) -> None:
        self.user = user
        self.amount = amount
        self.debt = debt
        super().__init__(f"Cannot burn {amount} for '{user}', debt is {debt}")


class HealthFactorBroken(EngineError):
    def __init__(self, user: str, health_factor: int | float, minimum: int) -> None:
        self.user = user
        self.health_factor = health_factor
        self.minimum = minimum
        super().__init__(
            f"Health factor of '{user}' would be {health_factor} (minimum {minimum})"
        )


class HealthFactorOk(EngineError):
    def __init__(self, user: str, health_factor: int | float, minimum: int) -> None:
        self.user = user
        self.health_factor = health_factor
        self.minimum = minimum
        super().__init__(
            f"Health factor of '{user}' is {health_factor}, not below {minimum}"
        )


class HealthFactorNotImproved(EngineError):
    def __init__(
        self, user: str, starting: int | float, ending: int | float
    ) -> None:
        self.user = user
        self.starting = starting
        self.ending = ending
        super().__init__(
            f"Liquidation would worsen '{user}': health factor {starting} -> {ending}"
        )
