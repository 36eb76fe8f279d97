"""Price source protocol — raw, untrusted price feed."""
from typing import Protocol


class PriceSource(Protocol):
    """Latest raw reading for an asset: (price in feed decimals, observed-at epoch seconds)."""

    def latest_quote(self, asset: str) -> tuple[int, float]: ...
