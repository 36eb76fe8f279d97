"""Asset registry — explicit asset → price source configuration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from ..errors import UnknownAsset
from ..interfaces.price_source import PriceSource
from ..models import CollateralAsset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registration:
    asset: CollateralAsset
    source: PriceSource


class AssetRegistry:
    """Holds exactly one price source per collateral asset.

    Administrative only: populated at start-up, read by the gateway on every
    price lookup.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Registration] = {}

    def register(self, asset: CollateralAsset, source: PriceSource) -> None:
        if asset.symbol in self._entries:
            raise ValueError(f"Asset '{asset.symbol}' already has a price source")
        if not 0 <= asset.decimals <= 18 or not 0 <= asset.feed_decimals <= 18:
            raise ValueError(
                f"Asset '{asset.symbol}' decimals must be between 0 and 18"
            )
        if asset.max_staleness_seconds <= 0:
            raise ValueError(
                f"Asset '{asset.symbol}' max staleness must be positive"
            )
        self._entries[asset.symbol] = Registration(asset=asset, source=source)
        logger.info(
            "Registered collateral %s (decimals=%d, feed_decimals=%d, max_staleness=%ds)",
            asset.symbol,
            asset.decimals,
            asset.feed_decimals,
            asset.max_staleness_seconds,
        )

    def lookup(self, symbol: str) -> Registration:
        try:
            return self._entries[symbol]
        except KeyError:
            raise UnknownAsset(symbol) from None

    def asset(self, symbol: str) -> CollateralAsset:
        return self.lookup(symbol).asset

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._entries

    def __iter__(self) -> Iterator[CollateralAsset]:
        return (entry.asset for entry in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(self._entries)
