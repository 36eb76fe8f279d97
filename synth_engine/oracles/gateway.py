"""Price oracle gateway — staleness guard and decimal normalization."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..errors import InvalidPrice, StalePrice
from ..fixed_point import PRECISION, scale_down, scale_up
from ..models import PriceQuote
from .registry import AssetRegistry

logger = logging.getLogger(__name__)


class PriceOracleGateway:
    """Read, validate and normalize prices from the registered sources.

    Every call goes back to the source; quotes are never cached, so staleness
    is re-evaluated on each read. There are no retries: a stale or invalid
    quote is raised to the caller.
    """

    def __init__(
        self, registry: AssetRegistry, clock: Callable[[], float] = time.time
    ) -> None:
        self._registry = registry
        self._clock = clock

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    def get_quote(self, asset: str) -> PriceQuote:
        entry = self._registry.lookup(asset)
        raw_price, observed_at = entry.source.latest_quote(asset)
        now = self._clock()
        max_staleness = entry.asset.max_staleness_seconds

        # observed_at == 0 means the source never produced a reading
        if observed_at <= 0 or now - observed_at > max_staleness:
            logger.warning(
                "Rejecting stale %s quote (observed_at=%s, now=%s, max=%ds)",
                asset,
                observed_at,
                now,
                max_staleness,
            )
            raise StalePrice(asset, observed_at, now, max_staleness)
        if raw_price <= 0:
            logger.warning("Rejecting non-positive %s price %s", asset, raw_price)
            raise InvalidPrice(asset, raw_price)

        price = scale_up(int(raw_price), entry.asset.feed_decimals)
        return PriceQuote(asset=asset, price=price, observed_at=observed_at)

    def get_normalized_price(self, asset: str) -> int:
        """Return the asset's USD price as an 18-decimal fixed-point int."""
        return self.get_quote(asset).price

    def usd_value(self, asset: str, amount: int) -> int:
        """USD value (18 decimals) of a native-precision amount.

        The amount is scaled to 18 decimals first, multiplied by the 18-decimal
        price, then divided by ``PRECISION`` once.
        """
        decimals = self._registry.asset(asset).decimals
        price = self.get_normalized_price(asset)
        return scale_up(amount, decimals) * price // PRECISION

    def token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        """Native-precision amount of ``asset`` worth ``usd_amount`` (floor)."""
        decimals = self._registry.asset(asset).decimals
        price = self.get_normalized_price(asset)
        return scale_down(usd_amount * PRECISION // price, decimals)
