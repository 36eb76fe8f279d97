"""In-process price source whose answers are pushed by the host."""
from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class ManualPriceSource:
    """Settable feed keeping the last (price, observed_at) reading per asset.

    Unset assets report ``(0, 0)``, which the gateway rejects as stale.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._readings: dict[str, tuple[int, float]] = {}

    def update(self, asset: str, price: int, observed_at: float | None = None) -> None:
        if observed_at is None:
            observed_at = self._clock()
        self._readings[asset] = (int(price), float(observed_at))
        logger.debug("Manual feed %s updated: %s @ %s", asset, price, observed_at)

    def latest_quote(self, asset: str) -> tuple[int, float]:
        return self._readings.get(asset, (0, 0.0))
