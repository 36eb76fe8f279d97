"""Pyth Network price source (Hermes REST API)."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import PythConfig

logger = logging.getLogger(__name__)


def rescale_price(price: int, expo: int, feed_decimals: int) -> int:
    """Convert a Pyth ``price * 10**expo`` reading to ``feed_decimals`` places.

    Examples:
        rescale_price(400000000000, -8, 8) → 400000000000
        rescale_price(4000000, -3, 8) → 400000000000
    """
    source_decimals = -expo
    if source_decimals > feed_decimals:
        return price // 10 ** (source_decimals - feed_decimals)
    return price * 10 ** (feed_decimals - source_decimals)


class PythPriceSource:
    """Price source backed by Pyth Network.

    ``refresh()`` pulls the latest readings over HTTP and keeps them together
    with their publish time. ``latest_quote()`` only answers from the last
    reading, so the gateway's staleness guard decides whether it is usable.
    """

    def __init__(
        self,
        config: PythConfig,
        feeds: dict[str, str],
        feed_decimals: dict[str, int],
    ) -> None:
        self.hermes_url = config.hermes_url
        self.timeout = config.timeout
        self.price_feeds = dict(feeds)
        self.feed_decimals = dict(feed_decimals)
        self._readings: dict[str, tuple[int, float]] = {}

    def latest_quote(self, asset: str) -> tuple[int, float]:
        return self._readings.get(asset, (0, 0.0))

    def _parse(
        self, parsed: list[dict[str, Any]], feeds: dict[str, str]
    ) -> dict[str, tuple[int, float]]:
        # Create reverse mapping from feed ID to asset names
        id_to_assets: dict[str, list[str]] = {}
        for asset, feed_id in feeds.items():
            id_to_assets.setdefault(feed_id.lower().removeprefix("0x"), []).append(asset)

        readings: dict[str, tuple[int, float]] = {}
        for item in parsed:
            feed_id = str(item.get("id", "")).lower().removeprefix("0x")
            price_data = item.get("price", {})
            price_raw = int(price_data.get("price", 0))
            expo = int(price_data.get("expo", 0))
            publish_time = float(price_data.get("publish_time", 0))

            for asset in id_to_assets.get(feed_id, []):
                decimals = self.feed_decimals.get(asset, 8)
                readings[asset] = (rescale_price(price_raw, expo, decimals), publish_time)
        return readings

    async def refresh(self, symbols: list[str] | None = None) -> dict[str, tuple[int, float]]:
        """Fetch the latest readings from Pyth and store them.

        Args:
            symbols: Optional list of symbols to refresh. If None, refreshes all
                     configured feeds.

        Returns the readings received in this call; failed fetches are logged
        and leave the previous readings in place.
        """
        feeds = self.price_feeds
        if symbols is not None:
            feeds = {k: v for k, v in self.price_feeds.items() if k in symbols}

        feed_ids = sorted(set(feeds.values()))
        if not feed_ids:
            return {}

        query_params = "&".join([f"ids[]={fid}" for fid in feed_ids])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        readings: dict[str, tuple[int, float]] = {}
        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return readings

                    data = await response.json()
                    readings = self._parse(data.get("parsed", []), feeds)
        except Exception as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            return readings

        self._readings.update(readings)
        logger.info("Refreshed %d Pyth price feeds", len(readings))
        for asset, (price, publish_time) in sorted(readings.items()):
            logger.debug("  %s: %d @ %s", asset, price, publish_time)
        return readings
