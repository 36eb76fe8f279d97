"""Unit tests for the asset registry and price oracle gateway."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from support import BTC_USD_FEED, ETH_USD_FEED, ONE, THREE_HOURS, FakeClock
from synth_engine.errors import InvalidPrice, StalePrice, UnknownAsset
from synth_engine.models import CollateralAsset
from synth_engine.oracles import AssetRegistry, ManualPriceSource, PriceOracleGateway


@pytest.fixture()
def registry(price_source: ManualPriceSource) -> AssetRegistry:
    registry = AssetRegistry()
    registry.register(CollateralAsset("WETH", decimals=18, feed_decimals=8), price_source)
    registry.register(CollateralAsset("WBTC", decimals=8, feed_decimals=8), price_source)
    return registry


@pytest.fixture()
def gateway(registry: AssetRegistry, clock: FakeClock) -> PriceOracleGateway:
    return PriceOracleGateway(registry, clock)


# ---------------------------------------------------------------------------
# AssetRegistry
# ---------------------------------------------------------------------------


class TestAssetRegistry:
    def test_duplicate_registration_rejected(
        self, registry: AssetRegistry, price_source: ManualPriceSource
    ) -> None:
        with pytest.raises(ValueError):
            registry.register(CollateralAsset("WETH"), price_source)

    def test_unknown_lookup(self, registry: AssetRegistry) -> None:
        with pytest.raises(UnknownAsset) as exc_info:
            registry.lookup("DOGE")
        assert exc_info.value.asset == "DOGE"

    def test_rejects_too_many_decimals(self, price_source: ManualPriceSource) -> None:
        with pytest.raises(ValueError):
            AssetRegistry().register(CollateralAsset("X", decimals=24), price_source)

    def test_iterates_assets(self, registry: AssetRegistry) -> None:
        assert [a.symbol for a in registry] == ["WETH", "WBTC"]
        assert "WETH" in registry
        assert len(registry) == 2


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizedPrice:
    def test_eight_decimal_feed_scaled_to_eighteen(
        self, gateway: PriceOracleGateway
    ) -> None:
        assert gateway.get_normalized_price("WETH") == 4000 * ONE

    def test_quote_carries_observation_time(
        self, gateway: PriceOracleGateway, clock: FakeClock
    ) -> None:
        quote = gateway.get_quote("WBTC")
        assert quote.price == 60000 * ONE
        assert quote.observed_at == clock.now

    def test_unknown_asset(self, gateway: PriceOracleGateway) -> None:
        with pytest.raises(UnknownAsset):
            gateway.get_normalized_price("DOGE")

    def test_non_positive_price_rejected(
        self, gateway: PriceOracleGateway, price_source: ManualPriceSource
    ) -> None:
        price_source.update("WETH", -1)
        with pytest.raises(InvalidPrice):
            gateway.get_normalized_price("WETH")

    def test_reads_source_every_call(self, clock: FakeClock) -> None:
        source = MagicMock()
        source.latest_quote.return_value = (ETH_USD_FEED, clock.now)
        registry_with_mock = AssetRegistry()
        registry_with_mock.register(CollateralAsset("WETH"), source)
        gateway = PriceOracleGateway(registry_with_mock, clock)

        gateway.get_normalized_price("WETH")
        gateway.get_normalized_price("WETH")

        assert source.latest_quote.call_count == 2


# ---------------------------------------------------------------------------
# Staleness
# ---------------------------------------------------------------------------


class TestStaleness:
    def test_exactly_at_limit_is_accepted(
        self, gateway: PriceOracleGateway, clock: FakeClock
    ) -> None:
        clock.advance(THREE_HOURS)
        assert gateway.get_normalized_price("WETH") == 4000 * ONE

    def test_one_second_past_limit_is_stale(
        self, gateway: PriceOracleGateway, clock: FakeClock
    ) -> None:
        clock.advance(THREE_HOURS + 1)
        with pytest.raises(StalePrice) as exc_info:
            gateway.get_normalized_price("WETH")
        assert exc_info.value.asset == "WETH"
        assert exc_info.value.max_staleness == THREE_HOURS

    def test_never_updated_feed_is_stale(
        self, registry: AssetRegistry, clock: FakeClock
    ) -> None:
        registry.register(CollateralAsset("LINK"), ManualPriceSource(clock))
        gateway = PriceOracleGateway(registry, clock)
        with pytest.raises(StalePrice):
            gateway.get_normalized_price("LINK")

    def test_staleness_rechecked_after_success(
        self, gateway: PriceOracleGateway, clock: FakeClock
    ) -> None:
        gateway.get_normalized_price("WETH")
        clock.advance(THREE_HOURS + 1)
        with pytest.raises(StalePrice):
            gateway.get_normalized_price("WETH")

    def test_fresh_update_recovers(
        self,
        gateway: PriceOracleGateway,
        clock: FakeClock,
        price_source: ManualPriceSource,
    ) -> None:
        clock.advance(THREE_HOURS + 1)
        price_source.update("WETH", ETH_USD_FEED)
        assert gateway.get_normalized_price("WETH") == 4000 * ONE


# ---------------------------------------------------------------------------
# USD conversions
# ---------------------------------------------------------------------------


class TestConversions:
    def test_usd_value_of_one_eth(self, gateway: PriceOracleGateway) -> None:
        assert gateway.usd_value("WETH", ONE) == 4000 * ONE

    def test_usd_value_of_eight_decimal_asset(self, gateway: PriceOracleGateway) -> None:
        # 0.5 BTC in native 8-decimal units
        assert gateway.usd_value("WBTC", 50_000_000) == 30_000 * ONE

    def test_naive_multiplication_is_wrong_magnitude(
        self, gateway: PriceOracleGateway
    ) -> None:
        assert gateway.usd_value("WETH", ONE) != ONE * ETH_USD_FEED // ONE
        assert gateway.usd_value("WBTC", 10**8) != 10**8 * BTC_USD_FEED

    def test_token_amount_from_usd(self, gateway: PriceOracleGateway) -> None:
        assert gateway.token_amount_from_usd("WETH", 100 * ONE) == ONE // 40

    def test_token_amount_from_usd_native_decimals(
        self, gateway: PriceOracleGateway
    ) -> None:
        assert gateway.token_amount_from_usd("WBTC", 60_000 * ONE) == 10**8

    @pytest.mark.parametrize(
        ("asset", "amount", "feed_price"),
        [
            ("WETH", ONE + 7, 123456789012),
            ("WETH", 3, 400000000000),
            ("WETH", 987654321987654321, 100000001),
            ("WBTC", 12345678, 6000012345678),
            ("WBTC", 1, 100000000),
        ],
    )
    def test_precision_round_trip_loses_at_most_one_unit(
        self,
        gateway: PriceOracleGateway,
        price_source: ManualPriceSource,
        asset: str,
        amount: int,
        feed_price: int,
    ) -> None:
        price_source.update(asset, feed_price)
        usd = gateway.usd_value(asset, amount)
        back = gateway.token_amount_from_usd(asset, usd)
        assert amount - 1 <= back <= amount
