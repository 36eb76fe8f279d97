"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from support import BTC_USD_FEED, ETH_USD_FEED, ONE, FakeClock, fund_and_deposit
from synth_engine.config import (
    AppConfig,
    CollateralConfig,
    EngineConfig,
    PriceOracleConfig,
    PythConfig,
)
from synth_engine.engine import SynthEngine
from synth_engine.oracles import ManualPriceSource


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine_config() -> EngineConfig:
    return EngineConfig(
        liquidation_threshold=50,
        liquidation_precision=100,
        liquidation_bonus=10,
        min_health_factor=ONE,
        custody_account="engine",
    )


@pytest.fixture()
def app_config(engine_config: EngineConfig) -> AppConfig:
    return AppConfig(
        engine=engine_config,
        collateral={
            "WETH": CollateralConfig(decimals=18, feed_decimals=8),
            "WBTC": CollateralConfig(decimals=8, feed_decimals=8),
        },
        price_oracle=PriceOracleConfig(provider="manual", pyth=PythConfig()),
    )


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def price_source(clock: FakeClock) -> ManualPriceSource:
    source = ManualPriceSource(clock)
    source.update("WETH", ETH_USD_FEED)
    source.update("WBTC", BTC_USD_FEED)
    return source


@pytest.fixture()
def engine(
    app_config: AppConfig, price_source: ManualPriceSource, clock: FakeClock
) -> SynthEngine:
    return SynthEngine(app_config, price_source=price_source, clock=clock)


@pytest.fixture()
def alice_deposited(engine: SynthEngine) -> SynthEngine:
    """alice holds 10 WETH ($40,000) in the engine and owes nothing."""
    fund_and_deposit(engine, "alice", "WETH", 10 * ONE)
    return engine


@pytest.fixture()
def alice_minted(alice_deposited: SynthEngine) -> SynthEngine:
    """alice minted 10,000 against 10 WETH: health factor 2.0."""
    alice_deposited.mint("alice", 10_000 * ONE)
    return alice_deposited


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    engine:
      liquidation_threshold: 50
      liquidation_precision: 100
      liquidation_bonus: 10
      custody_account: vault
    collateral:
      WETH:
        decimals: 18
        feed_decimals: 8
        max_staleness_seconds: 10800
        pyth_feed_id: "aaa111"
      WBTC:
        decimals: 8
        pyth_feed_id: "bbb222"
    price_oracle:
      provider: pyth
      pyth:
        hermes_url: "https://hermes.example.com"
        timeout: 5
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
