"""Engine assembly — wires registry, gateway, ledger, controller and liquidations."""
from __future__ import annotations

import logging
import time
from typing import Callable

from .config import AppConfig
from .controller import MintRedeemController
from .health import HealthFactorCalculator
from .interfaces.price_source import PriceSource
from .interfaces.tokens import CollateralToken, SyntheticToken
from .ledger import CollateralLedger
from .liquidation import LiquidationEngine
from .models import AccountInformation, CollateralAsset, LiquidationResult
from .oracles import (
    AssetRegistry,
    ManualPriceSource,
    PriceOracleGateway,
    PythPriceSource,
)
from .tokens import InMemoryCollateralToken, InMemorySyntheticToken

logger = logging.getLogger(__name__)


def build_price_source(
    config: AppConfig, clock: Callable[[], float] = time.time
) -> PriceSource:
    """Build the configured price source shared by every collateral asset."""
    provider = config.price_oracle.provider
    if provider == "pyth":
        return PythPriceSource(
            config.price_oracle.pyth,
            feeds={s: c.pyth_feed_id for s, c in config.collateral.items()},
            feed_decimals={s: c.feed_decimals for s, c in config.collateral.items()},
        )
    if provider == "manual":
        return ManualPriceSource(clock)
    raise ValueError(f"Unknown price oracle provider '{provider}'")


def build_registry(config: AppConfig, source: PriceSource) -> AssetRegistry:
    registry = AssetRegistry()
    for symbol, cfg in config.collateral.items():
        registry.register(
            CollateralAsset(
                symbol=symbol,
                decimals=cfg.decimals,
                feed_decimals=cfg.feed_decimals,
                max_staleness_seconds=cfg.max_staleness_seconds,
            ),
            source,
        )
    return registry


class SynthEngine:
    """The synthetic-asset engine built from an ``AppConfig``.

    Collaborators default to the configured price source and in-memory tokens;
    pass real ones to run against other custody or supply implementations.
    """

    def __init__(
        self,
        config: AppConfig,
        price_source: PriceSource | None = None,
        collateral_tokens: dict[str, CollateralToken] | None = None,
        synthetic: SyntheticToken | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        custody = config.engine.custody_account

        if price_source is None:
            price_source = build_price_source(config, clock)
        self.price_source = price_source
        self.registry = build_registry(config, self.price_source)
        self.gateway = PriceOracleGateway(self.registry, clock)
        self.ledger = CollateralLedger()
        self.health = HealthFactorCalculator(self.ledger, self.gateway, config.engine)

        if collateral_tokens is None:
            collateral_tokens = {
                symbol: InMemoryCollateralToken(symbol, custody)
                for symbol in config.collateral
            }
        self.collateral_tokens = collateral_tokens
        self.synthetic = synthetic if synthetic is not None else InMemorySyntheticToken()

        self.controller = MintRedeemController(
            self.ledger,
            self.registry,
            self.health,
            self.collateral_tokens,
            self.synthetic,
            config.engine,
        )
        self.liquidations = LiquidationEngine(
            self.controller,
            self.ledger,
            self.registry,
            self.gateway,
            self.health,
            config.engine,
        )
        logger.info(
            "Engine ready with %d collateral assets: %s",
            len(self.registry),
            ", ".join(self.registry.symbols),
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deposit_collateral(self, user: str, asset: str, amount: int) -> None:
        self.controller.deposit_collateral(user, asset, amount)

    def mint(self, user: str, amount: int) -> None:
        self.controller.mint(user, amount)

    def deposit_collateral_and_mint(
        self, user: str, asset: str, collateral_amount: int, mint_amount: int
    ) -> None:
        self.controller.deposit_collateral_and_mint(
            user, asset, collateral_amount, mint_amount
        )

    def redeem_collateral(self, user: str, asset: str, amount: int) -> None:
        self.controller.redeem_collateral(user, asset, amount)

    def redeem_collateral_for_synthetic(
        self, user: str, asset: str, collateral_amount: int, burn_amount: int
    ) -> None:
        self.controller.redeem_collateral_for_synthetic(
            user, asset, collateral_amount, burn_amount
        )

    def burn(self, user: str, amount: int) -> None:
        self.controller.burn(user, amount)

    def liquidate(
        self, liquidator: str, victim: str, asset: str, debt_to_cover: int
    ) -> LiquidationResult:
        return self.liquidations.liquidate(liquidator, victim, asset, debt_to_cover)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def health_factor(self, user: str) -> int | float:
        return self.health.health_factor(user)

    def account_information(self, user: str) -> AccountInformation:
        return self.health.account_information(user)

    def collateral_balance(self, user: str, asset: str) -> int:
        return self.ledger.balance(user, asset)

    def debt(self, user: str) -> int:
        return self.ledger.debt(user)

    def usd_value(self, asset: str, amount: int) -> int:
        return self.gateway.usd_value(asset, amount)

    def token_amount_from_usd(self, asset: str, usd_amount: int) -> int:
        return self.gateway.token_amount_from_usd(asset, usd_amount)

    async def refresh_prices(self) -> dict[str, tuple[int, float]]:
        """Pull fresh readings when the price source supports it."""
        refresh = getattr(self.price_source, "refresh", None)
        if refresh is None:
            return {}
        return await refresh()
