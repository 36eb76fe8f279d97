"""Liquidation engine — third parties repay unsafe debt and seize collateral."""
from __future__ import annotations

import logging

from .config import EngineConfig
from .controller import MintRedeemController
from .errors import HealthFactorNotImproved, HealthFactorOk
from .fixed_point import to_display
from .guards import require_positive
from .health import HealthFactorCalculator
from .ledger import CollateralLedger
from .models import LiquidationResult
from .oracles.gateway import PriceOracleGateway
from .oracles.registry import AssetRegistry
from .transaction import atomic

logger = logging.getLogger(__name__)


class LiquidationEngine:
    """Let any actor cover an under-collateralized user's debt.

    The liquidator pays ``debt_to_cover`` of the synthetic asset (burned) and
    receives collateral worth that much plus ``liquidation_bonus`` percent.
    """

    def __init__(
        self,
        controller: MintRedeemController,
        ledger: CollateralLedger,
        registry: AssetRegistry,
        gateway: PriceOracleGateway,
        health: HealthFactorCalculator,
        config: EngineConfig,
    ) -> None:
        self._controller = controller
        self._ledger = ledger
        self._registry = registry
        self._gateway = gateway
        self._health = health
        self._config = config

    def seizure_amount(self, asset: str, debt_to_cover: int) -> tuple[int, int]:
        """Collateral owed for ``debt_to_cover``: (base amount, bonus amount)."""
        base = self._gateway.token_amount_from_usd(asset, debt_to_cover)
        bonus = (
            base * self._config.liquidation_bonus // self._config.liquidation_precision
        )
        return base, bonus

    def liquidate(
        self, liquidator: str, victim: str, asset: str, debt_to_cover: int
    ) -> LiquidationResult:
        require_positive(debt_to_cover, "liquidate")
        self._registry.lookup(asset)

        with atomic("liquidate", self._controller.stores()) as scope:
            starting = self._health.health_factor(victim)
            if self._health.is_healthy(starting):
                raise HealthFactorOk(victim, starting, self._config.min_health_factor)

            base, bonus = self.seizure_amount(asset, debt_to_cover)
            seized = base + bonus

            self._ledger.reduce_debt(victim, debt_to_cover)

            outcome: dict[str, int | float] = {}

            def guard() -> None:
                ending = self._health.health_factor(victim)
                if ending < starting:
                    raise HealthFactorNotImproved(victim, starting, ending)
                self._health.require_healthy(liquidator)
                outcome["ending"] = ending

            self._controller._redeem_collateral(
                scope,
                victim,
                liquidator,
                asset,
                seized,
                guard,
                collect=lambda: self._controller._burn_synthetic(
                    scope, liquidator, debt_to_cover
                ),
            )

        result = LiquidationResult(
            liquidator=liquidator,
            victim=victim,
            asset=asset,
            debt_covered=debt_to_cover,
            collateral_seized=seized,
            bonus_collateral=bonus,
            starting_health_factor=starting,
            ending_health_factor=outcome["ending"],
        )
        logger.info(
            "%s liquidated %s: covered %s debt, seized %d %s (bonus %d), "
            "health factor %s -> %s",
            liquidator,
            victim,
            to_display(debt_to_cover),
            seized,
            asset,
            bonus,
            to_display(starting),
            to_display(result.ending_health_factor),
        )
        return result
