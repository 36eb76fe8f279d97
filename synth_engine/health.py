"""Health factor calculation."""
from __future__ import annotations

import logging
import math

from .config import EngineConfig
from .errors import HealthFactorBroken
from .fixed_point import PRECISION
from .ledger import CollateralLedger
from .models import AccountInformation
from .oracles.gateway import PriceOracleGateway

logger = logging.getLogger(__name__)


class HealthFactorCalculator:
    """Turn a user's collateral and debt into one solvency ratio.

    The ratio is an 18-decimal int where ``min_health_factor`` (1e18) is the
    lowest safe value. A user without debt has an unbounded health factor,
    returned as ``math.inf``. Nothing is stored: every call re-reads the
    ledger and re-fetches prices.
    """

    def __init__(
        self,
        ledger: CollateralLedger,
        gateway: PriceOracleGateway,
        config: EngineConfig,
    ) -> None:
        self._ledger = ledger
        self._gateway = gateway
        self._config = config

    @property
    def min_health_factor(self) -> int:
        return self._config.min_health_factor

    def calculate_health_factor(
        self, debt: int, collateral_value_usd: int
    ) -> int | float:
        """health_factor = (collateral * threshold / precision) * 1e18 / debt

        Both divisions are floor divisions and each multiplication comes first.
        """
        if debt == 0:
            return math.inf
        margin = (
            collateral_value_usd
            * self._config.liquidation_threshold
            // self._config.liquidation_precision
        )
        return margin * PRECISION // debt

    def account_information(self, user: str) -> AccountInformation:
        debt = self._ledger.debt(user)
        collateral_value = self._ledger.total_value_usd(user, self._gateway)
        return AccountInformation(
            user=user,
            debt=debt,
            collateral_value_usd=collateral_value,
            health_factor=self.calculate_health_factor(debt, collateral_value),
        )

    def health_factor(self, user: str) -> int | float:
        debt = self._ledger.debt(user)
        if debt == 0:
            # no prices needed, and no stale feed can block a debt-free user
            return math.inf
        return self.calculate_health_factor(
            debt, self._ledger.total_value_usd(user, self._gateway)
        )

    def is_healthy(self, health_factor: int | float) -> bool:
        return health_factor >= self._config.min_health_factor

    def require_healthy(self, user: str) -> int | float:
        """Raise HealthFactorBroken if the user is below the minimum."""
        health_factor = self.health_factor(user)
        if not self.is_healthy(health_factor):
            logger.debug("Health factor of %s broken: %s", user, health_factor)
            raise HealthFactorBroken(
                user, health_factor, self._config.min_health_factor
            )
        return health_factor
