"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_STALENESS_SECONDS = 3 * 60 * 60


@dataclass(frozen=True)
class CollateralAsset:
    """A supported collateral type.

    ``decimals`` is the precision of deposited amounts; ``feed_decimals`` is the
    precision its price source reports in (8 for most USD feeds).
    """

    symbol: str
    decimals: int = 18
    feed_decimals: int = 8
    max_staleness_seconds: int = DEFAULT_MAX_STALENESS_SECONDS


@dataclass(frozen=True)
class PriceQuote:
    """A validated price normalized to 18 decimals."""

    asset: str
    price: int
    observed_at: float


@dataclass(frozen=True)
class AccountInformation:
    """Snapshot of a user's solvency, recomputed on every read."""

    user: str
    debt: int
    collateral_value_usd: int
    health_factor: int | float


@dataclass(frozen=True)
class LiquidationResult:
    """Outcome of a successful liquidation."""

    liquidator: str
    victim: str
    asset: str
    debt_covered: int
    collateral_seized: int
    bonus_collateral: int
    starting_health_factor: int | float
    ending_health_factor: int | float
