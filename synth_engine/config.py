"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .fixed_point import PRECISION
from .models import DEFAULT_MAX_STALENESS_SECONDS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    liquidation_threshold: int = 50
    liquidation_precision: int = 100
    liquidation_bonus: int = 10
    min_health_factor: int = PRECISION
    custody_account: str = "engine"


@dataclass(frozen=True)
class CollateralConfig:
    decimals: int = 18
    feed_decimals: int = 8
    max_staleness_seconds: int = DEFAULT_MAX_STALENESS_SECONDS
    pyth_feed_id: str = ""


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    timeout: int = 30


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    pyth: PythConfig = field(default_factory=PythConfig)


@dataclass(frozen=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    collateral: dict[str, CollateralConfig] = field(default_factory=dict)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_engine(raw: dict[str, Any]) -> EngineConfig:
    return EngineConfig(
        liquidation_threshold=int(raw.get("liquidation_threshold", 50)),
        liquidation_precision=int(raw.get("liquidation_precision", 100)),
        liquidation_bonus=int(raw.get("liquidation_bonus", 10)),
        min_health_factor=int(raw.get("min_health_factor", PRECISION)),
        custody_account=str(raw.get("custody_account", "engine")),
    )


def _build_collateral(raw: dict[str, Any]) -> dict[str, CollateralConfig]:
    collateral: dict[str, CollateralConfig] = {}
    for symbol, cfg in raw.items():
        cfg = cfg or {}
        collateral[symbol] = CollateralConfig(
            decimals=int(cfg.get("decimals", 18)),
            feed_decimals=int(cfg.get("feed_decimals", 8)),
            max_staleness_seconds=int(
                cfg.get("max_staleness_seconds", DEFAULT_MAX_STALENESS_SECONDS)
            ),
            pyth_feed_id=str(cfg.get("pyth_feed_id", "")),
        )
    return collateral


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {}) or {}
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            timeout=int(pyth_raw.get("timeout", PythConfig.timeout)),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        engine=_build_engine(raw.get("engine", {}) or {}),
        collateral=_build_collateral(raw.get("collateral", {}) or {}),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {}) or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    engine = cfg.engine
    if engine.liquidation_precision <= 0:
        raise ValueError("liquidation_precision must be positive")
    if not 0 < engine.liquidation_threshold <= engine.liquidation_precision:
        raise ValueError(
            "liquidation_threshold must be in (0, liquidation_precision]"
        )
    if engine.liquidation_bonus < 0:
        raise ValueError("liquidation_bonus cannot be negative")
    if engine.min_health_factor <= 0:
        raise ValueError("min_health_factor must be positive")
    if not engine.custody_account:
        raise ValueError("custody_account cannot be empty")

    if not cfg.collateral:
        raise ValueError("At least one collateral asset must be configured")

    if cfg.price_oracle.provider not in ("pyth", "manual"):
        raise ValueError(
            f"Unknown price oracle provider '{cfg.price_oracle.provider}'"
        )

    for symbol, asset in cfg.collateral.items():
        if not 0 <= asset.decimals <= 18:
            raise ValueError(f"Collateral '{symbol}' decimals must be 0..18")
        if not 0 <= asset.feed_decimals <= 18:
            raise ValueError(f"Collateral '{symbol}' feed_decimals must be 0..18")
        if asset.max_staleness_seconds <= 0:
            raise ValueError(
                f"Collateral '{symbol}' max_staleness_seconds must be positive"
            )
        if cfg.price_oracle.provider == "pyth" and not asset.pyth_feed_id:
            raise ValueError(f"Collateral '{symbol}' has no pyth_feed_id")
