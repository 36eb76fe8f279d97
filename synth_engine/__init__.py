"""Over-collateralized synthetic-asset engine."""
from .config import AppConfig, load_config
from .engine import SynthEngine
from .errors import (
    BurnExceedsDebt,
    BurnFailed,
    EngineError,
    HealthFactorBroken,
    HealthFactorNotImproved,
    HealthFactorOk,
    InsufficientCollateral,
    InvalidPrice,
    MintFailed,
    StalePrice,
    TransferFailed,
    UnknownAsset,
    ZeroAmount,
)

__all__ = [
    "AppConfig",
    "BurnExceedsDebt",
    "BurnFailed",
    "EngineError",
    "HealthFactorBroken",
    "HealthFactorNotImproved",
    "HealthFactorOk",
    "InsufficientCollateral",
    "InvalidPrice",
    "MintFailed",
    "StalePrice",
    "SynthEngine",
    "TransferFailed",
    "UnknownAsset",
    "ZeroAmount",
    "load_config",
]
