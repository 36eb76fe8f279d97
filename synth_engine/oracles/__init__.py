"""Price oracle modules."""
from .gateway import PriceOracleGateway
from .manual import ManualPriceSource
from .pyth import PythPriceSource
from .registry import AssetRegistry, Registration

__all__ = [
    "AssetRegistry",
    "ManualPriceSource",
    "PriceOracleGateway",
    "PythPriceSource",
    "Registration",
]
