"""Protocol interfaces for the engine's external collaborators."""
from .price_source import PriceSource
from .revertible import Revertible
from .tokens import CollateralToken, SyntheticToken

__all__ = ["CollateralToken", "PriceSource", "Revertible", "SyntheticToken"]
