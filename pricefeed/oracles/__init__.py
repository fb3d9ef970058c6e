"""Oracle readers."""
from .multi_price import MultiPriceOracle

__all__ = ["MultiPriceOracle"]
