"""Service modules"""
from .price_feed_client import PriceFeedClient

__all__ = ["PriceFeedClient"]
