"""Market data collaborator package."""

from .providers import MarketDataProvider, RateLimiter, StaticMarketData, ThrottledMarketData

__all__ = ["MarketDataProvider", "RateLimiter", "StaticMarketData", "ThrottledMarketData"]
