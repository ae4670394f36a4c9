"""Storage package."""

from .repository import InMemoryPortfolioRepository, PortfolioRepository

__all__ = ["InMemoryPortfolioRepository", "PortfolioRepository"]
