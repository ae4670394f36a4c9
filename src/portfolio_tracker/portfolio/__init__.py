"""Portfolio dashboard package."""

from .dashboard import (
    AllocationSlice,
    PortfolioSummary,
    TopHolding,
    asset_allocation,
    benchmark_performance,
    manual_gain_loss,
    portfolio_summary,
    sector_diversification,
    top_holdings,
)
from .service import PerformanceComparison, PortfolioService

__all__ = [
    "AllocationSlice",
    "PerformanceComparison",
    "PortfolioService",
    "PortfolioSummary",
    "TopHolding",
    "asset_allocation",
    "benchmark_performance",
    "manual_gain_loss",
    "portfolio_summary",
    "sector_diversification",
    "top_holdings",
]
