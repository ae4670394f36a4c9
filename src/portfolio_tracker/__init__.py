"""Portfolio Tracker analytics package."""

from .config import (
    AnalyticsConfig,
    DashboardConfig,
    DividendConfig,
    MarketDataConfig,
    ReturnsConfig,
    RiskConfig,
    TaxConfig,
)

__all__ = [
    "AnalyticsConfig",
    "DashboardConfig",
    "DividendConfig",
    "MarketDataConfig",
    "ReturnsConfig",
    "RiskConfig",
    "TaxConfig",
]
