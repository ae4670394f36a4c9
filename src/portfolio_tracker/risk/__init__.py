"""Risk metrics package."""

from .metrics import (
    RiskMetrics,
    conditional_value_at_risk,
    drawdown_curve,
    max_drawdown,
    risk_metrics,
    sharpe_ratio,
    value_at_risk,
    volatility,
)

__all__ = [
    "RiskMetrics",
    "conditional_value_at_risk",
    "drawdown_curve",
    "max_drawdown",
    "risk_metrics",
    "sharpe_ratio",
    "value_at_risk",
    "volatility",
]
