"""Position and valuation package."""

from .calculator import (
    asset_value,
    average_cost,
    build_position,
    gain_loss,
    latest_manual_value,
    portfolio_value,
    shares_held,
)

__all__ = [
    "asset_value",
    "average_cost",
    "build_position",
    "gain_loss",
    "latest_manual_value",
    "portfolio_value",
    "shares_held",
]
