"""Return series package."""

from .series import (
    IRRSolution,
    SolverStatus,
    money_weighted_return,
    period_returns,
    solve_money_weighted_return,
    time_weighted_return,
)

__all__ = [
    "IRRSolution",
    "SolverStatus",
    "money_weighted_return",
    "period_returns",
    "solve_money_weighted_return",
    "time_weighted_return",
]
