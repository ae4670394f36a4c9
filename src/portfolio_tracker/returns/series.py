"""Time-weighted and money-weighted return calculations."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
import pandas as pd

from portfolio_tracker.config import ReturnsConfig
from portfolio_tracker.time_utils import year_fraction

logger = logging.getLogger(__name__)

_DERIVATIVE_EPSILON = 1e-12


class SolverStatus(StrEnum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    NUMERICAL_INSTABILITY = "numerical_instability"


@dataclass(slots=True)
class IRRSolution:
    rate: float
    iterations: int
    status: SolverStatus

    @property
    def converged(self) -> bool:
        return self.status == SolverStatus.CONVERGED


def time_weighted_return(period_returns: Sequence[float] | pd.Series) -> float:
    """Geometrically link per-period returns that are already isolated from cash flows."""
    values = [float(r) for r in period_returns]
    if not values:
        return 0.0
    # Seeded with the first period so a single return comes back unchanged.
    twr = values[0]
    for period_return in values[1:]:
        twr = (1.0 + twr) * (1.0 + period_return) - 1.0
    return twr


def period_returns(values: Sequence[float] | pd.Series) -> pd.Series:
    """Simple period-over-period returns of a value curve, first period dropped."""
    series = values if isinstance(values, pd.Series) else pd.Series(values, dtype=float)
    if len(series) < 2:
        return pd.Series(dtype=float)
    return series.astype(float).pct_change().iloc[1:]


def solve_money_weighted_return(
    cash_flows: Sequence[float],
    dates: Sequence[object],
    final_value: float,
    config: ReturnsConfig | None = None,
) -> IRRSolution:
    """
    Newton-Raphson solve of 0 = -final_value + sum(cf_j * (1 + r) ** t_j).

    t_j is the year fraction of dates[j] measured from dates[0]. The solver
    stops early with NUMERICAL_INSTABILITY when the derivative vanishes or the
    iterate leaves the domain 1 + r > 0; the last valid guess is returned.
    """
    cfg = config or ReturnsConfig()
    if len(cash_flows) != len(dates):
        raise ValueError(
            f"cash_flows and dates must align, got {len(cash_flows)} and {len(dates)}"
        )
    if len(cash_flows) == 0:
        return IRRSolution(rate=0.0, iterations=0, status=SolverStatus.CONVERGED)

    flows = np.asarray(cash_flows, dtype=float)
    times = np.asarray([year_fraction(dates[0], d, cfg.days_per_year) for d in dates], dtype=float)

    guess = float(cfg.irr_initial_guess)
    for iteration in range(1, cfg.irr_max_iterations + 1):
        growth = np.power(1.0 + guess, times)
        npv = -float(final_value) + float(np.sum(flows * growth))
        if abs(npv) < cfg.irr_tolerance:
            return IRRSolution(rate=guess, iterations=iteration, status=SolverStatus.CONVERGED)

        derivative = float(np.sum(times * flows * np.power(1.0 + guess, times - 1.0)))
        if abs(derivative) < _DERIVATIVE_EPSILON or not math.isfinite(derivative):
            logger.warning(
                "IRR derivative vanished at iteration %d (guess=%.6f, npv=%.6f)",
                iteration,
                guess,
                npv,
            )
            return IRRSolution(rate=guess, iterations=iteration, status=SolverStatus.NUMERICAL_INSTABILITY)

        candidate = guess - npv / derivative
        if not math.isfinite(candidate) or candidate <= -1.0:
            logger.warning(
                "IRR iterate left the valid domain at iteration %d (candidate=%s)",
                iteration,
                candidate,
            )
            return IRRSolution(rate=guess, iterations=iteration, status=SolverStatus.NUMERICAL_INSTABILITY)
        guess = candidate

    logger.debug("IRR did not reach tolerance in %d iterations", cfg.irr_max_iterations)
    return IRRSolution(rate=guess, iterations=cfg.irr_max_iterations, status=SolverStatus.MAX_ITERATIONS)


def money_weighted_return(
    cash_flows: Sequence[float],
    dates: Sequence[object],
    final_value: float,
    config: ReturnsConfig | None = None,
) -> float:
    """Best-effort money-weighted return (IRR); see solve_money_weighted_return for status."""
    return solve_money_weighted_return(cash_flows, dates, final_value, config).rate
