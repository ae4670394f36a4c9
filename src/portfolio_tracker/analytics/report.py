"""Portfolio performance report over a value curve."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd

from portfolio_tracker.config import AnalyticsConfig
from portfolio_tracker.returns.series import time_weighted_return
from portfolio_tracker.risk.metrics import (
    RiskMetrics,
    conditional_value_at_risk,
    drawdown_curve,
    max_drawdown,
    risk_metrics,
    sharpe_ratio,
    value_at_risk,
    volatility,
)
from portfolio_tracker.time_utils import to_utc_timestamp


class PerformancePeriod(StrEnum):
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    THREE_YEARS = "3Y"
    FIVE_YEARS = "5Y"
    ALL = "All"


_PERIOD_OFFSETS: dict[PerformancePeriod, pd.DateOffset] = {
    PerformancePeriod.ONE_MONTH: pd.DateOffset(months=1),
    PerformancePeriod.THREE_MONTHS: pd.DateOffset(months=3),
    PerformancePeriod.ONE_YEAR: pd.DateOffset(years=1),
    PerformancePeriod.THREE_YEARS: pd.DateOffset(years=3),
    PerformancePeriod.FIVE_YEARS: pd.DateOffset(years=5),
}


@dataclass(slots=True)
class PerformanceReport:
    summary: dict[str, float]
    value_curve: pd.DataFrame
    drawdown_curve: pd.Series
    monthly_returns: pd.DataFrame
    risk: RiskMetrics | None
    extras: dict[str, Any]


def period_start(period: PerformancePeriod | str, as_of: object) -> pd.Timestamp | None:
    """First instant of a look-back window ending at as_of; None for the full history."""
    kind = PerformancePeriod(period)
    end = to_utc_timestamp(as_of)
    if kind == PerformancePeriod.ALL:
        return None
    if kind == PerformancePeriod.YEAR_TO_DATE:
        return pd.Timestamp(year=end.year, month=1, day=1, tz="UTC")
    return end - _PERIOD_OFFSETS[kind]


def window_curve(frame: pd.DataFrame, start: pd.Timestamp | None) -> pd.DataFrame:
    if start is None or frame.empty:
        return frame
    return frame.loc[pd.to_datetime(frame["date"], utc=True) >= start]


def _annualize_return(total_return: float, n_periods: int, periods_per_year: int) -> float:
    years = n_periods / periods_per_year
    if years <= 0 or total_return <= -1.0:
        return np.nan
    return float((1.0 + total_return) ** (1.0 / years) - 1.0)


def _monthly_returns(returns: pd.Series) -> pd.DataFrame:
    if returns.empty:
        return pd.DataFrame()
    monthly = (1.0 + returns).resample("ME").prod() - 1.0
    table = monthly.to_frame(name="monthly_return")
    table["year"] = table.index.year
    table["month"] = table.index.month
    return table.pivot(index="year", columns="month", values="monthly_return").sort_index()


def _prepare_curve(frame: pd.DataFrame) -> pd.DataFrame:
    curve = frame.copy()
    curve["date"] = pd.to_datetime(curve["date"], utc=True)
    curve = curve.sort_values("date").set_index("date")
    curve["returns"] = curve["value"].astype(float).pct_change()
    return curve


def compute_performance_report(
    value_curve: pd.DataFrame,
    benchmark_curve: pd.DataFrame | None = None,
    config: AnalyticsConfig | None = None,
    period: PerformancePeriod | str = PerformancePeriod.ALL,
) -> PerformanceReport:
    """
    Compute portfolio performance metrics.

    value_curve required columns:
      date, value
    benchmark_curve (optional) uses the same columns; its returns are aligned
    to the portfolio dates before benchmark-relative metrics are computed.
    Both curves are cut to the look-back period ending at the last portfolio
    date.
    """
    if value_curve.empty:
        raise ValueError("value_curve cannot be empty")
    cfg = config or AnalyticsConfig()
    kind = PerformancePeriod(period)
    start = period_start(kind, pd.to_datetime(value_curve["date"], utc=True).max())
    value_curve = window_curve(value_curve, start)
    periods_per_year = cfg.dashboard.periods_per_year
    risk_free = cfg.risk.risk_free_rate

    curve = _prepare_curve(value_curve)
    returns = curve["returns"].iloc[1:]

    total_return = time_weighted_return(returns)
    annual_vol = volatility(returns) * np.sqrt(periods_per_year)
    annual_return = _annualize_return(total_return, len(returns), periods_per_year)
    risk_free_per_period = risk_free / periods_per_year

    benchmark_risk = None
    if benchmark_curve is not None and not benchmark_curve.empty:
        bench = _prepare_curve(window_curve(benchmark_curve, start))["returns"].iloc[1:]
        benchmark_risk = risk_metrics(returns, bench, risk_free_rate=risk_free_per_period)

    summary = {
        "total_return": total_return,
        "annualized_return": annual_return,
        "volatility": volatility(returns),
        "annualized_volatility": annual_vol,
        "sharpe": sharpe_ratio(float(returns.mean()) if len(returns) else 0.0, risk_free_per_period, volatility(returns)),
        "max_drawdown": max_drawdown(curve["value"]),
        "value_at_risk": value_at_risk(returns, cfg.risk.var_confidence),
        "conditional_value_at_risk": conditional_value_at_risk(returns, cfg.risk.var_confidence),
    }
    return PerformanceReport(
        summary=summary,
        value_curve=curve.reset_index(),
        drawdown_curve=drawdown_curve(curve["value"]),
        monthly_returns=_monthly_returns(returns),
        risk=benchmark_risk,
        extras={
            "period": kind.value,
            "start_value": float(curve["value"].iloc[0]),
            "end_value": float(curve["value"].iloc[-1]),
            "periods": float(len(returns)),
            "returns_series": returns,
        },
    )
