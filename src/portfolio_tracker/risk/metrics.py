"""Risk and risk-adjusted performance metrics over return series."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

SeriesLike = Sequence[float] | pd.Series | np.ndarray

DEFAULT_RISK_FREE_RATE = 0.02


@dataclass(slots=True)
class RiskMetrics:
    alpha: float = 0.0
    beta: float = 0.0
    sharpe_ratio: float = 0.0
    treynor_ratio: float = 0.0
    information_ratio: float = 0.0
    tracking_error: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _as_array(values: SeriesLike) -> np.ndarray:
    return np.asarray(values, dtype=float).ravel()


def _safe_ratio(numerator: float, denominator: float) -> float:
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    return float(numerator / denominator)


def volatility(returns: SeriesLike) -> float:
    """Sample standard deviation (n - 1 denominator); zero for fewer than two points."""
    arr = _as_array(returns)
    if arr.size <= 1:
        return 0.0
    return float(np.std(arr, ddof=1))


def value_at_risk(returns: SeriesLike, confidence: float = 0.95) -> float:
    """Historical-simulation VaR reported as a positive loss magnitude."""
    arr = np.sort(_as_array(returns))
    if arr.size == 0:
        return 0.0
    index = min(int(math.floor((1.0 - confidence) * arr.size)), arr.size - 1)
    return float(-arr[max(index, 0)])


def conditional_value_at_risk(returns: SeriesLike, confidence: float = 0.95) -> float:
    """Expected shortfall: mean of returns at or below the VaR return, as a loss."""
    arr = _as_array(returns)
    if arr.size == 0:
        return 0.0
    cutoff = -value_at_risk(arr, confidence)
    tail = arr[arr <= cutoff]
    return float(-tail.mean())


def drawdown_curve(values: SeriesLike) -> pd.Series:
    """Fractional decline from the running peak at each point (0.0 at new highs)."""
    series = values.astype(float) if isinstance(values, pd.Series) else pd.Series(_as_array(values))
    running_max = series.cummax()
    curve = (running_max - series) / running_max.where(running_max > 0)
    return curve.fillna(0.0).clip(lower=0.0)


def max_drawdown(values: SeriesLike) -> float:
    """Largest peak-to-trough decline as a fraction of the peak."""
    arr = _as_array(values)
    if arr.size < 2:
        return 0.0
    return float(drawdown_curve(arr).max())


def sharpe_ratio(
    portfolio_return: float,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    std_dev: float = 0.0,
) -> float:
    return _safe_ratio(portfolio_return - risk_free_rate, std_dev)


def _paired(returns: SeriesLike, benchmark_returns: SeriesLike) -> tuple[np.ndarray, np.ndarray]:
    if isinstance(returns, pd.Series) and isinstance(benchmark_returns, pd.Series):
        frame = pd.concat([returns, benchmark_returns], axis=1, join="inner").dropna()
        return frame.iloc[:, 0].to_numpy(dtype=float), frame.iloc[:, 1].to_numpy(dtype=float)
    r = _as_array(returns)
    b = _as_array(benchmark_returns)
    n = min(r.size, b.size)
    return r[:n], b[:n]


def risk_metrics(
    returns: SeriesLike,
    benchmark_returns: SeriesLike,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
) -> RiskMetrics:
    """
    Benchmark-relative risk statistics.

    Timestamped pandas inputs are aligned on their index; plain sequences are
    truncated to the shorter length. Any ratio whose denominator is zero
    degrades to 0.0.
    """
    r, b = _paired(returns, benchmark_returns)
    if r.size < 2:
        return RiskMetrics()

    mean_r = float(r.mean())
    mean_b = float(b.mean())
    std_r = volatility(r)
    std_b = volatility(b)

    beta = 0.0
    if std_r > 0 and std_b > 0:
        correlation = float(np.corrcoef(r, b)[0, 1])
        if math.isfinite(correlation):
            beta = correlation * std_r / std_b

    tracking_error = volatility(r - b)
    return RiskMetrics(
        alpha=mean_r - (risk_free_rate + beta * (mean_b - risk_free_rate)),
        beta=beta,
        sharpe_ratio=sharpe_ratio(mean_r, risk_free_rate, std_r),
        treynor_ratio=_safe_ratio(mean_r - risk_free_rate, beta),
        information_ratio=_safe_ratio(mean_r - mean_b, tracking_error),
        tracking_error=tracking_error,
    )
