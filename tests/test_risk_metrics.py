from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from portfolio_tracker.risk import (
    RiskMetrics,
    conditional_value_at_risk,
    drawdown_curve,
    max_drawdown,
    risk_metrics,
    sharpe_ratio,
    value_at_risk,
    volatility,
)


def test_volatility_edge_cases() -> None:
    assert volatility([]) == 0.0
    assert volatility([0.3]) == 0.0
    assert volatility([1, 1, 1]) == 0.0
    assert volatility([1, -1]) == pytest.approx(math.sqrt(2))


def test_max_drawdown_tracks_running_peak() -> None:
    assert max_drawdown([100, 120, 90, 110]) == pytest.approx(0.25)
    assert max_drawdown([100]) == 0.0
    assert max_drawdown([100, 110, 125]) == 0.0


def test_drawdown_curve_matches_peak_declines() -> None:
    curve = drawdown_curve([100, 120, 90, 110])
    assert list(curve) == pytest.approx([0.0, 0.0, 0.25, 10 / 120])


def test_value_at_risk_historical_simulation() -> None:
    returns = [0.03, -0.02, 0.0, -0.05, 0.01]
    assert value_at_risk(returns, 0.95) == pytest.approx(0.05)
    assert value_at_risk([], 0.95) == 0.0
    assert value_at_risk(returns, 0.0) == pytest.approx(-0.03)


def test_conditional_value_at_risk_averages_tail() -> None:
    assert conditional_value_at_risk([-0.05, -0.02, 0.0, 0.01, 0.03], 0.95) == pytest.approx(0.05)
    assert conditional_value_at_risk([], 0.95) == 0.0


def test_sharpe_ratio_degrades_to_zero() -> None:
    assert sharpe_ratio(0.12, 0.02, 0.2) == pytest.approx(0.5)
    assert sharpe_ratio(0.12, 0.02, 0.0) == 0.0


def test_risk_metrics_against_itself() -> None:
    r = [0.01, 0.02, -0.01, 0.03]
    metrics = risk_metrics(r, r, risk_free_rate=0.0)
    assert metrics.beta == pytest.approx(1.0)
    assert metrics.alpha == pytest.approx(0.0, abs=1e-12)
    assert metrics.tracking_error == 0.0
    assert metrics.information_ratio == 0.0
    assert metrics.treynor_ratio == pytest.approx(0.0125)


def test_risk_metrics_with_levered_benchmark() -> None:
    bench = np.array([0.01, -0.02, 0.03, 0.0])
    metrics = risk_metrics(2 * bench, bench, risk_free_rate=0.0)
    assert metrics.beta == pytest.approx(2.0)
    assert metrics.treynor_ratio == pytest.approx(0.005)
    assert metrics.sharpe_ratio == pytest.approx(0.01 / volatility(2 * bench))


def test_risk_metrics_flat_benchmark_guards_beta() -> None:
    r = [0.01, 0.02, -0.01, 0.03]
    metrics = risk_metrics(r, [0.01] * 4, risk_free_rate=0.02)
    assert metrics.beta == 0.0
    assert metrics.treynor_ratio == 0.0
    assert metrics.alpha == pytest.approx(0.0125 - 0.02)
    assert metrics.information_ratio == pytest.approx((0.0125 - 0.01) / volatility(r))


def test_risk_metrics_requires_two_points() -> None:
    assert risk_metrics([0.01], [0.02]) == RiskMetrics()
    assert risk_metrics([], []) == RiskMetrics()


def test_risk_metrics_aligns_timestamped_series() -> None:
    index = pd.date_range("2024-01-01", periods=5, freq="D", tz="UTC")
    bench = pd.Series([0.01, -0.02, 0.03, 0.0, 0.02], index=index)
    portfolio = (2 * bench).iloc[1:4]
    metrics = risk_metrics(portfolio, bench, risk_free_rate=0.0)
    assert metrics.beta == pytest.approx(2.0)


def test_risk_metrics_is_idempotent() -> None:
    rng = np.random.default_rng(7)
    r = rng.normal(0.001, 0.01, 50)
    b = rng.normal(0.0005, 0.008, 50)
    assert risk_metrics(r, b) == risk_metrics(r, b)
