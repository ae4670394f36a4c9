from __future__ import annotations

from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from portfolio_tracker.analytics import PerformancePeriod, compute_performance_report, period_start


def _curve(seed: int, periods: int = 120) -> pd.DataFrame:
    dates = pd.date_range("2026-01-01", periods=periods, freq="D", tz="UTC")
    returns = pd.Series(np.random.default_rng(seed).normal(0.0005, 0.01, periods))
    values = 100_000 * (1 + returns).cumprod()
    return pd.DataFrame({"date": dates, "value": values.values})


def test_compute_performance_report_outputs_required_metrics() -> None:
    report = compute_performance_report(_curve(1), benchmark_curve=_curve(2))
    required = {
        "total_return",
        "annualized_return",
        "volatility",
        "annualized_volatility",
        "sharpe",
        "max_drawdown",
        "value_at_risk",
        "conditional_value_at_risk",
    }
    assert required.issubset(report.summary.keys())
    assert report.risk is not None
    assert len(report.drawdown_curve) == 120
    assert len(report.extras["returns_series"]) == 119
    assert not report.monthly_returns.empty


def test_report_total_return_matches_value_curve() -> None:
    curve = pd.DataFrame(
        {
            "date": pd.date_range("2026-01-01", periods=4, freq="D", tz="UTC"),
            "value": [100.0, 120.0, 90.0, 110.0],
        }
    )
    report = compute_performance_report(curve.iloc[::-1])
    assert report.summary["total_return"] == pytest.approx(0.10)
    assert report.summary["max_drawdown"] == pytest.approx(0.25)
    assert report.risk is None


def test_report_rejects_empty_curve() -> None:
    with pytest.raises(ValueError):
        compute_performance_report(pd.DataFrame(columns=["date", "value"]))


def test_period_start_for_each_look_back() -> None:
    as_of = datetime(2026, 3, 31)
    assert period_start("1M", as_of) == pd.Timestamp("2026-02-28", tz="UTC")
    assert period_start(PerformancePeriod.THREE_MONTHS, as_of) == pd.Timestamp("2025-12-31", tz="UTC")
    assert period_start("YTD", as_of) == pd.Timestamp("2026-01-01", tz="UTC")
    assert period_start("5Y", as_of) == pd.Timestamp("2021-03-31", tz="UTC")
    assert period_start("All", as_of) is None
    with pytest.raises(ValueError):
        period_start("2W", as_of)


def test_report_period_cuts_value_and_benchmark_curves() -> None:
    dates = pd.date_range("2025-11-01", "2026-02-10", freq="D", tz="UTC")
    values = np.linspace(100.0, 200.0, len(dates))
    curve = pd.DataFrame({"date": dates, "value": values})
    bench = pd.DataFrame({"date": dates, "value": values * 2.0})

    report = compute_performance_report(curve, benchmark_curve=bench, period="YTD")
    ytd = curve[curve["date"] >= pd.Timestamp("2026-01-01", tz="UTC")]
    assert report.extras["period"] == "YTD"
    assert report.value_curve["date"].iloc[0] == pd.Timestamp("2026-01-01", tz="UTC")
    assert report.summary["total_return"] == pytest.approx(ytd["value"].iloc[-1] / ytd["value"].iloc[0] - 1.0)
    assert report.risk.beta == pytest.approx(1.0)
    assert report.risk.tracking_error == pytest.approx(0.0, abs=1e-12)
