from __future__ import annotations

import logging
from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from portfolio_tracker.analytics import PerformancePeriod
from portfolio_tracker.config import AnalyticsConfig
from portfolio_tracker.market_data import StaticMarketData
from portfolio_tracker.portfolio import PortfolioService
from portfolio_tracker.portfolio.dashboard import benchmark_performance
from portfolio_tracker.risk import sharpe_ratio, volatility
from portfolio_tracker.storage import InMemoryPortfolioRepository
from portfolio_tracker.types import (
    Asset,
    AssetClass,
    FundamentalMetrics,
    ManualAssetValue,
    PriceBar,
    Quote,
    Transaction,
)


class FlakyMarketData(StaticMarketData):
    def get_quote(self, ticker: str) -> Quote | None:
        if ticker == "ERR":
            raise ConnectionError("upstream timeout")
        return super().get_quote(ticker)


def _build_repo() -> InMemoryPortfolioRepository:
    repo = InMemoryPortfolioRepository()
    aapl = repo.create_asset(Asset(name="Apple", ticker="AAPL", sector="Technology"))
    msft = repo.create_asset(Asset(name="Microsoft", ticker="MSFT", sector="Technology"))
    flat = repo.create_asset(
        Asset(name="Flat", asset_class=AssetClass.REAL_ESTATE, sector="Real Estate", is_manual=True)
    )
    repo.create_asset(Asset(name="Broken feed", ticker="ERR"))
    day = datetime(2024, 1, 2)
    repo.create_transaction(Transaction(asset_id=aapl.id, type="buy", shares=10, price=100.0, date=day))
    repo.create_transaction(Transaction(asset_id=msft.id, type="buy", shares=5, price=200.0, date=day))
    repo.create_manual_value(ManualAssetValue(asset_id=flat.id, value=1000.0, date=datetime(2024, 1, 1)))
    repo.create_manual_value(ManualAssetValue(asset_id=flat.id, value=1100.0, date=datetime(2024, 6, 1)))
    return repo


def _service() -> PortfolioService:
    market = FlakyMarketData.from_prices({"AAPL": 120.0, "MSFT": 250.0})
    return PortfolioService(repository=_build_repo(), market_data=market)


def test_summary_totals_value_and_gain(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        summary = _service().summary()
    assert summary.total_value == pytest.approx(1200.0 + 1250.0 + 1100.0)
    assert summary.gain_loss == pytest.approx(200.0 + 250.0 + 100.0)
    assert summary.gain_loss_percent == pytest.approx(550.0 / 3000.0 * 100.0)
    assert summary.sharpe_ratio == 0.0
    assert "quote lookup failed for ERR" in caplog.text


def test_summary_annualises_return_series() -> None:
    returns = [0.01, -0.005, 0.02, 0.0]
    summary = _service().summary(returns)
    annual_vol = volatility(returns) * np.sqrt(252)
    assert summary.volatility == pytest.approx(annual_vol * 100.0)
    assert summary.sharpe_ratio == pytest.approx(sharpe_ratio(np.mean(returns) * 252, 0.02, annual_vol))


def test_allocation_and_diversification_percentages() -> None:
    service = _service()
    allocation = service.allocation()
    assert [s.label for s in allocation] == ["equity", "real_estate"]
    assert allocation[0].value == pytest.approx(2450.0)
    assert sum(s.percentage for s in allocation) == pytest.approx(100.0)

    sectors = service.diversification()
    assert [s.label for s in sectors] == ["Technology", "Real Estate"]
    assert sectors[1].percentage == pytest.approx(1100.0 / 3550.0 * 100.0)


def test_top_holdings_ranked_by_value() -> None:
    holdings = _service().top_holdings(limit=2)
    assert [h.symbol for h in holdings] == ["MSFT", "AAPL"]
    assert holdings[0].gain_loss == pytest.approx(250.0)
    assert holdings[0].gain_loss_percent == pytest.approx(25.0)
    assert holdings[1].percentage == pytest.approx(1200.0 / 3550.0 * 100.0)
    assert _service().top_holdings(limit=0) == []


def test_gain_loss_per_asset() -> None:
    service = _service()
    assert service.gain_loss(1).value == pytest.approx(200.0)
    assert service.gain_loss(3).value == pytest.approx(100.0)
    assert service.gain_loss(4).value == 0.0
    with pytest.raises(ValueError):
        service.gain_loss(42)


def test_empty_portfolio_dashboards() -> None:
    service = PortfolioService(repository=InMemoryPortfolioRepository(), market_data=StaticMarketData())
    assert service.total_value() == 0.0
    assert service.allocation() == []
    assert service.top_holdings() == []


def test_benchmark_performance_from_first_close() -> None:
    bars = [
        PriceBar(date=datetime(2024, 1, 3), open=0, high=0, low=0, close=110.0),
        PriceBar(date=datetime(2024, 1, 2), open=0, high=0, low=0, close=100.0),
        PriceBar(date=datetime(2024, 1, 4), open=0, high=0, low=0, close=121.0),
    ]
    frame = benchmark_performance(bars)
    assert list(frame["percentage"]) == pytest.approx([0.0, 10.0, 21.0])

    market = StaticMarketData()
    market.add_history("SPY", bars)
    service = PortfolioService(repository=InMemoryPortfolioRepository(), market_data=market)
    assert list(service.benchmark()["close"]) == [100.0, 110.0, 121.0]
    assert service.benchmark("QQQ").empty


def _daily_bars(seed: int, dates: pd.DatetimeIndex) -> list[PriceBar]:
    closes = 100.0 * np.cumprod(1.0 + np.random.default_rng(seed).normal(0.0005, 0.01, len(dates)))
    return [PriceBar(date=d.to_pydatetime(), open=c, high=c, low=c, close=c) for d, c in zip(dates, closes)]


def test_performance_windows_portfolio_and_both_benchmarks() -> None:
    dates = pd.date_range("2025-01-01", "2026-03-31", freq="D")
    market = StaticMarketData()
    market.add_history("SPY", _daily_bars(1, dates))
    market.add_history("QQQ", _daily_bars(2, dates))
    values = 50_000.0 * np.cumprod(1.0 + np.random.default_rng(3).normal(0.0004, 0.01, len(dates)))
    curve = pd.DataFrame({"date": dates, "value": values})
    service = PortfolioService(repository=InMemoryPortfolioRepository(), market_data=market)

    comparison = service.performance(curve, "3M")
    window_start = pd.Timestamp("2025-12-31", tz="UTC")
    assert comparison.period == PerformancePeriod.THREE_MONTHS
    assert comparison.report.value_curve["date"].iloc[0] == window_start
    assert set(comparison.benchmarks) == {"SPY", "QQQ"}
    for frame in comparison.benchmarks.values():
        assert frame["date"].iloc[0] == window_start
        assert frame["percentage"].iloc[0] == 0.0
    assert comparison.report.risk is not None

    full = service.performance(curve, PerformancePeriod.ALL)
    assert len(full.report.value_curve) == len(dates)
    with pytest.raises(ValueError):
        service.performance(curve, "2W")


def test_performance_skips_missing_secondary_benchmark() -> None:
    config = AnalyticsConfig()
    config.dashboard.secondary_benchmark = None
    curve = pd.DataFrame({"date": pd.date_range("2026-01-01", periods=5, freq="D"), "value": [1.0, 2.0, 3.0, 4.0, 5.0]})
    service = PortfolioService(repository=InMemoryPortfolioRepository(), market_data=StaticMarketData(), config=config)
    comparison = service.performance(curve)
    assert list(comparison.benchmarks) == ["SPY"]
    assert comparison.benchmarks["SPY"].empty
    assert comparison.report.risk is None


def test_refresh_fundamentals_stores_provider_overview() -> None:
    market = StaticMarketData.from_prices({"AAPL": 120.0})
    market.overviews["AAPL"] = FundamentalMetrics(gross_margin=0.44, net_margin=0.25)
    repo = InMemoryPortfolioRepository()
    apple = repo.create_asset(Asset(name="Apple", ticker="AAPL"))
    msft = repo.create_asset(Asset(name="Microsoft", ticker="MSFT"))
    service = PortfolioService(repository=repo, market_data=market)

    stored = service.refresh_fundamentals(apple.id)
    assert stored.asset_id == apple.id
    assert stored.gross_margin == 0.44
    assert stored.last_updated is not None and stored.last_updated.tzinfo is not None

    market.overviews["AAPL"] = FundamentalMetrics(gross_margin=0.46)
    assert service.refresh_fundamentals(apple.id).id == stored.id
    assert repo.fundamentals_for_asset(apple.id).gross_margin == 0.46
    assert service.refresh_fundamentals(msft.id) is None
    with pytest.raises(ValueError):
        service.refresh_fundamentals(99)
