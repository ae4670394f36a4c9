"""Portfolio service wiring repository, market data and analytics."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

import pandas as pd

from portfolio_tracker.analytics.report import (
    PerformancePeriod,
    PerformanceReport,
    compute_performance_report,
    period_start,
)
from portfolio_tracker.config import AnalyticsConfig
from portfolio_tracker.market_data.providers import MarketDataProvider
from portfolio_tracker.portfolio.dashboard import (
    AllocationSlice,
    PortfolioSummary,
    TopHolding,
    asset_allocation,
    benchmark_performance,
    manual_gain_loss,
    portfolio_summary,
    sector_diversification,
    top_holdings,
)
from portfolio_tracker.positions.calculator import gain_loss, portfolio_value
from portfolio_tracker.storage.repository import PortfolioRepository
from portfolio_tracker.time_utils import now_utc, to_utc_timestamp
from portfolio_tracker.types import Asset, FundamentalMetrics, GainLoss, ManualAssetValue, Quote, Transaction

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PerformanceComparison:
    period: PerformancePeriod
    report: PerformanceReport
    benchmarks: dict[str, pd.DataFrame]


class PortfolioService:
    """Serve dashboard aggregations from injected storage and market data."""

    def __init__(
        self,
        repository: PortfolioRepository,
        market_data: MarketDataProvider,
        config: AnalyticsConfig | None = None,
    ) -> None:
        self.repository = repository
        self.market_data = market_data
        self.config = config or AnalyticsConfig()

    def _snapshot(self) -> tuple[list[Asset], list[Transaction], dict[str, Quote], list[ManualAssetValue]]:
        assets = self.repository.list_assets()
        return (
            assets,
            self.repository.list_transactions(),
            self.fetch_quotes(assets),
            self.repository.list_manual_values(),
        )

    def fetch_quotes(self, assets: Sequence[Asset]) -> dict[str, Quote]:
        """Quote every market-priced ticker once; failed lookups count as missing."""
        quotes: dict[str, Quote] = {}
        for asset in assets:
            if asset.is_manual or not asset.ticker or asset.ticker in quotes:
                continue
            try:
                quote = self.market_data.get_quote(asset.ticker)
            except Exception as exc:
                logger.warning("quote lookup failed for %s: %s", asset.ticker, exc)
                continue
            if quote is None:
                logger.info("no quote available for %s", asset.ticker)
                continue
            quotes[asset.ticker] = quote
        return quotes

    def total_value(self) -> float:
        return portfolio_value(*self._snapshot())

    def summary(self, returns: Sequence[float] | pd.Series | None = None) -> PortfolioSummary:
        return portfolio_summary(
            *self._snapshot(),
            returns=returns,
            risk_free_rate=self.config.risk.risk_free_rate,
            periods_per_year=self.config.dashboard.periods_per_year,
        )

    def allocation(self) -> list[AllocationSlice]:
        return asset_allocation(*self._snapshot())

    def diversification(self) -> list[AllocationSlice]:
        return sector_diversification(*self._snapshot())

    def top_holdings(self, limit: int | None = None) -> list[TopHolding]:
        return top_holdings(*self._snapshot(), limit=limit if limit is not None else self.config.dashboard.top_holdings_limit)

    def gain_loss(self, asset_id: int) -> GainLoss:
        asset = self.repository.get_asset(asset_id)
        if asset is None:
            raise ValueError(f"unknown asset id {asset_id}")
        if asset.is_manual:
            result, _ = manual_gain_loss(asset_id, self.repository.manual_values_for_asset(asset_id))
            return result
        quotes = self.fetch_quotes([asset])
        if asset.ticker not in quotes:
            return GainLoss()
        return gain_loss(self.repository.transactions_for_asset(asset_id), quotes[asset.ticker].price)

    def benchmark(self, symbol: str | None = None) -> pd.DataFrame:
        ticker = symbol or self.config.dashboard.primary_benchmark
        return benchmark_performance(self.market_data.get_history(ticker))

    def performance(
        self,
        value_curve: pd.DataFrame,
        period: PerformancePeriod | str = PerformancePeriod.ONE_YEAR,
    ) -> PerformanceComparison:
        """
        Windowed portfolio report beside the configured benchmarks.

        Benchmark percentages are rebased to their first close inside the
        window; the primary benchmark also feeds the report's risk metrics.
        """
        kind = PerformancePeriod(period)
        if value_curve.empty:
            raise ValueError("value_curve cannot be empty")
        start = period_start(kind, pd.to_datetime(value_curve["date"], utc=True).max())
        dashboard = self.config.dashboard
        benchmarks: dict[str, pd.DataFrame] = {}
        for symbol in (dashboard.primary_benchmark, dashboard.secondary_benchmark):
            if not symbol or symbol in benchmarks:
                continue
            bars = self.market_data.get_history(symbol)
            if start is not None:
                bars = [bar for bar in bars if to_utc_timestamp(bar.date) >= start]
            benchmarks[symbol] = benchmark_performance(bars)

        primary = benchmarks[dashboard.primary_benchmark]
        benchmark_curve = None if primary.empty else primary.rename(columns={"close": "value"})[["date", "value"]]
        report = compute_performance_report(value_curve, benchmark_curve, config=self.config, period=kind)
        return PerformanceComparison(period=kind, report=report, benchmarks=benchmarks)

    def refresh_fundamentals(self, asset_id: int) -> FundamentalMetrics | None:
        """Store the provider overview of a market asset as its fundamentals."""
        asset = self.repository.get_asset(asset_id)
        if asset is None:
            raise ValueError(f"unknown asset id {asset_id}")
        if asset.is_manual or not asset.ticker:
            return None
        try:
            overview = self.market_data.get_overview(asset.ticker)
        except Exception as exc:
            logger.warning("overview lookup failed for %s: %s", asset.ticker, exc)
            return None
        if overview is None:
            logger.info("no overview available for %s", asset.ticker)
            return None
        return self.repository.save_fundamentals(
            replace(overview, asset_id=asset_id, id=None, last_updated=now_utc())
        )
