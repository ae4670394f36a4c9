"""Build a synthetic portfolio and print its dashboard analytics as JSON."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

import numpy as np
import pandas as pd

from portfolio_tracker.analytics import PerformancePeriod
from portfolio_tracker.config import AnalyticsConfig, load_config
from portfolio_tracker.market_data import StaticMarketData, ThrottledMarketData
from portfolio_tracker.planning import ScenarioKind, scenario_analysis
from portfolio_tracker.portfolio import PortfolioService
from portfolio_tracker.storage import InMemoryPortfolioRepository
from portfolio_tracker.types import Asset, AssetClass, ManualAssetValue, PriceBar, Quote, Transaction


def _synthetic_history(symbol_seed: int, start: str, periods: int, start_price: float) -> list[PriceBar]:
    rng = np.random.default_rng(symbol_seed)
    dates = pd.bdate_range(start, periods=periods, tz="UTC")
    closes = start_price * np.exp(np.cumsum(rng.normal(0.0003, 0.012, periods)))
    return [
        PriceBar(date=d.to_pydatetime(), open=c, high=c * 1.005, low=c * 0.995, close=c, volume=1_000_000.0)
        for d, c in zip(dates, closes)
    ]


def build_demo(config: AnalyticsConfig) -> tuple[PortfolioService, dict[str, list[PriceBar]]]:
    repo = InMemoryPortfolioRepository()
    market = StaticMarketData()
    histories = {
        "AAPL": _synthetic_history(1, "2024-01-02", 250, 185.0),
        "MSFT": _synthetic_history(2, "2024-01-02", 250, 370.0),
        "XOM": _synthetic_history(3, "2024-01-02", 250, 100.0),
        config.dashboard.primary_benchmark: _synthetic_history(4, "2024-01-02", 250, 470.0),
    }
    if config.dashboard.secondary_benchmark:
        histories[config.dashboard.secondary_benchmark] = _synthetic_history(5, "2024-01-02", 250, 400.0)
    for symbol, bars in histories.items():
        market.add_history(symbol, bars)
        market.quotes[symbol] = _quote_from_bars(symbol, bars)

    equities = [
        ("AAPL", "Apple Inc.", "Technology", 40.0, 185.0),
        ("MSFT", "Microsoft Corp.", "Technology", 15.0, 372.0),
        ("XOM", "Exxon Mobil Corp.", "Energy", 60.0, 104.0),
    ]
    for ticker, name, sector, shares, price in equities:
        asset = repo.create_asset(Asset(name=name, ticker=ticker, sector=sector, asset_class=AssetClass.EQUITY))
        repo.create_transaction(
            Transaction(asset_id=asset.id, type="buy", shares=shares, price=price, date=pd.Timestamp("2024-01-03", tz="UTC"), commission=1.0)
        )

    house = repo.create_asset(Asset(name="Rental flat", asset_class=AssetClass.REAL_ESTATE, sector="Real Estate", is_manual=True))
    repo.create_manual_value(ManualAssetValue(asset_id=house.id, value=250_000.0, date=pd.Timestamp("2024-01-01", tz="UTC")))
    repo.create_manual_value(ManualAssetValue(asset_id=house.id, value=262_500.0, date=pd.Timestamp("2024-12-01", tz="UTC")))

    service = PortfolioService(
        repository=repo,
        market_data=ThrottledMarketData.from_config(market, config.market_data),
        config=config,
    )
    return service, histories


def _quote_from_bars(symbol: str, bars: list[PriceBar]) -> Quote:
    last, prev = bars[-1], bars[-2]
    return Quote(
        symbol=symbol,
        price=last.close,
        change=last.close - prev.close,
        change_percent=(last.close / prev.close - 1.0) * 100.0,
        previous_close=prev.close,
        last_updated=last.date,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Print portfolio dashboard analytics for a synthetic portfolio.")
    parser.add_argument("--config", default=None, help="Optional analytics YAML config.")
    parser.add_argument("--scenario", choices=[s.value for s in ScenarioKind], default=ScenarioKind.BEAR_MARKET.value)
    parser.add_argument("--period", choices=[p.value for p in PerformancePeriod], default=PerformancePeriod.ONE_YEAR.value)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = load_config(Path(args.config)) if args.config else AnalyticsConfig()
    config.market_data.min_call_interval_seconds = 0.0

    service, histories = build_demo(config)
    closes = pd.DataFrame({sym: [bar.close for bar in bars] for sym, bars in histories.items()})
    returns = closes.pct_change().iloc[1:]
    equity_symbols = ["AAPL", "MSFT", "XOM"]
    portfolio_returns = returns[equity_symbols].mean(axis=1)

    curve = pd.DataFrame({"date": [bar.date for bar in histories["AAPL"]], "value": (closes[equity_symbols].sum(axis=1)).values})
    comparison = service.performance(curve, args.period)
    report = comparison.report

    scenario = scenario_analysis({sym: 1.0 for sym in equity_symbols}, returns[equity_symbols], args.scenario)
    output = {
        "summary": asdict(service.summary(portfolio_returns)),
        "allocation": [asdict(s) for s in service.allocation()],
        "diversification": [asdict(s) for s in service.diversification()],
        "top_holdings": [asdict(h) for h in service.top_holdings()],
        "performance": report.summary,
        "risk": report.risk.to_dict() if report.risk else None,
        "scenario": asdict(scenario),
        "benchmark_return_pct": {
            symbol: float(frame["percentage"].iloc[-1]) if not frame.empty else 0.0
            for symbol, frame in comparison.benchmarks.items()
        },
    }
    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
