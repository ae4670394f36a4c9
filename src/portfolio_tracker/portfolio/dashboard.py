"""Dashboard aggregations: summary, allocation, diversification, top holdings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from portfolio_tracker.positions.calculator import asset_value, average_cost, gain_loss, shares_held
from portfolio_tracker.risk.metrics import sharpe_ratio, volatility
from portfolio_tracker.time_utils import to_utc_timestamp
from portfolio_tracker.types import Asset, GainLoss, ManualAssetValue, PriceBar, Quote, Transaction

UNCLASSIFIED_SECTOR = "Other"


@dataclass(slots=True)
class PortfolioSummary:
    total_value: float
    gain_loss: float
    gain_loss_percent: float
    sharpe_ratio: float
    volatility: float


@dataclass(slots=True)
class AllocationSlice:
    label: str
    value: float
    percentage: float


@dataclass(slots=True)
class TopHolding:
    asset_id: int | None
    symbol: str
    name: str
    value: float
    gain_loss: float
    gain_loss_percent: float
    percentage: float


def manual_gain_loss(asset_id: int | None, manual_values: Sequence[ManualAssetValue]) -> tuple[GainLoss, float]:
    """Change between the earliest and latest valuation, and the earliest value as basis."""
    entries = sorted(
        (v for v in manual_values if v.asset_id == asset_id),
        key=lambda v: to_utc_timestamp(v.date),
    )
    if len(entries) < 2:
        basis = float(entries[0].value) if entries else 0.0
        return GainLoss(), basis
    basis = float(entries[0].value)
    change = float(entries[-1].value) - basis
    percentage = change / basis * 100.0 if basis > 0 else 0.0
    return GainLoss(value=change, percentage=percentage), basis


def _asset_gain_loss(
    asset: Asset,
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
) -> tuple[GainLoss, float]:
    if asset.is_manual:
        return manual_gain_loss(asset.id, manual_values)
    if not asset.ticker or asset.ticker not in quotes:
        return GainLoss(), 0.0
    history = [t for t in transactions if t.asset_id == asset.id]
    shares = shares_held(history)
    avg = average_cost(history)
    basis = avg * shares if shares > 0 and avg > 0 else 0.0
    return gain_loss(history, quotes[asset.ticker].price), basis


def _valuation_frame(
    assets: Sequence[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
) -> pd.DataFrame:
    rows = []
    for asset in assets:
        gl, basis = _asset_gain_loss(asset, transactions, quotes, manual_values)
        rows.append(
            {
                "asset_id": asset.id,
                "symbol": asset.ticker or asset.name,
                "name": asset.name,
                "asset_class": str(asset.asset_class),
                "sector": asset.sector or UNCLASSIFIED_SECTOR,
                "value": asset_value(asset, transactions, quotes, manual_values),
                "gain_loss": gl.value,
                "gain_loss_percent": gl.percentage,
                "cost_basis": basis,
            }
        )
    columns = ["asset_id", "symbol", "name", "asset_class", "sector", "value", "gain_loss", "gain_loss_percent", "cost_basis"]
    return pd.DataFrame(rows, columns=columns)


def portfolio_summary(
    assets: Sequence[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
    returns: Sequence[float] | pd.Series | None = None,
    risk_free_rate: float = 0.02,
    periods_per_year: int = 252,
) -> PortfolioSummary:
    """
    Headline dashboard numbers.

    Sharpe and volatility are annualised from the optional period return
    series; volatility is reported in percent. Without returns both are zero.
    """
    frame = _valuation_frame(assets, transactions, quotes, manual_values)
    total_value = float(frame["value"].sum())
    total_gain = float(frame["gain_loss"].sum())
    total_basis = float(frame["cost_basis"].sum())

    annual_vol = 0.0
    sharpe = 0.0
    if returns is not None and len(returns) > 1:
        annual_vol = volatility(returns) * float(np.sqrt(periods_per_year))
        annual_return = float(np.mean(np.asarray(returns, dtype=float))) * periods_per_year
        sharpe = sharpe_ratio(annual_return, risk_free_rate, annual_vol)

    return PortfolioSummary(
        total_value=total_value,
        gain_loss=total_gain,
        gain_loss_percent=total_gain / total_basis * 100.0 if total_basis > 0 else 0.0,
        sharpe_ratio=sharpe,
        volatility=annual_vol * 100.0,
    )


def _grouped_slices(frame: pd.DataFrame, column: str) -> list[AllocationSlice]:
    positive = frame.loc[frame["value"] > 0]
    total = float(positive["value"].sum())
    if total <= 0:
        return []
    grouped = positive.groupby(column)["value"].sum().sort_values(ascending=False)
    return [
        AllocationSlice(label=str(label), value=float(value), percentage=float(value / total * 100.0))
        for label, value in grouped.items()
    ]


def asset_allocation(
    assets: Sequence[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
) -> list[AllocationSlice]:
    """Value share per asset class; non-positive holdings are left out."""
    return _grouped_slices(_valuation_frame(assets, transactions, quotes, manual_values), "asset_class")


def sector_diversification(
    assets: Sequence[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
) -> list[AllocationSlice]:
    return _grouped_slices(_valuation_frame(assets, transactions, quotes, manual_values), "sector")


def top_holdings(
    assets: Sequence[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
    limit: int = 5,
) -> list[TopHolding]:
    frame = _valuation_frame(assets, transactions, quotes, manual_values)
    positive = frame.loc[frame["value"] > 0]
    total = float(positive["value"].sum())
    if total <= 0:
        return []
    ranked = positive.sort_values("value", ascending=False).head(limit)
    return [
        TopHolding(
            asset_id=None if pd.isna(row.asset_id) else int(row.asset_id),
            symbol=str(row.symbol),
            name=str(row.name),
            value=float(row.value),
            gain_loss=float(row.gain_loss),
            gain_loss_percent=float(row.gain_loss_percent),
            percentage=float(row.value / total * 100.0),
        )
        for row in ranked.itertuples(index=False)
    ]


def benchmark_performance(history: Sequence[PriceBar]) -> pd.DataFrame:
    """Cumulative percent change of a benchmark from its first close."""
    if not history:
        return pd.DataFrame(columns=["date", "close", "percentage"])
    frame = pd.DataFrame({"date": [bar.date for bar in history], "close": [float(bar.close) for bar in history]})
    frame["date"] = pd.to_datetime(frame["date"], utc=True)
    frame = frame.sort_values("date").reset_index(drop=True)
    base = frame["close"].iloc[0]
    frame["percentage"] = (frame["close"] / base - 1.0) * 100.0 if base else 0.0
    return frame
