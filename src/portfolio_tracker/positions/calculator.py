"""Position, valuation and gain/loss calculations over transaction histories."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from portfolio_tracker.time_utils import to_utc_timestamp
from portfolio_tracker.types import (
    Asset,
    GainLoss,
    ManualAssetValue,
    Position,
    Quote,
    Transaction,
    TransactionType,
)


def shares_held(transactions: Iterable[Transaction]) -> float:
    """Net share count; sells beyond recorded buys produce a negative balance."""
    shares = 0.0
    for txn in transactions:
        if txn.type == TransactionType.BUY:
            shares += float(txn.shares)
        elif txn.type == TransactionType.SELL:
            shares -= float(txn.shares)
    return shares


def average_cost(transactions: Iterable[Transaction]) -> float:
    """Commission-inclusive average purchase price over buy transactions only."""
    total_cost = 0.0
    total_shares = 0.0
    for txn in transactions:
        if txn.type != TransactionType.BUY:
            continue
        total_cost += float(txn.shares) * float(txn.price) + float(txn.commission or 0.0)
        total_shares += float(txn.shares)
    return total_cost / total_shares if total_shares > 0 else 0.0


def build_position(asset_id: int, transactions: Iterable[Transaction]) -> Position:
    history = [t for t in transactions if t.asset_id == asset_id]
    return Position(
        asset_id=asset_id,
        shares=shares_held(history),
        average_cost=average_cost(history),
    )


def gain_loss(transactions: Sequence[Transaction], current_price: float) -> GainLoss:
    """Unrealized gain/loss of the open position at current_price."""
    shares = shares_held(transactions)
    avg = average_cost(transactions)
    if shares <= 0 or avg <= 0:
        return GainLoss(value=0.0, percentage=0.0)
    cost_basis = avg * shares
    current_value = float(current_price) * shares
    value = current_value - cost_basis
    return GainLoss(value=value, percentage=value / cost_basis * 100.0)


def latest_manual_value(asset_id: int, manual_values: Iterable[ManualAssetValue]) -> ManualAssetValue | None:
    entries = [v for v in manual_values if v.asset_id == asset_id]
    if not entries:
        return None
    return max(entries, key=lambda v: to_utc_timestamp(v.date))


def asset_value(
    asset: Asset,
    transactions: Iterable[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Iterable[ManualAssetValue],
) -> float:
    """Current value of one asset; zero when no quote or manual valuation applies."""
    if asset.is_manual:
        latest = latest_manual_value(asset.id, manual_values)
        return float(latest.value) if latest is not None else 0.0
    if asset.ticker and asset.ticker in quotes:
        history = [t for t in transactions if t.asset_id == asset.id]
        return shares_held(history) * float(quotes[asset.ticker].price)
    return 0.0


def portfolio_value(
    assets: Iterable[Asset],
    transactions: Sequence[Transaction],
    quotes: Mapping[str, Quote],
    manual_values: Sequence[ManualAssetValue],
) -> float:
    return sum(
        (asset_value(asset, transactions, quotes, manual_values) for asset in assets),
        0.0,
    )
