"""Core domain datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TransactionType(StrEnum):
    BUY = "buy"
    SELL = "sell"


class AssetClass(StrEnum):
    EQUITY = "equity"
    CASH = "cash"
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    COMMODITIES = "commodities"
    ALTERNATIVES = "alternatives"
    OTHER = "other"


@dataclass(slots=True)
class Asset:
    name: str
    asset_class: AssetClass = AssetClass.EQUITY
    ticker: str | None = None
    sector: str | None = None
    is_manual: bool = False
    id: int | None = None

    def __post_init__(self) -> None:
        self.asset_class = AssetClass(self.asset_class)


@dataclass(slots=True)
class Transaction:
    asset_id: int
    type: TransactionType
    shares: float
    price: float
    date: datetime
    commission: float = 0.0
    id: int | None = None

    def __post_init__(self) -> None:
        self.type = TransactionType(self.type)
        if self.shares <= 0:
            raise ValueError(f"transaction shares must be positive, got {self.shares}")
        if self.price <= 0:
            raise ValueError(f"transaction price must be positive, got {self.price}")
        if self.commission < 0:
            raise ValueError(f"transaction commission cannot be negative, got {self.commission}")


@dataclass(slots=True)
class Position:
    asset_id: int
    shares: float
    average_cost: float

    @property
    def cost_basis(self) -> float:
        return self.average_cost * self.shares


@dataclass(slots=True)
class ManualAssetValue:
    asset_id: int
    value: float
    date: datetime
    id: int | None = None


@dataclass(slots=True)
class FundamentalMetrics:
    asset_id: int | None = None
    revenue_growth: float | None = None
    gross_margin: float | None = None
    operating_margin: float | None = None
    net_margin: float | None = None
    debt_to_equity: float | None = None
    last_updated: datetime | None = None
    id: int | None = None


@dataclass(slots=True)
class Quote:
    symbol: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    previous_close: float | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: float | None = None
    last_updated: datetime | None = None


@dataclass(slots=True)
class PriceBar:
    date: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(slots=True)
class GainLoss:
    value: float = 0.0
    percentage: float = 0.0


@dataclass(slots=True)
class DividendPayment:
    amount: float
    date: datetime


@dataclass(slots=True)
class TaxLot:
    """Holding snapshot used for tax-loss harvesting screens."""

    symbol: str
    current_price: float
    cost_basis: float
    purchase_date: datetime
