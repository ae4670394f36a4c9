"""Analytics configuration objects and helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(slots=True)
class RiskConfig:
    risk_free_rate: float = 0.02
    var_confidence: float = 0.95


@dataclass(slots=True)
class ReturnsConfig:
    irr_initial_guess: float = 0.10
    irr_max_iterations: int = 100
    irr_tolerance: float = 1e-4
    days_per_year: float = 365.0


@dataclass(slots=True)
class TaxConfig:
    harvest_min_days_held: int = 30


@dataclass(slots=True)
class DividendConfig:
    payments_per_year: int = 4
    growth_assumption: float = 0.02
    monthly_max_days: float = 45.0
    quarterly_max_days: float = 135.0
    semi_annual_max_days: float = 270.0
    annual_max_days: float = 400.0


@dataclass(slots=True)
class DashboardConfig:
    primary_benchmark: str = "SPY"
    secondary_benchmark: str | None = "QQQ"
    top_holdings_limit: int = 5
    periods_per_year: int = 252


@dataclass(slots=True)
class MarketDataConfig:
    min_call_interval_seconds: float = 12.0


@dataclass(slots=True)
class AnalyticsConfig:
    risk: RiskConfig = field(default_factory=RiskConfig)
    returns: ReturnsConfig = field(default_factory=ReturnsConfig)
    tax: TaxConfig = field(default_factory=TaxConfig)
    dividends: DividendConfig = field(default_factory=DividendConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    market_data: MarketDataConfig = field(default_factory=MarketDataConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(payload: dict[str, Any]) -> "AnalyticsConfig":
        return AnalyticsConfig(
            risk=RiskConfig(**payload.get("risk", {})),
            returns=ReturnsConfig(**payload.get("returns", {})),
            tax=TaxConfig(**payload.get("tax", {})),
            dividends=DividendConfig(**payload.get("dividends", {})),
            dashboard=DashboardConfig(**payload.get("dashboard", {})),
            market_data=MarketDataConfig(**payload.get("market_data", {})),
        )


def load_config(path: str | Path) -> AnalyticsConfig:
    """Load analytics configuration from YAML."""
    file_path = Path(path)
    with file_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    return AnalyticsConfig.from_dict(payload)


def save_config(config: AnalyticsConfig, path: str | Path) -> None:
    """Persist analytics configuration to YAML."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.to_dict(), handle, sort_keys=False)
