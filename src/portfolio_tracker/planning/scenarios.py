"""Scenario-adjusted projections over portfolio-weighted return history."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

import pandas as pd

from portfolio_tracker.risk.metrics import max_drawdown, volatility


class ScenarioKind(StrEnum):
    BEAR_MARKET = "bear_market"
    BULL_MARKET = "bull_market"
    RECESSION = "recession"
    RECOVERY = "recovery"


@dataclass(frozen=True, slots=True)
class ScenarioMultipliers:
    return_multiplier: float
    risk_multiplier: float


SCENARIO_MULTIPLIERS: dict[ScenarioKind, ScenarioMultipliers] = {
    ScenarioKind.BEAR_MARKET: ScenarioMultipliers(return_multiplier=0.8, risk_multiplier=1.5),
    ScenarioKind.BULL_MARKET: ScenarioMultipliers(return_multiplier=1.2, risk_multiplier=0.8),
    ScenarioKind.RECESSION: ScenarioMultipliers(return_multiplier=0.7, risk_multiplier=1.8),
    ScenarioKind.RECOVERY: ScenarioMultipliers(return_multiplier=1.3, risk_multiplier=0.9),
}


@dataclass(slots=True)
class ScenarioResult:
    scenario: ScenarioKind
    expected_return: float = 0.0
    risk_level: float = 0.0
    drawdown: float = 0.0
    volatility: float = 0.0


def weighted_return_series(
    weights: Mapping[str, float],
    historical_data: Mapping[str, Sequence[float]] | pd.DataFrame,
) -> pd.Series:
    """
    Portfolio return series from per-symbol return histories.

    Only symbols present in both inputs are used. Weights are divided by the
    sum of their absolute values, so a long/short book that nets to zero
    keeps its exposures; all-zero weights give an empty series. Rows missing
    any used symbol are dropped.
    """
    frame = (
        historical_data.copy()
        if isinstance(historical_data, pd.DataFrame)
        else pd.DataFrame({sym: pd.Series(values, dtype=float) for sym, values in historical_data.items()})
    )
    symbols = [sym for sym in weights if sym in frame.columns]
    if not symbols:
        return pd.Series(dtype=float)
    w = pd.Series({sym: float(weights[sym]) for sym in symbols})
    gross = float(w.abs().sum())
    if gross == 0:
        return pd.Series(dtype=float)
    w = w / gross
    aligned = frame[symbols].astype(float).dropna()
    return aligned.mul(w, axis=1).sum(axis=1)


def scenario_analysis(
    weights: Mapping[str, float],
    historical_data: Mapping[str, Sequence[float]] | pd.DataFrame,
    scenario: ScenarioKind | str,
) -> ScenarioResult:
    kind = ScenarioKind(scenario)
    multipliers = SCENARIO_MULTIPLIERS[kind]
    series = weighted_return_series(weights, historical_data)
    if series.empty:
        return ScenarioResult(scenario=kind)

    baseline_return = float(series.mean())
    baseline_risk = volatility(series)
    growth = pd.concat([pd.Series([1.0]), (1.0 + series).cumprod()], ignore_index=True)
    return ScenarioResult(
        scenario=kind,
        expected_return=baseline_return * multipliers.return_multiplier,
        risk_level=baseline_risk * multipliers.risk_multiplier,
        drawdown=max_drawdown(growth) * multipliers.risk_multiplier,
        volatility=baseline_risk * multipliers.risk_multiplier,
    )
