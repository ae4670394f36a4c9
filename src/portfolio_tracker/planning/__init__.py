"""Scenario, tax and dividend planning utilities."""

from .dividends import DividendMetrics, PaymentFrequency, detect_payment_frequency, dividend_metrics
from .scenarios import (
    SCENARIO_MULTIPLIERS,
    ScenarioKind,
    ScenarioMultipliers,
    ScenarioResult,
    scenario_analysis,
    weighted_return_series,
)
from .tax import HarvestAction, HarvestCandidate, harvesting_opportunities

__all__ = [
    "SCENARIO_MULTIPLIERS",
    "DividendMetrics",
    "HarvestAction",
    "HarvestCandidate",
    "PaymentFrequency",
    "ScenarioKind",
    "ScenarioMultipliers",
    "ScenarioResult",
    "detect_payment_frequency",
    "dividend_metrics",
    "harvesting_opportunities",
    "scenario_analysis",
    "weighted_return_series",
]
