"""Dividend history metrics and payment frequency detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np

from portfolio_tracker.config import DividendConfig
from portfolio_tracker.time_utils import to_utc_timestamp
from portfolio_tracker.types import DividendPayment


class PaymentFrequency(StrEnum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    IRREGULAR = "irregular"


@dataclass(slots=True)
class DividendMetrics:
    dividend_yield: float
    growth: float
    next_payment_estimate: float
    frequency: PaymentFrequency


def detect_payment_frequency(dates: Sequence[object], config: DividendConfig | None = None) -> PaymentFrequency:
    """Classify the median spacing between consecutive payment dates."""
    cfg = config or DividendConfig()
    if len(dates) < 2:
        return PaymentFrequency.IRREGULAR
    stamps = sorted(to_utc_timestamp(d) for d in dates)
    gaps = [(later - earlier).total_seconds() / 86_400.0 for earlier, later in zip(stamps, stamps[1:])]
    median_gap = float(np.median(gaps))
    if median_gap <= 0:
        return PaymentFrequency.IRREGULAR
    if median_gap <= cfg.monthly_max_days:
        return PaymentFrequency.MONTHLY
    if median_gap <= cfg.quarterly_max_days:
        return PaymentFrequency.QUARTERLY
    if median_gap <= cfg.semi_annual_max_days:
        return PaymentFrequency.SEMI_ANNUAL
    if median_gap <= cfg.annual_max_days:
        return PaymentFrequency.ANNUAL
    return PaymentFrequency.IRREGULAR


def dividend_metrics(
    history: Sequence[DividendPayment],
    config: DividendConfig | None = None,
) -> DividendMetrics | None:
    """
    Summarise a dividend payment history.

    Requires at least two payments. The yield assumes a fixed number of
    payments per year (quarterly by default) regardless of the detected
    frequency.
    """
    cfg = config or DividendConfig()
    if len(history) < 2:
        return None
    ordered = sorted(history, key=lambda p: to_utc_timestamp(p.date), reverse=True)
    latest = float(ordered[0].amount)
    previous = float(ordered[1].amount)
    growth = (latest - previous) / previous * 100.0 if previous != 0 else 0.0
    return DividendMetrics(
        dividend_yield=latest * cfg.payments_per_year / 100.0,
        growth=growth,
        next_payment_estimate=latest * (1.0 + cfg.growth_assumption),
        frequency=detect_payment_frequency([p.date for p in ordered], cfg),
    )
