"""Tax-loss harvesting screens."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from portfolio_tracker.config import TaxConfig
from portfolio_tracker.time_utils import days_between, now_utc
from portfolio_tracker.types import TaxLot


class HarvestAction(StrEnum):
    HARVEST = "harvest"
    WAIT = "wait"
    HOLD = "hold"


@dataclass(slots=True)
class HarvestCandidate:
    symbol: str
    loss: float
    days_held: int
    recommendation: HarvestAction


def harvesting_opportunities(
    holdings: Iterable[TaxLot],
    as_of: datetime | None = None,
    config: TaxConfig | None = None,
) -> list[HarvestCandidate]:
    """Flag losing lots; lots inside the minimum holding window are told to wait."""
    cfg = config or TaxConfig()
    reference = as_of or now_utc()
    out: list[HarvestCandidate] = []
    for lot in holdings:
        loss = float(lot.current_price) - float(lot.cost_basis)
        days_held = days_between(lot.purchase_date, reference)
        if loss < 0 and days_held > cfg.harvest_min_days_held:
            action = HarvestAction.HARVEST
        elif loss < 0:
            action = HarvestAction.WAIT
        else:
            action = HarvestAction.HOLD
        out.append(HarvestCandidate(symbol=lot.symbol, loss=loss, days_held=days_held, recommendation=action))
    return out
