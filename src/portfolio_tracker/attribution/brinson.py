"""Excess-return attribution into allocation, selection and interaction effects."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(slots=True)
class AttributionDetail:
    index: int
    weight: float
    portfolio_return: float
    benchmark_return: float
    allocation: float
    selection: float
    interaction: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "weight": self.weight,
            "portfolio_return": self.portfolio_return,
            "benchmark_return": self.benchmark_return,
            "allocation": self.allocation,
            "selection": self.selection,
            "interaction": self.interaction,
        }


@dataclass(slots=True)
class AttributionResult:
    allocation: float = 0.0
    selection: float = 0.0
    interaction: float = 0.0
    details: list[AttributionDetail] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.allocation + self.selection + self.interaction


def attribution(
    portfolio_returns: Sequence[float],
    benchmark_returns: Sequence[float],
    weights: Sequence[float],
    benchmark_weights: Sequence[float] | None = None,
) -> AttributionResult:
    """
    Decompose per-segment excess return.

    Without benchmark_weights only the selection effect w_i * (p_i - b_i) is
    populated and allocation/interaction stay zero. With benchmark_weights the
    Brinson-Hood-Beebower terms are used, measuring allocation against the
    weighted benchmark total. Length mismatches and empty input return an
    all-zero result.
    """
    p = np.asarray(portfolio_returns, dtype=float)
    b = np.asarray(benchmark_returns, dtype=float)
    w = np.asarray(weights, dtype=float)
    if p.size == 0 or not (p.size == b.size == w.size):
        return AttributionResult()

    if benchmark_weights is None:
        selection = w * (p - b)
        allocation = np.zeros_like(selection)
        interaction = np.zeros_like(selection)
    else:
        wb = np.asarray(benchmark_weights, dtype=float)
        if wb.size != p.size:
            return AttributionResult()
        benchmark_total = float(np.sum(wb * b))
        allocation = (w - wb) * (b - benchmark_total)
        selection = wb * (p - b)
        interaction = (w - wb) * (p - b)

    details = [
        AttributionDetail(
            index=i,
            weight=float(w[i]),
            portfolio_return=float(p[i]),
            benchmark_return=float(b[i]),
            allocation=float(allocation[i]),
            selection=float(selection[i]),
            interaction=float(interaction[i]),
        )
        for i in range(p.size)
    ]
    return AttributionResult(
        allocation=float(sum(d.allocation for d in details)),
        selection=float(sum(d.selection for d in details)),
        interaction=float(sum(d.interaction for d in details)),
        details=details,
    )
