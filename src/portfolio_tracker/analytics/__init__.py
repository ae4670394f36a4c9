"""Analytics and performance report package."""

from .report import (
    PerformancePeriod,
    PerformanceReport,
    compute_performance_report,
    period_start,
    window_curve,
)

__all__ = [
    "PerformancePeriod",
    "PerformanceReport",
    "compute_performance_report",
    "period_start",
    "window_curve",
]
