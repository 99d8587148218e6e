"""SLO – burn-rate and error-budget arithmetic.

Pure functions; none of them raise.  Degenerate inputs (a zero error
budget, a non-positive window, an unreachable depletion time) map to
sentinel results: ``math.inf``, ``0.0``, ``100.0`` or ``None``.

A burn rate is expressed in multiples of the sustainable 24-hour
consumption rate: ``1.0`` exhausts the budget exactly at the target pace.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from enum import Enum

from mp_reliability.kernel.time import utc_now

__all__ = [
    "SLOStatus",
    "calculate_burn_rate",
    "calculate_error_budget_consumption",
    "determine_slo_status",
    "estimate_error_budget_depletion",
]

NORMALIZATION_HOURS = 24.0


class SLOStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    BREACH = "breach"


def calculate_burn_rate(
    current_error_rate: float,
    allowed_error_rate: float,
    time_window_hours: float,
) -> float:
    """Return the burn rate of *current_error_rate* against the budget.

    ``(current / allowed) * (24 / time_window_hours)``; infinite when the
    budget is zero and any error is observed.
    """
    if allowed_error_rate == 0:
        return math.inf if current_error_rate > 0 else 0.0
    if time_window_hours <= 0:
        return 0.0
    return (current_error_rate / allowed_error_rate) * (NORMALIZATION_HOURS / time_window_hours)


def calculate_error_budget_consumption(actual_error_rate: float, allowed_error_rate: float) -> float:
    """Percentage (0–100) of the error budget consumed at *actual_error_rate*."""
    if allowed_error_rate == 0:
        return 100.0 if actual_error_rate > 0 else 0.0
    consumed = (actual_error_rate / allowed_error_rate) * 100.0
    return min(100.0, max(0.0, consumed))


def estimate_error_budget_depletion(
    consumed_percentage: float,
    burn_rate: float,
    now: datetime | None = None,
) -> datetime | None:
    """Estimate when the remaining budget runs out at *burn_rate*.

    Returns ``None`` when the budget is not being consumed, is already
    exhausted, or the estimate is not a finite future instant.
    """
    if not burn_rate > 0 or consumed_percentage >= 100:
        return None
    hours_to_depletion = (100.0 - consumed_percentage) / burn_rate
    if not math.isfinite(hours_to_depletion) or hours_to_depletion <= 0:
        return None
    try:
        return (now or utc_now()) + timedelta(hours=hours_to_depletion)
    except OverflowError:
        return None


def determine_slo_status(current_value: float, target: float, threshold: float) -> SLOStatus:
    if current_value >= target:
        return SLOStatus.HEALTHY
    if current_value >= threshold:
        return SLOStatus.WARNING
    return SLOStatus.BREACH
