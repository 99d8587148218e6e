"""SLO – error-budget alerting policies."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

from mp_reliability.kernel.errors import ValidationError

__all__ = [
    "AlertKind",
    "DEDUP_WINDOWS",
    "DEFAULT_POLICIES",
    "ErrorBudgetPolicy",
    "PolicyActions",
    "PolicyTriggers",
    "recommended_actions",
]


class AlertKind(str, Enum):
    BURN_RATE = "burn_rate"
    EXHAUSTION = "exhaustion"


# An identical (slo, level) alert inside this window is suppressed.
DEDUP_WINDOWS: dict[AlertKind, timedelta] = {
    AlertKind.BURN_RATE: timedelta(minutes=15),
    AlertKind.EXHAUSTION: timedelta(minutes=30),
}


@dataclass(frozen=True)
class PolicyTriggers:
    burn_rate_multiplier: float
    time_window_minutes: float
    min_budget_remaining: float


@dataclass(frozen=True)
class PolicyActions:
    notify_channels: tuple[str, ...] = ("slack",)
    freeze_deployments: bool = False
    runbook_url: str | None = None


@dataclass(frozen=True)
class ErrorBudgetPolicy:
    name: str
    triggers: PolicyTriggers
    actions: PolicyActions = field(default_factory=PolicyActions)
    description: str = ""

    def validate(self) -> None:
        errors: list[dict[str, Any]] = []
        if not self.name:
            errors.append({"field": "name", "message": "must not be empty"})
        if not self.triggers.burn_rate_multiplier > 0:
            errors.append({"field": "triggers.burn_rate_multiplier", "message": "must be positive"})
        if not self.triggers.time_window_minutes >= 0:
            errors.append({"field": "triggers.time_window_minutes", "message": "must not be negative"})
        if not 0 <= self.triggers.min_budget_remaining <= 100:
            errors.append(
                {"field": "triggers.min_budget_remaining", "message": "must be between 0 and 100"}
            )
        if errors:
            raise ValidationError(f"Invalid error budget policy '{self.name}'", errors=errors)


DEFAULT_POLICIES: tuple[ErrorBudgetPolicy, ...] = (
    ErrorBudgetPolicy(
        name="fast_burn",
        description="Budget gone within hours at the current rate; page on-call",
        triggers=PolicyTriggers(burn_rate_multiplier=14.4, time_window_minutes=2, min_budget_remaining=2),
        actions=PolicyActions(
            notify_channels=("pagerduty", "slack"),
            freeze_deployments=True,
            runbook_url="https://docs.company.com/runbooks/slo-fast-burn",
        ),
    ),
    ErrorBudgetPolicy(
        name="slow_burn",
        description="Budget gone within days at the current rate; open a ticket",
        triggers=PolicyTriggers(burn_rate_multiplier=6.0, time_window_minutes=15, min_budget_remaining=10),
        actions=PolicyActions(
            notify_channels=("slack", "email"),
            runbook_url="https://docs.company.com/runbooks/slo-slow-burn",
        ),
    ),
    ErrorBudgetPolicy(
        name="exhaustion_warning",
        description="Budget is nearly spent",
        triggers=PolicyTriggers(burn_rate_multiplier=1.0, time_window_minutes=5, min_budget_remaining=5),
        actions=PolicyActions(
            notify_channels=("slack", "email"),
            freeze_deployments=True,
            runbook_url="https://docs.company.com/runbooks/slo-budget-exhaustion",
        ),
    ),
)

_BASE_RECOMMENDATIONS: dict[AlertKind, tuple[str, ...]] = {
    AlertKind.BURN_RATE: (
        "Investigate deployments and configuration changes from the last hour",
        "Inspect error logs and traces for the failing requests",
        "Consider rolling back the most recent release",
    ),
    AlertKind.EXHAUSTION: (
        "Pause non-critical feature releases until the budget recovers",
        "Prioritise reliability work in the current iteration",
        "Review whether the SLO target matches observed reliability",
    ),
}


def recommended_actions(kind: AlertKind, policy: ErrorBudgetPolicy, slo_name: str) -> list[str]:
    actions = list(_BASE_RECOMMENDATIONS[kind])
    if policy.actions.freeze_deployments:
        actions.append(f"Deployment freeze in effect for {slo_name}")
    if policy.actions.runbook_url:
        actions.append(f"Follow runbook: {policy.actions.runbook_url}")
    return actions
