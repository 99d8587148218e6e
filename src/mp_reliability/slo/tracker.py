"""SLO – ErrorBudgetTracker.

Turns burn-rate observations into :class:`ErrorBudgetAlert` objects:

1. compute burn rate and budget remaining for the observation;
2. update the per-SLO sustained-burn regime;
3. evaluate every policy (highest ``burn_rate_multiplier`` first) for an
   exhaustion alert or, failing that, a sustained burn-rate alert;
4. drop alerts that repeat an ``(slo, level)`` pair inside its dedup window.
"""
from __future__ import annotations

import asyncio
import math
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Iterable

from mp_reliability.kernel.collections import BoundedHistory
from mp_reliability.kernel.errors import NotFoundError
from mp_reliability.kernel.time import Clock, SystemClock, minutes_between
from mp_reliability.observability.logging import get_logger
from mp_reliability.slo.alerts import AlertDetails, AlertLevel, ErrorBudgetAlert
from mp_reliability.slo.burn_rate import (
    calculate_burn_rate,
    calculate_error_budget_consumption,
    estimate_error_budget_depletion,
)
from mp_reliability.slo.catalog import BusinessSeverity, SLOCatalog
from mp_reliability.slo.observation import BurnRateObservation, RequestMetrics
from mp_reliability.slo.policy import (
    DEDUP_WINDOWS,
    DEFAULT_POLICIES,
    AlertKind,
    ErrorBudgetPolicy,
    recommended_actions,
)

if TYPE_CHECKING:
    from mp_reliability.config.settings import ReliabilitySettings

__all__ = ["ErrorBudgetTracker", "SustainedBurnState", "TrackingResult"]

logger = get_logger(__name__)


@dataclass
class SustainedBurnState:
    """Current burn-rate regime of one SLO."""

    burn_rate: float
    start_time: datetime
    sustained: bool = False

    def elapsed_minutes(self, now: datetime) -> float:
        return minutes_between(self.start_time, now)


@dataclass(frozen=True)
class TrackingResult:
    burn_rate: float
    budget_remaining: float
    budget_consumed: float
    sustained: bool
    estimated_exhaustion: datetime | None = None
    alerts: list[ErrorBudgetAlert] = field(default_factory=list)


def _relative_change(previous: float, current: float) -> float:
    if previous == current:
        return 0.0
    if previous == 0 or math.isinf(previous) or math.isinf(current):
        return math.inf
    return abs(current - previous) / abs(previous)


class ErrorBudgetTracker:
    """Stateful evaluator of error-budget policies.

    State (sustained-burn regimes, alert history) is owned by the instance;
    observations for the same SLO are serialised by a per-SLO lock so the
    tracker may be driven from concurrent tasks.
    """

    def __init__(
        self,
        catalog: SLOCatalog | None = None,
        policies: Iterable[ErrorBudgetPolicy] | None = None,
        *,
        clock: Clock | None = None,
        history_size: int = 1000,
        history_max_age: timedelta | None = timedelta(hours=24),
        sustain_minutes: float = 2.0,
        change_tolerance: float = 0.2,
        critical_burn_rate: float = 14.4,
        exhausted_budget_percent: float = 1.0,
    ) -> None:
        self._catalog = catalog if catalog is not None else SLOCatalog()
        self._clock: Clock = clock or SystemClock()
        self._history_size = history_size
        self._history_max_age = history_max_age
        self._sustain_minutes = sustain_minutes
        self._change_tolerance = change_tolerance
        self._critical_burn_rate = critical_burn_rate
        self._exhausted_budget_percent = exhausted_budget_percent

        self._policies: dict[str, ErrorBudgetPolicy] = {}
        self._states: dict[str, SustainedBurnState] = {}
        self._history: dict[str, BoundedHistory[ErrorBudgetAlert]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

        for policy in DEFAULT_POLICIES if policies is None else policies:
            self.register_policy(policy)

    @classmethod
    def from_settings(
        cls,
        settings: ReliabilitySettings,
        catalog: SLOCatalog | None = None,
        *,
        clock: Clock | None = None,
    ) -> ErrorBudgetTracker:
        return cls(
            catalog,
            clock=clock,
            history_size=settings.alert_history_size,
            history_max_age=timedelta(hours=settings.alert_history_max_age_hours),
            sustain_minutes=settings.sustain_minutes,
            change_tolerance=settings.sustain_change_tolerance,
            critical_burn_rate=settings.critical_burn_rate,
            exhausted_budget_percent=settings.exhausted_budget_percent,
        )

    @property
    def catalog(self) -> SLOCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    def register_policy(self, policy: ErrorBudgetPolicy) -> None:
        policy.validate()
        self._policies[policy.name] = policy
        logger.info("error_budget.policy_registered", policy=policy.name)

    def remove_policy(self, name: str) -> bool:
        return self._policies.pop(name, None) is not None

    def policies(self) -> list[ErrorBudgetPolicy]:
        """Policies in evaluation order: most aggressive burn rate first."""
        return sorted(
            self._policies.values(),
            key=lambda p: p.triggers.burn_rate_multiplier,
            reverse=True,
        )

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    async def track(self, observation: BurnRateObservation) -> TrackingResult:
        return await self.track_error_budget(
            observation.slo_name,
            observation.current_error_rate,
            observation.allowed_error_rate,
            observation.time_window_hours,
            observation.metrics,
        )

    async def track_error_budget(
        self,
        slo_name: str,
        current_error_rate: float,
        allowed_error_rate: float,
        time_window_hours: float,
        metrics: RequestMetrics | None = None,
    ) -> TrackingResult:
        """Evaluate one observation and return the alerts it raised.

        Never raises for numeric edge cases: a zero budget yields an infinite
        burn rate and 100 % consumption.
        """
        lock = self._locks.setdefault(slo_name, asyncio.Lock())
        async with lock:
            now = self._clock.now()
            burn_rate = calculate_burn_rate(current_error_rate, allowed_error_rate, time_window_hours)
            consumed = calculate_error_budget_consumption(current_error_rate, allowed_error_rate)
            remaining = 100.0 - consumed
            state = self._update_sustained_state(slo_name, burn_rate, now)
            exhaustion = estimate_error_budget_depletion(consumed, burn_rate, now)

            alerts: list[ErrorBudgetAlert] = []
            for policy in self.policies():
                alert: ErrorBudgetAlert | None = None
                if remaining < policy.triggers.min_budget_remaining:
                    alert = self._attempt_alert(
                        AlertKind.EXHAUSTION, slo_name, policy, burn_rate, remaining, exhaustion, now
                    )
                # A suppressed exhaustion alert does not mask an acute burn.
                if (
                    alert is None
                    and burn_rate >= policy.triggers.burn_rate_multiplier
                    and state.sustained
                    and state.elapsed_minutes(now) >= policy.triggers.time_window_minutes
                ):
                    alert = self._attempt_alert(
                        AlertKind.BURN_RATE, slo_name, policy, burn_rate, remaining, exhaustion, now
                    )
                if alert is not None:
                    alerts.append(alert)

            logger.debug(
                "error_budget.tracked",
                slo_name=slo_name,
                burn_rate=burn_rate,
                budget_remaining=remaining,
                sustained=state.sustained,
                total_requests=metrics.total_requests if metrics else None,
                alerts=len(alerts),
            )
            return TrackingResult(
                burn_rate=burn_rate,
                budget_remaining=remaining,
                budget_consumed=consumed,
                sustained=state.sustained,
                estimated_exhaustion=exhaustion,
                alerts=alerts,
            )

    def _update_sustained_state(self, slo_name: str, burn_rate: float, now: datetime) -> SustainedBurnState:
        state = self._states.get(slo_name)
        if state is None or _relative_change(state.burn_rate, burn_rate) > self._change_tolerance:
            if state is not None:
                logger.debug(
                    "error_budget.burn_regime_reset",
                    slo_name=slo_name,
                    previous_burn_rate=state.burn_rate,
                    burn_rate=burn_rate,
                )
            state = SustainedBurnState(burn_rate=burn_rate, start_time=now)
            self._states[slo_name] = state
        else:
            state.burn_rate = burn_rate
        state.sustained = state.elapsed_minutes(now) >= self._sustain_minutes
        return state

    def _attempt_alert(
        self,
        kind: AlertKind,
        slo_name: str,
        policy: ErrorBudgetPolicy,
        burn_rate: float,
        remaining: float,
        exhaustion: datetime | None,
        now: datetime,
    ) -> ErrorBudgetAlert | None:
        level = self._alert_level(kind, burn_rate, remaining)
        if self._is_duplicate(slo_name, level, now - DEDUP_WINDOWS[kind]):
            logger.debug(
                "error_budget.alert_suppressed",
                slo_name=slo_name,
                level=level.value,
                policy=policy.name,
            )
            return None

        if kind is AlertKind.BURN_RATE:
            message = (
                f"SLO {slo_name} is burning its error budget at {burn_rate:.2f}x "
                f"the sustainable rate ({policy.name})"
            )
        elif level is AlertLevel.EXHAUSTED:
            message = f"SLO {slo_name} error budget exhausted: {remaining:.2f}% remaining ({policy.name})"
        else:
            message = (
                f"SLO {slo_name} error budget nearly exhausted: {remaining:.2f}% remaining ({policy.name})"
            )

        alert = ErrorBudgetAlert(
            id=str(uuid.uuid4()),
            slo_name=slo_name,
            level=level,
            kind=kind,
            policy_name=policy.name,
            timestamp=now,
            message=message,
            details=AlertDetails(
                current_burn_rate=burn_rate,
                threshold_burn_rate=policy.triggers.burn_rate_multiplier,
                error_budget_remaining=remaining,
                estimated_exhaustion=exhaustion,
                business_impact=self._business_impact(slo_name),
                recommended_actions=tuple(recommended_actions(kind, policy, slo_name)),
            ),
            channels=policy.actions.notify_channels,
        )
        self._history_for(slo_name).append(alert)
        logger.info(
            "error_budget.alert_emitted",
            slo_name=slo_name,
            level=level.value,
            kind=kind.value,
            policy=policy.name,
            burn_rate=burn_rate,
            budget_remaining=remaining,
        )
        return alert

    def _alert_level(self, kind: AlertKind, burn_rate: float, remaining: float) -> AlertLevel:
        if kind is AlertKind.BURN_RATE:
            return AlertLevel.CRITICAL if burn_rate >= self._critical_burn_rate else AlertLevel.WARNING
        return AlertLevel.EXHAUSTED if remaining <= self._exhausted_budget_percent else AlertLevel.WARNING

    def _is_duplicate(self, slo_name: str, level: AlertLevel, cutoff: datetime) -> bool:
        history = self._history.get(slo_name)
        if history is None:
            return False
        return history.find(lambda a: a.level is level and a.timestamp > cutoff) is not None

    def _business_impact(self, slo_name: str) -> BusinessSeverity:
        target = self._catalog.get(slo_name)
        if target is None:
            return BusinessSeverity.MEDIUM
        return target.business_impact.severity

    def _history_for(self, slo_name: str) -> BoundedHistory[ErrorBudgetAlert]:
        history = self._history.get(slo_name)
        if history is None:
            history = BoundedHistory(
                self._history_size,
                timestamp_of=lambda a: a.timestamp,
                max_age=self._history_max_age,
            )
            self._history[slo_name] = history
        return history

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_sustained_state(self, slo_name: str) -> SustainedBurnState | None:
        return self._states.get(slo_name)

    def get_alert_history(self, slo_name: str | None = None, hours: float = 24) -> list[ErrorBudgetAlert]:
        """Alerts newer than *hours*, newest first."""
        cutoff = self._clock.now() - timedelta(hours=hours)
        if slo_name is not None:
            if slo_name not in self._history:
                return []
            alerts = self._history[slo_name].since(cutoff)
        else:
            alerts = [a for history in self._history.values() for a in history.since(cutoff)]
        return sorted(alerts, key=lambda a: a.timestamp, reverse=True)

    def last_alert(self, slo_name: str) -> ErrorBudgetAlert:
        history = self._history.get(slo_name)
        alert = history.latest() if history is not None else None
        if alert is None:
            raise NotFoundError("Alert for SLO", slo_name)
        return alert

    def prune_history(self) -> int:
        now = self._clock.now()
        removed = sum(history.prune(now) for history in self._history.values())
        if removed:
            logger.debug("error_budget.history_pruned", removed=removed)
        return removed

    def get_summary(self) -> dict[str, Any]:
        recent = self.get_alert_history(hours=24)
        return {
            "tracked_slos": sorted(self._states),
            "sustained_slos": sorted(n for n, s in self._states.items() if s.sustained),
            "policies": [p.name for p in self.policies()],
            "alerts_last_24h": len(recent),
            "alerts_by_level": dict(Counter(a.level.value for a in recent)),
        }
