"""Remediation – RemediationEngine.

Matches alerts against the action catalog and runs the eligible actions:

* an action is eligible when it is enabled, its triggers match, it is not
  cooling down after a completed run and it has fewer than
  ``max_executions_per_hour`` executions (any status) in the last hour;
* approval-gated actions stop at ``pending`` until :meth:`approve_action`;
* a handler failure or timeout is recorded as ``failed`` on that execution
  only, never raised to the caller.
"""
from __future__ import annotations

import asyncio
import time
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Iterable

from mp_reliability.kernel.errors import BaseError, InfrastructureTimeoutError, NotFoundError, ValidationError
from mp_reliability.kernel.time import Clock, SystemClock
from mp_reliability.observability.logging import get_logger
from mp_reliability.remediation.action import (
    DEFAULT_REMEDIATION_ACTIONS,
    MatchCriteria,
    RemediationAction,
)
from mp_reliability.remediation.execution import (
    Approval,
    BusinessImpactAssessment,
    ExecutionResult,
    ExecutionStatus,
    ExecutionTrigger,
    RemediationExecution,
    TriggerType,
)
from mp_reliability.remediation.handlers import HandlerRegistry
from mp_reliability.remediation.history import RemediationHistory
from mp_reliability.slo.alerts import ErrorBudgetAlert

if TYPE_CHECKING:
    from mp_reliability.config.settings import ReliabilitySettings

__all__ = ["RemediationEngine"]

logger = get_logger(__name__)


class RemediationEngine:
    """Stateful matcher/executor of :class:`RemediationAction` entries.

    Work on one action (eligibility check, execution, approval) is
    serialised by a per-action lock, so cooldowns and hourly caps hold even
    when alerts arrive concurrently.
    """

    def __init__(
        self,
        actions: Iterable[RemediationAction] | None = None,
        *,
        handlers: HandlerRegistry | None = None,
        clock: Clock | None = None,
        history_size: int = 5000,
        history_max_age: timedelta | None = timedelta(hours=24),
        enabled: bool = True,
    ) -> None:
        self._handlers = handlers or HandlerRegistry()
        self._clock: Clock = clock or SystemClock()
        self._history = RemediationHistory(history_size, history_max_age)
        self._actions: dict[str, RemediationAction] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._enabled = enabled

        for action in DEFAULT_REMEDIATION_ACTIONS if actions is None else actions:
            self.set_action(action)
        logger.info("remediation.engine_initialized", action_count=len(self._actions), enabled=enabled)

    @classmethod
    def from_settings(
        cls,
        settings: ReliabilitySettings,
        *,
        handlers: HandlerRegistry | None = None,
        clock: Clock | None = None,
    ) -> RemediationEngine:
        return cls(
            handlers=handlers,
            clock=clock,
            history_size=settings.execution_history_size,
            history_max_age=timedelta(hours=settings.execution_history_max_age_hours),
            enabled=settings.remediation_enabled,
        )

    # ------------------------------------------------------------------
    # Catalog management
    # ------------------------------------------------------------------

    def set_action(self, action: RemediationAction) -> None:
        """Add or replace *action*; undispatchable definitions are rejected."""
        errors = action.validation_errors() + self._handlers.validation_errors(action)
        if errors:
            raise ValidationError(f"Invalid remediation action '{action.id}'", errors=errors)
        self._actions[action.id] = action
        logger.debug("remediation.action_set", action_id=action.id)

    def remove_action(self, action_id: str) -> bool:
        removed = self._actions.pop(action_id, None) is not None
        if removed:
            logger.info("remediation.action_removed", action_id=action_id)
        return removed

    def get_action(self, action_id: str) -> RemediationAction:
        action = self._actions.get(action_id)
        if action is None:
            raise NotFoundError("Remediation action", action_id)
        return action

    def get_actions(self) -> dict[str, RemediationAction]:
        return dict(self._actions)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        logger.info("remediation.engine_toggled", enabled=enabled)

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    # ------------------------------------------------------------------
    # Triggering
    # ------------------------------------------------------------------

    async def process_alert(self, alert: ErrorBudgetAlert) -> list[RemediationExecution]:
        criteria = MatchCriteria(
            slo_name=alert.slo_name,
            severity=alert.level.value,
            burn_rate=alert.details.current_burn_rate,
            business_impact_level=alert.details.business_impact.value,
        )
        trigger = ExecutionTrigger(type=TriggerType.ERROR_BUDGET_ALERT, data=alert)
        return await self._process(criteria, trigger)

    async def process_business_impact_assessment(
        self, assessment: BusinessImpactAssessment
    ) -> list[RemediationExecution]:
        criteria = MatchCriteria(
            slo_name=assessment.slo_name,
            severity=assessment.severity.value,
            business_impact_level=assessment.severity.value,
        )
        trigger = ExecutionTrigger(type=TriggerType.BUSINESS_IMPACT, data=assessment)
        return await self._process(criteria, trigger)

    async def _process(self, criteria: MatchCriteria, trigger: ExecutionTrigger) -> list[RemediationExecution]:
        if not self._enabled:
            return []
        candidates = [
            a for a in self._actions.values() if a.conditions.enabled and a.triggers.matches(criteria)
        ]
        executions: list[RemediationExecution] = []
        for action in candidates:
            async with self._lock_for(action.id):
                if not self._is_eligible(action):
                    continue
                executions.append(await self._execute(action, criteria.slo_name, trigger))
        return executions

    def _is_eligible(self, action: RemediationAction) -> bool:
        now = self._clock.now()
        conditions = action.conditions
        if self._history.in_cooldown(action.id, conditions.cooldown_minutes, now):
            logger.debug(
                "remediation.cooldown_active",
                action_id=action.id,
                cooldown_minutes=conditions.cooldown_minutes,
            )
            return False
        if self._history.has_exceeded_limit(action.id, conditions.max_executions_per_hour, now):
            logger.warning(
                "remediation.execution_limit_reached",
                action_id=action.id,
                max_executions_per_hour=conditions.max_executions_per_hour,
            )
            return False
        return True

    async def _execute(
        self,
        action: RemediationAction,
        slo_name: str,
        trigger: ExecutionTrigger,
    ) -> RemediationExecution:
        execution = RemediationExecution(
            id=f"{action.id}_{uuid.uuid4().hex[:12]}",
            action_id=action.id,
            slo_name=slo_name,
            trigger=trigger,
            timestamp=self._clock.now(),
        )
        self._history.add(execution)

        if action.conditions.requires_approval:
            execution.approvals = Approval(required=True)
            logger.warning(
                "remediation.approval_required",
                execution_id=execution.id,
                action_id=action.id,
                slo_name=slo_name,
            )
            return execution

        await self._run(action, execution)
        return execution

    async def _run(self, action: RemediationAction, execution: RemediationExecution) -> None:
        execution.transition(ExecutionStatus.RUNNING)
        timeout = action.implementation.timeout_seconds
        started = time.monotonic()
        try:
            outcome = await asyncio.wait_for(self._handlers.dispatch(action), timeout=timeout)
        except asyncio.TimeoutError:
            error = InfrastructureTimeoutError(
                f"Remediation '{action.id}' timed out after {timeout}s", timeout_seconds=timeout
            )
            self._finish(execution, success=False, message=error.message, started=started)
        except Exception as exc:  # noqa: BLE001 - isolated per action
            message = exc.message if isinstance(exc, BaseError) else str(exc)
            self._finish(execution, success=False, message=message, started=started)
        else:
            self._finish(
                execution,
                success=outcome.success,
                message=outcome.message,
                started=started,
                artifacts=outcome.artifacts,
            )

    def _finish(
        self,
        execution: RemediationExecution,
        *,
        success: bool,
        message: str,
        started: float,
        artifacts: dict[str, Any] | None = None,
    ) -> None:
        execution.result = ExecutionResult(
            success=success,
            message=message,
            duration_ms=(time.monotonic() - started) * 1000,
            artifacts=artifacts,
        )
        execution.finished_at = self._clock.now()
        execution.transition(ExecutionStatus.COMPLETED if success else ExecutionStatus.FAILED)
        if success:
            logger.info(
                "remediation.completed",
                execution_id=execution.id,
                action_id=execution.action_id,
                slo_name=execution.slo_name,
                duration_ms=execution.result.duration_ms,
            )
        else:
            logger.error(
                "remediation.failed",
                execution_id=execution.id,
                action_id=execution.action_id,
                slo_name=execution.slo_name,
                error=message,
            )

    # ------------------------------------------------------------------
    # Approval workflow
    # ------------------------------------------------------------------

    async def approve_action(self, execution_id: str, approved_by: str) -> bool:
        """Approve and run a pending, approval-gated execution.

        Returns ``False`` when the execution is unknown, no longer pending or
        never required approval. An execution whose action is still cooling
        down from a completed run stays pending and ``False`` is returned.
        """
        execution = self._history.get(execution_id)
        if execution is None:
            return False
        async with self._lock_for(execution.action_id):
            approvals = execution.approvals
            if approvals is None or not execution.awaiting_approval:
                return False
            now = self._clock.now()
            action = self._actions.get(execution.action_id)
            if action is not None and self._history.in_cooldown(
                action.id, action.conditions.cooldown_minutes, now
            ):
                logger.warning(
                    "remediation.approval_deferred",
                    execution_id=execution.id,
                    action_id=action.id,
                    reason="cooldown_active",
                )
                return False
            approvals.approved = True
            approvals.approved_by = approved_by
            approvals.approved_at = now
            logger.info(
                "remediation.approved",
                execution_id=execution.id,
                action_id=execution.action_id,
                approved_by=approved_by,
            )

            if action is None:
                execution.transition(ExecutionStatus.RUNNING)
                self._finish(
                    execution,
                    success=False,
                    message=f"Remediation action '{execution.action_id}' is no longer registered",
                    started=time.monotonic(),
                )
                return True
            await self._run(action, execution)
        return True

    async def cancel_execution(self, execution_id: str, cancelled_by: str) -> bool:
        """Cancel a pending execution; running or finished ones are left alone."""
        execution = self._history.get(execution_id)
        if execution is None:
            return False
        async with self._lock_for(execution.action_id):
            if execution.status is not ExecutionStatus.PENDING:
                return False
            execution.transition(ExecutionStatus.CANCELLED)
            execution.finished_at = self._clock.now()
            execution.result = ExecutionResult(
                success=False, message=f"Cancelled by {cancelled_by}", duration_ms=0.0
            )
        logger.info("remediation.cancelled", execution_id=execution_id, cancelled_by=cancelled_by)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_execution(self, execution_id: str) -> RemediationExecution | None:
        return self._history.get(execution_id)

    def get_execution_history(self, action_id: str | None = None, hours: float = 24) -> list[RemediationExecution]:
        return self._history.get_history(self._clock.now(), action_id, hours)

    def get_pending_approvals(self) -> list[RemediationExecution]:
        return self._history.pending_approvals()

    def prune_history(self) -> int:
        return self._history.prune(self._clock.now())

    def get_summary(self) -> dict[str, Any]:
        recent = self.get_execution_history(hours=24)
        return {
            "enabled": self._enabled,
            "total_actions": len(self._actions),
            "enabled_actions": sum(1 for a in self._actions.values() if a.conditions.enabled),
            "executions_last_24h": len(recent),
            "successful_executions": sum(1 for e in recent if e.status is ExecutionStatus.COMPLETED),
            "failed_executions": sum(1 for e in recent if e.status is ExecutionStatus.FAILED),
            "pending_approvals": len(self.get_pending_approvals()),
        }

    def _lock_for(self, action_id: str) -> asyncio.Lock:
        return self._locks.setdefault(action_id, asyncio.Lock())
