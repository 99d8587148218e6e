"""Remediation – bounded execution history with cooldown and rate-limit queries."""
from __future__ import annotations

from datetime import datetime, timedelta

from mp_reliability.kernel.collections import BoundedHistory
from mp_reliability.remediation.execution import ExecutionStatus, RemediationExecution

__all__ = ["RemediationHistory"]

_RATE_WINDOW = timedelta(hours=1)


class RemediationHistory:
    """FIFO store of :class:`RemediationExecution` records.

    Executions are mutated in place as they progress, so queries always see
    the current status.
    """

    def __init__(self, max_size: int = 5000, max_age: timedelta | None = timedelta(hours=24)) -> None:
        self._executions: BoundedHistory[RemediationExecution] = BoundedHistory(
            max_size, timestamp_of=lambda e: e.timestamp, max_age=max_age
        )

    def add(self, execution: RemediationExecution) -> None:
        self._executions.append(execution)

    def get(self, execution_id: str) -> RemediationExecution | None:
        return self._executions.find(lambda e: e.id == execution_id)

    def in_cooldown(self, action_id: str, cooldown_minutes: float, now: datetime) -> bool:
        """True while a completed execution of *action_id* finished inside the cooldown."""
        if cooldown_minutes <= 0:
            return False
        cutoff = now - timedelta(minutes=cooldown_minutes)
        return self._executions.find(
            lambda e: e.action_id == action_id
            and e.status is ExecutionStatus.COMPLETED
            and (e.finished_at or e.timestamp) > cutoff
        ) is not None

    def executions_last_hour(self, action_id: str, now: datetime) -> int:
        return sum(1 for e in self._executions.since(now - _RATE_WINDOW) if e.action_id == action_id)

    def has_exceeded_limit(self, action_id: str, max_executions_per_hour: int, now: datetime) -> bool:
        return self.executions_last_hour(action_id, now) >= max_executions_per_hour

    def get_history(
        self,
        now: datetime,
        action_id: str | None = None,
        hours: float = 24,
    ) -> list[RemediationExecution]:
        """Executions newer than *hours*, newest first."""
        recent = self._executions.since(now - timedelta(hours=hours))
        if action_id is not None:
            recent = [e for e in recent if e.action_id == action_id]
        return sorted(recent, key=lambda e: e.timestamp, reverse=True)

    def pending_approvals(self) -> list[RemediationExecution]:
        return [e for e in self._executions if e.awaiting_approval]

    def prune(self, now: datetime) -> int:
        return self._executions.prune(now)

    def __len__(self) -> int:
        return len(self._executions)
