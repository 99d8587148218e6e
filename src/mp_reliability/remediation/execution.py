"""Remediation – execution records and their status state machine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from mp_reliability.kernel.errors import ConflictError
from mp_reliability.slo.catalog import BusinessSeverity

__all__ = [
    "Approval",
    "BusinessImpactAssessment",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutionTrigger",
    "InvalidExecutionTransitionError",
    "RemediationExecution",
    "TriggerType",
]


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


_TRANSITIONS: dict[ExecutionStatus, frozenset[ExecutionStatus]] = {
    ExecutionStatus.PENDING: frozenset({ExecutionStatus.RUNNING, ExecutionStatus.CANCELLED}),
    ExecutionStatus.RUNNING: frozenset({ExecutionStatus.COMPLETED, ExecutionStatus.FAILED}),
    ExecutionStatus.COMPLETED: frozenset(),
    ExecutionStatus.FAILED: frozenset(),
    ExecutionStatus.CANCELLED: frozenset(),
}


class InvalidExecutionTransitionError(ConflictError):
    """Raised on a status change the execution state machine forbids."""

    default_code = "invalid_execution_transition"

    def __init__(self, execution_id: str, from_status: ExecutionStatus, to_status: ExecutionStatus) -> None:
        super().__init__(
            f"Execution '{execution_id}' cannot move from {from_status.value} to {to_status.value}"
        )
        self.execution_id = execution_id
        self.from_status = from_status
        self.to_status = to_status


class TriggerType(str, Enum):
    ERROR_BUDGET_ALERT = "error_budget_alert"
    BUSINESS_IMPACT = "business_impact"
    MANUAL = "manual"


@dataclass(frozen=True)
class BusinessImpactAssessment:
    """Business-side view of an SLO degradation, produced outside the engine."""

    slo_name: str
    severity: BusinessSeverity
    affected_users: int = 0
    description: str = ""


@dataclass(frozen=True)
class ExecutionTrigger:
    type: TriggerType
    data: Any = None


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    message: str
    duration_ms: float
    artifacts: dict[str, Any] | None = None


@dataclass
class Approval:
    required: bool = True
    approved: bool = False
    approved_by: str | None = None
    approved_at: datetime | None = None


@dataclass
class RemediationExecution:
    id: str
    action_id: str
    slo_name: str
    trigger: ExecutionTrigger
    timestamp: datetime
    status: ExecutionStatus = ExecutionStatus.PENDING
    result: ExecutionResult | None = None
    approvals: Approval | None = None
    finished_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.status]

    @property
    def awaiting_approval(self) -> bool:
        return (
            self.status is ExecutionStatus.PENDING
            and self.approvals is not None
            and self.approvals.required
            and not self.approvals.approved
        )

    def transition(self, new_status: ExecutionStatus) -> None:
        if new_status not in _TRANSITIONS[self.status]:
            raise InvalidExecutionTransitionError(self.id, self.status, new_status)
        self.status = new_status

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "action_id": self.action_id,
            "slo_name": self.slo_name,
            "trigger": {"type": self.trigger.type.value},
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
        if self.result is not None:
            payload["result"] = {
                "success": self.result.success,
                "message": self.result.message,
                "duration_ms": self.result.duration_ms,
                "artifacts": self.result.artifacts,
            }
        if self.approvals is not None:
            payload["approvals"] = {
                "required": self.approvals.required,
                "approved": self.approvals.approved,
                "approved_by": self.approvals.approved_by,
                "approved_at": self.approvals.approved_at.isoformat() if self.approvals.approved_at else None,
            }
        return payload
