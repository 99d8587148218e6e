"""Unit tests for the RemediationExecution state machine and history."""
from __future__ import annotations

from datetime import timedelta

import pytest

from mp_reliability.remediation import (
    Approval,
    ExecutionResult,
    ExecutionStatus,
    ExecutionTrigger,
    InvalidExecutionTransitionError,
    RemediationExecution,
    RemediationHistory,
    TriggerType,
)
from mp_reliability.testing import FakeClock

NOW = FakeClock().now()


def make_execution(
    action_id: str = "auto_scale_up",
    *,
    minutes_ago: float = 0,
    status: ExecutionStatus = ExecutionStatus.PENDING,
    execution_id: str | None = None,
) -> RemediationExecution:
    timestamp = NOW - timedelta(minutes=minutes_ago)
    return RemediationExecution(
        id=execution_id or f"{action_id}_{minutes_ago}",
        action_id=action_id,
        slo_name="api_availability",
        trigger=ExecutionTrigger(TriggerType.MANUAL),
        timestamp=timestamp,
        status=status,
        finished_at=timestamp if status is ExecutionStatus.COMPLETED else None,
    )


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class TestTransitions:
    @pytest.mark.parametrize(
        "path",
        [
            [ExecutionStatus.RUNNING, ExecutionStatus.COMPLETED],
            [ExecutionStatus.RUNNING, ExecutionStatus.FAILED],
            [ExecutionStatus.CANCELLED],
        ],
    )
    def test_allowed_paths(self, path: list[ExecutionStatus]) -> None:
        execution = make_execution()
        for status in path:
            execution.transition(status)
        assert execution.status is path[-1]
        assert execution.is_terminal

    @pytest.mark.parametrize(
        ("start", "target"),
        [
            (ExecutionStatus.PENDING, ExecutionStatus.COMPLETED),
            (ExecutionStatus.RUNNING, ExecutionStatus.CANCELLED),
            (ExecutionStatus.RUNNING, ExecutionStatus.PENDING),
            (ExecutionStatus.COMPLETED, ExecutionStatus.RUNNING),
            (ExecutionStatus.CANCELLED, ExecutionStatus.RUNNING),
        ],
    )
    def test_forbidden_transitions(self, start: ExecutionStatus, target: ExecutionStatus) -> None:
        execution = make_execution(status=start)
        with pytest.raises(InvalidExecutionTransitionError):
            execution.transition(target)
        assert execution.status is start

    def test_awaiting_approval(self) -> None:
        execution = make_execution()
        assert not execution.awaiting_approval
        execution.approvals = Approval(required=True)
        assert execution.awaiting_approval
        execution.approvals.approved = True
        assert not execution.awaiting_approval

    def test_to_dict(self) -> None:
        execution = make_execution(status=ExecutionStatus.RUNNING)
        execution.result = ExecutionResult(success=True, message="ok", duration_ms=1.5)
        payload = execution.to_dict()
        assert payload["status"] == "running"
        assert payload["trigger"] == {"type": "manual"}
        assert payload["result"]["message"] == "ok"
        assert "approvals" not in payload


# ---------------------------------------------------------------------------
# RemediationHistory
# ---------------------------------------------------------------------------


class TestRemediationHistory:
    def test_get_by_id(self) -> None:
        history = RemediationHistory()
        execution = make_execution(execution_id="x1")
        history.add(execution)
        assert history.get("x1") is execution
        assert history.get("missing") is None

    def test_cooldown_only_counts_completed(self) -> None:
        history = RemediationHistory()
        history.add(make_execution(minutes_ago=5, status=ExecutionStatus.FAILED))
        assert not history.in_cooldown("auto_scale_up", 10, NOW)
        history.add(make_execution(minutes_ago=5, status=ExecutionStatus.COMPLETED, execution_id="c"))
        assert history.in_cooldown("auto_scale_up", 10, NOW)
        assert not history.in_cooldown("auto_scale_up", 5, NOW)
        assert not history.in_cooldown("load_shedding", 10, NOW)

    def test_zero_cooldown(self) -> None:
        history = RemediationHistory()
        history.add(make_execution(status=ExecutionStatus.COMPLETED))
        assert not history.in_cooldown("auto_scale_up", 0, NOW)

    def test_rate_limit_counts_any_status_in_trailing_hour(self) -> None:
        history = RemediationHistory()
        history.add(make_execution(minutes_ago=90, execution_id="old"))
        history.add(make_execution(minutes_ago=30, status=ExecutionStatus.FAILED, execution_id="f"))
        history.add(make_execution(minutes_ago=10, status=ExecutionStatus.CANCELLED, execution_id="c"))
        assert history.executions_last_hour("auto_scale_up", NOW) == 2
        assert history.has_exceeded_limit("auto_scale_up", 2, NOW)
        assert not history.has_exceeded_limit("auto_scale_up", 3, NOW)

    def test_get_history_filters_and_orders(self) -> None:
        history = RemediationHistory()
        history.add(make_execution(minutes_ago=20))
        history.add(make_execution("load_shedding", minutes_ago=10))
        history.add(make_execution(minutes_ago=5))
        assert [e.id for e in history.get_history(NOW, "auto_scale_up")] == ["auto_scale_up_5", "auto_scale_up_20"]
        assert len(history.get_history(NOW, hours=0.25)) == 2

    def test_bounded(self) -> None:
        history = RemediationHistory(max_size=2)
        for minutes in (3, 2, 1):
            history.add(make_execution(minutes_ago=minutes))
        assert len(history) == 2

    def test_prune(self) -> None:
        history = RemediationHistory(max_age=timedelta(hours=1))
        history.add(make_execution(minutes_ago=120))
        history.add(make_execution(minutes_ago=10))
        assert history.prune(NOW) == 1
        assert len(history) == 1
