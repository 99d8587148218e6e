"""Remediation – action catalog, execution history and the RemediationEngine."""
from mp_reliability.remediation.action import (
    DEFAULT_REMEDIATION_ACTIONS,
    ActionConditions,
    ActionTriggers,
    ActionType,
    ImplementationType,
    MatchCriteria,
    RemediationAction,
    RemediationImplementation,
)
from mp_reliability.remediation.engine import RemediationEngine
from mp_reliability.remediation.execution import (
    Approval,
    BusinessImpactAssessment,
    ExecutionResult,
    ExecutionStatus,
    ExecutionTrigger,
    InvalidExecutionTransitionError,
    RemediationExecution,
    TriggerType,
)
from mp_reliability.remediation.handlers import (
    HandlerOutcome,
    HandlerRegistry,
    RemediationHandler,
    RemediationHandlerError,
)
from mp_reliability.remediation.history import RemediationHistory

__all__ = [
    "ActionConditions",
    "ActionTriggers",
    "ActionType",
    "Approval",
    "BusinessImpactAssessment",
    "DEFAULT_REMEDIATION_ACTIONS",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutionTrigger",
    "HandlerOutcome",
    "HandlerRegistry",
    "ImplementationType",
    "InvalidExecutionTransitionError",
    "MatchCriteria",
    "RemediationAction",
    "RemediationEngine",
    "RemediationExecution",
    "RemediationHandler",
    "RemediationHandlerError",
    "RemediationHistory",
    "TriggerType",
]
