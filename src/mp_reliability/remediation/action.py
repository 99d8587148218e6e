"""Remediation – action catalog entries and trigger matching."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mp_reliability.slo.alerts import AlertLevel
from mp_reliability.slo.catalog import BusinessSeverity

__all__ = [
    "ActionConditions",
    "ActionTriggers",
    "ActionType",
    "DEFAULT_REMEDIATION_ACTIONS",
    "ImplementationType",
    "MatchCriteria",
    "RemediationAction",
    "RemediationImplementation",
]


class ActionType(str, Enum):
    IMMEDIATE = "immediate"
    PROGRESSIVE = "progressive"
    MANUAL = "manual"


class ImplementationType(str, Enum):
    CIRCUIT_BREAKER = "circuit_breaker"
    LOAD_SHEDDING = "load_shedding"
    AUTO_SCALE = "auto_scale"
    ROLLBACK = "rollback"
    NOTIFICATION = "notification"
    FREEZE = "freeze"
    CUSTOM = "custom"


@dataclass(frozen=True)
class MatchCriteria:
    """What an incoming alert (or impact assessment) offers for matching."""

    slo_name: str
    severity: str
    burn_rate: float | None = None
    business_impact_level: str | None = None


@dataclass(frozen=True)
class ActionTriggers:
    """Trigger predicates; an empty ``slo_names`` matches every SLO."""

    severity_levels: tuple[AlertLevel, ...]
    slo_names: tuple[str, ...] = ()
    burn_rate_thresholds: tuple[float, ...] | None = None
    business_impact_levels: tuple[BusinessSeverity, ...] | None = None

    def matches(self, criteria: MatchCriteria) -> bool:
        if self.slo_names and criteria.slo_name not in self.slo_names:
            return False
        if criteria.severity not in {level.value for level in self.severity_levels}:
            return False
        if self.burn_rate_thresholds is not None and criteria.burn_rate is not None:
            if not any(threshold <= criteria.burn_rate for threshold in self.burn_rate_thresholds):
                return False
        if self.business_impact_levels is not None and criteria.business_impact_level is not None:
            if criteria.business_impact_level not in {level.value for level in self.business_impact_levels}:
                return False
        return True


@dataclass(frozen=True)
class ActionConditions:
    enabled: bool = True
    max_executions_per_hour: int = 1
    requires_approval: bool = False
    cooldown_minutes: float = 0


@dataclass(frozen=True)
class RemediationImplementation:
    type: ImplementationType
    parameters: dict[str, Any] = field(default_factory=dict)
    timeout_seconds: float = 60
    retry_count: int = 0


@dataclass(frozen=True)
class RemediationAction:
    id: str
    name: str
    triggers: ActionTriggers
    conditions: ActionConditions
    implementation: RemediationImplementation
    type: ActionType = ActionType.IMMEDIATE
    description: str = ""

    def validation_errors(self) -> list[dict[str, Any]]:
        errors: list[dict[str, Any]] = []
        if not self.id:
            errors.append({"field": "id", "message": "must not be empty"})
        if not self.triggers.severity_levels:
            errors.append({"field": "triggers.severity_levels", "message": "must not be empty"})
        if self.conditions.max_executions_per_hour < 1:
            errors.append({"field": "conditions.max_executions_per_hour", "message": "must be at least 1"})
        if self.conditions.cooldown_minutes < 0:
            errors.append({"field": "conditions.cooldown_minutes", "message": "must not be negative"})
        if not self.implementation.timeout_seconds > 0:
            errors.append({"field": "implementation.timeout_seconds", "message": "must be positive"})
        if self.implementation.retry_count < 0:
            errors.append({"field": "implementation.retry_count", "message": "must not be negative"})
        return errors


_CRITICAL = AlertLevel.CRITICAL
_WARNING = AlertLevel.WARNING
_EXHAUSTED = AlertLevel.EXHAUSTED

DEFAULT_REMEDIATION_ACTIONS: tuple[RemediationAction, ...] = (
    RemediationAction(
        id="circuit_breaker_activation",
        name="Circuit Breaker Activation",
        description="Open circuit breakers to stop cascading failures during high error rates",
        type=ActionType.IMMEDIATE,
        triggers=ActionTriggers(
            slo_names=("api_availability", "error_rate"),
            severity_levels=(_CRITICAL,),
            burn_rate_thresholds=(10.0,),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=5, requires_approval=False, cooldown_minutes=15
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.CIRCUIT_BREAKER,
            parameters={"service": "api", "failure_threshold": 50, "timeout_ms": 30000,
                        "monitoring_endpoint": "/api/health"},
            timeout_seconds=60,
            retry_count=2,
        ),
    ),
    RemediationAction(
        id="load_shedding",
        name="Load Shedding",
        description="Reject a share of non-critical requests to keep the service stable",
        type=ActionType.PROGRESSIVE,
        triggers=ActionTriggers(
            slo_names=("api_availability", "response_time"),
            severity_levels=(_CRITICAL, _WARNING),
            burn_rate_thresholds=(6.0,),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=10, requires_approval=False, cooldown_minutes=5
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.LOAD_SHEDDING,
            parameters={
                "shed_percentage": 20,
                "increment_percentage": 10,
                "max_shed_percentage": 50,
                "critical_endpoints": ["/api/health", "/api/ready"],
                "non_critical_patterns": ["/api/analytics", "/api/reporting"],
            },
            timeout_seconds=30,
            retry_count=1,
        ),
    ),
    RemediationAction(
        id="auto_scale_up",
        name="Auto Scale Up",
        description="Add capacity while latency or availability degrade",
        type=ActionType.PROGRESSIVE,
        triggers=ActionTriggers(
            slo_names=("response_time", "api_availability"),
            severity_levels=(_WARNING, _CRITICAL),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=3, requires_approval=False, cooldown_minutes=10
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.AUTO_SCALE,
            parameters={"scale_type": "horizontal", "target_utilization": 70,
                        "min_replicas": 2, "max_replicas": 10, "cooldown_period": 300},
            timeout_seconds=300,
            retry_count=2,
        ),
    ),
    RemediationAction(
        id="emergency_rollback",
        name="Emergency Rollback",
        description="Roll back to the previous stable release during critical failures",
        type=ActionType.IMMEDIATE,
        triggers=ActionTriggers(
            slo_names=("api_availability", "form_submission_success"),
            severity_levels=(_CRITICAL,),
            business_impact_levels=(BusinessSeverity.CRITICAL,),
            burn_rate_thresholds=(14.4,),
        ),
        conditions=ActionConditions(
            enabled=False, max_executions_per_hour=1, requires_approval=True, cooldown_minutes=60
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.ROLLBACK,
            parameters={"rollback_strategy": "blue_green", "health_check_url": "/api/health",
                        "rollback_timeout": 600, "verification_steps": ["health_check", "smoke_test"]},
            timeout_seconds=900,
            retry_count=1,
        ),
    ),
    RemediationAction(
        id="incident_escalation",
        name="Incident Escalation",
        description="Page the on-call team and open an incident ticket",
        type=ActionType.IMMEDIATE,
        triggers=ActionTriggers(
            slo_names=(),
            severity_levels=(_CRITICAL, _EXHAUSTED),
            business_impact_levels=(BusinessSeverity.HIGH, BusinessSeverity.CRITICAL),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=20, requires_approval=False, cooldown_minutes=30
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.NOTIFICATION,
            parameters={
                "channels": ["pagerduty", "slack", "email"],
                "escalation_policy": "sre-on-call",
                "incident_severity": "high",
                "ticket_system": "jira",
                "runbook": "https://docs.company.com/runbooks/slo-breach",
            },
            timeout_seconds=120,
            retry_count=3,
        ),
    ),
    RemediationAction(
        id="deployment_freeze",
        name="Deployment Freeze",
        description="Stop deployments and flag changes until the service recovers",
        type=ActionType.IMMEDIATE,
        triggers=ActionTriggers(
            slo_names=("api_availability", "error_rate"),
            severity_levels=(_CRITICAL,),
            burn_rate_thresholds=(10.0,),
            business_impact_levels=(BusinessSeverity.CRITICAL,),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=2, requires_approval=False, cooldown_minutes=120
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.FREEZE,
            parameters={
                "freeze_types": ["deployments", "feature_flags"],
                "duration": 3600,
                "exemptions": ["hotfixes", "security_patches"],
            },
            timeout_seconds=60,
            retry_count=1,
        ),
    ),
    RemediationAction(
        id="database_connection_pool_scaling",
        name="Database Connection Pool Scaling",
        description="Grow the database connection pool while queries are slow",
        type=ActionType.PROGRESSIVE,
        triggers=ActionTriggers(
            slo_names=("database_response_time",),
            severity_levels=(_WARNING, _CRITICAL),
        ),
        conditions=ActionConditions(
            enabled=True, max_executions_per_hour=5, requires_approval=False, cooldown_minutes=10
        ),
        implementation=RemediationImplementation(
            type=ImplementationType.CUSTOM,
            parameters={"action": "scale_db_pool", "current_pool_size": 10, "max_pool_size": 50,
                        "scale_increment": 5, "monitoring_duration": 300},
            timeout_seconds=120,
            retry_count=2,
        ),
    ),
)
