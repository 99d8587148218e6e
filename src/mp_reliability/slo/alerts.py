"""SLO – error-budget alert value objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from mp_reliability.slo.catalog import BusinessSeverity
from mp_reliability.slo.policy import AlertKind

__all__ = ["AlertDetails", "AlertLevel", "ErrorBudgetAlert"]


class AlertLevel(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class AlertDetails:
    current_burn_rate: float
    threshold_burn_rate: float
    error_budget_remaining: float
    estimated_exhaustion: datetime | None
    business_impact: BusinessSeverity
    recommended_actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ErrorBudgetAlert:
    id: str
    slo_name: str
    level: AlertLevel
    kind: AlertKind
    policy_name: str
    timestamp: datetime
    message: str
    details: AlertDetails
    channels: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for a notification layer (timestamps as ISO-8601)."""
        exhaustion = self.details.estimated_exhaustion
        return {
            "id": self.id,
            "slo_name": self.slo_name,
            "level": self.level.value,
            "kind": self.kind.value,
            "policy_name": self.policy_name,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "details": {
                "current_burn_rate": self.details.current_burn_rate,
                "threshold_burn_rate": self.details.threshold_burn_rate,
                "error_budget_remaining": self.details.error_budget_remaining,
                "estimated_exhaustion": exhaustion.isoformat() if exhaustion else None,
                "business_impact": self.details.business_impact.value,
                "recommended_actions": list(self.details.recommended_actions),
            },
            "channels": list(self.channels),
        }
