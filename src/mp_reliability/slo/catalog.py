"""SLO – target definitions and the SLOCatalog registry."""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from mp_reliability.kernel.errors import NotFoundError, ValidationError
from mp_reliability.observability.logging import get_logger
from mp_reliability.slo.burn_rate import SLOStatus, determine_slo_status

__all__ = [
    "BurnRateThresholds",
    "BusinessImpact",
    "BusinessSeverity",
    "DEFAULT_SLO_TARGETS",
    "ErrorBudgetSpec",
    "SLOCatalog",
    "SLOTarget",
    "SLOType",
    "TimeWindow",
]

logger = get_logger(__name__)


class SLOType(str, Enum):
    AVAILABILITY = "availability"
    LATENCY = "latency"
    ERROR_RATE = "error_rate"
    THROUGHPUT = "throughput"


class BusinessSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class TimeWindow:
    duration_hours: float
    rolling: bool = True


@dataclass(frozen=True)
class BurnRateThresholds:
    critical: float = 14.4
    warning: float = 6.0


@dataclass(frozen=True)
class ErrorBudgetSpec:
    allowed_error_rate: float
    burn_rate_thresholds: BurnRateThresholds = field(default_factory=BurnRateThresholds)


@dataclass(frozen=True)
class BusinessImpact:
    severity: BusinessSeverity
    description: str = ""
    affected_features: tuple[str, ...] = ()


@dataclass(frozen=True)
class SLOTarget:
    """Immutable Service Level Objective definition.

    ``target`` and ``threshold`` are percentages (0–100); ``target`` is the
    objective and ``threshold`` the breach line below it.  The allowed error
    rate of the error budget is ``100 - target``.
    """

    name: str
    type: SLOType
    target: float
    threshold: float
    time_window: TimeWindow
    error_budget: ErrorBudgetSpec
    business_impact: BusinessImpact
    description: str = ""

    @classmethod
    def create(
        cls,
        name: str,
        type: SLOType | str,
        target: float,
        threshold: float,
        *,
        window_hours: float = 24.0,
        severity: BusinessSeverity | str = BusinessSeverity.MEDIUM,
        critical_burn_rate: float = 14.4,
        warning_burn_rate: float = 6.0,
        description: str = "",
        affected_features: Iterable[str] = (),
    ) -> SLOTarget:
        """Build a target, deriving ``allowed_error_rate`` as ``100 - target``."""
        return cls(
            name=name,
            type=SLOType(type),
            target=target,
            threshold=threshold,
            time_window=TimeWindow(duration_hours=window_hours),
            error_budget=ErrorBudgetSpec(
                allowed_error_rate=round(100.0 - target, 10),
                burn_rate_thresholds=BurnRateThresholds(
                    critical=critical_burn_rate, warning=warning_burn_rate
                ),
            ),
            business_impact=BusinessImpact(
                severity=BusinessSeverity(severity),
                affected_features=tuple(affected_features),
            ),
            description=description,
        )

    def validation_errors(self) -> list[dict[str, Any]]:
        """Return field-level problems; an empty list means the target is valid."""
        errors: list[dict[str, Any]] = []

        def _err(name: str, message: str) -> None:
            errors.append({"field": name, "message": message})

        if not self.name:
            _err("name", "must not be empty")
        for name, value in (("target", self.target), ("threshold", self.threshold)):
            if not math.isfinite(value) or not 0 <= value <= 100:
                _err(name, "must be a percentage between 0 and 100")
        if self.target <= self.threshold:
            _err("target", "must exceed threshold")
        if not self.time_window.duration_hours > 0:
            _err("time_window.duration_hours", "must be positive")

        budget = self.error_budget
        if not budget.allowed_error_rate >= 0:
            _err("error_budget.allowed_error_rate", "must not be negative")
        burn = budget.burn_rate_thresholds
        if not burn.warning > 0:
            _err("error_budget.burn_rate_thresholds.warning", "must be positive")
        if not burn.critical > burn.warning:
            _err("error_budget.burn_rate_thresholds.critical", "must exceed warning")
        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise ValidationError(f"Invalid SLO target '{self.name}'", errors=errors)


DEFAULT_SLO_TARGETS: tuple[SLOTarget, ...] = (
    SLOTarget.create(
        "api_availability",
        SLOType.AVAILABILITY,
        99.5,
        99.0,
        window_hours=24,
        severity=BusinessSeverity.CRITICAL,
        description="Share of API requests answered without a server error",
        affected_features=("authentication", "form_submission", "page_load"),
    ),
    SLOTarget.create(
        "response_time",
        SLOType.LATENCY,
        95.0,
        90.0,
        window_hours=24,
        severity=BusinessSeverity.HIGH,
        description="Share of requests served under the latency objective",
        affected_features=("page_load",),
    ),
    SLOTarget.create(
        "error_rate",
        SLOType.ERROR_RATE,
        99.0,
        98.0,
        window_hours=1,
        severity=BusinessSeverity.HIGH,
        description="Share of requests completing without an application error",
    ),
    SLOTarget.create(
        "form_submission_success",
        SLOType.AVAILABILITY,
        99.9,
        99.5,
        window_hours=24,
        severity=BusinessSeverity.CRITICAL,
        description="Share of form submissions persisted successfully",
        affected_features=("form_submission", "registration"),
    ),
    SLOTarget.create(
        "database_response_time",
        SLOType.LATENCY,
        99.0,
        97.0,
        window_hours=1,
        severity=BusinessSeverity.MEDIUM,
        description="Share of database queries completing under the latency objective",
    ),
)


class SLOCatalog:
    """Mutable registry of :class:`SLOTarget` definitions keyed by name.

    Every target is validated on the way in; an invalid definition raises
    :class:`ValidationError` and leaves the catalog unchanged.
    """

    def __init__(self, targets: Iterable[SLOTarget] | None = None) -> None:
        self._targets: dict[str, SLOTarget] = {}
        for target in DEFAULT_SLO_TARGETS if targets is None else targets:
            self.register(target)

    def register(self, target: SLOTarget) -> None:
        """Add *target*; registering an existing name replaces it."""
        target.validate()
        replaced = target.name in self._targets
        self._targets[target.name] = target
        logger.info("slo.registered", slo_name=target.name, replaced=replaced)

    def replace(self, name: str, /, **changes: Any) -> SLOTarget:
        """Return and store a copy of *name* with *changes* applied."""
        current = self.get_or_raise(name)
        updated = dataclasses.replace(current, **changes)
        if updated.name != name:
            raise ValidationError(
                f"Cannot rename SLO target '{name}'",
                errors=[{"field": "name", "message": "must not change on replace"}],
            )
        self.register(updated)
        return updated

    def remove(self, name: str) -> bool:
        removed = self._targets.pop(name, None) is not None
        if removed:
            logger.info("slo.removed", slo_name=name)
        return removed

    def get(self, name: str) -> SLOTarget | None:
        return self._targets.get(name)

    def get_or_raise(self, name: str) -> SLOTarget:
        target = self._targets.get(name)
        if target is None:
            raise NotFoundError("SLO target", name)
        return target

    def targets(self) -> list[SLOTarget]:
        return list(self._targets.values())

    def by_severity(self, severity: BusinessSeverity | str) -> list[SLOTarget]:
        wanted = BusinessSeverity(severity)
        return [t for t in self._targets.values() if t.business_impact.severity == wanted]

    def evaluate(self, name: str, current_value: float) -> SLOStatus:
        """Classify *current_value* against the target's objective and threshold."""
        target = self.get_or_raise(name)
        return determine_slo_status(current_value, target.target, target.threshold)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __len__(self) -> int:
        return len(self._targets)
