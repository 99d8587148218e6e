"""SLO – catalog, burn-rate arithmetic, policies and the error-budget tracker."""
from mp_reliability.slo.alerts import AlertDetails, AlertLevel, ErrorBudgetAlert
from mp_reliability.slo.burn_rate import (
    SLOStatus,
    calculate_burn_rate,
    calculate_error_budget_consumption,
    determine_slo_status,
    estimate_error_budget_depletion,
)
from mp_reliability.slo.catalog import (
    DEFAULT_SLO_TARGETS,
    BurnRateThresholds,
    BusinessImpact,
    BusinessSeverity,
    ErrorBudgetSpec,
    SLOCatalog,
    SLOTarget,
    SLOType,
    TimeWindow,
)
from mp_reliability.slo.observation import BurnRateObservation, RequestMetrics
from mp_reliability.slo.policy import (
    DEDUP_WINDOWS,
    DEFAULT_POLICIES,
    AlertKind,
    ErrorBudgetPolicy,
    PolicyActions,
    PolicyTriggers,
    recommended_actions,
)
from mp_reliability.slo.tracker import ErrorBudgetTracker, SustainedBurnState, TrackingResult

__all__ = [
    "AlertDetails",
    "AlertKind",
    "AlertLevel",
    "BurnRateObservation",
    "BurnRateThresholds",
    "BusinessImpact",
    "BusinessSeverity",
    "DEDUP_WINDOWS",
    "DEFAULT_POLICIES",
    "DEFAULT_SLO_TARGETS",
    "ErrorBudgetAlert",
    "ErrorBudgetPolicy",
    "ErrorBudgetSpec",
    "ErrorBudgetTracker",
    "PolicyActions",
    "PolicyTriggers",
    "RequestMetrics",
    "SLOCatalog",
    "SLOStatus",
    "SLOTarget",
    "SLOType",
    "SustainedBurnState",
    "TimeWindow",
    "TrackingResult",
    "calculate_burn_rate",
    "calculate_error_budget_consumption",
    "determine_slo_status",
    "estimate_error_budget_depletion",
    "recommended_actions",
]
