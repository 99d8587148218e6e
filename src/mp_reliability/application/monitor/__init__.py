"""Application monitor – ErrorBudgetMonitor and its ports."""
from mp_reliability.application.monitor.monitor import ErrorBudgetMonitor, EvaluationReport
from mp_reliability.application.monitor.ports import AlertSink, MetricsSource

__all__ = ["AlertSink", "ErrorBudgetMonitor", "EvaluationReport", "MetricsSource"]
