"""Testing fakes – alert sinks."""
from __future__ import annotations

from mp_reliability.slo.alerts import AlertLevel, ErrorBudgetAlert

__all__ = ["FailingAlertSink", "InMemoryAlertSink"]


class InMemoryAlertSink:
    """Collects delivered alerts in order."""

    def __init__(self) -> None:
        self.delivered: list[ErrorBudgetAlert] = []

    async def deliver(self, alert: ErrorBudgetAlert) -> None:
        self.delivered.append(alert)

    def by_level(self, level: AlertLevel) -> list[ErrorBudgetAlert]:
        return [a for a in self.delivered if a.level is level]

    def clear(self) -> None:
        self.delivered.clear()


class FailingAlertSink:
    """Raises on every delivery; counts attempts."""

    def __init__(self, error: Exception | None = None) -> None:
        self._error = error or RuntimeError("sink unavailable")
        self.attempts = 0

    async def deliver(self, alert: ErrorBudgetAlert) -> None:
        self.attempts += 1
        raise self._error
