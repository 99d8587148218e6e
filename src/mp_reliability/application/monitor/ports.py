"""Monitor ports – where observations come from and where alerts go."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from mp_reliability.slo.alerts import ErrorBudgetAlert
from mp_reliability.slo.observation import BurnRateObservation

__all__ = ["AlertSink", "MetricsSource"]


@runtime_checkable
class MetricsSource(Protocol):
    """Port: produce the current burn-rate observations, one per SLO."""

    async def collect(self) -> list[BurnRateObservation]: ...


@runtime_checkable
class AlertSink(Protocol):
    """Port: deliver an emitted alert (pager, chat, e-mail, ...)."""

    async def deliver(self, alert: ErrorBudgetAlert) -> None: ...
