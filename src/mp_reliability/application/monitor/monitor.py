"""Monitor – periodic evaluation loop tying tracker, engine and sinks together."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from mp_reliability.application.monitor.ports import AlertSink, MetricsSource
from mp_reliability.application.scheduler import InMemoryScheduler, Job, Scheduler
from mp_reliability.observability.logging import get_logger
from mp_reliability.remediation.engine import RemediationEngine
from mp_reliability.remediation.execution import RemediationExecution
from mp_reliability.slo.alerts import ErrorBudgetAlert
from mp_reliability.slo.tracker import ErrorBudgetTracker

if TYPE_CHECKING:
    from mp_reliability.config.settings import ReliabilitySettings

__all__ = ["MONITOR_JOB_ID", "ErrorBudgetMonitor", "EvaluationReport"]

logger = get_logger(__name__)

MONITOR_JOB_ID = "error_budget_monitor"


@dataclass(frozen=True)
class EvaluationReport:
    observations: int = 0
    alerts: list[ErrorBudgetAlert] = field(default_factory=list)
    executions: list[RemediationExecution] = field(default_factory=list)
    failed_observations: int = 0
    failed_deliveries: int = 0


class ErrorBudgetMonitor:
    """Pulls observations on a schedule and fans the resulting alerts out.

    One evaluation runs at a time. A failing sink or a failing observation is
    logged and skipped; the rest of the tick still runs.
    """

    def __init__(
        self,
        tracker: ErrorBudgetTracker,
        source: MetricsSource,
        *,
        engine: RemediationEngine | None = None,
        sinks: Iterable[AlertSink] = (),
        scheduler: Scheduler | None = None,
        interval_seconds: float = 60,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._tracker = tracker
        self._source = source
        self._engine = engine
        self._sinks = list(sinks)
        self._scheduler: Scheduler = scheduler or InMemoryScheduler()
        self._interval_seconds = interval_seconds
        self._evaluation_lock = asyncio.Lock()
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings: ReliabilitySettings,
        tracker: ErrorBudgetTracker,
        source: MetricsSource,
        *,
        engine: RemediationEngine | None = None,
        sinks: Iterable[AlertSink] = (),
        scheduler: Scheduler | None = None,
    ) -> ErrorBudgetMonitor:
        return cls(
            tracker,
            source,
            engine=engine,
            sinks=sinks,
            scheduler=scheduler,
            interval_seconds=settings.evaluation_interval_seconds,
        )

    @property
    def is_running(self) -> bool:
        return self._running

    def add_sink(self, sink: AlertSink) -> None:
        self._sinks.append(sink)

    async def evaluate_once(self) -> EvaluationReport:
        async with self._evaluation_lock:
            return await self._evaluate()

    async def _evaluate(self) -> EvaluationReport:
        observations = await self._source.collect()
        alerts: list[ErrorBudgetAlert] = []
        executions: list[RemediationExecution] = []
        failed_observations = 0
        failed_deliveries = 0

        for observation in observations:
            try:
                result = await self._tracker.track(observation)
            except Exception:  # noqa: BLE001
                failed_observations += 1
                logger.exception("monitor.observation_failed", slo_name=observation.slo_name)
                continue
            for alert in result.alerts:
                alerts.append(alert)
                failed_deliveries += await self._deliver(alert)
                if self._engine is not None:
                    executions.extend(await self._engine.process_alert(alert))

        pruned = self._tracker.prune_history()
        if self._engine is not None:
            pruned += self._engine.prune_history()

        logger.info(
            "monitor.evaluated",
            observations=len(observations),
            alerts=len(alerts),
            executions=len(executions),
            pruned=pruned,
        )
        return EvaluationReport(
            observations=len(observations),
            alerts=alerts,
            executions=executions,
            failed_observations=failed_observations,
            failed_deliveries=failed_deliveries,
        )

    async def _deliver(self, alert: ErrorBudgetAlert) -> int:
        failures = 0
        for sink in self._sinks:
            try:
                await sink.deliver(alert)
            except Exception:  # noqa: BLE001
                failures += 1
                logger.exception(
                    "monitor.delivery_failed",
                    alert_id=alert.id,
                    sink=type(sink).__name__,
                )
        return failures

    async def _tick(self) -> None:
        if self._running:
            await self.evaluate_once()

    async def start(self) -> None:
        if self._running:
            return
        self._scheduler.add_job(
            Job(
                id=MONITOR_JOB_ID,
                name="Error budget evaluation",
                handler=self._tick,
                interval_seconds=self._interval_seconds,
            )
        )
        self._running = True
        await self._scheduler.start()
        logger.info("monitor.started", interval_seconds=self._interval_seconds)

    async def stop(self) -> None:
        """Stop scheduling; an evaluation already in flight is allowed to finish."""
        if not self._running:
            return
        self._running = False
        async with self._evaluation_lock:
            self._scheduler.remove_job(MONITOR_JOB_ID)
            await self._scheduler.stop()
        logger.info("monitor.stopped")
