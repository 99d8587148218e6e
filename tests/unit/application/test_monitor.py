"""Unit tests for ErrorBudgetMonitor."""
from __future__ import annotations

import asyncio

import pytest

from mp_reliability.application.monitor import ErrorBudgetMonitor
from mp_reliability.application.monitor.monitor import MONITOR_JOB_ID
from mp_reliability.application.scheduler import InMemoryScheduler
from mp_reliability.config import ReliabilitySettings
from mp_reliability.kernel.time import FrozenClock
from mp_reliability.remediation import ExecutionStatus, RemediationEngine
from mp_reliability.slo import AlertLevel, BurnRateObservation, ErrorBudgetTracker
from mp_reliability.testing import (
    FailingAlertSink,
    FakeClock,
    InMemoryAlertSink,
    StaticMetricsSource,
)

# 7.2 % errors against a 0.5 % budget over one hour: burn 345.6, budget gone
FAST_BURN = BurnRateObservation("api_availability", 7.2, 0.5, 1)
HEALTHY = BurnRateObservation("response_time", 0.5, 5.0, 24)


def make_monitor(
    clock: FrozenClock,
    source: StaticMetricsSource,
    *sinks: object,
    engine: RemediationEngine | None = None,
    scheduler: InMemoryScheduler | None = None,
) -> ErrorBudgetMonitor:
    return ErrorBudgetMonitor(
        ErrorBudgetTracker(clock=clock),
        source,
        engine=engine,
        sinks=sinks,  # type: ignore[arg-type]
        scheduler=scheduler,
    )


class TestEvaluateOnce:
    def test_alerts_reach_sinks_and_engine(self) -> None:
        clock = FakeClock()
        sink = InMemoryAlertSink()
        engine = RemediationEngine(clock=clock)
        monitor = make_monitor(clock, StaticMetricsSource([FAST_BURN, HEALTHY]), sink, engine=engine)

        report = asyncio.run(monitor.evaluate_once())

        assert report.observations == 2
        assert [a.level for a in report.alerts] == [AlertLevel.EXHAUSTED]
        assert sink.delivered == report.alerts
        assert [e.action_id for e in report.executions] == ["incident_escalation"]
        assert report.executions[0].status is ExecutionStatus.COMPLETED

    def test_sustained_burn_escalates_on_later_tick(self) -> None:
        clock = FakeClock()
        sink = InMemoryAlertSink()
        monitor = make_monitor(clock, StaticMetricsSource([FAST_BURN]), sink)
        asyncio.run(monitor.evaluate_once())
        clock.advance(minutes=2)
        report = asyncio.run(monitor.evaluate_once())
        assert [a.level for a in report.alerts] == [AlertLevel.CRITICAL]
        assert len(sink.by_level(AlertLevel.CRITICAL)) == 1

    def test_failing_sink_is_isolated(self) -> None:
        clock = FakeClock()
        failing, healthy = FailingAlertSink(), InMemoryAlertSink()
        monitor = make_monitor(clock, StaticMetricsSource([FAST_BURN]), failing, healthy)
        report = asyncio.run(monitor.evaluate_once())
        assert report.failed_deliveries == 1
        assert failing.attempts == 1
        assert len(healthy.delivered) == 1

    def test_without_engine(self) -> None:
        monitor = make_monitor(FakeClock(), StaticMetricsSource([FAST_BURN]))
        report = asyncio.run(monitor.evaluate_once())
        assert report.executions == []

    def test_source_errors_propagate(self) -> None:
        class BrokenSource:
            async def collect(self) -> list[BurnRateObservation]:
                raise RuntimeError("metrics backend unavailable")

        monitor = ErrorBudgetMonitor(ErrorBudgetTracker(clock=FakeClock()), BrokenSource())
        with pytest.raises(RuntimeError):
            asyncio.run(monitor.evaluate_once())


class TestLifecycle:
    def test_start_registers_interval_job(self) -> None:
        scheduler = InMemoryScheduler()
        source = StaticMetricsSource([HEALTHY])
        monitor = make_monitor(FakeClock(), source, scheduler=scheduler)

        async def run() -> None:
            await monitor.start()
            assert monitor.is_running and scheduler.is_running
            (job,) = scheduler.list_jobs()
            assert job.id == MONITOR_JOB_ID
            assert job.interval_seconds == 60
            event = await scheduler.trigger(MONITOR_JOB_ID)
            assert event.success

        asyncio.run(run())
        assert source.collect_count == 1

    def test_stop_waits_for_in_flight_evaluation(self) -> None:
        scheduler = InMemoryScheduler()
        release = asyncio.Event()
        finished: list[bool] = []

        class SlowSource:
            async def collect(self) -> list[BurnRateObservation]:
                await release.wait()
                finished.append(True)
                return []

        monitor = ErrorBudgetMonitor(
            ErrorBudgetTracker(clock=FakeClock()), SlowSource(), scheduler=scheduler
        )

        async def run() -> None:
            await monitor.start()
            tick = asyncio.create_task(scheduler.trigger(MONITOR_JOB_ID))
            await asyncio.sleep(0)
            stopping = asyncio.create_task(monitor.stop())
            await asyncio.sleep(0)
            assert scheduler.is_running
            release.set()
            await asyncio.gather(tick, stopping)

        asyncio.run(run())
        assert finished == [True]
        assert not scheduler.is_running
        assert scheduler.list_jobs() == []
        assert not monitor.is_running

    def test_tick_after_stop_is_noop(self) -> None:
        scheduler = InMemoryScheduler()
        source = StaticMetricsSource([HEALTHY])
        monitor = make_monitor(FakeClock(), source, scheduler=scheduler)

        async def run() -> None:
            await monitor.start()
            job = scheduler.list_jobs()[0]
            await monitor.stop()
            await job.handler()

        asyncio.run(run())
        assert source.collect_count == 0

    def test_source_failure_is_reported_by_scheduler(self) -> None:
        class BrokenSource:
            async def collect(self) -> list[BurnRateObservation]:
                raise RuntimeError("metrics backend unavailable")

        scheduler = InMemoryScheduler()
        monitor = ErrorBudgetMonitor(
            ErrorBudgetTracker(clock=FakeClock()), BrokenSource(), scheduler=scheduler
        )

        async def run() -> None:
            await monitor.start()
            event = await scheduler.trigger(MONITOR_JOB_ID)
            assert event.error == "metrics backend unavailable"

        asyncio.run(run())

    def test_from_settings(self) -> None:
        scheduler = InMemoryScheduler()
        monitor = ErrorBudgetMonitor.from_settings(
            ReliabilitySettings(evaluation_interval_seconds=15),
            ErrorBudgetTracker(clock=FakeClock()),
            StaticMetricsSource(),
            scheduler=scheduler,
        )
        asyncio.run(monitor.start())
        assert scheduler.list_jobs()[0].interval_seconds == 15

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            ErrorBudgetMonitor(ErrorBudgetTracker(), StaticMetricsSource(), interval_seconds=0)
