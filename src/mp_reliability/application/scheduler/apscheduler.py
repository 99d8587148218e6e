"""Application scheduler – APSchedulerAdapter (requires the apscheduler>=4 extra)."""
from __future__ import annotations

from contextlib import AsyncExitStack
from typing import Any

from mp_reliability.application.scheduler.job import Job
from mp_reliability.application.scheduler.scheduler import JobExecutionContext
from mp_reliability.observability.logging import get_logger

__all__ = ["APSchedulerAdapter"]

logger = get_logger(__name__)


def _require_apscheduler() -> Any:  # pragma: no cover
    try:
        import apscheduler  # noqa: PLC0415
        return apscheduler
    except ImportError as exc:
        raise ImportError(
            "APScheduler>=4.0 is required. "
            "Install it with: pip install 'mp-reliability[scheduler]'"
        ) from exc


class APSchedulerAdapter:
    """Scheduler backed by an in-process APScheduler 4 ``AsyncScheduler``."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._scheduler: Any | None = None
        self._stack: AsyncExitStack | None = None

    def add_job(self, job: Job) -> None:
        self._jobs[job.id] = job

    def remove_job(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)

    def list_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    async def start(self) -> None:  # pragma: no cover
        _require_apscheduler()
        from apscheduler import AsyncScheduler  # noqa: PLC0415

        self._stack = AsyncExitStack()
        self._scheduler = await self._stack.enter_async_context(AsyncScheduler())
        for job in self._jobs.values():
            if job.enabled:
                await self._register_job(self._scheduler, job)
        await self._scheduler.start_in_background()
        logger.info("scheduler.started", jobs=[job.id for job in self._jobs.values()])

    async def _register_job(self, scheduler: Any, job: Job) -> None:  # pragma: no cover
        from apscheduler import ConflictPolicy  # noqa: PLC0415
        from apscheduler.triggers.cron import CronTrigger  # noqa: PLC0415
        from apscheduler.triggers.interval import IntervalTrigger  # noqa: PLC0415

        async def _handler() -> None:
            await JobExecutionContext(job=job).run()

        if job.cron:
            trigger = CronTrigger.from_crontab(job.cron)
        else:
            trigger = IntervalTrigger(seconds=job.interval_seconds)

        await scheduler.configure_task(job.id, func=_handler)
        await scheduler.add_schedule(job.id, trigger, id=job.id, conflict_policy=ConflictPolicy.replace)

    async def stop(self) -> None:  # pragma: no cover
        if self._scheduler is not None:
            await self._scheduler.stop()
            await self._scheduler.wait_until_stopped()
        if self._stack is not None:
            await self._stack.aclose()
        self._scheduler = None
        self._stack = None
        logger.info("scheduler.stopped")
