"""Application scheduler – InMemoryScheduler; jobs only run when triggered."""
from __future__ import annotations

from mp_reliability.application.scheduler.job import Job
from mp_reliability.application.scheduler.scheduler import JobExecutedEvent, JobExecutionContext
from mp_reliability.kernel.time import Clock, SystemClock

__all__ = ["InMemoryScheduler"]


class InMemoryScheduler:
    """Scheduler without a timer: :meth:`trigger` fires a registered job by hand."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self._jobs: dict[str, Job] = {}
        self._running = False
        self.execution_log: list[JobExecutedEvent] = []

    def add_job(self, job: Job) -> None:
        self._jobs[job.id] = job

    def remove_job(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False

    def list_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    async def trigger(self, job_id: str) -> JobExecutedEvent:
        job = self._jobs[job_id]
        event = await JobExecutionContext(job=job, clock=self._clock).run()
        self.execution_log.append(event)
        return event

    @property
    def is_running(self) -> bool:
        return self._running
