"""Application scheduler – job scheduling ports and in-memory implementation."""
from mp_reliability.application.scheduler.apscheduler import APSchedulerAdapter
from mp_reliability.application.scheduler.in_memory import InMemoryScheduler
from mp_reliability.application.scheduler.job import Job
from mp_reliability.application.scheduler.scheduler import (
    JobExecutedEvent,
    JobExecutionContext,
    Scheduler,
)

__all__ = [
    "APSchedulerAdapter",
    "InMemoryScheduler",
    "Job",
    "JobExecutedEvent",
    "JobExecutionContext",
    "Scheduler",
]
