"""Resilience – CircuitBreakerPolicy."""
from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mp_reliability.config.settings import ReliabilitySettings


@dataclasses.dataclass(frozen=True)
class CircuitBreakerPolicy:
    """Configuration for a circuit breaker.

    The breaker opens after ``failure_threshold`` failures inside
    ``window_seconds``, probes again once ``recovery_seconds`` have passed
    since the last failure, and forgets its failure count when the window
    elapses without a new failure.
    """
    failure_threshold: int = 10
    window_seconds: float = 600.0
    recovery_seconds: float = 300.0
    excluded_exceptions: tuple[type[Exception], ...] = ()

    @classmethod
    def from_settings(cls, settings: ReliabilitySettings) -> CircuitBreakerPolicy:
        return cls(
            failure_threshold=settings.breaker_failure_threshold,
            window_seconds=settings.breaker_window_seconds,
            recovery_seconds=settings.breaker_recovery_seconds,
        )


__all__ = ["CircuitBreakerPolicy"]
