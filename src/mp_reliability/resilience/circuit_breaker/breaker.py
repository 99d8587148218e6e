"""Resilience – CircuitBreaker implementation."""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, TypeVar

from mp_reliability.kernel.time import Clock, SystemClock
from mp_reliability.observability.logging import get_logger
from mp_reliability.resilience.circuit_breaker.errors import CircuitOpenError
from mp_reliability.resilience.circuit_breaker.policy import CircuitBreakerPolicy
from mp_reliability.resilience.circuit_breaker.state import CircuitBreakerState

T = TypeVar("T")
logger = get_logger(__name__)


class CircuitBreaker:
    """Asyncio-safe three-state circuit breaker.

    ``CLOSED -> OPEN`` on reaching the failure threshold inside the window,
    ``OPEN -> HALF_OPEN`` once the recovery period has passed since the last
    failure, ``HALF_OPEN -> CLOSED`` on the next success and
    ``HALF_OPEN -> OPEN`` on the next failure (restarting the recovery
    period).
    """

    def __init__(
        self,
        name: str,
        policy: CircuitBreakerPolicy | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        self.name = name
        self._policy = policy or CircuitBreakerPolicy()
        self._clock: Clock = clock or SystemClock()
        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._last_failure_at: datetime | None = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitBreakerState:
        self._refresh()
        return self._state

    @property
    def failure_count(self) -> int:
        self._refresh()
        return self._failure_count

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        async with self._lock:
            if self.state == CircuitBreakerState.OPEN:
                raise CircuitOpenError(self.name)

        try:
            result = await func()
        except Exception as exc:
            if not isinstance(exc, self._policy.excluded_exceptions):
                async with self._lock:
                    self.record_failure()
            raise
        async with self._lock:
            self.record_success()
        return result

    def record_success(self) -> None:
        if self.state == CircuitBreakerState.HALF_OPEN:
            self._failure_count = 0
            self._transition(CircuitBreakerState.CLOSED)

    def record_failure(self) -> None:
        now = self._clock.now()
        state = self.state
        self._last_failure_at = now
        if state == CircuitBreakerState.HALF_OPEN:
            self._transition(CircuitBreakerState.OPEN)
            return
        self._failure_count += 1
        logger.warning(
            "circuit_breaker.failure",
            name=self.name,
            count=self._failure_count,
            threshold=self._policy.failure_threshold,
        )
        if state == CircuitBreakerState.CLOSED and self._failure_count >= self._policy.failure_threshold:
            self._transition(CircuitBreakerState.OPEN)

    def force_open(self, reason: str = "manual") -> None:
        """Open the breaker regardless of the failure count."""
        self._last_failure_at = self._clock.now()
        self._transition(CircuitBreakerState.OPEN, reason=reason)

    def reset(self) -> None:
        self._failure_count = 0
        self._last_failure_at = None
        self._transition(CircuitBreakerState.CLOSED, reason="reset")

    def _refresh(self) -> None:
        if self._last_failure_at is None:
            return
        elapsed = (self._clock.now() - self._last_failure_at).total_seconds()
        if self._state == CircuitBreakerState.OPEN:
            if elapsed >= self._policy.recovery_seconds:
                self._transition(CircuitBreakerState.HALF_OPEN)
            else:
                return
        if elapsed >= self._policy.window_seconds and (
            self._failure_count or self._state != CircuitBreakerState.CLOSED
        ):
            self._failure_count = 0
            self._transition(CircuitBreakerState.CLOSED, reason="window_expired")

    def _transition(self, new_state: CircuitBreakerState, *, reason: str | None = None) -> None:
        previous = self._state
        self._state = new_state
        if previous == new_state:
            return
        log = logger.error if new_state == CircuitBreakerState.OPEN else logger.info
        log(
            "circuit_breaker.state_changed",
            name=self.name,
            previous_state=previous.value,
            new_state=new_state.value,
            reason=reason,
        )


__all__ = ["CircuitBreaker"]
