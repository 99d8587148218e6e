"""Resilience – per-service circuit breaker registry."""
from __future__ import annotations

from mp_reliability.kernel.time import Clock, SystemClock
from mp_reliability.resilience.circuit_breaker.breaker import CircuitBreaker
from mp_reliability.resilience.circuit_breaker.policy import CircuitBreakerPolicy
from mp_reliability.resilience.circuit_breaker.state import CircuitBreakerState


class CircuitBreakerRegistry:
    """Lazily creates one :class:`CircuitBreaker` per service name."""

    def __init__(self, policy: CircuitBreakerPolicy | None = None, *, clock: Clock | None = None) -> None:
        self._policy = policy or CircuitBreakerPolicy()
        self._clock: Clock = clock or SystemClock()
        self._breakers: dict[str, CircuitBreaker] = {}

    def get(self, name: str) -> CircuitBreaker:
        breaker = self._breakers.get(name)
        if breaker is None:
            breaker = CircuitBreaker(name, self._policy, clock=self._clock)
            self._breakers[name] = breaker
        return breaker

    def states(self) -> dict[str, CircuitBreakerState]:
        return {name: breaker.state for name, breaker in self._breakers.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._breakers


__all__ = ["CircuitBreakerRegistry"]
