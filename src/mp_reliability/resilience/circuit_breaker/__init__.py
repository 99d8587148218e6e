"""Resilience – Circuit Breaker pattern."""
from mp_reliability.resilience.circuit_breaker.errors import CircuitOpenError
from mp_reliability.resilience.circuit_breaker.state import CircuitBreakerState
from mp_reliability.resilience.circuit_breaker.policy import CircuitBreakerPolicy
from mp_reliability.resilience.circuit_breaker.breaker import CircuitBreaker
from mp_reliability.resilience.circuit_breaker.registry import CircuitBreakerRegistry

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerPolicy",
    "CircuitBreakerRegistry",
    "CircuitBreakerState",
    "CircuitOpenError",
]
