"""Resilience – circuit-breaker specific errors."""
from __future__ import annotations

from typing import Any

from mp_reliability.kernel.errors import InfrastructureError


class CircuitOpenError(InfrastructureError):
    """Raised when a :class:`CircuitBreaker` is in the OPEN state.

    Attributes
    ----------
    circuit_name:
        Name of the circuit breaker that rejected the call.
    """

    default_code = "circuit_open"

    def __init__(self, circuit_name: str, message: str | None = None) -> None:
        self.circuit_name = circuit_name
        super().__init__(message or f"Circuit breaker '{circuit_name}' is OPEN")

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["circuit_name"] = self.circuit_name
        return base


__all__ = ["CircuitOpenError"]
