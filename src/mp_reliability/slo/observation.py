"""SLO – burn-rate observations reported by a metrics source."""
from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["BurnRateObservation", "RequestMetrics"]


@dataclass(frozen=True)
class RequestMetrics:
    """Request counters for one observation.

    ``total_requests == error_requests + successful_requests`` is expected
    but not enforced.
    """

    total_requests: int = 0
    error_requests: int = 0
    successful_requests: int = 0

    @classmethod
    def from_counts(cls, total_requests: int, error_requests: int) -> RequestMetrics:
        return cls(
            total_requests=total_requests,
            error_requests=error_requests,
            successful_requests=max(0, total_requests - error_requests),
        )

    @property
    def error_rate(self) -> float:
        """Observed error percentage, ``0.0`` without traffic."""
        if self.total_requests <= 0:
            return 0.0
        return self.error_requests / self.total_requests * 100.0


@dataclass(frozen=True)
class BurnRateObservation:
    slo_name: str
    current_error_rate: float
    allowed_error_rate: float
    time_window_hours: float
    metrics: RequestMetrics = field(default_factory=RequestMetrics)
