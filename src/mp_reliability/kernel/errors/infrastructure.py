"""Infrastructure errors — side-effect failures of remediation handlers and guarded calls."""

from __future__ import annotations

from typing import Any

from mp_reliability.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class TimeoutError(InfrastructureError):  # noqa: A001
    """An operation exceeded its deadline."""

    default_code = "infrastructure_timeout"

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds


__all__ = [
    "InfrastructureError",
    "TimeoutError",
]
