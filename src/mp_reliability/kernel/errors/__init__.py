"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ConflictError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        └── TimeoutError
"""

from mp_reliability.kernel.errors.application import ApplicationError
from mp_reliability.kernel.errors.base import BaseError
from mp_reliability.kernel.errors.domain import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from mp_reliability.kernel.errors.infrastructure import InfrastructureError
from mp_reliability.kernel.errors.infrastructure import TimeoutError as InfrastructureTimeoutError

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "InfrastructureTimeoutError",
    "NotFoundError",
    "ValidationError",
]
