"""Testing generators – Hypothesis strategies."""
from mp_reliability.testing.generators.strategies import (
    allowed_error_rate_strategy,
    error_rate_strategy,
    observation_strategy,
    window_hours_strategy,
)

__all__ = [
    "allowed_error_rate_strategy",
    "error_rate_strategy",
    "observation_strategy",
    "window_hours_strategy",
]
