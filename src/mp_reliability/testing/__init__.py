"""Testing support – fakes, fixtures and Hypothesis strategies.

Import in your ``conftest.py``::

    pytest_plugins = ["mp_reliability.testing.fixtures"]
"""
from mp_reliability.testing.fakes import (
    FailingAlertSink,
    FakeClock,
    InMemoryAlertSink,
    StaticMetricsSource,
)
from mp_reliability.testing.generators import (
    allowed_error_rate_strategy,
    error_rate_strategy,
    observation_strategy,
    window_hours_strategy,
)

__all__ = [
    "FailingAlertSink",
    "FakeClock",
    "InMemoryAlertSink",
    "StaticMetricsSource",
    "allowed_error_rate_strategy",
    "error_rate_strategy",
    "observation_strategy",
    "window_hours_strategy",
]
