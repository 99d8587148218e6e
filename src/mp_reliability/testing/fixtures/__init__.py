"""Testing fixtures – pytest plugin.

Enable in ``conftest.py``::

    pytest_plugins = ["mp_reliability.testing.fixtures"]
"""
from mp_reliability.testing.fixtures.clock import fake_clock
from mp_reliability.testing.fixtures.reliability import (
    alert_sink,
    breaker_registry,
    error_budget_tracker,
    remediation_engine,
)

__all__ = [
    "alert_sink",
    "breaker_registry",
    "error_budget_tracker",
    "fake_clock",
    "remediation_engine",
]
