"""Testing fakes – in-memory doubles for the monitor ports and the clock."""
from mp_reliability.kernel.time import FrozenClock
from mp_reliability.testing.fakes.clock import FakeClock
from mp_reliability.testing.fakes.metrics import StaticMetricsSource
from mp_reliability.testing.fakes.sinks import FailingAlertSink, InMemoryAlertSink

__all__ = [
    "FailingAlertSink",
    "FakeClock",
    "FrozenClock",
    "InMemoryAlertSink",
    "StaticMetricsSource",
]
