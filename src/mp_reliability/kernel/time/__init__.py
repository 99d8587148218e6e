"""Kernel time – Clock port + implementations."""
from mp_reliability.kernel.time.clock import (
    Clock,
    FrozenClock,
    SystemClock,
    minutes_between,
    utc_now,
)

__all__ = ["Clock", "FrozenClock", "SystemClock", "minutes_between", "utc_now"]
