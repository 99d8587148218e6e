"""Testing fixtures – fake_clock."""
from __future__ import annotations

import pytest

from mp_reliability.kernel.time import FrozenClock
from mp_reliability.testing.fakes import FakeClock


@pytest.fixture
def fake_clock() -> FrozenClock:
    """A FrozenClock pinned to 2026-01-01 12:00 UTC."""
    return FakeClock()


__all__ = ["fake_clock"]
