"""Unit tests for BoundedHistory."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mp_reliability.kernel.collections import BoundedHistory

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@dataclass(frozen=True)
class Entry:
    key: str
    at: datetime


def make_history(max_size: int = 3, max_age: timedelta | None = None) -> BoundedHistory[Entry]:
    return BoundedHistory(max_size, timestamp_of=lambda e: e.at, max_age=max_age)


class TestCapacity:
    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            make_history(0)

    def test_evicts_oldest_first(self) -> None:
        history = make_history(2)
        a, b, c = (Entry(k, T0) for k in "abc")
        assert history.append(a) is None
        assert history.append(b) is None
        assert history.append(c) is a
        assert [e.key for e in history] == ["b", "c"]

    @given(st.integers(min_value=1, max_value=20), st.integers(min_value=0, max_value=100))
    def test_never_exceeds_max_size(self, max_size: int, count: int) -> None:
        history = make_history(max_size)
        for i in range(count):
            history.append(Entry(str(i), T0 + timedelta(seconds=i)))
        assert len(history) == min(max_size, count)
        if count:
            assert history.latest() == Entry(str(count - 1), T0 + timedelta(seconds=count - 1))


class TestAgeEviction:
    def test_prune_drops_entries_older_than_max_age(self) -> None:
        history = make_history(10, max_age=timedelta(hours=1))
        history.append(Entry("old", T0))
        history.append(Entry("new", T0 + timedelta(minutes=50)))
        removed = history.prune(T0 + timedelta(minutes=90))
        assert removed == 1
        assert [e.key for e in history] == ["new"]

    def test_prune_without_max_age_is_noop(self) -> None:
        history = make_history(10)
        history.append(Entry("a", T0))
        assert history.prune(T0 + timedelta(days=365)) == 0
        assert len(history) == 1


class TestQueries:
    def test_since_is_strict_and_ordered(self) -> None:
        history = make_history(10)
        for minute in (0, 5, 10):
            history.append(Entry(str(minute), T0 + timedelta(minutes=minute)))
        keys = [e.key for e in history.since(T0 + timedelta(minutes=5))]
        assert keys == ["10"]

    def test_find_scans_newest_first(self) -> None:
        history = make_history(10)
        history.append(Entry("x", T0))
        history.append(Entry("x", T0 + timedelta(minutes=1)))
        found = history.find(lambda e: e.key == "x")
        assert found is not None and found.at == T0 + timedelta(minutes=1)

    def test_find_missing(self) -> None:
        assert make_history().find(lambda e: True) is None

    def test_clear(self) -> None:
        history = make_history()
        history.append(Entry("a", T0))
        history.clear()
        assert len(history) == 0
        assert history.latest() is None
