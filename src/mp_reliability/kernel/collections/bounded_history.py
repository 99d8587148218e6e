"""Kernel collections – BoundedHistory.

A FIFO ring buffer for time-ordered records.  Entries are evicted either
when the buffer reaches ``max_size`` (oldest first) or, on :meth:`prune`,
when they are older than ``max_age``.
"""
from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    """Append-only history with count and age based eviction.

    Parameters
    ----------
    max_size:
        Maximum number of retained entries.  Appending to a full history
        drops the oldest entry.
    timestamp_of:
        Extracts the timestamp used for age eviction and window queries.
        Entries are expected to be appended in non-decreasing timestamp
        order.
    max_age:
        Optional retention period applied by :meth:`prune`.
    """

    def __init__(
        self,
        max_size: int,
        *,
        timestamp_of: Callable[[T], datetime],
        max_age: timedelta | None = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._items: deque[T] = deque()
        self._max_size = max_size
        self._timestamp_of = timestamp_of
        self._max_age = max_age

    @property
    def max_size(self) -> int:
        return self._max_size

    def append(self, item: T) -> T | None:
        """Append *item*; return the evicted entry when the buffer was full."""
        evicted: T | None = None
        if len(self._items) >= self._max_size:
            evicted = self._items.popleft()
        self._items.append(item)
        return evicted

    def prune(self, now: datetime) -> int:
        """Drop entries older than ``max_age``; return the number removed."""
        if self._max_age is None:
            return 0
        cutoff = now - self._max_age
        removed = 0
        while self._items and self._timestamp_of(self._items[0]) < cutoff:
            self._items.popleft()
            removed += 1
        return removed

    def since(self, cutoff: datetime) -> list[T]:
        """Entries strictly newer than *cutoff*, oldest first."""
        return [item for item in self._items if self._timestamp_of(item) > cutoff]

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for item in reversed(self._items):
            if predicate(item):
                return item
        return None

    def latest(self) -> T | None:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))


__all__ = ["BoundedHistory"]
