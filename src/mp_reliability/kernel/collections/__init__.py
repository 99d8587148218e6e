"""Kernel collections – bounded, time-ordered history buffers."""
from mp_reliability.kernel.collections.bounded_history import BoundedHistory

__all__ = ["BoundedHistory"]
