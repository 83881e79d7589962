"""
Bounded rolling history used by the analyzer and palette generator.
"""

from collections import deque
from typing import Generic, Iterator, TypeVar

import numpy as np

T = TypeVar("T")


class RollingHistory(Generic[T]):
    """
    Fixed-capacity FIFO buffer.

    Appending beyond capacity evicts the oldest entry.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: deque[T] = deque(maxlen=capacity)

    def push(self, item: T):
        self._items.append(item)

    def recent(self, count: int) -> list[T]:
        """Return up to the last ``count`` entries, oldest first."""
        if count <= 0:
            return []
        return list(self._items)[-count:]

    def last(self) -> T | None:
        return self._items[-1] if self._items else None

    def mean(self, count: int | None = None) -> float:
        """Mean of the last ``count`` entries (all when None), 0.0 if empty."""
        values = list(self._items) if count is None else self.recent(count)
        if not values:
            return 0.0
        return float(np.mean(values))

    def clear(self):
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)
