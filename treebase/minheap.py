"""A min-heap of integers used to hand out the smallest free row id."""

from __future__ import annotations

import heapq
from collections.abc import Iterable


class MinHeap:
    """Binary min-heap of integers.

    Popping from an empty heap yields 0 rather than raising, so callers
    that treat 0 as "no recycled id" keep working.
    """

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._items: list[int] = list(values)
        heapq.heapify(self._items)

    def push(self, value: int) -> None:
        """Add a value to the heap."""
        heapq.heappush(self._items, value)

    def pop(self) -> int:
        """Remove and return the smallest value, or 0 if the heap is empty."""
        if not self._items:
            return 0
        return heapq.heappop(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MinHeap({sorted(self._items)!r})"