"""Bounded memory of recently emitted event ids."""

from __future__ import annotations

from collections import Counter, deque


class DedupWindow:
    """Tracks the last ``capacity`` recorded ids with multiplicity.

    Eviction is strict FIFO by insertion order, never by timestamp: events
    across pages are not strictly time-sorted.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._queue: deque[str] = deque()
        self._counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._queue)

    def was_seen(self, event_id: str) -> bool:
        return self._counts[event_id] > 0

    def record(self, event_id: str) -> None:
        self._queue.appendleft(event_id)
        self._counts[event_id] += 1
        if len(self._queue) > self.capacity:
            evicted = self._queue.pop()
            self._counts[evicted] -= 1
            if self._counts[evicted] <= 0:
                del self._counts[evicted]
