"""
Fireworks Delayed Events

Deferred launches live in a queue drained by the frame loop, so pausing,
slowing down or reloading the simulation applies to them as well.
"""
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List


@dataclass(order=True)
class TimedEvent:
    """An action due at a point on the simulation clock."""
    fire_at: float
    seq: int
    name: str = field(compare=False)
    action: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class DelayedEventQueue:
    """Min-heap of timed events keyed by simulated milliseconds."""

    def __init__(self):
        self.now = 0.0
        self._heap: List[TimedEvent] = []
        self._counter = itertools.count()

    def schedule(self, delay: float, name: str, action: Callable[[], None]) -> TimedEvent:
        """Run `action` once `delay` simulated ms have passed."""
        event = TimedEvent(self.now + delay, next(self._counter), name, action)
        heapq.heappush(self._heap, event)
        return event

    def cancel(self, event: TimedEvent) -> None:
        event.cancelled = True

    def cancel_all(self) -> None:
        for event in self._heap:
            event.cancelled = True
        self._heap.clear()

    def advance(self, dt: float) -> int:
        """Move the clock forward and fire every due event in order.

        Returns the number of events fired.
        """
        self.now += dt
        fired = 0
        while self._heap and self._heap[0].fire_at <= self.now:
            event = heapq.heappop(self._heap)
            if event.cancelled:
                continue
            event.action()
            fired += 1
        return fired

    def pending(self) -> List[TimedEvent]:
        return sorted(e for e in self._heap if not e.cancelled)

    def __len__(self) -> int:
        return sum(1 for e in self._heap if not e.cancelled)
