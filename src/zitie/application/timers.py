"""
Virtual-time timer queue.

Replaces fire-and-forget ``setTimeout`` style callbacks: the owner drains
due timers with ``run_due(now)`` before acting, so tests control expiry
by moving a ManualClock instead of sleeping.
"""

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(order=True)
class TimerHandle:
    deadline: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class TimerQueue:
    def __init__(self) -> None:
        self._heap: list[TimerHandle] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return sum(1 for h in self._heap if not h.cancelled)

    def schedule(self, now: int, delay: int, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once ``delay`` ms have elapsed after ``now``."""
        handle = TimerHandle(deadline=now + max(0, int(delay)), seq=next(self._counter), callback=callback)
        heapq.heappush(self._heap, handle)
        return handle

    def run_due(self, now: int) -> int:
        """
        Fire every timer whose deadline is <= now, earliest first.

        Returns the number of callbacks fired.
        """
        fired = 0
        while self._heap and self._heap[0].deadline <= now:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        if fired:
            logger.debug(f"Fired {fired} timer(s) at {now}")
        return fired

    def cancel_all(self) -> None:
        for handle in self._heap:
            handle.cancelled = True
        self._heap.clear()
