from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class TimerHandle:
    due_ms: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    def cancel(self) -> bool:
        """Prevent the callback from running. False if it already ran."""
        if self.fired:
            return False
        self.cancelled = True
        return True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """Virtual-time timer queue.

    Nothing runs on its own: the owner calls `advance(dt_ms)` once per frame
    (or tests call it directly) and due callbacks fire in due-time order on
    the caller's thread.
    """

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._queue: list[TimerHandle] = []
        self._seq = itertools.count()

    def schedule_after(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now_ms + max(0.0, float(delay_ms)), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, dt_ms: float) -> int:
        """Move the clock forward and run everything that became due."""
        target = self.now_ms + max(0.0, float(dt_ms))
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            # Callbacks observe the clock at their own due time.
            self.now_ms = max(self.now_ms, handle.due_ms)
            handle.fired = True
            handle.callback()
            fired += 1
        self.now_ms = target
        return fired

    def pending(self) -> int:
        return sum(1 for h in self._queue if h.pending)
