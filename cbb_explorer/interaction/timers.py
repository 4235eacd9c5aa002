"""Cancellable deferred callbacks.

The controller only ever talks to a `Scheduler`. Tests drive a
`VirtualClock` by hand; a live session uses the asyncio event loop.
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class VirtualTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Deterministic scheduler: time only moves when `advance` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self._queue: list[tuple[float, int, VirtualTimer]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        if any(t.cancelled for _, _, t in self._queue):
            self._queue = [entry for entry in self._queue if not entry[2].cancelled]
            heapq.heapify(self._queue)
        timer = VirtualTimer(self.now + delay, callback)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    @property
    def queued(self) -> int:
        """Heap entries, cancelled ones included."""
        return len(self._queue)

    def advance(self, delta: float) -> None:
        """Move time forward, firing due timers in order at their due time."""
        target = self.now + delta
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
        self.now = target


class AsyncioScheduler:
    """Schedules on an asyncio loop. Delays are in milliseconds by default."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        seconds_per_unit: float = 0.001,
    ) -> None:
        self._loop = loop
        self.seconds_per_unit = seconds_per_unit

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay * self.seconds_per_unit, callback)
