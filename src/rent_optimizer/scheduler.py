# This module defines the timer port used to delay debounced commits.
# It exists so sessions never call ambient timer APIs and tests can drive time explicitly.
# ManualScheduler is a deterministic fake clock; AsyncioScheduler fires on the event loop thread.

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class DebounceScheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class _ManualTimer:
    def __init__(self, *, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Fake clock: timers only fire when `advance` moves time past their due point."""

    def __init__(self) -> None:
        self._now_ms = 0
        self._sequence = itertools.count()
        self._queue: list[tuple[int, int, _ManualTimer]] = []

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(due_ms=self._now_ms + max(0, int(delay_ms)), callback=callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._sequence), timer))
        return timer

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward and run due timers in due order; returns how many fired."""

        if delta_ms < 0:
            raise ValueError("delta_ms must be nonnegative")
        target = self._now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = due_ms
            timer.callback()
            fired += 1
        self._now_ms = target
        return fired


class AsyncioScheduler:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0, delay_ms) / 1000.0, callback)
