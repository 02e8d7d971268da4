# This module batches rapid single-unit edits into one deferred commit.
# It exists so keystroke-level price entry produces one history entry instead of one per keystroke.
# A new request cancels the pending timer rather than queueing behind it.

from __future__ import annotations

from collections.abc import Callable

from src.rent_optimizer.scheduler import DebounceScheduler, TimerHandle


class DebounceCoordinator:
    def __init__(self, *, scheduler: DebounceScheduler, window_ms: int) -> None:
        if window_ms < 0:
            raise ValueError("window_ms must be nonnegative")
        self._scheduler = scheduler
        self._window_ms = window_ms
        self._handle: TimerHandle | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def schedule(self, callback: Callable[[], None]) -> None:
        self.cancel()
        self._callback = callback
        self._handle = self._scheduler.call_later(self._window_ms, self._fire)

    def flush(self) -> bool:
        """Run the pending callback now; returns False when nothing was pending."""

        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        self._handle = None
        self._callback = None
        if callback is not None:
            callback()
