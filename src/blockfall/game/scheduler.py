from __future__ import annotations

from typing import Callable, List


class TimerHandle:
    """A repeating timer owned by a ``FrameScheduler``.

    Changing ``interval_ms`` only affects firings scheduled after the change;
    the next already-scheduled firing keeps its due time.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None], due_ms: int) -> None:
        self._interval_ms = _check_interval(interval_ms)
        self.callback = callback
        self.due_ms = due_ms
        self.cancelled = False

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self._interval_ms = _check_interval(value)

    def cancel(self) -> None:
        self.cancelled = True


def _check_interval(interval_ms: int) -> int:
    interval_ms = int(interval_ms)
    if interval_ms <= 0:
        raise ValueError(f"Timer interval must be positive, got {interval_ms}")
    return interval_ms


class FrameScheduler:
    """Virtual millisecond clock driven by the host loop.

    Nothing runs on its own: the host calls ``advance`` with the elapsed frame
    time and due callbacks fire synchronously, one after another, in due order.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._timers: List[TimerHandle] = []

    @property
    def active_timers(self) -> List[TimerHandle]:
        return [t for t in self._timers if not t.cancelled]

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(interval_ms, callback, self.now_ms + int(interval_ms))
        self._timers.append(handle)
        return handle

    def advance(self, elapsed_ms: int) -> int:
        """Move the clock forward and fire everything that came due.

        Returns the number of callbacks fired.
        """
        target = self.now_ms + max(0, int(elapsed_ms))
        fired = 0
        while True:
            self._timers = self.active_timers
            due = [t for t in self._timers if t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_ms)
            self.now_ms = timer.due_ms
            timer.callback()
            fired += 1
            if not timer.cancelled:
                timer.due_ms = self.now_ms + timer.interval_ms
        self.now_ms = target
        return fired
