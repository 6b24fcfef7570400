"""
Cooperative timer queue with an injectable clock.

Callbacks never run on a background thread. They fire only inside
run_pending(), on whichever thread drives the scheduler, so state mutated by
timer callbacks keeps the same thread affinity as the rest of the caller's
code. Tests swap in ManualClock and advance virtual time instead of sleeping.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class ManualClock:
    """
    Virtual monotonic clock for deterministic tests.

    Usage:
        clock = ManualClock()
        scheduler = Scheduler(clock=clock)
        clock.advance(1.5)
        scheduler.run_pending()
    """

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now += seconds


class ScheduledCall:
    """Handle for a pending one-shot or repeating callback."""

    def __init__(
        self,
        deadline: float,
        callback: Callable[[], None],
        interval: float | None = None,
    ):
        self.deadline = deadline
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        """Cancel the call. Safe to call more than once."""
        self.cancelled = True

    @property
    def repeating(self) -> bool:
        return self.interval is not None


class Scheduler:
    """
    Single-thread timer queue.

    Repeating calls are rescheduled from their previous deadline, not from the
    time they actually ran, so advancing a ManualClock by N intervals at once
    fires the callback N times.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._clock()

    def _push(self, call: ScheduledCall) -> None:
        heapq.heappush(self._queue, (call.deadline, next(self._sequence), call))

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback once, delay seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        call = ScheduledCall(self.now() + delay, callback)
        self._push(call)
        return call

    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback every interval seconds until the handle is cancelled."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        call = ScheduledCall(self.now() + interval, callback, interval=interval)
        self._push(call)
        return call

    def next_deadline(self) -> float | None:
        """Deadline of the earliest live call, or None if nothing is pending."""
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
        if not self._queue:
            return None
        return self._queue[0][0]

    def pending(self) -> int:
        """Number of live (not cancelled) calls."""
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def run_pending(self) -> int:
        """
        Run every call whose deadline has passed, in deadline order.

        Callback errors are logged and never propagate; a failing repeating
        call keeps its schedule.

        Returns:
            Number of callbacks executed.
        """
        now = self.now()
        executed = 0

        while self._queue and self._queue[0][0] <= now:
            _, _, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue

            if call.repeating:
                call.deadline += call.interval
                self._push(call)

            try:
                call.callback()
            except Exception:
                logger.exception(
                    "Scheduled callback %s failed",
                    getattr(call.callback, "__name__", repr(call.callback)),
                )
            executed += 1

        return executed

    def run_forever(self, stop: threading.Event, idle_wait: float = 0.25) -> None:
        """
        Drive the queue in real time on the calling thread until stop is set.

        Only meaningful with a real clock.
        """
        while not stop.is_set():
            self.run_pending()
            deadline = self.next_deadline()
            if deadline is None:
                timeout = idle_wait
            else:
                timeout = max(0.0, min(deadline - self.now(), idle_wait))
            stop.wait(timeout)
