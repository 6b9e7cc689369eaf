"""Cancellable deferred callbacks.

Two schedulers share one small interface: ``call_later(delay, fn, *args)``
returns a handle with ``cancel()``, and ``now()`` returns the monotonic time
the scheduler measures delays against.

- ``BackgroundScheduler`` runs each callback in a Socket.IO background task
  after ``socketio.sleep(delay)``.
- ``ManualScheduler`` keeps virtual time that only moves when ``advance`` is
  called. The app uses it in TESTING mode so tests control every delay.
"""
import heapq
import itertools
import logging
import threading
import time
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)

# absorbs float drift when tests advance in small steps
_EPSILON = 1e-9


class ScheduledCall:
    def __init__(self, due: float, fn: Callable, args: Tuple[Any, ...]):
        self.due = due
        self.fn = fn
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def run(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self.fn(*self.args)


class BackgroundScheduler:
    def __init__(self, socketio):
        self._socketio = socketio

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, fn: Callable, *args) -> ScheduledCall:
        call = ScheduledCall(self.now() + delay, fn, args)

        def _runner(c: ScheduledCall, sleep_for: float):
            if sleep_for > 0:
                self._socketio.sleep(sleep_for)
            if c.cancelled:
                return
            try:
                c.run()
            except Exception:
                logger.exception(f"[timer-error] callback={getattr(c.fn, '__name__', c.fn)} failed")

        self._socketio.start_background_task(_runner, call, max(0.0, delay))
        return call


class ManualScheduler:
    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()
        self._lock = threading.RLock()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, fn: Callable, *args) -> ScheduledCall:
        with self._lock:
            call = ScheduledCall(self._now + max(0.0, delay), fn, args)
            heapq.heappush(self._queue, (call.due, next(self._seq), call))
            return call

    def pending(self) -> int:
        with self._lock:
            return sum(1 for _, _, c in self._queue if c.pending)

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due callbacks in order.

        Callbacks scheduled while advancing fire too if they fall inside the
        window. Returns the number of callbacks that ran.
        """
        with self._lock:
            target = self._now + seconds
        ran = 0
        while True:
            # callbacks run outside the queue lock; they may schedule more work
            with self._lock:
                if not self._queue or self._queue[0][0] > target + _EPSILON:
                    break
                due, _, call = heapq.heappop(self._queue)
                self._now = max(self._now, due)
            if call.pending:
                call.run()
                ran += 1
        with self._lock:
            self._now = max(self._now, target)
        return ran

    def advance_ms(self, milliseconds: float) -> int:
        return self.advance(milliseconds / 1000.0)
