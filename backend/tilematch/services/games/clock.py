"""Elapsed-time accumulator for a single game.

Elapsed time is measured from the scheduler's clock, never counted tick by
tick: while running it is ``baseline + (now - started_at)``. Pausing folds the
running delta into the baseline, so paused intervals contribute nothing and
late or coalesced ticks cannot skew the result.
"""
import threading
from dataclasses import dataclass
from typing import Callable, Optional

IDLE = 'idle'
RUNNING = 'running'
PAUSED = 'paused'
STOPPED = 'stopped'


@dataclass(frozen=True)
class ClockState:
    elapsed_seconds: int
    running: bool
    paused: bool

    def to_dict(self):
        return {
            'elapsed_seconds': self.elapsed_seconds,
            'running': self.running,
            'paused': self.paused,
            'formatted': format_time(self.elapsed_seconds),
        }


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    minutes, remainder = divmod(seconds, 60)
    return f"{minutes:02d}:{remainder:02d}"


def time_breakdown(seconds: int) -> dict:
    total = max(0, int(seconds))
    return {
        'hours': total // 3600,
        'minutes': (total % 3600) // 60,
        'seconds': total % 60,
        'total': total,
    }


class Clock:
    def __init__(self, scheduler, tick_interval: float = 1.0,
                 on_tick: Optional[Callable[[int], None]] = None, lock=None):
        self._scheduler = scheduler
        self._tick_interval = tick_interval
        self._on_tick = on_tick
        self._status = IDLE
        self._baseline = 0.0
        self._started_at: Optional[float] = None
        self._tick_handle = None
        self._disposed = False
        # shared with the owner so ticks and owner calls serialize
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def status(self) -> str:
        return self._status

    @property
    def elapsed(self) -> float:
        if self._status == RUNNING and self._started_at is not None:
            return self._baseline + max(0.0, self._scheduler.now() - self._started_at)
        return self._baseline

    @property
    def elapsed_seconds(self) -> int:
        # absorb float jitter so 2.9999999 reads as 3
        return int(self.elapsed + 1e-6)

    @property
    def state(self) -> ClockState:
        return ClockState(
            elapsed_seconds=self.elapsed_seconds,
            running=self._status == RUNNING,
            paused=self._status == PAUSED,
        )

    def start(self) -> None:
        with self._lock:
            self._start()

    def _start(self) -> None:
        if self._disposed or self._status in (RUNNING, STOPPED):
            return
        if self._status == IDLE:
            self._baseline = 0.0
        self._started_at = self._scheduler.now()
        self._status = RUNNING
        self._schedule_tick()

    def resume(self) -> None:
        with self._lock:
            if self._status == PAUSED:
                self._start()

    def pause(self) -> None:
        with self._lock:
            if self._status != RUNNING:
                return
            self._freeze()
            self._status = PAUSED

    def stop(self) -> None:
        with self._lock:
            if self._status in (IDLE, STOPPED):
                return
            self._freeze()
            self._status = STOPPED

    def reset(self) -> None:
        with self._lock:
            self._cancel_tick()
            self._status = IDLE
            self._baseline = 0.0
            self._started_at = None

    def dispose(self) -> None:
        with self._lock:
            self._cancel_tick()
            self._disposed = True
            self._on_tick = None
            if self._status == RUNNING:
                self._freeze()
                self._status = STOPPED

    def _freeze(self) -> None:
        self._baseline = self.elapsed
        self._started_at = None
        self._cancel_tick()

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        if self._tick_interval and self._tick_interval > 0:
            self._tick_handle = self._scheduler.call_later(self._tick_interval, self._tick)

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _tick(self) -> None:
        with self._lock:
            if self._disposed or self._status != RUNNING:
                return
            self._schedule_tick()
            if self._on_tick is not None:
                self._on_tick(self.elapsed_seconds)
