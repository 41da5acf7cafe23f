"""Start/stop interval timers used by thread tracking statistics.

Two flavours are provided:

* ``WallClockTimer`` - stopwatch over ``time.perf_counter_ns()``. Its elapsed
  value is live while running and can be read from any thread.
* ``ThreadCpuTimer`` - stopwatch over ``time.thread_time_ns()``. The clock only
  reports CPU time of the *calling* thread, so the timer must be started and
  stopped on the thread being measured, and its elapsed value is the total
  captured at the last ``stop()``. A reader on another thread never samples the
  clock itself.
"""

import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional


class IntervalTimer(ABC):
    """Accumulating start/stop timer.

    Starting a running timer or stopping a stopped one is a no-op.
    """

    def __init__(self):
        self._accumulated_ns: int = 0
        self._started_at_ns: Optional[int] = None

    @staticmethod
    @abstractmethod
    def _now_ns() -> int:
        """Current reading of the underlying clock in nanoseconds."""
        ...

    @property
    def is_running(self) -> bool:
        return self._started_at_ns is not None

    def start(self) -> None:
        if self._started_at_ns is None:
            self._started_at_ns = self._now_ns()

    def stop(self) -> None:
        if self._started_at_ns is None:
            return
        self._accumulated_ns += self._now_ns() - self._started_at_ns
        self._started_at_ns = None

    def restart(self) -> None:
        """Stop then start again, folding the current interval into the total."""
        self.stop()
        self.start()

    @property
    def elapsed_ns(self) -> int:
        return self._accumulated_ns

    @property
    def elapsed(self) -> timedelta:
        return timedelta(microseconds=self.elapsed_ns / 1000)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0


class WallClockTimer(IntervalTimer):
    """Wall-clock stopwatch, elapsed includes the running interval."""

    @staticmethod
    def _now_ns() -> int:
        return time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        started = self._started_at_ns
        if started is None:
            return self._accumulated_ns
        return self._accumulated_ns + (self._now_ns() - started)


class ThreadCpuTimer(IntervalTimer):
    """CPU time of the owning thread.

    Elapsed only advances on ``stop()``; callers that want a fresh reading
    while the timer is conceptually running must ``restart()`` it from the
    measured thread.
    """

    @staticmethod
    def _now_ns() -> int:
        return time.thread_time_ns()
