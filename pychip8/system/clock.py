"""Fixed-cadence driver for the delay and sound timers."""

from __future__ import annotations

import time
from typing import Callable

from pychip8.utils import debug_enabled, debug_log

TIMER_FREQUENCY = 60
_NS_PER_SECOND = 1_000_000_000


class TimerClock:
    """Turns elapsed wall time into whole timer ticks.

    ``tick`` is called once per elapsed period; leftover time is carried over so
    the long-run rate stays at ``frequency`` regardless of how often the host
    polls.
    """

    def __init__(
        self,
        tick: Callable[[], None],
        frequency: int = TIMER_FREQUENCY,
        *,
        now: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        if frequency <= 0:
            raise ValueError("frequency must be positive")
        self._tick = tick
        self._period_ns = _NS_PER_SECOND // frequency
        self._now = now
        self._last: int | None = None
        self._remainder = 0

    @property
    def period_ns(self) -> int:
        return self._period_ns

    def advance(self, elapsed_ns: int) -> int:
        """Account for ``elapsed_ns`` nanoseconds and return the ticks fired."""

        if elapsed_ns < 0:
            raise ValueError("elapsed time cannot be negative")
        total = self._remainder + elapsed_ns
        ticks, self._remainder = divmod(total, self._period_ns)
        for _ in range(ticks):
            self._tick()
        if ticks and debug_enabled("clock"):
            debug_log("clock", "ticks=%d remainder_ns=%d", ticks, self._remainder)
        return ticks

    def update(self) -> int:
        """Advance by the time elapsed since the previous call."""

        current = self._now()
        if self._last is None:
            self._last = current
            return 0
        elapsed = current - self._last
        self._last = current
        return self.advance(elapsed)

    def reset(self) -> None:
        self._last = None
        self._remainder = 0
