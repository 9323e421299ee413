"""Tests for the fixed-cadence timer clock."""

from __future__ import annotations

import pytest

from pychip8.system import TimerClock


class Counter:
    def __init__(self) -> None:
        self.ticks = 0

    def __call__(self) -> None:
        self.ticks += 1


def test_advance_carries_remainder() -> None:
    counter = Counter()
    clock = TimerClock(counter, frequency=60)

    assert clock.advance(clock.period_ns // 2) == 0
    assert clock.advance(clock.period_ns // 2 + 1) == 1
    assert counter.ticks == 1


def test_update_uses_monotonic_source() -> None:
    now = [0]
    counter = Counter()
    clock = TimerClock(counter, frequency=100, now=lambda: now[0])

    assert clock.update() == 0
    now[0] = 35_000_000
    assert clock.update() == 3
    now[0] = 40_000_000
    assert clock.update() == 1
    assert counter.ticks == 4


def test_reset_forgets_partial_period() -> None:
    counter = Counter()
    clock = TimerClock(counter)
    clock.advance(clock.period_ns - 1)

    clock.reset()
    clock.advance(1)

    assert counter.ticks == 0


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        TimerClock(Counter(), frequency=0)
    with pytest.raises(ValueError):
        TimerClock(Counter()).advance(-1)
