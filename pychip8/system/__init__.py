"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .clock import TIMER_FREQUENCY, TimerClock
from .history import History
from .machine import Machine, MachineConfig, create_machine

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "History",
    "TimerClock",
    "TIMER_FREQUENCY",
]
