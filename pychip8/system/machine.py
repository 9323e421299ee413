"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import ENTRY_POINT, Memory
from pychip8.cpu import Chip8CPU, MachineSnapshot, StepStatus
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder
from pychip8.video import Display

from .clock import TIMER_FREQUENCY, TimerClock


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    entry_point: int = ENTRY_POINT
    program: Optional[bytes] = None
    seed: Optional[int] = None
    trace_capacity: int = 0
    timer_frequency: int = TIMER_FREQUENCY


@dataclass
class Machine:
    """Aggregates the core components of a CHIP-8 machine."""

    memory: Memory
    cpu: Chip8CPU
    display: Display
    keypad: Keypad
    clock: TimerClock
    trace: TraceRecorder | None = None

    def load_program(self, data: bytes, address: int | None = None) -> int:
        return self.cpu.load_program(data, address)

    def step(self) -> StepStatus:
        return self.cpu.step()

    def step_n(self, count: int) -> StepStatus:
        return self.cpu.step_n(count)

    def snapshot(self) -> MachineSnapshot:
        return self.cpu.snapshot()

    def restore(self, snapshot: MachineSnapshot) -> None:
        self.cpu.restore(snapshot)

    def reset(self, *, clear_program: bool = False) -> None:
        if clear_program:
            self.memory.clear_program_area()
        self.cpu.reset()
        self.clock.reset()
        if self.trace is not None:
            self.trace.clear()


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()

    memory = Memory()
    display = Display()
    keypad = Keypad()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity > 0 else None

    cpu = Chip8CPU(
        memory,
        display=display,
        keypad=keypad,
        entry_point=config.entry_point,
        rng=random.Random(config.seed),
        trace=trace,
    )
    if config.program:
        cpu.load_program(config.program)

    clock = TimerClock(cpu.tick_timers, config.timer_frequency)

    return Machine(
        memory=memory,
        cpu=cpu,
        display=display,
        keypad=keypad,
        clock=clock,
        trace=trace,
    )
