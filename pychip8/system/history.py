"""Undo history built on whole-machine snapshots."""

from __future__ import annotations

from collections import deque

from pychip8.cpu import Chip8CPU, CPUError, MachineSnapshot, StepStatus
from pychip8.utils import debug_enabled, debug_log


class History:
    """Steps a CPU while keeping the snapshots needed to undo each cycle."""

    def __init__(self, cpu: Chip8CPU, capacity: int = 1024) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._cpu = cpu
        self._snapshots: deque[MachineSnapshot] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cpu(self) -> Chip8CPU:
        return self._cpu

    @property
    def can_undo(self) -> bool:
        return bool(self._snapshots)

    def step(self) -> StepStatus:
        """Run one cycle, keeping an undo point only if the cycle changed state.

        Key-wait polls and faulted cycles leave the machine untouched and so
        do not occupy a slot in the bounded history.
        """

        snapshot = self._cpu.snapshot()
        status = self._cpu.step()
        if status is StepStatus.OK:
            self._snapshots.append(snapshot)
        elif status.is_error and debug_enabled("history"):
            debug_log("history", "no undo point for %s at pc=%03x", status.value, self._cpu.state.pc)
        return status

    def step_n(self, count: int) -> StepStatus:
        if count <= 0:
            raise ValueError("count must be positive")
        status = StepStatus.OK
        for _ in range(count):
            status = self.step()
        return status

    def undo(self) -> bool:
        """Restore the state from before the most recent cycle."""

        if not self._snapshots:
            return False
        self._cpu.restore(self._snapshots.pop())
        if debug_enabled("history"):
            debug_log("history", "undo pc=%03x depth=%d", self._cpu.state.pc, len(self._snapshots))
        return True

    def clear(self) -> None:
        self._snapshots.clear()

    def next_instruction(self) -> str:
        try:
            instruction = self._cpu.peek_instruction()
        except CPUError:
            return f"{self._cpu.state.pc:03X}: <decode error>"
        return f"{instruction.address:03X}: {instruction.word:04X} {instruction.disassemble()}"
