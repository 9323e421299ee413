"""Register file and call stack of the CHIP-8 CPU."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from pychip8.bus.memory import ENTRY_POINT

from .errors import StackOverflowError, StackUnderflowError

REGISTER_COUNT: Final[int] = 0x10
FLAG_REGISTER: Final[int] = 0xF
STACK_DEPTH: Final[int] = 0x10
TIMER_FIELDS: Final[frozenset[str]] = frozenset({"delay", "sound"})


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file.

    ``v`` is a ``bytearray`` so every general register wraps modulo 256 on
    assignment; ``i`` keeps 16 bits although only 12 address memory.
    ``delay`` and ``sound`` are 8-bit counters; assigning a value outside
    0x00-0xFF raises ``ValueError``.
    """

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = ENTRY_POINT
    delay: int = 0x00
    sound: int = 0x00

    def __post_init__(self) -> None:
        if len(self.v) != REGISTER_COUNT:
            raise ValueError(f"register file needs {REGISTER_COUNT} entries")

    def __setattr__(self, name: str, value) -> None:
        if name in TIMER_FIELDS and not 0 <= value <= 0xFF:
            raise ValueError(f"{name} timer value {value!r} outside 0x00-0xFF")
        super().__setattr__(name, value)

    def get(self, index: int) -> int:
        return self.v[self._check(index)]

    def set(self, index: int, value: int) -> None:
        self.v[self._check(index)] = value & 0xFF

    @property
    def flag(self) -> int:
        return self.v[FLAG_REGISTER]

    @flag.setter
    def flag(self, value: int) -> None:
        self.v[FLAG_REGISTER] = 1 if value else 0

    def clone(self) -> "CPUState":
        return CPUState(bytearray(self.v), self.i, self.pc, self.delay, self.sound)

    @staticmethod
    def _check(index: int) -> int:
        if not 0 <= index < REGISTER_COUNT:
            raise ValueError(f"register index {index!r} outside V0-VF")
        return index


class CallStack:
    """Fixed-depth return address stack."""

    def __init__(self, depth: int = STACK_DEPTH) -> None:
        self._slots = [0] * depth
        self._pointer = 0

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def depth(self) -> int:
        return len(self._slots)

    def push(self, address: int) -> None:
        if self._pointer >= len(self._slots):
            raise StackOverflowError(f"call stack full ({len(self._slots)} levels)")
        self._slots[self._pointer] = address
        self._pointer += 1

    def pop(self) -> int:
        if self._pointer == 0:
            raise StackUnderflowError("return with empty call stack")
        self._pointer -= 1
        return self._slots[self._pointer]

    def peek(self) -> int | None:
        if self._pointer == 0:
            return None
        return self._slots[self._pointer - 1]

    def clear(self) -> None:
        self._slots = [0] * len(self._slots)
        self._pointer = 0

    def snapshot(self) -> tuple[tuple[int, ...], int]:
        return tuple(self._slots), self._pointer

    def restore(self, slots: tuple[int, ...], pointer: int) -> None:
        if len(slots) != len(self._slots) or not 0 <= pointer <= len(slots):
            raise ValueError("stack snapshot does not match stack depth")
        self._slots = list(slots)
        self._pointer = pointer
