"""Lightweight execution trace buffer for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_log


@dataclass
class TraceEntry:
    pc: int
    word: int | None
    mnemonic: str
    v: tuple[int, ...]
    i: int
    sp: int
    delay: int
    sound: int
    status: str = "ok"


class TraceRecorder:
    """Ring buffer that stores recent register snapshots, one per cycle."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[TraceEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def record_step(
        self,
        cpu_state,
        word: int | None,
        sp: int,
        *,
        pc: int | None = None,
        mnemonic: str = "",
        status: str = "ok",
    ) -> None:
        entry = TraceEntry(
            pc=(cpu_state.pc if pc is None else pc) & 0xFFFF,
            word=None if word is None else word & 0xFFFF,
            mnemonic=mnemonic,
            v=tuple(value & 0xFF for value in cpu_state.v),
            i=cpu_state.i & 0xFFFF,
            sp=sp,
            delay=cpu_state.delay & 0xFF,
            sound=cpu_state.sound & 0xFF,
            status=status,
        )
        self._append(entry)

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        if self._size == 0:
            return None
        index = (self._index - 1) % self._capacity
        return self._entries[index]

    def clear(self) -> None:
        self._entries = [None] * self._capacity
        self._index = 0
        self._size = 0

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        lines: list[str] = []
        for entry in self.entries(limit):
            word = "----" if entry.word is None else f"{entry.word:04X}"
            mnemonic = entry.mnemonic or "?"
            registers = " ".join(f"{value:02X}" for value in entry.v)
            line = (
                f"pc={entry.pc:03X} word={word} {mnemonic:<4} "
                f"V=[{registers}] I={entry.i:03X} SP={entry.sp:X} "
                f"DT={entry.delay:02X} ST={entry.sound:02X} status={entry.status}"
            )
            lines.append(line)
        return lines

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def _append(self, entry: TraceEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
