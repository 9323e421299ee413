"""Flat 4 KiB memory for the CHIP-8 core.

Addresses ``0x000``-``0x1FF`` belong to the interpreter: the hexadecimal font
lives there and nothing executed by a program may overwrite it. Programs are
copied in at an entry address, conventionally ``0x200`` (``0x600`` on the
ETI 660).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable

from pychip8.video.font import FONT_SET, FONT_START

MEMORY_SIZE: Final[int] = 0x1000
RESERVED_END: Final[int] = 0x200
ENTRY_POINT: Final[int] = 0x200
ENTRY_POINT_ETI: Final[int] = 0x600


class MemoryError(Exception):
    """Raised when the memory is used incorrectly."""


class OutOfBoundsError(MemoryError):
    """Raised for accesses outside memory or writes into the reserved area."""


@dataclass
class Memory:
    """Byte-addressable store with the font preloaded at ``FONT_START``."""

    size: int = MEMORY_SIZE
    reserved_end: int = RESERVED_END

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise MemoryError("memory must have a positive size")
        if not 0 <= self.reserved_end <= self.size:
            raise MemoryError(f"reserved area end {self.reserved_end:#05x} outside memory")
        self._data = bytearray(self.size)
        self._data[FONT_START : FONT_START + len(FONT_SET)] = FONT_SET

    def __len__(self) -> int:
        return self.size

    def _check_read(self, address: int, length: int = 1) -> None:
        if address < 0 or address + length > self.size:
            raise OutOfBoundsError(
                f"read {address:#05x}+{length} outside memory 0x000-{self.size - 1:#05x}"
            )

    def _check_write(self, address: int, length: int = 1) -> None:
        if address < self.reserved_end:
            raise OutOfBoundsError(f"write {address:#05x} targets reserved area below {self.reserved_end:#05x}")
        if address + length > self.size:
            raise OutOfBoundsError(
                f"write {address:#05x}+{length} outside memory 0x000-{self.size - 1:#05x}"
            )

    def load8(self, address: int) -> int:
        self._check_read(address)
        return self._data[address]

    def load16(self, address: int) -> int:
        self._check_read(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        self._check_read(address, length)
        return bytes(self._data[address : address + length])

    def store8(self, address: int, value: int) -> None:
        self._check_write(address)
        self._data[address] = value & 0xFF

    def write_block(self, address: int, values: Iterable[int]) -> None:
        """Write ``values`` starting at ``address`` after validating the range."""

        data = bytes(value & 0xFF for value in values)
        self._check_write(address, len(data))
        self._data[address : address + len(data)] = data

    def load_program(self, data: bytes, address: int = ENTRY_POINT) -> int:
        """Copy raw program bytes to ``address`` and return the byte count."""

        self.write_block(address, data)
        return len(data)

    def clear_program_area(self) -> None:
        self._data[self.reserved_end :] = bytes(self.size - self.reserved_end)

    def snapshot(self) -> bytes:
        return bytes(self._data)

    def restore(self, image: bytes) -> None:
        if len(image) != self.size:
            raise MemoryError(f"memory image has {len(image)} bytes, expected {self.size}")
        self._data[:] = image
