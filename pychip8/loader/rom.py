"""Raw ROM loader for CHIP-8 programs.

CHIP-8 ROMs carry no header: the file is copied byte for byte to the entry
address.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import ENTRY_POINT, Memory
from pychip8.utils import debug_enabled, debug_log

from .program import ProgramImage


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be placed in memory."""


def load_rom(stream: BinaryIO, memory: Memory, entry: int = ENTRY_POINT, *, name: str = "") -> ProgramImage:
    """Copy the ROM in ``stream`` into ``memory`` at ``entry``."""

    if entry < memory.reserved_end:
        raise RomFormatError(f"entry address {entry:#05x} lies in the reserved area")
    capacity = len(memory) - entry
    if capacity <= 0:
        raise RomFormatError(f"entry address {entry:#05x} outside memory")
    payload = stream.read(capacity + 1)
    if not payload:
        raise RomFormatError("ROM image is empty")
    if len(payload) > capacity:
        raise RomFormatError(f"ROM image exceeds the {capacity} bytes available above {entry:#05x}")

    memory.load_program(payload, entry)
    if debug_enabled("loader"):
        debug_log("loader", "loaded %s bytes=%d at=%03x", name or "<stream>", len(payload), entry)
    return ProgramImage(name=name, start=entry, length=len(payload))


def load_rom_from_path(path: Path, memory: Memory, entry: int = ENTRY_POINT) -> ProgramImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, memory, entry, name=path.stem)
