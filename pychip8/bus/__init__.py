"""Bus-related helpers for the CHIP-8 core."""

from .memory import (
    ENTRY_POINT,
    ENTRY_POINT_ETI,
    MEMORY_SIZE,
    RESERVED_END,
    Memory,
    MemoryError,
    OutOfBoundsError,
)

__all__ = [
    "ENTRY_POINT",
    "ENTRY_POINT_ETI",
    "MEMORY_SIZE",
    "RESERVED_END",
    "Memory",
    "MemoryError",
    "OutOfBoundsError",
]
