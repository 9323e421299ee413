"""Unit tests for the CHIP-8 memory."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory, MemoryError, OutOfBoundsError
from pychip8.video import FONT_SET


def test_font_preloaded_at_zero() -> None:
    memory = Memory()

    assert memory.read_block(0x000, len(FONT_SET)) == FONT_SET
    assert memory.load8(len(FONT_SET)) == 0x00


def test_load_program_copies_bytes() -> None:
    memory = Memory()

    count = memory.load_program(bytes([0x12, 0x34, 0x56]), 0x200)

    assert count == 3
    assert memory.load16(0x200) == 0x1234
    assert memory.load8(0x202) == 0x56


@pytest.mark.parametrize("address", (0x000, 0x050, 0x1FF))
def test_writes_into_reserved_area_rejected(address: int) -> None:
    memory = Memory()

    with pytest.raises(OutOfBoundsError):
        memory.store8(address, 0xAA)
    with pytest.raises(OutOfBoundsError):
        memory.load_program(b"\x01", address)


def test_block_write_straddling_end_writes_nothing() -> None:
    memory = Memory()

    with pytest.raises(OutOfBoundsError):
        memory.write_block(0xFFE, [1, 2, 3])
    assert memory.read_block(0xFFE, 2) == bytes(2)


@pytest.mark.parametrize("address", (-1, 0x1000))
def test_reads_outside_memory_rejected(address: int) -> None:
    memory = Memory()

    with pytest.raises(OutOfBoundsError):
        memory.load8(address)


def test_load16_needs_both_bytes() -> None:
    with pytest.raises(OutOfBoundsError):
        Memory().load16(0xFFF)


def test_snapshot_restore_and_clear() -> None:
    memory = Memory()
    memory.load_program(bytes([0xAB]), 0x300)
    image = memory.snapshot()

    memory.clear_program_area()
    assert memory.load8(0x300) == 0x00
    assert memory.read_block(0x000, len(FONT_SET)) == FONT_SET

    memory.restore(image)
    assert memory.load8(0x300) == 0xAB

    with pytest.raises(MemoryError):
        memory.restore(b"\x00")


def test_invalid_geometry_rejected() -> None:
    with pytest.raises(MemoryError):
        Memory(size=0)
    with pytest.raises(MemoryError):
        Memory(size=0x100, reserved_end=0x200)
