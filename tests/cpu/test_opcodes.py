"""Tests for the CHIP-8 decoder and opcode table."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory
from pychip8.cpu import DecodeError, DecodedInstruction, decode
from pychip8.cpu.opcodes import DEFAULT_OPERATIONS, Operation, OpcodeTable, build_operation_table, lookup


def decode_word(word: int, address: int = 0x200) -> DecodedInstruction:
    memory = Memory()
    memory.write_block(address, word.to_bytes(2, "big"))
    return decode(memory, address)


def test_decode_splits_fields() -> None:
    instruction = decode_word(0xD12A)

    assert instruction.word == 0xD12A
    assert instruction.address == 0x200
    assert instruction.family == 0xD
    assert instruction.x == 0x1
    assert instruction.y == 0x2
    assert instruction.kk == 0x2A
    assert instruction.nnn == 0x12A
    assert instruction.n == 0xA
    assert instruction.mnemonic == "DRW"


def test_decode_does_not_mutate_memory() -> None:
    memory = Memory()
    memory.write_block(0x200, [0x61, 0x0A])
    before = memory.snapshot()

    decode(memory, 0x200)

    assert memory.snapshot() == before


@pytest.mark.parametrize("pc", (0xFFF, 0x1000, -1))
def test_decode_outside_memory_raises(pc: int) -> None:
    with pytest.raises(DecodeError):
        decode(Memory(), pc)


@pytest.mark.parametrize(
    "word, text",
    [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1234, "JP 0x234"),
        (0x2ABC, "CALL 0xabc"),
        (0x610A, "LD V1, 0x0a"),
        (0x8AB4, "ADD VA, VB"),
        (0x8A07, "SUBN VA, V0"),
        (0x8306, "SHR V3"),
        (0xA143, "LD I, 0x143"),
        (0xB200, "JP V0, 0x200"),
        (0xD125, "DRW V1, V2, 5"),
        (0xE39E, "SKP V3"),
        (0xF40A, "LD V4, K"),
        (0xF533, "LD B, V5"),
        (0xFF55, "LD [I], VF"),
        (0xF065, "LD V0, [I]"),
    ],
)
def test_disassemble(word: int, text: str) -> None:
    assert decode_word(word).disassemble() == text


@pytest.mark.parametrize("word", (0x0123, 0x5121, 0x8008, 0x900F, 0xE000, 0xF0FF))
def test_unknown_words_have_no_operation(word: int) -> None:
    instruction = decode_word(word)

    assert instruction.operation is None
    assert instruction.mnemonic == "DW"
    assert instruction.disassemble() == f"DW {word:#06x}"


def test_every_default_operation_is_reachable() -> None:
    for operation in DEFAULT_OPERATIONS:
        assert lookup(operation.pattern) is operation


def test_overlapping_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Operation(0x8000, 0xF000, "ANY", "op_any"))

    with pytest.raises(ValueError):
        table.register(Operation(0x8004, 0xF00F, "ADD", "op_add_register"))


def test_operation_validates_pattern_against_mask() -> None:
    with pytest.raises(ValueError):
        Operation(0x00E1, 0xFFF0, "BAD", "op_bad")
    with pytest.raises(ValueError):
        Operation(0x0000, 0x0FFF, "BAD", "op_bad")


def test_custom_table_lookup() -> None:
    table = build_operation_table([Operation(0x00E0, 0xFFFF, "CLS", "op_cls")])

    assert lookup(0x00E0, table).mnemonic == "CLS"
    assert lookup(0x00EE, table) is None
