"""Opcode metadata and the instruction decoder for the CHIP-8 CPU."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence

from pychip8.bus import Memory

from .errors import DecodeError


@dataclass(frozen=True)
class Operation:
    """Metadata describing one CHIP-8 instruction pattern.

    A word belongs to the operation when ``word & mask == pattern``. ``handler``
    names the :class:`~pychip8.cpu.core.Chip8CPU` method implementing it and
    ``operands`` is a format string over ``vx``, ``vy``, ``kk``, ``nnn`` and
    ``n`` used for disassembly.
    """

    pattern: int
    mask: int
    mnemonic: str
    handler: str
    operands: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask:#x}")
        if self.mask & 0xF000 != 0xF000:
            raise ValueError("mask must cover the opcode family nibble")
        if self.pattern & ~self.mask & 0xFFFF or not 0 <= self.pattern <= 0xFFFF:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")

    @property
    def family(self) -> int:
        return self.pattern >> 12

    def matches(self, word: int) -> bool:
        return word & self.mask == self.pattern

    def overlaps(self, other: "Operation") -> bool:
        return (self.pattern ^ other.pattern) & self.mask & other.mask == 0


@dataclass(frozen=True)
class DecodedInstruction:
    """An instruction word split into its operand fields."""

    address: int
    word: int
    operation: Operation | None
    x: int
    y: int
    kk: int
    nnn: int
    n: int

    @property
    def family(self) -> int:
        return self.word >> 12

    @property
    def mnemonic(self) -> str:
        return self.operation.mnemonic if self.operation is not None else "DW"

    def disassemble(self) -> str:
        if self.operation is None:
            return f"DW {self.word:#06x}"
        operands = self.operation.operands.format(
            vx=f"V{self.x:X}",
            vy=f"V{self.y:X}",
            kk=f"{self.kk:#04x}",
            nnn=f"{self.nnn:#05x}",
            n=f"{self.n}",
        )
        return f"{self.operation.mnemonic} {operands}".rstrip()


class OpcodeTable:
    """Builder grouping operations by their top nibble."""

    _FAMILIES: Final[int] = 0x10

    def __init__(self) -> None:
        self._families: List[List[Operation]] = [[] for _ in range(self._FAMILIES)]

    def register(self, operation: Operation) -> None:
        family = self._families[operation.family]
        for existing in family:
            if existing.overlaps(operation):
                raise ValueError(
                    f"pattern {operation.pattern:#06x} overlaps {existing.mnemonic} {existing.pattern:#06x}")
        family.append(operation)

    def register_all(self, operations: Iterable[Operation]) -> None:
        for operation in operations:
            self.register(operation)

    def freeze(self) -> Sequence[tuple[Operation, ...]]:
        return tuple(tuple(family) for family in self._families)


def build_operation_table(operations: Iterable[Operation]) -> Sequence[tuple[Operation, ...]]:
    """Build the 16-family lookup used by :func:`decode`."""

    table = OpcodeTable()
    table.register_all(operations)
    return table.freeze()


DEFAULT_OPERATIONS: Sequence[Operation] = (
    Operation(0x00E0, 0xFFFF, "CLS", "op_cls"),
    Operation(0x00EE, 0xFFFF, "RET", "op_ret"),
    Operation(0x1000, 0xF000, "JP", "op_jp", "{nnn}"),
    Operation(0x2000, 0xF000, "CALL", "op_call", "{nnn}"),
    Operation(0x3000, 0xF000, "SE", "op_se_byte", "{vx}, {kk}"),
    Operation(0x4000, 0xF000, "SNE", "op_sne_byte", "{vx}, {kk}"),
    Operation(0x5000, 0xF00F, "SE", "op_se_register", "{vx}, {vy}"),
    Operation(0x6000, 0xF000, "LD", "op_ld_byte", "{vx}, {kk}"),
    Operation(0x7000, 0xF000, "ADD", "op_add_byte", "{vx}, {kk}"),
    # 8xyN register ALU
    Operation(0x8000, 0xF00F, "LD", "op_ld_register", "{vx}, {vy}"),
    Operation(0x8001, 0xF00F, "OR", "op_or", "{vx}, {vy}"),
    Operation(0x8002, 0xF00F, "AND", "op_and", "{vx}, {vy}"),
    Operation(0x8003, 0xF00F, "XOR", "op_xor", "{vx}, {vy}"),
    Operation(0x8004, 0xF00F, "ADD", "op_add_register", "{vx}, {vy}"),
    Operation(0x8005, 0xF00F, "SUB", "op_sub", "{vx}, {vy}"),
    Operation(0x8006, 0xF00F, "SHR", "op_shr", "{vx}"),
    Operation(0x8007, 0xF00F, "SUBN", "op_subn", "{vx}, {vy}"),
    Operation(0x800E, 0xF00F, "SHL", "op_shl", "{vx}"),
    Operation(0x9000, 0xF00F, "SNE", "op_sne_register", "{vx}, {vy}"),
    Operation(0xA000, 0xF000, "LD", "op_ld_i", "I, {nnn}"),
    Operation(0xB000, 0xF000, "JP", "op_jp_v0", "V0, {nnn}"),
    Operation(0xC000, 0xF000, "RND", "op_rnd", "{vx}, {kk}"),
    Operation(0xD000, 0xF000, "DRW", "op_drw", "{vx}, {vy}, {n}"),
    Operation(0xE09E, 0xF0FF, "SKP", "op_skp", "{vx}"),
    Operation(0xE0A1, 0xF0FF, "SKNP", "op_sknp", "{vx}"),
    # FxNN timers, keys and I
    Operation(0xF007, 0xF0FF, "LD", "op_ld_from_delay", "{vx}, DT"),
    Operation(0xF00A, 0xF0FF, "LD", "op_wait_key", "{vx}, K"),
    Operation(0xF015, 0xF0FF, "LD", "op_ld_delay", "DT, {vx}"),
    Operation(0xF018, 0xF0FF, "LD", "op_ld_sound", "ST, {vx}"),
    Operation(0xF01E, 0xF0FF, "ADD", "op_add_i", "I, {vx}"),
    Operation(0xF029, 0xF0FF, "LD", "op_ld_glyph", "F, {vx}"),
    Operation(0xF033, 0xF0FF, "LD", "op_ld_bcd", "B, {vx}"),
    Operation(0xF055, 0xF0FF, "LD", "op_store_registers", "[I], {vx}"),
    Operation(0xF065, 0xF0FF, "LD", "op_load_registers", "{vx}, [I]"),
)


OPERATION_TABLE: Sequence[tuple[Operation, ...]] = build_operation_table(DEFAULT_OPERATIONS)


def lookup(word: int, table: Sequence[tuple[Operation, ...]] = OPERATION_TABLE) -> Operation | None:
    for operation in table[(word >> 12) & 0xF]:
        if operation.matches(word):
            return operation
    return None


def decode(
    memory: Memory,
    pc: int,
    table: Sequence[tuple[Operation, ...]] = OPERATION_TABLE,
) -> DecodedInstruction:
    """Fetch the big-endian word at ``pc`` and split it into fields."""

    if pc < 0 or pc + 1 >= len(memory):
        raise DecodeError(f"instruction fetch at {pc:#05x} outside memory")
    word = memory.load16(pc)
    return DecodedInstruction(
        address=pc,
        word=word,
        operation=lookup(word, table),
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
        n=word & 0xF,
    )
