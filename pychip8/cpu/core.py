"""CHIP-8 fetch-decode-execute engine."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from pychip8.bus import ENTRY_POINT, Memory, MemoryError, OutOfBoundsError
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import Display, glyph_address

from .errors import (
    CPUError,
    DecodeError,
    StackOverflowError,
    StackUnderflowError,
    UnsupportedInstructionError,
)
from .opcodes import OPERATION_TABLE, DecodedInstruction, Operation, decode
from .registers import FLAG_REGISTER, CallStack, CPUState


class StepStatus(Enum):
    """Outcome of a single cycle, reported to the host instead of raising."""

    OK = "ok"
    WAITING_FOR_INPUT = "waiting-for-input"
    DECODE_ERROR = "decode-error"
    UNSUPPORTED_INSTRUCTION = "unsupported-instruction"
    STACK_OVERFLOW = "stack-overflow"
    STACK_UNDERFLOW = "stack-underflow"
    OUT_OF_BOUNDS = "out-of-bounds"

    @property
    def is_error(self) -> bool:
        return self not in (StepStatus.OK, StepStatus.WAITING_FOR_INPUT)


_ERROR_STATUS: Sequence[tuple[type[Exception], StepStatus]] = (
    (DecodeError, StepStatus.DECODE_ERROR),
    (UnsupportedInstructionError, StepStatus.UNSUPPORTED_INSTRUCTION),
    (StackOverflowError, StepStatus.STACK_OVERFLOW),
    (StackUnderflowError, StepStatus.STACK_UNDERFLOW),
    (MemoryError, StepStatus.OUT_OF_BOUNDS),
)


@dataclass(frozen=True)
class MachineSnapshot:
    """Immutable copy of everything a cycle can change.

    Holds only bytes, ints and tuples so it never aliases the live machine.
    """

    memory: bytes
    registers: bytes
    i: int
    pc: int
    stack: tuple[int, ...]
    stack_pointer: int
    delay: int
    sound: int
    display: bytes
    waiting_for_key: int | None
    cycle_count: int
    rng_state: Any


@dataclass
class Chip8CPU:
    """CHIP-8 CPU owning memory, registers, call stack and display."""

    memory: Memory
    display: Display = field(default_factory=Display)
    keypad: Keypad = field(default_factory=Keypad)
    entry_point: int = ENTRY_POINT
    operation_table: Sequence[tuple[Operation, ...]] = field(default=OPERATION_TABLE)
    rng: random.Random = field(default_factory=random.Random)
    trace: TraceRecorder | None = None

    state: CPUState = field(init=False)
    stack: CallStack = field(default_factory=CallStack)
    cycle_count: int = 0
    waiting_for_key: int | None = None
    last_error: Exception | None = None

    def __post_init__(self) -> None:
        self.state = CPUState(pc=self.entry_point)

    def reset(self) -> None:
        """Clear registers, stack, timers and display; memory is left intact."""

        self.state = CPUState(pc=self.entry_point)
        self.stack.clear()
        self.display.clear()
        self.cycle_count = 0
        self.waiting_for_key = None
        self.last_error = None

    def load_program(self, data: bytes, address: int | None = None) -> int:
        return self.memory.load_program(data, self.entry_point if address is None else address)

    def step(self) -> StepStatus:
        """Execute a single instruction and report how the cycle ended."""

        pc_before = self.state.pc
        instruction: DecodedInstruction | None = None
        try:
            instruction = decode(self.memory, pc_before, self.operation_table)
            handler = None
            if instruction.operation is not None:
                handler = getattr(self, instruction.operation.handler, None)
            if handler is None:
                raise UnsupportedInstructionError(instruction.word, pc_before)
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%03x word=%04x %s", pc_before, instruction.word, instruction.disassemble())
            self.state.pc = pc_before + 2
            status = handler(instruction) or StepStatus.OK
        except (CPUError, MemoryError) as exc:
            self.state.pc = pc_before
            self.last_error = exc
            status = self._status_for(exc)
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%03x status=%s error=%s", pc_before, status.value, exc)
        else:
            self.last_error = None
            if status is StepStatus.OK:
                self.cycle_count += 1

        if self.trace is not None:
            self.trace.record_step(
                self.state,
                None if instruction is None else instruction.word,
                self.stack.pointer,
                pc=pc_before,
                mnemonic="" if instruction is None else instruction.mnemonic,
                status=status.value,
            )
        return status

    def step_n(self, count: int) -> StepStatus:
        """Call :meth:`step` exactly ``count`` times and return the last status."""

        if count <= 0:
            raise ValueError("count must be positive")
        status = StepStatus.OK
        for _ in range(count):
            status = self.step()
        return status

    def tick_timers(self) -> None:
        """Decrement the delay and sound counters once (one 60 Hz tick)."""

        if self.state.delay > 0:
            self.state.delay -= 1
        if self.state.sound > 0:
            self.state.sound -= 1

    @property
    def sound_active(self) -> bool:
        return self.state.sound > 0

    def peek_instruction(self) -> DecodedInstruction:
        return decode(self.memory, self.state.pc, self.operation_table)

    def snapshot(self) -> MachineSnapshot:
        slots, pointer = self.stack.snapshot()
        return MachineSnapshot(
            memory=self.memory.snapshot(),
            registers=bytes(self.state.v),
            i=self.state.i,
            pc=self.state.pc,
            stack=slots,
            stack_pointer=pointer,
            delay=self.state.delay,
            sound=self.state.sound,
            display=self.display.snapshot(),
            waiting_for_key=self.waiting_for_key,
            cycle_count=self.cycle_count,
            rng_state=self.rng.getstate(),
        )

    def restore(self, snapshot: MachineSnapshot) -> None:
        self.memory.restore(snapshot.memory)
        self.state = CPUState(
            bytearray(snapshot.registers),
            snapshot.i,
            snapshot.pc,
            snapshot.delay,
            snapshot.sound,
        )
        self.stack.restore(snapshot.stack, snapshot.stack_pointer)
        self.display.restore(snapshot.display)
        self.waiting_for_key = snapshot.waiting_for_key
        self.cycle_count = snapshot.cycle_count
        self.rng.setstate(snapshot.rng_state)
        self.last_error = None

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_cls(self, _: DecodedInstruction) -> None:
        self.display.clear()

    def op_ret(self, _: DecodedInstruction) -> None:
        self.state.pc = self.stack.pop()

    def op_jp(self, instruction: DecodedInstruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: DecodedInstruction) -> None:
        self.stack.push(self.state.pc)
        self.state.pc = instruction.nnn

    def op_se_byte(self, instruction: DecodedInstruction) -> None:
        self._skip_if(self.state.v[instruction.x] == instruction.kk)

    def op_sne_byte(self, instruction: DecodedInstruction) -> None:
        self._skip_if(self.state.v[instruction.x] != instruction.kk)

    def op_se_register(self, instruction: DecodedInstruction) -> None:
        self._skip_if(self.state.v[instruction.x] == self.state.v[instruction.y])

    def op_sne_register(self, instruction: DecodedInstruction) -> None:
        self._skip_if(self.state.v[instruction.x] != self.state.v[instruction.y])

    def op_ld_byte(self, instruction: DecodedInstruction) -> None:
        self.state.v[instruction.x] = instruction.kk

    def op_add_byte(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF

    def op_ld_register(self, instruction: DecodedInstruction) -> None:
        self.state.v[instruction.x] = self.state.v[instruction.y]

    def op_or(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] | v[instruction.y]

    def op_and(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] & v[instruction.y]

    def op_xor(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] ^ v[instruction.y]

    # VF is written after the result so it wins when x is 0xF.

    def op_add_register(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_sub(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        v[instruction.x] = (x - y) & 0xFF
        v[FLAG_REGISTER] = 1 if x >= y else 0

    def op_shr(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        value = v[instruction.x]
        v[instruction.x] = value >> 1
        v[FLAG_REGISTER] = value & 0x01

    def op_subn(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        v[instruction.x] = (y - x) & 0xFF
        v[FLAG_REGISTER] = 1 if y >= x else 0

    def op_shl(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        value = v[instruction.x]
        v[instruction.x] = (value << 1) & 0xFF
        v[FLAG_REGISTER] = (value >> 7) & 0x01

    def op_ld_i(self, instruction: DecodedInstruction) -> None:
        self.state.i = instruction.nnn

    def op_jp_v0(self, instruction: DecodedInstruction) -> None:
        target = instruction.nnn + self.state.v[0]
        if target >= len(self.memory):
            raise OutOfBoundsError(f"jump target {target:#05x} outside memory")
        self.state.pc = target

    def op_rnd(self, instruction: DecodedInstruction) -> None:
        self.state.v[instruction.x] = self.rng.getrandbits(8) & instruction.kk

    def op_drw(self, instruction: DecodedInstruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        sprite = self.memory.read_block(self.state.i, instruction.n)
        v[FLAG_REGISTER] = 0
        if self.display.draw(x, y, sprite):
            v[FLAG_REGISTER] = 1

    def op_skp(self, instruction: DecodedInstruction) -> None:
        self._skip_if(self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    def op_sknp(self, instruction: DecodedInstruction) -> None:
        self._skip_if(not self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    def op_ld_from_delay(self, instruction: DecodedInstruction) -> None:
        self.state.v[instruction.x] = self.state.delay & 0xFF

    def op_wait_key(self, instruction: DecodedInstruction) -> StepStatus:
        key = self.keypad.first_pressed()
        if key is None:
            self.waiting_for_key = instruction.x
            self.state.pc = instruction.address
            return StepStatus.WAITING_FOR_INPUT
        self.waiting_for_key = None
        self.state.v[instruction.x] = key
        return StepStatus.OK

    def op_ld_delay(self, instruction: DecodedInstruction) -> None:
        self.state.delay = self.state.v[instruction.x]

    def op_ld_sound(self, instruction: DecodedInstruction) -> None:
        self.state.sound = self.state.v[instruction.x]

    def op_add_i(self, instruction: DecodedInstruction) -> None:
        self.state.i = (self.state.i + self.state.v[instruction.x]) & 0xFFFF

    def op_ld_glyph(self, instruction: DecodedInstruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])

    def op_ld_bcd(self, instruction: DecodedInstruction) -> None:
        value = self.state.v[instruction.x]
        self.memory.write_block(self.state.i, (value // 100, (value // 10) % 10, value % 10))

    def op_store_registers(self, instruction: DecodedInstruction) -> None:
        self.memory.write_block(self.state.i, self.state.v[: instruction.x + 1])

    def op_load_registers(self, instruction: DecodedInstruction) -> None:
        data = self.memory.read_block(self.state.i, instruction.x + 1)
        self.state.v[: instruction.x + 1] = data

    # ------------------------------------------------------------------
    # Helpers

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc += 2

    @staticmethod
    def _status_for(exc: Exception) -> StepStatus:
        for error_type, status in _ERROR_STATUS:
            if isinstance(exc, error_type):
                return status
        return StepStatus.UNSUPPORTED_INSTRUCTION
