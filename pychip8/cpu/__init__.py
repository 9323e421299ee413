"""CPU package for the CHIP-8 core."""

from .core import Chip8CPU, MachineSnapshot, StepStatus
from .errors import (
    CPUError,
    DecodeError,
    StackOverflowError,
    StackUnderflowError,
    UnsupportedInstructionError,
)
from .opcodes import DecodedInstruction, Operation, decode
from .registers import FLAG_REGISTER, CallStack, CPUState
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CallStack",
    "MachineSnapshot",
    "StepStatus",
    "CPUError",
    "DecodeError",
    "UnsupportedInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
    "DecodedInstruction",
    "Operation",
    "FLAG_REGISTER",
    "decode",
    "opcodes",
]
