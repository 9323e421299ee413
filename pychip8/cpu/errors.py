"""Exception taxonomy raised while executing a cycle."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU-related failures."""


class DecodeError(CPUError):
    """Raised when an instruction word cannot be fetched from memory."""


class UnsupportedInstructionError(CPUError):
    """Raised for instruction words with no defined semantics."""

    def __init__(self, word: int, address: int) -> None:
        super().__init__(f"unsupported instruction {word:04X} at {address:03X}")
        self.word = word
        self.address = address


class StackOverflowError(CPUError):
    """Raised when a call is made with every stack slot in use."""


class StackUnderflowError(CPUError):
    """Raised when returning with an empty call stack."""
