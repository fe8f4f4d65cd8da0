"""CPU package for the CHIP-8 interpreter."""

from .core import (
    AddressOutOfRangeError,
    Chip8CPU,
    CPUError,
    CPUState,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "AddressOutOfRangeError",
    "opcodes",
]
