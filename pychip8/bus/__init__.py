"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import (
    MEMORY_SIZE,
    PROGRAM_START,
    RESERVED_END,
    Memory,
    MemoryAccessError,
    in_range,
)

__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_START",
    "RESERVED_END",
    "Memory",
    "MemoryAccessError",
    "in_range",
]
