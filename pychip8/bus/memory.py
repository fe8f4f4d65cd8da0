"""Flat 4 KiB memory for the CHIP-8 interpreter.

Addresses ``0x000``-``0x1FF`` are reserved for the interpreter (the fontset
lives at the bottom of this area) and programs are loaded from ``0x200``.
Accesses outside ``0x000``-``0xFFF`` are a contract violation and raise
``MemoryAccessError`` instead of wrapping.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000
RESERVED_END = 0x200
PROGRAM_START = 0x200


class MemoryAccessError(Exception):
    """Raised when memory is accessed outside the 4 KiB address space."""

    def __init__(self, address: int, length: int = 1) -> None:
        self.address = address
        self.length = length
        if length == 1:
            message = f"address {address:#05x} outside memory 0x000-{MEMORY_SIZE - 1:#05x}"
        else:
            message = (
                f"range {address:#05x}+{length} outside memory 0x000-{MEMORY_SIZE - 1:#05x}"
            )
        super().__init__(message)


def in_range(address: int, length: int = 1) -> bool:
    """Return ``True`` when ``length`` bytes starting at ``address`` are addressable."""

    return address >= 0 and length >= 0 and address + length <= MEMORY_SIZE


class Memory:
    """Byte-addressable 4096-byte memory."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= 0:
            raise ValueError("memory size must be positive")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > len(self._data):
            raise MemoryAccessError(address, length)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word (the instruction fetch format)."""

        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def load_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def store_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        self._check(address, len(payload))
        self._data[address : address + len(payload)] = payload

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def snapshot(self) -> bytes:
        return bytes(self._data)
