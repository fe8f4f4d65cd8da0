"""Raw CHIP-8 program image loading.

CHIP-8 programs carry no header: the file contents are copied verbatim into
memory starting at ``0x200``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory
from pychip8.utils import debug_enabled, debug_log

MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomFormatError(Exception):
    """Raised when a program image cannot be loaded."""


@dataclass
class RomImage:
    """Describes a program image copied into memory."""

    name: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length - 1


def read_rom(stream: BinaryIO) -> bytes:
    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError("program image is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomFormatError(f"program image exceeds {MAX_PROGRAM_SIZE} bytes")
    return bytes(data)


def load_rom(stream: BinaryIO, memory: Memory, *, name: str = "", start: int = PROGRAM_START) -> RomImage:
    """Copy the program in ``stream`` into ``memory`` at ``start``."""

    data = read_rom(stream)
    if start < 0 or start + len(data) > len(memory):
        raise RomFormatError(
            f"program of {len(data)} bytes does not fit at {start:#05x}"
        )
    memory.store_block(start, data)
    image = RomImage(name=name, start=start, length=len(data))
    if debug_enabled("loader"):
        debug_log("loader", "loaded name=%s start=%03x end=%03x", name or "-", image.start, image.end)
    return image


def load_rom_from_path(path: Path | str, memory: Memory, *, start: int = PROGRAM_START) -> RomImage:
    path = Path(path)
    with path.open("rb") as stream:
        return load_rom(stream, memory, name=path.stem, start=start)
