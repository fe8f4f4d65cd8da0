"""Tests for raw program image loading."""

from __future__ import annotations

import io

import pytest

from pychip8.bus import Memory
from pychip8.loader import MAX_PROGRAM_SIZE, RomFormatError, load_rom, load_rom_from_path


def test_load_rom_copies_bytes_at_program_start() -> None:
    memory = Memory()

    image = load_rom(io.BytesIO(b"\x60\x01\x70\x02"), memory, name="demo")

    assert image.name == "demo"
    assert image.start == 0x200
    assert image.length == 4
    assert image.end == 0x203
    assert memory.load_block(0x200, 4) == b"\x60\x01\x70\x02"
    assert memory.load8(0x1FF) == 0


def test_load_rom_from_path(tmp_path) -> None:
    path = tmp_path / "pong.ch8"
    path.write_bytes(b"\x12\x00")
    memory = Memory()

    image = load_rom_from_path(path, memory)

    assert image.name == "pong"
    assert memory.load16(0x200) == 0x1200


def test_largest_program_fits() -> None:
    memory = Memory()

    image = load_rom(io.BytesIO(b"\xAA" * MAX_PROGRAM_SIZE), memory)

    assert image.end == 0xFFF
    assert memory.load8(0xFFF) == 0xAA


@pytest.mark.parametrize("payload", [b"", b"\x00" * (MAX_PROGRAM_SIZE + 1)])
def test_invalid_images_rejected(payload: bytes) -> None:
    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(payload), Memory())


def test_start_address_must_leave_room() -> None:
    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(b"\x00" * 4), Memory(), start=0xFFE)
