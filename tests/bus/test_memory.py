"""Unit tests for the 4 KiB memory."""

import pytest

from pychip8.bus import MEMORY_SIZE, Memory, MemoryAccessError, in_range


def test_store_and_load() -> None:
    memory = Memory()

    memory.store8(0x200, 0x1F2)
    memory.store_block(0x300, (0xAB, 0xCD))

    assert len(memory) == MEMORY_SIZE
    assert memory.load8(0x200) == 0xF2
    assert memory.load16(0x300) == 0xABCD
    assert memory.load_block(0x300, 2) == b"\xab\xcd"


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, 0x1FFF])
def test_out_of_range_access_raises(address: int) -> None:
    memory = Memory()

    with pytest.raises(MemoryAccessError):
        memory.load8(address)
    with pytest.raises(MemoryAccessError):
        memory.store8(address, 0)


def test_word_and_block_reads_respect_upper_bound() -> None:
    memory = Memory()

    with pytest.raises(MemoryAccessError):
        memory.load16(MEMORY_SIZE - 1)
    with pytest.raises(MemoryAccessError):
        memory.store_block(MEMORY_SIZE - 2, b"\x00\x00\x00")
    assert memory.load_block(MEMORY_SIZE - 2, 2) == b"\x00\x00"


def test_clear_and_snapshot() -> None:
    memory = Memory()
    memory.store8(0x10, 0x99)

    memory.clear()

    assert memory.snapshot() == bytes(MEMORY_SIZE)


def test_in_range() -> None:
    assert in_range(0, MEMORY_SIZE)
    assert in_range(MEMORY_SIZE - 2, 2)
    assert in_range(MEMORY_SIZE, 0)
    assert not in_range(MEMORY_SIZE - 1, 2)
    assert not in_range(-1)
