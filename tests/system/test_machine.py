"""Tests for CHIP-8 machine assembly."""

from __future__ import annotations

import pytest

from pychip8.loader import RomFormatError
from pychip8.system import MachineConfig, create_machine
from pychip8.video import FONTSET


def test_create_machine_wires_components() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x60\x2A", rom_name="demo", seed=7))

    assert machine.cpu.memory is machine.memory
    assert machine.cpu.display is machine.display
    assert machine.cpu.keypad is machine.keypad
    assert machine.rom is not None and machine.rom.name == "demo"
    assert machine.memory.load_block(0, len(FONTSET)) == FONTSET

    machine.cpu.step()
    assert machine.cpu.state.v[0] == 0x2A


def test_machine_without_program() -> None:
    machine = create_machine(MachineConfig())

    assert machine.rom is None
    assert machine.cpu.state.pc == 0x200
    assert machine.cpu.trace is None


def test_reset_reloads_program_and_clears_state() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x60\x2A\x12\x02"))
    machine.cpu.step()
    machine.memory.store8(0x200, 0x00)

    machine.reset()

    assert machine.cpu.state.v[0] == 0
    assert machine.cpu.state.pc == 0x200
    assert machine.memory.load16(0x200) == 0x602A


def test_beep_callback_and_timer_mode() -> None:
    beeps: list[str] = []
    machine = create_machine(
        MachineConfig(
            rom_image=b"\x60\x00",
            timers_on_step=False,
            beep_callback=lambda: beeps.append("beep"),
            trace_capacity=4,
        )
    )
    machine.cpu.state.sound_timer = 1

    machine.cpu.step()
    assert beeps == []

    machine.cpu.tick_timers()
    assert beeps == ["beep"]
    assert machine.cpu.trace is not None and len(machine.cpu.trace) == 1


def test_oversize_rom_rejected() -> None:
    with pytest.raises(RomFormatError):
        create_machine(MachineConfig(rom_image=bytes(0x1000)))
