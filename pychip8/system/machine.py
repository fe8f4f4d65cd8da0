"""CHIP-8 machine assembly."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Callable, Optional

from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU
from pychip8.io import Keypad
from pychip8.loader import RomImage, load_rom
from pychip8.utils import TraceRecorder
from pychip8.video import FrameBuffer


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    rom_name: str = ""
    seed: Optional[int] = None
    timers_on_step: bool = True
    beep_callback: Optional[Callable[[], None]] = None
    trace_capacity: int = 0


@dataclass
class Machine:
    """Aggregates the interpreter and the devices it drives."""

    memory: Memory
    cpu: Chip8CPU
    display: FrameBuffer
    keypad: Keypad
    config: MachineConfig
    rom: RomImage | None = None

    def reset(self) -> None:
        """Re-initialise the interpreter and reload the configured program."""

        self.cpu.initialize()
        self.rom = None
        if self.config.rom_image is not None:
            self.rom = load_rom(
                io.BytesIO(self.config.rom_image),
                self.memory,
                name=self.config.rom_name,
            )


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate and reset a CHIP-8 machine with the requested configuration."""

    memory = Memory()
    display = FrameBuffer()
    keypad = Keypad()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity > 0 else None

    cpu = Chip8CPU(
        memory=memory,
        display=display,
        keypad=keypad,
        timers_on_step=config.timers_on_step,
        seed=config.seed,
        trace=trace,
    )
    if config.beep_callback is not None:
        cpu.add_beep_listener(config.beep_callback)

    machine = Machine(
        memory=memory,
        cpu=cpu,
        display=display,
        keypad=keypad,
        config=config,
    )
    machine.reset()
    return machine
