"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import CPUError
from pychip8.loader import RomFormatError
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import PALETTES, Renderer

_FRAME_RATE = 60
_DEFAULT_STEPS_PER_FRAME = 10
_TRACE_CAPACITY = 512


@dataclass
class AppConfig:
    """Configuration for the pygame frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    steps_per_frame: int = _DEFAULT_STEPS_PER_FRAME
    seed: Optional[int] = None
    palette: str = "mono"
    enable_audio: bool = True
    tone_frequency: float = 440.0


class Chip8App:
    """Owns the machine and drives it from the pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.steps_per_frame <= 0:
            raise ValueError("steps_per_frame must be positive")
        if config.palette not in PALETTES:
            raise ValueError(f"unknown palette '{config.palette}'")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0
        self._trace_enabled = debug_enabled("trace")

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")

        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame
        self._init_audio(pygame)

        renderer = Renderer(PALETTES[self._config.palette])
        scale = self._config.scale
        surface_size = (machine.display.width * scale, machine.display.height * scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)
        clock = pygame.time.Clock()
        self._running = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._enter_debug_shell(machine)
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(machine, pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(machine, pygame.key.name(event.key), pressed=False)

                frame_start = time.perf_counter()
                self._run_frame(machine)

                if machine.display.redraw_requested:
                    frame = renderer.render(machine.display, scale=scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()
                    machine.display.acknowledge_redraw()

                if self._beeper is not None:
                    self._beeper.set_active(machine.cpu.tone_active)

                if self._perf_enabled:
                    elapsed = time.perf_counter() - frame_start
                    debug_log(
                        "perf",
                        "frame=%d steps=%d frame_ms=%.3f",
                        self._frame_counter,
                        self._config.steps_per_frame,
                        elapsed * 1000.0,
                    )

                clock.tick(_FRAME_RATE)
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _init_audio(self, pygame) -> None:
        if not self._config.enable_audio:
            return
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - host dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return
        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            return
        try:
            self._beeper = SquareWaveBeeper(
                sample_rate=mixer_state[0],
                frequency=self._config.tone_frequency,
            )
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            image = rom_path.read_bytes()
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        try:
            return create_machine(
                MachineConfig(
                    rom_image=image,
                    rom_name=rom_path.stem,
                    seed=self._config.seed,
                    timers_on_step=self._config.steps_per_frame == 1,
                    trace_capacity=_TRACE_CAPACITY if self._trace_enabled else 0,
                )
            )
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

    def _run_frame(self, machine: Machine) -> None:
        """Run one 60 Hz frame worth of instructions."""

        cpu = machine.cpu
        try:
            for _ in range(self._config.steps_per_frame):
                cpu.step()
        except CPUError as exc:
            self._running = False
            if cpu.trace is not None:
                cpu.trace.dump("trace", limit=32)
            raise RuntimeError(f"CHIP-8 fault: {exc}") from exc
        if not cpu.timers_on_step:
            cpu.tick_timers()

    def _handle_key_event(self, machine: Machine, name: str, *, pressed: bool) -> None:
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            machine.keypad.press_named(name)
        else:
            machine.keypad.release_named(name)

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Enter command: [c]pu, [m]em, [d]isplay, [k]eys, [t]race, [r]eset, [q]uit, [Enter] resume")

        paused = True
        while paused and self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                break

            if command == "" or command == "resume":
                paused = False
            elif command in {"c", "cpu"}:
                self._dump_cpu(machine)
            elif command in {"d", "display"}:
                self._dump_display(machine)
            elif command in {"k", "keys"}:
                self._dump_keys(machine)
            elif command in {"t", "trace"}:
                self._dump_trace(machine)
            elif command in {"r", "reset"}:
                machine.reset()
                print("Machine reset.")
            elif command.startswith("m"):
                spec = command[1:].strip()
                self._dump_memory(machine, spec if spec else None)
            elif command in {"q", "quit", "exit"}:
                print("Exiting emulator.")
                self._running = False
                paused = False
            else:
                print("Commands: [Enter]=resume, [c]pu, [m]em, [d]isplay, [k]eys, [t]race, [r]eset, [q]uit")

        if self._pygame is not None:
            self._pygame.event.clear()

    def _dump_cpu(self, machine: Machine) -> None:
        cpu = machine.cpu
        state = cpu.state
        print(
            f"PC={state.pc:03X} I={state.i:03X} SP={state.sp:02d} "
            f"DT={state.delay_timer:02X} ST={state.sound_timer:02X} "
            f"steps={cpu.cycle_count} beeps={cpu.beep_count} wait={cpu.waiting_for_key}"
        )
        for row in range(0, 16, 8):
            print("  " + " ".join(f"V{index:X}={state.v[index]:02X}" for index in range(row, row + 8)))
        frames = " ".join(f"{address:03X}" for address in state.stack[: state.sp])
        print(f"Stack: {frames or '-'}")

    def _dump_display(self, machine: Machine) -> None:
        for row in machine.display.rows():
            print("".join("#" if value else "." for value in row))

    def _dump_keys(self, machine: Machine) -> None:
        pressed = [f"{key:X}" for key, state in enumerate(machine.keypad.snapshot()) if state]
        print(f"Pressed: {' '.join(pressed) or '-'}")

    def _dump_trace(self, machine: Machine, limit: int = 64) -> None:
        trace = machine.cpu.trace
        if trace is None:
            print("Trace disabled; set CHIP8_DEBUG=trace.")
            return
        entries = trace.format_entries(limit)
        if not entries:
            print("Trace buffer empty.")
            return
        for line in entries:
            print(f"  {line}")

    def _dump_memory(self, machine: Machine, spec: str | None = None) -> None:
        def parse_value(text: str, default: int) -> int:
            text = text.strip()
            if not text:
                return default
            lowered = text.lower()
            if lowered.startswith("0x") or any(c in "abcdef" for c in lowered):
                return int(lowered, 16)
            return int(lowered, 10)

        start = 0x200
        length = 0x80
        if spec:
            parts = spec.split()
            try:
                start = parse_value(parts[0], start)
                length = parse_value(parts[1], length) if len(parts) > 1 else length
            except (ValueError, IndexError):
                print("Usage: m [start_hex] [length]")
                return

        memory = machine.memory
        end = min(start + length, len(memory))
        if length <= 0 or start < 0 or start >= end:
            print("Range outside memory.")
            return
        for addr in range(start, end, 16):
            chunk = memory.load_block(addr, min(16, end - addr))
            hex_part = " ".join(f"{value:02X}" for value in chunk)
            print(f"{addr:03X}: {hex_part}")
