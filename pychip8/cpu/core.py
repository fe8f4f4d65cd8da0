"""CHIP-8 interpreter: register file, fetch/decode/execute and timers."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable

from pychip8.bus import PROGRAM_START, Memory, in_range
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FONT_START, FONTSET, FrameBuffer, glyph_address

from .opcodes import DecodeTable, Instruction, OPCODE_TABLE, Operands, decode_operands, lookup

REGISTER_COUNT = 16
STACK_DEPTH = 16
INSTRUCTION_WIDTH = 2
FLAG_REGISTER = 0xF


class CPUError(Exception):
    """Base error for interpreter failures raised from :meth:`Chip8CPU.step`."""

    def __init__(self, message: str, *, pc: int | None = None, opcode: int | None = None) -> None:
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode

    def __str__(self) -> str:
        message = super().__str__()
        if self.pc is None:
            return message
        opcode = "----" if self.opcode is None else f"{self.opcode:04X}"
        return f"{message} (pc={self.pc:03X} opcode={opcode})"


class UnknownOpcodeError(CPUError):
    """Raised when an instruction word matches no defined pattern."""


class StackOverflowError(CPUError):
    """Raised by CALL when all sixteen stack slots are in use."""


class StackUnderflowError(CPUError):
    """Raised by RET when the stack is empty."""


class AddressOutOfRangeError(CPUError):
    """Raised when a fetch or memory operand falls outside the 4 KiB space."""

    def __init__(self, address: int, length: int = 1, **kwargs) -> None:
        if length == 1:
            message = f"address {address:#06x} out of range"
        else:
            message = f"address range {address:#06x}+{length} out of range"
        super().__init__(message, **kwargs)
        self.address = address
        self.length = length


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file, stack and timers."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = PROGRAM_START
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.v),
            self.i,
            self.pc,
            self.sp,
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
        )


BeepListener = Callable[[], None]


@dataclass
class Chip8CPU:
    """The CHIP-8 virtual CPU.

    The host owns the instance and drives it one instruction at a time with
    :meth:`step`. With ``timers_on_step`` enabled (the default) both timers
    decay once per step, so the host is expected to call :meth:`step` at
    60 Hz. Hosts running faster disable it and call :meth:`tick_timers`
    once per frame instead.
    """

    memory: Memory = field(default_factory=Memory)
    display: FrameBuffer = field(default_factory=FrameBuffer)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)
    instruction_table: DecodeTable = field(default=OPCODE_TABLE)
    timers_on_step: bool = True
    seed: int | None = None
    trace: TraceRecorder | None = None

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0
    beep_count: int = 0
    waiting_for_key: bool = False
    _beep_listeners: list[BeepListener] = field(default_factory=list, repr=False)

    def initialize(self, seed: int | None = None) -> None:
        """Hard-reset the machine and load the fontset."""

        self.state = CPUState()
        self.memory.clear()
        self.memory.store_block(FONT_START, FONTSET)
        self.display.clear()
        self.keypad.reset()
        self.cycle_count = 0
        self.beep_count = 0
        self.waiting_for_key = False
        if seed is None:
            seed = self.seed
        self.rng.seed(time.time_ns() if seed is None else seed)
        if self.trace is not None:
            self.trace.clear()

    def load_program(self, data: bytes, address: int = PROGRAM_START) -> int:
        """Copy ``data`` into memory at ``address`` and return its length."""

        if not in_range(address, len(data)):
            raise AddressOutOfRangeError(address, len(data))
        self.memory.store_block(address, data)
        return len(data)

    def step(self) -> Instruction:
        """Execute one instruction, update the timers and return what ran.

        On error nothing is modified, so the host may halt, reset or skip.
        """

        state = self.state
        pc = state.pc
        if not in_range(pc, INSTRUCTION_WIDTH):
            raise AddressOutOfRangeError(pc, INSTRUCTION_WIDTH, pc=pc)
        word = self.memory.load16(pc)

        instruction = lookup(self.instruction_table, word)
        if instruction is None:
            raise UnknownOpcodeError(f"unknown opcode {word:#06x}", pc=pc, opcode=word)
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented", pc=pc, opcode=word)

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc, word, instruction.mnemonic)

        try:
            handler(decode_operands(word))
        except CPUError as exc:
            if exc.pc is None:
                exc.pc = pc
                exc.opcode = word
            raise

        self.cycle_count += 1
        if self.timers_on_step:
            self.tick_timers()
        if self.trace is not None:
            note = "key-wait" if self.waiting_for_key else ""
            self.trace.record_step(state, word, mnemonic=instruction.mnemonic, note=note)
        return instruction

    def tick_timers(self) -> None:
        """Apply one 60 Hz decrement to the delay and sound timers."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            edge = state.sound_timer == 1
            state.sound_timer -= 1
            if edge:
                self._emit_beep()

    @property
    def tone_active(self) -> bool:
        return self.state.sound_timer > 0

    def add_beep_listener(self, listener: BeepListener) -> None:
        """Register ``listener`` for the sound timer's 1 -> 0 transition."""

        self._beep_listeners.append(listener)

    def _emit_beep(self) -> None:
        self.beep_count += 1
        if debug_enabled("audio"):
            debug_log("audio", "beep count=%d", self.beep_count)
        for listener in tuple(self._beep_listeners):
            listener()

    # ------------------------------------------------------------------
    # Control flow

    def op_cls(self, _: Operands) -> None:
        self.display.clear()
        self._advance()

    def op_ret(self, _: Operands) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError("return with empty stack")
        state.sp -= 1
        state.pc = (state.stack[state.sp] + INSTRUCTION_WIDTH) & 0xFFFF

    def op_jp(self, ops: Operands) -> None:
        self.state.pc = ops.nnn

    def op_call(self, ops: Operands) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call stack exhausted ({STACK_DEPTH} frames)")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = ops.nnn

    def op_se_byte(self, ops: Operands) -> None:
        self._skip_if(self.state.v[ops.x] == ops.kk)

    def op_sne_byte(self, ops: Operands) -> None:
        self._skip_if(self.state.v[ops.x] != ops.kk)

    def op_se_register(self, ops: Operands) -> None:
        v = self.state.v
        self._skip_if(v[ops.x] == v[ops.y])

    def op_sne_register(self, ops: Operands) -> None:
        v = self.state.v
        self._skip_if(v[ops.x] != v[ops.y])

    def op_jp_offset(self, ops: Operands) -> None:
        self.state.pc = ops.nnn + self.state.v[0]

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_byte(self, ops: Operands) -> None:
        self.state.v[ops.x] = ops.kk
        self._advance()

    def op_add_byte(self, ops: Operands) -> None:
        v = self.state.v
        v[ops.x] = (v[ops.x] + ops.kk) % 256
        self._advance()

    def op_ld_register(self, ops: Operands) -> None:
        v = self.state.v
        v[ops.x] = v[ops.y]
        self._advance()

    def op_or(self, ops: Operands) -> None:
        v = self.state.v
        v[ops.x] = v[ops.x] | v[ops.y]
        self._advance()

    def op_and(self, ops: Operands) -> None:
        v = self.state.v
        v[ops.x] = v[ops.x] & v[ops.y]
        self._advance()

    def op_xor(self, ops: Operands) -> None:
        v = self.state.v
        v[ops.x] = v[ops.x] ^ v[ops.y]
        self._advance()

    def op_add_register(self, ops: Operands) -> None:
        v = self.state.v
        total = v[ops.x] + v[ops.y]
        self._set_with_flag(ops.x, total % 256, total > 0xFF)

    def op_sub(self, ops: Operands) -> None:
        v = self.state.v
        vx, vy = v[ops.x], v[ops.y]
        self._set_with_flag(ops.x, (vx - vy) % 256, vx >= vy)

    def op_subn(self, ops: Operands) -> None:
        v = self.state.v
        vx, vy = v[ops.x], v[ops.y]
        self._set_with_flag(ops.x, (vy - vx) % 256, vy >= vx)

    def op_shr(self, ops: Operands) -> None:
        vx = self.state.v[ops.x]
        self._set_with_flag(ops.x, vx >> 1, vx & 0x01)

    def op_shl(self, ops: Operands) -> None:
        vx = self.state.v[ops.x]
        self._set_with_flag(ops.x, (vx << 1) % 256, vx >> 7)

    def op_rnd(self, ops: Operands) -> None:
        self.state.v[ops.x] = self.rng.randrange(256) & ops.kk
        self._advance()

    # ------------------------------------------------------------------
    # Index register and memory transfers

    def op_ld_index(self, ops: Operands) -> None:
        self.state.i = ops.nnn
        self._advance()

    def op_add_index(self, ops: Operands) -> None:
        state = self.state
        state.i = (state.i + state.v[ops.x]) % 0x10000
        self._advance()

    def op_ld_glyph(self, ops: Operands) -> None:
        self.state.i = glyph_address(self.state.v[ops.x])
        self._advance()

    def op_ld_bcd(self, ops: Operands) -> None:
        state = self.state
        self._require_range(state.i, 3)
        value = state.v[ops.x]
        self.memory.store_block(state.i, (value // 100, (value // 10) % 10, value % 10))
        self._advance()

    def op_store_registers(self, ops: Operands) -> None:
        state = self.state
        count = ops.x + 1
        self._require_range(state.i, count)
        self.memory.store_block(state.i, state.v[:count])
        self._advance()

    def op_load_registers(self, ops: Operands) -> None:
        state = self.state
        count = ops.x + 1
        self._require_range(state.i, count)
        state.v[:count] = self.memory.load_block(state.i, count)
        self._advance()

    # ------------------------------------------------------------------
    # Timers

    def op_ld_from_delay(self, ops: Operands) -> None:
        self.state.v[ops.x] = self.state.delay_timer
        self._advance()

    def op_ld_delay(self, ops: Operands) -> None:
        self.state.delay_timer = self.state.v[ops.x]
        self._advance()

    def op_ld_sound(self, ops: Operands) -> None:
        self.state.sound_timer = self.state.v[ops.x]
        self._advance()

    # ------------------------------------------------------------------
    # Input

    def op_skp(self, ops: Operands) -> None:
        self._skip_if(self.keypad.is_pressed(self.state.v[ops.x]))

    def op_sknp(self, ops: Operands) -> None:
        self._skip_if(not self.keypad.is_pressed(self.state.v[ops.x]))

    def op_wait_key(self, ops: Operands) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # PC stays put; the same instruction runs again next step.
            if not self.waiting_for_key and debug_enabled("input"):
                debug_log("input", "waiting for key pc=%03x", self.state.pc)
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.state.v[ops.x] = key
        self._advance()

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, ops: Operands) -> None:
        state = self.state
        self._require_range(state.i, ops.n)
        rows = self.memory.load_block(state.i, ops.n)
        collision = self.display.draw_sprite(state.v[ops.x], state.v[ops.y], rows)
        state.v[FLAG_REGISTER] = 1 if collision else 0
        if debug_enabled("video"):
            debug_log(
                "video",
                "drw x=%d y=%d rows=%d collision=%s",
                state.v[ops.x],
                state.v[ops.y],
                ops.n,
                collision,
            )
        self._advance()

    # ------------------------------------------------------------------
    # Helpers

    def _advance(self, count: int = 1) -> None:
        self.state.pc = (self.state.pc + INSTRUCTION_WIDTH * count) & 0xFFFF

    def _skip_if(self, condition: bool) -> None:
        self._advance(2 if condition else 1)

    def _set_with_flag(self, register: int, value: int, flag: int | bool) -> None:
        # VF is written after the result, so the flag wins when x == F.
        v = self.state.v
        v[register] = value
        v[FLAG_REGISTER] = 1 if flag else 0
        self._advance()

    def _require_range(self, address: int, length: int) -> None:
        if not in_range(address, length):
            raise AddressOutOfRangeError(address, length)


__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "AddressOutOfRangeError",
    "REGISTER_COUNT",
    "STACK_DEPTH",
    "INSTRUCTION_WIDTH",
    "FLAG_REGISTER",
]
