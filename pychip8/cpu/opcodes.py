"""Opcode metadata and operand decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Iterable, List, Sequence


class InstructionGroup(Enum):
    """Functional grouping of the instruction set."""

    CONTROL_FLOW = auto()
    ARITHMETIC = auto()
    TRANSFER = auto()
    TIMER = auto()
    INPUT = auto()
    DISPLAY = auto()


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one opcode pattern.

    ``pattern`` is the instruction word with every operand nibble cleared and
    ``mask`` selects the bits that must match it exactly.
    """

    pattern: int
    mask: int
    mnemonic: str
    group: InstructionGroup
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.pattern <= 0xFFFF or not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"pattern/mask out of range: {self.pattern:#x}/{self.mask:#x}")
        if self.mask & 0xF000 != 0xF000:
            raise ValueError("mask must cover the family nibble")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")

    @property
    def family(self) -> int:
        return self.pattern >> 12

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern


@dataclass(frozen=True)
class Operands:
    """Operand fields extracted from an instruction word."""

    x: int
    y: int
    n: int
    kk: int
    nnn: int


def decode_operands(word: int) -> Operands:
    return Operands(
        x=(word >> 8) & 0x0F,
        y=(word >> 4) & 0x0F,
        n=word & 0x000F,
        kk=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


DecodeTable = Sequence[Sequence[Instruction]]


class OpcodeTable:
    """Builder that buckets instructions by their family nibble."""

    _FAMILIES: Final[int] = 0x10

    def __init__(self) -> None:
        self._buckets: List[List[Instruction]] = [[] for _ in range(self._FAMILIES)]

    def register(self, instruction: Instruction) -> None:
        bucket = self._buckets[instruction.family]
        for existing in bucket:
            common = existing.mask & instruction.mask
            if existing.pattern & common == instruction.pattern & common:
                raise ValueError(
                    f"opcode {instruction.mnemonic} ({instruction.pattern:#06x}) "
                    f"overlaps {existing.mnemonic} ({existing.pattern:#06x})"
                )
        bucket.append(instruction)

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> DecodeTable:
        return tuple(tuple(bucket) for bucket in self._buckets)


def build_instruction_table(instructions: Iterable[Instruction]) -> DecodeTable:
    """Build the per-family lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


def lookup(table: DecodeTable, word: int) -> Instruction | None:
    """Return the instruction matching ``word`` or ``None`` when undefined."""

    for instruction in table[(word >> 12) & 0x0F]:
        if instruction.matches(word):
            return instruction
    return None


_FULL: Final[int] = 0xFFFF
_FAMILY: Final[int] = 0xF000
_FAMILY_LOW_NIBBLE: Final[int] = 0xF00F
_FAMILY_LOW_BYTE: Final[int] = 0xF0FF

_CF = InstructionGroup.CONTROL_FLOW
_AL = InstructionGroup.ARITHMETIC
_TR = InstructionGroup.TRANSFER
_TM = InstructionGroup.TIMER
_IN = InstructionGroup.INPUT
_DP = InstructionGroup.DISPLAY


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0x00E0, _FULL, "CLS", _DP, "op_cls"),
    Instruction(0x00EE, _FULL, "RET", _CF, "op_ret"),
    Instruction(0x1000, _FAMILY, "JP", _CF, "op_jp"),
    Instruction(0x2000, _FAMILY, "CALL", _CF, "op_call"),
    Instruction(0x3000, _FAMILY, "SE", _CF, "op_se_byte"),
    Instruction(0x4000, _FAMILY, "SNE", _CF, "op_sne_byte"),
    Instruction(0x5000, _FAMILY_LOW_NIBBLE, "SE", _CF, "op_se_register"),
    Instruction(0x6000, _FAMILY, "LD", _TR, "op_ld_byte"),
    Instruction(0x7000, _FAMILY, "ADD", _AL, "op_add_byte"),
    # 8xy*
    Instruction(0x8000, _FAMILY_LOW_NIBBLE, "LD", _TR, "op_ld_register"),
    Instruction(0x8001, _FAMILY_LOW_NIBBLE, "OR", _AL, "op_or"),
    Instruction(0x8002, _FAMILY_LOW_NIBBLE, "AND", _AL, "op_and"),
    Instruction(0x8003, _FAMILY_LOW_NIBBLE, "XOR", _AL, "op_xor"),
    Instruction(0x8004, _FAMILY_LOW_NIBBLE, "ADD", _AL, "op_add_register"),
    Instruction(0x8005, _FAMILY_LOW_NIBBLE, "SUB", _AL, "op_sub"),
    Instruction(0x8006, _FAMILY_LOW_NIBBLE, "SHR", _AL, "op_shr"),
    Instruction(0x8007, _FAMILY_LOW_NIBBLE, "SUBN", _AL, "op_subn"),
    Instruction(0x800E, _FAMILY_LOW_NIBBLE, "SHL", _AL, "op_shl"),
    Instruction(0x9000, _FAMILY_LOW_NIBBLE, "SNE", _CF, "op_sne_register"),
    Instruction(0xA000, _FAMILY, "LD", _TR, "op_ld_index"),
    Instruction(0xB000, _FAMILY, "JP", _CF, "op_jp_offset"),
    Instruction(0xC000, _FAMILY, "RND", _AL, "op_rnd"),
    Instruction(0xD000, _FAMILY, "DRW", _DP, "op_drw"),
    Instruction(0xE09E, _FAMILY_LOW_BYTE, "SKP", _IN, "op_skp"),
    Instruction(0xE0A1, _FAMILY_LOW_BYTE, "SKNP", _IN, "op_sknp"),
    # Fx**
    Instruction(0xF007, _FAMILY_LOW_BYTE, "LD", _TM, "op_ld_from_delay"),
    Instruction(0xF00A, _FAMILY_LOW_BYTE, "LD", _IN, "op_wait_key"),
    Instruction(0xF015, _FAMILY_LOW_BYTE, "LD", _TM, "op_ld_delay"),
    Instruction(0xF018, _FAMILY_LOW_BYTE, "LD", _TM, "op_ld_sound"),
    Instruction(0xF01E, _FAMILY_LOW_BYTE, "ADD", _TR, "op_add_index"),
    Instruction(0xF029, _FAMILY_LOW_BYTE, "LD", _TR, "op_ld_glyph"),
    Instruction(0xF033, _FAMILY_LOW_BYTE, "LD", _TR, "op_ld_bcd"),
    Instruction(0xF055, _FAMILY_LOW_BYTE, "LD", _TR, "op_store_registers"),
    Instruction(0xF065, _FAMILY_LOW_BYTE, "LD", _TR, "op_load_registers"),
)


OPCODE_TABLE: DecodeTable = build_instruction_table(DEFAULT_INSTRUCTIONS)

__all__ = [
    "InstructionGroup",
    "Instruction",
    "Operands",
    "OpcodeTable",
    "DecodeTable",
    "DEFAULT_INSTRUCTIONS",
    "OPCODE_TABLE",
    "build_instruction_table",
    "decode_operands",
    "lookup",
]
