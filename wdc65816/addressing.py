"""Addressing modes and effective-address computation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class AddressingError(Exception):
    """An addressing mode was used in a way it does not support."""


class Mode(Enum):
    """The 65816 addressing modes."""

    IMMEDIATE = auto()
    IMMEDIATE8 = auto()
    # (PBR, PC + rel), wrapping inside the bank
    REL = auto()
    # Used for PER and BRL
    REL_LONG = auto()
    # (0, D + val)
    DIRECT = auto()
    DIRECT_INDEXED_X = auto()
    DIRECT_INDEXED_Y = auto()
    # (DBR, load2(0, D + val + X))
    DIRECT_INDEXED_INDIRECT = auto()
    # (DBR, load2(0, D + val))
    DIRECT_INDIRECT = auto()
    # (DBR, load2(0, D + val)) + Y, may cross into the next bank
    DIRECT_INDIRECT_INDEXED = auto()
    # load3(0, D + val)
    DIRECT_INDIRECT_LONG = auto()
    # load3(0, D + val) + Y
    DIRECT_INDIRECT_LONG_IDX = auto()
    # (DBR, val)
    ABSOLUTE = auto()
    ABS_INDEXED_X = auto()
    ABS_INDEXED_Y = auto()
    # (PBR, load2(PBR, val + X))
    ABS_INDEXED_INDIRECT = auto()
    # (bank, addr) + X
    ABS_LONG_INDEXED_X = auto()
    # (bank, addr)
    ABSOLUTE_LONG = auto()
    # (PBR, load2(0, val)), used only by JMP
    ABSOLUTE_INDIRECT = auto()
    # load3(0, val), used only by JML
    ABSOLUTE_INDIRECT_LONG = auto()
    # (0, S + val)
    STACK_REL = auto()


_BYTE = (0, 0xFF)
_WORD = (0, 0xFFFF)

_OPERAND_RANGE = {
    Mode.IMMEDIATE: _WORD,
    Mode.IMMEDIATE8: _BYTE,
    Mode.REL: (-0x80, 0x7F),
    Mode.REL_LONG: (-0x8000, 0x7FFF),
    Mode.DIRECT: _BYTE,
    Mode.DIRECT_INDEXED_X: _BYTE,
    Mode.DIRECT_INDEXED_Y: _BYTE,
    Mode.DIRECT_INDEXED_INDIRECT: _BYTE,
    Mode.DIRECT_INDIRECT: _BYTE,
    Mode.DIRECT_INDIRECT_INDEXED: _BYTE,
    Mode.DIRECT_INDIRECT_LONG: _BYTE,
    Mode.DIRECT_INDIRECT_LONG_IDX: _BYTE,
    Mode.ABSOLUTE: _WORD,
    Mode.ABS_INDEXED_X: _WORD,
    Mode.ABS_INDEXED_Y: _WORD,
    Mode.ABS_INDEXED_INDIRECT: _WORD,
    Mode.ABS_LONG_INDEXED_X: _WORD,
    Mode.ABSOLUTE_LONG: _WORD,
    Mode.ABSOLUTE_INDIRECT: _WORD,
    Mode.ABSOLUTE_INDIRECT_LONG: _WORD,
    Mode.STACK_REL: _BYTE,
}

_FORMATS = {
    Mode.IMMEDIATE: "#${value:04X}",
    Mode.IMMEDIATE8: "#${value:02X}",
    Mode.ABSOLUTE: "${value:04X}",
    Mode.ABSOLUTE_LONG: "${bank:02X}:{value:04X}",
    Mode.ABS_LONG_INDEXED_X: "${bank:02X}:{value:04X},x",
    Mode.ABS_INDEXED_X: "${value:04X},x",
    Mode.ABS_INDEXED_Y: "${value:04X},y",
    Mode.ABS_INDEXED_INDIRECT: "(${value:04X},x)",
    Mode.ABSOLUTE_INDIRECT: "(${value:04X})",
    Mode.ABSOLUTE_INDIRECT_LONG: "[${value:04X}]",
    Mode.REL: "{value:+d}",
    Mode.REL_LONG: "{value:+d}",
    Mode.DIRECT: "${value:02X}",
    Mode.DIRECT_INDEXED_X: "${value:02X},x",
    Mode.DIRECT_INDEXED_Y: "${value:02X},y",
    Mode.DIRECT_INDEXED_INDIRECT: "(${value:02X},x)",
    Mode.DIRECT_INDIRECT_INDEXED: "(${value:02X}),y",
    Mode.DIRECT_INDIRECT: "(${value:02X})",
    Mode.DIRECT_INDIRECT_LONG: "[${value:02X}]",
    Mode.DIRECT_INDIRECT_LONG_IDX: "[${value:02X}],y",
    Mode.STACK_REL: "${value:02X},s",
}

_LONG_MODES = frozenset({Mode.ABSOLUTE_LONG, Mode.ABS_LONG_INDEXED_X})


def _w(value: int) -> int:
    return value & 0xFFFF


@dataclass(frozen=True)
class AddressingMode:
    """An addressing mode with its operand; `bank` is used by the long absolute modes."""

    mode: Mode
    value: int
    bank: int = 0

    def __post_init__(self) -> None:
        lo, hi = _OPERAND_RANGE[self.mode]
        if not lo <= self.value <= hi:
            raise ValueError(f"operand {self.value} out of range for {self.mode.name}")
        if not 0 <= self.bank <= 0xFF:
            raise ValueError(f"bank {self.bank} out of range")

    def is_immediate(self) -> bool:
        """Whether this is an immediate value rather than a memory location."""
        return self.mode in (Mode.IMMEDIATE, Mode.IMMEDIATE8)

    def load_byte(self, cpu: Any) -> int:
        """Load a byte from where this mode points, or return the 8-bit immediate."""
        if self.mode is Mode.IMMEDIATE:
            raise AddressingError("load_byte on 16-bit immediate")
        if self.mode is Mode.IMMEDIATE8:
            return self.value
        return cpu.load_byte(*self.address(cpu))

    def load_word(self, cpu: Any) -> int:
        """Load a word from where this mode points, or return the 16-bit immediate."""
        if self.mode is Mode.IMMEDIATE:
            return self.value
        if self.mode is Mode.IMMEDIATE8:
            raise AddressingError("load_word on 8-bit immediate")
        return cpu.load_word(*self.address(cpu))

    def store_byte(self, cpu: Any, value: int) -> None:
        cpu.store_byte(*self.address(cpu), value)

    def store_word(self, cpu: Any, value: int) -> None:
        cpu.store_word(*self.address(cpu), value)

    def _direct_penalty(self, cpu: Any) -> None:
        if cpu.d & 0xFF:
            cpu.cy += 1

    def _index_penalty(self, cpu: Any) -> None:
        if not cpu.p.small_index:
            cpu.cy += 1

    def _pointer16(self, cpu: Any, ptr: int) -> int:
        lo = cpu.load_byte(0, ptr)
        hi = cpu.load_byte(0, _w(ptr + 1))
        return (hi << 8) | lo

    @staticmethod
    def _split24(eff: int) -> tuple[int, int]:
        if eff & ~0xFFFFFF:
            raise AddressingError("address overflow")
        return (eff >> 16) & 0xFF, eff & 0xFFFF

    def address(self, cpu: Any) -> tuple[int, int]:
        """Compute the effective (bank, address); for jumps this is the target."""
        value = self.value
        match self.mode:
            case Mode.ABSOLUTE:
                return cpu.dbr, value
            case Mode.ABSOLUTE_LONG:
                return self.bank, value
            case Mode.ABS_LONG_INDEXED_X:
                self._index_penalty(cpu)
                eff = (((self.bank << 16) | value) + cpu.x) & 0xFFFFFF
                return eff >> 16, eff & 0xFFFF
            case Mode.ABS_INDEXED_X:
                self._index_penalty(cpu)
                return cpu.dbr, _w(value + cpu.x)
            case Mode.ABS_INDEXED_Y:
                self._index_penalty(cpu)
                return cpu.dbr, _w(value + cpu.y)
            case Mode.ABS_INDEXED_INDIRECT:
                pbr = cpu.pbr
                return pbr, cpu.load_word(pbr, _w(value + cpu.x))
            case Mode.ABSOLUTE_INDIRECT:
                return cpu.pbr, cpu.load_word(0, value)
            case Mode.ABSOLUTE_INDIRECT_LONG:
                addr = cpu.load_word(0, value)
                bank = cpu.load_byte(0, _w(value + 2))
                return bank, addr
            case Mode.REL | Mode.REL_LONG:
                return cpu.pbr, _w(cpu.pc + value)
            case Mode.DIRECT:
                self._direct_penalty(cpu)
                return 0, _w(cpu.d + value)
            case Mode.DIRECT_INDEXED_X:
                self._direct_penalty(cpu)
                self._index_penalty(cpu)
                return 0, _w(cpu.d + value + cpu.x)
            case Mode.DIRECT_INDEXED_Y:
                self._direct_penalty(cpu)
                self._index_penalty(cpu)
                return 0, _w(cpu.d + value + cpu.y)
            case Mode.DIRECT_INDEXED_INDIRECT:
                self._direct_penalty(cpu)
                ptr = _w(cpu.d + value + cpu.x)
                return cpu.dbr, self._pointer16(cpu, ptr)
            case Mode.DIRECT_INDIRECT_INDEXED:
                self._direct_penalty(cpu)
                self._index_penalty(cpu)
                base = (cpu.dbr << 16) | self._pointer16(cpu, _w(cpu.d + value))
                return self._split24(base + cpu.y)
            case Mode.DIRECT_INDIRECT:
                self._direct_penalty(cpu)
                return cpu.dbr, self._pointer16(cpu, _w(cpu.d + value))
            case Mode.DIRECT_INDIRECT_LONG:
                self._direct_penalty(cpu)
                ptr = _w(cpu.d + value)
                addr = self._pointer16(cpu, ptr)
                return cpu.load_byte(0, _w(ptr + 2)), addr
            case Mode.DIRECT_INDIRECT_LONG_IDX:
                self._direct_penalty(cpu)
                self._index_penalty(cpu)
                ptr = _w(cpu.d + value)
                addr = self._pointer16(cpu, ptr)
                bank = cpu.load_byte(0, _w(ptr + 2))
                return self._split24(((bank << 16) | addr) + cpu.y)
            case Mode.STACK_REL:
                return 0, _w(cpu.s + value)
            case _:
                raise AddressingError(
                    "attempted to take the address of an immediate value "
                    "(attempted store to immediate?)"
                )

    def __str__(self) -> str:
        return _FORMATS[self.mode].format(value=self.value, bank=self.bank)