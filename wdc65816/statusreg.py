"""The processor status register (P)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag


class Flag(IntFlag):
    """Bits of the status register."""

    NEGATIVE = 0x80
    OVERFLOW = 0x40
    # 1 = accumulator is 8-bit (native mode only)
    SMALL_ACC = 0x20
    # 1 = index registers X/Y are 8-bit (native mode only)
    SMALL_INDEX = 0x10
    # Emulation mode only; shares its bit with SMALL_INDEX
    BREAK = 0x10
    DECIMAL = 0x08
    # 1 = IRQs disabled
    IRQ_DISABLE = 0x04
    ZERO = 0x02
    CARRY = 0x01


# Accumulator and index registers start 8 bits wide, IRQs disabled.
RESET_VALUE = Flag.SMALL_ACC | Flag.SMALL_INDEX | Flag.IRQ_DISABLE

_DISPLAY = (
    ("N", Flag.NEGATIVE),
    ("V", Flag.OVERFLOW),
    ("M", Flag.SMALL_ACC),
    ("X", Flag.SMALL_INDEX),
    ("D", Flag.DECIMAL),
    ("I", Flag.IRQ_DISABLE),
    ("Z", Flag.ZERO),
    ("C", Flag.CARRY),
)


def _flag_property(flag: Flag, doc: str) -> property:
    def getter(self: StatusReg) -> bool:
        return bool(self.value & flag)

    def setter(self: StatusReg, on: bool) -> None:
        if on:
            self.value = (self.value | flag) & 0xFF
        else:
            self.value = self.value & ~flag & 0xFF

    return property(getter, setter, doc=doc)


@dataclass
class StatusReg:
    """The 8-bit status register with one boolean property per flag."""

    value: int = int(RESET_VALUE)

    def __post_init__(self) -> None:
        self.value = int(self.value) & 0xFF

    negative = _flag_property(Flag.NEGATIVE, "Negative flag (N).")
    overflow = _flag_property(Flag.OVERFLOW, "Overflow flag (V).")
    small_acc = _flag_property(Flag.SMALL_ACC, "Accumulator is 8-bit (M).")
    small_index = _flag_property(Flag.SMALL_INDEX, "Index registers are 8-bit (X).")
    decimal = _flag_property(Flag.DECIMAL, "Decimal mode flag (D).")
    irq_disable = _flag_property(Flag.IRQ_DISABLE, "IRQs disabled flag (I).")
    zero = _flag_property(Flag.ZERO, "Zero flag (Z).")
    carry = _flag_property(Flag.CARRY, "Carry flag (C).")

    def set_nz(self, value: int) -> int:
        """Set N and Z from a 16-bit value and return the value."""
        self.zero = value == 0
        self.negative = bool(value & 0x8000)
        return value

    def set_nz8(self, value: int) -> int:
        """Set N and Z from an 8-bit value and return the value."""
        self.zero = value == 0
        self.negative = bool(value & 0x80)
        return value

    def __str__(self) -> str:
        return "".join(letter if self.value & flag else "-" for letter, flag in _DISPLAY)