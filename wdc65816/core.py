"""CPU state, bus access, stack handling and interrupt sequencing."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .addressing import AddressingMode
from .statusreg import StatusReg

# Emulation mode vectors
IRQ_VEC8 = 0xFFFE
RESET_VEC8 = 0xFFFC
NMI_VEC8 = 0xFFFA
ABORT_VEC8 = 0xFFF8
COP_VEC8 = 0xFFF4

# Native mode vectors
IRQ_VEC16 = 0xFFEE
NMI_VEC16 = 0xFFEA
ABORT_VEC16 = 0xFFE8
BRK_VEC16 = 0xFFE6
COP_VEC16 = 0xFFE4


@runtime_checkable
class Memory(Protocol):
    """A device attached to the 24-bit address bus and the 8-bit data bus."""

    def load(self, addr: int) -> int:
        """Read the byte at a 24-bit address."""

    def store(self, addr: int, value: int) -> None:
        """Write a byte to a 24-bit address."""


class BytesMemory:
    """Flat memory backed by a byte buffer.

    Reads past the end return 0 and writes past the end are ignored.
    """

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self.data = bytearray(data)

    def load(self, addr: int) -> int:
        if 0 <= addr < len(self.data):
            return self.data[addr]
        return 0

    def store(self, addr: int, value: int) -> None:
        if 0 <= addr < len(self.data):
            self.data[addr] = value & 0xFF


class CpuError(Exception):
    """The CPU reached a state the emulator does not support."""


def _w(value: int) -> int:
    return value & 0xFFFF


class CpuCore:
    """Registers and the primitive operations every instruction builds on.

    Creating a core performs a reset: the RESET vector is fetched and the CPU
    starts in emulation mode.
    """

    def __init__(self, mem: Memory) -> None:
        self.mem = mem
        pcl = mem.load(RESET_VEC8)
        pch = mem.load(RESET_VEC8 + 1)

        # Undefined according to the datasheet
        self.a = 0
        self.x = 0
        self.y = 0
        # High byte is 1 in emulation mode
        self.s = 0x0100
        self.dbr = 0
        self.d = 0
        self.pbr = 0
        self.pc = (pch << 8) | pcl
        self.p = StatusReg()
        self.emulation = True
        # Set by WAI: no further instructions until an interrupt arrives
        self.waiting = False
        # Clock cycles used by the current instruction
        self.cy = 0
        # Set when an illegal instruction was executed
        self.illegal = False
        self.trace = False

    # Bus access

    def load_byte(self, bank: int, addr: int) -> int:
        """Load a byte from (bank, addr)."""
        return self.mem.load(((bank & 0xFF) << 16) | (addr & 0xFFFF))

    def load_word(self, bank: int, addr: int) -> int:
        """Load a little-endian word; it may not straddle a bank boundary."""
        if addr >= 0xFFFF:
            raise CpuError("load_word on bank boundary")
        lo = self.load_byte(bank, addr)
        hi = self.load_byte(bank, addr + 1)
        return (hi << 8) | lo

    def store_byte(self, bank: int, addr: int, value: int) -> None:
        """Store a byte to (bank, addr)."""
        self.mem.store(((bank & 0xFF) << 16) | (addr & 0xFFFF), value & 0xFF)

    def store_word(self, bank: int, addr: int, value: int) -> None:
        """Store a little-endian word; the high byte crosses into the next bank at $FFFF."""
        self.store_byte(bank, addr, value)
        if addr == 0xFFFF:
            self.store_byte((bank + 1) & 0xFF, 0, value >> 8)
        else:
            self.store_byte(bank, addr + 1, value >> 8)

    def fetch_byte(self) -> int:
        """Fetch the byte at PBR:PC and advance PC."""
        b = self.load_byte(self.pbr, self.pc)
        self.pc = _w(self.pc + 1)
        return b

    def fetch_word(self) -> int:
        """Fetch a little-endian word at PBR:PC and advance PC past it."""
        low = self.fetch_byte()
        high = self.fetch_byte()
        return (high << 8) | low

    # Stack

    def _check_emulation_stack(self) -> None:
        if self.s & 0xFF00 != 0x0100:
            raise CpuError(f"stack pointer ${self.s:04X} outside page 1 in emulation mode")

    def push_byte(self, value: int) -> None:
        """Store a byte at S, then decrement S."""
        self.store_byte(0, self.s, value)
        if self.emulation:
            self._check_emulation_stack()
            self.s = 0x0100 | ((self.s - 1) & 0xFF)
        else:
            self.s = _w(self.s - 1)

    def push_word(self, value: int) -> None:
        """Push the high byte, then the low byte."""
        self.push_byte((value >> 8) & 0xFF)
        self.push_byte(value & 0xFF)

    def pop_byte(self) -> int:
        """Increment S, then load the byte it points at."""
        if self.emulation:
            self._check_emulation_stack()
            self.s = 0x0100 | ((self.s + 1) & 0xFF)
        else:
            self.s = _w(self.s + 1)
        return self.load_byte(0, self.s)

    def pop_word(self) -> int:
        """Pop the low byte, then the high byte."""
        lo = self.pop_byte()
        hi = self.pop_byte()
        return (hi << 8) | lo

    # Modes and status

    def set_emulation(self, value: bool) -> None:
        """Enter or leave emulation mode."""
        if not self.emulation and value:
            self.s = 0x0100 | (self.s & 0xFF)
            self.p.small_acc = True
            self.p.small_index = True
            # 8-bit index registers have their high byte forced to zero
            self.x &= 0xFF
            self.y &= 0xFF
        self.emulation = bool(value)

    def set_p(self, value: int) -> None:
        """Replace the status register, clearing X/Y high bytes when they shrink."""
        was_small = self.p.small_index
        self.p.value = value & 0xFF
        if not was_small and self.p.small_index:
            self.x &= 0xFF
            self.y &= 0xFF

    def trace_op(self, pc: int, raw: int, op: str, am: AddressingMode | None) -> None:
        """Print one trace line for an instruction when tracing is on."""
        if not self.trace:
            return
        opstr = op if am is None else f"{op} {am}"
        print(
            f"${self.pbr:02X}:{pc:04X} {raw:02X}  {opstr:<14} "
            f"a:{self.a:04X} x:{self.x:04X} y:{self.y:04X} s:{self.s:04X} "
            f"d:{self.d:04X} dbr:{self.dbr:02X} emu:{int(self.emulation)} {self.p}"
        )

    # Interrupts

    def trigger_nmi(self) -> None:
        """Invoke the NMI handler."""
        self.interrupt(NMI_VEC8 if self.emulation else NMI_VEC16)

    def trigger_irq(self) -> bool:
        """Invoke the IRQ handler when the I flag is set; return whether it ran."""
        if not self.p.irq_disable:
            return False
        self.interrupt(IRQ_VEC8 if self.emulation else IRQ_VEC16)
        return True

    def interrupt(self, vector: int) -> None:
        """Push PBR (native only), PC and P, then jump to the handler at `vector`."""
        self.waiting = False

        if not self.emulation:
            self.push_byte(self.pbr)
            self.pbr = 0

        self.push_word(self.pc)
        self.push_byte(self.p.value)

        # Interrupts clear the decimal flag, but only in native mode
        if not self.emulation:
            self.p.decimal = False

        self.pc = self.load_word(0, vector)

    def return_from_interrupt(self) -> None:
        """Pull P, PC and (native only) PBR."""
        self.p.value = self.pop_byte()
        self.pc = self.pop_word()
        if not self.emulation:
            self.pbr = self.pop_byte()

    # Helpers shared by instructions

    def compare(self, a: int, b: int) -> None:
        """Set Z, C and N from the 16-bit subtraction a - b."""
        self.p.zero = a == b
        self.p.carry = a >= b
        self.p.negative = bool(((a - b) & 0xFFFF) & 0x8000)

    def compare8(self, a: int, b: int) -> None:
        """Set Z, C and N from the 8-bit subtraction a - b."""
        self.p.zero = a == b
        self.p.carry = a >= b
        self.p.negative = bool(((a - b) & 0xFF) & 0x80)

    def branch(self, target: tuple[int, int]) -> None:
        """Jump to (bank, addr), replacing the program bank."""
        self.pbr, self.pc = target