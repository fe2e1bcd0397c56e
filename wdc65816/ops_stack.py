"""Stack, register transfer, block move and processor status instructions."""

from __future__ import annotations

from .addressing import AddressingMode
from .core import CpuCore


def _w(value: int) -> int:
    return value & 0xFFFF


class StackTransferOps(CpuCore):
    """Instructions that move data between registers, the stack and status bits."""

    # Block moves

    def mvn(self) -> None:
        """Move Next: copy A+1 bytes from X to Y, incrementing both."""
        dest_bank = self.fetch_byte()
        src_bank = self.fetch_byte()
        while self.a != 0xFFFF:
            self.store_byte(dest_bank, self.y, self.load_byte(src_bank, self.x))
            self.x = _w(self.x + 1)
            self.y = _w(self.y + 1)
            self.a = _w(self.a - 1)

    def mvp(self) -> None:
        """Move Previous: copy A+1 bytes from X to Y, decrementing both."""
        dest_bank = self.fetch_byte()
        src_bank = self.fetch_byte()
        while self.a != 0xFFFF:
            self.store_byte(dest_bank, self.y, self.load_byte(src_bank, self.x))
            self.x = _w(self.x - 1)
            self.y = _w(self.y - 1)
            self.a = _w(self.a - 1)

    # Stack

    def phk(self) -> None:
        """Push the program bank register."""
        self.push_byte(self.pbr)

    def phd(self) -> None:
        """Push the direct page register."""
        self.push_word(self.d)

    def pld(self) -> None:
        """Pull the direct page register."""
        self.d = self.pop_word()

    def phb(self) -> None:
        """Push the data bank register."""
        self.push_byte(self.dbr)

    def plb(self) -> None:
        """Pull the data bank register."""
        self.dbr = self.pop_byte()

    def php(self) -> None:
        """Push the status register."""
        self.push_byte(self.p.value)

    def plp(self) -> None:
        """Pull the status register."""
        self.set_p(self.pop_byte())

    def pha(self) -> None:
        """Push the accumulator at its current width."""
        if self.p.small_acc:
            self.push_byte(self.a & 0xFF)
        else:
            self.push_word(self.a)
            self.cy += 1

    def pla(self) -> None:
        """Pull the accumulator at its current width; sets N and Z."""
        if self.p.small_acc:
            self.a = (self.a & 0xFF00) | self.p.set_nz8(self.pop_byte())
        else:
            self.a = self.p.set_nz(self.pop_word())
            self.cy += 1

    def phx(self) -> None:
        """Push X at the index width."""
        if self.p.small_index:
            self.push_byte(self.x & 0xFF)
        else:
            self.push_word(self.x)
            self.cy += 1

    def plx(self) -> None:
        """Pull X at the index width; sets N and Z."""
        if self.p.small_index:
            self.x = self.p.set_nz8(self.pop_byte())
        else:
            self.x = self.p.set_nz(self.pop_word())
            self.cy += 1

    def phy(self) -> None:
        """Push Y at the index width."""
        if self.p.small_index:
            self.push_byte(self.y & 0xFF)
        else:
            self.push_word(self.y)
            self.cy += 1

    def ply(self) -> None:
        """Pull Y at the index width; sets N and Z."""
        if self.p.small_index:
            self.y = self.p.set_nz8(self.pop_byte())
        else:
            self.y = self.p.set_nz(self.pop_word())
            self.cy += 1

    def _push_effective(self, am: AddressingMode) -> None:
        _, addr = am.address(self)
        self.push_word(addr)

    def pea(self, am: AddressingMode) -> None:
        """Push Effective Absolute Address (16 bits, no bank)."""
        self._push_effective(am)

    def per(self, am: AddressingMode) -> None:
        """Push Effective PC-Relative Address."""
        self._push_effective(am)

    # Register transfers

    def xba(self) -> None:
        """Swap the accumulator's bytes; N and Z follow the new low byte."""
        lo = self.a & 0xFF
        hi = self.a >> 8
        self.a = (lo << 8) | self.p.set_nz8(hi)

    def tax(self) -> None:
        """Transfer A to X."""
        if self.p.small_index:
            self.x = (self.x & 0xFF00) | self.p.set_nz8(self.a & 0xFF)
        else:
            self.x = self.p.set_nz(self.a)

    def tay(self) -> None:
        """Transfer A to Y."""
        if self.p.small_index:
            self.y = (self.y & 0xFF00) | self.p.set_nz8(self.a & 0xFF)
        else:
            self.y = self.p.set_nz(self.a)

    def txa(self) -> None:
        """Transfer X to A."""
        if self.p.small_acc:
            self.a = (self.a & 0xFF00) | self.p.set_nz8(self.x & 0xFF)
        else:
            self.a = self.p.set_nz(self.x)

    def txs(self) -> None:
        """Transfer X to S; in emulation mode the high byte is forced to $01."""
        if self.emulation:
            self.s = 0x0100 | (self.x & 0xFF)
        else:
            self.s = self.x

    def txy(self) -> None:
        """Transfer X to Y."""
        if self.p.small_index:
            self.y = self.p.set_nz8(self.x & 0xFF)
        else:
            self.y = self.p.set_nz(self.x)

    def tya(self) -> None:
        """Transfer Y to A."""
        if self.p.small_acc:
            self.a = (self.a & 0xFF00) | self.p.set_nz8(self.y & 0xFF)
        else:
            self.a = self.p.set_nz(self.y)

    def tyx(self) -> None:
        """Transfer Y to X."""
        if self.p.small_index:
            self.x = self.p.set_nz8(self.y & 0xFF)
        else:
            self.x = self.p.set_nz(self.y)

    def tcd(self) -> None:
        """Transfer the 16-bit accumulator to D."""
        self.d = self.p.set_nz(self.a)

    def tdc(self) -> None:
        """Transfer D to the 16-bit accumulator."""
        self.a = self.p.set_nz(self.d)

    def tcs(self) -> None:
        """Transfer the 16-bit accumulator to S; emulation mode forces $01 into SH."""
        if self.emulation:
            self.s = 0x0100 | (self.a & 0xFF)
        else:
            self.s = self.a

    def tsc(self) -> None:
        """Transfer S to the 16-bit accumulator."""
        self.a = self.p.set_nz(self.s)

    def tsx(self) -> None:
        """Transfer S to X."""
        if self.p.small_index:
            self.x = self.p.set_nz8(self.s & 0xFF)
        else:
            self.x = self.p.set_nz(self.s)

    # Processor status

    def xce(self) -> None:
        """Exchange the carry and emulation flags."""
        carry = self.p.carry
        self.p.carry = self.emulation
        self.set_emulation(carry)

    def rep(self, am: AddressingMode) -> None:
        """Clear the status bits that are set in the operand."""
        self.set_p(self.p.value & ~am.load_byte(self) & 0xFF)

    def sep(self, am: AddressingMode) -> None:
        """Set the status bits that are set in the operand."""
        self.set_p(self.p.value | am.load_byte(self))

    def cli(self) -> None:
        self.p.irq_disable = False

    def sei(self) -> None:
        self.p.irq_disable = True

    def cld(self) -> None:
        self.p.decimal = False

    def sed(self) -> None:
        self.p.decimal = True

    def clc(self) -> None:
        self.p.carry = False

    def sec(self) -> None:
        self.p.carry = True

    def wai(self) -> None:
        """Stop dispatching until an interrupt arrives."""
        self.waiting = True

    def nop(self) -> None:
        """No operation; its whole cost is the base cycle count added by dispatch."""
        return None

    def ill(self) -> None:
        """Executed for an illegal opcode; flags the CPU as having hit one."""
        self.illegal = True