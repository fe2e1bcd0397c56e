"""Load, store, compare, branch, jump and return instructions."""

from __future__ import annotations

from .addressing import AddressingMode
from .core import CpuCore


def _w(value: int) -> int:
    return value & 0xFFFF


class LoadStoreFlowOps(CpuCore):
    """Instructions for data movement to and from memory and for control flow."""

    # Comparisons

    def cmp(self, am: AddressingMode) -> None:
        """Compare the accumulator with memory."""
        if self.p.small_acc:
            self.compare8(self.a & 0xFF, am.load_byte(self))
        else:
            self.compare(self.a, am.load_word(self))
            self.cy += 1

    def cpx(self, am: AddressingMode) -> None:
        """Compare X with memory."""
        if self.p.small_index:
            val = am.load_byte(self)
            self.compare8(self.x & 0xFF, val)
        else:
            val = am.load_word(self)
            self.compare(self.x, val)
            self.cy += 1

    def cpy(self, am: AddressingMode) -> None:
        """Compare Y with memory."""
        if self.p.small_index:
            val = am.load_byte(self)
            self.compare8(self.y & 0xFF, val)
        else:
            val = am.load_word(self)
            self.compare(self.y, val)
            self.cy += 1

    # Loads

    def lda(self, am: AddressingMode) -> None:
        """Load the accumulator; sets N and Z."""
        if self.p.small_acc:
            self.a = (self.a & 0xFF00) | self.p.set_nz8(am.load_byte(self))
        else:
            self.a = self.p.set_nz(am.load_word(self))
            self.cy += 1

    def ldx(self, am: AddressingMode) -> None:
        """Load X; sets N and Z."""
        if self.p.small_index:
            self.x = (self.x & 0xFF00) | self.p.set_nz8(am.load_byte(self))
        else:
            self.x = self.p.set_nz(am.load_word(self))
            self.cy += 1

    def ldy(self, am: AddressingMode) -> None:
        """Load Y; sets N and Z."""
        if self.p.small_index:
            self.y = (self.y & 0xFF00) | self.p.set_nz8(am.load_byte(self))
        else:
            self.y = self.p.set_nz(am.load_word(self))
            self.cy += 1

    # Stores

    def sta(self, am: AddressingMode) -> None:
        """Store the accumulator."""
        if self.p.small_acc:
            am.store_byte(self, self.a & 0xFF)
        else:
            am.store_word(self, self.a)
            self.cy += 1

    def stx(self, am: AddressingMode) -> None:
        """Store X."""
        if self.p.small_index:
            am.store_byte(self, self.x & 0xFF)
        else:
            am.store_word(self, self.x)
            self.cy += 1

    def sty(self, am: AddressingMode) -> None:
        """Store Y."""
        if self.p.small_index:
            am.store_byte(self, self.y & 0xFF)
        else:
            am.store_word(self, self.y)
            self.cy += 1

    def stz(self, am: AddressingMode) -> None:
        """Store zero at the accumulator width."""
        if self.p.small_acc:
            am.store_byte(self, 0)
        else:
            am.store_word(self, 0)
            self.cy += 1

    # Jumps and branches

    def jml(self, am: AddressingMode) -> None:
        """Jump long, changing the program bank."""
        self.branch(am.address(self))

    def jmp(self, am: AddressingMode) -> None:
        """Jump inside the current program bank."""
        _, addr = am.address(self)
        self.pc = addr

    def bra(self, am: AddressingMode) -> None:
        """Branch always."""
        self.branch(am.address(self))

    def _branch_if(self, am: AddressingMode, taken: bool) -> None:
        target = am.address(self)
        if taken:
            self.branch(target)
            self.cy += 1

    def bpl(self, am: AddressingMode) -> None:
        """Branch if N is clear."""
        self._branch_if(am, not self.p.negative)

    def bmi(self, am: AddressingMode) -> None:
        """Branch if N is set."""
        self._branch_if(am, self.p.negative)

    def bvc(self, am: AddressingMode) -> None:
        """Branch if V is clear."""
        self._branch_if(am, not self.p.overflow)

    def bvs(self, am: AddressingMode) -> None:
        """Branch if V is set."""
        self._branch_if(am, self.p.overflow)

    def bcc(self, am: AddressingMode) -> None:
        """Branch if C is clear."""
        self._branch_if(am, not self.p.carry)

    def bcs(self, am: AddressingMode) -> None:
        """Branch if C is set."""
        self._branch_if(am, self.p.carry)

    def beq(self, am: AddressingMode) -> None:
        """Branch if Z is set."""
        self._branch_if(am, self.p.zero)

    def bne(self, am: AddressingMode) -> None:
        """Branch if Z is clear."""
        self._branch_if(am, not self.p.zero)

    # Subroutines

    def jsr(self, am: AddressingMode) -> None:
        """Jump to a subroutine in the current bank, pushing the address of the last operand byte."""
        ret = _w(self.pc - 1)
        self.push_byte(ret >> 8)
        self.push_byte(ret & 0xFF)
        self.pc = am.address(self)[1]

    def jsl(self, am: AddressingMode) -> None:
        """Long jump to a subroutine, also pushing PBR."""
        self.push_byte(self.pbr)
        ret = _w(self.pc - 1)
        self.push_byte(ret >> 8)
        self.push_byte(ret & 0xFF)
        self.pbr, self.pc = am.address(self)

    def rti(self) -> None:
        """Return from interrupt."""
        self.return_from_interrupt()

    def rts(self) -> None:
        """Return from a subroutine entered with JSR."""
        pcl = self.pop_byte()
        pch = self.pop_byte()
        self.pc = _w(((pch << 8) | pcl) + 1)

    def rtl(self) -> None:
        """Return from a subroutine entered with JSL, restoring PBR."""
        pcl = self.pop_byte()
        pch = self.pop_byte()
        self.pbr = self.pop_byte()
        self.pc = _w(((pch << 8) | pcl) + 1)