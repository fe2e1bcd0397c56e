"""Logic, arithmetic, shift, increment/decrement and bit-test instructions."""

from __future__ import annotations

from .addressing import AddressingMode
from .core import CpuCore


def _w(value: int) -> int:
    return value & 0xFFFF


def _b(value: int) -> int:
    return value & 0xFF


class ArithmeticOps(CpuCore):
    """Instructions that compute on the accumulator, index registers or memory."""

    # Logic

    def and_(self, am: AddressingMode) -> None:
        """AND the accumulator with memory; sets N and Z."""
        if self.p.small_acc:
            res = (self.a & 0xFF) & am.load_byte(self)
            self.a = (self.a & 0xFF00) | self.p.set_nz8(res)
        else:
            self.a = self.p.set_nz(self.a & am.load_word(self))
            self.cy += 1

    def ora(self, am: AddressingMode) -> None:
        """OR the accumulator with memory; sets N and Z."""
        if self.p.small_acc:
            res = (self.a & 0xFF) | am.load_byte(self)
            self.a = (self.a & 0xFF00) | self.p.set_nz8(res)
        else:
            self.a = self.p.set_nz(self.a | am.load_word(self))
            self.cy += 1

    def eor(self, am: AddressingMode) -> None:
        """Exclusive-OR the accumulator with memory; sets N and Z."""
        if self.p.small_acc:
            res = (self.a & 0xFF) ^ am.load_byte(self)
            self.a = (self.a & 0xFF00) | self.p.set_nz8(res)
        else:
            self.a = self.p.set_nz(self.a ^ am.load_word(self))
            self.cy += 1

    # Addition and subtraction

    def adc(self, am: AddressingMode) -> None:
        """Add with carry, honouring decimal mode; sets N, V, Z and C."""
        c = 1 if self.p.carry else 0

        if self.p.small_acc:
            a = self.a & 0xFF
            val = am.load_byte(self)
            if self.p.decimal:
                low = (a & 0xF) + (val & 0xF) + c
                if low > 9:
                    low += 6
                res = (a & 0xF0) + (val & 0xF0) + (low & 0x0F) + (0x10 if low > 0x0F else 0)
            else:
                res = a + val + c
            self.p.overflow = ((a ^ val) & 0x80) == 0 and ((a ^ _b(res)) & 0x80) == 0x80
            if self.p.decimal and res > 0x9F:
                res += 0x60
            self.p.carry = res > 0xFF
            self.a = (self.a & 0xFF00) | self.p.set_nz8(_b(res))
        else:
            a = self.a
            val = am.load_word(self)
            if self.p.decimal:
                res0 = (a & 0x000F) + (val & 0x000F) + c
                if res0 > 0x0009:
                    res0 += 0x0006
                res1 = (a & 0x00F0) + (val & 0x00F0) + (res0 & 0x000F) + (
                    0x0010 if res0 > 0x000F else 0
                )
                if res1 > 0x009F:
                    res1 += 0x0060
                res2 = (a & 0x0F00) + (val & 0x0F00) + (res1 & 0x00FF) + (
                    0x0100 if res1 > 0x00FF else 0
                )
                if res2 > 0x09FF:
                    res2 += 0x0600
                res = (a & 0xF000) + (val & 0xF000) + (res2 & 0x0FFF) + (
                    0x1000 if res2 > 0x0FFF else 0
                )
            else:
                res = a + val + c
            self.p.overflow = ((a ^ val) & 0x8000) == 0 and ((a ^ _w(res)) & 0x8000) == 0x8000
            if self.p.decimal and res > 0x9FFF:
                res += 0x6000
            self.p.carry = res > 0xFFFF
            self.a = self.p.set_nz(_w(res))
            self.cy += 1

    def sbc(self, am: AddressingMode) -> None:
        """Subtract with borrow, honouring decimal mode; sets N, V, Z and C."""
        c = 1 if self.p.carry else 0

        if self.p.small_acc:
            a = self.a & 0xFF
            v = am.load_byte(self) ^ 0xFF
            if self.p.decimal:
                low = (a & 0x0F) + (v & 0x0F) + c
                if low < 0x10:
                    low -= 6
                res = (a & 0xF0) + (v & 0xF0) + (low & 0x0F) + (0x10 if low > 0x0F else 0)
            else:
                res = a + v + c
            self.p.overflow = (a & 0x80) == (v & 0x80) and (a & 0x80) != (res & 0x80)
            if self.p.decimal and res < 0x100:
                res -= 0x60
            self.p.carry = res > 0xFF
            self.a = (self.a & 0xFF00) | self.p.set_nz8(_b(res))
        else:
            a = self.a
            v = am.load_word(self) ^ 0xFFFF
            if self.p.decimal:
                res0 = (a & 0x000F) + (v & 0x000F) + c
                if res0 < 0x0010:
                    res0 -= 0x0006
                res1 = (a & 0x00F0) + (v & 0x00F0) + (res0 & 0x000F) + (
                    0x10 if res0 > 0x000F else 0
                )
                if res1 < 0x0100:
                    res1 -= 0x0060
                res2 = (a & 0x0F00) + (v & 0x0F00) + (res1 & 0x00FF) + (
                    0x100 if res1 > 0x00FF else 0
                )
                if res2 < 0x1000:
                    res2 -= 0x0600
                res = (a & 0xF000) + (v & 0xF000) + (res2 & 0x0FFF) + (
                    0x1000 if res2 > 0x0FFF else 0
                )
            else:
                res = a + v + c
            self.p.overflow = ((a ^ _w(res)) & 0x8000) != 0 and ((a ^ _w(v)) & 0x8000) == 0
            if self.p.decimal and res < 0x10000:
                res -= 0x6000
            self.p.carry = res > 0xFFFF
            self.a = self.p.set_nz(_w(res))
            self.cy += 1

    # Shifts and rotates

    def asl_a(self) -> None:
        """Shift the accumulator left; bit 0 becomes 0."""
        if self.p.small_acc:
            self.p.carry = bool(self.a & 0x80)
            self.a = (self.a & 0xFF00) | self.p.set_nz8(_b(self.a << 1))
        else:
            self.p.carry = bool(self.a & 0x8000)
            self.a = self.p.set_nz(_w(self.a << 1))

    def asl(self, am: AddressingMode) -> None:
        """Shift memory left (read-modify-write)."""
        bank, addr = am.address(self)
        if self.p.small_acc:
            val = self.load_byte(bank, addr)
            self.p.carry = bool(val & 0x80)
            self.store_byte(bank, addr, self.p.set_nz8(_b(val << 1)))
        else:
            val = self.load_word(bank, addr)
            self.p.carry = bool(val & 0x8000)
            self.store_word(bank, addr, self.p.set_nz(_w(val << 1)))
            self.cy += 2

    def rol_a(self) -> None:
        """Rotate the accumulator left through carry."""
        c = 1 if self.p.carry else 0
        if self.p.small_acc:
            self.p.carry = bool(self.a & 0x80)
            res = _b(self.a << 1) | c
            self.a = (self.a & 0xFF00) | self.p.set_nz8(res)
        else:
            self.p.carry = bool(self.a & 0x8000)
            self.a = self.p.set_nz(_w(self.a << 1) | c)
            self.cy += 1

    def rol(self, am: AddressingMode) -> None:
        """Rotate memory left through carry."""
        c = 1 if self.p.carry else 0
        if self.p.small_acc:
            val = am.load_byte(self)
            self.p.carry = bool(val & 0x80)
            am.store_byte(self, self.p.set_nz8(_b(val << 1) | c))
        else:
            val = am.load_word(self)
            self.p.carry = bool(val & 0x8000)
            am.store_word(self, self.p.set_nz(_w(val << 1) | c))
            self.cy += 1

    def lsr_a(self) -> None:
        """Shift the accumulator right; bit 7/15 becomes 0."""
        if self.p.small_acc:
            self.p.carry = bool(self.a & 0x01)
            self.a = (self.a & 0xFF00) | self.p.set_nz8((self.a & 0xFF) >> 1)
        else:
            self.p.carry = bool(self.a & 0x0001)
            self.a = self.p.set_nz(self.a >> 1)

    def lsr(self, am: AddressingMode) -> None:
        """Shift memory right."""
        if self.p.small_acc:
            val = am.load_byte(self)
            self.p.carry = bool(val & 0x01)
            am.store_byte(self, self.p.set_nz8(val >> 1))
        else:
            val = am.load_word(self)
            self.p.carry = bool(val & 0x0001)
            am.store_word(self, self.p.set_nz(val >> 1))

    def ror_a(self) -> None:
        """Rotate the accumulator right through carry."""
        c = 1 if self.p.carry else 0
        if self.p.small_acc:
            val = self.a & 0xFF
            self.p.carry = bool(val & 0x01)
            res = self.p.set_nz8((val >> 1) | (c << 7))
            self.a = (self.a & 0xFF00) | res
        else:
            val = self.a
            self.p.carry = bool(val & 0x0001)
            self.a = self.p.set_nz((val >> 1) | (c << 15))
            self.cy += 2

    def ror(self, am: AddressingMode) -> None:
        """Rotate memory right through carry (read-modify-write)."""
        c = 1 if self.p.carry else 0
        bank, addr = am.address(self)
        if self.p.small_acc:
            val = self.load_byte(bank, addr)
            self.p.carry = bool(val & 0x01)
            self.store_byte(bank, addr, self.p.set_nz8((val >> 1) | (c << 7)))
        else:
            val = self.load_word(bank, addr)
            self.p.carry = bool(val & 0x0001)
            self.store_word(bank, addr, self.p.set_nz((val >> 1) | (c << 15)))
            self.cy += 2

    # Increment and decrement

    def inc(self, am: AddressingMode) -> None:
        """Increment memory."""
        bank, addr = am.address(self)
        if self.p.small_acc:
            res = self.p.set_nz8(_b(self.load_byte(bank, addr) + 1))
            self.store_byte(bank, addr, res)
        else:
            res = self.p.set_nz(_w(self.load_word(bank, addr) + 1))
            self.store_word(bank, addr, res)

    def dec(self, am: AddressingMode) -> None:
        """Decrement memory."""
        bank, addr = am.address(self)
        if self.p.small_acc:
            res = self.p.set_nz8(_b(self.load_byte(bank, addr) - 1))
            self.store_byte(bank, addr, res)
        else:
            res = self.p.set_nz(_w(self.load_word(bank, addr) - 1))
            self.store_word(bank, addr, res)

    def _step(self, value: int, delta: int, small: bool) -> int:
        if small:
            return (value & 0xFF00) | self.p.set_nz8(_b(value + delta))
        return self.p.set_nz(_w(value + delta))

    def ina(self) -> None:
        """Increment the accumulator."""
        self.a = self._step(self.a, 1, self.p.small_acc)

    def dea(self) -> None:
        """Decrement the accumulator."""
        self.a = self._step(self.a, -1, self.p.small_acc)

    def inx(self) -> None:
        """Increment X."""
        self.x = self._step(self.x, 1, self.p.small_index)

    def dex(self) -> None:
        """Decrement X."""
        self.x = self._step(self.x, -1, self.p.small_index)

    def iny(self) -> None:
        """Increment Y."""
        self.y = self._step(self.y, 1, self.p.small_index)

    def dey(self) -> None:
        """Decrement Y."""
        self.y = self._step(self.y, -1, self.p.small_index)

    # Bit tests

    def bit(self, am: AddressingMode) -> None:
        """Test memory bits against the accumulator; immediate mode only sets Z."""
        if self.p.small_acc:
            val = am.load_byte(self)
            self.p.zero = (val & self.a & 0xFF) == 0
            if not am.is_immediate():
                self.p.negative = bool(val & 0x80)
                self.p.overflow = bool(val & 0x40)
        else:
            val = am.load_word(self)
            self.p.zero = (val & self.a) == 0
            if not am.is_immediate():
                self.p.negative = bool(val & 0x8000)
                self.p.overflow = bool(val & 0x4000)
            self.cy += 1

    def tsb(self, am: AddressingMode) -> None:
        """Test and set memory bits against the accumulator; sets Z."""
        if self.p.small_index:
            val = am.load_byte(self)
            self.p.zero = (val & self.a & 0xFF) == 0
            am.store_byte(self, val | (self.a & 0xFF))
        else:
            val = am.load_word(self)
            self.p.zero = (val & self.a) == 0
            am.store_word(self, val | self.a)
            self.cy += 2

    def trb(self, am: AddressingMode) -> None:
        """Test and reset memory bits against the accumulator; sets Z."""
        if self.p.small_index:
            val = am.load_byte(self)
            self.p.zero = (val & self.a & 0xFF) == 0
            am.store_byte(self, val & ~self.a & 0xFF)
        else:
            val = am.load_word(self)
            self.p.zero = (val & self.a) == 0
            am.store_word(self, val & ~self.a & 0xFFFF)
            self.cy += 2