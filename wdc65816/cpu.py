"""The complete 65816 CPU: opcode decoding and instruction dispatch."""

from __future__ import annotations

from collections.abc import Callable

from .addressing import AddressingMode, Mode
from .core import Memory
from .ops_arith import ArithmeticOps
from .ops_flow import LoadStoreFlowOps
from .ops_stack import StackTransferOps

# Minimum clock cycles per opcode, assuming one cycle per fetched byte.
# The memory implementation may add wait states externally.
CYCLE_TABLE = (
    7, 6, 7, 4, 5, 3, 5, 6, 3, 2, 2, 4, 6, 4, 6, 5,  # $00 - $0f
    2, 5, 5, 7, 5, 4, 6, 6, 2, 4, 2, 2, 6, 4, 7, 5,  # $10 - $1f
    6, 6, 8, 4, 3, 3, 5, 6, 4, 2, 2, 5, 4, 4, 6, 5,  # $20 - $2f
    2, 5, 5, 7, 4, 4, 6, 6, 2, 4, 2, 2, 4, 4, 7, 5,  # $30 - $3f
    7, 6, 2, 4, 7, 3, 5, 6, 3, 2, 2, 3, 3, 4, 6, 5,  # $40 - $4f
    2, 5, 5, 7, 7, 4, 6, 6, 2, 4, 3, 2, 4, 4, 7, 5,  # $50 - $5f
    7, 6, 6, 4, 3, 3, 5, 6, 4, 2, 2, 6, 5, 4, 6, 5,  # $60 - $6f
    2, 5, 5, 7, 4, 4, 6, 6, 2, 4, 4, 2, 6, 2, 7, 5,  # $70 - $7f
    2, 6, 3, 4, 3, 3, 3, 2, 2, 2, 2, 3, 4, 4, 4, 5,  # $80 - $8f
    2, 6, 5, 7, 4, 4, 4, 6, 2, 5, 2, 2, 3, 5, 5, 5,  # $90 - $9f
    2, 6, 2, 4, 3, 3, 3, 6, 2, 2, 2, 4, 4, 4, 4, 5,  # $a0 - $af
    2, 5, 5, 7, 4, 4, 4, 6, 2, 4, 2, 2, 4, 4, 4, 5,  # $b0 - $bf
    2, 6, 3, 4, 3, 3, 5, 6, 2, 2, 2, 3, 4, 4, 6, 5,  # $c0 - $cf
    2, 5, 5, 7, 6, 4, 6, 6, 2, 4, 3, 3, 6, 4, 7, 5,  # $d0 - $df
    2, 6, 3, 4, 3, 3, 5, 6, 2, 2, 2, 3, 4, 4, 6, 5,  # $e0 - $ef
    2, 5, 5, 7, 5, 4, 6, 6, 2, 4, 4, 2, 6, 4, 7, 5,  # $f0 - $ff
)


def _signed8(value: int) -> int:
    return value - 0x100 if value & 0x80 else value


def _signed16(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


class Cpu(StackTransferOps, LoadStoreFlowOps, ArithmeticOps):
    """A 65816 CPU attached to a memory bus.

    Creating it performs a reset: the RESET vector is read and the CPU starts
    in emulation mode.
    """

    def __init__(self, mem: Memory) -> None:
        super().__init__(mem)

    def dispatch(self) -> int:
        """Execute one instruction and return the clock cycles it used.

        While waiting after WAI nothing is executed and 0 is returned; an
        interrupt is needed to resume.
        """
        if self.waiting:
            return 0

        pc = self.pc
        self.cy = 0
        op = self.fetch_byte()
        self.cy += CYCLE_TABLE[op]

        entry = _DISPATCH.get(op)
        if entry is None:
            self.trace_op(pc, op, "ill", None)
            self.ill()
            self.illegal = True
            return self.cy

        mnemonic, run, operand = entry
        if operand is None:
            self.trace_op(pc, op, mnemonic, None)
            run(self)
        else:
            am = operand(self)
            self.trace_op(pc, op, mnemonic, am)
            run(self, am)
        return self.cy

    # Operand decoding

    def _direct_indirect(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDIRECT, self.fetch_byte())

    def _direct_indirect_long(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDIRECT_LONG, self.fetch_byte())

    def _direct_indirect_long_idx(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDIRECT_LONG_IDX, self.fetch_byte())

    def _absolute(self) -> AddressingMode:
        return AddressingMode(Mode.ABSOLUTE, self.fetch_word())

    def _absolute_indexed_x(self) -> AddressingMode:
        return AddressingMode(Mode.ABS_INDEXED_X, self.fetch_word())

    def _absolute_indexed_y(self) -> AddressingMode:
        return AddressingMode(Mode.ABS_INDEXED_Y, self.fetch_word())

    def _absolute_indexed_indirect(self) -> AddressingMode:
        return AddressingMode(Mode.ABS_INDEXED_INDIRECT, self.fetch_word())

    def _absolute_long(self) -> AddressingMode:
        addr = self.fetch_word()
        bank = self.fetch_byte()
        return AddressingMode(Mode.ABSOLUTE_LONG, addr, bank)

    def _absolute_long_indexed_x(self) -> AddressingMode:
        addr = self.fetch_word()
        bank = self.fetch_byte()
        return AddressingMode(Mode.ABS_LONG_INDEXED_X, addr, bank)

    def _absolute_indirect(self) -> AddressingMode:
        return AddressingMode(Mode.ABSOLUTE_INDIRECT, self.fetch_word())

    def _absolute_indirect_long(self) -> AddressingMode:
        return AddressingMode(Mode.ABSOLUTE_INDIRECT_LONG, self.fetch_word())

    def _rel(self) -> AddressingMode:
        return AddressingMode(Mode.REL, _signed8(self.fetch_byte()))

    def _relative_long(self) -> AddressingMode:
        return AddressingMode(Mode.REL_LONG, _signed16(self.fetch_word()))

    def _stack_rel(self) -> AddressingMode:
        return AddressingMode(Mode.STACK_REL, self.fetch_byte())

    def _direct(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT, self.fetch_byte())

    def _direct_indexed_x(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDEXED_X, self.fetch_byte())

    def _direct_indexed_y(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDEXED_Y, self.fetch_byte())

    def _direct_indexed_indirect(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDEXED_INDIRECT, self.fetch_byte())

    def _direct_indirect_indexed(self) -> AddressingMode:
        return AddressingMode(Mode.DIRECT_INDIRECT_INDEXED, self.fetch_byte())

    def _immediate_acc(self) -> AddressingMode:
        """Immediate operand at the accumulator width."""
        if self.p.small_acc:
            return AddressingMode(Mode.IMMEDIATE8, self.fetch_byte())
        self.cy += 1
        return AddressingMode(Mode.IMMEDIATE, self.fetch_word())

    def _immediate_index(self) -> AddressingMode:
        """Immediate operand at the index register width."""
        if self.p.small_index:
            return AddressingMode(Mode.IMMEDIATE8, self.fetch_byte())
        self.cy += 1
        return AddressingMode(Mode.IMMEDIATE, self.fetch_word())

    def _immediate8(self) -> AddressingMode:
        return AddressingMode(Mode.IMMEDIATE8, self.fetch_byte())


_OPCODES: tuple[tuple[int, str, str | None], ...] = (
    # Stack operations
    (0x4B, "phk", None), (0x0B, "phd", None), (0x2B, "pld", None),
    (0x8B, "phb", None), (0xAB, "plb", None), (0x08, "php", None),
    (0x28, "plp", None), (0x48, "pha", None), (0x68, "pla", None),
    (0xDA, "phx", None), (0xFA, "plx", None), (0x5A, "phy", None),
    (0x7A, "ply", None), (0xF4, "pea", "absolute"), (0x62, "per", "relative_long"),
    # Processor status
    (0x18, "clc", None), (0x38, "sec", None), (0x58, "cli", None),
    (0x78, "sei", None), (0xCB, "wai", None), (0xD8, "cld", None),
    (0xF8, "sed", None), (0xFB, "xce", None),
    (0xC2, "rep", "immediate8"), (0xE2, "sep", "immediate8"),
    # Arithmetic
    (0x0A, "asl_a", None), (0x06, "asl", "direct"), (0x16, "asl", "direct_indexed_x"),
    (0x0E, "asl", "absolute"), (0x1E, "asl", "absolute_indexed_x"),
    (0x2A, "rol_a", None), (0x26, "rol", "direct"), (0x2E, "rol", "absolute"),
    (0x3E, "rol", "absolute_indexed_x"), (0x36, "rol", "direct_indexed_x"),
    (0x4A, "lsr_a", None), (0x46, "lsr", "direct"), (0x4E, "lsr", "absolute"),
    (0x56, "lsr", "direct_indexed_x"), (0x5E, "lsr", "absolute_indexed_x"),
    (0x66, "ror", "direct"), (0x6A, "ror_a", None), (0x6E, "ror", "absolute"),
    (0x76, "ror", "direct_indexed_x"), (0x7E, "ror", "absolute_indexed_x"),
    (0x23, "and", "stack_rel"), (0x25, "and", "direct"),
    (0x27, "and", "direct_indirect_long"), (0x37, "and", "direct_indirect_long_idx"),
    (0x21, "and", "direct_indexed_indirect"), (0x29, "and", "immediate_acc"),
    (0x2D, "and", "absolute"), (0x3D, "and", "absolute_indexed_x"),
    (0x39, "and", "absolute_indexed_y"), (0x2F, "and", "absolute_long"),
    (0x3F, "and", "absolute_long_indexed_x"),
    (0x03, "ora", "stack_rel"), (0x05, "ora", "direct"), (0x15, "ora", "direct_indexed_x"),
    (0x09, "ora", "immediate_acc"), (0x12, "ora", "direct_indirect"),
    (0x07, "ora", "direct_indirect_long"), (0x17, "ora", "direct_indirect_long_idx"),
    (0x0D, "ora", "absolute"), (0x1D, "ora", "absolute_indexed_x"),
    (0x19, "ora", "absolute_indexed_y"), (0x0F, "ora", "absolute_long"),
    (0x1F, "ora", "absolute_long_indexed_x"),
    (0x45, "eor", "direct"), (0x55, "eor", "direct_indexed_x"),
    (0x49, "eor", "immediate_acc"), (0x4D, "eor", "absolute"),
    (0x5D, "eor", "absolute_indexed_x"), (0x59, "eor", "absolute_indexed_y"),
    (0x4F, "eor", "absolute_long"), (0x5F, "eor", "absolute_long_indexed_x"),
    (0x65, "adc", "direct"), (0x75, "adc", "direct_indexed_x"),
    (0x72, "adc", "direct_indirect"), (0x71, "adc", "direct_indirect_indexed"),
    (0x77, "adc", "direct_indirect_long_idx"), (0x67, "adc", "direct_indirect_long"),
    (0x69, "adc", "immediate_acc"), (0x6D, "adc", "absolute"),
    (0x7D, "adc", "absolute_indexed_x"), (0x79, "adc", "absolute_indexed_y"),
    (0x6F, "adc", "absolute_long"), (0x7F, "adc", "absolute_long_indexed_x"),
    (0xE5, "sbc", "direct"), (0xF5, "sbc", "direct_indexed_x"),
    (0xE9, "sbc", "immediate_acc"), (0xED, "sbc", "absolute"),
    (0xF9, "sbc", "absolute_indexed_y"), (0xFD, "sbc", "absolute_indexed_x"),
    (0xEF, "sbc", "absolute_long"), (0xFF, "sbc", "absolute_long_indexed_x"),
    (0xE6, "inc", "direct"), (0xF6, "inc", "direct_indexed_x"),
    (0xFE, "inc", "absolute_indexed_x"), (0xEE, "inc", "absolute"),
    (0x1A, "ina", None), (0xE8, "inx", None), (0xC8, "iny", None), (0x3A, "dea", None),
    (0xC6, "dec", "direct"), (0xD6, "dec", "direct_indexed_x"),
    (0xCE, "dec", "absolute"), (0xDE, "dec", "absolute_indexed_x"),
    (0xCA, "dex", None), (0x88, "dey", None),
    # Register and memory transfers
    (0x5B, "tcd", None), (0x7B, "tdc", None), (0x1B, "tcs", None),
    (0x3B, "tsc", None), (0xBA, "tsx", None), (0xAA, "tax", None),
    (0xA8, "tay", None), (0x8A, "txa", None), (0x9A, "txs", None),
    (0x9B, "txy", None), (0x98, "tya", None), (0xBB, "tyx", None), (0xEB, "xba", None),
    (0x83, "sta", "stack_rel"), (0x85, "sta", "direct"), (0x95, "sta", "direct_indexed_x"),
    (0x92, "sta", "direct_indirect"), (0x87, "sta", "direct_indirect_long"),
    (0x97, "sta", "direct_indirect_long_idx"), (0x8D, "sta", "absolute"),
    (0x8F, "sta", "absolute_long"), (0x9D, "sta", "absolute_indexed_x"),
    (0x99, "sta", "absolute_indexed_y"), (0x9F, "sta", "absolute_long_indexed_x"),
    (0x86, "stx", "direct"), (0x96, "stx", "direct_indexed_y"), (0x8E, "stx", "absolute"),
    (0x84, "sty", "direct"), (0x94, "sty", "direct_indexed_y"), (0x8C, "sty", "absolute"),
    (0x64, "stz", "direct"), (0x9C, "stz", "absolute"),
    (0x74, "stz", "direct_indexed_x"), (0x9E, "stz", "absolute_indexed_x"),
    (0xA3, "lda", "stack_rel"), (0xA5, "lda", "direct"), (0xB5, "lda", "direct_indexed_x"),
    (0xB1, "lda", "direct_indirect_indexed"), (0xA9, "lda", "immediate_acc"),
    (0xB2, "lda", "direct_indirect"), (0xA7, "lda", "direct_indirect_long"),
    (0xB7, "lda", "direct_indirect_long_idx"), (0xAD, "lda", "absolute"),
    (0xBD, "lda", "absolute_indexed_x"), (0xB9, "lda", "absolute_indexed_y"),
    (0xAF, "lda", "absolute_long"), (0xBF, "lda", "absolute_long_indexed_x"),
    (0xA6, "ldx", "direct"), (0xB6, "ldx", "direct_indexed_y"),
    (0xA2, "ldx", "immediate_index"), (0xAE, "ldx", "absolute"),
    (0xBE, "ldx", "absolute_indexed_y"),
    (0xA4, "ldy", "direct"), (0xB4, "ldy", "direct_indexed_x"),
    (0xA0, "ldy", "immediate_index"), (0xAC, "ldy", "absolute"),
    (0xBC, "ldy", "absolute_indexed_x"),
    (0x54, "mvn", None), (0x44, "mvp", None),
    # Bit operations
    (0x24, "bit", "direct"), (0x2C, "bit", "absolute"), (0x34, "bit", "direct_indexed_x"),
    (0x3C, "bit", "absolute_indexed_x"), (0x89, "bit", "immediate_acc"),
    (0x04, "tsb", "direct"), (0x0C, "tsb", "absolute"),
    (0x14, "trb", "direct"), (0x1C, "trb", "absolute"),
    # Comparisons
    (0xC9, "cmp", "immediate_acc"), (0xC5, "cmp", "direct"),
    (0xD5, "cmp", "direct_indexed_x"), (0xCD, "cmp", "absolute"),
    (0xDD, "cmp", "absolute_indexed_x"), (0xD9, "cmp", "absolute_indexed_y"),
    (0xCF, "cmp", "absolute_long"), (0xDF, "cmp", "absolute_long_indexed_x"),
    (0xD2, "cmp", "direct_indirect"), (0xD1, "cmp", "direct_indirect_indexed"),
    (0xD7, "cmp", "direct_indirect_long_idx"),
    (0xE0, "cpx", "immediate_index"), (0xE4, "cpx", "direct"), (0xEC, "cpx", "absolute"),
    (0xC0, "cpy", "immediate_index"), (0xC4, "cpy", "direct"), (0xCC, "cpy", "absolute"),
    # Branches
    (0x80, "bra", "rel"), (0x82, "bra", "relative_long"),
    (0xF0, "beq", "rel"), (0xD0, "bne", "rel"), (0x10, "bpl", "rel"),
    (0x30, "bmi", "rel"), (0x50, "bvc", "rel"), (0x70, "bvs", "rel"),
    (0x90, "bcc", "rel"), (0xB0, "bcs", "rel"),
    # Jumps, calls and returns
    (0x4C, "jmp", "absolute"), (0x5C, "jml", "absolute_long"),
    (0x6C, "jmp", "absolute_indirect"), (0x7C, "jmp", "absolute_indexed_indirect"),
    (0xDC, "jml", "absolute_indirect_long"), (0x20, "jsr", "absolute"),
    (0x22, "jsl", "absolute_long"), (0xFC, "jsr", "absolute_indexed_indirect"),
    (0x40, "rti", None), (0x60, "rts", None), (0x6B, "rtl", None),
    (0xEA, "nop", None),
)


def _build_dispatch() -> dict[int, tuple[str, Callable, Callable | None]]:
    table: dict[int, tuple[str, Callable, Callable | None]] = {}
    for opcode, mnemonic, operand in _OPCODES:
        method = "and_" if mnemonic == "and" else mnemonic
        run = getattr(Cpu, method)
        decode = getattr(Cpu, f"_{operand}") if operand is not None else None
        table[opcode] = (mnemonic, run, decode)
    return table


_DISPATCH = _build_dispatch()