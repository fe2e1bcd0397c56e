import pytest

from wdc65816.addressing import AddressingMode, Mode
from wdc65816.core import (
    IRQ_VEC8,
    NMI_VEC16,
    RESET_VEC8,
    BytesMemory,
    CpuCore,
    CpuError,
    Memory,
)


def make_cpu(reset=0x8000, size=0x20000, extra=None):
    data = bytearray(size)
    data[RESET_VEC8] = reset & 0xFF
    data[RESET_VEC8 + 1] = reset >> 8
    for addr, value in (extra or {}).items():
        data[addr] = value
    mem = BytesMemory(data)
    return CpuCore(mem), mem


def test_bytes_memory_is_memory_and_reads_zero_past_end():
    mem = BytesMemory(b"\x01\x02")
    assert isinstance(mem, Memory)
    assert mem.load(1) == 2
    assert mem.load(100) == 0
    mem.store(100, 7)
    assert mem.load(100) == 0
    mem.store(0, 0x1FF)
    assert mem.load(0) == 0xFF


def test_reset_state():
    cpu, _ = make_cpu(reset=0x8123)
    assert cpu.pc == 0x8123
    assert cpu.s == 0x0100
    assert cpu.emulation is True
    assert cpu.p.small_acc and cpu.p.small_index and cpu.p.irq_disable
    assert str(cpu.p) == "--MX-I--"


def test_fetch_advances_pc():
    cpu, _ = make_cpu(extra={0x8000: 0x34, 0x8001: 0x12, 0x8002: 0xEA})
    assert cpu.fetch_word() == 0x1234
    assert cpu.fetch_byte() == 0xEA
    assert cpu.pc == 0x8003


def test_word_round_trip_and_bank_boundary():
    cpu, mem = make_cpu()
    cpu.store_word(0, 0x1000, 0xBEEF)
    assert cpu.load_word(0, 0x1000) == 0xBEEF
    with pytest.raises(CpuError):
        cpu.load_word(0, 0xFFFF)


def test_store_word_crosses_into_next_bank():
    cpu, mem = make_cpu()
    cpu.store_word(0, 0xFFFF, 0xABCD)
    assert mem.load(0xFFFF) == 0xCD
    assert mem.load(0x10000) == 0xAB


def test_emulation_stack_wraps_inside_page_one():
    cpu, _ = make_cpu()
    cpu.push_byte(0x42)
    assert cpu.s == 0x01FF
    assert cpu.pop_byte() == 0x42
    assert cpu.s == 0x0100


def test_emulation_stack_outside_page_raises():
    cpu, _ = make_cpu()
    cpu.s = 0x0200
    with pytest.raises(CpuError):
        cpu.push_byte(1)


def test_native_stack_word_round_trip():
    cpu, _ = make_cpu()
    cpu.set_emulation(False)
    cpu.s = 0x1FFF
    cpu.push_word(0x1234)
    assert cpu.s == 0x1FFD
    assert cpu.pop_word() == 0x1234
    assert cpu.s == 0x1FFF


def test_entering_emulation_forces_small_registers():
    cpu, _ = make_cpu()
    cpu.set_emulation(False)
    cpu.p.small_acc = False
    cpu.p.small_index = False
    cpu.x, cpu.y, cpu.s = 0x1234, 0xABCD, 0x1FEE
    cpu.set_emulation(True)
    assert (cpu.x, cpu.y, cpu.s) == (0x34, 0xCD, 0x01EE)
    assert cpu.p.small_acc and cpu.p.small_index


def test_set_p_clears_index_high_bytes_when_shrinking():
    cpu, _ = make_cpu()
    cpu.p.small_index = False
    cpu.x, cpu.y = 0x1234, 0x5678
    cpu.set_p(cpu.p.value | 0x10)
    assert (cpu.x, cpu.y) == (0x34, 0x78)


def test_irq_not_taken_when_flag_clear():
    cpu, _ = make_cpu()
    cpu.p.irq_disable = False
    pc = cpu.pc
    assert cpu.trigger_irq() is False
    assert cpu.pc == pc


def test_irq_in_emulation_mode_and_return():
    cpu, _ = make_cpu(extra={IRQ_VEC8: 0x00, IRQ_VEC8 + 1: 0x90})
    cpu.waiting = True
    p_before = cpu.p.value
    assert cpu.trigger_irq() is True
    assert cpu.pc == 0x9000
    assert cpu.waiting is False
    assert cpu.s == 0x01FD
    cpu.return_from_interrupt()
    assert cpu.pc == 0x8000
    assert cpu.p.value == p_before
    assert cpu.s == 0x0100


def test_native_nmi_pushes_pbr_and_clears_decimal():
    cpu, _ = make_cpu(extra={NMI_VEC16: 0x00, NMI_VEC16 + 1: 0xA0})
    cpu.set_emulation(False)
    cpu.s = 0x1FFF
    cpu.pbr = 0x7E
    cpu.p.decimal = True
    cpu.trigger_nmi()
    assert (cpu.pbr, cpu.pc) == (0, 0xA000)
    assert cpu.p.decimal is False
    assert cpu.s == 0x1FFB
    cpu.return_from_interrupt()
    assert (cpu.pbr, cpu.pc) == (0x7E, 0x8000)
    assert cpu.p.decimal is True


def test_compare_16_bit():
    cpu, _ = make_cpu()
    cpu.compare(5, 5)
    assert cpu.p.zero and cpu.p.carry and not cpu.p.negative
    cpu.compare(3, 5)
    assert not cpu.p.zero and not cpu.p.carry and cpu.p.negative


def test_compare_8_bit():
    cpu, _ = make_cpu()
    cpu.compare8(0x80, 0x01)
    assert cpu.p.carry and not cpu.p.zero and not cpu.p.negative
    cpu.compare8(0x00, 0x01)
    assert not cpu.p.carry and cpu.p.negative


def test_branch_sets_bank_and_pc():
    cpu, _ = make_cpu()
    cpu.branch((0x12, 0x3456))
    assert (cpu.pbr, cpu.pc) == (0x12, 0x3456)


def test_trace_op_prints_only_when_enabled(capsys):
    cpu, _ = make_cpu()
    cpu.trace_op(0x8000, 0xEA, "nop", None)
    assert capsys.readouterr().out == ""
    cpu.trace = True
    cpu.trace_op(0x8000, 0xAD, "lda", AddressingMode(Mode.ABSOLUTE, 0x2100))
    out = capsys.readouterr().out.rstrip("\n")
    assert out.startswith("$00:8000 AD  lda $2100      a:0000")
    assert out.endswith(f"emu:1 {cpu.p}")