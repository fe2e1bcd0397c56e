import pytest

from wdc65816.addressing import AddressingMode, Mode
from wdc65816.core import BytesMemory, CpuError
from wdc65816.ops_stack import StackTransferOps


def make_cpu(program=b"", size=0x30000):
    mem = BytesMemory(bytes(size))
    mem.data[0xFFFC] = 0x00
    mem.data[0xFFFD] = 0x80
    mem.data[0x8000 : 0x8000 + len(program)] = program
    return StackTransferOps(mem)


def go_native(cpu):
    cpu.set_emulation(False)
    cpu.p.small_acc = False
    cpu.p.small_index = False


def test_reset_reads_vector():
    cpu = make_cpu()
    assert cpu.pc == 0x8000
    assert cpu.emulation


def test_pha_pla_round_trip_8bit():
    cpu = make_cpu()
    s0 = cpu.s
    cpu.a = 0x42
    cpu.pha()
    assert cpu.s != s0
    cpu.a = 0
    cpu.pla()
    assert cpu.a == 0x42
    assert cpu.s == s0
    assert not cpu.p.zero


def test_pla_zero_sets_flag_and_keeps_high_byte():
    cpu = make_cpu()
    cpu.a = 0x0000
    cpu.pha()
    cpu.a = 0x1234
    cpu.pla()
    assert cpu.a == 0x1200
    assert cpu.p.zero


def test_pha_16bit_layout_and_cycles():
    cpu = make_cpu()
    go_native(cpu)
    cpu.s = 0x1FF0
    cpu.a = 0x1234
    cpu.cy = 0
    cpu.pha()
    assert cpu.mem.data[0x1FF0] == 0x12
    assert cpu.mem.data[0x1FEF] == 0x34
    assert cpu.s == 0x1FEE
    assert cpu.cy == 1
    cpu.a = 0
    cpu.pla()
    assert cpu.a == 0x1234
    assert cpu.s == 0x1FF0


@pytest.mark.parametrize("reg", ["x", "y"])
def test_index_push_pull_round_trip_16bit(reg):
    cpu = make_cpu()
    go_native(cpu)
    cpu.s = 0x1FF0
    setattr(cpu, reg, 0x8001)
    getattr(cpu, "ph" + reg)()
    setattr(cpu, reg, 0)
    getattr(cpu, "pl" + reg)()
    assert getattr(cpu, reg) == 0x8001
    assert cpu.p.negative
    assert cpu.s == 0x1FF0


def test_phd_pld_round_trip():
    cpu = make_cpu()
    cpu.d = 0xABCD
    cpu.phd()
    cpu.d = 0
    cpu.pld()
    assert cpu.d == 0xABCD


def test_phb_plb_and_phk():
    cpu = make_cpu()
    cpu.dbr = 0x7E
    cpu.phb()
    cpu.dbr = 0
    cpu.plb()
    assert cpu.dbr == 0x7E
    cpu.pbr = 0x05
    cpu.phk()
    assert cpu.pop_byte() == 0x05


def test_php_plp_round_trip():
    cpu = make_cpu()
    cpu.p.carry = True
    cpu.p.negative = True
    saved = cpu.p.value
    cpu.php()
    cpu.p.value = 0
    cpu.plp()
    assert cpu.p.value == saved


def test_pea_pushes_operand():
    cpu = make_cpu()
    cpu.pea(AddressingMode(Mode.ABSOLUTE, 0xBEEF))
    assert cpu.pop_word() == 0xBEEF


def test_per_pushes_pc_relative():
    cpu = make_cpu()
    cpu.per(AddressingMode(Mode.REL_LONG, 0x10))
    assert cpu.pop_word() == cpu.pc + 0x10


def test_push_outside_page_one_in_emulation_raises():
    cpu = make_cpu()
    cpu.s = 0x0200
    with pytest.raises(CpuError):
        cpu.pha()


def test_mvn_copies_upwards():
    cpu = make_cpu(bytes([0x00, 0x00]))
    cpu.mem.data[0x2000:0x2003] = b"abc"
    cpu.a, cpu.x, cpu.y = 2, 0x2000, 0x3000
    cpu.mvn()
    assert bytes(cpu.mem.data[0x3000:0x3003]) == b"abc"
    assert cpu.a == 0xFFFF
    assert cpu.x == 0x2003
    assert cpu.y == 0x3003
    assert cpu.pc == 0x8002


def test_mvp_copies_downwards_across_banks():
    cpu = make_cpu(bytes([0x01, 0x00]))
    cpu.mem.data[0x2000:0x2003] = b"xyz"
    cpu.a, cpu.x, cpu.y = 2, 0x2002, 0x3002
    cpu.mvp()
    assert bytes(cpu.mem.data[0x13000:0x13003]) == b"xyz"
    assert cpu.x == 0x1FFF
    assert cpu.y == 0x2FFF


def test_xba_swaps_and_round_trips():
    cpu = make_cpu()
    cpu.a = 0x1280
    cpu.xba()
    assert cpu.a == 0x8012
    assert not cpu.p.negative
    cpu.xba()
    assert cpu.a == 0x1280
    assert cpu.p.negative


def test_tax_8bit_keeps_high_byte():
    cpu = make_cpu()
    cpu.x = 0x0000
    cpu.a = 0x1200
    cpu.tax()
    assert cpu.x == 0
    assert cpu.p.zero


def test_tay_tya_16bit():
    cpu = make_cpu()
    go_native(cpu)
    cpu.a = 0x9ABC
    cpu.tay()
    assert cpu.y == 0x9ABC
    cpu.a = 0
    cpu.tya()
    assert cpu.a == 0x9ABC
    assert cpu.p.negative


def test_txa_8bit_preserves_b():
    cpu = make_cpu()
    cpu.a = 0x5500
    cpu.x = 0x07
    cpu.txa()
    assert cpu.a >> 8 == 0x55
    assert cpu.a & 0xFF == cpu.x


def test_txy_tyx():
    cpu = make_cpu()
    go_native(cpu)
    cpu.x = 0x4321
    cpu.txy()
    assert cpu.y == 0x4321
    cpu.x = 0
    cpu.tyx()
    assert cpu.x == 0x4321


def test_txs_emulation_forces_page_one():
    cpu = make_cpu()
    cpu.x = 0x42
    cpu.txs()
    assert cpu.s >> 8 == 1
    assert cpu.s & 0xFF == cpu.x


def test_tcs_tsc_native_round_trip():
    cpu = make_cpu()
    go_native(cpu)
    cpu.a = 0x1F00
    cpu.tcs()
    assert cpu.s == 0x1F00
    cpu.a = 0
    cpu.tsc()
    assert cpu.a == 0x1F00


def test_tcs_emulation_keeps_page_one():
    cpu = make_cpu()
    cpu.a = 0x3456
    cpu.tcs()
    assert cpu.s >> 8 == 1
    assert cpu.s & 0xFF == cpu.a & 0xFF


def test_tcd_tdc_round_trip():
    cpu = make_cpu()
    cpu.a = 0x0300
    cpu.tcd()
    assert cpu.d == 0x0300
    cpu.a = 0
    cpu.tdc()
    assert cpu.a == 0x0300


def test_tsx_8bit():
    cpu = make_cpu()
    cpu.s = 0x01F0
    cpu.tsx()
    assert cpu.x == cpu.s & 0xFF
    assert cpu.p.negative


def test_xce_switches_modes():
    cpu = make_cpu()
    cpu.clc()
    cpu.xce()
    assert not cpu.emulation
    assert cpu.p.carry
    cpu.p.small_index = False
    cpu.x = 0x1234
    cpu.sec()
    cpu.xce()
    assert cpu.emulation
    assert not cpu.p.carry
    assert cpu.p.small_index and cpu.p.small_acc
    assert cpu.x == 0x34


def test_rep_and_sep():
    cpu = make_cpu()
    cpu.set_emulation(False)
    cpu.rep(AddressingMode(Mode.IMMEDIATE8, 0x30))
    assert not cpu.p.small_acc
    assert not cpu.p.small_index
    cpu.x = 0x1234
    cpu.y = 0xFFFF
    cpu.sep(AddressingMode(Mode.IMMEDIATE8, 0x10))
    assert cpu.p.small_index
    assert cpu.x == 0x34
    assert cpu.y == 0xFF


def test_rep_rejects_16bit_immediate():
    cpu = make_cpu()
    from wdc65816.addressing import AddressingError

    with pytest.raises(AddressingError):
        cpu.rep(AddressingMode(Mode.IMMEDIATE, 0x30))


def test_flag_instructions():
    cpu = make_cpu()
    cpu.sec()
    assert cpu.p.carry
    cpu.clc()
    assert not cpu.p.carry
    cpu.sed()
    assert cpu.p.decimal
    cpu.cld()
    assert not cpu.p.decimal
    cpu.cli()
    assert not cpu.p.irq_disable
    cpu.sei()
    assert cpu.p.irq_disable


def test_wai_until_interrupt():
    cpu = make_cpu()
    cpu.wai()
    assert cpu.waiting
    cpu.trigger_nmi()
    assert not cpu.waiting


def test_nop_and_ill_change_nothing():
    cpu = make_cpu()
    before = (cpu.a, cpu.x, cpu.y, cpu.s, cpu.pc, cpu.p.value)
    cpu.nop()
    cpu.ill()
    assert (cpu.a, cpu.x, cpu.y, cpu.s, cpu.pc, cpu.p.value) == before