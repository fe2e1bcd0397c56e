# wdc65816

An emulator of the WDC 65C816 processor (the CPU of the SNES), written as an
instruction-level interpreter. The CPU talks to the outside world only through
a memory object you supply, so it can be attached to any bus you like.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

A memory object needs two methods: `load(addr)` returning a byte, and
`store(addr, value)`. Addresses are 24-bit (`bank << 16 | offset`).
`wdc65816.core.Memory` describes this interface as a protocol.
`wdc65816.core.BytesMemory` wraps a byte sequence in a `bytearray` of its own;
reads outside it return 0 and writes outside it are ignored.

```python
from wdc65816.core import BytesMemory
from wdc65816.cpu import Cpu

code = bytes([
    0xA9, 0x0F,        # lda #$0F
    0x8D, 0x00, 0x21,  # sta $2100
    0x4C, 0x00, 0x00,  # jmp $0000
])

cpu = Cpu(BytesMemory(code))   # reads the RESET vector and starts in emulation mode

cycles = 0
while True:
    cycles += cpu.dispatch()   # runs one instruction, returns its cycle count
    if cpu.pc == 0:
        break
```

Creating a `Cpu` performs a reset: the program counter is read from the RESET
vector at `$FFFC`, the CPU is in emulation mode with 8-bit accumulator and
index registers, IRQs disabled, and the stack pointer at `$0100`. The
registers are plain attributes: `a`, `x`, `y`, `s`, `d`, `dbr`, `pbr`, `pc`,
`emulation`, and the status register `p`.

`dispatch()` returns the cycles used by one instruction: a base count per
opcode plus extra cycles for 16-bit operands, indexing and a direct page
register that is not page-aligned. The memory object may add wait states of
its own.

### Interrupts

- `cpu.trigger_nmi()` pushes the return state and jumps to the NMI handler.
- `cpu.trigger_irq()` does the same for the IRQ handler when the `I` flag of
  the status register is set, and returns whether the handler was entered.

After a `WAI` instruction `cpu.waiting` is `True`, and `dispatch()` does no
work and returns 0 until an interrupt clears it.

### Illegal opcodes and tracing

When an opcode the emulator does not decode is executed, `cpu.illegal` is set
to `True` and execution carries on. Set `cpu.trace = True` to print each
instruction as it runs, with its disassembly, the registers and the status
flags.

### Building blocks

- `wdc65816.statusreg.StatusReg`: the processor status register, with one
  boolean property per flag (`negative`, `overflow`, `small_acc`,
  `small_index`, `decimal`, `irq_disable`, `zero`, `carry`). Its string form
  shows the flags as `NVMXDIZC`, with `-` for a clear flag.
- `wdc65816.addressing.AddressingMode`: an operand together with its `Mode`.
  It works out effective addresses and loads and stores through a CPU. Its
  string form is the operand in assembler syntax, such as `$12:3456,x`.
- `wdc65816.core.CpuCore`: the registers, memory and stack access, and the
  interrupt sequence.
- `wdc65816.ops_stack`, `wdc65816.ops_flow` and `wdc65816.ops_arith`: the
  instruction implementations, combined into `wdc65816.cpu.Cpu`.

### Errors

Taking the address of an immediate operand, or reading an immediate at the
wrong width, raises `AddressingError`; an operand out of range for its mode
raises `ValueError`. Faults in the CPU itself, such as a word read across a
bank boundary or an emulation-mode stack that leaves page 1, raise `CpuError`.

## What it does not do

The package is a CPU only. It has no command-line program, no ROM loader and
no other SNES hardware. `BRK`, `COP`, `STP`, `WDM` and a few other opcodes are
not decoded and count as illegal; ABORT is never raised. Cycle counts are
approximate.