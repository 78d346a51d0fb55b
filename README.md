# dspvm

A small bytecode virtual machine for vector DSP programs, with a toy
assembler to write programs for it.

Every register and arena cell holds one signal vector: a NumPy
`float32` array of 64 samples. A program is a list of four-byte
instructions, each one opcode and three operands. Each operand holds a
one-bit address mode and a 7-bit index. One run of the program produces
one vector per output channel.

## Installing

    pip install .

To run the tests as well:

    pip install .[test]
    pytest

## Instruction set

`dspvm.isa` defines the encoding:

- `Operation`: `NOOP`, `END`, `MOVE`, `MOVE1`, `LOAD`, `LOAD1`, `STORE`,
  `CMP`, `BNE`, `JMP`, `ADD`, `TEST1`, `TEST2`, `MUL`, `SHIFT`,
  `INTERP`, `SVF`.
- `OpcodeMode` (reserved), `RegisterMode` (`REGISTER`, `IMMEDIATE`) and
  `MemoryMode` (`ARENA`, `LITERAL`).
- `Instruction(opcode, dest, src1, src2)`: each field must fit in one
  byte, or `ValueError` is raised.
- `MemoryRequirements(state_vectors, scratch_vectors)` and
  `Program(instructions, literal_pool, mem_reqs)`.
- Helpers `get_operation`, `get_operation_mode`, `get_operand_mode`,
  `get_index`, `get_immediate` (the index as a float) and
  `make_operand(mode, index)`, which raises `ValueError` for a mode or
  index out of range.

## Assembling

```python
from dspvm.assembler import ToyAssembler

source = """
    MOV R1, #5          ; Move immediate 5 to R1
    ADD R0, R1, #1      ; Add R1 + 1, store in R0
    LDR R2, =2.71828    ; Load literal from pool into R2
    STR R2, [#3]        ; Store R2 to arena at offset 3
    MUL R0, R1, R2      ; Multiply R1 * R2, store in R0
    END
"""

assembler = ToyAssembler()
program = assembler.assemble(source)
print(assembler.format_program(program))
```

`print_program(program, file=None)` writes the same listing to a file
object, standard output by default.

Operation names are case-insensitive: `MOV`/`MOVE`, `LDR`/`LOAD`,
`STR`/`STORE`, `ADD`, `MUL`, `CMP`, `BNE`, `JMP`, `SHIFT`, `INTERP`,
`SVF`, `NOOP` and `END`. Operands are registers (`R0` to `R127`),
immediates (`#5`, truncated and clamped to 0–127), arena addresses
(`[#3]`, `[R1]`, `[R1, R2]`, `[R1, #2]`) and pool literals (`=2.71828`,
stored as 32-bit floats). Commas and anything after the operands are
ignored, and lines that are empty or start with `;` or `//` are
skipped. An unknown operation is logged as a warning on the
`dspvm.assembler` logger and its line is left out.

## Running

```python
from dspvm.vm import MLVM, AudioContext
from dspvm.isa import MemoryRequirements

vm = MLVM()
vm.allocate_memory(MemoryRequirements(state_vectors=128, scratch_vectors=128))
vm.set_program(program)

context = AudioContext(input_channels=0, output_channels=2, sample_rate=48000)
vm.process(context)
print(context.outputs[0][:4])
```

`allocate_memory` gives the machine 128 registers and an arena of
`state_vectors + scratch_vectors` vectors. Before the program runs,
each input vector is copied into the register of the same number; after
`END`, the first registers are copied to the outputs. If the context has
no outputs, `process` does nothing.

`process` raises `RuntimeError` if memory has not been allocated, if the
program runs past its last instruction without `END`, or if a `STORE`
targets a literal. Of the operations, `END`, `MOVE`, `LOAD`, `STORE`,
`ADD` and `MUL` are carried out; all others are accepted and do nothing.

`make_vector(value)` builds a signal vector filled with one value.

## Command line

    dspvm [SOURCE] [--vectors N] [--inputs N] [--outputs N] [--sample-rate N]

This assembles `SOURCE` (a built-in example program if omitted), prints
the listing and literal pool, runs the program `--vectors` times
(default 1), and prints the first sample of each output channel. It
exits with status 1 and an error message if the program fails to run.

## What it does not do

The package does not open audio devices and does not read MIDI. Audio
moves only through the `AudioContext` vectors that the caller fills and
reads around each call to `process`. There is no compiler from module
graphs to programs; programs come from the assembler or are built by
hand.