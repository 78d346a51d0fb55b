"""Command that assembles a program and runs it through the virtual machine."""

from __future__ import annotations

import argparse
from pathlib import Path

from .assembler import ToyAssembler
from .isa import MemoryRequirements
from .vm import MLVM, AudioContext

EXAMPLE_SOURCE = """
  MOV R1, #5          ; Move immediate 5 to R1
  ADD R0, R1, #1      ; Add R1 + 1, store in R0
  LDR R2, =2.71828    ; Load literal from pool into R2
  LDR R0, =0.         ; Load literal from pool into R0
  STR R2, [#3]        ; Store R2 to arena at offset 3
  MUL R0, R1, R2      ; Multiply R1 * R2, store in R0
  END
"""


def _positive(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text}")
    return value


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dspvm", description="Assemble a program and run it on the signal VM."
    )
    parser.add_argument("source", nargs="?", help="assembly file (built-in example if omitted)")
    parser.add_argument("--vectors", type=_positive, default=1, help="vectors to process")
    parser.add_argument("--inputs", type=_non_negative, default=0, help="input channels")
    parser.add_argument("--outputs", type=_non_negative, default=2, help="output channels")
    parser.add_argument("--sample-rate", type=_positive, default=48000, help="sample rate")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Assemble, list and run a program, then report the first sample of each output."""
    parser = _parser()
    args = parser.parse_args(argv)

    if args.source is None:
        source = EXAMPLE_SOURCE
    else:
        try:
            source = Path(args.source).read_text()
        except OSError as error:
            parser.error(f"cannot read {args.source}: {error}")

    assembler = ToyAssembler()
    program = assembler.assemble(source)
    assembler.print_program(program)

    vm = MLVM()
    vm.allocate_memory(MemoryRequirements(128, 128))
    vm.set_program(program)

    context = AudioContext(args.inputs, args.outputs, args.sample_rate)
    try:
        for _ in range(args.vectors):
            vm.process(context)
    except (RuntimeError, IndexError) as error:
        print(f"error: {error}")
        return 1

    for channel, vector in enumerate(context.outputs):
        print(f"output {channel}: {float(vector[0]):g}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())