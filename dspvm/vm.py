"""The virtual machine that runs assembled programs one signal vector at a time."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

import numpy as np

from .isa import (
    NUM_REGISTERS,
    MemoryMode,
    MemoryRequirements,
    Operation,
    Program,
    RegisterMode,
    get_immediate,
    get_index,
    get_operand_mode,
)

FLOATS_PER_VECTOR = 64


def make_vector(value: float = 0.0) -> np.ndarray:
    """Return a signal vector with every sample set to value."""
    return np.full(FLOATS_PER_VECTOR, value, dtype=np.float32)


def _as_vector(data) -> np.ndarray:
    vector = np.array(data, dtype=np.float32, copy=True)
    if vector.shape != (FLOATS_PER_VECTOR,):
        raise ValueError(
            f"a signal vector must hold {FLOATS_PER_VECTOR} samples, got shape {vector.shape}"
        )
    return vector


@dataclass
class AudioContext:
    """Input and output signal vectors for one processing call."""

    input_channels: int = 0
    output_channels: int = 2
    sample_rate: int = 48000
    inputs: list[np.ndarray] = field(init=False)
    outputs: list[np.ndarray] = field(init=False)

    def __post_init__(self) -> None:
        if self.input_channels < 0 or self.output_channels < 0:
            raise ValueError("channel counts must not be negative")
        if self.sample_rate <= 0:
            raise ValueError("sample rate must be positive")
        self.inputs = [make_vector() for _ in range(self.input_channels)]
        self.outputs = [make_vector() for _ in range(self.output_channels)]


def _resized(vectors: list[np.ndarray], size: int) -> list[np.ndarray]:
    kept = vectors[:size]
    return kept + [make_vector() for _ in range(size - len(kept))]


class MLVM:
    """Interprets a program over registers and an arena of signal vectors."""

    def __init__(self) -> None:
        self.registers: list[np.ndarray] = []
        self.arena: list[np.ndarray] = []
        self.program = Program()
        self.program_counter = 0

    def allocate_memory(self, requirements: MemoryRequirements) -> bool:
        """Size the registers and the arena; existing contents are kept."""
        if requirements.state_vectors < 0 or requirements.scratch_vectors < 0:
            raise ValueError("memory requirements must not be negative")
        self.registers = _resized(self.registers, NUM_REGISTERS)
        self.arena = _resized(
            self.arena, requirements.state_vectors + requirements.scratch_vectors
        )
        return True

    def set_program(self, program: Program) -> None:
        """Install a copy of program as the code to run."""
        self.program = copy.deepcopy(program)

    def _value(self, operand: int) -> np.ndarray:
        if get_operand_mode(operand) == RegisterMode.REGISTER:
            return self.registers[get_index(operand)].copy()
        return make_vector(get_immediate(operand))

    @staticmethod
    def _offset(op1: int, op2: int) -> int:
        return (get_index(op1) << 7) | get_index(op2)

    def _value2(self, op1: int, op2: int) -> np.ndarray:
        offset = self._offset(op1, op2)
        if get_operand_mode(op1) == MemoryMode.ARENA:
            return self.arena[offset].copy()
        return make_vector(self.program.literal_pool[offset])

    def _store(self, op1: int, op2: int, value: np.ndarray) -> None:
        if get_operand_mode(op1) != MemoryMode.ARENA:
            raise RuntimeError("a literal cannot be the destination of a store")
        self.arena[self._offset(op1, op2)] = value

    def process(self, context: AudioContext) -> None:
        """Run the program once, reading inputs and writing one vector per output."""
        if not context.outputs:
            return
        if not self.registers:
            raise RuntimeError("memory has not been allocated")

        for number, data in enumerate(context.inputs):
            self.registers[number] = _as_vector(data)

        instructions = self.program.instructions
        self.program_counter = 0
        while True:
            if self.program_counter >= len(instructions):
                raise RuntimeError("program ran past its last instruction without END")
            inst = instructions[self.program_counter]
            self.program_counter += 1
            dest = get_index(inst.dest)
            v1 = self._value(inst.src1)
            v2 = self._value(inst.src2)

            op = inst.opcode
            if op == Operation.END:
                break
            if op == Operation.MOVE:
                self.registers[dest] = v1
            elif op == Operation.LOAD:
                self.registers[dest] = self._value2(inst.src1, inst.src2)
            elif op == Operation.STORE:
                # In a store the source register sits in the dest operand.
                self._store(inst.src1, inst.src2, self._value(inst.dest))
            elif op == Operation.ADD:
                self.registers[dest] = np.add(v1, v2, dtype=np.float32)
            elif op == Operation.MUL:
                self.registers[dest] = np.multiply(v1, v2, dtype=np.float32)

        for number in range(len(context.outputs)):
            context.outputs[number] = self.registers[number].copy()