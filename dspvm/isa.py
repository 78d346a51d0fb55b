"""Instruction-set definitions: opcodes, operands, instructions and programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

# An opcode is one byte: the low bits select the operation, the high bits a mode.
OPCODE_OPERATION_BITS = 6
NUM_OPERATIONS = 1 << OPCODE_OPERATION_BITS
OPCODE_OPERATION_MASK = NUM_OPERATIONS - 1
OPCODE_MODE_MASK = ~OPCODE_OPERATION_MASK & 0xFF

# An operand is one byte: the low bits hold an index, the top bit an address mode.
OPERAND_INDEX_BITS = 7
NUM_OPERAND_INDEXES = 1 << OPERAND_INDEX_BITS
NUM_REGISTERS = NUM_OPERAND_INDEXES
OPERAND_INDEX_MASK = NUM_OPERAND_INDEXES - 1
OPERAND_MODE_MASK = ~OPERAND_INDEX_MASK & 0xFF
_NUM_OPERAND_MODES = 1 << (8 - OPERAND_INDEX_BITS)


class Operation(IntEnum):
    """Operations the virtual machine knows about."""

    NOOP = 0
    END = 1
    MOVE = 2
    MOVE1 = 3
    LOAD = 4
    LOAD1 = 5
    STORE = 6
    CMP = 7
    BNE = 8
    JMP = 9
    ADD = 10
    TEST1 = 11
    TEST2 = 12
    MUL = 13
    SHIFT = 14
    INTERP = 15
    SVF = 16


class OpcodeMode(IntEnum):
    """Opcode modes (reserved)."""

    MODE_0 = 0
    MODE_1 = 1


class RegisterMode(IntEnum):
    """Address modes of a register operand."""

    REGISTER = 0
    IMMEDIATE = 1


class MemoryMode(IntEnum):
    """Address modes of a pair of memory operands."""

    ARENA = 0
    LITERAL = 1


def get_operation_mode(opcode: int) -> int:
    """Return the mode bits of an opcode."""
    return (opcode & OPCODE_MODE_MASK) >> OPCODE_OPERATION_BITS


def get_operation(opcode: int) -> int:
    """Return the operation bits of an opcode."""
    return opcode & OPCODE_OPERATION_MASK


def get_operand_mode(operand: int) -> int:
    """Return the address mode bit of an operand."""
    return (operand & OPERAND_MODE_MASK) >> OPERAND_INDEX_BITS


def get_index(operand: int) -> int:
    """Return the index bits of an operand."""
    return operand & OPERAND_INDEX_MASK


def get_immediate(operand: int) -> float:
    """Return the float value encoded by an immediate operand."""
    return float(get_index(operand))


def make_operand(mode: int, index: int) -> int:
    """Build an operand byte from an address mode and an index."""
    mode = int(mode)
    if not 0 <= mode < _NUM_OPERAND_MODES:
        raise ValueError(f"operand mode out of range: {mode}")
    if not 0 <= index < NUM_OPERAND_INDEXES:
        raise ValueError(f"operand index out of range: {index}")
    return (mode << OPERAND_INDEX_BITS) | index


@dataclass
class Instruction:
    """A four-byte instruction: an opcode and three operands."""

    opcode: int = 0
    dest: int = 0
    src1: int = 0
    src2: int = 0

    def __post_init__(self) -> None:
        for name in ("opcode", "dest", "src1", "src2"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} must fit in one byte, got {value}")


@dataclass
class MemoryRequirements:
    """Vectors of persistent state and of scratch space a program needs."""

    state_vectors: int = 0
    scratch_vectors: int = 0


@dataclass
class Program:
    """Instructions, their literal pool and the memory they need."""

    instructions: list[Instruction] = field(default_factory=list)
    literal_pool: list[float] = field(default_factory=list)
    mem_reqs: MemoryRequirements = field(default_factory=MemoryRequirements)