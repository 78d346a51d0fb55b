"""A small assembler turning text into programs for the virtual machine."""

from __future__ import annotations

import logging
import math
import re
import struct
import sys
from typing import TextIO

from .isa import (
    NUM_REGISTERS,
    Instruction,
    MemoryMode,
    Operation,
    Program,
    RegisterMode,
    get_index,
    get_operand_mode,
    get_operation,
    make_operand,
)

logger = logging.getLogger(__name__)

_OP_NAMES: dict[str, Operation] = {
    "NOOP": Operation.NOOP,
    "END": Operation.END,
    "MOV": Operation.MOVE,
    "MOVE": Operation.MOVE,
    "LDR": Operation.LOAD,
    "LOAD": Operation.LOAD,
    "STR": Operation.STORE,
    "STORE": Operation.STORE,
    "CMP": Operation.CMP,
    "BNE": Operation.BNE,
    "JMP": Operation.JMP,
    "ADD": Operation.ADD,
    "MUL": Operation.MUL,
    "SHIFT": Operation.SHIFT,
    "INTERP": Operation.INTERP,
    "SVF": Operation.SVF,
}

_WHITESPACE = " \t\r\n"
_DIGITS = "0123456789"
_LEADING_INT = re.compile(r"[0-9]+")
_LEADING_FLOAT = re.compile(
    r"\s*[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_MEMORY_OPS = (Operation.LOAD, Operation.STORE)


def _to_float32(value: float) -> float:
    if not math.isfinite(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return 0.0


def _parse_float(text: str) -> float:
    """Parse the leading float of text, or 0.0 when there is none."""
    match = _LEADING_FLOAT.match(text)
    if not match:
        return 0.0
    return _to_float32(float(match.group().strip()))


def _truncate(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


def _is_register(token: str) -> bool:
    return len(token) >= 2 and token[0] in "Rr" and token[1] in _DIGITS


def _is_immediate(token: str) -> bool:
    return len(token) >= 2 and token[0] == "#"


def _is_memory_arena(token: str) -> bool:
    return len(token) >= 3 and token[0] == "[" and token[-1] == "]"


def _is_literal(token: str) -> bool:
    if not token:
        return False
    return token[0] == "=" or ("." in token and token[0] in _DIGITS)


def _parse_register_number(token: str) -> int:
    if not _is_register(token):
        return -1
    number = int(_LEADING_INT.match(token, 1).group())
    return number if number < NUM_REGISTERS else -1


def _parse_immediate(token: str) -> float:
    if not _is_immediate(token):
        return 0.0
    return _parse_float(token[1:])


def _parse_literal(token: str) -> float:
    return _parse_float(token[1:] if token.startswith("=") else token)


def _parse_memory_arena(token: str) -> tuple[int, int]:
    """Return (base, offset) for a bracketed arena address, or (-1, -1)."""
    if not _is_memory_arena(token):
        return -1, -1
    inner = token[1:-1]
    base_part, comma, offset_part = inner.partition(",")
    if not comma:
        trimmed = inner.strip(_WHITESPACE)
        if _is_immediate(trimmed):
            return 0, _truncate(_parse_immediate(trimmed))
        return _parse_register_number(trimmed), 0

    base = _parse_register_number(base_part.strip(_WHITESPACE))
    if base == -1:
        return -1, -1
    offset_part = offset_part.strip(_WHITESPACE)
    if _is_register(offset_part):
        return base, _parse_register_number(offset_part)
    if _is_immediate(offset_part):
        return base, _truncate(_parse_immediate(offset_part))
    return base, 0


def _register_operand(token: str) -> int:
    if _is_register(token):
        number = _parse_register_number(token)
        if number >= 0:
            return make_operand(RegisterMode.REGISTER, number)
    elif _is_immediate(token):
        value = _parse_immediate(token)
        if math.isnan(value):
            encoded = 0
        elif math.isinf(value):
            encoded = 127 if value > 0 else 0
        else:
            encoded = min(127, max(0, int(value)))
        return make_operand(RegisterMode.IMMEDIATE, encoded)
    return make_operand(RegisterMode.REGISTER, 0)


def _memory_operands(token: str, literal_index: int) -> tuple[int, int]:
    if _is_memory_arena(token):
        base, offset = _parse_memory_arena(token)
        if base >= 0:
            address = ((base << 7) | (offset & 0x7F)) & 0xFFFF
            return (
                make_operand(MemoryMode.ARENA, (address >> 7) & 0x7F),
                make_operand(MemoryMode.ARENA, address & 0x7F),
            )
    elif _is_literal(token):
        return (
            make_operand(MemoryMode.LITERAL, (literal_index >> 7) & 0x7F),
            make_operand(MemoryMode.LITERAL, literal_index & 0x7F),
        )
    zero = make_operand(MemoryMode.ARENA, 0)
    return zero, zero


def _tokenize(line: str) -> list[str]:
    tokens = (word.replace(",", "") for word in line.split())
    return [token for token in tokens if token]


class ToyAssembler:
    """Assembles a line-oriented assembly language into a Program."""

    def assemble(self, source: str) -> Program:
        """Assemble source text; unknown operations are logged and skipped."""
        program = Program()
        for raw_line in source.split("\n"):
            line = raw_line.strip(_WHITESPACE)
            if not line or line.startswith(";") or line.startswith("//"):
                continue
            tokens = _tokenize(line)
            if not tokens:
                continue

            name = tokens[0].upper()
            op = _OP_NAMES.get(name)
            if op is None:
                logger.warning("Unknown operation: %s", name)
                continue

            dest = src1 = src2 = 0
            if len(tokens) >= 2:
                dest = _register_operand(tokens[1])
            if op in _MEMORY_OPS:
                if len(tokens) >= 3:
                    literal_index = 0
                    if _is_literal(tokens[2]):
                        program.literal_pool.append(_parse_literal(tokens[2]))
                        literal_index = (len(program.literal_pool) - 1) & 0xCFFF
                    src1, src2 = _memory_operands(tokens[2], literal_index)
            else:
                if len(tokens) >= 3:
                    src1 = _register_operand(tokens[2])
                if len(tokens) >= 4:
                    src2 = _register_operand(tokens[3])

            program.instructions.append(Instruction(int(op), dest, src1, src2))
        return program

    def format_program(self, program: Program) -> str:
        """Return a human-readable listing of a program."""
        lines = [f"Program with {len(program.instructions)} instructions:"]
        for number, instr in enumerate(program.instructions):
            op = get_operation(instr.opcode)
            text = f"{number}: Op={op} Dest=R{get_index(instr.dest)} "
            if op in _MEMORY_OPS:
                address = ((get_index(instr.src1) << 7) | get_index(instr.src2)) & 0xFFFF
                literal = get_operand_mode(instr.src1) == MemoryMode.LITERAL
                text += f"MemAddr={address}({'LITERAL' if literal else 'ARENA'})"
            else:
                text += f"Src1={_describe(instr.src1)} Src2={_describe(instr.src2)}"
            lines.append(text)
        if program.literal_pool:
            lines.append("")
            lines.append("Literal Pool:")
            lines.extend(
                f"{number}: {value:g}" for number, value in enumerate(program.literal_pool)
            )
        return "\n".join(lines) + "\n"

    def print_program(self, program: Program, file: TextIO | None = None) -> None:
        """Write the listing of a program to file, standard output by default."""
        (file if file is not None else sys.stdout).write(self.format_program(program))


def _describe(operand: int) -> str:
    prefix = "#" if get_operand_mode(operand) == RegisterMode.IMMEDIATE else "R"
    return f"{prefix}{get_index(operand)}"