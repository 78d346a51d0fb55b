import pytest

from dspvm.isa import (
    NUM_OPERATIONS,
    NUM_OPERAND_INDEXES,
    OPCODE_OPERATION_BITS,
    OPERAND_INDEX_MASK,
    Instruction,
    MemoryMode,
    MemoryRequirements,
    OpcodeMode,
    Operation,
    Program,
    RegisterMode,
    get_immediate,
    get_index,
    get_operand_mode,
    get_operation,
    get_operation_mode,
    make_operand,
)


@pytest.mark.parametrize("op", list(Operation))
def test_all_operations_fit_in_opcode_bits(op):
    assert int(op) < NUM_OPERATIONS
    assert get_operation(int(op)) == op
    assert get_operation_mode(int(op)) == OpcodeMode.MODE_0


@pytest.mark.parametrize("op", list(Operation))
@pytest.mark.parametrize("mode", list(OpcodeMode))
def test_opcode_fields_round_trip(op, mode):
    opcode = (int(mode) << OPCODE_OPERATION_BITS) | int(op)
    assert get_operation(opcode) == op
    assert get_operation_mode(opcode) == mode


@pytest.mark.parametrize("mode", list(RegisterMode) + list(MemoryMode))
def test_operand_round_trip_all_indexes(mode):
    for index in range(NUM_OPERAND_INDEXES):
        operand = make_operand(mode, index)
        assert 0 <= operand <= 0xFF
        assert get_index(operand) == index
        assert get_operand_mode(operand) == mode


def test_full_byte_operand_fields():
    assert get_operand_mode(0xFF) == RegisterMode.IMMEDIATE
    assert get_index(0xFF) == OPERAND_INDEX_MASK


def test_immediate_value_is_index_as_float():
    operand = make_operand(RegisterMode.IMMEDIATE, 42)
    assert get_immediate(operand) == 42.0


@pytest.mark.parametrize("mode,index", [(0, -1), (0, NUM_OPERAND_INDEXES), (2, 0), (-1, 3)])
def test_make_operand_rejects_out_of_range(mode, index):
    with pytest.raises(ValueError):
        make_operand(mode, index)


def test_instruction_rejects_values_over_one_byte():
    with pytest.raises(ValueError):
        Instruction(opcode=256)
    with pytest.raises(ValueError):
        Instruction(src2=-1)


def test_instruction_defaults_and_equality():
    assert Instruction() == Instruction(0, 0, 0, 0)
    assert Instruction(int(Operation.ADD), 1, 2, 3).src1 == 2


def test_program_defaults_are_independent():
    first = Program()
    second = Program()
    first.instructions.append(Instruction())
    first.literal_pool.append(1.0)
    assert second.instructions == []
    assert second.literal_pool == []
    assert first.mem_reqs == MemoryRequirements(0, 0)