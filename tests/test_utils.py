import pytest

from asmlinkvm.model import (
    AssembledProgram,
    Instruction,
    LinkedProgram,
    MemoryCell,
    Opcode,
    Scope,
    SymbolRow,
    SymbolType,
)
from asmlinkvm.utils import (
    format_instruction,
    format_linked_memory,
    format_linked_symbol_table,
    format_memory,
    format_registers,
    format_symbol_table,
    opcode_for,
    register_number,
)

MNEMONICS = ["ADD", "SUB", "MUL", "DIV", "MV", "ST", "JMP", "JEQ", "JGT", "JLT", "W", "R", "STP"]
MV_CODE = Opcode.MV.value


def _program():
    return AssembledProgram(
        memory=[
            MemoryCell(scope=Scope.GLOBAL, value=9, program_index=0),
            MemoryCell(
                scope=Scope.NONE,
                instruction=Instruction(Opcode.MV, 1),
                symbol_name="count",
                target_operand=2,
                program_index=0,
            ),
        ],
        symbol_table=[
            SymbolRow("count", 0, SymbolType.VARIABLE, Scope.GLOBAL, 0),
            SymbolRow("loop", 2, SymbolType.LABEL, Scope.LOCAL, 0),
        ],
        init_of_program=1,
    )


@pytest.mark.parametrize("mnemonic", MNEMONICS)
def test_opcode_for_known_mnemonics(mnemonic):
    assert opcode_for(mnemonic) is Opcode[mnemonic]


@pytest.mark.parametrize("mnemonic", ["add", "FOO", "", "loop:"])
def test_opcode_for_unknown_is_nop(mnemonic):
    assert opcode_for(mnemonic) is Opcode.NOP


@pytest.mark.parametrize("name,number", [("A0", 0), ("A1", 1), ("A2", 2), ("A3", 3)])
def test_register_number_known(name, number):
    assert register_number(name) == number


@pytest.mark.parametrize("name", ["A4", "a0", "R1", ""])
def test_register_number_unknown(name):
    assert register_number(name) is None


def test_format_instruction():
    text = format_instruction(Instruction(Opcode.ADD, 1, 2, 3))
    assert text == "Opcode: 0, Operand1: 1, Operand2: 2, Operand3: 3"


def test_format_registers():
    assert format_registers([1, 2, 3, 4]) == "Registers:\nA0: 1\nA1: 2\nA2: 3\nA3: 4"


def test_format_symbol_table():
    assert format_symbol_table([_program()]) == (
        "Symbol Table:\n"
        "Symbol name: count, Address: 0, Type: Variable, Scope: Global\n"
        "Symbol name: loop, Address: 2, Type: Label, Scope: Local"
    )


def test_format_symbol_table_without_programs():
    assert format_symbol_table([]) == "Symbol Table:"


def test_format_memory_skips_data_cells():
    assert format_memory(_program()) == f"Memory:\nAddress: 1, Instruction: {MV_CODE} 1 -1 -1"


def test_format_linked_symbol_table():
    program = _program()
    linked = LinkedProgram(symbol_table=program.symbol_table)
    assert format_linked_symbol_table(linked) == (
        "Linked Symbol Table:\n"
        "Symbol name: count, Address: 0, Type: Variable, Scope: Global, Program Index: 0\n"
        "Symbol name: loop, Address: 2, Type: Label, Scope: Local, Program Index: 0"
    )


def test_format_linked_memory():
    program = _program()
    linked = LinkedProgram(memory=program.memory)
    assert format_linked_memory(linked) == (
        "Final Linked Memory:\n"
        "Address 0: DATA = 9 | Scope: Global | From Program: 0\n"
        f"Address 1: INSTRUCTION -> Opcode: {MV_CODE}, Op1: 1, Op2: -1, Op3: -1"
        " | From Program: 0 | Symbol: count"
    )