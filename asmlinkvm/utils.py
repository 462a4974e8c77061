"""Mnemonic and register lookup, and text dumps of programs and registers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .model import (
    AssembledProgram,
    Instruction,
    LinkedProgram,
    MemoryCell,
    Opcode,
    Scope,
    SymbolRow,
    SymbolType,
)

_REGISTERS = {"A0": 0, "A1": 1, "A2": 2, "A3": 3}


def opcode_for(mnemonic: str) -> Opcode:
    """Return the opcode for a mnemonic, or NOP when it is unknown."""
    return Opcode.__members__.get(mnemonic, Opcode.NOP)


def register_number(name: str) -> int | None:
    """Return the index of register A0..A3, or None for any other name."""
    return _REGISTERS.get(name)


def _scope_name(scope: Scope) -> str:
    return "Global" if scope is Scope.GLOBAL else "Local"


def _kind_name(kind: SymbolType) -> str:
    return "Variable" if kind is SymbolType.VARIABLE else "Label"


def _symbol_line(symbol: SymbolRow) -> str:
    return (
        f"Symbol name: {symbol.name}, Address: {symbol.address}, "
        f"Type: {_kind_name(symbol.kind)}, Scope: {_scope_name(symbol.scope)}"
    )


def _operands(instruction: Instruction) -> str:
    return (
        f"{int(instruction.opcode)} {instruction.operand1} "
        f"{instruction.operand2} {instruction.operand3}"
    )


def format_symbol_table(programs: Iterable[AssembledProgram]) -> str:
    """Describe the symbols of every assembled program."""
    lines = ["Symbol Table:"]
    lines.extend(
        _symbol_line(symbol) for program in programs for symbol in program.symbol_table
    )
    return "\n".join(lines)


def format_memory(program: AssembledProgram) -> str:
    """Describe the instruction cells of an assembled program."""
    lines = ["Memory:"]
    lines.extend(
        f"Address: {address}, Instruction: {_operands(cell.instruction)}"
        for address, cell in enumerate(program.memory)
        if address >= program.init_of_program and cell.instruction is not None
    )
    return "\n".join(lines)


def format_linked_symbol_table(linked: LinkedProgram) -> str:
    """Describe the symbols of a linked program with their origin."""
    lines = ["Linked Symbol Table:"]
    lines.extend(
        f"{_symbol_line(symbol)}, Program Index: {symbol.program_index}"
        for symbol in linked.symbol_table
    )
    return "\n".join(lines)


def _linked_cell_line(address: int, cell: MemoryCell) -> str:
    if cell.scope is Scope.NONE and cell.instruction is not None:
        instruction = cell.instruction
        body = (
            f"INSTRUCTION -> Opcode: {int(instruction.opcode)}, "
            f"Op1: {instruction.operand1}, Op2: {instruction.operand2}, "
            f"Op3: {instruction.operand3}"
        )
    else:
        body = f"DATA = {cell.value} | Scope: {_scope_name(cell.scope)}"
    line = f"Address {address}: {body} | From Program: {cell.program_index}"
    if cell.symbol_name:
        line += f" | Symbol: {cell.symbol_name}"
    return line


def format_linked_memory(linked: LinkedProgram) -> str:
    """Describe every cell of a linked memory image."""
    lines = ["Final Linked Memory:"]
    lines.extend(
        _linked_cell_line(address, cell) for address, cell in enumerate(linked.memory)
    )
    return "\n".join(lines)


def format_instruction(instruction: Instruction) -> str:
    """Describe one instruction."""
    return (
        f"Opcode: {int(instruction.opcode)}, Operand1: {instruction.operand1}, "
        f"Operand2: {instruction.operand2}, Operand3: {instruction.operand3}"
    )


def format_registers(registers: Sequence[int]) -> str:
    """Describe the register file as one line per register."""
    lines = ["Registers:"]
    lines.extend(f"A{index}: {value}" for index, value in enumerate(registers))
    return "\n".join(lines)