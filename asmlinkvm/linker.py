"""Linker merging assembled programs into one memory image."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .model import (
    AssembledProgram,
    LinkedProgram,
    LinkError,
    MemoryCell,
    Scope,
    SymbolRow,
    SymbolType,
)


def _check_not_declared(table: list[SymbolRow], row: SymbolRow) -> None:
    """Reject a symbol that clashes with one already in the linked table."""
    for symbol in table:
        if symbol.name != row.name:
            continue
        if symbol.scope is Scope.GLOBAL or row.scope is Scope.GLOBAL:
            raise LinkError(
                f"Global symbol '{row.name}' already declared in program {symbol.program_index}"
            )
        if symbol.program_index == row.program_index:
            raise LinkError(
                f"Symbol '{row.name}' already declared in program {row.program_index}"
            )


def _resolve(cell: MemoryCell, table: list[SymbolRow]) -> MemoryCell:
    """Write the address of the symbol a cell names into its target operand."""
    if not cell.symbol_name or cell.target_operand is None:
        return cell
    symbol = next((row for row in table if row.name == cell.symbol_name), None)
    if symbol is None:
        raise LinkError(
            f"Symbol '{cell.symbol_name}' not found in the symbol table "
            f"at program {cell.program_index}"
        )
    visible = symbol.scope is Scope.GLOBAL or (
        symbol.scope is Scope.LOCAL and symbol.program_index == cell.program_index
    )
    if not visible:
        raise LinkError(
            f"Symbol '{cell.symbol_name}' not found in the correct scope "
            f"at program {cell.program_index}"
        )
    if cell.instruction is None:
        raise LinkError(
            f"Invalid target operand for symbol '{cell.symbol_name}' "
            f"at program {cell.program_index}"
        )
    try:
        instruction = cell.instruction.with_operand(cell.target_operand, symbol.address)
    except ValueError as error:
        raise LinkError(
            f"Invalid target operand for symbol '{cell.symbol_name}' "
            f"at program {cell.program_index}"
        ) from error
    return replace(cell, instruction=instruction)


def link(programs: Iterable[AssembledProgram]) -> LinkedProgram:
    """Link programs: all data cells first, then all instructions, symbols resolved."""
    programs = list(programs)
    total_data = sum(program.init_of_program for program in programs)
    linked = LinkedProgram()
    data_cells: list[MemoryCell] = []
    instruction_cells: list[MemoryCell] = []
    data_offset = 0
    instruction_offset = 0

    for index, program in enumerate(programs):
        init = program.init_of_program
        data_cells.extend(
            replace(cell, program_index=index) for cell in program.memory[:init]
        )
        instruction_cells.extend(
            replace(cell, program_index=index) for cell in program.memory[init:]
        )
        for symbol in program.symbol_table:
            if symbol.kind is SymbolType.VARIABLE:
                address = symbol.address + data_offset
            else:
                address = symbol.address + instruction_offset + total_data - init
            row = replace(symbol, address=address, program_index=index)
            _check_not_declared(linked.symbol_table, row)
            linked.symbol_table.append(row)
        data_offset += init
        instruction_offset += len(program.memory) - init

    linked.memory.extend(data_cells)
    linked.memory.extend(_resolve(cell, linked.symbol_table) for cell in instruction_cells)
    return linked