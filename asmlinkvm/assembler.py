"""Two-pass assembler turning source lines into an assembled program."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator

from .model import (
    MAX_SYMBOLS,
    MEMORY_SIZE,
    AssembledProgram,
    AssemblyError,
    Instruction,
    MemoryCell,
    Opcode,
    Scope,
    SymbolRow,
    SymbolType,
)
from .utils import opcode_for, register_number

_BLANKS = " \f\n\r\t\v"
_SEPARATOR = re.compile(r"[ \f\n\r\t\v]+")
_LEADING_INT = re.compile(r"[ \f\n\r\t\v]*([+-]?[0-9]+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_ALU = frozenset({Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV})
_BRANCHES = frozenset({Opcode.JEQ, Opcode.JGT, Opcode.JLT})
_IO = frozenset({Opcode.R, Opcode.W})
_MEMORY_ACCESS = frozenset({Opcode.MV, Opcode.ST})


def _significant_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yield trimmed lines that are neither blank nor comments."""
    for raw in lines:
        line = raw.strip(_BLANKS)
        if line and not line.startswith("#"):
            yield line


def _tokens(line: str) -> list[str]:
    return [token for token in _SEPARATOR.split(line) if token]


def _parse_value(text: str, line_number: int) -> int:
    """Read the leading decimal integer of text, as a 32-bit signed value."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise AssemblyError(f"Invalid value '{text}' at line {line_number}")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise AssemblyError(f"Value '{text}' out of range at line {line_number}")
    return number


class _Assembler:
    def __init__(self, program_index: int) -> None:
        self.program_index = program_index
        self.program = AssembledProgram()
        self.data_count = 0

    def _check_new_symbol(self, name: str, line_number: int) -> None:
        if any(symbol.name == name for symbol in self.program.symbol_table):
            raise AssemblyError(f"Symbol '{name}' already declared at line {line_number}")
        if len(self.program.symbol_table) >= MAX_SYMBOLS:
            raise AssemblyError(f"Maximum number of symbols exceeded at line {line_number}")

    def _declare_label(self, name: str, line_number: int) -> None:
        self._check_new_symbol(name, line_number)
        self.program.symbol_table.append(
            SymbolRow(name, line_number, SymbolType.LABEL, Scope.LOCAL, self.program_index)
        )

    def _declare_word(self, scope: Scope, name: str, value: str, line_number: int) -> None:
        self._check_new_symbol(name, line_number)
        self.data_count += 1
        if self.data_count < line_number:
            raise AssemblyError(
                "Variable declaration must be before program initialization "
                f"at line {line_number}"
            )
        number = _parse_value(value, line_number)
        self.program.symbol_table.append(
            SymbolRow(
                name, len(self.program.memory), SymbolType.VARIABLE, scope, self.program_index
            )
        )
        self.program.memory.append(
            MemoryCell(scope=scope, value=number, program_index=self.program_index)
        )

    def first_pass(self, lines: list[str]) -> None:
        """Collect labels and data declarations."""
        line_number = 0
        for line in lines:
            if line_number >= MEMORY_SIZE:
                break
            line_number += 1
            tokens = _tokens(line)
            count = len(tokens)
            if count == 1:
                (token,) = tokens
                if token.endswith(":"):
                    if len(token) < 2:
                        raise AssemblyError(f"Label cannot be empty at line {line_number}")
                    self._declare_label(token[:-1], line_number)
                    line_number -= 1
            elif count == 3:
                keyword, name, value = tokens
                if keyword == "WORD":
                    self._declare_word(Scope.LOCAL, name, value, line_number)
            elif count == 4:
                scope, keyword, name, value = tokens
                if keyword == "WORD":
                    if scope != "GLOBAL":
                        raise AssemblyError(
                            f"Invalid scope for WORD declaration at line {line_number}"
                        )
                    self._declare_word(Scope.GLOBAL, name, value, line_number)
            elif count > 4:
                raise AssemblyError(f"Invalid number of tokens at line {line_number}")

    def second_pass(self, lines: list[str]) -> None:
        """Encode every instruction after the data declarations."""
        line_number = 0
        address = self.data_count
        for line in lines:
            if line_number >= MEMORY_SIZE:
                break
            if line.endswith(":"):
                continue
            line_number += 1
            if line_number <= address:
                continue
            tokens = _tokens(line)
            if len(tokens) > 4:
                raise AssemblyError(f"Invalid number of tokens at line {line_number}")
            self.program.memory.append(self._instruction_cell(tokens, address))
            address += 1

    def _register(self, name: str, address: int) -> int:
        number = register_number(name)
        if number is None:
            raise AssemblyError(f"Invalid register '{name}' at line {address}")
        return number

    def _cell(
        self,
        instruction: Instruction,
        symbol_name: str = "",
        target_operand: int | None = None,
    ) -> MemoryCell:
        return MemoryCell(
            scope=Scope.NONE,
            instruction=instruction,
            symbol_name=symbol_name,
            target_operand=target_operand,
            program_index=self.program_index,
        )

    def _instruction_cell(self, tokens: list[str], address: int) -> MemoryCell:
        mnemonic, *operands = tokens
        opcode = opcode_for(mnemonic)
        count = len(operands)

        if count == 0 and opcode is Opcode.STP:
            return self._cell(Instruction(opcode))
        if count == 1:
            (target,) = operands
            if opcode is Opcode.JMP:
                return self._cell(Instruction(opcode), target, 1)
            if opcode in _IO:
                return self._cell(Instruction(opcode, self._register(target, address)))
        if count == 2 and opcode in _MEMORY_ACCESS:
            register, symbol = operands
            return self._cell(Instruction(opcode, self._register(register, address)), symbol, 2)
        if count == 3:
            if opcode in _ALU:
                numbers = [register_number(name) for name in operands]
                if any(number is None for number in numbers):
                    raise AssemblyError(f"Invalid register at line {address}")
                return self._cell(Instruction(opcode, *numbers))
            if opcode in _BRANCHES:
                first, second, symbol = operands
                left, right = register_number(first), register_number(second)
                if left is None or right is None:
                    raise AssemblyError(f"Invalid register '{first}' at line {address}")
                return self._cell(Instruction(opcode, left, right), symbol, 3)
        raise AssemblyError(f"Invalid instruction at line {address}")


def assemble_lines(lines: Iterable[str], program_index: int) -> AssembledProgram:
    """Assemble source lines into a program numbered program_index."""
    significant = list(_significant_lines(lines))
    assembler = _Assembler(program_index)
    assembler.first_pass(significant)
    assembler.second_pass(significant)
    assembler.program.init_of_program = assembler.data_count
    return assembler.program


def assemble_file(path: str | os.PathLike[str], program_index: int) -> AssembledProgram:
    """Assemble the source file at path into a program numbered program_index."""
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            text = handle.read()
    except OSError as error:
        raise AssemblyError(f"Could not open file {os.fspath(path)}") from error
    return assemble_lines(text.split("\n"), program_index)