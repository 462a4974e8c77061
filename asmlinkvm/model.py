"""Data types shared by the assembler, the linker and the virtual machine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum

MEMORY_SIZE = 320
MAX_SYMBOLS = 100
REGISTERS_COUNT = 4

_OPERAND_POSITIONS = (1, 2, 3)


class Opcode(IntEnum):
    """Machine instruction codes; NOP marks an unknown mnemonic."""

    NOP = -1
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    MV = 4
    ST = 5
    JMP = 6
    JEQ = 7
    JGT = 8
    JLT = 9
    W = 10
    R = 11
    STP = 12


class SymbolType(Enum):
    VARIABLE = "variable"
    LABEL = "label"


class Scope(Enum):
    """Visibility of a symbol or memory cell; NONE marks instruction cells."""

    GLOBAL = "global"
    LOCAL = "local"
    NONE = "none"


class AssemblyError(Exception):
    """Raised when a source program cannot be assembled."""


class LinkError(Exception):
    """Raised when assembled programs cannot be linked together."""


class MachineError(Exception):
    """Raised when the virtual machine cannot execute an instruction."""


@dataclass
class SymbolRow:
    """One entry of a symbol table."""

    name: str
    address: int
    kind: SymbolType
    scope: Scope
    program_index: int


@dataclass(frozen=True)
class Instruction:
    """An opcode with up to three operands; unused operands are -1."""

    opcode: Opcode
    operand1: int = -1
    operand2: int = -1
    operand3: int = -1

    @staticmethod
    def _check_position(position: int) -> None:
        if position not in _OPERAND_POSITIONS:
            raise ValueError(f"operand position must be 1, 2 or 3, not {position!r}")

    def operand(self, position: int) -> int:
        """Return the operand at position 1, 2 or 3."""
        self._check_position(position)
        return (self.operand1, self.operand2, self.operand3)[position - 1]

    def with_operand(self, position: int, value: int) -> Instruction:
        """Return a copy with the operand at the given position replaced."""
        self._check_position(position)
        return replace(self, **{f"operand{position}": value})


@dataclass
class MemoryCell:
    """A memory word: either data (value) or an instruction.

    An instruction cell has scope NONE; it may name a symbol whose address
    is still to be written into operand ``target_operand``.
    """

    scope: Scope
    value: int = 0
    instruction: Instruction | None = None
    symbol_name: str = ""
    target_operand: int | None = None
    program_index: int = 0


@dataclass
class AssembledProgram:
    """Output of the assembler for one source file.

    The first ``init_of_program`` memory cells are data; the rest are
    instructions.
    """

    memory: list[MemoryCell] = field(default_factory=list)
    symbol_table: list[SymbolRow] = field(default_factory=list)
    init_of_program: int = 0


@dataclass
class LinkedProgram:
    """Several assembled programs merged into one memory image."""

    memory: list[MemoryCell] = field(default_factory=list)
    symbol_table: list[SymbolRow] = field(default_factory=list)