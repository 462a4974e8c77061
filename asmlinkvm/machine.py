"""Virtual machine executing a linked memory image."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from .model import (
    MEMORY_SIZE,
    REGISTERS_COUNT,
    LinkedProgram,
    MachineError,
    MemoryCell,
    Opcode,
    Scope,
)
from .utils import format_registers

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _wrap(number: int) -> int:
    """Reduce a result to a 32-bit signed integer."""
    return (number - _INT_MIN) % 2**32 + _INT_MIN


def _truncating_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


@dataclass(frozen=True)
class RunResult:
    """State of the machine once execution has ended."""

    registers: tuple[int, ...]
    stopped: bool
    pc: int
    memory: list[MemoryCell]


class VirtualMachine:
    """A four-register machine running a linked program."""

    def __init__(
        self,
        program: LinkedProgram,
        read_value: Callable[[str], object] | None = None,
        write: Callable[[str], object] | None = None,
    ) -> None:
        self.memory = [replace(cell) for cell in program.memory]
        self.registers = [0] * REGISTERS_COUNT
        self.pc = 0
        self.stopped = False
        self._read_value = read_value if read_value is not None else input
        self._write = write if write is not None else print

    @property
    def running(self) -> bool:
        return (
            not self.stopped
            and 0 <= self.pc < len(self.memory)
            and self.pc < MEMORY_SIZE
        )

    def _register(self, index: int) -> int:
        if not 0 <= index < REGISTERS_COUNT:
            raise MachineError(
                f"Invalid register index: {index} in instruction at PC = {self.pc}"
            )
        return index

    def _cell_at(self, address: int) -> MemoryCell:
        if not 0 <= address < len(self.memory):
            raise MachineError(
                f"Invalid memory address: {address} in instruction at PC = {self.pc}"
            )
        return self.memory[address]

    def _alu(self, opcode: Opcode, target: int, left: int, right: int) -> None:
        regs = self.registers
        a, b = regs[self._register(left)], regs[self._register(right)]
        if opcode is Opcode.ADD:
            result = a + b
        elif opcode is Opcode.SUB:
            result = a - b
        elif opcode is Opcode.MUL:
            result = a * b
        else:
            if b == 0:
                raise MachineError(f"Division by zero in instruction at PC = {self.pc}")
            result = _truncating_div(a, b)
        regs[self._register(target)] = _wrap(result)

    def _jump_taken(self, opcode: Opcode, first: int, second: int) -> bool:
        if opcode is Opcode.JMP:
            return True
        a = self.registers[self._register(first)]
        b = self.registers[self._register(second)]
        if opcode is Opcode.JEQ:
            return a == b
        if opcode is Opcode.JGT:
            return a > b
        return a < b

    def _read_register(self, index: int) -> None:
        prompt = f"Enter value to write in register {index}: "
        raw = self._read_value(prompt)
        try:
            number = int(str(raw).strip())
        except ValueError as error:
            raise MachineError(f"Invalid input value '{raw}' at PC = {self.pc}") from error
        if not _INT_MIN <= number <= _INT_MAX:
            raise MachineError(f"Input value {number} out of range at PC = {self.pc}")
        self.registers[index] = number

    def step(self) -> bool:
        """Execute the cell at pc; return whether the machine can go on."""
        if not self.running:
            raise MachineError("Machine is not running")
        cell = self.memory[self.pc]
        next_pc = self.pc + 1
        instruction = cell.instruction
        if cell.scope is Scope.NONE and instruction is not None:
            opcode = instruction.opcode
            op1, op2, op3 = instruction.operand1, instruction.operand2, instruction.operand3
            if opcode in (Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV):
                self._alu(opcode, op1, op2, op3)
            elif opcode is Opcode.MV:
                self.registers[self._register(op1)] = self._cell_at(op2).value
            elif opcode is Opcode.ST:
                self._cell_at(op2).value = self.registers[self._register(op1)]
            elif opcode is Opcode.JMP:
                next_pc = op1 - 1
            elif opcode in (Opcode.JEQ, Opcode.JGT, Opcode.JLT):
                if self._jump_taken(opcode, op1, op2):
                    next_pc = op3 - 1
            elif opcode is Opcode.W:
                self._read_register(self._register(op1))
            elif opcode is Opcode.R:
                index = self._register(op1)
                self._write(f"Register {index} value: {self.registers[index]}")
            elif opcode is Opcode.STP:
                self.stopped = True
        self.pc = next_pc
        return self.running

    def run(self) -> RunResult:
        """Run until STP, the end of memory or the memory limit."""
        while self.running:
            self.step()
        if self.pc == MEMORY_SIZE:
            self._write("Memory limit reached. Program terminated.")
        if self.stopped:
            self._write(f"Program terminated by STP instruction at PC = {self.pc - 1}")
        self._write(format_registers(self.registers))
        return RunResult(tuple(self.registers), self.stopped, self.pc, self.memory)


def run_program(
    program: LinkedProgram,
    read_value: Callable[[str], object] | None = None,
    write: Callable[[str], object] | None = None,
) -> RunResult:
    """Run a linked program on a fresh machine."""
    return VirtualMachine(program, read_value, write).run()