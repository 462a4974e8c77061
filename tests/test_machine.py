import pytest

from asmlinkvm.assembler import assemble_lines
from asmlinkvm.linker import link
from asmlinkvm.machine import RunResult, VirtualMachine, run_program
from asmlinkvm.model import MachineError, Opcode


def _build(*sources):
    return link(
        [assemble_lines(source.splitlines(), index) for index, source in enumerate(sources)]
    )


def _run(linked, inputs=()):
    out = []
    values = iter(inputs)
    result = run_program(linked, read_value=lambda prompt: next(values), write=out.append)
    return result, out


def test_addition_and_read():
    linked = _build("WORD x 5\nWORD y 3\nMV A0 x\nMV A1 y\nADD A2 A0 A1\nR A2\nSTP")
    result, out = _run(linked)
    assert result.registers[2] == 8
    assert "Register 2 value: 8" in out
    assert result.stopped


def test_stop_message_names_stp_address():
    linked = _build("WORD x 5\nMV A0 x\nSTP")
    result, out = _run(linked)
    assert result.memory[result.pc - 1].instruction.opcode is Opcode.STP
    assert f"Program terminated by STP instruction at PC = {result.pc - 1}" in out
    assert out[-1].startswith("Registers:")
    assert "A0: 5" in out[-1]


def test_division_truncates_toward_zero():
    linked = _build("WORD x -7\nWORD y 2\nMV A0 x\nMV A1 y\nDIV A2 A0 A1\nSTP")
    result, _ = _run(linked)
    assert result.registers[2] == -3


def test_division_by_zero():
    linked = _build("WORD x 4\nWORD y 0\nMV A0 x\nMV A1 y\nDIV A2 A0 A1\nSTP")
    with pytest.raises(MachineError, match="Division by zero"):
        _run(linked)


def test_store_updates_result_but_not_input():
    linked = _build("WORD x 5\nWORD y 0\nMV A0 x\nST A0 y\nSTP")
    result, _ = _run(linked)
    assert result.memory[1].value == result.memory[0].value
    assert linked.memory[1].value == 0


def test_counting_loop_with_branch():
    source = (
        "WORD zero 0\nWORD one 1\nWORD n 3\n"
        "MV A0 zero\nMV A1 one\nMV A2 n\n"
        "loop:\nADD A0 A0 A1\nJLT A0 A2 loop\nSTP"
    )
    result, _ = _run(_build(source))
    assert result.registers[0] == result.registers[2] == 3


def test_unconditional_jump_skips_instruction():
    source = "WORD x 5\nJMP end\nMV A0 x\nend:\nSTP"
    result, _ = _run(_build(source))
    assert result.registers[0] == 0
    assert result.stopped


def test_write_reads_value_with_prompt():
    prompts = []
    out = []

    def reader(prompt):
        prompts.append(prompt)
        return "42"

    result = run_program(_build("W A1\nR A1\nSTP"), read_value=reader, write=out.append)
    assert prompts == ["Enter value to write in register 1: "]
    assert result.registers[1] == 42
    assert "Register 1 value: 42" in out


def test_invalid_input_value():
    with pytest.raises(MachineError):
        _run(_build("W A0\nSTP"), inputs=["abc"])


def test_running_off_the_end_without_stop():
    result, out = _run(_build("WORD x 5\nMV A0 x"))
    assert not result.stopped
    assert result.registers[0] == 5
    assert not any(line.startswith("Program terminated") for line in out)


def test_step_by_step():
    machine = VirtualMachine(_build("WORD x 5\nMV A0 x\nSTP"), write=lambda text: None)
    assert machine.step() is True
    assert machine.pc == 1
    assert machine.registers == [0, 0, 0, 0]
    machine.step()
    assert machine.registers[0] == 5
    assert machine.step() is False
    with pytest.raises(MachineError):
        machine.step()


def test_run_returns_result_record():
    result, _ = _run(_build("STP"))
    assert result == RunResult((0, 0, 0, 0), True, 1, result.memory)