# asmlinkvm

An assembler, a linker and a virtual machine for a small assembly language
with four registers. The package assembles several source files, links them
into one memory image and runs the result.

## Installation

```
pip install .
```

## Running programs

```
asmlinkvm main.asm library.asm
```

Each file is assembled in the order given. The command prints
`Assembling program: <path>` for each file. It then links the programs and
runs them. The linker places the data of every program first and the
instructions after it. Execution starts at address 0. When the machine stops,
it prints the final values of the registers `A0` to `A3`. At the end the
command prints `Virtual machine execution completed successfully.`

Any assembly, link or run-time error is printed as `Error: <message>` and the
command exits with status 1. If you give no files, the command prints
`No programs specified.` and exits with status 1.

## The language

Blank lines are ignored, and so are lines that begin with `#`. Variable
declarations must come before any instruction. A label stands alone on its
line and ends with `:`.

```
# data
WORD x 10
GLOBAL WORD shared 5

# code
MV A0 x
MV A1 shared
ADD A2 A0 A1
JGT A0 A1 big
R A1
STP
big:
R A0
STP
```

| Instruction          | Effect                                        |
|----------------------|-----------------------------------------------|
| `ADD Ad As At`       | `Ad = As + At`                                |
| `SUB Ad As At`       | `Ad = As - At`                                |
| `MUL Ad As At`       | `Ad = As * At`                                |
| `DIV Ad As At`       | `Ad = As / At`, rounded towards zero; division by zero is an error |
| `MV Ar var`          | load a variable into a register               |
| `ST Ar var`          | store a register into a variable              |
| `JMP label`          | jump unconditionally                          |
| `JEQ Ar As label`    | jump if `Ar == As`                            |
| `JGT Ar As label`    | jump if `Ar > As`                             |
| `JLT Ar As label`    | jump if `Ar < As`                             |
| `W Ar`               | read an integer from input into a register    |
| `R Ar`               | print `Register N value: V`                   |
| `STP`                | stop                                          |

The registers are `A0` to `A3`. Arithmetic wraps to 32-bit signed integers.
A variable declared with `WORD` is local to its file. A variable declared with
`GLOBAL WORD` can be used from every linked file. Labels are always local.
A symbol reference resolves to the first symbol of that name in link order.
If that symbol is local to another file, linking fails.

The limits are these. A file is read up to 320 significant lines. A file may
declare at most 100 symbols. Execution stops at `STP`, at the end of memory,
or at address 320.

## Library use

```python
from asmlinkvm.assembler import assemble_lines
from asmlinkvm.linker import link
from asmlinkvm.machine import run_program

program = assemble_lines(["WORD x 3", "MV A0 x", "R A0", "STP"], 0)
linked = link([program])
result = run_program(linked, read_value=lambda prompt: "0", write=print)
print(result.registers, result.stopped)
```

- `assemble_file(path, program_index)` assembles a source file from disk.
- `run_program` takes two optional callables:
  - `read_value(prompt)` supplies the input for `W`. By default it is `input`.
  - `write(text)` receives all output. By default it is `print`.
- `run_program` returns a `RunResult` with these fields: `registers`, `stopped`, `pc` and `memory`.
- For single-stepping, use `asmlinkvm.machine.VirtualMachine` and its `step()` and `run()` methods.
- `asmlinkvm.utils` has text dumps of symbol tables, memory images, instructions and registers.

Errors raise `AssemblyError`, `LinkError` or `MachineError`. All three are defined in `asmlinkvm.model`.