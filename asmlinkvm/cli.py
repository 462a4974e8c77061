"""Command line entry: assemble, link and run programs."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .assembler import assemble_file
from .linker import link
from .machine import run_program
from .model import AssemblyError, LinkError, MachineError


def main(argv: Sequence[str] | None = None) -> int:
    """Assemble each file named in argv, link them and run the result."""
    paths = list(sys.argv[1:] if argv is None else argv)
    if not paths:
        print("No programs specified.")
        return 1
    try:
        programs = []
        for index, path in enumerate(paths):
            print(f"Assembling program: {path}")
            programs.append(assemble_file(path, index))
        run_program(link(programs))
    except (AssemblyError, LinkError, MachineError) as error:
        print(f"Error: {error}")
        return 1
    print("Virtual machine execution completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())