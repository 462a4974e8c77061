"""Assembler, linker and four-register virtual machine for a small assembly language."""

__version__ = "0.1.0"
__all__ = ["__version__"]