"""
hack_asm - Assembler for the Hack Computer
==========================================

This package translates Hack assembly language into Hack machine code.
The Hack computer is a 16-bit machine with two instruction formats: the
address instruction (@value) and the compute instruction (dest=comp;jump).

Main Components
---------------
- **assembler**: Lexer, symbol table, parser and code generator
- **cli**: The hackasm command-line tool

Quick Start
-----------
Assemble a string:
    >>> from hack_asm import assemble
    >>> assemble("@17\\nD=A")
    '0000000000010001\\n1110110000010000'

Assemble a file:
    >>> from hack_asm import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_file("Max.asm")
    >>> asm.write_hack("Max.hack")

Or use the command-line tool:
    $ hackasm Max.asm -o Max.hack

Reference Documentation
-----------------------
- The Elements of Computing Systems, chapter 6: https://www.nand2tetris.org/
"""

__version__ = "1.0.0"

from hack_asm.assembler import Assembler, assemble, assemble_file
from hack_asm.errors import (
    HackError,
    SourceLocation,
    AssemblerError,
    LexicalError,
    UnknownSymbolError,
    StructuralError,
    EncodingError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "HackError",
    "SourceLocation",
    "AssemblerError",
    "LexicalError",
    "UnknownSymbolError",
    "StructuralError",
    "EncodingError",
]
