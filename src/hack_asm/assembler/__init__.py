"""
Hack Assembler
==============

This package provides a two-pass assembler for the Hack computer, the
16-bit machine from "The Elements of Computing Systems". It translates
Hack assembly source (.asm) into the textual .hack format: one line of
sixteen '0'/'1' characters per instruction.

Main Components
---------------
- **Assembler**: Orchestrates the pipeline and writes output files
- **Lexer**: Tokenizes assembly source into tokens
- **SymbolTable**: Predefined symbols, labels and variables
- **Parser**: Resolves tokens into instruction records
- **CodeGenerator**: Encodes instruction records into machine words

Assembly Process
----------------
1. **Scanning (Lexer)**: source text -> tokens; labels are bound to the
   address of the next instruction as they are scanned.

2. **Pass 1 (build_symbol_table)**: register all labels, then allocate
   RAM addresses (from 16) to the remaining symbols in order of first use.

3. **Pass 2 (Parser)**: resolve symbols, check the instruction grammar,
   build AddressInstruction / ComputeInstruction / JumpInstruction records.

4. **Encoding (CodeGenerator)**: one 16-bit word per record.

Example Usage
-------------
>>> from hack_asm.assembler import assemble
>>> print(assemble("@2\\nD=A\\n@3\\nD=D+A\\n@0\\nM=D\\n"))
0000000000000010
1110110000010000
0000000000000011
1110000010010000
0000000000000000
1110001100001000
"""

from hack_asm.assembler.assembler import Assembler, assemble, assemble_file
from hack_asm.assembler.lexer import Lexer, Token, TokenType, scan
from hack_asm.assembler.symbols import (
    RESERVED_SYMBOLS,
    VARIABLE_BASE,
    SymbolKind,
    SymbolTable,
    build_symbol_table,
)
from hack_asm.assembler.parser import (
    Parser,
    Instruction,
    AddressInstruction,
    ComputeInstruction,
    JumpInstruction,
    parse,
)
from hack_asm.assembler.codegen import CodeGenerator, encode
from hack_asm.assembler.opcodes import COMP_TABLE, DEST_TABLE, JUMP_TABLE

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "scan",
    # Symbol table
    "RESERVED_SYMBOLS",
    "VARIABLE_BASE",
    "SymbolKind",
    "SymbolTable",
    "build_symbol_table",
    # Parser
    "Parser",
    "Instruction",
    "AddressInstruction",
    "ComputeInstruction",
    "JumpInstruction",
    "parse",
    # Code generator
    "CodeGenerator",
    "encode",
    # Mnemonic tables
    "COMP_TABLE",
    "DEST_TABLE",
    "JUMP_TABLE",
]
