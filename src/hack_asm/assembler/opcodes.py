"""
Hack Instruction Set Definition
===============================

This module defines the fixed mnemonic tables of the Hack computer. The
encoder looks computation, destination and jump mnemonics up here.

Instruction Formats
-------------------
The Hack CPU has two 16-bit instruction formats:

1. **Address instruction** (@value)
   - 0vvv vvvv vvvv vvvv
   - Loads a 15-bit value into the A register

2. **Compute instruction** (dest=comp;jump)
   - 111a cccc ccdd djjj
   - a: ALU y-input is M (RAM[A]) instead of A
   - cccccc: ALU control bits
   - ddd: destination registers (A, D, M)
   - jjj: jump condition on the ALU output

The a-bit is not part of the tables: A and M share computation codes, and
the encoder sets the a-bit when the mnemonic mentions M.

Reference
---------
- The Elements of Computing Systems, chapter 6 (Hack assembly language)
"""

from types import MappingProxyType
from typing import Mapping, Optional


# =============================================================================
# Field Widths
# =============================================================================

WORD_BITS = 16
ADDRESS_BITS = 15
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1   # 32767

# Leading bits of a compute instruction
COMPUTE_PREFIX = "111"

# Register letter naming the memory operand; its presence sets the a-bit
MEMORY_OPERAND = "M"

NULL_DEST = "000"
NULL_JUMP = "000"


# =============================================================================
# Computation Table
# =============================================================================
# Key: computation mnemonic as written in source (whitespace removed)
# Value: 6-bit ALU control code (zx nx zy ny f no)
#
# The commutative spellings (A+D, M&D, ...) encode like their canonical
# forms since the ALU computes the same function.
# =============================================================================

COMP_TABLE: Mapping[str, str] = MappingProxyType({
    # Constants
    "0": "101010",
    "1": "111111",
    "-1": "111010",

    # Single register
    "D": "001100",
    "A": "110000",
    "M": "110000",
    "!D": "001101",
    "!A": "110001",
    "!M": "110001",
    "-D": "001111",
    "-A": "110011",
    "-M": "110011",

    # Increment / decrement
    "D+1": "011111",
    "A+1": "110111",
    "M+1": "110111",
    "D-1": "001110",
    "A-1": "110010",
    "M-1": "110010",
    "1+D": "011111",
    "1+A": "110111",
    "1+M": "110111",

    # Two-register arithmetic
    "D+A": "000010",
    "D+M": "000010",
    "A+D": "000010",
    "M+D": "000010",
    "D-A": "010011",
    "D-M": "010011",
    "A-D": "000111",
    "M-D": "000111",

    # Two-register logic
    "D&A": "000000",
    "D&M": "000000",
    "A&D": "000000",
    "M&D": "000000",
    "D|A": "010101",
    "D|M": "010101",
    "A|D": "010101",
    "M|D": "010101",
})


# =============================================================================
# Destination Table
# =============================================================================
# Bits are A, D, M from left to right.

DEST_TABLE: Mapping[str, str] = MappingProxyType({
    "M": "001",
    "D": "010",
    "MD": "011",
    "A": "100",
    "AM": "101",
    "AD": "110",
    "AMD": "111",
})


# =============================================================================
# Jump Table
# =============================================================================
# Bits are out<0, out=0, out>0 from left to right.

JUMP_TABLE: Mapping[str, str] = MappingProxyType({
    "JGT": "001",
    "JEQ": "010",
    "JGE": "011",
    "JLT": "100",
    "JNE": "101",
    "JLE": "110",
    "JMP": "111",
})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_comp_code(mnemonic: str) -> Optional[str]:
    """Return the 6-bit computation code, or None if unknown."""
    return COMP_TABLE.get(mnemonic)


def get_dest_code(mnemonic: Optional[str]) -> str:
    """
    Return the 3-bit destination code.

    A missing, empty or unrecognized mask stores nowhere and encodes
    as 000.
    """
    if not mnemonic:
        return NULL_DEST
    return DEST_TABLE.get(mnemonic, NULL_DEST)


def get_jump_code(mnemonic: str) -> Optional[str]:
    """Return the 3-bit jump code, or None if unknown."""
    return JUMP_TABLE.get(mnemonic)


def uses_memory_operand(computation: str) -> bool:
    """True if the computation reads M, i.e. the a-bit must be set."""
    return MEMORY_OPERAND in computation


def is_valid_dest(mnemonic: str) -> bool:
    return mnemonic in DEST_TABLE
