"""
Hack Code Generator
===================

This module turns resolved instruction records into 16-bit machine words.
Words are strings of exactly sixteen '0'/'1' characters, the textual
.hack format read by the Hack CPU emulator.

Encoding
--------
| Record              | Word                                   |
|---------------------|----------------------------------------|
| AddressInstruction  | 0 vvvvvvvvvvvvvvv                      |
| ComputeInstruction  | 111 a cccccc ddd 000                   |
| JumpInstruction     | 111 a cccccc 000 jjj                   |

The a-bit is 1 when the computation reads M. Unknown computation and jump
mnemonics raise EncodingError; they are never replaced by a default.

Example
-------
>>> encode(AddressInstruction(2))
'0000000000000010'
>>> encode(ComputeInstruction("D", "D+A"))
'1110000010010000'
"""

import logging
from pathlib import Path
from typing import Optional

from hack_asm.assembler.opcodes import (
    ADDRESS_BITS,
    COMP_TABLE,
    COMPUTE_PREFIX,
    JUMP_TABLE,
    MAX_ADDRESS,
    NULL_DEST,
    NULL_JUMP,
    get_comp_code,
    get_dest_code,
    get_jump_code,
    is_valid_dest,
    uses_memory_operand,
)
from hack_asm.assembler.parser import (
    AddressInstruction,
    ComputeInstruction,
    Instruction,
    JumpInstruction,
)
from hack_asm.assembler.symbols import SymbolKind, SymbolTable
from hack_asm.errors import EncodingError, SourceLocation, StructuralError

logger = logging.getLogger(__name__)


# =============================================================================
# Instruction Encoding
# =============================================================================

def _encode_comp(computation: str, location: Optional[SourceLocation]) -> str:
    code = get_comp_code(computation)
    if code is None:
        raise EncodingError(
            computation, "computation", location=location,
            valid_mnemonics=sorted(COMP_TABLE),
        )
    a_bit = "1" if uses_memory_operand(computation) else "0"
    return a_bit + code


def _encode_jump(condition: str, location: Optional[SourceLocation]) -> str:
    code = get_jump_code(condition)
    if code is None:
        raise EncodingError(
            condition, "jump", location=location,
            valid_mnemonics=sorted(JUMP_TABLE),
        )
    return code


def encode(instruction: Instruction) -> str:
    """
    Encode one instruction record as a 16-character binary word.

    Args:
        instruction: A resolved AddressInstruction, ComputeInstruction or
                     JumpInstruction

    Returns:
        The machine word, e.g. '1110110000010000'

    Raises:
        EncodingError: If a computation or jump mnemonic is unknown
        StructuralError: If an address does not fit in 15 bits
    """
    location = getattr(instruction, "location", None)

    if isinstance(instruction, AddressInstruction):
        if not 0 <= instruction.value <= MAX_ADDRESS:
            raise StructuralError(
                f"address {instruction.value} does not fit in 15 bits",
                location=location,
            )
        return "0" + format(instruction.value, f"0{ADDRESS_BITS}b")

    if isinstance(instruction, ComputeInstruction):
        if instruction.destination and not is_valid_dest(instruction.destination):
            logger.warning(
                f"{location or '<input>'}: unrecognized destination "
                f"'{instruction.destination}', result is not stored"
            )
        return (
            COMPUTE_PREFIX
            + _encode_comp(instruction.computation, location)
            + get_dest_code(instruction.destination)
            + NULL_JUMP
        )

    if isinstance(instruction, JumpInstruction):
        return (
            COMPUTE_PREFIX
            + _encode_comp(instruction.computation, location)
            + NULL_DEST
            + _encode_jump(instruction.condition, location)
        )

    raise TypeError(f"cannot encode {type(instruction).__name__}")


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Encodes a whole program and keeps what is needed for listings.

    Usage:
        codegen = CodeGenerator()
        words = codegen.generate(instructions, symbols, source)
        codegen.write_listing("Max.lst")
    """

    def __init__(self):
        self._words: list[str] = []
        self._listing_lines: list[str] = []
        self._symbols: Optional[SymbolTable] = None

    def generate(
        self,
        instructions: list[Instruction],
        symbols: Optional[SymbolTable] = None,
        source: Optional[str] = None,
    ) -> list[str]:
        """
        Encode every instruction in program order.

        Any state from a previous call is discarded.

        Args:
            instructions: Records from the parser
            symbols: Symbol table, kept for listings and symbol files
            source: Original source text, quoted in listings and errors

        Returns:
            One 16-character word per instruction
        """
        self._words = []
        self._listing_lines = []
        self._symbols = symbols
        lines = source.splitlines() if source is not None else []

        for address, instruction in enumerate(instructions):
            line_text = self._source_text(instruction, lines)
            try:
                word = encode(instruction)
            except EncodingError as e:
                # Re-raise with the source line quoted
                raise EncodingError(
                    e.mnemonic, e.field, location=e.location,
                    source_line=line_text, valid_mnemonics=e.valid_mnemonics,
                ) from None
            except StructuralError as e:
                raise StructuralError(
                    e.message, location=e.location,
                    hint=e.hint, source_line=line_text,
                ) from None

            self._words.append(word)
            line_number = instruction.location.line if instruction.location else 0
            self._listing_lines.append(
                f"{address:5d}  {word}  {line_number:4d}  {(line_text or '').strip()}"
            )

        logger.debug(f"Generated {len(self._words)} words")
        return list(self._words)

    @staticmethod
    def _source_text(instruction: Instruction, lines: list[str]) -> Optional[str]:
        location = instruction.location
        if location is None or not 0 < location.line <= len(lines):
            return None
        return lines[location.line - 1]

    # =========================================================================
    # Output
    # =========================================================================

    def get_words(self) -> list[str]:
        return list(self._words)

    def get_output(self, separator: str = "\n") -> str:
        """Words joined by separator, without a trailing separator."""
        return separator.join(self._words)

    def get_symbols(self) -> dict[str, int]:
        return self._symbols.as_dict() if self._symbols is not None else {}

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing ROM addresses, words and source lines,
            followed by the user-defined symbols
        """
        lines = []
        lines.append("Hack Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append(" Addr  Word              Line  Source")
        lines.append("-" * 60)
        lines.extend(self._listing_lines)
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, address, kind in self._user_symbols():
            lines.append(f"{name:20s} = {address:5d}  {kind}")
        return "\n".join(lines)

    def _user_symbols(self) -> list[tuple[str, int, SymbolKind]]:
        if self._symbols is None:
            return []
        entries = []
        for name, address in self._symbols.items():
            kind = self._symbols.kind_of(name)
            if kind is not SymbolKind.RESERVED:
                entries.append((name, address, kind))
        return sorted(entries)

    def write_hack(self, filepath: str | Path, separator: str = "\n") -> None:
        """
        Write the program image, one word per line.

        Every word, including the last, is followed by separator.
        """
        with open(filepath, "w", newline="") as f:
            for word in self._words:
                f.write(word + separator)

    def write_listing(self, filepath: str | Path) -> None:
        with open(filepath, "w") as f:
            f.write(self.get_listing())
            f.write("\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address kind (one per line, labels and variables only)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by hackasm\n")
            for name, address, kind in self._user_symbols():
                f.write(f"{name} {address} {kind}\n")
