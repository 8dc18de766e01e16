"""
Hack Assembler Error Hierarchy
==============================

This module defines the exception hierarchy for the hack_asm package.
All exceptions inherit from HackError, allowing callers to catch every
assembler failure with a single except clause.

Exception Hierarchy
-------------------
HackError (base)
└── AssemblerError (assembler-related)
    ├── LexicalError - malformed token shape in source
    ├── UnknownSymbolError - symbol with no binding after registration
    ├── StructuralError - token sequence violates the instruction grammar
    └── EncodingError - mnemonic missing from its lookup table

Design Philosophy
-----------------
Assembly halts at the first error. Each exception captures source location
information (filename, line, column) when it is known, so the message points
straight at the offending token.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class HackError(Exception):
    """
    Base exception for all hack_asm errors.

        try:
            assembler.assemble_file("Max.asm")
        except HackError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(HackError):
    """
    Base exception for all assembler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            Max.asm:6:4: error: unknown jump mnemonic 'JGG'
                D;JGG
                  ^
            hint: valid jump mnemonics: JEQ, JGE, JGT, JLE, JLT, JMP, JNE
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(AssemblerError):
    """
    Malformed token shape in assembly source.

    Examples:
        - Unterminated label declaration: (LOOP
        - Address operand with no identifier: @
        - Non-digit inside a numeric address: @12ab
        - Empty computation or jump field: D=  or  D;
    """
    pass


class UnknownSymbolError(AssemblerError):
    """
    Reference to a symbol that has no binding in the symbol table.

    The registration sweeps allocate every unseen address symbol, so this
    error means the symbol table and the token stream disagree. It is an
    internal-consistency failure rather than a user mistake.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class StructuralError(AssemblerError):
    """
    Token sequence violates the instruction grammar.

    Raised when:
    - A destination is not followed by a computation
    - A computation has neither a destination before it nor a jump after it
    - A jump has no computation before it
    - An address literal does not fit in 15 bits
    - The resolver runs before the symbol table has been built
    """
    pass


class EncodingError(AssemblerError):
    """
    Computation or jump mnemonic missing from its lookup table.

    Attributes:
        mnemonic: The mnemonic that could not be encoded
        field: Which instruction field it came from ("computation" or "jump")
    """

    def __init__(
        self,
        mnemonic: str,
        field: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.field = field
        self.valid_mnemonics = valid_mnemonics or []

        hint = None
        if self.valid_mnemonics:
            hint = f"valid {field} mnemonics: {', '.join(self.valid_mnemonics)}"

        super().__init__(
            f"unknown {field} mnemonic '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )
