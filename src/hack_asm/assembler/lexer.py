"""
Hack Assembly Language Lexer
============================

This module implements the scanner for Hack assembly language. It converts
source text into a flat stream of typed tokens that the symbol table builder
and the parser consume.

Line Shapes
-----------
Every logical line is one of three mutually exclusive shapes, chosen by its
first non-whitespace character:

| First char | Shape               | Tokens produced                  |
|------------|---------------------|----------------------------------|
| @          | Address instruction | ADDRESS_LITERAL / ADDRESS_SYMBOL |
| (          | Label declaration   | LABEL                            |
| other      | Compute / jump      | DESTINATION + COMPUTATION, or    |
|            |                     | COMPUTATION + JUMP               |

A label is bound to the address of the next instruction: the number of
address and compute/jump lines scanned before it. Comment lines and other
labels do not count.

Comments
--------
"//" starts a comment that runs to the end of the physical line. Spaces,
tabs and carriage returns are insignificant everywhere.

Example
-------
>>> from hack_asm.assembler.lexer import Lexer
>>> for token in Lexer("(LOOP)\\n@i\\nD=M // load i").tokenize():
...     print(token)
Token(LABEL, 'LOOP' -> 0, 1:1)
Token(ADDRESS_SYMBOL, 'i', 2:1)
Token(DESTINATION, 'D', 3:1)
Token(COMPUTATION, 'M', 3:3)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from hack_asm.errors import LexicalError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for Hack assembly.

    The set is closed: the parser handles every member explicitly.
    """

    ADDRESS_LITERAL = auto()  # @123
    ADDRESS_SYMBOL = auto()   # @name, resolved through the symbol table
    LABEL = auto()            # (NAME), carries the address it is bound to
    DESTINATION = auto()      # AMD in AMD=D+1 (may be empty)
    COMPUTATION = auto()      # D+1 in AMD=D+1 or D+1;JGT
    JUMP = auto()             # JGT in D+1;JGT
    LINE_BOUNDARY = auto()    # End of an instruction line (optional)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: int for ADDRESS_LITERAL, str for the other valued types,
               None for LINE_BOUNDARY
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
        address: Instruction address a LABEL is bound to (None otherwise)
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str = "<input>"
    address: Optional[int] = None

    def __repr__(self) -> str:
        if self.type is TokenType.LABEL:
            return f"Token(LABEL, {self.value!r} -> {self.address}, {self.line}:{self.column})"
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Hack assembly source code.

    The lexer is a single forward cursor over the source string with one
    character of lookahead. It never backs up over a consumed character.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
        line_boundaries: If True, emit LINE_BOUNDARY after each instruction
    """

    # Characters allowed in symbols and numeric addresses
    IDENT_CHARS = string.ascii_letters + string.digits + "._$"

    # Insignificant characters (newline is handled separately)
    WHITESPACE = " \t\r"

    def __init__(self, source: str, filename: str = "<input>",
                 line_boundaries: bool = False):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
            line_boundaries: Emit a LINE_BOUNDARY token after every
                             instruction line
        """
        self.source = source
        self.filename = filename
        self.line_boundaries = line_boundaries

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

        # Address of the next instruction slot
        self._instruction_count = 0

    @property
    def instruction_count(self) -> int:
        """Number of instructions scanned so far."""
        return self._instruction_count

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order

        Raises:
            LexicalError: If a malformed line is encountered
        """
        while not self._at_end():
            self._skip_whitespace()

            if self._at_end():
                break

            if self._skip_comment():
                continue

            char = self._peek()

            if char == "\n":
                self._advance()
                continue

            if char == "(":
                yield self._scan_label()
                self._finish_line()
                continue

            if char == "@":
                yield self._scan_address()
            else:
                yield from self._scan_instruction()

            line, column = self._line, self._column
            self._instruction_count += 1
            self._finish_line()

            if self.line_boundaries:
                yield self._make_token(TokenType.LINE_BOUNDARY, None, line, column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, updating line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        line: int,
        column: int,
        address: Optional[int] = None,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
            address=address,
        )

    def _error(self, message: str, column: Optional[int] = None,
               hint: Optional[str] = None) -> LexicalError:
        """
        Create a lexical error on the current line.

        Args:
            message: Error description
            column: Column to point at (defaults to the cursor column)
            hint: Optional suggestion for fixing the error
        """
        location = SourceLocation(
            self.filename, self._line, column if column is not None else self._column
        )
        return LexicalError(message, location, hint=hint,
                            source_line=self.get_current_line())

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> None:
        # '' is a substring of every string, so test for end of input first
        while self._peek() and self._peek() in self.WHITESPACE:
            self._advance()

    def _at_comment(self) -> bool:
        return self._peek() == "/" and self._peek(1) == "/"

    def _skip_comment(self) -> bool:
        """
        Skip a // comment up to (not including) the newline.

        Returns:
            True if a comment was skipped
        """
        if not self._at_comment():
            return False
        while not self._at_end() and self._peek() != "\n":
            self._advance()
        return True

    def _finish_line(self) -> None:
        """
        Consume the rest of an instruction or label line.

        Only whitespace and a trailing comment may follow the instruction.
        """
        self._skip_whitespace()
        self._skip_comment()

        if self._at_end():
            return

        char = self._peek()
        if char != "\n":
            raise self._error(
                f"unexpected character '{char}' after instruction",
                hint="put one instruction per line",
            )
        self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_address(self) -> Token:
        """Scan an address instruction: @number or @symbol."""
        start_line = self._line
        start_column = self._column
        self._advance()  # consume @

        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        if not chars:
            raise self._error(
                "expected symbol or number after '@'",
                hint="address instructions look like @17 or @LOOP",
            )

        text = "".join(chars)

        if text[0].isdigit():
            if not text.isdigit():
                raise self._error(
                    f"invalid numeric address '{text}'",
                    column=start_column + 1,
                    hint="symbols cannot start with a digit",
                )
            return self._make_token(
                TokenType.ADDRESS_LITERAL, int(text), start_line, start_column
            )

        return self._make_token(TokenType.ADDRESS_SYMBOL, text, start_line, start_column)

    def _scan_label(self) -> Token:
        """Scan a label declaration: (NAME)."""
        start_line = self._line
        start_column = self._column
        self._advance()  # consume (

        chars = []
        while True:
            char = self._peek()
            if char == ")":
                self._advance()
                break
            if char == "" or char == "\n":
                raise self._error(
                    "unterminated label declaration",
                    hint="add a closing ')'",
                )
            if char not in self.IDENT_CHARS:
                raise self._error(f"unexpected character '{char}' in label")
            chars.append(self._advance())

        if not chars:
            raise self._error("empty label declaration", column=start_column)

        name = "".join(chars)
        if name[0].isdigit():
            raise self._error(
                f"label '{name}' cannot start with a digit",
                column=start_column + 1,
            )

        logger.debug(f"Label '{name}' bound to address {self._instruction_count}")
        return self._make_token(
            TokenType.LABEL, name, start_line, start_column,
            address=self._instruction_count,
        )

    def _scan_field(self) -> tuple[str, str, int]:
        """
        Scan one field of a compute/jump line.

        Reads up to ';', '=', a comment, the newline or the end of input,
        dropping whitespace.

        Returns:
            (text, separator, column) where separator is ';', '=' or ''
            and column is where the text starts
        """
        chars = []
        column = None

        while not self._at_end():
            char = self._peek()
            if char in (";", "=", "\n") or self._at_comment():
                break
            if char in self.WHITESPACE:
                self._advance()
                continue
            if column is None:
                column = self._column
            chars.append(self._advance())

        separator = self._peek() if self._peek() in (";", "=") else ""
        return "".join(chars), separator, column if column is not None else self._column

    def _scan_instruction(self) -> Iterator[Token]:
        """
        Scan a compute or jump line.

        dest=comp yields DESTINATION + COMPUTATION, comp;jump yields
        COMPUTATION + JUMP. A line with neither separator yields a lone
        COMPUTATION and is left for the parser to reject.
        """
        start_line = self._line
        head, separator, head_column = self._scan_field()

        if not separator:
            yield self._make_token(TokenType.COMPUTATION, head, start_line, head_column)
            return

        separator_column = self._column
        self._advance()  # consume = or ;
        tail, extra, tail_column = self._scan_field()

        if extra:
            raise self._error(
                f"unexpected '{extra}'",
                hint="an instruction is either dest=comp or comp;jump",
            )

        if separator == "=":
            if not tail:
                raise self._error("expected computation after '='", column=separator_column + 1)
            yield self._make_token(TokenType.DESTINATION, head, start_line, head_column)
            yield self._make_token(TokenType.COMPUTATION, tail, start_line, tail_column)
        else:
            if not head:
                raise self._error("expected computation before ';'", column=separator_column)
            if not tail:
                raise self._error("expected jump mnemonic after ';'", column=separator_column + 1)
            yield self._make_token(TokenType.COMPUTATION, head, start_line, head_column)
            yield self._make_token(TokenType.JUMP, tail, start_line, tail_column)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def get_current_line(self) -> str:
        """Get the current line of source text, for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].rstrip("\r")


def scan(source: str, filename: str = "<input>",
         line_boundaries: bool = False) -> list[Token]:
    """
    Tokenize a complete source string.

    Args:
        source: Assembly source code
        filename: Virtual filename for error messages
        line_boundaries: Emit LINE_BOUNDARY tokens after instruction lines

    Returns:
        List of tokens in source order

    Raises:
        LexicalError: On the first malformed line
    """
    lexer = Lexer(source, filename, line_boundaries=line_boundaries)
    tokens = list(lexer.tokenize())
    logger.debug(
        f"Scanned {len(tokens)} tokens, {lexer.instruction_count} instructions"
    )
    return tokens
