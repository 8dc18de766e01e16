"""
Hack Assembly Language Parser
=============================

This module implements the second assembler pass. It walks the token
stream, resolves every symbol through the symbol table built by the first
pass, and produces typed instruction records for the code generator.

Instruction Records
-------------------
1. **AddressInstruction**: @value, value resolved to an int in [0, 32767]
   ```asm
   @17
   @LOOP          // label, resolved to its instruction address
   @counter       // variable, resolved to its RAM address
   ```

2. **ComputeInstruction**: dest=comp
   ```asm
   D=M
   AM=M-1
   ```

3. **JumpInstruction**: comp;jump
   ```asm
   D;JGT
   0;JMP
   ```

Grammar
-------
Every COMPUTATION token must pair with a DESTINATION before it or a JUMP
after it. A computation with neither (a bare `D+1` line) is rejected, never
read as a compute instruction that stores nowhere.

Records never contain symbolic names: resolution happens before a record
is built.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from hack_asm.assembler.lexer import Token, TokenType
from hack_asm.assembler.opcodes import MAX_ADDRESS
from hack_asm.assembler.symbols import SymbolTable
from hack_asm.errors import SourceLocation, StructuralError

logger = logging.getLogger(__name__)


# =============================================================================
# Instruction Data Classes
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    Base class for resolved instruction records.

    The set of subclasses is closed: AddressInstruction,
    ComputeInstruction and JumpInstruction.
    """


@dataclass(frozen=True)
class AddressInstruction(Instruction):
    """
    Load a 15-bit value into A.

    Attributes:
        value: Resolved address or constant, 0..32767
        location: Where the instruction appears in source
    """
    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class ComputeInstruction(Instruction):
    """
    Evaluate an ALU expression and store it.

    Attributes:
        destination: Register mask (e.g. "AMD"), None if empty
        computation: ALU mnemonic (e.g. "D+1")
        location: Where the instruction appears in source
    """
    destination: Optional[str]
    computation: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class JumpInstruction(Instruction):
    """
    Evaluate an ALU expression and jump on its sign.

    Attributes:
        computation: ALU mnemonic (e.g. "D")
        condition: Jump mnemonic (e.g. "JGT")
        location: Where the instruction appears in source
    """
    computation: str
    condition: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Resolves a token stream into instruction records.

    Usage:
        tokens = scan(source)
        symbols = build_symbol_table(tokens)
        instructions = Parser(tokens, symbols).parse()
    """

    def __init__(
        self,
        tokens: list[Token],
        symbols: Optional[SymbolTable],
        source: Optional[str] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            symbols: Symbol table from build_symbol_table()
            source: Original source text, used to quote lines in errors
        """
        self._tokens = tokens
        self._symbols = symbols
        self._lines = source.splitlines() if source is not None else None
        self._pos = 0

    def parse(self) -> list[Instruction]:
        """
        Parse all tokens into instruction records.

        Returns:
            Instructions in program order

        Raises:
            StructuralError: If the token sequence breaks the grammar or
                             the symbol table has not been built
            UnknownSymbolError: If a symbol has no binding
        """
        if self._symbols is None:
            raise StructuralError(
                "symbol table has not been built",
                hint="run build_symbol_table() on the tokens first",
            )

        instructions: list[Instruction] = []

        while not self._at_end():
            instruction = self._parse_next()
            if instruction is not None:
                instructions.append(instruction)

        logger.debug(f"Parsed {len(instructions)} instructions")
        return instructions

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return not self._at_end() and self._current().type is token_type

    def _source_line(self, token: Token) -> Optional[str]:
        if self._lines is None or not 0 < token.line <= len(self._lines):
            return None
        return self._lines[token.line - 1]

    def _error(self, message: str, token: Token,
               hint: Optional[str] = None) -> StructuralError:
        return StructuralError(
            message,
            location=token.location,
            hint=hint,
            source_line=self._source_line(token),
        )

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _parse_next(self) -> Optional[Instruction]:
        token = self._advance()

        if token.type is TokenType.ADDRESS_SYMBOL:
            address = self._symbols.lookup(
                token.value, token, self._source_line(token)
            )
            return AddressInstruction(address, location=token.location)

        if token.type is TokenType.ADDRESS_LITERAL:
            if token.value > MAX_ADDRESS:
                raise self._error(
                    f"address {token.value} does not fit in 15 bits",
                    token,
                    hint=f"address literals range from 0 to {MAX_ADDRESS}",
                )
            return AddressInstruction(token.value, location=token.location)

        if token.type is TokenType.DESTINATION:
            if not self._check(TokenType.COMPUTATION):
                raise self._error(
                    f"destination '{token.value}' is not followed by a computation",
                    token,
                )
            computation = self._advance()
            return ComputeInstruction(
                token.value or None, computation.value, location=token.location
            )

        if token.type is TokenType.COMPUTATION:
            if not self._check(TokenType.JUMP):
                raise self._error(
                    f"computation '{token.value}' has no destination or jump",
                    token,
                    hint=f"write dest={token.value} or {token.value};JMP",
                )
            jump = self._advance()
            return JumpInstruction(token.value, jump.value, location=token.location)

        if token.type is TokenType.JUMP:
            raise self._error(f"jump '{token.value}' has no computation", token)

        # LABEL and LINE_BOUNDARY were absorbed by the first pass
        return None


def parse(tokens: list[Token], symbols: Optional[SymbolTable],
          source: Optional[str] = None) -> list[Instruction]:
    """
    Resolve tokens into instruction records (assembler pass two).

    Args:
        tokens: Tokens from scan()
        symbols: Table from build_symbol_table()
        source: Original source text for error context

    Returns:
        Instructions in program order
    """
    return Parser(tokens, symbols, source).parse()
