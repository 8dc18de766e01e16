"""
Hack Symbol Table
=================

This module implements the symbol table and the first assembler pass that
fills it.

Registration
------------
build_symbol_table() makes two sweeps over the complete token stream:

1. **Label sweep**: every (NAME) declaration binds NAME to the address of
   the instruction that follows it. Labels are global, so a label may be
   referenced before it is declared.

2. **Variable sweep**: every @name that is still unbound receives the next
   free RAM address, starting at 16, in order of first appearance.

Labels must be registered before variables: a name that is both referenced
and declared as a label is a label, never a variable. Running the sweeps in
one pass would hand out variable addresses to forward label references.

Predefined Symbols
------------------
| Symbol          | Address |
|-----------------|---------|
| SP LCL ARG      | 0 1 2   |
| THIS THAT       | 3 4     |
| R0 .. R15       | 0 .. 15 |
| SCREEN          | 16384   |
| KBD             | 24576   |
"""

import difflib
import logging
from enum import Enum, auto
from typing import Iterable, Iterator, Optional

from hack_asm.assembler.lexer import Token, TokenType
from hack_asm.assembler.opcodes import MAX_ADDRESS
from hack_asm.errors import StructuralError, UnknownSymbolError

logger = logging.getLogger(__name__)


# First RAM address handed out to variables
VARIABLE_BASE = 16

RESERVED_SYMBOLS: dict[str, int] = {
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    **{f"R{n}": n for n in range(16)},
    "SCREEN": 16384,
    "KBD": 24576,
}


class SymbolKind(Enum):
    """How a symbol got into the table."""
    RESERVED = auto()
    LABEL = auto()
    VARIABLE = auto()

    def __str__(self) -> str:
        return self.name.lower()


class SymbolTable:
    """
    Maps symbol names to 15-bit addresses.

    Names are case-sensitive. Once bound, a name keeps its address for the
    lifetime of the table. The table is built for one assembly and thrown
    away afterwards.

    Usage:
        table = SymbolTable()
        table.define_label("LOOP", 4)
        table.allocate_variable("i")     # -> 16
        table.lookup("LOOP")             # -> 4
    """

    def __init__(self):
        self._entries: dict[str, int] = {}
        self._kinds: dict[str, SymbolKind] = {}
        self._next_variable = VARIABLE_BASE

        for name, address in RESERVED_SYMBOLS.items():
            self._bind(name, address, SymbolKind.RESERVED)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def _bind(self, name: str, address: int, kind: SymbolKind) -> None:
        self._entries[name] = address
        self._kinds[name] = kind

    def get(self, name: str) -> Optional[int]:
        """Return the address of name, or None if unbound."""
        return self._entries.get(name)

    def lookup(self, name: str, token: Optional[Token] = None,
               source_line: Optional[str] = None) -> int:
        """
        Return the address of name.

        Args:
            name: Symbol to resolve
            token: Token that referenced the symbol (for error location)
            source_line: Source text of the referencing line

        Raises:
            UnknownSymbolError: If name is not bound
        """
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownSymbolError(
                name,
                location=token.location if token is not None else None,
                source_line=source_line,
                similar_symbols=self.similar(name),
            ) from None

    def kind_of(self, name: str) -> Optional[SymbolKind]:
        return self._kinds.get(name)

    def define_label(self, name: str, address: int) -> bool:
        """
        Bind a label to an instruction address.

        Returns:
            True if the label was bound, False if the name already existed
        """
        if name in self._entries:
            return False
        self._bind(name, address, SymbolKind.LABEL)
        return True

    def allocate_variable(self, name: str, token: Optional[Token] = None,
                          source_line: Optional[str] = None) -> int:
        """
        Give name the next free variable address, unless already bound.

        Args:
            name: Symbol to allocate
            token: Token that first referenced the symbol (for error location)
            source_line: Source text of the referencing line

        Returns:
            The address bound to name

        Raises:
            StructuralError: If the 15-bit address space is exhausted
        """
        if name in self._entries:
            return self._entries[name]

        if self._next_variable > MAX_ADDRESS:
            raise StructuralError(
                f"no address left for variable '{name}'",
                location=token.location if token is not None else None,
                hint=f"variables are allocated from {VARIABLE_BASE} to {MAX_ADDRESS}",
                source_line=source_line,
            )

        address = self._next_variable
        self._bind(name, address, SymbolKind.VARIABLE)
        self._next_variable += 1
        return address

    @property
    def next_variable_address(self) -> int:
        return self._next_variable

    def items(self) -> Iterator[tuple[str, int]]:
        """Iterate (name, address) pairs in insertion order."""
        return iter(self._entries.items())

    def labels(self) -> dict[str, int]:
        return self._of_kind(SymbolKind.LABEL)

    def variables(self) -> dict[str, int]:
        return self._of_kind(SymbolKind.VARIABLE)

    def _of_kind(self, kind: SymbolKind) -> dict[str, int]:
        return {
            name: address
            for name, address in self._entries.items()
            if self._kinds[name] is kind
        }

    def similar(self, name: str, limit: int = 3) -> list[str]:
        """Names that look like name, for 'did you mean' hints."""
        return difflib.get_close_matches(name, list(self._entries), n=limit)

    def as_dict(self) -> dict[str, int]:
        return dict(self._entries)


# =============================================================================
# Registration Sweeps
# =============================================================================

def register_labels(table: SymbolTable, tokens: Iterable[Token]) -> int:
    """
    Label sweep: bind every label declaration not already present.

    Returns:
        Number of labels bound
    """
    count = 0
    for token in tokens:
        if token.type is not TokenType.LABEL:
            continue
        if table.define_label(token.value, token.address):
            count += 1
        else:
            logger.warning(
                f"{token.location}: label '{token.value}' already bound to "
                f"{table.get(token.value)}, ignoring redefinition"
            )
    return count


def register_variables(table: SymbolTable, tokens: Iterable[Token],
                       source: Optional[str] = None) -> int:
    """
    Variable sweep: allocate addresses for unbound address symbols.

    Args:
        table: Table already holding the labels
        tokens: All tokens of the program
        source: Original source text, quoted in errors

    Returns:
        Number of variables allocated
    """
    lines = source.splitlines() if source is not None else []
    count = 0
    for token in tokens:
        if token.type is not TokenType.ADDRESS_SYMBOL or token.value in table:
            continue
        source_line = lines[token.line - 1] if 0 < token.line <= len(lines) else None
        address = table.allocate_variable(token.value, token, source_line)
        logger.debug(f"Variable '{token.value}' allocated at {address}")
        count += 1
    return count


def build_symbol_table(tokens: list[Token], source: Optional[str] = None) -> SymbolTable:
    """
    Build the symbol table for a token stream (assembler pass one).

    The complete token list is required: variable addresses depend on first
    appearance across the whole program.

    Args:
        tokens: All tokens of the program
        source: Original source text, quoted in errors

    Returns:
        A fully populated SymbolTable
    """
    table = SymbolTable()
    labels = register_labels(table, tokens)
    variables = register_variables(table, tokens, source)
    logger.debug(f"Registered {labels} labels and {variables} variables")
    return table
