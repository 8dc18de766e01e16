"""
Hack Assembler - Main Interface
===============================

This module provides the Assembler class, the main entry point for
assembling Hack source code. It runs the lexer, the symbol table builder,
the parser and the code generator in order and keeps the results for the
output methods.

Example Usage
-------------
>>> from hack_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... @2
... D=A
... @3
... D=D+A
... @0
... M=D
... ''')
>>> asm.get_words()[1]
'1110110000010000'
>>>
>>> asm.write_hack("Add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm -o Add.hack -l Add.lst -s Add.sym

Options:
    -o, --output FILE      Output .hack file
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    -p, --print            Print words instead of writing a file
    --line-ending lf|crlf  Separator written after every word
    -v, --verbose          Verbose output
"""

import logging
from pathlib import Path
from typing import Optional

from hack_asm.assembler.codegen import CodeGenerator
from hack_asm.assembler.lexer import Token, scan
from hack_asm.assembler.parser import Instruction, Parser
from hack_asm.assembler.symbols import SymbolTable, build_symbol_table

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main Hack assembler class.

    Each assemble_* call is independent: it builds a fresh symbol table,
    and the results of the previous call are replaced.

    Attributes:
        verbose: If True, log progress at INFO level instead of DEBUG
        line_boundaries: If True, the lexer emits LINE_BOUNDARY tokens
    """

    def __init__(self, verbose: bool = False, line_boundaries: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: Report progress at INFO level
            line_boundaries: Ask the lexer to mark the end of every
                             instruction line explicitly
        """
        self._verbose = verbose
        self._line_boundaries = line_boundaries
        self._codegen = CodeGenerator()
        self._tokens: list[Token] = []
        self._symbols: Optional[SymbolTable] = None
        self._instructions: list[Instruction] = []

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[str]:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Scan source into tokens (lexer)
        2. Register labels, then variables (symbol table, pass one)
        3. Resolve tokens into instruction records (parser, pass two)
        4. Encode records into words (code generator)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            One 16-character binary word per instruction

        Raises:
            AssemblerError: On the first error found; nothing is produced
        """
        self._codegen = CodeGenerator()
        self._tokens = []
        self._symbols = None
        self._instructions = []

        tokens = scan(source, filename, line_boundaries=self._line_boundaries)
        self._log(f"Scanned {len(tokens)} tokens from {filename}")

        symbols = build_symbol_table(tokens, source)
        self._log(
            f"Symbol table: {len(symbols.labels())} labels, "
            f"{len(symbols.variables())} variables"
        )

        instructions = Parser(tokens, symbols, source).parse()
        words = self._codegen.generate(instructions, symbols, source)
        self._log(f"Generated {len(words)} words")

        self._tokens = tokens
        self._symbols = symbols
        self._instructions = instructions
        return words

    def assemble_file(self, filepath: str | Path) -> list[str]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            One 16-character binary word per instruction

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._log(f"Assembling {filepath}...")

        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> list[str]:
        return self._codegen.get_words()

    def get_output(self, separator: str = "\n") -> str:
        """
        Get the program image as one string.

        Args:
            separator: Text placed between words

        Returns:
            Words joined by separator, without a trailing separator
        """
        return self._codegen.get_output(separator)

    def get_tokens(self) -> list[Token]:
        return list(self._tokens)

    def get_instructions(self) -> list[Instruction]:
        return list(self._instructions)

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping every symbol name, predefined ones
            included, to its address
        """
        return self._codegen.get_symbols()

    def get_symbol_table(self) -> Optional[SymbolTable]:
        return self._symbols

    def get_listing(self) -> str:
        return self._codegen.get_listing()

    def write_hack(self, filepath: str | Path, separator: str = "\n") -> None:
        """
        Write the program image.

        Args:
            filepath: Output file path
            separator: Line separator written after every word
        """
        self._codegen.write_hack(filepath, separator)
        self._log(f"Wrote {len(self.get_words())} words to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        The listing file shows:
        - ROM addresses
        - Generated words
        - Source lines
        - Labels and variables
        """
        self._codegen.write_listing(filepath)
        self._log(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        self._codegen.write_symbols(filepath)
        self._log(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>", separator: str = "\n") -> str:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        separator: Text placed between words

    Returns:
        The program image, words joined by separator

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    asm.assemble_string(source, filename)
    return asm.get_output(separator)


def assemble_file(filepath: str | Path, separator: str = "\n") -> str:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        separator: Text placed between words

    Returns:
        The program image, words joined by separator

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    asm.assemble_file(filepath)
    return asm.get_output(separator)
