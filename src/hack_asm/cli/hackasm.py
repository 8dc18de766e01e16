"""
hackasm - Hack Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Hack assembler.

Usage Examples
--------------
Basic assembly (writes Max.hack next to the source):
    $ hackasm Max.asm

With output file:
    $ hackasm Max.asm -o build/Max.hack

Generate listing and symbol files:
    $ hackasm Max.asm -l Max.lst -s Max.sym

Windows line endings (or set HACKASM_LINE_ENDING=crlf):
    $ hackasm --line-ending crlf Max.asm

Print the words instead of writing a file:
    $ hackasm -p Max.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from hack_asm import __version__
from hack_asm.assembler import Assembler
from hack_asm.cli.errors import handle_cli_exception

LINE_ENDINGS = {
    "lf": "\n",
    "crlf": "\r\n",
}


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .hack file (default: input.hack)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-p", "--print", "print_words",
    is_flag=True,
    help="Print the words to stdout instead of writing the .hack file",
)
@click.option(
    "--line-ending",
    type=click.Choice(sorted(LINE_ENDINGS), case_sensitive=False),
    default="lf",
    show_default=True,
    envvar="HACKASM_LINE_ENDING",
    help="Separator written after each word (env: HACKASM_LINE_ENDING)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    print_words: bool,
    line_ending: str,
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly source into Hack machine code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        hackasm Max.asm              # Outputs Max.hack
        hackasm Max.asm -o out.hack  # Specify output file
        hackasm -p Max.asm           # Print words to stdout
    """
    setup_logging(verbose)

    if print_words and output is not None:
        click.echo("Error: -o/--output and -p/--print are mutually exclusive", err=True)
        raise SystemExit(2)

    separator = LINE_ENDINGS[line_ending.lower()]
    output_file = output if output is not None else input_file.with_suffix(".hack")

    asm = Assembler(verbose=verbose)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        words = asm.assemble_file(input_file)

        if print_words:
            for word in words:
                click.echo(word)
        else:
            asm.write_hack(output_file, separator)
            if verbose:
                click.echo(f"Wrote {len(words)} words to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            table = asm.get_symbol_table()
            click.echo(f"Assembly complete: {len(words)} instructions")
            click.echo(
                f"Defined {len(table.labels())} labels, "
                f"{len(table.variables())} variables"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
