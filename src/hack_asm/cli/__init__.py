"""
hack_asm Command-Line Interface
===============================

This package provides the command-line tool for the assembler:

- **hackasm**: Hack assembler (.asm -> .hack)

The tool is a Click-based CLI application with help text and
consistent error reporting.
"""

__all__ = ["hackasm"]
