"""
Unified CLI Error Handling
==========================

Maps failures of the disawsm commands to exit codes:

- 1: the input itself is bad. A PRG shorter than its two-byte load
  address, a malformed or unsupported .dis project, a program that runs
  past $FFFF, an invalid label name or overlay address, or unreadable
  lookup tables. These are all DisawsmError subclasses.
- 2: the command line is bad. An unparsable --address or entrypoint,
  an unknown --syntax, --raw without a load address, or an input file
  that does not exist or cannot be opened.
- 3: anything else is a bug and is reported as an internal error, with
  a traceback under --verbose.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes of the disawsm commands."""
    SUCCESS = 0
    DISASSEMBLY_ERROR = 1  # Bad PRG, .dis project, label or program size
    INVALID_ARGS = 2       # Bad address or syntax option, missing input file
    INTERNAL_ERROR = 3     # Unexpected exception


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for the CLI commands.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Project")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from disawsm.errors import DisawsmError

    if isinstance(error, DisawsmError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.DISASSEMBLY_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, FileNotFoundError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, PermissionError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
