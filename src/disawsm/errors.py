"""
disawsm Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from DisawsmError, allowing callers to catch every
disawsm-related error with a single except clause if desired.

Exception Hierarchy
-------------------
DisawsmError (base)
├── TableLoadError - a bundled lookup table could not be read or parsed
├── OverlayError (label / comment / entrypoint stores)
│   ├── InvalidLabelError - label name rejected by the naming rule
│   └── InvalidAddressError - address outside the 16-bit address space
├── ProjectError (.dis project records)
│   └── ProjectFormatError - malformed or incomplete project record
└── ProgramLoadError (program images)
    ├── PRGFormatError - file too short to hold a PRG load address
    └── ProgramSizeError - program does not fit in 64 KiB

Note that the classifier and formatter themselves never raise: unknown or
illegal opcodes degrade to data and out-of-range references are ignored.
Errors only surface at the boundaries where user input enters the system.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class DisawsmError(Exception):
    """
    Base exception for all disawsm errors.

        try:
            record = load_project("game.dis")
        except DisawsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Table Loading
# =============================================================================

class TableLoadError(DisawsmError):
    """
    A bundled JSON table (memory map, patterns, syntaxes) is unreadable.

    Attributes:
        table: Name of the resource that failed to load
        reason: Description of the underlying problem
    """

    def __init__(self, table: str, reason: str):
        self.table = table
        self.reason = reason
        super().__init__(f"cannot load table '{table}': {reason}")


# =============================================================================
# Overlay Exceptions
# =============================================================================

class OverlayError(DisawsmError):
    """Base exception for label, comment and entrypoint store errors."""
    pass


class InvalidLabelError(OverlayError):
    """
    Label name does not follow the naming rule.

    Names must start with a letter or underscore, followed by letters,
    digits, underscores or hyphens.

    Example:
        overlay.set(0xC000, "1st_loop")  # Error: starts with a digit
    """

    def __init__(self, name: str, address: Optional[int] = None):
        self.name = name
        self.address = address
        where = f" at ${address:04X}" if address is not None else ""
        super().__init__(f"invalid label name '{name}'{where}")


class InvalidAddressError(OverlayError):
    """Address is outside the 6502 address space ($0000-$FFFF)."""

    def __init__(self, address: object):
        self.address = address
        super().__init__(f"address {address!r} is outside $0000-$FFFF")


# =============================================================================
# Project Exceptions
# =============================================================================

class ProjectError(DisawsmError):
    """Base exception for .dis project handling errors."""
    pass


class ProjectFormatError(ProjectError):
    """
    Invalid project record.

    Raised when reading a project file that:
    - is not valid JSON
    - lacks the version, name or bytes fields
    - holds byte values outside 0-255
    - holds an unknown entrypoint type or an invalid label name
    """
    pass


# =============================================================================
# Program Loading Exceptions
# =============================================================================

class ProgramLoadError(DisawsmError):
    """Base exception for program image loading errors."""
    pass


class PRGFormatError(ProgramLoadError):
    """
    Invalid PRG file.

    A PRG file starts with a two-byte little-endian load address, so
    anything shorter than two bytes cannot be a PRG file.
    """
    pass


class ProgramSizeError(ProgramLoadError):
    """
    Program image does not fit in the 6502 address space.

    Raised when the image is larger than 64 KiB or when the load address
    plus the image length runs past $FFFF.
    """

    def __init__(self, start_address: int, length: int):
        self.start_address = start_address
        self.length = length
        super().__init__(
            f"program of {length} bytes at ${start_address:04X} "
            f"does not fit below $10000"
        )
