"""
disawsm - 6502 Code/Data Disassembler
=====================================

Disassembles 6502 binaries (Commodore 64 PRG files and raw images) into
assembler source. Starting from user-chosen entrypoints, it follows control
flow to decide which bytes are instructions and which are data, then renders
instructions, data directives, labels, comments and cross-references.

Main Components
---------------
- **cpu**: 6502 opcode table, addressing modes and control-flow kinds
- **disassembler**: byte classifier, program formatter, pattern matcher
  and assembly exporter
- **tables**: bundled memory map, patterns and assembler syntaxes, loaded
  once per process
- **project**: entrypoint/label/comment overlays and .dis project files
- **session**: a program plus overlays with incremental recomputation

Quick Start
-----------
Disassemble a PRG file:
    >>> from disawsm import DisassemblySession, get_tables, load_prg
    >>> session = DisassemblySession(get_tables())
    >>> session.load_program(load_prg("game.prg"))
    >>> print(session.export_assembly())

Or use the command-line tool:
    $ disawsm disasm game.prg -e 0xc100 -o game.asm
    $ disawsm save game.prg -e 0xc100 -l 0xc100=irq -o game.dis
    $ disawsm export game.dis --syntax kickass

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from disawsm.errors import (
    DisawsmError,
    TableLoadError,
    OverlayError,
    InvalidLabelError,
    InvalidAddressError,
    ProjectError,
    ProjectFormatError,
    ProgramLoadError,
    PRGFormatError,
    ProgramSizeError,
)
from disawsm.cpu import AddressingMode, FlowKind, OpcodeInfo, OPCODE_TABLE
from disawsm.disassembler import (
    ByteState,
    ByteTable,
    Entrypoint,
    EntrypointKind,
    OutputLine,
    analyze,
    classify,
    disassemble,
    format_as_assembly,
    format_program,
)
from disawsm.tables import Tables, TableLoader, get_tables, get_tables_async
from disawsm.syntax import AssemblerSyntax, DEFAULT_SYNTAX, resolve_syntax
from disawsm.config import Settings
from disawsm.project import (
    ProjectRecord,
    load_binary,
    load_prg,
    load_project,
    project_filename,
    save_project,
)
from disawsm.session import DisassemblySession

__all__ = [
    "__version__",
    # Errors
    "DisawsmError",
    "TableLoadError",
    "OverlayError",
    "InvalidLabelError",
    "InvalidAddressError",
    "ProjectError",
    "ProjectFormatError",
    "ProgramLoadError",
    "PRGFormatError",
    "ProgramSizeError",
    # CPU
    "AddressingMode",
    "FlowKind",
    "OpcodeInfo",
    "OPCODE_TABLE",
    # Pipeline
    "ByteState",
    "ByteTable",
    "Entrypoint",
    "EntrypointKind",
    "OutputLine",
    "analyze",
    "classify",
    "disassemble",
    "format_as_assembly",
    "format_program",
    # Tables and settings
    "Tables",
    "TableLoader",
    "get_tables",
    "get_tables_async",
    "AssemblerSyntax",
    "DEFAULT_SYNTAX",
    "resolve_syntax",
    "Settings",
    # Projects
    "ProjectRecord",
    "load_binary",
    "load_prg",
    "load_project",
    "project_filename",
    "save_project",
    "DisassemblySession",
]
