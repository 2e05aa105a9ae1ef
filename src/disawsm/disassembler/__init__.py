"""
disawsm Disassembler Package
============================

The two-stage 6502 disassembly pipeline:

- classifier: decides for every byte whether it is code or data by
  following control flow from the user's entrypoints
- formatter: turns the classified bytes into instruction and data lines
  with labels, comments and cross-references
- patterns: known instruction sequences usable as extra code seeds
- exporter: renders lines as an assembler source file
- engine: runs the stages with the loaded lookup tables

Usage:
    from disawsm.disassembler import Entrypoint, disassemble

    for line in disassemble(0xC000, data, [Entrypoint(0xC000)]):
        print(line)
"""

from .addressing import parse_address, relative_target, to_hex_byte, to_hex_word
from .classifier import (
    ByteEntry,
    ByteState,
    ByteTable,
    Entrypoint,
    EntrypointKind,
    classify,
)
from .formatter import OutputLine, format_program
from .patterns import BytePattern, find_pattern_matches
from .exporter import format_as_assembly
from .engine import analyze, check_program_size, disassemble

__all__ = [
    "parse_address",
    "relative_target",
    "to_hex_byte",
    "to_hex_word",
    "ByteEntry",
    "ByteState",
    "ByteTable",
    "Entrypoint",
    "EntrypointKind",
    "classify",
    "OutputLine",
    "format_program",
    "BytePattern",
    "find_pattern_matches",
    "format_as_assembly",
    "analyze",
    "check_program_size",
    "disassemble",
]
