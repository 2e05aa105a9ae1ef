"""
Disassembly Pipeline
====================

Glue between the lookup tables and the two pure stages:

    bytes + entrypoints --classify--> ByteTable --format--> List[OutputLine]

analyze() runs the classifier with the tables' opcodes, optionally adding
pattern-matcher seeds. disassemble() runs both stages in one call.

Usage:
    from disawsm.disassembler import Entrypoint, disassemble

    lines = disassemble(0xC000, data, [Entrypoint(0xC000)])
"""

from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional
import logging

from disawsm.disassembler.addressing import ADDRESS_SPACE
from disawsm.disassembler.classifier import ByteTable, Entrypoint, classify
from disawsm.disassembler.formatter import OutputLine, format_program
from disawsm.disassembler.patterns import find_pattern_matches
from disawsm.errors import ProgramSizeError
from disawsm.syntax import DEFAULT_SYNTAX, AssemblerSyntax

if TYPE_CHECKING:
    from disawsm.tables.loader import Tables

logger = logging.getLogger(__name__)


def check_program_size(start: int, length: int) -> None:
    """
    Ensure a program fits in the address space.

    Raises:
        ProgramSizeError: If the program is larger than 64 KiB or runs
            past $FFFF
    """
    if length > ADDRESS_SPACE or start + length > ADDRESS_SPACE:
        raise ProgramSizeError(start, length)


def analyze(
    start: int,
    data: bytes,
    entrypoints: Iterable[Entrypoint],
    tables: "Tables",
    use_patterns: bool = False,
) -> ByteTable:
    """
    Classify a program using the loaded tables.

    Args:
        start: Load address
        data: Program bytes
        entrypoints: User seeds
        tables: Loaded lookup tables
        use_patterns: Add pattern-matcher hits as extra code seeds

    Returns:
        Classified ByteTable
    """
    check_program_size(start, len(data))

    seeds: List[int] = []
    if use_patterns:
        seeds = find_pattern_matches(data, tables.patterns)
        logger.debug(f"Pattern matcher found {len(seeds)} candidate seeds")

    return classify(start, data, entrypoints, tables.opcodes, pattern_seeds=seeds)


def disassemble(
    start: int,
    data: bytes,
    entrypoints: Iterable[Entrypoint],
    tables: Optional["Tables"] = None,
    syntax: AssemblerSyntax = DEFAULT_SYNTAX,
    labels: Optional[Mapping[int, str]] = None,
    comments: Optional[Mapping[int, str]] = None,
    label_prefix: str = "_",
    use_patterns: bool = False,
) -> List[OutputLine]:
    """
    Classify and format a program in one call.

    When tables is omitted the bundled tables are loaded (once per process).
    """
    if tables is None:
        from disawsm.tables.loader import get_tables
        tables = get_tables()

    table = analyze(start, data, entrypoints, tables, use_patterns=use_patterns)
    return format_program(
        table,
        tables.opcodes,
        directive_prefix=syntax.directive_prefix,
        labels=labels,
        comments=comments,
        label_prefix=label_prefix,
        memory_map=tables.memory_map,
    )
