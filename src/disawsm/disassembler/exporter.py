"""
Assembly Exporter
=================

Renders formatted output lines as an assembler source file:

    ;==========================================================
    ; game.prg
    ; disassembled with disawsm on 2025-01-31
    ;==========================================================

    * = $c000


    _c000                                   ; XREF: $c010
                lda #$00
                sta $d020                   ; Border color

Labels go on their own line preceded by a blank line, instructions are
indented 12 columns and comments start at column 40.
"""

from datetime import date
from typing import Iterable, List, Optional

from disawsm.disassembler.addressing import to_hex_word
from disawsm.disassembler.formatter import OutputLine
from disawsm.syntax import AssemblerSyntax

INDENT = " " * 12
COMMENT_COLUMN = 40
HEADER_RULE = "=" * 58


def _with_comment(text: str, comment: str, prefix: str) -> str:
    return f"{text.ljust(COMMENT_COLUMN - 1)} {prefix} {comment}"


def format_as_assembly(
    lines: Iterable[OutputLine],
    start: int,
    syntax: AssemblerSyntax,
    show_comments: bool = True,
    filename: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """
    Render output lines as assembler source text.

    Args:
        lines: Lines from format_program()
        start: Program load address for the "* = $xxxx" directive
        syntax: Comment prefix and label suffix to use
        show_comments: Include user, memory-map and XREF comments
        filename: Name shown in the header ("unknown" when omitted)
        today: Date shown in the header (defaults to the current date)

    Returns:
        Source text, lines joined with newlines
    """
    c = syntax.comment_prefix
    stamp = (today or date.today()).isoformat()

    output: List[str] = [
        f"{c}{HEADER_RULE}",
        f"{c} {filename or 'unknown'}",
        f"{c} disassembled with disawsm on {stamp}",
        f"{c}{HEADER_RULE}",
        "",
        f"* = ${to_hex_word(start)}",
        "",
    ]

    for line in lines:
        if line.label:
            output.append("")
            label_text = line.label + syntax.label_suffix
            if show_comments and line.xref:
                output.append(_with_comment(label_text, line.xref, c))
            else:
                output.append(label_text)

        instruction = INDENT + line.text
        if show_comments and line.comment:
            output.append(_with_comment(instruction, line.comment, c))
        else:
            output.append(instruction)

    return "\n".join(output)
