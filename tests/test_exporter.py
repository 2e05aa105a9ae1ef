"""
Tests for assembly source export.
"""

from datetime import date

from disawsm.cpu import OPCODE_TABLE
from disawsm.disassembler.classifier import Entrypoint, classify
from disawsm.disassembler.exporter import (
    COMMENT_COLUMN,
    INDENT,
    format_as_assembly,
)
from disawsm.disassembler.formatter import format_program
from disawsm.syntax import DEFAULT_SYNTAX, AssemblerSyntax

TODAY = date(2025, 1, 31)

# lda #$00 / sta $d020 / bne $c000
PROGRAM = bytes([0xA9, 0x00, 0x8D, 0x20, 0xD0, 0xD0, 0xF9])


def export(syntax=DEFAULT_SYNTAX, **kwargs):
    table = classify(0xC000, PROGRAM, [Entrypoint(0xC000)], OPCODE_TABLE)
    lines = format_program(
        table,
        OPCODE_TABLE,
        directive_prefix=syntax.directive_prefix,
        memory_map={0xD020: "Border color"},
    )
    return format_as_assembly(lines, 0xC000, syntax, today=TODAY, **kwargs)


class TestFormatAsAssembly:

    def test_full_output(self):
        text = export(filename="game.prg")
        assert text.splitlines() == [
            ";" + "=" * 58,
            "; game.prg",
            "; disassembled with disawsm on 2025-01-31",
            ";" + "=" * 58,
            "",
            "* = $c000",
            "",
            "",
            "_c000".ljust(COMMENT_COLUMN) + "; XREF: $c005",
            INDENT + "lda #$00",
            (INDENT + "sta $d020").ljust(COMMENT_COLUMN) + "; Border color",
            INDENT + "bne _c000",
        ]

    def test_unknown_filename(self):
        assert "; unknown" in export().splitlines()

    def test_comments_hidden(self):
        text = export(show_comments=False)
        assert "XREF" not in text
        assert "Border color" not in text
        assert INDENT + "sta $d020" in text.splitlines()

    def test_header_comments_kept_without_comments(self):
        assert export(show_comments=False).startswith(";=")

    def test_kickass_syntax(self):
        kickass = AssemblerSyntax("KickAssembler", "//", ":", ".")
        lines = export(kickass).splitlines()
        assert lines[0].startswith("//=")
        assert lines[8] == "_c000:".ljust(COMMENT_COLUMN) + "// XREF: $c005"
        assert lines[10].endswith("// Border color")

    def test_data_directive(self):
        table = classify(0x1000, bytes([1, 2]), [], OPCODE_TABLE)
        lines = format_program(table, OPCODE_TABLE, directive_prefix=".")
        text = format_as_assembly(lines, 0x1000, DEFAULT_SYNTAX, today=TODAY)
        assert text.splitlines()[-1] == INDENT + ".byte $01, $02"

    def test_user_comment_column(self):
        table = classify(0x1000, bytes([0x60]), [Entrypoint(0x1000)], OPCODE_TABLE)
        lines = format_program(table, OPCODE_TABLE, comments={0x1000: "done"})
        text = format_as_assembly(lines, 0x1000, DEFAULT_SYNTAX, today=TODAY)
        line = (INDENT + "rts").ljust(COMMENT_COLUMN) + "; done"
        assert line in text.splitlines()

    def test_long_label_keeps_separator(self):
        """A label wider than the comment column is still followed by a space."""
        name = "a_really_long_label_name_for_the_main_loop"
        table = classify(0x1000, bytes([0xD0, 0xFE]), [Entrypoint(0x1000)], OPCODE_TABLE)
        lines = format_program(table, OPCODE_TABLE, labels={0x1000: name})
        text = format_as_assembly(lines, 0x1000, DEFAULT_SYNTAX, today=TODAY)
        assert f"{name} ; XREF: $1000" in text.splitlines()
