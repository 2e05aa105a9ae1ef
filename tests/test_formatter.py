"""
Unit Tests for the Program Formatter
====================================

Test coverage includes:
- Operand substitution for every operand shape
- Labels for targets (synthesized and from the overlay)
- Data runs: width, early stops at targets and code
- Cross-reference summaries and comments
- Totality: every byte lands in exactly one line
"""

import random

import pytest

from disawsm.cpu import OPCODE_TABLE
from disawsm.disassembler.classifier import Entrypoint, EntrypointKind, classify
from disawsm.disassembler.formatter import (
    DATA_BYTES_PER_LINE,
    OutputLine,
    format_program,
    format_xref,
    label_for,
)


def render(data, *entrypoints, start=0x1000, **kwargs):
    eps = [e if isinstance(e, Entrypoint) else Entrypoint(e) for e in entrypoints]
    table = classify(start, bytes(data), eps, OPCODE_TABLE)
    return format_program(table, OPCODE_TABLE, **kwargs)


def texts(lines):
    return [line.text for line in lines]


# =============================================================================
# Helpers
# =============================================================================

class TestHelpers:

    def test_label_synthesized(self):
        assert label_for(0xC000, {}, "_") == "_c000"
        assert label_for(0x0801, {}, "L") == "L0801"

    def test_label_from_overlay(self):
        assert label_for(0xC000, {0xC000: "main"}, "_") == "main"

    def test_xref_summary(self):
        assert format_xref({0x1010, 0x1000}) == "XREF: $1000, $1010"
        assert format_xref(set()) is None


# =============================================================================
# Code Lines
# =============================================================================

class TestCodeLines:

    def test_immediate(self):
        assert texts(render([0xA9, 0x05, 0x60], 0x1000)) == ["lda #$05", "rts"]

    def test_zero_page(self):
        assert texts(render([0x85, 0xFB, 0x60], 0x1000)) == ["sta $fb", "rts"]

    def test_indirect_indexed(self):
        assert texts(render([0xB1, 0xFB, 0x60], 0x1000)) == ["lda ($fb),y", "rts"]

    def test_external_absolute_stays_numeric(self):
        lines = render([0x8D, 0x20, 0xD0, 0x60], 0x1000)
        assert lines[0].text == "sta $d020"

    def test_internal_absolute_becomes_label(self):
        lines = render([0xAD, 0x04, 0x10, 0x60, 0x99], 0x1000)
        assert texts(lines) == ["lda _1004", "rts", "!byte $99"]
        assert lines[2].label == "_1004"

    def test_absolute_indexed_label(self):
        lines = render([0xBD, 0x04, 0x10, 0x60, 0x99], 0x1000)
        assert lines[0].text == "lda _1004,x"

    def test_indirect_jump_keeps_pointer(self):
        assert render([0x6C, 0x14, 0x03], 0x1000)[0].text == "jmp ($0314)"
        assert render([0x6C, 0x03, 0x10, 0x60], 0x1000)[0].text == "jmp ($1003)"

    def test_branch_uses_label(self):
        lines = render([0xD0, 0xFE, 0x60], 0x1000)
        assert lines[0].text == "bne _1000"
        assert lines[0].label == "_1000"
        assert lines[0].xref == "XREF: $1000"

    def test_branch_out_of_range_still_labeled(self):
        assert render([0xF0, 0x40, 0x60], 0x1000)[0].text == "beq _1042"

    def test_overlay_label_used_everywhere(self):
        data = [0x20, 0x04, 0x10, 0x60, 0x60]
        lines = render(data, 0x1000, labels={0x1004: "sub"})
        assert lines[0].text == "jsr sub"
        assert lines[-1].label == "sub"

    def test_label_prefix(self):
        lines = render([0xD0, 0xFE], 0x1000, label_prefix="L")
        assert lines[0].text == "bne L1000"
        assert lines[0].label == "L1000"

    def test_raw_bytes(self):
        lines = render([0x20, 0x03, 0x10, 0x60], 0x1000)
        assert lines[0].raw_bytes == (0x20, 0x03, 0x10)
        assert lines[0].size == 3
        assert not lines[0].is_data

    def test_user_marked_illegal_renders_as_code(self):
        assert texts(render([0xA7, 0x10, 0x60], 0x1000)) == ["lax $10", "rts"]


# =============================================================================
# Data Lines
# =============================================================================

class TestDataLines:

    def test_unreached_bytes_are_data(self):
        lines = render([1, 2, 3])
        assert texts(lines) == ["!byte $01, $02, $03"]
        assert lines[0].is_data

    def test_run_width(self):
        lines = render(range(20))
        assert [line.size for line in lines] == [DATA_BYTES_PER_LINE, DATA_BYTES_PER_LINE, 4]

    def test_directive_prefix(self):
        assert render([0x42], directive_prefix=".")[0].text == ".byte $42"

    def test_run_stops_before_target(self):
        data = [0x4C, 0x05, 0x10, 0x01, 0x02, 0x60]
        lines = render(data, 0x1000)
        assert texts(lines) == ["jmp _1005", "!byte $01, $02", "rts"]
        assert lines[2].label == "_1005"
        assert lines[2].xref == "XREF: $1000"

    def test_illegal_fall_through(self):
        """LDA #$05 / $FF / $60: the illegal byte is a line of its own."""
        lines = render([0xA9, 0x05, 0xFF, 0x60], 0x1000)
        assert texts(lines) == ["lda #$05", "!byte $ff", "!byte $60"]

    def test_unknown_opcode_data(self):
        assert texts(render([0x02, 0x60], 0x1000)) == ["!byte $02", "!byte $60"]

    def test_operand_target_splits_instruction(self):
        """A jump into the middle of an instruction gives the target its own line."""
        lines = render([0xAD, 0xA7, 0x10, 0x4C, 0x01, 0x10], 0x1000)
        by_address = {line.address: line for line in lines}
        assert by_address[0x1000].text == "!byte $ad"
        assert by_address[0x1001].label == "_1001"
        assert by_address[0x1001].xref == "XREF: $1003"


# =============================================================================
# Call Scenario
# =============================================================================

class TestCallScenario:

    def test_lines(self, scenario_a):
        lines = render(scenario_a, 0x1000)
        assert lines[0].text == "jsr _1050"
        assert lines[1].text == "ora ($02,x)"
        assert lines[2].text == "!byte $03"
        assert lines[-2].text == "lda #$42"
        assert lines[-2].label == "_1050"
        assert lines[-2].xref == "XREF: $1000"
        assert lines[-1].text == "rts"

    def test_filler_lines(self, scenario_a):
        lines = render(scenario_a, 0x1000)
        filler = [line for line in lines if 0x1006 <= line.address < 0x1050]
        assert sum(line.size for line in filler) == 0x4A
        assert all(line.is_data for line in filler)
        assert filler[0].text == "!byte $ff, $ff, $ff, $ff, $ff, $ff, $ff, $ff"

    def test_jump_variant_keeps_bytes_as_data(self, scenario_a):
        data = bytes([0x4C]) + scenario_a[1:]
        lines = render(data, 0x1000)
        assert lines[0].text == "jmp _1050"
        assert lines[1].text.startswith("!byte $01, $02, $03")


# =============================================================================
# Comments
# =============================================================================

class TestComments:

    def test_memory_map_comment(self):
        lines = render([0x8D, 0x20, 0xD0, 0x60], 0x1000, memory_map={0xD020: "Border color"})
        assert lines[0].comment == "Border color"
        assert lines[1].comment is None

    def test_user_comment_overrides_memory_map(self):
        lines = render(
            [0x8D, 0x20, 0xD0, 0x60], 0x1000,
            memory_map={0xD020: "Border color"},
            comments={0x1000: "flash border"},
        )
        assert lines[0].comment == "flash border"

    def test_comment_on_data_line(self):
        lines = render([1, 2], comments={0x1000: "table"})
        assert lines[0].comment == "table"

    def test_memory_map_ignored_for_data(self):
        lines = render([0x8D, 0x20, 0xD0], memory_map={0xD020: "Border color"})
        assert lines[0].comment is None


# =============================================================================
# Output Line
# =============================================================================

class TestOutputLine:

    def test_listing_format(self):
        line = OutputLine(0xC000, "lda #$00", (0xA9, 0x00))
        assert str(line) == "$C000: A9 00       lda #$00"

    def test_listing_with_label_and_comment(self):
        line = OutputLine(0xC000, "rts", (0x60,), label="done", comment="back")
        text = str(line)
        assert text.startswith("done:\n$C000: 60")
        assert text.endswith("; back")

    def test_to_dict(self):
        line = OutputLine(0xC000, "!byte $01", (0x01,), is_data=True)
        data = line.to_dict()
        assert data["address_int"] == 0xC000
        assert data["bytes"] == ["$01"]
        assert data["is_data"] is True


# =============================================================================
# Properties
# =============================================================================

class TestProperties:

    @pytest.mark.parametrize("seed", range(20))
    def test_every_byte_in_one_line(self, seed):
        rng = random.Random(seed)
        data = bytes(rng.randrange(256) for _ in range(200))
        lines = render(data, 0x1000, 0x1030)
        address = 0x1000
        for line in lines:
            assert line.address == address
            address += line.size
        assert address == 0x1000 + len(data)

    @pytest.mark.parametrize("seed", range(20))
    def test_every_target_labeled(self, seed):
        rng = random.Random(seed)
        data = bytes(rng.randrange(256) for _ in range(200))
        eps = [Entrypoint(0x1000), Entrypoint(0x1050, EntrypointKind.DATA)]
        table = classify(0x1000, data, eps, OPCODE_TABLE)
        lines = format_program(table, OPCODE_TABLE)
        labeled = {line.address: line.label for line in lines if line.label}
        targets = {entry.address for entry in table if entry.is_target}
        assert set(labeled) == targets
        for address, label in labeled.items():
            assert label == f"_{address:04x}"

    def test_deterministic(self, scenario_a):
        assert render(scenario_a, 0x1000) == render(scenario_a, 0x1000)
