"""
Unit Tests for the 6502 Opcode Table
====================================

Covers the opcode descriptors the classifier and formatter rely on:
addressing modes, instruction lengths, control-flow categories and the
illegal-opcode flag.
"""

import pytest

from disawsm.cpu import (
    ABSOLUTE_MODES,
    AddressingMode,
    FlowKind,
    OPCODE_TABLE,
    get_opcode_info,
    infer_addressing_mode,
    infer_flow,
    is_legal_opcode,
)


# =============================================================================
# Table Contents
# =============================================================================

class TestOpcodeTable:
    """Tests for the master opcode table."""

    def test_documented_opcode_count(self):
        """The NMOS 6502 has 151 documented opcodes."""
        documented = [info for info in OPCODE_TABLE.values() if not info.illegal]
        assert len(documented) == 151

    def test_jam_opcodes_have_no_descriptor(self):
        """JAM opcodes halt the CPU and are not decodable."""
        for opcode in (0x02, 0x12, 0x22, 0x32, 0x42, 0x52, 0x62, 0x72, 0x92, 0xB2, 0xD2, 0xF2):
            assert get_opcode_info(opcode) is None

    def test_undocumented_opcodes_flagged(self):
        """Stable undocumented opcodes are present but flagged illegal."""
        info = get_opcode_info(0xA7)
        assert info is not None
        assert info.illegal
        assert info.mnemonic == "lax"
        assert not is_legal_opcode(0xA7)

    def test_isc_absolute_x(self):
        """$FF decodes as ISC abs,X (illegal, 3 bytes)."""
        info = get_opcode_info(0xFF)
        assert info.template == "isc $hhll,x"
        assert info.length == 3
        assert info.illegal

    def test_keys_match_opcode_field(self):
        for opcode, info in OPCODE_TABLE.items():
            assert info.opcode == opcode

    def test_templates_are_lowercase(self):
        for info in OPCODE_TABLE.values():
            assert info.template == info.template.lower()


# =============================================================================
# Addressing Modes and Lengths
# =============================================================================

class TestAddressingModes:
    """Tests for addressing mode inference and operand sizes."""

    @pytest.mark.parametrize("opcode,mode,length", [
        (0xEA, AddressingMode.IMPLIED, 1),
        (0x0A, AddressingMode.ACCUMULATOR, 1),
        (0xA9, AddressingMode.IMMEDIATE, 2),
        (0xA5, AddressingMode.ZERO_PAGE, 2),
        (0xB5, AddressingMode.ZERO_PAGE_X, 2),
        (0xB6, AddressingMode.ZERO_PAGE_Y, 2),
        (0xAD, AddressingMode.ABSOLUTE, 3),
        (0xBD, AddressingMode.ABSOLUTE_X, 3),
        (0xB9, AddressingMode.ABSOLUTE_Y, 3),
        (0x6C, AddressingMode.INDIRECT, 3),
        (0xA1, AddressingMode.INDEXED_INDIRECT, 2),
        (0xB1, AddressingMode.INDIRECT_INDEXED, 2),
        (0xD0, AddressingMode.RELATIVE, 2),
    ])
    def test_mode_and_length(self, opcode, mode, length):
        info = get_opcode_info(opcode)
        assert info.mode is mode
        assert info.length == length

    def test_indirect_not_absolute_family(self):
        """JMP ($hhll) names a pointer, not a direct reference."""
        assert AddressingMode.INDIRECT not in ABSOLUTE_MODES
        assert AddressingMode.ABSOLUTE_X.is_absolute

    def test_infer_prefers_specific_shapes(self):
        """($hhll) must not be read as $hhll, $hhll,x not as $hh,x."""
        assert infer_addressing_mode("jmp ($hhll)") is AddressingMode.INDIRECT
        assert infer_addressing_mode("lda $hhll,x") is AddressingMode.ABSOLUTE_X
        assert infer_addressing_mode("lda $hh,x") is AddressingMode.ZERO_PAGE_X

    def test_short_names(self):
        assert str(AddressingMode.ZERO_PAGE) == "zp"
        assert str(AddressingMode.RELATIVE) == "rel"


# =============================================================================
# Control Flow
# =============================================================================

class TestFlowKinds:
    """Tests for control-flow categories."""

    def test_jsr_is_call(self):
        assert get_opcode_info(0x20).flow is FlowKind.CALL

    def test_jmp_is_jump(self):
        assert get_opcode_info(0x4C).flow is FlowKind.JUMP
        assert get_opcode_info(0x6C).flow is FlowKind.JUMP

    def test_returns(self):
        assert get_opcode_info(0x60).flow is FlowKind.RETURN
        assert get_opcode_info(0x40).flow is FlowKind.RETURN

    def test_branches(self):
        for opcode in (0x10, 0x30, 0x50, 0x70, 0x90, 0xB0, 0xD0, 0xF0):
            assert get_opcode_info(opcode).flow is FlowKind.BRANCH

    def test_ordinary_instruction(self):
        assert infer_flow(0xA9, "lda #$hh") is FlowKind.NONE

    def test_flow_properties(self):
        assert FlowKind.CALL.transfers_control
        assert not FlowKind.CALL.ends_flow
        assert FlowKind.JUMP.ends_flow
        assert FlowKind.RETURN.ends_flow
        assert not FlowKind.RETURN.transfers_control
        assert not FlowKind.BRANCH.ends_flow
