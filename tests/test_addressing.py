"""
Tests for hex formatting, branch arithmetic and address parsing.
"""

import pytest

from disawsm.disassembler.addressing import (
    format_address_list,
    in_program,
    parse_address,
    relative_target,
    to_hex_byte,
    to_hex_word,
    validate_address,
    word_from_bytes,
)
from disawsm.errors import InvalidAddressError


class TestHexFormatting:

    def test_lowercase_padded(self):
        assert to_hex_byte(0x0A) == "0a"
        assert to_hex_word(0xC000) == "c000"
        assert to_hex_word(0x42) == "0042"

    def test_word_little_endian(self):
        assert word_from_bytes(0x20, 0xD0) == 0xD020

    def test_address_list_sorted_and_unique(self):
        assert format_address_list([0x1010, 0x1000, 0x1010]) == "$1000, $1010"


class TestRelativeTarget:
    """Branch displacement arithmetic."""

    def test_forward(self):
        assert relative_target(0x05, 0x1002) == 0x1007

    def test_backward(self):
        assert relative_target(0xFE, 0x1002) == 0x1000

    def test_extremes(self):
        assert relative_target(0x7F, 0x1002) == 0x1081
        assert relative_target(0x80, 0x1002) == 0x0F82

    def test_wraps_at_address_space(self):
        assert relative_target(0x10, 0xFFF8) == 0x0008
        assert relative_target(0xF0, 0x0005) == 0xFFF5


class TestAddressParsing:

    @pytest.mark.parametrize("text,expected", [
        ("0xC000", 0xC000),
        ("$c000", 0xC000),
        ("49152", 0xC000),
        (" 0x0801 ", 0x0801),
        ("0", 0),
        ("$FFFF", 0xFFFF),
    ])
    def test_valid(self, text, expected):
        assert parse_address(text) == expected

    @pytest.mark.parametrize("text", ["", "xyz", "$", "0x10000", "-1", "70000"])
    def test_invalid(self, text):
        with pytest.raises(InvalidAddressError):
            parse_address(text)

    def test_validate_rejects_non_int(self):
        with pytest.raises(InvalidAddressError):
            validate_address("0x1000")
        with pytest.raises(InvalidAddressError):
            validate_address(True)

    def test_in_program(self):
        assert in_program(0x1000, 0x1000, 4)
        assert in_program(0x1003, 0x1000, 4)
        assert not in_program(0x1004, 0x1000, 4)
        assert not in_program(0x0FFF, 0x1000, 4)
