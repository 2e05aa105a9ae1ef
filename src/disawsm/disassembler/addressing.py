"""
Hex and Addressing Helpers
==========================

Small helpers shared by the classifier, the formatter and the CLI:
hex formatting, little-endian word assembly, relative branch arithmetic
and address parsing.

All hex produced here is lowercase, matching the opcode templates.
"""

from typing import Iterable

from disawsm.errors import InvalidAddressError


ADDRESS_SPACE = 0x10000


def to_hex_byte(value: int) -> str:
    """Format a byte as two lowercase hex digits ("0a")."""
    return f"{value & 0xFF:02x}"


def to_hex_word(value: int) -> str:
    """Format a 16-bit value as four lowercase hex digits ("c000")."""
    return f"{value & 0xFFFF:04x}"


def word_from_bytes(low: int, high: int) -> int:
    """Combine two operand bytes little-endian: (high << 8) | low."""
    return ((high & 0xFF) << 8) | (low & 0xFF)


def relative_target(offset: int, pc_after: int) -> int:
    """
    Compute the destination of a relative branch.

    The displacement is a signed 8-bit value measured from the address of
    the instruction that follows the branch. Offsets of 128 and above are
    negative (offset - 256).

    Example:
        >>> hex(relative_target(0x05, 0x1002))
        '0x1007'
        >>> hex(relative_target(0xFE, 0x1002))
        '0x1000'
    """
    displacement = offset - 256 if offset >= 0x80 else offset
    return (pc_after + displacement) & 0xFFFF


def in_program(address: int, start: int, length: int) -> bool:
    """Return True if address falls within [start, start + length)."""
    return start <= address < start + length


def format_address_list(addresses: Iterable[int]) -> str:
    """Format addresses as a sorted, de-duplicated "$xxxx, $yyyy" list."""
    return ", ".join(f"${to_hex_word(a)}" for a in sorted(set(addresses)))


def parse_address(text: str) -> int:
    """
    Parse an address written as "0xC000", "$C000" or decimal "49152".

    Raises:
        InvalidAddressError: If the text is not a number or falls outside
            $0000-$FFFF
    """
    cleaned = text.strip()
    try:
        if cleaned.lower().startswith("0x"):
            value = int(cleaned, 16)
        elif cleaned.startswith("$"):
            value = int(cleaned[1:], 16)
        else:
            value = int(cleaned)
    except ValueError:
        raise InvalidAddressError(text) from None

    validate_address(value)
    return value


def validate_address(address: int) -> int:
    """Check that an address lies in the 16-bit address space."""
    if isinstance(address, bool) or not isinstance(address, int):
        raise InvalidAddressError(address)
    if not 0 <= address < ADDRESS_SPACE:
        raise InvalidAddressError(address)
    return address
