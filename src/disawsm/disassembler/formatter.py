"""
Program Formatter
=================

Turns a classified ByteTable into an ordered list of output lines:
instructions, data directives, labels, comments and cross-reference
summaries. The formatter performs no flow analysis of its own; every
decision comes from the classification already stored in the table.

Line Types
----------
**Code lines** render the opcode template with its operand substituted:

- One-operand modes substitute the hex byte (``lda #$42``). Branches
  substitute the label of the computed target (``bne _c010``).
- Two-operand modes combine the operand little-endian. Absolute addresses
  inside the program become labels (``jsr _c100``); addresses outside keep
  their numeric form (``sta $d020``) so hardware references stay readable.
  Indirect jumps always keep the numeric pointer (``jmp ($0314)``).

**Data lines** hold up to 8 bytes (``!byte $01, $02, $03``). A run stops
early before any byte that is CODE or a target, so every referenced
address starts its own line and receives its label.

Every byte of the table ends up in exactly one line.

Usage:
    lines = format_program(table, OPCODE_TABLE, directive_prefix="!")
    for line in lines:
        print(line)
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from disawsm.cpu.mos6502 import FlowKind, OpcodeInfo
from disawsm.disassembler.addressing import (
    format_address_list,
    relative_target,
    to_hex_byte,
    to_hex_word,
    word_from_bytes,
)
from disawsm.disassembler.classifier import ByteState, ByteTable

DATA_BYTES_PER_LINE = 8


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class OutputLine:
    """
    One line of formatted output.

    Attributes:
        address: Address of the first byte on the line
        text: Instruction or data directive text
        raw_bytes: The bytes consumed by this line
        label: Label defined at this address (targets only)
        comment: User comment, or memory-map comment for code lines
        xref: "XREF: $xxxx, ..." summary, only on labeled lines
        is_data: True for data directive lines
    """
    address: int
    text: str
    raw_bytes: Tuple[int, ...]
    label: Optional[str] = None
    comment: Optional[str] = None
    xref: Optional[str] = None
    is_data: bool = False

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: BYTES  TEXT ; COMMENT"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes[:3])
        if len(self.raw_bytes) > 3:
            hex_bytes += " .."
        hex_bytes = hex_bytes.ljust(11)

        prefix = f"{self.label}:\n" if self.label else ""
        if self.comment:
            return f"{prefix}${self.address:04X}: {hex_bytes} {self.text:<24} ; {self.comment}"
        return f"{prefix}${self.address:04X}: {hex_bytes} {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:04X}",
            "address_int": self.address,
            "label": self.label,
            "text": self.text,
            "comment": self.comment,
            "xref": self.xref,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "is_data": self.is_data,
        }


# =============================================================================
# Labels, Comments and Cross-References
# =============================================================================

def label_for(address: int, labels: Mapping[int, str], label_prefix: str) -> str:
    """Return the overlay label for an address, or synthesize one."""
    name = labels.get(address)
    if name:
        return name
    return f"{label_prefix}{to_hex_word(address)}"


def format_xref(xrefs) -> Optional[str]:
    """Format referencing addresses as "XREF: $c010, $c050" (None if empty)."""
    if not xrefs:
        return None
    return f"XREF: {format_address_list(xrefs)}"


def _absolute_operand(table: ByteTable, index: int, info: OpcodeInfo) -> Optional[int]:
    if not info.mode.is_absolute or index + 2 >= len(table):
        return None
    return word_from_bytes(table[index + 1].value, table[index + 2].value)


def build_comment_map(
    table: ByteTable,
    opcodes: Mapping[int, OpcodeInfo],
    comments: Mapping[int, str],
    memory_map: Mapping[int, str],
) -> Dict[int, str]:
    """
    Merge memory-map auto-comments with user comments.

    A code instruction whose absolute operand names a known address gets
    that address's description. User comments override auto-comments at
    the same address.
    """
    merged: Dict[int, str] = {}

    if memory_map:
        for index, entry in enumerate(table):
            if not _renders_as_code(table, index, opcodes.get(entry.value)):
                continue
            operand = _absolute_operand(table, index, opcodes[entry.value])
            if operand is not None and operand in memory_map:
                merged[entry.address] = memory_map[operand]

    for address, text in comments.items():
        if text:
            merged[address] = text

    return merged


# =============================================================================
# Line Builders
# =============================================================================

def _renders_as_code(table: ByteTable, index: int, info: Optional[OpcodeInfo]) -> bool:
    """
    Decide whether the entry at index starts a code line.

    Besides the classification itself, the whole instruction must be
    present, all its operand bytes must be CODE, and none of them may be a
    target (a target needs its own labeled line).
    """
    entry = table[index]
    if entry.state is not ByteState.CODE or info is None:
        return False
    if info.illegal and not entry.user_marked:
        return False
    last = index + info.length
    if last > len(table):
        return False
    for operand in range(index + 1, last):
        if not table[operand].is_code or table[operand].is_target:
            return False
    return True


def _data_line(
    table: ByteTable,
    index: int,
    label: Optional[str],
    directive_prefix: str,
    comments: Mapping[int, str],
) -> Tuple[OutputLine, int]:
    first = table[index]
    values: List[int] = [first.value]
    position = index + 1

    while position < len(table) and len(values) < DATA_BYTES_PER_LINE:
        entry = table[position]
        if entry.is_target or entry.is_code or entry.state is not first.state:
            break
        values.append(entry.value)
        position += 1

    text = f"{directive_prefix}byte " + ", ".join(f"${to_hex_byte(v)}" for v in values)
    line = OutputLine(
        address=first.address,
        text=text,
        raw_bytes=tuple(values),
        label=label,
        comment=comments.get(first.address),
        xref=format_xref(first.xrefs) if label else None,
        is_data=True,
    )
    return line, position


def _code_text(
    table: ByteTable,
    index: int,
    info: OpcodeInfo,
    labels: Mapping[int, str],
    label_prefix: str,
) -> str:
    text = info.template
    operand_size = info.mode.operand_size

    if operand_size == 1:
        operand = table[index + 1].value
        if info.flow is FlowKind.BRANCH:
            target = relative_target(operand, table[index].address + info.length)
            text = text.replace("$hh", label_for(target, labels, label_prefix))
        else:
            text = text.replace("hh", to_hex_byte(operand))

    elif operand_size == 2:
        low = table[index + 1].value
        high = table[index + 2].value
        address = word_from_bytes(low, high)
        # jmp ($hhll) keeps its pointer numeric even inside the program.
        # The pointer is never marked as a target, so no label is defined for it.
        if info.mode.is_absolute and table.contains(address):
            text = text.replace("$hhll", label_for(address, labels, label_prefix))
        else:
            text = text.replace("hh", to_hex_byte(high)).replace("ll", to_hex_byte(low))

    return text


# =============================================================================
# Formatter
# =============================================================================

def format_program(
    table: ByteTable,
    opcodes: Mapping[int, OpcodeInfo],
    directive_prefix: str = "!",
    labels: Optional[Mapping[int, str]] = None,
    comments: Optional[Mapping[int, str]] = None,
    label_prefix: str = "_",
    memory_map: Optional[Mapping[int, str]] = None,
) -> List[OutputLine]:
    """
    Format a classified table as output lines.

    Args:
        table: Classified bytes from classify()
        opcodes: Opcode table (byte value -> OpcodeInfo)
        directive_prefix: Prefix for data directives ("!" gives "!byte")
        labels: Label overlay (address -> name), names already validated
        comments: Comment overlay (address -> text)
        label_prefix: Prefix for synthesized labels ("_" gives "_c000")
        memory_map: Known addresses (address -> description)

    Returns:
        Lines in address order; their byte counts sum to len(table)
    """
    labels = labels or {}
    comment_map = build_comment_map(table, opcodes, comments or {}, memory_map or {})

    lines: List[OutputLine] = []
    index = 0
    while index < len(table):
        entry = table[index]
        label = label_for(entry.address, labels, label_prefix) if entry.is_target else None
        info = opcodes.get(entry.value)

        if not _renders_as_code(table, index, info):
            line, index = _data_line(table, index, label, directive_prefix, comment_map)
            lines.append(line)
            continue

        lines.append(OutputLine(
            address=entry.address,
            text=_code_text(table, index, info, labels, label_prefix),
            raw_bytes=tuple(table[i].value for i in range(index, index + info.length)),
            label=label,
            comment=comment_map.get(entry.address),
            xref=format_xref(entry.xrefs) if label else None,
        ))
        index += info.length

    return lines
