"""
MOS 6502 Instruction Set Definition
===================================

This module defines the 6502 opcode table used by the classifier and the
formatter. Each opcode byte maps to an immutable OpcodeInfo describing its
assembly template, addressing mode, control-flow category and legality.

Templates
---------
Templates are lowercase assembly text with operand placeholders:

- ``hh``: the single operand byte, or the high byte of a 16-bit operand
- ``ll``: the low byte of a 16-bit operand

Examples: ``lda #$hh``, ``sta $hhll,x``, ``bne $hh``. The 6502 is
little-endian, so for ``jmp $hhll`` the byte after the opcode is ``ll``
and the one after that is ``hh``.

Addressing Modes
----------------
The operand size follows from the addressing mode:

1. **IMPLIED / ACCUMULATOR**: no operand (``rts``, ``asl``)
2. **IMMEDIATE, ZERO_PAGE(_X/_Y), INDEXED_INDIRECT, INDIRECT_INDEXED,
   RELATIVE**: one operand byte
3. **ABSOLUTE(_X/_Y), INDIRECT**: two operand bytes (little-endian)

Control Flow
------------
- CALL: ``jsr``
- JUMP: ``jmp`` (absolute and indirect)
- RETURN: ``rts``, ``rti``
- BRANCH: the eight conditional relative branches

Illegal Opcodes
---------------
The table also describes the stable undocumented NMOS opcodes (SLO, RLA,
SRE, RRA, SAX, LAX, DCP, ISC, ANC, ALR, ARR, SBX and the multi-byte NOPs).
They are flagged ``illegal`` so the classifier treats them as data unless
the user explicitly marks them as code. JAM opcodes and the unstable
undocumented opcodes have no descriptor at all.

Reference
---------
- http://www.6502.org/tutorials/6502opcodes.html
- NMOS 6510 Unintended Opcodes ("No More Secrets")
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    Each addressing mode determines how many operand bytes follow the
    opcode and how a target address is derived from them.
    """
    IMPLIED = auto()            # No operand (rts, clc)
    ACCUMULATOR = auto()        # Operates on A (asl, ror)
    IMMEDIATE = auto()          # #$hh
    ZERO_PAGE = auto()          # $hh
    ZERO_PAGE_X = auto()        # $hh,x
    ZERO_PAGE_Y = auto()        # $hh,y
    ABSOLUTE = auto()           # $hhll
    ABSOLUTE_X = auto()         # $hhll,x
    ABSOLUTE_Y = auto()         # $hhll,y
    INDIRECT = auto()           # ($hhll), jmp only
    INDEXED_INDIRECT = auto()   # ($hh,x)
    INDIRECT_INDEXED = auto()   # ($hh),y
    RELATIVE = auto()           # Branch displacement (signed 8-bit)

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode (0, 1 or 2)."""
        return _OPERAND_SIZES[self]

    @property
    def is_absolute(self) -> bool:
        """True for the modes whose operand is a plain 16-bit address."""
        return self in ABSOLUTE_MODES

    def __str__(self) -> str:
        """Return the short mode name used in opcode listings."""
        return _SHORT_NAMES[self]


_OPERAND_SIZES = {
    AddressingMode.IMPLIED: 0,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.INDEXED_INDIRECT: 1,
    AddressingMode.INDIRECT_INDEXED: 1,
    AddressingMode.RELATIVE: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
}

_SHORT_NAMES = {
    AddressingMode.IMPLIED: "imp",
    AddressingMode.ACCUMULATOR: "acc",
    AddressingMode.IMMEDIATE: "imm",
    AddressingMode.ZERO_PAGE: "zp",
    AddressingMode.ZERO_PAGE_X: "zpx",
    AddressingMode.ZERO_PAGE_Y: "zpy",
    AddressingMode.ABSOLUTE: "abs",
    AddressingMode.ABSOLUTE_X: "abx",
    AddressingMode.ABSOLUTE_Y: "aby",
    AddressingMode.INDIRECT: "ind",
    AddressingMode.INDEXED_INDIRECT: "izx",
    AddressingMode.INDIRECT_INDEXED: "izy",
    AddressingMode.RELATIVE: "rel",
}

# Modes whose two operand bytes form a direct memory reference. INDIRECT is
# excluded: the pointer it names is not where control goes.
ABSOLUTE_MODES = frozenset({
    AddressingMode.ABSOLUTE,
    AddressingMode.ABSOLUTE_X,
    AddressingMode.ABSOLUTE_Y,
})


# =============================================================================
# Control-Flow Categories
# =============================================================================

class FlowKind(Enum):
    """How an instruction affects the flow of execution."""
    NONE = "none"
    CALL = "call"
    JUMP = "jump"
    RETURN = "return"
    BRANCH = "branch"

    @property
    def transfers_control(self) -> bool:
        """True if the instruction's target address is executed as code."""
        return self in (FlowKind.CALL, FlowKind.JUMP, FlowKind.BRANCH)

    @property
    def ends_flow(self) -> bool:
        """True if execution never falls through to the next instruction."""
        return self in (FlowKind.JUMP, FlowKind.RETURN)


# =============================================================================
# Opcode Descriptor
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    Static description of one opcode byte.

    Attributes:
        opcode: The opcode byte value
        template: Assembly template with hh/ll operand placeholders
        mode: Addressing mode (determines operand size)
        flow: Control-flow category
        illegal: True for undocumented opcodes
    """
    opcode: int
    template: str
    mode: AddressingMode
    flow: FlowKind = FlowKind.NONE
    illegal: bool = False

    @property
    def length(self) -> int:
        """Total instruction size in bytes (1-3)."""
        return 1 + self.mode.operand_size

    @property
    def mnemonic(self) -> str:
        return self.template.split(" ", 1)[0]

    def __repr__(self) -> str:
        flag = ", illegal" if self.illegal else ""
        return f"OpcodeInfo(${self.opcode:02X} '{self.template}', {self.mode}{flag})"


# =============================================================================
# Template Inference
# =============================================================================

BRANCH_MNEMONICS = frozenset({
    "bpl", "bmi", "bvc", "bvs", "bcc", "bcs", "bne", "beq",
})

SHIFT_MNEMONICS = frozenset({"asl", "lsr", "rol", "ror"})


def infer_addressing_mode(template: str) -> AddressingMode:
    """
    Derive the addressing mode from an assembly template.

    Order matters: the more specific operand shapes are checked first, so
    ``($hhll)`` is not mistaken for ``$hhll`` and ``$hhll,x`` is not
    mistaken for ``$hh,x``.
    """
    mnemonic = template.split(" ", 1)[0]
    if mnemonic in BRANCH_MNEMONICS:
        return AddressingMode.RELATIVE
    if "#$hh" in template:
        return AddressingMode.IMMEDIATE
    if "($hhll)" in template:
        return AddressingMode.INDIRECT
    if "($hh,x)" in template:
        return AddressingMode.INDEXED_INDIRECT
    if "($hh),y" in template:
        return AddressingMode.INDIRECT_INDEXED
    if "$hhll,x" in template:
        return AddressingMode.ABSOLUTE_X
    if "$hhll,y" in template:
        return AddressingMode.ABSOLUTE_Y
    if "$hhll" in template:
        return AddressingMode.ABSOLUTE
    if "$hh,x" in template:
        return AddressingMode.ZERO_PAGE_X
    if "$hh,y" in template:
        return AddressingMode.ZERO_PAGE_Y
    if "$hh" in template:
        return AddressingMode.ZERO_PAGE
    if mnemonic in SHIFT_MNEMONICS:
        return AddressingMode.ACCUMULATOR
    return AddressingMode.IMPLIED


def infer_flow(opcode: int, template: str) -> FlowKind:
    """Derive the control-flow category of an opcode."""
    mnemonic = template.split(" ", 1)[0]
    if opcode == 0x20:
        return FlowKind.CALL
    if opcode in (0x4C, 0x6C):
        return FlowKind.JUMP
    if opcode in (0x60, 0x40):
        return FlowKind.RETURN
    if mnemonic in BRANCH_MNEMONICS:
        return FlowKind.BRANCH
    return FlowKind.NONE


# =============================================================================
# Opcode Templates
# =============================================================================
# Key: opcode byte. Value: assembly template.
# Addressing mode and flow category are derived from the template.
# =============================================================================

DOCUMENTED_OPCODES: Dict[int, str] = {
    0x00: "brk",           0x01: "ora ($hh,x)",   0x05: "ora $hh",
    0x06: "asl $hh",       0x08: "php",           0x09: "ora #$hh",
    0x0A: "asl",           0x0D: "ora $hhll",     0x0E: "asl $hhll",
    0x10: "bpl $hh",       0x11: "ora ($hh),y",   0x15: "ora $hh,x",
    0x16: "asl $hh,x",     0x18: "clc",           0x19: "ora $hhll,y",
    0x1D: "ora $hhll,x",   0x1E: "asl $hhll,x",

    0x20: "jsr $hhll",     0x21: "and ($hh,x)",   0x24: "bit $hh",
    0x25: "and $hh",       0x26: "rol $hh",       0x28: "plp",
    0x29: "and #$hh",      0x2A: "rol",           0x2C: "bit $hhll",
    0x2D: "and $hhll",     0x2E: "rol $hhll",     0x30: "bmi $hh",
    0x31: "and ($hh),y",   0x35: "and $hh,x",     0x36: "rol $hh,x",
    0x38: "sec",           0x39: "and $hhll,y",   0x3D: "and $hhll,x",
    0x3E: "rol $hhll,x",

    0x40: "rti",           0x41: "eor ($hh,x)",   0x45: "eor $hh",
    0x46: "lsr $hh",       0x48: "pha",           0x49: "eor #$hh",
    0x4A: "lsr",           0x4C: "jmp $hhll",     0x4D: "eor $hhll",
    0x4E: "lsr $hhll",     0x50: "bvc $hh",       0x51: "eor ($hh),y",
    0x55: "eor $hh,x",     0x56: "lsr $hh,x",     0x58: "cli",
    0x59: "eor $hhll,y",   0x5D: "eor $hhll,x",   0x5E: "lsr $hhll,x",

    0x60: "rts",           0x61: "adc ($hh,x)",   0x65: "adc $hh",
    0x66: "ror $hh",       0x68: "pla",           0x69: "adc #$hh",
    0x6A: "ror",           0x6C: "jmp ($hhll)",   0x6D: "adc $hhll",
    0x6E: "ror $hhll",     0x70: "bvs $hh",       0x71: "adc ($hh),y",
    0x75: "adc $hh,x",     0x76: "ror $hh,x",     0x78: "sei",
    0x79: "adc $hhll,y",   0x7D: "adc $hhll,x",   0x7E: "ror $hhll,x",

    0x81: "sta ($hh,x)",   0x84: "sty $hh",       0x85: "sta $hh",
    0x86: "stx $hh",       0x88: "dey",           0x8A: "txa",
    0x8C: "sty $hhll",     0x8D: "sta $hhll",     0x8E: "stx $hhll",
    0x90: "bcc $hh",       0x91: "sta ($hh),y",   0x94: "sty $hh,x",
    0x95: "sta $hh,x",     0x96: "stx $hh,y",     0x98: "tya",
    0x99: "sta $hhll,y",   0x9A: "txs",           0x9D: "sta $hhll,x",

    0xA0: "ldy #$hh",      0xA1: "lda ($hh,x)",   0xA2: "ldx #$hh",
    0xA4: "ldy $hh",       0xA5: "lda $hh",       0xA6: "ldx $hh",
    0xA8: "tay",           0xA9: "lda #$hh",      0xAA: "tax",
    0xAC: "ldy $hhll",     0xAD: "lda $hhll",     0xAE: "ldx $hhll",
    0xB0: "bcs $hh",       0xB1: "lda ($hh),y",   0xB4: "ldy $hh,x",
    0xB5: "lda $hh,x",     0xB6: "ldx $hh,y",     0xB8: "clv",
    0xB9: "lda $hhll,y",   0xBA: "tsx",           0xBC: "ldy $hhll,x",
    0xBD: "lda $hhll,x",   0xBE: "ldx $hhll,y",

    0xC0: "cpy #$hh",      0xC1: "cmp ($hh,x)",   0xC4: "cpy $hh",
    0xC5: "cmp $hh",       0xC6: "dec $hh",       0xC8: "iny",
    0xC9: "cmp #$hh",      0xCA: "dex",           0xCC: "cpy $hhll",
    0xCD: "cmp $hhll",     0xCE: "dec $hhll",     0xD0: "bne $hh",
    0xD1: "cmp ($hh),y",   0xD5: "cmp $hh,x",     0xD6: "dec $hh,x",
    0xD8: "cld",           0xD9: "cmp $hhll,y",   0xDD: "cmp $hhll,x",
    0xDE: "dec $hhll,x",

    0xE0: "cpx #$hh",      0xE1: "sbc ($hh,x)",   0xE4: "cpx $hh",
    0xE5: "sbc $hh",       0xE6: "inc $hh",       0xE8: "inx",
    0xE9: "sbc #$hh",      0xEA: "nop",           0xEC: "cpx $hhll",
    0xED: "sbc $hhll",     0xEE: "inc $hhll",     0xF0: "beq $hh",
    0xF1: "sbc ($hh),y",   0xF5: "sbc $hh,x",     0xF6: "inc $hh,x",
    0xF8: "sed",           0xF9: "sbc $hhll,y",   0xFD: "sbc $hhll,x",
    0xFE: "inc $hhll,x",
}

# Stable undocumented opcodes. Unstable ones (ANE, LXA, SHA, TAS, SHX,
# SHY, LAS) and the JAM opcodes are deliberately absent.
UNDOCUMENTED_OPCODES: Dict[int, str] = {
    # SLO / RLA / SRE / RRA: read-modify-write combined with ORA/AND/EOR/ADC
    0x03: "slo ($hh,x)",   0x07: "slo $hh",       0x0F: "slo $hhll",
    0x13: "slo ($hh),y",   0x17: "slo $hh,x",     0x1B: "slo $hhll,y",
    0x1F: "slo $hhll,x",
    0x23: "rla ($hh,x)",   0x27: "rla $hh",       0x2F: "rla $hhll",
    0x33: "rla ($hh),y",   0x37: "rla $hh,x",     0x3B: "rla $hhll,y",
    0x3F: "rla $hhll,x",
    0x43: "sre ($hh,x)",   0x47: "sre $hh",       0x4F: "sre $hhll",
    0x53: "sre ($hh),y",   0x57: "sre $hh,x",     0x5B: "sre $hhll,y",
    0x5F: "sre $hhll,x",
    0x63: "rra ($hh,x)",   0x67: "rra $hh",       0x6F: "rra $hhll",
    0x73: "rra ($hh),y",   0x77: "rra $hh,x",     0x7B: "rra $hhll,y",
    0x7F: "rra $hhll,x",

    # SAX / LAX
    0x83: "sax ($hh,x)",   0x87: "sax $hh",       0x8F: "sax $hhll",
    0x97: "sax $hh,y",
    0xA3: "lax ($hh,x)",   0xA7: "lax $hh",       0xAF: "lax $hhll",
    0xB3: "lax ($hh),y",   0xB7: "lax $hh,y",     0xBF: "lax $hhll,y",

    # DCP / ISC
    0xC3: "dcp ($hh,x)",   0xC7: "dcp $hh",       0xCF: "dcp $hhll",
    0xD3: "dcp ($hh),y",   0xD7: "dcp $hh,x",     0xDB: "dcp $hhll,y",
    0xDF: "dcp $hhll,x",
    0xE3: "isc ($hh,x)",   0xE7: "isc $hh",       0xEF: "isc $hhll",
    0xF3: "isc ($hh),y",   0xF7: "isc $hh,x",     0xFB: "isc $hhll,y",
    0xFF: "isc $hhll,x",

    # Immediate-only combinations
    0x0B: "anc #$hh",      0x2B: "anc #$hh",      0x4B: "alr #$hh",
    0x6B: "arr #$hh",      0xCB: "sbx #$hh",      0xEB: "sbc #$hh",

    # NOPs of every size
    0x1A: "nop",           0x3A: "nop",           0x5A: "nop",
    0x7A: "nop",           0xDA: "nop",           0xFA: "nop",
    0x80: "nop #$hh",      0x82: "nop #$hh",      0x89: "nop #$hh",
    0xC2: "nop #$hh",      0xE2: "nop #$hh",
    0x04: "nop $hh",       0x44: "nop $hh",       0x64: "nop $hh",
    0x14: "nop $hh,x",     0x34: "nop $hh,x",     0x54: "nop $hh,x",
    0x74: "nop $hh,x",     0xD4: "nop $hh,x",     0xF4: "nop $hh,x",
    0x0C: "nop $hhll",
    0x1C: "nop $hhll,x",   0x3C: "nop $hhll,x",   0x5C: "nop $hhll,x",
    0x7C: "nop $hhll,x",   0xDC: "nop $hhll,x",   0xFC: "nop $hhll,x",
}


def _build_opcode_table() -> Dict[int, OpcodeInfo]:
    table: Dict[int, OpcodeInfo] = {}
    for illegal, templates in ((False, DOCUMENTED_OPCODES), (True, UNDOCUMENTED_OPCODES)):
        for opcode, template in templates.items():
            table[opcode] = OpcodeInfo(
                opcode=opcode,
                template=template,
                mode=infer_addressing_mode(template),
                flow=infer_flow(opcode, template),
                illegal=illegal,
            )
    return dict(sorted(table.items()))


# Master table: opcode byte -> OpcodeInfo
OPCODE_TABLE: Dict[int, OpcodeInfo] = _build_opcode_table()


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode_info(opcode: int) -> Optional[OpcodeInfo]:
    """
    Look up the descriptor for an opcode byte.

    Returns:
        OpcodeInfo, or None for bytes with no descriptor (JAM and the
        unstable undocumented opcodes)
    """
    return OPCODE_TABLE.get(opcode)


def is_legal_opcode(opcode: int) -> bool:
    """Return True if the byte is a documented 6502 opcode."""
    info = OPCODE_TABLE.get(opcode)
    return info is not None and not info.illegal
