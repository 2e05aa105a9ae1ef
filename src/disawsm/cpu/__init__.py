"""
disawsm CPU Package
===================

CPU architecture definitions shared by the classifier, the formatter and
the table loader.

Modules:
    mos6502: The 6502 opcode table, addressing modes, control-flow
             categories and lookup helpers.

Usage:
    from disawsm.cpu import (
        AddressingMode,
        FlowKind,
        OpcodeInfo,
        OPCODE_TABLE,
        get_opcode_info,
    )
"""

from disawsm.cpu.mos6502 import (
    # Core types
    AddressingMode,
    FlowKind,
    OpcodeInfo,
    # Master instruction database
    OPCODE_TABLE,
    DOCUMENTED_OPCODES,
    UNDOCUMENTED_OPCODES,
    ABSOLUTE_MODES,
    BRANCH_MNEMONICS,
    # Lookup functions
    get_opcode_info,
    is_legal_opcode,
    infer_addressing_mode,
    infer_flow,
)

__all__ = [
    "AddressingMode",
    "FlowKind",
    "OpcodeInfo",
    "OPCODE_TABLE",
    "DOCUMENTED_OPCODES",
    "UNDOCUMENTED_OPCODES",
    "ABSOLUTE_MODES",
    "BRANCH_MNEMONICS",
    "get_opcode_info",
    "is_legal_opcode",
    "infer_addressing_mode",
    "infer_flow",
]
