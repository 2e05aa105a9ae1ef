"""
Byte Classifier
===============

Decides, byte by byte, whether a 6502 binary holds code or data.

The classifier is a worklist flood-fill over control-flow reachability.
It starts from user-supplied entrypoints (plus optional pattern seeds),
decodes each reachable instruction, marks its bytes as code, and follows
branch, call and jump targets and sequential fall-through until nothing
new is discovered. Absolute memory accesses that land inside the program
mark their targets as data.

Classification Rules
--------------------
- DATA is sticky: once a byte is DATA, nothing promotes it back to CODE.
- Unknown opcodes and illegal opcodes become DATA unless the user marked
  that very byte as a code entrypoint, which is the only override.
- References outside [start, start + len) are ignored. They are usually
  hardware registers or ROM routines, not errors.

Usage:
    from disawsm.cpu import OPCODE_TABLE
    from disawsm.disassembler import classify, Entrypoint, EntrypointKind

    table = classify(
        0xC000, program_bytes,
        [Entrypoint(0xC000, EntrypointKind.CODE)],
        OPCODE_TABLE,
    )
    for entry in table:
        print(f"${entry.address:04X} {entry.state}")
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set
import logging

from disawsm.cpu.mos6502 import AddressingMode, FlowKind, OpcodeInfo
from disawsm.disassembler.addressing import in_program, relative_target, word_from_bytes

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

class ByteState(Enum):
    """Classification of a single byte."""
    UNKNOWN = "unknown"
    CODE = "code"
    DATA = "data"

    def __str__(self) -> str:
        return self.value


class EntrypointKind(str, Enum):
    """How the user wants the byte at an entrypoint to be treated."""
    CODE = "code"
    DATA = "data"


@dataclass(frozen=True)
class Entrypoint:
    """
    A user-supplied classification seed.

    Attributes:
        address: Absolute address of the seed
        kind: CODE starts flow analysis there, DATA pins the byte as data
    """
    address: int
    kind: EntrypointKind = EntrypointKind.CODE


@dataclass
class ByteEntry:
    """
    Classification result for one input byte.

    Attributes:
        address: Absolute address (start + index)
        value: The raw byte value
        state: UNKNOWN, CODE or DATA
        is_target: Referenced by an instruction or a user entrypoint
        user_marked: Set only by an explicit entrypoint
        xrefs: Addresses of the instructions that reference this byte
    """
    address: int
    value: int
    state: ByteState = ByteState.UNKNOWN
    is_target: bool = False
    user_marked: bool = False
    xrefs: Set[int] = field(default_factory=set)

    @property
    def is_code(self) -> bool:
        return self.state is ByteState.CODE

    @property
    def is_data(self) -> bool:
        return self.state is ByteState.DATA


class ByteTable:
    """
    Fixed-size table of ByteEntry objects, one per input byte.

    Entries are addressed by integer index; the absolute address of an
    entry is always ``start + index``.

    ``instruction_starts`` holds the index of every instruction the
    classifier decoded.
    """

    def __init__(self, start: int, data: bytes):
        self.start = start
        self.entries: List[ByteEntry] = [
            ByteEntry(address=start + i, value=b) for i, b in enumerate(data)
        ]
        self.instruction_starts: Set[int] = set()

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ByteEntry:
        return self.entries[index]

    def __iter__(self) -> Iterator[ByteEntry]:
        return iter(self.entries)

    @property
    def end(self) -> int:
        """First address past the program."""
        return self.start + len(self.entries)

    def contains(self, address: int) -> bool:
        return in_program(address, self.start, len(self.entries))

    def index_of(self, address: int) -> Optional[int]:
        """Return the index for an address, or None when out of range."""
        if not self.contains(address):
            return None
        return address - self.start

    def values(self) -> bytes:
        """The raw bytes the table was built from."""
        return bytes(entry.value for entry in self.entries)

    def count(self, state: ByteState) -> int:
        return sum(1 for entry in self.entries if entry.state is state)

    def summary(self) -> Dict[str, int]:
        """Byte counts per state plus the number of targets."""
        return {
            "code": self.count(ByteState.CODE),
            "data": self.count(ByteState.DATA),
            "unknown": self.count(ByteState.UNKNOWN),
            "targets": sum(1 for entry in self.entries if entry.is_target),
        }


# =============================================================================
# Target Computation
# =============================================================================

def target_address(table: ByteTable, index: int, info: OpcodeInfo) -> Optional[int]:
    """
    Compute the address an instruction refers to, if its mode implies one.

    Relative branches resolve against the address after the instruction;
    absolute, absolute-X and absolute-Y combine their operand bytes
    little-endian. Other modes (including indirect jumps) yield None.
    The caller must ensure the operand bytes exist.
    """
    if info.flow is FlowKind.BRANCH or info.mode is AddressingMode.RELATIVE:
        pc_after = table[index].address + info.length
        return relative_target(table[index + 1].value, pc_after)
    if info.mode.is_absolute:
        return word_from_bytes(table[index + 1].value, table[index + 2].value)
    return None


def _operands_available(table: ByteTable, index: int, info: OpcodeInfo) -> bool:
    """True if every operand byte exists and none of them is DATA."""
    last = index + info.length
    if last > len(table):
        return False
    return all(not table[i].is_data for i in range(index + 1, last))


# =============================================================================
# Classification
# =============================================================================

def classify(
    start: int,
    data: bytes,
    entrypoints: Iterable[Entrypoint],
    opcodes: Mapping[int, OpcodeInfo],
    pattern_seeds: Optional[Iterable[int]] = None,
) -> ByteTable:
    """
    Classify every byte of a program as code or data.

    Args:
        start: Load address of the first byte
        data: Program bytes (at most 64 KiB)
        entrypoints: User seeds; out-of-range addresses are ignored
        opcodes: Opcode table (byte value -> OpcodeInfo)
        pattern_seeds: Optional indices reported by the pattern matcher

    Returns:
        ByteTable with state, target flags and cross-references filled in
    """
    table = ByteTable(start, data)
    size = len(table)

    worklist: List[int] = []
    visited: Set[int] = set()
    # Indices covered by the operand of a decoded instruction. These stay
    # CODE even if a jump into the middle of the instruction decodes them
    # as an illegal opcode.
    operand_indices: Set[int] = set()

    # Phase 1: user entrypoints
    seeded = 0
    for entrypoint in entrypoints:
        index = table.index_of(entrypoint.address)
        if index is None:
            logger.debug(f"Ignoring entrypoint ${entrypoint.address:04X} outside program")
            continue

        entry = table[index]
        entry.is_target = True
        entry.user_marked = True
        if entrypoint.kind == EntrypointKind.CODE:
            entry.state = ByteState.CODE
            worklist.append(index)
        else:
            entry.state = ByteState.DATA
        seeded += 1

    # Phase 2: pattern seeds
    pattern_count = 0
    for index in pattern_seeds or ():
        if 0 <= index < size and table[index].state is ByteState.UNKNOWN:
            table[index].state = ByteState.CODE
            worklist.append(index)
            pattern_count += 1

    logger.debug(
        f"Classifying {size} bytes at ${start:04X}: "
        f"{seeded} entrypoints, {pattern_count} pattern seeds"
    )

    # Phase 3: propagation
    while worklist:
        index = worklist.pop()
        if index in visited:
            continue
        entry = table[index]
        if entry.is_data:
            continue
        visited.add(index)

        info = opcodes.get(entry.value)
        if (
            info is None
            or (info.illegal and not entry.user_marked)
            or not _operands_available(table, index, info)
        ):
            if not (entry.user_marked and entry.is_code) and index not in operand_indices:
                entry.state = ByteState.DATA
            continue

        entry.state = ByteState.CODE
        table.instruction_starts.add(index)
        for operand in range(index + 1, index + info.length):
            table[operand].state = ByteState.CODE
            operand_indices.add(operand)

        target = target_address(table, index, info)
        target_index = table.index_of(target) if target is not None else None
        if target_index is not None:
            target_entry = table[target_index]
            target_entry.xrefs.add(entry.address)
            target_entry.is_target = True

            if info.flow.transfers_control:
                if not target_entry.is_data:
                    target_entry.state = ByteState.CODE
                    worklist.append(target_index)
            elif target_entry.state is ByteState.UNKNOWN:
                target_entry.state = ByteState.DATA

        if not info.flow.ends_flow:
            following = index + info.length
            if following < size and not table[following].is_data:
                worklist.append(following)

    summary = table.summary()
    logger.debug(
        f"Classification done: {summary['code']} code, {summary['data']} data, "
        f"{summary['unknown']} unknown, {summary['targets']} targets"
    )
    return table
