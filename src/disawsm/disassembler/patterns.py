"""
Pattern Matcher
===============

Scans raw bytes for well-known 6502 instruction sequences (IRQ setup,
KERNAL calls, screen clears...) and reports where they start. The
classifier can use these positions as extra code seeds when the user
enables pattern hints.

Patterns are lists of lowercase hex byte strings; "??" matches any byte:

    BytePattern("jsr_chrout", ("20", "d2", "ff"), "Call KERNAL CHROUT")
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple

WILDCARD = "??"


@dataclass(frozen=True)
class BytePattern:
    """
    A named byte signature.

    Attributes:
        name: Short identifier
        bytes: Hex byte strings, "??" for wildcards
        description: Human-readable explanation
    """
    name: str
    bytes: Tuple[str, ...]
    description: str = ""

    def __post_init__(self) -> None:
        normalized = tuple(b.lower() for b in self.bytes)
        object.__setattr__(self, "bytes", normalized)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "BytePattern":
        """Build a pattern from its JSON form."""
        return cls(
            name=str(data["name"]),
            bytes=tuple(str(b) for b in data["bytes"]),  # type: ignore[union-attr]
            description=str(data.get("description", "")),
        )

    def matches(self, data: Sequence[int], start: int) -> bool:
        """Check whether the pattern matches data at the given index."""
        if start + len(self.bytes) > len(data):
            return False

        for offset, expected in enumerate(self.bytes):
            if expected == WILDCARD:
                continue
            if f"{data[start + offset]:02x}" != expected:
                return False
        return True


def find_pattern_matches(data: Sequence[int], patterns: Iterable[BytePattern]) -> List[int]:
    """
    Find every index at which any pattern matches.

    Each index is reported once, in ascending order.
    """
    patterns = [p for p in patterns if p.bytes]
    matches: List[int] = []

    for index in range(len(data)):
        for pattern in patterns:
            if pattern.matches(data, index):
                matches.append(index)
                break

    return matches
