"""
User Overlays
=============

Per-address user annotations that sit on top of the raw program:

- EntrypointList: code/data seeds that drive classification
- LabelOverlay: user-chosen names that replace synthesized labels
- CommentOverlay: free-text comments shown beside lines

Each overlay keeps at most one entry per address. Entrypoints are
structural (changing them means re-classifying); labels and comments are
cosmetic (only the formatter needs to run again).

Example:
    >>> entrypoints = EntrypointList()
    >>> entrypoints.add(0xC000)
    >>> labels = LabelOverlay()
    >>> labels.set(0xC000, "main")
    >>> comments = CommentOverlay()
    >>> comments.set(0xC000, "  program start  ")
    >>> comments.get(0xC000)
    'program start'
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional
import re

from disawsm.disassembler.addressing import validate_address
from disawsm.disassembler.classifier import Entrypoint, EntrypointKind
from disawsm.errors import InvalidLabelError

LABEL_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


def is_valid_label(name: str) -> bool:
    """Check a label name: a letter or "_", then letters, digits, "_" or "-"."""
    return isinstance(name, str) and bool(LABEL_PATTERN.match(name))


@dataclass(frozen=True)
class Label:
    address: int
    name: str


@dataclass(frozen=True)
class Comment:
    address: int
    text: str


# =============================================================================
# Entrypoints
# =============================================================================

class EntrypointList:
    """
    Code/data seeds, one per address, iterated in address order.

    Adding an entrypoint at an address that already has one replaces its
    kind rather than creating a duplicate.
    """

    def __init__(self, entrypoints: Optional[List[Entrypoint]] = None):
        self._entries: Dict[int, EntrypointKind] = {}
        for entrypoint in entrypoints or ():
            self.add(entrypoint.address, entrypoint.kind)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entrypoint]:
        return iter(self.to_list())

    def __contains__(self, address: int) -> bool:
        return address in self._entries

    def add(self, address: int, kind: EntrypointKind = EntrypointKind.CODE) -> None:
        """
        Add an entrypoint, or change the kind of an existing one.

        Raises:
            InvalidAddressError: If address is outside $0000-$FFFF
        """
        validate_address(address)
        self._entries[address] = EntrypointKind(kind)

    def remove(self, address: int) -> bool:
        """Remove the entrypoint at address. Returns True if one existed."""
        return self._entries.pop(address, None) is not None

    def set_kind(self, address: int, kind: EntrypointKind) -> bool:
        """Change the kind of an existing entrypoint. Returns True if it existed."""
        if address not in self._entries:
            return False
        self._entries[address] = EntrypointKind(kind)
        return True

    def move(self, old_address: int, new_address: int) -> bool:
        """
        Move an entrypoint to a new address, keeping its kind.

        An entrypoint already at new_address is replaced.

        Returns:
            True if an entrypoint existed at old_address
        """
        validate_address(new_address)
        kind = self._entries.pop(old_address, None)
        if kind is None:
            return False
        self._entries[new_address] = kind
        return True

    def at(self, address: int) -> Optional[Entrypoint]:
        """Return the entrypoint at address, if any."""
        kind = self._entries.get(address)
        return Entrypoint(address, kind) if kind is not None else None

    def clear(self) -> None:
        self._entries.clear()

    def to_list(self) -> List[Entrypoint]:
        return [Entrypoint(address, kind) for address, kind in sorted(self._entries.items())]


# =============================================================================
# Labels
# =============================================================================

class LabelOverlay:
    """User label names keyed by address."""

    def __init__(self):
        self._names: Dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[Label]:
        return (Label(address, name) for address, name in sorted(self._names.items()))

    def set(self, address: int, name: str) -> None:
        """
        Name an address, replacing any previous name.

        Raises:
            InvalidLabelError: If the name breaks the naming rule
            InvalidAddressError: If address is outside $0000-$FFFF
        """
        validate_address(address)
        if not is_valid_label(name):
            raise InvalidLabelError(name, address)
        self._names[address] = name

    def remove(self, address: int) -> bool:
        return self._names.pop(address, None) is not None

    def get(self, address: int) -> Optional[str]:
        return self._names.get(address)

    def clear(self) -> None:
        self._names.clear()

    def as_dict(self) -> Dict[int, str]:
        """Copy of the overlay as address -> name."""
        return dict(self._names)


# =============================================================================
# Comments
# =============================================================================

class CommentOverlay:
    """User comments keyed by address. Text is stored trimmed."""

    def __init__(self):
        self._texts: Dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._texts)

    def __iter__(self) -> Iterator[Comment]:
        return (Comment(address, text) for address, text in sorted(self._texts.items()))

    def set(self, address: int, text: str) -> None:
        """Set the comment at address; blank text removes it."""
        validate_address(address)
        text = text.strip()
        if text:
            self._texts[address] = text
        else:
            self._texts.pop(address, None)

    def remove(self, address: int) -> bool:
        return self._texts.pop(address, None) is not None

    def get(self, address: int) -> Optional[str]:
        return self._texts.get(address)

    def clear(self) -> None:
        self._texts.clear()

    def as_dict(self) -> Dict[int, str]:
        """Copy of the overlay as address -> text."""
        return dict(self._texts)
