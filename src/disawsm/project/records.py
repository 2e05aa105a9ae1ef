"""
Project Record
==============

The durable form of a disassembly session, stored as a ``.dis`` JSON file:

    {
      "version": "1.2",
      "name": "game.prg",
      "startAddress": 49152,
      "bytes": [169, 0, 141, 32, 208, 96],
      "entrypoints": [{"address": 49152, "type": "code"}],
      "labels": [{"address": 49152, "name": "main"}],
      "comments": [{"address": 49152, "comment": "set border"}]
    }

Version history:
    1.0 - name, startAddress, bytes, entrypoints
    1.1 - adds labels
    1.2 - adds comments

Older records load with the missing lists empty. Reloading a record and
running the classifier and formatter again reproduces the same output.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping
import logging

from disawsm.disassembler.addressing import ADDRESS_SPACE
from disawsm.disassembler.classifier import Entrypoint, EntrypointKind
from disawsm.errors import ProjectFormatError
from disawsm.project.overlays import Comment, Label, is_valid_label

logger = logging.getLogger(__name__)

PROJECT_VERSION = "1.2"
SUPPORTED_VERSIONS = ("1.0", "1.1", "1.2")


def _address(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < ADDRESS_SPACE:
        raise ProjectFormatError(f"{what}: invalid address {value!r}")
    return value


def _items(data: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ProjectFormatError(f"'{key}' must be a list of objects")
    return items


@dataclass
class ProjectRecord:
    """
    A saved disassembly project.

    Attributes:
        name: Program name (usually the original file name)
        start_address: Load address of the first byte
        data: Program bytes
        entrypoints: Classification seeds
        labels: User label names
        comments: User comments
        version: Record format version
    """
    name: str
    start_address: int
    data: bytes
    entrypoints: List[Entrypoint] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    version: str = PROJECT_VERSION

    def to_dict(self) -> dict:
        """Convert to the JSON structure of a .dis file."""
        return {
            "version": self.version,
            "name": self.name,
            "startAddress": self.start_address,
            "bytes": list(self.data),
            "entrypoints": [
                {"address": ep.address, "type": ep.kind.value} for ep in self.entrypoints
            ],
            "labels": [{"address": lb.address, "name": lb.name} for lb in self.labels],
            "comments": [{"address": cm.address, "comment": cm.text} for cm in self.comments],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectRecord":
        """
        Build a record from parsed .dis JSON.

        Raises:
            ProjectFormatError: If required fields are missing or any value
                is out of range
        """
        if not isinstance(data, dict):
            raise ProjectFormatError("project file must contain a JSON object")

        for key in ("version", "name"):
            if not data.get(key):
                raise ProjectFormatError(f"invalid project file: missing '{key}'")
        for key in ("startAddress", "bytes"):
            if data.get(key) is None:
                raise ProjectFormatError(f"invalid project file: missing '{key}'")

        version = str(data["version"])
        if version not in SUPPORTED_VERSIONS:
            logger.warning(f"Unknown project version {version}, loading anyway")

        start = _address(data["startAddress"], "startAddress")

        raw = data["bytes"]
        if not isinstance(raw, list) or not all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 0xFF for b in raw
        ):
            raise ProjectFormatError("'bytes' must be a list of values 0-255")
        if start + len(raw) > ADDRESS_SPACE:
            raise ProjectFormatError(
                f"{len(raw)} bytes at ${start:04X} run past the end of memory"
            )

        entrypoints = []
        for item in _items(data, "entrypoints"):
            try:
                kind = EntrypointKind(item.get("type"))
            except ValueError:
                raise ProjectFormatError(
                    f"unknown entrypoint type {item.get('type')!r}"
                ) from None
            entrypoints.append(Entrypoint(_address(item.get("address"), "entrypoint"), kind))

        labels = []
        for item in _items(data, "labels"):
            name = item.get("name")
            address = _address(item.get("address"), "label")
            if not is_valid_label(name):
                raise ProjectFormatError(f"invalid label name {name!r} at ${address:04X}")
            labels.append(Label(address, name))

        comments = []
        for item in _items(data, "comments"):
            text = str(item.get("comment") or "").strip()
            if text:
                comments.append(Comment(_address(item.get("address"), "comment"), text))

        return cls(
            name=str(data["name"]),
            start_address=start,
            data=bytes(raw),
            entrypoints=entrypoints,
            labels=labels,
            comments=comments,
            version=version,
        )
