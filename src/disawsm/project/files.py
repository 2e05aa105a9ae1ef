"""
Project and Program Files
=========================

Reading and writing the files a disassembly session works with:

- ``.prg``: Commodore program file; two-byte little-endian load address
  followed by the program bytes
- raw binaries: program bytes only, load address given by the user
- ``.dis``: JSON project record (see records.py)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
import json
import logging

from disawsm.disassembler.addressing import validate_address, word_from_bytes
from disawsm.disassembler.engine import check_program_size
from disawsm.errors import PRGFormatError, ProjectFormatError
from disawsm.project.records import ProjectRecord

logger = logging.getLogger(__name__)

PRG_HEADER_SIZE = 2
PROJECT_EXTENSION = ".dis"


@dataclass(frozen=True)
class LoadedProgram:
    """
    A program image read from disk.

    Attributes:
        name: File name the program was loaded from
        start_address: Load address of the first byte
        data: Program bytes (without any PRG header)
    """
    name: str
    start_address: int
    data: bytes

    @property
    def end_address(self) -> int:
        """Address of the last byte (start for an empty program)."""
        return self.start_address + max(len(self.data) - 1, 0)


# =============================================================================
# Program Images
# =============================================================================

def parse_prg(name: str, raw: bytes) -> LoadedProgram:
    """
    Split a PRG image into load address and program bytes.

    Raises:
        PRGFormatError: If the image is shorter than the load address
        ProgramSizeError: If the program runs past $FFFF
    """
    if len(raw) < PRG_HEADER_SIZE:
        raise PRGFormatError(f"{name}: {len(raw)} bytes is too short for a PRG file")

    start = word_from_bytes(raw[0], raw[1])
    data = bytes(raw[PRG_HEADER_SIZE:])
    check_program_size(start, len(data))
    return LoadedProgram(name=name, start_address=start, data=data)


def load_prg(path: Union[str, Path]) -> LoadedProgram:
    """Load a .prg file."""
    path = Path(path)
    program = parse_prg(path.name, path.read_bytes())
    logger.debug(
        f"Loaded {path.name}: {len(program.data)} bytes at ${program.start_address:04X}"
    )
    return program


def load_binary(path: Union[str, Path], start_address: int) -> LoadedProgram:
    """
    Load a headerless binary at the given address.

    Raises:
        InvalidAddressError: If start_address is outside $0000-$FFFF
        ProgramSizeError: If the program runs past $FFFF
    """
    path = Path(path)
    validate_address(start_address)
    data = path.read_bytes()
    check_program_size(start_address, len(data))
    logger.debug(f"Loaded raw {path.name}: {len(data)} bytes at ${start_address:04X}")
    return LoadedProgram(name=path.name, start_address=start_address, data=data)


# =============================================================================
# Project Files
# =============================================================================

def project_filename(name: str) -> str:
    """Derive the project file name ("game.prg" -> "game.dis")."""
    base = name[:-4] if name.lower().endswith(".prg") else name
    return f"{base}{PROJECT_EXTENSION}"


def save_project(path: Union[str, Path], record: ProjectRecord) -> Path:
    """Write a project record as indented JSON. Returns the path written."""
    path = Path(path)
    path.write_text(json.dumps(record.to_dict(), indent=2) + "\n", encoding="utf-8")
    logger.debug(f"Saved project {record.name} to {path}")
    return path


def load_project(path: Union[str, Path]) -> ProjectRecord:
    """
    Read a project record.

    Raises:
        ProjectFormatError: If the file is not valid JSON or not a valid
            project record
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise ProjectFormatError(f"{path.name}: failed to parse project file: {e}") from e

    record = ProjectRecord.from_dict(data)
    logger.debug(
        f"Loaded project {record.name} (v{record.version}): {len(record.data)} bytes, "
        f"{len(record.entrypoints)} entrypoints, {len(record.labels)} labels"
    )
    return record
