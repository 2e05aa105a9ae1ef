"""
Table Loader
============

Loads the lookup tables the classifier and formatter depend on:

- opcodes: built in Python (disawsm.cpu.mos6502)
- memory_map: c64_memory_map.json, address -> description
- patterns: patterns.json, known instruction sequences
- syntaxes: syntax.json, assembler presets

Tables are read once and cached for the lifetime of the loader. Loading is
single-flight: concurrent threads calling load() block on one lock and see
the same result, and concurrent asyncio tasks calling load_async() await one
shared in-flight future. A failed load is not cached, so a later call tries
again.

Usage:
    from disawsm.tables import get_tables, get_tables_async

    tables = get_tables()
    tables = await get_tables_async()
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union
import asyncio
import json
import logging
import threading

from disawsm.cpu.mos6502 import OPCODE_TABLE, OpcodeInfo
from disawsm.disassembler.patterns import BytePattern
from disawsm.errors import TableLoadError
from disawsm.syntax import AssemblerSyntax

logger = logging.getLogger(__name__)

TABLE_DIR = Path(__file__).parent

MEMORY_MAP_FILE = "c64_memory_map.json"
PATTERNS_FILE = "patterns.json"
SYNTAX_FILE = "syntax.json"


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class Tables:
    """
    Immutable bundle of every lookup table.

    Attributes:
        opcodes: Opcode byte -> OpcodeInfo
        memory_map: Address -> description of a known location
        patterns: Known byte sequences for the pattern matcher
        syntaxes: Preset key ("acme", "kickass", ...) -> AssemblerSyntax
    """
    opcodes: Mapping[int, OpcodeInfo]
    memory_map: Mapping[int, str]
    patterns: Tuple[BytePattern, ...]
    syntaxes: Mapping[str, AssemblerSyntax]


# =============================================================================
# JSON Parsing
# =============================================================================

def parse_memory_map(data: Any) -> Mapping[int, str]:
    """Parse {"mapping": [{"addr": "d020", "comm": "..."}]}."""
    memory_map = {}
    for item in data["mapping"]:
        address = int(item["addr"], 16)
        if not 0 <= address <= 0xFFFF:
            raise ValueError(f"address {item['addr']} outside $0000-$FFFF")
        memory_map[address] = str(item["comm"])
    return MappingProxyType(memory_map)


def parse_patterns(data: Any) -> Tuple[BytePattern, ...]:
    """Parse {"patterns": [{"name", "bytes", "description"}]}."""
    return tuple(BytePattern.from_dict(item) for item in data["patterns"])


def parse_syntaxes(data: Any) -> Mapping[str, AssemblerSyntax]:
    """Parse {"syntaxes": {key: {"name", "commentPrefix", ...}}}."""
    return MappingProxyType({
        key.lower(): AssemblerSyntax.from_dict(value)
        for key, value in data["syntaxes"].items()
    })


# =============================================================================
# Loader
# =============================================================================

class TableLoader:
    """
    Single-flight, cached loader for the lookup tables.

    Attributes:
        table_dir: Directory holding the JSON assets
        load_count: Number of times the assets were actually read
    """

    def __init__(self, table_dir: Optional[Union[str, Path]] = None):
        self.table_dir = Path(table_dir) if table_dir is not None else TABLE_DIR
        self.load_count = 0
        self._tables: Optional[Tables] = None
        self._lock = threading.Lock()
        self._future: Optional[asyncio.Future] = None

    @property
    def is_loaded(self) -> bool:
        return self._tables is not None

    def load(self) -> Tables:
        """
        Return the tables, reading them on first use.

        Raises:
            TableLoadError: If an asset is missing or malformed
        """
        tables = self._tables
        if tables is not None:
            return tables

        with self._lock:
            if self._tables is None:
                self._tables = self._read_all()
            return self._tables

    async def load_async(self) -> Tables:
        """
        Return the tables without blocking the event loop.

        The read runs in the default executor. Tasks that call this while a
        read is in flight await the same future; cancelling one waiter does
        not cancel the read for the others.
        """
        if self.is_loaded:
            return self._tables

        loop = asyncio.get_running_loop()
        future = self._future
        if future is None or future.get_loop() is not loop:
            future = loop.run_in_executor(None, self.load)
            self._future = future

        try:
            return await asyncio.shield(future)
        except Exception:
            if self._future is future:
                self._future = None
            raise

    def reset(self) -> None:
        """Drop the cached tables so the next call reads them again."""
        with self._lock:
            self._tables = None
            self._future = None

    def _read_json(self, filename: str) -> Any:
        path = self.table_dir / filename
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise TableLoadError(filename, str(e)) from e
        except ValueError as e:
            raise TableLoadError(filename, f"invalid JSON: {e}") from e

    def _parse(self, filename: str, parser) -> Any:
        data = self._read_json(filename)
        try:
            return parser(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TableLoadError(filename, f"unexpected structure: {e}") from e

    def _read_all(self) -> Tables:
        logger.debug(f"Loading tables from {self.table_dir}")
        tables = Tables(
            opcodes=MappingProxyType(dict(OPCODE_TABLE)),
            memory_map=self._parse(MEMORY_MAP_FILE, parse_memory_map),
            patterns=self._parse(PATTERNS_FILE, parse_patterns),
            syntaxes=self._parse(SYNTAX_FILE, parse_syntaxes),
        )
        self.load_count += 1
        logger.debug(
            f"Loaded {len(tables.opcodes)} opcodes, {len(tables.memory_map)} "
            f"memory map entries, {len(tables.patterns)} patterns, "
            f"{len(tables.syntaxes)} syntaxes"
        )
        return tables


# =============================================================================
# Default Loader
# =============================================================================

_default_loader = TableLoader()


def get_tables() -> Tables:
    """Return the bundled tables from the process-wide loader."""
    return _default_loader.load()


async def get_tables_async() -> Tables:
    """Async variant of get_tables()."""
    return await _default_loader.load_async()


def reset_tables() -> None:
    """Drop the process-wide cache."""
    _default_loader.reset()
