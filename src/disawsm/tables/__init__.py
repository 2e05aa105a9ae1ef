"""
disawsm Lookup Tables
=====================

Bundled JSON assets (memory map, patterns, assembler syntaxes) and the
single-flight loader that turns them into an immutable Tables bundle.
"""

from disawsm.tables.loader import (
    Tables,
    TableLoader,
    get_tables,
    get_tables_async,
    reset_tables,
    parse_memory_map,
    parse_patterns,
    parse_syntaxes,
)

__all__ = [
    "Tables",
    "TableLoader",
    "get_tables",
    "get_tables_async",
    "reset_tables",
    "parse_memory_map",
    "parse_patterns",
    "parse_syntaxes",
]
