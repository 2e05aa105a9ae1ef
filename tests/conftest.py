"""
disawsm Test Configuration
==========================

Shared fixtures for the unit tests:

- tables: the bundled lookup tables (loaded once per session)
- scenario_a: JSR program with bytes between the call and its target
- write_prg: helper that writes a PRG file into tmp_path
"""

from pathlib import Path

import pytest

from disawsm.tables import get_tables


@pytest.fixture(scope="session")
def tables():
    """Bundled lookup tables."""
    return get_tables()


@pytest.fixture
def scenario_a() -> bytes:
    """
    JSR $1050 at $1000, three stray bytes, filler, then LDA #$42 / RTS
    at $1050.
    """
    body = bytes([0x20, 0x50, 0x10, 0x01, 0x02, 0x03])
    filler = bytes([0xFF] * (0x50 - len(body)))
    return body + filler + bytes([0xA9, 0x42, 0x60])


@pytest.fixture
def write_prg(tmp_path):
    """Return a function that writes a PRG file and returns its path."""
    def _write(name: str, start: int, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(bytes([start & 0xFF, start >> 8]) + data)
        return path
    return _write
