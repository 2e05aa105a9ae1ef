"""
Disassembly Session
===================

Holds one program together with its user overlays and settings, and keeps
the classified table and formatted lines up to date with minimal work.

Changes fall into two groups:

**Structural** changes (the program, entrypoints, the pattern flag) can
move the code/data boundary, so the next lines() call runs the classifier
and then the formatter.

**Cosmetic** changes (labels, comments, syntax, label prefix) only affect
text, so the cached classification is reused and only the formatter runs.

Every change bumps ``generation``. A caller that computed lines for an
older generation can tell its result is stale and discard it.

Usage:
    session = DisassemblySession(get_tables())
    session.load_program(load_prg("game.prg"))
    session.add_entrypoint(0xC100)
    session.set_label(0xC100, "irq_handler")
    for line in session.lines():
        print(line)
"""

from dataclasses import asdict
from datetime import date
from typing import Dict, List, Mapping, Optional
import logging

from disawsm.config import Settings
from disawsm.disassembler.classifier import ByteTable, Entrypoint, EntrypointKind
from disawsm.disassembler.engine import analyze, check_program_size
from disawsm.disassembler.exporter import format_as_assembly
from disawsm.disassembler.formatter import OutputLine, format_program
from disawsm.disassembler.addressing import validate_address
from disawsm.project.files import LoadedProgram
from disawsm.project.overlays import (
    Comment,
    CommentOverlay,
    EntrypointList,
    Label,
    LabelOverlay,
)
from disawsm.project.records import PROJECT_VERSION, ProjectRecord
from disawsm.syntax import AssemblerSyntax, resolve_syntax
from disawsm.tables.loader import Tables

logger = logging.getLogger(__name__)


class DisassemblySession:
    """
    A program under disassembly plus everything the user has added to it.

    Attributes:
        tables: Loaded lookup tables
        classify_runs: Number of classifier runs so far
        format_runs: Number of formatter runs so far
    """

    def __init__(self, tables: Tables, settings: Optional[Settings] = None):
        self.tables = tables
        self._settings = Settings(**asdict(settings)) if settings is not None else Settings()

        self._name = ""
        self._start_address = 0
        self._data = b""

        self._entrypoints = EntrypointList()
        self._labels = LabelOverlay()
        self._comments = CommentOverlay()

        self._table: Optional[ByteTable] = None
        self._lines: Optional[List[OutputLine]] = None
        self._generation = 0

        self.classify_runs = 0
        self.format_runs = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def start_address(self) -> int:
        return self._start_address

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def has_program(self) -> bool:
        return bool(self._data)

    @property
    def generation(self) -> int:
        """Increases on every change to the session."""
        return self._generation

    @property
    def settings(self) -> Settings:
        """A copy of the current settings."""
        return Settings(**asdict(self._settings))

    @property
    def syntax(self) -> AssemblerSyntax:
        return resolve_syntax(
            self.tables.syntaxes,
            self._settings.assembler_syntax,
            self._settings.custom_syntax,
        )

    @property
    def entrypoints(self) -> List[Entrypoint]:
        return self._entrypoints.to_list()

    @property
    def labels(self) -> Dict[int, str]:
        return self._labels.as_dict()

    @property
    def comments(self) -> Dict[int, str]:
        return self._comments.as_dict()

    @property
    def is_stale(self) -> bool:
        """True if the next lines() call has work to do."""
        return self._lines is None

    # =========================================================================
    # Change Tracking
    # =========================================================================

    def _structural_change(self) -> None:
        self._table = None
        self._lines = None
        self._generation += 1

    def _cosmetic_change(self) -> None:
        self._lines = None
        self._generation += 1

    # =========================================================================
    # Program
    # =========================================================================

    def set_program(self, name: str, start_address: int, data: bytes) -> None:
        """
        Replace the program.

        All overlays are cleared and a single CODE entrypoint is placed at
        the start address.

        Raises:
            InvalidAddressError: If start_address is outside $0000-$FFFF
            ProgramSizeError: If the program runs past $FFFF
        """
        validate_address(start_address)
        check_program_size(start_address, len(data))

        self._name = name
        self._start_address = start_address
        self._data = bytes(data)

        self._entrypoints.clear()
        self._labels.clear()
        self._comments.clear()
        if self._data:
            self._entrypoints.add(start_address, EntrypointKind.CODE)

        logger.debug(f"Session program {name}: {len(self._data)} bytes at ${start_address:04X}")
        self._structural_change()

    def load_program(self, program: LoadedProgram) -> None:
        self.set_program(program.name, program.start_address, program.data)

    # =========================================================================
    # Entrypoints (structural)
    # =========================================================================

    def add_entrypoint(self, address: int, kind: EntrypointKind = EntrypointKind.CODE) -> None:
        self._entrypoints.add(address, kind)
        self._structural_change()

    def remove_entrypoint(self, address: int) -> None:
        if self._entrypoints.remove(address):
            self._structural_change()

    def set_entrypoint_kind(self, address: int, kind: EntrypointKind) -> None:
        if self._entrypoints.set_kind(address, kind):
            self._structural_change()

    def move_entrypoint(self, old_address: int, new_address: int) -> None:
        if self._entrypoints.move(old_address, new_address):
            self._structural_change()

    def clear_entrypoints(self) -> None:
        self._entrypoints.clear()
        self._structural_change()

    def set_use_patterns(self, enabled: bool) -> None:
        if self._settings.use_patterns != enabled:
            self._settings.use_patterns = enabled
            self._structural_change()

    # =========================================================================
    # Labels, Comments and Output Style (cosmetic)
    # =========================================================================

    def set_label(self, address: int, name: str) -> None:
        """
        Raises:
            InvalidLabelError: If the name breaks the naming rule
        """
        self._labels.set(address, name)
        self._cosmetic_change()

    def remove_label(self, address: int) -> None:
        if self._labels.remove(address):
            self._cosmetic_change()

    def set_comment(self, address: int, text: str) -> None:
        self._comments.set(address, text)
        self._cosmetic_change()

    def remove_comment(self, address: int) -> None:
        if self._comments.remove(address):
            self._cosmetic_change()

    def set_syntax(self, key: str, custom: Optional[Mapping[str, str]] = None) -> None:
        self._settings.assembler_syntax = key
        if custom is not None:
            self._settings.custom_syntax = dict(custom)
        self._cosmetic_change()

    def set_label_prefix(self, prefix: str) -> None:
        self._settings.label_prefix = prefix
        self._cosmetic_change()

    def set_show_comments(self, enabled: bool) -> None:
        # Only affects export, the lines themselves are unchanged
        self._settings.show_comments = enabled

    # =========================================================================
    # Results
    # =========================================================================

    def table(self) -> ByteTable:
        """Return the classified table, running the classifier if needed."""
        if self._table is None:
            self._table = analyze(
                self._start_address,
                self._data,
                self._entrypoints.to_list(),
                self.tables,
                use_patterns=self._settings.use_patterns,
            )
            self.classify_runs += 1
        return self._table

    def lines(self) -> List[OutputLine]:
        """Return the formatted lines, recomputing only what changed."""
        if self._lines is None:
            table = self.table()
            self._lines = format_program(
                table,
                self.tables.opcodes,
                directive_prefix=self.syntax.directive_prefix,
                labels=self._labels.as_dict(),
                comments=self._comments.as_dict(),
                label_prefix=self._settings.label_prefix,
                memory_map=self.tables.memory_map,
            )
            self.format_runs += 1
        return list(self._lines)

    def export_assembly(self, today: Optional[date] = None) -> str:
        """Render the current lines as assembler source."""
        return format_as_assembly(
            self.lines(),
            self._start_address,
            self.syntax,
            show_comments=self._settings.show_comments,
            filename=self._name or None,
            today=today,
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_record(self) -> ProjectRecord:
        return ProjectRecord(
            name=self._name,
            start_address=self._start_address,
            data=self._data,
            entrypoints=self._entrypoints.to_list(),
            labels=[Label(lb.address, lb.name) for lb in self._labels],
            comments=[Comment(cm.address, cm.text) for cm in self._comments],
            version=PROJECT_VERSION,
        )

    def restore(self, record: ProjectRecord) -> None:
        """
        Replace the whole session state with a project record.

        The record is validated in full before anything is replaced; on
        error the session keeps its previous program, overlays and cache.

        Raises:
            InvalidAddressError: If an address is outside $0000-$FFFF
            InvalidLabelError: If a label name breaks the naming rule
            ProgramSizeError: If the program runs past $FFFF
        """
        validate_address(record.start_address)
        check_program_size(record.start_address, len(record.data))

        entrypoints = EntrypointList(record.entrypoints)
        labels = LabelOverlay()
        for label in record.labels:
            labels.set(label.address, label.name)
        comments = CommentOverlay()
        for comment in record.comments:
            comments.set(comment.address, comment.text)

        self._name = record.name
        self._start_address = record.start_address
        self._data = bytes(record.data)
        self._entrypoints = entrypoints
        self._labels = labels
        self._comments = comments

        self._structural_change()

    @classmethod
    def from_record(
        cls,
        record: ProjectRecord,
        tables: Tables,
        settings: Optional[Settings] = None,
    ) -> "DisassemblySession":
        session = cls(tables, settings)
        session.restore(record)
        return session
