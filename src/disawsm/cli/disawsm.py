"""
disawsm - 6502 Disassembler Command-Line Interface
==================================================

Classifies the bytes of a 6502 program as code or data by following control
flow from entrypoints, then writes assembler source, a listing, or a .dis
project file that keeps entrypoints, labels and comments for later.

Usage Examples
--------------
Disassemble a PRG file (load address taken from the file):
    $ disawsm disasm game.prg

Add a second code entrypoint and mark a data table:
    $ disawsm disasm game.prg -e 0xc100 -e '$c800:data'

Raw binary at a given address, KickAssembler syntax:
    $ disawsm disasm rom.bin --raw -a 0xe000 --syntax kickass -o rom.asm

Name things and save a project:
    $ disawsm save game.prg -l 0xc100=irq -c '0xc100=raster irq' -o game.dis

Re-export or inspect a project:
    $ disawsm export game.dis -o game.asm
    $ disawsm info game.dis
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from disawsm import __version__
from disawsm.cli.errors import handle_cli_exception
from disawsm.config import Settings
from disawsm.disassembler.addressing import parse_address
from disawsm.disassembler.classifier import Entrypoint, EntrypointKind
from disawsm.disassembler.engine import check_program_size
from disawsm.errors import InvalidAddressError
from disawsm.project.files import (
    LoadedProgram,
    load_binary,
    load_prg,
    load_project,
    project_filename,
    save_project,
)
from disawsm.session import DisassemblySession
from disawsm.syntax import CUSTOM_SYNTAX_KEY
from disawsm.tables.loader import get_tables

logger = logging.getLogger(__name__)


# =============================================================================
# Shared Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the settings resolved from the settings file and
    the environment.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.settings: Settings = Settings()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Parameter Types
# =============================================================================

class AddressType(click.ParamType):
    """
    Click parameter type for 16-bit addresses.

    Accepts: 0xC000, $C000 or 49152
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, int):
            return value
        try:
            return parse_address(value)
        except InvalidAddressError:
            self.fail(f"Invalid address '{value}' (use 0xC000, $C000 or decimal)", param, ctx)


class EntrypointType(click.ParamType):
    """
    Click parameter type for entrypoints.

    Accepts: ADDRESS or ADDRESS:code or ADDRESS:data
    """
    name = "entrypoint"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> Entrypoint:
        if isinstance(value, Entrypoint):
            return value

        text, _, kind_text = value.partition(":")
        try:
            address = parse_address(text)
        except InvalidAddressError:
            self.fail(f"Invalid entrypoint address '{text}'", param, ctx)

        kind_text = kind_text.strip().lower() or EntrypointKind.CODE.value
        try:
            kind = EntrypointKind(kind_text)
        except ValueError:
            self.fail(f"Invalid entrypoint type '{kind_text}'. Choose from: code, data", param, ctx)
        return Entrypoint(address, kind)


class AssignmentType(click.ParamType):
    """
    Click parameter type for per-address values.

    Accepts: ADDRESS=VALUE (for example 0xC000=main)
    """
    name = "address=value"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> Tuple[int, str]:
        if isinstance(value, tuple):
            return value

        text, sep, assigned = value.partition("=")
        if not sep:
            self.fail(f"Expected ADDRESS=VALUE, got '{value}'", param, ctx)
        try:
            return parse_address(text), assigned
        except InvalidAddressError:
            self.fail(f"Invalid address '{text}'", param, ctx)


ADDRESS = AddressType()
ENTRYPOINT = EntrypointType()
ASSIGNMENT = AssignmentType()


# =============================================================================
# Shared Options
# =============================================================================

def program_options(func):
    """Options that load a program and seed its overlays."""
    options = [
        click.argument(
            "input_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        ),
        click.option(
            "-a", "--address",
            type=ADDRESS,
            default=None,
            help="Load address (required for --raw; overrides a PRG header)",
        ),
        click.option(
            "--raw",
            is_flag=True,
            help="Input is a headerless binary, not a PRG file",
        ),
        click.option(
            "-e", "--entry", "entries",
            type=ENTRYPOINT,
            multiple=True,
            help="Entrypoint ADDRESS[:code|data] (repeatable)",
        ),
        click.option(
            "--no-start-entry",
            is_flag=True,
            help="Do not seed a code entrypoint at the load address",
        ),
        click.option(
            "-l", "--label", "labels",
            type=ASSIGNMENT,
            multiple=True,
            help="Label ADDRESS=NAME (repeatable)",
        ),
        click.option(
            "-c", "--comment", "comments",
            type=ASSIGNMENT,
            multiple=True,
            help="Comment ADDRESS=TEXT (repeatable)",
        ),
        click.option(
            "--patterns/--no-patterns",
            default=None,
            help="Use known instruction patterns as extra code seeds",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def style_options(func):
    """Options that only change how output is rendered."""
    options = [
        click.option(
            "--syntax",
            type=str,
            default=None,
            help="Assembler syntax: acme, kickass, ca65, 64tass, dasm or custom",
        ),
        click.option(
            "--label-prefix",
            type=str,
            default=None,
            help="Prefix for generated labels (default: _)",
        ),
        click.option(
            "--no-comments",
            is_flag=True,
            help="Leave comments and XREF summaries out of the assembly",
        ),
        click.option(
            "--listing",
            is_flag=True,
            help="Write an address/bytes listing instead of assembler source",
        ),
        click.option(
            "-o", "--output",
            type=click.Path(dir_okay=False, path_type=Path),
            help="Output file (default: stdout)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# =============================================================================
# Helpers
# =============================================================================

def _read_program(input_file: Path, address: Optional[int], raw: bool) -> LoadedProgram:
    if raw:
        if address is None:
            raise click.BadParameter("--raw needs a load address (-a)", param_hint="'-a'")
        return load_binary(input_file, address)

    program = load_prg(input_file)
    if address is not None and address != program.start_address:
        check_program_size(address, len(program.data))
        logger.info(f"Overriding PRG load address ${program.start_address:04X} with ${address:04X}")
        program = LoadedProgram(program.name, address, program.data)
    return program


def _build_session(
    ctx: Context,
    input_file: Path,
    address: Optional[int],
    raw: bool,
    entries: Tuple[Entrypoint, ...],
    no_start_entry: bool,
    labels: Tuple[Tuple[int, str], ...],
    comments: Tuple[Tuple[int, str], ...],
    patterns: Optional[bool],
) -> DisassemblySession:
    session = DisassemblySession(get_tables(), ctx.settings)
    program = _read_program(input_file, address, raw)
    session.load_program(program)

    if no_start_entry:
        session.remove_entrypoint(program.start_address)
    for entrypoint in entries:
        session.add_entrypoint(entrypoint.address, entrypoint.kind)
    for label_address, name in labels:
        session.set_label(label_address, name)
    for comment_address, text in comments:
        session.set_comment(comment_address, text)
    if patterns is not None:
        session.set_use_patterns(patterns)

    return session


def _apply_style(
    session: DisassemblySession,
    syntax: Optional[str],
    label_prefix: Optional[str],
    no_comments: bool,
) -> None:
    if syntax is not None:
        key = syntax.lower()
        if key != CUSTOM_SYNTAX_KEY and key not in session.tables.syntaxes:
            choices = ", ".join([*session.tables.syntaxes, CUSTOM_SYNTAX_KEY])
            raise click.BadParameter(
                f"Unknown syntax '{syntax}'. Choose from: {choices}",
                param_hint="'--syntax'",
            )
        session.set_syntax(key)
    if label_prefix is not None:
        session.set_label_prefix(label_prefix)
    if no_comments:
        session.set_show_comments(False)


def _render(session: DisassemblySession, listing: bool) -> str:
    if listing:
        return "\n".join(str(line) for line in session.lines()) + "\n"
    return session.export_assembly() + "\n"


def _write_output(text: str, output: Optional[Path], verbose: bool) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        if verbose:
            click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(text, nl=False)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
@click.option(
    "--config", "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON settings file (environment variables override it)",
)
@click.version_option(version=__version__, prog_name="disawsm")
@pass_context
def main(ctx: Context, verbose: bool, config_file: Optional[Path]) -> None:
    """
    6502 disassembler that separates code from data.

    Starting at the load address and any extra entrypoints, disawsm follows
    jumps, calls and branches to find the code. Everything it cannot reach
    is written as data.

    \b
    Commands:
      disasm   Disassemble a PRG or raw binary
      save     Save a .dis project file
      export   Re-render a .dis project
      info     Show a summary of a .dis project
    """
    ctx.verbose = verbose
    ctx.setup_logging()
    base = Settings.load(config_file) if config_file else None
    ctx.settings = Settings.from_env(base)


# =============================================================================
# Disasm Command
# =============================================================================

@main.command("disasm")
@program_options
@style_options
@pass_context
def cmd_disasm(
    ctx: Context,
    input_file: Path,
    address: Optional[int],
    raw: bool,
    entries: Tuple[Entrypoint, ...],
    no_start_entry: bool,
    labels: Tuple[Tuple[int, str], ...],
    comments: Tuple[Tuple[int, str], ...],
    patterns: Optional[bool],
    syntax: Optional[str],
    label_prefix: Optional[str],
    no_comments: bool,
    listing: bool,
    output: Optional[Path],
) -> None:
    """
    Disassemble a 6502 program.

    INPUT_FILE is a PRG file (load address in its first two bytes) or, with
    --raw, a headerless binary loaded at -a.

    \b
    Examples:
      disawsm disasm game.prg
      disawsm disasm game.prg -e 0xc100 -e '$c800:data' -o game.asm
      disawsm disasm rom.bin --raw -a 0xe000 --listing
    """
    try:
        session = _build_session(
            ctx, input_file, address, raw, entries, no_start_entry,
            labels, comments, patterns,
        )
        _apply_style(session, syntax, label_prefix, no_comments)
        _write_output(_render(session, listing), output, ctx.verbose)

        if ctx.verbose:
            summary = session.table().summary()
            click.echo(
                f"Classified {len(session.data)} bytes: {summary['code']} code, "
                f"{summary['data']} data, {summary['unknown']} unknown",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Disassembly")


# =============================================================================
# Save Command
# =============================================================================

@main.command("save")
@program_options
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project file (default: INPUT name with .dis extension)",
)
@pass_context
def cmd_save(
    ctx: Context,
    input_file: Path,
    address: Optional[int],
    raw: bool,
    entries: Tuple[Entrypoint, ...],
    no_start_entry: bool,
    labels: Tuple[Tuple[int, str], ...],
    comments: Tuple[Tuple[int, str], ...],
    patterns: Optional[bool],
    output: Optional[Path],
) -> None:
    """
    Save a program and its overlays as a .dis project.

    \b
    Example:
      disawsm save game.prg -e 0xc100 -l 0xc100=irq -o game.dis
    """
    try:
        session = _build_session(
            ctx, input_file, address, raw, entries, no_start_entry,
            labels, comments, patterns,
        )
        target = output or input_file.with_name(project_filename(input_file.name))
        save_project(target, session.to_record())
        click.echo(f"Saved project: {target}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Project")


# =============================================================================
# Export Command
# =============================================================================

@main.command("export")
@click.argument(
    "project_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@style_options
@pass_context
def cmd_export(
    ctx: Context,
    project_file: Path,
    syntax: Optional[str],
    label_prefix: Optional[str],
    no_comments: bool,
    listing: bool,
    output: Optional[Path],
) -> None:
    """
    Re-render a .dis project as assembler source.

    \b
    Example:
      disawsm export game.dis --syntax ca65 -o game.s
    """
    try:
        record = load_project(project_file)
        session = DisassemblySession.from_record(record, get_tables(), ctx.settings)
        _apply_style(session, syntax, label_prefix, no_comments)
        _write_output(_render(session, listing), output, ctx.verbose)

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Export")


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "project_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_info(ctx: Context, project_file: Path) -> None:
    """
    Show a summary of a .dis project.

    \b
    Example:
      disawsm info game.dis
    """
    try:
        record = load_project(project_file)
        session = DisassemblySession.from_record(record, get_tables(), ctx.settings)
        summary = session.table().summary()
        size = len(record.data)
        end = record.start_address + max(size - 1, 0)

        click.echo(f"Project Information: {project_file}")
        click.echo("=" * 40)
        click.echo(f"Name:        {record.name}")
        click.echo(f"Version:     {record.version}")
        click.echo(f"Address:     ${record.start_address:04X}-${end:04X}")
        click.echo(f"Size:        {size} bytes")
        click.echo()
        click.echo("Overlays:")
        click.echo(f"  Entrypoints: {len(record.entrypoints)}")
        click.echo(f"  Labels:      {len(record.labels)}")
        click.echo(f"  Comments:    {len(record.comments)}")
        click.echo()
        click.echo("Classification:")
        click.echo(f"  Code:        {summary['code']} bytes")
        click.echo(f"  Data:        {summary['data']} bytes")
        click.echo(f"  Unknown:     {summary['unknown']} bytes")
        click.echo(f"  Targets:     {summary['targets']}")
        click.echo(f"  Lines:       {len(session.lines())}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Project")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
