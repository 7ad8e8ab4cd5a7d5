"""enigma_sim.cli.

Command-line interface for **enigma-sim**.

This module exposes a small Typer-based CLI that can:

- Run a whole message stream (settings lines + message lines) through a machine
  described by a configuration file, the way the original batch tool did.
- Convert a single message given on the command line.
- Show the rotor catalog of a configuration.

Design notes
- Domain errors are raised as :class:`~enigma_sim.errors.EnigmaError` and converted
  to exit code 1 after printing ``Error: <message>`` on stderr.
- Missing or unreadable files are rejected by Typer itself (exit code 2).
- ``--verbose`` turns on DEBUG logging (machine configuration and rotor stepping)
  through a Rich log handler on stderr.

Commands
- `run CONFIG [INPUT] [OUTPUT]`: process a message stream (stdin/stdout by default).
- `encode`: convert one message with one settings line.
- `catalog CONFIG`: list the rotors a configuration provides.

"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import apply_settings, build_machine, load_config, parse_settings
from .errors import EnigmaError
from .formatting import format_groups, group_symbols
from .session import normalize_message, process_lines

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)

DEFAULT_GROUPS_PER_LINE = 6


# Typer argument/option infos (avoid function-calls in defaults; keep Ruff happy)
CONFIG_ARG = typer.Argument(
    ..., exists=True, dir_okay=False, readable=True, help="Machine configuration file."
)
INPUT_ARG = typer.Argument(
    None, exists=True, dir_okay=False, readable=True, help="Message file (default: stdin)."
)
OUTPUT_ARG = typer.Argument(None, dir_okay=False, help="Output file (default: stdout).")
CONFIG_OPT = typer.Option(
    ...,
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    readable=True,
    help="Machine configuration file.",
)
SETTINGS_OPT = typer.Option(
    ..., "--settings", "-s", help="Settings line, e.g. '* B BETA III IV I AXLE (HQ) (EX)'."
)
TEXT_OPT = typer.Option(..., "--text", "-t", help="Message to convert.")
GROUPS_PER_LINE_OPT = typer.Option(
    DEFAULT_GROUPS_PER_LINE, "--groups-per-line", min=1, help="Five-symbol groups per line."
)
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Log configuration and stepping.")


def _configure_logging(verbose: bool) -> None:
    """Route package log records to a Rich handler on stderr."""
    pkg_logger = logging.getLogger("enigma_sim")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        handler = RichHandler(console=err_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        pkg_logger.addHandler(handler)


def _fail(exc: EnigmaError) -> typer.Exit:
    """Print `exc` on stderr and return the exit to raise (code 1)."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


def _write_text(path: Path, content: str) -> None:
    """Write UTF-8 text to disk, ensuring parent directories exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="\n")


@app.callback()
def main(verbose: bool = VERBOSE_OPT) -> None:
    """Rotor cipher machine simulator."""
    _configure_logging(verbose)


@app.command("run")
def run(
    config: Path = CONFIG_ARG,
    input_path: Path | None = INPUT_ARG,
    output_path: Path | None = OUTPUT_ARG,
) -> None:
    """Process a message stream with the machine described by CONFIG.

    The stream must start with a settings line (``* REFLECTOR ROTORS... SETTING
    [PLUGBOARD]``). Each message line is converted and printed in groups of
    five; blank lines are kept.

    Raises:
        typer.Exit: Exit code 1 on domain errors, after printing a message.

    """
    try:
        machine = build_machine(load_config(config))
        if input_path is not None:
            lines: list[str] = input_path.read_text(encoding="utf-8").splitlines()
        else:
            lines = sys.stdin.read().splitlines()
        out_lines = list(process_lines(machine, lines))
    except EnigmaError as exc:
        raise _fail(exc) from exc

    content = "".join(line + "\n" for line in out_lines)
    if output_path is not None:
        _write_text(output_path, content)
    else:
        typer.echo(content, nl=False)


@app.command("encode")
def encode(
    config: Path = CONFIG_OPT,
    settings: str = SETTINGS_OPT,
    text: str = TEXT_OPT,
    groups_per_line: int = GROUPS_PER_LINE_OPT,
) -> None:
    """Convert a single message (encryption and decryption are the same operation).

    Raises:
        typer.Exit: Exit code 1 on domain errors, after printing a message.

    """
    try:
        machine = build_machine(load_config(config))
        apply_settings(machine, parse_settings(settings, machine.num_rotors))
        converted = machine.convert_message(normalize_message(text, machine.alphabet))
    except EnigmaError as exc:
        raise _fail(exc) from exc

    body = format_groups(group_symbols(converted), per_line=groups_per_line).rstrip("\n")
    console.print(Panel.fit(body or "(empty)", title="encode"))


@app.command("catalog")
def catalog(config: Path = CONFIG_ARG) -> None:
    """List the rotors available in CONFIG."""
    try:
        machine = build_machine(load_config(config))
    except EnigmaError as exc:
        raise _fail(exc) from exc

    title = f"{machine.num_rotors} slots, {machine.pawls} pawls"
    table = Table(title=f"{title}, alphabet {machine.alphabet.symbols}")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Notches", no_wrap=True)
    table.add_column("Wiring")
    for rotor in machine.catalog.values():
        table.add_row(
            escape(rotor.name),
            rotor.kind.name.lower(),
            escape("".join(sorted(rotor.notches))),
            escape(rotor.permutation.cycles),
        )
    console.print(table)
