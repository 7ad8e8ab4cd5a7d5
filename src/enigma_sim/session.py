"""enigma_sim.session.

Processing of a message stream against a configured machine.

A stream is a sequence of lines of two kinds:

- settings lines, starting with ``*`` (see `enigma_sim.config.parse_settings`),
  which reconfigure the machine and produce no output;
- message lines, which are converted with the current machine state and
  written out in five-symbol blocks. Whitespace inside a message line is
  dropped; a line that is blank produces a blank output line.

The stream must open with a settings line.

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum, auto

from .alphabet import Alphabet
from .config import apply_settings, parse_settings
from .errors import ConfigError
from .formatting import format_message
from .machine import Machine

logger = logging.getLogger(__name__)


class _StreamState(Enum):
    AWAITING_SETTINGS = auto()
    MESSAGES = auto()


def normalize_message(line: str, alphabet: Alphabet) -> str:
    """Drop whitespace and upper-case symbols the alphabet only has in upper case."""
    out: list[str] = []
    for ch in line:
        if ch.isspace():
            continue
        upper = ch.upper()
        if ch not in alphabet and len(upper) == 1 and upper in alphabet:
            ch = upper
        out.append(ch)
    return "".join(out)


def process_lines(machine: Machine, lines: Iterable[str]) -> Iterator[str]:
    """Convert a message stream, yielding output lines (without newlines).

    Args:
        machine: Machine built from the configuration; it is reconfigured by
            every settings line.
        lines: Input lines; trailing newlines are ignored.

    Yields:
        One output line per message line.

    Raises:
        ConfigError: If the stream does not start with a settings line or a
            settings line is malformed.
        EnigmaError: If a settings line names unknown rotors or a message
            contains symbols outside the alphabet.

    """
    state = _StreamState.AWAITING_SETTINGS
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            settings = parse_settings(line, machine.num_rotors)
            apply_settings(machine, settings)
            logger.debug("Line %d: machine set to %s", lineno, " ".join(settings.rotors))
            state = _StreamState.MESSAGES
            continue

        match state:
            case _StreamState.AWAITING_SETTINGS:
                raise ConfigError(f"Line {lineno}: input must start with a '*' settings line.")
            case _StreamState.MESSAGES:
                msg = normalize_message(line, machine.alphabet)
                yield format_message(machine.convert_message(msg)) if msg else ""
