"""enigma_sim.config.

Reading machine descriptions and per-message settings.

Configuration format
--------------------
A configuration is a whitespace-separated token stream (line breaks carry no
meaning)::

    ABCDEFGHIJKLMNOPQRSTUVWXYZ
    5 3
    I     MQ  (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
    Beta  N   (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
    B     R   (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
              (RX) (SZ) (TV)

1) the alphabet,
2) the number of rotor slots and the number of pawls,
3) any number of rotor descriptions ``NAME TYPE CYCLES...``. ``TYPE`` starts with
   ``M`` (moving; the remaining characters are its notches), ``N`` (fixed) or
   ``R`` (reflector). Cycles are the following tokens that start with ``(``.

The token stream is consumed by a small state machine (`_State`).

Settings lines
--------------
A message stream configures the machine with lines such as::

    * B Beta III IV I AXLE (HQ) (EX) (IP) (TK) (NU)

i.e. ``*``, one rotor name per slot (reflector first), the initial setting of
the non-reflector slots, and an optional plugboard in cycle notation.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from .alphabet import Alphabet
from .errors import ConfigError, EnigmaError
from .machine import Machine
from .permutation import Permutation
from .rotor import Rotor, RotorKind

_RESERVED = "()*"


@dataclass(frozen=True)
class RotorSpec:
    """One catalog entry as written in a configuration.

    Attributes:
        name: Rotor name.
        kind: Rotor variant.
        cycles: Wiring in cycle notation.
        notches: Notch symbols (moving rotors only).

    """

    name: str
    kind: RotorKind
    cycles: str
    notches: str = ""

    def build(self, alphabet: Alphabet) -> Rotor:
        """Construct the rotor over `alphabet`.

        Raises:
            ConfigError: If the description does not give a valid rotor.

        """
        try:
            perm = Permutation(self.cycles, alphabet)
            match self.kind:
                case RotorKind.MOVING:
                    return Rotor.moving(self.name, perm, self.notches)
                case RotorKind.FIXED:
                    return Rotor.fixed(self.name, perm)
                case RotorKind.REFLECTOR:
                    return Rotor.reflector(self.name, perm)
        except EnigmaError as exc:
            raise ConfigError(f"Bad description of rotor {self.name!r}: {exc}") from exc


@dataclass(frozen=True)
class MachineConfig:
    """A parsed machine description.

    Attributes:
        alphabet: Symbols of the machine.
        num_rotors: Number of rotor slots, reflector included.
        pawls: Number of pawls.
        rotors: Rotor catalog, in file order.

    """

    alphabet: Alphabet
    num_rotors: int
    pawls: int
    rotors: tuple[RotorSpec, ...]


@dataclass(frozen=True)
class MessageSettings:
    """Per-message machine settings taken from a ``*`` line.

    Attributes:
        rotors: Rotor names, reflector first.
        setting: Initial positions of the non-reflector slots.
        plugboard: Plugboard in cycle notation (empty for none).

    """

    rotors: tuple[str, ...]
    setting: str
    plugboard: str = ""


class _State(Enum):
    ALPHABET = auto()
    ROTOR_COUNT = auto()
    PAWL_COUNT = auto()
    ROTOR_NAME = auto()
    ROTOR_TYPE = auto()
    CYCLES = auto()


def _read_alphabet(token: str) -> Alphabet:
    bad = [ch for ch in _RESERVED if ch in token]
    if bad:
        raise ConfigError(f"Alphabet {token!r} may not contain {''.join(bad)!r}.")
    try:
        return Alphabet(token)
    except EnigmaError as exc:
        raise ConfigError(str(exc)) from exc


def _read_count(token: str, what: str) -> int:
    try:
        return int(token, 10)
    except ValueError as exc:
        raise ConfigError(f"Expected the number of {what}, got {token!r}.") from exc


def _read_type(name: str, token: str) -> tuple[RotorKind, str]:
    try:
        kind = RotorKind(token[0].upper())
    except ValueError as exc:
        raise ConfigError(f"Invalid type {token!r} for rotor {name!r}.") from exc
    if kind is RotorKind.MOVING:
        return kind, token[1:]
    if len(token) > 1:
        raise ConfigError(f"Only moving rotors take notches (rotor {name!r}: {token!r}).")
    return kind, ""


def _read_name(token: str) -> str:
    if token.startswith("("):
        raise ConfigError(f"Cycle {token!r} does not follow a rotor type.")
    bad = [ch for ch in _RESERVED if ch in token]
    if bad:
        raise ConfigError(f"Rotor name {token!r} may not contain {''.join(bad)!r}.")
    return token


def parse_config(text: str) -> MachineConfig:
    """Parse a machine configuration.

    Args:
        text: Configuration text (see module docstring).

    Returns:
        The parsed configuration. Rotor wirings are validated by
        `build_machine`, not here.

    Raises:
        ConfigError: If the text is truncated or a token is out of place.

    """
    state = _State.ALPHABET
    alphabet: Alphabet | None = None
    num_rotors = 0
    pawls = 0
    rotors: list[RotorSpec] = []

    name = ""
    kind = RotorKind.FIXED
    notches = ""
    cycles: list[str] = []

    for token in text.split():
        match state:
            case _State.ALPHABET:
                alphabet = _read_alphabet(token)
                state = _State.ROTOR_COUNT
            case _State.ROTOR_COUNT:
                num_rotors = _read_count(token, "rotors")
                state = _State.PAWL_COUNT
            case _State.PAWL_COUNT:
                pawls = _read_count(token, "pawls")
                state = _State.ROTOR_NAME
            case _State.ROTOR_NAME:
                name = _read_name(token)
                state = _State.ROTOR_TYPE
            case _State.ROTOR_TYPE:
                kind, notches = _read_type(name, token)
                cycles = []
                state = _State.CYCLES
            case _State.CYCLES:
                if token.startswith("("):
                    if not token.endswith(")"):
                        raise ConfigError(f"Incomplete cycle {token!r} in rotor {name!r}.")
                    cycles.append(token)
                else:
                    rotors.append(RotorSpec(name, kind, " ".join(cycles), notches))
                    name = _read_name(token)
                    state = _State.ROTOR_TYPE

    match state:
        case _State.CYCLES:
            rotors.append(RotorSpec(name, kind, " ".join(cycles), notches))
        case _State.ROTOR_NAME:
            pass
        case _State.ROTOR_TYPE:
            raise ConfigError(f"Rotor {name!r} has no type.")
        case _:
            raise ConfigError("Configuration file truncated.")

    if alphabet is None or not rotors:
        raise ConfigError("Configuration describes no rotors.")
    return MachineConfig(alphabet, num_rotors, pawls, tuple(rotors))


def load_config(path: Path) -> MachineConfig:
    """Read and parse the configuration file at `path` (UTF-8)."""
    return parse_config(path.read_text(encoding="utf-8"))


def build_machine(cfg: MachineConfig) -> Machine:
    """Create a machine with the catalog described by `cfg`.

    Raises:
        ConfigError: If a rotor description is invalid.
        InvalidMachineParametersError: If the slot/pawl counts are invalid or
            two rotors share a name.

    """
    rotors = [spec.build(cfg.alphabet) for spec in cfg.rotors]
    return Machine(cfg.alphabet, cfg.num_rotors, cfg.pawls, rotors)


def parse_settings(line: str, num_rotors: int) -> MessageSettings:
    """Parse a ``*`` settings line for a machine with `num_rotors` slots.

    Raises:
        ConfigError: If the line does not start with ``*``, has too few
            fields, or has trailing tokens that are not plugboard cycles.

    """
    stripped = line.strip()
    if not stripped.startswith("*"):
        raise ConfigError(f"Settings line must start with '*': {line!r}")
    fields = stripped[1:].split()
    if len(fields) < num_rotors + 1:
        raise ConfigError(
            f"Settings line needs {num_rotors} rotor names and a setting: {line!r}"
        )
    plugs = fields[num_rotors + 1 :]
    for token in plugs:
        if not token.startswith("("):
            raise ConfigError(f"Unexpected token {token!r} in plugboard of {line!r}")
    return MessageSettings(
        rotors=tuple(fields[:num_rotors]),
        setting=fields[num_rotors],
        plugboard=" ".join(plugs),
    )


def apply_settings(machine: Machine, settings: MessageSettings) -> None:
    """Insert rotors, set them and install the plugboard described by `settings`."""
    plugboard = Permutation(settings.plugboard, machine.alphabet)
    machine.insert_rotors(settings.rotors)
    machine.set_rotors(settings.setting)
    machine.set_plugboard(plugboard)
