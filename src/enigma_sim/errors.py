"""enigma_sim.errors.

Error types raised by the cipher engine and its configuration layer.

Every error derives from :class:`EnigmaError`, so callers (most notably the CLI)
can catch a single type and turn it into a diagnostic plus a non-zero exit code.
The subclasses carry the offending value (symbol, index, rotor name, ...) as an
attribute in addition to including it in the message.

"""

from __future__ import annotations


class EnigmaError(Exception):
    """Base class for all domain errors."""


class InvalidAlphabetError(EnigmaError):
    """An alphabet is empty or contains a duplicated symbol."""


class MalformedPermutationError(EnigmaError):
    """A cycle-notation string is structurally invalid."""

    def __init__(self, cycles: str, reason: str) -> None:
        super().__init__(f"Malformed permutation {cycles!r}: {reason}")
        self.cycles = cycles
        self.reason = reason


class UnknownSymbolError(EnigmaError):
    """A symbol is not part of the alphabet in use."""

    def __init__(self, symbol: str, alphabet: str) -> None:
        super().__init__(f"Symbol {symbol!r} is not in alphabet {alphabet!r}")
        self.symbol = symbol
        self.alphabet = alphabet


class IndexOutOfRangeError(EnigmaError):
    """An index lies outside [0, size) of the alphabet."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} out of range 0..{size - 1}")
        self.index = index
        self.size = size


class UnknownRotorError(EnigmaError):
    """A rotor name is not present in the machine's catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No such rotor: {name!r}")
        self.name = name


class WrongSlotCapabilityError(EnigmaError):
    """A rotor lacks (or has) a capability its slot or operation requires."""


class RotorArrangementError(EnigmaError):
    """A rotor selection violates the machine's slot/pawl layout."""


class SettingLengthMismatchError(EnigmaError):
    """A setting string does not cover exactly the non-reflector slots."""

    def __init__(self, setting: str, expected: int) -> None:
        super().__init__(
            f"Setting {setting!r} has {len(setting)} symbols, expected {expected}"
        )
        self.setting = setting
        self.expected = expected


class MachineNotConfiguredError(EnigmaError):
    """An operation requires rotors, settings or plugboard not yet provided."""


class InvalidMachineParametersError(EnigmaError):
    """Slot count, pawl count or catalog contents are invalid."""


class ConfigError(EnigmaError):
    """Configuration text or a message stream is malformed."""
