"""enigma_sim.rotor.

Rotors: a fixed wiring (a `Permutation`) mounted on a body that can be turned
to one of N positions (its *setting*).

There are exactly three kinds of rotor, modelled as a closed `RotorKind` enum
rather than a class hierarchy:

- ``REFLECTOR``: sits in the leftmost slot, never turns (setting is always 0)
  and sends the signal back through the stack. Its wiring must be a derangement.
- ``FIXED``: can be set by hand before a message but never advances.
- ``MOVING``: advances while keys are pressed and has a set of *notch* symbols.
  When the rotor shows a notch symbol, the next keypress also advances the rotor
  to its left (see `Machine.convert`).

Offset model
------------
The wiring is described at setting 0. With the body turned by ``s`` positions,
contact ``c`` touches wiring input ``c + s`` and wiring output ``o`` leaves on
contact ``o - s``, all modulo N::

    forward(c)  = wrap(permute(wrap(c + s)) - s)
    backward(c) = wrap(invert(wrap(c + s)) - s)

"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum

from .alphabet import Alphabet
from .errors import IndexOutOfRangeError, WrongSlotCapabilityError
from .permutation import Permutation


class RotorKind(Enum):
    """Rotor variants; values are the configuration-file type tags."""

    REFLECTOR = "R"
    FIXED = "N"
    MOVING = "M"


@dataclass(eq=False)
class Rotor:
    """A named rotor of a given kind.

    Use the `reflector`, `fixed` and `moving` constructors rather than
    instantiating directly.

    Attributes:
        name:
            Identifier used in the machine catalog (matched case-insensitively).
        permutation:
            Wiring at setting 0.
        kind:
            One of `RotorKind`.
        notches:
            Notch symbols; only moving rotors may have any.
        setting:
            Current position, an index into the alphabet.

    Raises:
        WrongSlotCapabilityError: If a reflector is not a derangement, or a
            non-moving rotor is given notches.
        UnknownSymbolError: If a notch is not in the alphabet.

    """

    name: str
    permutation: Permutation
    kind: RotorKind
    notches: frozenset[str] = field(default_factory=frozenset)
    setting: int = 0

    def __post_init__(self) -> None:
        if self.kind is RotorKind.REFLECTOR and not self.permutation.derangement():
            raise WrongSlotCapabilityError(
                f"Reflector {self.name!r} must map every symbol to a different one."
            )
        if self.notches and self.kind is not RotorKind.MOVING:
            raise WrongSlotCapabilityError(
                f"Rotor {self.name!r} does not move and cannot have notches."
            )
        for ch in self.notches:
            self.alphabet.to_index(ch)
        self.set(self.setting)

    @classmethod
    def reflector(cls, name: str, permutation: Permutation) -> Rotor:
        """Create a reflector; `permutation` must be a derangement."""
        return cls(name, permutation, RotorKind.REFLECTOR)

    @classmethod
    def fixed(cls, name: str, permutation: Permutation) -> Rotor:
        """Create a rotor that never advances."""
        return cls(name, permutation, RotorKind.FIXED)

    @classmethod
    def moving(cls, name: str, permutation: Permutation, notches: str) -> Rotor:
        """Create a moving rotor.

        Args:
            name: Rotor name.
            permutation: Wiring at setting 0.
            notches: Symbols at which the rotor carries its left neighbour.

        Returns:
            The rotor at setting 0.

        """
        return cls(name, permutation, RotorKind.MOVING, frozenset(notches))

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    def size(self) -> int:
        return self.permutation.size()

    @property
    def rotates(self) -> bool:
        """True if this rotor advances during processing."""
        return self.kind is RotorKind.MOVING

    @property
    def reflecting(self) -> bool:
        """True if this rotor can occupy the reflector slot."""
        return self.kind is RotorKind.REFLECTOR

    def set(self, posn: int | str) -> None:
        """Turn the rotor to `posn`, given as an index or as a symbol.

        Raises:
            IndexOutOfRangeError: If an index is outside [0, size).
            UnknownSymbolError: If a symbol is not in the alphabet.
            WrongSlotCapabilityError: If a reflector is set to anything but 0.
            TypeError: If `posn` is neither an int nor a str (bools included).

        """
        match posn:
            case str():
                index = self.alphabet.to_index(posn)
            case bool():
                raise TypeError("Rotor position must be int or str, not bool")
            case int():
                if not 0 <= posn < self.size():
                    raise IndexOutOfRangeError(posn, self.size())
                index = posn
            case _:
                raise TypeError(f"Rotor position must be int or str, not {type(posn).__name__}")

        match self.kind:
            case RotorKind.REFLECTOR if index != 0:
                raise WrongSlotCapabilityError(
                    f"Reflector {self.name!r} has a single position."
                )
            case _:
                self.setting = index

    def at_notch(self) -> bool:
        """True if a moving rotor currently shows one of its notch symbols."""
        match self.kind:
            case RotorKind.MOVING:
                return self.alphabet.to_symbol(self.setting) in self.notches
            case RotorKind.FIXED | RotorKind.REFLECTOR:
                return False

    def advance(self) -> None:
        """Advance a moving rotor by one position; other kinds do not move."""
        match self.kind:
            case RotorKind.MOVING:
                self.setting = self.permutation.wrap(self.setting + 1)
            case RotorKind.FIXED | RotorKind.REFLECTOR:
                pass

    def convert_forward(self, p: int) -> int:
        """Map contact `p` entering from the right to the contact it exits on."""
        perm = self.permutation
        return perm.wrap(perm.permute(perm.wrap(p + self.setting)) - self.setting)

    def convert_backward(self, e: int) -> int:
        """Map contact `e` entering from the left to the contact it exits on."""
        perm = self.permutation
        return perm.wrap(perm.invert(perm.wrap(e + self.setting)) - self.setting)

    def copy(self) -> Rotor:
        """Return an independent rotor with the same wiring, at setting 0."""
        return dataclasses.replace(self, setting=0)

    def __str__(self) -> str:
        return f"{self.kind.name.title()} rotor {self.name}"
