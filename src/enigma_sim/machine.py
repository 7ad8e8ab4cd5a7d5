"""enigma_sim.machine.

The rotor machine: a row of rotor slots, a plugboard, and the stepping and
signal-path logic that turns one keypress into one output symbol.

Slots are numbered from the left. Slot 0 holds the reflector; the rightmost
slot holds the fastest rotor, which advances on every keypress.

Lifecycle
---------
A new machine is ``UNCONFIGURED``. `insert_rotors` installs fresh copies of
catalog rotors (``ROTORS_INSERTED``); once `set_rotors` and `set_plugboard`
have both been applied the machine is ``READY`` and `convert` may be called.
Inserting rotors again starts over from ``ROTORS_INSERTED``.

A machine is not safe to share between threads: `convert` reads and updates
rotor settings without locking.

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from types import MappingProxyType

from .alphabet import Alphabet
from .errors import (
    InvalidMachineParametersError,
    MachineNotConfiguredError,
    RotorArrangementError,
    SettingLengthMismatchError,
    UnknownRotorError,
    WrongSlotCapabilityError,
)
from .permutation import Permutation
from .rotor import Rotor

logger = logging.getLogger(__name__)


class MachineState(Enum):
    UNCONFIGURED = "unconfigured"
    ROTORS_INSERTED = "rotors-inserted"
    READY = "ready"


def _key(name: str) -> str:
    return name.upper()


class Machine:
    """A rotor machine.

    Args:
        alphabet: Symbols the machine encodes.
        num_rotors: Number of rotor slots, reflector included. Must be > 1.
        pawls: Number of pawls, i.e. the most moving rotors that may be
            installed at once. Must satisfy ``0 < pawls <= num_rotors``.
        rotors: Catalog of rotors available for insertion. The machine never
            mutates these; `insert_rotors` installs copies.

    Raises:
        InvalidMachineParametersError: On bad counts, a duplicated rotor name
            or a rotor wired over a different alphabet.

    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise InvalidMachineParametersError(
                f"A machine needs more than one rotor slot (got {num_rotors})."
            )
        if not 0 < pawls <= num_rotors:
            raise InvalidMachineParametersError(
                f"Invalid number of pawls {pawls} for {num_rotors} slots."
            )

        catalog: dict[str, Rotor] = {}
        for rotor in rotors:
            key = _key(rotor.name)
            if key in catalog:
                raise InvalidMachineParametersError(f"Duplicate rotor name {rotor.name!r}.")
            if rotor.alphabet != alphabet:
                raise InvalidMachineParametersError(
                    f"Rotor {rotor.name!r} is wired over a different alphabet."
                )
            catalog[key] = rotor

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._catalog = catalog
        self._slots: list[Rotor] = []
        self._settings_applied = False
        self._plugboard: Permutation | None = None

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        """Number of rotor slots, reflector included."""
        return self._num_rotors

    @property
    def pawls(self) -> int:
        return self._pawls

    @property
    def catalog(self) -> Mapping[str, Rotor]:
        """Available rotors, keyed by upper-cased name (read-only view)."""
        return MappingProxyType(self._catalog)

    @property
    def slots(self) -> tuple[Rotor, ...]:
        """Installed rotors, left to right (empty before `insert_rotors`)."""
        return tuple(self._slots)

    @property
    def plugboard(self) -> Permutation | None:
        return self._plugboard

    @property
    def state(self) -> MachineState:
        if not self._slots:
            return MachineState.UNCONFIGURED
        if self._settings_applied and self._plugboard is not None:
            return MachineState.READY
        return MachineState.ROTORS_INSERTED

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Install the catalog rotors `names`, left to right.

        ``names[0]`` must name a reflector. Every installed rotor is a fresh
        copy at setting 0, so settings and plugboard have to be applied again
        afterwards. Nothing changes if validation fails.

        Raises:
            UnknownRotorError: If a name is not in the catalog.
            WrongSlotCapabilityError: If the first rotor is not a reflector.
            RotorArrangementError: On a wrong number of names, a repeated name,
                a reflector outside slot 0, or more moving rotors than pawls.

        """
        if len(names) != self._num_rotors:
            raise RotorArrangementError(
                f"Expected {self._num_rotors} rotor names, got {len(names)}."
            )

        chosen: list[Rotor] = []
        seen: set[str] = set()
        for name in names:
            key = _key(name)
            if key not in self._catalog:
                raise UnknownRotorError(name)
            if key in seen:
                raise RotorArrangementError(f"Rotor {name!r} is used more than once.")
            seen.add(key)
            chosen.append(self._catalog[key])

        if not chosen[0].reflecting:
            raise WrongSlotCapabilityError(
                f"Leftmost rotor must be a reflector, got {chosen[0].name!r}."
            )
        for rotor in chosen[1:]:
            if rotor.reflecting:
                raise RotorArrangementError(
                    f"Reflector {rotor.name!r} can only be placed in the leftmost slot."
                )
        moving = sum(1 for rotor in chosen if rotor.rotates)
        if moving > self._pawls:
            raise RotorArrangementError(
                f"{moving} moving rotors selected but the machine has {self._pawls} pawls."
            )

        self._slots = [rotor.copy() for rotor in chosen]
        self._settings_applied = False
        self._plugboard = None
        logger.debug("Inserted rotors %s", " ".join(r.name for r in self._slots))

    def set_rotors(self, setting: Sequence[str]) -> None:
        """Set slots 1.. (left to right) to the symbols of `setting`.

        The reflector in slot 0 is not set. Nothing changes if validation fails.

        Raises:
            MachineNotConfiguredError: If no rotors are installed.
            SettingLengthMismatchError: If ``len(setting) != num_rotors - 1``.
            UnknownSymbolError: If a symbol is not in the alphabet.

        """
        if not self._slots:
            raise MachineNotConfiguredError("Rotors must be inserted before they can be set.")
        if len(setting) != self._num_rotors - 1:
            raise SettingLengthMismatchError("".join(setting), self._num_rotors - 1)

        positions = [self._alphabet.to_index(ch) for ch in setting]
        for rotor, posn in zip(self._slots[1:], positions):
            rotor.set(posn)
        self._settings_applied = True
        logger.debug("Rotor settings %s", "".join(setting))

    def set_plugboard(self, plugboard: Permutation) -> None:
        """Replace the plugboard.

        Raises:
            InvalidMachineParametersError: If `plugboard` permutes a different
                alphabet.

        """
        if plugboard.alphabet != self._alphabet:
            raise InvalidMachineParametersError("Plugboard is over a different alphabet.")
        self._plugboard = plugboard
        logger.debug("Plugboard %r", plugboard.cycles)

    def settings(self) -> str:
        """Current positions of slots 1.., as symbols."""
        return "".join(self._alphabet.to_symbol(r.setting) for r in self._slots[1:])

    def _step(self) -> None:
        slots = self._slots
        last = len(slots) - 1
        advancing = [False] * len(slots)
        advancing[last] = True
        # A rotor at its notch carries its left neighbour and moves itself too:
        # that is the double step of the middle rotor.
        for i in range(last, 0, -1):
            if slots[i].at_notch() and slots[i - 1].rotates:
                advancing[i] = True
                advancing[i - 1] = True
        for rotor, adv in zip(slots, advancing):
            if adv:
                rotor.advance()
        logger.debug("Stepped to %s", self.settings())

    def _require_ready(self) -> Permutation:
        """Return the installed plugboard, or raise unless the machine is ``READY``."""
        plugboard = self._plugboard
        if plugboard is None or not self._settings_applied:
            raise MachineNotConfiguredError(
                f"Machine is {self.state.value}; insert rotors, set them and set the "
                "plugboard before converting."
            )
        return plugboard

    def convert(self, c: int) -> int:
        """Press the key with index `c` and return the index that lights up.

        The rotors are stepped before the signal passes through the machine.

        Raises:
            MachineNotConfiguredError: If the machine is not ``READY``.

        """
        plugboard = self._require_ready()
        self._step()

        slots = self._slots
        signal = plugboard.permute(c)
        for rotor in reversed(slots[1:]):
            signal = rotor.convert_forward(signal)
        signal = slots[0].convert_forward(signal)
        for rotor in slots[1:]:
            signal = rotor.convert_backward(signal)
        return plugboard.permute(signal)

    def convert_message(self, msg: str) -> str:
        """Convert every symbol of `msg` in order, advancing rotors as it goes.

        Raises:
            UnknownSymbolError: If `msg` contains a symbol outside the alphabet.
            MachineNotConfiguredError: If the machine is not ``READY``.

        """
        self._require_ready()
        alphabet = self._alphabet
        indices = [alphabet.to_index(ch) for ch in msg]
        return "".join(alphabet.to_symbol(self.convert(i)) for i in indices)
