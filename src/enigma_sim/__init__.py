"""enigma_sim.

Rotor cipher machine simulator: alphabet, permutations, rotors and the machine
that steps them, plus the configuration/message-stream layer and a Typer CLI.

"""

from __future__ import annotations

from .alphabet import Alphabet
from .errors import EnigmaError
from .machine import Machine, MachineState
from .permutation import Permutation
from .rotor import Rotor, RotorKind

__all__ = [
    "Alphabet",
    "EnigmaError",
    "Machine",
    "MachineState",
    "Permutation",
    "Rotor",
    "RotorKind",
]

__version__ = "0.1.0"
