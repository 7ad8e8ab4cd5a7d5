from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

import pytest

from enigma_sim.alphabet import Alphabet
from enigma_sim.config import build_machine, parse_config
from enigma_sim.machine import Machine
from enigma_sim.permutation import Permutation
from enigma_sim.rotor import Rotor

NAVY_CONFIG = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
5 3
I MQ      (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
II ME     (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
III MV    (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
IV MJ     (AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)
V MZ      (AVOLDRWFIUQ)(BZKSMNHYC) (EGTJPX)
Beta N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
Gamma N   (AFNIRLBSQWVXGUZDKMTPCOYJHE)
B R       (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
          (RX) (SZ) (TV)
C R       (AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW)
          (QZ) (SX) (UY)
"""

ARMY_WIRINGS = {
    "I": ("(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)", "Q"),
    "II": ("(FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)", "E"),
    "III": ("(ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)", "V"),
}
WIDE_B = "(AY) (BR) (CU) (DH) (EQ) (FS) (GL) (IP) (JX) (KN) (MO) (TZ) (VW)"


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo level and handler changes made to the "enigma_sim" logger by the CLI."""
    pkg_logger = logging.getLogger("enigma_sim")
    level = pkg_logger.level
    handlers = list(pkg_logger.handlers)
    yield
    pkg_logger.setLevel(level)
    pkg_logger.handlers[:] = handlers


@pytest.fixture
def navy_config() -> str:
    """Text of the five-slot navy machine configuration."""
    return NAVY_CONFIG


@pytest.fixture
def upper() -> Alphabet:
    return Alphabet()


@pytest.fixture
def navy() -> Machine:
    """Five-slot machine (thin reflector, fixed fourth rotor, three moving)."""
    return build_machine(parse_config(NAVY_CONFIG))


@pytest.fixture
def army(upper: Alphabet) -> Machine:
    """Four-slot machine with rotors I, II, III and the wide reflector B."""
    rotors = [
        Rotor.moving(name, Permutation(cycles, upper), notch)
        for name, (cycles, notch) in ARMY_WIRINGS.items()
    ]
    rotors.append(Rotor.reflector("UKW-B", Permutation(WIDE_B, upper)))
    return Machine(upper, 4, 3, rotors)


def _configure(machine: Machine, names: list[str], setting: str, plugboard: str = "") -> Machine:
    machine.insert_rotors(names)
    machine.set_rotors(setting)
    machine.set_plugboard(Permutation(plugboard, machine.alphabet))
    return machine


@pytest.fixture
def configure() -> Callable[..., Machine]:
    """Insert rotors, set them and install a plugboard in one call."""
    return _configure
