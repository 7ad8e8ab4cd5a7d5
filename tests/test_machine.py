from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from enigma_sim.alphabet import Alphabet
from enigma_sim.errors import (
    InvalidMachineParametersError,
    MachineNotConfiguredError,
    RotorArrangementError,
    SettingLengthMismatchError,
    UnknownRotorError,
    UnknownSymbolError,
    WrongSlotCapabilityError,
)
from enigma_sim.machine import Machine, MachineState
from enigma_sim.permutation import Permutation
from enigma_sim.rotor import Rotor

Configure = Callable[..., Machine]


def _small_catalog() -> tuple[Alphabet, list[Rotor]]:
    a = Alphabet("ABCD")
    return a, [
        Rotor.reflector("R", Permutation("(AB) (CD)", a)),
        Rotor.fixed("F", Permutation("(ABCD)", a)),
        Rotor.moving("M", Permutation("(AC)", a), "D"),
    ]


@pytest.mark.parametrize(("num_rotors", "pawls"), [(1, 1), (0, 0), (3, 0), (3, 4), (3, -1)])
def test_invalid_parameters(num_rotors: int, pawls: int) -> None:
    a, rotors = _small_catalog()
    with pytest.raises(InvalidMachineParametersError):
        Machine(a, num_rotors, pawls, rotors)


def test_pawls_may_equal_slot_count() -> None:
    a, rotors = _small_catalog()
    assert Machine(a, 3, 3, rotors).pawls == 3


def test_duplicate_catalog_names() -> None:
    a, rotors = _small_catalog()
    rotors.append(Rotor.fixed("f", Permutation("", a)))
    with pytest.raises(InvalidMachineParametersError):
        Machine(a, 3, 1, rotors)


def test_catalog_rotor_over_other_alphabet() -> None:
    a, rotors = _small_catalog()
    rotors.append(Rotor.fixed("X", Permutation("", Alphabet("ABC"))))
    with pytest.raises(InvalidMachineParametersError):
        Machine(a, 3, 1, rotors)


def test_state_transitions() -> None:
    a, rotors = _small_catalog()
    m = Machine(a, 3, 1, rotors)
    assert m.state is MachineState.UNCONFIGURED
    with pytest.raises(MachineNotConfiguredError):
        m.convert(0)
    with pytest.raises(MachineNotConfiguredError):
        m.convert_message("")
    with pytest.raises(MachineNotConfiguredError):
        m.set_rotors("AA")

    m.insert_rotors(["R", "F", "M"])
    assert m.state is MachineState.ROTORS_INSERTED
    m.set_rotors("AA")
    assert m.state is MachineState.ROTORS_INSERTED
    with pytest.raises(MachineNotConfiguredError):
        m.convert(0)
    with pytest.raises(MachineNotConfiguredError):
        m.convert_message("")
    with pytest.raises(MachineNotConfiguredError):
        m.convert_message("A7")

    m.set_plugboard(Permutation.identity(a))
    assert m.state is MachineState.READY
    m.convert(0)
    assert m.convert_message("") == ""

    m.insert_rotors(["r", "m", "f"])
    assert m.state is MachineState.ROTORS_INSERTED


def test_insert_is_case_insensitive_and_copies(navy: Machine) -> None:
    navy.insert_rotors(["b", "BETA", "iii", "IV", "i"])
    assert [r.name for r in navy.slots] == ["B", "Beta", "III", "IV", "I"]
    assert navy.slots[4] is not navy.catalog["I"]
    navy.set_rotors("AXLE")
    assert navy.catalog["I"].setting == 0


def test_machines_do_not_share_rotor_state(navy: Machine, configure: Configure) -> None:
    other = Machine(navy.alphabet, navy.num_rotors, navy.pawls, navy.catalog.values())
    configure(navy, ["B", "Beta", "I", "II", "III"], "AAAA")
    configure(other, ["B", "Beta", "I", "II", "III"], "AAAA")
    navy.convert_message("AAAAA")
    assert navy.settings() == "AAAF"
    assert other.settings() == "AAAA"


def test_unknown_rotor_leaves_slots_unchanged(navy: Machine, configure: Configure) -> None:
    configure(navy, ["B", "Beta", "III", "IV", "I"], "AXLE")
    before = navy.slots
    with pytest.raises(UnknownRotorError) as info:
        navy.insert_rotors(["B", "Beta", "III", "IV", "IX"])
    assert info.value.name == "IX"
    assert navy.slots == before
    assert navy.settings() == "AXLE"
    assert navy.state is MachineState.READY


def test_leftmost_must_reflect(navy: Machine) -> None:
    with pytest.raises(WrongSlotCapabilityError):
        navy.insert_rotors(["Beta", "B", "III", "IV", "I"])
    assert navy.slots == ()


@pytest.mark.parametrize(
    "names",
    [
        ["B", "Beta", "III", "IV"],
        ["B", "Beta", "III", "IV", "I", "II"],
        ["B", "Beta", "III", "III", "I"],
        ["B", "C", "III", "IV", "I"],
        ["B", "I", "II", "III", "IV"],
    ],
)
def test_bad_arrangements(navy: Machine, names: list[str]) -> None:
    with pytest.raises(RotorArrangementError):
        navy.insert_rotors(names)
    assert navy.slots == ()


def test_set_rotors_wrong_length_changes_nothing(navy: Machine, configure: Configure) -> None:
    configure(navy, ["B", "Beta", "III", "IV", "I"], "AXLE")
    with pytest.raises(SettingLengthMismatchError) as info:
        navy.set_rotors("AXL")
    assert info.value.expected == 4
    assert navy.settings() == "AXLE"


def test_set_rotors_unknown_symbol_changes_nothing(navy: Machine, configure: Configure) -> None:
    configure(navy, ["B", "Beta", "III", "IV", "I"], "AXLE")
    with pytest.raises(UnknownSymbolError):
        navy.set_rotors("BCD!")
    assert navy.settings() == "AXLE"


def test_plugboard_alphabet_must_match(navy: Machine) -> None:
    with pytest.raises(InvalidMachineParametersError):
        navy.set_plugboard(Permutation("(AB)", Alphabet("ABC")))


def test_only_rightmost_rotor_steps_away_from_notches(army: Machine, configure: Configure) -> None:
    configure(army, ["UKW-B", "I", "II", "III"], "AAA")
    army.convert(0)
    assert army.settings() == "AAB"
    army.convert(0)
    assert army.settings() == "AAC"


def test_right_rotor_notch_carries_middle(army: Machine, configure: Configure) -> None:
    configure(army, ["UKW-B", "I", "II", "III"], "AAV")
    army.convert(0)
    assert army.settings() == "ABW"


def test_double_step(army: Machine, configure: Configure) -> None:
    configure(army, ["UKW-B", "I", "II", "III"], "ADU")
    observed = []
    for _ in range(4):
        army.convert(0)
        observed.append(army.settings())
    assert observed == ["ADV", "AEW", "BFX", "BFY"]


def test_fixed_rotor_is_never_stepped(navy: Machine, configure: Configure) -> None:
    # II sits at its notch E next to the fixed Beta: only the rightmost rotor moves
    configure(navy, ["B", "Beta", "II", "IV", "I"], "AEAA")
    navy.convert(0)
    assert navy.settings() == "AEAB"


def test_known_answer_army(army: Machine, configure: Configure) -> None:
    configure(army, ["UKW-B", "I", "II", "III"], "AAA")
    assert army.convert_message("AAAAA") == "BDZGO"


def test_thin_reflector_with_beta_at_a_matches_wide_reflector(
    navy: Machine, configure: Configure
) -> None:
    configure(navy, ["B", "Beta", "I", "II", "III"], "AAAA")
    assert navy.convert_message("AAAAA") == "BDZGO"


def test_single_symbol_involution(navy: Machine, configure: Configure) -> None:
    plugs = "(HQ) (EX) (IP) (TK) (NU)"
    for x in range(26):
        configure(navy, ["B", "Beta", "III", "IV", "I"], "AXLE", plugs)
        y = navy.convert(x)
        assert y != x
        configure(navy, ["B", "Beta", "III", "IV", "I"], "AXLE", plugs)
        assert navy.convert(y) == x


def test_message_involution_and_state_carry_over(navy: Machine, configure: Configure) -> None:
    names = ["C", "Gamma", "V", "I", "II"]
    plugs = "(AQ) (BZ) (CM) (DY)"
    msg = "THEQUICKBROWNFOXJUMPSOVERTHELAZYDOG" * 3

    configure(navy, names, "QEVZ", plugs)
    cipher = navy.convert_message(msg)
    again = navy.convert_message(msg)
    assert cipher != msg
    assert again != cipher

    configure(navy, names, "QEVZ", plugs)
    assert navy.convert_message(cipher) == msg


def test_unknown_symbol_in_message_does_not_step(army: Machine, configure: Configure) -> None:
    configure(army, ["UKW-B", "I", "II", "III"], "AAA")
    with pytest.raises(UnknownSymbolError):
        army.convert_message("AB7")
    assert army.settings() == "AAA"


def test_stepping_is_logged(
    army: Machine, configure: Configure, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="enigma_sim")
    configure(army, ["UKW-B", "I", "II", "III"], "AAA")
    army.convert(0)
    assert "Stepped to AAB" in caplog.text
