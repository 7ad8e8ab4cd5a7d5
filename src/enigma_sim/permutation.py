"""enigma_sim.permutation.

Permutations of alphabet indices written in cycle notation.

A permutation is described by a string such as ``"(AELTPHQXRU) (BKNW) (S)"``:
each parenthesised group maps every symbol to the next one in the group, the last
symbol wrapping around to the first. Symbols that appear in no group map to
themselves.

The cycle string is parsed once and turned into two index tables (forward and
inverse), so `permute` and `invert` are plain list lookups. Both accept any
integer and reduce it modulo the alphabet size first; rotor offset arithmetic
relies on this.

"""

from __future__ import annotations

from .alphabet import Alphabet
from .errors import MalformedPermutationError


def parse_cycles(cycles: str) -> list[str]:
    """Split a cycle-notation string into its cycles.

    Whitespace anywhere in the string is ignored, so ``"(AB)(CD)"`` and
    ``"(A B) (C D)"`` both give ``["AB", "CD"]``.

    Args:
        cycles: Permutation in cycle notation. May be empty (identity).

    Returns:
        The symbols of each cycle, in order of appearance.

    Raises:
        MalformedPermutationError: On unbalanced or nested parentheses, an empty
            group, or symbols outside any group.

    """
    out: list[str] = []
    current: list[str] | None = None
    for ch in cycles:
        if ch.isspace():
            continue
        if ch == "(":
            if current is not None:
                raise MalformedPermutationError(cycles, "nested '('")
            current = []
        elif ch == ")":
            if current is None:
                raise MalformedPermutationError(cycles, "unmatched ')'")
            if len(current) == 0:
                raise MalformedPermutationError(cycles, "empty cycle '()'")
            out.append("".join(current))
            current = None
        elif current is None:
            raise MalformedPermutationError(cycles, f"symbol {ch!r} outside of a cycle")
        else:
            current.append(ch)
    if current is not None:
        raise MalformedPermutationError(cycles, "missing ')'")
    return out


class Permutation:
    """A bijection on the indices of an `Alphabet`.

    Args:
        cycles: Permutation in cycle notation over the symbols of `alphabet`.
        alphabet: The alphabet being permuted.

    Raises:
        MalformedPermutationError: If `cycles` cannot be parsed or a symbol
            appears more than once.
        UnknownSymbolError: If a cycle contains a symbol outside `alphabet`.

    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self._alphabet = alphabet
        self._cycles = cycles
        self._parsed = parse_cycles(cycles)

        n = alphabet.size
        forward = list(range(n))
        seen: set[str] = set()
        for cycle in self._parsed:
            for i, ch in enumerate(cycle):
                if ch in seen:
                    raise MalformedPermutationError(
                        cycles, f"symbol {ch!r} appears more than once"
                    )
                seen.add(ch)
                nxt = cycle[(i + 1) % len(cycle)]
                forward[alphabet.to_index(ch)] = alphabet.to_index(nxt)

        inverse = [0] * n
        for src, dst in enumerate(forward):
            inverse[dst] = src

        self._forward = forward
        self._inverse = inverse

    @classmethod
    def identity(cls, alphabet: Alphabet) -> Permutation:
        """Return the permutation that maps every symbol to itself."""
        return cls("", alphabet)

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def cycles(self) -> str:
        """The cycle string this permutation was built from."""
        return self._cycles

    def size(self) -> int:
        """Size of the permuted alphabet."""
        return self._alphabet.size

    def wrap(self, p: int) -> int:
        """Return `p` reduced into [0, size)."""
        return p % self._alphabet.size

    def permute(self, p: int) -> int:
        """Apply the permutation to index `p` (taken modulo the size)."""
        return self._forward[self.wrap(p)]

    def invert(self, c: int) -> int:
        """Apply the inverse permutation to index `c` (taken modulo the size)."""
        return self._inverse[self.wrap(c)]

    def permute_symbol(self, symbol: str) -> str:
        """Apply the permutation to `symbol`.

        Raises:
            UnknownSymbolError: If `symbol` is not in the alphabet.

        """
        a = self._alphabet
        return a.to_symbol(self.permute(a.to_index(symbol)))

    def invert_symbol(self, symbol: str) -> str:
        """Apply the inverse permutation to `symbol`."""
        a = self._alphabet
        return a.to_symbol(self.invert(a.to_index(symbol)))

    def derangement(self) -> bool:
        """Return True iff no symbol maps to itself."""
        return all(dst != src for src, dst in enumerate(self._forward))

    def __repr__(self) -> str:
        return f"Permutation({self._cycles!r}, {self._alphabet.symbols!r})"
