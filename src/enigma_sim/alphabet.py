"""enigma_sim.alphabet.

Bidirectional mapping between the symbols a machine can encode and the dense
integer indices (0..N-1) that the rest of the engine works with.

"""

from __future__ import annotations

import string
from dataclasses import dataclass, field

from .errors import IndexOutOfRangeError, InvalidAlphabetError, UnknownSymbolError


@dataclass(frozen=True)
class Alphabet:
    """An ordered, duplicate-free set of symbols.

    Symbol number ``k`` of `symbols` has index ``k``.

    Attributes:
        symbols:
            The symbols in index order. Must be non-empty and contain no
            repeated character.

    Raises:
        InvalidAlphabetError: If `symbols` is empty or has duplicates.

    """

    symbols: str = string.ascii_uppercase
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.symbols) == 0:
            raise InvalidAlphabetError("Alphabet must contain at least one symbol.")
        index: dict[str, int] = {}
        for i, ch in enumerate(self.symbols):
            if ch in index:
                raise InvalidAlphabetError(f"Duplicate symbol {ch!r} in alphabet.")
            index[ch] = i
        object.__setattr__(self, "_index", index)

    @property
    def size(self) -> int:
        """Number of symbols."""
        return len(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def contains(self, symbol: str) -> bool:
        """Return True if `symbol` belongs to this alphabet."""
        return symbol in self._index

    def to_index(self, symbol: str) -> int:
        """Return the index of `symbol`.

        Raises:
            UnknownSymbolError: If `symbol` is not in the alphabet.

        """
        try:
            return self._index[symbol]
        except KeyError:
            raise UnknownSymbolError(symbol, self.symbols) from None

    def to_symbol(self, index: int) -> str:
        """Return the symbol at `index`.

        Raises:
            IndexOutOfRangeError: If `index` is outside [0, size).

        """
        if not 0 <= index < len(self.symbols):
            raise IndexOutOfRangeError(index, len(self.symbols))
        return self.symbols[index]
