import string
from collections import Counter
from dataclasses import dataclass, field

from vigenere_breaker.core.exceptions import InvalidAlphabetError

ENGLISH_ALPHABET = string.ascii_uppercase


@dataclass(frozen=True)
class Alphabet:
    """
    Ordered set of unique symbols, folded to upper case.

    All index arithmetic of the cipher and the key space is done against
    the position of a symbol in this sequence.
    """

    symbols: str
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        symbols = validate(self.symbols)
        object.__setattr__(self, "symbols", symbols)
        object.__setattr__(self, "_index", {s: i for i, s in enumerate(symbols)})

    @classmethod
    def english(cls) -> "Alphabet":
        return cls(ENGLISH_ALPHABET)

    @property
    def size(self) -> int:
        return len(self.symbols)

    def index_of(self, symbol: str) -> int | None:
        """Position of the symbol, or None when it is not in the alphabet."""
        return self._index.get(symbol.upper())

    def symbol_at(self, index: int) -> str:
        return self.symbols[index % len(self.symbols)]

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self._index

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self):
        return iter(self.symbols)

    def __str__(self) -> str:
        return self.symbols


def validate(symbols: str) -> str:
    """
    Validate an alphabet string and return its canonical upper-case form.

    Raises:
        InvalidAlphabetError: when empty or when a symbol repeats
            (compared case-insensitively)
    """
    if not symbols:
        raise InvalidAlphabetError(symbols or "", "alphabet cannot be empty")

    folded = symbols.upper()
    if len(folded) != len(symbols):
        # Some symbols expand when upper-cased (e.g. German sharp s).
        raise InvalidAlphabetError(symbols, "symbols must fold to a single character")

    counts = Counter(folded)
    duplicates = sorted(s for s, n in counts.items() if n > 1)
    if duplicates:
        raise InvalidAlphabetError(
            symbols,
            "alphabet contains duplicate characters",
            duplicates=duplicates,
        )

    return folded
