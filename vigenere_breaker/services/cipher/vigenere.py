"""
Vigenère transform over an arbitrary alphabet.

Each character whose upper-case form belongs to the alphabet is shifted by
the current key symbol and keeps its original case. Characters outside the
alphabet are copied unchanged and do not advance the key position, so the
key only cycles across alphabet members.
"""

from collections.abc import Sequence

from vigenere_breaker.core.exceptions import InvalidKeyError
from vigenere_breaker.services.cipher.alphabet import Alphabet


def key_shifts(key: str, alphabet: Alphabet) -> list[int]:
    """
    Convert a key into its list of alphabet shifts.

    Raises:
        InvalidKeyError: if the key is empty or uses foreign symbols
    """
    if not key:
        raise InvalidKeyError(key, alphabet.symbols)

    shifts = []
    for symbol in key:
        index = alphabet.index_of(symbol)
        if index is None:
            raise InvalidKeyError(key, alphabet.symbols)
        shifts.append(index)
    return shifts


def apply_shifts(text: str, shifts: Sequence[int], alphabet: Alphabet, direction: int) -> str:
    """
    Shift every alphabet member of ``text`` by the repeating ``shifts``.

    ``direction`` is +1 to encrypt and -1 to decrypt.
    """
    size = alphabet.size
    symbols = alphabet.symbols
    period = len(shifts)
    result = []
    position = 0

    for char in text:
        index = alphabet.index_of(char)
        if index is None:
            result.append(char)
            continue

        shifted = symbols[(index + direction * shifts[position % period] + size) % size]
        if char != char.upper():
            shifted = shifted.lower()
        result.append(shifted)
        position += 1

    return "".join(result)


class PreparedText:
    """
    Ciphertext indexed once against an alphabet.

    The search loop decrypts the same text under many keys; resolving each
    character's alphabet position and case up front keeps the per-key work
    to the modular arithmetic.
    """

    __slots__ = ("alphabet", "text", "_cells", "_lower")

    def __init__(self, text: str, alphabet: Alphabet):
        self.alphabet = alphabet
        self.text = text
        self._lower = [s.lower() for s in alphabet.symbols]
        self._cells: list[tuple[int | None, bool, str]] = [
            (alphabet.index_of(char), char != char.upper(), char) for char in text
        ]

    def decrypt(self, shifts: Sequence[int]) -> str:
        size = self.alphabet.size
        symbols = self.alphabet.symbols
        lower = self._lower
        period = len(shifts)
        result = []
        position = 0

        for index, is_lower, char in self._cells:
            if index is None:
                result.append(char)
                continue
            table = lower if is_lower else symbols
            result.append(table[(index - shifts[position % period]) % size])
            position += 1

        return "".join(result)


def encrypt(plaintext: str, key: str, alphabet: Alphabet) -> str:
    """Encrypt ``plaintext`` with the repeating ``key``."""
    return apply_shifts(plaintext, key_shifts(key, alphabet), alphabet, +1)


def decrypt(ciphertext: str, key: str, alphabet: Alphabet) -> str:
    """Decrypt ``ciphertext`` with the repeating ``key``."""
    return apply_shifts(ciphertext, key_shifts(key, alphabet), alphabet, -1)
