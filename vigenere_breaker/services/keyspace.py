"""
Key space enumeration and partitioning.

Keys are ordered by length first, then lexicographically by alphabet order:
for alphabet ``AB`` and max length 2 the space is ``A, B, AA, AB, BA, BB``.
Every key has a zero-based linear index, which lets the scheduler cut the
space into index ranges without materializing any keys.
"""

import itertools
from collections.abc import Iterator
from dataclasses import dataclass

from vigenere_breaker.core.exceptions import InvalidConfigurationError, KeySpaceOverflowError
from vigenere_breaker.services.cipher.alphabet import Alphabet

# Signed 64-bit index range.
MAX_KEY_INDEX = 2**63 - 1


def key_count(alphabet_size: int, max_length: int, limit: int = MAX_KEY_INDEX) -> int:
    """
    Number of keys of length 1..max_length.

    Raises:
        KeySpaceOverflowError: if the total exceeds ``limit``
    """
    if alphabet_size < 1:
        raise InvalidConfigurationError("alphabet_size", alphabet_size, "must be at least 1")
    if max_length < 1:
        raise InvalidConfigurationError("max_key_length", max_length, "must be at least 1")

    total = 0
    bucket = 1
    for _ in range(max_length):
        bucket *= alphabet_size
        total += bucket
        if total > limit:
            raise KeySpaceOverflowError(alphabet_size, max_length, limit)
    return total


def key_at(index: int, alphabet: Alphabet, max_length: int) -> str:
    """Map a linear index to its key."""
    size = alphabet.size
    total = key_count(size, max_length)
    if not 0 <= index < total:
        raise IndexError(f"key index {index} out of range [0, {total})")

    offset = index
    length = 1
    bucket = size
    while offset >= bucket:
        offset -= bucket
        length += 1
        bucket *= size

    symbols = []
    for _ in range(length):
        offset, digit = divmod(offset, size)
        symbols.append(alphabet.symbols[digit])
    return "".join(reversed(symbols))


def index_of_key(key: str, alphabet: Alphabet, max_length: int) -> int:
    """Map a key back to its linear index."""
    if not 1 <= len(key) <= max_length:
        raise ValueError(f"key {key!r} length must be within 1..{max_length}")

    size = alphabet.size
    # Keys shorter than this one come first.
    base = sum(size**length for length in range(1, len(key)))

    offset = 0
    for symbol in key:
        digit = alphabet.index_of(symbol)
        if digit is None:
            raise ValueError(f"symbol {symbol!r} is not in alphabet {alphabet.symbols!r}")
        offset = offset * size + digit
    return base + offset


class KeySequence:
    """Lazy, restartable view over every key in canonical order."""

    def __init__(self, alphabet: Alphabet, max_length: int):
        self.alphabet = alphabet
        self.max_length = max_length
        self._total = key_count(alphabet.size, max_length)

    def __len__(self) -> int:
        return self._total

    def __iter__(self) -> Iterator[str]:
        for length in range(1, self.max_length + 1):
            for combo in itertools.product(self.alphabet.symbols, repeat=length):
                yield "".join(combo)


def enumerate_keys(alphabet: Alphabet, max_length: int) -> KeySequence:
    return KeySequence(alphabet, max_length)


@dataclass(frozen=True)
class KeyBatch:
    """A contiguous ``[start, end)`` slice of the key space."""

    batch_id: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def keys(self, alphabet: Alphabet, max_length: int) -> Iterator[str]:
        """Yield the keys of this slice in order."""
        if self.size <= 0:
            return

        size = alphabet.size
        symbols = alphabet.symbols
        first = key_at(self.start, alphabet, max_length)
        digits = [alphabet.index_of(s) for s in first]

        for _ in range(self.size):
            yield "".join(symbols[d] for d in digits)

            # Odometer increment; rolling over every position moves to the
            # next key length.
            position = len(digits) - 1
            while position >= 0:
                digits[position] += 1
                if digits[position] < size:
                    break
                digits[position] = 0
                position -= 1
            if position < 0:
                digits = [0] * (len(digits) + 1)


class BatchPlan:
    """
    Partition of ``[0, total)`` into fixed-size batches.

    Batches are computed on demand; the plan never holds more than its
    two integers.
    """

    def __init__(self, total: int, batch_size: int):
        if batch_size < 1:
            raise InvalidConfigurationError("batch_size", batch_size, "must be at least 1")
        self.total = total
        self.batch_size = batch_size

    def __len__(self) -> int:
        return -(-self.total // self.batch_size)

    def __getitem__(self, batch_id: int) -> KeyBatch:
        if not 0 <= batch_id < len(self):
            raise IndexError(f"batch {batch_id} out of range")
        start = batch_id * self.batch_size
        return KeyBatch(batch_id, start, min(start + self.batch_size, self.total))

    def __iter__(self) -> Iterator[KeyBatch]:
        for batch_id in range(len(self)):
            yield self[batch_id]
