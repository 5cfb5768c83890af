import math
from functools import lru_cache
from pathlib import Path

from vigenere_breaker.services.scoring.reference import NGRAM_FREQUENCIES

NGRAM_FILE_NAMES: dict[int, str] = {
    2: "english_bigrams.txt",
    3: "english_trigrams.txt",
    4: "english_quadgrams.txt",
}


class NgramTable:
    """
    Log10 probabilities of n-grams of a single order.

    Unseen n-grams score ``log10(floor)``.
    """

    def __init__(self, order: int, log_probs: dict[str, float], floor: float):
        if floor <= 0:
            raise ValueError("n-gram floor must be positive")
        self.order = order
        self.log_probs = log_probs
        self.floor = floor
        self.log_floor = math.log10(floor)

    @classmethod
    def from_frequencies(cls, order: int, frequencies: dict[str, float], floor: float) -> "NgramTable":
        """Build from percentages (or any non-negative weights)."""
        total = sum(frequencies.values())
        if total <= 0:
            raise ValueError(f"{order}-gram frequencies sum to <= 0")
        # Percent tables list only the head of the distribution; probabilities
        # are relative to 100, not to the listed total.
        scale = max(total, 100.0)
        log_probs = {
            gram.upper(): math.log10(value / scale)
            for gram, value in frequencies.items()
            if value > 0
        }
        return cls(order, log_probs, floor)

    @classmethod
    def from_file(cls, order: int, path: Path, floor: float) -> "NgramTable":
        """
        Load ``GRAM COUNT`` lines and convert counts to log probabilities.

        Malformed lines are skipped.
        """
        counts: dict[str, int] = {}
        with open(path, encoding="utf-8") as f:
            for line in f:
                parts = line.strip().split()
                if len(parts) < 2:
                    continue
                gram = parts[0].upper()
                if len(gram) != order or not gram.isalpha():
                    continue
                try:
                    counts[gram] = int(parts[1])
                except ValueError:
                    continue

        total = sum(counts.values())
        if total <= 0:
            raise ValueError(f"No usable {order}-gram counts in {path}")

        log_probs = {g: math.log10(c / total) for g, c in counts.items() if c > 0}
        return cls(order, log_probs, floor)

    def log_probability(self, gram: str) -> float:
        return self.log_probs.get(gram, self.log_floor)

    def mean_log_probability(self, letters: str) -> float | None:
        """Mean log10 probability over overlapping n-grams, None when too short."""
        count = len(letters) - self.order + 1
        if count < 1:
            return None

        get = self.log_probs.get
        floor = self.log_floor
        order = self.order
        total = 0.0
        for i in range(count):
            total += get(letters[i:i + order], floor)
        return total / count


@lru_cache(maxsize=None)
def get_ngram_table(order: int, floor: float, data_dir: str | None = None) -> NgramTable:
    """
    Load the table for ``order``, cached per process.

    A file from ``data_dir`` wins over the built-in table when present.
    """
    if order not in NGRAM_FREQUENCIES:
        raise ValueError(f"Unsupported n-gram order {order}")

    if data_dir:
        path = Path(data_dir) / NGRAM_FILE_NAMES[order]
        if path.is_file():
            return NgramTable.from_file(order, path, floor)

    return NgramTable.from_frequencies(order, NGRAM_FREQUENCIES[order], floor)
