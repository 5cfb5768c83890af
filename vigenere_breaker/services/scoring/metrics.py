"""
Plaintext scoring metrics.

Every metric maps text to a float where higher means "more like English".
Metrics work on the letters-only, upper-case projection of the text; the
word heuristic additionally tokenizes the original text on non-letters.
Text that is too short for a metric scores ``UNSCOREABLE``.
"""

import math
import re
from collections import Counter

from vigenere_breaker.services.scoring.ngrams import NgramTable
from vigenere_breaker.services.scoring.reference import (
    COMMON_BIGRAMS,
    ENGLISH_FREQ,
    ENGLISH_IC,
    IMPOSSIBLE_BIGRAMS,
    THREE_LETTER_WORDS,
    TOP_WORDS,
    TWO_LETTER_WORDS,
)

UNSCOREABLE = float("-inf")

_NON_LETTERS = re.compile(r"[^A-Z]+")
_WORDS = re.compile(r"[A-Za-z]+")

# Word heuristic weights, per hit. Shorter reference words weigh more.
TWO_LETTER_WEIGHT = 10.0
THREE_LETTER_WEIGHT = 8.0
TOP_WORD_WEIGHT = 6.0
MAX_BIGRAM_PERCENT = 60.0

IMPOSSIBLE_BIGRAM_PENALTY = 5.0


def letters_only(text: str) -> str:
    """Upper-case A-Z projection of ``text``."""
    return _NON_LETTERS.sub("", text.upper())


def is_unscoreable(score: float) -> bool:
    return score == UNSCOREABLE or math.isnan(score)


def ngram_log_likelihood(letters: str, table: NgramTable) -> float:
    """Mean log10 probability of the overlapping n-grams."""
    mean = table.mean_log_probability(letters)
    if mean is None:
        return UNSCOREABLE
    return mean


def ngram_percent(mean_log: float, table: NgramTable) -> float:
    """Map a mean log probability onto 0..100 (floor → 0, certainty → 100)."""
    if is_unscoreable(mean_log):
        return 0.0
    return max(0.0, min(100.0, 100.0 * (1.0 - mean_log / table.log_floor)))


def index_of_coincidence(letters: str) -> float | None:
    n = len(letters)
    if n < 2:
        return None
    counts = Counter(letters)
    return sum(c * (c - 1) for c in counts.values()) / (n * (n - 1))


def ioc_closeness(letters: str) -> float:
    """Closeness of the text's IC to English, 0..100."""
    ioc = index_of_coincidence(letters)
    if ioc is None:
        return UNSCOREABLE
    distance = abs(ioc - ENGLISH_IC) / ENGLISH_IC
    return max(0.0, 100.0 * (1.0 - distance))


def chi_squared(letters: str) -> float | None:
    """Chi-squared statistic against English letter frequencies."""
    n = len(letters)
    if n == 0:
        return None
    counts = Counter(letters)
    total = 0.0
    for letter, percent in ENGLISH_FREQ.items():
        expected = percent / 100 * n
        observed = counts.get(letter, 0)
        total += (observed - expected) ** 2 / expected
    return total


def chi_squared_fit(letters: str) -> float:
    """Negated chi-squared, so that higher is better."""
    if len(letters) < 5:
        return UNSCOREABLE
    return -chi_squared(letters)


def impossible_bigram_count(letters: str) -> int:
    return sum(1 for i in range(len(letters) - 1) if letters[i:i + 2] in IMPOSSIBLE_BIGRAMS)


def impossible_bigram_penalty(letters: str) -> float:
    """``-penalty`` per implausible adjacent pair; 0 for clean text."""
    if len(letters) < 2:
        return UNSCOREABLE
    return -IMPOSSIBLE_BIGRAM_PENALTY * impossible_bigram_count(letters)


def word_heuristic(text: str, letters: str) -> float:
    """
    Common-bigram share plus reference-word hits, capped at 100.

    The bigram share contributes at most 60; every two-letter word,
    three-letter word or frequent longer word found in the original text
    adds its weight. Implausible bigrams are subtracted afterwards.
    """
    if len(letters) < 2:
        return UNSCOREABLE

    hits = sum(1 for i in range(len(letters) - 1) if letters[i:i + 2] in COMMON_BIGRAMS)
    bigram_percent = min(MAX_BIGRAM_PERCENT, hits / (len(letters) - 1) * 120)

    word_score = 0.0
    for word in _WORDS.findall(text):
        upper = word.upper()
        if len(upper) == 2 and upper in TWO_LETTER_WORDS:
            word_score += TWO_LETTER_WEIGHT
        elif len(upper) == 3 and upper in THREE_LETTER_WORDS:
            word_score += THREE_LETTER_WEIGHT
        elif upper in TOP_WORDS:
            word_score += TOP_WORD_WEIGHT

    penalty = IMPOSSIBLE_BIGRAM_PENALTY * impossible_bigram_count(letters)
    return min(100.0, bigram_percent + word_score) - penalty
