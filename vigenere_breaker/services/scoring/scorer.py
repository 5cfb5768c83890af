"""
Pluggable plaintext scorer.

Scores are deterministic for a given ``(method, text)`` pair, so each
``ScoringEngine`` memoizes them in its own bounded cache.
"""

from dataclasses import dataclass
from typing import ClassVar

from vigenere_breaker.models.schemas import ScoringMethod
from vigenere_breaker.services.scoring import metrics
from vigenere_breaker.services.scoring.cache import ScoreCache
from vigenere_breaker.services.scoring.metrics import UNSCOREABLE
from vigenere_breaker.services.scoring.ngrams import NgramTable, get_ngram_table


@dataclass(frozen=True)
class MetricScore:
    """A score with the optional per-component breakdown behind it."""

    score: float
    breakdown: dict[str, float] | None = None

    @property
    def scoreable(self) -> bool:
        return not metrics.is_unscoreable(self.score)


class ScoringEngine:
    """
    Scores candidate plaintexts with one of the ``ScoringMethod`` metrics.

    The combined method blends the normalized components with fixed weights:
    longer n-grams weigh more, and implausible bigrams are subtracted from
    the blend.
    """

    MIN_LENGTH: ClassVar[dict[ScoringMethod, int]] = {
        ScoringMethod.BIGRAM: 2,
        ScoringMethod.TRIGRAM: 3,
        ScoringMethod.QUADGRAM: 4,
        ScoringMethod.INDEX_OF_COINCIDENCE: 2,
        ScoringMethod.CHI_SQUARED: 5,
        ScoringMethod.WORDS: 2,
        ScoringMethod.IMPOSSIBLE_BIGRAMS: 2,
        ScoringMethod.COMBINED: 4,
    }

    COMBINED_WEIGHTS: ClassVar[dict[str, float]] = {
        "bigram": 0.15,
        "trigram": 0.20,
        "quadgram": 0.30,
        "ioc": 0.15,
        "words": 0.20,
    }

    NGRAM_ORDERS: ClassVar[dict[ScoringMethod, int]] = {
        ScoringMethod.BIGRAM: 2,
        ScoringMethod.TRIGRAM: 3,
        ScoringMethod.QUADGRAM: 4,
    }

    def __init__(
        self,
        floor: float = 1e-10,
        data_dir: str | None = None,
        cache: ScoreCache[MetricScore] | None = None,
    ):
        self.floor = floor
        self.data_dir = data_dir
        self.cache: ScoreCache[MetricScore] = cache if cache is not None else ScoreCache()

    def table(self, order: int) -> NgramTable:
        return get_ngram_table(order, self.floor, self.data_dir)

    def score(self, method: ScoringMethod | str, text: str) -> float:
        return self.evaluate(method, text).score

    def evaluate(self, method: ScoringMethod | str, text: str) -> MetricScore:
        """Score ``text`` with ``method``, going through the cache."""
        method = ScoringMethod(method)
        key = (method.value, text)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        result = self._compute(method, text)
        self.cache.put(key, result)
        return result

    def _compute(self, method: ScoringMethod, text: str) -> MetricScore:
        letters = metrics.letters_only(text)
        if len(letters) < self.MIN_LENGTH[method]:
            return MetricScore(UNSCOREABLE)

        match method:
            case ScoringMethod.BIGRAM | ScoringMethod.TRIGRAM | ScoringMethod.QUADGRAM:
                table = self.table(self.NGRAM_ORDERS[method])
                return MetricScore(metrics.ngram_log_likelihood(letters, table))
            case ScoringMethod.INDEX_OF_COINCIDENCE:
                return MetricScore(metrics.ioc_closeness(letters))
            case ScoringMethod.CHI_SQUARED:
                return MetricScore(metrics.chi_squared_fit(letters))
            case ScoringMethod.WORDS:
                return MetricScore(metrics.word_heuristic(text, letters))
            case ScoringMethod.IMPOSSIBLE_BIGRAMS:
                return MetricScore(metrics.impossible_bigram_penalty(letters))
            case ScoringMethod.COMBINED:
                return self._combined(text, letters)
        raise ValueError(f"Unsupported scoring method: {method}")

    def _combined(self, text: str, letters: str) -> MetricScore:
        breakdown: dict[str, float] = {}
        for name, order in (("bigram", 2), ("trigram", 3), ("quadgram", 4)):
            table = self.table(order)
            mean = metrics.ngram_log_likelihood(letters, table)
            breakdown[name] = metrics.ngram_percent(mean, table)

        breakdown["ioc"] = metrics.ioc_closeness(letters)
        breakdown["words"] = max(0.0, metrics.word_heuristic(text, letters))
        breakdown["penalty"] = metrics.impossible_bigram_penalty(letters)

        score = sum(weight * breakdown[name] for name, weight in self.COMBINED_WEIGHTS.items())
        score += breakdown["penalty"]
        return MetricScore(score, breakdown)
