import math
from collections.abc import Iterable
from dataclasses import dataclass

from vigenere_breaker.models.schemas import CandidateData


@dataclass(frozen=True)
class ScoredCandidate:
    """A decryption under one key, with its score."""

    key: str
    plaintext: str
    score: float
    breakdown: dict[str, float] | None = None

    def to_data(self) -> CandidateData:
        return CandidateData(
            key=self.key,
            plaintext=self.plaintext,
            score=self.score,
            breakdown=self.breakdown,
        )


class ResultAggregator:
    """
    Bounded top-K ranking of scored candidates.

    Candidates are ordered by score descending; equal scores keep the order
    in which they were first added. The best score ever seen is tracked
    separately and survives truncation.
    """

    def __init__(self, limit: int = 50):
        if limit < 1:
            raise ValueError("result limit must be at least 1")
        self.limit = limit
        self._entries: list[tuple[int, ScoredCandidate]] = []
        self._sequence = 0
        self._best_score: float | None = None
        self.total_added = 0

    def add(self, candidates: Iterable[ScoredCandidate]) -> int:
        """
        Merge candidates into the ranking.

        Returns:
            Number of candidates accepted (unscoreable ones are dropped)
        """
        accepted = 0
        for candidate in candidates:
            if math.isnan(candidate.score) or candidate.score == float("-inf"):
                continue
            self._entries.append((self._sequence, candidate))
            self._sequence += 1
            accepted += 1
            if self._best_score is None or candidate.score > self._best_score:
                self._best_score = candidate.score

        if accepted:
            self.total_added += accepted
            self._entries.sort(key=lambda entry: (-entry[1].score, entry[0]))
            del self._entries[self.limit:]
        return accepted

    @property
    def results(self) -> list[ScoredCandidate]:
        return [candidate for _, candidate in self._entries]

    @property
    def best(self) -> ScoredCandidate | None:
        return self._entries[0][1] if self._entries else None

    @property
    def best_score(self) -> float | None:
        return self._best_score

    def clear(self) -> None:
        self._entries.clear()
        self._best_score = None

    def __len__(self) -> int:
        return len(self._entries)
