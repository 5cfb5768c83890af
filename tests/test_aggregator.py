"""Tests for the top-K result aggregator."""

import pytest

from vigenere_breaker.services.engine import ResultAggregator, ScoredCandidate


def candidate(key: str, score: float) -> ScoredCandidate:
    return ScoredCandidate(key=key, plaintext=f"TEXT-{key}", score=score)


class TestResultAggregator:
    """Test suite for the bounded ranking."""

    def test_sorted_and_bounded(self):
        aggregator = ResultAggregator(limit=3)
        aggregator.add([candidate("A", 1.0), candidate("B", 5.0)])
        aggregator.add([candidate("C", 3.0), candidate("D", 4.0), candidate("E", 0.5)])

        assert [c.key for c in aggregator.results] == ["B", "D", "C"]
        assert len(aggregator) == 3
        assert aggregator.best_score == 5.0

    def test_ties_keep_arrival_order(self):
        aggregator = ResultAggregator(limit=5)
        aggregator.add([candidate("X", 2.0)])
        aggregator.add([candidate("Y", 2.0), candidate("Z", 2.0)])
        assert [c.key for c in aggregator.results] == ["X", "Y", "Z"]

    def test_unscoreable_dropped(self):
        aggregator = ResultAggregator(limit=5)
        accepted = aggregator.add([candidate("A", float("-inf")), candidate("B", float("nan"))])
        assert accepted == 0
        assert aggregator.results == []
        assert aggregator.best_score is None

    def test_best_score_survives_truncation(self):
        aggregator = ResultAggregator(limit=1)
        aggregator.add([candidate("A", 9.0)])
        aggregator.add([candidate("B", 1.0)])
        assert aggregator.best.key == "A"
        assert aggregator.best_score == 9.0

    def test_negative_scores_rank(self):
        aggregator = ResultAggregator(limit=2)
        aggregator.add([candidate("A", -300.0), candidate("B", -12.5)])
        assert aggregator.best.key == "B"

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            ResultAggregator(limit=0)

    def test_candidate_to_data(self):
        data = ScoredCandidate("KEY", "PLAIN", 42.0, {"words": 10.0}).to_data()
        assert data.key == "KEY"
        assert data.breakdown == {"words": 10.0}
