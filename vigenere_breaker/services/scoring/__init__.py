"""Plaintext scoring metrics and the pluggable scoring engine."""

from vigenere_breaker.services.scoring.cache import ScoreCache
from vigenere_breaker.services.scoring.metrics import UNSCOREABLE, is_unscoreable
from vigenere_breaker.services.scoring.scorer import MetricScore, ScoringEngine

__all__ = [
    "UNSCOREABLE",
    "MetricScore",
    "ScoreCache",
    "ScoringEngine",
    "is_unscoreable",
]
