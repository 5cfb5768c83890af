"""Parallel key-space search: workers, orchestration and result ranking."""

from vigenere_breaker.services.engine.aggregator import ResultAggregator, ScoredCandidate
from vigenere_breaker.services.engine.manager import AttackManager, get_attack_manager
from vigenere_breaker.services.engine.orchestrator import AttackOrchestrator, EngineEvent
from vigenere_breaker.services.engine.worker import BatchProcessor, WorkerConfig, WorkerPool

__all__ = [
    "AttackManager",
    "AttackOrchestrator",
    "BatchProcessor",
    "EngineEvent",
    "ResultAggregator",
    "ScoredCandidate",
    "WorkerConfig",
    "WorkerPool",
    "get_attack_manager",
]
