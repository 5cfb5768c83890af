"""
Messages exchanged between the orchestrator and its workers.

The orchestrator sends ``WorkerCommand`` values to a worker's inbox; workers
answer with ``WorkerEvent`` values on the shared outbox. Both unions are
closed, so handlers can ``match`` over them exhaustively.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from vigenere_breaker.models.schemas import ScoringMethod
from vigenere_breaker.services.engine.aggregator import ScoredCandidate
from vigenere_breaker.services.keyspace import KeyBatch


@dataclass(frozen=True)
class SearchTask:
    """Everything a worker needs to test keys for one run."""

    ciphertext: str
    alphabet: str
    max_key_length: int
    scoring_method: ScoringMethod
    known_plaintext: str | None = None
    threshold: float | None = None
    result_limit: int = 50


# ---- orchestrator -> worker ----


@dataclass(frozen=True)
class InitMessage:
    task: SearchTask


@dataclass(frozen=True)
class BatchMessage:
    batch: KeyBatch


@dataclass(frozen=True)
class StopMessage:
    pass


WorkerCommand = Union[InitMessage, BatchMessage, StopMessage]


# ---- worker -> orchestrator ----


@dataclass(frozen=True)
class ProgressMessage:
    worker_id: int
    batch_id: int
    processed: int


@dataclass(frozen=True)
class ResultMessage:
    worker_id: int
    batch_id: int
    processed: int
    candidates: tuple[ScoredCandidate, ...] = ()


@dataclass(frozen=True)
class ErrorMessage:
    worker_id: int
    batch_id: int | None
    error_type: str
    message: str


@dataclass(frozen=True)
class WarningMessage:
    worker_id: int
    message: str
    details: dict[str, Any] = field(default_factory=dict)


WorkerEvent = Union[ProgressMessage, ResultMessage, ErrorMessage, WarningMessage]
