"""Mutable bookkeeping for a single run, and the snapshot it leaves behind."""

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from vigenere_breaker.models.schemas import AttackStatus, ProgressEvent, ScoringMethod
from vigenere_breaker.services.cipher.alphabet import Alphabet
from vigenere_breaker.services.keyspace import BatchPlan, KeyBatch


@dataclass
class WorkerState:
    """Per-worker accounting; lives only as long as its run."""

    worker_id: int
    busy: bool = False
    batch_id: int | None = None
    batch_size: int = 0
    in_flight: int = 0
    completed_keys: int = 0
    completed_batches: int = 0

    @property
    def keys_processed(self) -> int:
        return self.completed_keys + self.in_flight

    def assign(self, batch: KeyBatch) -> None:
        self.busy = True
        self.batch_id = batch.batch_id
        self.batch_size = batch.size
        self.in_flight = 0

    def report(self, batch_id: int, processed: int) -> None:
        if self.busy and batch_id == self.batch_id:
            self.in_flight = max(self.in_flight, min(processed, self.batch_size))

    def complete(self, batch_id: int, processed: int) -> bool:
        if not self.busy or batch_id != self.batch_id:
            return False
        self.completed_keys += max(0, min(processed, self.batch_size))
        self.completed_batches += 1
        self.busy = False
        self.batch_id = None
        self.batch_size = 0
        self.in_flight = 0
        return True


@dataclass
class RunState:
    """
    Counters and scheduling cursor of an in-progress run.

    Only the orchestrator touches a ``RunState``, always under its lock.
    """

    alphabet: Alphabet
    max_key_length: int
    worker_count: int
    plan: BatchPlan
    outbox: Any
    halt: threading.Event = field(default_factory=threading.Event)
    ciphertext: str = ""
    scoring_method: ScoringMethod | None = None
    known_plaintext: str | None = None
    next_batch: int = 0
    keys_tested: int = 0
    best_score: float | None = None
    started_at: float | None = None
    workers: dict[int, WorkerState] = field(default_factory=dict)

    def __post_init__(self):
        if not self.workers:
            self.workers = {i: WorkerState(i) for i in range(self.worker_count)}

    @property
    def total_keys(self) -> int:
        return self.plan.total

    @property
    def batches_exhausted(self) -> bool:
        return self.next_batch >= len(self.plan)

    @property
    def all_idle(self) -> bool:
        return not any(worker.busy for worker in self.workers.values())

    @property
    def idle_workers(self) -> list[WorkerState]:
        return [worker for worker in self.workers.values() if not worker.busy]

    def take_batch(self) -> KeyBatch | None:
        if self.batches_exhausted:
            return None
        batch = self.plan[self.next_batch]
        self.next_batch += 1
        return batch

    def record_progress(self, worker_id: int, batch_id: int, processed: int) -> None:
        self.workers[worker_id].report(batch_id, processed)
        self._recount()

    def expected_keys(self, worker_id: int, batch_id: int) -> int | None:
        """Size of the batch the worker is busy with, or None if ``batch_id`` is stale."""
        worker = self.workers[worker_id]
        if not worker.busy or worker.batch_id != batch_id:
            return None
        return worker.batch_size

    def record_completion(self, worker_id: int, batch_id: int, processed: int) -> bool:
        done = self.workers[worker_id].complete(batch_id, processed)
        self._recount()
        return done

    def _recount(self) -> None:
        # Never let the reported total move backwards.
        counted = sum(worker.keys_processed for worker in self.workers.values())
        self.keys_tested = min(self.total_keys, max(self.keys_tested, counted))

    def elapsed(self, now: float | None = None) -> float:
        if self.started_at is None:
            return 0.0
        return max(0.0, (now or time.monotonic()) - self.started_at)

    def snapshot(self, status: AttackStatus) -> ProgressEvent:
        return progress_event(
            self.keys_tested, self.total_keys, self.best_score, status, self.elapsed()
        )


@dataclass(frozen=True)
class RunReport:
    """What remains visible about a run after its workers are gone."""

    ciphertext: str
    alphabet: str
    max_key_length: int
    worker_count: int
    scoring_method: ScoringMethod | None
    total_keys: int
    keys_tested: int
    best_score: float | None
    elapsed_seconds: float

    @classmethod
    def from_run(cls, run: RunState) -> "RunReport":
        return cls(
            ciphertext=run.ciphertext,
            alphabet=run.alphabet.symbols,
            max_key_length=run.max_key_length,
            worker_count=run.worker_count,
            scoring_method=run.scoring_method,
            total_keys=run.total_keys,
            keys_tested=run.keys_tested,
            best_score=run.best_score,
            elapsed_seconds=run.elapsed(),
        )

    def snapshot(self, status: AttackStatus) -> ProgressEvent:
        return progress_event(
            self.keys_tested, self.total_keys, self.best_score, status, self.elapsed_seconds
        )


def progress_event(
    keys_tested: int,
    total_keys: int,
    best_score: float | None,
    status: AttackStatus,
    elapsed: float,
) -> ProgressEvent:
    rate = keys_tested / elapsed if elapsed > 0 else 0.0
    eta = (total_keys - keys_tested) / rate if rate > 0 else None
    return ProgressEvent(
        keys_tested=keys_tested,
        total_keys=total_keys,
        best_score=best_score,
        status=status,
        elapsed_seconds=round(elapsed, 3),
        keys_per_second=round(rate, 1),
        eta_seconds=round(eta, 1) if eta is not None else None,
    )
