"""
Key-testing workers.

A worker owns an inbox and shares one outbox with its siblings. It waits for
an ``InitMessage`` carrying the search task, then processes one
``BatchMessage`` at a time until it receives ``StopMessage``. Workers run
either as separate processes or as threads of the host process; the loop
itself is the same for both.
"""

import multiprocessing
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, assert_never

from vigenere_breaker.core.config import Settings
from vigenere_breaker.services.cipher.alphabet import Alphabet
from vigenere_breaker.services.cipher.vigenere import PreparedText, key_shifts
from vigenere_breaker.services.engine.aggregator import ResultAggregator, ScoredCandidate
from vigenere_breaker.services.engine.messages import (
    BatchMessage,
    ErrorMessage,
    InitMessage,
    ProgressMessage,
    ResultMessage,
    SearchTask,
    StopMessage,
    WarningMessage,
    WorkerCommand,
    WorkerEvent,
)
from vigenere_breaker.services.keyspace import KeyBatch
from vigenere_breaker.services.scoring.cache import ScoreCache
from vigenere_breaker.services.scoring.scorer import ScoringEngine

WorkerBackend = Literal["process", "thread"]


@dataclass(frozen=True)
class WorkerConfig:
    """Settings a worker needs, in a form that pickles cheaply."""

    progress_interval_seconds: float = 1.0
    progress_every_keys: int = 100
    cache_max_entries: int = 50_000
    cache_memory_limit_bytes: int | None = None
    ngram_floor: float = 1e-10
    ngram_data_dir: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkerConfig":
        return cls(
            progress_interval_seconds=settings.progress_interval_seconds,
            progress_every_keys=settings.progress_every_keys,
            cache_max_entries=settings.cache_max_entries,
            cache_memory_limit_bytes=int(settings.cache_memory_limit_mb * 1024 * 1024),
            ngram_floor=settings.ngram_floor,
            ngram_data_dir=settings.ngram_data_dir,
        )


class BatchProcessor:
    """Tests every key of a batch against one search task."""

    def __init__(
        self,
        worker_id: int,
        task: SearchTask,
        config: WorkerConfig,
        emit: Callable[[WorkerEvent], None],
    ):
        self.worker_id = worker_id
        self.task = task
        self.config = config
        self.emit = emit
        self.alphabet = Alphabet(task.alphabet)
        self.prepared = PreparedText(task.ciphertext, self.alphabet)
        self.known = task.known_plaintext.upper() if task.known_plaintext else None
        self.scorer = ScoringEngine(
            floor=config.ngram_floor,
            data_dir=config.ngram_data_dir,
            cache=ScoreCache(config.cache_max_entries, config.cache_memory_limit_bytes),
        )

    def matches_known(self, plaintext: str) -> bool:
        return self.known is None or self.known in plaintext.upper()

    def test_key(self, key: str) -> ScoredCandidate | None:
        """Decrypt under ``key`` and score it; None if the candidate is filtered out."""
        plaintext = self.prepared.decrypt(key_shifts(key, self.alphabet))
        if not self.matches_known(plaintext):
            return None

        result = self.scorer.evaluate(self.task.scoring_method, plaintext)
        if not result.scoreable:
            return None
        if self.task.threshold is not None and result.score < self.task.threshold:
            return None
        return ScoredCandidate(key, plaintext, result.score, result.breakdown)

    def run(self, batch: KeyBatch) -> ResultMessage:
        top = ResultAggregator(self.task.result_limit)
        pending: list[ScoredCandidate] = []
        every = max(1, self.config.progress_every_keys)
        interval = self.config.progress_interval_seconds
        last_report = time.monotonic()
        processed = 0

        for key in batch.keys(self.alphabet, self.task.max_key_length):
            candidate = self.test_key(key)
            if candidate is not None:
                pending.append(candidate)
                if len(pending) >= top.limit:
                    top.add(pending)
                    pending.clear()
            processed += 1

            now = time.monotonic()
            if processed % every == 0 or now - last_report >= interval:
                last_report = now
                self.emit(ProgressMessage(self.worker_id, batch.batch_id, processed))
                self.check_memory()

        top.add(pending)
        return ResultMessage(self.worker_id, batch.batch_id, processed, tuple(top.results))

    def check_memory(self) -> None:
        cache = self.scorer.cache
        if not cache.over_memory_limit:
            return
        used = cache.approx_bytes
        cache.clear()
        self.emit(
            WarningMessage(
                self.worker_id,
                "score cache over memory limit, cleared",
                {"approx_bytes": used, "limit_bytes": cache.memory_limit_bytes},
            )
        )


def run_worker(worker_id: int, inbox: Any, outbox: Any, config: WorkerConfig) -> None:
    """Worker entry point; returns on stop or after reporting an error."""
    processor: BatchProcessor | None = None

    while True:
        command: WorkerCommand = inbox.get()
        match command:
            case StopMessage():
                return
            case InitMessage(task=task):
                try:
                    processor = BatchProcessor(worker_id, task, config, outbox.put)
                except Exception as exc:
                    outbox.put(ErrorMessage(worker_id, None, type(exc).__name__, str(exc)))
                    return
            case BatchMessage(batch=batch):
                if processor is None:
                    outbox.put(
                        ErrorMessage(
                            worker_id, batch.batch_id, "AttackStateError", "batch before init"
                        )
                    )
                    return
                try:
                    outbox.put(processor.run(batch))
                except Exception as exc:
                    outbox.put(
                        ErrorMessage(worker_id, batch.batch_id, type(exc).__name__, str(exc))
                    )
                    return
            case _:
                assert_never(command)


class WorkerHandle:
    """Host-side handle on one worker, process or thread."""

    def __init__(
        self,
        worker_id: int,
        outbox: Any,
        config: WorkerConfig,
        backend: WorkerBackend = "process",
        context: Any = None,
    ):
        self.worker_id = worker_id
        self.backend = backend
        name = f"vigenere-worker-{worker_id}"
        if backend == "process":
            context = context or multiprocessing.get_context("spawn")
            self.inbox = context.Queue()
            self._unit = context.Process(
                target=run_worker,
                args=(worker_id, self.inbox, outbox, config),
                name=name,
                daemon=True,
            )
        else:
            self.inbox = queue.Queue()
            self._unit = threading.Thread(
                target=run_worker,
                args=(worker_id, self.inbox, outbox, config),
                name=name,
                daemon=True,
            )

    def start(self) -> None:
        self._unit.start()

    def send(self, command: WorkerCommand) -> None:
        self.inbox.put(command)

    def is_alive(self) -> bool:
        return self._unit.is_alive()

    @property
    def exitcode(self) -> int | None:
        return getattr(self._unit, "exitcode", None)

    def release(self, timeout: float) -> None:
        """Ask the worker to exit after its current batch and wait up to ``timeout``."""
        if self.is_alive():
            self.send(StopMessage())
            self._unit.join(timeout)
        self.kill()

    def kill(self) -> None:
        """
        Stop the worker without waiting for its current batch.

        Processes are terminated. Threads cannot be interrupted, so they are
        told to stop and detached; whatever they produce afterwards is ignored.
        """
        if self.backend == "process":
            if self._unit.is_alive():
                self._unit.terminate()
                self._unit.join(1.0)
            self.inbox.close()
            self.inbox.cancel_join_thread()
        elif self._unit.is_alive():
            self.send(StopMessage())


class WorkerPool:
    """A fixed set of workers sharing one outbox."""

    def __init__(
        self,
        count: int,
        config: WorkerConfig,
        backend: WorkerBackend = "process",
        start_method: str = "spawn",
    ):
        self.backend = backend
        if backend == "process":
            # Hosts run coordinator and server threads; forking them is unsafe.
            self._context = multiprocessing.get_context(start_method)
            self.outbox = self._context.Queue()
        else:
            self._context = None
            self.outbox = queue.Queue()
        self.workers = [
            WorkerHandle(i, self.outbox, config, backend, self._context) for i in range(count)
        ]

    def start(self) -> None:
        for worker in self.workers:
            worker.start()

    def broadcast(self, command: WorkerCommand) -> None:
        for worker in self.workers:
            worker.send(command)

    def send(self, worker_id: int, command: WorkerCommand) -> None:
        self.workers[worker_id].send(command)

    def dead_workers(self) -> list[WorkerHandle]:
        return [worker for worker in self.workers if not worker.is_alive()]

    def shutdown(self, graceful: bool, timeout: float = 1.0) -> None:
        for worker in self.workers:
            if graceful:
                worker.release(timeout)
            else:
                worker.kill()

    def __len__(self) -> int:
        return len(self.workers)
