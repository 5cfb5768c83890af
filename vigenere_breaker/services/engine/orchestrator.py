"""
Attack orchestrator - drives one brute-force run across a worker pool.

The orchestrator owns the run lifecycle:
1. ``init`` validates the alphabet and key space and provisions workers
2. ``start`` validates the ciphertext and hands out key batches
3. a coordinator thread collects worker messages, merges results into the
   top-K ranking and reports progress to listeners
4. the run ends by exhausting the key space, by ``stop`` or by a worker failure

Every public method is safe to call from any thread.
"""

import queue
import threading
import time
from collections.abc import Callable
from typing import Union, assert_never
from uuid import uuid4

from vigenere_breaker.core.config import Settings, get_settings
from vigenere_breaker.core.exceptions import (
    AttackStateError,
    CryptanalysisError,
    EmptyCiphertextError,
    EngineError,
    InvalidConfigurationError,
    WorkerFailureError,
)
from vigenere_breaker.core.logging import get_logger
from vigenere_breaker.models.schemas import (
    AttackStatus,
    ErrorEvent,
    ExportPayload,
    ExportStats,
    ProgressEvent,
    ResultEvent,
    ScoringMethod,
    StatusEvent,
)
from vigenere_breaker.services.cipher.alphabet import Alphabet
from vigenere_breaker.services.engine.aggregator import ResultAggregator, ScoredCandidate
from vigenere_breaker.services.engine.messages import (
    BatchMessage,
    ErrorMessage,
    InitMessage,
    ProgressMessage,
    ResultMessage,
    SearchTask,
    WarningMessage,
    WorkerEvent,
)
from vigenere_breaker.services.engine.state import RunReport, RunState
from vigenere_breaker.services.engine.worker import WorkerConfig, WorkerPool
from vigenere_breaker.services.keyspace import BatchPlan, key_count

EngineEvent = Union[ProgressEvent, ResultEvent, ErrorEvent, StatusEvent]
EventListener = Callable[[EngineEvent], None]


class AttackOrchestrator:
    """
    Coordinates workers for one attack at a time.

    Status moves ``idle -> initializing -> running`` and ends in
    ``completed`` or ``failed``. ``stop`` returns the engine to ``idle``
    with outcome ``cancelled`` and silences all further events; the ranked
    results and counters of the stopped run stay readable.
    """

    def __init__(self, settings: Settings | None = None, attack_id: str | None = None):
        self.settings = settings or get_settings()
        self.attack_id = attack_id or uuid4().hex
        self._log = get_logger("orchestrator", attack_id=self.attack_id)

        self._lock = threading.RLock()
        self._finished = threading.Event()
        self._finished.set()
        self._listeners: list[EventListener] = []

        self._status = AttackStatus.IDLE
        self._outcome: AttackStatus | None = None
        self._error: ErrorEvent | None = None
        self._run: RunState | None = None
        self._pool: WorkerPool | None = None
        self._report: RunReport | None = None
        self._coordinator: threading.Thread | None = None
        self._aggregator = ResultAggregator(self.settings.result_limit)
        self._worker_count = 0

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_event(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def status(self) -> AttackStatus:
        return self._status

    @property
    def outcome(self) -> AttackStatus | None:
        return self._outcome

    @property
    def error(self) -> ErrorEvent | None:
        return self._error

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def scoring_method(self) -> ScoringMethod | None:
        with self._lock:
            if self._run is not None:
                return self._run.scoring_method
            return self._report.scoring_method if self._report else None

    def progress(self) -> ProgressEvent:
        with self._lock:
            if self._run is not None:
                return self._run.snapshot(self._status)
            if self._report is not None:
                return self._report.snapshot(self._status)
            return ProgressEvent(keys_tested=0, total_keys=0, status=self._status)

    def results(self, limit: int | None = None) -> list[ScoredCandidate]:
        with self._lock:
            ranked = self._aggregator.results
        return ranked if limit is None else ranked[:limit]

    def export(self) -> ExportPayload:
        """Snapshot of the inputs, ranked results and counters of the current or last run."""
        with self._lock:
            source = self._run or self._report
            if source is None:
                raise AttackStateError("export", self._status.value)

            alphabet = source.alphabet
            if isinstance(alphabet, Alphabet):
                alphabet = alphabet.symbols

            return ExportPayload(
                ciphertext=source.ciphertext,
                alphabet=alphabet,
                max_key_length=source.max_key_length,
                scoring_method=source.scoring_method,
                results=[candidate.to_data() for candidate in self._aggregator.results],
                stats=ExportStats(
                    keys_tested=source.keys_tested,
                    total_keys=source.total_keys,
                    best_score=source.best_score,
                ),
            )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current run ends; True if it did within ``timeout``."""
        return self._finished.wait(timeout)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def init(self, alphabet: str, worker_count: int, max_key_length: int) -> int:
        """
        Validate the search space and provision workers.

        A previous run is stopped once the new configuration validates.

        Returns:
            Total number of keys in the space

        Raises:
            InvalidAlphabetError: on an empty or duplicated alphabet
            InvalidConfigurationError: on out-of-range worker count or key length
            KeySpaceOverflowError: if the key space does not fit the index range
        """
        if not 1 <= worker_count <= self.settings.max_worker_count:
            raise InvalidConfigurationError(
                "worker_count", worker_count, f"must be within 1..{self.settings.max_worker_count}"
            )
        if not 1 <= max_key_length <= self.settings.max_key_length_limit:
            raise InvalidConfigurationError(
                "max_key_length",
                max_key_length,
                f"must be within 1..{self.settings.max_key_length_limit}",
            )

        parsed = Alphabet(alphabet)
        total = key_count(parsed.size, max_key_length)
        plan = BatchPlan(total, worker_count * self.settings.batch_keys_per_worker)

        self.stop()

        with self._lock:
            self._outcome = None
            self._error = None
            self._report = None
            self._set_status(AttackStatus.INITIALIZING)
            pool = WorkerPool(
                worker_count,
                WorkerConfig.from_settings(self.settings),
                backend=self.settings.worker_backend,
                start_method=self.settings.worker_start_method,
            )
            pool.start()

            self._pool = pool
            self._run = RunState(
                alphabet=parsed,
                max_key_length=max_key_length,
                worker_count=worker_count,
                plan=plan,
                outbox=pool.outbox,
            )
            self._aggregator = ResultAggregator(self.settings.result_limit)
            self._worker_count = worker_count

        self._log.info(
            "attack_initialized",
            alphabet_size=parsed.size,
            max_key_length=max_key_length,
            worker_count=worker_count,
            total_keys=total,
            batches=len(plan),
            backend=self.settings.worker_backend,
        )
        return total

    def start(
        self,
        ciphertext: str,
        scoring_method: ScoringMethod | str = ScoringMethod.COMBINED,
        known_plaintext: str | None = None,
    ) -> None:
        """
        Begin testing keys in the background.

        Raises:
            AttackStateError: if the engine is not initialized or already running
            EmptyCiphertextError: if the ciphertext is empty or whitespace
            InvalidConfigurationError: on an unknown scoring method or oversized text
        """
        with self._lock:
            run = self._run
            if run is None or self._status != AttackStatus.INITIALIZING:
                raise AttackStateError("start", self._status.value)

            if not ciphertext or not ciphertext.strip():
                raise EmptyCiphertextError()
            if len(ciphertext) > self.settings.max_ciphertext_length:
                raise InvalidConfigurationError(
                    "ciphertext",
                    f"<{len(ciphertext)} characters>",
                    f"must be at most {self.settings.max_ciphertext_length} characters",
                )
            try:
                method = ScoringMethod(scoring_method)
            except ValueError:
                raise InvalidConfigurationError(
                    "scoring_method", scoring_method, "unknown scoring method"
                ) from None

            run.ciphertext = ciphertext
            run.scoring_method = method
            run.known_plaintext = known_plaintext or None

            task = SearchTask(
                ciphertext=ciphertext,
                alphabet=run.alphabet.symbols,
                max_key_length=run.max_key_length,
                scoring_method=method,
                known_plaintext=run.known_plaintext,
                threshold=self.settings.score_thresholds.get(method.value),
                result_limit=self.settings.result_limit,
            )
            self._pool.broadcast(InitMessage(task))

            run.started_at = time.monotonic()
            self._finished.clear()
            self._set_status(AttackStatus.RUNNING)
            self._coordinator = threading.Thread(
                target=self._coordinate,
                args=(run,),
                name=f"vigenere-coordinator-{self.attack_id[:8]}",
                daemon=True,
            )
            self._coordinator.start()

        self._log.info(
            "attack_started",
            scoring_method=method.value,
            ciphertext_length=len(ciphertext),
            known_plaintext=bool(run.known_plaintext),
        )

    def stop(self) -> None:
        """
        Cancel the current run, if any. Idempotent.

        Workers are torn down without waiting for in-flight batches and no
        further events are emitted. Results gathered so far remain readable.
        """
        with self._lock:
            run = self._run
            if run is None:
                return
            was_running = self._status == AttackStatus.RUNNING
            run.halt.set()
            self._teardown(run, graceful=False)
            self._status = AttackStatus.IDLE
            self._outcome = AttackStatus.CANCELLED
            coordinator = self._coordinator
            self._coordinator = None
            self._finished.set()

        if (
            coordinator is not None
            and coordinator is not threading.current_thread()
            and coordinator.is_alive()
        ):
            coordinator.join(self.settings.worker_shutdown_timeout_seconds)

        self._log.info("attack_cancelled", was_running=was_running)

    # ------------------------------------------------------------------
    # Coordinator
    # ------------------------------------------------------------------

    def _coordinate(self, run: RunState) -> None:
        interval = self.settings.dispatch_interval_seconds
        try:
            while not run.halt.is_set():
                with self._lock:
                    if self._run is not run or run.halt.is_set():
                        return
                    self._dispatch(run)
                    if run.batches_exhausted and run.all_idle:
                        self._complete(run)
                        return

                try:
                    message = run.outbox.get(timeout=interval)
                except queue.Empty:
                    self._check_workers(run)
                    continue

                self._handle(run, message)
                self._drain(run)
                self._check_workers(run)
        except Exception as exc:
            self._log.exception("coordinator_crashed")
            with self._lock:
                if self._run is run and not run.halt.is_set():
                    self._fail(run, EngineError(f"Coordinator crashed: {exc}"))

    def _dispatch(self, run: RunState) -> None:
        for worker in run.idle_workers:
            batch = run.take_batch()
            if batch is None:
                return
            worker.assign(batch)
            self._pool.send(worker.worker_id, BatchMessage(batch))

    def _drain(self, run: RunState) -> None:
        while not run.halt.is_set():
            try:
                message = run.outbox.get_nowait()
            except queue.Empty:
                return
            self._handle(run, message)

    def _check_workers(self, run: RunState) -> None:
        with self._lock:
            if self._run is not run or run.halt.is_set() or self._pool is None:
                return
            dead = self._pool.dead_workers()
        if not dead:
            return

        # A worker that reported an error before exiting is handled by its message.
        self._drain(run)
        with self._lock:
            if self._run is not run or run.halt.is_set():
                return
            worker = dead[0]
            self._fail(
                run,
                WorkerFailureError(
                    worker.worker_id,
                    f"worker exited unexpectedly (exit code {worker.exitcode})",
                    run.workers[worker.worker_id].batch_id,
                ),
            )

    def _handle(self, run: RunState, message: WorkerEvent) -> None:
        with self._lock:
            if self._run is not run or run.halt.is_set():
                return

            match message:
                case ProgressMessage(worker_id=worker_id, batch_id=batch_id, processed=processed):
                    run.record_progress(worker_id, batch_id, processed)
                    self._emit(run.snapshot(self._status), run)
                case ResultMessage(
                    worker_id=worker_id,
                    batch_id=batch_id,
                    processed=processed,
                    candidates=candidates,
                ):
                    expected = run.expected_keys(worker_id, batch_id)
                    if expected is None:
                        return
                    run.record_completion(worker_id, batch_id, processed)
                    if processed != expected:
                        self._fail(
                            run,
                            WorkerFailureError(
                                worker_id,
                                f"batch finished after {processed} of {expected} keys",
                                batch_id,
                            ),
                        )
                        return
                    if self._aggregator.add(candidates):
                        run.best_score = self._aggregator.best_score
                        self._emit(
                            ResultEvent(
                                results=[c.to_data() for c in self._aggregator.results]
                            ),
                            run,
                        )
                    self._emit(run.snapshot(self._status), run)
                case WarningMessage(worker_id=worker_id, message=text, details=details):
                    self._log.warning("worker_warning", worker_id=worker_id, message=text, **details)
                case ErrorMessage(
                    worker_id=worker_id, batch_id=batch_id, error_type=error_type, message=text
                ):
                    self._fail(
                        run, WorkerFailureError(worker_id, f"{error_type}: {text}", batch_id)
                    )
                case _:
                    assert_never(message)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _complete(self, run: RunState) -> None:
        self._status = AttackStatus.COMPLETED
        self._outcome = AttackStatus.COMPLETED
        self._emit(run.snapshot(self._status), run)
        self._emit(StatusEvent(status=self._status, outcome=self._outcome), run)
        if self._run is not run:
            return
        run.halt.set()
        self._teardown(run, graceful=True)
        self._finished.set()
        self._log.info(
            "attack_completed",
            keys_tested=run.keys_tested,
            best_score=run.best_score,
            elapsed_seconds=round(run.elapsed(), 3),
        )

    def _fail(self, run: RunState, error: CryptanalysisError) -> None:
        worker_id = getattr(error, "worker_id", None)
        self._error = ErrorEvent(
            kind=error.kind, message=error.message, worker_id=worker_id, details=error.details
        )
        self._status = AttackStatus.FAILED
        self._outcome = AttackStatus.FAILED
        self._log.error("attack_failed", kind=error.kind, error=error.message, worker_id=worker_id)
        self._emit(self._error, run)
        self._emit(StatusEvent(status=self._status, outcome=self._outcome), run)
        if self._run is not run:
            return
        run.halt.set()
        self._teardown(run, graceful=False)
        self._finished.set()

    def _teardown(self, run: RunState, graceful: bool) -> None:
        pool = self._pool
        self._pool = None
        self._report = RunReport.from_run(run)
        self._run = None
        if pool is not None:
            pool.shutdown(graceful, self.settings.worker_shutdown_timeout_seconds)

    def _set_status(self, status: AttackStatus) -> None:
        self._status = status
        self._emit(StatusEvent(status=status, outcome=self._outcome))

    def _emit(self, event: EngineEvent, run: RunState | None = None) -> None:
        # A listener may have stopped the run that produced this event.
        if run is not None and self._run is not run:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                self._log.exception("listener_failed", event=type(event).__name__)
