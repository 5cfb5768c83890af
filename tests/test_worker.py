"""Tests for the key-testing worker."""

import queue
import tracemalloc

import pytest

from vigenere_breaker.models.schemas import ScoringMethod
from vigenere_breaker.services.cipher import Alphabet, encrypt
from vigenere_breaker.services.engine.messages import (
    BatchMessage,
    ErrorMessage,
    InitMessage,
    ProgressMessage,
    ResultMessage,
    SearchTask,
    StopMessage,
    WarningMessage,
)
from vigenere_breaker.services.engine.worker import (
    BatchProcessor,
    WorkerConfig,
    WorkerPool,
    run_worker,
)
from vigenere_breaker.services.keyspace import BatchPlan, KeyBatch, key_count


def make_task(ciphertext: str, max_key_length: int = 1, **overrides) -> SearchTask:
    fields = dict(
        ciphertext=ciphertext,
        alphabet=Alphabet.english().symbols,
        max_key_length=max_key_length,
        scoring_method=ScoringMethod.COMBINED,
        result_limit=5,
    )
    fields.update(overrides)
    return SearchTask(**fields)


class TestBatchProcessor:
    """Test suite for batch processing."""

    @pytest.fixture
    def events(self):
        return []

    @pytest.fixture
    def config(self):
        return WorkerConfig(progress_every_keys=5, progress_interval_seconds=60.0)

    def test_processes_every_key(self, events, config):
        processor = BatchProcessor(0, make_task("KHOOR WKHUH"), config, events.append)
        result = processor.run(KeyBatch(0, 0, 26))

        assert result.processed == 26
        assert len(result.candidates) == 5
        scores = [c.score for c in result.candidates]
        assert scores == sorted(scores, reverse=True)

    def test_known_plaintext_without_match_yields_nothing(self, events, config):
        processor = BatchProcessor(
            0, make_task("KHOOR", known_plaintext="THE"), config, events.append
        )
        result = processor.run(KeyBatch(0, 0, 26))
        assert result.processed == 26
        assert result.candidates == ()

    def test_known_plaintext_is_case_insensitive(self, events, config):
        processor = BatchProcessor(
            0, make_task("Khoor", known_plaintext="hello"), config, events.append
        )
        result = processor.run(KeyBatch(0, 0, 26))
        assert [c.key for c in result.candidates] == ["D"]
        assert result.candidates[0].plaintext == "Hello"

    def test_threshold_filters_low_scores(self, events, config):
        processor = BatchProcessor(
            0, make_task("KHOOR WKHUH", threshold=1e9), config, events.append
        )
        assert processor.run(KeyBatch(0, 0, 26)).candidates == ()

    def test_unscoreable_candidates_skipped(self, events, config):
        processor = BatchProcessor(0, make_task("AB"), config, events.append)
        assert processor.run(KeyBatch(0, 0, 26)).candidates == ()

    def test_emits_progress_by_count(self, events, config):
        processor = BatchProcessor(0, make_task("KHOOR"), config, events.append)
        processor.run(KeyBatch(3, 0, 26))

        progress = [e for e in events if isinstance(e, ProgressMessage)]
        assert [p.processed for p in progress] == [5, 10, 15, 20, 25]
        assert all(p.batch_id == 3 for p in progress)

    def test_memory_pressure_clears_cache(self, events):
        config = WorkerConfig(progress_every_keys=5, cache_memory_limit_bytes=1)
        processor = BatchProcessor(0, make_task("KHOOR"), config, events.append)
        processor.run(KeyBatch(0, 0, 26))

        warnings = [e for e in events if isinstance(e, WarningMessage)]
        assert warnings
        assert warnings[0].details["limit_bytes"] == 1

    def test_finds_key_across_batches(self, events, config):
        alphabet = Alphabet.english()
        plaintext = "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG AND THEN RUNS AWAY"
        ciphertext = encrypt(plaintext, "KEY", alphabet)
        task = make_task(ciphertext, max_key_length=3)
        processor = BatchProcessor(0, task, config, events.append)

        best = []
        for batch in BatchPlan(key_count(26, 3), 5000):
            best.extend(processor.run(batch).candidates)
        best.sort(key=lambda c: c.score, reverse=True)

        assert best[0].key == "KEY"
        assert best[0].plaintext == plaintext

    def test_batch_memory_does_not_grow_with_batch_size(self):
        ciphertext = encrypt("ATTACK AT DAWN " * 1500, "LEMON", Alphabet.english())
        config = WorkerConfig(progress_every_keys=10_000, cache_max_entries=1)
        task = make_task(
            ciphertext, max_key_length=2, scoring_method=ScoringMethod.INDEX_OF_COINCIDENCE
        )
        processor = BatchProcessor(0, task, config, lambda event: None)
        processor.run(KeyBatch(0, 0, 5))

        def peak(size):
            tracemalloc.start()
            try:
                processor.run(KeyBatch(1, 0, size))
                return tracemalloc.get_traced_memory()[1]
            finally:
                tracemalloc.stop()

        small, large = peak(20), peak(200)
        # Five kept candidates of ~22 KB each; 200 buffered ones would be ~4.5 MB.
        assert large < small * 2
        assert large < 2_000_000


class TestWorkerLoop:
    """Test suite for the worker message loop."""

    @pytest.fixture
    def channels(self):
        return queue.Queue(), queue.Queue()

    def drain(self, outbox):
        messages = []
        while not outbox.empty():
            messages.append(outbox.get_nowait())
        return messages

    def test_init_batch_stop(self, channels):
        inbox, outbox = channels
        inbox.put(InitMessage(make_task("KHOOR")))
        inbox.put(BatchMessage(KeyBatch(0, 0, 26)))
        inbox.put(StopMessage())

        run_worker(1, inbox, outbox, WorkerConfig(progress_every_keys=1000))

        messages = self.drain(outbox)
        results = [m for m in messages if isinstance(m, ResultMessage)]
        assert len(results) == 1
        assert results[0].worker_id == 1
        assert results[0].processed == 26

    def test_batch_before_init_is_an_error(self, channels):
        inbox, outbox = channels
        inbox.put(BatchMessage(KeyBatch(7, 0, 26)))

        run_worker(2, inbox, outbox, WorkerConfig())

        (message,) = self.drain(outbox)
        assert isinstance(message, ErrorMessage)
        assert message.worker_id == 2
        assert message.batch_id == 7

    def test_bad_task_is_reported(self, channels):
        inbox, outbox = channels
        inbox.put(InitMessage(make_task("KHOOR", alphabet="AA")))

        run_worker(0, inbox, outbox, WorkerConfig())

        (message,) = self.drain(outbox)
        assert isinstance(message, ErrorMessage)
        assert message.error_type == "InvalidAlphabetError"


class TestWorkerPool:
    def test_processes_are_spawned_by_default(self):
        pool = WorkerPool(2, WorkerConfig(), backend="process")
        assert pool._context.get_start_method() == "spawn"
        assert len(pool) == 2

    def test_start_method_is_configurable(self):
        pool = WorkerPool(1, WorkerConfig(), backend="process", start_method="forkserver")
        assert pool._context.get_start_method() == "forkserver"

    def test_thread_backend_has_no_process_context(self):
        pool = WorkerPool(1, WorkerConfig(), backend="thread")
        assert pool._context is None
