import pytest

from vigenere_breaker.core.config import Settings


@pytest.fixture
def settings():
    """Thread-backed engine settings with small batches."""
    return Settings(
        app_env="development",
        worker_backend="thread",
        batch_keys_per_worker=20,
        dispatch_interval_seconds=0.01,
        progress_interval_seconds=0.05,
        progress_every_keys=10,
        worker_shutdown_timeout_seconds=0.5,
        result_limit=10,
        score_thresholds={},
    )
