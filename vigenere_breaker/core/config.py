from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Vigenere Key-Space Breaker"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    log_json: bool | None = None

    # Input limits
    max_ciphertext_length: int = 100_000
    max_worker_count: int = 64
    max_key_length_limit: int = 12

    # Search engine
    worker_backend: Literal["process", "thread"] = "process"
    worker_start_method: Literal["spawn", "forkserver", "fork"] = "spawn"
    default_worker_count: int = 4
    batch_keys_per_worker: int = 100
    dispatch_interval_seconds: float = 0.05
    worker_shutdown_timeout_seconds: float = 1.0

    # Worker progress cadence (whichever comes first)
    progress_interval_seconds: float = 1.0
    progress_every_keys: int = 100

    # Results
    result_limit: int = 50

    # Scoring
    ngram_floor: float = 1e-10
    ngram_data_dir: str | None = None
    score_thresholds: dict[str, float] = {"words": 40.0}

    # Per-worker score cache
    cache_max_entries: int = 50_000
    cache_memory_limit_mb: float = 64.0

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def use_json_logs(self) -> bool:
        if self.log_json is not None:
            return self.log_json
        return not self.is_development


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
