from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vigenere_breaker.services.cipher.alphabet import ENGLISH_ALPHABET


# ============================================================================
# Enums
# ============================================================================


class ScoringMethod(str, Enum):
    """Selectable plaintext scoring metrics."""

    BIGRAM = "bigram"
    TRIGRAM = "trigram"
    QUADGRAM = "quadgram"
    INDEX_OF_COINCIDENCE = "ioc"
    CHI_SQUARED = "chi_squared"
    WORDS = "words"
    IMPOSSIBLE_BIGRAMS = "impossible_bigrams"
    COMBINED = "combined"


class AttackStatus(str, Enum):
    """Lifecycle of a key-space attack."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# ============================================================================
# Event Schemas
# ============================================================================


class CandidateData(BaseModel):
    """A ranked key candidate."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    plaintext: str
    score: float
    breakdown: dict[str, float] | None = None


class ProgressEvent(BaseModel):
    """Live counters of a run."""

    keys_tested: int
    total_keys: int
    best_score: float | None = None
    status: AttackStatus = AttackStatus.IDLE
    elapsed_seconds: float = 0.0
    keys_per_second: float = 0.0
    eta_seconds: float | None = None

    @property
    def percent(self) -> float:
        if self.total_keys <= 0:
            return 0.0
        return min(100.0, 100.0 * self.keys_tested / self.total_keys)


class ResultEvent(BaseModel):
    """Current top-K candidates, best first."""

    results: list[CandidateData]


class ErrorEvent(BaseModel):
    """A failure surfaced to the host."""

    kind: str
    message: str
    worker_id: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class StatusEvent(BaseModel):
    """A state machine transition."""

    status: AttackStatus
    outcome: AttackStatus | None = None


class ExportStats(BaseModel):
    keys_tested: int
    total_keys: int
    best_score: float | None = None


class ExportPayload(BaseModel):
    """Everything a host needs to persist the outcome of a run."""

    ciphertext: str
    alphabet: str
    max_key_length: int
    scoring_method: ScoringMethod | None = None
    results: list[CandidateData]
    stats: ExportStats


# ============================================================================
# Request Schemas
# ============================================================================


class AttackRequest(BaseModel):
    """Request schema for starting an attack."""

    ciphertext: str = Field(max_length=100_000)
    alphabet: str = ENGLISH_ALPHABET
    max_key_length: int = 3
    scoring_method: ScoringMethod = ScoringMethod.COMBINED
    known_plaintext: str | None = None
    worker_count: int | None = None


class EncryptRequest(BaseModel):
    """Request schema for /cipher/encrypt."""

    plaintext: str = Field(min_length=1, max_length=100_000)
    key: str = Field(min_length=1)
    alphabet: str = ENGLISH_ALPHABET


class DecryptRequest(BaseModel):
    """Request schema for /cipher/decrypt."""

    ciphertext: str = Field(min_length=1, max_length=100_000)
    key: str = Field(min_length=1)
    alphabet: str = ENGLISH_ALPHABET


# ============================================================================
# Response Schemas
# ============================================================================


class AttackResponse(BaseModel):
    """State of a single attack."""

    attack_id: str
    status: AttackStatus
    outcome: AttackStatus | None = None
    scoring_method: ScoringMethod | None = None
    worker_count: int
    progress: ProgressEvent
    error: ErrorEvent | None = None


class AttackListResponse(BaseModel):
    items: list[AttackResponse]
    total: int


class ResultsResponse(BaseModel):
    """Ranked candidates of an attack."""

    attack_id: str
    results: list[CandidateData]
    total: int


class EncryptResponse(BaseModel):
    ciphertext: str
    key_used: str
    alphabet: str


class DecryptResponse(BaseModel):
    plaintext: str
    key_used: str
    alphabet: str


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
