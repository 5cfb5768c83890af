from typing import Any


class CryptanalysisError(Exception):
    """Base exception for all key-search errors."""

    kind: str = "CryptanalysisError"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CryptanalysisError):
    """Raised when input validation fails."""

    kind = "ValidationError"


class InvalidAlphabetError(ValidationError):
    """Raised when an alphabet is empty or repeats a symbol."""

    kind = "InvalidAlphabet"

    def __init__(self, alphabet: str, reason: str, duplicates: list[str] | None = None):
        details: dict[str, Any] = {"alphabet": alphabet, "reason": reason}
        if duplicates:
            details["duplicates"] = duplicates
        super().__init__(f"Invalid alphabet {alphabet!r}: {reason}", details)


class InvalidConfigurationError(ValidationError):
    """Raised for non-positive worker counts, key lengths and similar settings."""

    kind = "InvalidConfiguration"

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid {field}={value!r}: {reason}",
            {"field": field, "value": value, "reason": reason},
        )


class EmptyCiphertextError(ValidationError):
    """Raised when an attack is started without ciphertext."""

    kind = "EmptyCiphertext"

    def __init__(self):
        super().__init__("Ciphertext cannot be empty")


class InvalidKeyError(ValidationError):
    """Raised when a key is empty or uses symbols outside the alphabet."""

    kind = "InvalidKey"

    def __init__(self, key: str, alphabet: str):
        super().__init__(
            f"Invalid key {key!r}: every symbol must belong to alphabet {alphabet!r}",
            {"key": key, "alphabet": alphabet},
        )


class KeySpaceOverflowError(CryptanalysisError):
    """Raised when the key space does not fit the index range."""

    kind = "Overflow"

    def __init__(self, alphabet_size: int, max_length: int, limit: int):
        super().__init__(
            f"Key space for alphabet size {alphabet_size} and max length "
            f"{max_length} exceeds {limit} keys",
            {"alphabet_size": alphabet_size, "max_length": max_length, "limit": limit},
        )


class EngineError(CryptanalysisError):
    """Base exception for search engine errors."""

    kind = "EngineError"


class WorkerFailureError(EngineError):
    """Raised when a worker crashes or reports a fatal error."""

    kind = "WorkerFailure"

    def __init__(self, worker_id: int, reason: str, batch_id: int | None = None):
        self.worker_id = worker_id
        super().__init__(
            f"Worker {worker_id} failed: {reason}",
            {"worker_id": worker_id, "batch_id": batch_id, "reason": reason},
        )


class AttackStateError(EngineError):
    """Raised when a command does not fit the current run state."""

    kind = "AttackState"

    def __init__(self, action: str, status: str):
        super().__init__(
            f"Cannot {action} while attack is {status}",
            {"action": action, "status": status},
        )


class AttackNotFoundError(EngineError):
    """Raised when an attack id is unknown."""

    kind = "AttackNotFound"

    def __init__(self, attack_id: str):
        super().__init__(
            f"Attack '{attack_id}' not found",
            {"attack_id": attack_id},
        )
