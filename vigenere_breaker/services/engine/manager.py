import threading
from functools import lru_cache
from uuid import uuid4

from vigenere_breaker.core.config import Settings, get_settings
from vigenere_breaker.core.exceptions import AttackNotFoundError
from vigenere_breaker.core.logging import get_logger
from vigenere_breaker.models.schemas import AttackRequest
from vigenere_breaker.services.engine.orchestrator import AttackOrchestrator


class AttackManager:
    """
    In-memory registry of attacks keyed by id.

    Each attack gets its own orchestrator; an attack whose configuration is
    rejected is never registered.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._attacks: dict[str, AttackOrchestrator] = {}
        self._lock = threading.Lock()
        self._log = get_logger("attack_manager")

    def create(self, request: AttackRequest) -> AttackOrchestrator:
        """Initialize and start a new attack."""
        orchestrator = AttackOrchestrator(self.settings, attack_id=uuid4().hex)
        worker_count = request.worker_count
        if worker_count is None:
            worker_count = self.settings.default_worker_count

        orchestrator.init(request.alphabet, worker_count, request.max_key_length)
        try:
            orchestrator.start(
                request.ciphertext,
                request.scoring_method,
                request.known_plaintext,
            )
        except Exception:
            orchestrator.stop()
            raise

        with self._lock:
            self._attacks[orchestrator.attack_id] = orchestrator
        self._log.info("attack_registered", attack_id=orchestrator.attack_id)
        return orchestrator

    def get(self, attack_id: str) -> AttackOrchestrator:
        with self._lock:
            orchestrator = self._attacks.get(attack_id)
        if orchestrator is None:
            raise AttackNotFoundError(attack_id)
        return orchestrator

    def list(self) -> list[AttackOrchestrator]:
        with self._lock:
            return list(self._attacks.values())

    def stop(self, attack_id: str) -> AttackOrchestrator:
        orchestrator = self.get(attack_id)
        orchestrator.stop()
        return orchestrator

    def delete(self, attack_id: str) -> None:
        with self._lock:
            orchestrator = self._attacks.pop(attack_id, None)
        if orchestrator is None:
            raise AttackNotFoundError(attack_id)
        orchestrator.stop()
        self._log.info("attack_deleted", attack_id=attack_id)

    def shutdown(self) -> None:
        """Stop every attack and forget them all."""
        with self._lock:
            attacks = list(self._attacks.values())
            self._attacks.clear()
        for orchestrator in attacks:
            orchestrator.stop()
        self._log.info("attack_manager_shutdown", stopped=len(attacks))

    def __len__(self) -> int:
        with self._lock:
            return len(self._attacks)


@lru_cache
def get_attack_manager() -> AttackManager:
    """Get the process-wide attack manager."""
    return AttackManager()
