"""Tests for the HTTP API."""

import time

import pytest
from fastapi.testclient import TestClient

from vigenere_breaker.api.v1.errors import to_http_exception
from vigenere_breaker.core.exceptions import (
    AttackNotFoundError,
    AttackStateError,
    InvalidConfigurationError,
)
from vigenere_breaker.main import app
from vigenere_breaker.services.cipher import Alphabet, encrypt
from vigenere_breaker.services.engine.manager import AttackManager, get_attack_manager

PLAINTEXT = "THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG AND THEN RUNS AWAY"


@pytest.fixture
def manager(settings):
    manager = AttackManager(settings)
    yield manager
    manager.shutdown()


@pytest.fixture
def client(manager):
    app.dependency_overrides[get_attack_manager] = lambda: manager
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def wait_for(client, attack_id, statuses, timeout=60.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get(f"/api/v1/attacks/{attack_id}").json()
        if body["status"] in statuses:
            return body
        time.sleep(0.05)
    raise AssertionError(f"attack {attack_id} never reached {statuses}")


class TestAttackEndpoints:
    """Test suite for /attacks."""

    @pytest.fixture
    def ciphertext(self):
        return encrypt(PLAINTEXT, "HI", Alphabet.english())

    def test_attack_runs_to_completion(self, client, ciphertext):
        response = client.post(
            "/api/v1/attacks",
            json={"ciphertext": ciphertext, "max_key_length": 2, "worker_count": 2},
        )
        assert response.status_code == 201
        created = response.json()
        assert created["status"] in ("running", "completed")
        assert created["scoring_method"] == "combined"
        assert created["worker_count"] == 2
        attack_id = created["attack_id"]

        body = wait_for(client, attack_id, {"completed"})
        assert body["outcome"] == "completed"
        assert body["progress"]["keys_tested"] == 702
        assert body["error"] is None

        results = client.get(f"/api/v1/attacks/{attack_id}/results", params={"limit": 3}).json()
        assert len(results["results"]) == 3
        assert results["results"][0]["key"] == "HI"
        assert results["results"][0]["plaintext"] == PLAINTEXT

        export = client.get(f"/api/v1/attacks/{attack_id}/export").json()
        assert export["ciphertext"] == ciphertext
        assert export["stats"]["total_keys"] == 702

        listing = client.get("/api/v1/attacks").json()
        assert listing["total"] == 1
        assert listing["items"][0]["attack_id"] == attack_id

    def test_stop_attack(self, client, ciphertext):
        created = client.post(
            "/api/v1/attacks",
            json={"ciphertext": ciphertext, "max_key_length": 4, "worker_count": 1},
        ).json()

        response = client.post(f"/api/v1/attacks/{created['attack_id']}/stop")
        assert response.status_code == 200
        assert response.json()["status"] == "idle"
        assert response.json()["outcome"] == "cancelled"

        again = client.post(f"/api/v1/attacks/{created['attack_id']}/stop")
        assert again.status_code == 200
        assert again.json()["outcome"] == "cancelled"

    def test_delete_attack(self, client, ciphertext):
        created = client.post(
            "/api/v1/attacks",
            json={"ciphertext": ciphertext, "max_key_length": 3},
        ).json()
        attack_id = created["attack_id"]

        assert client.delete(f"/api/v1/attacks/{attack_id}").status_code == 204

        response = client.get(f"/api/v1/attacks/{attack_id}")
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "AttackNotFound"

    def test_unknown_attack(self, client):
        for path in ("", "/results", "/export"):
            assert client.get(f"/api/v1/attacks/missing{path}").status_code == 404
        assert client.post("/api/v1/attacks/missing/stop").status_code == 404
        assert client.delete("/api/v1/attacks/missing").status_code == 404

    @pytest.mark.parametrize(
        "payload,kind",
        [
            ({"ciphertext": "   "}, "EmptyCiphertext"),
            ({"ciphertext": "KHOOR", "alphabet": "ABCA"}, "InvalidAlphabet"),
            ({"ciphertext": "KHOOR", "max_key_length": 0}, "InvalidConfiguration"),
            ({"ciphertext": "KHOOR", "worker_count": 0}, "InvalidConfiguration"),
        ],
    )
    def test_invalid_attack(self, client, manager, payload, kind):
        response = client.post("/api/v1/attacks", json=payload)
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == kind
        assert detail["message"]
        assert len(manager) == 0

    def test_unknown_scoring_method_rejected_by_schema(self, client):
        response = client.post(
            "/api/v1/attacks", json={"ciphertext": "KHOOR", "scoring_method": "soundex"}
        )
        assert response.status_code == 422


class TestCipherEndpoints:
    """Test suite for /cipher."""

    def test_encrypt(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt", json={"plaintext": "Hello, World", "key": "d"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["ciphertext"] == "Khoor, Zruog"
        assert body["key_used"] == "D"

    def test_decrypt(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt",
            json={"ciphertext": "BC-DA", "key": "B", "alphabet": "abcd"},
        )
        assert response.status_code == 200
        assert response.json()["plaintext"] == "AB-CD"
        assert response.json()["alphabet"] == "ABCD"

    def test_invalid_key(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt", json={"ciphertext": "KHOOR", "key": "K3Y"}
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "InvalidKey"

    def test_empty_plaintext_fails_validation(self, client):
        response = client.post("/api/v1/cipher/encrypt", json={"plaintext": "", "key": "A"})
        assert response.status_code == 422


class TestErrorMapping:
    def test_status_codes(self):
        assert to_http_exception(AttackNotFoundError("x")).status_code == 404
        assert to_http_exception(AttackStateError("start", "running")).status_code == 409
        assert to_http_exception(
            InvalidConfigurationError("worker_count", 0, "must be positive")
        ).status_code == 400

    def test_detail_shape(self):
        detail = to_http_exception(AttackStateError("export", "idle")).detail
        assert detail == {
            "error": "AttackState",
            "message": "Cannot export while attack is idle",
            "details": {"action": "export", "status": "idle"},
        }
