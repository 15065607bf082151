# tests/test_api.py

import asyncio

import pytest
from fastapi.testclient import TestClient

from claim_validator.config import ScoringConfig
from claim_validator.dependencies import get_policy_store
from claim_validator.embedding_service import get_embedding_service
from claim_validator.main import app
from claim_validator.policy_store import PolicyStore


@pytest.fixture
def client(tmp_path, fake_embedding_service):
    store = PolicyStore(fake_embedding_service, fingerprint_path=str(tmp_path / "missing.pkl"))
    app.dependency_overrides[get_embedding_service] = lambda: fake_embedding_service
    app.dependency_overrides[get_policy_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_read_policy(client):
    response = client.get("/api/v1/claims/policies/HDFC-OPT-2021")
    assert response.status_code == 200
    body = response.json()
    assert body["sum_insured"] == 1000000.0
    assert body["is_active"] is False


def test_unknown_policy_is_404(client):
    response = client.get("/api/v1/claims/policies/NOPE-123")
    assert response.status_code == 404
    assert "NOPE-123" in response.json()["detail"]


def test_validate_with_inline_policy(client, neuro_emergency_claim, active_policy, neuro_embeddings):
    response = client.post(
        "/api/v1/claims/validate",
        json={
            "segments": neuro_emergency_claim.model_dump(),
            "policy": active_policy.model_dump(),
            "embeddings": neuro_embeddings.model_dump(),
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["result"]["decision"] == "APPROVED"
    assert body["claim_amount"] == 847500.0


def test_validate_against_stored_policy(client, neuro_emergency_claim):
    response = client.post(
        "/api/v1/claims/validate/ICICI-CHI-2020",
        json={"segments": neuro_emergency_claim.model_dump()},
    )
    assert response.status_code == 200
    assert response.json()["result"]["decision"] == "APPROVED"


def test_inactive_stored_policy_is_rejected(client, neuro_emergency_claim):
    response = client.post(
        "/api/v1/claims/validate/HDFC-OPT-2021",
        json={"segments": neuro_emergency_claim.model_dump()},
    )
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["decision"] == "REJECTED"
    assert result["validation_errors"] == ["Policy is inactive or expired"]


def test_validate_against_unknown_policy_is_404(client, neuro_emergency_claim):
    response = client.post(
        "/api/v1/claims/validate/NOPE-123",
        json={"segments": neuro_emergency_claim.model_dump()},
    )
    assert response.status_code == 404


def test_missing_segments_is_422(client, active_policy):
    response = client.post("/api/v1/claims/validate", json={"policy": active_policy.model_dump()})
    assert response.status_code == 422


class LoopCheckingPolicyStore(PolicyStore):
    """Records whether policy lookups run on the event loop thread."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ran_on_event_loop = []

    def get(self, policy_number):
        try:
            asyncio.get_running_loop()
            self.ran_on_event_loop.append(True)
        except RuntimeError:
            self.ran_on_event_loop.append(False)
        return super().get(policy_number)


def test_stored_policy_is_loaded_off_the_event_loop(tmp_path, fake_embedding_service, neuro_emergency_claim):
    store = LoopCheckingPolicyStore(fake_embedding_service, fingerprint_path=str(tmp_path / "missing.pkl"))
    app.dependency_overrides[get_embedding_service] = lambda: fake_embedding_service
    app.dependency_overrides[get_policy_store] = lambda: store
    try:
        response = TestClient(app).post(
            "/api/v1/claims/validate/ICICI-CHI-2020",
            json={"segments": neuro_emergency_claim.model_dump()},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert store.ran_on_event_loop == [False]


def test_hospital_blend_default_is_documented():
    assert ScoringConfig().HOSPITAL_BLEND == "sum"
    assert "HOSPITAL_BLEND=sum" in app.openapi()["info"]["description"]
