# tests/test_policy_store.py

import pickle

import pytest

from claim_validator.exceptions import PolicyNotFoundError
from claim_validator.policy_store import FINGERPRINT_FIELDS, PolicyStore


def test_policy_facts_are_embedded_on_demand(tmp_path, fake_embedding_service):
    store = PolicyStore(fake_embedding_service, fingerprint_path=str(tmp_path / "missing.pkl"))
    policy = store.get("HDFC-OPT-2021")

    assert policy.sum_insured == 1000000.0
    assert policy.is_active is False
    # "Apollo Hospitals" is in the network list
    assert policy.network_hospitals_embedding == [0.0, 1.0, 0.0]
    assert policy.excluded_conditions_embedding == [0.0, 0.0, 1.0]
    assert len(fake_embedding_service.calls) == len(FINGERPRINT_FIELDS)

    store.get("HDFC-OPT-2021")
    assert len(fake_embedding_service.calls) == len(FINGERPRINT_FIELDS)


def test_fingerprints_are_loaded_from_file(tmp_path):
    path = tmp_path / "fingerprints.pkl"
    vectors = {field: [float(i), 1.0] for i, field in enumerate(FINGERPRINT_FIELDS)}
    with open(path, "wb") as f:
        pickle.dump({"ICICI-CHI-2020": vectors}, f)

    policy = PolicyStore(fingerprint_path=str(path)).get("ICICI-CHI-2020")
    assert policy.covered_conditions_embedding == [0.0, 1.0]
    assert policy.network_hospitals_embedding == [3.0, 1.0]


def test_missing_fingerprints_without_embedding_service(tmp_path):
    policy = PolicyStore(fingerprint_path=str(tmp_path / "missing.pkl")).get("STAR-FHO-2022")
    assert policy.covered_conditions_embedding is None
    assert policy.sum_insured == 500000.0


def test_summary(tmp_path):
    summary = PolicyStore(fingerprint_path=str(tmp_path / "missing.pkl")).summary("ICICI-CHI-2020")
    assert summary.company_name == "ICICI Lombard"
    assert summary.is_active is True


def test_unknown_policy(tmp_path):
    store = PolicyStore(fingerprint_path=str(tmp_path / "missing.pkl"))
    with pytest.raises(PolicyNotFoundError, match="NOPE-123"):
        store.get("NOPE-123")
