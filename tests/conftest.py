# tests/conftest.py

import os
import sys

# Add the root project directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from claim_validator.pydantic_schemas import ClaimEmbeddings, PolicyFacts, SegmentedClaim

# Three-dimensional stand-ins for sentence embeddings: one axis per concept.
COVERED = [1.0, 0.0, 0.0]
NETWORK = [0.0, 1.0, 0.0]
EXCLUDED = [0.0, 0.0, 1.0]


class FakeEmbeddingService:
    """Keyword -> vector lookup standing in for the sentence transformer."""

    dimension = 3

    def __init__(self, vectors=None):
        self.vectors = vectors or {}
        self.calls = []

    def zero_vector(self):
        return [0.0] * self.dimension

    def embed(self, text):
        self.calls.append(text)
        lowered = text.lower() if isinstance(text, str) else ""
        for keyword, vector in self.vectors.items():
            if keyword in lowered:
                return list(vector)
        return self.zero_vector()

    def embed_many(self, texts):
        return [self.embed(text) for text in texts]


@pytest.fixture
def fake_embedding_service():
    return FakeEmbeddingService(
        {
            "cosmetic": EXCLUDED,
            "liposuction": EXCLUDED,
            "apollo": NETWORK,
            "craniotomy": COVERED,
        }
    )


@pytest.fixture
def neuro_emergency_claim():
    """An emergency craniotomy billed by a network hospital."""
    return SegmentedClaim(
        pricing_and_date="Admission 12/03/2024. Total estimated cost: ₹8,47,500",
        conditions="Emergency craniotomy for traumatic brain injury after road accident",
        hospital_info="Apollo Hospitals, Greams Road, Chennai",
        full_text=(
            "Apollo Hospitals, Greams Road, Chennai. Emergency craniotomy for traumatic brain "
            "injury after road accident. Admission 12/03/2024. Total estimated cost: ₹8,47,500"
        ),
    )


@pytest.fixture
def cosmetic_claim():
    """Elective cosmetic surgery at a small clinic outside the network."""
    return SegmentedClaim(
        pricing_and_date="Total: ₹1,20,000",
        conditions="Cosmetic liposuction procedure",
        hospital_info="City Clinic, Nagpur",
        full_text="City Clinic, Nagpur. Cosmetic liposuction procedure. Total: ₹1,20,000",
    )


@pytest.fixture
def active_policy():
    return PolicyFacts(
        policy_number="ICICI-CHI-2020",
        policy_name="Complete Health Insurance",
        sum_insured=1500000,
        is_active=True,
        covered_conditions_embedding=COVERED,
        excluded_conditions_embedding=EXCLUDED,
        pricing_embedding=[0.5, 0.5, 0.0],
        network_hospitals_embedding=NETWORK,
    )


@pytest.fixture
def neuro_embeddings():
    return ClaimEmbeddings(conditions=COVERED, hospital=NETWORK)


@pytest.fixture
def cosmetic_embeddings():
    return ClaimEmbeddings(conditions=EXCLUDED, hospital=COVERED)
