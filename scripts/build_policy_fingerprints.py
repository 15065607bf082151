import os
import pickle
import sys

# Add the root project directory to the Python path
# This allows us to import from the 'claim_validator' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from claim_validator.config import settings
from claim_validator.data.master_data import POLICY_RULEBOOK
from claim_validator.embedding_service import EmbeddingService
from claim_validator.policy_store import FINGERPRINT_FIELDS, compute_fingerprints


def build_policy_fingerprints():
    """
    Encodes the covered, excluded, pricing and network text of every policy
    in the rulebook and saves the vectors for the policy store.
    """
    if not POLICY_RULEBOOK:
        print("Policy rulebook is empty. Aborting.")
        return

    print(f"Loading sentence transformer model: {settings.EMBEDDING_MODEL_NAME}...")
    service = EmbeddingService()

    # 1. Encode every fingerprinted field of every policy
    fingerprints = {}
    for policy_number, record in POLICY_RULEBOOK.items():
        print(f"Encoding {len(FINGERPRINT_FIELDS)} fields for policy {policy_number}...")
        fingerprints[policy_number] = compute_fingerprints(record, service)

    # 2. Save the fingerprints
    print(f"Saving fingerprints to {settings.FINGERPRINT_PATH}")
    with open(settings.FINGERPRINT_PATH, "wb") as f:
        pickle.dump(fingerprints, f)

    print("\n✅ Policy fingerprints build complete!")
    print(f"Fingerprinted {len(fingerprints)} policies.")


if __name__ == "__main__":
    # Ensure the output directory exists
    os.makedirs(os.path.dirname(settings.FINGERPRINT_PATH), exist_ok=True)
    build_policy_fingerprints()
