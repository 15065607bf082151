# claim_validator/policy_store.py

import os
import pickle
from typing import Dict, List, Mapping, Optional

from .config import settings
from .data.master_data import POLICY_RULEBOOK
from .embedding_service import EmbeddingService
from .exceptions import PolicyNotFoundError
from .logger import get_logger
from .pydantic_schemas import PolicyFacts, PolicySummary

logger = get_logger(__name__)

# Policy text fields that get a semantic fingerprint.
FINGERPRINT_FIELDS = ("covered_conditions", "excluded_conditions", "pricing", "network_hospitals")


def compute_fingerprints(record: Mapping, embedding_service: EmbeddingService) -> Dict[str, List[float]]:
    """Embeds every fingerprinted text field of one policy record."""
    vectors = embedding_service.embed_many([record.get(field, "") for field in FINGERPRINT_FIELDS])
    return dict(zip(FINGERPRINT_FIELDS, vectors))


class PolicyStore:
    """
    Read-only access to policy facts and their fingerprints.

    Fingerprints come from the pickle written by
    scripts/build_policy_fingerprints.py. Policies missing from it are
    embedded on first request and cached in memory.
    """

    def __init__(
        self,
        embedding_service: Optional[EmbeddingService] = None,
        rulebook: Optional[Mapping[str, Mapping]] = None,
        fingerprint_path: Optional[str] = None,
    ):
        self.embedding_service = embedding_service
        self.rulebook = rulebook if rulebook is not None else POLICY_RULEBOOK
        self.fingerprint_path = fingerprint_path or settings.FINGERPRINT_PATH
        self._fingerprints: Dict[str, Dict[str, List[float]]] = self._load_fingerprints()

    def _load_fingerprints(self) -> Dict[str, Dict[str, List[float]]]:
        if not os.path.exists(self.fingerprint_path):
            logger.warning(
                f"No fingerprint file at {self.fingerprint_path}; policies will be embedded on demand. "
                "Run 'scripts/build_policy_fingerprints.py' to pre-compute them."
            )
            return {}
        try:
            with open(self.fingerprint_path, "rb") as f:
                fingerprints = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.error(f"Could not read fingerprint file {self.fingerprint_path}: {e}")
            return {}
        logger.info(f"Loaded fingerprints for {len(fingerprints)} policies.")
        return dict(fingerprints)

    def _record(self, policy_number: str) -> Mapping:
        record = self.rulebook.get(policy_number)
        if record is None:
            raise PolicyNotFoundError(policy_number)
        return record

    def fingerprints(self, policy_number: str) -> Dict[str, List[float]]:
        record = self._record(policy_number)
        if policy_number not in self._fingerprints:
            if self.embedding_service is None:
                logger.warning(f"No fingerprints for policy '{policy_number}' and no embedding service")
                return {}
            logger.info(f"Embedding policy '{policy_number}'...")
            self._fingerprints[policy_number] = compute_fingerprints(record, self.embedding_service)
        return self._fingerprints[policy_number]

    def summary(self, policy_number: str) -> PolicySummary:
        record = self._record(policy_number)
        return PolicySummary(
            policy_number=policy_number,
            policy_name=record["policy_name"],
            company_name=record["company_name"],
            sum_insured=record["sum_insured"],
            is_active=record["is_active"],
        )

    def get(self, policy_number: str) -> PolicyFacts:
        """
        Policy facts plus fingerprints for the scoring engine.

        Raises:
            PolicyNotFoundError: if the policy number is unknown.
        """
        record = self._record(policy_number)
        fingerprints = self.fingerprints(policy_number)
        return PolicyFacts(
            policy_number=policy_number,
            policy_name=record["policy_name"],
            sum_insured=record["sum_insured"],
            is_active=record["is_active"],
            **{f"{field}_embedding": fingerprints.get(field) for field in FINGERPRINT_FIELDS},
        )
