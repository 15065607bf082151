# claim_validator/dependencies.py

from typing import Optional

from fastapi import Depends

from .embedding_service import EmbeddingService, get_embedding_service
from .policy_store import PolicyStore

_policy_store: Optional[PolicyStore] = None


def get_policy_store(
    embedding_service: EmbeddingService = Depends(get_embedding_service),
) -> PolicyStore:
    """Shared policy store for the API, built on first request."""
    global _policy_store
    if _policy_store is None:
        _policy_store = PolicyStore(embedding_service=embedding_service)
    return _policy_store
