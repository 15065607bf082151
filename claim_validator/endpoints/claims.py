# claim_validator/endpoints/claims.py

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from ..config import settings
from ..dependencies import get_policy_store
from ..embedding_service import EmbeddingService, get_embedding_service
from ..limiter import limiter  # Import the limiter instance
from ..logger import get_logger
from ..policy_store import PolicyStore
from ..pydantic_schemas import (
    ClaimValidationReport,
    ClaimValidationRequest,
    PolicyClaimRequest,
    PolicySummary,
)
from ..rules_engine import validate_claim

logger = get_logger(__name__)

# We use APIRouter to keep endpoint definitions organized
claims_router = APIRouter()


@claims_router.post("/validate", response_model=ClaimValidationReport)
@limiter.limit(settings.RATE_LIMIT)
async def create_validation_request(
    request: Request,
    claim: ClaimValidationRequest,
    embedding_service: EmbeddingService = Depends(get_embedding_service),
):
    """
    Validates a segmented claim against the policy facts sent with it.
    Claim embeddings that are not supplied are generated.

    Hospital network membership uses the configured HOSPITAL_BLEND, which is
    "sum" unless overridden.
    """
    logger.info(f"Validation requested for policy '{claim.policy.policy_number or 'unknown'}'")
    return await validate_claim(
        claim.segments,
        claim.policy,
        claim_amount=claim.claim_amount,
        hospital_name=claim.hospital_name,
        embeddings=claim.embeddings,
        embedding_service=embedding_service,
    )


@claims_router.post("/validate/{policy_number}", response_model=ClaimValidationReport)
@limiter.limit(settings.RATE_LIMIT)
async def create_policy_validation_request(
    request: Request,
    policy_number: str,
    claim: PolicyClaimRequest,
    policy_store: PolicyStore = Depends(get_policy_store),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
):
    """
    Validates a segmented claim against a policy held in the policy store.
    Unknown policy numbers return 404.
    """
    logger.info(f"Validation requested for stored policy '{policy_number}'")
    # May embed the policy on first use; keep it off the event loop
    policy = await run_in_threadpool(policy_store.get, policy_number)
    return await validate_claim(
        claim.segments,
        policy,
        claim_amount=claim.claim_amount,
        hospital_name=claim.hospital_name,
        embedding_service=embedding_service,
    )


@claims_router.get("/policies/{policy_number}", response_model=PolicySummary)
@limiter.limit(settings.RATE_LIMIT)
async def read_policy(
    request: Request,
    policy_number: str,
    policy_store: PolicyStore = Depends(get_policy_store),
):
    """Retrieves the numeric facts of a stored policy."""
    return policy_store.summary(policy_number)
