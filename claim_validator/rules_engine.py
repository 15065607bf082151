# claim_validator/rules_engine.py

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Tuple, Union

from .config import ScoringConfig, settings
from .coverage import assess_condition_coverage, match_condition
from .decision import (
    CONDITION_COVERED,
    CONDITION_NOT_EXCLUDED,
    HOSPITAL_IN_NETWORK,
    PRICING_MATCHES,
    WITHIN_SUM_INSURED,
    aggregate_checks,
)
from .embedding_service import EmbeddingService
from .exclusions import analyze_exclusions
from .hospital_matcher import extract_hospital_name, match_hospital
from .logger import get_logger
from .medical_terms import extract_medical_terms
from .pricing import pick_best_claim_amount, validate_pricing
from .pydantic_schemas import (
    ClaimEmbeddings,
    ClaimValidationReport,
    ConditionMatch,
    CoverageAssessment,
    DocumentCompleteness,
    ExclusionAnalysis,
    ExtractedMedicalProfile,
    HospitalMatch,
    PolicyFacts,
    PricingValidation,
    SegmentedClaim,
)
from .utils import format_inr

logger = get_logger(__name__)

REQUIRED_SEGMENTS = ("pricing_and_date", "conditions", "hospital_info")

CoverageOutcome = Tuple[ExtractedMedicalProfile, CoverageAssessment, ConditionMatch]


# ==============================================================================
# Input preparation
# ==============================================================================


def _as_segments(segments: Union[SegmentedClaim, dict]) -> SegmentedClaim:
    if isinstance(segments, SegmentedClaim):
        return segments
    if isinstance(segments, dict):
        return SegmentedClaim.model_validate(segments)
    raise TypeError(f"segments must be a SegmentedClaim or dict, got {type(segments).__name__}")


def _as_policy(policy: Union[PolicyFacts, dict]) -> PolicyFacts:
    if isinstance(policy, PolicyFacts):
        return policy
    if isinstance(policy, dict):
        return PolicyFacts.model_validate(policy)
    raise TypeError(f"policy must be a PolicyFacts or dict, got {type(policy).__name__}")


def resolve_claim_amount(segments: SegmentedClaim, claim_amount: Optional[float] = None) -> float:
    """The supplied amount, else the best amount in the pricing segment, else in the full text."""
    if claim_amount is not None and claim_amount > 0:
        return float(claim_amount)
    amount = pick_best_claim_amount(segments.pricing_and_date)
    if amount <= 0:
        amount = pick_best_claim_amount(segments.full_text)
    return amount


def resolve_hospital_name(segments: SegmentedClaim, hospital_name: Optional[str] = None) -> Optional[str]:
    if isinstance(hospital_name, str) and hospital_name.strip():
        return hospital_name.strip()
    return extract_hospital_name(segments.hospital_info) or extract_hospital_name(segments.full_text)


def hospital_text(segments: SegmentedClaim, hospital_name: Optional[str]) -> str:
    """The text embedded for the hospital network comparison."""
    return " ".join(part for part in (hospital_name, segments.hospital_info) if part)


def check_document_completeness(segments: SegmentedClaim) -> DocumentCompleteness:
    missing = [name for name in REQUIRED_SEGMENTS if not getattr(segments, name).strip()]
    return DocumentCompleteness(is_complete=not missing, missing_categories=missing)


# ==============================================================================
# Individual analyses
# ==============================================================================


def _analyze_coverage(
    segments: SegmentedClaim, embeddings: ClaimEmbeddings, policy: PolicyFacts, config: ScoringConfig
) -> CoverageOutcome:
    profile = extract_medical_terms(segments.conditions)
    coverage = assess_condition_coverage(profile, segments.conditions, config)
    condition_match = match_condition(
        segments.conditions, embeddings.conditions, policy.covered_conditions_embedding, config
    )
    return profile, coverage, condition_match


def _analyze_exclusions(
    segments: SegmentedClaim, embeddings: ClaimEmbeddings, policy: PolicyFacts, config: ScoringConfig
) -> ExclusionAnalysis:
    return analyze_exclusions(
        segments.conditions, embeddings.conditions, policy.excluded_conditions_embedding, config
    )


def _analyze_pricing(
    segments: SegmentedClaim, claim_amount: float, policy: PolicyFacts, config: ScoringConfig
) -> PricingValidation:
    return validate_pricing(
        segments.pricing_and_date, segments.conditions, claim_amount, policy.sum_insured, config
    )


def _analyze_hospital(
    segments: SegmentedClaim,
    hospital_name: Optional[str],
    embeddings: ClaimEmbeddings,
    policy: PolicyFacts,
    config: ScoringConfig,
) -> HospitalMatch:
    return match_hospital(
        hospital_name,
        segments.hospital_info,
        embeddings.hospital,
        policy.network_hospitals_embedding,
        config,
    )


# Fail-closed results used when an analysis raises.
def _failed_coverage() -> CoverageOutcome:
    return (
        ExtractedMedicalProfile(),
        CoverageAssessment(score=0.0, reasons=["Coverage analysis failed"]),
        ConditionMatch(),
    )


def _failed_exclusions() -> ExclusionAnalysis:
    return ExclusionAnalysis(is_excluded=True, confidence=0.0, reason="Exclusion analysis failed")


def _failed_pricing() -> PricingValidation:
    return PricingValidation(is_valid=False, confidence=0.0, issues=["Pricing analysis failed"])


def _failed_hospital() -> HospitalMatch:
    return HospitalMatch(is_in_network=False)


def _run_safely(name: str, analysis: Callable, fallback: Callable, *args: Any) -> Any:
    try:
        return analysis(*args)
    except Exception as e:
        logger.error(f"{name} analysis failed, treating the check as failed: {e}", exc_info=True)
        return fallback()


# ==============================================================================
# Aggregation
# ==============================================================================


def _failure_messages(
    claim_amount: float,
    policy: PolicyFacts,
    coverage: CoverageAssessment,
    exclusion: ExclusionAnalysis,
    pricing: PricingValidation,
    hospital: HospitalMatch,
) -> dict:
    if policy.sum_insured is None:
        sum_insured_message = "Sum insured is not known for this policy"
    else:
        sum_insured_message = (
            f"Claim amount ₹{format_inr(claim_amount)} exceeds sum insured ₹{format_inr(policy.sum_insured)}"
        )

    if hospital.hospital_name:
        hospital_message = (
            f'Hospital "{hospital.hospital_name}" not in policy network '
            f"(similarity: {round(hospital.final_score * 100)}%)"
        )
    else:
        hospital_message = "Hospital name could not be determined from documents"

    return {
        WITHIN_SUM_INSURED: sum_insured_message,
        CONDITION_COVERED: (
            f"Medical condition not sufficiently covered by policy "
            f"(similarity: {round(coverage.score * 100)}%)"
        ),
        CONDITION_NOT_EXCLUDED: f"Medical condition may be excluded: {exclusion.reason}",
        PRICING_MATCHES: f"Pricing validation failed: {', '.join(pricing.issues)}",
        HOSPITAL_IN_NETWORK: hospital_message,
    }


def _build_report(
    segments: SegmentedClaim,
    policy: PolicyFacts,
    claim_amount: float,
    hospital_name: Optional[str],
    coverage_outcome: CoverageOutcome,
    exclusion: ExclusionAnalysis,
    pricing: PricingValidation,
    hospital: HospitalMatch,
    config: ScoringConfig,
) -> ClaimValidationReport:
    profile, coverage, condition_match = coverage_outcome

    within_sum_insured = policy.sum_insured is not None and claim_amount <= policy.sum_insured
    result = aggregate_checks(
        within_sum_insured=within_sum_insured,
        condition_covered=coverage.score > config.COVERAGE_THRESHOLD,
        condition_not_excluded=not exclusion.is_excluded,
        pricing_matches=pricing.is_valid,
        hospital_in_network=hospital.is_in_network,
        policy_active=policy.is_active,
        failure_messages=_failure_messages(claim_amount, policy, coverage, exclusion, pricing, hospital),
    )

    return ClaimValidationReport(
        result=result,
        claim_amount=claim_amount,
        hospital_name=hospital_name,
        profile=profile,
        coverage=coverage,
        condition_match=condition_match,
        exclusion=exclusion,
        pricing=pricing,
        hospital=hospital,
        completeness=check_document_completeness(segments),
    )


# ==============================================================================
# Entry points
# ==============================================================================


def evaluate_claim(
    segments: Union[SegmentedClaim, dict],
    policy: Union[PolicyFacts, dict],
    claim_amount: Optional[float] = None,
    hospital_name: Optional[str] = None,
    embeddings: Optional[ClaimEmbeddings] = None,
    config: Optional[ScoringConfig] = None,
) -> ClaimValidationReport:
    """
    Validates a claim synchronously.

    Missing claim embeddings are treated as unknown (cosine similarity 0).
    Use validate_claim to have them generated.
    """
    config = config or settings.SCORING
    segments = _as_segments(segments)
    policy = _as_policy(policy)
    embeddings = embeddings or ClaimEmbeddings()
    amount = resolve_claim_amount(segments, claim_amount)
    name = resolve_hospital_name(segments, hospital_name)

    coverage_outcome = _run_safely(
        "Coverage", _analyze_coverage, _failed_coverage, segments, embeddings, policy, config
    )
    exclusion = _run_safely(
        "Exclusion", _analyze_exclusions, _failed_exclusions, segments, embeddings, policy, config
    )
    pricing = _run_safely("Pricing", _analyze_pricing, _failed_pricing, segments, amount, policy, config)
    hospital = _run_safely(
        "Hospital", _analyze_hospital, _failed_hospital, segments, name, embeddings, policy, config
    )

    return _build_report(segments, policy, amount, name, coverage_outcome, exclusion, pricing, hospital, config)


async def validate_claim(
    segments: Union[SegmentedClaim, dict],
    policy: Union[PolicyFacts, dict],
    claim_amount: Optional[float] = None,
    hospital_name: Optional[str] = None,
    embeddings: Optional[ClaimEmbeddings] = None,
    embedding_service: Optional[EmbeddingService] = None,
    config: Optional[ScoringConfig] = None,
) -> ClaimValidationReport:
    """
    The main orchestrator for claim validation.

    Generates any missing claim embeddings, runs the coverage, exclusion,
    pricing and hospital analyses in parallel worker threads and fuses their
    results into a single decision.

    Args:
        segments: The segmented claim documents.
        policy: Policy facts and fingerprints.
        claim_amount: The claimed amount, if already known.
        hospital_name: The treating hospital, if already known.
        embeddings: Pre-computed claim embeddings.
        embedding_service: Used to fill in missing embeddings. Without it,
            missing embeddings count as unknown.

    Returns:
        The ClaimValidationReport, identical to what evaluate_claim returns
        for the same embeddings.
    """
    start_time = time.time()
    config = config or settings.SCORING
    segments = _as_segments(segments)
    policy = _as_policy(policy)
    embeddings = embeddings or ClaimEmbeddings()
    amount = resolve_claim_amount(segments, claim_amount)
    name = resolve_hospital_name(segments, hospital_name)

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor() as pool:
        # --- Step 1: generate missing claim embeddings ---
        if embedding_service is not None:
            conditions_vector, hospital_vector = await asyncio.gather(
                _embed_if_missing(loop, pool, embedding_service, embeddings.conditions, segments.conditions),
                _embed_if_missing(
                    loop, pool, embedding_service, embeddings.hospital, hospital_text(segments, name)
                ),
            )
            embeddings = ClaimEmbeddings(conditions=conditions_vector, hospital=hospital_vector)
        elif embeddings.conditions is None or embeddings.hospital is None:
            logger.warning("Claim embeddings missing and no embedding service given; vector scores will be 0")

        # --- Step 2: run the independent analyses in parallel ---
        coverage_outcome, exclusion, pricing, hospital = await asyncio.gather(
            loop.run_in_executor(
                pool, _run_safely, "Coverage", _analyze_coverage, _failed_coverage,
                segments, embeddings, policy, config,
            ),
            loop.run_in_executor(
                pool, _run_safely, "Exclusion", _analyze_exclusions, _failed_exclusions,
                segments, embeddings, policy, config,
            ),
            loop.run_in_executor(
                pool, _run_safely, "Pricing", _analyze_pricing, _failed_pricing,
                segments, amount, policy, config,
            ),
            loop.run_in_executor(
                pool, _run_safely, "Hospital", _analyze_hospital, _failed_hospital,
                segments, name, embeddings, policy, config,
            ),
        )

    # --- Step 3: aggregate ---
    report = _build_report(
        segments, policy, amount, name, coverage_outcome, exclusion, pricing, hospital, config
    )
    logger.info(
        f"Claim validated in {time.time() - start_time:.2f}s: {report.result.decision.value} "
        f"({report.result.passed_checks}/{report.result.total_checks} checks)"
    )
    return report


async def _embed_if_missing(loop, pool, embedding_service: EmbeddingService, vector, text: str):
    if vector is not None:
        return vector
    return await loop.run_in_executor(pool, embedding_service.embed, text)
