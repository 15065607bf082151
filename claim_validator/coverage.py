# claim_validator/coverage.py

from typing import Any, Optional, Sequence

from .config import ScoringConfig, settings
from .data.master_data import COVERAGE_RULES, HIGH_VALUE_PROCEDURES
from .exclusions import has_emergency_indicator
from .logger import get_logger
from .medical_terms import extract_medical_terms
from .pydantic_schemas import ConditionMatch, CoverageAssessment, ExtractedMedicalProfile
from .utils import clamp, cosine_similarity

logger = get_logger(__name__)

HIGH_VALUE_REASON = "High-value medical procedures are typically covered"


def assess_condition_coverage(
    profile: ExtractedMedicalProfile,
    text: Any = "",
    config: Optional[ScoringConfig] = None,
) -> CoverageAssessment:
    """
    Scores how well the extracted medical profile is covered by a standard
    health policy.

    The strongest matched category wins (base score x relevance); the
    contributions are not summed. Any high-value procedure token in the text
    lifts the score to at least the configured floor.
    """
    config = config or settings.SCORING
    text = text.lower() if isinstance(text, str) else ""

    score = 0.0
    reasons = []
    for match in profile.categories:
        rule = COVERAGE_RULES.get(match.category)
        if rule is None:
            continue
        score = max(score, rule.base_score * match.relevance)
        reasons.append(f"{match.category.value}: {rule.rationale}")

    if text and any(token in text for token in HIGH_VALUE_PROCEDURES):
        score = max(score, config.HIGH_VALUE_PROCEDURE_SCORE)
        reasons.append(HIGH_VALUE_REASON)

    score = clamp(score)
    logger.debug(f"Coverage score {score:.2f} from {len(profile.categories)} categories")
    return CoverageAssessment(score=score, reasons=reasons, confidence=profile.confidence)


def match_condition(
    text: Any,
    text_embedding: Optional[Sequence[float]],
    covered_embedding: Optional[Sequence[float]],
    config: Optional[ScoringConfig] = None,
) -> ConditionMatch:
    """
    Hybrid similarity between the claimed condition and the policy's covered
    conditions. Informational only; the coverage check uses
    assess_condition_coverage.
    """
    config = config or settings.SCORING
    profile = extract_medical_terms(text)
    coverage = assess_condition_coverage(profile, text, config)
    vector_similarity = cosine_similarity(text_embedding, covered_embedding)
    emergency_bonus = config.CONDITION_EMERGENCY_BONUS if has_emergency_indicator(text) else 0.0

    score = (
        config.CONDITION_COVERAGE_WEIGHT * coverage.score
        + config.CONDITION_VECTOR_WEIGHT * vector_similarity
        + config.CONDITION_TERMINOLOGY_WEIGHT * profile.confidence
        + emergency_bonus
    )
    return ConditionMatch(
        score=clamp(score),
        coverage_score=coverage.score,
        vector_similarity=vector_similarity,
        terminology_confidence=profile.confidence,
        emergency_bonus=emergency_bonus,
    )
