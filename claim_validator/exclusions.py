# claim_validator/exclusions.py

import re
from typing import Any, Optional, Sequence

from .config import ScoringConfig, settings
from .data.master_data import EMERGENCY_TERMS, EXCLUSION_RULES
from .logger import get_logger
from .pydantic_schemas import ExclusionAnalysis, ExclusionDetail
from .utils import clamp, cosine_similarity

logger = get_logger(__name__)

EMPTY_TEXT_REASON = "No condition text provided for exclusion check"
EMERGENCY_REASON = "Emergency medical conditions are covered regardless of other factors"
VECTOR_EXCLUSION_REASON = "Condition has high similarity to excluded conditions"
BORDERLINE_REASON = "Condition has some similarity to exclusions but within acceptable range"
NO_EXCLUSION_REASON = "Condition does not match common exclusion patterns"

_EMERGENCY_PATTERN = re.compile(
    r"(?<![a-z0-9])(?:"
    + "|".join(r"[\s-]".join(map(re.escape, term.split("-"))) for term in EMERGENCY_TERMS)
    + r")(?![a-z0-9])"
)


def has_emergency_indicator(text: Any) -> bool:
    """True if the text names an emergency, trauma, accident or similar as a whole word."""
    if not isinstance(text, str):
        return False
    return _EMERGENCY_PATTERN.search(text.lower()) is not None


def analyze_exclusions(
    text: Any,
    text_embedding: Optional[Sequence[float]],
    excluded_embedding: Optional[Sequence[float]],
    config: Optional[ScoringConfig] = None,
) -> ExclusionAnalysis:
    """
    Decides whether a claimed condition falls under a policy exclusion.

    Combines a keyword pass over the static exclusion categories with the
    cosine similarity between the condition text and the policy's
    excluded-conditions fingerprint. Emergencies are never excluded.
    """
    config = config or settings.SCORING
    if not isinstance(text, str) or not text.strip():
        return ExclusionAnalysis(is_excluded=False, confidence=0.0, reason=EMPTY_TEXT_REASON)

    lowered = text.lower()

    # --- Step 1: keyword pass ---
    details = []
    keyword_score = 0.0
    winning_detail = None
    for category, rule in EXCLUSION_RULES.items():
        matched = [keyword for keyword in rule.keywords if keyword in lowered]
        if not matched:
            continue
        category_score = (len(matched) / len(rule.keywords)) * rule.weight
        detail = ExclusionDetail(
            category=category, keywords=matched, score=category_score, reason=rule.reason
        )
        details.append(detail)
        if category_score > keyword_score:
            keyword_score = category_score
            winning_detail = detail

    # --- Step 2: vector pass ---
    vector_score = cosine_similarity(text_embedding, excluded_embedding)

    # --- Step 3: emergency override ---
    if has_emergency_indicator(lowered):
        logger.info("Emergency indicator found; exclusion check overridden")
        return ExclusionAnalysis(
            is_excluded=False,
            confidence=config.EMERGENCY_CONFIDENCE,
            reason=EMERGENCY_REASON,
            details=details,
            is_emergency=True,
            keyword_score=keyword_score,
            vector_score=vector_score,
        )

    # --- Step 4: combine ---
    combined_score = max(keyword_score, vector_score * config.EXCLUSION_VECTOR_SCALE)

    if combined_score > config.EXCLUSION_THRESHOLD:
        reason = winning_detail.reason if winning_detail is not None else VECTOR_EXCLUSION_REASON
        is_excluded = True
        confidence = combined_score
    else:
        is_excluded = False
        confidence = 1 - combined_score
        if combined_score > config.EXCLUSION_BORDERLINE_THRESHOLD:
            reason = BORDERLINE_REASON
        else:
            reason = NO_EXCLUSION_REASON

    logger.debug(
        f"Exclusion check: keyword={keyword_score:.2f} vector={vector_score:.2f} "
        f"combined={combined_score:.2f} excluded={is_excluded}"
    )
    return ExclusionAnalysis(
        is_excluded=is_excluded,
        confidence=clamp(confidence),
        reason=reason,
        details=details,
        keyword_score=keyword_score,
        vector_score=vector_score,
        combined_score=combined_score,
    )
