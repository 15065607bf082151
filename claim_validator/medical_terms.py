# claim_validator/medical_terms.py

from typing import Any, List

from .data.master_data import MEDICAL_TAXONOMY
from .logger import get_logger
from .pydantic_schemas import CategoryMatch, ExtractedMedicalProfile

logger = get_logger(__name__)


def _matched(phrases, text: str) -> List[str]:
    return [phrase for phrase in phrases if phrase in text]


def extract_medical_terms(text: Any) -> ExtractedMedicalProfile:
    """
    Finds the taxonomy phrases (keywords, conditions, procedures) that occur
    in a piece of claim text.

    Phrases are matched as case-insensitive substrings. A category is reported
    only when at least one of its phrases matched, and categories come back
    ordered by relevance (matched phrases / phrases in the category), highest
    first. Ties keep taxonomy order.

    Args:
        text: Free text, usually the conditions segment of a claim.
            Anything that is not a non-empty string yields an empty profile.

    Returns:
        An ExtractedMedicalProfile.
    """
    if not isinstance(text, str) or not text.strip():
        return ExtractedMedicalProfile()

    lowered = text.lower()
    categories: List[CategoryMatch] = []
    terms = set()

    for category, entry in MEDICAL_TAXONOMY.items():
        keywords = _matched(entry.keywords, lowered)
        conditions = _matched(entry.conditions, lowered)
        procedures = _matched(entry.procedures, lowered)
        match_count = len(keywords) + len(conditions) + len(procedures)
        if match_count == 0:
            continue

        terms.update(keywords, conditions, procedures)
        categories.append(
            CategoryMatch(
                category=category,
                matched_keywords=keywords,
                matched_conditions=conditions,
                matched_procedures=procedures,
                match_count=match_count,
                relevance=match_count / entry.phrase_count,
            )
        )

    # sorted() is stable, so equal relevance keeps taxonomy order
    categories = sorted(categories, key=lambda match: match.relevance, reverse=True)
    total_matches = sum(match.match_count for match in categories)
    confidence = min(1.0, 0.1 * total_matches + 0.2 * len(categories))

    logger.debug(
        f"Medical terms: {total_matches} matches across {len(categories)} categories "
        f"(confidence {confidence:.2f})"
    )
    return ExtractedMedicalProfile(
        terms=frozenset(terms),
        categories=categories,
        confidence=confidence,
        total_matches=total_matches,
    )
