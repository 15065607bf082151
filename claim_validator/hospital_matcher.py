# claim_validator/hospital_matcher.py

import re
from typing import Any, Optional, Sequence, Tuple

from .config import ScoringConfig, settings
from .data.master_data import (
    HOSPITAL_ABBREVIATIONS,
    HOSPITAL_CHAINS,
    HOSPITAL_NAME_PREFIXES,
    HOSPITAL_NAME_SUFFIXES,
    KNOWN_NETWORK_HOSPITALS,
    MAJOR_CITIES,
)
from .logger import get_logger
from .pydantic_schemas import HospitalMatch
from .utils import clamp, contains_word, cosine_similarity, levenshtein_distance

logger = get_logger(__name__)

_PUNCTUATION = re.compile(r"[^a-z0-9\s]")

# A run of capitalised words ending in a facility word, e.g. "Apollo Hospitals".
_FACILITY_NAME_PATTERN = re.compile(
    r"(?:[A-Z][\w.&'-]*\s+){1,5}"
    r"(?i:hospitals?|clinic|medical cent(?:er|re)|nursing home|healthcare|institute|medicity)\b"
)


def _clean(text: str) -> str:
    return " ".join(_PUNCTUATION.sub(" ", text.lower()).split())


def normalize_hospital_name(name: Any) -> str:
    """
    Reduces a hospital name to its distinguishing words.

    "The Apollo Hospitals" -> "apollo"
    "Sri Sai Multispeciality Hospital Pvt Ltd" -> "sai multi specialty"
    """
    if not isinstance(name, str):
        return ""
    text = " ".join(name.lower().split()).strip(" .,;:-")

    stripped = True
    while stripped:
        stripped = False
        for prefix in HOSPITAL_NAME_PREFIXES:
            if text.startswith(prefix) and len(text) > len(prefix):
                text = text[len(prefix):].lstrip(" .")
                stripped = True
        for suffix in HOSPITAL_NAME_SUFFIXES:
            if text.endswith(suffix) and len(text) > len(suffix):
                text = text[: -len(suffix)].rstrip(" .,;:-")
                stripped = True

    text = text.replace("&", " & ")
    tokens = []
    for token in text.split():
        tokens.extend(HOSPITAL_ABBREVIATIONS.get(token, token).split())

    return _clean(" ".join(tokens))


_NORMALIZED_NETWORK_HOSPITALS = tuple(
    (hospital, normalize_hospital_name(hospital)) for hospital in KNOWN_NETWORK_HOSPITALS
)


def _significant_words(text: str) -> set:
    return {word for word in text.split() if len(word) > 2}


def fuzzy_match(a: str, b: str, config: Optional[ScoringConfig] = None) -> float:
    """
    Similarity of two normalized names: the better of edit-distance similarity
    and (scaled) overlap of words longer than two characters.
    """
    config = config or settings.SCORING
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    edit_similarity = 1 - levenshtein_distance(a, b) / max(len(a), len(b))

    words_a, words_b = _significant_words(a), _significant_words(b)
    overlap = 0.0
    if words_a and words_b:
        overlap = len(words_a & words_b) / max(len(words_a), len(words_b))

    return clamp(max(edit_similarity, overlap * config.HOSPITAL_WORD_OVERLAP_WEIGHT))


def best_network_match(
    normalized_name: str, config: Optional[ScoringConfig] = None
) -> Tuple[float, Optional[str]]:
    """Best fuzzy score against the known network hospitals, with the hospital it came from."""
    best_score, best_hospital = 0.0, None
    for hospital, normalized_known in _NORMALIZED_NETWORK_HOSPITALS:
        score = fuzzy_match(normalized_name, normalized_known, config)
        if score > best_score:
            best_score, best_hospital = score, hospital
    return best_score, best_hospital


def extract_hospital_name(text: Any) -> Optional[str]:
    """First capitalised facility name in a free-text snippet, if any."""
    if not isinstance(text, str):
        return None
    match = _FACILITY_NAME_PATTERN.search(text)
    return match.group(0).strip() if match else None


def match_hospital(
    hospital_name: Any,
    hospital_info: Any,
    hospital_embedding: Optional[Sequence[float]],
    network_embedding: Optional[Sequence[float]],
    config: Optional[ScoringConfig] = None,
) -> HospitalMatch:
    """
    Decides whether the treating hospital belongs to the policy's network.

    Args:
        hospital_name: Candidate name; when empty it is pulled out of
            hospital_info, and failing that the whole snippet is used.
        hospital_info: Free-text hospital segment of the claim.
        hospital_embedding: Embedding of the hospital text.
        network_embedding: The policy's network-hospitals fingerprint.
    """
    config = config or settings.SCORING
    info = hospital_info if isinstance(hospital_info, str) else ""

    if isinstance(hospital_name, str) and hospital_name.strip():
        candidate = hospital_name.strip()
    else:
        candidate = extract_hospital_name(info) or info.strip()

    # --- Step 1: normalization ---
    normalized = normalize_hospital_name(candidate)

    # --- Step 2: fuzzy match against known network hospitals ---
    fuzzy_score, matched_hospital = best_network_match(normalized, config)

    # --- Step 3: chain check ---
    is_chain = any(contains_word(normalized, chain) for chain in HOSPITAL_CHAINS)
    chain_score = config.HOSPITAL_CHAIN_SCORE if is_chain else 0.0

    # --- Step 4: vector similarity ---
    vector_score = cosine_similarity(hospital_embedding, network_embedding)

    # --- Step 5: location bonus ---
    combined_text = _clean(f"{candidate} {info}")
    in_major_city = any(contains_word(combined_text, city) for city in MAJOR_CITIES)
    location_bonus = config.HOSPITAL_LOCATION_BONUS if in_major_city else 0.0

    weighted = (
        fuzzy_score * config.HOSPITAL_FUZZY_WEIGHT,
        vector_score * config.HOSPITAL_VECTOR_WEIGHT,
        chain_score * config.HOSPITAL_CHAIN_WEIGHT,
    )
    if config.HOSPITAL_BLEND == "max":
        final_score = max(weighted) + location_bonus
    else:
        final_score = sum(weighted) + location_bonus
    final_score = clamp(final_score)
    is_in_network = final_score > config.NETWORK_THRESHOLD

    logger.info(
        f"Hospital '{candidate}' -> '{normalized}': fuzzy={fuzzy_score:.2f} chain={chain_score:.2f} "
        f"vector={vector_score:.2f} final={final_score:.2f} in_network={is_in_network}"
    )
    return HospitalMatch(
        hospital_name=candidate or None,
        normalized_name=normalized,
        matched_hospital=matched_hospital,
        fuzzy_score=fuzzy_score,
        chain_score=chain_score,
        vector_score=vector_score,
        location_bonus=location_bonus,
        final_score=final_score,
        is_in_network=is_in_network,
    )
