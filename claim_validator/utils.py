# claim_validator/utils.py

import re
from typing import List, Optional, Sequence

import numpy as np

_WORD_PATTERN = re.compile(r"[a-z0-9]+")


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine similarity between two embedding vectors.

    Returns 0.0 when either vector is missing, empty, of a different length
    than the other, not numeric, or has zero norm.
    """
    if a is None or b is None:
        return 0.0
    try:
        vec_a = np.asarray(a, dtype=float)
        vec_b = np.asarray(b, dtype=float)
    except (TypeError, ValueError):
        return 0.0

    if vec_a.ndim != 1 or vec_a.size == 0 or vec_a.shape != vec_b.shape:
        return 0.0
    if not (np.all(np.isfinite(vec_a)) and np.all(np.isfinite(vec_b))):
        return 0.0

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    return max(-1.0, min(1.0, similarity))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance, two-row dynamic programming."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def words(text: str) -> List[str]:
    """Lower-cased alphanumeric tokens of a string."""
    return _WORD_PATTERN.findall(text.lower())


def contains_word(text: str, phrase: str) -> bool:
    """True if `phrase` occurs in `text` on word boundaries (case-insensitive)."""
    pattern = r"(?<![a-z0-9])" + re.escape(phrase.lower()) + r"(?![a-z0-9])"
    return re.search(pattern, text.lower()) is not None


def format_inr(amount: float) -> str:
    """
    Formats a rupee amount with Indian digit grouping, e.g. 847500 -> '8,47,500'.
    Paise are shown only when present.
    """
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    rupees = int(amount)
    paise = round((amount - rupees) * 100)
    if paise == 100:
        rupees, paise = rupees + 1, 0

    digits = str(rupees)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    if paise:
        return f"{sign}{digits}.{paise:02d}"
    return f"{sign}{digits}"
