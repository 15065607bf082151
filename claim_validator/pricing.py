# claim_validator/pricing.py

import math
import re
from typing import Any, List, Optional, Tuple

from .config import ScoringConfig, settings
from .data.master_data import (
    GENERAL_PRICING_TABLE,
    PROCEDURE_PRICING,
    TOTAL_AMOUNT_KEYWORDS,
)
from .logger import get_logger
from .medical_terms import extract_medical_terms
from .pydantic_schemas import (
    ExtractedPricing,
    MedicalCategory,
    PricingValidation,
    ProcedurePrice,
    ProcedurePriceRange,
)
from .utils import clamp, format_inr

logger = get_logger(__name__)

NO_CLAIM_AMOUNT_ISSUE = "No claim amount could be determined from documents"
NO_PRICING_ISSUE = "No pricing information found in documents"

_NUMBER = r"\d{1,3}(?:,\d{2,3})+(?:\.\d+)?|\d+(?:\.\d+)?"

# Optional currency prefix, a number with Indian or western grouping, an
# optional currency suffix. Numbers glued to '/', '-' or ',' digits are dates,
# ranges or identifiers and are skipped.
_AMOUNT_PATTERN = re.compile(
    r"(?P<prefix>₹|\bRs\.?|\bINR)?\s*"
    r"(?<![\d/,-])"
    rf"(?P<number>{_NUMBER})"
    r"(?![\d]|[.,/-]\d)"
    r"(?P<suffix>\s*(?:/-|\bINR\b|\bRs\b\.?))?",
    re.IGNORECASE,
)

# Up to five words, an optional colon, then a currency-marked amount.
_PROCEDURE_PRICE_PATTERN = re.compile(
    r"\b(?P<label>(?:[A-Za-z]+[ \t]+){0,4}[A-Za-z]+)[ \t]*:?[ \t]*"
    rf"(?:₹|\bRs\.?|\bINR)[ \t]*(?P<number>{_NUMBER})",
    re.IGNORECASE,
)


def _to_amount(number: str) -> float:
    return float(number.replace(",", ""))


def _scan_amounts(text: str) -> List[Tuple[float, bool]]:
    """(amount, carries_currency_marker) for every positive amount in the text."""
    found = []
    for match in _AMOUNT_PATTERN.finditer(text):
        amount = _to_amount(match.group("number"))
        if amount <= 0:
            continue
        found.append((amount, bool(match.group("prefix") or match.group("suffix"))))
    return found


# --- Step 1: amount extraction ---


def extract_all_amounts(text: Any) -> List[float]:
    """Every positive amount in the text, in order of appearance."""
    if not isinstance(text, str):
        return []
    return [amount for amount, _ in _scan_amounts(text)]


def extract_pricing(text: Any) -> ExtractedPricing:
    """
    Collects the bill totals and the (procedure label, amount) pairs of a
    pricing segment.

    Amounts written with a currency marker (₹, Rs, INR, /-) are preferred;
    when the text has none, every plain amount is kept.
    """
    if not isinstance(text, str) or not text.strip():
        return ExtractedPricing()

    scanned = _scan_amounts(text)
    marked = [amount for amount, has_marker in scanned if has_marker]
    total_amounts = marked or [amount for amount, _ in scanned]

    procedure_prices = []
    for match in _PROCEDURE_PRICE_PATTERN.finditer(text):
        label = " ".join(match.group("label").lower().split())
        amount = _to_amount(match.group("number"))
        if len(label) > 3 and amount > 0:
            procedure_prices.append(ProcedurePrice(procedure=label, amount=amount))

    return ExtractedPricing(total_amounts=total_amounts, procedure_prices=procedure_prices)


# --- Step 2: best amount selection ---


def pick_best_claim_amount(text: Any) -> float:
    """
    Picks the most likely claimed amount from a pricing text.

    Each candidate scores (number of total-indicating keywords in the text)
    + log10(amount). Without any such keyword the largest amount wins.
    Returns 0.0 when the text holds no amount.
    """
    if not isinstance(text, str):
        return 0.0
    candidates = extract_pricing(text).total_amounts
    if not candidates:
        return 0.0

    lowered = text.lower()
    keyword_hits = sum(1 for keyword in TOTAL_AMOUNT_KEYWORDS if keyword in lowered)
    if keyword_hits == 0:
        return max(candidates)

    return max(candidates, key=lambda amount: keyword_hits + math.log10(max(amount, 1.0)))


def find_reference_price(
    category: MedicalCategory, procedure: str
) -> Optional[ProcedurePriceRange]:
    """Reference band for a procedure: the category table, falling back to the general table."""
    for table_name in (category.value, GENERAL_PRICING_TABLE):
        table = PROCEDURE_PRICING.get(table_name)
        if table is not None and procedure in table:
            return table[procedure]
    return None


# --- Steps 3-5: validation ---


def validate_pricing(
    pricing_text: Any,
    conditions_text: Any,
    claim_amount: Optional[float] = None,
    sum_insured: Optional[float] = None,
    config: Optional[ScoringConfig] = None,
) -> PricingValidation:
    """
    Checks that the claimed total and the itemised procedure prices are
    plausible.

    Args:
        pricing_text: The pricing and dates segment of the claim.
        conditions_text: The conditions segment; its procedures are priced.
        claim_amount: The claimed amount. Extracted from pricing_text when
            missing or not positive.
        sum_insured: The policy's sum insured, if known.

    Returns:
        A PricingValidation. is_valid needs confidence >= 0.5 and at most
        two issues.
    """
    config = config or settings.SCORING
    pricing = extract_pricing(pricing_text)
    profile = extract_medical_terms(conditions_text)

    reasons: List[str] = []
    issues: List[str] = []

    if claim_amount is None or claim_amount <= 0:
        claim_amount = pick_best_claim_amount(pricing_text)

    # --- Step 3: total amount plausibility ---
    has_reasonable_total = False
    if claim_amount > 0:
        if claim_amount < config.MIN_CLAIM_AMOUNT:
            issues.append("Claim amount too low for medical treatment")
        elif claim_amount > config.MAX_CLAIM_AMOUNT:
            issues.append("Claim amount unusually high, requires detailed review")
        else:
            has_reasonable_total = True
            reasons.append("Claim amount within reasonable range")

        if sum_insured is not None and sum_insured > 0:
            if claim_amount > sum_insured:
                issues.append(
                    f"Claim amount (₹{format_inr(claim_amount)}) exceeds sum insured "
                    f"(₹{format_inr(sum_insured)})"
                )
            else:
                reasons.append("Claim amount within policy coverage limit")
    else:
        issues.append(NO_CLAIM_AMOUNT_ISSUE)

    if not pricing.has_pricing:
        issues.append(NO_PRICING_ISSUE)

    # --- Step 4: per-procedure validation ---
    validated_procedures = 0
    procedure_validation_score = 0
    for category, procedure in profile.procedures:
        reference = find_reference_price(category, procedure)
        if reference is None:
            continue
        validated_procedures += 1

        priced = next(
            (
                price
                for price in pricing.procedure_prices
                if procedure in price.procedure or price.procedure in procedure
            ),
            None,
        )
        if priced is None:
            continue

        amount = format_inr(priced.amount)
        if priced.amount > reference.max:
            issues.append(
                f"{procedure} pricing (₹{amount}) above expected range (max: ₹{format_inr(reference.max)})"
            )
        elif priced.amount < reference.min:
            issues.append(
                f"{procedure} pricing (₹{amount}) below expected range (min: ₹{format_inr(reference.min)})"
            )
        else:
            procedure_validation_score += 1
            reasons.append(f"{procedure} pricing (₹{amount}) within expected range")

    # --- Step 5: confidence ---
    has_valid_procedures = (
        validated_procedures == 0
        or procedure_validation_score / validated_procedures > config.PROCEDURE_PASS_RATIO
    )
    confidence = clamp(
        config.PRICING_TOTAL_WEIGHT * has_reasonable_total
        + config.PRICING_PROCEDURE_WEIGHT * has_valid_procedures
        + config.PRICING_DOCUMENTED_WEIGHT * pricing.has_pricing
        + config.PRICING_BALANCE_WEIGHT * (len(reasons) > len(issues))
    )
    is_valid = confidence >= config.PRICING_VALID_CONFIDENCE and len(issues) <= config.PRICING_MAX_ISSUES

    logger.info(
        f"Pricing check: amount=₹{format_inr(claim_amount)} confidence={confidence:.2f} "
        f"issues={len(issues)} valid={is_valid}"
    )
    return PricingValidation(
        is_valid=is_valid,
        confidence=confidence,
        reasons=reasons,
        issues=issues,
        claim_amount=claim_amount if claim_amount > 0 else None,
        validated_procedures=validated_procedures,
        procedure_validation_score=procedure_validation_score,
    )
