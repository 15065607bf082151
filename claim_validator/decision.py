# claim_validator/decision.py

from types import MappingProxyType
from typing import List, Mapping, Optional

from .logger import get_logger
from .pydantic_schemas import ClaimDecision, ClaimValidationResult, ValidationCheck
from .utils import clamp

logger = get_logger(__name__)

WITHIN_SUM_INSURED = "within_sum_insured"
CONDITION_COVERED = "condition_covered"
CONDITION_NOT_EXCLUDED = "condition_not_excluded"
PRICING_MATCHES = "pricing_matches"
HOSPITAL_IN_NETWORK = "hospital_in_network"
POLICY_ACTIVE = "policy_active"

# The five weighted checks, in the order their errors are reported.
CHECK_WEIGHTS = MappingProxyType(
    {
        WITHIN_SUM_INSURED: 0.25,
        CONDITION_COVERED: 0.25,
        CONDITION_NOT_EXCLUDED: 0.15,
        PRICING_MATCHES: 0.20,
        HOSPITAL_IN_NETWORK: 0.15,
    }
)
TOTAL_CHECKS = len(CHECK_WEIGHTS) + 1

INACTIVE_POLICY_ERROR = "Policy is inactive or expired"

DEFAULT_FAILURE_MESSAGES = MappingProxyType(
    {
        WITHIN_SUM_INSURED: "Claim amount exceeds sum insured",
        CONDITION_COVERED: "Medical condition not sufficiently covered by policy",
        CONDITION_NOT_EXCLUDED: "Medical condition may be excluded",
        PRICING_MATCHES: "Pricing validation failed",
        HOSPITAL_IN_NETWORK: "Hospital not in policy network",
    }
)

APPROVAL_THRESHOLD = TOTAL_CHECKS
REVIEW_THRESHOLD = 4


def decide(passed_checks: int) -> ClaimDecision:
    if passed_checks >= APPROVAL_THRESHOLD:
        return ClaimDecision.APPROVED
    if passed_checks >= REVIEW_THRESHOLD:
        return ClaimDecision.NEEDS_REVIEW
    return ClaimDecision.REJECTED


def aggregate_checks(
    *,
    within_sum_insured: bool,
    condition_covered: bool,
    condition_not_excluded: bool,
    pricing_matches: bool,
    hospital_in_network: bool,
    policy_active: bool,
    failure_messages: Optional[Mapping[str, str]] = None,
) -> ClaimValidationResult:
    """
    Fuses the six check outcomes into the final decision.

    An inactive policy rejects the claim outright. Otherwise the decision is
    count based: all six passed is APPROVED, four or five is NEEDS_REVIEW and
    anything less is REJECTED. overall_score is the sum of the weights of the
    passed weighted checks and is reported alongside the decision.

    Args:
        failure_messages: Optional check name -> error text overrides, used
            to put amounts, scores and reasons into the validation errors.
    """
    messages = dict(DEFAULT_FAILURE_MESSAGES)
    messages.update(failure_messages or {})

    if not policy_active:
        logger.warning("Policy is inactive; claim rejected without further checks")
        checks = tuple(
            ValidationCheck(name=name, passed=False, weight=weight)
            for name, weight in CHECK_WEIGHTS.items()
        ) + (ValidationCheck(name=POLICY_ACTIVE, passed=False, weight=0.0),)
        return ClaimValidationResult(
            within_sum_insured=False,
            condition_covered=False,
            condition_not_excluded=False,
            pricing_matches=False,
            hospital_in_network=False,
            policy_active=False,
            validation_errors=(INACTIVE_POLICY_ERROR,),
            checks=checks,
            overall_score=0.0,
            passed_checks=0,
            total_checks=TOTAL_CHECKS,
            decision=ClaimDecision.REJECTED,
        )

    outcomes = {
        WITHIN_SUM_INSURED: bool(within_sum_insured),
        CONDITION_COVERED: bool(condition_covered),
        CONDITION_NOT_EXCLUDED: bool(condition_not_excluded),
        PRICING_MATCHES: bool(pricing_matches),
        HOSPITAL_IN_NETWORK: bool(hospital_in_network),
    }

    checks: List[ValidationCheck] = []
    errors: List[str] = []
    overall_score = 0.0
    for name, weight in CHECK_WEIGHTS.items():
        passed = outcomes[name]
        checks.append(ValidationCheck(name=name, passed=passed, weight=weight))
        if passed:
            overall_score += weight
        else:
            errors.append(messages[name])
    checks.append(ValidationCheck(name=POLICY_ACTIVE, passed=True, weight=0.0))

    passed_checks = sum(1 for check in checks if check.passed)
    decision = decide(passed_checks)
    overall_score = round(clamp(overall_score), 4)

    logger.info(
        f"Decision {decision.value}: {passed_checks}/{TOTAL_CHECKS} checks passed, "
        f"weighted score {overall_score:.2f}"
    )
    return ClaimValidationResult(
        **outcomes,
        policy_active=True,
        validation_errors=tuple(errors),
        checks=tuple(checks),
        overall_score=overall_score,
        passed_checks=passed_checks,
        total_checks=TOTAL_CHECKS,
        decision=decision,
    )
