# tests/test_decision.py

import pytest
from pydantic import ValidationError

from claim_validator.decision import (
    CHECK_WEIGHTS,
    DEFAULT_FAILURE_MESSAGES,
    INACTIVE_POLICY_ERROR,
    PRICING_MATCHES,
    aggregate_checks,
)
from claim_validator.pydantic_schemas import ClaimDecision

ALL_PASS = dict(
    within_sum_insured=True,
    condition_covered=True,
    condition_not_excluded=True,
    pricing_matches=True,
    hospital_in_network=True,
    policy_active=True,
)

# (failed checks, expected decision, expected passed count, expected score)
DECISION_CASES = [
    ([], ClaimDecision.APPROVED, 6, 1.0),
    (["pricing_matches"], ClaimDecision.NEEDS_REVIEW, 5, 0.8),
    (["hospital_in_network", "condition_not_excluded"], ClaimDecision.NEEDS_REVIEW, 4, 0.7),
    (["condition_covered", "condition_not_excluded", "hospital_in_network"], ClaimDecision.REJECTED, 3, 0.45),
    (list(CHECK_WEIGHTS), ClaimDecision.REJECTED, 1, 0.0),
]


def test_weights_sum_to_one():
    assert sum(CHECK_WEIGHTS.values()) == pytest.approx(1.0)


@pytest.mark.parametrize("failed, decision, passed, score", DECISION_CASES)
def test_count_based_decision(failed, decision, passed, score):
    checks = dict(ALL_PASS, **{name: False for name in failed})
    result = aggregate_checks(**checks)
    assert result.decision == decision
    assert result.passed_checks == passed
    assert result.total_checks == 6
    assert result.overall_score == pytest.approx(score)
    assert len(result.validation_errors) == len(failed)


def test_errors_follow_check_order():
    result = aggregate_checks(**dict(ALL_PASS, **{name: False for name in CHECK_WEIGHTS}))
    assert list(result.validation_errors) == [DEFAULT_FAILURE_MESSAGES[name] for name in CHECK_WEIGHTS]


def test_inactive_policy_short_circuits():
    result = aggregate_checks(**dict(ALL_PASS, policy_active=False))
    assert result.decision == ClaimDecision.REJECTED
    assert result.validation_errors == (INACTIVE_POLICY_ERROR,)
    assert result.overall_score == 0.0
    assert result.passed_checks == 0
    assert not any(
        [
            result.within_sum_insured,
            result.condition_covered,
            result.condition_not_excluded,
            result.pricing_matches,
            result.hospital_in_network,
            result.policy_active,
        ]
    )


def test_failure_messages_can_be_overridden():
    result = aggregate_checks(
        **dict(ALL_PASS, pricing_matches=False),
        failure_messages={PRICING_MATCHES: "Pricing validation failed: Claim amount too low"},
    )
    assert result.validation_errors == ("Pricing validation failed: Claim amount too low",)
    assert result.requires_human_review is True


def test_missing_check_is_a_caller_error():
    checks = dict(ALL_PASS)
    del checks["hospital_in_network"]
    with pytest.raises(TypeError):
        aggregate_checks(**checks)


def test_result_is_immutable_and_serialisable():
    result = aggregate_checks(**ALL_PASS)
    with pytest.raises(ValidationError):
        result.decision = ClaimDecision.REJECTED

    data = result.model_dump(mode="json")
    assert data["decision"] == "APPROVED"
    assert data["validation_errors"] == []
    assert [check["name"] for check in data["checks"]][-1] == "policy_active"
