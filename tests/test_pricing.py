# tests/test_pricing.py

import pytest

from claim_validator.pricing import (
    NO_CLAIM_AMOUNT_ISSUE,
    NO_PRICING_ISSUE,
    extract_all_amounts,
    extract_pricing,
    find_reference_price,
    pick_best_claim_amount,
    validate_pricing,
)
from claim_validator.pydantic_schemas import MedicalCategory

# (text, expected amounts)
AMOUNT_CASES = [
    ("Total: ₹8,47,500", [847500.0]),
    ("Rs. 1,23,456.50 paid", [123456.5]),
    ("INR 25000", [25000.0]),
    ("Amount payable 45,000/-", [45000.0]),
    ("Western grouping 1,000,000 INR", [1000000.0]),
    ("Bill date 12/03/2024, amount Rs 5000", [5000.0]),
    ("Admitted 2024-03-12 discharged 2024-03-20", []),
    ("no numbers here", []),
    ("", []),
    (None, []),
]


@pytest.mark.parametrize("text, expected", AMOUNT_CASES)
def test_extract_all_amounts(text, expected):
    assert extract_all_amounts(text) == expected


def test_extract_pricing_collects_totals_and_procedure_prices():
    text = "Craniotomy: ₹5,00,000\nICU charges: ₹60,000\nTotal: ₹5,60,000"
    pricing = extract_pricing(text)
    assert pricing.total_amounts == [500000.0, 60000.0, 560000.0]
    assert [(price.procedure, price.amount) for price in pricing.procedure_prices] == [
        ("craniotomy", 500000.0),
        ("icu charges", 60000.0),
        ("total", 560000.0),
    ]
    assert pricing.has_pricing is True


def test_extract_pricing_prefers_currency_marked_amounts():
    pricing = extract_pricing("Room for 3 days at Rs 5,000, total ₹15,000")
    assert pricing.total_amounts == [5000.0, 15000.0]


def test_extract_pricing_falls_back_to_plain_amounts():
    pricing = extract_pricing("Charges 15000 and 2000")
    assert pricing.total_amounts == [15000.0, 2000.0]
    assert pricing.procedure_prices == []


def test_short_labels_are_ignored():
    pricing = extract_pricing("OT: ₹20,000")
    assert pricing.procedure_prices == []


@pytest.mark.parametrize("text", ["Others 2000", "Doctors 1500", "Wheelchairs 300"])
def test_currency_marker_must_start_a_word(text):
    assert extract_pricing(text).procedure_prices == []


# (text, expected best amount)
BEST_AMOUNT_CASES = [
    ("Room Rs 5,000, ICU Rs 25,000, Grand Total ₹45,000", 45000.0),
    ("Rs 1,000 and Rs 2,500", 2500.0),
    ("Net payable 8,47,500", 847500.0),
    ("nothing billed", 0.0),
    (None, 0.0),
]


@pytest.mark.parametrize("text, expected", BEST_AMOUNT_CASES)
def test_pick_best_claim_amount(text, expected):
    assert pick_best_claim_amount(text) == expected


def test_reference_price_falls_back_to_general_table():
    assert find_reference_price(MedicalCategory.NEUROLOGICAL, "craniotomy").max == 800000
    assert find_reference_price(MedicalCategory.CARDIAC, "ventilator").min == 5000
    assert find_reference_price(MedicalCategory.GENERAL, "consultation") is None
    assert find_reference_price(MedicalCategory.ORTHOPEDIC, "surgery") is None


def test_in_range_procedure_gives_full_confidence():
    result = validate_pricing(
        "Craniotomy: ₹5,00,000 Total: ₹5,00,000",
        "craniotomy for brain injury",
        claim_amount=500000,
        sum_insured=1000000,
    )
    assert result.is_valid is True
    assert result.confidence == pytest.approx(1.0)
    assert result.issues == []
    assert result.reasons == [
        "Claim amount within reasonable range",
        "Claim amount within policy coverage limit",
        "craniotomy pricing (₹5,00,000) within expected range",
    ]
    assert result.validated_procedures == 1
    assert result.procedure_validation_score == 1


def test_procedure_above_range_is_an_issue():
    result = validate_pricing(
        "Craniotomy: ₹9,50,000", "craniotomy", claim_amount=950000, sum_insured=1000000
    )
    assert result.issues == ["craniotomy pricing (₹9,50,000) above expected range (max: ₹8,00,000)"]
    # reasonable total + documented + more reasons than issues
    assert result.confidence == pytest.approx(0.7)
    assert result.is_valid is True


def test_low_amounts_fail():
    result = validate_pricing("Burr hole ₹500", "burr hole evacuation", claim_amount=500)
    assert result.issues == [
        "Claim amount too low for medical treatment",
        "burr hole pricing (₹500) below expected range (min: ₹80,000)",
    ]
    assert result.confidence == pytest.approx(0.2)
    assert result.is_valid is False


def test_procedures_without_reference_price_are_not_counted():
    result = validate_pricing("Total ₹25,00,000", "consultation", None, None)
    assert result.validated_procedures == 0
    assert result.issues == ["Claim amount unusually high, requires detailed review"]
    # no procedures to contradict + documented
    assert result.confidence == pytest.approx(0.5)
    assert result.is_valid is True


def test_amount_above_sum_insured():
    result = validate_pricing("Total ₹6,00,000", "", claim_amount=600000, sum_insured=500000)
    assert "Claim amount (₹6,00,000) exceeds sum insured (₹5,00,000)" in result.issues


def test_amount_too_high_for_review():
    result = validate_pricing("Total ₹25,00,000", "", claim_amount=2500000)
    assert result.issues == ["Claim amount unusually high, requires detailed review"]


@pytest.mark.parametrize("amount", [1000, 2000000])
def test_amount_bounds_are_inclusive(amount):
    result = validate_pricing("Total ₹1,000", "", claim_amount=amount)
    assert result.reasons == ["Claim amount within reasonable range"]
    assert result.issues == []


def test_claim_amount_is_extracted_when_missing():
    result = validate_pricing("Pharmacy Rs 4,000. Total estimated cost: ₹85,000", "")
    assert result.claim_amount == 85000.0
    assert result.is_valid is True


def test_no_pricing_information():
    result = validate_pricing("", "", claim_amount=None, sum_insured=500000)
    assert result.issues == [NO_CLAIM_AMOUNT_ISSUE, NO_PRICING_ISSUE]
    assert result.claim_amount is None
    # only the "no procedures to contradict" weight remains
    assert result.confidence == pytest.approx(0.3)
    assert result.is_valid is False


def test_more_than_two_issues_is_invalid():
    result = validate_pricing(
        "Craniotomy: ₹50,000 Angioplasty: ₹10,000",
        "craniotomy and angioplasty",
        claim_amount=500,
        sum_insured=400,
    )
    assert len(result.issues) > 2
    assert result.is_valid is False
