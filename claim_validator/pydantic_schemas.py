# claim_validator/pydantic_schemas.py

from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# Note: monetary values are plain rupee floats. The engine only compares them
# against coarse reference ranges, so float precision is sufficient.


def _coerce_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


# =============================================================================
# Closed category types
# =============================================================================


class MedicalCategory(str, Enum):
    NEUROLOGICAL = "neurological"
    CARDIAC = "cardiac"
    ORTHOPEDIC = "orthopedic"
    GENERAL = "general"


class ExclusionCategory(str, Enum):
    COSMETIC = "cosmetic"
    DENTAL = "dental"
    VISION = "vision"
    EXPERIMENTAL = "experimental"
    PREEXISTING = "preexisting"
    ELECTIVE = "elective"


class ClaimDecision(str, Enum):
    APPROVED = "APPROVED"
    NEEDS_REVIEW = "NEEDS_REVIEW"
    REJECTED = "REJECTED"


# =============================================================================
# Static configuration rows (see data/master_data.py)
# =============================================================================


class TaxonomyEntry(BaseModel):
    """
    One bucket of the medical terminology taxonomy.
    """

    keywords: Tuple[str, ...]
    conditions: Tuple[str, ...]
    procedures: Tuple[str, ...]

    @property
    def phrase_count(self) -> int:
        return len(self.keywords) + len(self.conditions) + len(self.procedures)

    class Config:
        frozen = True


class CoverageRule(BaseModel):
    base_score: float = Field(..., ge=0, le=1)
    rationale: str

    class Config:
        frozen = True


class ExclusionRule(BaseModel):
    keywords: Tuple[str, ...]
    weight: float = Field(..., ge=0.6, le=0.9)
    reason: str

    class Config:
        frozen = True


class ProcedurePriceRange(BaseModel):
    """
    Expected cost band for a procedure, in rupees.
    """

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    avg: float = Field(..., ge=0)
    unit: Optional[str] = Field(None, description="e.g. 'per day', 'per session'.")

    class Config:
        frozen = True


# =============================================================================
# Medical terminology and coverage
# =============================================================================


class CategoryMatch(BaseModel):
    category: MedicalCategory
    matched_keywords: List[str] = Field(default_factory=list)
    matched_conditions: List[str] = Field(default_factory=list)
    matched_procedures: List[str] = Field(default_factory=list)
    match_count: int = 0
    relevance: float = Field(0.0, ge=0.0, le=1.0)


class ExtractedMedicalProfile(BaseModel):
    """
    The medical terms found in a piece of claim text, grouped by taxonomy
    category and sorted by relevance (highest first).
    """

    terms: FrozenSet[str] = Field(default_factory=frozenset)
    categories: List[CategoryMatch] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    total_matches: int = 0

    @property
    def category_names(self) -> List[str]:
        return [match.category.value for match in self.categories]

    @property
    def procedures(self) -> List[Tuple[MedicalCategory, str]]:
        """(category, procedure) pairs in relevance order."""
        return [
            (match.category, procedure)
            for match in self.categories
            for procedure in match.matched_procedures
        ]


class CoverageAssessment(BaseModel):
    score: float = Field(0.0, ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class ConditionMatch(BaseModel):
    """
    Hybrid condition/policy similarity kept for the audit trail.
    """

    score: float = Field(0.0, ge=0.0, le=1.0)
    coverage_score: float = 0.0
    vector_similarity: float = 0.0
    terminology_confidence: float = 0.0
    emergency_bonus: float = 0.0


# =============================================================================
# Exclusions
# =============================================================================


class ExclusionDetail(BaseModel):
    category: ExclusionCategory
    keywords: List[str]
    score: float
    reason: str


class ExclusionAnalysis(BaseModel):
    is_excluded: bool = False
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reason: str = ""
    details: List[ExclusionDetail] = Field(default_factory=list)
    is_emergency: bool = False
    keyword_score: float = 0.0
    vector_score: float = 0.0
    combined_score: float = 0.0


# =============================================================================
# Pricing
# =============================================================================


class ProcedurePrice(BaseModel):
    procedure: str
    amount: float


class ExtractedPricing(BaseModel):
    total_amounts: List[float] = Field(default_factory=list)
    procedure_prices: List[ProcedurePrice] = Field(default_factory=list)

    @property
    def has_pricing(self) -> bool:
        return bool(self.total_amounts or self.procedure_prices)


class PricingValidation(BaseModel):
    is_valid: bool = False
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)
    issues: List[str] = Field(default_factory=list)
    claim_amount: Optional[float] = None
    validated_procedures: int = 0
    procedure_validation_score: int = 0


# =============================================================================
# Hospital network
# =============================================================================


class HospitalMatch(BaseModel):
    hospital_name: Optional[str] = None
    normalized_name: str = ""
    matched_hospital: Optional[str] = None
    fuzzy_score: float = 0.0
    chain_score: float = 0.0
    vector_score: float = 0.0
    location_bonus: float = 0.0
    final_score: float = Field(0.0, ge=0.0, le=1.0)
    is_in_network: bool = False


# =============================================================================
# Engine inputs
# =============================================================================


class SegmentedClaim(BaseModel):
    """
    Claim documents already split into topical slices.
    Anything that is not a string is treated as an empty slice.
    """

    pricing_and_date: str = ""
    conditions: str = ""
    hospital_info: str = ""
    full_text: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return _coerce_text(value)


class PolicyFacts(BaseModel):
    """
    What the policy store knows about a policy: numeric facts plus the
    pre-computed semantic fingerprints of its wording.
    """

    policy_number: Optional[str] = None
    policy_name: Optional[str] = None
    sum_insured: Optional[float] = Field(None, ge=0)
    is_active: bool = True
    covered_conditions_embedding: Optional[List[float]] = None
    excluded_conditions_embedding: Optional[List[float]] = None
    pricing_embedding: Optional[List[float]] = None
    network_hospitals_embedding: Optional[List[float]] = None


class ClaimEmbeddings(BaseModel):
    conditions: Optional[List[float]] = Field(None, description="Embedding of the conditions segment.")
    hospital: Optional[List[float]] = Field(None, description="Embedding of the hospital name and info.")


# =============================================================================
# Engine outputs
# =============================================================================


class ValidationCheck(BaseModel):
    name: str
    passed: bool
    weight: float = Field(..., ge=0.0, le=1.0)

    class Config:
        frozen = True


class ClaimValidationResult(BaseModel):
    """
    The decision record for one claim. Plain data, immutable once built.
    """

    within_sum_insured: bool
    condition_covered: bool
    condition_not_excluded: bool
    pricing_matches: bool
    hospital_in_network: bool
    policy_active: bool
    validation_errors: Tuple[str, ...] = ()
    checks: Tuple[ValidationCheck, ...] = ()
    overall_score: float = Field(0.0, ge=0.0, le=1.0)
    passed_checks: int = Field(0, ge=0, le=6)
    total_checks: int = 6
    decision: ClaimDecision

    @property
    def requires_human_review(self) -> bool:
        return self.decision == ClaimDecision.NEEDS_REVIEW

    class Config:
        frozen = True


class DocumentCompleteness(BaseModel):
    is_complete: bool
    missing_categories: List[str] = Field(default_factory=list)


class ClaimValidationReport(BaseModel):
    """
    The decision plus every intermediate analysis, for audit and review.
    """

    result: ClaimValidationResult
    claim_amount: float = 0.0
    hospital_name: Optional[str] = None
    profile: ExtractedMedicalProfile
    coverage: CoverageAssessment
    condition_match: ConditionMatch
    exclusion: ExclusionAnalysis
    pricing: PricingValidation
    hospital: HospitalMatch
    completeness: DocumentCompleteness


# =============================================================================
# API models
# =============================================================================


class ClaimValidationRequest(BaseModel):
    segments: SegmentedClaim
    policy: PolicyFacts
    claim_amount: Optional[float] = Field(
        None, description="Claimed amount; extracted from the pricing text when omitted."
    )
    hospital_name: Optional[str] = Field(
        None, description="Hospital name; extracted from the hospital text when omitted."
    )
    embeddings: Optional[ClaimEmbeddings] = Field(
        None, description="Claim-side embeddings; generated when omitted."
    )


class PolicyClaimRequest(BaseModel):
    segments: SegmentedClaim
    claim_amount: Optional[float] = None
    hospital_name: Optional[str] = None


class PolicySummary(BaseModel):
    policy_number: str
    policy_name: str
    company_name: str
    sum_insured: float
    is_active: bool
