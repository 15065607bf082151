# claim_validator/config.py

from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ScoringConfig(BaseModel):
    """
    Every tunable threshold and weight used by the scoring engine.
    Override per field with CLAIM_VALIDATOR_SCORING__<FIELD> environment variables.
    """

    # --- Coverage ---
    COVERAGE_THRESHOLD: float = Field(0.6, ge=0, le=1)
    HIGH_VALUE_PROCEDURE_SCORE: float = Field(0.9, ge=0, le=1)

    # Hybrid condition match (audit only)
    CONDITION_COVERAGE_WEIGHT: float = 0.4
    CONDITION_VECTOR_WEIGHT: float = 0.3
    CONDITION_TERMINOLOGY_WEIGHT: float = 0.2
    CONDITION_EMERGENCY_BONUS: float = 0.15

    # --- Exclusions ---
    EXCLUSION_THRESHOLD: float = Field(0.7, ge=0, le=1)
    EXCLUSION_BORDERLINE_THRESHOLD: float = Field(0.4, ge=0, le=1)
    EXCLUSION_VECTOR_SCALE: float = Field(0.8, ge=0, le=1)
    EMERGENCY_CONFIDENCE: float = Field(0.9, ge=0, le=1)

    # --- Pricing ---
    MIN_CLAIM_AMOUNT: float = 1000.0
    MAX_CLAIM_AMOUNT: float = 2000000.0
    PRICING_TOTAL_WEIGHT: float = 0.4
    PRICING_PROCEDURE_WEIGHT: float = 0.3
    PRICING_DOCUMENTED_WEIGHT: float = 0.2
    PRICING_BALANCE_WEIGHT: float = 0.1
    PRICING_VALID_CONFIDENCE: float = 0.5
    PRICING_MAX_ISSUES: int = 2
    PROCEDURE_PASS_RATIO: float = 0.6

    # --- Hospital network ---
    HOSPITAL_FUZZY_WEIGHT: float = 0.4
    HOSPITAL_VECTOR_WEIGHT: float = 0.3
    HOSPITAL_CHAIN_WEIGHT: float = 0.25
    HOSPITAL_CHAIN_SCORE: float = 0.8
    HOSPITAL_LOCATION_BONUS: float = 0.1
    HOSPITAL_WORD_OVERLAP_WEIGHT: float = 0.8
    NETWORK_THRESHOLD: float = Field(0.5, ge=0, le=1)
    # "sum" adds the weighted signals, "max" keeps only the strongest one.
    HOSPITAL_BLEND: Literal["sum", "max"] = "sum"

    class Config:
        frozen = True


class Settings(BaseSettings):
    # --- Embeddings ---
    EMBEDDING_MODEL_NAME: str = "all-MiniLM-L6-v2"
    EMBEDDING_DIMENSION: int = 384
    FINGERPRINT_PATH: str = "claim_validator/data/policy_fingerprints.pkl"

    # --- Logging ---
    LOG_FILE: str = "claim_validator.log"
    LOG_LEVEL: str = "INFO"

    # --- API ---
    RATE_LIMIT: str = "30/minute"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    SCORING: ScoringConfig = ScoringConfig()

    class Config:
        env_file = ".env"
        env_prefix = "CLAIM_VALIDATOR_"
        env_nested_delimiter = "__"
        extra = "ignore"


settings = Settings()
