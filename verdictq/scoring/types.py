"""
Module: types
Purpose: Domain models for verdict scoring.
Dependencies: pydantic

Every model is frozen: a scoring call builds fresh values and never mutates
its inputs.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


class VerdictOutcome(str, Enum):
    """Recommendation for a prospective purchase."""

    BUY = "buy"
    HOLD = "hold"
    SKIP = "skip"


class RubricLevel(str, Enum):
    """Vendor quality / reliability rating."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriceTier(str, Enum):
    """Relative market positioning of a vendor's prices."""

    BUDGET = "budget"
    MID_RANGE = "mid_range"
    PREMIUM = "premium"
    LUXURY = "luxury"


class PurchaseInput(BaseModel):
    """A purchase the user is considering."""

    model_config = ConfigDict(frozen=True)

    title: str
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    vendor: str | None = None
    justification: str | None = None
    is_important: bool = False

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title cannot be empty")
        return v


class VendorMatch(BaseModel):
    """Rubric ratings for the vendor the purchase would come from."""

    model_config = ConfigDict(frozen=True)

    vendor_name: str
    vendor_category: str | None = None
    vendor_quality: RubricLevel
    vendor_reliability: RubricLevel
    vendor_price_tier: PriceTier


class ScoreExplanation(BaseModel):
    """A sub-score in [0, 1] with its human-readable explanation."""

    model_config = ConfigDict(frozen=True)

    score: float
    explanation: str

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        return clamp01(v)


class EvaluationReasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    value_conflict: ScoreExplanation
    pattern_repetition: ScoreExplanation
    emotional_impulse: ScoreExplanation
    financial_strain: ScoreExplanation
    long_term_utility: ScoreExplanation
    emotional_support: ScoreExplanation
    decision_score: float
    rationale: str
    important_purchase: bool = False


class EvaluationResult(BaseModel):
    """Terminal output of the scoring engine."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    outcome: VerdictOutcome
    confidence: float = Field(ge=0.5, le=0.95)
    reasoning: EvaluationReasoning


class ScoringOverrides(BaseModel):
    """
    Optional context for the fallback evaluation.

    pattern_repetition / financial_strain come from history retrieval and the
    budget helper; the three *_summary fields are the rendered text blocks
    produced by verdictq.scoring.context.
    """

    model_config = ConfigDict(frozen=True)

    pattern_repetition: ScoreExplanation | None = None
    financial_strain: ScoreExplanation | None = None
    vendor_match: VendorMatch | None = None
    profile_context_summary: str | None = None
    similar_purchases_summary: str | None = None
    recent_purchases_summary: str | None = None
