"""
VerdictQ scoring - buy/hold/skip verdicts for prospective purchases.
"""

from verdictq.scoring.context import (
    ProfileContext,
    PurchaseRecord,
    UserValue,
    UserValueType,
    format_profile_context,
    format_recent_purchases,
    format_similar_purchases,
    format_user_values,
)
from verdictq.scoring.engine import (
    build_score,
    compute_decision_score,
    compute_financial_strain,
    confidence_from_risk_points,
    confidence_from_score,
    decision_from_risk_points,
    decision_from_score,
    evaluate_purchase_fallback,
    financial_strain_score,
    get_vendor_rubric_info,
    score_purchase,
)
from verdictq.scoring.llm_response import LLMResponseError, evaluation_from_llm_response
from verdictq.scoring.prompts import build_system_prompt, build_user_prompt
from verdictq.scoring.types import (
    EvaluationResult,
    PriceTier,
    PurchaseInput,
    RubricLevel,
    ScoreExplanation,
    ScoringOverrides,
    VendorMatch,
    VerdictOutcome,
)

__all__ = [
    # Models
    "EvaluationResult",
    "PriceTier",
    "PurchaseInput",
    "RubricLevel",
    "ScoreExplanation",
    "ScoringOverrides",
    "VendorMatch",
    "VerdictOutcome",
    # Engine
    "build_score",
    "compute_decision_score",
    "compute_financial_strain",
    "confidence_from_risk_points",
    "confidence_from_score",
    "decision_from_risk_points",
    "decision_from_score",
    "evaluate_purchase_fallback",
    "financial_strain_score",
    "get_vendor_rubric_info",
    "score_purchase",
    # Context rendering
    "ProfileContext",
    "PurchaseRecord",
    "UserValue",
    "UserValueType",
    "format_profile_context",
    "format_recent_purchases",
    "format_similar_purchases",
    "format_user_values",
    # LLM boundary
    "LLMResponseError",
    "build_system_prompt",
    "build_user_prompt",
    "evaluation_from_llm_response",
]
