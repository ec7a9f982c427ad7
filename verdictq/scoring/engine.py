"""
Fallback verdict scoring.

Deterministic replacement for the LLM evaluator: six sub-scores feed a fixed
linear model whose output maps to buy/hold/skip plus a confidence. A bare
purchase with no vendor, history or budget context is decided by its risk
points instead (>= 50 skip, >= 25 hold).

Used when no LLM is configured or the LLM call fails, and as the baseline
tests compare LLM verdicts against.

Cost: $0 (no LLM calls, no I/O)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from verdictq.observability.logging import get_logger
from verdictq.observability.telemetry import counter, time_block
from verdictq.runtime.thresholds import (
    CONFIDENCE_CEILING,
    CONFIDENCE_FLOOR,
    CONFIDENCE_SLOPE,
    HOLD_THRESHOLD,
    RISK_CONFIDENCE_DIVISOR,
    RISK_HOLD_POINTS,
    RISK_SKIP_POINTS,
    SKIP_THRESHOLD,
)
from verdictq.scoring.rationale import build_rationale
from verdictq.scoring.rubric import (
    DEFAULT_EMOTIONAL_SUPPORT,
    DEFAULT_LONG_TERM_UTILITY,
    EMOTIONAL_IMPULSE_RISK_MULTIPLIER,
    HIGH_PRICE_POINTS,
    HIGH_PRICE_THRESHOLD,
    IMPULSE_CATEGORIES,
    IMPULSE_CATEGORY_POINTS,
    MIN_JUSTIFICATION_CHARS,
    MODERATE_PRICE_POINTS,
    MODERATE_PRICE_THRESHOLD,
    PRICE_TIER_MULTIPLIERS,
    PRICE_TIER_RISK_POINTS,
    QUALITY_DESCRIPTIONS,
    QUALITY_SCORES,
    RELIABILITY_DESCRIPTIONS,
    RELIABILITY_SCORES,
    URGENCY_KEYWORD_POINTS,
    URGENCY_KEYWORDS,
    VALUE_CONFLICT_RISK_MULTIPLIER,
    WANT_NOT_NEED_POINTS,
    WEAK_JUSTIFICATION_POINTS,
    WEIGHTS,
)
from verdictq.scoring.types import (
    EvaluationReasoning,
    EvaluationResult,
    PurchaseInput,
    ScoreExplanation,
    ScoringOverrides,
    VendorMatch,
    VerdictOutcome,
    clamp01,
)

logger = get_logger(__name__)

FALLBACK_EXPLANATION = "Fallback heuristic."
NO_HISTORY_EXPLANATION = "No history analysis in fallback."
NO_BUDGET_EXPLANATION = "No budget context in fallback."


@dataclass(frozen=True)
class VendorRubricInfo:
    """Rubric lookups for one VendorMatch."""

    quality_score: float
    quality_description: str
    reliability_score: float
    reliability_description: str
    price_tier_multiplier: str
    price_tier_risk: int


@dataclass(frozen=True)
class RiskAssessment:
    """Points accumulated by the fallback risk rules (0-100 scale, uncapped)."""

    points: int = 0
    reasons: list[str] = field(default_factory=list)

    @property
    def normalized(self) -> float:
        return clamp01(self.points / 100)


def build_score(score: float, explanation: str) -> ScoreExplanation:
    return ScoreExplanation(score=clamp01(score), explanation=explanation)


def get_vendor_rubric_info(vendor_match: VendorMatch | None) -> VendorRubricInfo | None:
    if vendor_match is None:
        return None
    return VendorRubricInfo(
        quality_score=QUALITY_SCORES[vendor_match.vendor_quality],
        quality_description=QUALITY_DESCRIPTIONS[vendor_match.vendor_quality],
        reliability_score=RELIABILITY_SCORES[vendor_match.vendor_reliability],
        reliability_description=RELIABILITY_DESCRIPTIONS[vendor_match.vendor_reliability],
        price_tier_multiplier=PRICE_TIER_MULTIPLIERS[vendor_match.vendor_price_tier],
        price_tier_risk=PRICE_TIER_RISK_POINTS[vendor_match.vendor_price_tier],
    )


def build_vendor_utility_score(vendor_match: VendorMatch | None) -> ScoreExplanation | None:
    """Long-term utility from vendor rubric: mean of quality and reliability scores."""
    info = get_vendor_rubric_info(vendor_match)
    if info is None or vendor_match is None:
        return None
    explanation = " ".join(
        [
            f"Vendor quality: {vendor_match.vendor_quality.value} ({info.quality_score}).",
            f"Vendor reliability: {vendor_match.vendor_reliability.value} "
            f"({info.reliability_score}).",
            f"Vendor price tier: {vendor_match.vendor_price_tier.value} "
            f"({info.price_tier_multiplier}).",
        ]
    )
    return build_score((info.quality_score + info.reliability_score) / 2, explanation)


def compute_decision_score(
    *,
    value_conflict: float,
    pattern_repetition: float,
    emotional_impulse: float,
    financial_strain: float,
    long_term_utility: float,
    emotional_support: float,
) -> float:
    """
    Linear decision model. Higher means more reason to skip.

    Risk terms push the score up; utility and emotional support pull it down.
    The result is not clamped: callers map it through decision_from_score and
    confidence_from_score.
    """
    return (
        WEIGHTS["intercept"]
        + WEIGHTS["value_conflict"] * value_conflict
        + WEIGHTS["pattern_repetition"] * pattern_repetition
        + WEIGHTS["emotional_impulse"] * emotional_impulse
        + WEIGHTS["financial_strain"] * financial_strain
        - WEIGHTS["long_term_utility"] * long_term_utility
        - WEIGHTS["emotional_support"] * emotional_support
    )


def decision_from_score(score: float) -> VerdictOutcome:
    if score >= SKIP_THRESHOLD:
        return VerdictOutcome.SKIP
    if score >= HOLD_THRESHOLD:
        return VerdictOutcome.HOLD
    return VerdictOutcome.BUY


def confidence_from_score(score: float) -> float:
    """Confidence peaks at the 0.5 midpoint and decays linearly with distance, within [0.5, 0.95]."""
    distance = min(1.0, abs(score - 0.5))
    return max(
        CONFIDENCE_FLOOR,
        min(CONFIDENCE_CEILING, CONFIDENCE_CEILING - distance * CONFIDENCE_SLOPE),
    )


def decision_from_risk_points(points: int) -> VerdictOutcome:
    if points >= RISK_SKIP_POINTS:
        return VerdictOutcome.SKIP
    if points >= RISK_HOLD_POINTS:
        return VerdictOutcome.HOLD
    return VerdictOutcome.BUY


def confidence_from_risk_points(points: int) -> float:
    return max(
        CONFIDENCE_FLOOR,
        min(CONFIDENCE_CEILING, 1 - points / RISK_CONFIDENCE_DIVISOR),
    )


def has_scoring_context(overrides: ScoringOverrides) -> bool:
    """True when vendor, history or budget context can move the decision model."""
    return (
        overrides.vendor_match is not None
        or overrides.pattern_repetition is not None
        or overrides.financial_strain is not None
    )


def compute_financial_strain(
    price: float | None,
    weekly_budget: float | None,
    is_important: bool = False,
) -> float:
    """
    Share of the weekly fun budget a purchase would consume.

    Non-essential purchases above a third of the budget count as full strain.
    """
    if not price or not weekly_budget or price <= 0 or weekly_budget <= 0:
        return 0.0
    if not is_important and price > weekly_budget / 3:
        return 1.0
    return clamp01(price / weekly_budget)


def financial_strain_score(
    price: float | None,
    weekly_budget: float | None,
    is_important: bool = False,
) -> ScoreExplanation:
    """compute_financial_strain wrapped for use as a ScoringOverrides.financial_strain."""
    if not weekly_budget or weekly_budget <= 0:
        return build_score(0.0, "No weekly fun budget is set.")
    if not price or price <= 0:
        return build_score(0.0, "No price was given to compare against the budget.")

    strain = compute_financial_strain(price, weekly_budget, is_important)
    share = price / weekly_budget
    if not is_important and price > weekly_budget / 3:
        explanation = (
            f"${price:.2f} is more than a third of your ${weekly_budget:.2f} weekly fun budget."
        )
    else:
        explanation = f"${price:.2f} is {share:.0%} of your ${weekly_budget:.2f} weekly fun budget."
    return build_score(strain, explanation)


def assess_purchase_risk(
    purchase: PurchaseInput, vendor_match: VendorMatch | None = None
) -> RiskAssessment:
    """Apply the additive risk rules. Each rule fires independently."""
    points = 0
    reasons: list[str] = []

    if purchase.price is not None:
        if purchase.price > HIGH_PRICE_THRESHOLD:
            points += HIGH_PRICE_POINTS
            reasons.append("High price point (>$200)")
        elif purchase.price > MODERATE_PRICE_THRESHOLD:
            points += MODERATE_PRICE_POINTS
            reasons.append("Moderate price point ($100-200)")

    if purchase.category:
        category = purchase.category.lower()
        if any(c in category for c in IMPULSE_CATEGORIES):
            points += IMPULSE_CATEGORY_POINTS
            reasons.append("Category has higher impulse purchase rate")

    justification = purchase.justification
    if not justification or len(justification) < MIN_JUSTIFICATION_CHARS:
        points += WEAK_JUSTIFICATION_POINTS
        reasons.append("Weak or missing justification")
    else:
        lowered = justification.lower()
        if "want" in lowered and "need" not in lowered:
            points += WANT_NOT_NEED_POINTS
            reasons.append("Want-based rather than need-based")

    title = purchase.title.lower()
    if any(kw in title for kw in URGENCY_KEYWORDS):
        points += URGENCY_KEYWORD_POINTS
        reasons.append("Title contains urgency/scarcity language")

    info = get_vendor_rubric_info(vendor_match)
    if vendor_match is not None and info is not None and info.price_tier_risk > 0:
        points += info.price_tier_risk
        reasons.append(f"Vendor price tier: {vendor_match.vendor_price_tier.value}")

    return RiskAssessment(points=points, reasons=reasons)


def build_evaluation(
    *,
    purchase: PurchaseInput,
    value_conflict: ScoreExplanation,
    pattern_repetition: ScoreExplanation,
    emotional_impulse: ScoreExplanation,
    financial_strain: ScoreExplanation,
    long_term_utility: ScoreExplanation,
    emotional_support: ScoreExplanation,
    rationale: str,
) -> EvaluationResult:
    """Run the decision model over finished sub-scores and package the result."""
    decision_score = compute_decision_score(
        value_conflict=value_conflict.score,
        pattern_repetition=pattern_repetition.score,
        emotional_impulse=emotional_impulse.score,
        financial_strain=financial_strain.score,
        long_term_utility=long_term_utility.score,
        emotional_support=emotional_support.score,
    )
    return EvaluationResult(
        outcome=decision_from_score(decision_score),
        confidence=confidence_from_score(decision_score),
        reasoning=EvaluationReasoning(
            value_conflict=value_conflict,
            pattern_repetition=pattern_repetition,
            emotional_impulse=emotional_impulse,
            financial_strain=financial_strain,
            long_term_utility=long_term_utility,
            emotional_support=emotional_support,
            decision_score=decision_score,
            rationale=rationale,
            important_purchase=purchase.is_important,
        ),
    )


def score_purchase(
    purchase: PurchaseInput, overrides: ScoringOverrides | None = None
) -> EvaluationResult:
    """
    Evaluate a purchase without an LLM.

    Args:
        purchase: The purchase being considered
        overrides: Optional vendor/history/budget context

    Returns:
        EvaluationResult; never raises for missing context. Without vendor,
        history or budget context the outcome and confidence come from the
        risk-point bands; decision_score still reports the linear model.
    """
    overrides = overrides or ScoringOverrides()

    with time_block("verdict.fallback.latency"):
        risk = assess_purchase_risk(purchase, overrides.vendor_match)

        value_conflict = build_score(
            risk.normalized * VALUE_CONFLICT_RISK_MULTIPLIER, FALLBACK_EXPLANATION
        )
        emotional_impulse = build_score(
            risk.normalized * EMOTIONAL_IMPULSE_RISK_MULTIPLIER, FALLBACK_EXPLANATION
        )
        long_term_utility = build_vendor_utility_score(overrides.vendor_match) or build_score(
            DEFAULT_LONG_TERM_UTILITY, FALLBACK_EXPLANATION
        )
        emotional_support = build_score(DEFAULT_EMOTIONAL_SUPPORT, FALLBACK_EXPLANATION)
        pattern_repetition = overrides.pattern_repetition or build_score(
            0.0, NO_HISTORY_EXPLANATION
        )
        financial_strain = overrides.financial_strain or build_score(0.0, NO_BUDGET_EXPLANATION)

        rationale = build_rationale(
            reasons=risk.reasons,
            vendor_match=overrides.vendor_match,
            pattern_repetition=pattern_repetition,
            financial_strain=financial_strain,
            profile_context_summary=overrides.profile_context_summary,
            similar_purchases_summary=overrides.similar_purchases_summary,
            recent_purchases_summary=overrides.recent_purchases_summary,
        )

        result = build_evaluation(
            purchase=purchase,
            value_conflict=value_conflict,
            pattern_repetition=pattern_repetition,
            emotional_impulse=emotional_impulse,
            financial_strain=financial_strain,
            long_term_utility=long_term_utility,
            emotional_support=emotional_support,
            rationale=rationale,
        )

        # No vendor, history or budget context: risk points decide
        route = "decision_model"
        if not has_scoring_context(overrides):
            route = "risk_bands"
            result = result.model_copy(
                update={
                    "outcome": decision_from_risk_points(risk.points).value,
                    "confidence": confidence_from_risk_points(risk.points),
                }
            )

    counter(f"verdict.fallback.{result.outcome}")
    counter(f"verdict.fallback.route.{route}")
    logger.debug(
        "Fallback verdict: outcome=%s route=%s score=%.3f risk_points=%d",
        result.outcome,
        route,
        result.reasoning.decision_score,
        risk.points,
    )
    return result


# Name used by the LLM integration layer for its fallback route
evaluate_purchase_fallback = score_purchase
