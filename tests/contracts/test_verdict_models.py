from __future__ import annotations

import pytest
from pydantic import ValidationError

from verdictq.scoring.context import ProfileContext, UserValue, UserValueType
from verdictq.scoring.types import (
    EvaluationReasoning,
    EvaluationResult,
    PurchaseInput,
    ScoreExplanation,
    ScoringOverrides,
    VendorMatch,
    VerdictOutcome,
)


def _score(value: float = 0.5) -> ScoreExplanation:
    return ScoreExplanation(score=value, explanation="test")


def _reasoning(**overrides) -> EvaluationReasoning:
    data = {
        "value_conflict": _score(),
        "pattern_repetition": _score(),
        "emotional_impulse": _score(),
        "financial_strain": _score(),
        "long_term_utility": _score(),
        "emotional_support": _score(),
        "decision_score": 0.5,
        "rationale": "Because.",
    }
    data.update(overrides)
    return EvaluationReasoning.model_validate(data)


def _vendor(**overrides) -> VendorMatch:
    data = {
        "vendor_name": "Acme",
        "vendor_quality": "high",
        "vendor_reliability": "medium",
        "vendor_price_tier": "premium",
    }
    data.update(overrides)
    return VendorMatch.model_validate(data)


@pytest.mark.parametrize("title", ["", "   "])
def test_purchase_requires_title(title):
    with pytest.raises(ValidationError):
        PurchaseInput(title=title)


def test_purchase_rejects_negative_price():
    with pytest.raises(ValidationError):
        PurchaseInput(title="Lamp", price=-1)


def test_purchase_defaults():
    purchase = PurchaseInput(title="Lamp")
    assert purchase.price is None
    assert purchase.is_important is False


def test_purchase_is_frozen():
    purchase = PurchaseInput(title="Lamp")
    with pytest.raises(ValidationError):
        purchase.title = "Other"


def test_vendor_accepts_rubric_strings():
    vendor = _vendor()
    assert vendor.vendor_quality.value == "high"
    assert vendor.vendor_price_tier.value == "premium"


@pytest.mark.parametrize(
    "field,value",
    [("vendor_quality", "excellent"), ("vendor_reliability", "HIGH"), ("vendor_price_tier", "cheap")],
)
def test_vendor_rejects_unknown_levels(field, value):
    with pytest.raises(ValidationError):
        _vendor(**{field: value})


@pytest.mark.parametrize(("raw", "clamped"), [(-0.3, 0.0), (0.25, 0.25), (1.7, 1.0)])
def test_score_explanation_clamps(raw, clamped):
    assert _score(raw).score == clamped


def test_evaluation_result_stores_outcome_value():
    result = EvaluationResult(outcome=VerdictOutcome.HOLD, confidence=0.8, reasoning=_reasoning())
    assert result.outcome == "hold"
    assert result.model_dump(mode="json")["outcome"] == "hold"


@pytest.mark.parametrize("confidence", [0.49, 0.96])
def test_evaluation_result_confidence_bounds(confidence):
    with pytest.raises(ValidationError):
        EvaluationResult(outcome="buy", confidence=confidence, reasoning=_reasoning())


def test_evaluation_result_rejects_unknown_outcome():
    with pytest.raises(ValidationError):
        EvaluationResult(outcome="maybe", confidence=0.7, reasoning=_reasoning())


def test_overrides_from_json():
    overrides = ScoringOverrides.model_validate(
        {
            "pattern_repetition": {"score": 0.9, "explanation": "Repeat category."},
            "vendor_match": {
                "vendor_name": "Acme",
                "vendor_quality": "low",
                "vendor_reliability": "low",
                "vendor_price_tier": "budget",
            },
        }
    )
    assert overrides.pattern_repetition.score == 0.9
    assert overrides.financial_strain is None
    assert overrides.vendor_match.vendor_name == "Acme"


@pytest.mark.parametrize("score", [0, 6])
def test_user_value_preference_range(score):
    with pytest.raises(ValidationError):
        UserValue(value_type=UserValueType.AESTHETICS, preference_score=score)


def test_profile_onboarding_answers_skip_blanks():
    profile = ProfileContext(core_values="durability", decision_style="", emotional_relationship="calm")
    assert profile.onboarding_answers() == [
        ("Core values", "durability"),
        ("Emotional relationship", "calm"),
    ]
