"""
Module: rubric
Purpose: Fixed weights and lookup tables for verdict scoring.
Dependencies: verdictq.scoring.types (enums only)

Separates scoring policy data from scoring logic. The values here are part of
the verdict contract: stored verdicts and LLM comparisons assume them, so edit
only with product signoff.
"""

from __future__ import annotations

from types import MappingProxyType

from verdictq.scoring.types import PriceTier, RubricLevel

# ---------------------------------------------------------------------------
# Linear decision model
# ---------------------------------------------------------------------------

WEIGHTS = MappingProxyType(
    {
        "intercept": 0.18,
        "value_conflict": 0.34,
        "pattern_repetition": 0.41,
        "emotional_impulse": 0.27,
        "financial_strain": 0.12,
        "long_term_utility": 0.29,
        "emotional_support": 0.29,
    }
)

# Fallback sub-score scaling of the normalized risk
VALUE_CONFLICT_RISK_MULTIPLIER = 0.6
EMOTIONAL_IMPULSE_RISK_MULTIPLIER = 0.7

# Neutral defaults when no vendor / history signal exists
DEFAULT_LONG_TERM_UTILITY = 0.4
DEFAULT_EMOTIONAL_SUPPORT = 0.4

# ---------------------------------------------------------------------------
# Vendor rubric
# ---------------------------------------------------------------------------

QUALITY_SCORES = MappingProxyType(
    {
        RubricLevel.LOW: 0.4,
        RubricLevel.MEDIUM: 0.6,
        RubricLevel.HIGH: 0.8,
    }
)

QUALITY_DESCRIPTIONS = MappingProxyType(
    {
        RubricLevel.LOW: "Below-average performance; compromises are obvious.",
        RubricLevel.MEDIUM: "Adequate performance; meets basic expectations.",
        RubricLevel.HIGH: "Strong performance; well-designed and efficient.",
    }
)

RELIABILITY_SCORES = MappingProxyType(
    {
        RubricLevel.LOW: 0.4,
        RubricLevel.MEDIUM: 0.6,
        RubricLevel.HIGH: 0.8,
    }
)

RELIABILITY_DESCRIPTIONS = MappingProxyType(
    {
        RubricLevel.LOW: "Noticeable failure risk; inconsistent durability.",
        RubricLevel.MEDIUM: "Generally dependable with occasional issues.",
        RubricLevel.HIGH: "Rare failures; long-term dependable.",
    }
)

PRICE_TIER_MULTIPLIERS = MappingProxyType(
    {
        PriceTier.BUDGET: "<0.7x market median",
        PriceTier.MID_RANGE: "0.7-1.2x market median",
        PriceTier.PREMIUM: "1.2-2x market median",
        PriceTier.LUXURY: ">2x market median",
    }
)

PRICE_TIER_RISK_POINTS = MappingProxyType(
    {
        PriceTier.BUDGET: 0,
        PriceTier.MID_RANGE: 4,
        PriceTier.PREMIUM: 8,
        PriceTier.LUXURY: 12,
    }
)

# ---------------------------------------------------------------------------
# Risk accumulator rules (points on a 0-100 scale)
# ---------------------------------------------------------------------------

HIGH_PRICE_THRESHOLD = 200
HIGH_PRICE_POINTS = 30
MODERATE_PRICE_THRESHOLD = 100
MODERATE_PRICE_POINTS = 15

IMPULSE_CATEGORIES: tuple[str, ...] = (
    "clothing",
    "fashion",
    "accessories",
    "gadgets",
    "electronics",
)
IMPULSE_CATEGORY_POINTS = 20

MIN_JUSTIFICATION_CHARS = 20
WEAK_JUSTIFICATION_POINTS = 25
WANT_NOT_NEED_POINTS = 10

URGENCY_KEYWORDS: tuple[str, ...] = (
    "limited",
    "sale",
    "deal",
    "exclusive",
    "last chance",
    "flash",
)
URGENCY_KEYWORD_POINTS = 20
