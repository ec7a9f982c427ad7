"""
Render caller-supplied user context into the text blocks the scorer reads.

The same blocks feed both the LLM user prompt and the fallback rationale, so
their wording is load-bearing: rationale.py looks for the bullet prefixes and
the "No ... found" markers produced here.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from verdictq.scoring.rationale import (
    NO_RECENT_HISTORY_MARKER,
    NO_SIMILAR_MARKER,
    ONBOARDING_LABELS,
    PROFILE_NOT_SET_MARKER,
)


class UserValueType(str, Enum):
    DURABILITY = "durability"
    EFFICIENCY = "efficiency"
    AESTHETICS = "aesthetics"
    INTERPERSONAL_VALUE = "interpersonal_value"
    EMOTIONAL_VALUE = "emotional_value"


USER_VALUE_DESCRIPTIONS = MappingProxyType(
    {
        UserValueType.DURABILITY: "I value things that last several years.",
        UserValueType.EFFICIENCY: "I value tools that save time for me.",
        UserValueType.AESTHETICS: "I value items that fit my existing environment's visual language.",
        UserValueType.INTERPERSONAL_VALUE: "I value purchases that facilitate shared experiences.",
        UserValueType.EMOTIONAL_VALUE: "I value purchases that provide meaningful emotional benefits.",
    }
)


class UserValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    value_type: UserValueType
    preference_score: int | None = Field(default=None, ge=1, le=5)


class PurchaseRecord(BaseModel):
    """A past purchase, with the user's swipe rating if they gave one."""

    model_config = ConfigDict(frozen=True)

    title: str
    price: float = 0.0
    category: str | None = None
    vendor: str | None = None
    outcome: str | None = None  # "satisfied" | "regret"
    motive: str | None = None


class ProfileContext(BaseModel):
    """Profile and onboarding answers as stored for the user."""

    model_config = ConfigDict(frozen=True)

    profile_summary: str | None = None
    weekly_fun_budget: float | None = None
    core_values: str | None = None
    regret_patterns: str | None = None
    satisfaction_patterns: str | None = None
    decision_style: str | None = None
    financial_sensitivity: str | None = None
    identity_stability: str | None = None
    emotional_relationship: str | None = None

    def onboarding_answers(self) -> list[tuple[str, str]]:
        values = (
            self.core_values,
            self.regret_patterns,
            self.satisfaction_patterns,
            self.decision_style,
            self.financial_sensitivity,
            self.identity_stability,
            self.emotional_relationship,
        )
        return [(label, value) for label, value in zip(ONBOARDING_LABELS, values) if value]


def format_profile_context(profile: ProfileContext | None) -> str:
    """
    Render the profile block:

        Profile summary:
        - <summary>
        Weekly fun budget:
        - $<amount>
        Onboarding answers:
        - Core values: <answer>
    """
    if profile is None or not profile.profile_summary:
        lines = [PROFILE_NOT_SET_MARKER]
    else:
        lines = ["Profile summary:", f"- {profile.profile_summary.strip()}"]

    if profile is not None and profile.weekly_fun_budget:
        lines += ["Weekly fun budget:", f"- ${profile.weekly_fun_budget:.2f}"]

    answers = profile.onboarding_answers() if profile is not None else []
    if answers:
        lines.append("Onboarding answers:")
        lines += [f"- {label}: {value}" for label, value in answers]

    return "\n".join(lines)


def format_purchase_line(purchase: PurchaseRecord) -> str:
    parts = [
        f"- {purchase.title}",
        f"${purchase.price:.2f}",
        purchase.category or "uncategorized",
        purchase.vendor or "unknown vendor",
        purchase.outcome or "not rated",
    ]
    if purchase.motive:
        parts.append(f'"{purchase.motive}"')
    return " | ".join(parts)


def format_similar_purchases(category: str | None, purchases: Iterable[PurchaseRecord]) -> str:
    if not category:
        return "No category specified for comparison."
    lines = [format_purchase_line(p) for p in purchases]
    if not lines:
        return f"{NO_SIMILAR_MARKER}."
    return f'Similar purchases in "{category}":\n' + "\n".join(lines)


def format_recent_purchases(purchases: Iterable[PurchaseRecord]) -> str:
    lines = [format_purchase_line(p) for p in purchases]
    if not lines:
        return f"{NO_RECENT_HISTORY_MARKER} found."
    return "Recent purchases:\n" + "\n".join(lines)


def format_user_values(values: Iterable[UserValue]) -> str:
    lines = [
        f"- {v.value_type.value} ({v.preference_score}/5): "
        f'"{USER_VALUE_DESCRIPTIONS[v.value_type]}"'
        for v in values
    ]
    if not lines:
        return "No user values set."
    return "User values:\n" + "\n".join(lines)
