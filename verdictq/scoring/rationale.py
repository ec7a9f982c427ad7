"""
Rationale assembly for fallback verdicts.

Each summarizer turns one block of structured context into a short sentence
(or None when it has nothing to say). build_rationale joins them in a fixed
order: profile context, purchase history, vendor, risk signals.

The rationale is rendered as limited HTML by the front end, so blocks are
joined with RATIONALE_SEPARATOR and onboarding answers use <strong>/<em>.
"""

from __future__ import annotations

import re

from verdictq.scoring.rubric import (
    PRICE_TIER_MULTIPLIERS,
    QUALITY_SCORES,
    RELIABILITY_SCORES,
)
from verdictq.scoring.types import ScoreExplanation, VendorMatch

RATIONALE_SEPARATOR = "<br />"

PROFILE_NOT_SET_MARKER = "Profile summary: not set."
NO_RECENT_HISTORY_MARKER = "No purchase history"
NO_SIMILAR_MARKER = "No similar purchases found"

GENERIC_FALLBACK = (
    "This recommendation leans on the purchase details because profile context is limited."
)
VENDOR_UNAVAILABLE = (
    "Vendor quality, reliability, and price tier are not available, "
    "so this relies on the item details."
)

_PROFILE_SUMMARY_RE = re.compile(r"Profile summary:\n- (.+)")
_WEEKLY_BUDGET_RE = re.compile(r"Weekly fun budget:\n- \$([0-9.,]+)")
_TRAILING_PERIOD_RE = re.compile(r"\.\s*$")

# Onboarding answer labels, in display order
ONBOARDING_LABELS: tuple[str, ...] = (
    "Core values",
    "Regret patterns",
    "Satisfaction patterns",
    "Decision style",
    "Financial sensitivity",
    "Identity stability",
    "Emotional relationship",
)


def _strip_trailing_period(text: str) -> str:
    return _TRAILING_PERIOD_RE.sub("", text.strip())


def summarize_profile_context(summary: str | None) -> str | None:
    if not summary:
        return None
    if PROFILE_NOT_SET_MARKER in summary:
        return "Your profile summary is not set yet, so this leans more on the purchase details."

    parts: list[str] = []
    profile_match = _PROFILE_SUMMARY_RE.search(summary)
    if profile_match:
        parts.append(
            f"Your profile summary notes: {_strip_trailing_period(profile_match.group(1))}."
        )

    budget_match = _WEEKLY_BUDGET_RE.search(summary)
    if budget_match:
        parts.append(f"Your weekly fun budget is ${budget_match.group(1)}.")

    for label in ONBOARDING_LABELS:
        match = re.search(rf"- {label}: (.+)", summary)
        if match:
            parts.append(f'<strong>{label}:</strong> <em>"{match.group(1)}"</em>.')

    if not parts:
        return "Your profile context guides this decision alongside the purchase details."
    return RATIONALE_SEPARATOR.join(parts)


def extract_bullet_lines(text: str | None) -> list[str]:
    """Return the '- ' prefixed lines of a rendered history block, without the prefix."""
    if not text:
        return []
    return [
        line.strip()[2:] for line in text.split("\n") if line.strip().startswith("- ")
    ]


def summarize_purchase_history(similar: str | None, recent: str | None) -> str | None:
    parts: list[str] = []

    if extract_bullet_lines(recent):
        parts.append("Past purchases suggest a baseline for your usual spending and categories.")
    elif recent and NO_RECENT_HISTORY_MARKER in recent:
        parts.append("Past purchases suggest limited recent history to compare against.")

    if extract_bullet_lines(similar):
        parts.append("Similar purchases suggest how comparable items have felt for you before.")
    elif similar and NO_SIMILAR_MARKER in similar:
        parts.append("Similar purchases suggest there are no close historical matches yet.")

    return RATIONALE_SEPARATOR.join(parts) if parts else None


def summarize_vendor_match(vendor_match: VendorMatch | None) -> str:
    if vendor_match is None:
        return VENDOR_UNAVAILABLE
    quality = vendor_match.vendor_quality
    reliability = vendor_match.vendor_reliability
    tier = vendor_match.vendor_price_tier
    return (
        f"The vendor is rated {quality.value} on quality ({QUALITY_SCORES[quality]}) "
        f"and {reliability.value} on reliability ({RELIABILITY_SCORES[reliability]}), "
        f"with a {tier.value} price tier ({PRICE_TIER_MULTIPLIERS[tier]})."
    )


def summarize_risk_signals(
    reasons: list[str],
    pattern_repetition: ScoreExplanation | None = None,
    financial_strain: ScoreExplanation | None = None,
) -> str | None:
    parts: list[str] = []
    if reasons:
        lowered = [reason.lower() for reason in reasons]
        if len(lowered) == 1:
            parts.append(f"On the item itself, {lowered[0]} stands out.")
        elif len(lowered) == 2:
            parts.append(f"On the item itself, {lowered[0]} and {lowered[1]} stand out.")
        else:
            rest = ", ".join(lowered[2:])
            parts.append(
                f"On the item itself, {lowered[0]} and {lowered[1]} stand out, plus {rest}."
            )

    if pattern_repetition is not None:
        parts.append(f"Pattern signal: {_strip_trailing_period(pattern_repetition.explanation)}.")
    if financial_strain is not None:
        parts.append(f"Budget context: {_strip_trailing_period(financial_strain.explanation)}.")

    return RATIONALE_SEPARATOR.join(parts) if parts else None


def build_rationale(
    *,
    reasons: list[str],
    vendor_match: VendorMatch | None,
    pattern_repetition: ScoreExplanation | None,
    financial_strain: ScoreExplanation | None,
    profile_context_summary: str | None = None,
    similar_purchases_summary: str | None = None,
    recent_purchases_summary: str | None = None,
) -> str:
    blocks = [
        summarize_profile_context(profile_context_summary),
        summarize_purchase_history(similar_purchases_summary, recent_purchases_summary),
        summarize_vendor_match(vendor_match),
        summarize_risk_signals(reasons, pattern_repetition, financial_strain),
    ]
    present = [block for block in blocks if block]
    if not present:
        return GENERIC_FALLBACK
    return RATIONALE_SEPARATOR.join(present)
