"""
Tests for verdict context rendering, rationale assembly and prompts
"""

from __future__ import annotations

import pytest

from verdictq.scoring.context import (
    ProfileContext,
    PurchaseRecord,
    UserValue,
    UserValueType,
    format_profile_context,
    format_purchase_line,
    format_recent_purchases,
    format_similar_purchases,
    format_user_values,
)
from verdictq.scoring.engine import build_score
from verdictq.scoring.prompts import build_system_prompt, build_user_prompt
from verdictq.scoring.rationale import (
    GENERIC_FALLBACK,
    RATIONALE_SEPARATOR,
    VENDOR_UNAVAILABLE,
    build_rationale,
    extract_bullet_lines,
    summarize_profile_context,
    summarize_purchase_history,
    summarize_risk_signals,
    summarize_vendor_match,
)
from verdictq.scoring.types import PriceTier, PurchaseInput, RubricLevel, VendorMatch


@pytest.fixture
def regretted_boots():
    return PurchaseRecord(
        title="Boots",
        price=120,
        category="fashion",
        outcome="regret",
        motive="impulse",
    )


class TestContextFormatting:
    def test_purchase_line(self, regretted_boots):
        assert (
            format_purchase_line(regretted_boots)
            == '- Boots | $120.00 | fashion | unknown vendor | regret | "impulse"'
        )

    def test_purchase_line_defaults(self):
        line = format_purchase_line(PurchaseRecord(title="Mug"))
        assert line == "- Mug | $0.00 | uncategorized | unknown vendor | not rated"

    def test_similar_without_category(self, regretted_boots):
        assert format_similar_purchases(None, [regretted_boots]) == (
            "No category specified for comparison."
        )

    def test_similar_without_matches(self):
        assert format_similar_purchases("fashion", []) == "No similar purchases found."

    def test_similar_with_matches(self, regretted_boots):
        block = format_similar_purchases("fashion", [regretted_boots])
        assert block.startswith('Similar purchases in "fashion":\n- Boots')

    def test_recent_empty(self):
        assert format_recent_purchases([]) == "No purchase history found."

    def test_user_values(self):
        block = format_user_values([UserValue(value_type=UserValueType.DURABILITY, preference_score=5)])
        assert block == 'User values:\n- durability (5/5): "I value things that last several years."'

    def test_user_values_empty(self):
        assert format_user_values([]) == "No user values set."

    def test_profile_not_set(self):
        assert format_profile_context(None) == "Profile summary: not set."

    def test_profile_full(self):
        profile = ProfileContext(
            profile_summary="Careful spender.",
            weekly_fun_budget=40,
            core_values="durability",
            identity_stability="settled",
        )
        assert format_profile_context(profile) == (
            "Profile summary:\n- Careful spender.\n"
            "Weekly fun budget:\n- $40.00\n"
            "Onboarding answers:\n- Core values: durability\n- Identity stability: settled"
        )


class TestProfileSummary:
    def test_round_trip_through_rendered_block(self):
        profile = ProfileContext(
            profile_summary="Careful spender.",
            weekly_fun_budget=40,
            core_values="durability",
            identity_stability="settled",
        )
        summary = summarize_profile_context(format_profile_context(profile))
        assert summary == RATIONALE_SEPARATOR.join(
            [
                "Your profile summary notes: Careful spender.",
                "Your weekly fun budget is $40.00.",
                '<strong>Core values:</strong> <em>"durability"</em>.',
                '<strong>Identity stability:</strong> <em>"settled"</em>.',
            ]
        )

    def test_not_set(self):
        summary = summarize_profile_context(format_profile_context(None))
        assert "not set yet" in summary

    def test_unrecognized_block(self):
        summary = summarize_profile_context("Some freeform notes")
        assert summary == "Your profile context guides this decision alongside the purchase details."

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert summarize_profile_context(value) is None


class TestPurchaseHistorySummary:
    def test_bullet_extraction(self):
        assert extract_bullet_lines("Recent purchases:\n- A | $1.00\n  - B | $2.00\nnot a bullet") == [
            "A | $1.00",
            "B | $2.00",
        ]

    def test_recent_before_similar(self, regretted_boots):
        summary = summarize_purchase_history(
            format_similar_purchases("fashion", [regretted_boots]),
            format_recent_purchases([regretted_boots]),
        )
        recent, similar = summary.split(RATIONALE_SEPARATOR)
        assert recent.startswith("Past purchases suggest a baseline")
        assert similar.startswith("Similar purchases suggest how comparable items")

    def test_no_history_markers(self):
        summary = summarize_purchase_history(
            format_similar_purchases("fashion", []), format_recent_purchases([])
        )
        assert "limited recent history" in summary
        assert "no close historical matches" in summary

    def test_nothing(self):
        assert summarize_purchase_history(None, None) is None


class TestRiskAndVendorSummary:
    @pytest.mark.parametrize(
        ("reasons", "expected"),
        [
            (["High price"], "On the item itself, high price stands out."),
            (["A", "B"], "On the item itself, a and b stand out."),
            (["A", "B", "C", "D"], "On the item itself, a and b stand out, plus c, d."),
        ],
    )
    def test_reason_phrasing(self, reasons, expected):
        assert summarize_risk_signals(reasons) == expected

    def test_signals_strip_trailing_period(self):
        summary = summarize_risk_signals(
            [],
            pattern_repetition=build_score(0.7, "Bought two jackets recently. "),
            financial_strain=build_score(0.2, "Fits the budget."),
        )
        assert summary == (
            f"Pattern signal: Bought two jackets recently.{RATIONALE_SEPARATOR}"
            "Budget context: Fits the budget."
        )

    def test_empty_signals(self):
        assert summarize_risk_signals([]) is None

    def test_vendor_unavailable(self):
        assert summarize_vendor_match(None) == VENDOR_UNAVAILABLE

    def test_vendor_rated(self):
        vendor = VendorMatch(
            vendor_name="Acme",
            vendor_quality=RubricLevel.MEDIUM,
            vendor_reliability=RubricLevel.HIGH,
            vendor_price_tier=PriceTier.MID_RANGE,
        )
        assert summarize_vendor_match(vendor) == (
            "The vendor is rated medium on quality (0.6) and high on reliability (0.8), "
            "with a mid_range price tier (0.7-1.2x market median)."
        )


class TestBuildRationale:
    def test_block_order(self):
        rationale = build_rationale(
            reasons=["Weak or missing justification"],
            vendor_match=None,
            pattern_repetition=None,
            financial_strain=None,
            profile_context_summary=format_profile_context(None),
            similar_purchases_summary=format_similar_purchases("fashion", []),
            recent_purchases_summary=format_recent_purchases([]),
        )
        blocks = rationale.split(RATIONALE_SEPARATOR)
        assert "profile summary is not set" in blocks[0]
        assert "limited recent history" in blocks[1]
        assert "no close historical matches" in blocks[2]
        assert blocks[3] == VENDOR_UNAVAILABLE
        assert blocks[4] == "On the item itself, weak or missing justification stands out."

    def test_vendor_block_always_present(self):
        """The vendor summary never comes back empty, so the generic fallback is unreachable here"""
        rationale = build_rationale(
            reasons=[], vendor_match=None, pattern_repetition=None, financial_strain=None
        )
        assert rationale == VENDOR_UNAVAILABLE
        assert rationale != GENERIC_FALLBACK


class TestPrompts:
    def test_system_prompt_lists_values(self):
        prompt = build_system_prompt()
        assert "valid JSON only" in prompt

    def test_user_prompt_fields(self, regretted_boots):
        purchase = PurchaseInput(
            title="Rain jacket", price=89.5, category="outdoor", is_important=True
        )
        prompt = build_user_prompt(
            purchase,
            user_values=format_user_values([]),
            similar_purchases=format_similar_purchases("outdoor", []),
            recent_purchases=format_recent_purchases([regretted_boots]),
        )
        assert "- Item: Rain jacket" in prompt
        assert "- Price: $89.50" in prompt
        assert "- Vendor: Not specified" in prompt
        assert '- User rationale: "No rationale provided"' in prompt
        assert "- Important purchase: Yes" in prompt
        assert "No similar purchases found." in prompt
        assert '"value_conflict": {' in prompt

    def test_user_prompt_without_price(self):
        prompt = build_user_prompt(
            PurchaseInput(title="Gift"), user_values="", similar_purchases="", recent_purchases=""
        )
        assert "- Price: Not specified" in prompt
        assert "- Category: Uncategorized" in prompt
