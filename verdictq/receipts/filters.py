"""
Staged receipt pre-filter.

Cost-control gate in front of LLM receipt extraction. Decides from subject
and plain-text body alone whether an email is worth an LLM call.

Stages (each runs only if the previous one passed):
1. Negative patterns: refunds, shipping-only, promos, account mail -> reject
2. Price patterns: no currency amount -> reject
3. Weighted receipt keywords, blended with the price signal -> threshold

Cost: $0 (no LLM calls)
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from verdictq.observability.logging import get_logger
from verdictq.observability.telemetry import counter
from verdictq.receipts.filter_data import (
    KEYWORD_TIER_WEIGHTS,
    KEYWORD_TIERS,
    MULTI_PRICE_CONFIDENCE,
    NEGATIVE_PATTERNS,
    PRICE_PATTERNS,
    SINGLE_PRICE_CONFIDENCE,
    KeywordTier,
    NegativeCategory,
)
from verdictq.receipts.types import FilterResult, ReceiptEmail, RejectionReason
from verdictq.runtime.thresholds import (
    FILTER_KEYWORD_WEIGHT,
    FILTER_PRICE_WEIGHT,
    FILTER_PROCESS_THRESHOLD,
)

logger = get_logger(__name__)


def _combined_text(email: ReceiptEmail) -> str:
    return f"{email.subject} {email.text_content}"


class ReceiptFilterPipeline:
    """
    Three-stage receipt classifier.

    Pattern tables default to filter_data.py; tests and experiments can pass
    their own without touching the staging logic.
    """

    def __init__(
        self,
        negative_patterns: Sequence[tuple[re.Pattern[str], NegativeCategory]] = NEGATIVE_PATTERNS,
        price_patterns: Sequence[tuple[re.Pattern[str], str]] = PRICE_PATTERNS,
        keyword_tiers: Mapping[KeywordTier, Sequence[str]] = KEYWORD_TIERS,
        keyword_weights: Mapping[KeywordTier, float] = KEYWORD_TIER_WEIGHTS,
        process_threshold: float = FILTER_PROCESS_THRESHOLD,
    ):
        self.negative_patterns = tuple(negative_patterns)
        self.price_patterns = tuple(price_patterns)
        self.keyword_tiers = dict(keyword_tiers)
        self.keyword_weights = dict(keyword_weights)
        self.process_threshold = process_threshold

    def negative_match(self, email: ReceiptEmail) -> NegativeCategory | None:
        """Stage 1: category of the first negative pattern that matches, if any."""
        content = _combined_text(email).lower()
        for pattern, category in self.negative_patterns:
            if pattern.search(content):
                return category
        return None

    def price_confidence(self, email: ReceiptEmail) -> float:
        """Stage 2: 0 with no price pattern, 0.5 with one, 1.0 with two or more."""
        content = _combined_text(email)
        match_count = sum(1 for pattern, _ in self.price_patterns if pattern.search(content))
        if match_count == 0:
            return 0.0
        if match_count >= 2:
            return MULTI_PRICE_CONFIDENCE
        return SINGLE_PRICE_CONFIDENCE

    def keyword_confidence(self, email: ReceiptEmail) -> float:
        """Stage 3: summed keyword weights, capped at 1."""
        content = _combined_text(email).lower()
        score = 0.0
        for tier, keywords in self.keyword_tiers.items():
            weight = self.keyword_weights[tier]
            for keyword in keywords:
                if keyword in content:
                    score += weight
        return min(score, 1.0)

    def filter(self, email: ReceiptEmail) -> FilterResult:
        """
        Decide whether an email should go to LLM receipt extraction.

        Args:
            email: Subject and plain-text content (see RawEmailParser)

        Returns:
            FilterResult with should_process=True only when the blended
            confidence reaches the process threshold.
        """
        category = self.negative_match(email)
        if category is not None:
            counter("receipts.filter.rejected.negative_pattern")
            counter(f"receipts.filter.negative.{category.value}")
            return FilterResult.rejected(RejectionReason.MATCHES_NEGATIVE_PATTERN)

        price_confidence = self.price_confidence(email)
        if price_confidence == 0:
            counter("receipts.filter.rejected.no_price")
            return FilterResult.rejected(RejectionReason.NO_PRICE_PATTERNS)

        keyword_confidence = self.keyword_confidence(email)
        overall = price_confidence * FILTER_PRICE_WEIGHT + keyword_confidence * FILTER_KEYWORD_WEIGHT

        if overall >= self.process_threshold:
            counter("receipts.filter.passed")
            return FilterResult(should_process=True, confidence=overall)

        counter("receipts.filter.rejected.low_confidence")
        logger.debug(
            "Receipt filter low confidence: price=%.2f keywords=%.2f overall=%.2f",
            price_confidence,
            keyword_confidence,
            overall,
        )
        return FilterResult.rejected(RejectionReason.LOW_CONFIDENCE, confidence=overall)


_DEFAULT_PIPELINE = ReceiptFilterPipeline()


def _coerce(email: ReceiptEmail | Mapping[str, Any]) -> ReceiptEmail:
    if isinstance(email, ReceiptEmail):
        return email
    return ReceiptEmail.from_mapping(email)


def matches_negative_patterns(email: ReceiptEmail | Mapping[str, Any]) -> bool:
    """True if the email should be rejected outright."""
    return _DEFAULT_PIPELINE.negative_match(_coerce(email)) is not None


def detect_price_patterns(email: ReceiptEmail | Mapping[str, Any]) -> float:
    return _DEFAULT_PIPELINE.price_confidence(_coerce(email))


def calculate_receipt_confidence(email: ReceiptEmail | Mapping[str, Any]) -> float:
    return _DEFAULT_PIPELINE.keyword_confidence(_coerce(email))


def filter_email_for_receipt(email: ReceiptEmail | Mapping[str, Any]) -> FilterResult:
    """Run the default pipeline. Accepts a ReceiptEmail or a subject/textContent mapping."""
    return _DEFAULT_PIPELINE.filter(_coerce(email))
