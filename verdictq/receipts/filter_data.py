"""
Module: filter_data
Purpose: Pattern and keyword tables for the receipt filter.
Dependencies: None beyond re

Separates filter policy data from filter logic. The tables were tuned
empirically against real inbox traffic; edit them here without touching the
staging in filters.py.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType


class NegativeCategory(str, Enum):
    RETURNS_REFUNDS = "returns_refunds"
    SHIPPING_ONLY = "shipping_only"
    PROMOTIONAL = "promotional"
    ACCOUNT_MANAGEMENT = "account_management"


# ---------------------------------------------------------------------------
# Stage 1: negative patterns (matched against lower-cased subject + body)
# Any hit rejects the email outright, even if it carries a price.
# ---------------------------------------------------------------------------

NEGATIVE_PATTERNS: tuple[tuple[re.Pattern[str], NegativeCategory], ...] = (
    # Returns / refunds / cancellations
    (
        re.compile(r"refund\s+(has\s+been\s+)?(initiated|processed|complete|issued)"),
        NegativeCategory.RETURNS_REFUNDS,
    ),
    (re.compile(r"return\s+(label|authorized|received|request)"), NegativeCategory.RETURNS_REFUNDS),
    (re.compile(r"\breturn\b.*\brequest\b"), NegativeCategory.RETURNS_REFUNDS),
    (re.compile(r"cancell?(ed|ation)"), NegativeCategory.RETURNS_REFUNDS),
    # Shipping-only (no purchase)
    (
        re.compile(r"your\s+(package|order)\s+(has\s+)?(shipped|is\s+on\s+the\s+way)"),
        NegativeCategory.SHIPPING_ONLY,
    ),
    (re.compile(r"tracking\s+(number|info|update)"), NegativeCategory.SHIPPING_ONLY),
    (re.compile(r"out\s+for\s+delivery"), NegativeCategory.SHIPPING_ONLY),
    (re.compile(r"delivered\s+to"), NegativeCategory.SHIPPING_ONLY),
    (re.compile(r"shipment\s+(update|notification)"), NegativeCategory.SHIPPING_ONLY),
    # Promotional
    (re.compile(r"\bsale\b.*\boff\b"), NegativeCategory.PROMOTIONAL),
    (re.compile(r"limited\s+time\s+offer"), NegativeCategory.PROMOTIONAL),
    (re.compile(r"shop\s+now"), NegativeCategory.PROMOTIONAL),
    (re.compile(r"don't\s+miss"), NegativeCategory.PROMOTIONAL),
    (re.compile(r"exclusive\s+deal"), NegativeCategory.PROMOTIONAL),
    (re.compile(r"\bsave\s+\d+%"), NegativeCategory.PROMOTIONAL),
    # Account management
    (re.compile(r"password\s+(reset|changed|updated)"), NegativeCategory.ACCOUNT_MANAGEMENT),
    (re.compile(r"account\s+(updated|settings|verification)"), NegativeCategory.ACCOUNT_MANAGEMENT),
    (re.compile(r"subscription\s+(cancelled|ended|expired)"), NegativeCategory.ACCOUNT_MANAGEMENT),
    (
        re.compile(r"payment\s+method\s+(updated|failed|expired)"),
        NegativeCategory.ACCOUNT_MANAGEMENT,
    ),
    (re.compile(r"verify\s+your\s+(email|account)"), NegativeCategory.ACCOUNT_MANAGEMENT),
)

# ---------------------------------------------------------------------------
# Stage 2: price patterns (matched against original-case content)
# Counted by distinct pattern, not by number of amounts in the email.
# ---------------------------------------------------------------------------

PRICE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\$\d+\.?\d*"), "dollar"),  # $12.99 or $12
    (re.compile(r"USD\s*\d+\.?\d*", re.IGNORECASE), "usd"),  # USD 12.99
    (re.compile(r"total[:\s]+\$?\d+\.?\d*", re.IGNORECASE), "total"),  # Total: $12.99
    (re.compile(r"amount[:\s]+\$?\d+\.?\d*", re.IGNORECASE), "amount"),  # Amount: $12.99
    (re.compile(r"subtotal[:\s]+\$?\d+\.?\d*", re.IGNORECASE), "subtotal"),  # Subtotal: $12.99
    (re.compile(r"\d+\.?\d*\s*€"), "euro_suffix"),  # 12.99 €
    (re.compile(r"€\s*\d+\.?\d*"), "euro_prefix"),  # € 12.99
    (re.compile(r"£\d+\.?\d*"), "pound"),  # £12.99
    (re.compile(r"¥\d+"), "yen"),  # ¥1299
)

# Distinct price-pattern hits -> stage 2 confidence
SINGLE_PRICE_CONFIDENCE = 0.5
MULTI_PRICE_CONFIDENCE = 1.0

# ---------------------------------------------------------------------------
# Stage 3: weighted receipt keywords (substring match on lower-cased content)
# ---------------------------------------------------------------------------

HIGH_WEIGHT_KEYWORDS: tuple[str, ...] = (
    "order confirmation",
    "payment received",
    "receipt for your",
    "invoice #",
    "order #",
    "transaction id",
    "thank you for your purchase",
    "thank you for your order",
    "order number",
    "confirmation number",
)

MEDIUM_WEIGHT_KEYWORDS: tuple[str, ...] = (
    "receipt",
    "invoice",
    "subtotal",
    "total:",
    "amount paid",
    "billing",
    "payment",
    "charged",
    "purchased",
)

# Common in non-receipts too
LOW_WEIGHT_KEYWORDS: tuple[str, ...] = (
    "order",
    "confirmation",
    "thank you",
)


class KeywordTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


KEYWORD_TIERS = MappingProxyType(
    {
        KeywordTier.HIGH: HIGH_WEIGHT_KEYWORDS,
        KeywordTier.MEDIUM: MEDIUM_WEIGHT_KEYWORDS,
        KeywordTier.LOW: LOW_WEIGHT_KEYWORDS,
    }
)

KEYWORD_TIER_WEIGHTS = MappingProxyType(
    {
        KeywordTier.HIGH: 0.4,
        KeywordTier.MEDIUM: 0.2,
        KeywordTier.LOW: 0.1,
    }
)

# ---------------------------------------------------------------------------
# Provider search query for receipt-like mail
# ---------------------------------------------------------------------------

RECEIPT_SENDER_TERMS: tuple[str, ...] = (
    "noreply",
    "no-reply",
    "receipt",
    "order",
    "confirmation",
    "shipping",
    "auto-confirm",
)

RECEIPT_SUBJECT_TERMS: tuple[str, ...] = (
    "receipt",
    "order",
    "confirmation",
    '"thank you for your"',
    "shipping",
    "invoice",
    '"your purchase"',
)
