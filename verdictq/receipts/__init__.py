"""
VerdictQ receipts - staged pre-filter for receipt extraction.
"""

from verdictq.receipts.filters import (
    ReceiptFilterPipeline,
    calculate_receipt_confidence,
    detect_price_patterns,
    filter_email_for_receipt,
    matches_negative_patterns,
)
from verdictq.receipts.types import FilterResult, ReceiptEmail, RejectionReason

__all__ = [
    "FilterResult",
    "ReceiptEmail",
    "ReceiptFilterPipeline",
    "RejectionReason",
    "calculate_receipt_confidence",
    "detect_price_patterns",
    "filter_email_for_receipt",
    "matches_negative_patterns",
]
