"""
Search query for receipt-like messages.

Sender and subject term groups live in receipts/filter_data.py next to the
other receipt heuristics.
"""

from __future__ import annotations

from verdictq.receipts.filter_data import RECEIPT_SENDER_TERMS, RECEIPT_SUBJECT_TERMS

DEFAULT_SINCE_DAYS = 90


def build_receipt_query(since_days: int = DEFAULT_SINCE_DAYS) -> str:
    """
    Build the provider search query for receipts received in the last N days.

    Example:
        from:(noreply OR no-reply OR ...) subject:(receipt OR ...) newer_than:90d
    """
    if since_days <= 0:
        raise ValueError(f"since_days must be positive, got {since_days}")
    senders = " OR ".join(RECEIPT_SENDER_TERMS)
    subjects = " OR ".join(RECEIPT_SUBJECT_TERMS)
    return f"from:({senders}) subject:({subjects}) newer_than:{since_days}d"
