"""
VerdictQ gmail - raw message parsing and receipt search query.
"""

from verdictq.gmail.parser import (
    GmailParsingError,
    ParsedRawEmail,
    decode_base64url,
    extract_receipt_text,
    parse_gmail_raw,
    parse_raw_email,
)
from verdictq.gmail.query import build_receipt_query

__all__ = [
    "GmailParsingError",
    "ParsedRawEmail",
    "build_receipt_query",
    "decode_base64url",
    "extract_receipt_text",
    "parse_gmail_raw",
    "parse_raw_email",
]
