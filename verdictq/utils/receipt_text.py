"""
Noise removal for receipt text.

Applied after HTML stripping, whatever the source part was. Removes the parts
of a commercial email that never help receipt extraction (addresses, links,
image placeholders, footer boilerplate, separator rules) and would otherwise
burn prompt tokens.
"""

from __future__ import annotations

import re

from verdictq.utils.html import normalize_whitespace

_EMAIL_ADDRESS_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+", re.IGNORECASE)
_IMAGE_PLACEHOLDER_RE = re.compile(r"\[image:[^\]]+\]", re.IGNORECASE)
_CID_PLACEHOLDER_RE = re.compile(r"\[cid:[^\]]+\]", re.IGNORECASE)
_FOOTER_PHRASE_RE = re.compile(
    r"unsubscribe|manage\s+preferences|view\s+in\s+browser", re.IGNORECASE
)
# Trailing footer blocks only: the match must run to the end of the text
_SENT_TO_FOOTER_RE = re.compile(r"this\s+email\s+was\s+sent\s+(to|from)[\s\S]{0,200}\Z", re.IGNORECASE)
_DID_NOT_FOOTER_RE = re.compile(r"if\s+you\s+(did\s+not|didn't)[\s\S]{0,150}\Z", re.IGNORECASE)
_LINE_SEPARATOR_RE = re.compile(r"[-=_]{10,}")
_STAR_SEPARATOR_RE = re.compile(r"\*{5,}")


def clean_email_text_for_receipt(text: str) -> str:
    """
    Strip email noise while keeping receipt-relevant content.

    Args:
        text: Plain text (already HTML-stripped)

    Returns:
        Cleaned, whitespace-normalized text
    """
    if not text:
        return ""

    text = _EMAIL_ADDRESS_RE.sub("", text)
    text = _URL_RE.sub(" ", text)
    text = _IMAGE_PLACEHOLDER_RE.sub("", text)
    text = _CID_PLACEHOLDER_RE.sub("", text)
    text = _FOOTER_PHRASE_RE.sub("", text)
    text = _SENT_TO_FOOTER_RE.sub("", text)
    text = _DID_NOT_FOOTER_RE.sub("", text)
    text = _LINE_SEPARATOR_RE.sub("\n", text)
    text = _STAR_SEPARATOR_RE.sub("\n", text)
    return normalize_whitespace(text)
