"""HTML-to-text conversion for email bodies.

Many merchant emails are HTML-only with no text/plain MIME part. This module
turns that HTML into readable plain text for the receipt filter and the
extraction prompt, using regular expressions only.
"""

from __future__ import annotations

import re

_DROP_BLOCKS = (
    re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE),
    re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE),
    re.compile(r"<!--[\s\S]*?-->"),
    re.compile(r"<head[^>]*>[\s\S]*?</head>", re.IGNORECASE),
)
_BLOCK_TAG_RE = re.compile(r"</?(div|p|br|hr|tr|table|h[1-6])[^>]*>", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"<li[^>]*>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]+>")

# Applied in sequence, so "&amp;lt;" ends up as "<"
_NAMED_ENTITIES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"&nbsp;", re.IGNORECASE), " "),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
    (re.compile(r"&lt;", re.IGNORECASE), "<"),
    (re.compile(r"&gt;", re.IGNORECASE), ">"),
    (re.compile(r"&quot;", re.IGNORECASE), '"'),
    (re.compile(r"&#39;", re.IGNORECASE), "'"),
    (re.compile(r"&apos;", re.IGNORECASE), "'"),
)
_DECIMAL_ENTITY_RE = re.compile(r"&#(\d+);")
_HEX_ENTITY_RE = re.compile(r"&#x([0-9A-Fa-f]+);")

_HORIZONTAL_WS_RE = re.compile(r"[ \t]+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

LIST_BULLET = "\n• "


def _code_point(match: re.Match[str], base: int) -> str:
    try:
        return chr(int(match.group(1), base))
    except (ValueError, OverflowError):
        # Out-of-range code point: keep the entity text as-is
        return match.group(0)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of spaces/tabs and 3+ newlines, then trim."""
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def _decode_entities(text: str) -> str:
    for pattern, replacement in _NAMED_ENTITIES:
        text = pattern.sub(replacement, text)
    text = _DECIMAL_ENTITY_RE.sub(lambda m: _code_point(m, 10), text)
    return _HEX_ENTITY_RE.sub(lambda m: _code_point(m, 16), text)


def strip_html_advanced(html: str) -> str:
    """Convert an HTML email body to plain text.

    Drops style/script/comment/head blocks, maps block-level tags to line
    breaks and <li> to bullets, removes all other tags, decodes common named
    and numeric entities, and normalizes whitespace.

    Tag removal and entity decoding repeat until neither changes the text, so
    escaped markup ("&lt;b&gt;") and double-escaped entities ("&amp;amp;") are
    fully resolved and a second call returns its input unchanged.

    Args:
        html: Raw HTML string from an email body.

    Returns:
        Plain text extracted from the HTML.
    """
    if not html:
        return ""

    text = html
    for pattern in _DROP_BLOCKS:
        text = pattern.sub("", text)
    text = _BLOCK_TAG_RE.sub("\n", text)
    text = _LIST_ITEM_RE.sub(LIST_BULLET, text)

    # Every change shortens the text, so this terminates
    while True:
        decoded = _decode_entities(_ANY_TAG_RE.sub(" ", text))
        if decoded == text:
            break
        text = decoded

    return normalize_whitespace(text)
