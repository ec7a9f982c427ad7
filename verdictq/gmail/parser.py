"""
Raw RFC-822 message parsing.

Converts a raw message (Gmail's format=raw, after transport decoding) into
ParsedRawEmail: headers, plain and HTML bodies, and cleaned receipt text.

Content problems never raise: a malformed boundary yields no parts, an
unknown transfer encoding passes content through, a bad Date header falls
back to today. Only transport decoding (decode_base64url) can fail, with
GmailParsingError.
"""

from __future__ import annotations

import base64
import binascii
import codecs
import re
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from hashlib import sha256
from typing import Any

from verdictq.observability.logging import get_logger
from verdictq.observability.telemetry import counter, log_event, time_block
from verdictq.runtime.thresholds import MIME_MAX_DEPTH
from verdictq.utils.html import strip_html_advanced
from verdictq.utils.receipt_text import clean_email_text_for_receipt

logger = get_logger(__name__)

_TEXT_PLAIN = "text/plain"
_TEXT_HTML = "text/html"
_MULTIPART = "multipart"
_DEFAULT_CONTENT_TYPE = _TEXT_PLAIN
_DEFAULT_ENCODING = "7bit"
_DEFAULT_CHARSET = "utf-8"

_BOUNDARY_RE = re.compile(r"""boundary=["']?([^"';\s]+)["']?""", re.IGNORECASE)
_CHARSET_RE = re.compile(r"""charset=["']?([^"';\s]+)["']?""", re.IGNORECASE)
_QP_SOFT_BREAK_RE = re.compile(r"=\r?\n")
_QP_ESCAPE_RUN_RE = re.compile(r"(?:=[0-9A-Fa-f]{2})+")


class GmailParsingError(ValueError):
    """Raised when a provider payload cannot be decoded into raw message text."""


@dataclass(frozen=True)
class ParsedRawEmail:
    message_id: str | None
    from_address: str
    to_address: str
    subject: str
    date: str  # ISO calendar date (UTC), best effort
    content_type: str
    text_plain: str
    text_html: str
    cleaned_text: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MimePart:
    """One leaf or container node of a multipart body, content already transfer-decoded."""

    content_type: str
    encoding: str
    content: str


def parse_headers(raw: str) -> tuple[dict[str, str], int]:
    """
    Parse the header block of a message or MIME part.

    Header names are lower-cased; folded continuation lines are joined to the
    previous value with a single space.

    Returns:
        (headers, body_start) where body_start is the offset of the first
        character after the blank line ending the headers (len(raw) if the
        headers never end).
    """
    headers: dict[str, str] = {}
    current_name: str | None = None
    current_value = ""

    def flush() -> None:
        if current_name is not None:
            headers[current_name.lower()] = current_value

    pos = 0
    length = len(raw)
    while pos < length:
        newline = raw.find("\n", pos)
        if newline == -1:
            line, next_pos = raw[pos:], length
        else:
            line, next_pos = raw[pos:newline], newline + 1
        if line.endswith("\r"):
            line = line[:-1]

        if line == "":
            flush()
            return headers, next_pos

        if line[0].isspace() and current_name is not None:
            current_value += " " + line.strip()
        else:
            flush()
            colon = line.find(":")
            if colon <= 0:
                current_name = None
            else:
                current_name = line[:colon].strip()
                current_value = line[colon + 1 :].strip()
        pos = next_pos

    flush()
    return headers, length


def extract_boundary(content_type: str) -> str | None:
    match = _BOUNDARY_RE.search(content_type)
    return match.group(1) if match else None


def extract_charset(content_type: str) -> str:
    match = _CHARSET_RE.search(content_type)
    if not match:
        return _DEFAULT_CHARSET
    charset = match.group(1).lower()
    try:
        codecs.lookup(charset)
    except LookupError:
        return _DEFAULT_CHARSET
    return charset


def decode_quoted_printable(text: str, charset: str = _DEFAULT_CHARSET) -> str:
    """Remove soft line breaks, then decode =XX escapes (runs decoded together so multibyte characters survive)."""
    text = _QP_SOFT_BREAK_RE.sub("", text)
    return _QP_ESCAPE_RUN_RE.sub(
        lambda m: bytes.fromhex(m.group(0).replace("=", "")).decode(charset, errors="replace"),
        text,
    )


def decode_base64_body(text: str, charset: str = _DEFAULT_CHARSET) -> str:
    """Decode a base64 body; undecodable input is returned unchanged."""
    cleaned = "".join(text.split())
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        decoded = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError):
        counter("gmail.raw.base64_undecodable")
        return text
    return decoded.decode(charset, errors="replace")


def decode_content(content: str, encoding: str, charset: str = _DEFAULT_CHARSET) -> str:
    """Decode per Content-Transfer-Encoding; 7bit/8bit/binary/unknown pass through."""
    normalized = encoding.lower().strip()
    if normalized == "quoted-printable":
        return decode_quoted_printable(content, charset)
    if normalized == "base64":
        return decode_base64_body(content, charset)
    return content


def parse_mime_part(raw: str) -> MimePart:
    headers, body_start = parse_headers(raw)
    content_type = headers.get("content-type", _DEFAULT_CONTENT_TYPE)
    encoding = headers.get("content-transfer-encoding", _DEFAULT_ENCODING)
    body = raw[body_start:].strip()
    return MimePart(
        content_type=content_type,
        encoding=encoding,
        content=decode_content(body, encoding, extract_charset(content_type)),
    )


def parse_multipart_body(body: str, boundary: str) -> list[MimePart]:
    """
    Split a multipart body on its boundary and parse each section.

    The preamble before the first delimiter is not a part; empty sections and
    the closing "--boundary--" marker (plus any epilogue) are skipped.
    """
    sections = body.split(f"--{boundary}")
    parts: list[MimePart] = []
    for section in sections[1:]:
        trimmed = section.strip()
        if not trimmed or trimmed.startswith("--"):
            continue
        parts.append(parse_mime_part(trimmed))
    return parts


def _collect_text_parts(
    parts: list[MimePart], plain: list[str], html: list[str], depth: int = 1
) -> None:
    """Walk a part tree, appending text leaves to the caller's plain/html buffers."""
    for part in parts:
        part_type = part.content_type.lower()
        if _MULTIPART in part_type:
            if depth >= MIME_MAX_DEPTH:
                counter("gmail.raw.mime_depth_exceeded")
                logger.warning("Skipping multipart nested deeper than %d levels", MIME_MAX_DEPTH)
                continue
            boundary = extract_boundary(part.content_type)
            if boundary:
                nested = parse_multipart_body(part.content, boundary)
                _collect_text_parts(nested, plain, html, depth + 1)
        elif _TEXT_PLAIN in part_type:
            plain.append(part.content)
        elif _TEXT_HTML in part_type:
            html.append(part.content)


def parse_date_header(value: str | None) -> str:
    """
    Parse an RFC-2822 (or ISO-8601) date to an ISO calendar date in UTC.

    Falls back to today's UTC date for missing or malformed values.
    """
    if value and value.strip():
        parsed: datetime | None
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError, OverflowError):
            parsed = None
        if parsed is None:
            try:
                parsed = datetime.fromisoformat(value.strip())
            except ValueError:
                parsed = None
        if parsed is not None:
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone(UTC)
            return parsed.date().isoformat()

    counter("gmail.raw.date_fallback")
    return datetime.now(UTC).date().isoformat()


def parse_raw_email(raw_content: str | bytes) -> ParsedRawEmail:
    """
    Parse raw RFC-822 content into ParsedRawEmail.

    Plain-text parts are preferred for cleaned_text; HTML parts are stripped
    and used only when no plain text exists.
    """
    if isinstance(raw_content, bytes):
        raw_content = raw_content.decode("utf-8", errors="replace")

    with time_block("gmail.raw.parse.latency"):
        headers, body_start = parse_headers(raw_content)
        body = raw_content[body_start:]

        content_type = headers.get("content-type", _DEFAULT_CONTENT_TYPE)
        encoding = headers.get("content-transfer-encoding", _DEFAULT_ENCODING)

        plain: list[str] = []
        html: list[str] = []

        if _MULTIPART in content_type.lower():
            boundary = extract_boundary(content_type)
            if boundary:
                _collect_text_parts(parse_multipart_body(body, boundary), plain, html)
            else:
                counter("gmail.raw.missing_boundary")
        else:
            decoded = decode_content(body, encoding, extract_charset(content_type))
            if _TEXT_HTML in content_type.lower():
                html.append(decoded)
            else:
                plain.append(decoded)

        text_plain = "\n".join(plain).strip()
        text_html = "\n".join(html).strip()
        raw_text = text_plain or strip_html_advanced(text_html)

        parsed = ParsedRawEmail(
            message_id=headers.get("message-id"),
            from_address=headers.get("from", ""),
            to_address=headers.get("to", ""),
            subject=headers.get("subject", ""),
            date=parse_date_header(headers.get("date")),
            content_type=content_type,
            text_plain=text_plain,
            text_html=text_html,
            cleaned_text=clean_email_text_for_receipt(raw_text),
        )

    log_event(
        "gmail.raw.parsed",
        message_id_hash=sha256((parsed.message_id or "").encode()).hexdigest()[:12],
        plain_parts=len(plain),
        html_parts=len(html),
    )
    counter("gmail.raw.parsed.count")
    return parsed


def extract_receipt_text(parsed: ParsedRawEmail) -> str:
    """Cleaned text for LLM receipt extraction, prefixed with the subject when present."""
    if parsed.subject:
        return f"Subject: {parsed.subject}\n\n{parsed.cleaned_text}"
    return parsed.cleaned_text


def decode_base64url(data: str) -> str:
    """Decode the provider's URL-safe base64 transport encoding (padding optional)."""
    padding = "=" * (-len(data) % 4)
    try:
        decoded = base64.b64decode((data + padding).encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise GmailParsingError("failed to decode raw message") from exc
    return decoded.decode("utf-8", errors="replace")


def parse_gmail_raw(data: str) -> ParsedRawEmail:
    """Parse a message fetched with format=raw (base64url transport)."""
    return parse_raw_email(decode_base64url(data))
