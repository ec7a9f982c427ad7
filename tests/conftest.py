"""
Pytest configuration for VerdictQ tests

Provides fixtures shared across all test files: telemetry reset and raw
RFC-822 message builders for the parser contracts.
"""

from __future__ import annotations

import base64
import quopri

import pytest

from verdictq.observability.telemetry import reset_counters, reset_latencies


@pytest.fixture(autouse=True)
def clean_telemetry():
    """Each test starts with empty counters and latency samples"""
    reset_counters()
    reset_latencies()
    yield
    reset_counters()
    reset_latencies()


def encode_qp(text: str) -> str:
    return quopri.encodestring(text.encode("utf-8")).decode("ascii")


def encode_b64(text: str) -> str:
    return base64.encodebytes(text.encode("utf-8")).decode("ascii")


def mime_part(content_type: str, body: str, encoding: str | None = None) -> str:
    lines = [f"Content-Type: {content_type}"]
    if encoding:
        lines.append(f"Content-Transfer-Encoding: {encoding}")
    return "\n".join(lines) + "\n\n" + body


def multipart_body(boundary: str, parts: list[str], preamble: str = "") -> str:
    chunks = [preamble] if preamble else []
    for part in parts:
        chunks.append(f"--{boundary}\n{part}")
    chunks.append(f"--{boundary}--\n")
    return "\n".join(chunks)


@pytest.fixture
def build_raw_email():
    """
    Build a raw message from headers and a body.

    Usage:
        raw = build_raw_email({"Subject": "Hi"}, "body text")
    """

    def _build(headers: dict[str, str], body: str, newline: str = "\n") -> str:
        header_block = newline.join(f"{name}: {value}" for name, value in headers.items())
        return header_block + newline + newline + body

    return _build


@pytest.fixture
def receipt_plain_text() -> str:
    return (
        "Thank you for your order, café lover!\n"
        "Order #A-1001\n"
        "Total: $45.99\n"
        "Questions? Email support@shop.example or visit https://shop.example/help"
    )


@pytest.fixture
def receipt_html() -> str:
    return (
        "<html><head><title>Receipt</title></head><body>"
        "<p>Order <b>#A-1001</b></p><p>Total: $45.99</p>"
        "</body></html>"
    )


@pytest.fixture
def alternative_receipt_email(build_raw_email, receipt_plain_text, receipt_html) -> str:
    """multipart/alternative with a quoted-printable plain part and a base64 HTML part"""
    body = multipart_body(
        "ALT-BOUNDARY",
        [
            mime_part('text/plain; charset="utf-8"', encode_qp(receipt_plain_text), "quoted-printable"),
            mime_part('text/html; charset="utf-8"', encode_b64(receipt_html), "base64"),
        ],
        preamble="This is a multi-part message in MIME format.",
    )
    return build_raw_email(
        {
            "From": "Shop <orders@shop.example>",
            "To": "me@example.com",
            "Subject": "Your order confirmation",
            "Date": "Tue, 14 Oct 2025 09:30:00 -0700",
            "Message-ID": "<a1001@shop.example>",
            "MIME-Version": "1.0",
            "Content-Type": 'multipart/alternative; boundary="ALT-BOUNDARY"',
        },
        body,
    )


@pytest.fixture
def mime():
    """Part/body builders: mime.part(...), mime.multipart(...), mime.qp(...), mime.b64(...)"""

    class _Mime:
        part = staticmethod(mime_part)
        multipart = staticmethod(multipart_body)
        qp = staticmethod(encode_qp)
        b64 = staticmethod(encode_b64)

    return _Mime
