"""
Tests for HTML stripping and receipt text cleanup
"""

from __future__ import annotations

import pytest

from verdictq.utils.html import normalize_whitespace, strip_html_advanced
from verdictq.utils.receipt_text import clean_email_text_for_receipt


class TestStripHtmlAdvanced:
    def test_drops_non_content_blocks(self):
        html = (
            "<html><head><title>Hidden</title></head><body>"
            "<style>p { color: red; }</style>"
            "<script>alert('x')</script>"
            "<!-- tracking pixel -->"
            "<p>Visible</p></body></html>"
        )
        assert strip_html_advanced(html) == "Visible"

    def test_block_tags_become_newlines(self):
        text = strip_html_advanced("<div>Order</div><div>Total: $5</div>")
        assert text == "Order\n\nTotal: $5"

    def test_list_items_become_bullets(self):
        text = strip_html_advanced("<ul><li>One</li><li>Two</li></ul>")
        assert "• One" in text
        assert "• Two" in text

    def test_inline_tags_become_spaces(self):
        assert strip_html_advanced("Order<b>#123</b>shipped") == "Order #123 shipped"

    @pytest.mark.parametrize(
        ("html", "expected"),
        [
            ("Fish&nbsp;&amp;&nbsp;Chips", "Fish & Chips"),
            ("&quot;quoted&quot; &#39;single&#39; &apos;apos&apos;", "\"quoted\" 'single' 'apos'"),
            ("Price: &#36;5", "Price: $5"),
            ("Hex: &#x41;&#x62;", "Hex: Ab"),
            ("&AMP; upper", "& upper"),
            ("&#1114112; stays", "&#1114112; stays"),
        ],
    )
    def test_entities(self, html, expected):
        assert strip_html_advanced(html) == expected

    def test_empty(self):
        assert strip_html_advanced("") == ""

    def test_collapses_blank_lines(self):
        text = strip_html_advanced("<p>A</p><p></p><p></p><p>B</p>")
        assert text == "A\n\nB"

    def test_escaped_markup_is_stripped(self):
        assert strip_html_advanced("<p>Use &lt;b&gt;bold&lt;/b&gt; tags</p>") == "Use bold tags"

    def test_double_escaped_entities_resolve(self):
        assert strip_html_advanced("AT&amp;amp;T receipt") == "AT&T receipt"

    @pytest.mark.parametrize(
        "html",
        [
            "<p>Hello <b>World</b></p><ul><li>One</li><li>Two</li></ul>",
            "<table><tr><td>Item</td><td>$4.00</td></tr></table>",
            "<div>   spaced\t\tout   </div><br><br><br><br><h2>Done</h2>",
            "plain text, no markup at all",
            "<p>Use &lt;b&gt;bold&lt;/b&gt; tags</p>",
            "AT&amp;amp;T receipt",
            "&amp;amp;lt;i&amp;amp;gt;nested&amp;amp;lt;/i&amp;amp;gt;",
        ],
    )
    def test_idempotent(self, html):
        once = strip_html_advanced(html)
        assert strip_html_advanced(once) == once


class TestNormalizeWhitespace:
    def test_collapses(self):
        assert normalize_whitespace("  a \t b\n\n\n\nc  ") == "a b\n\nc"


class TestCleanEmailTextForReceipt:
    def test_removes_addresses_and_urls(self):
        text = "Contact help@store.example or https://store.example/help?x=1 for help.\nTotal: $12.00"
        cleaned = clean_email_text_for_receipt(text)
        assert "@" not in cleaned
        assert "https://" not in cleaned
        assert "Total: $12.00" in cleaned

    def test_removes_placeholders(self):
        cleaned = clean_email_text_for_receipt("[image: Store logo] Receipt [cid:logo@01]")
        assert cleaned == "Receipt"

    @pytest.mark.parametrize("phrase", ["Unsubscribe", "Manage  Preferences", "view in browser"])
    def test_removes_footer_phrases(self, phrase):
        cleaned = clean_email_text_for_receipt(f"Total: $3.00\n{phrase}")
        assert cleaned == "Total: $3.00"

    def test_removes_trailing_sent_to_block(self):
        cleaned = clean_email_text_for_receipt(
            "Total: $3.00\nThis email was sent to you because you ordered from us."
        )
        assert cleaned == "Total: $3.00"

    def test_keeps_sent_to_block_in_middle_of_long_text(self):
        """Only a trailing block is dropped; more than 200 chars after it keeps it"""
        tail = "Item line. " * 30
        text = f"This email was sent to confirm your order.\n{tail}"
        assert clean_email_text_for_receipt(text).startswith("This email was sent to")

    def test_removes_trailing_did_not_block(self):
        cleaned = clean_email_text_for_receipt(
            "Order #5 Total: $8.00\nIf you didn't place this order, contact us."
        )
        assert cleaned == "Order #5 Total: $8.00"

    def test_separator_lines(self):
        cleaned = clean_email_text_for_receipt("Header\n==========\nItems\n*****\nFooter")
        assert cleaned == "Header\n\nItems\n\nFooter"

    def test_empty(self):
        assert clean_email_text_for_receipt("") == ""
