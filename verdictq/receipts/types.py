"""
Module: types
Purpose: Input and result types for the receipt filter.
Dependencies: None

Kept in a leaf module so the parser, filter and CLI can share them without
import cycles.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class RejectionReason(str, Enum):
    """Why the filter declined to send an email to extraction.

    Extends str so JSON output carries the raw value (e.g. "low_confidence").
    """

    MATCHES_NEGATIVE_PATTERN = "matches_negative_pattern"
    NO_PRICE_PATTERNS = "no_price_patterns"
    LOW_CONFIDENCE = "low_confidence"


@dataclass(frozen=True)
class ReceiptEmail:
    """The parts of an email the filter looks at."""

    subject: str
    text_content: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReceiptEmail:
        """Accept both snake_case and the provider's camelCase keys."""
        text = data.get("text_content")
        if text is None:
            text = data.get("textContent", "")
        return cls(
            subject=data.get("subject") or "",
            text_content=text or "",
        )


@dataclass(frozen=True)
class FilterResult:
    """Result of the staged receipt filter."""

    should_process: bool
    confidence: float
    rejection_reason: RejectionReason | None = None

    @classmethod
    def rejected(cls, reason: RejectionReason, confidence: float = 0.0) -> FilterResult:
        return cls(should_process=False, confidence=confidence, rejection_reason=reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "should_process": self.should_process,
            "confidence": self.confidence,
            "rejection_reason": self.rejection_reason.value if self.rejection_reason else None,
        }
