"""
Centralized product thresholds.

Values are loaded from config/verdictq_policy.yaml; the hard-coded defaults
below are identical to the shipped file so a missing config changes nothing.

These are product decisions (verdict cutoffs, the receipt filter's process
threshold), not derived invariants.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from verdictq.infrastructure.settings import POLICY_PATH
from verdictq.observability.logging import get_logger

logger = get_logger(__name__)


def _load_policy_config(path: Path = POLICY_PATH) -> dict[str, Any]:
    """
    Load configuration from verdictq_policy.yaml.

    Side Effects:
        - Reads the policy file from the filesystem

    Returns:
        Dict with verdict, receipt_filter and mime sections (empty if not found)
    """
    if not path.exists():
        logger.warning("Policy config not found at %s, using hardcoded defaults", path)
        return {}

    with open(path) as f:
        config = yaml.safe_load(f) or {}
    logger.debug("Loaded policy config from %s", path)
    return config


# Load config once at module import time
_POLICY_CONFIG = _load_policy_config()
_VERDICT_CONFIG = _POLICY_CONFIG.get("verdict", {})
_FILTER_CONFIG = _POLICY_CONFIG.get("receipt_filter", {})
_MIME_CONFIG = _POLICY_CONFIG.get("mime", {})

# ============================================================================
# VERDICT (decision score -> outcome, confidence curve)
# ============================================================================

# score >= SKIP_THRESHOLD -> skip; score >= HOLD_THRESHOLD -> hold; else buy
SKIP_THRESHOLD: float = _VERDICT_CONFIG.get("skip_threshold", 0.70)
HOLD_THRESHOLD: float = _VERDICT_CONFIG.get("hold_threshold", 0.40)

CONFIDENCE_FLOOR: float = _VERDICT_CONFIG.get("confidence_floor", 0.50)
CONFIDENCE_CEILING: float = _VERDICT_CONFIG.get("confidence_ceiling", 0.95)
CONFIDENCE_SLOPE: float = _VERDICT_CONFIG.get("confidence_slope", 0.45)

# Risk-point bands used when a purchase arrives with no vendor, history or budget
# context: points >= RISK_SKIP_POINTS -> skip; points >= RISK_HOLD_POINTS -> hold
RISK_SKIP_POINTS: int = _VERDICT_CONFIG.get("risk_skip_points", 50)
RISK_HOLD_POINTS: int = _VERDICT_CONFIG.get("risk_hold_points", 25)
# confidence = 1 - points / RISK_CONFIDENCE_DIVISOR, within the confidence bounds
RISK_CONFIDENCE_DIVISOR: float = _VERDICT_CONFIG.get("risk_confidence_divisor", 150)

# ============================================================================
# RECEIPT FILTER (stage 2 + stage 3 blend)
# ============================================================================

FILTER_PROCESS_THRESHOLD: float = _FILTER_CONFIG.get("process_threshold", 0.50)
FILTER_PRICE_WEIGHT: float = _FILTER_CONFIG.get("price_weight", 0.40)
FILTER_KEYWORD_WEIGHT: float = _FILTER_CONFIG.get("keyword_weight", 0.60)

# ============================================================================
# MIME
# ============================================================================

# Nested multipart levels beyond this are dropped
MIME_MAX_DEPTH: int = _MIME_CONFIG.get("max_depth", 5)


def get_all_thresholds() -> dict[str, Any]:
    """Return all thresholds as a dict (for debugging and the CLI)."""
    return {
        "verdict": {
            "skip_threshold": SKIP_THRESHOLD,
            "hold_threshold": HOLD_THRESHOLD,
            "confidence_floor": CONFIDENCE_FLOOR,
            "confidence_ceiling": CONFIDENCE_CEILING,
            "confidence_slope": CONFIDENCE_SLOPE,
            "risk_skip_points": RISK_SKIP_POINTS,
            "risk_hold_points": RISK_HOLD_POINTS,
            "risk_confidence_divisor": RISK_CONFIDENCE_DIVISOR,
        },
        "receipt_filter": {
            "process_threshold": FILTER_PROCESS_THRESHOLD,
            "price_weight": FILTER_PRICE_WEIGHT,
            "keyword_weight": FILTER_KEYWORD_WEIGHT,
        },
        "mime": {"max_depth": MIME_MAX_DEPTH},
    }
