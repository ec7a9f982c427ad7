"""
Application-wide settings and environment configuration
"""

from __future__ import annotations

from pathlib import Path

from verdictq.infrastructure.env import get_optional_env

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent

ENV = get_optional_env("VERDICTQ_ENV", "development")

LOG_LEVEL = get_optional_env("VERDICTQ_LOG_LEVEL", "INFO")

# Product thresholds (decision cutoffs, filter threshold, MIME depth cap)
POLICY_PATH = Path(
    get_optional_env(
        "VERDICTQ_POLICY_PATH", str(PROJECT_ROOT / "config" / "verdictq_policy.yaml")
    )
)
