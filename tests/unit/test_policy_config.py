"""
Tests for policy thresholds, the receipt search query and in-process telemetry
"""

from __future__ import annotations

import time

import pytest

from verdictq.gmail.query import build_receipt_query
from verdictq.observability.telemetry import (
    counter,
    get_counter,
    get_p95,
    reset_counters,
    time_block,
)
from verdictq.runtime import thresholds
from verdictq.runtime.thresholds import _load_policy_config, get_all_thresholds


class TestThresholds:
    def test_shipped_values(self):
        assert get_all_thresholds() == {
            "verdict": {
                "skip_threshold": 0.70,
                "hold_threshold": 0.40,
                "confidence_floor": 0.50,
                "confidence_ceiling": 0.95,
                "confidence_slope": 0.45,
                "risk_skip_points": 50,
                "risk_hold_points": 25,
                "risk_confidence_divisor": 150,
            },
            "receipt_filter": {
                "process_threshold": 0.50,
                "price_weight": 0.40,
                "keyword_weight": 0.60,
            },
            "mime": {"max_depth": 5},
        }

    def test_missing_file_uses_defaults(self, tmp_path):
        assert _load_policy_config(tmp_path / "missing.yaml") == {}

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text("verdict:\n  skip_threshold: 0.8\nmime:\n  max_depth: 3\n")
        config = _load_policy_config(path)
        assert config["verdict"]["skip_threshold"] == 0.8
        assert config["mime"]["max_depth"] == 3

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text("")
        assert _load_policy_config(path) == {}

    def test_hold_below_skip(self):
        assert thresholds.HOLD_THRESHOLD < thresholds.SKIP_THRESHOLD


class TestReceiptQuery:
    def test_default_window(self):
        assert build_receipt_query() == (
            "from:(noreply OR no-reply OR receipt OR order OR confirmation OR shipping "
            "OR auto-confirm) "
            'subject:(receipt OR order OR confirmation OR "thank you for your" OR shipping '
            'OR invoice OR "your purchase") '
            "newer_than:90d"
        )

    def test_custom_window(self):
        assert build_receipt_query(7).endswith("newer_than:7d")

    @pytest.mark.parametrize("days", [0, -1])
    def test_rejects_non_positive(self, days):
        with pytest.raises(ValueError):
            build_receipt_query(days)


class TestTelemetry:
    def test_counter(self):
        assert counter("x.y") == 1
        assert counter("x.y", 2) == 3
        assert get_counter("x.y") == 3
        reset_counters()
        assert get_counter("x.y") == 0

    def test_time_block_records_latency(self):
        assert get_p95("work.latency") == 0.0
        with time_block("work.latency"):
            time.sleep(0.001)
        assert get_p95("work.latency") >= 0.001
        assert get_p95("work.latency_ms") == get_p95("work.latency")

    def test_time_block_records_on_error(self):
        with pytest.raises(RuntimeError), time_block("failing.latency"):
            time.sleep(0.001)
            raise RuntimeError("boom")
        assert get_p95("failing.latency") >= 0.001
