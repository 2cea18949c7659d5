# ABOUTME: Tests for generation telemetry: cost estimate and the JSON log line.
# ABOUTME: Reads the printed line with capsys; no model call involved.

import json

import pytest

from core.telemetry import estimate_cost_usd, log_run


def test_estimate_cost_only_bills_gemini():
    assert estimate_cost_usd("gemini", 1_000_000, 1_000_000) == pytest.approx(0.375)
    assert estimate_cost_usd("ollama", 1_000_000, 1_000_000) == 0.0


def test_log_run_prints_one_json_line(capsys):
    log_run(
        backend="mock",
        model="mock",
        latency_ms=12.3456,
        prompt_tokens=0,
        completion_tokens=0,
        days_parsed=4,
        success=True,
    )
    line = capsys.readouterr().out.strip()
    entry = json.loads(line)
    assert entry["backend"] == "mock"
    assert entry["latency_ms"] == 12.35
    assert entry["days_parsed"] == 4
    assert entry["success"] is True
    assert entry["estimated_cost_usd"] == "0.000000"
