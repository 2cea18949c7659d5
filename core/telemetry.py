# ABOUTME: Schedule generation telemetry: structured JSON log line and cost estimate per model call.
# ABOUTME: Gemini 2.5 Flash pricing: $0.075/1M input, $0.30/1M output; other backends are not billed here.

import json
from dataclasses import dataclass
from datetime import datetime, timezone


# Gemini 2.5 Flash pricing per 1M tokens (USD)
INPUT_COST_PER_1M = 0.075
OUTPUT_COST_PER_1M = 0.30

_BILLED_BACKENDS = {"gemini"}


def estimate_cost_usd(backend: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Estimate cost in USD; only the Gemini backend has a price table."""
    if backend not in _BILLED_BACKENDS:
        return 0.0
    return (prompt_tokens / 1_000_000) * INPUT_COST_PER_1M + (
        completion_tokens / 1_000_000
    ) * OUTPUT_COST_PER_1M


@dataclass
class TelemetryLogEntry:
    """Structured telemetry entry for one schedule generation run."""

    timestamp: str
    backend: str
    model: str
    latency_ms: float
    prompt_tokens: int
    completion_tokens: int
    estimated_cost_usd: float
    days_parsed: int
    success: bool

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "backend": self.backend,
                "model": self.model,
                "latency_ms": round(self.latency_ms, 2),
                "prompt_tokens": self.prompt_tokens,
                "completion_tokens": self.completion_tokens,
                "estimated_cost_usd": f"{self.estimated_cost_usd:.6f}",
                "days_parsed": self.days_parsed,
                "success": self.success,
            }
        )


def log_run(
    *,
    backend: str,
    model: str,
    latency_ms: float,
    prompt_tokens: int,
    completion_tokens: int,
    days_parsed: int,
    success: bool,
) -> None:
    """Print a structured JSON log line to stdout for one generation run."""
    entry = TelemetryLogEntry(
        timestamp=datetime.now(tz=timezone.utc).isoformat(),
        backend=backend,
        model=model,
        latency_ms=latency_ms,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        estimated_cost_usd=estimate_cost_usd(backend, prompt_tokens, completion_tokens),
        days_parsed=days_parsed,
        success=success,
    )
    print(entry.to_json(), flush=True)
