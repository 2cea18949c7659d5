# ABOUTME: Language model backends for schedule text: gemini (ADK), huggingface, ollama, mock.
# ABOUTME: call_model() dispatches on backend name and returns a ModelReply; failures raise ModelBackendError.

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict

import requests

from core.config import (
    GEMINI_MODEL,
    HF_API_TOKEN,
    HF_BASE_URL,
    HF_MODEL,
    LLM_TIMEOUT,
    OLLAMA_BASE_URL,
    OLLAMA_MODEL,
    TASKS_PER_DAY,
)
from drift.errors import ModelBackendError

logger = logging.getLogger(__name__)

BACKENDS = ("gemini", "huggingface", "ollama", "mock")


@dataclass
class ScheduleRequest:
    objective: str
    start_date: date
    end_date: date
    dedication: str


@dataclass
class ModelReply:
    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


def _gemini(system: str, prompt: str, request: ScheduleRequest) -> ModelReply:
    # Imported here so the other backends work without Google credentials configured.
    from drift.agent import run_agent

    text, prompt_tokens, completion_tokens = run_agent(prompt)
    return ModelReply(text, GEMINI_MODEL, prompt_tokens, completion_tokens)


def _huggingface(system: str, prompt: str, request: ScheduleRequest) -> ModelReply:
    """Hosted inference via the OpenAI-style /chat/completions route."""
    if not HF_API_TOKEN:
        raise ModelBackendError("HF_API_TOKEN is not set")
    headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {HF_API_TOKEN}",
    }
    payload: Dict[str, Any] = {
        "model": HF_MODEL,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        "temperature": 0.6,
        "max_tokens": 4096,
        "stream": False,
    }
    try:
        resp = requests.post(
            f"{HF_BASE_URL}/chat/completions",
            headers=headers,
            json=payload,
            timeout=LLM_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
        text = data["choices"][0]["message"]["content"] or ""
    except (requests.RequestException, ValueError, KeyError, IndexError) as e:
        raise ModelBackendError(f"Hugging Face request failed: {e}") from e
    usage = data.get("usage") or {}
    return ModelReply(
        text,
        HF_MODEL,
        usage.get("prompt_tokens", 0) or 0,
        usage.get("completion_tokens", 0) or 0,
    )


def _ollama(system: str, prompt: str, request: ScheduleRequest) -> ModelReply:
    """Local Ollama server, non-streaming /api/generate."""
    payload: Dict[str, Any] = {
        "model": OLLAMA_MODEL,
        "system": system,
        "prompt": prompt,
        "stream": False,
        "options": {"temperature": 0.6},
    }
    try:
        resp = requests.post(
            f"{OLLAMA_BASE_URL}/api/generate", json=payload, timeout=LLM_TIMEOUT
        )
        resp.raise_for_status()
        data = resp.json()
        text = data["response"]
    except (requests.RequestException, ValueError, KeyError) as e:
        raise ModelBackendError(f"Ollama request failed: {e}") from e
    return ModelReply(
        text,
        OLLAMA_MODEL,
        data.get("prompt_eval_count", 0) or 0,
        data.get("eval_count", 0) or 0,
    )


_MOCK_TASKS = [
    "Review your plan for {focus}",
    "Spend 30 focused minutes on {focus}",
    "Note one obstacle and how to beat it",
    "Practice the hardest part of {focus}",
    "Log today's progress",
    "Study one new resource about {focus}",
    "Share progress with an accountability partner",
]


def mock_schedule_text(request: ScheduleRequest) -> str:
    """Deterministic schedule in the model's long-date style, for offline development."""
    focus = " ".join(request.objective.split()[:6]) or "your goal"
    per_day = TASKS_PER_DAY[request.dedication][1]
    lines = []
    day = request.start_date
    i = 0
    while day <= request.end_date:
        tasks = []
        for _ in range(per_day):
            tasks.append(_MOCK_TASKS[i % len(_MOCK_TASKS)].format(focus=focus))
            i += 1
        label = f"{day:%A}, {day:%B} {day.day}"
        lines.append(f"{label}|{'|'.join(tasks)};")
        day += timedelta(days=1)
    return "\n".join(lines)


def _mock(system: str, prompt: str, request: ScheduleRequest) -> ModelReply:
    return ModelReply(mock_schedule_text(request), "mock")


_DISPATCH = {
    "gemini": _gemini,
    "huggingface": _huggingface,
    "ollama": _ollama,
    "mock": _mock,
}


def call_model(backend: str, system: str, prompt: str, request: ScheduleRequest) -> ModelReply:
    """Send the prompt to the named backend. Raises ModelBackendError on failure."""
    handler = _DISPATCH.get(backend)
    if handler is None:
        raise ModelBackendError(
            f"Unknown LLM backend {backend!r}; expected one of {', '.join(BACKENDS)}"
        )
    logger.info("Requesting schedule from %s backend", backend)
    reply = handler(system, prompt, request)
    if not reply.text or not reply.text.strip():
        raise ModelBackendError(f"{backend} backend returned an empty response")
    return reply
