# ABOUTME: Schedule generation pipeline: validate, extract keywords, RAG lookup, prompt, model call, repair.
# ABOUTME: generate_schedule() returns a GeneratedSchedule; telemetry for every model call is logged to stdout.

import logging
import time
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from core.config import (
    DEDICATION_LEVELS,
    KEYWORD_EXTRACTION,
    LLM_BACKEND,
    MAX_SCHEDULE_DAYS,
    RAG_ENABLED,
    RAG_TOP_K,
)
from core.database import get_session
from core.schemas import GeneratedSchedule
from core.telemetry import log_run
from drift.backends import ScheduleRequest, call_model
from drift.errors import ModelBackendError, ScheduleFormatError
from drift.keywords import extract_keywords
from drift.knowledge import search_snippets
from drift.prompts import SYSTEM_INSTRUCTION, build_schedule_prompt, sanitize_user_input
from drift.schedule_format import clean_schedule_output, parse_schedule

logger = logging.getLogger(__name__)


def validate_request(objective: str, deadline: date, dedication: str, today: date) -> None:
    """Raise ValueError with a user-facing message when the request cannot be scheduled."""
    if not sanitize_user_input(objective):
        raise ValueError("Objective cannot be empty")
    if dedication not in DEDICATION_LEVELS:
        raise ValueError("Invalid dedication level")
    if deadline < today:
        raise ValueError("Deadline cannot be in the past")
    if (deadline - today).days > MAX_SCHEDULE_DAYS:
        raise ValueError(f"Deadline must be within {MAX_SCHEDULE_DAYS} days")


def lookup_context(keywords: list[str], limit: int = RAG_TOP_K) -> list[str]:
    """Snippet texts relevant to the keywords; an unavailable store yields no context."""
    if not keywords:
        return []
    try:
        with get_session() as session:
            return [s.content for s in search_snippets(session, keywords, limit)]
    except SQLAlchemyError:
        logger.exception("Knowledge lookup failed; continuing without context")
        return []


def generate_schedule(
    objective: str,
    deadline: date,
    dedication: str,
    today: date | None = None,
    backend: str | None = None,
) -> GeneratedSchedule:
    """Produce a cleaned schedule from today through the deadline.

    Raises ValueError for invalid input, ModelBackendError when the model call
    fails and ScheduleFormatError when no schedule row can be recovered.
    """
    today = today or date.today()
    backend = backend or LLM_BACKEND
    validate_request(objective, deadline, dedication, today)

    keywords = extract_keywords(objective) if KEYWORD_EXTRACTION else []
    context = lookup_context(keywords) if RAG_ENABLED else []
    prompt = build_schedule_prompt(objective, today, deadline, dedication, context)
    request = ScheduleRequest(objective, today, deadline, dedication)

    start = time.perf_counter()
    model = ""
    prompt_tokens = completion_tokens = 0
    days = []
    try:
        reply = call_model(backend, SYSTEM_INSTRUCTION, prompt, request)
        model = reply.model
        prompt_tokens = reply.prompt_tokens
        completion_tokens = reply.completion_tokens
        raw_schedule = clean_schedule_output(reply.text, today, deadline, dedication)
        days = parse_schedule(raw_schedule)
    except (ModelBackendError, ScheduleFormatError):
        log_run(
            backend=backend,
            model=model,
            latency_ms=(time.perf_counter() - start) * 1000,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            days_parsed=0,
            success=False,
        )
        raise

    log_run(
        backend=backend,
        model=model,
        latency_ms=(time.perf_counter() - start) * 1000,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        days_parsed=len(days),
        success=True,
    )
    return GeneratedSchedule(
        raw_schedule=raw_schedule,
        days=days,
        start_date=today,
        end_date=deadline,
        dedication=dedication,
        backend=backend,
        model=model,
        keywords=keywords,
        context=context,
    )
