# ABOUTME: Google ADK Agent and Runner for the hosted (Gemini) schedule backend.
# ABOUTME: run_agent() sends one prompt in a fresh session and returns (text, prompt_tokens, completion_tokens).

import uuid
from datetime import date

from google.adk import Agent, Runner
from google.adk.agents.readonly_context import ReadonlyContext
from google.adk.sessions.in_memory_session_service import InMemorySessionService
from google.genai import types

from core.config import GEMINI_MODEL
from drift.errors import ModelBackendError
from drift.prompts import SYSTEM_INSTRUCTION

APP_NAME = "drift"
_USER_ID = "drift"


def _schedule_instruction_provider(_ctx: ReadonlyContext) -> str:
    """Return the planner instruction with the current date so relative deadlines resolve."""
    today = date.today().isoformat()
    return f"{SYSTEM_INSTRUCTION}\n\nToday's date is {today}."


def _create_agent() -> Agent:
    return Agent(
        model=GEMINI_MODEL,
        name="drift_planner",
        instruction=_schedule_instruction_provider,
    )


root_agent = _create_agent()
_session_service = InMemorySessionService()
_runner = Runner(
    agent=root_agent,
    app_name=APP_NAME,
    session_service=_session_service,
    auto_create_session=True,
)


def run_agent(prompt: str) -> tuple[str, int, int]:
    """Run the planner agent once. Raises ModelBackendError when no text comes back."""
    content = types.Content(role="user", parts=[types.Part(text=prompt)])
    prompt_tokens = 0
    completion_tokens = 0
    final_text: str | None = None

    for event in _runner.run(
        user_id=_USER_ID,
        session_id=str(uuid.uuid4()),
        new_message=content,
    ):
        if event.usage_metadata:
            prompt_tokens += getattr(event.usage_metadata, "prompt_token_count", 0) or 0
            completion_tokens += (
                getattr(event.usage_metadata, "candidates_token_count", 0) or 0
            )
        if event.is_final_response() and event.content and event.content.parts:
            for part in event.content.parts:
                if part.text:
                    final_text = part.text.strip()
                    break
            if final_text:
                break

    if not final_text:
        raise ModelBackendError("Agent returned no text")
    return final_text, prompt_tokens, completion_tokens
