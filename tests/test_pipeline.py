# ABOUTME: Tests for generate_schedule: validation, RAG context wiring, output repair and telemetry.
# ABOUTME: Model calls and the knowledge lookup are mocked; the mock backend runs for real.

from datetime import date, timedelta
from unittest.mock import patch

import pytest

from core.config import MAX_SCHEDULE_DAYS
from drift.backends import ModelReply
from drift.errors import ModelBackendError, ScheduleFormatError
from drift.pipeline import generate_schedule, lookup_context, validate_request

TODAY = date(2026, 10, 19)  # Monday


@pytest.mark.parametrize(
    "objective,deadline,dedication,message",
    [
        ("   ", date(2026, 10, 20), "casual", "Objective cannot be empty"),
        ("Run", date(2026, 10, 20), "extreme", "Invalid dedication level"),
        ("Run", date(2026, 10, 18), "casual", "Deadline cannot be in the past"),
        ("Run", date(2027, 10, 19), "casual", "within"),
    ],
)
def test_validate_request_rejects(objective, deadline, dedication, message):
    with pytest.raises(ValueError, match=message):
        validate_request(objective, deadline, dedication, TODAY)


def test_validate_request_accepts_same_day_and_max_range():
    validate_request("Run", TODAY, "casual", TODAY)
    validate_request("Run", TODAY + timedelta(days=MAX_SCHEDULE_DAYS), "casual", TODAY)


def test_validate_request_rejects_one_day_past_max_range():
    with pytest.raises(ValueError, match="within"):
        validate_request("Run", TODAY + timedelta(days=MAX_SCHEDULE_DAYS + 1), "casual", TODAY)


@patch("drift.pipeline.log_run")
@patch("drift.pipeline.lookup_context", return_value=[])
def test_generate_schedule_with_mock_backend(mock_lookup, mock_log_run):
    result = generate_schedule(
        "Run a 10k race", date(2026, 10, 21), "moderate", today=TODAY, backend="mock"
    )

    assert result.start_date == TODAY
    assert result.end_date == date(2026, 10, 21)
    assert [d.date for d in result.days] == ["Mon Oct 19", "Tue Oct 20", "Wed Oct 21"]
    assert all(len(d.tasks) == 3 for d in result.days)
    assert result.raw_schedule.startswith("Mon Oct 19|")
    assert result.keywords == ["run", "race"]
    mock_lookup.assert_called_once_with(["run", "race"])
    kw = mock_log_run.call_args.kwargs
    assert kw["success"] is True
    assert kw["days_parsed"] == 3
    assert kw["backend"] == "mock"


@patch("drift.pipeline.log_run")
@patch("drift.pipeline.call_model")
@patch("drift.pipeline.lookup_context", return_value=["Increase mileage slowly."])
def test_generate_schedule_passes_context_and_cleans_output(mock_lookup, mock_call, mock_log_run):
    mock_call.return_value = ModelReply(
        "<think>plan</think>\nMonday, October 19: Jog 2k, Stretch, Foam roll\nThanks!",
        "test-model",
        100,
        20,
    )

    result = generate_schedule(
        "Run a 10k race", date(2026, 10, 20), "casual", today=TODAY, backend="ollama"
    )

    prompt = mock_call.call_args.args[2]
    assert "- Increase mileage slowly." in prompt
    assert result.raw_schedule == "Mon Oct 19|Jog 2k|Stretch;"
    assert result.context == ["Increase mileage slowly."]
    assert result.model == "test-model"
    assert mock_log_run.call_args.kwargs["prompt_tokens"] == 100


@patch("drift.pipeline.log_run")
@patch("drift.pipeline.call_model")
@patch("drift.pipeline.lookup_context", return_value=[])
def test_generate_schedule_unusable_output_logs_failure(mock_lookup, mock_call, mock_log_run):
    mock_call.return_value = ModelReply("Sorry, I can't help.", "test-model")

    with pytest.raises(ScheduleFormatError):
        generate_schedule("Run", date(2026, 10, 20), "casual", today=TODAY, backend="ollama")

    assert mock_log_run.call_args.kwargs["success"] is False
    assert mock_log_run.call_args.kwargs["days_parsed"] == 0


@patch("drift.pipeline.log_run")
@patch("drift.pipeline.call_model", side_effect=ModelBackendError("down"))
@patch("drift.pipeline.lookup_context", return_value=[])
def test_generate_schedule_backend_failure_propagates(mock_lookup, mock_call, mock_log_run):
    with pytest.raises(ModelBackendError):
        generate_schedule("Run", date(2026, 10, 20), "casual", today=TODAY, backend="ollama")
    assert mock_log_run.call_args.kwargs["success"] is False


@patch("drift.pipeline.call_model")
def test_generate_schedule_invalid_input_skips_model(mock_call):
    with pytest.raises(ValueError):
        generate_schedule("Run", date(2026, 10, 1), "casual", today=TODAY, backend="mock")
    mock_call.assert_not_called()


def test_lookup_context_without_keywords_skips_store():
    with patch("drift.pipeline.get_session") as mock_session:
        assert lookup_context([]) == []
    mock_session.assert_not_called()
