# ABOUTME: Tests for UI helpers (labels and captions for schedules and achievements).
# ABOUTME: Keeps UI logic testable without running Streamlit.

from ui.app import (
    _achievement_label,
    _dedication_counts,
    _format_date,
    _progress_caption,
    _schedule_label,
)


def test_format_date_handles_dates_datetimes_and_garbage():
    assert _format_date("2026-02-22") == "Feb 22, 2026"
    assert _format_date("2026-02-22T12:00:00Z") == "Feb 22, 2026"
    assert _format_date("2026-02-22 nonsense") == "2026-02-22"
    assert _format_date(None) == ""


def test_achievement_label_truncates_long_objective():
    achievement = {
        "name": "Marathon",
        "objective": "A" * 100,
        "completed_date": "2026-02-22T12:00:00+00:00",
    }
    label = _achievement_label(achievement, max_chars=20)
    assert label.startswith("Marathon: " + "A" * 20 + "…")
    assert "Completed on Feb 22, 2026" in label


def test_achievement_label_without_date():
    assert _achievement_label({"name": "Read 12 books", "objective": ""}) == "Read 12 books"


def test_schedule_label_and_progress_caption():
    schedule = {
        "goal": "Run a 10k",
        "start_date": "2026-10-19",
        "end_date": "2026-10-25",
        "overall_progress": 40,
        "completed_tasks": 4,
        "total_tasks": 10,
    }
    assert _schedule_label(schedule) == "Run a 10k (Oct 19, 2026 – Oct 25, 2026, 40%)"
    assert _progress_caption(schedule) == "4 of 10 tasks done · 40%"


def test_dedication_counts_in_display_order():
    stats = {"casual_count": 2, "intense_count": 1}
    assert _dedication_counts(stats) == [("Casual", 2), ("Moderate", 0), ("Intense", 1)]
