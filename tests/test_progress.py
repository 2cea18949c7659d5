# ABOUTME: Tests for checkbox state handling and completion percentages.
# ABOUTME: Covers rounding, toggling, shape alignment and per-day / overall progress.

import pytest

from core.schemas import ScheduleDay
from drift.progress import (
    align_completion,
    empty_completion,
    percent,
    schedule_progress,
    toggle_task,
)

DAYS = [
    ScheduleDay(date="Mon May 26", tasks=["A", "B", "C"]),
    ScheduleDay(date="Tue May 27", tasks=["D"]),
]


@pytest.mark.parametrize(
    "done,total,expected",
    [(0, 0, 0), (0, 4, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (3, 3, 100)],
)
def test_percent_rounds_half_up(done, total, expected):
    assert percent(done, total) == expected


def test_empty_completion_matches_shape():
    assert empty_completion(DAYS) == [[False, False, False], [False]]


def test_align_completion_pads_and_trims():
    assert align_completion(DAYS, [[True, True, True, True]]) == [[True, True, True], [False]]
    assert align_completion(DAYS, None) == empty_completion(DAYS)


def test_toggle_task_flips_and_sets():
    state = toggle_task(DAYS, empty_completion(DAYS), 0, 1)
    assert state == [[False, True, False], [False]]
    state = toggle_task(DAYS, state, 0, 1)
    assert state[0][1] is False
    state = toggle_task(DAYS, state, 1, 0, done=True)
    state = toggle_task(DAYS, state, 1, 0, done=True)
    assert state[1] == [True]


def test_toggle_task_does_not_mutate_input():
    original = empty_completion(DAYS)
    toggle_task(DAYS, original, 0, 0)
    assert original == empty_completion(DAYS)


@pytest.mark.parametrize("day_index,task_index", [(2, 0), (-1, 0), (1, 1), (0, 3)])
def test_toggle_task_out_of_range_raises(day_index, task_index):
    with pytest.raises(IndexError):
        toggle_task(DAYS, empty_completion(DAYS), day_index, task_index)


def test_schedule_progress_totals():
    progress = schedule_progress(DAYS, [[True, False, False], [True]])
    assert progress.total_tasks == 4
    assert progress.completed_tasks == 2
    assert progress.overall_progress == 50
    assert [d.progress for d in progress.days] == [33, 100]
    assert progress.days[0].tasks[0].text == "A"
    assert progress.days[0].tasks[0].done is True


def test_schedule_progress_all_done_is_100():
    progress = schedule_progress(DAYS, [[True, True, True], [True]])
    assert progress.overall_progress == 100
