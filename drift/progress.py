# ABOUTME: Checkbox state and completion percentages for a parsed schedule.
# ABOUTME: Completion is a list of per-day lists of booleans aligned with ScheduleDay.tasks.

from core.schemas import DayProgress, ScheduleDay, ScheduleProgress, TaskState


def percent(done: int, total: int) -> int:
    """Whole-number percentage rounded half up; 0 when there is nothing to do."""
    if total <= 0:
        return 0
    return (done * 200 + total) // (2 * total)


def empty_completion(days: list[ScheduleDay]) -> list[list[bool]]:
    return [[False] * len(day.tasks) for day in days]


def align_completion(days: list[ScheduleDay], completed: list[list[bool]] | None) -> list[list[bool]]:
    """Pad or trim stored checkbox state so it matches the schedule's shape."""
    completed = completed or []
    aligned = []
    for i, day in enumerate(days):
        row = list(completed[i]) if i < len(completed) else []
        row = [bool(v) for v in row[: len(day.tasks)]]
        row += [False] * (len(day.tasks) - len(row))
        aligned.append(row)
    return aligned


def toggle_task(
    days: list[ScheduleDay],
    completed: list[list[bool]],
    day_index: int,
    task_index: int,
    done: bool | None = None,
) -> list[list[bool]]:
    """Return new state with one checkbox set to `done`, or flipped when done is None.

    Raises IndexError for a day or task that does not exist.
    """
    if not 0 <= day_index < len(days):
        raise IndexError(f"Day {day_index} is out of range")
    if not 0 <= task_index < len(days[day_index].tasks):
        raise IndexError(f"Task {task_index} is out of range for day {day_index}")
    updated = align_completion(days, completed)
    current = updated[day_index][task_index]
    updated[day_index][task_index] = (not current) if done is None else done
    return updated


def schedule_progress(days: list[ScheduleDay], completed: list[list[bool]] | None) -> ScheduleProgress:
    aligned = align_completion(days, completed)
    day_progress = []
    total = done = 0
    for day, row in zip(days, aligned):
        day_done = sum(row)
        total += len(day.tasks)
        done += day_done
        day_progress.append(
            DayProgress(
                date=day.date,
                tasks=[TaskState(text=t, done=d) for t, d in zip(day.tasks, row)],
                progress=percent(day_done, len(day.tasks)),
            )
        )
    return ScheduleProgress(
        days=day_progress,
        total_tasks=total,
        completed_tasks=done,
        overall_progress=percent(done, total),
    )
