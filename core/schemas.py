# ABOUTME: Pydantic models for the schedule pipeline contract and shared response shapes.
# ABOUTME: Used by the drift pipeline and FastAPI request/response bodies.

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Dedication = Literal["casual", "moderate", "intense"]


class ScheduleDay(BaseModel):
    """One row of a schedule: a date label and its tasks."""

    date: str = Field(description="Day label, e.g. 'Mon May 26'.")
    tasks: list[str] = Field(min_length=1)


class GeneratedSchedule(BaseModel):
    """Cleaned output of one schedule generation run."""

    raw_schedule: str = Field(
        description="Delimited text, one 'Day Mon DD|task|task;' row per line."
    )
    days: list[ScheduleDay]
    start_date: date
    end_date: date
    dedication: Dedication
    backend: str
    model: str = ""
    keywords: list[str] = Field(default_factory=list)
    context: list[str] = Field(default_factory=list)


class TaskState(BaseModel):
    text: str
    done: bool = False


class DayProgress(BaseModel):
    date: str
    tasks: list[TaskState]
    progress: int = Field(ge=0, le=100)


class ScheduleProgress(BaseModel):
    """Completion totals for a schedule's checkbox grid."""

    days: list[DayProgress]
    total_tasks: int
    completed_tasks: int
    overall_progress: int = Field(ge=0, le=100)


class AchievementStats(BaseModel):
    total_achievements: int = 0
    total_tasks: int = 0
    casual_count: int = 0
    moderate_count: int = 0
    intense_count: int = 0
