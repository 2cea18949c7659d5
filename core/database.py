# ABOUTME: SQLModel tables (users, goals, schedules, achievements, knowledge snippets) and SQLite session factory.
# ABOUTME: get_session yields a session; init_db creates the schema. List columns hold JSON strings.

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Session, SQLModel, create_engine

from core.config import DB_PATH


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """User account for authentication. Passwords stored as hashes only."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    password_hash: str = Field()
    created_at: datetime = Field(default_factory=_utcnow)


class Goal(SQLModel, table=True):
    """A user's objective with deadline and dedication level."""

    __tablename__ = "goals"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    name: str
    objective: str
    deadline: date
    dedication: str
    steps: str = "[]"  # JSON array of strings
    created_at: datetime = Field(default_factory=_utcnow)


class Schedule(SQLModel, table=True):
    """Generated day-by-day schedule plus checkbox state."""

    __tablename__ = "schedules"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    goal_id: Optional[UUID] = Field(default=None, foreign_key="goals.id", index=True)
    goal: str
    start_date: date
    end_date: date
    intensity: str
    raw_schedule: str
    completed: str = "[]"  # JSON array of per-day arrays of booleans
    overall_progress: int = 0
    backend: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


class Achievement(SQLModel, table=True):
    """A completed goal saved to the user's archive."""

    __tablename__ = "achievements"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    name: str
    objective: str
    deadline: str
    dedication: str
    completed_date: datetime = Field(index=True)
    total_tasks: int
    images: str = "[]"  # JSON array of object storage keys
    created_at: datetime = Field(default_factory=_utcnow)


class KnowledgeSnippet(SQLModel, table=True):
    """Reference text appended to schedule prompts when its keywords match the goal."""

    __tablename__ = "knowledge_snippets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    topic: str = Field(unique=True, index=True)
    content: str
    keywords: str = "[]"  # JSON array of lower-case keywords
    created_at: datetime = Field(default_factory=_utcnow)


_engine = create_engine(
    f"sqlite:///{DB_PATH}",
    connect_args={"check_same_thread": False},
)


def init_db() -> None:
    """Create all tables if they do not exist."""
    SQLModel.metadata.create_all(_engine)


@contextmanager
def get_session():
    """Yield an SQLite session for the default engine."""
    init_db()
    with Session(_engine) as session:
        yield session
