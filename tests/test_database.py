# ABOUTME: Pytest tests for the SQLModel tables on an in-memory SQLite session.
# ABOUTME: Verifies create/read of users, goals, schedules and achievements and unique constraints.

import json
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine, select
from sqlmodel.pool import StaticPool

from core.database import Achievement, Goal, KnowledgeSnippet, Schedule, User


@pytest.fixture
def in_memory_engine():
    """Engine for in-memory SQLite; one DB per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(in_memory_engine):
    with Session(in_memory_engine) as session:
        yield session


@pytest.fixture
def user(session):
    u = User(username="ada", email="ada@example.com", password_hash="x")
    session.add(u)
    session.commit()
    session.refresh(u)
    return u


def test_goal_create_save_and_retrieve(session, user):
    goal = Goal(
        user_id=user.id,
        name="First 10k",
        objective="Run a 10k race",
        deadline=date(2026, 12, 1),
        dedication="moderate",
        steps=json.dumps(["Buy shoes"]),
    )
    session.add(goal)
    session.commit()

    read = session.get(Goal, goal.id)
    assert read.name == "First 10k"
    assert read.deadline == date(2026, 12, 1)
    assert json.loads(read.steps) == ["Buy shoes"]


def test_schedule_defaults(session, user):
    schedule = Schedule(
        user_id=user.id,
        goal="Run a 10k race",
        start_date=date(2026, 10, 19),
        end_date=date(2026, 10, 20),
        intensity="casual",
        raw_schedule="Mon Oct 19|Jog 20 minutes;\nTue Oct 20|Stretch;",
    )
    session.add(schedule)
    session.commit()

    read = session.get(Schedule, schedule.id)
    assert read.goal_id is None
    assert read.completed == "[]"
    assert read.overall_progress == 0


def test_achievement_roundtrip(session, user):
    achievement = Achievement(
        user_id=user.id,
        name="10k done",
        objective="Run a 10k race",
        deadline="2026-12-01",
        dedication="intense",
        completed_date=datetime(2026, 11, 30, tzinfo=timezone.utc),
        total_tasks=42,
    )
    session.add(achievement)
    session.commit()

    read = session.exec(select(Achievement).where(Achievement.user_id == user.id)).one()
    assert read.total_tasks == 42
    assert json.loads(read.images) == []


def test_user_email_is_unique(session, user):
    session.add(User(username="other", email="ada@example.com", password_hash="y"))
    with pytest.raises(IntegrityError):
        session.commit()


def test_knowledge_topic_is_unique(session):
    session.add(KnowledgeSnippet(topic="running", content="a"))
    session.commit()
    session.add(KnowledgeSnippet(topic="running", content="b"))
    with pytest.raises(IntegrityError):
        session.commit()
