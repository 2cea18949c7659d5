# ABOUTME: FastAPI app: /api/auth (register, login, profile), /api/goals, /api/schedules, /api/achievements.
# ABOUTME: 400 on invalid input, 404 for other users' records, 502 on model/format failure. Auth via JWT.

import json
import logging
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, FastAPI, File, Form, Query, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from core.auth import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    get_current_user,
    hash_password,
    normalize_email,
    validate_email,
    validate_password_length,
    validate_username,
    verify_password,
)
from core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    CORS_ORIGINS,
    DEDICATION_LEVELS,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_UPLOAD_BYTES,
    MAX_UPLOAD_FILES,
)
from core.database import Achievement, Goal, Schedule, User, get_session
from core.schemas import AchievementStats, Dedication
from core.storage import (
    StorageError,
    delete_images,
    presigned_url,
    storage_enabled,
    upload_image,
    validate_image,
)
from drift.errors import ModelBackendError, ScheduleFormatError
from drift.pipeline import generate_schedule
from drift.progress import empty_completion, schedule_progress, toggle_task
from drift.schedule_format import parse_schedule


def _message(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


# ---------------------------------------------------------------- auth

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterResponse(BaseModel):
    id: str
    username: str
    email: str
    access_token: str
    token_type: str
    expires_in: int


class LoginResponse(BaseModel):
    id: str
    username: str
    email: str
    access_token: str
    token_type: str
    expires_in: int


@auth_router.post("/register", status_code=201, response_model=RegisterResponse)
def post_register(req: RegisterRequest):
    """Create a new user and return an access token so the client can skip calling login."""
    try:
        validate_username(req.username)
        validate_email(req.email)
        validate_password_length(req.password)
    except ValueError as e:
        return _message(400, str(e))
    try:
        with get_session() as session:
            user = User(
                username=req.username.strip(),
                email=normalize_email(req.email),
                password_hash=hash_password(req.password),
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return RegisterResponse(
                id=str(user.id),
                username=user.username,
                email=user.email,
                access_token=create_access_token(user.id),
                token_type="bearer",
                expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            )
    except IntegrityError:
        return _message(409, "User already exists")
    except SQLAlchemyError:
        logging.exception("post_register failed (database error)")
        return _message(500, "Could not create account.")


@auth_router.post("/login", response_model=LoginResponse)
def post_login(req: LoginRequest):
    """Authenticate by email and return a JWT. Constant-time password check avoids email enumeration."""
    with get_session() as session:
        stmt = select(User).where(User.email == normalize_email(req.email))
        user = session.exec(stmt).first()
    password_hash = user.password_hash if user else DUMMY_PASSWORD_HASH
    if not verify_password(req.password, password_hash) or user is None:
        return _message(401, "Invalid email or password")
    return LoginResponse(
        id=str(user.id),
        username=user.username,
        email=user.email,
        access_token=create_access_token(user.id),
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@auth_router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)):
    return {
        "id": str(current_user.id),
        "username": current_user.username,
        "email": current_user.email,
        "created_at": current_user.created_at.isoformat(),
    }


# ---------------------------------------------------------------- goals

goals_router = APIRouter(prefix="/api/goals", tags=["goals"])


class GoalCreateRequest(BaseModel):
    name: str
    objective: str
    deadline: date
    dedication: Dedication
    steps: list[str] = Field(default_factory=list)


def _goal_to_json(goal: Goal) -> dict:
    return {
        "id": str(goal.id),
        "name": goal.name,
        "objective": goal.objective,
        "deadline": goal.deadline.isoformat(),
        "dedication": goal.dedication,
        "steps": json.loads(goal.steps) if goal.steps else [],
        "created_at": goal.created_at.isoformat(),
    }


def _owned(session, model, record_id: UUID, user_id: UUID):
    """Return the row if it exists and belongs to user_id, else None."""
    row = session.get(model, record_id)
    if row is None or row.user_id != user_id:
        return None
    return row


@goals_router.post("", status_code=201)
def post_goal(req: GoalCreateRequest, current_user: User = Depends(get_current_user)):
    """Persist a goal for the authenticated user."""
    if not req.name.strip() or not req.objective.strip():
        return _message(400, "Please provide all required fields")
    try:
        with get_session() as session:
            goal = Goal(
                user_id=current_user.id,
                name=req.name.strip(),
                objective=req.objective.strip(),
                deadline=req.deadline,
                dedication=req.dedication,
                steps=json.dumps([s.strip() for s in req.steps if s.strip()]),
            )
            session.add(goal)
            session.commit()
            session.refresh(goal)
            return _goal_to_json(goal)
    except SQLAlchemyError:
        logging.exception("post_goal failed (database error)")
        return _message(500, "Could not save goal.")


@goals_router.get("")
def get_goals(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=0, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
):
    """List the user's goals, newest first. Returns { goals: [...], total: N }."""
    try:
        with get_session() as session:
            total = session.exec(
                select(func.count()).select_from(Goal).where(Goal.user_id == current_user.id)
            ).one()
            stmt = (
                select(Goal)
                .where(Goal.user_id == current_user.id)
                .order_by(Goal.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            goals = list(session.exec(stmt))
        return {"goals": [_goal_to_json(g) for g in goals], "total": total}
    except SQLAlchemyError:
        logging.exception("get_goals failed (database error)")
        return _message(500, "Could not load goals.")


@goals_router.get("/{goal_id}")
def get_goal(goal_id: UUID, current_user: User = Depends(get_current_user)):
    with get_session() as session:
        goal = _owned(session, Goal, goal_id, current_user.id)
        if goal is None:
            return _message(404, "Goal not found")
        return _goal_to_json(goal)


@goals_router.delete("/{goal_id}", status_code=204)
def delete_goal(goal_id: UUID, current_user: User = Depends(get_current_user)):
    """Delete a goal; schedules generated from it are kept and unlinked."""
    try:
        with get_session() as session:
            goal = _owned(session, Goal, goal_id, current_user.id)
            if goal is None:
                return _message(404, "Goal not found")
            linked = list(session.exec(select(Schedule).where(Schedule.goal_id == goal_id)))
            for schedule in linked:
                schedule.goal_id = None
                session.add(schedule)
            session.delete(goal)
            session.commit()
    except SQLAlchemyError:
        logging.exception("delete_goal failed (database error)")
        return _message(500, "Could not delete goal.")
    return Response(status_code=204)


# ---------------------------------------------------------------- schedules

schedules_router = APIRouter(prefix="/api/schedules", tags=["schedules"])


class ScheduleGenerateRequest(BaseModel):
    objective: str
    deadline: date
    dedication: Dedication
    goal_id: Optional[UUID] = None


class TaskToggleRequest(BaseModel):
    day_index: int
    task_index: int
    done: Optional[bool] = None


def _schedule_to_json(schedule: Schedule) -> dict:
    days = parse_schedule(schedule.raw_schedule)
    progress = schedule_progress(days, json.loads(schedule.completed or "[]"))
    return {
        "id": str(schedule.id),
        "goal_id": str(schedule.goal_id) if schedule.goal_id else None,
        "goal": schedule.goal,
        "start_date": schedule.start_date.isoformat(),
        "end_date": schedule.end_date.isoformat(),
        "intensity": schedule.intensity,
        "raw_schedule": schedule.raw_schedule,
        "days": [d.model_dump() for d in progress.days],
        "total_tasks": progress.total_tasks,
        "completed_tasks": progress.completed_tasks,
        "overall_progress": progress.overall_progress,
        "backend": schedule.backend,
        "created_at": schedule.created_at.isoformat(),
    }


@schedules_router.post("/generate", status_code=201)
def post_generate_schedule(
    req: ScheduleGenerateRequest, current_user: User = Depends(get_current_user)
):
    """Generate a day-by-day schedule from today to the deadline and save it for the user."""
    if req.goal_id is not None:
        with get_session() as session:
            if _owned(session, Goal, req.goal_id, current_user.id) is None:
                return _message(404, "Goal not found")
    try:
        result = generate_schedule(req.objective, req.deadline, req.dedication)
    except ScheduleFormatError as e:
        logging.warning("Model output could not be repaired: %s", e)
        return _message(502, "AI model returned a schedule that could not be read.")
    except ValueError as e:
        return _message(400, str(e))
    except ModelBackendError:
        logging.exception("generate_schedule failed (model backend)")
        return _message(502, "AI model failed to generate a valid response.")
    except Exception:
        logging.exception("generate_schedule failed unexpectedly")
        return _message(502, "AI model failed to generate a valid response.")
    try:
        with get_session() as session:
            schedule = Schedule(
                user_id=current_user.id,
                goal_id=req.goal_id,
                goal=req.objective.strip(),
                start_date=result.start_date,
                end_date=result.end_date,
                intensity=result.dedication,
                raw_schedule=result.raw_schedule,
                completed=json.dumps(empty_completion(result.days)),
                overall_progress=0,
                backend=result.backend,
            )
            session.add(schedule)
            session.commit()
            session.refresh(schedule)
            return _schedule_to_json(schedule)
    except SQLAlchemyError:
        logging.exception("post_generate_schedule failed (database error)")
        return _message(500, "Could not save schedule.")


@schedules_router.get("")
def get_schedules(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=0, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
):
    """List the user's schedules, newest first. Returns { schedules: [...], total: N }."""
    try:
        with get_session() as session:
            total = session.exec(
                select(func.count())
                .select_from(Schedule)
                .where(Schedule.user_id == current_user.id)
            ).one()
            stmt = (
                select(Schedule)
                .where(Schedule.user_id == current_user.id)
                .order_by(Schedule.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            schedules = list(session.exec(stmt))
        return {"schedules": [_schedule_to_json(s) for s in schedules], "total": total}
    except SQLAlchemyError:
        logging.exception("get_schedules failed (database error)")
        return _message(500, "Could not load schedules.")


@schedules_router.get("/{schedule_id}")
def get_schedule(schedule_id: UUID, current_user: User = Depends(get_current_user)):
    with get_session() as session:
        schedule = _owned(session, Schedule, schedule_id, current_user.id)
        if schedule is None:
            return _message(404, "Schedule not found")
        return _schedule_to_json(schedule)


@schedules_router.patch("/{schedule_id}/tasks")
def patch_schedule_task(
    schedule_id: UUID,
    req: TaskToggleRequest,
    current_user: User = Depends(get_current_user),
):
    """Check or uncheck one task (toggle when `done` is omitted) and return the updated schedule."""
    try:
        with get_session() as session:
            schedule = _owned(session, Schedule, schedule_id, current_user.id)
            if schedule is None:
                return _message(404, "Schedule not found")
            days = parse_schedule(schedule.raw_schedule)
            try:
                completed = toggle_task(
                    days,
                    json.loads(schedule.completed or "[]"),
                    req.day_index,
                    req.task_index,
                    req.done,
                )
            except IndexError as e:
                return _message(400, str(e))
            schedule.completed = json.dumps(completed)
            schedule.overall_progress = schedule_progress(days, completed).overall_progress
            session.add(schedule)
            session.commit()
            session.refresh(schedule)
            return _schedule_to_json(schedule)
    except SQLAlchemyError:
        logging.exception("patch_schedule_task failed (database error)")
        return _message(500, "Could not update task.")


@schedules_router.delete("/{schedule_id}", status_code=204)
def delete_schedule(schedule_id: UUID, current_user: User = Depends(get_current_user)):
    try:
        with get_session() as session:
            schedule = _owned(session, Schedule, schedule_id, current_user.id)
            if schedule is None:
                return _message(404, "Schedule not found")
            session.delete(schedule)
            session.commit()
    except SQLAlchemyError:
        logging.exception("delete_schedule failed (database error)")
        return _message(500, "Could not delete schedule.")
    return Response(status_code=204)


# ---------------------------------------------------------------- achievements

achievements_router = APIRouter(prefix="/api/achievements", tags=["achievements"])


def _image_urls(keys: list[str]) -> list[str]:
    if not keys or not storage_enabled():
        return []
    try:
        return [presigned_url(k) for k in keys]
    except StorageError:
        logging.exception("Could not sign achievement image URLs")
        return []


def _achievement_to_json(achievement: Achievement) -> dict:
    images = json.loads(achievement.images) if achievement.images else []
    return {
        "id": str(achievement.id),
        "name": achievement.name,
        "objective": achievement.objective,
        "deadline": achievement.deadline,
        "dedication": achievement.dedication,
        "completed_date": achievement.completed_date.isoformat(),
        "total_tasks": achievement.total_tasks,
        "images": images,
        "image_urls": _image_urls(images),
        "created_at": achievement.created_at.isoformat(),
    }


def _parse_completed_date(raw: str) -> datetime:
    parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@achievements_router.get("/stats")
def get_achievement_stats(current_user: User = Depends(get_current_user)):
    """Totals across the user's achievements, with a count per dedication level."""
    try:
        with get_session() as session:
            rows = session.exec(
                select(
                    Achievement.dedication,
                    func.count(),
                    func.sum(Achievement.total_tasks),
                )
                .where(Achievement.user_id == current_user.id)
                .group_by(Achievement.dedication)
            ).all()
    except SQLAlchemyError:
        logging.exception("get_achievement_stats failed (database error)")
        return _message(500, "Failed to fetch achievement statistics", success=False)
    stats = AchievementStats()
    for dedication, count, tasks in rows:
        stats.total_achievements += count
        stats.total_tasks += tasks or 0
        if dedication in DEDICATION_LEVELS:
            setattr(stats, f"{dedication}_count", count)
    return {"success": True, "stats": stats.model_dump()}


@achievements_router.get("")
def get_achievements(current_user: User = Depends(get_current_user)):
    """All of the user's achievements, most recently completed first."""
    try:
        with get_session() as session:
            stmt = (
                select(Achievement)
                .where(Achievement.user_id == current_user.id)
                .order_by(Achievement.completed_date.desc())
            )
            achievements = list(session.exec(stmt))
    except SQLAlchemyError:
        logging.exception("get_achievements failed (database error)")
        return _message(500, "Failed to fetch achievements", success=False)
    return {"success": True, "achievements": [_achievement_to_json(a) for a in achievements]}


def _discard_images(keys: list[str]) -> None:
    """Best-effort removal of photos uploaded for an achievement that was not saved."""
    if not keys:
        return
    try:
        delete_images(keys)
    except StorageError:
        logging.exception("Could not remove orphaned images %s", keys)


@achievements_router.post("", status_code=201)
def post_achievement(
    name: Optional[str] = Form(None),
    objective: Optional[str] = Form(None),
    deadline: Optional[str] = Form(None),
    dedication: Optional[str] = Form(None),
    completed_date: Optional[str] = Form(None),
    total_tasks: Optional[int] = Form(None),
    schedule_id: Optional[UUID] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
):
    """Save a completed goal with up to MAX_UPLOAD_FILES photos (multipart form)."""
    if not all(
        v is not None and str(v).strip()
        for v in (name, objective, deadline, dedication, completed_date, total_tasks)
    ):
        return _message(400, "All fields are required", success=False)
    if dedication not in DEDICATION_LEVELS:
        return _message(400, "Invalid dedication level", success=False)
    if total_tasks < 1:
        return _message(400, "Total tasks must be at least 1", success=False)
    try:
        completed_at = _parse_completed_date(completed_date)
    except ValueError:
        return _message(400, "Invalid completed date", success=False)

    uploads = [f for f in (images or []) if f.filename]
    if len(uploads) > MAX_UPLOAD_FILES:
        return _message(400, f"At most {MAX_UPLOAD_FILES} images are allowed", success=False)
    payloads = []
    for upload in uploads:
        # One byte past the limit is enough to reject an oversized file.
        data = upload.file.read(MAX_UPLOAD_BYTES + 1)
        try:
            validate_image(upload.content_type, len(data))
        except ValueError as e:
            return _message(400, str(e), success=False)
        payloads.append((data, upload.filename, upload.content_type))
    if payloads and not storage_enabled():
        return _message(503, "Photo uploads are not configured.", success=False)

    with get_session() as session:
        if schedule_id is not None:
            schedule = _owned(session, Schedule, schedule_id, current_user.id)
            if schedule is None:
                return _message(404, "Schedule not found", success=False)
            if schedule.overall_progress < 100:
                return _message(400, "Schedule is not complete yet", success=False)

    keys: list[str] = []
    try:
        for data, filename, content_type in payloads:
            keys.append(upload_image(data, filename, content_type))
    except StorageError:
        logging.exception("post_achievement failed (image upload)")
        _discard_images(keys)
        return _message(502, "Could not upload images.", success=False)

    try:
        with get_session() as session:
            achievement = Achievement(
                user_id=current_user.id,
                name=name.strip(),
                objective=objective.strip(),
                deadline=deadline.strip(),
                dedication=dedication,
                completed_date=completed_at,
                total_tasks=total_tasks,
                images=json.dumps(keys),
            )
            session.add(achievement)
            session.commit()
            session.refresh(achievement)
            body = _achievement_to_json(achievement)
    except SQLAlchemyError:
        logging.exception("post_achievement failed (database error)")
        _discard_images(keys)
        return _message(500, "Failed to save achievement", success=False)
    return {
        "success": True,
        "message": "Achievement saved successfully",
        "achievement": body,
    }


@achievements_router.delete("/{achievement_id}")
def delete_achievement(achievement_id: UUID, current_user: User = Depends(get_current_user)):
    """Delete one of the user's achievements and its stored photos."""
    try:
        with get_session() as session:
            achievement = _owned(session, Achievement, achievement_id, current_user.id)
            if achievement is None:
                return _message(404, "Achievement not found", success=False)
            keys = json.loads(achievement.images) if achievement.images else []
            session.delete(achievement)
            session.commit()
    except SQLAlchemyError:
        logging.exception("delete_achievement failed (database error)")
        return _message(500, "Failed to delete achievement", success=False)
    if keys and storage_enabled():
        try:
            delete_images(keys)
        except StorageError:
            logging.exception("Achievement %s deleted but its images were not", achievement_id)
    return {"success": True, "message": "Achievement deleted successfully"}


# ---------------------------------------------------------------- app

app = FastAPI(title="Drift API")
app.include_router(auth_router)
app.include_router(goals_router)
app.include_router(schedules_router)
app.include_router(achievements_router)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def get_health():
    return {"message": "Drift backend live"}
