# ABOUTME: Streamlit UI: Login/register, then New goal, Schedules (checkbox grid + progress) and Achievements tabs.
# ABOUTME: API URL configurable via API_URL env; JWT stored in session_state, sent as Bearer on requests.

import os
from datetime import date, datetime, timedelta, timezone

import requests
import streamlit as st
from dotenv import load_dotenv

from core.config import DEDICATION_LEVELS, DEFAULT_PAGE_SIZE, MAX_SCHEDULE_DAYS, MAX_UPLOAD_FILES

load_dotenv()

API_URL = os.environ.get("API_URL", "http://localhost:8000")
SESSION_ACCESS_TOKEN = "access_token"
SESSION_ACTIVE_SCHEDULE = "active_schedule_id"
ACHIEVEMENT_OBJECTIVE_MAX_CHARS = 80

_COMPLETED_PREFIX = "Completed on "


def _format_date(raw: str | None) -> str:
    """'Feb 22, 2026' for an ISO date or datetime string; falls back to the first 10 chars."""
    if not raw:
        return ""
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).strftime("%b %d, %Y")
    except (ValueError, TypeError):
        return raw[:10] if len(raw) >= 10 else ""


def _achievement_label(
    achievement: dict, max_chars: int = ACHIEVEMENT_OBJECTIVE_MAX_CHARS
) -> str:
    """Expander label: name, truncated objective and completion date."""
    name = (achievement.get("name") or "").strip()
    objective = (achievement.get("objective") or "").strip()
    summary = (objective[:max_chars] + "…") if len(objective) > max_chars else objective
    label = f"{name}: {summary}" if name and summary else name or summary
    date_str = _format_date(achievement.get("completed_date"))
    if date_str:
        return f"{label}  ·  {_COMPLETED_PREFIX}{date_str}"
    return label


def _schedule_label(schedule: dict) -> str:
    """Selectbox label for a saved schedule: goal, date range and progress."""
    return (
        f"{schedule.get('goal', '')} "
        f"({_format_date(schedule.get('start_date'))} – {_format_date(schedule.get('end_date'))}, "
        f"{schedule.get('overall_progress', 0)}%)"
    )


def _progress_caption(schedule: dict) -> str:
    done = schedule.get("completed_tasks", 0)
    total = schedule.get("total_tasks", 0)
    return f"{done} of {total} tasks done · {schedule.get('overall_progress', 0)}%"


def _dedication_counts(stats: dict) -> list[tuple[str, int]]:
    """(Label, count) per dedication level in display order."""
    return [
        (level.capitalize(), int(stats.get(f"{level}_count", 0)))
        for level in DEDICATION_LEVELS
    ]


def _safe_json(response: requests.Response):
    """Parse response body as JSON; return dict or empty dict on failure."""
    try:
        return response.json()
    except ValueError:
        return {}


def _auth_headers():
    """Return headers with Bearer token for authenticated API calls, or empty dict if not logged in."""
    token = st.session_state.get(SESSION_ACCESS_TOKEN)
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def _clear_auth_and_rerun():
    """Remove token from session and rerun to show login screen."""
    for key in (SESSION_ACCESS_TOKEN, SESSION_ACTIVE_SCHEDULE):
        if key in st.session_state:
            del st.session_state[key]
    st.rerun()


def _render_login_register():
    """Show Login and Register tabs; on success set access_token and rerun."""
    st.title("Drift")
    st.write("Sign in or create an account to start planning.")

    tab_login, tab_register = st.tabs(["Login", "Register"])

    with tab_login:
        with st.form("login_form"):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            if st.form_submit_button("Sign in"):
                if not (email and email.strip() and password):
                    st.error("Enter email and password.")
                else:
                    try:
                        r = requests.post(
                            f"{API_URL}/api/auth/login",
                            json={"email": email.strip(), "password": password},
                            timeout=10,
                        )
                        if r.status_code == 200 and _safe_json(r).get("access_token"):
                            st.session_state[SESSION_ACCESS_TOKEN] = _safe_json(r)["access_token"]
                            st.rerun()
                        else:
                            st.error(_safe_json(r).get("message", "Invalid email or password."))
                    except requests.RequestException as e:
                        st.error(f"Could not reach the API: {e}")

    with tab_register:
        with st.form("register_form"):
            username = st.text_input("Username", key="register_username")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            if st.form_submit_button("Create account"):
                if not (username and username.strip() and email and email.strip() and password):
                    st.error("Enter username, email and password.")
                else:
                    try:
                        r = requests.post(
                            f"{API_URL}/api/auth/register",
                            json={
                                "username": username.strip(),
                                "email": email.strip(),
                                "password": password,
                            },
                            timeout=10,
                        )
                        if r.status_code == 201 and _safe_json(r).get("access_token"):
                            st.session_state[SESSION_ACCESS_TOKEN] = _safe_json(r)["access_token"]
                            st.rerun()
                        elif r.status_code == 409:
                            st.error("An account with that username or email already exists.")
                        else:
                            st.error(_safe_json(r).get("message", "Registration failed."))
                    except requests.RequestException as e:
                        st.error(f"Could not reach the API: {e}")


def _render_new_goal():
    with st.form("new_goal_form"):
        name = st.text_input("Goal name", placeholder="e.g. First 10k")
        objective = st.text_area(
            "Objective",
            placeholder="e.g. Run a 10k race without stopping.",
            height=100,
        )
        today = date.today()
        deadline = st.date_input(
            "Deadline",
            value=today + timedelta(days=14),
            min_value=today,
            max_value=today + timedelta(days=MAX_SCHEDULE_DAYS),
        )
        dedication = st.selectbox(
            "Dedication",
            DEDICATION_LEVELS,
            index=1,
            format_func=str.capitalize,
        )
        submitted = st.form_submit_button("Generate schedule")
    if not submitted:
        return
    if not (name and name.strip() and objective and objective.strip()):
        st.error("Please provide a goal name and an objective.")
        return
    payload = {
        "name": name.strip(),
        "objective": objective.strip(),
        "deadline": deadline.isoformat(),
        "dedication": dedication,
    }
    with st.spinner("Building your schedule..."):
        try:
            r = requests.post(
                f"{API_URL}/api/goals", json=payload, headers=_auth_headers(), timeout=10
            )
            if r.status_code == 401:
                _clear_auth_and_rerun()
                return
            if r.status_code != 201:
                st.error(_safe_json(r).get("message", "Could not save goal."))
                return
            goal_id = _safe_json(r).get("id")
            r = requests.post(
                f"{API_URL}/api/schedules/generate",
                json={
                    "objective": payload["objective"],
                    "deadline": payload["deadline"],
                    "dedication": dedication,
                    "goal_id": goal_id,
                },
                headers=_auth_headers(),
                timeout=180,
            )
        except requests.RequestException as e:
            st.error(f"Could not reach the API: {e}")
            return
    if r.status_code == 201:
        st.session_state[SESSION_ACTIVE_SCHEDULE] = _safe_json(r).get("id")
        st.success("Schedule ready. Open the Schedules tab to start checking off tasks.")
    elif r.status_code == 401:
        _clear_auth_and_rerun()
    else:
        st.error(_safe_json(r).get("message", f"Unexpected error: {r.status_code}"))


def _toggle(schedule_id: str, day_index: int, task_index: int, done: bool) -> dict | None:
    try:
        r = requests.patch(
            f"{API_URL}/api/schedules/{schedule_id}/tasks",
            json={"day_index": day_index, "task_index": task_index, "done": done},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return None
    if r.status_code == 401:
        _clear_auth_and_rerun()
        return None
    if r.status_code != 200:
        st.error(_safe_json(r).get("message", "Could not update task."))
        return None
    return _safe_json(r)


def _render_achievement_form(schedule: dict):
    st.success("Every task is done. Save this as an achievement?")
    with st.form(f"achievement_form_{schedule['id']}"):
        name = st.text_input("Achievement name", value=schedule.get("goal", "")[:80])
        photos = st.file_uploader(
            f"Photos (up to {MAX_UPLOAD_FILES})",
            type=["png", "jpg", "jpeg", "gif", "webp"],
            accept_multiple_files=True,
        )
        if not st.form_submit_button("Save achievement"):
            return
    if not (name and name.strip()):
        st.error("Please name your achievement.")
        return
    files = [("images", (p.name, p.getvalue(), p.type)) for p in (photos or [])]
    data = {
        "name": name.strip(),
        "objective": schedule.get("goal", ""),
        "deadline": schedule.get("end_date", ""),
        "dedication": schedule.get("intensity", ""),
        "completed_date": datetime.now(timezone.utc).isoformat(),
        "total_tasks": str(schedule.get("total_tasks", 0)),
        "schedule_id": schedule["id"],
    }
    try:
        r = requests.post(
            f"{API_URL}/api/achievements",
            data=data,
            files=files or None,
            headers=_auth_headers(),
            timeout=60,
        )
    except requests.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return
    if r.status_code == 201:
        st.success("Achievement saved. See the Achievements tab.")
    elif r.status_code == 401:
        _clear_auth_and_rerun()
    else:
        st.error(_safe_json(r).get("message", "Could not save achievement."))


def _render_schedules():
    try:
        r = requests.get(
            f"{API_URL}/api/schedules",
            params={"limit": DEFAULT_PAGE_SIZE, "offset": 0},
            headers=_auth_headers(),
            timeout=10,
        )
    except requests.RequestException as e:
        st.error(f"Could not load schedules. Try again. Error: {e}")
        return
    if r.status_code == 401:
        _clear_auth_and_rerun()
        return
    if r.status_code != 200:
        st.error(_safe_json(r).get("message", "Could not load schedules. Try again."))
        return
    schedules = _safe_json(r).get("schedules", [])
    if not schedules:
        st.info("No schedules yet. Use the New goal tab to generate one.")
        return

    ids = [s["id"] for s in schedules]
    active = st.session_state.get(SESSION_ACTIVE_SCHEDULE)
    index = ids.index(active) if active in ids else 0
    by_id = {s["id"]: s for s in schedules}
    selected = st.selectbox(
        "Schedule", ids, index=index, format_func=lambda sid: _schedule_label(by_id[sid])
    )
    st.session_state[SESSION_ACTIVE_SCHEDULE] = selected
    schedule = by_id[selected]

    st.subheader(schedule["goal"])
    st.progress(schedule["overall_progress"] / 100, text=_progress_caption(schedule))

    for d, day in enumerate(schedule["days"]):
        with st.container(border=True):
            st.markdown(f"**{day['date']}**")
            st.progress(day["progress"] / 100)
            for t, task in enumerate(day["tasks"]):
                checked = st.checkbox(
                    task["text"], value=task["done"], key=f"task_{selected}_{d}_{t}"
                )
                if checked != task["done"]:
                    if _toggle(selected, d, t, checked) is not None:
                        st.rerun()

    if schedule["overall_progress"] >= 100:
        _render_achievement_form(schedule)

    if st.button("Delete schedule", key=f"delete_schedule_{selected}"):
        try:
            r = requests.delete(
                f"{API_URL}/api/schedules/{selected}", headers=_auth_headers(), timeout=10
            )
        except requests.RequestException as e:
            st.error(f"Could not reach the API: {e}")
            return
        if r.status_code == 204:
            del st.session_state[SESSION_ACTIVE_SCHEDULE]
            st.rerun()
        else:
            st.error(_safe_json(r).get("message", "Could not delete schedule."))


def _render_achievements():
    try:
        stats_r = requests.get(
            f"{API_URL}/api/achievements/stats", headers=_auth_headers(), timeout=10
        )
        list_r = requests.get(f"{API_URL}/api/achievements", headers=_auth_headers(), timeout=10)
    except requests.RequestException as e:
        st.error(f"Could not load achievements. Try again. Error: {e}")
        return
    if 401 in (stats_r.status_code, list_r.status_code):
        _clear_auth_and_rerun()
        return
    if stats_r.status_code != 200 or list_r.status_code != 200:
        st.error("Could not load achievements. Try again.")
        return

    stats = _safe_json(stats_r).get("stats", {})
    cols = st.columns(5)
    cols[0].metric("Achievements", stats.get("total_achievements", 0))
    cols[1].metric("Tasks done", stats.get("total_tasks", 0))
    for col, (label, count) in zip(cols[2:], _dedication_counts(stats)):
        col.metric(label, count)

    achievements = _safe_json(list_r).get("achievements", [])
    if not achievements:
        st.info("No achievements yet. Finish a schedule to earn one.")
        return
    for a in achievements:
        with st.expander(_achievement_label(a), expanded=False):
            st.write(a["objective"])
            st.caption(
                f"{a['dedication'].capitalize()} · {a['total_tasks']} tasks · deadline {a['deadline']}"
            )
            if a.get("image_urls"):
                st.image(a["image_urls"], width=200)
            if st.button("Delete", key=f"delete_achievement_{a['id']}"):
                try:
                    r = requests.delete(
                        f"{API_URL}/api/achievements/{a['id']}",
                        headers=_auth_headers(),
                        timeout=10,
                    )
                except requests.RequestException as e:
                    st.error(f"Could not reach the API: {e}")
                    continue
                if r.status_code == 200:
                    st.rerun()
                else:
                    st.error(_safe_json(r).get("message", "Could not delete achievement."))


def main():
    if not st.session_state.get(SESSION_ACCESS_TOKEN):
        _render_login_register()
        return

    if st.sidebar.button("Logout"):
        _clear_auth_and_rerun()
        return

    st.title("Drift")
    st.write("Set a goal and a deadline; get a day-by-day plan you can check off.")

    tab_new, tab_schedules, tab_achievements = st.tabs(["New goal", "Schedules", "Achievements"])
    with tab_new:
        _render_new_goal()
    with tab_schedules:
        _render_schedules()
    with tab_achievements:
        _render_achievements()


if __name__ == "__main__":
    main()
