# ABOUTME: Repairs free-text model output into strict 'Day Mon DD|task|task;' rows and parses them back.
# ABOUTME: Handles reasoning blocks, markdown, many date spellings, missing pipes, duplicates and out-of-range days.

import re
from datetime import date, timedelta

from core.config import TASKS_PER_DAY
from core.schemas import ScheduleDay
from drift.errors import ScheduleFormatError

ROW_END = ";"
TASK_SEP = "|"
MAX_TASK_LENGTH = 200

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_WEEKDAYS = {"mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6}

_WEEKDAY = (
    r"(?P<weekday>mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?|thu(?:r(?:s(?:day)?)?)?"
    r"|fri(?:day)?|sat(?:urday)?|sun(?:day)?)\.?(?![a-z])"
)
_MONTH = (
    r"(?P<month>jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?(?![a-z])"
)
_DAY = r"(?P<day>\d{1,2})(?:st|nd|rd|th)?(?![\d])"
_YEAR = r"(?:\s*,?\s*(?P<year>\d{4})(?![\d]))?"
_OPT_WEEKDAY = rf"(?:{_WEEKDAY}\s*,?\s*)?"

_DATE_PATTERNS = [
    re.compile(
        rf"^{_OPT_WEEKDAY}(?P<year>\d{{4}})-(?P<month>\d{{1,2}})-(?P<day>\d{{1,2}})(?![\d])",
        re.I,
    ),
    re.compile(rf"^{_OPT_WEEKDAY}{_MONTH}\s*{_DAY}{_YEAR}", re.I),
    re.compile(rf"^{_OPT_WEEKDAY}{_DAY}\s+{_MONTH}{_YEAR}", re.I),
    # Bare weekday must be followed by a separator so "Sun salutations" stays a task.
    re.compile(rf"^{_WEEKDAY}(?=\s*[|:,\-–—]|\s*$)", re.I),
]

_THINK_OPEN = "<think>"
_THINK_CLOSE = "</think>"
_DAY_LABEL_RE = re.compile(r"^day\s*\d+\s*(?:[:.)|\-–—]\s*|\s+(?=[a-z]))", re.I)
_BULLET_RE = re.compile(r"^(?:[-*•>]+|\d{1,3}[.)])\s+")
_MARKDOWN_RE = re.compile(r"\*\*|__|`|^#+\s*")
# *text* or _text_; a bullet's "* " and snake_case names are left alone.
_EMPHASIS_RE = re.compile(r"(?<![\w*])([*_])(?=\S)(.+?)(?<=\S)\1(?![\w*])")
_TABLE_RULE_RE = re.compile(r"^[\s|:\-]*$")
_SEPARATOR_CHARS = " \t:,-–—|"
_WHITESPACE_RE = re.compile(r"\s+")


def strip_reasoning(text: str) -> str:
    """Drop a leading <think>...</think> block; an unterminated block drops everything after it."""
    close = text.rfind(_THINK_CLOSE)
    if close != -1:
        return text[close + len(_THINK_CLOSE):]
    open_ = text.find(_THINK_OPEN)
    if open_ != -1:
        return text[:open_]
    return text


def format_day_label(day: date) -> str:
    """'Mon May 26' style label used in stored schedules."""
    return day.strftime("%a %b %d")


def _resolve_year(month: int, day: int, start_date: date) -> date | None:
    """First occurrence of month/day on or after start_date, or None for impossible dates."""
    for year in (start_date.year, start_date.year + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate >= start_date:
            return candidate
    return None


def _match_date(line: str, start_date: date, previous: date | None) -> tuple[date | None, str] | None:
    """If the line starts with a date, return (resolved date or None, remainder)."""
    for pattern in _DATE_PATTERNS:
        m = pattern.match(line)
        if not m:
            continue
        groups = m.groupdict()
        rest = line[m.end():]
        if groups.get("month") is None:
            # Weekday only: next such weekday after the previous row (or on/after start).
            target = _WEEKDAYS[groups["weekday"][:3].lower()]
            anchor = previous + timedelta(days=1) if previous else start_date
            return anchor + timedelta(days=(target - anchor.weekday()) % 7), rest
        month_raw = groups["month"]
        month = int(month_raw) if month_raw.isdigit() else _MONTHS[month_raw[:3].lower()]
        day = int(groups["day"])
        if groups.get("year"):
            try:
                return date(int(groups["year"]), month, day), rest
            except ValueError:
                return None, rest
        return _resolve_year(month, day, start_date), rest
    return None


def _clean_task(task: str) -> str:
    task = _BULLET_RE.sub("", task.strip())
    task = task.replace(TASK_SEP, " ").replace(ROW_END, " ")
    task = _WHITESPACE_RE.sub(" ", task).strip(" .\t")
    return task[:MAX_TASK_LENGTH].rstrip()


def _split_tasks(rest: str) -> list[str]:
    rest = rest.strip().lstrip(_SEPARATOR_CHARS)
    if TASK_SEP in rest:
        pieces = rest.split(TASK_SEP)
    else:
        pieces = rest.split(",")
    return [t for t in (_clean_task(p) for p in pieces) if t]


def _normalize_line(line: str) -> tuple[str, bool]:
    """Strip markdown, table pipes and list markers. Returns (text, was_bulleted)."""
    text = _MARKDOWN_RE.sub("", line.strip()).strip()
    text = _EMPHASIS_RE.sub(r"\2", text)
    if text.startswith(TASK_SEP):
        # Markdown table row; the |---|---| rule under the header carries nothing.
        text = text.strip(" \t" + TASK_SEP)
        if _TABLE_RULE_RE.match(text):
            return "", False
    bulleted = bool(_BULLET_RE.match(text))
    if bulleted:
        text = _BULLET_RE.sub("", text, count=1)
    text = _DAY_LABEL_RE.sub("", text).strip()
    return text, bulleted


def extract_rows(raw: str, start_date: date, end_date: date) -> dict[date, list[str]]:
    """Collect tasks per in-range date from model output, merging duplicate dates.

    A dateless fragment joins the most recent row only when it follows a ';' on
    the same line or is a bullet under a date line; other prose ends the row.
    """
    rows: dict[date, list[str]] = {}
    previous: date | None = None
    target: date | None = None
    accepting = False
    for physical in strip_reasoning(raw or "").splitlines():
        if physical.strip().startswith("```"):
            accepting = False
            continue
        for idx, fragment in enumerate(physical.split(ROW_END)):
            text, bulleted = _normalize_line(fragment)
            if not text:
                continue
            matched = _match_date(text, start_date, previous)
            if matched is not None:
                target, rest = matched
                accepting = True
                if target is not None:
                    previous = target
                tasks = _split_tasks(rest)
            elif accepting and (idx > 0 or bulleted):
                tasks = [t for t in [_clean_task(text)] if t]
            else:
                accepting = False
                continue
            if target is None or not (start_date <= target <= end_date):
                continue
            bucket = rows.setdefault(target, [])
            seen = {t.lower() for t in bucket}
            for task in tasks:
                if task.lower() not in seen:
                    bucket.append(task)
                    seen.add(task.lower())
    return {d: tasks for d, tasks in rows.items() if tasks}


def render_schedule(rows: dict[date, list[str]]) -> str:
    """One 'Day Mon DD|task|task;' line per date, in date order."""
    return "\n".join(
        f"{format_day_label(day)}{TASK_SEP}{TASK_SEP.join(rows[day])}{ROW_END}"
        for day in sorted(rows)
    )


def clean_schedule_output(raw: str, start_date: date, end_date: date, dedication: str) -> str:
    """Repair model output into the stored schedule format, capping tasks per dedication level."""
    max_tasks = TASKS_PER_DAY[dedication][1]
    rows = {
        day: tasks[:max_tasks]
        for day, tasks in extract_rows(raw, start_date, end_date).items()
    }
    if not rows:
        raise ScheduleFormatError("Model output contained no usable schedule rows")
    return render_schedule(rows)


def parse_schedule(text: str) -> list[ScheduleDay]:
    """Split stored schedule text into days; rows without a date or tasks are skipped."""
    days = []
    for line in (text or "").split(ROW_END):
        line = line.strip()
        if not line:
            continue
        label, *tasks = [part.strip() for part in line.split(TASK_SEP)]
        tasks = [t for t in tasks if t]
        if label and tasks:
            days.append(ScheduleDay(date=label, tasks=tasks))
    return days
