"""Primitive normalizers for loosely formatted values coming out of an LLM.

Every function here is pure: it never raises on bad input and returns None
when a value cannot be resolved. Callers decide whether None is fatal.
"""

import logging
import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from reminder_engine.features.reminder_models import TaskType

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_24H_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MONTH_NAME_PATTERN = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_MONTHS = {name: index for index, name in enumerate(
    ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), start=1
)}

# Fixed priority: ISO, then US month-first slash, then year-first slash, then month names.
# Ambiguous M/D/Y vs D/M/Y is always read month-first.
_DATE_PATTERNS = (
    (re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b"), "ymd"),
    (re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b"), "mdy"),
    (re.compile(r"\b(\d{4})/(\d{1,2})/(\d{1,2})\b"), "ymd"),
    (re.compile(r"\b" + MONTH_NAME_PATTERN + r"\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b", re.IGNORECASE), "Mdy"),
    (re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)?\s+" + MONTH_NAME_PATTERN + r"\.?,?\s+(\d{4})\b", re.IGNORECASE), "dMy"),
)

# Two different defaults: a parse is unambiguous only if neither leaks into the result.
_PARSE_DEFAULT_A = datetime(2000, 1, 1)
_PARSE_DEFAULT_B = datetime(2001, 2, 2)

# A date separator pattern, a 4-digit year or a month name; bare digit runs like "1 2 3" are not dates.
_DATE_SHAPE_RE = re.compile(
    r"\b\d{4}\b|\b\d{1,2}[/.-]\d{1,2}[/.-]\d{2}\b|\b" + MONTH_NAME_PATTERN + r"\b", re.IGNORECASE
)

_CLOCK_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::\d{2})?\s*(?:([ap])\.?\s*m\.?)?$", re.IGNORECASE)

_AMOUNT_RE = re.compile(r"\d+(?:\.\d+)?")
_CURRENCY_RE = re.compile(r"[$€£¥₹]")

PLACEHOLDER_TITLES = {"untitled", "untitled task", "document reminder", "n/a", "none", "null"}
TITLE_MAX_CHARS = 100

TASK_TYPE_KEYWORDS = (
    (TaskType.bill, ("bill", "payment", "pay")),
    (TaskType.meeting, ("meeting", "meet")),
    (TaskType.deadline, ("deadline", "due")),
    (TaskType.appointment, ("appointment", "appt")),
    (TaskType.reminder, ("reminder",)),
)

def _month_number(name: str) -> int:
    return _MONTHS[name.lower()[:3]]

def _safe_date(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None

def _date_from_groups(groups: tuple, order: str) -> Optional[str]:
    if order == "ymd":
        return _safe_date(int(groups[0]), int(groups[1]), int(groups[2]))
    if order == "mdy":
        return _safe_date(int(groups[2]), int(groups[0]), int(groups[1]))
    if order == "Mdy":
        return _safe_date(int(groups[2]), _month_number(groups[0]), int(groups[1]))
    if order == "dMy":
        return _safe_date(int(groups[2]), _month_number(groups[1]), int(groups[0]))
    return None

def _parse_unambiguous(value: str) -> Optional[str]:
    if not _DATE_SHAPE_RE.search(value):
        return None
    try:
        first = date_parser.parse(value, default=_PARSE_DEFAULT_A, dayfirst=False)
        second = date_parser.parse(value, default=_PARSE_DEFAULT_B, dayfirst=False)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date().isoformat()

def parse_relative_date(token: Any, today: date) -> Optional[str]:
    """Resolves a relative date expression against an explicit `today`.

    Supported: "today", "tomorrow", "next week", "next month", "in N days",
    "in N weeks" and weekday names. Weekdays always resolve to the next
    occurrence strictly after today.

    Returns:
        The date as YYYY-MM-DD, or None for unrecognised tokens.
    """
    if not isinstance(token, str):
        return None
    lower = " ".join(token.lower().split()).strip(" .,!?")
    if not lower:
        return None

    if lower == "today":
        return today.isoformat()
    if lower == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    if lower == "next week":
        return (today + timedelta(days=7)).isoformat()
    if lower == "next month":
        return (today + relativedelta(months=1)).isoformat()

    in_n = re.fullmatch(r"in (\d+) (day|week)s?", lower)
    if in_n:
        days = int(in_n.group(1)) * (7 if in_n.group(2) == "week" else 1)
        return (today + timedelta(days=days)).isoformat()

    weekday = re.fullmatch(r"(?:(?:next|this|on)\s+)?(" + "|".join(WEEKDAYS) + r")", lower)
    if weekday:
        target = WEEKDAYS.index(weekday.group(1))
        days_ahead = (target - today.weekday()) % 7 or 7
        return (today + timedelta(days=days_ahead)).isoformat()

    return None

def normalize_date(value: Any, today: Optional[date] = None) -> Optional[str]:
    """Converts a loosely formatted date into YYYY-MM-DD.

    Resolution order:
        1. Strict YYYY-MM-DD that is a real calendar date, unchanged.
        2. Generic parsing with dateutil, accepted only if no component had
           to be filled in from a default.
        3. Explicit patterns searched anywhere in the text
           (ISO, M/D/YYYY, YYYY/MM/DD, month names).
        4. Relative expressions, only when `today` is supplied.

    Returns:
        The canonical date string, or None if the value is unresolved.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None

    if ISO_DATE_RE.match(raw) and _safe_date(int(raw[:4]), int(raw[5:7]), int(raw[8:10])):
        return raw

    parsed = _parse_unambiguous(raw)
    if parsed:
        return parsed

    for pattern, order in _DATE_PATTERNS:
        match = pattern.search(raw)
        if match:
            resolved = _date_from_groups(match.groups(), order)
            if resolved:
                return resolved

    if today is not None:
        relative = parse_relative_date(raw, today)
        if relative:
            return relative

    logger.debug(f"Could not resolve date value: '{raw[:50]}'")
    return None

def normalize_time(value: Any) -> Optional[str]:
    """Converts a time string into 24-hour HH:MM, or None if unparseable."""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if TIME_24H_RE.match(raw):
        return raw

    match = _CLOCK_RE.match(raw)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    period = match.group(3).lower() if match.group(3) else None

    if minutes > 59:
        return None
    if period is None:
        # A bare number like "9" is not a time.
        if match.group(2) is None or hours > 23:
            return None
    else:
        if not 1 <= hours <= 12:
            return None
        if period == "p" and hours != 12:
            hours += 12
        elif period == "a" and hours == 12:
            hours = 0
    return f"{hours:02d}:{minutes:02d}"

def normalize_amount(
    value: Any, display: bool = False, currency_symbol: str = "$"
) -> Optional[Union[int, float, str]]:
    """Normalizes a monetary amount.

    Numbers pass through unchanged. Strings have thousands separators removed
    and the first decimal number extracted; with `display=True` the number is
    prefixed with the currency symbol found in the input (or `currency_symbol`).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    match = _AMOUNT_RE.search(value.replace(",", ""))
    if not match:
        return None
    number = match.group(0)
    if not display:
        return number
    symbol = _CURRENCY_RE.search(value)
    return f"{symbol.group(0) if symbol else currency_symbol}{number}"

def normalize_title(value: Any) -> Optional[str]:
    """Cleans a title; returns None for empty strings and placeholder titles."""
    if not isinstance(value, str):
        return None
    title = " ".join(value.split()).strip(" \"'`").rstrip(" .,;:")
    if not title or title.lower() in PLACEHOLDER_TITLES:
        return None
    return title[:TITLE_MAX_CHARS].rstrip()

def infer_task_type(title: Optional[str]) -> TaskType:
    """Infers the reminder type from keywords in the title. First match wins."""
    if not title:
        return TaskType.task
    lower = title.lower()
    for task_type, keywords in TASK_TYPE_KEYWORDS:
        for keyword in keywords:
            if re.search(r"\b" + re.escape(keyword), lower):
                return task_type
    return TaskType.task
