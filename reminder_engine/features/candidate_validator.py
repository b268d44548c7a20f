"""Maps decoded model output to validated ReminderCandidate records."""

import logging
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from reminder_engine.features.normalizers import (
    infer_task_type,
    normalize_amount,
    normalize_date,
    normalize_time,
    normalize_title,
)
from reminder_engine.features.reminder_models import ReminderCandidate, TaskType

logger = logging.getLogger(__name__)

TITLE_KEYS = ("title", "task", "taskName", "billName")
DATE_KEYS = ("date", "deadlineDate", "dueDate")
TIME_KEYS = ("time", "dueTime")
AMOUNT_KEYS = ("amount", "price", "cost")
DESCRIPTION_KEYS = ("description", "context")
TYPE_KEYS = ("type", "category")
ENTRY_LIST_KEYS = ("tasks", "reminders", "items")

DEFAULT_CONFIDENCE = 0.7
PAST_DATE_PENALTY = 0.2
PAST_DATE_PENALTY_THRESHOLD = 0.8
PAST_DATE_CONFIDENCE_FLOOR = 0.5

SOURCE_SNIPPET_CHARS = 100
DESCRIPTION_MAX_CHARS = 500

def _first_present(entry: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Returns the first non-empty value found under any of the alias keys."""
    for key in keys:
        value = entry.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None

def _entries_from_payload(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ENTRY_LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
        return [payload]
    return []

def score_confidence(raw_confidence: Any, candidate_date: str, today: date) -> float:
    """Clamps the supplied confidence and applies the past-date penalty.

    A date strictly before today with confidence above 0.8 usually means the
    document mis-stated the date, so confidence drops by 0.2 (never below 0.5).
    """
    try:
        confidence = float(raw_confidence) if raw_confidence is not None else DEFAULT_CONFIDENCE
    except (TypeError, ValueError):
        confidence = DEFAULT_CONFIDENCE
    if math.isnan(confidence):
        confidence = DEFAULT_CONFIDENCE
    confidence = min(1.0, max(0.0, confidence))

    if candidate_date < today.isoformat() and confidence > PAST_DATE_PENALTY_THRESHOLD:
        confidence = max(PAST_DATE_CONFIDENCE_FLOOR, confidence - PAST_DATE_PENALTY)
    return round(confidence, 4)

def _resolve_type(entry: Dict[str, Any], title: str) -> TaskType:
    explicit = _first_present(entry, TYPE_KEYS)
    if isinstance(explicit, str):
        try:
            return TaskType(explicit.strip().lower())
        except ValueError:
            pass
    return infer_task_type(title)

def _resolve_entities(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]

def validate_entry(
    entry: Any, today: date, source_text: str = "", currency_symbol: str = "$"
) -> Optional[ReminderCandidate]:
    """Builds a candidate from one raw entry, or returns None if it is unusable.

    Entries without a usable title or a resolvable date are rejected.
    """
    if not isinstance(entry, dict):
        logger.debug(f"Skipping non-object entry of type {type(entry).__name__}")
        return None

    title = normalize_title(_first_present(entry, TITLE_KEYS))
    if not title:
        logger.debug(f"Dropping entry without a usable title: {entry}")
        return None

    candidate_date = normalize_date(_first_present(entry, DATE_KEYS), today=today)
    if not candidate_date:
        logger.debug(f"Dropping entry '{title}' without a resolvable date.")
        return None

    description = _first_present(entry, DESCRIPTION_KEYS)
    snippet = entry.get("sourceText")

    try:
        return ReminderCandidate(
            title=title,
            date=candidate_date,
            time=normalize_time(_first_present(entry, TIME_KEYS)),
            description=str(description)[:DESCRIPTION_MAX_CHARS] if description is not None else "",
            type=_resolve_type(entry, title),
            amount=normalize_amount(_first_present(entry, AMOUNT_KEYS), display=True, currency_symbol=currency_symbol),
            confidence=score_confidence(entry.get("confidence"), candidate_date, today),
            entities=_resolve_entities(entry.get("entities")),
            source_text=snippet if isinstance(snippet, str) and snippet.strip() else source_text[:SOURCE_SNIPPET_CHARS],
        )
    except ValidationError as e:
        logger.warning(f"Candidate '{title}' failed model validation: {e}")
        return None

def validate_candidates(
    payload: Any, today: date, source_text: str = "", currency_symbol: str = "$"
) -> List[ReminderCandidate]:
    """Validates a decoded payload into a list of candidates.

    Args:
        payload: A single task-like object, a list of them, or an object
            wrapping the list under "tasks", "reminders" or "items".
        today: The current date, used for relative dates and the past-date penalty.
        source_text: The input text the payload was extracted from.

    Returns:
        The candidates that passed validation, in input order. Invalid
        entries are dropped silently.
    """
    entries = _entries_from_payload(payload)
    candidates: List[ReminderCandidate] = []
    for entry in entries:
        candidate = validate_entry(entry, today, source_text, currency_symbol)
        if candidate is not None:
            candidates.append(candidate)

    dropped = len(entries) - len(candidates)
    if dropped:
        logger.info(f"Validated {len(candidates)} candidate(s); dropped {dropped} invalid entr{'y' if dropped == 1 else 'ies'}.")
    return candidates
