"""Rule-based fallback used only when no JSON can be decoded from a response.

The text is split into sentences and each sentence is mined on its own: a
candidate needs both a date expression and an action phrase in the same
sentence. The extractor never invents a date or a generic title.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from reminder_engine.features.normalizers import (
    MONTH_NAME_PATTERN,
    WEEKDAYS,
    infer_task_type,
    normalize_amount,
    normalize_date,
    normalize_time,
    parse_relative_date,
)
from reminder_engine.features.reminder_models import ReminderCandidate

logger = logging.getLogger(__name__)

EXPLICIT_CONFIDENCE = 0.85
WEAK_CONFIDENCE = 0.6

DESCRIPTION_CHARS = 200
SOURCE_SNIPPET_CHARS = 100

_LEAD = r"\b(?:by|before|after|due|on)\s+"
_WEEKDAY_PATTERN = "(" + "|".join(WEEKDAYS) + ")"
_RELATIVE_PATTERN = r"\b(tomorrow|today|next week|next month|in \d+ days?)\b"

# (pattern, kind, explicit); evaluated in order, first resolvable match wins.
DATE_PATTERNS = (
    (re.compile(_LEAD + r"(\d{1,2}/\d{1,2}/\d{4})\b", re.IGNORECASE), "absolute", True),
    (re.compile(r"\b(\d{4}-\d{2}-\d{2})\b"), "absolute", True),
    (re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\b"), "absolute", True),
    (re.compile(_LEAD + _WEEKDAY_PATTERN + r"\b", re.IGNORECASE), "relative", True),
    (re.compile(_LEAD + r"(" + MONTH_NAME_PATTERN + r"\.?\s+\d{1,2}(?:st|nd|rd|th)?(?:,?\s+\d{4})?)\b", re.IGNORECASE), "month_name", True),
    (re.compile(_RELATIVE_PATTERN, re.IGNORECASE), "relative", False),
)

ACTION_VERBS = (
    "call", "email", "meet", "pay", "schedule", "book", "buy", "send", "complete",
    "finish", "submit", "renew", "review", "attend", "cancel", "return", "pick up",
)

# (pattern, explicit)
ACTION_PATTERNS = (
    (re.compile(r"\b((?:" + "|".join(ACTION_VERBS) + r")\s+[^.!?\n]+)", re.IGNORECASE), True),
    (re.compile(
        r"\b(?:need to|needs to|have to|has to|must|should|remember to|don'?t forget to)\s+([^.!?\n]+)",
        re.IGNORECASE,
    ), False),
)

# Start of a date or time expression; a lead word only opens a trailing clause when one follows.
_WHEN_PATTERN = (
    r"(?:\d|@|(?:" + "|".join(WEEKDAYS) + r")\b|" + MONTH_NAME_PATTERN + r"\b"
    r"|tomorrow|today|tonight|noon|midnight|end of\b)"
)
TRAILING_CLAUSE_RE = re.compile(
    r"\s+(?:by|before|after|due(?:\s+(?:on|by|before))?|on|at)\s+(?:the\s+|this\s+|next\s+)?(?=" + _WHEN_PATTERN + r").*$"
    r"|\s+" + _RELATIVE_PATTERN + r".*$",
    re.IGNORECASE,
)

# Splits only at terminal punctuation followed by whitespace, so 12/12/2026, $1,204.50 and a.m. survive.
SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])(?<![ap]\.m\.)\s+", re.IGNORECASE)

COMPANY_PAY_BILL_RE = re.compile(
    r"(?P<company>[A-Za-z][\w&'-]*)\s*[.:,;-]?\s+pay\s+(?:the\s+|my\s+|your\s+)?(?P<kind>[a-z]+\s+)?bill\b",
    re.IGNORECASE,
)
COMPANY_BILL_RE = re.compile(
    r"(?P<company>[A-Za-z][\w&'-]*)\s+(?:(?P<kind>[a-z]+)\s+)?bill\b",
    re.IGNORECASE,
)
NON_COMPANY_WORDS = {
    "a", "an", "the", "my", "your", "our", "this", "that", "to", "and", "or", "please",
    "i", "we", "you", "must", "should", "need", "needs", "will", "pay", "due", "next",
    "reminder", "note", "notice", "important", "urgent", "also", "then", "hi", "hello", "fyi",
    "today", "tomorrow", "tonight", *WEEKDAYS,
}

TIME_RE = re.compile(
    r"(?:\b(?:at|by)\s+|@\s*)(\d{1,2}(?::\d{2})?\s*(?:[ap]\.?\s*m\.?)?)(?![\d/:])",
    re.IGNORECASE,
)
CURRENCY_AMOUNT_RE = re.compile(r"[$€£¥₹]\s?\d[\d,]*(?:\.\d{1,2})?")

def _resolve_month_name(value: str, today: date) -> Optional[str]:
    resolved = normalize_date(value)
    if resolved:
        return resolved
    # No year given: take the next occurrence on or after today.
    for year in (today.year, today.year + 1):
        resolved = normalize_date(f"{value} {year}")
        if resolved and resolved >= today.isoformat():
            return resolved
    return None

def find_date(text: str, today: date) -> Optional[Tuple[str, bool]]:
    """Finds the first explicit date expression in the text.

    Returns:
        (YYYY-MM-DD, explicit) where `explicit` is False for bare relative
        words like "tomorrow", or None if no pattern resolves.
    """
    for pattern, kind, explicit in DATE_PATTERNS:
        for match in pattern.finditer(text):
            token = match.group(1)
            if kind == "absolute":
                resolved = normalize_date(token)
            elif kind == "month_name":
                resolved = _resolve_month_name(token, today)
            else:
                resolved = parse_relative_date(token, today)
            if resolved:
                return resolved, explicit
    return None

def _clean_action(action: str) -> str:
    action = TRAILING_CLAUSE_RE.sub("", action.strip())
    return action.strip(" ,;:-")

def _capitalize(title: str) -> str:
    return title[:1].upper() + title[1:]

def _company_title(company: str, kind: Optional[str]) -> Optional[str]:
    kind = (kind or "").strip()
    if company.lower() in NON_COMPANY_WORDS:
        return f"Pay {kind} bill" if kind else None
    return " ".join(part for part in ("Pay", company, kind, "bill") if part)

def _company_pay_bill_match(text: str, context: Optional[str] = None) -> Optional[re.Match]:
    """Finds `<company> pay [the] [<kind>] bill` ending inside `text`.

    `context` is `text` with the preceding fragment prepended, so a company
    named just before the sentence ("conedison. pay gas bill") is still found.
    """
    haystack = context or text
    offset = len(haystack) - len(text)
    found = None
    for match in COMPANY_PAY_BILL_RE.finditer(haystack):
        if match.end() > offset and match.group("company").lower() not in NON_COMPANY_WORDS:
            found = match
    return found

def find_title(text: str, context: Optional[str] = None) -> Optional[Tuple[str, bool]]:
    """Builds a title from the first action phrase in the text.

    Returns:
        (title, explicit) or None when no action phrase can be found.
    """
    action: Optional[str] = None
    explicit = False
    for pattern, is_explicit in ACTION_PATTERNS:
        match = pattern.search(text)
        if match:
            cleaned = _clean_action(match.group(1))
            if cleaned:
                action, explicit = cleaned, is_explicit
                break

    if action and re.match(r"pay\b", action, re.IGNORECASE) and re.search(r"\bbill\b", action, re.IGNORECASE):
        company_match = _company_pay_bill_match(text, context)
        if company_match:
            return _company_title(company_match.group("company"), company_match.group("kind")), True

    if action:
        return _capitalize(action[:100].rstrip()), explicit

    bill_match = COMPANY_BILL_RE.search(text)
    if bill_match:
        title = _company_title(bill_match.group("company"), bill_match.group("kind"))
        if title:
            return title, True
    return None

def find_time(text: str) -> Optional[str]:
    for match in TIME_RE.finditer(text):
        normalized = normalize_time(match.group(1))
        if normalized:
            return normalized
    return None

def split_sentences(text: str) -> List[str]:
    cleaned = " ".join(text.split())
    return [sentence for sentence in SENTENCE_BOUNDARY_RE.split(cleaned) if sentence]

def _find_amount(*texts: str) -> Optional[str]:
    for text in texts:
        match = CURRENCY_AMOUNT_RE.search(text)
        if match:
            return normalize_amount(match.group(0), display=True)
    return None

def extract_with_heuristics(text: str, today: date) -> List[ReminderCandidate]:
    """Mines best-effort candidates from unstructured text, one per sentence.

    Each sentence is searched for a date, then an action phrase, then a time.
    A sentence yields a candidate only when it holds both a date and an
    action; the two are never paired across sentences. A one-to-three word
    fragment right before a sentence may supply the company for a pay-bill
    title, and the following sentence may supply the amount.

    Args:
        text: Raw document, email or model text.
        today: The current date used to resolve relative expressions.

    Returns:
        Candidates in the order their sentences appear; empty when no sentence
        holds both a date expression and an action phrase.
    """
    if not isinstance(text, str) or not text.strip():
        return []
    sentences = split_sentences(text)

    candidates: List[ReminderCandidate] = []
    previous: Optional[str] = None
    for index, sentence in enumerate(sentences):
        found_date = find_date(sentence, today)
        context = None
        if previous is not None and len(previous.split()) <= 3:
            context = f"{previous} {sentence}"
        previous = sentence
        if not found_date:
            continue
        candidate_date, date_explicit = found_date

        found_title = find_title(sentence, context)
        if not found_title:
            logger.debug(f"Heuristic extraction found date {candidate_date} but no action phrase in: {sentence[:60]}")
            continue
        title, title_explicit = found_title

        snippet = sentence
        company_match = _company_pay_bill_match(sentence, context) if context else None
        if company_match and company_match.start() < len(context) - len(sentence):
            snippet = context

        following = sentences[index + 1] if index + 1 < len(sentences) else ""
        candidates.append(ReminderCandidate(
            title=title,
            date=candidate_date,
            time=find_time(sentence),
            description=snippet[:DESCRIPTION_CHARS],
            type=infer_task_type(title),
            amount=_find_amount(sentence, following),
            confidence=EXPLICIT_CONFIDENCE if date_explicit and title_explicit else WEAK_CONFIDENCE,
            entities=[],
            source_text=snippet[:SOURCE_SNIPPET_CHARS],
        ))
        # A sentence that produced a candidate is not a company prefix for the next one.
        previous = None

    if candidates:
        logger.info(f"Heuristic extraction produced {len(candidates)} candidate(s) from {len(sentences)} sentence(s).")
    else:
        logger.debug("Heuristic extraction found no sentence with both a date and an action phrase.")
    return candidates
