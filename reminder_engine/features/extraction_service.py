"""Service layer for the reminder extraction feature.

Builds the prompt, calls the configured LLM provider and hands the raw
completion to the extraction pipeline. Provider failures are classified into
typed ProviderError subclasses; everything after the provider call degrades
to an empty list instead of raising.
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from reminder_engine.core.config import get_settings
from reminder_engine.features.errors import (
    ProviderError,
    UnreadableInputError,
    classify_provider_error,
)
from reminder_engine.features.extraction_pipeline import run_extraction_pipeline
from reminder_engine.features.reminder_models import ExtractionResult
from reminder_engine.interfaces.llm_interface import ChatMessage, LLMInterface

logger = logging.getLogger(__name__)

TASKS_SYSTEM_PROMPT = """You are a task extraction assistant. Analyze the given text and extract actionable tasks, reminders, or commitments.
Identify:
1. Intent/Task: What needs to be done (e.g., "Call John", "Pay bill", "Schedule meeting")
2. Entities: People, places, or things mentioned
3. Dates/Times: When the task should be done (convert relative dates like "Monday", "next week", "tomorrow" to actual dates)
4. Context: Any additional relevant information

Today's date is {today}.
Return ONLY valid JSON in this shape:
{{ "tasks": [ {{ "title": "...", "date": "YYYY-MM-DD", "time": "HH:MM or null", "description": "...", "confidence": 0-1, "entities": [] }} ] }}
Do not include tasks whose date is not stated or implied by the text."""

DOCUMENT_PROMPT = """Extract task details from this document text and return ONLY valid JSON.
Rules:
- Return a single JSON object only (no markdown, no extra text)
- Use YYYY-MM-DD for dates
- If you cannot find a value, set it to null (except billName which should be a short title)
- Prefer the actual due date over any reminder dates
- If multiple amounts exist, choose the total due amount
- Do NOT guess or infer values that are not explicitly stated

JSON schema:
{{
  "billName": "The task name or bill/service name (e.g., 'Pay Electricity Bill')",
  "deadlineDate": "The due date or deadline date in YYYY-MM-DD format",
  "time": "Time in HH:MM format if available, otherwise null",
  "amount": "Any monetary amount mentioned (e.g., '$150.00')",
  "description": "A brief description of the task or document"
}}

IMPORTANT:
- Look for terms like "Due Date", "Payment Due", "Deadline", "Pay By"
- Today's date is {today}

Document text:
{text}"""

def _check_readable(text: Optional[str], min_chars: int) -> str:
    if not isinstance(text, str) or len(text.strip()) < min_chars:
        raise UnreadableInputError(
            "Document text is empty or unreadable. Try a text-based file or paste the text instead."
        )
    return text.strip()

def _call_provider(llm_service: LLMInterface, messages: List[ChatMessage]) -> str:
    """Sends the request and converts transport failures into ProviderError."""
    settings = get_settings()
    provider = getattr(llm_service, "provider_name", "LLM")
    try:
        response = llm_service.chat(
            messages,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            json_mode=True,
        )
    except ProviderError:
        raise
    except Exception as e:
        logger.error(f"Error calling {provider} for reminder extraction: {e}", exc_info=True)
        raise classify_provider_error(
            e, provider=provider, api_key_env=getattr(llm_service, "api_key_env", "the API key")
        ) from e
    logger.debug(f"Raw {provider} response:\n{response.content}")
    return response.content

def extract_reminders_from_text(
    text: str,
    llm_service: LLMInterface,
    today: Optional[date] = None,
    today_provider: Callable[[], date] = date.today,
) -> ExtractionResult:
    """Extracts reminder candidates from free text such as an email or note.

    Args:
        text: The unstructured source text.
        llm_service: The provider strategy used to call the model.
        today: The current date; resolved from `today_provider` when None.
        today_provider: Supplies the current date when `today` is not given.

    Returns:
        An ExtractionResult; an empty candidate list means nothing was found.

    Raises:
        UnreadableInputError: If the text is empty or too short.
        ProviderError: If the provider call fails (auth, quota, overload, ...).
    """
    settings = get_settings()
    source = _check_readable(text, settings.min_source_chars)
    current_date = today or today_provider()

    messages = [
        ChatMessage(role="system", content=TASKS_SYSTEM_PROMPT.format(today=current_date.isoformat())),
        ChatMessage(role="user", content=f"Extract all tasks and reminders from this text:\n\n{source}"),
    ]
    content = _call_provider(llm_service, messages)
    return run_extraction_pipeline(
        content, current_date, source_text=source, currency_symbol=settings.currency_symbol
    )

def extract_reminders_from_document(
    document_text: str,
    llm_service: LLMInterface,
    today: Optional[date] = None,
    today_provider: Callable[[], date] = date.today,
) -> ExtractionResult:
    """Extracts a bill/deadline reminder from document text (invoice, statement, letter).

    Same contract as `extract_reminders_from_text`; the prompt asks for a
    single object with billName/deadlineDate/time/amount/description.
    """
    settings = get_settings()
    source = _check_readable(document_text, settings.min_source_chars)
    current_date = today or today_provider()

    messages = [
        ChatMessage(role="user", content=DOCUMENT_PROMPT.format(today=current_date.isoformat(), text=source)),
    ]
    content = _call_provider(llm_service, messages)
    return run_extraction_pipeline(
        content, current_date, source_text=source, currency_symbol=settings.currency_symbol
    )
