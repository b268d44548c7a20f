"""Orchestrates structured parsing, validation and heuristic fallback.

The pipeline is an ordered sequence of fallible steps. Each step returns a
candidate list, or None when it cannot run. Parse and validation problems
degrade to a shorter or empty list; they are never raised to the caller.
"""

import logging
from datetime import date
from typing import Any, Callable, List, Optional, Tuple

from reminder_engine.features.candidate_validator import validate_candidates
from reminder_engine.features.errors import UnparsableResponseError
from reminder_engine.features.heuristic_extractor import extract_with_heuristics
from reminder_engine.features.reminder_models import (
    ExtractionResult,
    ExtractionStrategy,
    ReminderCandidate,
)
from reminder_engine.features.response_parser import parse_structured_response

logger = logging.getLogger(__name__)

Step = Callable[[], Optional[List[ReminderCandidate]]]

def _structured_step(
    raw: Any, today: date, source_text: str, currency_symbol: str
) -> Optional[List[ReminderCandidate]]:
    try:
        payload = parse_structured_response(raw)
    except UnparsableResponseError as e:
        logger.info(f"Structured parse failed, falling back to heuristics: {e}")
        return None
    return validate_candidates(payload, today, source_text, currency_symbol)

def _heuristic_step(text: Any, today: date) -> Optional[List[ReminderCandidate]]:
    if not isinstance(text, str) or not text.strip():
        return None
    return extract_with_heuristics(text, today) or None

def run_extraction_pipeline(
    raw: Any, today: date, source_text: Optional[str] = None, currency_symbol: str = "$"
) -> ExtractionResult:
    """Turns raw model output into validated reminder candidates.

    Args:
        raw: The completion text, or already decoded JSON.
        today: The current date (injected for determinism).
        source_text: The document or message the model was asked about.
            Used for traceability snippets and as a second heuristic input.
        currency_symbol: Prefix for bare numeric amounts in structured output.

    Returns:
        An ExtractionResult. A successful structured parse is terminal even
        when validation drops every entry; an empty result means nothing
        usable was found.
    """
    source = source_text if isinstance(source_text, str) else ""

    steps: Tuple[Tuple[ExtractionStrategy, Step, bool], ...] = (
        (ExtractionStrategy.structured, lambda: _structured_step(raw, today, source, currency_symbol), True),
        (ExtractionStrategy.heuristic, lambda: _heuristic_step(raw, today), False),
        (
            ExtractionStrategy.heuristic,
            lambda: _heuristic_step(source, today) if source and source != raw else None,
            False,
        ),
    )

    for strategy, step, terminal in steps:
        candidates = step()
        if candidates is None:
            continue
        if candidates or terminal:
            logger.info(f"Extraction finished via {strategy.value} path with {len(candidates)} candidate(s).")
            return ExtractionResult(candidates=candidates, strategy=strategy)

    logger.info("No structured data and no heuristic match; returning empty result.")
    return ExtractionResult(candidates=[], strategy=ExtractionStrategy.none)

def extract_candidates(
    raw: Any, today: date, source_text: Optional[str] = None, currency_symbol: str = "$"
) -> List[ReminderCandidate]:
    """Convenience wrapper returning only the candidate list."""
    return run_extraction_pipeline(raw, today, source_text, currency_symbol).candidates
