"""Unit tests for the extraction pipeline orchestration."""

import json
import pytest
from datetime import date
from unittest.mock import patch

from reminder_engine.features.extraction_pipeline import extract_candidates, run_extraction_pipeline
from reminder_engine.features.reminder_models import ExtractionStrategy

TODAY = date(2025, 1, 1)

def test_structured_path():
    raw = '```json\n{"tasks": [{"title": "Call John", "date": "friday", "confidence": 0.9}]}\n```\nDone.'
    result = run_extraction_pipeline(raw, TODAY, source_text="Call John on Friday about the lease.")

    assert result.strategy == ExtractionStrategy.structured
    assert len(result.candidates) == 1
    assert result.candidates[0].date == "2025-01-03"
    assert result.candidates[0].confidence == 0.9
    assert result.candidates[0].source_text == "Call John on Friday about the lease."

def test_decoded_json_input():
    raw = {"billName": "Electric bill", "deadlineDate": "2026-12-12", "amount": 150}
    result = run_extraction_pipeline(raw, TODAY)

    assert result.strategy == ExtractionStrategy.structured
    assert result.candidates[0].amount == 150

def test_heuristic_fallback_on_unparsable_response():
    result = run_extraction_pipeline("conedison. pay gas bill by 12/12/2026", TODAY)

    assert result.strategy == ExtractionStrategy.heuristic
    assert [c.title for c in result.candidates] == ["Pay conedison gas bill"]
    assert result.candidates[0].confidence == 0.85

def test_heuristic_falls_back_to_source_text():
    raw = "I'm sorry, I could not find any tasks in that text."
    source = "Reminder: pay the Verizon bill by 02/01/2025."
    result = run_extraction_pipeline(raw, TODAY, source_text=source)

    assert result.strategy == ExtractionStrategy.heuristic
    assert len(result.candidates) == 1
    assert result.candidates[0].date == "2025-02-01"

def test_successful_parse_is_terminal_even_when_empty():
    raw = json.dumps({"tasks": [{"title": "Call John about the project"}]})
    source = "Call John by Friday"  # heuristics would find something here
    result = run_extraction_pipeline(raw, TODAY, source_text=source)

    assert result.strategy == ExtractionStrategy.structured
    assert result.candidates == []

def test_no_date_anywhere_yields_empty_on_both_paths():
    structured = run_extraction_pipeline('{"title": "Call John about the project"}', TODAY)
    heuristic = run_extraction_pipeline("Call John about the project sometime.", TODAY)

    assert structured.candidates == []
    assert heuristic.candidates == []
    assert heuristic.strategy == ExtractionStrategy.none

@pytest.mark.parametrize("raw", ["", None, "   ", 42])
def test_degenerate_input_returns_empty_result(raw):
    result = run_extraction_pipeline(raw, TODAY)
    assert result.candidates == []
    assert result.strategy == ExtractionStrategy.none

def test_currency_symbol_passed_to_validation():
    result = run_extraction_pipeline('{"title": "Rent", "date": "2025-02-01", "amount": "900"}', TODAY, currency_symbol="£")
    assert result.candidates[0].amount == "£900"

def test_heuristics_not_consulted_when_parse_succeeds():
    with patch("reminder_engine.features.extraction_pipeline.extract_with_heuristics") as mock_heuristics:
        run_extraction_pipeline('{"title": "Rent", "date": "2025-02-01"}', TODAY, source_text="Pay rent by Friday")
    mock_heuristics.assert_not_called()

def test_extract_candidates_returns_list():
    candidates = extract_candidates('[{"title": "A", "date": "2025-01-02"}]', TODAY)
    assert [c.title for c in candidates] == ["A"]

def test_output_invariants_hold_across_paths():
    inputs = [
        '{"tasks": [{"title": "A", "date": "2020-01-01", "confidence": 3}]}',
        "Call the bank by 3/4/2025 at 10am",
        "Book the venue tomorrow",
    ]
    for raw in inputs:
        for candidate in extract_candidates(raw, TODAY):
            assert 0.0 <= candidate.confidence <= 1.0
            assert len(candidate.date) == 10 and candidate.date[4] == "-" and candidate.date[7] == "-"

def test_heuristic_fallback_keeps_every_sentence_task():
    raw = "Sure! Call John on Friday. Pay gas bill by 12/12/2026."
    result = run_extraction_pipeline(raw, TODAY)

    assert result.strategy == ExtractionStrategy.heuristic
    assert [(c.title, c.date) for c in result.candidates] == [
        ("Call John", "2025-01-03"),
        ("Pay gas bill", "2026-12-12"),
    ]
