"""API Router for the Reminder Extraction feature."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from reminder_engine.api.models import ExtractionResponse, ExtractTextRequest, NormalizeRequest
from reminder_engine.core.config import Settings, get_settings
from reminder_engine.core.dependencies import get_llm_service, get_today
from reminder_engine.features.errors import (
    ProviderError,
    ProviderNotConfiguredError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    UnreadableInputError,
)
from reminder_engine.features.extraction_pipeline import run_extraction_pipeline
from reminder_engine.features.extraction_service import (
    extract_reminders_from_document,
    extract_reminders_from_text,
)
from reminder_engine.features.reminder_models import ExtractionResult
from reminder_engine.interfaces.llm_interface import LLMInterface

logger = logging.getLogger(__name__)
router = APIRouter()

def provider_error_status(error: ProviderError) -> int:
    if isinstance(error, ProviderRateLimitError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    if isinstance(error, (ProviderNotConfiguredError, ProviderOverloadedError)):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY

def _to_response(result: ExtractionResult) -> ExtractionResponse:
    return ExtractionResponse(
        candidates=result.candidates,
        count=len(result.candidates),
        strategy=result.strategy,
    )

async def _run_extraction(extract_func, text: str, llm_service: LLMInterface, today: date) -> ExtractionResponse:
    try:
        result = await run_in_threadpool(extract_func, text, llm_service, today=today)
    except UnreadableInputError as e:
        logger.info(f"Rejected unreadable input ({len(text or '')} chars): {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProviderError as e:
        logger.warning(f"{e.provider} request failed (status {e.status_code}): {e.message}")
        raise HTTPException(status_code=provider_error_status(e), detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error during reminder extraction: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request."
        )
    return _to_response(result)

@router.post("/extract/text", response_model=ExtractionResponse)
async def extract_from_text_endpoint(
    request: ExtractTextRequest,
    llm_service: LLMInterface = Depends(get_llm_service),
    today: date = Depends(get_today),
):
    """
    Extracts reminder candidates from free text such as an email or a note.
    """
    logger.info(f"Received text extraction request ({len(request.text)} chars).")
    return await _run_extraction(extract_reminders_from_text, request.text, llm_service, today)

@router.post("/extract/document", response_model=ExtractionResponse)
async def extract_from_document_endpoint(
    request: ExtractTextRequest,
    llm_service: LLMInterface = Depends(get_llm_service),
    today: date = Depends(get_today),
):
    """
    Extracts a bill or deadline reminder from document text.
    """
    logger.info(f"Received document extraction request ({len(request.text)} chars).")
    return await _run_extraction(extract_reminders_from_document, request.text, llm_service, today)

@router.post("/normalize", response_model=ExtractionResponse)
async def normalize_endpoint(
    request: NormalizeRequest,
    today: date = Depends(get_today),
    settings: Settings = Depends(get_settings),
):
    """
    Runs model output the caller already holds through parsing, validation
    and the heuristic fallback. No provider is called.
    """
    result = run_extraction_pipeline(
        request.payload,
        today,
        source_text=request.source_text,
        currency_symbol=settings.currency_symbol,
    )
    return _to_response(result)
