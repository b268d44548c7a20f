"""Pydantic models for API request and response bodies.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from reminder_engine.features.reminder_models import ExtractionStrategy, ReminderCandidate

class ExtractTextRequest(BaseModel):
    """Request model for extracting reminders from free text or document text.
    """
    text: str = Field(..., description="The email, note or document text to extract reminders from.")

class NormalizeRequest(BaseModel):
    """Request model for running already-obtained model output through the pipeline.
    """
    payload: Any = Field(..., description="Raw completion text or already decoded JSON.")
    source_text: Optional[str] = Field(
        default=None, description="The text the model was asked about; used for snippets and heuristics."
    )

class ExtractionResponse(BaseModel):
    """Response model listing the reminder candidates awaiting confirmation.
    """
    candidates: List[ReminderCandidate] = Field(default_factory=list)
    count: int = Field(0, description="Number of candidates returned.")
    strategy: ExtractionStrategy = Field(
        ExtractionStrategy.none, description="Pipeline step that produced the candidates."
    )
