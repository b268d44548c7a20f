"""Pydantic models for the reminder extraction feature."""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

class TaskType(str, Enum):
    bill = "bill"
    meeting = "meeting"
    deadline = "deadline"
    appointment = "appointment"
    task = "task"
    payment = "payment"
    reminder = "reminder"

class ExtractionStrategy(str, Enum):
    """Which step of the pipeline produced the candidate list."""
    structured = "structured"
    heuristic = "heuristic"
    none = "none"

class ReminderCandidate(BaseModel):
    """A reminder proposal that still needs user confirmation before it is saved.

    Dates and times are always in canonical form (YYYY-MM-DD / 24-hour HH:MM).
    Confidence is clamped into [0, 1] on construction.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: Optional[str] = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    description: str = ""
    type: TaskType = TaskType.task
    amount: Optional[Union[int, float, str]] = None
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    entities: List[str] = Field(default_factory=list)
    source_text: str = Field(default="", alias="sourceText")

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        if v is None:
            return 0.7
        return min(1.0, max(0.0, float(v)))

class ExtractionResult(BaseModel):
    candidates: List[ReminderCandidate] = Field(default_factory=list)
    strategy: ExtractionStrategy = ExtractionStrategy.none
