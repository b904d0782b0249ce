"""
Interview session models.

A Session is never mutated: every transition builds a new one with
``model_copy(update=...)`` and swaps it in whole.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from specifythat.models.analysis import BuildableUnit


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    is_ai_generated: bool = False

    def to_wire(self) -> dict[str, Any]:
        """Shape the backend expects in conversation context and spec requests."""
        return {"question": self.question, "answer": self.answer, "isAIGenerated": self.is_ai_generated}


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    current_question_index: int = Field(default=0, ge=0)
    answers: tuple[Answer, ...] = ()
    status: SessionStatus = SessionStatus.IN_PROGRESS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    project_summary: str = ""
    was_multi_unit: bool = False
    selected_unit_id: Optional[int] = None
    all_units: Optional[tuple[BuildableUnit, ...]] = None
    deferred_q1: bool = False

    @property
    def project_name(self) -> str:
        """Answer to the first question, empty while unanswered or deferred."""
        return self.answers[0].answer if self.answers else ""
