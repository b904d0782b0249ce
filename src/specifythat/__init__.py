"""
specifythat — SpecifyThat SDK for Python.

Turn a project idea into a buildable spec through a guided interview.
Interview state machine, input-quality checks and a REST client for the
SpecifyThat backend.
"""

from specifythat.client import SpecifyThat, AsyncSpecifyThat
from specifythat.interview import (
    FALLBACK_PROJECT_NAME,
    Event,
    InterviewMode,
    InterviewState,
    InterviewStateMachine,
)
from specifythat.errors import SpecifyThatError, InputRejectedError, ServiceError
from specifythat.models.analysis import BuildableUnit, MultiUnitResult, SingleUnitResult
from specifythat.models.session import Answer, Session, SessionStatus
from specifythat.quality import is_gibberish_input, validate_meaningful_input
from specifythat.sanitize import sanitize_markdown, sanitize_project_name
from specifythat.validation import validate_answer

__version__ = "0.1.0"
__all__ = [
    "SpecifyThat",
    "AsyncSpecifyThat",
    "InterviewStateMachine",
    "InterviewState",
    "InterviewMode",
    "Event",
    "FALLBACK_PROJECT_NAME",
    "SpecifyThatError",
    "InputRejectedError",
    "ServiceError",
    "Answer",
    "Session",
    "SessionStatus",
    "BuildableUnit",
    "SingleUnitResult",
    "MultiUnitResult",
    "is_gibberish_input",
    "validate_meaningful_input",
    "sanitize_markdown",
    "sanitize_project_name",
    "validate_answer",
]
