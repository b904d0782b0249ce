"""
Answer validation against declarative per-question rules, and the input gate
every typed answer passes before it reaches the interview.
"""

import re
from typing import Optional

from specifythat.errors import InputRejectedError
from specifythat.models.question import Question, QuestionValidation
from specifythat.quality import validate_meaningful_input
from specifythat.sanitize import apply_sanitization


def validate_answer(text: str, validation: Optional[QuestionValidation] = None) -> Optional[str]:
    """Return the first violated rule's message, or None if the answer passes."""
    if validation is None:
        return None

    trimmed = text.strip()

    if validation.min_length and len(trimmed) < validation.min_length:
        return f"Must be at least {validation.min_length} characters"

    if validation.max_length and len(trimmed) > validation.max_length:
        return f"Must be {validation.max_length} characters or less"

    if validation.pattern and not re.search(validation.pattern, trimmed):
        return validation.pattern_message or "Invalid format"

    return None


def prepare_answer(text: str, question: Question) -> str:
    """Validate, check for gibberish and sanitize a typed answer.

    Raises InputRejectedError with a user-facing message; the returned text is
    what gets stored in the session.
    """
    rules = question.validation
    message = validate_answer(text, rules)
    if message is None and (rules is None or rules.check_meaningful):
        message = validate_meaningful_input(text)
    if message is not None:
        raise InputRejectedError(message, details={"question_id": question.id})

    answer = apply_sanitization(text, rules, question.id)
    # Length rules apply to what gets stored, not just to what was typed
    if rules is not None and rules.min_length and len(answer) < rules.min_length:
        raise InputRejectedError(f"Must be at least {rules.min_length} characters",
                                 details={"question_id": question.id})
    return answer
