"""
Text sanitizers.

General text keeps markdown-significant characters but escapes them; project
names are stricter and drop them outright.
"""

import re
from typing import Optional

from specifythat.models.question import QuestionValidation
from specifythat.questions import PROJECT_NAME_QUESTION_ID

_MARKDOWN_CHARS = re.compile(r"([*_`#\[\]<>\\])")
_NAME_STRIP_CHARS = re.compile(r"[*_`#\[\]<>\\|~^]")
# Control characters other than tab (\x09), newline (\x0A) and CR (\x0D)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_ALL_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_markdown(text: str) -> str:
    """Escape markdown/HTML characters and normalize whitespace."""
    text = text.replace("\0", "")
    text = _MARKDOWN_CHARS.sub(r"\\\1", text)
    text = _CONTROL_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_project_name(name: str) -> str:
    """Strip markdown/HTML characters and all control characters from a name."""
    name = name.replace("\0", "")
    name = _NAME_STRIP_CHARS.sub("", name)
    name = _ALL_CONTROL_CHARS.sub("", name)
    return _WHITESPACE.sub(" ", name).strip()


def apply_sanitization(
    text: str,
    validation: Optional[QuestionValidation] = None,
    question_id: Optional[int] = None,
) -> str:
    """Sanitize only when the question's rules ask for it; names get the strict mode."""
    if validation is None or not validation.sanitize:
        return text
    if question_id == PROJECT_NAME_QUESTION_ID:
        return sanitize_project_name(text)
    return sanitize_markdown(text)
