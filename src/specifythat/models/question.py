"""
Question models — validation rules are plain data attached to each question.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class QuestionValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None       # regex, searched against the trimmed answer
    pattern_message: Optional[str] = None
    sanitize: bool = False
    check_meaningful: bool = True       # run the gibberish classifier


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    help_text: Optional[str] = None
    placeholder: Optional[str] = None
    allow_file_upload: bool = False
    file_types: tuple[str, ...] = ()
    validation: Optional[QuestionValidation] = None
