"""
Answer generation API — suggestions for questions the user can't answer, and
project names for a deferred first question.
"""

from typing import Sequence

from specifythat.errors import ServiceError
from specifythat.interview import DEFAULT_HINT
from specifythat.models.session import Answer
from specifythat.questions import QUESTIONS
from specifythat.transport.http import HttpClient

NAME_HINT = "I don't know - please suggest a name based on the project description"


class AnswersAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def generate_answer(self, question: str, prior_answers: Sequence[Answer], hint: str = DEFAULT_HINT) -> str:
        """Suggest an answer to `question` given everything answered so far."""
        data = await self._http.post("/generate-answer", {
            "question": question,
            "conversationContext": [a.to_wire() for a in prior_answers],
            "userInput": hint,
        }, error_message="Failed to generate answer")
        if not isinstance(data, dict) or not isinstance(data.get("answer"), str):
            raise ServiceError("Failed to generate answer", details={"reason": "missing answer"})
        return data["answer"]

    async def generate_project_name(self, description: str) -> str:
        """Suggest a project name from its description. Raises ServiceError on failure."""
        context = Answer(question=QUESTIONS[1].text, answer=description)
        try:
            return await self.generate_answer(QUESTIONS[0].text, [context], hint=NAME_HINT)
        except ServiceError as e:
            raise ServiceError("Failed to generate project name", details=e.details) from e
