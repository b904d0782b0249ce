"""
AsyncSpecifyThat / SpecifyThat — main SDK clients.
"""

import asyncio
from typing import Any, Optional, Sequence, Union

import httpx

from specifythat.analysis import AnalysisAPI
from specifythat.answers import AnswersAPI
from specifythat.feedback import FeedbackAPI
from specifythat.interview import DEFAULT_HINT, InterviewStateMachine
from specifythat.models.analysis import MultiUnitResult, SingleUnitResult
from specifythat.models.question import Question
from specifythat.models.session import Answer
from specifythat.questions import QUESTIONS
from specifythat.specs import SpecsAPI
from specifythat.transport.http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, HttpClient


class AsyncSpecifyThat:
    """Async SpecifyThat client (primary)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.http = HttpClient(base_url=base_url, timeout=timeout, transport=transport)
        self.analysis = AnalysisAPI(self.http)
        self.answers = AnswersAPI(self.http)
        self.specs = SpecsAPI(self.http)
        self.feedback = FeedbackAPI(self.http)

    def start_interview(self, questions: Sequence[Question] = QUESTIONS) -> InterviewStateMachine:
        """New interview wired to this client's services."""
        return InterviewStateMachine(
            analyze=self.analysis.analyze_project,
            generate_name=self.answers.generate_project_name,
            generate_answer=self.answers.generate_answer,
            generate_spec=self.specs.generate_spec,
            questions=questions,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncSpecifyThat":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class SpecifyThat:
    """Sync wrapper around AsyncSpecifyThat's service calls. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncSpecifyThat(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    def analyze_project(
        self, description: str, attachment: Optional[str] = None,
    ) -> Union[SingleUnitResult, MultiUnitResult]:
        return self._run(self._async.analysis.analyze_project(description, attachment))

    def generate_answer(self, question: str, prior_answers: Sequence[Answer], hint: str = DEFAULT_HINT) -> str:
        return self._run(self._async.answers.generate_answer(question, prior_answers, hint))

    def generate_project_name(self, description: str) -> str:
        return self._run(self._async.answers.generate_project_name(description))

    def generate_spec(self, answers: Sequence[Answer]) -> str:
        return self._run(self._async.specs.generate_spec(answers))

    def send_feedback(self, feedback: str, url: Optional[str] = None, user_agent: Optional[str] = None) -> None:
        self._run(self._async.feedback.send(feedback, url, user_agent))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
