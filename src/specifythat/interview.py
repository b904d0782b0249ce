"""
Interview state machine — owns the session and decides what happens next.

States (derived from question index, unit-selection flag and mode):
- QUESTION:       waiting for an answer to the current question
- UNIT_SELECTION: question 2 was decomposed into several buildable units
- IDEATION:       guided sub-dialog producing a question-2 description
- COMPLETED:      every question answered

Every public operation is an Event. An event that is not accepted in the
current state is a no-op; it never raises. Service failures raise
ServiceError and leave the session untouched.

Project-name generation for a deferred question 1 runs as a background task
bound to the session that launched it; a reset in the meantime makes its
result a no-op.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence, Union

from specifythat.errors import ServiceError
from specifythat.models.analysis import BuildableUnit, MultiUnitResult, SingleUnitResult
from specifythat.models.question import Question
from specifythat.models.session import Answer, Session, SessionStatus
from specifythat.questions import PROJECT_DESCRIPTION_QUESTION_ID, PROJECT_NAME_QUESTION_ID, QUESTIONS
from specifythat.sanitize import sanitize_project_name
from specifythat.validation import prepare_answer

logger = logging.getLogger(__name__)

FALLBACK_PROJECT_NAME = "Untitled Project"
DEFAULT_HINT = "I don't know"

AnalysisOutcome = Union[SingleUnitResult, MultiUnitResult]
AnalyzeFn = Callable[[str, Optional[str]], Awaitable[AnalysisOutcome]]
GenerateNameFn = Callable[[str], Awaitable[str]]
GenerateAnswerFn = Callable[[str, Sequence[Answer], str], Awaitable[str]]
GenerateSpecFn = Callable[[Sequence[Answer]], Awaitable[str]]


class InterviewMode(str, Enum):
    INTERVIEW = "interview"
    IDEATION = "ideation"


class InterviewState(str, Enum):
    QUESTION = "question"
    UNIT_SELECTION = "unit_selection"
    IDEATION = "ideation"
    COMPLETED = "completed"


class Event(str, Enum):
    SUBMIT_ANSWER = "submit_answer"
    ACCEPT_GENERATED_ANSWER = "accept_generated_answer"
    DEFER_FIRST_QUESTION = "defer_first_question"
    ANALYZE_DESCRIPTION = "analyze_description"
    SELECT_UNIT = "select_unit"
    RESOLVE_DEFERRED_NAME = "resolve_deferred_name"
    GO_BACK = "go_back"
    RESET = "reset"
    ENTER_IDEATION = "enter_ideation"
    CANCEL_IDEATION = "cancel_ideation"
    EXIT_IDEATION = "exit_ideation"
    SUGGEST_ANSWER = "suggest_answer"
    GENERATE_SPEC = "generate_spec"


_ANY_STATE = frozenset(InterviewState)

# States in which each event is accepted
TRANSITIONS: dict[Event, frozenset[InterviewState]] = {
    Event.SUBMIT_ANSWER: frozenset({InterviewState.QUESTION}),
    Event.ACCEPT_GENERATED_ANSWER: frozenset({InterviewState.QUESTION}),
    Event.DEFER_FIRST_QUESTION: frozenset({InterviewState.QUESTION}),
    Event.ANALYZE_DESCRIPTION: frozenset({InterviewState.QUESTION}),
    Event.SELECT_UNIT: frozenset({InterviewState.UNIT_SELECTION}),
    Event.RESOLVE_DEFERRED_NAME: _ANY_STATE,
    Event.GO_BACK: frozenset({InterviewState.QUESTION, InterviewState.UNIT_SELECTION, InterviewState.COMPLETED}),
    Event.RESET: _ANY_STATE,
    Event.ENTER_IDEATION: frozenset({InterviewState.QUESTION}),
    Event.CANCEL_IDEATION: frozenset({InterviewState.IDEATION}),
    Event.EXIT_IDEATION: frozenset({InterviewState.IDEATION}),
    Event.SUGGEST_ANSWER: frozenset({InterviewState.QUESTION}),
    Event.GENERATE_SPEC: frozenset({InterviewState.COMPLETED}),
}

_DECOMPOSITION_CLEARED = {
    "project_summary": "",
    "was_multi_unit": False,
    "selected_unit_id": None,
    "all_units": None,
}


class InterviewStateMachine:
    """Drives one interview run at a time. Not thread-safe; use from one event loop."""

    def __init__(
        self,
        analyze: AnalyzeFn,
        generate_name: GenerateNameFn,
        generate_answer: Optional[GenerateAnswerFn] = None,
        generate_spec: Optional[GenerateSpecFn] = None,
        questions: Sequence[Question] = QUESTIONS,
    ):
        self._analyze = analyze
        self._generate_name = generate_name
        self._generate_answer = generate_answer
        self._generate_spec = generate_spec
        self._questions = tuple(questions)
        self._name_index = self._index_of(PROJECT_NAME_QUESTION_ID)
        self._description_index = self._index_of(PROJECT_DESCRIPTION_QUESTION_ID)

        self._session = Session()
        self._mode = InterviewMode.INTERVIEW
        self._unit_selection = False
        self._analysis_result: Optional[AnalysisOutcome] = None
        self._analysis_ticket: Optional[object] = None
        self._loading = False
        self._error: Optional[str] = None
        self._suggestion: Optional[str] = None
        self._name_tasks: dict[asyncio.Task, str] = {}

    def _index_of(self, question_id: int) -> int:
        for i, q in enumerate(self._questions):
            if q.id == question_id:
                return i
        raise ValueError(f"question list has no question with id {question_id}")

    # -- read-only views -------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def mode(self) -> InterviewMode:
        return self._mode

    @property
    def state(self) -> InterviewState:
        if self._mode is InterviewMode.IDEATION:
            return InterviewState.IDEATION
        if self._unit_selection:
            return InterviewState.UNIT_SELECTION
        if self._session.current_question_index >= self.total_questions:
            return InterviewState.COMPLETED
        return InterviewState.QUESTION

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Optional[Question]:
        index = self._session.current_question_index
        return self._questions[index] if index < self.total_questions else None

    @property
    def is_complete(self) -> bool:
        return self._session.current_question_index >= self.total_questions

    @property
    def progress(self) -> int:
        """Percent of questions answered, rounded half up."""
        return int(self._session.current_question_index * 100 / self.total_questions + 0.5)

    @property
    def show_unit_selection(self) -> bool:
        return self._unit_selection

    @property
    def analysis_result(self) -> Optional[AnalysisOutcome]:
        return self._analysis_result

    @property
    def is_analyzing(self) -> bool:
        return self._analysis_ticket is not None

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_generating_name(self) -> bool:
        return any(sid == self._session.id for sid in self._name_tasks.values())

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def suggestion(self) -> Optional[str]:
        return self._suggestion

    def dismiss_error(self) -> None:
        self._error = None

    def discard_suggestion(self) -> None:
        self._suggestion = None

    # -- helpers ---------------------------------------------------------

    def _accepts(self, event: Event, guard: bool = True) -> bool:
        state = self.state
        if state in TRANSITIONS[event] and guard:
            return True
        logger.debug("Ignoring %s in state %s (question index %d)",
                     event.value, state.value, self._session.current_question_index)
        return False

    def _on_question(self, index: int) -> bool:
        return self._session.current_question_index == index

    def _replace(self, session: Session, event: Event) -> Session:
        logger.debug("%s: question index %d -> %d",
                     event.value, self._session.current_question_index, session.current_question_index)
        self._session = session
        return session

    def _status_for(self, index: int) -> SessionStatus:
        return SessionStatus.COMPLETED if index >= self.total_questions else SessionStatus.IN_PROGRESS

    def _with_answer(self, session: Session, text: str, is_ai_generated: bool) -> Session:
        question = self._questions[session.current_question_index]
        index = session.current_question_index + 1
        update = {
            "answers": session.answers + (Answer(question=question.text, answer=text, is_ai_generated=is_ai_generated),),
            "current_question_index": index,
            "status": self._status_for(index),
        }
        # A real answer to question 1 is never overwritten by a generated name
        if session.current_question_index == self._name_index:
            update["deferred_q1"] = False
        return session.model_copy(update=update)

    def _without_last_answer(self, session: Session) -> Session:
        index = session.current_question_index - 1
        return session.model_copy(update={
            "answers": session.answers[:-1],
            "current_question_index": index,
            "status": self._status_for(index),
        })

    # -- answering -------------------------------------------------------

    def submit_answer(self, text: str) -> Session:
        """Gate and store a typed answer. Raises InputRejectedError if the gate refuses it."""
        if not self._accepts(Event.SUBMIT_ANSWER, not self._on_question(self._description_index)):
            return self._session
        answer = prepare_answer(text, self.current_question)  # type: ignore[arg-type]
        self._error = None
        self._suggestion = None
        return self._replace(self._with_answer(self._session, answer, False), Event.SUBMIT_ANSWER)

    def accept_generated_answer(self, text: str) -> Session:
        """Store a generated suggestion the user accepted, as-is."""
        if not self._accepts(Event.ACCEPT_GENERATED_ANSWER, not self._on_question(self._description_index)):
            return self._session
        self._error = None
        self._suggestion = None
        return self._replace(self._with_answer(self._session, text, True), Event.ACCEPT_GENERATED_ANSWER)

    def defer_first_question(self) -> Session:
        """Skip the project name for now; it is generated once the description is known."""
        if not self._accepts(Event.DEFER_FIRST_QUESTION, self._on_question(self._name_index)):
            return self._session
        session = self._with_answer(self._session, "", True)
        return self._replace(session.model_copy(update={"deferred_q1": True}), Event.DEFER_FIRST_QUESTION)

    async def suggest_answer(self, hint: str = DEFAULT_HINT) -> Optional[str]:
        """Ask the answer service for a suggestion to the current question (3 onward)."""
        if not self._accepts(Event.SUGGEST_ANSWER,
                             self._session.current_question_index > self._description_index):
            return None
        if self._generate_answer is None:
            raise ServiceError("Answer generation is not available")

        issued = self._session
        question = self.current_question
        self._loading = True
        self._error = None
        try:
            suggestion = await self._generate_answer(question.text, issued.answers, hint)  # type: ignore[union-attr]
        except ServiceError as e:
            self._error = e.message
            raise
        finally:
            self._loading = False

        if self._session.id == issued.id and self._session.current_question_index == issued.current_question_index:
            self._suggestion = suggestion
        return suggestion

    # -- question 2: decomposition --------------------------------------

    async def analyze_description(self, text: str, attachment: Optional[str] = None) -> Optional[AnalysisOutcome]:
        """Gate the description and hand it to the decomposition service.

        A single-unit result answers question 2 with the condensed summary. A
        multi-unit result keeps the index on question 2 and switches to unit
        selection. Returns None when the event is ignored or the result
        arrived after the user reset or navigated away.
        """
        if not self._accepts(Event.ANALYZE_DESCRIPTION,
                             self._on_question(self._description_index) and not self.is_analyzing):
            return None
        description = prepare_answer(text, self.current_question)  # type: ignore[arg-type]

        issued = self._session
        ticket = object()
        self._analysis_ticket = ticket
        self._error = None
        try:
            result = await self._analyze(description, attachment)
        except ServiceError as e:
            if self._analysis_ticket is ticket:
                self._error = e.message
            raise
        finally:
            current = self._analysis_ticket is ticket
            if current:
                self._analysis_ticket = None

        if not current or self._session.id != issued.id:
            logger.info("Discarding stale analysis result for session %s", issued.id)
            return None
        self._analysis_result = result

        if isinstance(result, MultiUnitResult):
            logger.info("Description split into %d buildable units", len(result.units))
            self._unit_selection = True
            self._replace(self._session.model_copy(update={
                "was_multi_unit": True,
                "all_units": result.units,
            }), Event.ANALYZE_DESCRIPTION)
            return result

        session = self._with_answer(self._session, result.summary, True)
        session = self._replace(session.model_copy(update={
            **_DECOMPOSITION_CLEARED,
            "project_summary": result.summary,
        }), Event.ANALYZE_DESCRIPTION)
        if session.deferred_q1:
            self._launch_name_resolution(result.summary)
        return result

    def select_unit(self, unit: BuildableUnit) -> Session:
        """Answer question 2 with the chosen unit's description.

        Must run inside an event loop when question 1 was deferred, since the
        project name is then generated in the background.
        """
        units = self._session.all_units or ()
        if not self._accepts(Event.SELECT_UNIT, not units or unit in units):
            return self._session

        session = self._session
        # Back-navigation from question 3 reopens the choice with question 2 answered
        if session.current_question_index > self._description_index:
            session = self._without_last_answer(session)
        session = self._with_answer(session, unit.description, True)
        self._unit_selection = False
        session = self._replace(session.model_copy(update={
            "project_summary": unit.description,
            "selected_unit_id": unit.id,
        }), Event.SELECT_UNIT)
        if session.deferred_q1:
            self._launch_name_resolution(unit.description)
        return session

    # -- deferred project name ------------------------------------------

    def resolve_deferred_name(self, name: str) -> Session:
        """Fill in the first answer with a (sanitized) project name."""
        if not self._accepts(Event.RESOLVE_DEFERRED_NAME):
            return self._session
        return self._write_name(self._session.id, name)

    def _write_name(self, session_id: str, name: str) -> Session:
        if self._session.id != session_id:
            logger.info("Dropping project name for stale session %s", session_id)
            return self._session
        if not self._session.answers:
            logger.debug("No first answer to fill in for session %s", session_id)
            return self._session
        name = sanitize_project_name(name) or FALLBACK_PROJECT_NAME
        answers = self._session.answers
        first = answers[0].model_copy(update={"answer": name})
        return self._replace(self._session.model_copy(update={
            "answers": (first,) + answers[1:],
            "deferred_q1": False,
        }), Event.RESOLVE_DEFERRED_NAME)

    def _launch_name_resolution(self, context: str) -> None:
        session_id = self._session.id
        task = asyncio.get_running_loop().create_task(self._resolve_name(session_id, context))
        self._name_tasks[task] = session_id
        task.add_done_callback(lambda t: self._name_tasks.pop(t, None))

    async def _resolve_name(self, session_id: str, context: str) -> None:
        try:
            name = await self._generate_name(context)
        except Exception as e:
            logger.warning("Project name generation failed, using %r: %s", FALLBACK_PROJECT_NAME, e)
            name = FALLBACK_PROJECT_NAME
        self._write_name(session_id, name)

    async def wait_for_pending(self) -> None:
        """Wait for background project-name generation to finish."""
        if self._name_tasks:
            await asyncio.gather(*list(self._name_tasks))

    # -- navigation ------------------------------------------------------

    def go_back(self) -> Session:
        if not self._accepts(Event.GO_BACK,
                             self._unit_selection or self._session.current_question_index > 0):
            return self._session
        session = self._session
        self._analysis_ticket = None
        self._suggestion = None
        self._error = None

        if self._unit_selection:
            # Back to the description input, dropping the reopened answer if any
            self._unit_selection = False
            self._analysis_result = None
            if session.current_question_index > self._description_index:
                session = self._without_last_answer(session)
            return self._replace(session.model_copy(update=_DECOMPOSITION_CLEARED), Event.GO_BACK)

        if session.current_question_index == self._description_index + 1 and session.was_multi_unit:
            self._unit_selection = True
            logger.debug("go_back: reopening unit selection")
            return session

        was_description_answer = session.current_question_index == self._description_index + 1
        session = self._without_last_answer(session)
        if was_description_answer:
            session = session.model_copy(update=_DECOMPOSITION_CLEARED)
        return self._replace(session, Event.GO_BACK)

    def reset(self) -> Session:
        """Start over with a fresh session. In-flight service calls can no longer touch it."""
        self._mode = InterviewMode.INTERVIEW
        self._unit_selection = False
        self._analysis_result = None
        self._analysis_ticket = None
        self._loading = False
        self._error = None
        self._suggestion = None
        return self._replace(Session(), Event.RESET)

    # -- ideation --------------------------------------------------------

    def enter_ideation_mode(self) -> None:
        if self._accepts(Event.ENTER_IDEATION,
                         self._on_question(self._description_index) and not self.is_analyzing):
            self._mode = InterviewMode.IDEATION

    def cancel_ideation_mode(self) -> None:
        if self._accepts(Event.CANCEL_IDEATION):
            self._mode = InterviewMode.INTERVIEW

    def exit_ideation_mode(self, description: str) -> str:
        """Leave ideation with its result. The caller decides when to analyze it."""
        if self._accepts(Event.EXIT_IDEATION):
            self._mode = InterviewMode.INTERVIEW
        return description

    # -- completion ------------------------------------------------------

    async def generate_spec(self) -> Optional[str]:
        """Generate the markdown spec once every question is answered."""
        if not self._accepts(Event.GENERATE_SPEC):
            return None
        if self._generate_spec is None:
            raise ServiceError("Spec generation is not available")
        await self.wait_for_pending()

        self._loading = True
        self._error = None
        try:
            return await self._generate_spec(self._session.answers)
        except ServiceError as e:
            self._error = e.message
            raise
        finally:
            self._loading = False
