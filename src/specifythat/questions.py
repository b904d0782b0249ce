"""
The fixed, ordered interview question list.

Question 1 (project name) and question 2 (project description) have special
paths in the interview; everything from question 3 on is a plain answer.
"""

from specifythat.models.question import Question, QuestionValidation

PROJECT_NAME_QUESTION_ID = 1
PROJECT_DESCRIPTION_QUESTION_ID = 2

_DEFAULT_RULES = QuestionValidation(min_length=3, max_length=2000, sanitize=True)

QUESTIONS: tuple[Question, ...] = (
    Question(
        id=PROJECT_NAME_QUESTION_ID,
        text="What's the name of your project?",
        placeholder="e.g. InvoiceTrack",
        validation=QuestionValidation(
            min_length=1,
            max_length=100,
            sanitize=True,
            check_meaningful=False,
        ),
    ),
    Question(
        id=PROJECT_DESCRIPTION_QUESTION_ID,
        text="Describe your project. What does it do and who is it for?",
        help_text="A few sentences is enough. You can attach an existing doc for extra context.",
        allow_file_upload=True,
        file_types=(".txt", ".md"),
        validation=QuestionValidation(min_length=20, max_length=5000, sanitize=True),
    ),
    Question(
        id=3,
        text="Who are the primary users, and what problem does this solve for them?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=4,
        text="What are the core features the first version must have?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=5,
        text="What platform will it run on (web, mobile, desktop, CLI, API)?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=6,
        text="Do you have a preferred tech stack or any technical constraints?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=7,
        text="What data does the system store, and where does it come from?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=8,
        text="Does it integrate with any external services or APIs?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=9,
        text="How do users sign in, and are there different roles or permissions?",
        validation=_DEFAULT_RULES,
    ),
    Question(
        id=10,
        text="What does success look like? How will you know the project works?",
        validation=_DEFAULT_RULES,
    ),
)
