"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any

from khojney.constants.quiz_constants import (
    DEFAULT_AUTO_ADVANCE_DELAY_SECONDS,
    DEFAULT_QUIZ_MODE,
    DEFAULT_TIME_PER_QUESTION_SECONDS,
    MIN_OPTIONS_PER_QUESTION,
)


class QuestionValidationError(ValueError):
    """Raised when a question or question set cannot be used for a quiz."""


class EmptyQuestionSetError(QuestionValidationError):
    """Raised when a quiz is started without any questions."""


@dataclass(frozen=True, slots=True)
class Option:
    """One answer choice belonging to a single question."""

    id: str
    text: str
    is_correct: bool = False


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with exactly one correct option."""

    id: str
    text: str
    options: tuple[Option, ...]
    explanation: str = ""
    difficulty: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise QuestionValidationError("Question id must not be empty.")
        if not self.text.strip():
            raise QuestionValidationError(f"Question {self.id!r} has no text.")
        if len(self.options) < MIN_OPTIONS_PER_QUESTION:
            raise QuestionValidationError(
                f"Question {self.id!r} needs at least {MIN_OPTIONS_PER_QUESTION} options."
            )
        option_ids = [option.id for option in self.options]
        if len(set(option_ids)) != len(option_ids):
            raise QuestionValidationError(f"Question {self.id!r} has duplicate option ids.")
        correct_count = sum(1 for option in self.options if option.is_correct)
        if correct_count != 1:
            raise QuestionValidationError(
                f"Question {self.id!r} must have exactly one correct option (found {correct_count})."
            )

    @property
    def correct_option(self) -> Option:
        return next(option for option in self.options if option.is_correct)

    @property
    def correct_option_id(self) -> str:
        return self.correct_option.id

    def option_by_id(self, option_id: str) -> Option | None:
        return next((option for option in self.options if option.id == option_id), None)


@dataclass(frozen=True, slots=True)
class Category:
    """A named group of questions loaded from one question bank file."""

    slug: str
    name: str
    questions: tuple[Question, ...]
    featured: bool = False


class QuizPhase(Enum):
    """Phases of a quiz session."""

    AWAITING_ANSWER = auto()
    ANSWER_LOCKED = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class QuizSettings:
    """Per-attempt options chosen before the quiz starts."""

    mode: str = DEFAULT_QUIZ_MODE
    limit: int | None = None
    difficulty: str | None = None
    time_per_question_seconds: int = DEFAULT_TIME_PER_QUESTION_SECONDS
    auto_advance_delay_seconds: float | None = DEFAULT_AUTO_ADVANCE_DELAY_SECONDS
    shuffle_seed: int | None = None

    def __post_init__(self) -> None:
        if self.time_per_question_seconds <= 0:
            raise ValueError("Time per question must be a positive number of seconds.")
        if self.limit is not None and self.limit <= 0:
            raise ValueError("Question limit must be positive when given.")
        if self.auto_advance_delay_seconds is not None and self.auto_advance_delay_seconds < 0:
            raise ValueError("Auto-advance delay must not be negative.")

    def snapshot(self) -> dict[str, Any]:
        """Return the settings as stored alongside an attempt."""
        return {
            "mode": self.mode,
            "limit": self.limit,
            "difficulty": self.difficulty,
            "time_per_question_seconds": self.time_per_question_seconds,
        }


@dataclass(frozen=True, slots=True)
class AnswerReview:
    """Review row for one question of a finished attempt."""

    question_id: str
    question_text: str
    selected_option_id: str | None
    selected_option_text: str | None
    correct_option_id: str
    correct_option_text: str
    is_correct: bool
    explanation: str = ""

    @property
    def was_answered(self) -> bool:
        return self.selected_option_id is not None


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Final tally of an attempt, computed locally before it is saved."""

    attempt_id: str | None
    score: int
    total_questions: int
    elapsed_seconds: int
    answers: dict[str, str]
    review: tuple[AnswerReview, ...] = ()

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def unanswered_count(self) -> int:
        return self.total_questions - len(self.answers)

    @property
    def accuracy_percent(self) -> int:
        if self.total_questions <= 0:
            return 0
        return round(self.score / self.total_questions * 100)

    @property
    def seconds_per_question(self) -> float:
        if self.total_questions <= 0:
            return 0.0
        return round(self.elapsed_seconds / self.total_questions, 1)


class AttemptStatus(Enum):
    """Lifecycle of a stored attempt."""

    STARTED = "started"
    COMPLETED = "completed"


@dataclass(slots=True)
class AttemptRecord:
    """Attempt as kept by the attempt store."""

    attempt_id: str
    user_id: str
    category_id: str
    settings: dict[str, Any]
    created_at: datetime
    status: AttemptStatus = AttemptStatus.STARTED
    completed_at: datetime | None = None
    result: QuizResult | None = field(default=None)
