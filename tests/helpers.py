"""Builders and fakes shared by the quiz tests."""

from __future__ import annotations

from khojney.core.models import Option, Question
from khojney.core.scheduling import ManualScheduler
from khojney.core.services.attempt_store import InMemoryAttemptStore
from khojney.core.services.quiz_session import QuizSessionListener


def make_question(question_id: str, correct: str = "B", letters: str = "ABCD", difficulty: str | None = None) -> Question:
    return Question(
        id=question_id,
        text=f"Question {question_id}?",
        options=tuple(
            Option(id=f"{question_id}:{letter}", text=f"Answer {letter}", is_correct=letter == correct)
            for letter in letters
        ),
        explanation=f"Because {correct}.",
        difficulty=difficulty,
    )


def wrong_option_id(question: Question) -> str:
    return next(option.id for option in question.options if not option.is_correct)


class RecordingListener(QuizSessionListener):
    """Collects session events as (name, payload) tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def question_started(self, session):
        self.events.append(("question_started", session.current_question.id))

    def time_ticked(self, session, remaining_seconds):
        self.events.append(("time_ticked", remaining_seconds))

    def answer_locked(self, session, question, option_id):
        self.events.append(("answer_locked", (question.id, option_id)))

    def quiz_completed(self, session, result):
        self.events.append(("quiz_completed", result.score))

    def submission_saved(self, session, result):
        self.events.append(("submission_saved", result.attempt_id))

    def submission_failed(self, session, error):
        self.events.append(("submission_failed", str(error.cause)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class FlakyAttemptStore(InMemoryAttemptStore):
    """Store whose first ``failures`` finalize calls raise."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures
        self.finalize_calls = 0

    def finalize_attempt(self, attempt_id, result):
        self.finalize_calls += 1
        if self.finalize_calls <= self.failures:
            raise ConnectionError("store unavailable")
        super().finalize_attempt(attempt_id, result)


class SlowHandlerScheduler(ManualScheduler):
    """Manual clock where callbacks can consume time while they run."""

    def spend(self, seconds: float) -> None:
        self._now += seconds
