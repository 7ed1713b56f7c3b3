"""State machine for a single timed quiz attempt.

A session moves every question through ``AWAITING_ANSWER`` ->
``ANSWER_LOCKED`` and ends in ``COMPLETED``. An answer is locked either by
``select_option`` or by countdown expiry, whichever comes first; the other is
ignored. Inputs that arrive in the wrong phase are no-ops.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from khojney.core.models import (
    EmptyQuestionSetError,
    Option,
    Question,
    QuestionValidationError,
    QuizPhase,
    QuizResult,
    QuizSettings,
)
from khojney.core.scheduling import ScheduledCall, Scheduler
from khojney.core.services.answer_ledger import AnswerLedger
from khojney.core.services.attempt_store import AttemptStore
from khojney.core.services.countdown_timer import CountdownTimer
from khojney.core.services.scoring import build_result
from khojney.core.services.submission import Submission, SubmissionError, SubmissionState
from khojney.core.shuffle import shuffled

logger = logging.getLogger(__name__)


class QuizSessionListener:
    """Receives session events. Override the hooks you need."""

    def question_started(self, session: QuizSession) -> None:
        pass

    def time_ticked(self, session: QuizSession, remaining_seconds: int) -> None:
        pass

    def answer_locked(self, session: QuizSession, question: Question, option_id: str | None) -> None:
        pass

    def quiz_completed(self, session: QuizSession, result: QuizResult) -> None:
        pass

    def submission_saved(self, session: QuizSession, result: QuizResult) -> None:
        pass

    def submission_failed(self, session: QuizSession, error: SubmissionError) -> None:
        pass


class QuizSession:
    """Owns question order, countdown, answers and scoring for one attempt."""

    def __init__(
        self,
        questions: Sequence[Question],
        *,
        scheduler: Scheduler,
        settings: QuizSettings | None = None,
        attempt_id: str | None = None,
        attempt_store: AttemptStore | None = None,
        rng: random.Random | None = None,
        listener: QuizSessionListener | None = None,
    ) -> None:
        if not questions:
            raise EmptyQuestionSetError("A quiz needs at least one question.")
        question_ids = [question.id for question in questions]
        if len(set(question_ids)) != len(question_ids):
            raise QuestionValidationError("Question ids must be unique within a quiz.")

        self._settings = settings or QuizSettings()
        self._scheduler = scheduler
        self._attempt_id = attempt_id
        self._attempt_store = attempt_store
        if rng is None:
            rng = random.Random(self._settings.shuffle_seed)
        self._rng = rng
        self._listener = listener or QuizSessionListener()

        self._ledger = AnswerLedger()
        self._timer = CountdownTimer(scheduler, on_tick=self._handle_tick, on_expire=self._handle_expiry)
        self._auto_advance: ScheduledCall | None = None
        self._result: QuizResult | None = None
        self._submission: Submission | None = None
        self._abandoned = False

        self._started_at = scheduler.now()
        self._question_order: tuple[Question, ...] = tuple(shuffled(questions, self._rng))
        self._current_index = 0
        self._phase = QuizPhase.AWAITING_ANSWER
        self._enter_question()

    # --- Read API ---

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def attempt_id(self) -> str | None:
        return self._attempt_id

    @property
    def settings(self) -> QuizSettings:
        return self._settings

    @property
    def time_budget_seconds(self) -> int:
        return self._settings.time_per_question_seconds

    @property
    def started_at(self) -> float:
        return self._started_at

    @property
    def question_order(self) -> tuple[Question, ...]:
        return self._question_order

    @property
    def total_questions(self) -> int:
        return len(self._question_order)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question:
        return self._question_order[self._current_index]

    @property
    def current_options(self) -> tuple[Option, ...]:
        """Options of the current question in their displayed (shuffled) order."""
        return self._current_options

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def answers(self) -> AnswerLedger:
        return self._ledger

    @property
    def is_last_question(self) -> bool:
        return self._current_index == len(self._question_order) - 1

    @property
    def selected_option_id(self) -> str | None:
        """Answer recorded for the current question, if any."""
        return self._ledger.get(self.current_question.id)

    @property
    def is_abandoned(self) -> bool:
        return self._abandoned

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def submission_state(self) -> SubmissionState | None:
        return self._submission.state if self._submission is not None else None

    @property
    def submission_error(self) -> SubmissionError | None:
        return self._submission.error if self._submission is not None else None

    # --- Inputs ---

    def select_option(self, option_id: str) -> bool:
        """Lock in ``option_id`` for the current question.

        Returns False (and changes nothing) unless the session is awaiting an
        answer.
        """
        if self._abandoned or self._phase is not QuizPhase.AWAITING_ANSWER:
            logger.debug("Ignoring selection of %s in phase %s", option_id, self._phase.name)
            return False
        question = self.current_question
        if question.option_by_id(option_id) is None:
            raise ValueError(f"Option {option_id!r} does not belong to question {question.id!r}.")
        self._ledger.record(question.id, option_id)
        self._timer.cancel()
        self._lock(question, option_id)
        return True

    def select_option_at(self, position: int) -> bool:
        """Select by 1-based position in the displayed option order."""
        if not 1 <= position <= len(self._current_options):
            return False
        return self.select_option(self._current_options[position - 1].id)

    def advance(self) -> bool:
        """Move past a locked question, finishing the quiz after the last one."""
        if self._abandoned or self._phase is not QuizPhase.ANSWER_LOCKED:
            logger.debug("Ignoring advance in phase %s", self._phase.name)
            return False
        self._cancel_auto_advance()
        if self._current_index + 1 < len(self._question_order):
            self._current_index += 1
            self._phase = QuizPhase.AWAITING_ANSWER
            self._enter_question()
        else:
            self._complete()
        return True

    def retry_submission(self) -> bool:
        """Save the already computed result again after a failed save."""
        if self._submission is None or self._submission.state is not SubmissionState.FAILED:
            return False
        self._submission.retry()
        self._notify_submission()
        return True

    def abandon(self) -> None:
        """Stop the countdown of an unfinished attempt; nothing is saved."""
        if self._phase is QuizPhase.COMPLETED or self._abandoned:
            return
        self._abandoned = True
        self._timer.cancel()
        self._cancel_auto_advance()
        logger.info("Attempt %s abandoned at question %d", self._attempt_id, self._current_index + 1)

    # --- Internals ---

    def _enter_question(self) -> None:
        question = self.current_question
        self._current_options = tuple(shuffled(question.options, self._rng))
        self._remaining = self.time_budget_seconds
        logger.debug(
            "Question %d/%d (%s) started", self._current_index + 1, len(self._question_order), question.id
        )
        self._timer.reset(self.time_budget_seconds)
        self._listener.question_started(self)

    def _handle_tick(self, remaining_seconds: int) -> None:
        if self._phase is not QuizPhase.AWAITING_ANSWER:
            return
        self._remaining = remaining_seconds
        self._listener.time_ticked(self, remaining_seconds)

    def _handle_expiry(self) -> None:
        if self._phase is not QuizPhase.AWAITING_ANSWER:
            return
        question = self.current_question
        logger.debug("Time expired on question %s", question.id)
        self._lock(question, None)
        delay = self._settings.auto_advance_delay_seconds
        if delay is not None and self._phase is QuizPhase.ANSWER_LOCKED:
            self._auto_advance = self._scheduler.call_later(delay, self._handle_auto_advance)

    def _handle_auto_advance(self) -> None:
        self._auto_advance = None
        self.advance()

    def _cancel_auto_advance(self) -> None:
        if self._auto_advance is not None:
            self._auto_advance.cancel()
            self._auto_advance = None

    def _lock(self, question: Question, option_id: str | None) -> None:
        self._phase = QuizPhase.ANSWER_LOCKED
        logger.debug("Question %s locked with %s", question.id, option_id or "no answer")
        self._listener.answer_locked(self, question, option_id)

    def _complete(self) -> None:
        self._timer.cancel()
        self._phase = QuizPhase.COMPLETED
        result = build_result(
            self._attempt_id,
            self._question_order,
            self._ledger.as_dict(),
            self._started_at,
            self._scheduler.now(),
        )
        self._result = result
        logger.info(
            "Quiz completed: %d/%d correct in %ds", result.score, result.total_questions, result.elapsed_seconds
        )
        self._submission = Submission(self._attempt_store, self._attempt_id, result)
        try:
            self._listener.quiz_completed(self, result)
        finally:
            # The score is shown first, but saving must not depend on the listener.
            self._submission.submit()
            self._notify_submission()

    def _notify_submission(self) -> None:
        assert self._submission is not None and self._result is not None
        if self._submission.state is SubmissionState.SAVED:
            self._listener.submission_saved(self, self._result)
        elif self._submission.state is SubmissionState.FAILED and self._submission.error is not None:
            self._listener.submission_failed(self, self._submission.error)
