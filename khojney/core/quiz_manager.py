"""Business logic for starting quiz attempts, shared between UI and API."""

from __future__ import annotations

import logging
import random
from threading import Lock

from khojney.core.models import AttemptRecord, Category, EmptyQuestionSetError, QuizSettings
from khojney.core.question_bank import QuestionBank
from khojney.core.scheduling import Scheduler
from khojney.core.services.attempt_store import AttemptStore
from khojney.core.services.quiz_session import QuizSession, QuizSessionListener

logger = logging.getLogger(__name__)


class AttemptCreationError(RuntimeError):
    """Raised when the attempt store refuses to open a new attempt."""


class QuizManager:
    """Facade over the question bank and the attempt store."""

    def __init__(self, question_bank: QuestionBank, attempt_store: AttemptStore) -> None:
        self._lock = Lock()
        self._bank = question_bank
        self._store = attempt_store

    # --- Question bank delegation ---

    def list_categories(self) -> list[Category]:
        with self._lock:
            return self._bank.categories()

    def get_category(self, slug: str) -> Category:
        with self._lock:
            return self._bank.get_category(slug)

    # --- Attempts ---

    def start_quiz(
        self,
        user_id: str,
        category_slug: str,
        settings: QuizSettings,
        *,
        scheduler: Scheduler,
        listener: QuizSessionListener | None = None,
    ) -> QuizSession:
        """Open an attempt and return a running session for it.

        The attempt is created before the first question is shown; if that
        fails no session is started.
        """
        rng = random.Random(settings.shuffle_seed)
        with self._lock:
            questions = self._bank.select_questions(
                category_slug,
                limit=settings.limit,
                difficulty=settings.difficulty,
                rng=rng,
            )
        if not questions:
            raise EmptyQuestionSetError(f"No questions in '{category_slug}' match the chosen settings.")

        try:
            attempt_id = self._store.create_attempt(user_id, category_slug, settings.snapshot())
        except Exception as exc:
            logger.exception("Could not create attempt for %s in %s", user_id, category_slug)
            raise AttemptCreationError(f"Could not start the quiz: {exc}") from exc

        logger.info("Attempt %s started: %d questions from %s", attempt_id, len(questions), category_slug)
        return QuizSession(
            questions,
            scheduler=scheduler,
            settings=settings,
            attempt_id=attempt_id,
            attempt_store=self._store,
            rng=rng,
            listener=listener,
        )

    def get_attempt(self, attempt_id: str) -> AttemptRecord:
        return self._store.get_attempt(attempt_id)

    def list_attempts(self, user_id: str | None = None) -> list[AttemptRecord]:
        return self._store.list_attempts(user_id)
