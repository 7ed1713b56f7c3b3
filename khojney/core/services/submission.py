"""Hand-off of a finished attempt to the attempt store."""

from __future__ import annotations

import logging
from enum import Enum, auto

from khojney.core.models import QuizResult
from khojney.core.services.attempt_store import AttemptStore

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    """Raised (and kept) when saving a finished attempt fails."""

    def __init__(self, attempt_id: str, cause: Exception) -> None:
        super().__init__(f"Saving attempt {attempt_id} failed: {cause}")
        self.attempt_id = attempt_id
        self.cause = cause


class SubmissionState(Enum):
    PENDING = auto()
    SAVED = auto()
    FAILED = auto()
    SKIPPED = auto()


class Submission:
    """Saves one result at most once; retries only when asked to."""

    def __init__(self, store: AttemptStore | None, attempt_id: str | None, result: QuizResult) -> None:
        self._store = store
        self._attempt_id = attempt_id
        self._result = result
        self._state = SubmissionState.PENDING
        self._error: SubmissionError | None = None
        self._attempts: int = 0

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def error(self) -> SubmissionError | None:
        return self._error

    @property
    def result(self) -> QuizResult:
        return self._result

    @property
    def attempts(self) -> int:
        return self._attempts

    def submit(self) -> SubmissionState:
        if self._state is not SubmissionState.PENDING:
            return self._state
        if self._store is None or self._attempt_id is None:
            logger.info("No attempt store configured; result kept locally only")
            self._state = SubmissionState.SKIPPED
            return self._state
        return self._finalize()

    def retry(self) -> SubmissionState:
        if self._state is not SubmissionState.FAILED:
            return self._state
        logger.info("Retrying save of attempt %s", self._attempt_id)
        return self._finalize()

    def _finalize(self) -> SubmissionState:
        assert self._store is not None and self._attempt_id is not None
        self._attempts += 1
        try:
            self._store.finalize_attempt(self._attempt_id, self._result)
        except Exception as exc:  # any store failure is reported, never fatal to the score
            logger.exception("Failed to save attempt %s", self._attempt_id)
            self._error = SubmissionError(self._attempt_id, exc)
            self._state = SubmissionState.FAILED
            return self._state
        self._error = None
        self._state = SubmissionState.SAVED
        logger.info("Saved attempt %s (score %d/%d)", self._attempt_id, self._result.score, self._result.total_questions)
        return self._state
