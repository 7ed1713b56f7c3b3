"""Storage for quiz attempts shared by the Qt client and the results server."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Any, Protocol
from uuid import uuid4

from khojney.core.models import AttemptRecord, AttemptStatus, QuizResult


class AttemptNotFoundError(KeyError):
    """Raised when an attempt id is unknown to the store."""


class AttemptAlreadyFinalizedError(RuntimeError):
    """Raised when an attempt is finalized a second time."""


class AttemptStore(Protocol):
    """Operations the quiz flow needs from attempt persistence."""

    def create_attempt(self, user_id: str, category_id: str, mode_metadata: dict[str, Any]) -> str: ...

    def finalize_attempt(self, attempt_id: str, result: QuizResult) -> None: ...

    def get_attempt(self, attempt_id: str) -> AttemptRecord: ...

    def list_attempts(self, user_id: str | None = None) -> list[AttemptRecord]: ...


class InMemoryAttemptStore:
    """Thread-safe in-process attempt store."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._attempts: dict[str, AttemptRecord] = {}

    def create_attempt(self, user_id: str, category_id: str, mode_metadata: dict[str, Any]) -> str:
        attempt_id = uuid4().hex
        record = AttemptRecord(
            attempt_id=attempt_id,
            user_id=user_id,
            category_id=category_id,
            settings=dict(mode_metadata),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._attempts[attempt_id] = record
        return attempt_id

    def finalize_attempt(self, attempt_id: str, result: QuizResult) -> None:
        with self._lock:
            record = self._require(attempt_id)
            if record.status is AttemptStatus.COMPLETED:
                raise AttemptAlreadyFinalizedError(f"Attempt {attempt_id} is already completed.")
            record.result = result
            record.status = AttemptStatus.COMPLETED
            record.completed_at = datetime.now(timezone.utc)

    def get_attempt(self, attempt_id: str) -> AttemptRecord:
        with self._lock:
            return self._require(attempt_id)

    def list_attempts(self, user_id: str | None = None) -> list[AttemptRecord]:
        with self._lock:
            records = [r for r in self._attempts.values() if user_id is None or r.user_id == user_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def _require(self, attempt_id: str) -> AttemptRecord:
        record = self._attempts.get(attempt_id)
        if record is None:
            raise AttemptNotFoundError(attempt_id)
        return record
