"""Append-only record of the answers locked in during an attempt."""

from __future__ import annotations

from collections.abc import Iterator


class DuplicateAnswerError(RuntimeError):
    """Raised when a question would be answered a second time."""


class AnswerLedger:
    """Insertion-ordered mapping of question id to chosen option id."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def record(self, question_id: str, option_id: str) -> None:
        if question_id in self._entries:
            raise DuplicateAnswerError(f"Question {question_id!r} has already been answered.")
        self._entries[question_id] = option_id

    def get(self, question_id: str) -> str | None:
        return self._entries.get(question_id)

    def size(self) -> int:
        return len(self._entries)

    def as_dict(self) -> dict[str, str]:
        """Return an ordered copy of the recorded answers."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
