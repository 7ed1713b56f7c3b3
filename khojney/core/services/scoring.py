"""Pure scoring helpers for finished attempts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from khojney.core.models import AnswerReview, Question, QuizResult


def calculate_score(questions: Sequence[Question], answers: Mapping[str, str]) -> int:
    """Count the answers that match the correct option of their question.

    Questions missing from ``answers`` (timed out) simply do not count.
    """
    return sum(1 for question in questions if answers.get(question.id) == question.correct_option_id)


def build_review(questions: Sequence[Question], answers: Mapping[str, str]) -> tuple[AnswerReview, ...]:
    rows: list[AnswerReview] = []
    for question in questions:
        selected_id = answers.get(question.id)
        selected = question.option_by_id(selected_id) if selected_id is not None else None
        correct = question.correct_option
        rows.append(
            AnswerReview(
                question_id=question.id,
                question_text=question.text,
                selected_option_id=selected_id,
                selected_option_text=selected.text if selected is not None else None,
                correct_option_id=correct.id,
                correct_option_text=correct.text,
                is_correct=selected_id == correct.id,
                explanation=question.explanation,
            )
        )
    return tuple(rows)


def build_result(
    attempt_id: str | None,
    questions: Sequence[Question],
    answers: Mapping[str, str],
    started_at: float,
    finished_at: float,
) -> QuizResult:
    """Compute the final tally handed to the attempt store."""
    return QuizResult(
        attempt_id=attempt_id,
        score=calculate_score(questions, answers),
        total_questions=len(questions),
        elapsed_seconds=max(0, round(finished_at - started_at)),
        answers=dict(answers),
        review=build_review(questions, answers),
    )
