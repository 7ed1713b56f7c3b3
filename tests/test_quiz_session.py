"""Tests for the quiz session state machine."""

from __future__ import annotations

import random

import pytest

from khojney.core.models import (
    AttemptStatus,
    EmptyQuestionSetError,
    QuestionValidationError,
    QuizPhase,
    QuizSettings,
)
from khojney.core.scheduling import ManualScheduler
from khojney.core.services.attempt_store import InMemoryAttemptStore
from khojney.core.services.quiz_session import QuizSession
from khojney.core.services.submission import SubmissionState

from helpers import FlakyAttemptStore, RecordingListener, make_question, wrong_option_id


def start_session(questions, scheduler, listener=None, store=None, **settings_overrides):
    settings = QuizSettings(**settings_overrides)
    attempt_id = None
    if store is not None:
        attempt_id = store.create_attempt("guest", "science", settings.snapshot())
    return QuizSession(
        questions,
        scheduler=scheduler,
        settings=settings,
        attempt_id=attempt_id,
        attempt_store=store,
        rng=random.Random(1),
        listener=listener,
    )


def answer_correctly(session):
    assert session.select_option(session.current_question.correct_option_id)


def test_all_correct_quiz_is_scored_and_saved(questions, scheduler, listener):
    store = InMemoryAttemptStore()
    session = start_session(questions, scheduler, listener, store)

    for _ in range(3):
        scheduler.advance(2)
        answer_correctly(session)
        assert session.phase is QuizPhase.ANSWER_LOCKED
        session.advance()

    assert session.phase is QuizPhase.COMPLETED
    assert session.result.score == 3
    assert session.result.total_questions == 3
    assert session.result.elapsed_seconds == 6
    assert session.submission_state is SubmissionState.SAVED
    record = store.get_attempt(session.attempt_id)
    assert record.result == session.result


def test_timed_out_question_counts_as_unanswered(questions, scheduler, listener):
    session = start_session(questions, scheduler, listener, auto_advance_delay_seconds=None)
    first_question = session.current_question

    scheduler.advance(15)

    assert session.phase is QuizPhase.ANSWER_LOCKED
    assert first_question.id not in session.answers
    assert ("answer_locked", (first_question.id, None)) in listener.events
    assert session.remaining_seconds == 0

    session.advance()
    answer_correctly(session)
    session.advance()
    session.select_option(wrong_option_id(session.current_question))
    session.advance()

    result = session.result
    assert result.score == 1
    assert result.unanswered_count == 1
    assert result.answered_count == 2
    assert [row.was_answered for row in result.review] == [False, True, True]


def test_countdown_ticks_reach_listener(questions, scheduler, listener):
    start_session(questions, scheduler, listener, time_per_question_seconds=3, auto_advance_delay_seconds=None)
    scheduler.advance(3)
    ticks = [payload for name, payload in listener.events if name == "time_ticked"]
    assert ticks == [2, 1, 0]


def test_selection_before_expiry_wins(questions, scheduler, listener):
    session = start_session(questions, scheduler, listener)
    scheduler.advance(14.9)
    answer_correctly(session)

    scheduler.advance(5)

    assert session.phase is QuizPhase.ANSWER_LOCKED
    assert session.current_index == 0
    locks = [payload for name, payload in listener.events if name == "answer_locked"]
    assert len(locks) == 1
    assert scheduler.pending_count() == 0


def test_selection_after_expiry_is_ignored(questions, scheduler):
    session = start_session(questions, scheduler, auto_advance_delay_seconds=None)
    scheduler.advance(15)

    assert session.select_option(session.current_question.correct_option_id) is False
    assert len(session.answers) == 0


def test_second_selection_is_ignored(questions, scheduler):
    session = start_session(questions, scheduler)
    question = session.current_question
    answer_correctly(session)
    assert session.select_option(wrong_option_id(question)) is False
    assert session.answers.get(question.id) == question.correct_option_id


def test_advance_requires_locked_answer(questions, scheduler):
    session = start_session(questions, scheduler)
    assert session.advance() is False
    assert session.current_index == 0
    assert session.phase is QuizPhase.AWAITING_ANSWER


def test_repeated_advance_after_last_question_submits_once(scheduler, listener):
    store = FlakyAttemptStore(failures=0)
    session = start_session([make_question("only")], scheduler, listener, store)
    answer_correctly(session)

    assert session.advance() is True
    assert session.advance() is False
    assert session.advance() is False

    assert store.finalize_calls == 1
    assert listener.names().count("quiz_completed") == 1


def test_score_shown_before_save_result(scheduler, listener):
    store = InMemoryAttemptStore()
    session = start_session([make_question("only")], scheduler, listener, store)
    answer_correctly(session)
    session.advance()
    names = listener.names()
    assert names.index("quiz_completed") < names.index("submission_saved")


def test_failed_save_keeps_score_and_allows_retry(scheduler, listener):
    store = FlakyAttemptStore(failures=1)
    session = start_session([make_question("only")], scheduler, listener, store)
    answer_correctly(session)
    session.advance()

    assert session.result.score == 1
    assert session.submission_state is SubmissionState.FAILED
    assert "store unavailable" in str(session.submission_error)
    assert store.finalize_calls == 1

    scheduler.advance(60)
    assert store.finalize_calls == 1

    assert session.retry_submission() is True
    assert session.submission_state is SubmissionState.SAVED
    assert store.finalize_calls == 2
    assert session.retry_submission() is False
    assert listener.names()[-2:] == ["submission_failed", "submission_saved"]


def test_without_store_result_is_local_only(questions, scheduler):
    session = start_session(questions, scheduler, auto_advance_delay_seconds=None)
    for _ in range(3):
        answer_correctly(session)
        session.advance()
    assert session.result.attempt_id is None
    assert session.submission_state is SubmissionState.SKIPPED


def test_timeout_auto_advances_after_delay(questions, scheduler, listener):
    session = start_session(questions, scheduler, listener, auto_advance_delay_seconds=1.5)
    scheduler.advance(15)
    assert session.current_index == 0
    scheduler.advance(1.5)
    assert session.current_index == 1
    assert session.phase is QuizPhase.AWAITING_ANSWER
    assert session.remaining_seconds == 15


def test_manual_advance_cancels_auto_advance(questions, scheduler):
    session = start_session(questions, scheduler, auto_advance_delay_seconds=1.5)
    scheduler.advance(15)
    session.advance()
    answer_correctly(session)
    scheduler.advance(1.5)
    assert session.current_index == 1
    assert session.phase is QuizPhase.ANSWER_LOCKED


def test_timeouts_alone_finish_the_quiz(questions, scheduler):
    session = start_session(questions, scheduler, auto_advance_delay_seconds=0)
    scheduler.advance(60)
    assert session.phase is QuizPhase.COMPLETED
    assert session.result.score == 0
    assert session.result.unanswered_count == 3


def test_each_question_gets_fresh_budget(questions, scheduler):
    session = start_session(questions, scheduler, time_per_question_seconds=10)
    scheduler.advance(9)
    answer_correctly(session)
    session.advance()
    assert session.remaining_seconds == 10
    scheduler.advance(9)
    assert session.phase is QuizPhase.AWAITING_ANSWER
    scheduler.advance(1)
    assert session.phase is QuizPhase.ANSWER_LOCKED


def test_positional_selection_uses_displayed_order(scheduler):
    question = make_question("q1", "C", letters="ABCDEF")
    session = start_session([question], scheduler)
    displayed = session.current_options
    correct_position = next(i for i, option in enumerate(displayed, start=1) if option.is_correct)

    assert session.select_option_at(0) is False
    assert session.select_option_at(len(displayed) + 1) is False
    assert session.select_option_at(correct_position) is True
    assert session.selected_option_id == question.correct_option_id


def test_option_from_other_question_rejected(questions, scheduler):
    session = start_session(questions, scheduler)
    foreign = next(q for q in questions if q.id != session.current_question.id)
    with pytest.raises(ValueError):
        session.select_option(foreign.correct_option_id)
    assert session.phase is QuizPhase.AWAITING_ANSWER


def test_order_is_a_permutation_and_seed_reproducible(questions):
    def order(seed):
        session = QuizSession(
            questions,
            scheduler=ManualScheduler(),
            settings=QuizSettings(shuffle_seed=seed),
        )
        return [q.id for q in session.question_order], [o.id for o in session.current_options]

    first = order(5)
    assert first == order(5)
    assert sorted(first[0]) == ["q1", "q2", "q3"]


def test_answered_questions_are_a_prefix_of_order(questions, scheduler):
    session = start_session(questions, scheduler, auto_advance_delay_seconds=None)
    answer_correctly(session)
    session.advance()
    scheduler.advance(15)
    session.advance()
    answered = set(session.answers)
    seen = {q.id for q in session.question_order[: session.current_index]}
    assert answered <= seen
    assert session.answers.size() <= session.current_index


def test_abandon_stops_timers_and_inputs(questions, scheduler, listener):
    store = InMemoryAttemptStore()
    session = start_session(questions, scheduler, listener, store)
    scheduler.advance(3)
    session.abandon()
    events_before = len(listener.events)

    scheduler.advance(100)

    assert session.is_abandoned
    assert len(listener.events) == events_before
    assert scheduler.pending_count() == 0
    assert session.select_option(session.current_question.correct_option_id) is False
    assert session.advance() is False
    assert session.result is None
    assert store.list_attempts()[0].result is None


def test_empty_question_list_rejected(scheduler):
    with pytest.raises(EmptyQuestionSetError):
        QuizSession([], scheduler=scheduler)


def test_duplicate_question_ids_rejected(scheduler):
    with pytest.raises(QuestionValidationError):
        QuizSession([make_question("q1"), make_question("q1")], scheduler=scheduler)


def test_single_question_answered_at_three_seconds(scheduler):
    session = start_session([make_question("only", "A")], scheduler)
    scheduler.advance(3)
    answer_correctly(session)
    session.advance()
    assert session.phase is QuizPhase.COMPLETED
    assert session.result.score == 1
    assert session.result.elapsed_seconds == 3


def test_answer_count_tracks_index_when_nothing_times_out(questions, scheduler):
    session = start_session(questions, scheduler)
    for _ in range(3):
        assert session.answers.size() == session.current_index
        answer_correctly(session)
        session.advance()
    assert session.answers.size() == session.total_questions
    assert session.result.score <= session.answers.size()


class BrokenResultsListener(RecordingListener):
    def quiz_completed(self, session, result):
        super().quiz_completed(session, result)
        raise RuntimeError("display failed")


def test_result_is_saved_even_if_completion_listener_raises(scheduler):
    store = InMemoryAttemptStore()
    listener = BrokenResultsListener()
    session = start_session([make_question("only", "A")], scheduler, listener, store)
    answer_correctly(session)

    with pytest.raises(RuntimeError, match="display failed"):
        session.advance()

    assert session.phase is QuizPhase.COMPLETED
    assert session.submission_state is SubmissionState.SAVED
    assert store.get_attempt(session.attempt_id).status is AttemptStatus.COMPLETED
    assert listener.names()[-2:] == ["quiz_completed", "submission_saved"]


def test_failed_save_after_listener_error_can_be_retried(scheduler):
    store = FlakyAttemptStore(failures=1)
    session = start_session([make_question("only", "A")], scheduler, BrokenResultsListener(), store)
    answer_correctly(session)

    with pytest.raises(RuntimeError):
        session.advance()

    assert session.submission_state is SubmissionState.FAILED
    assert session.retry_submission() is True
    assert store.finalize_calls == 2
    assert store.get_attempt(session.attempt_id).result.score == 1


def test_expiry_first_on_the_same_tick_ignores_selection(scheduler, listener):
    session = start_session([make_question("a", "A"), make_question("b", "B")], scheduler, listener)
    first = session.current_question
    outcomes = []
    scheduler.advance(14.5)
    # Due at t=15 together with the final tick, but queued after it.
    scheduler.call_later(0.5, lambda: outcomes.append(session.select_option(first.correct_option_id)))

    scheduler.advance(0.5)

    locks = [payload for name, payload in listener.events if name == "answer_locked"]
    assert locks == [(first.id, None)]
    assert outcomes == [False]
    assert len(session.answers) == 0
    assert session.phase is QuizPhase.ANSWER_LOCKED
    assert session.current_index == 0


def test_selection_first_on_the_same_tick_cancels_expiry(scheduler, listener):
    session = start_session([make_question("a", "A")], scheduler, listener, auto_advance_delay_seconds=None)
    first = session.current_question
    scheduler.advance(13.5)
    # Due at t=15 together with the final tick, but queued before it.
    scheduler.call_later(1.5, lambda: session.select_option(first.correct_option_id))

    scheduler.advance(1.5)

    locks = [payload for name, payload in listener.events if name == "answer_locked"]
    assert locks == [(first.id, first.correct_option_id)]
    assert session.answers.as_dict() == {first.id: first.correct_option_id}
    assert session.remaining_seconds == 1
    assert scheduler.pending_count() == 0

def test_middle_question_timeout_leaves_two_answers(scheduler):
    questions = [make_question("q1", "A"), make_question("q2", "B"), make_question("q3", "C")]
    session = start_session(questions, scheduler, auto_advance_delay_seconds=None)

    answer_correctly(session)
    session.advance()
    timed_out = session.current_question
    scheduler.advance(15)
    assert session.phase is QuizPhase.ANSWER_LOCKED
    session.advance()
    answer_correctly(session)
    session.advance()

    assert session.phase is QuizPhase.COMPLETED
    assert len(session.answers) == 2
    assert timed_out.id not in session.answers
    assert session.result.score == 2
    assert session.result.score <= len(session.answers) <= session.total_questions


def test_nothing_changes_after_completion(scheduler):
    session = start_session([make_question("only", "A")], scheduler)
    scheduler.advance(4)
    answer_correctly(session)
    session.advance()
    remaining = session.remaining_seconds
    answers = session.answers.as_dict()
    result = session.result

    scheduler.advance(100)

    assert session.remaining_seconds == remaining == 11
    assert session.select_option_at(1) is False
    assert session.select_option(session.current_question.correct_option_id) is False
    assert session.advance() is False
    assert session.answers.as_dict() == answers
    assert session.result is result
    assert session.phase is QuizPhase.COMPLETED
