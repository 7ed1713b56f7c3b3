"""Tests for saving finished attempts."""

from khojney.core.services.scoring import build_result
from khojney.core.services.submission import Submission, SubmissionState

from helpers import FlakyAttemptStore, make_question


def make_submission(failures):
    store = FlakyAttemptStore(failures=failures)
    attempt_id = store.create_attempt("guest", "science", {})
    result = build_result(attempt_id, [make_question("q1", "A")], {"q1": "q1:A"}, 0.0, 3.0)
    return store, Submission(store, attempt_id, result)


def test_successful_submit_happens_once():
    store, submission = make_submission(failures=0)
    assert submission.submit() is SubmissionState.SAVED
    assert submission.submit() is SubmissionState.SAVED
    assert store.finalize_calls == 1
    assert submission.attempts == 1


def test_failure_is_recorded_not_raised():
    store, submission = make_submission(failures=1)
    assert submission.submit() is SubmissionState.FAILED
    assert isinstance(submission.error.cause, ConnectionError)
    assert submission.error.attempt_id == store.list_attempts()[0].attempt_id
    assert submission.result.score == 1


def test_retry_only_after_failure():
    store, submission = make_submission(failures=2)
    assert submission.retry() is SubmissionState.PENDING
    submission.submit()
    assert submission.retry() is SubmissionState.FAILED
    assert submission.retry() is SubmissionState.SAVED
    assert submission.error is None
    assert submission.retry() is SubmissionState.SAVED
    assert store.finalize_calls == 3


def test_without_store_is_skipped():
    result = build_result(None, [make_question("q1")], {}, 0.0, 1.0)
    submission = Submission(None, None, result)
    assert submission.submit() is SubmissionState.SKIPPED
    assert submission.retry() is SubmissionState.SKIPPED
