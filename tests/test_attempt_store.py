"""Tests for the in-memory attempt store."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from khojney.core.models import AttemptStatus
from khojney.core.services.attempt_store import (
    AttemptAlreadyFinalizedError,
    AttemptNotFoundError,
    InMemoryAttemptStore,
)
from khojney.core.services.scoring import build_result

from helpers import make_question


def test_create_and_finalize():
    store = InMemoryAttemptStore()
    attempt_id = store.create_attempt("guest", "science", {"mode": "practice"})
    record = store.get_attempt(attempt_id)
    assert record.status is AttemptStatus.STARTED
    assert record.settings == {"mode": "practice"}
    assert record.result is None

    result = build_result(attempt_id, [make_question("q1", "A")], {"q1": "q1:A"}, 0.0, 2.0)
    store.finalize_attempt(attempt_id, result)

    record = store.get_attempt(attempt_id)
    assert record.status is AttemptStatus.COMPLETED
    assert record.result.score == 1
    assert record.completed_at is not None


def test_finalize_twice_rejected():
    store = InMemoryAttemptStore()
    attempt_id = store.create_attempt("guest", "science", {})
    result = build_result(attempt_id, [make_question("q1")], {}, 0.0, 1.0)
    store.finalize_attempt(attempt_id, result)
    with pytest.raises(AttemptAlreadyFinalizedError):
        store.finalize_attempt(attempt_id, result)


def test_unknown_attempt():
    store = InMemoryAttemptStore()
    with pytest.raises(AttemptNotFoundError):
        store.get_attempt("nope")
    with pytest.raises(KeyError):
        store.finalize_attempt("nope", build_result(None, [make_question("q1")], {}, 0.0, 1.0))


def test_list_filters_by_user():
    store = InMemoryAttemptStore()
    store.create_attempt("alice", "science", {})
    store.create_attempt("bob", "science", {})
    store.create_attempt("alice", "history", {})
    assert len(store.list_attempts()) == 3
    assert {r.category_id for r in store.list_attempts("alice")} == {"science", "history"}


def test_concurrent_creation_gives_unique_ids():
    store = InMemoryAttemptStore()
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda i: store.create_attempt(f"user{i}", "science", {}), range(200)))
    assert len(set(ids)) == 200
    assert len(store.list_attempts()) == 200
