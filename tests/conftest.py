"""Shared builders for the quiz tests."""

from __future__ import annotations

import pytest

from khojney.core.models import Category, Question
from khojney.core.question_bank import QuestionBank
from khojney.core.scheduling import ManualScheduler

from helpers import RecordingListener, make_question


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def questions() -> list[Question]:
    return [make_question("q1", "A"), make_question("q2", "B"), make_question("q3", "C")]


@pytest.fixture
def question_bank() -> QuestionBank:
    return QuestionBank(
        [
            Category(
                slug="science",
                name="Science",
                questions=(
                    make_question("s1", "A", difficulty="easy"),
                    make_question("s2", "B", difficulty="easy"),
                    make_question("s3", "C", difficulty="hard"),
                    make_question("s4", "D", difficulty="medium"),
                ),
                featured=True,
            ),
            Category(slug="history", name="History", questions=(make_question("h1", "A"),)),
            Category(slug="art", name="Art", questions=(make_question("a1", "B"),)),
        ]
    )
