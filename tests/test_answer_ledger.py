"""Tests for the append-only answer ledger."""

import pytest

from khojney.core.services.answer_ledger import AnswerLedger, DuplicateAnswerError


def test_records_in_insertion_order():
    ledger = AnswerLedger()
    ledger.record("q2", "q2:A")
    ledger.record("q1", "q1:C")
    assert list(ledger) == ["q2", "q1"]
    assert ledger.as_dict() == {"q2": "q2:A", "q1": "q1:C"}
    assert ledger.size() == len(ledger) == 2
    assert "q1" in ledger
    assert ledger.get("missing") is None


def test_second_answer_for_question_rejected():
    ledger = AnswerLedger()
    ledger.record("q1", "q1:A")
    with pytest.raises(DuplicateAnswerError):
        ledger.record("q1", "q1:B")
    assert ledger.get("q1") == "q1:A"


def test_as_dict_is_a_copy():
    ledger = AnswerLedger()
    ledger.record("q1", "q1:A")
    snapshot = ledger.as_dict()
    snapshot["q2"] = "q2:A"
    assert len(ledger) == 1
