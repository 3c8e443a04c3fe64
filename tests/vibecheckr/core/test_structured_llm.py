"""Tests for the call-and-validate routine."""
import json

import pytest

from helpers import FakeLogger
from vibecheckr.core.domain.exceptions import InvalidResponseError
from vibecheckr.core.domain.schemas import AuditReport
from vibecheckr.core.services import JsonExtractor, StructuredLLM


class ScriptedLLM:
    """Returns queued replies and records every call."""

    def __init__(self, *replies):
        self._replies = list(replies)
        self.calls = []

    def call(self, *, system, user, temperature=None):
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        return self._replies.pop(0)


def _structured(llm, logger=None):
    return StructuredLLM(llm=llm, logger=logger or FakeLogger(), json_extractor=JsonExtractor(), temperature=0.1)


VALID = json.dumps({"score": 70, "summary": "fine", "critical_issues": []})


def test_valid_reply_needs_one_call():
    llm = ScriptedLLM("Here you go: " + VALID)

    result = _structured(llm).request(stage="single-pass", system="SYS", user="ASK", expect=AuditReport)

    assert result["score"] == 70
    assert len(llm.calls) == 1
    assert llm.calls[0]["temperature"] == 0.1
    assert llm.calls[0]["system"] == "SYS"


def test_invalid_json_retries_exactly_once_at_zero_temperature():
    logger = FakeLogger()
    llm = ScriptedLLM("I think the score is 70", VALID)

    result = _structured(llm, logger).request(stage="single-pass", system="SYS", user="ASK", expect=AuditReport)

    assert result["summary"] == "fine"
    assert len(llm.calls) == 2
    retry = llm.calls[1]
    assert retry["temperature"] == 0.0
    assert "ASK" in retry["user"]
    assert "I think the score is 70" in retry["user"]
    assert "llm_json_retry" in logger.messages("warning")


def test_schema_mismatch_triggers_retry():
    llm = ScriptedLLM('{"summary": "no score here"}', VALID)

    result = _structured(llm).request(stage="single-pass", system="SYS", user="ASK", expect=AuditReport)

    assert result["score"] == 70
    assert len(llm.calls) == 2


def test_second_failure_raises_invalid_response():
    llm = ScriptedLLM("nope", "still nope")

    with pytest.raises(InvalidResponseError) as exc_info:
        _structured(llm).request(stage="security", system="SYS", user="ASK", expect=AuditReport)

    assert exc_info.value.stage == "security"
    assert exc_info.value.raw_text == "still nope"
    assert len(llm.calls) == 2


def test_extra_keys_are_kept():
    reply = json.dumps({"score": 90, "summary": "s", "positive_findings": ["tests"]})
    llm = ScriptedLLM(reply)

    result = _structured(llm).request(stage="single-pass", system="SYS", user="ASK", expect=AuditReport)

    assert result["positive_findings"] == ["tests"]
