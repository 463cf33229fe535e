from __future__ import annotations

import json

import pytest

from conftest import payload_text, scholarship
from core.response_validator import strip_code_fences, validate_response


def test_plain_json_is_valid():
    result = validate_response(payload_text())
    assert result.isValid
    assert [s.title for s in result.data.scholarships] == ["A", "B", "C", "D", "E"]
    assert result.data.summary == "Five matching scholarships."


def test_fenced_json_is_repaired():
    raw = "```json\n" + payload_text(titles=("A",)) + "\n```"
    result = validate_response(raw)
    assert result.isValid
    assert result.data.scholarships[0].institution == "A Trust"


def test_strip_code_fences_handles_bare_fence():
    assert strip_code_fences("```\n{}\n```") == "{}"


def test_optional_sections_may_be_absent():
    raw = json.dumps({"scholarships": [], "summary": "Nothing found"})
    result = validate_response(raw)
    assert result.isValid
    assert result.data.recommendations is None
    assert result.data.additionalResources is None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "",
        "[]",
        "null",
        json.dumps({"summary": "missing scholarships"}),
        json.dumps({"scholarships": [{"title": "only a title"}], "summary": "s"}),
        json.dumps({"scholarships": [scholarship("A", requirements="one doc")], "summary": "s"}),
        json.dumps({"scholarships": [scholarship("A")], "summary": 7}),
        "[" * 5000,
    ],
)
def test_invalid_output_is_rejected_as_a_whole(raw):
    result = validate_response(raw)
    assert result.isValid is False
    assert result.data is None


def test_non_string_input_does_not_raise():
    result = validate_response(None)  # type: ignore[arg-type]
    assert result.isValid is False
