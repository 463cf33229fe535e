from __future__ import annotations

import itertools
from unittest.mock import AsyncMock

import pytest

from conftest import parse_text
from core.query_parser import parameters_from_text, parse_query
from model.search import SearchParameters
from util.errors import ParseError

FIELDS = ("caste", "religion", "state", "educationLevel")


async def test_partial_query_reports_missing_fields():
    generate = AsyncMock(return_value=parse_text(educationLevel="engineering"))

    draft = await parse_query("scholarships for engineering students", generate=generate)

    assert draft.missingFields == ["caste", "religion", "state"]
    assert draft.parameters.educationLevel == "engineering"
    generate.assert_awaited_once()
    assert "scholarships for engineering students" in generate.await_args.args[0]


async def test_complete_query_has_no_missing_fields():
    generate = AsyncMock(
        return_value=parse_text(caste="SC", religion="Hindu", state="kolkata", educationLevel="engineering")
    )
    draft = await parse_query("Hindu SC engineering students in kolkata", generate=generate)
    assert draft.is_complete
    assert draft.parameters.state == "kolkata"


@pytest.mark.parametrize(
    "present",
    [combo for n in range(len(FIELDS) + 1) for combo in itertools.combinations(FIELDS, n)],
)
async def test_missing_fields_equal_required_minus_present(present):
    generate = AsyncMock(return_value=parse_text(**{f: "x" for f in present}))
    draft = await parse_query("query", generate=generate)
    expected = [f for f in SearchParameters.required_fields() if f not in present]
    assert draft.missingFields == expected


async def test_fenced_parser_output_is_accepted():
    generate = AsyncMock(return_value="```json\n" + parse_text(caste="ST") + "\n```")
    draft = await parse_query("ST students", generate=generate)
    assert draft.parameters.caste == "ST"


@pytest.mark.parametrize("raw", ["not json", "[]", '"SC"', '{"caste": 5}'])
async def test_malformed_output_raises_parse_error(raw):
    with pytest.raises(ParseError):
        await parse_query("query", generate=AsyncMock(return_value=raw))


async def test_empty_query_is_rejected_without_model_call():
    generate = AsyncMock()
    with pytest.raises(ParseError):
        await parse_query("   ", generate=generate)
    generate.assert_not_awaited()


async def test_generation_failure_propagates():
    generate = AsyncMock(side_effect=RuntimeError("upstream down"))
    with pytest.raises(RuntimeError):
        await parse_query("query", generate=generate)


def test_extra_keys_are_ignored():
    params = parameters_from_text('{"caste": "OBC", "income": "low"}')
    assert params.caste == "OBC"
    assert not hasattr(params, "income")
