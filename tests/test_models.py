from __future__ import annotations

import pytest
from pydantic import ValidationError

from model.search import EvidenceItem, ParametersDraft, SearchParameters
from util.errors import ParseError


def test_required_fields_come_from_schema_tags():
    assert SearchParameters.required_fields() == ("caste", "religion", "state", "educationLevel")


def test_missing_fields_follow_schema_order():
    params = SearchParameters(educationLevel="engineering", state="  ")
    assert params.missing_fields() == ["caste", "religion", "state"]
    assert not params.is_complete()


def test_null_values_are_treated_as_empty():
    params = SearchParameters.model_validate({"caste": None, "religion": "Hindu"})
    assert params.caste == ""
    assert params.religion == "Hindu"


def test_parameters_are_immutable(complete_params):
    with pytest.raises(ValidationError):
        complete_params.caste = "ST"


def test_search_query_field_order_is_fixed(complete_params):
    assert complete_params.search_query() == "SC Hindu scholarships in Karnataka for Engineering"


def test_clarification_merge_keeps_parsed_fields():
    draft = ParametersDraft.from_parameters(SearchParameters(educationLevel="engineering"))
    assert draft.missingFields == ["caste", "religion", "state"]

    merged = draft.merge({"caste": "SC", "religion": "Hindu", "state": "Karnataka"})

    assert merged.is_complete()
    assert merged.educationLevel == "engineering"
    assert merged.caste == "SC"


def test_clarification_answers_override_parsed_values():
    draft = ParametersDraft.from_parameters(
        SearchParameters(caste="OBC", religion="Hindu", state="Goa")
    )
    merged = draft.merge({"caste": "SC", "educationLevel": "PhD", "income": "Below 1 Lakh"})
    assert merged.caste == "SC"
    assert merged.state == "Goa"
    assert merged.educationLevel == "PhD"


def test_incomplete_clarification_fails_fast():
    draft = ParametersDraft.from_parameters(SearchParameters(educationLevel="engineering"))
    with pytest.raises(ParseError, match="state"):
        draft.merge({"caste": "SC", "religion": "Hindu", "state": ""})


def test_evidence_item_requires_title_and_link():
    with pytest.raises(ValidationError):
        EvidenceItem(title="", link="https://a.example")
    with pytest.raises(ValidationError):
        EvidenceItem(title="t", link="")
