# model/search.py
from typing import Any, Dict, List, Mapping, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
from util.enums import StreamState
from util.errors import ParseError

# Tag on a field's schema marking it as part of the completeness check.
REQUIRED_TAG = "requiredForSearch"


def _required(description: str) -> Any:
    return Field(
        default="", description=description, json_schema_extra={REQUIRED_TAG: True}
    )


class SearchParameters(BaseModel):
    """
    Structured background used to drive evidence search and generation.

    The REQUIRED set is read from the field tags, so completeness and the
    missing-field list are derived from this one declaration.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    caste: str = _required("Caste category, e.g. SC/ST/OBC/General")
    religion: str = _required("Religion")
    state: str = _required("State or city")
    educationLevel: str = _required("Education level or course")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_if_missing(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @classmethod
    def required_fields(cls) -> Tuple[str, ...]:
        return tuple(
            name
            for name, info in cls.model_fields.items()
            if isinstance(info.json_schema_extra, dict)
            and info.json_schema_extra.get(REQUIRED_TAG)
        )

    def missing_fields(self) -> List[str]:
        return [f for f in self.required_fields() if not getattr(self, f)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def search_query(self) -> str:
        # Field order affects search relevance ranking; keep it fixed.
        return (
            f"{self.caste} {self.religion} scholarships in {self.state} "
            f"for {self.educationLevel}"
        )


class EvidenceItem(BaseModel):
    title: str = Field(min_length=1)
    link: str = Field(min_length=1)
    snippet: str | None = None


class ParametersDraft(BaseModel):
    """
    Parser output that may still be pending clarification.
    Merging answers yields a complete SearchParameters or raises ParseError;
    there is no second clarification round.
    """

    model_config = ConfigDict(frozen=True)

    parameters: SearchParameters
    missingFields: List[str] = Field(default_factory=list)

    @classmethod
    def from_parameters(cls, parameters: SearchParameters) -> "ParametersDraft":
        return cls(parameters=parameters, missingFields=parameters.missing_fields())

    @property
    def is_complete(self) -> bool:
        return not self.missingFields

    @property
    def next_state(self) -> StreamState:
        """State the pipeline leaves the parse stage for."""
        if self.is_complete:
            return StreamState.SEARCHING
        return StreamState.CLARIFICATION_PENDING

    def merge(self, answers: Mapping[str, Any]) -> SearchParameters:
        known = set(SearchParameters.model_fields)
        merged: Dict[str, Any] = self.parameters.model_dump()
        for field, answer in answers.items():
            if field not in known:
                continue
            merged[field] = "" if answer is None else str(answer)
        params = SearchParameters.model_validate(merged)
        still_missing = params.missing_fields()
        if still_missing:
            raise ParseError(
                "Clarification left required fields empty: " + ", ".join(still_missing)
            )
        return params
