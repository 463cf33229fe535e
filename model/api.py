# model/api.py
from typing import Dict, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field
from model.search import EvidenceItem, SearchParameters


class ParseQueryRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    searchType: Literal["parseQuery"]
    query: str = Field(min_length=1)


class SearchWebRequest(BaseModel):
    searchType: Literal["searchWeb"]
    params: SearchParameters


class GenerateResultsRequest(BaseModel):
    searchType: Literal["generateResults"]
    params: SearchParameters
    # None -> the stream runs the search stage itself
    searchResults: List[EvidenceItem] | None = None


class ClarifyRequest(BaseModel):
    searchType: Literal["clarify"]
    params: SearchParameters
    answers: Dict[str, str | None]


# Discriminated on `searchType` at the endpoint.
SearchRequest = Union[
    ParseQueryRequest, SearchWebRequest, GenerateResultsRequest, ClarifyRequest
]


class ClarificationQuestion(BaseModel):
    field: str
    text: str
    type: Literal["text", "select"]
    options: List[str] | None = None


class ParseQueryResponse(BaseModel):
    success: bool = True
    data: SearchParameters
    missingParams: List[str]
    questions: List[ClarificationQuestion] = Field(default_factory=list)


class SearchWebResponse(BaseModel):
    success: bool = True
    data: List[EvidenceItem]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
