# model/scholarship.py
from typing import List
from pydantic import BaseModel


class ScholarshipResult(BaseModel):
    title: str
    institution: str
    description: str
    eligibility: str
    amount: str | None = None
    deadline: str | None = None
    applicationLink: str | None = None
    requirements: List[str] | None = None
    selectionProcess: str | None = None
    background: str | None = None


class AdditionalResource(BaseModel):
    title: str
    description: str
    link: str


class GenerationPayload(BaseModel):
    """One successful generation. Accepted or rejected as a whole."""

    scholarships: List[ScholarshipResult]
    summary: str
    recommendations: List[str] | None = None
    additionalResources: List[AdditionalResource] | None = None


class ValidationResult(BaseModel):
    isValid: bool
    data: GenerationPayload | None = None
