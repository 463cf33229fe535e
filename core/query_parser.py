# core/query_parser.py
import json
import logging
from typing import Optional
from pydantic import ValidationError
from config.settings import settings
from core import anthropic_client
from core.response_validator import strip_code_fences
from model.search import ParametersDraft, SearchParameters
from util.errors import ParseError
from util.timing import timed
from util.types import GenerateFn

logger = logging.getLogger(__name__)


def _user_prompt(query: str) -> str:
    return f'Input query: "{query}"\n\nReturn the JSON object only.'


async def _default_generate(prompt: str) -> str:
    return await anthropic_client.generate(
        prompt,
        system=settings.PARSE_SYSTEM_PROMPT,
        max_tokens=settings.PARSE_MAX_TOKENS,
        temperature=settings.PARSE_TEMPERATURE,
    )


def parameters_from_text(raw: str) -> SearchParameters:
    """
    Decode model output into SearchParameters. Raises ParseError on anything
    that is not a JSON object of string-or-null fields.
    """
    try:
        obj = json.loads(strip_code_fences(raw))
    except ValueError as e:
        raise ParseError("Query parser returned malformed JSON") from e
    if not isinstance(obj, dict):
        raise ParseError("Query parser returned a non-object JSON value")
    try:
        return SearchParameters.model_validate(obj)
    except ValidationError as e:
        raise ParseError("Query parser returned invalid field values") from e


async def parse_query(
    query: str, *, generate: Optional[GenerateFn] = None
) -> ParametersDraft:
    """
    Turn free text into a ParametersDraft: parsed parameters plus the required
    fields left empty (in schema order).
    """
    text = (query or "").strip()
    if not text:
        raise ParseError("Query must not be empty")

    gen = generate or _default_generate
    with timed(logger, "parse.query", chars=len(text)):
        raw = await gen(_user_prompt(text))

    params = parameters_from_text(raw)
    draft = ParametersDraft.from_parameters(params)
    logger.info("parse.result missing=%s", ",".join(draft.missingFields) or "-")
    return draft
